from enum import Enum


class MessageEntity(Enum):
    ADMIN = 1
    USER = 2
    COMMON = 3
