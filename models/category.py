from sqlalchemy import Integer, Column, String

from models.base import Base


# Top-level collection shown on the home page (e.g. "Necklaces", "Bangles")
class Category(Base):
    __tablename__ = 'categories'

    id = Column(Integer, primary_key=True, unique=True)
    name = Column(String, nullable=False, unique=True)
    show_number = Column(Integer, nullable=False, default=0)
