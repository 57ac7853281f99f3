import logging

import aiohttp

import config
from exceptions.notification import (
    NotificationException,
    NotificationConfigurationException,
    NotificationDeliveryException
)
from models.order import OrderDTO
from services.pricing import PricingService


class NotificationService:
    """WhatsApp messages through the MSG91 bulk outbound API."""

    @staticmethod
    def build_new_order_payload(order: OrderDTO) -> dict:
        """
        Build the MSG91 template payload announcing a new order.

        Template body variables:
            body_1: order id
            body_2: order total (display-rounded)

        One recipient entry per number in WHATSAPP_NOTIFY_NUMBERS.
        """
        components = {
            "body_1": {"type": "text", "value": str(order.id)},
            "body_2": {"type": "text", "value": PricingService.format_price(order.total_amount)},
        }
        return {
            "integrated_number": config.MSG91_INTEGRATED_NUMBER,
            "content_type": "template",
            "payload": {
                "messaging_product": "whatsapp",
                "type": "template",
                "template": {
                    "name": config.WHATSAPP_TEMPLATE_NAME,
                    "language": {"code": config.WHATSAPP_TEMPLATE_LANGUAGE, "policy": "deterministic"},
                    "to_and_components": [
                        {"to": [number], "components": components}
                        for number in config.WHATSAPP_NOTIFY_NUMBERS
                    ]
                }
            }
        }

    @staticmethod
    async def send_whatsapp(payload: dict) -> tuple[int, dict]:
        """
        Forward a payload to MSG91 with the server-side auth key.

        Returns:
            (status, response_data) of the MSG91 response

        Raises:
            NotificationConfigurationException: If MSG91_AUTH_KEY is not set
            NotificationDeliveryException: If MSG91 answers with an error status or is unreachable
        """
        auth_key = config.MSG91_AUTH_KEY
        if not auth_key:
            raise NotificationConfigurationException("MSG91_AUTH_KEY is not set")

        headers = {"Content-Type": "application/json", "authkey": auth_key}
        try:
            async with aiohttp.ClientSession() as http_session:
                async with http_session.post(config.MSG91_ENDPOINT, json=payload, headers=headers) as response:
                    try:
                        data = await response.json(content_type=None)
                    except ValueError:
                        data = {"message": await response.text()}
                    if not isinstance(data, dict):
                        data = {"data": data}
                    if response.status >= 400:
                        reason = data.get("message") or data.get("type") or "Proxy failed to execute MSG91 request."
                        raise NotificationDeliveryException(response.status, str(reason), data)
                    return response.status, data
        except aiohttp.ClientError as e:
            logging.error(f"[Notification] MSG91 unreachable: {e}")
            data = {"message": "Internal server error or network failure."}
            raise NotificationDeliveryException(500, data["message"], data)

    @staticmethod
    async def notify_new_order(order: OrderDTO) -> bool:
        """
        Announce a new order on WhatsApp.

        Never raises: a failed notification must not affect the order.

        Returns:
            True if MSG91 accepted the message
        """
        if not config.NOTIFY_NEW_ORDERS:
            logging.debug(f"[Notification] New-order notifications disabled, order {order.id} not announced")
            return False
        if not config.WHATSAPP_NOTIFY_NUMBERS:
            logging.warning(f"[Notification] WHATSAPP_NOTIFY_NUMBERS is empty, order {order.id} not announced")
            return False

        try:
            status, _ = await NotificationService.send_whatsapp(
                NotificationService.build_new_order_payload(order)
            )
            logging.info(f"[Notification] Order {order.id} announced on WhatsApp (status {status})")
            return True
        except NotificationException as e:
            logging.error(f"[Notification] Order {order.id} not announced: {e}")
        except Exception as e:
            logging.error(f"[Notification] Unexpected error announcing order {order.id}: {e}", exc_info=True)
        return False
