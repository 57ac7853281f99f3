import logging

from fastapi import APIRouter, Request, HTTPException, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from db import get_db_session
from exceptions.notification import NotificationConfigurationException, NotificationDeliveryException
from repositories.order import OrderRepository
from services.notification import NotificationService

notification_router = APIRouter(prefix="/notifications", tags=["notifications"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class OrderCreatedEvent(BaseModel):
    order_id: int


@notification_router.options("/whatsapp")
async def whatsapp_preflight():
    return Response(status_code=204, headers=CORS_HEADERS)


@notification_router.post("/whatsapp")
async def whatsapp_proxy(request: Request):
    """
    Forward a WhatsApp payload from the storefront to MSG91.

    The MSG91 auth key never leaves the server: it is injected here.
    """
    try:
        payload = await request.json()
    except ValueError:
        return JSONResponse(
            status_code=400,
            content={"type": "error", "message": "Request body must be JSON."},
            headers=CORS_HEADERS
        )

    try:
        status, data = await NotificationService.send_whatsapp(payload)
    except NotificationConfigurationException as e:
        logging.error(f"[Notification] Proxy rejected: {e}")
        return JSONResponse(
            status_code=500,
            content={"type": "error", "message": "Server configuration error: Auth Key missing."},
            headers=CORS_HEADERS
        )
    except NotificationDeliveryException as e:
        logging.error(f"[Notification] Error calling MSG91 API: {e}")
        return JSONResponse(
            status_code=e.status,
            content={"type": "error", "message": e.reason, "details": e.response_data},
            headers=CORS_HEADERS
        )

    return JSONResponse(status_code=status, content=data, headers=CORS_HEADERS)


@notification_router.post("/order-created")
async def order_created(event: OrderCreatedEvent):
    """
    Hook fired after an order is stored.

    Always answers 200 once the order is found: a failed notification is
    logged, never reported back to the order sink.
    """
    async with get_db_session() as session:
        order = await OrderRepository.get_by_id(event.order_id, session)
    if order is None:
        logging.warning(f"[Notification] Order-created event for unknown order {event.order_id}")
        raise HTTPException(status_code=404, detail="Order not found")

    notified = await NotificationService.notify_new_order(order)
    return {"order_id": order.id, "notified": notified}
