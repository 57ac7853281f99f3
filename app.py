import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
from db import create_db_and_tables
from processing.notification import notification_router
from utils.config_validator import validate_or_exit
from utils.error_handler import handle_unexpected_error


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown."""
    validate_or_exit(config)
    await create_db_and_tables()
    logging.info(f"[Startup] Database ready ({config.DB_NAME}), environment {config.RUNTIME_ENVIRONMENT.value}")
    if not config.NOTIFY_NEW_ORDERS:
        logging.info("[Startup] New-order WhatsApp notifications disabled")

    yield

    logging.warning('Shutting down..')


app = FastAPI(lifespan=lifespan)

# The storefront calls the WhatsApp proxy straight from the browser
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(notification_router)


@app.get("/health")
async def health_check():
    """Health check endpoint for container monitoring."""
    return {"status": "healthy"}


@app.exception_handler(Exception)
async def exception_handler(request: Request, exc: Exception):
    return JSONResponse(
        status_code=500,
        content={"type": "error", "message": handle_unexpected_error(exc)},
    )
