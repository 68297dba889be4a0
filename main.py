import logging

from fastapi import FastAPI, Depends, HTTPException, Request

from config import Settings, get_settings, settings
from exceptions import ProtocolFailure, SignatureMismatchError
from hardware_fingerprint import get_hardware_id
from models import HealthCheckResponse, WebhookAckResponse
import webhook_verification

logging.basicConfig(level=settings.LOG_LEVEL, format=settings.LOG_FORMAT)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="LicenseChain Webhook Receiver",
    description="Verifies and accepts signed callbacks from the LicenseChain service",
    version=settings.SERVICE_VERSION
)

# API Endpoints
@app.post("/webhooks/licensechain", response_model=WebhookAckResponse)
async def receive_webhook(
    request: Request,
    config: Settings = Depends(get_settings)
):
    """
    Receive a LicenseChain webhook.

    The raw body is checked against the signature header before it is
    decoded. Returns 401 for a bad signature and 400 for a malformed body.
    """
    payload = await request.body()
    signature = request.headers.get(config.WEBHOOK_SIGNATURE_HEADER)

    try:
        event = webhook_verification.load_event(payload, signature, config.webhook_secret)
    except SignatureMismatchError as e:
        logger.warning(f"Webhook rejected from {request.client.host if request.client else 'unknown'}")
        raise HTTPException(status_code=401, detail=e.message)
    except ProtocolFailure as e:
        raise HTTPException(status_code=400, detail=e.message)

    logger.info(f"Webhook received: {event.event}")
    return {"received": True, "event": event.event}

@app.get("/health", response_model=HealthCheckResponse)
async def health_check(config: Settings = Depends(get_settings)):
    """
    Health check endpoint for container orchestration.
    """
    return {
        "status": "healthy",
        "service": "licensechain-webhook-receiver",
        "version": config.SERVICE_VERSION,
        "hardwareId": get_hardware_id()
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
