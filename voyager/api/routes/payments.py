"""
Payments API: provider settings, payment options for the booking flow,
Stripe intents and the Stripe webhook.
"""
from fastapi import APIRouter, Depends, HTTPException, Header, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import logging
import os

import stripe

from ...database import get_session
from ...storage import DatabaseStorage
from ...models import PaymentProvider
from ...schemas import (
    PaymentSettingsUpdate, PaymentSettingsPublic, PaymentSettingsAdmin,
    PaymentOption, PaymentIntentRequest, PaymentIntentResponse,
    ConfirmPaymentRequest, ConfirmPaymentResponse,
)
from ...services.payments import PaymentService, mask_secret

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Payments"])


def _admin_view(setting: dict) -> dict:
    return {
        **setting,
        "secretKey": mask_secret(setting.get("secretKey")),
        "webhookSecret": mask_secret(setting.get("webhookSecret")),
    }


def _public_view(provider: PaymentProvider, setting: Optional[dict]) -> dict:
    # Stripe falls back to environment credentials when nothing is stored
    env_fallback = provider == PaymentProvider.STRIPE
    if not setting:
        return {
            "provider": provider,
            "enabled": env_fallback and bool(os.getenv("STRIPE_SECRET_KEY")),
            "publishableKey": os.getenv("STRIPE_PUBLISHABLE_KEY") if env_fallback else None,
        }
    publishable_key = setting.get("publishableKey")
    if not publishable_key and env_fallback:
        publishable_key = os.getenv("STRIPE_PUBLISHABLE_KEY")
    return {
        "provider": provider,
        "enabled": setting["enabled"],
        "publishableKey": publishable_key,
    }


@router.get("/payment-settings", response_model=List[PaymentSettingsAdmin])
async def list_payment_settings(session: AsyncSession = Depends(get_session)):
    """All provider settings with secrets masked."""
    settings = await DatabaseStorage(session).get_payment_settings()
    return [_admin_view(setting) for setting in settings]


@router.get("/payment-settings/{provider}", response_model=PaymentSettingsPublic)
async def get_payment_setting(provider: PaymentProvider, session: AsyncSession = Depends(get_session)):
    """Public view of one provider: enabled flag and publishable key only."""
    setting = await DatabaseStorage(session).get_payment_setting_by_provider(provider)
    return _public_view(provider, setting)


@router.put("/payment-settings/{provider}", response_model=PaymentSettingsAdmin)
async def update_payment_setting(
    provider: PaymentProvider,
    body: PaymentSettingsUpdate,
    session: AsyncSession = Depends(get_session)
):
    setting = await DatabaseStorage(session).update_payment_settings(provider, body.model_dump(exclude_unset=True))
    return _admin_view(setting)


@router.get("/payment-options", response_model=List[PaymentOption])
async def get_payment_options(session: AsyncSession = Depends(get_session)):
    return await PaymentService(DatabaseStorage(session)).get_payment_options()


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(body: PaymentIntentRequest, session: AsyncSession = Depends(get_session)):
    try:
        service = PaymentService(DatabaseStorage(session))
        return await service.create_payment_intent(body.amount, body.currency, body.metadata)

    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except stripe.StripeError as e:
        logger.error(f"Stripe error creating intent: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.post("/confirm-payment", response_model=ConfirmPaymentResponse)
async def confirm_payment(body: ConfirmPaymentRequest, session: AsyncSession = Depends(get_session)):
    """Check with Stripe that the intent has succeeded."""
    try:
        service = PaymentService(DatabaseStorage(session))
        result = await service.confirm_payment(body.paymentIntentId)

    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except stripe.StripeError as e:
        logger.error(f"Stripe error confirming {body.paymentIntentId}: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    if not result["succeeded"]:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Payment has not succeeded (status: {result['status']})"
        )
    return result


@router.post("/webhooks/stripe")
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="Stripe-Signature"),
    session: AsyncSession = Depends(get_session)
):
    payload = await request.body()
    try:
        return await PaymentService(DatabaseStorage(session)).handle_webhook(payload, stripe_signature)

    except stripe.SignatureVerificationError:
        logger.warning("Rejected Stripe webhook with invalid signature")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid Stripe signature")
    except (ValueError, KeyError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid webhook payload: {e}")
