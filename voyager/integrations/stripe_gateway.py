"""
Stripe integration for Voyager - card payments via PaymentIntents
Dry-run mode returns deterministic mock intents for local work and tests
"""

import os
import json
import uuid
import asyncio
import logging
from typing import Dict, Optional, Any

import stripe

logger = logging.getLogger(__name__)

MOCK_INTENT_PREFIX = "pi_mock_"


def payments_dry_run() -> bool:
    return os.getenv("PAYMENTS_DRY_RUN", "false").lower() == "true"


class StripeGateway:
    """Thin async wrapper around the Stripe SDK."""

    def __init__(self, secret_key: Optional[str] = None, webhook_secret: Optional[str] = None, dry_run: Optional[bool] = None):
        self.secret_key = secret_key or os.getenv("STRIPE_SECRET_KEY")
        self.webhook_secret = webhook_secret or os.getenv("STRIPE_WEBHOOK_SECRET")
        self.dry_run = payments_dry_run() if dry_run is None else dry_run

        if not self.secret_key and not self.dry_run:
            logger.warning("⚠️ Stripe secret key not configured")

    @property
    def configured(self) -> bool:
        return self.dry_run or bool(self.secret_key)

    def _require_key(self):
        if not self.secret_key:
            raise ValueError("Stripe is not configured")

    async def create_payment_intent(self, amount: int, currency: str, metadata: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """
        Create a PaymentIntent.

        Args:
            amount: Amount in the currency's minor unit (cents)
            currency: ISO currency code
            metadata: Free-form string metadata stored on the intent
        """
        currency = currency.lower()
        if self.dry_run:
            intent_id = f"{MOCK_INTENT_PREFIX}{uuid.uuid4().hex[:16]}"
            logger.info(f"💳 Dry run - mock intent {intent_id} for {amount} {currency}")
            return {
                "id": intent_id,
                "client_secret": f"{intent_id}_secret_mock",
                "amount": amount,
                "currency": currency,
                "status": "requires_payment_method",
                "metadata": metadata or {},
            }

        self._require_key()
        intent = await asyncio.to_thread(
            stripe.PaymentIntent.create,
            amount=amount,
            currency=currency,
            metadata=metadata or {},
            automatic_payment_methods={"enabled": True},
            api_key=self.secret_key,
        )
        logger.info(f"💳 Created Stripe intent {intent['id']} for {amount} {currency}")
        return {
            "id": intent["id"],
            "client_secret": intent["client_secret"],
            "amount": intent["amount"],
            "currency": intent["currency"],
            "status": intent["status"],
            "metadata": metadata or {},
        }

    async def retrieve_payment_intent(self, intent_id: str) -> Dict[str, Any]:
        if self.dry_run:
            # Mock intents count as paid once the client has confirmed them
            status = "succeeded" if intent_id.startswith(MOCK_INTENT_PREFIX) else "requires_payment_method"
            return {"id": intent_id, "status": status}

        self._require_key()
        intent = await asyncio.to_thread(
            stripe.PaymentIntent.retrieve, intent_id, api_key=self.secret_key
        )
        return {"id": intent["id"], "status": intent["status"]}

    def construct_event(self, payload: bytes, signature: Optional[str]):
        """
        Verify and decode a webhook payload.

        Raises stripe.SignatureVerificationError on a bad signature and
        ValueError when the payload cannot be trusted or parsed.
        """
        if self.webhook_secret:
            if not signature:
                raise ValueError("Missing Stripe-Signature header")
            return stripe.Webhook.construct_event(payload, signature, self.webhook_secret)

        if not self.dry_run:
            raise ValueError("Stripe webhook secret not configured")

        # Unsigned events are only accepted in dry-run mode
        logger.warning("⚠️ Accepting unsigned Stripe event (dry run)")
        return json.loads(payload)
