"""
Payment Service
Resolves enabled providers and drives Stripe intents for the booking flow.
"""
from typing import Dict, Any, Optional, List
import logging

from ..storage import DatabaseStorage
from ..models import BookingStatus, PaymentProvider, PaymentStatus
from ..currency import to_minor_units
from ..integrations.stripe_gateway import StripeGateway

logger = logging.getLogger(__name__)

PROVIDER_NAMES = {
    PaymentProvider.STRIPE: "Credit / Debit Card",
    PaymentProvider.PAYPAL: "PayPal",
    PaymentProvider.BANK_TRANSFER: "Bank Transfer",
}

BANK_DETAIL_KEYS = (
    "bankName",
    "accountHolderName",
    "accountNumber",
    "routingNumber",
    "swiftCode",
    "bankAddress",
    "instructions",
)


def mask_secret(value: Optional[str]) -> Optional[str]:
    """Keep the last four characters of a credential for display."""
    if not value:
        return None
    return f"••••{value[-4:]}" if len(value) > 4 else "••••"


class PaymentService:
    """Payment provider resolution and Stripe intent handling."""

    def __init__(self, storage: DatabaseStorage):
        self.storage = storage

    async def get_gateway(self) -> StripeGateway:
        # Stored credentials take precedence over the environment
        setting = await self.storage.get_payment_setting_by_provider(PaymentProvider.STRIPE) or {}
        return StripeGateway(
            secret_key=setting.get("secretKey") or None,
            webhook_secret=setting.get("webhookSecret") or None,
        )

    async def get_payment_options(self) -> List[Dict[str, Any]]:
        """Enabled providers, in the order the booking flow offers them."""
        settings = {s["provider"]: s for s in await self.storage.get_payment_settings()}
        options = []

        for provider in PaymentProvider:
            setting = settings.get(provider.value)
            if provider == PaymentProvider.STRIPE:
                gateway = await self.get_gateway()
                enabled = setting["enabled"] if setting else bool(gateway.secret_key)
                if enabled and not gateway.configured:
                    logger.warning("⚠️ Stripe enabled without a secret key - hiding card payments")
                    enabled = False
            else:
                enabled = bool(setting and setting["enabled"])

            if not enabled:
                continue

            option = {"provider": provider.value, "name": PROVIDER_NAMES[provider]}
            if provider == PaymentProvider.BANK_TRANSFER:
                config = setting.get("additionalConfig") or {}
                option["bankDetails"] = {key: config.get(key) for key in BANK_DETAIL_KEYS}
            options.append(option)

        return options

    async def is_enabled(self, provider: PaymentProvider) -> bool:
        options = await self.get_payment_options()
        return any(option["provider"] == provider.value for option in options)

    async def create_payment_intent(
        self,
        amount: str,
        currency: str = "usd",
        metadata: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        """
        Create a Stripe intent for a display amount such as "$3,200".

        Raises ValueError when card payments are disabled or the amount
        has no positive numeric value.
        """
        if not await self.is_enabled(PaymentProvider.STRIPE):
            raise ValueError("Card payments are not enabled")

        amount_minor = to_minor_units(amount, currency)
        gateway = await self.get_gateway()
        intent = await gateway.create_payment_intent(amount_minor, currency, metadata)

        return {
            "clientSecret": intent["client_secret"],
            "paymentIntentId": intent["id"],
            "amount": intent["amount"],
            "currency": intent["currency"],
        }

    async def confirm_payment(self, payment_intent_id: str) -> Dict[str, Any]:
        gateway = await self.get_gateway()
        intent = await gateway.retrieve_payment_intent(payment_intent_id)
        succeeded = intent["status"] == "succeeded"
        if not succeeded:
            logger.warning(f"Payment {payment_intent_id} not completed (status={intent['status']})")
        return {
            "paymentIntentId": intent["id"],
            "status": intent["status"],
            "succeeded": succeeded,
        }

    async def handle_webhook(self, payload: bytes, signature: Optional[str]) -> Dict[str, Any]:
        """
        Reconcile bookings from a Stripe event.

        payment_intent.succeeded confirms the booking carrying the intent id;
        payment_intent.payment_failed marks it unpaid. Cancelled bookings
        and other event types are acknowledged and left unchanged.
        """
        gateway = await self.get_gateway()
        event = gateway.construct_event(payload, signature)
        event_type = event["type"]
        intent = event["data"]["object"]

        response = {"received": True, "type": event_type, "bookingId": None}
        if event_type not in ("payment_intent.succeeded", "payment_intent.payment_failed"):
            return response

        booking = await self.storage.get_booking_by_payment_intent(intent["id"])
        if not booking:
            logger.warning(f"No booking found for payment intent {intent['id']}")
            return response

        response["bookingId"] = booking["id"]
        if booking["status"] == BookingStatus.CANCELLED.value:
            # Cancelled bookings stay cancelled; refunds are handled by staff
            logger.warning(f"⚠️ Ignoring {event_type} for cancelled booking {booking['id']}")
            return response

        if event_type == "payment_intent.succeeded":
            await self.storage.update_booking(booking["id"], {
                "status": BookingStatus.CONFIRMED,
                "paymentStatus": PaymentStatus.PAID,
            })
            logger.info(f"✅ Booking {booking['id']} confirmed by Stripe webhook")
        else:
            await self.storage.update_booking(booking["id"], {"paymentStatus": PaymentStatus.UNPAID})
            logger.warning(f"❌ Payment failed for booking {booking['id']}")

        return response
