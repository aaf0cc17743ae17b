"""
Booking Service
Applies the payment rules that decide a new booking's status.
"""
from typing import Dict, Any
import logging

from ..storage import DatabaseStorage
from ..models import BookingStatus, PaymentMethod, PaymentStatus
from .payments import PaymentService

logger = logging.getLogger(__name__)


class BookingService:
    """Creates bookings whose status agrees with how they were paid."""

    def __init__(self, storage: DatabaseStorage):
        self.storage = storage
        self.payments = PaymentService(storage)

    async def create_booking(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Persist a booking.

        - paypal / bank_transfer: always Pending and unpaid until an admin
          or a provider callback confirms it
        - stripe: Confirmed only when the referenced intent has succeeded
          and no other booking already claims it
        - saved_card: trusted as charged when submitted Confirmed
        """
        data = dict(data)
        status = BookingStatus(data.get("status") or BookingStatus.PENDING)
        method = PaymentMethod(data["paymentMethod"]) if data.get("paymentMethod") else None

        if method in (PaymentMethod.PAYPAL, PaymentMethod.BANK_TRANSFER):
            if status == BookingStatus.CONFIRMED:
                logger.info(f"{method.value} booking for {data.get('customer')} stored as Pending")
            status = BookingStatus.PENDING
            data["paymentStatus"] = PaymentStatus.UNPAID

        elif method == PaymentMethod.STRIPE and status == BookingStatus.CONFIRMED:
            intent_id = data.get("paymentIntentId")
            if not intent_id:
                raise ValueError("Card bookings need a payment intent")

            confirmation = await self.payments.confirm_payment(intent_id)
            if not confirmation["succeeded"]:
                raise ValueError(f"Payment has not succeeded (status: {confirmation['status']})")

            existing = await self.storage.get_booking_by_payment_intent(intent_id)
            if existing:
                raise ValueError(f"Payment {intent_id} already belongs to booking {existing['id']}")
            data["paymentStatus"] = PaymentStatus.PAID

        elif method in (PaymentMethod.STRIPE, PaymentMethod.SAVED_CARD):
            if status == BookingStatus.CONFIRMED:
                data["paymentStatus"] = PaymentStatus.PAID
            elif not data.get("paymentStatus"):
                data["paymentStatus"] = PaymentStatus.UNPAID

        data["status"] = status
        booking = await self.storage.create_booking(data)
        logger.info(f"Booking {booking['id']} created ({booking['status']}, {booking.get('paymentMethod')})")
        return booking
