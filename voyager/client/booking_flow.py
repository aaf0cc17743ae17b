"""
Booking flow client.

Drives the booking API the same way the web booking dialog does: load the
enabled payment options, collect customer details, take payment through the
chosen provider and persist the booking. User-facing outcomes are recorded
as Notice entries instead of toasts.

    async with httpx.AsyncClient(base_url="https://voyager.example") as client:
        flow = BookingFlow(client, "Amalfi Coast Retreat", "$3,200")
        await flow.open()
        flow.enter_details("Ada Lovelace", "ada@example.com")
        booking = await flow.submit()
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class FlowState(str, Enum):
    FORM_ENTRY = "form_entry"
    PAYMENT_SELECTION = "payment_selection"
    PROVIDER_CONFIRMATION = "provider_confirmation"
    BOOKING_PERSISTED = "booking_persisted"


class FlowPaymentMethod(str, Enum):
    SAVED = "saved"
    STRIPE = "stripe"
    PAYPAL = "paypal"
    BANK_TRANSFER = "bank_transfer"


@dataclass
class Notice:
    title: str
    description: str
    variant: str = "default"


@dataclass
class SavedCard:
    id: str
    last4: str
    brand: str = "card"


# Confirms a card payment for a client secret (Stripe Elements in the browser)
CardConfirmer = Callable[[str], Awaitable[bool]]


async def _assume_confirmed(client_secret: str) -> bool:
    return True


@dataclass
class BookingFlow:
    client: httpx.AsyncClient
    item_title: str
    item_price: str
    saved_cards: List[SavedCard] = field(default_factory=list)
    card_confirmer: CardConfirmer = _assume_confirmed
    currency: str = "usd"

    state: FlowState = field(default=FlowState.FORM_ENTRY, init=False)
    payment_method: FlowPaymentMethod = field(default=FlowPaymentMethod.STRIPE, init=False)
    selected_card_id: Optional[str] = field(default=None, init=False)
    options: List[Dict[str, Any]] = field(default_factory=list, init=False)
    notices: List[Notice] = field(default_factory=list, init=False)
    customer_name: str = field(default="", init=False)
    customer_email: str = field(default="", init=False)
    travel_date: Optional[date] = field(default=None, init=False)
    client_secret: Optional[str] = field(default=None, init=False)
    payment_intent_id: Optional[str] = field(default=None, init=False)
    booking: Optional[Dict[str, Any]] = field(default=None, init=False)
    instructions: Optional[Dict[str, Any]] = field(default=None, init=False)
    _opened: bool = field(default=False, init=False, repr=False)

    # Setup

    async def open(self) -> List[Dict[str, Any]]:
        """Load the enabled payment options once and pick the default method."""
        if self._opened:
            return self.options
        self._opened = True

        try:
            response = await self.client.get("/api/payment-options")
            response.raise_for_status()
            self.options = response.json()
        except httpx.HTTPError as e:
            # The form stays usable; submit will surface the failure
            logger.warning(f"Failed to fetch payment options: {e}")
            self.options = []

        providers = self.available_providers()
        if self.saved_cards and "stripe" in providers:
            self.payment_method = FlowPaymentMethod.SAVED
            self.selected_card_id = self.saved_cards[0].id
        elif "stripe" in providers:
            self.payment_method = FlowPaymentMethod.STRIPE
        elif "paypal" in providers:
            self.payment_method = FlowPaymentMethod.PAYPAL
        elif "bank_transfer" in providers:
            self.payment_method = FlowPaymentMethod.BANK_TRANSFER
        return self.options

    def available_providers(self) -> List[str]:
        return [option["provider"] for option in self.options]

    def enter_details(self, name: str, email: str, travel_date: Optional[date] = None):
        if not name.strip() or not email.strip():
            raise ValueError("Name and email are required")
        self.customer_name = name.strip()
        self.customer_email = email.strip()
        self.travel_date = travel_date
        self.state = FlowState.PAYMENT_SELECTION

    def select_payment_method(self, method: str, card_id: Optional[str] = None):
        method = FlowPaymentMethod(method)
        providers = self.available_providers()
        provider = "stripe" if method == FlowPaymentMethod.SAVED else method.value
        if provider not in providers:
            raise ValueError(f"Payment method {method.value} is not available")

        if method == FlowPaymentMethod.SAVED:
            card_ids = [card.id for card in self.saved_cards]
            if not card_ids:
                raise ValueError("No saved cards on file")
            self.selected_card_id = card_id if card_id in card_ids else card_ids[0]

        self.payment_method = method
        # A new method invalidates any intent created for the previous one
        self.client_secret = None
        self.payment_intent_id = None

    def reset(self):
        """Back to an empty form; loaded payment options are kept."""
        self.state = FlowState.FORM_ENTRY
        self.customer_name = ""
        self.customer_email = ""
        self.travel_date = None
        self.client_secret = None
        self.payment_intent_id = None
        self.booking = None
        self.instructions = None

    # Submission

    async def submit(self) -> Optional[Dict[str, Any]]:
        """
        Pay and book with the selected method.

        Returns the stored booking, or None after recording a destructive
        notice. Failures are never retried automatically.
        """
        if self.state == FlowState.FORM_ENTRY:
            raise ValueError("Enter customer details before paying")
        if self.state == FlowState.BOOKING_PERSISTED:
            return self.booking

        if self.payment_method == FlowPaymentMethod.STRIPE:
            return await self._pay_with_stripe()
        if self.payment_method == FlowPaymentMethod.SAVED:
            return await self._pay_with_saved_card()
        return await self._book_pending()

    async def _pay_with_stripe(self) -> Optional[Dict[str, Any]]:
        if not self.client_secret:
            if not await self._create_payment_intent():
                return None

        self.state = FlowState.PROVIDER_CONFIRMATION
        if not await self.card_confirmer(self.client_secret):
            self._fail("Payment Failed", "Your card could not be charged. Please try another payment method.")
            return None

        try:
            response = await self.client.post(
                "/api/confirm-payment", json={"paymentIntentId": self.payment_intent_id}
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Payment confirmation failed for {self.payment_intent_id}: {e}")
            self._fail("Payment Failed", "Payment confirmation failed")
            return None

        booking = await self._create_booking("Confirmed", "stripe", payment_intent_id=self.payment_intent_id)
        if not booking:
            # The charge stands; support reconciles it by intent id
            self._fail(
                "Booking Failed",
                "Payment was successful but booking creation failed. Please contact support."
            )
            return None

        return self._succeed(
            booking,
            Notice(
                "Payment Successful & Booked",
                f"Your reservation for {self.item_title} has been confirmed and payment processed.",
            ),
        )

    async def _create_payment_intent(self) -> bool:
        try:
            response = await self.client.post("/api/create-payment-intent", json={
                "amount": self.item_price,
                "currency": self.currency,
                "metadata": {
                    "itemTitle": self.item_title,
                    "customerName": self.customer_name,
                    "customerEmail": self.customer_email,
                },
            })
            if response.is_error:
                detail = response.json().get("detail") if response.content else None
                raise ValueError(detail or "Failed to create payment intent")
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Payment intent creation error: {e}")
            self._fail(
                "Payment Error",
                str(e) or "Failed to initialize payment. Please use bank transfer or contact support.",
            )
            return False

        body = response.json()
        self.client_secret = body["clientSecret"]
        self.payment_intent_id = body["paymentIntentId"]
        return True

    async def _pay_with_saved_card(self) -> Optional[Dict[str, Any]]:
        card = next((c for c in self.saved_cards if c.id == self.selected_card_id), None)
        if not card:
            self._fail("Booking Failed", "Select a saved card to continue.")
            return None

        booking = await self._create_booking("Confirmed", "saved_card")
        if not booking:
            self._fail("Booking Failed", "There was an error creating your booking. Please try again.")
            return None

        return self._succeed(
            booking,
            Notice("Payment Successful & Booked", f"Paid with card ending in {card.last4}. Reservation saved."),
        )

    async def _book_pending(self) -> Optional[Dict[str, Any]]:
        method = self.payment_method.value
        booking = await self._create_booking("Pending", method)
        if not booking:
            self._fail("Booking Failed", "There was an error creating your booking. Please try again.")
            return None

        if self.payment_method == FlowPaymentMethod.BANK_TRANSFER:
            option = next((o for o in self.options if o["provider"] == method), {})
            self.instructions = option.get("bankDetails") or {}
            notice = Notice(
                "Booking Created",
                "Your booking is pending payment confirmation. "
                "Please complete the bank transfer using the details provided.",
            )
        else:
            notice = Notice(
                "Booking Created",
                "Your booking is pending PayPal payment confirmation. "
                "You will receive payment instructions via email.",
            )
        return self._succeed(booking, notice)

    async def _create_booking(self, status: str, method: str, payment_intent_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        payload = {
            "customer": self.customer_name,
            "item": self.item_title,
            "date": (self.travel_date or date.today()).isoformat(),
            "amount": self.item_price,
            "status": status,
            "paymentMethod": method,
        }
        if payment_intent_id:
            payload["paymentIntentId"] = payment_intent_id

        try:
            response = await self.client.post("/api/bookings", json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Booking creation failed for {self.item_title}: {e}")
            return None
        return response.json()

    def _succeed(self, booking: Dict[str, Any], notice: Notice) -> Dict[str, Any]:
        self.booking = booking
        self.state = FlowState.BOOKING_PERSISTED
        self.notices.append(notice)
        logger.info(f"Booking {booking['id']} persisted via {self.payment_method.value}")
        return booking

    def _fail(self, title: str, description: str):
        self.notices.append(Notice(title, description, variant="destructive"))
