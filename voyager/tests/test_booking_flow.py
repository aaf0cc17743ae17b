"""
Booking flow client driven against the ASGI app.
"""
import datetime

import pytest

from voyager.client.booking_flow import BookingFlow, FlowState, FlowPaymentMethod, SavedCard


async def enable_providers(client, *providers):
    for provider in providers:
        body = {"enabled": True}
        if provider == "stripe":
            body["secretKey"] = "sk_test_flow0001"
        if provider == "bank_transfer":
            body["additionalConfig"] = {"bankName": "Banque de Luxe", "swiftCode": "BDLXFRPP"}
        await client.put(f"/api/payment-settings/{provider}", json=body)


async def declined(client_secret):
    return False


class TestBookingFlowSetup:
    """Loading options and moving through the form."""

    @pytest.mark.asyncio
    async def test_default_method_prefers_saved_card(self, client):
        await enable_providers(client, "stripe", "paypal")
        flow = BookingFlow(client, "Amalfi Coast Retreat", "$3,200", saved_cards=[SavedCard("card_1", "4242")])

        await flow.open()

        assert flow.available_providers() == ["stripe", "paypal"]
        assert flow.payment_method == FlowPaymentMethod.SAVED
        assert flow.selected_card_id == "card_1"

    @pytest.mark.asyncio
    async def test_default_method_falls_back_to_offline(self, client):
        await enable_providers(client, "bank_transfer")
        flow = BookingFlow(client, "Amalfi Coast Retreat", "$3,200")

        await flow.open()

        assert flow.payment_method == FlowPaymentMethod.BANK_TRANSFER

    @pytest.mark.asyncio
    async def test_options_fetched_once(self, client):
        flow = BookingFlow(client, "Amalfi Coast Retreat", "$3,200")
        await flow.open()
        await enable_providers(client, "paypal")

        assert await flow.open() == []

    @pytest.mark.asyncio
    async def test_details_required_before_payment(self, client):
        flow = BookingFlow(client, "Amalfi Coast Retreat", "$3,200")
        await flow.open()

        with pytest.raises(ValueError):
            await flow.submit()
        with pytest.raises(ValueError):
            flow.enter_details("  ", "ada@example.com")

        flow.enter_details("Ada Lovelace", "ada@example.com")
        assert flow.state == FlowState.PAYMENT_SELECTION

    @pytest.mark.asyncio
    async def test_unavailable_method_rejected(self, client):
        await enable_providers(client, "paypal")
        flow = BookingFlow(client, "Amalfi Coast Retreat", "$3,200")
        await flow.open()

        with pytest.raises(ValueError):
            flow.select_payment_method("stripe")
        with pytest.raises(ValueError):
            flow.select_payment_method("crypto")

    @pytest.mark.asyncio
    async def test_reset_keeps_options(self, client):
        await enable_providers(client, "paypal")
        flow = BookingFlow(client, "Amalfi Coast Retreat", "$3,200")
        await flow.open()
        flow.enter_details("Ada Lovelace", "ada@example.com")

        flow.reset()

        assert flow.state == FlowState.FORM_ENTRY
        assert flow.customer_name == ""
        assert flow.available_providers() == ["paypal"]


class TestBookingFlowPayments:
    """Submitting with each payment method."""

    @pytest.mark.asyncio
    async def test_card_payment_confirms_booking(self, client):
        await enable_providers(client, "stripe")
        flow = BookingFlow(client, "Amalfi Coast Retreat", "$3,200")
        await flow.open()
        flow.enter_details("Ada Lovelace", "ada@example.com", datetime.date(2026, 6, 1))

        booking = await flow.submit()

        assert flow.state == FlowState.BOOKING_PERSISTED
        assert booking["status"] == "Confirmed"
        assert booking["paymentStatus"] == "paid"
        assert booking["paymentIntentId"] == flow.payment_intent_id
        assert booking["date"] == "2026-06-01"
        assert flow.notices[-1].title == "Payment Successful & Booked"

        # A persisted flow does not book twice
        assert await flow.submit() == booking
        assert len((await client.get("/api/bookings")).json()) == 1

    @pytest.mark.asyncio
    async def test_declined_card(self, client):
        await enable_providers(client, "stripe")
        flow = BookingFlow(client, "Amalfi Coast Retreat", "$3,200", card_confirmer=declined)
        await flow.open()
        flow.enter_details("Ada Lovelace", "ada@example.com")

        assert await flow.submit() is None

        assert flow.state == FlowState.PROVIDER_CONFIRMATION
        assert flow.notices[-1].title == "Payment Failed"
        assert flow.notices[-1].variant == "destructive"
        assert (await client.get("/api/bookings")).json() == []

    @pytest.mark.asyncio
    async def test_invalid_price_reports_payment_error(self, client):
        await enable_providers(client, "stripe")
        flow = BookingFlow(client, "Private Island", "On request")
        await flow.open()
        flow.enter_details("Ada Lovelace", "ada@example.com")

        assert await flow.submit() is None

        assert flow.notices[-1].title == "Payment Error"
        assert flow.client_secret is None

    @pytest.mark.asyncio
    async def test_saved_card(self, client):
        await enable_providers(client, "stripe")
        cards = [SavedCard("card_1", "4242"), SavedCard("card_2", "0005", brand="amex")]
        flow = BookingFlow(client, "Amalfi Coast Retreat", "$3,200", saved_cards=cards)
        await flow.open()
        flow.enter_details("Ada Lovelace", "ada@example.com")
        flow.select_payment_method("saved", card_id="card_2")

        booking = await flow.submit()

        assert booking["paymentMethod"] == "saved_card"
        assert booking["status"] == "Confirmed"
        assert "0005" in flow.notices[-1].description

    @pytest.mark.asyncio
    async def test_paypal_booking_is_pending(self, client):
        await enable_providers(client, "paypal")
        flow = BookingFlow(client, "Amalfi Coast Retreat", "$3,200")
        await flow.open()
        flow.enter_details("Ada Lovelace", "ada@example.com")

        booking = await flow.submit()

        assert booking["status"] == "Pending"
        assert booking["paymentMethod"] == "paypal"
        assert flow.notices[-1].title == "Booking Created"
        assert flow.instructions is None

    @pytest.mark.asyncio
    async def test_bank_transfer_shows_instructions(self, client):
        await enable_providers(client, "bank_transfer")
        flow = BookingFlow(client, "Amalfi Coast Retreat", "$3,200")
        await flow.open()
        flow.enter_details("Ada Lovelace", "ada@example.com")

        booking = await flow.submit()

        assert booking["status"] == "Pending"
        assert booking["paymentStatus"] == "unpaid"
        assert flow.instructions["bankName"] == "Banque de Luxe"
        assert flow.instructions["swiftCode"] == "BDLXFRPP"

    @pytest.mark.asyncio
    async def test_paid_but_booking_failed(self, client):
        await enable_providers(client, "stripe")
        flow = BookingFlow(client, "Amalfi Coast Retreat", "$3,200")
        await flow.open()
        flow.enter_details("Ada Lovelace", "ada@example.com")

        # The intent is already claimed by another booking
        async def claim_intent(client_secret):
            await client.post("/api/bookings", json={
                "customer": "Someone Else",
                "item": "Amalfi Coast Retreat",
                "date": "2026-06-01",
                "amount": "$3,200",
                "status": "Confirmed",
                "paymentMethod": "stripe",
                "paymentIntentId": flow.payment_intent_id,
            })
            return True

        flow.card_confirmer = claim_intent
        assert await flow.submit() is None

        notice = flow.notices[-1]
        assert notice.title == "Booking Failed"
        assert "contact support" in notice.description
