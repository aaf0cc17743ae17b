"""
API tests through the ASGI app: catalog, reviews, tickets, subscribers,
settings, auth, reports and health.
"""
import pytest


class TestCatalogApi:
    """CRUD and slug lookups for the catalog."""

    @pytest.mark.asyncio
    async def test_trip_crud(self, client, trip_data):
        response = await client.post("/api/trips", json=trip_data)
        assert response.status_code == 201
        trip = response.json()

        response = await client.get(f"/api/trips/{trip['id']}")
        assert response.status_code == 200
        assert response.json()["rating"] == 4.5

        response = await client.put(f"/api/trips/{trip['id']}", json={"duration": "8 days"})
        assert response.json()["duration"] == "8 days"
        assert response.json()["category"] == "Coastal"

        response = await client.delete(f"/api/trips/{trip['id']}")
        assert response.json() == {"success": True}

        response = await client.get(f"/api/trips/{trip['id']}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_trip_by_slug(self, client, trip_data):
        await client.post("/api/trips", json=trip_data)

        response = await client.get("/api/trips/slug/amalfi-coast-retreat")
        assert response.status_code == 200
        assert response.json()["title"] == "Amalfi Coast Retreat"

        response = await client.get("/api/trips/slug/nowhere")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_rating_rejected(self, client, trip_data):
        response = await client.post("/api/trips", json={**trip_data, "rating": 7})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_hotel_with_room_types(self, client, hotel_data):
        response = await client.post("/api/hotels", json=hotel_data)
        assert response.status_code == 201
        hotel = response.json()
        assert len(hotel["roomTypes"]) == 2

        response = await client.put(f"/api/hotels/{hotel['id']}", json={"roomTypes": []})
        assert response.json()["roomTypes"] == []

        response = await client.get("/api/hotels/slug/hotel-le-bristol")
        assert response.json()["id"] == hotel["id"]

    @pytest.mark.asyncio
    async def test_missing_car_and_offer(self, client):
        assert (await client.get("/api/cars/missing")).status_code == 404
        assert (await client.put("/api/offers/missing", json={"discount": "30%"})).status_code == 404
        assert (await client.delete("/api/hotels/missing")).status_code == 404

    @pytest.mark.asyncio
    async def test_null_title_keeps_existing(self, client, trip_data):
        trip = (await client.post("/api/trips", json=trip_data)).json()

        response = await client.put(f"/api/trips/{trip['id']}", json={"title": None, "duration": "9 days"})

        assert response.status_code == 200
        assert response.json()["title"] == "Amalfi Coast Retreat"
        assert response.json()["duration"] == "9 days"

    @pytest.mark.asyncio
    async def test_car_create_then_fetch(self, client, car_data):
        response = await client.post("/api/cars", json=car_data)
        assert response.status_code == 201
        car = response.json()

        response = await client.get(f"/api/cars/{car['id']}")
        assert response.status_code == 200
        fetched = response.json()
        assert fetched["specs"] == "Automatic • 4 Seats"
        assert fetched["features"] == ["Convertible", "Sport Chrono"]
        assert fetched["gallery"] == car_data["gallery"]
        assert fetched["rating"] == 4.8

        response = await client.get("/api/cars/slug/porsche-911-cabriolet")
        assert response.json()["id"] == car["id"]

    @pytest.mark.asyncio
    async def test_offer_create_then_fetch(self, client, offer_data):
        response = await client.post("/api/offers", json=offer_data)
        assert response.status_code == 201
        offer = response.json()

        response = await client.get(f"/api/offers/{offer['id']}")
        assert response.status_code == 200
        fetched = response.json()
        assert fetched["originalPrice"] == "$2,700"
        assert fetched["endsIn"] == "18h 45m"
        assert fetched["discount"] == "30% OFF"
        assert fetched["gallery"] == ["https://images.example/como-terrace.jpg"]

        response = await client.put(f"/api/offers/{offer['id']}", json={"discount": "35% OFF", "gallery": None})
        assert response.json()["discount"] == "35% OFF"
        assert response.json()["gallery"] == []
        assert response.json()["originalPrice"] == "$2,700"


class TestReviewsApi:
    """Review submission and moderation."""

    @pytest.mark.asyncio
    async def test_moderation_flow(self, client, trip_data):
        trip = (await client.post("/api/trips", json=trip_data)).json()

        response = await client.post("/api/reviews", json={
            "itemId": trip["id"],
            "itemType": "trip",
            "userName": "Ada",
            "userEmail": "ada@example.com",
            "rating": 5,
            "comment": "Wonderful",
        })
        assert response.status_code == 201
        review = response.json()
        assert review["status"] == "pending"

        public = await client.get(f"/api/reviews/item/trip/{trip['id']}")
        assert public.json() == []
        everything = await client.get(f"/api/reviews/item/trip/{trip['id']}", params={"all": "true"})
        assert len(everything.json()) == 1

        response = await client.patch(f"/api/reviews/{review['id']}/status", json={"status": "approved"})
        assert response.json()["status"] == "approved"

        public = await client.get(f"/api/reviews/item/trip/{trip['id']}")
        assert [r["id"] for r in public.json()] == [review["id"]]

    @pytest.mark.asyncio
    async def test_review_for_unknown_item(self, client):
        response = await client.post("/api/reviews", json={
            "itemId": "missing",
            "itemType": "car",
            "userName": "Ada",
            "rating": 4,
            "comment": "Smooth ride",
        })
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_review_rating_bounds(self, client, trip_data):
        trip = (await client.post("/api/trips", json=trip_data)).json()
        response = await client.post("/api/reviews", json={
            "itemId": trip["id"], "itemType": "trip", "userName": "Ada", "rating": 0, "comment": "Meh",
        })
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_moderate_missing_review(self, client):
        response = await client.patch("/api/reviews/missing/status", json={"status": "rejected"})
        assert response.status_code == 404


class TestTicketsApi:
    """Support tickets."""

    @pytest.mark.asyncio
    async def test_ticket_thread(self, client):
        response = await client.post("/api/tickets", json={
            "userName": "Ada",
            "userEmail": "ada@example.com",
            "subject": "Late check-in",
            "message": "Arriving after midnight",
            "priority": "High",
        })
        assert response.status_code == 201
        ticket = response.json()
        assert ticket["priority"] == "High"
        assert len(ticket["replies"]) == 1

        response = await client.post(
            f"/api/tickets/{ticket['id']}/replies", json={"sender": "support", "message": "Noted"}
        )
        assert response.status_code == 201

        response = await client.patch(f"/api/tickets/{ticket['id']}/status", json={"status": "Closed"})
        assert response.json()["status"] == "Closed"
        assert [r["sender"] for r in response.json()["replies"]] == ["user", "support"]

        mine = await client.get("/api/tickets", params={"email": "ada@example.com"})
        assert [t["id"] for t in mine.json()] == [ticket["id"]]

    @pytest.mark.asyncio
    async def test_reply_to_missing_ticket(self, client):
        response = await client.post("/api/tickets/missing/replies", json={"message": "Hello?"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_status(self, client):
        ticket = (await client.post("/api/tickets", json={"userEmail": "ada@example.com", "subject": "Hi"})).json()
        response = await client.patch(f"/api/tickets/{ticket['id']}/status", json={"status": "Escalated"})
        assert response.status_code == 422


class TestSubscribersApi:
    """Newsletter subscriptions."""

    @pytest.mark.asyncio
    async def test_subscribe_and_unsubscribe(self, client):
        response = await client.post("/api/subscribers", json={"email": "ada@example.com", "name": "Ada"})
        assert response.status_code == 201
        assert response.json()["status"] == "active"

        response = await client.post("/api/subscribers/unsubscribe", json={"email": "ada@example.com"})
        assert response.json() == {"email": "ada@example.com", "unsubscribed": True}

        response = await client.post("/api/subscribers/unsubscribe", json={"email": "ada@example.com"})
        assert response.json()["unsubscribed"] is False

        subscribers = (await client.get("/api/subscribers")).json()
        assert subscribers[0]["status"] == "unsubscribed"

    @pytest.mark.asyncio
    async def test_invalid_email(self, client):
        response = await client.post("/api/subscribers", json={"email": "not-an-email"})
        assert response.status_code == 422


class TestSettingsApi:
    """Email templates, email settings and site settings."""

    @pytest.mark.asyncio
    async def test_template_preview(self, client):
        template = (await client.post("/api/email-templates", json={
            "name": "Welcome",
            "subject": "Welcome {{name}}",
            "body": "Hello {{name}}",
            "variables": ["name"],
        })).json()

        response = await client.post(
            f"/api/email-templates/{template['id']}/preview", json={"values": {"name": "Ada"}}
        )
        assert response.json() == {"subject": "Welcome Ada", "body": "Hello Ada"}

        response = await client.post("/api/email-templates/missing/preview", json={"values": {}})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_email_password_is_write_only(self, client):
        assert (await client.get("/api/email-settings")).json() is None

        response = await client.put("/api/email-settings", json={
            "enabled": True,
            "host": "smtp.example.com",
            "port": 587,
            "password": "hunter22",
        })
        body = response.json()
        assert body["hasPassword"] is True
        assert "password" not in body

    @pytest.mark.asyncio
    async def test_site_settings(self, client):
        defaults = (await client.get("/api/site-settings")).json()
        assert defaults["siteName"] == "Voyager Hub"
        assert defaults["defaultCurrency"] == "EUR"

        response = await client.put("/api/site-settings", json={"tagline": "Travel, elevated", "defaultCurrency": "gbp"})
        assert response.json()["tagline"] == "Travel, elevated"
        assert response.json()["defaultCurrency"] == "GBP"


class TestAuthApi:
    """Registration and login."""

    @pytest.mark.asyncio
    async def test_register_and_login(self, client):
        response = await client.post("/api/auth/register", json={"username": "ada", "password": "analytical"})
        assert response.status_code == 201
        assert "password" not in response.json()

        response = await client.post("/api/auth/register", json={"username": "ada", "password": "analytical"})
        assert response.status_code == 409

        response = await client.post("/api/auth/login", json={"username": "ada", "password": "analytical"})
        assert response.status_code == 200
        assert response.json()["username"] == "ada"

        response = await client.post("/api/auth/login", json={"username": "ada", "password": "wrong-one"})
        assert response.status_code == 401


class TestReportsAndHealth:
    """CSV summary and health check."""

    @pytest.mark.asyncio
    async def test_bookings_report_csv(self, client):
        for amount, method in (("$1,000", "saved_card"), ("$500", "saved_card"), ("€300", "bank_transfer")):
            await client.post("/api/bookings", json={
                "customer": "Ada",
                "item": "Amalfi Coast Retreat",
                "date": "2026-06-01",
                "amount": amount,
                "status": "Confirmed",
                "paymentMethod": method,
            })

        response = await client.get("/api/reports/bookings.csv")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        lines = response.text.strip().splitlines()
        assert lines[0] == "status,paymentMethod,bookings,total"
        assert "Confirmed,saved_card,2,1500.0" in lines
        assert "Pending,bank_transfer,1,300.0" in lines

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/api/health")
        body = response.json()
        assert body["status"] == "ok"
        assert body["database"] == "ok"
        assert body["features"] == {"payments_dry_run": True, "rate_limiting": False}
