"""
Sample data seeding through the storage layer.
"""
import pytest
from sqlalchemy import func, select

from voyager.models import RoomType
from voyager.seed_data import seed_database


class TestSeedDatabase:
    """Seeding an empty database and re-running it."""

    @pytest.mark.asyncio
    async def test_seeds_every_entity(self, storage):
        counts = await seed_database(storage)

        assert counts == {"trips": 4, "hotels": 3, "cars": 3, "offers": 3, "bookings": 5, "reviews": 10}
        assert len(await storage.get_trips()) == 4
        assert len(await storage.get_hotels()) == 3
        assert len(await storage.get_cars()) == 3
        assert len(await storage.get_last_minute_offers()) == 3
        assert len(await storage.get_bookings()) == 5
        assert all(review["status"] == "approved" for review in await storage.get_reviews())

    @pytest.mark.asyncio
    async def test_grand_palace_room_types(self, storage):
        await seed_database(storage)

        palace = await storage.get_hotel_by_slug("the-grand-palace")
        assert [room["name"] for room in palace["roomTypes"]] == [
            "Deluxe Room", "Executive Suite", "Presidential Suite",
        ]
        rooms = await storage.session.execute(select(func.count()).select_from(RoomType))
        assert rooms.scalar_one() == 3

    @pytest.mark.asyncio
    async def test_seasonal_hotel_and_reviews(self, storage):
        await seed_database(storage)

        lodge = await storage.get_hotel_by_slug("alpine-lodge")
        assert lodge["alwaysAvailable"] is False
        assert lodge["availableFrom"] == "2024-12-01"

        santorini = await storage.get_trip_by_slug("santorini-sunset-escape")
        reviews = await storage.get_approved_reviews_by_item(santorini["id"], "trip")
        assert sorted(review["userName"] for review in reviews) == ["Alice Freeman", "Michael Davis"]
        assert reviews[0]["userEmail"].endswith("@example.com")

    @pytest.mark.asyncio
    async def test_second_run_changes_nothing(self, storage):
        await seed_database(storage)

        assert await seed_database(storage) == {}
        assert len(await storage.get_trips()) == 4
        assert len(await storage.get_reviews()) == 10
