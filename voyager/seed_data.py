#!/usr/bin/env python3
"""
Voyager Database Seeder
Seeds the catalog with sample trips, hotels, cars and offers, plus a few
bookings and approved reviews so the storefront has something to show.
"""

import asyncio
from typing import Dict

from voyager.database import init_db, close_db, async_session_factory
from voyager.models import BookingStatus, ReviewItemType, ReviewStatus
from voyager.storage import DatabaseStorage

UNSPLASH = "https://images.unsplash.com/photo-{}?q=80&w=1000&auto=format&fit=crop"

TRIPS = [
    {
        "title": "Santorini Sunset Escape",
        "location": "Santorini, Greece",
        "image": UNSPLASH.format("1613395877344-13d4a8e0d49e"),
        "price": "$3,200",
        "rating": 4.9,
        "duration": "7 Days",
        "category": "Romantic",
        "features": ["All Inclusive", "Private Transfers", "Sunset Cruise"],
    },
    {
        "title": "Kyoto Autumn Retreat",
        "location": "Kyoto, Japan",
        "image": UNSPLASH.format("1493976040374-85c8e12f0c0e"),
        "price": "$4,500",
        "rating": 5.0,
        "duration": "10 Days",
        "category": "Cultural",
        "features": ["Guided Tours", "Tea Ceremony", "Meals Included"],
    },
    {
        "title": "Amalfi Coast Drive",
        "location": "Amalfi, Italy",
        "image": UNSPLASH.format("1533105079780-92b9be482077"),
        "price": "$5,100",
        "rating": 4.8,
        "duration": "8 Days",
        "category": "Luxury",
        "features": ["Luxury Car Rental", "5-Star Hotels", "Breakfast Daily"],
    },
    {
        "title": "Safari in Serengeti",
        "location": "Tanzania",
        "image": UNSPLASH.format("1516426122078-c23e76319801"),
        "price": "$6,800",
        "rating": 4.9,
        "duration": "9 Days",
        "category": "Adventure",
        "features": ["Game Drives", "Park Fees", "Full Board"],
    },
]

HOTELS = [
    {
        "title": "The Grand Palace",
        "location": "Paris, France",
        "image": UNSPLASH.format("1566073771259-6a8506099945"),
        "price": "$850/night",
        "rating": 4.9,
        "amenities": ["Spa", "Michelin Dining", "City View", "WiFi", "Concierge"],
        "alwaysAvailable": True,
        "roomTypes": [
            {
                "name": "Deluxe Room",
                "price": "$850",
                "description": "Spacious room with city view",
                "facilities": ["City View", "Mini Bar", "Rain Shower"],
            },
            {
                "name": "Executive Suite",
                "price": "$1,250",
                "description": "Separate living area and premium amenities",
                "facilities": ["Lounge Access", "Jacuzzi", "Work Desk", "City View"],
            },
            {
                "name": "Presidential Suite",
                "price": "$3,500",
                "description": "Ultimate luxury with panoramic views",
                "facilities": ["Private Butler", "Grand Piano", "Sauna", "Panoramic Terrace"],
            },
        ],
    },
    {
        "title": "Azure Resort & Spa",
        "location": "Maldives",
        "image": UNSPLASH.format("1573843981267-be1999ff37cd"),
        "price": "$1,200/night",
        "rating": 5.0,
        "amenities": ["Overwater Villa", "Private Pool", "Butler", "Spa", "Gym"],
        "alwaysAvailable": True,
    },
    {
        "title": "Alpine Lodge",
        "location": "Zermatt, Switzerland",
        "image": UNSPLASH.format("1582719508461-905c673771fd"),
        "price": "$950/night",
        "rating": 4.8,
        "amenities": ["Ski-in/Ski-out", "Fireplace", "Spa", "Restaurant"],
        "alwaysAvailable": False,
        "availableFrom": "2024-12-01",
        "availableTo": "2025-04-30",
    },
]

CARS = [
    {
        "title": "Convertible GT",
        "location": "Monaco",
        "image": UNSPLASH.format("1544636331-e26879cd4d9b"),
        "price": "$1,500/day",
        "rating": 5.0,
        "specs": "Automatic • 2 Seats",
        "features": ["GPS", "Bluetooth", "Sport Mode", "Convertible Top"],
    },
    {
        "title": "Luxury SUV",
        "location": "Dubai, UAE",
        "image": UNSPLASH.format("1617788138017-80ad40651399"),
        "price": "$900/day",
        "rating": 4.7,
        "specs": "Automatic • 5 Seats",
        "features": ["GPS", "Leather Seats", "Sunroof", "All-Wheel Drive"],
    },
    {
        "title": "Classic Vintage",
        "location": "Tuscany, Italy",
        "image": UNSPLASH.format("1552519507-da3b142c6e3d"),
        "price": "$1,100/day",
        "rating": 4.9,
        "specs": "Manual • 2 Seats",
        "features": ["Vintage Style", "Convertible", "Manual Transmission"],
    },
]

OFFERS = [
    {
        "title": "Bali Beach Villa - 48h Sale",
        "location": "Bali, Indonesia",
        "image": UNSPLASH.format("1537996194471-e657df975ab4"),
        "price": "$1,800",
        "originalPrice": "$3,200",
        "rating": 4.8,
        "endsIn": "12h 30m",
        "discount": "45% OFF",
    },
    {
        "title": "New York Weekend",
        "location": "New York, USA",
        "image": UNSPLASH.format("1496442226666-8d4d0e62e6e9"),
        "price": "$1,200",
        "originalPrice": "$1,800",
        "rating": 4.7,
        "endsIn": "08h 15m",
        "discount": "33% OFF",
    },
    {
        "title": "Swiss Alps Chalet",
        "location": "Interlaken, Switzerland",
        "image": UNSPLASH.format("1502784444187-359ac186c5bb"),
        "price": "$2,100",
        "originalPrice": "$2,800",
        "rating": 4.9,
        "endsIn": "24h 00m",
        "discount": "25% OFF",
    },
]

BOOKINGS = [
    {"customer": "Alice Freeman", "item": "Santorini Sunset Escape", "date": "2024-05-12",
     "status": BookingStatus.CONFIRMED, "amount": "$3,200"},
    {"customer": "Robert Chen", "item": "The Grand Palace", "date": "2024-06-01",
     "status": BookingStatus.PENDING, "amount": "$2,550"},
    {"customer": "Elena Rodriguez", "item": "Convertible GT", "date": "2024-06-15",
     "status": BookingStatus.CANCELLED, "amount": "$4,500"},
    {"customer": "David Smith", "item": "Kyoto Autumn Retreat", "date": "2024-10-20",
     "status": BookingStatus.CANCELLED, "amount": "$4,500"},
    {"customer": "Sarah Johnson", "item": "Azure Resort & Spa", "date": "2024-07-08",
     "status": BookingStatus.CONFIRMED, "amount": "$6,000"},
]

# (item type, item title, reviewer, rating, comment)
REVIEWS = [
    (ReviewItemType.TRIP, "Santorini Sunset Escape", "Alice Freeman", 5,
     "Absolutely breathtaking views! The sunset cruise was the highlight of our trip."),
    (ReviewItemType.TRIP, "Santorini Sunset Escape", "Michael Davis", 5,
     "An unforgettable romantic getaway. Every detail was perfectly planned."),
    (ReviewItemType.HOTEL, "The Grand Palace", "Robert Chen", 5,
     "Exceptional service and stunning location. The Presidential Suite was worth every penny."),
    (ReviewItemType.HOTEL, "The Grand Palace", "Emma Wilson", 4,
     "Beautiful hotel with amazing amenities. Room service was slow on one occasion."),
    (ReviewItemType.HOTEL, "Azure Resort & Spa", "Sarah Johnson", 5,
     "Paradise on Earth! The overwater villa was a dream come true."),
    (ReviewItemType.CAR, "Convertible GT", "Elena Rodriguez", 4,
     "Driving the Convertible GT through Monaco was amazing. Pick up was slightly delayed."),
    (ReviewItemType.TRIP, "Kyoto Autumn Retreat", "Jennifer Lee", 5,
     "The tea ceremony was a magical experience. Our guide was extremely knowledgeable."),
    (ReviewItemType.OFFER, "Bali Beach Villa - 48h Sale", "Chris Martin", 5,
     "Incredible value! Got this deal last minute and the villa was stunning."),
    (ReviewItemType.TRIP, "Amalfi Coast Drive", "Sophie Taylor", 5,
     "The views along the Amalfi Coast were spectacular. Amazing food!"),
    (ReviewItemType.HOTEL, "Alpine Lodge", "James Brown", 5,
     "Perfect ski vacation! Ski-in/ski-out convenience and a cozy fireplace."),
]


async def seed_database(storage: DatabaseStorage) -> Dict[str, int]:
    """
    Seed an empty database with sample data.

    Returns the number of records created per entity. A database that
    already has trips is left untouched and an empty dict is returned.
    """
    if await storage.get_trips():
        print("ℹ️  Catalog already seeded, skipping")
        return {}

    print("🌱 Seeding Voyager database...")

    # Titles map to created ids so reviews can reference their items
    created = {item_type: {} for item_type in ReviewItemType}

    for data in TRIPS:
        trip = await storage.create_trip(data)
        created[ReviewItemType.TRIP][trip["title"]] = trip["id"]
    print(f"   ✅ Created {len(TRIPS)} trips")

    for data in HOTELS:
        hotel = await storage.create_hotel(data)
        created[ReviewItemType.HOTEL][hotel["title"]] = hotel["id"]
    print(f"   ✅ Created {len(HOTELS)} hotels")

    for data in CARS:
        car = await storage.create_car(data)
        created[ReviewItemType.CAR][car["title"]] = car["id"]
    print(f"   ✅ Created {len(CARS)} cars")

    for data in OFFERS:
        offer = await storage.create_offer(data)
        created[ReviewItemType.OFFER][offer["title"]] = offer["id"]
    print(f"   ✅ Created {len(OFFERS)} last minute offers")

    for data in BOOKINGS:
        await storage.create_booking(data)
    print(f"   ✅ Created {len(BOOKINGS)} bookings")

    for item_type, title, user_name, rating, comment in REVIEWS:
        review = await storage.create_review({
            "itemId": created[item_type][title],
            "itemType": item_type.value,
            "userName": user_name,
            "userEmail": f"{user_name.split()[0].lower()}@example.com",
            "rating": rating,
            "comment": comment,
        })
        await storage.update_review_status(review["id"], ReviewStatus.APPROVED.value)
    print(f"   ✅ Created {len(REVIEWS)} approved reviews")

    return {
        "trips": len(TRIPS),
        "hotels": len(HOTELS),
        "cars": len(CARS),
        "offers": len(OFFERS),
        "bookings": len(BOOKINGS),
        "reviews": len(REVIEWS),
    }


async def main():
    await init_db()
    try:
        async with async_session_factory() as session:
            counts = await seed_database(DatabaseStorage(session))
    finally:
        await close_db()

    if counts:
        print("\n🎉 Database seeding completed successfully!")
        print("\nSample data created:")
        for name, count in counts.items():
            print(f"   - {count} {name.capitalize()}")


if __name__ == "__main__":
    asyncio.run(main())
