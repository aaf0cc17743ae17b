"""
Entity store for the Voyager booking backend.

DatabaseStorage wraps one AsyncSession and exposes a get-all / get-by-id /
create / update / delete set per entity. Rows come back as camelCase dicts
shaped like the JSON the API serves. Reads return None when a row is
missing, deletes return False, and driver errors propagate to the caller.
"""

import json
import logging
import re
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from werkzeug.security import generate_password_hash, check_password_hash

from .models import (
    User, Trip, Hotel, RoomType, Car, LastMinuteOffer, Booking, Review,
    SupportTicket, TicketReply, PaymentSettings, Subscriber, EmailTemplate,
    EmailSettings, SiteSettings,
    BookingStatus, PaymentProvider, ReviewItemType, ReviewStatus,
    TicketStatus, TicketPriority, ReplySender, SubscriberStatus,
)
from .utils import new_id, match_slug

logger = logging.getLogger(__name__)

# API field name -> column name
TRIP_FIELDS = {
    "title": "title",
    "location": "location",
    "image": "image",
    "gallery": "gallery",
    "price": "price",
    "rating": "rating",
    "duration": "duration",
    "category": "category",
    "features": "features",
    "metaDescription": "meta_description",
    "createdAt": "created_at",
}

HOTEL_FIELDS = {
    "title": "title",
    "location": "location",
    "image": "image",
    "gallery": "gallery",
    "price": "price",
    "rating": "rating",
    "amenities": "amenities",
    "stars": "stars",
    "sortOrder": "sort_order",
    "alwaysAvailable": "always_available",
    "isActive": "is_active",
    "availableFrom": "available_from",
    "availableTo": "available_to",
    "metaDescription": "meta_description",
    "createdAt": "created_at",
}

ROOM_TYPE_FIELDS = {
    "name": "name",
    "price": "price",
    "description": "description",
    "facilities": "facilities",
}

CAR_FIELDS = {
    "title": "title",
    "location": "location",
    "image": "image",
    "gallery": "gallery",
    "price": "price",
    "rating": "rating",
    "specs": "specs",
    "features": "features",
    "metaDescription": "meta_description",
    "createdAt": "created_at",
}

OFFER_FIELDS = {
    "title": "title",
    "location": "location",
    "image": "image",
    "gallery": "gallery",
    "price": "price",
    "originalPrice": "original_price",
    "rating": "rating",
    "endsIn": "ends_in",
    "discount": "discount",
    "metaDescription": "meta_description",
    "createdAt": "created_at",
}

BOOKING_FIELDS = {
    "customer": "customer",
    "item": "item",
    "date": "date",
    "amount": "amount",
    "status": "status",
    "paymentMethod": "payment_method",
    "paymentStatus": "payment_status",
    "paymentIntentId": "payment_intent_id",
    "createdAt": "created_at",
}

REVIEW_FIELDS = {
    "itemId": "item_id",
    "itemType": "item_type",
    "itemTitle": "item_title",
    "userName": "user_name",
    "userEmail": "user_email",
    "rating": "rating",
    "comment": "comment",
    "status": "status",
    "createdAt": "created_at",
}

TICKET_FIELDS = {
    "userName": "user_name",
    "userEmail": "user_email",
    "subject": "subject",
    "message": "message",
    "status": "status",
    "priority": "priority",
    "date": "created_at",
}

REPLY_FIELDS = {
    "sender": "sender",
    "message": "message",
    "date": "created_at",
}

PAYMENT_SETTINGS_FIELDS = {
    "provider": "provider",
    "enabled": "enabled",
    "secretKey": "secret_key",
    "publishableKey": "publishable_key",
    "webhookSecret": "webhook_secret",
    "additionalConfig": "additional_config",
    "updatedAt": "updated_at",
}

SUBSCRIBER_FIELDS = {
    "email": "email",
    "name": "name",
    "status": "status",
    "subscribedAt": "subscribed_at",
}

EMAIL_TEMPLATE_FIELDS = {
    "name": "name",
    "subject": "subject",
    "body": "body",
    "variables": "variables",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

EMAIL_SETTINGS_FIELDS = {
    "enabled": "enabled",
    "host": "host",
    "port": "port",
    "secure": "secure",
    "username": "username",
    "password": "password",
    "fromEmail": "from_email",
    "fromName": "from_name",
}

SITE_SETTINGS_FIELDS = {
    "siteName": "site_name",
    "logoUrl": "logo_url",
    "tagline": "tagline",
    "contactEmail": "contact_email",
    "contactPhone": "contact_phone",
    "contactAddress": "contact_address",
    "whatsappNumber": "whatsapp_number",
    "facebookUrl": "facebook_url",
    "instagramUrl": "instagram_url",
    "twitterUrl": "twitter_url",
    "linkedinUrl": "linkedin_url",
    "youtubeUrl": "youtube_url",
    "defaultCurrency": "default_currency",
    "updatedAt": "updated_at",
}

LIST_COLUMNS = {"gallery", "features", "amenities", "facilities", "variables"}
DATE_COLUMNS = {"date", "available_from", "available_to"}
READ_ONLY_COLUMNS = {"created_at", "updated_at", "subscribed_at"}

REVIEW_ITEM_MODELS = {
    ReviewItemType.TRIP: Trip,
    ReviewItemType.HOTEL: Hotel,
    ReviewItemType.CAR: Car,
    ReviewItemType.OFFER: LastMinuteOffer,
}

_TEMPLATE_VARIABLE = re.compile(r"\{\{\s*(\w+)\s*\}\}")


def _decode_list(value) -> List[Any]:
    # Rows written by older MySQL deployments keep arrays as JSON text
    if value is None:
        return []
    if isinstance(value, str):
        return json.loads(value) if value else []
    return list(value)


def _to_record(row, fields: Dict[str, str]) -> Dict[str, Any]:
    """Map an ORM row onto its camelCase API shape."""
    record = {"id": row.id}
    for field, column in fields.items():
        value = getattr(row, column)
        if column in LIST_COLUMNS:
            value = _decode_list(value)
        elif isinstance(value, Enum):
            value = value.value
        elif isinstance(value, Decimal):
            value = float(value)
        elif isinstance(value, (datetime, date)):
            value = value.isoformat()
        record[field] = value
    return record


def _apply(row, data: Dict[str, Any], fields: Dict[str, str]):
    """
    Overlay the provided fields onto a row; absent keys keep their value.
    A null for a NOT NULL column is treated as absent.
    """
    columns = type(row).__table__.c
    for field, column in fields.items():
        if field not in data or column in READ_ONLY_COLUMNS:
            continue
        value = data[field]
        if column in LIST_COLUMNS and value is None:
            value = []
        elif column in DATE_COLUMNS and isinstance(value, str):
            value = date.fromisoformat(value) if value else None
        if value is None and not columns[column].nullable:
            continue
        setattr(row, column, value)
    return row


def _enum_value(value):
    return value.value if isinstance(value, Enum) else value


class DatabaseStorage:
    """All persistence for the API; one instance per request session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # Generic helpers

    async def _list(self, model, fields, *criteria, order_by=None) -> List[Dict[str, Any]]:
        stmt = select(model).where(*criteria)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        result = await self.session.execute(stmt)
        return [_to_record(row, fields) for row in result.scalars().all()]

    async def _get(self, model, fields, entity_id: str) -> Optional[Dict[str, Any]]:
        row = await self.session.get(model, entity_id)
        return _to_record(row, fields) if row else None

    async def _create(self, model, fields, entity_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        row = _apply(model(id=entity_id), data, fields)
        self.session.add(row)
        await self.session.commit()
        logger.info(f"Created {model.__tablename__} row {entity_id}")
        return _to_record(row, fields)

    async def _update(self, model, fields, entity_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        row = await self.session.get(model, entity_id)
        if not row:
            return None
        _apply(row, data, fields)
        await self.session.commit()
        return _to_record(row, fields)

    async def _delete(self, model, entity_id: str) -> bool:
        row = await self.session.get(model, entity_id)
        if not row:
            return False
        await self.session.delete(row)
        await self.session.commit()
        logger.info(f"Deleted {model.__tablename__} row {entity_id}")
        return True

    # Users

    def _user_record(self, user: User) -> Dict[str, Any]:
        return {
            "id": user.id,
            "username": user.username,
            "role": user.role,
            "createdAt": user.created_at.isoformat() if user.created_at else None,
        }

    async def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        user = await self.session.get(User, user_id)
        return self._user_record(user) if user else None

    async def get_user_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        result = await self.session.execute(select(User).where(User.username == username))
        user = result.scalar_one_or_none()
        return self._user_record(user) if user else None

    async def create_user(self, username: str, password: str, role: str = "user") -> Dict[str, Any]:
        if await self.get_user_by_username(username):
            raise ValueError(f"Username {username} is already taken")
        user = User(
            id=str(uuid.uuid4()),
            username=username,
            password_hash=generate_password_hash(password),
            role=role,
        )
        self.session.add(user)
        await self.session.commit()
        logger.info(f"Registered user {username}")
        return self._user_record(user)

    async def verify_user(self, username: str, password: str) -> Optional[Dict[str, Any]]:
        """Return the user when the password matches, otherwise None."""
        result = await self.session.execute(select(User).where(User.username == username))
        user = result.scalar_one_or_none()
        if not user or not check_password_hash(user.password_hash, password):
            return None
        return self._user_record(user)

    # Trips

    async def get_trips(self) -> List[Dict[str, Any]]:
        return await self._list(Trip, TRIP_FIELDS, order_by=Trip.created_at)

    async def get_trip_by_id(self, trip_id: str) -> Optional[Dict[str, Any]]:
        return await self._get(Trip, TRIP_FIELDS, trip_id)

    async def get_trip_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        trips = await self.get_trips()
        return next((trip for trip in trips if match_slug(trip["title"], slug)), None)

    async def create_trip(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._create(Trip, TRIP_FIELDS, new_id("t"), data)

    async def update_trip(self, trip_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return await self._update(Trip, TRIP_FIELDS, trip_id, data)

    async def delete_trip(self, trip_id: str) -> bool:
        return await self._delete(Trip, trip_id)

    # Hotels

    def _hotel_record(self, hotel: Hotel) -> Dict[str, Any]:
        record = _to_record(hotel, HOTEL_FIELDS)
        record["roomTypes"] = []
        for room in hotel.room_types:
            room_record = _to_record(room, ROOM_TYPE_FIELDS)
            room_record["description"] = room_record["description"] or ""
            record["roomTypes"].append(room_record)
        return record

    def _build_room_types(self, rooms: List[Dict[str, Any]], existing: Optional[Dict[str, RoomType]] = None) -> List[RoomType]:
        """Build the full room list; ids already owned by the hotel are updated in place."""
        existing = existing or {}
        room_types = []
        for position, room in enumerate(rooms):
            room_type = existing.get(room.get("id")) or RoomType(id=new_id("rt"))
            _apply(room_type, room, ROOM_TYPE_FIELDS)
            room_type.description = room.get("description") or ""
            room_type.position = position
            room_types.append(room_type)
        return room_types

    async def get_hotels(self) -> List[Dict[str, Any]]:
        result = await self.session.execute(
            select(Hotel).order_by(Hotel.sort_order, Hotel.created_at)
        )
        return [self._hotel_record(hotel) for hotel in result.scalars().all()]

    async def get_hotel_by_id(self, hotel_id: str) -> Optional[Dict[str, Any]]:
        hotel = await self.session.get(Hotel, hotel_id)
        return self._hotel_record(hotel) if hotel else None

    async def get_hotel_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        hotels = await self.get_hotels()
        return next((hotel for hotel in hotels if match_slug(hotel["title"], slug)), None)

    async def create_hotel(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a hotel and its room types in one transaction."""
        hotel = _apply(Hotel(id=new_id("h")), data, HOTEL_FIELDS)
        hotel.room_types = self._build_room_types(data.get("roomTypes") or [])
        self.session.add(hotel)
        await self.session.commit()
        logger.info(f"Created hotel {hotel.id} with {len(hotel.room_types)} room types")
        return self._hotel_record(hotel)

    async def update_hotel(self, hotel_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Partial update. When roomTypes is present the hotel's rooms are
        replaced wholesale: rooms missing from the list are deleted.
        """
        hotel = await self.session.get(Hotel, hotel_id)
        if not hotel:
            return None
        _apply(hotel, data, HOTEL_FIELDS)
        if "roomTypes" in data:
            existing = {room.id: room for room in hotel.room_types}
            hotel.room_types = self._build_room_types(data["roomTypes"] or [], existing)
        await self.session.commit()
        return self._hotel_record(hotel)

    async def delete_hotel(self, hotel_id: str) -> bool:
        return await self._delete(Hotel, hotel_id)

    # Cars

    async def get_cars(self) -> List[Dict[str, Any]]:
        return await self._list(Car, CAR_FIELDS, order_by=Car.created_at)

    async def get_car_by_id(self, car_id: str) -> Optional[Dict[str, Any]]:
        return await self._get(Car, CAR_FIELDS, car_id)

    async def get_car_by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        cars = await self.get_cars()
        return next((car for car in cars if match_slug(car["title"], slug)), None)

    async def create_car(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._create(Car, CAR_FIELDS, new_id("c"), data)

    async def update_car(self, car_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return await self._update(Car, CAR_FIELDS, car_id, data)

    async def delete_car(self, car_id: str) -> bool:
        return await self._delete(Car, car_id)

    # Last minute offers

    async def get_last_minute_offers(self) -> List[Dict[str, Any]]:
        return await self._list(LastMinuteOffer, OFFER_FIELDS, order_by=LastMinuteOffer.created_at)

    async def get_offer_by_id(self, offer_id: str) -> Optional[Dict[str, Any]]:
        return await self._get(LastMinuteOffer, OFFER_FIELDS, offer_id)

    async def create_offer(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._create(LastMinuteOffer, OFFER_FIELDS, new_id("lm"), data)

    async def update_offer(self, offer_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return await self._update(LastMinuteOffer, OFFER_FIELDS, offer_id, data)

    async def delete_offer(self, offer_id: str) -> bool:
        return await self._delete(LastMinuteOffer, offer_id)

    # Bookings

    async def get_bookings(self) -> List[Dict[str, Any]]:
        return await self._list(Booking, BOOKING_FIELDS, order_by=Booking.created_at.desc())

    async def get_booking_by_id(self, booking_id: str) -> Optional[Dict[str, Any]]:
        return await self._get(Booking, BOOKING_FIELDS, booking_id)

    async def get_booking_by_payment_intent(self, payment_intent_id: str) -> Optional[Dict[str, Any]]:
        bookings = await self._list(
            Booking, BOOKING_FIELDS, Booking.payment_intent_id == payment_intent_id
        )
        return bookings[0] if bookings else None

    async def create_booking(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a booking. A payment intent id can be claimed by one booking
        only; a second claim raises ValueError.
        """
        data = {"status": BookingStatus.PENDING, **data}
        try:
            return await self._create(Booking, BOOKING_FIELDS, new_id("BKG-").upper(), data)
        except IntegrityError:
            await self.session.rollback()
            intent_id = data.get("paymentIntentId")
            if not intent_id:
                raise
            logger.warning(f"Payment {intent_id} claimed by a concurrent booking")
            raise ValueError(f"Payment {intent_id} already belongs to another booking")

    async def update_booking(self, booking_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            return await self._update(Booking, BOOKING_FIELDS, booking_id, data)
        except IntegrityError:
            await self.session.rollback()
            raise ValueError(f"Payment {data.get('paymentIntentId')} already belongs to another booking")

    async def delete_booking(self, booking_id: str) -> bool:
        return await self._delete(Booking, booking_id)

    # Reviews

    async def get_reviews(self) -> List[Dict[str, Any]]:
        return await self._list(Review, REVIEW_FIELDS, order_by=Review.created_at.desc())

    async def get_review_by_id(self, review_id: str) -> Optional[Dict[str, Any]]:
        return await self._get(Review, REVIEW_FIELDS, review_id)

    async def get_reviews_by_item(self, item_id: str, item_type: str) -> List[Dict[str, Any]]:
        """Every review for an item regardless of moderation status."""
        return await self._list(
            Review, REVIEW_FIELDS,
            Review.item_id == item_id,
            Review.item_type == ReviewItemType(item_type),
            order_by=Review.created_at.desc(),
        )

    async def get_approved_reviews_by_item(self, item_id: str, item_type: str) -> List[Dict[str, Any]]:
        return await self._list(
            Review, REVIEW_FIELDS,
            Review.item_id == item_id,
            Review.item_type == ReviewItemType(item_type),
            Review.status == ReviewStatus.APPROVED,
            order_by=Review.created_at.desc(),
        )

    async def create_review(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Store a customer review. The referenced item must exist and every
        new review starts as pending regardless of the submitted status.
        """
        item_type = ReviewItemType(data["itemType"])
        item = await self.session.get(REVIEW_ITEM_MODELS[item_type], data["itemId"])
        if not item:
            raise ValueError(f"Cannot review unknown {item_type.value} {data['itemId']}")

        rating = int(data["rating"])
        if not 1 <= rating <= 5:
            raise ValueError("Rating must be between 1 and 5")

        review = Review(
            id=new_id("rev-"),
            item_id=item.id,
            item_type=item_type,
            item_title=data.get("itemTitle") or item.title,
            user_name=data["userName"],
            user_email=data.get("userEmail"),
            rating=rating,
            comment=data["comment"],
            status=ReviewStatus.PENDING,
        )
        self.session.add(review)
        await self.session.commit()
        logger.info(f"Review {review.id} submitted for {item_type.value} {item.id}")
        return _to_record(review, REVIEW_FIELDS)

    async def update_review(self, review_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Edit rating and comment only; moderation goes through update_review_status."""
        editable = {key: data[key] for key in ("rating", "comment") if data.get(key) is not None}
        return await self._update(Review, REVIEW_FIELDS, review_id, editable)

    async def update_review_status(self, review_id: str, status: str) -> Optional[Dict[str, Any]]:
        review = await self._update(Review, REVIEW_FIELDS, review_id, {"status": ReviewStatus(status)})
        if review:
            logger.info(f"Review {review_id} marked {review['status']}")
        return review

    async def delete_review(self, review_id: str) -> bool:
        return await self._delete(Review, review_id)

    # Support tickets

    def _ticket_record(self, ticket: SupportTicket) -> Dict[str, Any]:
        record = _to_record(ticket, TICKET_FIELDS)
        record["replies"] = [_to_record(reply, REPLY_FIELDS) for reply in ticket.replies]
        return record

    async def get_tickets(self) -> List[Dict[str, Any]]:
        result = await self.session.execute(
            select(SupportTicket).order_by(SupportTicket.created_at.desc())
        )
        return [self._ticket_record(ticket) for ticket in result.scalars().all()]

    async def get_tickets_by_user(self, user_email: str) -> List[Dict[str, Any]]:
        result = await self.session.execute(
            select(SupportTicket)
            .where(SupportTicket.user_email == user_email)
            .order_by(SupportTicket.created_at.desc())
        )
        return [self._ticket_record(ticket) for ticket in result.scalars().all()]

    async def get_ticket_by_id(self, ticket_id: str) -> Optional[Dict[str, Any]]:
        ticket = await self.session.get(SupportTicket, ticket_id)
        return self._ticket_record(ticket) if ticket else None

    async def create_ticket(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Open a ticket; its message also starts the reply thread, in the same commit."""
        ticket = SupportTicket(
            id=str(uuid.uuid4()),
            user_name=data.get("userName"),
            user_email=data["userEmail"],
            subject=data["subject"],
            message=data.get("message"),
            status=TicketStatus.OPEN,
            priority=data.get("priority") or TicketPriority.MEDIUM,
        )
        ticket.replies = []
        if ticket.message:
            ticket.replies.append(
                TicketReply(id=str(uuid.uuid4()), sender=ReplySender.USER, message=ticket.message)
            )
        self.session.add(ticket)
        await self.session.commit()
        logger.info(f"Opened ticket {ticket.id} for {ticket.user_email}")
        return self._ticket_record(ticket)

    async def update_ticket_status(self, ticket_id: str, status: str) -> Optional[Dict[str, Any]]:
        ticket = await self.session.get(SupportTicket, ticket_id)
        if not ticket:
            return None
        ticket.status = TicketStatus(status)
        await self.session.commit()
        return self._ticket_record(ticket)

    async def add_ticket_reply(self, ticket_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        ticket = await self.session.get(SupportTicket, ticket_id)
        if not ticket:
            return None
        reply = TicketReply(
            id=str(uuid.uuid4()),
            sender=ReplySender(data.get("sender") or ReplySender.USER),
            message=data["message"],
        )
        ticket.replies.append(reply)
        await self.session.commit()
        return _to_record(reply, REPLY_FIELDS)

    async def delete_ticket(self, ticket_id: str) -> bool:
        return await self._delete(SupportTicket, ticket_id)

    # Payment settings

    async def get_payment_settings(self) -> List[Dict[str, Any]]:
        return await self._list(PaymentSettings, PAYMENT_SETTINGS_FIELDS, order_by=PaymentSettings.provider)

    async def get_payment_setting_by_provider(self, provider: str) -> Optional[Dict[str, Any]]:
        result = await self.session.execute(
            select(PaymentSettings).where(PaymentSettings.provider == _enum_value(provider))
        )
        row = result.scalar_one_or_none()
        return _to_record(row, PAYMENT_SETTINGS_FIELDS) if row else None

    async def update_payment_settings(self, provider: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Upsert the settings row of a known provider."""
        provider = PaymentProvider(_enum_value(provider)).value
        result = await self.session.execute(
            select(PaymentSettings).where(PaymentSettings.provider == provider)
        )
        row = result.scalar_one_or_none()
        if not row:
            row = PaymentSettings(id=str(uuid.uuid4()), provider=provider, enabled=False)
            self.session.add(row)
        data = {key: value for key, value in data.items() if key != "provider"}
        _apply(row, data, PAYMENT_SETTINGS_FIELDS)
        await self.session.commit()
        logger.info(f"Payment settings for {provider} updated (enabled={row.enabled})")
        return _to_record(row, PAYMENT_SETTINGS_FIELDS)

    # Subscribers

    async def get_subscribers(self) -> List[Dict[str, Any]]:
        return await self._list(Subscriber, SUBSCRIBER_FIELDS, order_by=Subscriber.subscribed_at.desc())

    async def get_subscriber_by_id(self, subscriber_id: str) -> Optional[Dict[str, Any]]:
        return await self._get(Subscriber, SUBSCRIBER_FIELDS, subscriber_id)

    async def _find_subscriber(self, email: str) -> Optional[Subscriber]:
        result = await self.session.execute(
            select(Subscriber).where(Subscriber.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def get_subscriber_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        subscriber = await self._find_subscriber(email)
        return _to_record(subscriber, SUBSCRIBER_FIELDS) if subscriber else None

    async def create_subscriber(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Subscribe an email; a known email is re-activated instead of duplicated."""
        email = data["email"].strip().lower()
        subscriber = await self._find_subscriber(email)
        if subscriber:
            if subscriber.status == SubscriberStatus.UNSUBSCRIBED:
                subscriber.status = SubscriberStatus.ACTIVE
                subscriber.subscribed_at = datetime.now(timezone.utc)
                logger.info(f"Re-activated subscriber {subscriber.id}")
            if data.get("name"):
                subscriber.name = data["name"]
            await self.session.commit()
            return _to_record(subscriber, SUBSCRIBER_FIELDS)

        return await self._create(
            Subscriber, SUBSCRIBER_FIELDS, str(uuid.uuid4()),
            {"email": email, "name": data.get("name"), "status": SubscriberStatus.ACTIVE},
        )

    async def unsubscribe_subscriber(self, email: str) -> bool:
        """False when the email is unknown or already unsubscribed."""
        subscriber = await self._find_subscriber(email)
        if not subscriber or subscriber.status == SubscriberStatus.UNSUBSCRIBED:
            return False
        subscriber.status = SubscriberStatus.UNSUBSCRIBED
        await self.session.commit()
        logger.info(f"Subscriber {subscriber.id} unsubscribed")
        return True

    async def delete_subscriber(self, subscriber_id: str) -> bool:
        return await self._delete(Subscriber, subscriber_id)

    # Email templates

    async def get_email_templates(self) -> List[Dict[str, Any]]:
        return await self._list(EmailTemplate, EMAIL_TEMPLATE_FIELDS, order_by=EmailTemplate.created_at.desc())

    async def get_email_template_by_id(self, template_id: str) -> Optional[Dict[str, Any]]:
        return await self._get(EmailTemplate, EMAIL_TEMPLATE_FIELDS, template_id)

    async def create_email_template(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._create(EmailTemplate, EMAIL_TEMPLATE_FIELDS, str(uuid.uuid4()), data)

    async def update_email_template(self, template_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return await self._update(EmailTemplate, EMAIL_TEMPLATE_FIELDS, template_id, data)

    async def delete_email_template(self, template_id: str) -> bool:
        return await self._delete(EmailTemplate, template_id)

    async def render_email_template(self, template_id: str, values: Dict[str, str]) -> Optional[Dict[str, str]]:
        """Fill {{variable}} placeholders; unknown placeholders are left as written."""
        template = await self.get_email_template_by_id(template_id)
        if not template:
            return None

        def substitute(match):
            return str(values.get(match.group(1), match.group(0)))

        return {
            "subject": _TEMPLATE_VARIABLE.sub(substitute, template["subject"]),
            "body": _TEMPLATE_VARIABLE.sub(substitute, template["body"]),
        }

    # Email settings

    async def _first(self, model):
        result = await self.session.execute(select(model).limit(1))
        return result.scalar_one_or_none()

    async def get_email_settings(self) -> Optional[Dict[str, Any]]:
        settings = await self._first(EmailSettings)
        return _to_record(settings, EMAIL_SETTINGS_FIELDS) if settings else None

    async def update_email_settings(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create the settings row on first write, otherwise overlay the given fields."""
        settings = await self._first(EmailSettings)
        if not settings:
            settings = EmailSettings(id=str(uuid.uuid4()), enabled=False, secure=False)
            self.session.add(settings)
        # Blank strings clear a field
        data = {key: (None if value == "" else value) for key, value in data.items()}
        _apply(settings, data, EMAIL_SETTINGS_FIELDS)
        await self.session.commit()
        return _to_record(settings, EMAIL_SETTINGS_FIELDS)

    # Site settings

    async def get_site_settings(self) -> Optional[Dict[str, Any]]:
        settings = await self._first(SiteSettings)
        return _to_record(settings, SITE_SETTINGS_FIELDS) if settings else None

    async def update_site_settings(self, data: Dict[str, Any]) -> Dict[str, Any]:
        settings = await self._first(SiteSettings)
        if not settings:
            settings = SiteSettings(id=str(uuid.uuid4()), site_name="Voyager Hub", default_currency="EUR")
            self.session.add(settings)
        # Name and currency are required columns; null means "leave as is"
        data = {key: value for key, value in data.items()
                if value is not None or key not in ("siteName", "defaultCurrency")}
        if data.get("defaultCurrency"):
            data["defaultCurrency"] = data["defaultCurrency"].upper()
        _apply(settings, data, SITE_SETTINGS_FIELDS)
        await self.session.commit()
        return _to_record(settings, SITE_SETTINGS_FIELDS)
