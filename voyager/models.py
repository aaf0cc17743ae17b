"""
SQLAlchemy models for the Voyager booking backend
One table per catalog entity plus bookings, moderation and settings
"""

from sqlalchemy import Column, Integer, String, DateTime, Date, Boolean, Text, ForeignKey, Index, JSON, Numeric, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import enum

from .database import Base


def utcnow():
    return datetime.now(timezone.utc)


def enum_column(enum_cls):
    """Store enum values ("In Progress") rather than member names."""
    return SQLEnum(
        enum_cls,
        values_callable=lambda members: [member.value for member in members],
        native_enum=False,
        length=50,
    )


# Enums
class BookingStatus(str, enum.Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"

class PaymentMethod(str, enum.Enum):
    STRIPE = "stripe"
    SAVED_CARD = "saved_card"
    PAYPAL = "paypal"
    BANK_TRANSFER = "bank_transfer"

class PaymentStatus(str, enum.Enum):
    UNPAID = "unpaid"
    PAID = "paid"
    REFUNDED = "refunded"

class PaymentProvider(str, enum.Enum):
    STRIPE = "stripe"
    PAYPAL = "paypal"
    BANK_TRANSFER = "bank_transfer"

class ReviewItemType(str, enum.Enum):
    TRIP = "trip"
    HOTEL = "hotel"
    CAR = "car"
    OFFER = "offer"

class ReviewStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

class TicketStatus(str, enum.Enum):
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    CLOSED = "Closed"

class TicketPriority(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

class ReplySender(str, enum.Enum):
    USER = "user"
    SUPPORT = "support"

class SubscriberStatus(str, enum.Enum):
    ACTIVE = "active"
    UNSUBSCRIBED = "unsubscribed"


# Models
class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    username = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(50), default="user", nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)

class Trip(Base):
    __tablename__ = "trips"

    id = Column(String(36), primary_key=True)
    title = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    image = Column(Text, nullable=False)
    gallery = Column(JSON, default=list)
    price = Column(String(50), nullable=False)  # display string, e.g. "$3,200"
    rating = Column(Numeric(2, 1, asdecimal=False), nullable=False)
    duration = Column(String(50), nullable=False)
    category = Column(String(100), nullable=False)
    features = Column(JSON, nullable=False, default=list)
    meta_description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)

class Hotel(Base):
    __tablename__ = "hotels"

    id = Column(String(36), primary_key=True)
    title = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    image = Column(Text, nullable=False)
    gallery = Column(JSON, default=list)
    price = Column(String(50), nullable=False)
    rating = Column(Numeric(2, 1, asdecimal=False), nullable=False)
    amenities = Column(JSON, nullable=False, default=list)
    stars = Column(Integer, default=5, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)

    # Availability
    always_available = Column(Boolean, default=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    available_from = Column(Date, nullable=True)
    available_to = Column(Date, nullable=True)

    meta_description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    # Relationships
    room_types = relationship(
        "RoomType",
        back_populates="hotel",
        cascade="all, delete-orphan",
        order_by="RoomType.position",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_hotels_active_sort", "is_active", "sort_order"),
    )

class RoomType(Base):
    __tablename__ = "room_types"

    id = Column(String(36), primary_key=True)
    hotel_id = Column(String(36), ForeignKey("hotels.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    price = Column(String(50), nullable=False)
    description = Column(Text, nullable=True)
    facilities = Column(JSON, nullable=False, default=list)
    position = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)

    hotel = relationship("Hotel", back_populates="room_types")

class Car(Base):
    __tablename__ = "cars"

    id = Column(String(36), primary_key=True)
    title = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    image = Column(Text, nullable=False)
    gallery = Column(JSON, default=list)
    price = Column(String(50), nullable=False)
    rating = Column(Numeric(2, 1, asdecimal=False), nullable=False)
    specs = Column(String(255), nullable=False)
    features = Column(JSON, nullable=False, default=list)
    meta_description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)

class LastMinuteOffer(Base):
    __tablename__ = "last_minute_offers"

    id = Column(String(36), primary_key=True)
    title = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    image = Column(Text, nullable=False)
    gallery = Column(JSON, default=list)
    price = Column(String(50), nullable=False)
    original_price = Column(String(50), nullable=False)
    rating = Column(Numeric(2, 1, asdecimal=False), nullable=False)
    ends_in = Column(String(50), nullable=False)
    discount = Column(String(50), nullable=False)
    meta_description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)

class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True)
    customer = Column(String(255), nullable=False)
    item = Column(String(255), nullable=False)  # denormalized title
    date = Column(Date, nullable=False)
    status = Column(enum_column(BookingStatus), default=BookingStatus.PENDING, nullable=False)
    amount = Column(String(50), nullable=False)

    # Payment
    payment_method = Column(enum_column(PaymentMethod), nullable=True)
    payment_status = Column(enum_column(PaymentStatus), nullable=True)
    payment_intent_id = Column(String(255), nullable=True, unique=True, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        Index("idx_bookings_status_created", "status", "created_at"),
    )

class Review(Base):
    __tablename__ = "reviews"

    id = Column(String(36), primary_key=True)
    item_id = Column(String(255), nullable=False)
    item_type = Column(enum_column(ReviewItemType), nullable=False)
    item_title = Column(String(255), nullable=False)
    user_name = Column(String(255), nullable=False)
    user_email = Column(String(255), nullable=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False)
    status = Column(enum_column(ReviewStatus), default=ReviewStatus.PENDING, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        Index("idx_reviews_item", "item_type", "item_id", "status"),
    )

class SupportTicket(Base):
    __tablename__ = "support_tickets"

    id = Column(String(36), primary_key=True)
    user_name = Column(String(255), nullable=True)
    user_email = Column(String(255), nullable=False, index=True)
    subject = Column(String(255), nullable=False)
    message = Column(Text, nullable=True)
    status = Column(enum_column(TicketStatus), default=TicketStatus.OPEN, nullable=False)
    priority = Column(enum_column(TicketPriority), default=TicketPriority.MEDIUM, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)

    # Relationships
    replies = relationship(
        "TicketReply",
        back_populates="ticket",
        cascade="all, delete-orphan",
        order_by="TicketReply.created_at",
        lazy="selectin",
    )

class TicketReply(Base):
    __tablename__ = "ticket_replies"

    id = Column(String(36), primary_key=True)
    ticket_id = Column(String(36), ForeignKey("support_tickets.id", ondelete="CASCADE"), nullable=False, index=True)
    sender = Column(enum_column(ReplySender), nullable=False)
    message = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)

    ticket = relationship("SupportTicket", back_populates="replies")

class PaymentSettings(Base):
    __tablename__ = "payment_settings"

    id = Column(String(36), primary_key=True)
    provider = Column(String(50), unique=True, nullable=False)
    enabled = Column(Boolean, default=False, nullable=False)
    secret_key = Column(Text, nullable=True)
    publishable_key = Column(Text, nullable=True)
    webhook_secret = Column(Text, nullable=True)
    additional_config = Column(JSON, nullable=True)  # bank transfer details live here

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

class Subscriber(Base):
    __tablename__ = "subscribers"

    id = Column(String(36), primary_key=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=True)
    status = Column(enum_column(SubscriberStatus), default=SubscriberStatus.ACTIVE, nullable=False)

    subscribed_at = Column(DateTime(timezone=True), default=utcnow)

class EmailTemplate(Base):
    __tablename__ = "email_templates"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    subject = Column(String(500), nullable=False)
    body = Column(Text, nullable=False)
    variables = Column(JSON, default=list)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

class EmailSettings(Base):
    __tablename__ = "email_settings"

    id = Column(String(36), primary_key=True)
    enabled = Column(Boolean, default=False, nullable=False)
    host = Column(String(255), nullable=True)
    port = Column(Integer, nullable=True)
    secure = Column(Boolean, default=False, nullable=False)
    username = Column(String(255), nullable=True)
    password = Column(Text, nullable=True)
    from_email = Column(String(255), nullable=True)
    from_name = Column(String(255), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

class SiteSettings(Base):
    __tablename__ = "site_settings"

    id = Column(String(36), primary_key=True)
    site_name = Column(String(255), default="Voyager Hub", nullable=False)
    logo_url = Column(Text, nullable=True)
    tagline = Column(String(255), nullable=True)

    # Contact
    contact_email = Column(String(255), nullable=True)
    contact_phone = Column(String(50), nullable=True)
    contact_address = Column(Text, nullable=True)
    whatsapp_number = Column(String(50), nullable=True)

    # Social
    facebook_url = Column(String(500), nullable=True)
    instagram_url = Column(String(500), nullable=True)
    twitter_url = Column(String(500), nullable=True)
    linkedin_url = Column(String(500), nullable=True)
    youtube_url = Column(String(500), nullable=True)

    default_currency = Column(String(3), default="EUR", nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
