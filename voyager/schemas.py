"""
Pydantic request/response models
Field names are camelCase to match the JSON the web client sends
"""

from pydantic import BaseModel, Field, EmailStr, AliasChoices
import datetime
from typing import List, Optional, Dict, Any

from .models import (
    BookingStatus, PaymentMethod, PaymentStatus, PaymentProvider,
    ReviewItemType, ReviewStatus, TicketStatus, TicketPriority,
    ReplySender, SubscriberStatus,
)


# Catalog
class TripCreate(BaseModel):
    title: str
    location: str
    image: str
    gallery: List[str] = []
    price: str
    rating: float = Field(..., ge=0, le=5)
    duration: str
    category: str
    features: List[str] = []
    metaDescription: Optional[str] = None

class TripUpdate(BaseModel):
    title: Optional[str] = None
    location: Optional[str] = None
    image: Optional[str] = None
    gallery: Optional[List[str]] = None
    price: Optional[str] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    duration: Optional[str] = None
    category: Optional[str] = None
    features: Optional[List[str]] = None
    metaDescription: Optional[str] = None

class Trip(TripCreate):
    id: str
    createdAt: Optional[str] = None


class RoomTypeIn(BaseModel):
    id: Optional[str] = None
    name: str
    price: str
    description: str = ""
    facilities: List[str] = []

class RoomType(RoomTypeIn):
    id: str

class HotelCreate(BaseModel):
    title: str
    location: str
    image: str
    gallery: List[str] = []
    price: str
    rating: float = Field(..., ge=0, le=5)
    amenities: List[str] = []
    stars: int = Field(5, ge=1, le=5)
    sortOrder: int = 0
    alwaysAvailable: bool = True
    isActive: bool = True
    availableFrom: Optional[datetime.date] = None
    availableTo: Optional[datetime.date] = None
    metaDescription: Optional[str] = None
    roomTypes: List[RoomTypeIn] = []

class HotelUpdate(BaseModel):
    title: Optional[str] = None
    location: Optional[str] = None
    image: Optional[str] = None
    gallery: Optional[List[str]] = None
    price: Optional[str] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    amenities: Optional[List[str]] = None
    stars: Optional[int] = Field(None, ge=1, le=5)
    sortOrder: Optional[int] = None
    alwaysAvailable: Optional[bool] = None
    isActive: Optional[bool] = None
    availableFrom: Optional[datetime.date] = None
    availableTo: Optional[datetime.date] = None
    metaDescription: Optional[str] = None
    roomTypes: Optional[List[RoomTypeIn]] = None

class Hotel(HotelCreate):
    id: str
    createdAt: Optional[str] = None
    roomTypes: List[RoomType] = []


class CarCreate(BaseModel):
    title: str
    location: str
    image: str
    gallery: List[str] = []
    price: str
    rating: float = Field(..., ge=0, le=5)
    specs: str
    features: List[str] = []
    metaDescription: Optional[str] = None

class CarUpdate(BaseModel):
    title: Optional[str] = None
    location: Optional[str] = None
    image: Optional[str] = None
    gallery: Optional[List[str]] = None
    price: Optional[str] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    specs: Optional[str] = None
    features: Optional[List[str]] = None
    metaDescription: Optional[str] = None

class Car(CarCreate):
    id: str
    createdAt: Optional[str] = None


class OfferCreate(BaseModel):
    title: str
    location: str
    image: str
    gallery: List[str] = []
    price: str
    originalPrice: str
    rating: float = Field(..., ge=0, le=5)
    endsIn: str
    discount: str
    metaDescription: Optional[str] = None

class OfferUpdate(BaseModel):
    title: Optional[str] = None
    location: Optional[str] = None
    image: Optional[str] = None
    gallery: Optional[List[str]] = None
    price: Optional[str] = None
    originalPrice: Optional[str] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    endsIn: Optional[str] = None
    discount: Optional[str] = None
    metaDescription: Optional[str] = None

class Offer(OfferCreate):
    id: str
    createdAt: Optional[str] = None


# Bookings
class BookingCreate(BaseModel):
    customer: str
    item: str
    date: datetime.date
    amount: str
    status: BookingStatus = BookingStatus.PENDING
    paymentMethod: Optional[PaymentMethod] = Field(
        None, validation_alias=AliasChoices("paymentMethod", "payment_method")
    )
    paymentStatus: Optional[PaymentStatus] = None
    paymentIntentId: Optional[str] = Field(
        None, validation_alias=AliasChoices("paymentIntentId", "payment_intent_id")
    )

class BookingUpdate(BaseModel):
    customer: Optional[str] = None
    item: Optional[str] = None
    date: Optional[datetime.date] = None
    amount: Optional[str] = None
    status: Optional[BookingStatus] = None
    paymentMethod: Optional[PaymentMethod] = None
    paymentStatus: Optional[PaymentStatus] = None
    paymentIntentId: Optional[str] = None

class Booking(BaseModel):
    id: str
    customer: str
    item: str
    date: str
    amount: str
    status: BookingStatus
    paymentMethod: Optional[PaymentMethod] = None
    paymentStatus: Optional[PaymentStatus] = None
    paymentIntentId: Optional[str] = None
    createdAt: Optional[str] = None


# Reviews
class ReviewCreate(BaseModel):
    itemId: str
    itemType: ReviewItemType
    itemTitle: Optional[str] = None
    userName: str = Field(..., min_length=1)
    userEmail: Optional[EmailStr] = None
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(..., min_length=1)

class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = None

class ReviewStatusUpdate(BaseModel):
    status: ReviewStatus

class Review(BaseModel):
    id: str
    itemId: str
    itemType: ReviewItemType
    itemTitle: str
    userName: str
    userEmail: Optional[str] = None
    rating: int
    comment: str
    status: ReviewStatus
    createdAt: Optional[str] = None


# Support tickets
class TicketReplyCreate(BaseModel):
    sender: ReplySender = ReplySender.USER
    message: str = Field(..., min_length=1)

class TicketReply(BaseModel):
    id: str
    sender: ReplySender
    message: str
    date: Optional[str] = None

class TicketCreate(BaseModel):
    userName: Optional[str] = None
    userEmail: EmailStr
    subject: str = Field(..., min_length=1)
    message: Optional[str] = None
    priority: TicketPriority = TicketPriority.MEDIUM

class TicketStatusUpdate(BaseModel):
    status: TicketStatus

class Ticket(BaseModel):
    id: str
    userName: Optional[str] = None
    userEmail: str
    subject: str
    message: Optional[str] = None
    status: TicketStatus
    priority: TicketPriority
    date: Optional[str] = None
    replies: List[TicketReply] = []


# Subscribers
class SubscriberCreate(BaseModel):
    email: EmailStr
    name: Optional[str] = None

class UnsubscribeRequest(BaseModel):
    email: EmailStr

class Subscriber(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    status: SubscriberStatus
    subscribedAt: Optional[str] = None


# Email
class EmailTemplateCreate(BaseModel):
    name: str
    subject: str
    body: str
    variables: List[str] = []

class EmailTemplateUpdate(BaseModel):
    name: Optional[str] = None
    subject: Optional[str] = None
    body: Optional[str] = None
    variables: Optional[List[str]] = None

class EmailTemplate(EmailTemplateCreate):
    id: str
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

class EmailTemplatePreview(BaseModel):
    values: Dict[str, str] = {}

class EmailSettingsUpdate(BaseModel):
    enabled: Optional[bool] = None
    host: Optional[str] = None
    port: Optional[int] = Field(None, ge=1, le=65535)
    secure: Optional[bool] = None
    username: Optional[str] = None
    password: Optional[str] = None
    fromEmail: Optional[str] = None
    fromName: Optional[str] = None

class EmailSettings(BaseModel):
    id: str
    enabled: bool = False
    host: Optional[str] = None
    port: Optional[int] = None
    secure: bool = False
    username: Optional[str] = None
    hasPassword: bool = False
    fromEmail: Optional[str] = None
    fromName: Optional[str] = None


# Site settings
class SiteSettingsUpdate(BaseModel):
    siteName: Optional[str] = None
    logoUrl: Optional[str] = None
    tagline: Optional[str] = None
    contactEmail: Optional[str] = None
    contactPhone: Optional[str] = None
    contactAddress: Optional[str] = None
    whatsappNumber: Optional[str] = None
    facebookUrl: Optional[str] = None
    instagramUrl: Optional[str] = None
    twitterUrl: Optional[str] = None
    linkedinUrl: Optional[str] = None
    youtubeUrl: Optional[str] = None
    defaultCurrency: Optional[str] = Field(None, min_length=3, max_length=3)

class SiteSettings(BaseModel):
    siteName: str = "Voyager Hub"
    logoUrl: Optional[str] = None
    tagline: Optional[str] = None
    contactEmail: Optional[str] = None
    contactPhone: Optional[str] = None
    contactAddress: Optional[str] = None
    whatsappNumber: Optional[str] = None
    facebookUrl: Optional[str] = None
    instagramUrl: Optional[str] = None
    twitterUrl: Optional[str] = None
    linkedinUrl: Optional[str] = None
    youtubeUrl: Optional[str] = None
    defaultCurrency: str = "EUR"
    updatedAt: Optional[str] = None


# Payments
class PaymentSettingsUpdate(BaseModel):
    enabled: Optional[bool] = None
    secretKey: Optional[str] = None
    publishableKey: Optional[str] = None
    webhookSecret: Optional[str] = None
    additionalConfig: Optional[Dict[str, Any]] = None

class PaymentSettingsPublic(BaseModel):
    provider: PaymentProvider
    enabled: bool
    publishableKey: Optional[str] = None

class PaymentSettingsAdmin(PaymentSettingsPublic):
    id: str
    secretKey: Optional[str] = None  # masked
    webhookSecret: Optional[str] = None  # masked
    additionalConfig: Optional[Dict[str, Any]] = None
    updatedAt: Optional[str] = None

class PaymentOption(BaseModel):
    provider: PaymentProvider
    name: str
    bankDetails: Optional[Dict[str, Any]] = None

class PaymentIntentRequest(BaseModel):
    amount: str
    currency: str = Field("usd", min_length=3, max_length=3)
    metadata: Dict[str, str] = {}

class PaymentIntentResponse(BaseModel):
    clientSecret: str
    paymentIntentId: str
    amount: int
    currency: str

class ConfirmPaymentRequest(BaseModel):
    paymentIntentId: str = Field(
        ..., validation_alias=AliasChoices("paymentIntentId", "payment_intent_id")
    )

class ConfirmPaymentResponse(BaseModel):
    paymentIntentId: str
    status: str
    succeeded: bool


# Auth
class UserCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=8)

class LoginRequest(BaseModel):
    username: str
    password: str

class User(BaseModel):
    id: str
    username: str
    role: str
    createdAt: Optional[str] = None
