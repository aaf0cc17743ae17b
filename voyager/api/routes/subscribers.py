"""
Newsletter subscribers API.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from ...database import get_session
from ...storage import DatabaseStorage
from ...ratelimit import RateLimit
from ...schemas import Subscriber, SubscriberCreate, UnsubscribeRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Subscribers"])


@router.get("/subscribers", response_model=List[Subscriber])
async def list_subscribers(session: AsyncSession = Depends(get_session)):
    return await DatabaseStorage(session).get_subscribers()


@router.post(
    "/subscribers",
    response_model=Subscriber,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(RateLimit(limit=5, window=60))]
)
async def subscribe(body: SubscriberCreate, session: AsyncSession = Depends(get_session)):
    """Subscribe an email. Subscribing a known email returns (and re-activates) it."""
    return await DatabaseStorage(session).create_subscriber(body.model_dump())


@router.post("/subscribers/unsubscribe")
async def unsubscribe(body: UnsubscribeRequest, session: AsyncSession = Depends(get_session)):
    """Idempotent: unknown or already unsubscribed emails report unsubscribed=false."""
    changed = await DatabaseStorage(session).unsubscribe_subscriber(body.email)
    return {"email": body.email, "unsubscribed": changed}


@router.delete("/subscribers/{subscriber_id}")
async def delete_subscriber(subscriber_id: str, session: AsyncSession = Depends(get_session)):
    if not await DatabaseStorage(session).delete_subscriber(subscriber_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subscriber not found")
    return {"success": True}
