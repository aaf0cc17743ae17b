"""
Reviews API with moderation.

New reviews are always stored as pending; only PATCH /reviews/{id}/status
moves them to approved or rejected. Public item pages read approved reviews.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from ...database import get_session
from ...storage import DatabaseStorage
from ...ratelimit import RateLimit
from ...schemas import Review, ReviewCreate, ReviewUpdate, ReviewStatusUpdate
from ...models import ReviewItemType

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Reviews"])


@router.get("/reviews", response_model=List[Review])
async def list_reviews(session: AsyncSession = Depends(get_session)):
    return await DatabaseStorage(session).get_reviews()


@router.get("/reviews/item/{item_type}/{item_id}", response_model=List[Review])
async def list_item_reviews(
    item_type: ReviewItemType,
    item_id: str,
    include_all: bool = Query(False, alias="all", description="Include pending and rejected reviews"),
    session: AsyncSession = Depends(get_session)
):
    storage = DatabaseStorage(session)
    if include_all:
        return await storage.get_reviews_by_item(item_id, item_type)
    return await storage.get_approved_reviews_by_item(item_id, item_type)


@router.post(
    "/reviews",
    response_model=Review,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(RateLimit(limit=5, window=60))]
)
async def create_review(review: ReviewCreate, session: AsyncSession = Depends(get_session)):
    try:
        return await DatabaseStorage(session).create_review(review.model_dump())

    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error creating review: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create review"
        )


@router.put("/reviews/{review_id}", response_model=Review)
async def update_review(review_id: str, review: ReviewUpdate, session: AsyncSession = Depends(get_session)):
    updated = await DatabaseStorage(session).update_review(review_id, review.model_dump(exclude_unset=True))
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Review not found")
    return updated


@router.patch("/reviews/{review_id}/status", response_model=Review)
async def moderate_review(review_id: str, body: ReviewStatusUpdate, session: AsyncSession = Depends(get_session)):
    updated = await DatabaseStorage(session).update_review_status(review_id, body.status)
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Review not found")
    return updated


@router.delete("/reviews/{review_id}")
async def delete_review(review_id: str, session: AsyncSession = Depends(get_session)):
    if not await DatabaseStorage(session).delete_review(review_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Review not found")
    return {"success": True}
