"""
Bookings API and the bookings summary report.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

import stripe

from ...database import get_session
from ...storage import DatabaseStorage
from ...schemas import Booking, BookingCreate, BookingUpdate
from ...services.bookings import BookingService
from ...services.reports import bookings_summary_csv

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Bookings"])


@router.get("/bookings", response_model=List[Booking])
async def list_bookings(session: AsyncSession = Depends(get_session)):
    return await DatabaseStorage(session).get_bookings()


@router.get("/bookings/{booking_id}", response_model=Booking)
async def get_booking(booking_id: str, session: AsyncSession = Depends(get_session)):
    booking = await DatabaseStorage(session).get_booking_by_id(booking_id)
    if not booking:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    return booking


@router.post("/bookings", response_model=Booking, status_code=status.HTTP_201_CREATED)
async def create_booking(booking: BookingCreate, session: AsyncSession = Depends(get_session)):
    """
    Create a booking.

    Card bookings submitted as Confirmed must carry the id of a succeeded
    payment intent. PayPal and bank-transfer bookings are always stored as
    Pending.
    """
    try:
        service = BookingService(DatabaseStorage(session))
        return await service.create_booking(booking.model_dump())

    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except stripe.StripeError as e:
        logger.error(f"Stripe error verifying payment for booking: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error creating booking: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create booking"
        )


@router.put("/bookings/{booking_id}", response_model=Booking)
async def update_booking(booking_id: str, booking: BookingUpdate, session: AsyncSession = Depends(get_session)):
    try:
        updated = await DatabaseStorage(session).update_booking(booking_id, booking.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    logger.info(f"Booking {booking_id} updated (status={updated['status']})")
    return updated


@router.delete("/bookings/{booking_id}")
async def delete_booking(booking_id: str, session: AsyncSession = Depends(get_session)):
    if not await DatabaseStorage(session).delete_booking(booking_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    return {"success": True}


@router.get("/reports/bookings.csv")
async def download_bookings_report(session: AsyncSession = Depends(get_session)):
    """Bookings counted and totalled per status and payment method, as CSV."""
    bookings = await DatabaseStorage(session).get_bookings()
    return Response(
        content=bookings_summary_csv(bookings),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=bookings_summary.csv"}
    )
