"""
Catalog API: trips, hotels (with room types), cars and last-minute offers.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from ...database import get_session
from ...storage import DatabaseStorage
from ...schemas import (
    Trip, TripCreate, TripUpdate,
    Hotel, HotelCreate, HotelUpdate,
    Car, CarCreate, CarUpdate,
    Offer, OfferCreate, OfferUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Catalog"])


def not_found(entity: str, entity_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"{entity} {entity_id} not found"
    )


# Trips

@router.get("/trips", response_model=List[Trip])
async def list_trips(session: AsyncSession = Depends(get_session)):
    return await DatabaseStorage(session).get_trips()


@router.get("/trips/slug/{slug}", response_model=Trip)
async def get_trip_by_slug(slug: str, session: AsyncSession = Depends(get_session)):
    trip = await DatabaseStorage(session).get_trip_by_slug(slug)
    if not trip:
        raise not_found("Trip", slug)
    return trip


@router.get("/trips/{trip_id}", response_model=Trip)
async def get_trip(trip_id: str, session: AsyncSession = Depends(get_session)):
    trip = await DatabaseStorage(session).get_trip_by_id(trip_id)
    if not trip:
        raise not_found("Trip", trip_id)
    return trip


@router.post("/trips", response_model=Trip, status_code=status.HTTP_201_CREATED)
async def create_trip(trip: TripCreate, session: AsyncSession = Depends(get_session)):
    return await DatabaseStorage(session).create_trip(trip.model_dump())


@router.put("/trips/{trip_id}", response_model=Trip)
async def update_trip(trip_id: str, trip: TripUpdate, session: AsyncSession = Depends(get_session)):
    updated = await DatabaseStorage(session).update_trip(trip_id, trip.model_dump(exclude_unset=True))
    if not updated:
        raise not_found("Trip", trip_id)
    return updated


@router.delete("/trips/{trip_id}")
async def delete_trip(trip_id: str, session: AsyncSession = Depends(get_session)):
    if not await DatabaseStorage(session).delete_trip(trip_id):
        raise not_found("Trip", trip_id)
    return {"success": True}


# Hotels

@router.get("/hotels", response_model=List[Hotel])
async def list_hotels(session: AsyncSession = Depends(get_session)):
    """All hotels ordered by sortOrder, each with its room types."""
    return await DatabaseStorage(session).get_hotels()


@router.get("/hotels/slug/{slug}", response_model=Hotel)
async def get_hotel_by_slug(slug: str, session: AsyncSession = Depends(get_session)):
    hotel = await DatabaseStorage(session).get_hotel_by_slug(slug)
    if not hotel:
        raise not_found("Hotel", slug)
    return hotel


@router.get("/hotels/{hotel_id}", response_model=Hotel)
async def get_hotel(hotel_id: str, session: AsyncSession = Depends(get_session)):
    hotel = await DatabaseStorage(session).get_hotel_by_id(hotel_id)
    if not hotel:
        raise not_found("Hotel", hotel_id)
    return hotel


@router.post("/hotels", response_model=Hotel, status_code=status.HTTP_201_CREATED)
async def create_hotel(hotel: HotelCreate, session: AsyncSession = Depends(get_session)):
    return await DatabaseStorage(session).create_hotel(hotel.model_dump())


@router.put("/hotels/{hotel_id}", response_model=Hotel)
async def update_hotel(hotel_id: str, hotel: HotelUpdate, session: AsyncSession = Depends(get_session)):
    """
    Partial hotel update.

    Sending `roomTypes` replaces the hotel's rooms with exactly that list;
    omit the key to leave rooms untouched.
    """
    updated = await DatabaseStorage(session).update_hotel(hotel_id, hotel.model_dump(exclude_unset=True))
    if not updated:
        raise not_found("Hotel", hotel_id)
    return updated


@router.delete("/hotels/{hotel_id}")
async def delete_hotel(hotel_id: str, session: AsyncSession = Depends(get_session)):
    if not await DatabaseStorage(session).delete_hotel(hotel_id):
        raise not_found("Hotel", hotel_id)
    return {"success": True}


# Cars

@router.get("/cars", response_model=List[Car])
async def list_cars(session: AsyncSession = Depends(get_session)):
    return await DatabaseStorage(session).get_cars()


@router.get("/cars/slug/{slug}", response_model=Car)
async def get_car_by_slug(slug: str, session: AsyncSession = Depends(get_session)):
    car = await DatabaseStorage(session).get_car_by_slug(slug)
    if not car:
        raise not_found("Car", slug)
    return car


@router.get("/cars/{car_id}", response_model=Car)
async def get_car(car_id: str, session: AsyncSession = Depends(get_session)):
    car = await DatabaseStorage(session).get_car_by_id(car_id)
    if not car:
        raise not_found("Car", car_id)
    return car


@router.post("/cars", response_model=Car, status_code=status.HTTP_201_CREATED)
async def create_car(car: CarCreate, session: AsyncSession = Depends(get_session)):
    return await DatabaseStorage(session).create_car(car.model_dump())


@router.put("/cars/{car_id}", response_model=Car)
async def update_car(car_id: str, car: CarUpdate, session: AsyncSession = Depends(get_session)):
    updated = await DatabaseStorage(session).update_car(car_id, car.model_dump(exclude_unset=True))
    if not updated:
        raise not_found("Car", car_id)
    return updated


@router.delete("/cars/{car_id}")
async def delete_car(car_id: str, session: AsyncSession = Depends(get_session)):
    if not await DatabaseStorage(session).delete_car(car_id):
        raise not_found("Car", car_id)
    return {"success": True}


# Last-minute offers

@router.get("/offers", response_model=List[Offer])
async def list_offers(session: AsyncSession = Depends(get_session)):
    return await DatabaseStorage(session).get_last_minute_offers()


@router.get("/offers/{offer_id}", response_model=Offer)
async def get_offer(offer_id: str, session: AsyncSession = Depends(get_session)):
    offer = await DatabaseStorage(session).get_offer_by_id(offer_id)
    if not offer:
        raise not_found("Offer", offer_id)
    return offer


@router.post("/offers", response_model=Offer, status_code=status.HTTP_201_CREATED)
async def create_offer(offer: OfferCreate, session: AsyncSession = Depends(get_session)):
    return await DatabaseStorage(session).create_offer(offer.model_dump())


@router.put("/offers/{offer_id}", response_model=Offer)
async def update_offer(offer_id: str, offer: OfferUpdate, session: AsyncSession = Depends(get_session)):
    updated = await DatabaseStorage(session).update_offer(offer_id, offer.model_dump(exclude_unset=True))
    if not updated:
        raise not_found("Offer", offer_id)
    return updated


@router.delete("/offers/{offer_id}")
async def delete_offer(offer_id: str, session: AsyncSession = Depends(get_session)):
    if not await DatabaseStorage(session).delete_offer(offer_id):
        raise not_found("Offer", offer_id)
    return {"success": True}
