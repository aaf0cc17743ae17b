"""
Support tickets API.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import logging

from ...database import get_session
from ...storage import DatabaseStorage
from ...schemas import Ticket, TicketCreate, TicketStatusUpdate, TicketReply, TicketReplyCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Support"])


@router.get("/tickets", response_model=List[Ticket])
async def list_tickets(
    email: Optional[str] = Query(None, description="Only tickets opened by this email"),
    session: AsyncSession = Depends(get_session)
):
    storage = DatabaseStorage(session)
    if email:
        return await storage.get_tickets_by_user(email)
    return await storage.get_tickets()


@router.get("/tickets/{ticket_id}", response_model=Ticket)
async def get_ticket(ticket_id: str, session: AsyncSession = Depends(get_session)):
    ticket = await DatabaseStorage(session).get_ticket_by_id(ticket_id)
    if not ticket:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ticket not found")
    return ticket


@router.post("/tickets", response_model=Ticket, status_code=status.HTTP_201_CREATED)
async def create_ticket(ticket: TicketCreate, session: AsyncSession = Depends(get_session)):
    return await DatabaseStorage(session).create_ticket(ticket.model_dump())


@router.patch("/tickets/{ticket_id}/status", response_model=Ticket)
async def update_ticket_status(ticket_id: str, body: TicketStatusUpdate, session: AsyncSession = Depends(get_session)):
    ticket = await DatabaseStorage(session).update_ticket_status(ticket_id, body.status)
    if not ticket:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ticket not found")
    return ticket


@router.post("/tickets/{ticket_id}/replies", response_model=TicketReply, status_code=status.HTTP_201_CREATED)
async def add_ticket_reply(ticket_id: str, reply: TicketReplyCreate, session: AsyncSession = Depends(get_session)):
    created = await DatabaseStorage(session).add_ticket_reply(ticket_id, reply.model_dump())
    if not created:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ticket not found")
    return created


@router.delete("/tickets/{ticket_id}")
async def delete_ticket(ticket_id: str, session: AsyncSession = Depends(get_session)):
    if not await DatabaseStorage(session).delete_ticket(ticket_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ticket not found")
    return {"success": True}
