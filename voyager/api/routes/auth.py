"""
User registration and login.
Login checks credentials and returns the user record; there are no sessions or tokens.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from ...database import get_session
from ...storage import DatabaseStorage
from ...ratelimit import RateLimit
from ...schemas import User, UserCreate, LoginRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
async def register(body: UserCreate, session: AsyncSession = Depends(get_session)):
    try:
        return await DatabaseStorage(session).create_user(body.username, body.password)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.post("/login", response_model=User, dependencies=[Depends(RateLimit(limit=10, window=60))])
async def login(body: LoginRequest, session: AsyncSession = Depends(get_session)):
    user = await DatabaseStorage(session).verify_user(body.username, body.password)
    if not user:
        logger.warning(f"Failed login for {body.username}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")
    return user
