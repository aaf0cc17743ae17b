from fastapi import FastAPI, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from dotenv import load_dotenv
import os
import logging

from .database import get_session, init_db, close_db
from .ratelimit import rate_limiter, rate_limit_enabled
from .integrations.stripe_gateway import payments_dry_run
from .api.routes import catalog, bookings, reviews, tickets, subscribers, settings, payments, auth

# Load environment variables
load_dotenv()

VERSION = "1.0.0"

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Voyager Luxury Booking API", version=VERSION)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=os.environ.get('CORS_ORIGINS', '*').split(','),
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
for module in (catalog, bookings, reviews, tickets, subscribers, settings, payments, auth):
    app.include_router(module.router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Startup and shutdown events
@app.on_event("startup")
async def startup():
    await init_db()
    logger.info(f"🚀 Voyager API {VERSION} started (payments dry run: {payments_dry_run()})")


@app.on_event("shutdown")
async def shutdown():
    await close_db()
    await rate_limiter.close()
    logger.info("Database and Redis disconnected")


@app.get("/api/health")
async def health_check(session: AsyncSession = Depends(get_session)):
    try:
        await session.execute(text("SELECT 1"))
        database_status = "ok"
    except Exception as e:
        logger.error(f"Health check database error: {e}")
        database_status = "error"

    return {
        "status": "ok" if database_status == "ok" else "degraded",
        "version": VERSION,
        "database": database_status,
        "features": {
            "payments_dry_run": payments_dry_run(),
            "rate_limiting": rate_limit_enabled(),
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("voyager.server:app", host="0.0.0.0", port=int(os.environ.get("PORT", 8000)))
