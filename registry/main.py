import logging
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import Session, func, select

from registry.config import CORS_ORIGINS
from registry.db.db import create_db_and_tables, get_session
from registry.models.item import Item
from registry.models.user import User
from registry.routers import admin, auth, chats, items, profile
from registry.services.errors import RegistryError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up...")
    try:
        create_db_and_tables()
    except Exception:
        logger.exception("Cannot connect to DB")
        raise
    yield
    logger.info("Shutting down...")

app = FastAPI(title="Campus Lost & Found Registry", lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RegistryError)
async def registry_error_handler(request: Request, exc: RegistryError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Register routers
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(profile.router, prefix="/profile", tags=["Profile"])
app.include_router(items.router, prefix="/items", tags=["Items"])
app.include_router(chats.router, prefix="/chats", tags=["Chats"])
app.include_router(admin.router, prefix="/admin", tags=["Admin"])


@app.get("/")
def root():
    return {"status": "ok"}


@app.get("/health")
def health(session: Session = Depends(get_session)):
    try:
        users = session.exec(select(func.count(User.id))).one()
        items_count = session.exec(select(func.count(Item.id))).one()
    except Exception:
        logger.exception("Health check query failed")
        return JSONResponse(status_code=503, content={"status": "degraded", "database": "disconnected"})

    return {
        "status": "active",
        "database": "connected",
        "stats": {"users": users, "items": items_count},
    }
