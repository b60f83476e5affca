"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from app.api.routes import router as api_router
from app.core.config import settings
from app.core.database import SessionLocal
from app.core.exceptions import register_exception_handlers
from app.services.store import Store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Warn at startup when the roles registration depends on have not been seeded."""
    db = SessionLocal()
    try:
        store = Store(db)
        missing = [
            name
            for name in (settings.BOOTSTRAP_ROLE_NAME, settings.DEFAULT_ROLE_NAME)
            if store.find_role_by_name(name) is None
        ]
        if missing:
            logger.warning(
                "Seed roles missing; run python -m app.scripts.seed",
                extra={"missing_roles": missing},
            )
    except SQLAlchemyError as e:
        logger.warning("Database unavailable at startup", extra={"reason": str(e)[:300]})
    finally:
        db.close()
    yield


app = FastAPI(
    title="Bastion Admin API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Bastion Admin API", "docs": "/docs"}
