# studyplan/main.py
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from studyplan.core.config import settings
from studyplan.models.db import engine, SessionLocal, Base
from studyplan.models import entities  # noqa: F401  Ensure models are registered
from studyplan.utils.seed import bootstrap_demo_data, ensure_demo_user
from studyplan.routers import analytics, flashcards, goals, schedule, time_slots

logging.basicConfig(
    level=settings.LOG_LEVEL_VALUE,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME)

# --------------------------- CORS ---------------------------
# Falls back to "*" for local dev when no origins are configured
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --------------------------- DB init ---------------------------

def _init_db() -> None:
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        if settings.SEED_DEMO_DATA:
            bootstrap_demo_data(db)
        else:
            ensure_demo_user(db)
    log.info("[DB] ready (%s)", "sqlite" if settings.DB_IS_SQLITE else "external")


_init_db()

# --------------------------- Errors ---------------------------

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request data", "errors": jsonable_encoder(exc.errors())},
    )

# --------------------------- Routers ---------------------------
app.include_router(time_slots.router)
app.include_router(flashcards.router)
app.include_router(goals.router)
app.include_router(schedule.router)
app.include_router(analytics.router)


# --------------------------- Root & Health ---------------------------
@app.get("/")
def root():
    # Quick redirect to interactive docs
    return RedirectResponse(url="/docs")


@app.get("/healthz")
def health():
    return {"ok": True, "app": settings.APP_NAME}
