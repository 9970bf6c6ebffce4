import logging
import os

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import awards  # noqa: F401  subscribes the medal handlers to match events
from .database import SessionLocal, init_db
from .errors import StoreError
from .models import Faculty
from .routes import competitions, faculties, matches, medals

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Faculty Games Scoreboard API",
    version="1.0.0",
    description=(
        "Live scores, schedules and the derived gold/silver/bronze medal tally "
        "for an inter-faculty sports and arts competition."
    ),
)

cors_origins = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://127.0.0.1:3000",
)
allow_origins = [origin.strip() for origin in cors_origins.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

init_db()


def should_auto_seed() -> bool:
    value = os.getenv("AUTO_SEED_ON_EMPTY", "true").strip().lower()
    return value in {"1", "true", "yes", "on"}


def seed_if_empty() -> None:
    if not should_auto_seed():
        return

    db = SessionLocal()
    try:
        has_faculties = db.query(Faculty.id).first() is not None
    finally:
        db.close()

    if has_faculties:
        return

    from seed import seed

    logger.info("Empty database; loading default faculties and competitions")
    seed(demo_progress=False)


seed_if_empty()


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": str(exc)},
    )


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(faculties.router, prefix="/faculties")
app.include_router(competitions.router, prefix="/competitions")
app.include_router(matches.router, prefix="/matches")
app.include_router(medals.router, prefix="/medals")
