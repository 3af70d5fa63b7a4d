"""
Example landlord application.

Run with:
    uvicorn example.app:app --port 3000

then browse http://localhost:3000/landlord/ or http://127.0.0.1:3000/users/.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from landlord import Landlord, load_routers, print_routes
from landlord.config import configure_logging, load_settings

from .mock_db_client import MockDBClient

BASE_DIR = Path(__file__).parent

settings = load_settings(BASE_DIR / "settings.yaml")
if settings.tenant_cwd is None:
    settings.tenant_cwd = str(BASE_DIR)

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

landlord = Landlord.from_settings(
    settings,
    db_factory=MockDBClient,
    db_finalizer=lambda client: client.close(),
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    print_routes(app)
    yield
    # Close tenant databases before exiting
    failures = landlord.cleanup()
    if failures:
        logger.error(f"Failed to close databases for: {', '.join(failures)}")


app = FastAPI(title="Landlord example", lifespan=lifespan)

# Tenants must be bound before any route runs
landlord.install(app)

app.include_router(load_routers("**/*routes*.py", {"cwd": str(BASE_DIR / "modules")}))
