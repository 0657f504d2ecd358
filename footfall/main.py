import logging
import time
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import OperationalError
import footfall.database
from footfall.config import CORS_ORIGINS, DB_CONNECT_RETRIES, DB_CONNECT_RETRY_DELAY
from footfall.routes import footfall as footfall_routes
from footfall.routes import pages as pages_routes

# pylint: disable=redefined-outer-name,unused-argument

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting footfall dashboard...")

    for attempt in range(DB_CONNECT_RETRIES):
        try:
            with footfall.database.engine.connect():
                logger.info("Database connection established.")
                break
        except OperationalError as e:
            logger.warning(f"Could not connect to the database: {e}")
            if attempt < DB_CONNECT_RETRIES - 1:
                logger.warning(f"Retrying in {DB_CONNECT_RETRY_DELAY} seconds...")
                time.sleep(DB_CONNECT_RETRY_DELAY)
            else:
                logger.error("Giving up on the database after several attempts.")
                raise

    yield
    logger.info("Footfall dashboard stopped.")

app = FastAPI(
    title="Footfall Dashboard API",
    description="Live retail footfall analytics: hourly, daily and lifetime visitor counts.",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(footfall_routes.router, prefix="/api")
app.include_router(pages_routes.router)

@app.get("/health", tags=["Health Check"])
def health_check():
    """
    Reports whether the application is up.
    """
    return {"status": "ok"}
