import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from niftyboard import config
from niftyboard.routers import alphavantage_router, finnhub_router, stocks_router
from niftyboard.services.http_client import http_client
from niftyboard.utils.cache import cache

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
)
logger = logging.getLogger("niftyboard")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("niftyboard backend starting")
    yield
    # Shared aiohttp session outlives individual requests
    await http_client.close()
    cache.clear()


# Initialize FastAPI app
app = FastAPI(
    title="niftyboard",
    version="1.0",
    description=(
        "niftyboard: quotes, candles and chart series for Indian equities "
        "with multi-provider fallbacks down to synthetic data."
    ),
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(stocks_router.router, prefix="/stocks", tags=["Indian Stocks"])
app.include_router(finnhub_router.router, prefix="/finnhub", tags=["Finnhub"])
app.include_router(alphavantage_router.router, prefix="/alphavantage", tags=["Alpha Vantage"])


# Root endpoint
@app.get("/")
async def root():
    return {"message": "niftyboard backend is running successfully!"}


# Health check endpoint
@app.get("/health", tags=["System"])
async def health_check():
    return {"status": "healthy"}
