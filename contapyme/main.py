from contextlib import asynccontextmanager
from datetime import datetime
import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi

from contapyme import config
from contapyme.database import Base, SessionLocal, engine
import contapyme.models  # noqa: F401  registers every table on Base.metadata
import contapyme.auth as auth
import contapyme.routers.centralized_config as centralized_config
import contapyme.routers.chart_of_accounts as chart_of_accounts
import contapyme.routers.companies as companies
import contapyme.routers.debug as debug
import contapyme.routers.external_sii as external_sii
import contapyme.routers.fixed_assets as fixed_assets
import contapyme.routers.indicators as indicators
import contapyme.routers.journal_entry as journal_entry
import contapyme.routers.payroll as payroll
from contapyme.crud import fixed_assets as fixed_assets_crud
from contapyme.crud import indicators as indicators_crud
from contapyme.utils.responses import add_exception_handlers

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

if config.LOG_TO_FILE:
    os.makedirs(config.LOG_DIR, exist_ok=True)  # Create the logs directory if it doesn't exist

    # Create a unique log file name based on current date/time
    current_time_str = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    LOG_FILE = os.path.join(config.LOG_DIR, f"app_{current_time_str}.log")

    # Configure the root logger
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format=LOG_FORMAT,
        filename=LOG_FILE,
        filemode='a'
    )

    # Also add a StreamHandler to output logs to the console
    # This allows you to see logs in both the file and the terminal
    console_handler = logging.StreamHandler()
    console_handler.setLevel(config.LOG_LEVEL)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(console_handler)
else:
    logging.basicConfig(level=config.LOG_LEVEL, format=LOG_FORMAT)

logger = logging.getLogger(__name__)
logger.info("Application starting up...")
# --- End Logging Configuration ---


def init_database():
    """Create missing tables and seed the reference data every instance needs."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        fixed_assets_crud.seed_default_categories(db)
        indicators_crud.ensure_indicator_config(db)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    config.log_configuration_status()
    init_database()

    scheduler = None
    if config.SCHEDULER_ENABLED:
        from contapyme.scheduler import scheduler
        scheduler.start()
        logger.info("Indicator refresh scheduler started")
    yield
    if scheduler is not None:
        scheduler.shutdown(wait=False)


app = FastAPI(lifespan=lifespan)

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title="ContaPyme API",
        version="1.0.0",
        description="Accounting API for Chilean small and medium businesses",
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "CookieAuth": {
            "type": "apiKey",
            "in": "cookie",
            "name": auth.ACCESS_COOKIE,
        }
    }
    # Apply security globally to all endpoints
    openapi_schema["security"] = [{"CookieAuth": []}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi

add_exception_handlers(app)

app.include_router(auth.router)
app.include_router(companies.router)
app.include_router(chart_of_accounts.router)
app.include_router(journal_entry.router)
app.include_router(centralized_config.router)
app.include_router(debug.router)
app.include_router(debug.database_router)
app.include_router(external_sii.router)
app.include_router(fixed_assets.router)
app.include_router(indicators.router)
app.include_router(payroll.router)


@app.get("/")
async def root():
    return {"message": "ContaPyme API"}
