from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# ✅ Import All API Routes
from app.api.routes import companies, members, notifications, users, internal, billing_webhook, health
from app.core import config
from app.core.logging_config import setup_logging, sanitize_log_data

setup_logging(config.LOG_LEVEL, config.LOG_DIR)
logger = logging.getLogger(__name__)


def _startup_settings():
    return {
        "database_url": config.DATABASE_URL,
        "run_migrations": config.RUN_MIGRATIONS,
        "service_api_token": config.SERVICE_API_TOKEN,
        "stripe_webhook_secret": config.STRIPE_WEBHOOK_SECRET,
        "jobs_table_name": config.JOBS_TABLE_NAME,
        "cors_origins": config.CORS_ORIGINS,
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    if config.RUN_MIGRATIONS:
        from app.db.migrate import run_migrations
        run_migrations()
    logger.info("Job board workspace API started")
    logger.info(f"Settings: {sanitize_log_data(_startup_settings())}")
    yield


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(title="Job Board Workspace API", lifespan=lifespan)

# ✅ CORS LOCKDOWN: ONLY ALLOW THE FRONTEND
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(companies.router)
app.include_router(members.router)
app.include_router(notifications.router)
app.include_router(users.router)
app.include_router(internal.router)
app.include_router(billing_webhook.router)
app.include_router(health.router)


# ============================================
# ✅ ROOT ENDPOINT
# ============================================

@app.get("/")
def root():
    return {"status": "Job board workspace API running"}
