import os

# ✅ Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./jobboard.db")
RUN_MIGRATIONS = os.getenv("RUN_MIGRATIONS") == "1"

# ✅ Identity provider tokens
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")

# ✅ Internal callers (billing integration, identity-provider sync)
SERVICE_API_TOKEN = os.getenv("SERVICE_API_TOKEN")

# ✅ Stripe
STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")
STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET")
STRIPE_PRICE_ID_STARTER = os.getenv("STRIPE_PRICE_ID_STARTER")
STRIPE_PRICE_ID_GROWTH = os.getenv("STRIPE_PRICE_ID_GROWTH")

# ✅ Job postings live in a table owned by another service; unset means "not provisioned"
JOBS_TABLE_NAME = os.getenv("JOBS_TABLE_NAME") or None

# ✅ Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR", "logs")

# ✅ CORS
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if origin.strip()
]
