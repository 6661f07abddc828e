import os

# Database configuration
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./ticketing.db")

# Redis configuration
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

# Celery broker; defaults to the Redis instance that holds the purchase locks
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", REDIS_URL)

# Per-event purchase lock: how long a holder may keep it, how long a waiter blocks
LOCK_TIMEOUT = float(os.getenv("LOCK_TIMEOUT", "10"))
LOCK_WAIT_TIMEOUT = float(os.getenv("LOCK_WAIT_TIMEOUT", "5"))

MAX_TICKETS_PER_PURCHASE = int(os.getenv("MAX_TICKETS_PER_PURCHASE", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def get_database_url():
    return DATABASE_URL


def get_redis_url():
    return REDIS_URL


def get_celery_broker_url():
    return CELERY_BROKER_URL
