from contextlib import asynccontextmanager

from fastapi import FastAPI

from ticketing.core.logging_config import configure_logging
from ticketing.database.db import Base, engine
from ticketing.exception_handlers import register_exception_handlers
# Import models so that they register with Base.metadata
from ticketing.models import events, tickets, users  # noqa: F401
from ticketing.routes import events as events_routes
from ticketing.routes import tickets as tickets_routes

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create all tables (in production, use migrations such as Alembic)
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title="Ticketing", lifespan=lifespan)

register_exception_handlers(app)

# Include the routers
app.include_router(events_routes.router)
app.include_router(tickets_routes.router)


@app.get("/health")
def health():
    return {"status": "ok"}
