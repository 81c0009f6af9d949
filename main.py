import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.application.events import DomainEventBus
from app.application.use_cases.notifications import register_notification_handlers
from app.config import get_settings
from app.infrastructure.database import SessionLocal, engine, initialize_database
from app.infrastructure.notifications import (
    ConnectionRegistry,
    NotificationConnectionManager,
    NotificationDispatcher,
    NotificationPublisher,
)
from app.interfaces.api.routes import register_routes

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare logging and the database on startup; flush pushes on shutdown."""

    logging.basicConfig(level=get_settings().log_level, format=LOG_FORMAT)
    initialize_database()
    yield
    await app.state.notification_publisher.drain()
    engine.dispose()


def create_app(*, registry: ConnectionRegistry | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Each application owns its connection registry and notification pipeline,
    so separate instances never share live connections.
    """

    settings = get_settings()
    app = FastAPI(lifespan=lifespan, title="Task notifications API")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if registry is None:
        registry = ConnectionRegistry()
    manager = NotificationConnectionManager(registry)
    publisher = NotificationPublisher(manager)
    dispatcher = NotificationDispatcher(SessionLocal, registry, publisher)
    event_bus = DomainEventBus()
    register_notification_handlers(event_bus, dispatcher)

    app.state.connection_registry = registry
    app.state.notification_manager = manager
    app.state.notification_publisher = publisher
    app.state.notification_dispatcher = dispatcher
    app.state.event_bus = event_bus

    register_routes(app)
    return app


app = create_app()
