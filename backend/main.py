from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import clients, contacts, tickets
from core.config import settings
from core.database import engine, Base
from core.logging import configure_logging, get_logger
from core.middleware import RequestLoggingMiddleware
from core.errors import register_error_handlers

# Initialize logging before anything else
configure_logging(
    level=settings.LOG_LEVEL,
    json_logs=settings.LOG_JSON,
    log_sql=settings.LOG_SQL,
)

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("startup", message="TicketDesk API starting up")

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        log.info("database_connected", message="Database tables initialized")
    except Exception as e:
        log.warning("database_unavailable", error=str(e), message="App starting without database")

    yield

    log.info("shutdown", message="TicketDesk API shutting down")
    await engine.dispose()


app = FastAPI(
    title="TicketDesk API",
    description="Ticketing and time tracking for small IT businesses",
    version="0.1.0",
    lifespan=lifespan,
    docs_url=None if settings.is_production else "/docs",
)

register_error_handlers(app)

# Middleware (order matters: last added = first executed)
app.add_middleware(RequestLoggingMiddleware, slow_threshold_ms=settings.SLOW_REQUEST_MS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(clients.router, prefix="/api/clients", tags=["clients"])
app.include_router(contacts.router, prefix="/api/contacts", tags=["contacts"])
app.include_router(tickets.router, prefix="/api/tickets", tags=["tickets"])


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": "0.1.0"}


if __name__ == "__main__":
    import uvicorn

    log.info("server_config", host=settings.BACKEND_HOST, port=settings.BACKEND_PORT, debug=settings.APP_DEBUG)
    uvicorn.run(
        "main:app",
        host=settings.BACKEND_HOST,
        port=settings.BACKEND_PORT,
        reload=settings.APP_DEBUG,
        log_config=None,  # Disable uvicorn's default logging, we handle it
    )
