import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from library_service.api.admin_books import router as admin_books_router
from library_service.api.auth import router as auth_router
from library_service.api.books import router as books_router
from library_service.api.errors import register_error_handlers
from library_service.api.inventory import router as inventory_router
from library_service.api.statistics import router as statistics_router
from library_service.api.users import router as users_router
from library_service.config import settings
from library_service.kafka.producer import start_publisher

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting inventory event publisher...")
    app.state.publisher = await start_publisher()
    yield
    await app.state.publisher.stop()
    logger.info("Library service stopped.")


app = FastAPI(
    title="Library Service",
    description="Book catalog, borrowing and statistics",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)

register_error_handlers(app)

for router in (
    auth_router,
    books_router,
    admin_books_router,
    inventory_router,
    statistics_router,
    users_router,
):
    app.include_router(router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    return {"status": "ok"}
