from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from library_service.config import settings
from library_service.database import get_db
from library_service.kafka.producer import InventoryEventPublisher
from library_service.services.catalog import CatalogService
from library_service.services.inventory import InventoryService
from library_service.services.statistics import StatisticsService
from library_service.services.users import UserService


def get_publisher(request: Request) -> InventoryEventPublisher:
    publisher = getattr(request.app.state, "publisher", None)
    if publisher is None:
        return InventoryEventPublisher(None, settings.kafka_inventory_topic)
    return publisher


def get_inventory_service(
    db: AsyncSession = Depends(get_db),
    publisher: InventoryEventPublisher = Depends(get_publisher),
) -> InventoryService:
    return InventoryService(db, publisher)


def get_statistics_service(db: AsyncSession = Depends(get_db)) -> StatisticsService:
    return StatisticsService(db)


def get_catalog_service(db: AsyncSession = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)
