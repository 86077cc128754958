import logging

from fastapi import APIRouter, Depends, Query, Response, status

from library_service.api.deps import get_catalog_service
from library_service.middleware.auth import require
from library_service.models.book import BookGenre
from library_service.models.user import User
from library_service.policy import Action
from library_service.schemas.book import BookAdminResponse, BookRequest
from library_service.schemas.page import Page
from library_service.services.catalog import CatalogService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/books", tags=["admin"])

_admin = require(Action.MANAGE_BOOKS)


@router.post("", response_model=BookAdminResponse, status_code=status.HTTP_201_CREATED)
async def create_book(
    request: BookRequest,
    admin: User = Depends(_admin),
    catalog: CatalogService = Depends(get_catalog_service),
):
    logger.info("[ADMIN] %s creating book with ISBN: %s", admin.email, request.isbn)
    return await catalog.create_book(request)


@router.get("", response_model=Page[BookAdminResponse])
async def list_books(
    page: int = Query(0, ge=0),
    size: int = Query(30, ge=1, le=100),
    sort_by: str = "title",
    sort_dir: str = "asc",
    search_term: str | None = None,
    genre: BookGenre | None = None,
    available_only: bool = False,
    admin: User = Depends(_admin),
    catalog: CatalogService = Depends(get_catalog_service),
):
    books, total = await catalog.search_books(
        search_term, genre, available_only, page, size, sort_by, sort_dir
    )
    return Page[BookAdminResponse].build(
        [BookAdminResponse.model_validate(b) for b in books], total, page, size
    )


@router.get("/{book_id}", response_model=BookAdminResponse)
async def get_book(
    book_id: int,
    admin: User = Depends(_admin),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog.get_book(book_id)


@router.put("/{book_id}", response_model=BookAdminResponse)
async def update_book(
    book_id: int,
    request: BookRequest,
    admin: User = Depends(_admin),
    catalog: CatalogService = Depends(get_catalog_service),
):
    logger.info("[ADMIN] %s updating book with ID: %s", admin.email, book_id)
    return await catalog.update_book(book_id, request)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_book(
    book_id: int,
    admin: User = Depends(_admin),
    catalog: CatalogService = Depends(get_catalog_service),
):
    logger.info("[ADMIN] %s deleting book with ID: %s", admin.email, book_id)
    await catalog.delete_book(book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
