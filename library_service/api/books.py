from fastapi import APIRouter, Depends, Query

from library_service.api.deps import get_catalog_service
from library_service.middleware.auth import require
from library_service.models.book import BookGenre
from library_service.policy import Action
from library_service.schemas.book import BookResponse
from library_service.schemas.page import Page
from library_service.services.catalog import CatalogService

router = APIRouter(
    prefix="/books",
    tags=["books"],
    dependencies=[Depends(require(Action.BROWSE_CATALOG))],
)


@router.get("", response_model=Page[BookResponse])
async def list_books(
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    sort_by: str = "title",
    sort_dir: str = "asc",
    search_term: str | None = None,
    genre: BookGenre | None = None,
    available_only: bool = False,
    catalog: CatalogService = Depends(get_catalog_service),
):
    books, total = await catalog.search_books(
        search_term, genre, available_only, page, size, sort_by, sort_dir
    )
    return Page[BookResponse].build(
        [BookResponse.model_validate(b) for b in books], total, page, size
    )


@router.get("/search", response_model=Page[BookResponse])
async def search_books(
    search_term: str | None = None,
    genre: BookGenre | None = None,
    available_only: bool = False,
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    sort_by: str = "title",
    sort_dir: str = "asc",
    catalog: CatalogService = Depends(get_catalog_service),
):
    return await list_books(page, size, sort_by, sort_dir, search_term, genre, available_only, catalog)


@router.get("/genres", response_model=list[BookGenre])
async def genres():
    return list(BookGenre)


@router.get("/available", response_model=list[BookResponse])
async def available_books(catalog: CatalogService = Depends(get_catalog_service)):
    return await catalog.find_available_books()


@router.get("/genre/{genre}", response_model=list[BookResponse])
async def books_by_genre(genre: BookGenre, catalog: CatalogService = Depends(get_catalog_service)):
    return await catalog.find_books_by_genre(genre)


@router.get("/title/{title}", response_model=list[BookResponse])
async def books_by_title(title: str, catalog: CatalogService = Depends(get_catalog_service)):
    return await catalog.find_books_by_title(title)


@router.get("/author/{author}", response_model=list[BookResponse])
async def books_by_author(author: str, catalog: CatalogService = Depends(get_catalog_service)):
    return await catalog.find_books_by_author(author)


@router.get("/isbn/{isbn}", response_model=BookResponse)
async def book_by_isbn(isbn: str, catalog: CatalogService = Depends(get_catalog_service)):
    return await catalog.get_book_by_isbn(isbn)


@router.get("/{book_id}", response_model=BookResponse)
async def book_by_id(book_id: int, catalog: CatalogService = Depends(get_catalog_service)):
    return await catalog.get_book(book_id)
