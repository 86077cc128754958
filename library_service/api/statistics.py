from fastapi import APIRouter, Depends

from library_service.api.deps import get_statistics_service
from library_service.middleware.auth import require
from library_service.models.book import BookGenre
from library_service.policy import Action
from library_service.schemas.book import BookResponse
from library_service.services.statistics import StatisticsService

router = APIRouter(
    prefix="/statistics/books",
    tags=["statistics"],
    dependencies=[Depends(require(Action.VIEW_STATISTICS))],
)


@router.get("/count", response_model=int)
async def total_book_count(stats: StatisticsService = Depends(get_statistics_service)):
    return await stats.count_all_books()


@router.get("/available/count", response_model=int)
async def available_book_count(stats: StatisticsService = Depends(get_statistics_service)):
    return await stats.count_available_books()


@router.get("/borrowed", response_model=list[BookResponse])
async def books_with_borrowed_copies(stats: StatisticsService = Depends(get_statistics_service)):
    return await stats.get_books_with_borrowed_copies()


@router.get("/genre/{genre}/count", response_model=int)
async def available_count_by_genre(
    genre: BookGenre,
    stats: StatisticsService = Depends(get_statistics_service),
):
    return await stats.count_available_books_by_genre(genre)


@router.get("/availability/percentage", response_model=float)
async def availability_percentage(stats: StatisticsService = Depends(get_statistics_service)):
    return await stats.get_availability_percentage()
