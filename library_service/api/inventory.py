from fastapi import APIRouter, Depends, Query

from library_service.middleware.auth import require
from library_service.models.borrow_record import BorrowStatus
from library_service.models.user import User
from library_service.policy import Action
from library_service.schemas.borrow import BorrowRecordResponse, BorrowStatusResponse
from library_service.schemas.page import Page
from library_service.api.deps import get_inventory_service
from library_service.services.inventory import InventoryService, today

router = APIRouter(prefix="/inventory/books", tags=["inventory"])


@router.post("/{book_id}/borrow", response_model=BorrowRecordResponse)
async def borrow_book(
    book_id: int,
    user: User = Depends(require(Action.BORROW)),
    inventory: InventoryService = Depends(get_inventory_service),
):
    record = await inventory.borrow_book(user.id, book_id)
    return BorrowRecordResponse.from_record(record, today())


@router.post("/{book_id}/return", response_model=BorrowRecordResponse)
async def return_book(
    book_id: int,
    user: User = Depends(require(Action.RETURN)),
    inventory: InventoryService = Depends(get_inventory_service),
):
    record = await inventory.return_book(user.id, book_id)
    return BorrowRecordResponse.from_record(record, today())


@router.get("/{book_id}/borrowed-status", response_model=bool)
async def borrowed_status(
    book_id: int,
    user: User = Depends(require(Action.VIEW_OWN_BORROWS)),
    inventory: InventoryService = Depends(get_inventory_service),
):
    return await inventory.has_user_borrowed_book(user.id, book_id)


@router.get("/{book_id}/status", response_model=BorrowStatusResponse)
async def borrow_status(
    book_id: int,
    user: User = Depends(require(Action.VIEW_OWN_BORROWS)),
    inventory: InventoryService = Depends(get_inventory_service),
):
    """Same check as borrowed-status, wrapped for the UI."""
    borrowed = await inventory.has_user_borrowed_book(user.id, book_id)
    return BorrowStatusResponse(borrowed=borrowed)


@router.get("", response_model=Page[BorrowRecordResponse])
async def my_borrow_records(
    status: BorrowStatus | None = None,
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    user: User = Depends(require(Action.VIEW_OWN_BORROWS)),
    inventory: InventoryService = Depends(get_inventory_service),
):
    records, total = await inventory.get_user_borrow_records_by_status(user.id, status, page, size)
    on = today()
    return Page[BorrowRecordResponse].build(
        [BorrowRecordResponse.from_record(r, on) for r in records], total, page, size
    )
