from fastapi import APIRouter, Path, Request
from typing import Annotated
import uuid
from starlette.status import HTTP_201_CREATED

from bookstore.api.deps import CurrentIdentity, DbSession
from bookstore.core.logging import get_logger
from bookstore.schemas.common import ApiResponse
from bookstore.schemas.transaction import (
    TransactionCreate,
    TransactionRead,
    TransactionStatistics,
)
from bookstore.services.order_service import OrderService

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.post("", response_model=ApiResponse[TransactionRead], status_code=HTTP_201_CREATED)
def create_transaction(
    request: Request,
    data: TransactionCreate,
    identity: CurrentIdentity,
    db: DbSession,
):
    logger = get_logger(__name__, request)
    logger.info("Creating transaction with %d items", len(data.items))
    transaction = OrderService.create_transaction(db, identity, data)
    return ApiResponse(message="Transaction created successfully", data=transaction)


@router.get("", response_model=ApiResponse[list[TransactionRead]])
def list_transactions(identity: CurrentIdentity, db: DbSession):
    return ApiResponse(
        message="Get all transactions successfully",
        data=OrderService.get_all_transactions(db),
    )


# declared before /{transaction_id} so it is not read as an id
@router.get("/statistics", response_model=ApiResponse[TransactionStatistics])
def transaction_statistics(identity: CurrentIdentity, db: DbSession):
    return ApiResponse(
        message="Get transaction statistics successfully",
        data=OrderService.get_statistics(db),
    )


@router.get("/{transaction_id}", response_model=ApiResponse[TransactionRead])
def get_transaction(
    identity: CurrentIdentity,
    db: DbSession,
    transaction_id: Annotated[uuid.UUID, Path(..., description="Transaction ID")],
):
    return ApiResponse(
        message="Get transaction detail successfully",
        data=OrderService.get_transaction_by_id(db, transaction_id),
    )
