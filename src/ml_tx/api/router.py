"""ml_tx REST API — deposit, withdraw, extend-lock, current operation.

Write endpoints return when the operation reaches a terminal state. A failed
operation is still HTTP 200: the envelope carries the operation's error
code and message, and data.operation.status is FAILED.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.ml_client.dependencies import get_client
from src.ml_client.service import MetaLockedClient
from src.ml_common.enums import OperationStatus
from src.ml_common.response import ApiResponse, success_response
from src.ml_tx.application.schemas import (
    DepositRequest,
    ExtendLockRequest,
    OperationResponse,
    WithdrawRequest,
)
from src.ml_tx.domain.models import PendingOperation

router = APIRouter(prefix="/tx", tags=["tx"])


def _operation_response(
    client: MetaLockedClient, op: PendingOperation, request: Request
) -> ApiResponse:
    state = client.display()
    data = OperationResponse.from_operation(op, op.message, state.last_tx_hash)
    resp = success_response(data.model_dump(), request)
    if op.status == OperationStatus.FAILED:
        resp.code = op.error_code or 9002
        resp.message = op.message
    return resp


@router.post("/deposit")
async def deposit(
    body: DepositRequest,
    client: Annotated[MetaLockedClient, Depends(get_client)],
    request: Request,
) -> ApiResponse:
    op = await client.deposit(body.amount)
    return _operation_response(client, op, request)


@router.post("/withdraw")
async def withdraw(
    body: WithdrawRequest,
    client: Annotated[MetaLockedClient, Depends(get_client)],
    request: Request,
) -> ApiResponse:
    op = await client.withdraw(body.amount)
    return _operation_response(client, op, request)


@router.post("/extend-lock")
async def extend_lock(
    body: ExtendLockRequest,
    client: Annotated[MetaLockedClient, Depends(get_client)],
    request: Request,
) -> ApiResponse:
    op = await client.extend_lock(body.value, body.unit)
    return _operation_response(client, op, request)


@router.get("/current")
async def current_operation(
    client: Annotated[MetaLockedClient, Depends(get_client)],
    request: Request,
) -> ApiResponse:
    state = client.display()
    data = OperationResponse(
        operation=state.operation,
        status_message=state.status_message,
        last_tx_hash=state.last_tx_hash,
    )
    return success_response(data.model_dump(), request)
