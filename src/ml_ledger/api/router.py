"""ml_ledger REST API — cached snapshot and explicit refresh."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.ml_client.dependencies import get_client
from src.ml_client.service import MetaLockedClient
from src.ml_common.response import ApiResponse, success_response

router = APIRouter(prefix="/ledger", tags=["ledger"])


@router.get("")
async def get_ledger(
    client: Annotated[MetaLockedClient, Depends(get_client)],
    request: Request,
) -> ApiResponse:
    return success_response(client.display().ledger.model_dump(), request)


@router.post("/refresh")
async def refresh_ledger(
    client: Annotated[MetaLockedClient, Depends(get_client)],
    request: Request,
) -> ApiResponse:
    # NotConnectedError / SyncError are rendered by the app-level AppError handler
    state = await client.refresh()
    return success_response(state.ledger.model_dump(), request)
