"""ml_session REST API — full display state, connect, disconnect."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.ml_client.dependencies import get_client
from src.ml_client.service import MetaLockedClient
from src.ml_common.response import ApiResponse, success_response

router = APIRouter(prefix="/wallet", tags=["wallet"])


@router.get("")
async def get_state(
    client: Annotated[MetaLockedClient, Depends(get_client)],
    request: Request,
) -> ApiResponse:
    return success_response(client.display().model_dump(), request)


@router.post("/connect")
async def connect(
    client: Annotated[MetaLockedClient, Depends(get_client)],
    request: Request,
) -> ApiResponse:
    state = await client.connect()
    return success_response(state.model_dump(), request)


@router.post("/disconnect")
async def disconnect(
    client: Annotated[MetaLockedClient, Depends(get_client)],
    request: Request,
) -> ApiResponse:
    return success_response(client.disconnect().model_dump(), request)
