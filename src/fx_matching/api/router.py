# src/fx_matching/api/router.py
"""Match lookup endpoint. POST because callers poll it to re-run the search."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.fx_common.database import get_db_session
from src.fx_common.response import ApiResponse, success_response, with_request_id
from src.fx_gateway.auth.dependencies import get_current_actor
from src.fx_matching.application.service import MatchingService
from src.fx_order.domain.models import Actor

router = APIRouter(prefix="/orders", tags=["matching"])

_service = MatchingService()


@router.post("/{order_id}/match", response_model=ApiResponse)
async def find_match(
    request: Request,
    order_id: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.find_match(db, actor, order_id)
    return with_request_id(success_response(data.model_dump(mode="json")), request)
