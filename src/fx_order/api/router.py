# src/fx_order/api/router.py
"""fx_order REST API. All endpoints require a JWT Bearer token."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.fx_common.database import get_db_session
from src.fx_common.response import ApiResponse, success_response, with_request_id
from src.fx_gateway.auth.dependencies import get_current_actor
from src.fx_order.application.schemas import CreateOrderRequest, UpdateOrderRequest
from src.fx_order.application.service import OrderApplicationService
from src.fx_order.domain.models import Actor

router = APIRouter(prefix="/orders", tags=["orders"])

_service = OrderApplicationService()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse)
async def create_order(
    request: Request,
    body: CreateOrderRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.create_order(db, actor, body)
    resp = success_response(data.model_dump(mode="json"))
    resp.message = "Order created"
    return with_request_id(resp, request)


@router.get("", response_model=ApiResponse)
async def list_orders(
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    user_id: str | None = Query(None, description="Owner to list; defaults to the caller"),
) -> ApiResponse:
    data = await _service.list_orders_for_user(db, actor, user_id or actor.user_id)
    return with_request_id(success_response(data.model_dump(mode="json")), request)


@router.get("/{order_id}", response_model=ApiResponse)
async def get_order(
    request: Request,
    order_id: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_order(db, actor, order_id)
    return with_request_id(success_response(data.model_dump(mode="json")), request)


@router.patch("/{order_id}", response_model=ApiResponse)
async def update_order(
    request: Request,
    order_id: str,
    body: UpdateOrderRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.update_order(db, actor, order_id, body)
    return with_request_id(success_response(data.model_dump(mode="json")), request)


@router.delete("/{order_id}", response_model=ApiResponse)
async def delete_order(
    request: Request,
    order_id: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.delete_order(db, actor, order_id)
    return with_request_id(success_response(data.model_dump(mode="json")), request)
