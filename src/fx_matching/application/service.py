# src/fx_matching/application/service.py
"""MatchingService: find one compatible counter-order for an order.

Read-only: no commit needed. The store pre-filters candidates in SQL; every
streamed row is re-checked with the pure ``is_compatible`` predicate, which is
the single authority on what counts as a match.
"""
import logging
from contextlib import aclosing

from sqlalchemy.ext.asyncio import AsyncSession

from src.fx_matching.application.schemas import MatchedOrderOut, MatchResponse
from src.fx_matching.domain.compatibility import build_candidate_filter, is_compatible
from src.fx_order.application.schemas import OrderResponse
from src.fx_order.application.service import load_accessible_order
from src.fx_order.domain.models import Actor, Order
from src.fx_order.domain.repository import OrderRepositoryProtocol
from src.fx_order.infrastructure.persistence import OrderRepository

logger = logging.getLogger(__name__)


class MatchingService:
    def __init__(self, repo: OrderRepositoryProtocol | None = None) -> None:
        self._repo: OrderRepositoryProtocol = repo or OrderRepository()

    async def find_match(self, db: AsyncSession, actor: Actor, order_id: str) -> MatchResponse:
        order = await load_accessible_order(self._repo, db, actor, order_id)
        matched = await self._first_compatible(order, db)
        if matched is None:
            logger.info("No match yet for order %s", order.id)
        else:
            logger.info("Order %s matched with %s", order.id, matched.id)
        return MatchResponse(
            order=OrderResponse.from_domain(order),
            matched_order=MatchedOrderOut.from_domain(matched) if matched else None,
            rejects=list(order.rejects),
        )

    async def _first_compatible(self, order: Order, db: AsyncSession) -> Order | None:
        criteria = build_candidate_filter(order)
        async with aclosing(self._repo.find(criteria, db)) as candidates:
            async for candidate in candidates:
                if is_compatible(order, candidate):
                    return candidate
                logger.debug("Skipping candidate %s for order %s", candidate.id, order.id)
        return None
