"""Unit tests for fx_order request/response schemas."""
import pytest
from pydantic import ValidationError

from src.fx_order.application.schemas import (
    CreateOrderRequest,
    OrderResponse,
    UpdateOrderRequest,
    UserOrdersResponse,
)
from src.fx_order.domain.models import OrderDetails, OwnerContact
from tests.unit.fakes import make_order


class TestCreateOrderRequest:
    def test_defaults(self) -> None:
        req = CreateOrderRequest(
            have_currency="nzd", have_amount=100, want_currency="aud", want_amount=90
        )
        assert req.status == "PENDING"
        assert req.details is None
        assert req.rejects == []
        assert req.user_id is None

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateOrderRequest(
                have_currency="nzd",
                have_amount=100,
                want_currency="aud",
                want_amount=90,
                rate=1.1,
            )

    def test_missing_amount_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateOrderRequest(have_currency="nzd", want_currency="aud", want_amount=90)

    def test_details_must_be_complete(self) -> None:
        with pytest.raises(ValidationError):
            CreateOrderRequest(
                have_currency="nzd",
                have_amount=100,
                want_currency="aud",
                want_amount=90,
                status="RESOLVED",
                details={"accepted": True, "counterparty_user_id": "user-2"},
            )

    @pytest.mark.parametrize("amount", [0, -1, 2**63])
    def test_amount_out_of_range(self, amount: int) -> None:
        with pytest.raises(ValidationError):
            CreateOrderRequest(
                have_currency="nzd", have_amount=amount, want_currency="aud", want_amount=90
            )

    def test_user_id_too_long(self) -> None:
        with pytest.raises(ValidationError):
            CreateOrderRequest(
                have_currency="nzd",
                have_amount=100,
                want_currency="aud",
                want_amount=90,
                user_id="u" * 65,
            )


class TestUpdateOrderRequest:
    def test_empty_update_rejected(self) -> None:
        with pytest.raises(ValidationError):
            UpdateOrderRequest()

    def test_version_alone_is_not_a_change(self) -> None:
        with pytest.raises(ValidationError):
            UpdateOrderRequest(expected_version=2)

    @pytest.mark.parametrize("field", ["user_id", "have_currency", "want_currency"])
    def test_immutable_fields_rejected(self, field: str) -> None:
        with pytest.raises(ValidationError):
            UpdateOrderRequest(**{field: "x", "want_amount": 10})

    @pytest.mark.parametrize("reject_id", ["", "x" * 33])
    def test_reject_id_bounds(self, reject_id: str) -> None:
        with pytest.raises(ValidationError):
            UpdateOrderRequest(rejects=[reject_id])

    def test_reject_id_at_limit(self) -> None:
        assert UpdateOrderRequest(rejects=["x" * 32]).rejects == ["x" * 32]

    def test_huge_amount_rejected(self) -> None:
        with pytest.raises(ValidationError):
            UpdateOrderRequest(have_amount=2**70)

    def test_to_patch(self) -> None:
        req = UpdateOrderRequest(
            status="RESOLVED",
            details={
                "accepted": True,
                "counterparty_user_id": "user-2",
                "counterparty_order_id": "order-2",
            },
            rejects=["r1"],
            expected_version=4,
        )
        patch = req.to_patch()
        assert patch.details == OrderDetails(True, "user-2", "order-2")
        assert patch.rejects == ("r1",)
        assert patch.expected_version == 4
        assert patch.have_amount is None


class TestResponses:
    def test_order_response_from_domain(self) -> None:
        order = make_order(
            status="RESOLVED",
            details=OrderDetails(True, "user-2", "order-2"),
            owner=OwnerContact("user-1", "Alice", "alice@example.com"),
        )
        resp = OrderResponse.from_domain(order)
        assert resp.details is not None
        assert resp.details.counterparty_order_id == "order-2"
        assert resp.owner is not None
        assert resp.owner.name == "Alice"

    def test_user_orders_partition(self) -> None:
        orders = [
            make_order(id="a"),
            make_order(id="b", status="CANCELLED"),
            make_order(id="c", status="RESOLVED", details=OrderDetails(True, "u", "x")),
            make_order(id="d"),
        ]
        resp = UserOrdersResponse.from_orders("user-1", orders)
        assert [o.id for o in resp.pending] == ["a", "d"]
        assert [o.id for o in resp.cancelled] == ["b"]
        assert [o.id for o in resp.resolved] == ["c"]
