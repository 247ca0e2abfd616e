import pytest

from src.fx_order.domain.models import Actor, OrderDetails
from tests.unit.fakes import make_order


class TestOrderModel:
    def test_defaults(self) -> None:
        order = make_order()
        assert order.status == "PENDING"
        assert order.details is None
        assert order.rejects == []
        assert order.version == 0

    def test_pending_is_not_terminal(self) -> None:
        order = make_order()
        assert order.is_pending is True
        assert order.is_terminal is False

    @pytest.mark.parametrize("status", ["CANCELLED", "RESOLVED"])
    def test_terminal_statuses(self, status: str) -> None:
        order = make_order(status=status)
        assert order.is_pending is False
        assert order.is_terminal is True

    def test_rejects_not_shared_between_instances(self) -> None:
        a = make_order(id="a")
        b = make_order(id="b")
        a.rejects.append("x")
        assert b.rejects == []

    def test_details_are_frozen(self) -> None:
        details = OrderDetails(True, "user-2", "order-2")
        with pytest.raises(AttributeError):
            details.accepted = False  # type: ignore[misc]


class TestActor:
    def test_owner_may_access(self) -> None:
        assert Actor(user_id="user-1").can_access("user-1")

    def test_stranger_may_not(self) -> None:
        assert not Actor(user_id="user-2").can_access("user-1")

    def test_admin_may_access_anything(self) -> None:
        assert Actor(user_id="root", is_admin=True).can_access("user-1")
