"""Unit tests for the bulk action framework and resource action tables."""

from datetime import UTC, datetime
from enum import Enum
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from app.core.bulk import (
    ActionSpec,
    ActionTable,
    BulkExecutor,
    BulkOperationRequest,
    parse_bulk_request,
    remove,
    set_fields,
    transition,
)
from app.core.exceptions import (
    AdminRequiredError,
    ForbiddenError,
    StorageError,
    UnknownActionError,
    ValidationError,
)
from app.core.security import Actor, Role
from app.modules.auctions.actions import AUCTION_ACTIONS, AuctionAction
from app.modules.categories.actions import CATEGORY_ACTIONS
from app.modules.orders.actions import ORDER_ACTIONS, OrderAction
from app.modules.products.actions import PRODUCT_ACTIONS, ProductAction, update_stock
from app.modules.reviews.actions import REVIEW_ACTIONS, ReviewAction
from app.modules.shops.actions import BAN_REASON, SHOP_ACTIONS, ShopAction
from app.modules.shops.models import Shop

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=UTC)


class TestParseBulkRequest:
    """Tests for request body validation."""

    @pytest.mark.unit
    def test_valid_request(self) -> None:
        request = parse_bulk_request({"action": "ban", "ids": ["s1", "s2"]})

        assert request.action == "ban"
        assert request.ids == ["s1", "s2"]
        assert request.data is None

    @pytest.mark.unit
    def test_data_is_kept(self) -> None:
        request = parse_bulk_request(
            {"action": "update-stock", "ids": ["p1"], "data": {"stockCount": 5}}
        )

        assert request.data == {"stockCount": 5}

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "payload",
        [
            None,
            [],
            "ban",
            {},
            {"ids": ["a"]},
            {"action": "ban"},
            {"action": "", "ids": ["a"]},
            {"action": "   ", "ids": ["a"]},
            {"action": "ban", "ids": []},
            {"action": "ban", "ids": "a"},
            {"action": "ban", "ids": ["a", " "]},
            {"action": "ban", "ids": [1, 2]},
        ],
    )
    def test_malformed_bodies_rejected(self, payload: object) -> None:
        with pytest.raises(ValidationError) as exc_info:
            parse_bulk_request(payload)

        assert exc_info.value.status_code == 400

    @pytest.mark.unit
    def test_too_many_ids_rejected(self) -> None:
        ids = [f"id-{n}" for n in range(settings.bulk_max_ids + 1)]

        with pytest.raises(ValidationError) as exc_info:
            parse_bulk_request({"action": "ban", "ids": ids})

        assert "Too many ids" in exc_info.value.message


class TestActionTable:
    """Tests for action dispatch tables."""

    @pytest.mark.unit
    def test_missing_spec_fails_at_construction(self) -> None:
        class Colour(str, Enum):
            RED = "red"
            BLUE = "blue"

        with pytest.raises(TypeError, match="blue"):
            ActionTable("colours", Shop, Colour, {Colour.RED: ActionSpec(remove)})

    @pytest.mark.unit
    def test_unknown_action(self) -> None:
        with pytest.raises(UnknownActionError) as exc_info:
            SHOP_ACTIONS.resolve("explode")

        error = exc_info.value
        assert error.status_code == 500
        assert error.detail["error"] == "Unknown action: explode"
        assert error.detail["details"]["allowed"] == SHOP_ACTIONS.allowed

    @pytest.mark.unit
    def test_action_names_are_case_sensitive(self) -> None:
        with pytest.raises(UnknownActionError):
            SHOP_ACTIONS.resolve("BAN")

    @pytest.mark.unit
    def test_resource_action_sets(self) -> None:
        assert SHOP_ACTIONS.allowed == [
            "verify", "unverify", "activate", "deactivate", "ban", "unban", "delete",
        ]
        assert PRODUCT_ACTIONS.allowed == [
            "publish", "unpublish", "archive", "update-stock", "delete",
            "feature", "unfeature", "ban", "verify",
        ]
        assert AUCTION_ACTIONS.allowed == [
            "start", "end", "cancel", "delete", "feature", "unfeature", "approve", "reject",
        ]
        assert ORDER_ACTIONS.allowed == [
            "process", "ship", "deliver", "confirm", "cancel", "refund", "delete",
        ]
        assert REVIEW_ACTIONS.allowed == ["flag", "approve", "reject", "unflag", "delete"]
        assert CATEGORY_ACTIONS.allowed == [
            "activate", "deactivate", "feature", "unfeature", "approve", "reject", "delete",
        ]

    @pytest.mark.unit
    def test_seller_actions_are_owner_scoped(self) -> None:
        for table, actions in [
            (PRODUCT_ACTIONS, ["publish", "unpublish", "archive", "update-stock", "delete"]),
            (AUCTION_ACTIONS, ["start", "end", "cancel", "delete"]),
            (ORDER_ACTIONS, ["process", "ship", "deliver"]),
        ]:
            for name in actions:
                _, spec = table.resolve(name)
                assert Role.SELLER in spec.roles
                assert spec.owner_scoped

    @pytest.mark.unit
    def test_admin_only_tables(self) -> None:
        for table in (SHOP_ACTIONS, CATEGORY_ACTIONS):
            for name in table.allowed:
                _, spec = table.resolve(name)
                assert spec.roles == {Role.ADMIN}

    @pytest.mark.unit
    def test_any_role_may_flag_reviews(self) -> None:
        _, spec = REVIEW_ACTIONS.resolve(ReviewAction.FLAG.value)
        assert spec.roles == set(Role)

        _, spec = REVIEW_ACTIONS.resolve(ReviewAction.UNFLAG.value)
        assert spec.roles == {Role.ADMIN}


class TestRecipes:
    """Tests for mutation recipes."""

    @pytest.mark.unit
    def test_set_fields_stamps_updated_at(self) -> None:
        mutation = set_fields(is_active=False)(NOW, {})

        assert mutation.changes == {"is_active": False, "updated_at": NOW}
        assert mutation.delete is False

    @pytest.mark.unit
    def test_transition_uses_one_timestamp(self) -> None:
        mutation = transition("shipped", "shipped_at")(NOW, {})

        assert mutation.changes == {
            "status": "shipped",
            "shipped_at": NOW,
            "updated_at": NOW,
        }

    @pytest.mark.unit
    def test_remove(self) -> None:
        assert remove(NOW, {}).delete is True

    @pytest.mark.unit
    def test_shop_ban(self) -> None:
        _, spec = SHOP_ACTIONS.resolve(ShopAction.BAN.value)
        changes = spec.recipe(NOW, {}).changes

        assert changes["is_banned"] is True
        assert changes["is_active"] is False
        assert changes["ban_reason"] == BAN_REASON

    @pytest.mark.unit
    def test_auction_reject_clears_approval(self) -> None:
        _, spec = AUCTION_ACTIONS.resolve(AuctionAction.REJECT.value)
        changes = spec.recipe(NOW, {}).changes

        assert changes["status"] == "rejected"
        assert changes["is_approved"] is False

    @pytest.mark.unit
    def test_order_confirm_stamps_confirmed_at(self) -> None:
        _, spec = ORDER_ACTIONS.resolve(OrderAction.CONFIRM.value)
        changes = spec.recipe(NOW, {}).changes

        assert changes["status"] == "confirmed"
        assert changes["confirmed_at"] == NOW

    @pytest.mark.unit
    def test_review_unflag_clears_flag_time(self) -> None:
        _, spec = REVIEW_ACTIONS.resolve(ReviewAction.UNFLAG.value)
        changes = spec.recipe(NOW, {}).changes

        assert changes["is_flagged"] is False
        assert changes["flagged_at"] is None


class TestUpdateStock:
    """Tests for the product stock recipe."""

    @pytest.mark.unit
    def test_sets_stock_count(self) -> None:
        assert update_stock(NOW, {"stockCount": 7}).changes["stock_count"] == 7

    @pytest.mark.unit
    def test_numeric_string_accepted(self) -> None:
        assert update_stock(NOW, {"stockCount": "12"}).changes["stock_count"] == 12

    @pytest.mark.unit
    def test_missing_means_zero(self) -> None:
        assert update_stock(NOW, {}).changes["stock_count"] == 0

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [-1, "many", None, True, [3], 42.7, "4.5"])
    def test_invalid_values_rejected(self, value: object) -> None:
        with pytest.raises(ValidationError):
            update_stock(NOW, {"stockCount": value})

    @pytest.mark.unit
    def test_registered_under_hyphenated_name(self) -> None:
        member, spec = PRODUCT_ACTIONS.resolve("update-stock")

        assert member is ProductAction.UPDATE_STOCK
        assert spec.recipe is update_stock


class TestExecutorRoleCheck:
    """Role checks run before any database access."""

    @pytest.fixture
    def mock_db(self) -> AsyncMock:
        return AsyncMock()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_admin_only_action_rejects_seller(self, mock_db: AsyncMock) -> None:
        actor = Actor(id="u1", email="seller@example.com", role=Role.SELLER)
        request = BulkOperationRequest(action="ban", ids=["s1"])

        with pytest.raises(AdminRequiredError) as exc_info:
            await BulkExecutor(mock_db, SHOP_ACTIONS).execute(actor, request)

        assert exc_info.value.detail["error"] == "Admin access required"
        mock_db.execute.assert_not_called()
        mock_db.commit.assert_not_called()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_seller_action_rejects_buyer(self, mock_db: AsyncMock) -> None:
        actor = Actor(id="u2", email="buyer@example.com", role=Role.USER)
        request = BulkOperationRequest(action="publish", ids=["p1"])

        with pytest.raises(ForbiddenError) as exc_info:
            await BulkExecutor(mock_db, PRODUCT_ACTIONS).execute(actor, request)

        assert not isinstance(exc_info.value, AdminRequiredError)
        assert exc_info.value.detail["error"] == "Forbidden"
        mock_db.execute.assert_not_called()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unknown_action_on_admin_endpoint_rejects_seller(
        self, mock_db: AsyncMock
    ) -> None:
        actor = Actor(id="u1", email="seller@example.com", role=Role.SELLER)
        request = BulkOperationRequest(action="explode", ids=["s1"])

        with pytest.raises(AdminRequiredError):
            await BulkExecutor(mock_db, SHOP_ACTIONS).execute(actor, request)

        mock_db.execute.assert_not_called()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unknown_action_on_seller_endpoint_rejects_guest(
        self, mock_db: AsyncMock
    ) -> None:
        actor = Actor(id="u2", email="guest@example.com", role=Role.GUEST)
        request = BulkOperationRequest(action="nope", ids=["p1"])

        with pytest.raises(ForbiddenError) as exc_info:
            await BulkExecutor(mock_db, PRODUCT_ACTIONS).execute(actor, request)

        assert not isinstance(exc_info.value, AdminRequiredError)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unknown_action_reported_to_permitted_caller(
        self, mock_db: AsyncMock
    ) -> None:
        actor = Actor(id="u2", email="guest@example.com", role=Role.GUEST)
        request = BulkOperationRequest(action="nope", ids=["r1"])

        # Any role may flag reviews, so guests reach action lookup
        with pytest.raises(UnknownActionError):
            await BulkExecutor(mock_db, REVIEW_ACTIONS).execute(actor, request)

    @pytest.mark.unit
    def test_endpoint_roles_are_union_of_actions(self) -> None:
        assert SHOP_ACTIONS.roles == {Role.ADMIN}
        assert CATEGORY_ACTIONS.roles == {Role.ADMIN}
        assert PRODUCT_ACTIONS.roles == {Role.ADMIN, Role.SELLER}
        assert ORDER_ACTIONS.roles == {Role.ADMIN, Role.SELLER}
        assert REVIEW_ACTIONS.roles == set(Role)


class TestExecutorCommit:
    """A failed commit is rolled back and reported as a storage error."""

    @pytest.fixture
    def mock_db(self) -> AsyncMock:
        db = AsyncMock()
        result = MagicMock()
        result.scalars.return_value.all.return_value = [Shop(id="s1", owner_id="u9")]
        db.execute.return_value = result
        db.commit.side_effect = SQLAlchemyError("connection lost")
        return db

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_commit_failure_rolls_back(self, mock_db: AsyncMock) -> None:
        actor = Actor(id="a1", email="admin@example.com", role=Role.ADMIN)
        request = BulkOperationRequest(action="verify", ids=["s1"])

        with pytest.raises(StorageError) as exc_info:
            await BulkExecutor(mock_db, SHOP_ACTIONS).execute(actor, request, timestamp=NOW)

        assert exc_info.value.status_code == 500
        mock_db.commit.assert_awaited_once()
        mock_db.rollback.assert_awaited_once()
