"""Bulk actions shared by every resource module.

A bulk request names one action and a list of record ids. Each resource
declares an ``ActionTable`` that maps its action enum to an ``ActionSpec``
(recipe, allowed roles, ownership scope, guards). ``BulkExecutor`` runs a
request against a table:

1. check the caller can use the endpoint at all, then resolve the action
   and check the caller's role for it
2. load every record and, for seller-scoped actions, check ownership
3. evaluate every guard for every record and collect all violations
4. stage the mutation on every record and commit once

Nothing is written unless all checks pass.
"""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import (
    AdminRequiredError,
    ConstraintError,
    ForbiddenError,
    NotFoundError,
    StorageError,
    UnknownActionError,
    ValidationError,
)
from app.core.logging import get_logger
from app.core.security import Actor, Role

logger = get_logger(__name__)

ActionT = TypeVar("ActionT", bound=Enum)

ALL_ROLES = frozenset(Role)
ADMIN_ONLY = frozenset({Role.ADMIN})
SELLER_OR_ADMIN = frozenset({Role.SELLER, Role.ADMIN})


# ============================================================================
# Request / Response Schemas
# ============================================================================


class BulkOperationRequest(BaseModel):
    """Body of ``POST /<resource>/bulk``."""

    action: str = Field(..., min_length=1)
    ids: list[str] = Field(..., min_length=1)
    data: dict[str, Any] | None = None


class BulkOperationResponse(BaseModel):
    """Successful bulk operation result."""

    success: bool = True
    updated: int
    action: str


def parse_bulk_request(payload: Any) -> BulkOperationRequest:
    """Validate a raw request body into a ``BulkOperationRequest``.

    Raises:
        ValidationError: body is not an object, action or ids missing or
            empty, an id is blank, or more ids than ``bulk_max_ids``
    """
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")

    try:
        request = BulkOperationRequest.model_validate(payload)
    except PydanticValidationError as exc:
        errors = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        raise ValidationError("Invalid bulk request", errors=errors) from exc

    if not request.action.strip():
        raise ValidationError(
            "Invalid bulk request",
            errors=[{"field": "action", "message": "Action is required"}],
        )

    blank = [index for index, item_id in enumerate(request.ids) if not item_id.strip()]
    if blank:
        raise ValidationError(
            "Invalid bulk request",
            errors=[{"field": f"ids.{index}", "message": "Id must not be blank"} for index in blank],
        )

    if len(request.ids) > settings.bulk_max_ids:
        raise ValidationError(
            f"Too many ids: at most {settings.bulk_max_ids} per request",
            errors=[{"field": "ids", "message": f"{len(request.ids)} ids given"}],
        )

    return request


# ============================================================================
# Recipes
# ============================================================================


@dataclass(frozen=True)
class Mutation:
    """Field changes for one action, or a delete."""

    changes: dict[str, Any] = field(default_factory=dict)
    delete: bool = False


Recipe = Callable[[datetime, dict[str, Any]], Mutation]

# Returns a violation message, or None when the record may proceed.
Guard = Callable[[AsyncSession, Any], Awaitable[str | None]]


def set_fields(**fields: Any) -> Recipe:
    """Recipe assigning fixed values plus ``updated_at``."""

    def recipe(timestamp: datetime, data: dict[str, Any]) -> Mutation:
        return Mutation(changes={**fields, "updated_at": timestamp})

    return recipe


def transition(status: str, stamp: str | None = None, **fields: Any) -> Recipe:
    """Recipe moving a record to ``status``, stamping ``stamp`` with the time."""

    def recipe(timestamp: datetime, data: dict[str, Any]) -> Mutation:
        changes: dict[str, Any] = {"status": status, **fields}
        if stamp:
            changes[stamp] = timestamp
        changes["updated_at"] = timestamp
        return Mutation(changes=changes)

    return recipe


def remove(timestamp: datetime, data: dict[str, Any]) -> Mutation:
    """Recipe deleting the record."""
    return Mutation(delete=True)


@dataclass(frozen=True)
class ActionSpec:
    """How one bulk action behaves for one resource."""

    recipe: Recipe
    roles: frozenset[Role] = ADMIN_ONLY
    owner_scoped: bool = False
    guards: tuple[Guard, ...] = ()


class ActionTable(Generic[ActionT]):
    """Dispatch table for one resource.

    Every member of ``actions`` must have a spec; a missing entry is a
    programming error and fails at import time.
    """

    def __init__(
        self,
        resource: str,
        model: type,
        actions: type[ActionT],
        specs: Mapping[ActionT, ActionSpec],
        *,
        owner_field: str = "shop_id",
    ) -> None:
        missing = [member.value for member in actions if member not in specs]
        if missing:
            raise TypeError(f"{resource}: no spec for actions {missing}")

        self.resource = resource
        self.model = model
        self.actions = actions
        self.specs = dict(specs)
        self.owner_field = owner_field
        self.roles = frozenset().union(*(spec.roles for spec in self.specs.values()))

    @property
    def allowed(self) -> list[str]:
        return [member.value for member in self.actions]

    def check_access(self, actor: Actor) -> None:
        """Reject callers whose role can use none of the actions."""
        if actor.role in self.roles:
            return
        if self.roles == ADMIN_ONLY:
            raise AdminRequiredError()
        raise ForbiddenError()

    def resolve(self, action: str) -> tuple[ActionT, ActionSpec]:
        """Look up an action by its wire name."""
        try:
            member = self.actions(action)
        except ValueError:
            raise UnknownActionError(self.resource, action, self.allowed) from None
        return member, self.specs[member]


# ============================================================================
# Executor
# ============================================================================


class BulkExecutor(Generic[ActionT]):
    """Apply one bulk request to one resource inside a single transaction."""

    def __init__(self, db: AsyncSession, table: ActionTable[ActionT]) -> None:
        self.db = db
        self.table = table

    async def execute(
        self,
        actor: Actor,
        request: BulkOperationRequest,
        *,
        timestamp: datetime | None = None,
    ) -> BulkOperationResponse:
        """Run ``request`` as ``actor``.

        ``timestamp`` is shared by every record touched; defaults to now.

        Raises:
            AdminRequiredError / ForbiddenError: role or ownership check failed
            UnknownActionError: action not in the table
            NotFoundError: one or more ids do not exist
            ConstraintError: at least one guard failed
            StorageError: commit failed
        """
        self.table.check_access(actor)
        action, spec = self.table.resolve(request.action)
        log = logger.bind(resource=self.table.resource, action=action.value)

        self._check_role(actor, spec)

        records = await self._load(request.ids)

        if spec.owner_scoped and not actor.is_admin:
            await self._check_ownership(actor, records)

        violations = await self._check_guards(spec, records)
        if violations:
            log.info("bulk_action_rejected", violations=len(violations))
            raise ConstraintError(violations)

        mutation = spec.recipe(timestamp or datetime.now(UTC), request.data or {})
        await self._stage(mutation, records)

        try:
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            log.error("bulk_commit_failed", error=str(exc))
            raise StorageError() from exc

        log.info("bulk_action_committed", updated=len(request.ids))
        return BulkOperationResponse(
            success=True,
            updated=len(request.ids),
            action=action.value,
        )

    def _check_role(self, actor: Actor, spec: ActionSpec) -> None:
        if actor.role in spec.roles:
            return
        if spec.roles == ADMIN_ONLY:
            raise AdminRequiredError()
        raise ForbiddenError()

    async def _load(self, ids: list[str]) -> dict[str, Any]:
        """Fetch records keyed by id, in request order (duplicates collapse)."""
        unique_ids = list(dict.fromkeys(ids))
        model = self.table.model
        result = await self.db.execute(select(model).where(model.id.in_(unique_ids)))
        found = {record.id: record for record in result.scalars().all()}

        missing = [item_id for item_id in unique_ids if item_id not in found]
        if missing:
            raise NotFoundError(self.table.model.__name__, missing)

        return {item_id: found[item_id] for item_id in unique_ids}

    async def _check_ownership(self, actor: Actor, records: dict[str, Any]) -> None:
        """All-or-nothing: one foreign record rejects the whole batch."""
        from app.modules.shops.models import Shop

        result = await self.db.execute(select(Shop.id).where(Shop.owner_id == actor.id))
        own_shops = set(result.scalars().all())

        foreign = [
            item_id
            for item_id, record in records.items()
            if getattr(record, self.table.owner_field) not in own_shops
        ]
        if foreign:
            logger.info(
                "bulk_action_rejected",
                resource=self.table.resource,
                reason="ownership",
                ids=foreign,
            )
            raise ForbiddenError(
                detail={"resource": self.table.resource, "ids": foreign},
            )

    async def _check_guards(
        self, spec: ActionSpec, records: dict[str, Any]
    ) -> list[dict[str, str]]:
        violations: list[dict[str, str]] = []
        for item_id, record in records.items():
            for guard in spec.guards:
                reason = await guard(self.db, record)
                if reason:
                    violations.append({"id": item_id, "reason": reason})
        return violations

    async def _stage(self, mutation: Mutation, records: dict[str, Any]) -> None:
        for record in records.values():
            if mutation.delete:
                await self.db.delete(record)
            else:
                for name, value in mutation.changes.items():
                    setattr(record, name, value)
