"""Ownership / visibility access policy.

`can_access` is a pure decision function: it never touches the database and
never raises. Rules, first match wins:

1. resource does not exist -> NOT_FOUND
2. create-child, update, delete -> owner only (public never relaxes writes)
3. read -> anyone when public, otherwise owner only
4. anything else -> FORBIDDEN

An anonymous actor (``None``) can only ever satisfy the public-read branch.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from gymlog.core.errors import ForbiddenError, NotFoundError


class Operation(str, Enum):
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    CREATE_CHILD = "create-child"


class AccessDecision(str, Enum):
    ALLOW = "allow"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class Resource:
    """Ownership attributes of a resource; everything the policy looks at."""

    owner_id: Any
    is_public: bool = False


_OWNER_ONLY = {Operation.CREATE_CHILD, Operation.UPDATE, Operation.DELETE}


def _is_owner(actor_id: Any, owner_id: Any) -> bool:
    # Ids arrive as UUIDs from the ORM and as strings from tokens/paths
    return actor_id is not None and owner_id is not None and str(actor_id) == str(owner_id)


def can_access(actor_id: Any, resource: Resource | None, operation: Operation) -> AccessDecision:
    if resource is None:
        return AccessDecision.NOT_FOUND
    if operation in _OWNER_ONLY:
        return AccessDecision.ALLOW if _is_owner(actor_id, resource.owner_id) else AccessDecision.FORBIDDEN
    if operation == Operation.READ:
        if resource.is_public or _is_owner(actor_id, resource.owner_id):
            return AccessDecision.ALLOW
        return AccessDecision.FORBIDDEN
    return AccessDecision.FORBIDDEN


def ensure_access(
    actor_id: Any,
    resource: Resource | None,
    operation: Operation,
    *,
    label: str = "Resource",
    forbidden_message: str | None = None,
    hide_forbidden: bool = False,
) -> None:
    """Raise NotFoundError / ForbiddenError unless `can_access` allows.

    With ``hide_forbidden`` a forbidden decision is reported as not found, so the
    caller does not disclose that a private resource exists.
    """
    decision = can_access(actor_id, resource, operation)
    if decision == AccessDecision.ALLOW:
        return
    if decision == AccessDecision.NOT_FOUND or hide_forbidden:
        raise NotFoundError(f"{label} not found")
    raise ForbiddenError(forbidden_message or f"You do not have permission to {operation.value} this {label.lower()}")
