"""
Who may do what.

Every route asks this module before touching storage. The table below is the
single place where roles are checked; decisions depend only on the actor, the
operation and (for account-scoped operations) the target username.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from core.errors import AuthenticationRequiredError, AuthorizationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actor:
    username: str | None = None
    is_admin: bool = False

    @classmethod
    def anonymous(cls) -> "Actor":
        return cls()

    @property
    def is_authenticated(self) -> bool:
        return self.username is not None


class Classification(str, Enum):
    ANONYMOUS = "anonymous"
    SELF = "self"
    OTHER = "other"
    ADMIN = "admin"


class Audience(str, Enum):
    PUBLIC = "public"
    ADMIN = "admin"
    SELF_OR_ADMIN = "self_or_admin"


class Operation(str, Enum):
    LIST_ORGANIZATIONS = "list-organizations"
    READ_ORGANIZATION = "read-organization"
    CREATE_ORGANIZATION = "create-organization"
    UPDATE_ORGANIZATION = "update-organization"
    DELETE_ORGANIZATION = "delete-organization"

    LIST_POSTINGS = "list-postings"
    READ_POSTING = "read-posting"
    CREATE_POSTING = "create-posting"
    UPDATE_POSTING = "update-posting"
    DELETE_POSTING = "delete-posting"

    CREATE_ACCOUNT = "create-account"
    LIST_ACCOUNTS = "list-accounts"
    READ_ACCOUNT = "read-account"
    UPDATE_ACCOUNT = "update-account"
    DELETE_ACCOUNT = "delete-account"
    APPLY_TO_POSTING = "apply-to-posting"


POLICY: dict[Operation, Audience] = {
    Operation.LIST_ORGANIZATIONS: Audience.PUBLIC,
    Operation.READ_ORGANIZATION: Audience.PUBLIC,
    Operation.CREATE_ORGANIZATION: Audience.ADMIN,
    Operation.UPDATE_ORGANIZATION: Audience.ADMIN,
    Operation.DELETE_ORGANIZATION: Audience.ADMIN,
    Operation.LIST_POSTINGS: Audience.PUBLIC,
    Operation.READ_POSTING: Audience.PUBLIC,
    Operation.CREATE_POSTING: Audience.ADMIN,
    Operation.UPDATE_POSTING: Audience.ADMIN,
    Operation.DELETE_POSTING: Audience.ADMIN,
    Operation.CREATE_ACCOUNT: Audience.ADMIN,
    Operation.LIST_ACCOUNTS: Audience.ADMIN,
    Operation.READ_ACCOUNT: Audience.SELF_OR_ADMIN,
    Operation.UPDATE_ACCOUNT: Audience.SELF_OR_ADMIN,
    Operation.DELETE_ACCOUNT: Audience.SELF_OR_ADMIN,
    Operation.APPLY_TO_POSTING: Audience.SELF_OR_ADMIN,
}


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ""


def classify(actor: Actor, target: str | None = None) -> Classification:
    if not actor.is_authenticated:
        return Classification.ANONYMOUS
    if actor.is_admin:
        return Classification.ADMIN
    if target is not None and actor.username == target:
        return Classification.SELF
    return Classification.OTHER


def evaluate(actor: Actor, operation: Operation | str, target: str | None = None) -> Decision:
    operation = Operation(operation)
    audience = POLICY[operation]
    who = classify(actor, target)

    if audience is Audience.PUBLIC:
        return Decision(True, "public operation")
    if who is Classification.ADMIN:
        return Decision(True, "admin")
    if audience is Audience.SELF_OR_ADMIN and who is Classification.SELF:
        return Decision(True, "acting on own account")

    if who is Classification.ANONYMOUS:
        return Decision(False, "authentication required")
    if audience is Audience.ADMIN:
        return Decision(False, "admin only")
    return Decision(False, "not the target account")


def enforce(actor: Actor, operation: Operation | str, target: str | None = None) -> None:
    """
    Raise when `evaluate` denies.

    Anonymous callers get AuthenticationRequiredError (401); authenticated
    callers get AuthorizationError (403). The reason is only logged.
    """
    decision = evaluate(actor, operation, target)
    if decision.allowed:
        return None

    logger.debug(
        "access_denied operation=%s actor=%s target=%s reason=%s",
        Operation(operation).value,
        actor.username,
        target,
        decision.reason,
    )
    if not actor.is_authenticated:
        raise AuthenticationRequiredError()
    raise AuthorizationError()
