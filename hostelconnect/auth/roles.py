"""Account roles.

A role enters the system in two places: signup (validated by the request
schema, unknown values rejected) and reads of stored users. ``parse_role``
is the single place where a stored value is turned back into a ``Role``.
"""

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class Role(str, Enum):
    """The three account roles. Fixed per account after signup."""

    STUDENT = "student"
    OWNER = "owner"
    ADMIN = "admin"


def parse_role(value: str | None, *, default: Role = Role.STUDENT) -> Role:
    """Convert a stored role string into a ``Role``.

    Unknown or missing values fall back to ``default`` with a logged warning
    instead of propagating an arbitrary string through authorization checks.
    """
    if isinstance(value, Role):
        return value
    try:
        return Role((value or "").strip().lower())
    except ValueError:
        logger.warning("Unknown role %r, defaulting to %s", value, default.value)
        return default
