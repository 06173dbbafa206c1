"""Shared API dependencies: single import point for all routers.

Re-exports the database session, authentication and role dependencies so
that router modules can import everything they need from one place::

    from hostelconnect.api.deps import get_db, get_current_user, require_roles
"""

from hostelconnect.auth.dependencies import get_current_user, get_optional_user
from hostelconnect.auth.permissions import require_roles
from hostelconnect.database import get_db

__all__ = [
    "get_db",
    "get_current_user",
    "get_optional_user",
    "require_roles",
]
