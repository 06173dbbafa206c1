"""Role-based view routing.

Maps each role to its dashboard and decides whether a caller may open a
role-scoped screen. Decisions are returned as data; the HTTP layer (and the
frontend) turn a denial into a redirect.
"""

import logging
from dataclasses import dataclass

from hostelconnect.auth.roles import Role
from hostelconnect.models.user import User

logger = logging.getLogger(__name__)

DASHBOARD_PATHS: dict[Role, str] = {
    Role.STUDENT: "/student-dashboard",
    Role.OWNER: "/owner-dashboard",
    Role.ADMIN: "/admin-dashboard",
}

SIGN_IN_PATH = "/auth?mode=login"

SIGN_IN_NOTICE = "Please sign in to continue."
NO_ACCESS_NOTICE = "You don't have access to that page."


@dataclass(frozen=True)
class AccessDecision:
    allowed: bool
    redirect_to: str | None = None
    notice: str | None = None


def landing_path(role: Role) -> str:
    """Return the dashboard path a freshly signed-in user is sent to."""
    return DASHBOARD_PATHS[role]


def check_access(user: User | None, screen_role: Role) -> AccessDecision:
    """Decide whether ``user`` may open the screen scoped to ``screen_role``.

    * no session -> redirect to sign-in
    * matching role -> allowed
    * admin -> allowed everywhere (read access to every dashboard)
    * any other role -> redirect to the caller's own dashboard
    """
    if user is None:
        return AccessDecision(allowed=False, redirect_to=SIGN_IN_PATH, notice=SIGN_IN_NOTICE)

    role = user.access_role
    if role is screen_role or role is Role.ADMIN:
        return AccessDecision(allowed=True)

    logger.info("Redirecting %s user %s away from %s screen", role.value, user.id, screen_role.value)
    return AccessDecision(allowed=False, redirect_to=landing_path(role), notice=NO_ACCESS_NOTICE)
