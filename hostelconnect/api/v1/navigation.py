"""Navigation API: where a user lands and which screens they may open."""

from fastapi import APIRouter, Depends

from hostelconnect.api.deps import get_current_user, get_optional_user
from hostelconnect.auth.roles import Role
from hostelconnect.models.user import User
from hostelconnect.navigation import check_access, landing_path
from hostelconnect.schemas.dashboard import AccessDecisionResponse, LandingResponse

router = APIRouter(prefix="/api/v1/navigation", tags=["navigation"])


@router.get("/landing", response_model=LandingResponse)
async def landing(current_user: User = Depends(get_current_user)) -> LandingResponse:
    """The dashboard the signed-in user should be sent to."""
    role = current_user.access_role
    return LandingResponse(role=role.value, redirect_to=landing_path(role))


@router.get("/access/{screen}", response_model=AccessDecisionResponse)
async def access(
    screen: Role,
    current_user: User | None = Depends(get_optional_user),
) -> AccessDecisionResponse:
    """Whether the caller may open the ``screen`` dashboard; works signed out too."""
    decision = check_access(current_user, screen)
    return AccessDecisionResponse(
        allowed=decision.allowed,
        redirect_to=decision.redirect_to,
        notice=decision.notice,
    )
