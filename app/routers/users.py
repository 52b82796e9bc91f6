"""User profile and administration endpoints."""

from fastapi import APIRouter, Depends, Query

from app.dependencies import CurrentUser, get_current_user, get_user_store, require_roles
from app.errors import CredentialsTakenError, NotFoundError
from app.models.role import RoleName
from app.schemas.user import UpdateUserRequest, UserListResponse, UserProfile
from app.services.user_store import DuplicateEmailError, UserStore

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


@router.get("/me", response_model=UserProfile)
def get_me(
    user: CurrentUser = Depends(get_current_user),
    store: UserStore = Depends(get_user_store),
) -> UserProfile:
    """Return the caller's profile."""
    record = store.find_by_id(user.user_id)
    if record is None:
        raise NotFoundError()
    return UserProfile.model_validate(record)


@router.patch("/me", response_model=UserProfile)
def update_me(
    body: UpdateUserRequest,
    user: CurrentUser = Depends(get_current_user),
    store: UserStore = Depends(get_user_store),
) -> UserProfile:
    """Update the caller's name and email."""
    try:
        record = store.update(
            user.user_id,
            first_name=body.first_name,
            last_name=body.last_name,
            email=body.email,
        )
    except DuplicateEmailError:
        raise CredentialsTakenError() from None
    if record is None:
        raise NotFoundError()
    return UserProfile.model_validate(record)


@router.get("/", response_model=UserListResponse)
def list_users(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    _: CurrentUser = Depends(require_roles(RoleName.SUPER_ADMIN, RoleName.ADMIN)),
    store: UserStore = Depends(get_user_store),
) -> UserListResponse:
    """List all users. Admins only."""
    users, total = store.list_users(limit=limit, offset=offset)
    return UserListResponse(items=[UserProfile.model_validate(u) for u in users], total=total)
