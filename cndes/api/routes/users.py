"""
Routes: /api/users (operator list, password changes).
"""

from fastapi import APIRouter, Depends

from cndes.api.dependencies import Container, get_container, get_current_user, require_admin
from cndes.api.schemas.requests import PasswordUpdate
from cndes.api.schemas.responses import ChangesResponse, UserListResponse, UserOut
from cndes.core.entities.user import User

router = APIRouter(prefix="/users")


@router.get("", response_model=UserListResponse)
def list_users(
    _: User = Depends(require_admin),
    container: Container = Depends(get_container),
):
    return UserListResponse(data=[UserOut.from_entity(u) for u in container.users.list_users()])


@router.put("/{username}", response_model=ChangesResponse)
def update_password(
    username: str,
    body: PasswordUpdate,
    actor: User = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    """Admins change any password, users their own. Existing sessions of that user end."""
    changes = container.change_password.execute(actor, username, body.password)
    return ChangesResponse(message="success", changes=changes)
