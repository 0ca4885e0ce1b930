"""
Routes: /api/login and /api/session.
"""

from fastapi import APIRouter, Depends

from cndes.api.dependencies import Container, get_container, get_current_user
from cndes.api.schemas.requests import LoginRequest
from cndes.api.schemas.responses import LoginResponse, SessionResponse, UserOut
from cndes.core.entities.user import User

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, container: Container = Depends(get_container)):
    session = container.authenticate.execute(body.username, body.password)
    return LoginResponse(
        user=UserOut.from_entity(session.user),
        token=session.token,
        token_type=session.token_type,
    )


@router.get("/session", response_model=SessionResponse)
def current_session(user: User = Depends(get_current_user)):
    return SessionResponse(user=UserOut.from_entity(user))
