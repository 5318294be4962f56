"""
Authentication API Routes for TalentLedger.

Handles:
- User registration
- Login (session cookie issue) and logout (revoke)
- Current user retrieval and credential changes
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from loguru import logger

from talentledger.api.dependencies import (
    Settings,
    get_app_settings,
    get_user_repository,
    get_session_registry,
    get_session_token,
    get_current_user,
)
from talentledger.api.schemas import (
    Credentials,
    UserResponse,
    SessionResponse,
    UsernameUpdate,
    PasswordUpdate,
    ErrorResponse,
)
from talentledger.errors import AuthenticationError, NotFoundError
from talentledger.security import get_password_hash, verify_password
from talentledger.storage import SessionRegistry, StoredUser, UserRepository

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookie(response: Response, settings: Settings, token: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_cookie_max_age,
        path="/",
        httponly=True,
        samesite="lax",
    )


# --- Endpoints ---

@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse, "description": "Username taken"}},
)
def register(
    credentials: Credentials,
    users: UserRepository = Depends(get_user_repository),
):
    """Register a new user."""
    user_id = users.create(credentials.username, get_password_hash(credentials.password))
    return users.find_by_id(user_id)


@router.post(
    "/login",
    response_model=SessionResponse,
    responses={401: {"model": ErrorResponse, "description": "Bad credentials"}},
)
def login(
    credentials: Credentials,
    response: Response,
    users: UserRepository = Depends(get_user_repository),
    sessions: SessionRegistry = Depends(get_session_registry),
    settings: Settings = Depends(get_app_settings),
):
    """Check credentials and start a session cookie."""
    try:
        user = users.find_by_username(credentials.username)
    except NotFoundError:
        raise AuthenticationError("Incorrect username or password")

    if not verify_password(credentials.password, user.password_hash):
        raise AuthenticationError("Incorrect username or password")

    token = sessions.issue(user.username)
    _set_session_cookie(response, settings, token)

    logger.info(f"User {user.id} logged in")
    return SessionResponse(username=user.username)


@router.post("/logout")
def logout(
    response: Response,
    token: Optional[str] = Depends(get_session_token),
    sessions: SessionRegistry = Depends(get_session_registry),
    settings: Settings = Depends(get_app_settings),
):
    """End the current session. Safe to call without one."""
    sessions.revoke(token)
    response.delete_cookie(settings.session_cookie_name, path="/", httponly=True)
    return {"message": "Logged out"}


@router.get("/me", response_model=UserResponse)
def read_users_me(current_user: StoredUser = Depends(get_current_user)):
    """Get current user profile."""
    return current_user


@router.put(
    "/username",
    response_model=SessionResponse,
    responses={409: {"model": ErrorResponse, "description": "Username taken"}},
)
def change_username(
    update: UsernameUpdate,
    response: Response,
    current_user: StoredUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
    sessions: SessionRegistry = Depends(get_session_registry),
    settings: Settings = Depends(get_app_settings),
):
    """
    Rename the current user.

    Sessions map tokens to usernames, so every session of the old name is
    ended and the caller gets a fresh one for the new name. Other devices
    must log in again.
    """
    users.update_username(current_user.id, update.username)

    sessions.revoke_user(current_user.username)
    _set_session_cookie(response, settings, sessions.issue(update.username))

    return SessionResponse(username=update.username)


@router.put("/password")
def change_password(
    update: PasswordUpdate,
    response: Response,
    current_user: StoredUser = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
    sessions: SessionRegistry = Depends(get_session_registry),
    settings: Settings = Depends(get_app_settings),
):
    """Change the current user's password and log out their other sessions."""
    if not verify_password(update.current_password, current_user.password_hash):
        raise AuthenticationError("Incorrect password")

    users.update_password(current_user.id, get_password_hash(update.new_password))

    sessions.revoke_user(current_user.username)
    _set_session_cookie(response, settings, sessions.issue(current_user.username))
    return {"message": "Password updated"}
