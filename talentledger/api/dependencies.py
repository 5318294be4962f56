"""
Dependency injection for FastAPI routes.

Provides injectable dependencies for:
- Configuration
- Repository and service instances
- Session-cookie authentication
"""

import threading
from typing import Optional

from fastapi import Depends, Request

from talentledger.config import Settings, get_settings
from talentledger.errors import AuthenticationError, NotFoundError
from talentledger.scoring import ScoringService
from talentledger.storage import (
    Database,
    AdjustmentRepository,
    ScoreAggregator,
    TalentRepository,
    UserRepository,
    SessionRegistry,
    StoredUser,
)


# =============================================================================
# Service Container
# =============================================================================

class ServiceContainer:
    """
    Container for the application's repositories and services.

    The database is opened on first access so importing the app has no
    side effects. The session registry lives exactly as long as the
    container.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.session_registry = SessionRegistry()
        self._lock = threading.Lock()
        self._database: Optional[Database] = None
        self._user_repository = None
        self._adjustment_repository = None
        self._score_aggregator = None
        self._talent_repository = None
        self._scoring_service = None

    def _ensure_database(self) -> None:
        if self._database is not None:
            return
        with self._lock:
            if self._database is not None:
                return
            database = Database(
                self.settings.database_url,
                echo=self.settings.database_echo,
            )
            database.create_tables()

            self._user_repository = UserRepository(database)
            self._adjustment_repository = AdjustmentRepository(database)
            self._score_aggregator = ScoreAggregator(database)
            self._talent_repository = TalentRepository(database, self._score_aggregator)
            self._scoring_service = ScoringService(
                self._talent_repository,
                self._adjustment_repository,
            )
            self._database = database

    @property
    def database(self) -> Database:
        self._ensure_database()
        return self._database

    @property
    def user_repository(self) -> UserRepository:
        self._ensure_database()
        return self._user_repository

    @property
    def adjustment_repository(self) -> AdjustmentRepository:
        self._ensure_database()
        return self._adjustment_repository

    @property
    def score_aggregator(self) -> ScoreAggregator:
        self._ensure_database()
        return self._score_aggregator

    @property
    def talent_repository(self) -> TalentRepository:
        self._ensure_database()
        return self._talent_repository

    @property
    def scoring_service(self) -> ScoringService:
        self._ensure_database()
        return self._scoring_service

    def close(self) -> None:
        if self._database is not None:
            self._database.dispose()


def get_service_container(request: Request) -> ServiceContainer:
    """Get the container attached to the running app."""
    return request.app.state.services


# =============================================================================
# Individual Service Dependencies
# =============================================================================

def get_app_settings(
    container: ServiceContainer = Depends(get_service_container),
) -> Settings:
    """Settings the app was created with (may differ from the env in tests)."""
    return container.settings


def get_user_repository(
    container: ServiceContainer = Depends(get_service_container),
) -> UserRepository:
    return container.user_repository


def get_talent_repository(
    container: ServiceContainer = Depends(get_service_container),
) -> TalentRepository:
    return container.talent_repository


def get_scoring_service(
    container: ServiceContainer = Depends(get_service_container),
) -> ScoringService:
    return container.scoring_service


def get_session_registry(
    container: ServiceContainer = Depends(get_service_container),
) -> SessionRegistry:
    return container.session_registry


# =============================================================================
# Authentication Dependencies
# =============================================================================

def get_session_token(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> Optional[str]:
    """Session token from the cookie, if any."""
    return request.cookies.get(settings.session_cookie_name)


def get_current_username(
    token: Optional[str] = Depends(get_session_token),
    sessions: SessionRegistry = Depends(get_session_registry),
) -> str:
    """
    Username of the active session.

    Raises:
        AuthenticationError: no cookie, or token unknown or revoked
    """
    username = sessions.resolve(token)
    if username is None:
        raise AuthenticationError()
    return username


def get_current_user(
    username: str = Depends(get_current_username),
    users: UserRepository = Depends(get_user_repository),
) -> StoredUser:
    """Resolve the session's username to the owning user record."""
    try:
        return users.find_by_username(username)
    except NotFoundError:
        raise AuthenticationError()


def get_current_owner_id(
    username: str = Depends(get_current_username),
    users: UserRepository = Depends(get_user_repository),
) -> int:
    """Owner id the talent catalog is scoped by."""
    try:
        return users.get_id(username)
    except NotFoundError:
        raise AuthenticationError()


__all__ = [
    "Settings",
    "get_settings",
    "ServiceContainer",
    "get_service_container",
    "get_app_settings",
    "get_user_repository",
    "get_talent_repository",
    "get_scoring_service",
    "get_session_registry",
    "get_session_token",
    "get_current_username",
    "get_current_user",
    "get_current_owner_id",
]
