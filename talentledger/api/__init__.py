"""
TalentLedger - FastAPI Backend.

Session-authenticated HTTP surface over the talent catalog and score ledger.
"""

from .main import app, create_app, main
from .dependencies import (
    Settings,
    get_settings,
    get_service_container,
    ServiceContainer,
)
from .schemas import (
    TalentBase,
    TalentCreate,
    TalentUpdate,
    TalentResponse,
    TalentListResponse,
    TalentDetailResponse,
    AdjustmentCreate,
    AdjustmentResponse,
    HealthResponse,
    ErrorResponse,
)

__all__ = [
    # Application
    "app",
    "create_app",
    "main",
    # Dependencies
    "Settings",
    "get_settings",
    "get_service_container",
    "ServiceContainer",
    # Schemas
    "TalentBase",
    "TalentCreate",
    "TalentUpdate",
    "TalentResponse",
    "TalentListResponse",
    "TalentDetailResponse",
    "AdjustmentCreate",
    "AdjustmentResponse",
    "HealthResponse",
    "ErrorResponse",
]
