"""
API Schemas for TalentLedger

Pydantic models for request validation and response serialization:
- Auth models
- Talent models
- Adjustment models

Request models enforce the same ranges as the storage layer, which checks
them again on every write.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict

from talentledger.storage.models import (
    Dimension,
    SCORE_MIN,
    SCORE_MAX,
    POINTS_MIN,
    POINTS_MAX,
)


# =============================================================================
# Auth Schemas
# =============================================================================

class Credentials(BaseModel):
    """Username/password pair for register and login."""

    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: int
    username: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SessionResponse(BaseModel):
    username: str


class UsernameUpdate(BaseModel):
    username: str = Field(..., min_length=1, max_length=255)


class PasswordUpdate(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


# =============================================================================
# Talent Schemas
# =============================================================================

class TalentBase(BaseModel):
    """Base talent fields."""

    name: str = Field(..., min_length=1, max_length=255)
    affiliation: Optional[str] = Field(None, max_length=255)

    beauty: int = Field(..., ge=SCORE_MIN, le=SCORE_MAX)
    cuteness: int = Field(..., ge=SCORE_MIN, le=SCORE_MAX)
    talent: int = Field(..., ge=SCORE_MIN, le=SCORE_MAX)


class TalentCreate(TalentBase):
    """Talent creation request."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "山田花子",
                "affiliation": "Sakura Productions",
                "beauty": 7,
                "cuteness": 8,
                "talent": 6,
            }
        }
    )


class TalentUpdate(TalentBase):
    """Talent update request (full replacement of base fields)."""


class TalentResponse(TalentBase):
    """Talent with current totals."""

    id: int
    total_beauty: int
    total_cuteness: int
    total_talent: int
    is_favorite: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TalentListResponse(BaseModel):
    talents: list[TalentResponse]
    total: int
    query: Optional[str] = None


# =============================================================================
# Adjustment Schemas
# =============================================================================

class AdjustmentCreate(BaseModel):
    """Score adjustment request."""

    adjustment_type: Dimension
    points: int = Field(..., ge=POINTS_MIN, le=POINTS_MAX)
    reason: str = Field(..., min_length=1)


class AdjustmentResponse(BaseModel):
    id: int
    talent_id: int
    adjustment_type: Dimension
    points: int
    reason: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AdjustmentCreatedResponse(BaseModel):
    id: int
    talent: TalentResponse


class TalentDetailResponse(BaseModel):
    """Talent plus its adjustment history, newest first."""

    talent: TalentResponse
    adjustments: list[AdjustmentResponse]

    model_config = ConfigDict(from_attributes=True)


# =============================================================================
# System Schemas
# =============================================================================

class HealthResponse(BaseModel):
    status: str
    version: str
    components: dict[str, str] = Field(default_factory=dict)
    active_sessions: int = 0


class ErrorResponse(BaseModel):
    error: str
    code: str
    detail: Optional[str] = None
    timestamp: datetime
