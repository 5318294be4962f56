"""
Database models for TalentLedger.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Boolean,
    DateTime,
    ForeignKey,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()

SCORE_MIN = 1
SCORE_MAX = 10
POINTS_MIN = -10
POINTS_MAX = 10


class Dimension(str, Enum):
    """Independently scored axis of a talent."""
    BEAUTY = "beauty"
    CUTENESS = "cuteness"
    TALENT = "talent"


DIMENSIONS = tuple(d.value for d in Dimension)


class User(Base):
    """User model for authentication."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)


class TalentModel(Base):
    """Talent base record. Totals are never stored here."""
    __tablename__ = "talents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    name = Column(String(255), nullable=False)
    affiliation = Column(String(255), nullable=True)
    beauty = Column(Integer, nullable=False)
    cuteness = Column(Integer, nullable=False)
    talent = Column(Integer, nullable=False)
    is_favorite = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)

    __table_args__ = (
        CheckConstraint("beauty >= 1 AND beauty <= 10", name="ck_talents_beauty"),
        CheckConstraint("cuteness >= 1 AND cuteness <= 10", name="ck_talents_cuteness"),
        CheckConstraint("talent >= 1 AND talent <= 10", name="ck_talents_talent"),
        Index("idx_talents_owner", "user_id", "is_favorite", "created_at"),
    )


class AdjustmentModel(Base):
    """Append-only ledger row."""
    __tablename__ = "adjustments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    talent_id = Column(
        Integer,
        ForeignKey("talents.id", ondelete="CASCADE"),
        nullable=False,
    )
    adjustment_type = Column(String(20), nullable=False)
    points = Column(Integer, nullable=False)
    reason = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "adjustment_type IN ('beauty', 'cuteness', 'talent')",
            name="ck_adjustments_type",
        ),
        CheckConstraint("points >= -10 AND points <= 10", name="ck_adjustments_points"),
        Index("idx_adjustments_talent_type", "talent_id", "adjustment_type"),
    )
