"""
Adjustment Ledger for TalentLedger

Durable, append-only storage of score adjustments:
- One row per adjustment, never updated
- Rows disappear only through the talent cascade delete
- History is re-queryable, newest first

Trust boundary:
    record() checks that the talent exists (through the foreign key) but
    NOT who owns it. Callers must check ownership first with
    TalentRepository.exists(), as ScoringService.adjust() does.
"""

from datetime import datetime
from dataclasses import dataclass
from typing import Optional, Union

from loguru import logger
from sqlalchemy.exc import IntegrityError

from talentledger.errors import NotFoundError
from .database import Database
from .models import AdjustmentModel, Dimension
from .validation import validate_dimension, validate_points, validate_text


@dataclass
class StoredAdjustment:
    """Data class for adjustment data transfer."""

    id: int
    talent_id: int
    adjustment_type: str
    points: int
    reason: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, model: AdjustmentModel) -> "StoredAdjustment":
        """Create from SQLAlchemy model. Raises ValueError on an unknown type."""
        return cls(
            id=model.id,
            talent_id=model.talent_id,
            adjustment_type=Dimension(model.adjustment_type).value,
            points=int(model.points),
            reason=model.reason,
            created_at=model.created_at,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "talent_id": self.talent_id,
            "adjustment_type": self.adjustment_type,
            "points": self.points,
            "reason": self.reason,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class AdjustmentRepository:
    """
    Append-only ledger of score adjustments.

    Usage:
        ledger = AdjustmentRepository(db)
        ledger.record(talent_id, "beauty", 3, "glow-up")
        for adj in ledger.history(talent_id):
            print(adj.points, adj.reason)
    """

    def __init__(self, db: Database):
        self.db = db

    def record(
        self,
        talent_id: int,
        dimension: Union[str, Dimension],
        points: int,
        reason: str,
    ) -> int:
        """
        Append one adjustment.

        Args:
            talent_id: Talent to adjust (ownership already checked by caller)
            dimension: beauty, cuteness or talent
            points: -10..10
            reason: Non-empty free text

        Returns:
            New adjustment id

        Raises:
            ValidationError: bad dimension, points or reason
            NotFoundError: talent does not exist
        """
        dim = validate_dimension(dimension)
        validate_points(points)
        validate_text(reason, "reason")

        with self.db.session() as session:
            adjustment = AdjustmentModel(
                talent_id=talent_id,
                adjustment_type=dim.value,
                points=points,
                reason=reason,
            )
            session.add(adjustment)
            try:
                session.commit()
            except IntegrityError as e:
                # Input is already validated, so the only remaining constraint is the talent FK
                session.rollback()
                raise NotFoundError("Talent", talent_id) from e

            logger.debug(
                f"Recorded adjustment {adjustment.id}: talent={talent_id} "
                f"{dim.value} {points:+d}"
            )
            return adjustment.id

    def history(self, talent_id: int) -> list[StoredAdjustment]:
        """
        All adjustments of a talent, newest first.

        An unknown talent yields an empty list.
        """
        with self.db.session() as session:
            rows = session.query(AdjustmentModel).filter(
                AdjustmentModel.talent_id == talent_id,
            ).order_by(
                AdjustmentModel.created_at.desc(),
                AdjustmentModel.id.desc(),
            ).all()

            adjustments = []
            for row in rows:
                try:
                    adjustments.append(StoredAdjustment.from_model(row))
                except (ValueError, TypeError) as e:
                    logger.warning(f"Skipping undecodable adjustment {row.id}: {e}")

            return adjustments
