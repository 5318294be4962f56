"""
Scoring Service

Composes the talent catalog and the adjustment ledger into the two flows
the API needs:
- adjust(): ownership check, then append to the ledger
- detail(): talent view with totals plus its adjustment history
"""

from dataclasses import dataclass, field
from typing import Union

from loguru import logger

from talentledger.errors import NotFoundError
from talentledger.storage.adjustment_repository import AdjustmentRepository, StoredAdjustment
from talentledger.storage.models import Dimension
from talentledger.storage.talent_repository import TalentRepository, StoredTalent


@dataclass
class TalentDetail:
    """A talent together with its ledger, newest entry first."""

    talent: StoredTalent
    adjustments: list[StoredAdjustment] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "talent": self.talent.to_dict(),
            "adjustments": [a.to_dict() for a in self.adjustments],
        }


class ScoringService:
    """
    Owner-aware front for the ledger.

    AdjustmentRepository.record() trusts its caller about ownership; this
    service is that caller.
    """

    def __init__(self, talents: TalentRepository, ledger: AdjustmentRepository):
        self.talents = talents
        self.ledger = ledger

    def adjust(
        self,
        talent_id: int,
        owner_id: int,
        dimension: Union[str, Dimension],
        points: int,
        reason: str,
    ) -> int:
        """
        Record an adjustment on an owned talent.

        Returns:
            New adjustment id

        Raises:
            NotFoundError: talent absent or owned by someone else
            ValidationError: bad dimension, points or reason
        """
        if not self.talents.exists(talent_id, owner_id):
            raise NotFoundError("Talent", talent_id)

        adjustment_id = self.ledger.record(talent_id, dimension, points, reason)
        logger.info(f"User {owner_id} adjusted talent {talent_id}")
        return adjustment_id

    def detail(self, talent_id: int, owner_id: int) -> TalentDetail:
        talent = self.talents.get(talent_id, owner_id)
        return TalentDetail(talent=talent, adjustments=self.ledger.history(talent_id))
