"""
Score aggregation over the adjustment ledger.

current score = base score + SUM(points) for (talent, dimension)

Totals are recomputed on every read and never stored.
"""

from typing import Iterable, Union

from loguru import logger
from sqlalchemy import func

from .database import Database
from .models import AdjustmentModel, Dimension, DIMENSIONS
from .validation import validate_dimension


class ScoreAggregator:
    """
    Computes per-dimension totals from the ledger.

    Use total_for() for a single talent and batch_totals() for anything
    that renders a list; the batch path costs one query regardless of size.
    """

    def __init__(self, db: Database):
        self.db = db

    def total_for(
        self,
        talent_id: int,
        dimension: Union[str, Dimension],
        base: int,
    ) -> int:
        """
        Base plus ledger sum for one dimension.

        A talent without adjustments yields exactly ``base``.
        """
        dim = validate_dimension(dimension)

        with self.db.session() as session:
            total = session.query(
                func.coalesce(func.sum(AdjustmentModel.points), 0),
            ).filter(
                AdjustmentModel.talent_id == talent_id,
                AdjustmentModel.adjustment_type == dim.value,
            ).scalar()

        return base + int(total or 0)

    def batch_totals(self, talent_ids: Iterable[int]) -> dict[int, dict[str, int]]:
        """
        Ledger sums for many talents in a single grouped query.

        Args:
            talent_ids: Talent ids to aggregate

        Returns:
            Dict of talent_id -> {"beauty": n, "cuteness": n, "talent": n}.
            Every requested id is present; missing dimensions are 0.
            Base scores are NOT included.

        The ids are bound as one IN list, so a single call is limited by
        SQLite's host parameter cap (32766 on current builds).
        """
        ids = set(talent_ids)
        if not ids:
            return {}

        result = {talent_id: {dim: 0 for dim in DIMENSIONS} for talent_id in ids}

        with self.db.session() as session:
            rows = session.query(
                AdjustmentModel.talent_id,
                AdjustmentModel.adjustment_type,
                func.coalesce(func.sum(AdjustmentModel.points), 0),
            ).filter(
                AdjustmentModel.talent_id.in_(ids),
            ).group_by(
                AdjustmentModel.talent_id,
                AdjustmentModel.adjustment_type,
            ).all()

        for talent_id, adjustment_type, points in rows:
            if talent_id not in result or adjustment_type not in DIMENSIONS:
                logger.warning(
                    f"Skipping aggregate row talent={talent_id} type={adjustment_type!r}"
                )
                continue
            result[talent_id][adjustment_type] = int(points)

        return result
