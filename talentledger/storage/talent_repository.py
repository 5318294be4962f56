"""
Talent Catalog for TalentLedger

Owner-scoped storage of talent base records:
- Every read and write filters by (id, owner)
- Views are enriched with totals from the ScoreAggregator
- List views use one grouped aggregation query, never one per row

Design Decisions:
1. Single-statement writes: update, delete and toggle are one UPDATE/DELETE
   each, so concurrent requests cannot interleave a read and a write
2. Idempotent delete: removing a missing or foreign talent is a no-op
3. Search is a plain LIKE with the query wrapped in '%'. Wildcards typed
   by the user are not escaped, so '%' matches every talent
"""

from datetime import datetime
from dataclasses import dataclass
from typing import Optional

from loguru import logger
from sqlalchemy import or_, not_
from sqlalchemy.exc import IntegrityError

from talentledger.errors import NotFoundError
from .database import Database
from .models import TalentModel, Dimension
from .score_aggregator import ScoreAggregator
from .validation import validate_score, validate_text, normalize_affiliation


@dataclass
class StoredTalent:
    """Talent view: base record plus current totals."""

    id: int
    user_id: int
    name: str
    beauty: int
    cuteness: int
    talent: int
    total_beauty: int
    total_cuteness: int
    total_talent: int
    affiliation: Optional[str] = None
    is_favorite: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, model: TalentModel, sums: dict[str, int]) -> "StoredTalent":
        """Create from SQLAlchemy model and per-dimension ledger sums."""
        beauty = int(model.beauty)
        cuteness = int(model.cuteness)
        talent = int(model.talent)
        return cls(
            id=model.id,
            user_id=model.user_id,
            name=model.name,
            affiliation=model.affiliation,
            beauty=beauty,
            cuteness=cuteness,
            talent=talent,
            total_beauty=beauty + sums.get(Dimension.BEAUTY.value, 0),
            total_cuteness=cuteness + sums.get(Dimension.CUTENESS.value, 0),
            total_talent=talent + sums.get(Dimension.TALENT.value, 0),
            is_favorite=bool(model.is_favorite),
            created_at=model.created_at,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "affiliation": self.affiliation,
            "beauty": self.beauty,
            "cuteness": self.cuteness,
            "talent": self.talent,
            "total_beauty": self.total_beauty,
            "total_cuteness": self.total_cuteness,
            "total_talent": self.total_talent,
            "is_favorite": self.is_favorite,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class TalentRepository:
    """
    Repository for owner-scoped talent CRUD, search and favorites.

    Usage:
        catalog = TalentRepository(db, ScoreAggregator(db))

        talent_id = catalog.create(owner_id, "山田花子", None, 5, 6, 7)
        talent = catalog.get(talent_id, owner_id)
        print(talent.total_beauty)
    """

    def __init__(self, db: Database, aggregator: ScoreAggregator):
        self.db = db
        self.aggregator = aggregator

    def _validated_fields(
        self,
        name: str,
        affiliation: Optional[str],
        beauty: int,
        cuteness: int,
        talent: int,
    ) -> dict:
        return {
            "name": validate_text(name, "name"),
            "affiliation": normalize_affiliation(affiliation),
            "beauty": validate_score(beauty, "beauty"),
            "cuteness": validate_score(cuteness, "cuteness"),
            "talent": validate_score(talent, "talent"),
        }

    def _owned(self, session, talent_id: int, owner_id: int):
        return session.query(TalentModel).filter(
            TalentModel.id == talent_id,
            TalentModel.user_id == owner_id,
        )

    def _enrich(self, rows: list[TalentModel]) -> list[StoredTalent]:
        """Attach totals to a list of rows using one batch query."""
        sums = self.aggregator.batch_totals(row.id for row in rows)

        talents = []
        for row in rows:
            try:
                talents.append(StoredTalent.from_model(row, sums.get(row.id, {})))
            except (ValueError, TypeError) as e:
                logger.warning(f"Skipping undecodable talent {row.id}: {e}")
        return talents

    def create(
        self,
        owner_id: int,
        name: str,
        affiliation: Optional[str],
        beauty: int,
        cuteness: int,
        talent: int,
    ) -> int:
        """
        Create a talent for an owner.

        Returns:
            New talent id

        Raises:
            ValidationError: blank name or score outside 1..10
            NotFoundError: owner does not exist
        """
        fields = self._validated_fields(name, affiliation, beauty, cuteness, talent)

        with self.db.session() as session:
            model = TalentModel(user_id=owner_id, is_favorite=False, **fields)
            session.add(model)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise NotFoundError("User", owner_id) from e

            logger.debug(f"Created talent {model.id} for user {owner_id}")
            return model.id

    def update(
        self,
        talent_id: int,
        owner_id: int,
        name: str,
        affiliation: Optional[str],
        beauty: int,
        cuteness: int,
        talent: int,
    ) -> None:
        """
        Replace the base fields of an owned talent.

        Raises:
            ValidationError: same rules as create()
            NotFoundError: no talent matches (id, owner)
        """
        fields = self._validated_fields(name, affiliation, beauty, cuteness, talent)

        with self.db.session() as session:
            count = self._owned(session, talent_id, owner_id).update(
                {getattr(TalentModel, key): value for key, value in fields.items()},
                synchronize_session=False,
            )
            session.commit()

        if count == 0:
            raise NotFoundError("Talent", talent_id)
        logger.debug(f"Updated talent {talent_id}")

    def delete(self, talent_id: int, owner_id: int) -> None:
        """
        Delete an owned talent and, by cascade, its adjustments.

        Missing or foreign ids are ignored.
        """
        with self.db.session() as session:
            count = self._owned(session, talent_id, owner_id).delete(
                synchronize_session=False,
            )
            session.commit()

        logger.debug(f"Delete talent {talent_id} for user {owner_id}: {count} row(s)")

    def get(self, talent_id: int, owner_id: int) -> StoredTalent:
        """
        Get an owned talent with its totals.

        Raises:
            NotFoundError: absent or owned by someone else
        """
        with self.db.session() as session:
            model = self._owned(session, talent_id, owner_id).first()

        if model is None:
            raise NotFoundError("Talent", talent_id)

        sums = {
            dim.value: self.aggregator.total_for(model.id, dim, 0)
            for dim in Dimension
        }
        return StoredTalent.from_model(model, sums)

    def list_by_owner(self, owner_id: int) -> list[StoredTalent]:
        """All talents of an owner, favorites first, then newest first."""
        with self.db.session() as session:
            rows = session.query(TalentModel).filter(
                TalentModel.user_id == owner_id,
            ).order_by(
                TalentModel.is_favorite.desc(),
                TalentModel.created_at.desc(),
                TalentModel.id.desc(),
            ).all()

        return self._enrich(rows)

    def search(self, owner_id: int, query: str) -> list[StoredTalent]:
        """
        Talents whose name or affiliation contains ``query``.

        Same ordering as list_by_owner(). ``%`` and ``_`` in the query act
        as LIKE wildcards.
        """
        pattern = f"%{query}%"

        with self.db.session() as session:
            rows = session.query(TalentModel).filter(
                TalentModel.user_id == owner_id,
                or_(
                    TalentModel.name.like(pattern),
                    TalentModel.affiliation.like(pattern),
                ),
            ).order_by(
                TalentModel.is_favorite.desc(),
                TalentModel.created_at.desc(),
                TalentModel.id.desc(),
            ).all()

        return self._enrich(rows)

    def list_favorites(self, owner_id: int) -> list[StoredTalent]:
        """Favorite talents of an owner, newest first."""
        with self.db.session() as session:
            rows = session.query(TalentModel).filter(
                TalentModel.user_id == owner_id,
                TalentModel.is_favorite == True,
            ).order_by(
                TalentModel.created_at.desc(),
                TalentModel.id.desc(),
            ).all()

        return self._enrich(rows)

    def toggle_favorite(self, talent_id: int, owner_id: int) -> None:
        """
        Flip is_favorite with a single negating UPDATE.

        Raises:
            NotFoundError: no talent matches (id, owner)
        """
        with self.db.session() as session:
            count = self._owned(session, talent_id, owner_id).update(
                {TalentModel.is_favorite: not_(TalentModel.is_favorite)},
                synchronize_session=False,
            )
            session.commit()

        if count == 0:
            raise NotFoundError("Talent", talent_id)

    def exists(self, talent_id: int, owner_id: int) -> bool:
        """True if the talent exists and belongs to the owner."""
        with self.db.session() as session:
            row = session.query(TalentModel.id).filter(
                TalentModel.id == talent_id,
                TalentModel.user_id == owner_id,
            ).first()
        return row is not None
