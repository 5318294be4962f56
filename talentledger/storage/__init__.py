"""
Storage Module for TalentLedger

Persistent storage for users, talents and their score ledger:
- SQLAlchemy models and engine/session management
- Append-only adjustment ledger and score aggregation
- Owner-scoped talent catalog
- Volatile session registry
"""

from talentledger.storage.database import Database
from talentledger.storage.models import (
    Base,
    Dimension,
    DIMENSIONS,
)
from talentledger.storage.adjustment_repository import (
    AdjustmentRepository,
    StoredAdjustment,
)
from talentledger.storage.score_aggregator import ScoreAggregator
from talentledger.storage.talent_repository import (
    TalentRepository,
    StoredTalent,
)
from talentledger.storage.user_repository import (
    UserRepository,
    StoredUser,
)
from talentledger.storage.session_registry import (
    SessionRegistry,
    ReadWriteLock,
)

__all__ = [
    # Database
    "Database",
    "Base",
    "Dimension",
    "DIMENSIONS",
    # Ledger
    "AdjustmentRepository",
    "StoredAdjustment",
    "ScoreAggregator",
    # Catalog
    "TalentRepository",
    "StoredTalent",
    # Users and sessions
    "UserRepository",
    "StoredUser",
    "SessionRegistry",
    "ReadWriteLock",
]
