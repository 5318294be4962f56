"""
API Routes for TalentLedger

Route modules:
- auth: Registration, login and session cookies
- talents: Talent CRUD, search, favorites and adjustments
"""

from talentledger.api.routes.auth import router as auth_router
from talentledger.api.routes.talents import router as talents_router

__all__ = [
    "auth_router",
    "talents_router",
]
