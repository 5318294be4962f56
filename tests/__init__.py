"""
TalentLedger Test Suite

Tests are organized into:
- unit/: Unit tests for storage, sessions and scoring
- integration/: API tests through the ASGI app
"""
