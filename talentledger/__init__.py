"""
TalentLedger - personal talent catalog with an auditable score ledger.
"""

__version__ = "1.0.0"
