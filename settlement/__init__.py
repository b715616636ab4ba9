"""
BOOTH SETTLEMENT ENGINE
Splits booth sales between the principal and an associate.
"""

from .calculators import calculate_settlement, resolve_shares
from .models import SettlementBreakdown, SettlementInput, SettlementResult
from .processor import SettlementProcessor
from .selection import select_contract

__all__ = [
    'SettlementProcessor',
    'SettlementInput',
    'SettlementResult',
    'SettlementBreakdown',
    'calculate_settlement',
    'resolve_shares',
    'select_contract',
]
