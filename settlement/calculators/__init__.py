"""
Calculators Package

Provides all calculation components for settlement processing.
"""

from .aggregator import CategoryAggregator
from .clauses import ClauseResolver, resolve_shares
from .distribution import SettlementCalculator, calculate_settlement
from .normalizer import ledger_to_native, quantize_money, to_ledger, to_reference
from .payments import PaymentReconciler
from .service_lines import ServiceLineMaterializer

__all__ = [
    "CategoryAggregator",
    "ClauseResolver",
    "SettlementCalculator",
    "PaymentReconciler",
    "ServiceLineMaterializer",
    "calculate_settlement",
    "resolve_shares",
    "to_reference",
    "to_ledger",
    "ledger_to_native",
    "quantize_money",
]
