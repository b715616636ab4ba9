"""
Payment Reconciler

Works out how much native-currency cash the drawer should hold.
"""

from decimal import Decimal

from ..models import PaymentDistribution, PaymentReconciliation, SettlementBreakdown
from .normalizer import quantize_money


class PaymentReconciler:
    """Reconciles booth takings against the recorded payment methods."""

    def reconcile(self, breakdown: SettlementBreakdown, payments: PaymentDistribution) -> PaymentReconciliation:
        """
        Expected cash = native takings
                      + (secondary takings - card - bitcoin - secondary cash) / rate

        Card and bitcoin payments are valued in the secondary currency. Whatever
        secondary-currency takings are not covered by them is expected to have
        been paid in native-currency cash.
        """
        rows = breakdown.rows
        total_native = sum((r.total_native for r in rows), Decimal('0'))
        total_secondary = sum((r.total_secondary for r in rows), Decimal('0'))

        remaining = total_secondary - payments.card - payments.bitcoin - payments.cash_secondary
        expected = total_native + remaining / breakdown.exchange_rate

        return PaymentReconciliation(
            total_native=total_native,
            total_secondary=total_secondary,
            remaining_secondary=remaining,
            expected_cash_native=quantize_money(expected),
        )
