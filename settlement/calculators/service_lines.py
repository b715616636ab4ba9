"""
Service Line Materializer

Turns transient associate entries into the service lines the caller persists
with the sale, and derives the sale totals in the native currency.
"""

import uuid

from ..constants import ASSOCIATE_SALES_STATION, OTHER_CATEGORY
from ..models import AssociateEntry, SaleLine, SettlementBreakdown
from ..output import to_money
from .normalizer import ledger_to_native, quantize_money, to_reference

UNKNOWN_ASSOCIATE = "Unknown"


class ServiceLineMaterializer:
    """Builds persisted line dictionaries for a confirmed settlement."""

    def materialize(
        self,
        lines: list[SaleLine],
        entries: list[AssociateEntry],
        breakdown: SettlementBreakdown,
        associate_names: dict[str, str] | None = None,
    ) -> list[dict]:
        """
        Combine the principal's inventory lines with one service line per
        associate entry. Existing service lines are replaced.
        """
        inventory = [line.to_dict() for line in lines if line.is_inventory]
        return inventory + self.service_lines(entries, breakdown, associate_names)

    def service_lines(
        self,
        entries: list[AssociateEntry],
        breakdown: SettlementBreakdown,
        associate_names: dict[str, str] | None = None,
    ) -> list[dict]:
        names = associate_names or {}
        rate = breakdown.exchange_rate
        shares_by_label = {row.label: row.shares for row in breakdown.associate_rows}

        service_lines = []
        for index, entry in enumerate(entries):
            category = entry.category.strip() or OTHER_CATEGORY
            shares = shares_by_label.get(category) or breakdown.associate_goods_shares
            name = names.get(entry.associate_id, UNKNOWN_ASSOCIATE)
            service_lines.append({
                "line_id": self._line_id(entry, index),
                "kind": "service",
                "station": ASSOCIATE_SALES_STATION,
                "revenue": to_money(to_reference(entry.amount_native, entry.amount_secondary, rate)),
                "description": f"[Associate: {name}] {category}",
                "tax_amount": 0,
                "create_task": False,
                "customer_character_id": entry.associate_id,
                "metadata": {
                    "original_amount_secondary": to_money(entry.amount_secondary),
                    "original_amount_native": to_money(entry.amount_native),
                    "category": category,
                    "associate_share_pct": float(shares.associate_share * 100),
                    "principal_commission_pct": float(shares.company_share * 100),
                },
            })
        return service_lines

    def sale_totals(self, breakdown: SettlementBreakdown) -> dict:
        """Sale totals in the native currency, as recorded on the sale."""
        revenue = quantize_money(ledger_to_native(breakdown.gross_sales, breakdown.exchange_rate))
        return {
            "subtotal": float(revenue),
            "discount_total": 0.0,
            "tax_total": 0.0,
            "total_revenue": float(revenue),
        }

    @staticmethod
    def _line_id(entry: AssociateEntry, index: int) -> str:
        # Stable ids keep repeated materializations of the same entries identical
        key = entry.entry_id or f"{entry.associate_id}:{entry.category}:{index}"
        return str(uuid.uuid5(uuid.NAMESPACE_URL, f"associate-entry:{key}"))
