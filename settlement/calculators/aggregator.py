"""
Category Aggregator

Groups sale lines and associate entries into labeled settlement rows.
"""

from decimal import Decimal

from ..constants import BUNDLE_CATEGORY, OTHER_CATEGORY
from ..models import AssociateEntry, LineKind, SaleLine, SettlementRow


class CategoryAggregator:
    """Builds principal-side and associate-side rows, keyed by category."""

    def aggregate(
        self,
        lines: list[SaleLine],
        entries: list[AssociateEntry],
    ) -> tuple[list[SettlementRow], list[SettlementRow]]:
        """
        Aggregate native-currency totals per category label.

        Principal rows come from inventory lines (items and bundles), associate
        rows from associate entries. The two sides are kept apart even when a
        label appears on both: the goods behind them belong to different
        parties. Rows keep first-seen order and carry no split yet.
        """
        principal: dict[str, list[Decimal]] = {}
        for line in lines:
            if not line.is_inventory:
                continue
            native, secondary = self._line_amounts(line)
            self._accumulate(principal, self.label_for_line(line), native, secondary)

        associate: dict[str, list[Decimal]] = {}
        for entry in entries:
            label = entry.category.strip() or OTHER_CATEGORY
            self._accumulate(associate, label, entry.amount_native, entry.amount_secondary)

        return self._to_rows(principal, is_associate=False), self._to_rows(associate, is_associate=True)

    @staticmethod
    def label_for_line(line: SaleLine) -> str:
        """
        Derive the category label of an inventory line.

        Items: "Type: SubType", then "Type", then "Other".
        Bundles: "Bundle: SubType", then "Bundle".
        """
        if line.kind is LineKind.BUNDLE:
            if line.sub_item_type:
                return f"{BUNDLE_CATEGORY}: {line.sub_item_type}"
            return BUNDLE_CATEGORY

        if line.item_type and line.sub_item_type:
            return f"{line.item_type}: {line.sub_item_type}"
        if line.item_type:
            return line.item_type
        return OTHER_CATEGORY

    @staticmethod
    def _line_amounts(line: SaleLine) -> tuple[Decimal, Decimal]:
        if line.has_currency_split:
            return line.total_native, line.total_secondary
        return line.line_total, Decimal('0')

    @staticmethod
    def _accumulate(rows: dict[str, list[Decimal]], label: str, native: Decimal, secondary: Decimal) -> None:
        totals = rows.setdefault(label, [Decimal('0'), Decimal('0')])
        totals[0] += native
        totals[1] += secondary

    @staticmethod
    def _to_rows(rows: dict[str, list[Decimal]], is_associate: bool) -> list[SettlementRow]:
        return [
            SettlementRow(
                label=label,
                is_associate=is_associate,
                total_native=native,
                total_secondary=secondary,
            )
            for label, (native, secondary) in rows.items()
        ]
