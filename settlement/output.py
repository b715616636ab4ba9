"""
Output Builder

Constructs the final API response from processing context.
"""

from decimal import Decimal

from .constants import NATIVE_CURRENCY, SECONDARY_CURRENCY
from .models import ResolvedShares, SettlementContext, SettlementResult, SettlementRow


def to_money(value: Decimal) -> float:
    """Convert Decimal to float with 2 decimal places."""
    return round(float(value), 2)


def to_percent(value: Decimal) -> float:
    return round(float(value * 100), 2)


def _fmt(value) -> str:
    """Format a number as ledger currency string for descriptions."""
    return f"₡{value:,.2f}"


class OutputBuilder:
    """Builds the final output response."""

    def build(self, ctx: SettlementContext) -> SettlementResult:
        """Construct the complete settlement result from processing context."""
        return SettlementResult(
            settlement_summary=self._build_summary(ctx),
            calculations=self._build_calculations(ctx),
            rows=self._build_rows(ctx),
            shares=self._build_shares(ctx),
            payments=self._build_payments(ctx),
            persisted_lines=ctx.service_lines,
            sale_totals=ctx.sale_totals,
            warnings=list(ctx.warnings),
        )

    def _build_summary(self, ctx: SettlementContext) -> dict:
        breakdown = ctx.breakdown
        contract = ctx.contract
        return {
            "ledger_currency": SECONDARY_CURRENCY,
            "reference_currency": NATIVE_CURRENCY,
            "exchange_rate": float(breakdown.exchange_rate),
            "contract_id": contract.contract_id if contract else None,
            "contract_name": contract.name if contract else None,
            "contract_schema": contract.schema if contract else None,
            "associate_id": ctx.input.associate_id,
            "principal_row_count": len(breakdown.principal_rows),
            "associate_row_count": len(breakdown.associate_rows),
        }

    def _build_calculations(self, ctx: SettlementContext) -> dict:
        """Build calculations section with value and dynamic description for each field."""
        b = ctx.breakdown
        expense = b.expense

        return {
            "gross_sales": {
                "value": to_money(b.gross_sales),
                "description": f"principal sales ({_fmt(to_money(b.principal_sales))}) + associate sales ({_fmt(to_money(b.associate_sales))}) = {_fmt(to_money(b.gross_sales))}"
            },
            "gross_sales_native": {
                "value": to_money(b.gross_sales_native),
                "description": f"Gross sales converted at {b.exchange_rate} {SECONDARY_CURRENCY}/{NATIVE_CURRENCY}"
            },
            "principal_sales": {
                "value": to_money(b.principal_sales),
                "description": "Sales of the principal's own inventory"
            },
            "associate_sales": {
                "value": to_money(b.associate_sales),
                "description": "Sales entered on behalf of the associate"
            },
            "principal_commission_income": {
                "value": to_money(b.principal_commission_income),
                "description": f"Service commission the principal earns on associate goods ({to_percent(b.associate_goods_shares.company_share)}% contract-wide)"
            },
            "associate_commission_income": {
                "value": to_money(b.associate_commission_income),
                "description": f"Commission the associate earns on the principal's goods ({to_percent(b.principal_goods_shares.associate_share)}% contract-wide)"
            },
            "shared_expense": {
                "value": to_money(expense.total),
                "description": "Shared booth expense" if expense.total else "No shared expense for this sale"
            },
            "principal_expense_share": {
                "value": to_money(expense.principal_share),
                "description": f"{to_percent(expense.shares.company_share)}% × {_fmt(to_money(expense.total))} = {_fmt(to_money(expense.principal_share))}"
            },
            "associate_expense_share": {
                "value": to_money(expense.associate_share),
                "description": f"{to_percent(expense.shares.associate_share)}% × {_fmt(to_money(expense.total))} = {_fmt(to_money(expense.associate_share))}"
            },
            "principal_net": {
                "value": to_money(b.principal_net),
                "description": f"retained ({_fmt(to_money(self._retained(b.principal_rows)))}) + commissions ({_fmt(to_money(b.principal_commission_income))}) - expense ({_fmt(to_money(expense.principal_share))})"
            },
            "associate_net": {
                "value": to_money(b.associate_net),
                "description": f"retained ({_fmt(to_money(self._retained(b.associate_rows)))}) + commissions ({_fmt(to_money(b.associate_commission_income))}) - expense ({_fmt(to_money(expense.associate_share))})"
            },
            "principal_net_native": {
                "value": to_money(b.principal_net_native),
                "description": f"Principal net in {NATIVE_CURRENCY}"
            },
            "associate_net_native": {
                "value": to_money(b.associate_net_native),
                "description": f"Associate net in {NATIVE_CURRENCY}"
            },
        }

    def _build_rows(self, ctx: SettlementContext) -> dict:
        b = ctx.breakdown
        return {
            "principal": [self._row_to_dict(row) for row in b.principal_rows],
            "associate": [self._row_to_dict(row) for row in b.associate_rows],
        }

    def _build_shares(self, ctx: SettlementContext) -> dict:
        b = ctx.breakdown
        return {
            "principal_goods": self._shares_to_dict(b.principal_goods_shares),
            "associate_goods": self._shares_to_dict(b.associate_goods_shares),
            "expense": self._shares_to_dict(b.expense.shares),
        }

    def _build_payments(self, ctx: SettlementContext) -> dict:
        payments = ctx.payments
        recorded = ctx.input.payments
        return {
            "total_native": to_money(payments.total_native),
            "total_secondary": to_money(payments.total_secondary),
            "card": to_money(recorded.card),
            "bitcoin": to_money(recorded.bitcoin),
            "cash_secondary": to_money(recorded.cash_secondary),
            "remaining_secondary": to_money(payments.remaining_secondary),
            "expected_cash_native": to_money(payments.expected_cash_native),
        }

    def _row_to_dict(self, row: SettlementRow) -> dict:
        return {
            "label": row.label,
            "is_associate": row.is_associate,
            "total_native": to_money(row.total_native),
            "total_secondary": to_money(row.total_secondary),
            "ledger_total": to_money(row.ledger_total),
            "retained_by_row_owner": to_money(row.retained_by_row_owner),
            "commission_to_other_party": to_money(row.commission_to_other_party),
            "shares": self._shares_to_dict(row.shares) if row.shares else None,
        }

    @staticmethod
    def _shares_to_dict(shares: ResolvedShares) -> dict:
        return {
            "company_share_pct": to_percent(shares.company_share),
            "associate_share_pct": to_percent(shares.associate_share),
            "source": shares.source.value,
        }

    @staticmethod
    def _retained(rows: tuple[SettlementRow, ...]) -> Decimal:
        return sum((r.retained_by_row_owner for r in rows), Decimal('0'))
