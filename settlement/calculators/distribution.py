"""
Settlement Calculator

Splits booth takings and the shared expense between principal and associate.
"""

from dataclasses import replace
from decimal import Decimal

from ..models import (
    AssociateEntry,
    Classification,
    Contract,
    ExpenseSplit,
    SaleLine,
    SettlementBreakdown,
    SettlementRow,
)
from .aggregator import CategoryAggregator
from .clauses import ClauseResolver
from .normalizer import to_ledger


class SettlementCalculator:
    """Computes a full settlement breakdown from the current inputs."""

    def __init__(self, aggregator: CategoryAggregator | None = None, resolver: ClauseResolver | None = None):
        self.aggregator = aggregator or CategoryAggregator()
        self.resolver = resolver or ClauseResolver()

    def calculate(
        self,
        principal_lines: list[SaleLine],
        associate_entries: list[AssociateEntry],
        contract: Contract | None,
        shared_expense: Decimal,
        exchange_rate: Decimal,
    ) -> SettlementBreakdown:
        """
        Calculate the breakdown. Pure: same inputs, same output.

        principal_net = principal rows retained
                      + commissions earned on associate rows
                      - principal's part of the shared expense

        associate_net = associate rows retained
                      + commissions earned on principal rows
                      - associate's part of the shared expense
        """
        principal_rows, associate_rows = self.aggregator.aggregate(principal_lines, associate_entries)

        principal_rows = [
            self._split_principal_row(row, contract, exchange_rate) for row in principal_rows
        ]
        associate_rows = [
            self._split_associate_row(row, contract, exchange_rate) for row in associate_rows
        ]
        expense = self._split_expense(contract, shared_expense)

        principal_sales = sum((r.ledger_total for r in principal_rows), Decimal('0'))
        associate_sales = sum((r.ledger_total for r in associate_rows), Decimal('0'))
        principal_retained = sum((r.retained_by_row_owner for r in principal_rows), Decimal('0'))
        associate_retained = sum((r.retained_by_row_owner for r in associate_rows), Decimal('0'))
        # Commission income is named after the party that earns it
        associate_commission_income = sum(
            (r.commission_to_other_party for r in principal_rows), Decimal('0')
        )
        principal_commission_income = sum(
            (r.commission_to_other_party for r in associate_rows), Decimal('0')
        )

        return SettlementBreakdown(
            exchange_rate=exchange_rate,
            principal_rows=tuple(principal_rows),
            associate_rows=tuple(associate_rows),
            gross_sales=principal_sales + associate_sales,
            principal_sales=principal_sales,
            associate_sales=associate_sales,
            principal_net=principal_retained + principal_commission_income - expense.principal_share,
            associate_net=associate_retained + associate_commission_income - expense.associate_share,
            principal_commission_income=principal_commission_income,
            associate_commission_income=associate_commission_income,
            expense=expense,
            principal_goods_shares=self.resolver.resolve(contract, Classification.PRINCIPAL_GOODS),
            associate_goods_shares=self.resolver.resolve(contract, Classification.ASSOCIATE_GOODS),
        )

    def _split_principal_row(self, row: SettlementRow, contract: Contract | None, rate: Decimal) -> SettlementRow:
        """The principal keeps company_share; the associate earns associate_share."""
        shares = self.resolver.resolve(contract, Classification.PRINCIPAL_GOODS, row.label)
        total = to_ledger(row.total_native, row.total_secondary, rate)
        return replace(
            row,
            ledger_total=total,
            retained_by_row_owner=total * shares.company_share,
            commission_to_other_party=total * shares.associate_share,
            shares=shares,
        )

    def _split_associate_row(self, row: SettlementRow, contract: Contract | None, rate: Decimal) -> SettlementRow:
        """The associate keeps associate_share; the principal earns company_share."""
        shares = self.resolver.resolve(contract, Classification.ASSOCIATE_GOODS, row.label)
        total = to_ledger(row.total_native, row.total_secondary, rate)
        return replace(
            row,
            ledger_total=total,
            retained_by_row_owner=total * shares.associate_share,
            commission_to_other_party=total * shares.company_share,
            shares=shares,
        )

    def _split_expense(self, contract: Contract | None, shared_expense: Decimal) -> ExpenseSplit:
        shares = self.resolver.resolve(contract, Classification.EXPENSE)
        return ExpenseSplit(
            total=shared_expense,
            principal_share=shared_expense * shares.company_share,
            associate_share=shared_expense * shares.associate_share,
            shares=shares,
        )


def calculate_settlement(
    principal_lines: list[SaleLine],
    associate_entries: list[AssociateEntry],
    contract: Contract | None,
    shared_expense: Decimal,
    exchange_rate: Decimal,
) -> SettlementBreakdown:
    """Calculate a settlement breakdown with default collaborators."""
    return SettlementCalculator().calculate(
        principal_lines, associate_entries, contract, shared_expense, exchange_rate
    )
