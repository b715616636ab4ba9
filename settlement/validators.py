"""
Input Validation for the Booth Settlement Engine

Checks the caller's preconditions before a settlement is calculated.
Raises ValueError with clear messages for any constraint violations.

The calculator itself never validates: a missing or unbalanced contract is a
normal state while a sale is being edited, and is only reported as a warning
by the ContractAuditor.
"""

from decimal import Decimal

from .constants import SHARE_SUM_TOLERANCE
from .models import (
    AssociateEntry,
    Clause,
    ClauseSchedule,
    ClauseType,
    Contract,
    LegacyTerms,
    PaymentDistribution,
    ProductTerms,
    SaleLine,
    SettlementInput,
)


class InputValidator:
    """Validates settlement input according to business rules."""

    def validate(self, input_data: SettlementInput) -> None:
        """
        Run all validations. Raises ValueError if any check fails.

        Candidate contracts are not checked here; only the one selected for
        the settlement is, through ``validate_contract``.
        """
        self._validate_amounts(input_data)
        for line in input_data.lines:
            self._validate_line(line)
        for entry in input_data.associate_entries:
            self._validate_entry(entry)
        self._validate_payments(input_data.payments)
        self.validate_contract(input_data.contract)

    def validate_contract(self, contract: Contract | None) -> None:
        """Check the share fractions of the contract that will be applied."""
        if contract is None:
            return
        terms = contract.terms
        if isinstance(terms, ClauseSchedule):
            for clause in terms.clauses:
                self._validate_share(clause.company_share, f"{clause.type.name} company_share")
                self._validate_share(clause.associate_share, f"{clause.type.name} associate_share")
            terms = terms.legacy
        if isinstance(terms, LegacyTerms):
            for label, product_terms in (
                ("principalProducts", terms.principal_products),
                ("associateProducts", terms.associate_products),
            ):
                if product_terms is not None:
                    self._validate_share(product_terms.principal_share, f"{label} principalShare")
                    self._validate_share(product_terms.associate_share, f"{label} associateShare")

    def _validate_amounts(self, input_data: SettlementInput) -> None:
        if input_data.exchange_rate <= 0:
            raise ValueError(f"exchange_rate must be positive, got: {input_data.exchange_rate}")

        if input_data.shared_expense < 0:
            raise ValueError(f"shared_expense cannot be negative, got: {input_data.shared_expense}")

    def _validate_line(self, line: SaleLine) -> None:
        if line.quantity < 0:
            raise ValueError(f"quantity cannot be negative: {line}")
        if line.unit_price < 0:
            raise ValueError(f"unit_price cannot be negative: {line}")
        if line.total_native < 0 or line.total_secondary < 0:
            raise ValueError(f"line currency split cannot be negative: {line}")

    def _validate_entry(self, entry: AssociateEntry) -> None:
        if entry.amount_secondary < 0 or entry.amount_native < 0:
            raise ValueError(f"associate entry amounts cannot be negative: {entry}")

    def _validate_payments(self, payments: PaymentDistribution) -> None:
        for name in ("card", "bitcoin", "cash_secondary"):
            value = getattr(payments, name)
            if value < 0:
                raise ValueError(f"{name} payment cannot be negative, got: {value}")

    @staticmethod
    def _validate_share(value: Decimal, label: str) -> None:
        if not (0 <= value <= 1):
            raise ValueError(f"{label} must be between 0 and 1, got: {value}")


class ContractAuditor:
    """Reports contract data-quality issues without changing any arithmetic."""

    def audit(self, contract: Contract | None) -> list[str]:
        """Return human-readable warnings for the given contract."""
        if contract is None:
            return []

        terms = contract.terms
        warnings = []

        if isinstance(terms, LegacyTerms):
            warnings.append("Contract uses legacy terms; consider migrating it to clauses")
            warnings.extend(self._audit_product_terms(terms))
            return warnings

        seen: set[tuple[ClauseType, str | None]] = set()
        for clause in terms.clauses:
            if clause.type is ClauseType.OTHER:
                continue
            scope = (clause.type, clause.item_category)
            if scope in seen:
                warnings.append(
                    f"Duplicate {clause.type.name} clause for {self._scope_label(clause)}; only the first is applied"
                )
            seen.add(scope)
            if not self._balanced(clause.share_total):
                warnings.append(
                    f"{clause.type.name} clause for {self._scope_label(clause)} shares sum to "
                    f"{clause.share_total}, not 1"
                )

        if terms.legacy is not None:
            warnings.extend(self._audit_product_terms(terms.legacy))
        return warnings

    def _audit_product_terms(self, terms: LegacyTerms) -> list[str]:
        warnings = []
        for label, product_terms in (
            ("principalProducts", terms.principal_products),
            ("associateProducts", terms.associate_products),
        ):
            if product_terms is not None and not self._balanced(self._total(product_terms)):
                warnings.append(f"Legacy {label} shares sum to {self._total(product_terms)}, not 1")
        return warnings

    @staticmethod
    def _total(product_terms: ProductTerms) -> Decimal:
        return product_terms.principal_share + product_terms.associate_share

    @staticmethod
    def _balanced(total: Decimal) -> bool:
        return abs(total - Decimal('1')) <= SHARE_SUM_TOLERANCE

    @staticmethod
    def _scope_label(clause: Clause) -> str:
        return f"category '{clause.item_category}'" if clause.item_category else "all categories"
