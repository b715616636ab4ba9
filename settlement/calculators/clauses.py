"""
Clause Resolver

Determines the share split a contract assigns to principal goods, associate
goods and the shared expense.
"""

import logging
from decimal import Decimal

from ..models import (
    Classification,
    Clause,
    ClauseSchedule,
    ClauseType,
    Contract,
    LegacyTerms,
    ResolvedShares,
    ShareSource,
)

logger = logging.getLogger(__name__)


class ClauseResolver:
    """Resolves share fractions from a contract, with documented defaults."""

    # Without an applicable rule the principal keeps their own goods, the
    # associate keeps theirs, and the principal carries the shared cost.
    DEFAULT_SHARES = {
        Classification.PRINCIPAL_GOODS: ResolvedShares(Decimal('1'), Decimal('0')),
        Classification.ASSOCIATE_GOODS: ResolvedShares(Decimal('0'), Decimal('1')),
        Classification.EXPENSE: ResolvedShares(Decimal('1'), Decimal('0')),
    }

    CLAUSE_TYPES = {
        Classification.PRINCIPAL_GOODS: ClauseType.SALES_COMMISSION,
        Classification.ASSOCIATE_GOODS: ClauseType.SALES_SERVICE,
        Classification.EXPENSE: ClauseType.EXPENSE_SHARING,
    }

    def resolve(
        self,
        contract: Contract | None,
        classification: Classification,
        category: str | None = None,
    ) -> ResolvedShares:
        """
        Resolve the shares for a classification.

        Priority order for goods:
        1. Clause of the classification's type scoped to this category
        2. Clause of the same type with no category (contract-wide)
        3. Legacy principalProducts / associateProducts terms
        4. Defaults

        Expenses consult only the first EXPENSE_SHARING clause.
        """
        if contract is None:
            return self.DEFAULT_SHARES[classification]

        terms = contract.terms
        if isinstance(terms, LegacyTerms):
            return self._from_legacy(terms, classification)

        if classification is Classification.EXPENSE:
            clauses = terms.of_type(ClauseType.EXPENSE_SHARING)
            if clauses:
                return self._from_clause(clauses[0], ShareSource.CONTRACT_CLAUSE)
            return self.DEFAULT_SHARES[classification]

        return self._from_schedule(terms, classification, category)

    def _from_schedule(
        self,
        schedule: ClauseSchedule,
        classification: Classification,
        category: str | None,
    ) -> ResolvedShares:
        candidates = schedule.of_type(self.CLAUSE_TYPES[classification])

        # Priority 1: Category-scoped clause
        if category is not None:
            for clause in candidates:
                if clause.item_category == category:
                    return self._from_clause(clause, ShareSource.CATEGORY_CLAUSE)

        # Priority 2: Contract-wide clause
        for clause in candidates:
            if clause.item_category is None:
                return self._from_clause(clause, ShareSource.CONTRACT_CLAUSE)

        # Priority 3: Legacy terms kept alongside the clauses
        if schedule.legacy is not None:
            return self._from_legacy(schedule.legacy, classification)

        # Priority 4: Defaults
        return self.DEFAULT_SHARES[classification]

    def _from_legacy(self, terms: LegacyTerms, classification: Classification) -> ResolvedShares:
        if classification is Classification.PRINCIPAL_GOODS:
            product_terms = terms.principal_products
        elif classification is Classification.ASSOCIATE_GOODS:
            product_terms = terms.associate_products
        else:
            product_terms = None

        if product_terms is None:
            return self.DEFAULT_SHARES[classification]

        logger.debug("Using legacy terms for %s", classification.value)
        return ResolvedShares(
            company_share=product_terms.principal_share,
            associate_share=product_terms.associate_share,
            source=ShareSource.LEGACY_TERMS,
        )

    @staticmethod
    def _from_clause(clause: Clause, source: ShareSource) -> ResolvedShares:
        # Shares are applied as written, even when they do not add up to 1
        return ResolvedShares(
            company_share=clause.company_share,
            associate_share=clause.associate_share,
            source=source,
        )


def resolve_shares(
    contract: Contract | None,
    classification: Classification,
    category: str | None = None,
) -> ResolvedShares:
    """Resolve shares with a default resolver."""
    return ClauseResolver().resolve(contract, classification, category)
