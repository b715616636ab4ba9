"""
Unit Tests for the Clause Resolver

Tests verify default shares and the clause fallback order.
"""

from decimal import Decimal

import pytest

from settlement.calculators.clauses import ClauseResolver, resolve_shares
from settlement.models import Classification, Contract, ShareSource


def contract(clauses=None, terms=None) -> Contract:
    data = {"id": "c1", "name": "Booth Agreement", "status": "Active"}
    if clauses is not None:
        data["clauses"] = clauses
    if terms is not None:
        data["terms"] = terms
    return Contract.from_dict(data)


class TestDefaultShares:
    """No contract means documented defaults."""

    @pytest.fixture
    def resolver(self):
        return ClauseResolver()

    def test_principal_goods_default(self, resolver):
        shares = resolver.resolve(None, Classification.PRINCIPAL_GOODS, "Sticker")

        assert shares.company_share == Decimal("1")
        assert shares.associate_share == Decimal("0")
        assert shares.source is ShareSource.DEFAULT

    def test_associate_goods_default(self, resolver):
        shares = resolver.resolve(None, Classification.ASSOCIATE_GOODS, "Jewelry")

        assert shares.company_share == Decimal("0")
        assert shares.associate_share == Decimal("1")

    def test_expense_default(self, resolver):
        shares = resolver.resolve(None, Classification.EXPENSE)

        assert shares.company_share == Decimal("1")
        assert shares.associate_share == Decimal("0")

    def test_contract_without_matching_clause_uses_default(self, resolver):
        c = contract(clauses=[{"type": "EXPENSE_SHARING", "companyShare": 0.5, "associateShare": 0.5}])

        shares = resolver.resolve(c, Classification.PRINCIPAL_GOODS, "Sticker")

        assert shares.company_share == Decimal("1")
        assert shares.source is ShareSource.DEFAULT

    def test_empty_contract_uses_default(self, resolver):
        shares = resolver.resolve(contract(), Classification.ASSOCIATE_GOODS, "Jewelry")

        assert shares.associate_share == Decimal("1")
        assert shares.source is ShareSource.DEFAULT


class TestClauseFallbackOrder:
    """Category clause > contract-wide clause > legacy terms > default."""

    @pytest.fixture
    def resolver(self):
        return ClauseResolver()

    @pytest.fixture
    def scoped_contract(self):
        return contract(clauses=[
            {"type": "Commission", "companyShare": 0.75, "associateShare": 0.25},
            {"type": "Commission", "itemCategory": "Sticker", "companyShare": 0.9, "associateShare": 0.1},
            {"type": "Sales Service", "itemCategory": "Jewelry", "companyShare": 0.25, "associateShare": 0.75},
        ])

    def test_category_clause_wins_over_unscoped(self, resolver, scoped_contract):
        shares = resolver.resolve(scoped_contract, Classification.PRINCIPAL_GOODS, "Sticker")

        assert shares.company_share == Decimal("0.9")
        assert shares.associate_share == Decimal("0.1")
        assert shares.source is ShareSource.CATEGORY_CLAUSE

    def test_unscoped_clause_for_other_categories(self, resolver, scoped_contract):
        shares = resolver.resolve(scoped_contract, Classification.PRINCIPAL_GOODS, "Print")

        assert shares.company_share == Decimal("0.75")
        assert shares.source is ShareSource.CONTRACT_CLAUSE

    def test_unscoped_clause_when_no_category_given(self, resolver, scoped_contract):
        shares = resolver.resolve(scoped_contract, Classification.PRINCIPAL_GOODS)

        assert shares.company_share == Decimal("0.75")

    def test_associate_goods_use_sales_service(self, resolver, scoped_contract):
        shares = resolver.resolve(scoped_contract, Classification.ASSOCIATE_GOODS, "Jewelry")

        assert shares.company_share == Decimal("0.25")
        assert shares.associate_share == Decimal("0.75")
        assert shares.source is ShareSource.CATEGORY_CLAUSE

    def test_associate_goods_ignore_commission_clauses(self, resolver, scoped_contract):
        shares = resolver.resolve(scoped_contract, Classification.ASSOCIATE_GOODS, "Sticker")

        assert shares.associate_share == Decimal("1")
        assert shares.source is ShareSource.DEFAULT

    def test_scoped_clause_order_first_match_wins(self, resolver):
        c = contract(clauses=[
            {"type": "Commission", "itemCategory": "Sticker", "companyShare": 0.6, "associateShare": 0.4},
            {"type": "Commission", "itemCategory": "Sticker", "companyShare": 0.5, "associateShare": 0.5},
        ])

        shares = resolver.resolve(c, Classification.PRINCIPAL_GOODS, "Sticker")

        assert shares.company_share == Decimal("0.6")

    def test_unbalanced_clause_is_not_renormalized(self, resolver):
        c = contract(clauses=[{"type": "Commission", "companyShare": 0.7, "associateShare": 0.2}])

        shares = resolver.resolve(c, Classification.PRINCIPAL_GOODS, "Sticker")

        assert shares.company_share == Decimal("0.7")
        assert shares.associate_share == Decimal("0.2")

    def test_clauses_fall_back_to_legacy_terms_kept_alongside(self, resolver):
        c = contract(
            clauses=[{"type": "Sales Service", "companyShare": 0.3, "associateShare": 0.7}],
            terms={"principalProducts": {"principalShare": 0.8, "associateShare": 0.2}},
        )

        shares = resolver.resolve(c, Classification.PRINCIPAL_GOODS, "Sticker")

        assert shares.company_share == Decimal("0.8")
        assert shares.source is ShareSource.LEGACY_TERMS


class TestExpenseResolution:
    """Expenses read one EXPENSE_SHARING clause and never legacy terms."""

    @pytest.fixture
    def resolver(self):
        return ClauseResolver()

    def test_expense_clause(self, resolver):
        c = contract(clauses=[{"type": "Expense Sharing", "companyShare": 0.5, "associateShare": 0.5}])

        shares = resolver.resolve(c, Classification.EXPENSE)

        assert shares.company_share == Decimal("0.5")
        assert shares.associate_share == Decimal("0.5")

    def test_scoped_expense_clause_is_still_used(self, resolver):
        c = contract(clauses=[
            {"type": "Expense Sharing", "itemCategory": "Booth", "companyShare": 0.4, "associateShare": 0.6},
            {"type": "Expense Sharing", "companyShare": 0.5, "associateShare": 0.5},
        ])

        shares = resolver.resolve(c, Classification.EXPENSE)

        assert shares.company_share == Decimal("0.4")

    def test_legacy_terms_have_no_expense_fallback(self, resolver):
        c = contract(terms={
            "principalProducts": {"principalShare": 0.6, "associateShare": 0.4},
            "associateProducts": {"principalShare": 0.2, "associateShare": 0.8},
        })

        shares = resolver.resolve(c, Classification.EXPENSE)

        assert shares.company_share == Decimal("1")
        assert shares.source is ShareSource.DEFAULT


class TestLegacyTerms:
    """Contracts from before the clause schema."""

    def test_legacy_principal_products(self):
        c = contract(terms={"principalProducts": {"principalShare": 0.6, "associateShare": 0.4}})

        shares = resolve_shares(c, Classification.PRINCIPAL_GOODS, "Sticker")

        assert c.schema == "legacy_terms"
        assert shares.company_share == Decimal("0.6")
        assert shares.associate_share == Decimal("0.4")
        assert shares.source is ShareSource.LEGACY_TERMS

    def test_legacy_associate_products(self):
        c = contract(terms={"associateProducts": {"principalShare": 0.2, "associateShare": 0.8}})

        shares = resolve_shares(c, Classification.ASSOCIATE_GOODS, "Jewelry")

        assert shares.company_share == Decimal("0.2")
        assert shares.associate_share == Decimal("0.8")

    def test_legacy_missing_side_uses_default(self):
        c = contract(terms={"principalProducts": {"principalShare": 0.6, "associateShare": 0.4}})

        shares = resolve_shares(c, Classification.ASSOCIATE_GOODS, "Jewelry")

        assert shares.associate_share == Decimal("1")
        assert shares.source is ShareSource.DEFAULT


class TestContractLoading:
    """Malformed contracts degrade to defaults instead of failing."""

    def test_malformed_clauses_are_skipped(self):
        c = contract(clauses=[
            "not a clause",
            {"type": "Commission", "companyShare": "abc", "associateShare": 0.1},
            {"type": "Commission", "companyShare": 0.7, "associateShare": 0.3},
        ])

        assert len(c.terms.clauses) == 1
        assert resolve_shares(c, Classification.PRINCIPAL_GOODS).company_share == Decimal("0.7")

    def test_unknown_clause_type_is_other(self):
        c = contract(clauses=[{"type": "Barter", "companyShare": 0.5, "associateShare": 0.5}])

        assert resolve_shares(c, Classification.PRINCIPAL_GOODS).source is ShareSource.DEFAULT

    def test_enum_names_and_values_both_accepted(self):
        by_name = contract(clauses=[{"type": "SALES_SERVICE", "companyShare": 0.25, "associateShare": 0.75}])
        by_value = contract(clauses=[{"type": "Sales Service", "companyShare": 0.25, "associateShare": 0.75}])

        assert resolve_shares(by_name, Classification.ASSOCIATE_GOODS) == resolve_shares(
            by_value, Classification.ASSOCIATE_GOODS
        )

    def test_blank_category_means_unscoped(self):
        c = contract(clauses=[{"type": "Commission", "itemCategory": "", "companyShare": 0.7, "associateShare": 0.3}])

        assert resolve_shares(c, Classification.PRINCIPAL_GOODS, "Sticker").source is ShareSource.CONTRACT_CLAUSE
