"""
Unit Tests for Input Validation and Contract Auditing
"""

from decimal import Decimal

import pytest

from settlement.models import Contract, SettlementInput
from settlement.validators import ContractAuditor, InputValidator


def make_input(**overrides) -> SettlementInput:
    data = {
        "exchange_rate": 500,
        "shared_expense": 0,
        "lines": [{"kind": "item", "quantity": 2, "unit_price": 50, "item_type": "Sticker"}],
        "associate_entries": [{"amount_secondary": 1000, "category": "Jewelry", "associate_id": "a1"}],
    }
    data.update(overrides)
    return SettlementInput.from_dict(data)


class TestInputValidator:
    """Caller preconditions are rejected with ValueError."""

    @pytest.fixture
    def validator(self):
        return InputValidator()

    def test_valid_input_passes(self, validator):
        validator.validate(make_input())

    def test_zero_exchange_rate_rejected(self, validator):
        with pytest.raises(ValueError, match="exchange_rate"):
            validator.validate(make_input(exchange_rate=0))

    def test_missing_exchange_rate_rejected(self, validator):
        data = SettlementInput.from_dict({"lines": [], "associate_entries": []})

        assert data.exchange_rate == Decimal("0")
        with pytest.raises(ValueError, match="exchange_rate must be positive"):
            validator.validate(data)

    def test_default_exchange_rate_used_when_missing(self, validator):
        data = SettlementInput.from_dict({"lines": []}, default_exchange_rate=Decimal("500"))

        validator.validate(data)
        assert data.exchange_rate == Decimal("500")

    def test_negative_expense_rejected(self, validator):
        with pytest.raises(ValueError, match="shared_expense"):
            validator.validate(make_input(shared_expense=-5))

    def test_negative_quantity_rejected(self, validator):
        with pytest.raises(ValueError, match="quantity"):
            validator.validate(make_input(lines=[{"kind": "item", "quantity": -1, "unit_price": 5}]))

    def test_negative_price_rejected(self, validator):
        with pytest.raises(ValueError, match="unit_price"):
            validator.validate(make_input(lines=[{"kind": "bundle", "quantity": 1, "unit_price": -5}]))

    def test_negative_associate_amount_rejected(self, validator):
        with pytest.raises(ValueError, match="associate entry"):
            validator.validate(make_input(associate_entries=[
                {"amount_secondary": -1, "category": "Jewelry", "associate_id": "a1"}
            ]))

    def test_negative_payment_rejected(self, validator):
        with pytest.raises(ValueError, match="card"):
            validator.validate(make_input(payments={"card": -10}))

    def test_share_out_of_range_rejected(self, validator):
        contract = {"clauses": [{"type": "Commission", "companyShare": 1.5, "associateShare": 0}]}
        with pytest.raises(ValueError, match="between 0 and 1"):
            validator.validate(make_input(contract=contract))

    def test_legacy_share_out_of_range_rejected(self, validator):
        contract = {"terms": {"principalProducts": {"principalShare": 0.6, "associateShare": -0.4}}}
        with pytest.raises(ValueError, match="principalProducts"):
            validator.validate(make_input(contract=contract))

    def test_unknown_line_kind_rejected(self):
        with pytest.raises(ValueError):
            make_input(lines=[{"kind": "gift", "quantity": 1, "unit_price": 5}])

    def test_unreadable_number_rejected(self):
        with pytest.raises(ValueError, match="Invalid number"):
            make_input(shared_expense="lots")

    @pytest.mark.parametrize("value", ["NaN", "Infinity", "-Infinity", "sNaN"])
    def test_non_finite_number_rejected(self, value):
        with pytest.raises(ValueError, match="Invalid number"):
            make_input(exchange_rate=value)

    def test_candidate_contracts_not_checked(self, validator):
        data = make_input(contracts=[
            {"id": "c2", "status": "Terminated",
             "clauses": [{"type": "Commission", "companyShare": 1.5, "associateShare": 0}]},
        ])

        validator.validate(data)

    def test_selected_contract_checked(self, validator):
        contract = Contract.from_dict({"clauses": [{"type": "Commission", "companyShare": 1.5, "associateShare": 0}]})

        with pytest.raises(ValueError, match="between 0 and 1"):
            validator.validate_contract(contract)

    def test_numeric_category_read_as_text(self):
        data = make_input(associate_entries=[{"amount_secondary": 100, "category": 5, "associate_id": "a1"}])

        assert data.associate_entries[0].category == "5"


class TestContractAuditor:
    """Data-quality warnings leave the arithmetic alone."""

    @pytest.fixture
    def auditor(self):
        return ContractAuditor()

    def test_no_contract_no_warnings(self, auditor):
        assert auditor.audit(None) == []

    def test_balanced_contract_no_warnings(self, auditor):
        contract = Contract.from_dict({"clauses": [
            {"type": "Commission", "companyShare": 0.75, "associateShare": 0.25},
            {"type": "Sales Service", "itemCategory": "Jewelry", "companyShare": 0.25, "associateShare": 0.75},
        ]})

        assert auditor.audit(contract) == []

    def test_unbalanced_clause_warned(self, auditor):
        contract = Contract.from_dict({"clauses": [
            {"type": "Commission", "itemCategory": "Sticker", "companyShare": 0.7, "associateShare": 0.2},
        ]})

        warnings = auditor.audit(contract)

        assert len(warnings) == 1
        assert "SALES_COMMISSION" in warnings[0]
        assert "Sticker" in warnings[0]

    def test_duplicate_scope_warned(self, auditor):
        contract = Contract.from_dict({"clauses": [
            {"type": "Expense Sharing", "companyShare": 0.5, "associateShare": 0.5},
            {"type": "Expense Sharing", "companyShare": 0.6, "associateShare": 0.4},
        ]})

        warnings = auditor.audit(contract)

        assert any("Duplicate EXPENSE_SHARING" in w for w in warnings)

    def test_legacy_terms_warned(self, auditor):
        contract = Contract.from_dict({"terms": {"principalProducts": {"principalShare": 0.6, "associateShare": 0.3}}})

        warnings = auditor.audit(contract)

        assert any("legacy terms" in w for w in warnings)
        assert any("principalProducts" in w for w in warnings)
