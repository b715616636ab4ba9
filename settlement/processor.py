"""
Settlement Processor - Main Orchestrator

Coordinates the settlement pipeline through discrete, testable steps.
"""

import logging
from decimal import Decimal
from typing import Any, Dict

from .calculators import PaymentReconciler, ServiceLineMaterializer, SettlementCalculator
from .constants import DEFAULT_EXCHANGE_RATE
from .models import Contract, SettlementContext, SettlementInput, SettlementResult
from .output import OutputBuilder
from .selection import ContractSelector
from .validators import ContractAuditor, InputValidator

logger = logging.getLogger(__name__)


class SettlementProcessor:
    """
    Main orchestrator for booth settlements.

    Implements a clear pipeline pattern:
    1. Validate Input
    2. Select Contract
    3. Calculate Breakdown
    4. Audit Contract
    5. Reconcile Payments
    6. Materialize Service Lines
    7. Build Output
    """

    def __init__(self, default_exchange_rate: Decimal = DEFAULT_EXCHANGE_RATE):
        self.default_exchange_rate = default_exchange_rate
        self.validator = InputValidator()
        self.selector = ContractSelector()
        self.calculator = SettlementCalculator()
        self.auditor = ContractAuditor()
        self.payment_reconciler = PaymentReconciler()
        self.materializer = ServiceLineMaterializer()
        self.output_builder = OutputBuilder()

    def process(self, input_data: SettlementInput) -> SettlementResult:
        """
        Process a settlement through the complete pipeline.

        Args:
            input_data: SettlementInput object

        Returns:
            SettlementResult with the breakdown and derived records
        """
        # Step 1: Validate
        self.validator.validate(input_data)

        # Step 2: Select the governing contract
        ctx = SettlementContext(input=input_data, contract=self._select_contract(input_data))
        self.validator.validate_contract(ctx.contract)

        # Step 3: Calculate breakdown
        ctx.breakdown = self.calculator.calculate(
            input_data.lines,
            input_data.associate_entries,
            ctx.contract,
            input_data.shared_expense,
            input_data.exchange_rate,
        )

        # Step 4: Audit contract data quality
        ctx.warnings = self.auditor.audit(ctx.contract)
        for warning in ctx.warnings:
            logger.warning("Contract %s: %s", self._contract_label(ctx.contract), warning)

        # Step 5: Reconcile payments
        ctx.payments = self.payment_reconciler.reconcile(ctx.breakdown, input_data.payments)

        # Step 6: Materialize persisted lines
        ctx.service_lines = self.materializer.materialize(
            input_data.lines,
            input_data.associate_entries,
            ctx.breakdown,
            self._associate_names(input_data),
        )

        ctx.sale_totals = self.materializer.sale_totals(ctx.breakdown)

        # Step 7: Build output
        return self.output_builder.build(ctx)

    def process_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Process a settlement from raw dictionary input.

        Convenience method for API usage.
        """
        input_data = SettlementInput.from_dict(data, default_exchange_rate=self.default_exchange_rate)
        result = self.process(input_data)
        return self._result_to_dict(result)

    def _select_contract(self, input_data: SettlementInput) -> Contract | None:
        if input_data.contract is not None:
            return input_data.contract
        contract = self.selector.select(
            input_data.candidate_contracts,
            input_data.associate_id,
            input_data.associate_name,
        )
        logger.debug("Selected contract %s for associate %s", self._contract_label(contract), input_data.associate_id)
        return contract

    @staticmethod
    def _associate_names(input_data: SettlementInput) -> dict[str, str]:
        names = dict(input_data.associate_names)
        if input_data.associate_id and input_data.associate_name:
            names.setdefault(input_data.associate_id, input_data.associate_name)
        return names

    @staticmethod
    def _contract_label(contract: Contract | None) -> str:
        if contract is None:
            return "none"
        return contract.name or contract.contract_id or "unnamed"

    def _result_to_dict(self, result: SettlementResult) -> Dict[str, Any]:
        """Convert SettlementResult to dictionary for API response."""
        return {
            "settlement_summary": result.settlement_summary,
            "calculations": result.calculations,
            "rows": result.rows,
            "shares": result.shares,
            "payments": result.payments,
            "persisted_lines": result.persisted_lines,
            "sale_totals": result.sale_totals,
            "warnings": result.warnings,
        }


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def process_settlement_from_dict(input_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Process a settlement from Python dict and return Python dict.
    """
    processor = SettlementProcessor()
    return processor.process_from_dict(input_data)


def process_settlement_from_json(json_input: str) -> str:
    """
    Process a settlement from JSON string input and return JSON string output.
    """
    import json

    try:
        input_data = json.loads(json_input)
        processor = SettlementProcessor()
        result = processor.process_from_dict(input_data)
        return json.dumps(result, indent=2)

    except ValueError as e:
        error_response = {"error": str(e), "status": "validation_failed"}
        return json.dumps(error_response, indent=2)

    except Exception as e:
        error_response = {"error": str(e), "status": "failed"}
        return json.dumps(error_response, indent=2)
