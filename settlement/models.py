"""
Domain Models for the Booth Settlement Engine

These dataclasses provide type-safe representations of all settlement entities.
All monetary values use Decimal for precision.

Input payloads may use snake_case or the camelCase keys of the sales editor
(e.g. ``companyShare``, ``itemCategory``); both are accepted by ``from_dict``.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _get(data: dict, key: str, alias: str | None = None, default=None):
    """Read ``key`` from data, falling back to its camelCase alias."""
    if key in data:
        return data[key]
    if alias is not None and alias in data:
        return data[alias]
    return default


def _decimal(value, default: Decimal = ZERO) -> Decimal:
    if value is None or value == "":
        return default
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Invalid number: {value!r}") from None
    if not result.is_finite():
        raise ValueError(f"Invalid number: {value!r}")
    return result


# =============================================================================
# ENUMS
# =============================================================================


class LineKind(Enum):
    ITEM = "item"
    BUNDLE = "bundle"
    SERVICE = "service"


class ClauseType(Enum):
    """Types of contract clauses."""

    SALES_COMMISSION = "Commission"  # Principal goods sold by the associate
    SALES_SERVICE = "Sales Service"  # Associate goods sold by the principal
    EXPENSE_SHARING = "Expense Sharing"  # Shared costs (booth fee)
    OTHER = "Other"

    @classmethod
    def parse(cls, value) -> "ClauseType":
        """Accept either the enum name or its display value."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if value in (member.name, member.value):
                return member
        return cls.OTHER


class ContractStatus(Enum):
    DRAFT = "Draft"
    ACTIVE = "Active"
    PAUSED = "Paused"
    TERMINATED = "Terminated"

    @classmethod
    def parse(cls, value) -> "ContractStatus":
        if isinstance(value, cls):
            return value
        for member in cls:
            if value in (member.name, member.value):
                return member
        return cls.DRAFT


class Classification(Enum):
    """What a share split is being resolved for."""

    PRINCIPAL_GOODS = "principal_goods"
    ASSOCIATE_GOODS = "associate_goods"
    EXPENSE = "expense"


class ShareSource(Enum):
    """Which resolution rule produced a share split."""

    CATEGORY_CLAUSE = "category_clause"
    CONTRACT_CLAUSE = "contract_clause"
    LEGACY_TERMS = "legacy_terms"
    DEFAULT = "default"


# =============================================================================
# INPUT MODELS
# =============================================================================


@dataclass
class SaleLine:
    """A line of the principal's booth sale.

    Inventory lines are priced in the native currency. An item line paid in
    mixed cash may carry an explicit split (total_native / total_secondary)
    which then replaces quantity x unit_price.
    """

    kind: LineKind
    quantity: Decimal
    unit_price: Decimal
    item_type: str | None = None
    sub_item_type: str | None = None
    total_native: Decimal = ZERO
    total_secondary: Decimal = ZERO
    line_id: str | None = None
    item_id: str | None = None

    @property
    def has_currency_split(self) -> bool:
        return self.kind is LineKind.ITEM and (self.total_native > 0 or self.total_secondary > 0)

    @property
    def line_total(self) -> Decimal:
        return self.quantity * self.unit_price

    @property
    def is_inventory(self) -> bool:
        return self.kind in (LineKind.ITEM, LineKind.BUNDLE)

    @classmethod
    def from_dict(cls, data: dict) -> "SaleLine":
        kind = data.get("kind", "item")
        return cls(
            kind=LineKind(kind),
            quantity=_decimal(data.get("quantity")),
            unit_price=_decimal(_get(data, "unit_price", "unitPrice")),
            item_type=_get(data, "item_type", "itemType") or None,
            sub_item_type=_get(data, "sub_item_type", "subItemType") or None,
            total_native=_decimal(_get(data, "total_native", "totalUSD")),
            total_secondary=_decimal(_get(data, "total_secondary", "totalCRC")),
            line_id=_get(data, "line_id", "lineId"),
            item_id=_get(data, "item_id", "itemId"),
        )

    def to_dict(self) -> dict:
        return {
            "line_id": self.line_id,
            "kind": self.kind.value,
            "item_id": self.item_id,
            "item_type": self.item_type,
            "sub_item_type": self.sub_item_type,
            "quantity": float(self.quantity),
            "unit_price": float(self.unit_price),
        }


@dataclass
class AssociateEntry:
    """An ad-hoc amount the operator attributes to an associate."""

    amount_secondary: Decimal
    category: str
    associate_id: str
    amount_native: Decimal = ZERO
    description: str = ""
    entry_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "AssociateEntry":
        return cls(
            amount_secondary=_decimal(_get(data, "amount_secondary", "amountCRC")),
            amount_native=_decimal(_get(data, "amount_native", "amountUSD")),
            category=str(data.get("category") or ""),
            associate_id=_get(data, "associate_id", "associateId", ""),
            description=data.get("description") or "",
            entry_id=_get(data, "entry_id", "id"),
        )


@dataclass(frozen=True)
class Clause:
    """One contractual rule for a share split."""

    type: ClauseType
    company_share: Decimal
    associate_share: Decimal
    item_category: str | None = None
    description: str | None = None
    clause_id: str | None = None

    @property
    def share_total(self) -> Decimal:
        return self.company_share + self.associate_share

    @classmethod
    def from_dict(cls, data: dict) -> "Clause":
        return cls(
            type=ClauseType.parse(data.get("type")),
            company_share=_decimal(_get(data, "company_share", "companyShare")),
            associate_share=_decimal(_get(data, "associate_share", "associateShare")),
            # An empty category means the clause applies to the whole type
            item_category=_get(data, "item_category", "itemCategory") or None,
            description=data.get("description") or None,
            clause_id=data.get("id"),
        )


@dataclass(frozen=True)
class ProductTerms:
    """A flat share pair from a pre-clause contract."""

    principal_share: Decimal
    associate_share: Decimal

    @classmethod
    def from_dict(cls, data: dict) -> "ProductTerms":
        return cls(
            principal_share=_decimal(_get(data, "principal_share", "principalShare")),
            associate_share=_decimal(_get(data, "associate_share", "associateShare")),
        )


@dataclass(frozen=True)
class LegacyTerms:
    """Contract terms as stored before typed clauses existed."""

    principal_products: ProductTerms | None = None
    associate_products: ProductTerms | None = None

    schema = "legacy_terms"

    @classmethod
    def from_dict(cls, data: dict) -> "LegacyTerms":
        principal = _get(data, "principal_products", "principalProducts")
        associate = _get(data, "associate_products", "associateProducts")
        return cls(
            principal_products=ProductTerms.from_dict(principal) if isinstance(principal, dict) else None,
            associate_products=ProductTerms.from_dict(associate) if isinstance(associate, dict) else None,
        )


@dataclass(frozen=True)
class ClauseSchedule:
    """Typed clause list, optionally backed by the legacy terms it replaced."""

    clauses: tuple[Clause, ...] = ()
    legacy: LegacyTerms | None = None

    schema = "clauses"

    def of_type(self, clause_type: ClauseType) -> list[Clause]:
        return [c for c in self.clauses if c.type is clause_type]


@dataclass
class Contract:
    """The agreement between the principal and an associate.

    ``terms`` is resolved once at load time: contracts carrying a ``clauses``
    list get a ClauseSchedule, older contracts with only a flat ``terms``
    object get LegacyTerms.
    """

    terms: ClauseSchedule | LegacyTerms
    contract_id: str | None = None
    name: str = ""
    status: ContractStatus = ContractStatus.ACTIVE
    principal_business_id: str | None = None
    counterparty_business_id: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status is ContractStatus.ACTIVE

    @property
    def schema(self) -> str:
        return self.terms.schema

    @classmethod
    def from_dict(cls, data: dict) -> "Contract":
        return cls(
            terms=cls._load_terms(data),
            contract_id=data.get("id"),
            name=data.get("name") or "",
            status=ContractStatus.parse(data.get("status", ContractStatus.ACTIVE.value)),
            principal_business_id=_get(data, "principal_business_id", "principalBusinessId"),
            counterparty_business_id=_get(data, "counterparty_business_id", "counterpartyBusinessId"),
        )

    @staticmethod
    def _load_terms(data: dict) -> ClauseSchedule | LegacyTerms:
        raw_clauses = data.get("clauses")
        raw_terms = data.get("terms")
        legacy = LegacyTerms.from_dict(raw_terms) if isinstance(raw_terms, dict) else None

        if not isinstance(raw_clauses, list):
            return legacy if legacy is not None else ClauseSchedule()

        clauses = []
        for raw in raw_clauses:
            # A malformed clause is dropped rather than failing the whole contract
            if not isinstance(raw, dict):
                logger.warning("Skipping malformed clause: %r", raw)
                continue
            try:
                clauses.append(Clause.from_dict(raw))
            except ValueError:
                logger.warning("Skipping clause with unreadable shares: %r", raw)
        return ClauseSchedule(clauses=tuple(clauses), legacy=legacy)


@dataclass
class PaymentDistribution:
    """How the booth takings were received, valued in the secondary currency."""

    card: Decimal = ZERO
    bitcoin: Decimal = ZERO
    cash_secondary: Decimal = ZERO

    @classmethod
    def from_dict(cls, data: dict) -> "PaymentDistribution":
        return cls(
            card=_decimal(data.get("card")),
            bitcoin=_decimal(data.get("bitcoin")),
            cash_secondary=_decimal(_get(data, "cash_secondary", "cashCRC")),
        )


@dataclass
class SettlementInput:
    """Complete input for settling one booth sale."""

    lines: list[SaleLine]
    associate_entries: list[AssociateEntry]
    exchange_rate: Decimal
    shared_expense: Decimal = ZERO
    contract: Contract | None = None
    candidate_contracts: list[Contract] = field(default_factory=list)
    associate_id: str | None = None
    associate_name: str | None = None
    associate_names: dict[str, str] = field(default_factory=dict)
    payments: PaymentDistribution = field(default_factory=PaymentDistribution)

    @classmethod
    def from_dict(cls, data: dict, default_exchange_rate: Decimal | None = None) -> "SettlementInput":
        raw_rate = _get(data, "exchange_rate", "exchangeRate")
        if raw_rate is None:
            raw_rate = default_exchange_rate
        raw_contract = data.get("contract")
        return cls(
            lines=[SaleLine.from_dict(line) for line in data.get("lines", [])],
            associate_entries=[
                AssociateEntry.from_dict(e) for e in _get(data, "associate_entries", "associateEntries", [])
            ],
            exchange_rate=_decimal(raw_rate),
            shared_expense=_decimal(_get(data, "shared_expense", "boothCost")),
            contract=Contract.from_dict(raw_contract) if isinstance(raw_contract, dict) else None,
            candidate_contracts=[Contract.from_dict(c) for c in data.get("contracts", []) if isinstance(c, dict)],
            associate_id=_get(data, "associate_id", "associateId"),
            associate_name=_get(data, "associate_name", "associateName"),
            associate_names=dict(_get(data, "associate_names", "associateNames", {}) or {}),
            payments=PaymentDistribution.from_dict(data.get("payments") or {}),
        )


# =============================================================================
# DERIVED / RESULT MODELS
# =============================================================================


@dataclass(frozen=True)
class ResolvedShares:
    """Share fractions applied to one classification, with their origin."""

    company_share: Decimal
    associate_share: Decimal
    source: ShareSource = ShareSource.DEFAULT


@dataclass(frozen=True)
class SettlementRow:
    """One category bucket of a settlement.

    ``retained_by_row_owner`` is what the owner of the goods keeps (the
    principal for principal rows, the associate for associate rows).
    ``commission_to_other_party`` is what the other party earns from them.
    Both are expressed in the ledger (secondary) currency.
    """

    label: str
    is_associate: bool
    total_native: Decimal = ZERO
    total_secondary: Decimal = ZERO
    ledger_total: Decimal = ZERO
    retained_by_row_owner: Decimal = ZERO
    commission_to_other_party: Decimal = ZERO
    shares: ResolvedShares | None = None


@dataclass(frozen=True)
class ExpenseSplit:
    """How the shared expense is divided."""

    total: Decimal = ZERO
    principal_share: Decimal = ZERO
    associate_share: Decimal = ZERO
    shares: ResolvedShares | None = None


@dataclass(frozen=True)
class SettlementBreakdown:
    """Final split of a booth sale between principal and associate.

    All amounts are in the ledger (secondary) currency.
    """

    exchange_rate: Decimal
    principal_rows: tuple[SettlementRow, ...]
    associate_rows: tuple[SettlementRow, ...]
    gross_sales: Decimal
    principal_sales: Decimal
    associate_sales: Decimal
    principal_net: Decimal
    associate_net: Decimal
    principal_commission_income: Decimal
    associate_commission_income: Decimal
    expense: ExpenseSplit
    principal_goods_shares: ResolvedShares
    associate_goods_shares: ResolvedShares

    @property
    def rows(self) -> tuple[SettlementRow, ...]:
        return self.principal_rows + self.associate_rows

    @property
    def gross_sales_native(self) -> Decimal:
        return self.gross_sales / self.exchange_rate

    @property
    def principal_net_native(self) -> Decimal:
        return self.principal_net / self.exchange_rate

    @property
    def associate_net_native(self) -> Decimal:
        return self.associate_net / self.exchange_rate


@dataclass(frozen=True)
class PaymentReconciliation:
    """Expected cash in the drawer once non-cash payments are accounted for."""

    total_native: Decimal = ZERO
    total_secondary: Decimal = ZERO
    remaining_secondary: Decimal = ZERO
    expected_cash_native: Decimal = ZERO


@dataclass
class SettlementContext:
    """
    Holds all intermediate state during settlement processing.
    This is the "bag" that flows through the pipeline.
    """

    input: SettlementInput
    contract: Contract | None = None
    breakdown: SettlementBreakdown | None = None
    payments: PaymentReconciliation = field(default_factory=PaymentReconciliation)
    service_lines: list[dict] = field(default_factory=list)
    sale_totals: dict = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)


@dataclass
class SettlementResult:
    """Final output of settlement processing."""

    settlement_summary: dict
    calculations: dict
    rows: dict
    shares: dict
    payments: dict
    persisted_lines: list
    sale_totals: dict
    warnings: list = field(default_factory=list)
