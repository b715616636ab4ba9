"""
Contract Selection

Picks the contract that governs a settlement for the chosen associate.
"""

from .models import Contract


class ContractSelector:
    """Finds the active contract involving an associate."""

    def select(
        self,
        contracts: list[Contract],
        associate_id: str | None,
        associate_name: str | None = None,
    ) -> Contract | None:
        """
        Priority order:
        1. Active contract naming the associate as principal or counterparty
        2. Active contract whose name contains the associate's first name
        3. None (settle with default shares)
        """
        if not associate_id:
            return None

        active = [c for c in contracts if c.is_active]

        for contract in active:
            if associate_id in (contract.counterparty_business_id, contract.principal_business_id):
                return contract

        first_name = self._first_name(associate_name)
        if first_name:
            for contract in active:
                if first_name in contract.name.lower():
                    return contract

        return None

    @staticmethod
    def _first_name(name: str | None) -> str:
        if not name or not name.strip():
            return ""
        return name.split()[0].lower()


def select_contract(
    contracts: list[Contract],
    associate_id: str | None,
    associate_name: str | None = None,
) -> Contract | None:
    """Select a contract with a default selector."""
    return ContractSelector().select(contracts, associate_id, associate_name)
