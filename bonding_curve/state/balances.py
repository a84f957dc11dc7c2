"""
Custody ledger: (account, asset) -> amount.

Every custody movement the engine asks for goes through `apply_transfers`,
which validates the whole batch against a scratch copy before touching the
live table. A batch either lands completely or not at all.
"""

from __future__ import annotations

from typing import Dict, Iterable, Tuple

from ..errors import InsufficientFunds, InvalidAmount


# Type aliases
AccountId = str
AssetId = str
Amount = int  # Non-negative integer

# Base currency identifier
NATIVE_ASSET: AssetId = "SOL"

LedgerTransfer = Tuple[AssetId, AccountId, AccountId, Amount]


class BalanceTable:
    """
    Balance table mapping (account, asset) -> amount.

    Zero balances are dropped so the table stays sparse. Iteration order of
    the underlying dict is not meaningful; `snapshot()` sorts.
    """

    def __init__(self):
        self._balances: Dict[Tuple[AccountId, AssetId], Amount] = {}

    def get(self, account: AccountId, asset: AssetId) -> Amount:
        """Get balance for (account, asset). Returns 0 if not found."""
        return self._balances.get((account, asset), 0)

    def set(self, account: AccountId, asset: AssetId, amount: Amount) -> None:
        if not isinstance(amount, int) or isinstance(amount, bool):
            raise InvalidAmount(f"Balance must be an int: {amount!r}")
        if amount < 0:
            raise InsufficientFunds(f"Balance cannot be negative: {amount}")
        if amount == 0:
            self._balances.pop((account, asset), None)
        else:
            self._balances[(account, asset)] = amount

    def credit(self, account: AccountId, asset: AssetId, amount: Amount) -> None:
        if amount < 0:
            raise InvalidAmount(f"Credit must be non-negative: {amount}")
        self.set(account, asset, self.get(account, asset) + amount)

    def debit(self, account: AccountId, asset: AssetId, amount: Amount) -> None:
        """
        Raises:
            InvalidAmount: If amount is negative
            InsufficientFunds: If the balance would go negative
        """
        if amount < 0:
            raise InvalidAmount(f"Debit must be non-negative: {amount}")
        current = self.get(account, asset)
        if current < amount:
            raise InsufficientFunds(
                f"Insufficient {asset} balance for {account}: {current} < {amount}"
            )
        self.set(account, asset, current - amount)

    def apply_transfers(self, transfers: Iterable[LedgerTransfer]) -> None:
        """
        Apply a batch of (asset, source, destination, amount) transfers atomically.

        Raises:
            InsufficientFunds: If any source cannot cover its leg; no leg is applied
        """
        batch = list(transfers)
        scratch = BalanceTable()
        scratch._balances = dict(self._balances)
        for asset, source, destination, amount in batch:
            scratch.debit(source, asset, amount)
            scratch.credit(destination, asset, amount)
        self._balances = scratch._balances

    def total(self, asset: AssetId) -> Amount:
        return sum(amount for (_, a), amount in self._balances.items() if a == asset)

    def snapshot(self) -> Dict[Tuple[AccountId, AssetId], Amount]:
        """All balances, sorted by (account, asset)."""
        return dict(sorted(self._balances.items()))

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"
