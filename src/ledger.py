from typing import Dict, List, Optional

from models import ClientAccount


class ClientLedger:
    """
    One ClientAccount per client id, created on first reference.
    Balances are changed only by TransactionProcessor.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}

    def get_or_create(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def get(self, client_id: int) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def accounts(self) -> List[ClientAccount]:
        """All accounts ordered by client id (for final output)."""
        return [self._accounts[client_id] for client_id in sorted(self._accounts)]

    def as_dict(self) -> Dict[int, ClientAccount]:
        return dict(self._accounts)

    def __contains__(self, client_id: int) -> bool:
        return client_id in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)
