from typing import Protocol

from bookshelf.domain.common.value_objects.ids import OwnerId


class AccountServiceProtocol(Protocol):
    """Port to the authentication provider that owns account records."""

    def delete_account(self, owner_id: OwnerId) -> None: ...
