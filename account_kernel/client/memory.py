"""
In-memory account service.

Stands in for the remote account-management API in tests and in the
default API application. Production would plug a REST client in behind
the same AccountClient interface.
"""

from itertools import count
from typing import Callable, Dict, Optional, Tuple

import structlog

from account_kernel.client.base import AccountClient
from account_kernel.errors import AccountNotFoundError
from account_kernel.models.account import AccountVariant, VariantTag

logger = structlog.get_logger()


class AccountServiceError(Exception):
    """Raised when the service rejects a request."""
    pass


def _with_remote_id(record: AccountVariant, remote_id: str) -> AccountVariant:
    record = record.model_copy(deep=True)
    if hasattr(record, "account"):
        record.account.account_id = remote_id
    else:
        record.account_id = remote_id
    return record


class InMemoryAccountClient(AccountClient):
    """
    Accounts keyed by (cloud type, remote id).

    The service assigns remote ids; records arrive with an empty one.
    By default ids come from a counter. Pass id_factory to control
    assignment.
    """

    def __init__(self, id_factory: Optional[Callable[[AccountVariant], str]] = None):
        self._accounts: Dict[Tuple[str, str], AccountVariant] = {}
        self._sequence = count(1)
        self._id_factory = id_factory or self._default_id

    def _default_id(self, record: AccountVariant) -> str:
        return str(next(self._sequence))

    def _find_by_name(self, tag: str, name: str) -> Optional[Tuple[str, str]]:
        for key, record in self._accounts.items():
            if key[0] == tag and record.name == name:
                return key
        return None

    def create(self, record: AccountVariant) -> None:
        tag = record.tag.value
        if self._find_by_name(tag, record.name):
            raise AccountServiceError(f"{tag} account name {record.name!r} already in use")

        remote_id = self._id_factory(record)
        if (tag, remote_id) in self._accounts:
            raise AccountServiceError(f"{tag} account {remote_id} already onboarded")

        self._accounts[(tag, remote_id)] = _with_remote_id(record, remote_id)
        logger.debug("memory_account_created", tag=tag, remote_id=remote_id)

    def identify(self, tag: str, name: str) -> str:
        key = self._find_by_name(VariantTag(tag).value, name)
        if key is None:
            raise AccountNotFoundError(tag, name)
        return key[1]

    def get(self, tag: str, remote_id: str) -> AccountVariant:
        record = self._accounts.get((VariantTag(tag).value, remote_id))
        if record is None:
            raise AccountNotFoundError(tag, remote_id)
        return record.model_copy(deep=True)

    def update(self, record: AccountVariant) -> None:
        key = (record.tag.value, record.remote_id)
        if key not in self._accounts:
            raise AccountNotFoundError(*key)

        owner = self._find_by_name(key[0], record.name)
        if owner is not None and owner != key:
            raise AccountServiceError(f"{key[0]} account name {record.name!r} already in use")

        self._accounts[key] = record.model_copy(deep=True)

    def delete(self, tag: str, remote_id: str) -> None:
        key = (VariantTag(tag).value, remote_id)
        if key not in self._accounts:
            raise AccountNotFoundError(*key)
        del self._accounts[key]

    def count(self) -> int:
        return len(self._accounts)
