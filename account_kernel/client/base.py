"""
Contract of the remote account-management service.

The kernel never talks HTTP itself. Anything implementing this interface
(a REST client, the in-memory store used by tests) can back the
cloud account resource.

Behavioral Contract:
- get() and delete() raise AccountNotFoundError when the account is gone
- every other failure is raised as-is; the kernel wraps and reports it
- create() does not return the remote id; identify() resolves it by name
"""

from abc import ABC, abstractmethod

from account_kernel.models.account import AccountVariant


class AccountClient(ABC):

    @abstractmethod
    def create(self, record: AccountVariant) -> None:
        """Onboard a new cloud account."""

    @abstractmethod
    def identify(self, tag: str, name: str) -> str:
        """Resolve the remote id of the account of this type and name."""

    @abstractmethod
    def get(self, tag: str, remote_id: str) -> AccountVariant:
        """Fetch an account. Raises AccountNotFoundError."""

    @abstractmethod
    def update(self, record: AccountVariant) -> None:
        """Replace the settings of an existing account."""

    @abstractmethod
    def delete(self, tag: str, remote_id: str) -> None:
        """Remove an account. Raises AccountNotFoundError."""
