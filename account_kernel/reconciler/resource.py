"""
Cloud Account Resource: create / read / update / delete.

Each operation is a single synchronous call-and-return. Nothing is kept
between calls: the entity id handed back to the host driver is the only
identity that survives, and every other field is re-read from the
service after a write.

Behavioral Contract:
- Writes are always followed by a read, so the returned state mirrors
  the service, not the input
- A read that finds nothing returns None (tracked id cleared)
- Deleting an account that is already gone succeeds
- Collaborator errors are wrapped once, never retried
"""

from collections.abc import Mapping
from typing import Optional

import structlog

from account_kernel.client.base import AccountClient
from account_kernel.codec.identifier import decode_entity_id, encode_entity_id
from account_kernel.codec.variant import decode_account, encode_account
from account_kernel.errors import (
    AccountNotFoundError,
    CreateFailedError,
    DeleteFailedError,
    IdentifyFailedError,
    UpdateFailedError,
    VariantChangeError,
)
from account_kernel.models.config import AccountResourceConfig
from account_kernel.models.state import ProjectedState

logger = structlog.get_logger()


class CloudAccountResource:
    """Reconciles one cloud account against the account service."""

    def __init__(
        self,
        client: AccountClient,
        config: Optional[AccountResourceConfig] = None,
    ):
        self.client = client
        self.config = config or AccountResourceConfig()

    def create(self, desired: Mapping) -> ProjectedState:
        """
        Onboard the account described by desired and return its state.

        The service does not return the new id, so the account is looked
        up by name afterwards. If that lookup fails the account may exist
        remotely without being tracked; this is reported, never cleaned up,
        since the name could belong to an account someone else created.
        """
        tag, name, record = decode_account(desired)
        log = logger.bind(operation="create", tag=tag.value, name=name)

        try:
            self.client.create(record)
        except Exception as e:
            log.error("cloud_account_create_failed", error=str(e))
            raise CreateFailedError(e) from e

        try:
            remote_id = self.client.identify(tag.value, name)
        except Exception as e:
            log.error("cloud_account_identify_failed", error=str(e))
            raise IdentifyFailedError(
                e, f"account {name!r} was created but could not be identified: {e}"
            ) from e

        entity_id = encode_entity_id(tag, remote_id)
        log.info("cloud_account_created", entity_id=entity_id)

        state = self.read(entity_id)
        if state is None:
            missing = AccountNotFoundError(tag.value, remote_id)
            raise CreateFailedError(missing, f"account {entity_id} vanished right after create")
        return state

    def read(self, entity_id: str) -> Optional[ProjectedState]:
        """Project the service's view of the account, or None if it is gone."""
        tag, remote_id = decode_entity_id(entity_id)

        try:
            record = self.client.get(tag.value, remote_id)
        except AccountNotFoundError:
            logger.info("cloud_account_gone", entity_id=entity_id)
            return None

        return ProjectedState(id=entity_id, **encode_account(record))

    def update(self, entity_id: str, desired: Mapping) -> Optional[ProjectedState]:
        """
        Push desired settings onto an existing account.

        The cloud type is fixed by the entity id; switching type needs a
        delete and a create, which is the host driver's decision.
        """
        tag, remote_id = decode_entity_id(entity_id)
        decoded = decode_account(desired, remote_id)
        if decoded.tag != tag:
            raise VariantChangeError(tag.value, decoded.tag.value)

        try:
            self.client.update(decoded.record)
        except Exception as e:
            logger.error(
                "cloud_account_update_failed", entity_id=entity_id, error=str(e)
            )
            raise UpdateFailedError(e) from e

        logger.info("cloud_account_updated", entity_id=entity_id)
        return self.read(entity_id)

    def delete(self, entity_id: str) -> None:
        """Remove the account. One that is already gone counts as deleted."""
        tag, remote_id = decode_entity_id(entity_id)

        try:
            self.client.delete(tag.value, remote_id)
        except AccountNotFoundError:
            logger.info("cloud_account_already_deleted", entity_id=entity_id)
            return
        except Exception as e:
            logger.error(
                "cloud_account_delete_failed", entity_id=entity_id, error=str(e)
            )
            raise DeleteFailedError(e) from e

        logger.info("cloud_account_deleted", entity_id=entity_id)

    def import_state(self, entity_id: str) -> ProjectedState:
        """Adopt an existing account given its entity id."""
        state = self.read(entity_id)
        if state is None:
            tag, remote_id = decode_entity_id(entity_id)
            raise AccountNotFoundError(tag.value, remote_id)
        return state
