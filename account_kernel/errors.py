"""
Error hierarchy for the cloud account kernel.

Configuration errors are raised before any remote call is made.
Operation errors wrap whatever the account client raised and keep it as
``cause`` so the host driver can report it verbatim.
"""

from typing import Iterable, List, Optional


class AccountKernelError(Exception):
    """Base class for every error raised by the kernel."""
    pass


class NoVariantSelectedError(AccountKernelError):
    """None of the four account slots is populated."""

    def __init__(self):
        super().__init__(
            "No cloud account type configured: one of "
            "aws, azure, gcp or alibaba_cloud must be set."
        )


class ConflictingVariantsError(AccountKernelError):
    """More than one account slot is populated."""

    def __init__(self, tags: Iterable[str]):
        self.tags = list(tags)
        super().__init__(
            f"Cloud account types conflict, only one may be set: {', '.join(self.tags)}"
        )


class InvalidAccountConfigError(AccountKernelError):
    """A populated slot failed typed validation. Carries every field error at once."""

    def __init__(self, tag: str, errors: List[dict]):
        self.tag = tag
        self.errors = errors
        fields = ", ".join(
            f"{'.'.join(str(p) for p in e.get('loc', ())) or '<slot>'} ({e.get('msg', 'invalid')})"
            for e in errors
        )
        super().__init__(f"Invalid {tag} account configuration: {fields}")


class MalformedIdentifierError(AccountKernelError):
    """A stored entity id cannot be split back into (tag, remote id)."""

    def __init__(self, entity_id: str, reason: str):
        self.entity_id = entity_id
        self.reason = reason
        super().__init__(f"Malformed cloud account id {entity_id!r}: {reason}")


class AccountNotFoundError(AccountKernelError):
    """The remote service has no account for (tag, remote id)."""

    def __init__(self, tag: str, remote_id: str):
        self.tag = tag
        self.remote_id = remote_id
        super().__init__(f"Cloud account {tag}/{remote_id} not found")


class CredentialParseError(AccountKernelError):
    """GCP credentials text is not a JSON object."""
    pass


class VariantChangeError(AccountKernelError):
    """Update was asked to switch the account type in place."""

    def __init__(self, current: str, desired: str):
        self.current = current
        self.desired = desired
        super().__init__(
            f"Cannot change cloud account type from {current} to {desired} "
            f"in place; the account must be replaced."
        )


class ReconcileOperationError(AccountKernelError):
    """A collaborator call failed during a lifecycle operation."""

    operation = "reconcile"

    def __init__(self, cause: Exception, detail: Optional[str] = None):
        self.cause = cause
        message = detail or str(cause)
        super().__init__(f"{self.operation} failed: {message}")


class CreateFailedError(ReconcileOperationError):
    operation = "create"


class IdentifyFailedError(ReconcileOperationError):
    """The account may exist remotely but could not be resolved to an id."""
    operation = "identify"


class UpdateFailedError(ReconcileOperationError):
    operation = "update"


class DeleteFailedError(ReconcileOperationError):
    operation = "delete"
