"""Cloud account kernel data models."""

from account_kernel.models.account import (
    AccountVariant,
    AlibabaAccount,
    AwsAccount,
    AzureAccount,
    CloudAccount,
    GcpAccount,
    GcpCredentials,
    RECORD_TYPES,
    VARIANT_PRIORITY,
    VariantTag,
)
from account_kernel.models.config import (
    AccountResourceConfig,
    AlibabaSlot,
    AwsSlot,
    AzureSlot,
    GcpSlot,
)
from account_kernel.models.reconciler import FieldChange, ReconcileAction, ReconcileResult
from account_kernel.models.state import ProjectedState

__all__ = [
    "AccountResourceConfig",
    "AccountVariant",
    "AlibabaAccount",
    "AlibabaSlot",
    "AwsAccount",
    "AwsSlot",
    "AzureAccount",
    "AzureSlot",
    "CloudAccount",
    "FieldChange",
    "GcpAccount",
    "GcpCredentials",
    "GcpSlot",
    "ProjectedState",
    "RECORD_TYPES",
    "ReconcileAction",
    "ReconcileResult",
    "VARIANT_PRIORITY",
    "VariantTag",
]
