"""Flat configuration slots and resource-level settings."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from account_kernel.models.account import VariantTag

_UNIQUE_NAME = "Name to be used for the account on the Prisma Cloud platform (must be unique)"
_GROUP_IDS = "List of account group IDs to which you are assigning this account"
_ENABLED = "Whether or not the account is enabled"


class AwsSlot(BaseModel):
    """AWS account type."""

    model_config = ConfigDict(extra="forbid")

    account_id: str = Field(description="AWS account ID")
    enabled: bool = Field(default=True, description=_ENABLED)
    external_id: SecretStr = Field(description="AWS account external ID")
    group_ids: List[str] = Field(min_length=1, description=_GROUP_IDS)
    name: str = Field(min_length=1, description=_UNIQUE_NAME)
    role_arn: str = Field(description="Unique identifier for an AWS resource (ARN)")


class AzureSlot(BaseModel):
    """Azure account type."""

    model_config = ConfigDict(extra="forbid")

    account_id: str = Field(description="Azure account ID")
    enabled: bool = Field(default=True, description=_ENABLED)
    group_ids: List[str] = Field(min_length=1, description=_GROUP_IDS)
    name: str = Field(min_length=1, description=_UNIQUE_NAME)
    client_id: str = Field(description="Application ID registered with Active Directory")
    key: SecretStr = Field(description="Application ID key")
    monitor_flow_logs: bool = Field(default=False, description="Automatically ingest flow logs")
    tenant_id: str = Field(description="Active Directory ID associated with Azure")
    service_principal_id: str = Field(
        description="Unique ID of the service principal object associated with the application"
    )


class GcpSlot(BaseModel):
    """GCP account type."""

    model_config = ConfigDict(extra="forbid")

    account_id: str = Field(description="GCP project ID")
    enabled: bool = Field(default=True, description=_ENABLED)
    group_ids: List[str] = Field(min_length=1, description=_GROUP_IDS)
    name: str = Field(min_length=1, description=_UNIQUE_NAME)
    compression_enabled: bool = Field(default=False, description="Enable flow log compression")
    dataflow_enabled_project: str = Field(
        default="", description="GCP project for flow log compression"
    )
    flow_log_storage_bucket: str = Field(default="", description="GCP flow logs storage bucket")
    # Compared with gcp_credentials_match, never byte for byte.
    credentials_json: SecretStr = Field(description="Content of the JSON credentials file")


class AlibabaSlot(BaseModel):
    """Alibaba Cloud account type."""

    model_config = ConfigDict(extra="forbid")

    account_id: str = Field(description="Alibaba account ID")
    group_ids: List[str] = Field(min_length=1, description=_GROUP_IDS)
    name: str = Field(min_length=1, description=_UNIQUE_NAME)
    ram_arn: str = Field(description="Unique identifier for an Alibaba RAM role resource")


class AccountResourceConfig(BaseModel):
    """
    Settings for the cloud account resource.

    Timeouts are advertised to the host driver, which owns deadlines;
    the kernel itself never cancels a call.
    """

    create_timeout_seconds: int = Field(default=600, gt=0)
    update_timeout_seconds: int = Field(default=600, gt=0)
    delete_timeout_seconds: int = Field(default=300, gt=0)


SLOT_SCHEMAS = {
    VariantTag.AWS: AwsSlot,
    VariantTag.AZURE: AzureSlot,
    VariantTag.GCP: GcpSlot,
    VariantTag.ALIBABA: AlibabaSlot,
}

# Fields never logged or shown in a diff.
SENSITIVE_FIELDS = {
    tag: frozenset(
        name for name, field in schema.model_fields.items() if field.annotation is SecretStr
    )
    for tag, schema in SLOT_SCHEMAS.items()
}
