"""Typed shapes exchanged with the account client."""

from enum import Enum
from typing import ClassVar, List, Union

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class VariantTag(str, Enum):
    """Cloud type of an account. Also the slot name in the flat config."""
    AWS = "aws"
    AZURE = "azure"
    GCP = "gcp"
    ALIBABA = "alibaba_cloud"


# First populated slot wins when decoding.
VARIANT_PRIORITY = (
    VariantTag.AWS,
    VariantTag.AZURE,
    VariantTag.GCP,
    VariantTag.ALIBABA,
)


class GcpCredentials(BaseModel):
    """
    Parsed view of a GCP service account key file.

    Only these ten fields take part in equality; any other key in the
    document is dropped on parse.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: str = ""
    project_id: str = ""
    private_key_id: str = ""
    private_key: str = Field(default="", repr=False)
    client_email: str = ""
    client_id: str = ""
    auth_uri: str = ""
    token_uri: str = ""
    provider_cert_url: str = Field(default="", alias="auth_provider_x509_cert_url")
    client_cert_url: str = Field(default="", alias="client_x509_cert_url")


class CloudAccount(BaseModel):
    """Fields shared by every cloud type (nested for Azure and GCP)."""

    account_id: str = ""
    enabled: bool = True
    group_ids: List[str] = Field(min_length=1)
    name: str = Field(min_length=1)


class AwsAccount(BaseModel):
    tag: ClassVar[VariantTag] = VariantTag.AWS

    account_id: str = ""
    enabled: bool = True
    external_id: SecretStr
    group_ids: List[str] = Field(min_length=1)
    name: str = Field(min_length=1)
    role_arn: str

    @property
    def remote_id(self) -> str:
        return self.account_id


class AzureAccount(BaseModel):
    tag: ClassVar[VariantTag] = VariantTag.AZURE

    account: CloudAccount
    client_id: str
    key: SecretStr
    monitor_flow_logs: bool = False
    tenant_id: str
    service_principal_id: str

    @property
    def name(self) -> str:
        return self.account.name

    @property
    def remote_id(self) -> str:
        return self.account.account_id


class GcpAccount(BaseModel):
    tag: ClassVar[VariantTag] = VariantTag.GCP

    account: CloudAccount
    compression_enabled: bool = False
    dataflow_enabled_project: str = ""
    flow_log_storage_bucket: str = ""
    credentials: GcpCredentials = GcpCredentials()

    @property
    def name(self) -> str:
        return self.account.name

    @property
    def remote_id(self) -> str:
        return self.account.account_id


class AlibabaAccount(BaseModel):
    tag: ClassVar[VariantTag] = VariantTag.ALIBABA

    account_id: str = ""
    group_ids: List[str] = Field(min_length=1)
    name: str = Field(min_length=1)
    ram_arn: str

    @property
    def remote_id(self) -> str:
        return self.account_id


AccountVariant = Union[AwsAccount, AzureAccount, GcpAccount, AlibabaAccount]

RECORD_TYPES = {
    VariantTag.AWS: AwsAccount,
    VariantTag.AZURE: AzureAccount,
    VariantTag.GCP: GcpAccount,
    VariantTag.ALIBABA: AlibabaAccount,
}
