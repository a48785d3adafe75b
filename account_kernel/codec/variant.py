"""
Variant codec: flat cloud account config <-> typed account records.

The flat form has one slot per cloud type (aws, azure, gcp, alibaba_cloud),
at most one of them populated. Decoding picks the populated slot, validates
it in a single typed step and builds the matching record. Encoding projects
a record back, writing None into every other slot.
"""

from collections.abc import Mapping
from typing import Any, Dict, List, NamedTuple, Optional

import structlog
from pydantic import SecretStr, ValidationError

from account_kernel.diff.credentials import dump_gcp_credentials, parse_gcp_credentials
from account_kernel.errors import (
    ConflictingVariantsError,
    CredentialParseError,
    InvalidAccountConfigError,
    NoVariantSelectedError,
)
from account_kernel.models.account import (
    AccountVariant,
    AlibabaAccount,
    AwsAccount,
    AzureAccount,
    CloudAccount,
    GcpAccount,
    GcpCredentials,
    VARIANT_PRIORITY,
    VariantTag,
)
from account_kernel.models.config import (
    SLOT_SCHEMAS,
    AlibabaSlot,
    AwsSlot,
    AzureSlot,
    GcpSlot,
)

logger = structlog.get_logger()


class DecodedAccount(NamedTuple):
    tag: VariantTag
    name: str
    record: AccountVariant


def _slot_value(state: Mapping, tag: VariantTag) -> Optional[Any]:
    """Return the raw slot content, unwrapping the one-element list form."""
    value = state.get(tag.value)
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    return value or None


def populated_variants(state: Mapping) -> List[VariantTag]:
    """Cloud types whose slot is populated, in decode priority order."""
    return [tag for tag in VARIANT_PRIORITY if _slot_value(state, tag) is not None]


def ensure_single_variant(state: Mapping) -> VariantTag:
    """Enforce the exactly-one-slot rule at the configuration boundary."""
    tags = populated_variants(state)
    if not tags:
        raise NoVariantSelectedError()
    if len(tags) > 1:
        raise ConflictingVariantsError(t.value for t in tags)
    return tags[0]


def _validate_slot(tag: VariantTag, value: Any):
    if not isinstance(value, Mapping):
        raise InvalidAccountConfigError(
            tag.value, [{"loc": (), "msg": f"expected a mapping, got {type(value).__name__}"}]
        )
    try:
        return SLOT_SCHEMAS[tag].model_validate(dict(value))
    except ValidationError as e:
        # include_input=False keeps secrets out of the error
        raise InvalidAccountConfigError(
            tag.value, e.errors(include_url=False, include_input=False)
        ) from None


# --- Decoders ---

def _common(slot, remote_id: str) -> CloudAccount:
    return CloudAccount(
        account_id=remote_id,
        enabled=slot.enabled,
        group_ids=list(slot.group_ids),
        name=slot.name,
    )


def _decode_aws(slot: AwsSlot, remote_id: str) -> AwsAccount:
    return AwsAccount(
        account_id=remote_id,
        enabled=slot.enabled,
        external_id=slot.external_id,
        group_ids=list(slot.group_ids),
        name=slot.name,
        role_arn=slot.role_arn,
    )


def _decode_azure(slot: AzureSlot, remote_id: str) -> AzureAccount:
    return AzureAccount(
        account=_common(slot, remote_id),
        client_id=slot.client_id,
        key=slot.key,
        monitor_flow_logs=slot.monitor_flow_logs,
        tenant_id=slot.tenant_id,
        service_principal_id=slot.service_principal_id,
    )


def _decode_gcp(slot: GcpSlot, remote_id: str) -> GcpAccount:
    try:
        credentials = parse_gcp_credentials(slot.credentials_json)
    except CredentialParseError:
        logger.warning("gcp_credentials_unparsed", name=slot.name)
        credentials = GcpCredentials()
    return GcpAccount(
        account=_common(slot, remote_id),
        compression_enabled=slot.compression_enabled,
        dataflow_enabled_project=slot.dataflow_enabled_project,
        flow_log_storage_bucket=slot.flow_log_storage_bucket,
        credentials=credentials,
    )


def _decode_alibaba(slot: AlibabaSlot, remote_id: str) -> AlibabaAccount:
    return AlibabaAccount(
        account_id=remote_id,
        group_ids=list(slot.group_ids),
        name=slot.name,
        ram_arn=slot.ram_arn,
    )


_DECODERS = {
    VariantTag.AWS: _decode_aws,
    VariantTag.AZURE: _decode_azure,
    VariantTag.GCP: _decode_gcp,
    VariantTag.ALIBABA: _decode_alibaba,
}


def decode_account(state: Mapping, remote_id: str = "") -> DecodedAccount:
    """
    Build the typed record for the populated slot of a flat config.

    Slots are checked in the order aws, azure, gcp, alibaba_cloud and the
    first populated one is used. remote_id becomes the record's account
    id as given: empty on create, the tracked id otherwise. The declared
    account_id never reaches the service.
    """
    tags = populated_variants(state)
    if not tags:
        raise NoVariantSelectedError()
    if len(tags) > 1:
        logger.warning(
            "multiple_account_types_configured",
            selected=tags[0].value,
            ignored=[t.value for t in tags[1:]],
        )

    tag = tags[0]
    slot = _validate_slot(tag, _slot_value(state, tag))
    record = _DECODERS[tag](slot, remote_id)
    return DecodedAccount(tag=tag, name=record.name, record=record)


# --- Encoders ---

def _encode_aws(record: AwsAccount) -> dict:
    return {
        "account_id": record.account_id,
        "enabled": record.enabled,
        "external_id": record.external_id.get_secret_value(),
        "group_ids": list(record.group_ids),
        "name": record.name,
        "role_arn": record.role_arn,
    }


def _encode_azure(record: AzureAccount) -> dict:
    return {
        "account_id": record.account.account_id,
        "enabled": record.account.enabled,
        "group_ids": list(record.account.group_ids),
        "name": record.account.name,
        "client_id": record.client_id,
        "key": record.key.get_secret_value(),
        "monitor_flow_logs": record.monitor_flow_logs,
        "tenant_id": record.tenant_id,
        "service_principal_id": record.service_principal_id,
    }


def _encode_gcp(record: GcpAccount) -> dict:
    return {
        "account_id": record.account.account_id,
        "enabled": record.account.enabled,
        "group_ids": list(record.account.group_ids),
        "name": record.account.name,
        "compression_enabled": record.compression_enabled,
        "dataflow_enabled_project": record.dataflow_enabled_project,
        "flow_log_storage_bucket": record.flow_log_storage_bucket,
        "credentials_json": dump_gcp_credentials(record.credentials),
    }


def _encode_alibaba(record: AlibabaAccount) -> dict:
    return {
        "account_id": record.account_id,
        "group_ids": list(record.group_ids),
        "name": record.name,
        "ram_arn": record.ram_arn,
    }


_ENCODERS = {
    VariantTag.AWS: _encode_aws,
    VariantTag.AZURE: _encode_azure,
    VariantTag.GCP: _encode_gcp,
    VariantTag.ALIBABA: _encode_alibaba,
}


def encode_account(record: AccountVariant) -> Dict[str, Optional[dict]]:
    """Project a record into all four slots; only its own slot is set."""
    slots: Dict[str, Optional[dict]] = {tag.value: None for tag in VARIANT_PRIORITY}
    slots[record.tag.value] = _ENCODERS[record.tag](record)
    return slots


def normalize_config(state: Mapping) -> Dict[str, Optional[dict]]:
    """
    Desired config in projected form: defaults filled in, secrets revealed,
    other slots None. Text fields are kept as written, so GCP credentials
    still need gcp_credentials_match to compare.
    """
    tag = ensure_single_variant(state)
    slot = _validate_slot(tag, _slot_value(state, tag))
    values = {
        field: value.get_secret_value() if isinstance(value, SecretStr) else value
        for field, value in slot
    }
    slots: Dict[str, Optional[dict]] = {t.value: None for t in VARIANT_PRIORITY}
    slots[tag.value] = values
    return slots
