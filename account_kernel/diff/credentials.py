"""GCP credential parsing and semantic comparison."""

import json
from typing import Union

from pydantic import SecretStr, ValidationError

from account_kernel.errors import CredentialParseError
from account_kernel.models.account import GcpCredentials

CredentialText = Union[str, SecretStr, None]


def _reveal(text: CredentialText) -> str:
    if isinstance(text, SecretStr):
        return text.get_secret_value()
    return text or ""


def parse_gcp_credentials(text: CredentialText) -> GcpCredentials:
    """Parse a service account key document into its ten credential fields."""
    try:
        data = json.loads(_reveal(text))
    except json.JSONDecodeError as e:
        raise CredentialParseError(f"GCP credentials are not valid JSON: {e.msg}") from None
    if not isinstance(data, dict):
        raise CredentialParseError("GCP credentials must be a JSON object")
    try:
        return GcpCredentials.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise CredentialParseError(f"GCP credentials have invalid fields: {fields}") from None


def dump_gcp_credentials(credentials: GcpCredentials) -> str:
    """Serialize credentials back to a JSON document with the key file's key names."""
    return json.dumps(credentials.model_dump(by_alias=True))


def gcp_credentials_match(old: CredentialText, new: CredentialText) -> bool:
    """
    True when both documents carry the same ten credential fields.

    Key order, whitespace and unknown keys do not count. Unparsable input
    on either side counts as a change.
    """
    try:
        prev = parse_gcp_credentials(old)
        cur = parse_gcp_credentials(new)
    except CredentialParseError:
        return False
    return prev.model_dump() == cur.model_dump()
