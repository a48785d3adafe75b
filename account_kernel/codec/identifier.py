"""
Entity id codec.

The host driver persists a single opaque string per cloud account:
``<cloud type>:<remote id>``. The cloud type is needed to address the
account on the remote service, so it travels inside the id.
"""

from typing import Tuple

from account_kernel.errors import MalformedIdentifierError
from account_kernel.models.account import VariantTag

ID_SEPARATOR = ":"


def encode_entity_id(tag: str, remote_id: str) -> str:
    """Join a cloud type and a remote id into an entity id."""
    tag = VariantTag(tag).value
    if ID_SEPARATOR in tag:
        raise ValueError(f"cloud type {tag!r} contains {ID_SEPARATOR!r}")
    return f"{tag}{ID_SEPARATOR}{remote_id}"


def decode_entity_id(entity_id: str) -> Tuple[VariantTag, str]:
    """
    Split an entity id back into (cloud type, remote id).

    Only the first separator splits, so a remote id may contain one.
    Ids may come from hand-edited state or an import, so every part is
    checked rather than trusted.
    """
    tag, sep, remote_id = (entity_id or "").partition(ID_SEPARATOR)
    if not sep:
        raise MalformedIdentifierError(entity_id, f"missing {ID_SEPARATOR!r} separator")
    if not tag or not remote_id:
        raise MalformedIdentifierError(entity_id, "empty cloud type or remote id")
    try:
        return VariantTag(tag), remote_id
    except ValueError:
        raise MalformedIdentifierError(entity_id, f"unknown cloud type {tag!r}") from None
