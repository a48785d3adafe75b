"""Tests for the entity id codec."""

import pytest

from account_kernel.codec.identifier import ID_SEPARATOR, decode_entity_id, encode_entity_id
from account_kernel.errors import MalformedIdentifierError
from account_kernel.models.account import VariantTag


class TestEncode:
    def test_encode(self):
        assert encode_entity_id("gcp", "12345") == "gcp:12345"

    def test_encode_accepts_enum(self):
        assert encode_entity_id(VariantTag.ALIBABA, "7") == "alibaba_cloud:7"

    def test_unknown_tag_rejected(self):
        with pytest.raises(ValueError):
            encode_entity_id("oracle", "1")


class TestDecode:
    @pytest.mark.parametrize("tag", list(VariantTag))
    def test_round_trip(self, tag):
        assert decode_entity_id(encode_entity_id(tag, "123456789012")) == (tag, "123456789012")

    def test_remote_id_may_contain_separator(self):
        entity_id = encode_entity_id("azure", f"sub{ID_SEPARATOR}42")
        assert decode_entity_id(entity_id) == (VariantTag.AZURE, "sub:42")

    def test_decoded_tag_is_enum(self):
        tag, _ = decode_entity_id("aws:1")
        assert tag is VariantTag.AWS

    @pytest.mark.parametrize("entity_id", ["", "gcp", ":123", "gcp:", "oracle:1", "12345"])
    def test_malformed(self, entity_id):
        with pytest.raises(MalformedIdentifierError) as exc_info:
            decode_entity_id(entity_id)
        assert exc_info.value.entity_id == entity_id
