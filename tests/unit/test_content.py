"""
Unit tests for the tagged content convention
"""

import json

import pytest

from src.services.pixel_vault.core.content import decode_content, encode_content
from src.services.pixel_vault.core.errors import ContentParseError
from src.services.pixel_vault.models.vault_models import BundledFile, FileBundle, PlainText


class TestEncodeContent:
    def test_text(self):
        assert encode_content(PlainText(text="hello")) == "text::hello"

    def test_bundle_json_shape(self):
        bundle = FileBundle.from_files([("a.txt", "text/plain", b"abc")])
        encoded = encode_content(bundle)
        assert encoded.startswith("bundle::")
        assert json.loads(encoded[len("bundle::"):]) == {
            "files": [{"name": "a.txt", "type": "text/plain", "data": "YWJj"}]
        }

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            encode_content("raw string")


class TestDecodeContent:
    def test_text(self):
        assert decode_content("text::hello") == PlainText(text="hello")

    def test_text_keeps_inner_separators(self):
        assert decode_content("text::a::b::").text == "a::b::"

    def test_empty_text(self):
        assert decode_content("text::") == PlainText(text="")

    def test_bare_text_tag_is_empty_text(self):
        assert decode_content("text") == PlainText(text="")

    def test_bare_bundle_tag_is_unparseable(self):
        with pytest.raises(ContentParseError):
            decode_content("bundle")

    def test_bundle_round_trip(self):
        bundle = FileBundle.from_files([
            ("a.txt", "text/plain", b"abc"),
            ("img.bin", "", bytes(range(256))),
        ])
        decoded = decode_content(encode_content(bundle))
        assert isinstance(decoded, FileBundle)
        assert [f.name for f in decoded.files] == ["a.txt", "img.bin"]
        assert decoded.files[1].content() == bytes(range(256))

    def test_bundle_accepts_browser_json(self):
        decoded = decode_content('bundle::{"files": [{"name": "n", "type": "t", "data": "AA=="}]}')
        assert decoded.files[0].content() == b"\x00"

    def test_missing_separator(self):
        with pytest.raises(ContentParseError):
            decode_content("just some text")

    def test_unknown_tag(self):
        with pytest.raises(ContentParseError):
            decode_content("image::abc")

    def test_bundle_invalid_json(self):
        with pytest.raises(ContentParseError):
            decode_content("bundle::{not json")

    @pytest.mark.parametrize("payload", [
        '{"files": "nope"}',
        '{"files": [{"type": "t", "data": ""}]}',
        '[]',
    ])
    def test_bundle_schema_mismatch(self, payload):
        with pytest.raises(ContentParseError):
            decode_content("bundle::" + payload)


class TestBundledFile:
    def test_invalid_base64(self):
        with pytest.raises(ContentParseError):
            BundledFile(name="x", data="@@@").content()

    def test_missing_type_defaults_to_empty(self):
        assert BundledFile(name="x", data="").type == ""
