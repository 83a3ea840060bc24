"""
Share Payload Tests

Tests for the URL-safe base64 {v, a, s} share codec.
"""
import base64
import json

import pytest

from gensynth.config import SHARE_SCHEMA_VERSION
from gensynth.persistence.schema import PluginSettings
from gensynth.persistence.share import SharePayload, decode_share_payload, encode_share_payload


def raw_payload(data):
    text = json.dumps(data).encode("utf-8")
    return base64.urlsafe_b64encode(text).decode("ascii").rstrip("=")


class TestEncode:
    """Encoded text is URL safe and unpadded."""

    def test_url_safe(self):
        text = encode_share_payload("circles", {"p": {"count": 7}, "f": {"radius": 2}})
        assert "=" not in text
        assert "+" not in text
        assert "/" not in text

    def test_payload_shape(self):
        text = encode_share_payload("arcs", {"p": {"arcCount": 3}})
        padded = text + "=" * (-len(text) % 4)
        data = json.loads(base64.urlsafe_b64decode(padded))
        assert data == {"v": SHARE_SCHEMA_VERSION, "a": "arcs", "s": {"p": {"arcCount": 3}}}

    def test_empty_settings(self):
        payload = decode_share_payload(encode_share_payload("circles"))
        assert payload == SharePayload(plugin_id="circles")


class TestDecode:
    """Decoding is fail-soft."""

    def test_round_trip(self):
        compact = {"p": {"radius": {"min": 1, "current": 5, "max": 9}}, "f": {"radius": 3}}
        payload = decode_share_payload(encode_share_payload("circles", compact))
        assert payload.plugin_id == "circles"
        assert payload.settings == PluginSettings(
            params={"radius": {"min": 1, "current": 5, "max": 9}}, functions={"radius": 3})

    def test_accepts_fragment_and_whitespace(self):
        text = encode_share_payload("arcs", {"p": {"arcCount": 3}})
        payload = decode_share_payload(f"  #{text}\n")
        assert payload.plugin_id == "arcs"

    def test_accepts_padding(self):
        text = encode_share_payload("arcs")
        padded = text + "=" * (-len(text) % 4)
        assert decode_share_payload(padded).plugin_id == "arcs"

    def test_malformed_entries_dropped(self):
        text = raw_payload({"v": SHARE_SCHEMA_VERSION, "a": "circles",
                            "s": {"p": {"count": "many", "radius": 4}, "f": {"radius": "fast"},
                                  "extra": True}})
        payload = decode_share_payload(text)
        assert payload.settings == PluginSettings(params={"radius": 4})

    @pytest.mark.parametrize("text", [None, "", "   ", 42, "!!!not base64!!!", "e30", raw_payload([1, 2])])
    def test_garbage_is_none(self, text):
        assert decode_share_payload(text) is None

    @pytest.mark.parametrize("version", [0, 2, "1", None, True])
    def test_wrong_version_is_none(self, version):
        assert decode_share_payload(raw_payload({"v": version, "a": "circles", "s": {}})) is None

    @pytest.mark.parametrize("plugin_id", [None, "", 5, ["circles"]])
    def test_bad_plugin_id_is_none(self, plugin_id):
        assert decode_share_payload(raw_payload({"v": SHARE_SCHEMA_VERSION, "a": plugin_id})) is None

    def test_missing_settings_is_empty(self):
        payload = decode_share_payload(raw_payload({"v": SHARE_SCHEMA_VERSION, "a": "circles"}))
        assert payload.settings == PluginSettings()

    def test_out_of_range_integers_dropped(self):
        huge = 10 ** 400
        text = raw_payload({"v": SHARE_SCHEMA_VERSION, "a": "circles",
                            "s": {"f": {"radius": huge}, "p": {"count": huge}}})
        payload = decode_share_payload(text)
        assert payload.plugin_id == "circles"
        assert payload.settings == PluginSettings()

    def test_deeply_nested_is_none(self):
        nested = "[" * 200000 + "]" * 200000
        body = '{"v": %d, "a": "circles", "s": %s}' % (SHARE_SCHEMA_VERSION, nested)
        text = base64.urlsafe_b64encode(body.encode("utf-8")).decode("ascii").rstrip("=")
        assert decode_share_payload(text) is None
