"""Tests for response image extraction."""

from types import SimpleNamespace

import pytest

from headshot_studio.extraction import LegacyImages, NoImage, PartsEmbedded, extract, extract_payload

from .conftest import b64, parts_response, sdk_response

PARTS_IMAGE = b"\x89PNG parts image"
LEGACY_IMAGE = b"\xff\xd8 legacy image"


def legacy_response(data, mime_type="image/jpeg"):
    return {"candidates": [], "images": [{"inlineData": {"mimeType": mime_type, "data": b64(data)}}]}


class TestExtract:
    def test_parts_embedded(self):
        result = extract(parts_response(PARTS_IMAGE))
        assert isinstance(result, PartsEmbedded)
        assert result.payload.data == PARTS_IMAGE
        assert result.payload.mime_type == "image/png"

    def test_legacy_images_only(self):
        result = extract(legacy_response(LEGACY_IMAGE))
        assert isinstance(result, LegacyImages)
        assert result.payload.data == LEGACY_IMAGE
        assert result.payload.mime_type == "image/jpeg"

    def test_parts_win_over_legacy(self):
        response = parts_response(PARTS_IMAGE)
        response["images"] = legacy_response(LEGACY_IMAGE)["images"]
        result = extract(response)
        assert isinstance(result, PartsEmbedded)
        assert result.payload.data == PARTS_IMAGE

    def test_first_image_across_candidates(self):
        response = {
            "candidates": [
                {"content": {"parts": [{"text": "no image here"}]}},
                parts_response(PARTS_IMAGE)["candidates"][0],
            ]
        }
        assert extract_payload(response).data == PARTS_IMAGE

    def test_sdk_object_shape(self):
        result = extract(sdk_response(PARTS_IMAGE, "image/webp"))
        assert isinstance(result, PartsEmbedded)
        assert result.payload == extract_payload(sdk_response(PARTS_IMAGE, "image/webp"))
        assert result.payload.mime_type == "image/webp"

    def test_text_only_response(self):
        response = {"candidates": [{"content": {"parts": [{"text": "I cannot do that."}]}}]}
        assert isinstance(extract(response), NoImage)
        assert extract_payload(response) is None

    @pytest.mark.parametrize(
        "response",
        [
            None,
            {},
            "not a response",
            {"candidates": None},
            {"candidates": [{}]},
            {"candidates": [{"content": None}]},
            {"candidates": [{"content": {"parts": "oops"}}]},
            {"candidates": [{"content": {"parts": [{"inlineData": {"data": ""}}]}}]},
            {"images": []},
            {"images": [{"inlineData": None}]},
            SimpleNamespace(candidates=[SimpleNamespace(content=None)]),
        ],
    )
    def test_malformed_shapes_yield_no_image(self, response):
        assert isinstance(extract(response), NoImage)

    def test_invalid_base64_is_skipped(self):
        response = {
            "candidates": [{"content": {"parts": [{"inlineData": {"mimeType": "image/png", "data": "!!!not base64!!!"}}]}}],
            "images": legacy_response(LEGACY_IMAGE)["images"],
        }
        result = extract(response)
        assert isinstance(result, LegacyImages)

    def test_missing_mime_defaults_to_png(self):
        response = {"candidates": [{"content": {"parts": [{"inlineData": {"data": b64(PARTS_IMAGE)}}]}}]}
        assert extract_payload(response).mime_type == "image/png"
