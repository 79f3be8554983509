"""Tests for ramlmock.parser.normalizer."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from ramlmock.exceptions import SchemaParseError, SpecLoadError
from ramlmock.models import ParserOptions
from ramlmock.parser.loader import read_reference
from ramlmock.parser.normalizer import normalize_document


def _raw(**resources: Any) -> dict[str, Any]:
    raw: dict[str, Any] = {"title": "Test", "mediaType": "application/json"}
    raw.update(resources)
    return raw


BOOK_SCHEMA = '{"type": "object", "properties": {"title": {"type": "string"}}}'
SHELF_SCHEMA = (
    '{"type": "object",'
    ' "properties": {"books": {"type": "array", "items": {"$ref": "book"}}}}'
)


class TestResourceTree:
    """Test rewriting RAML resource keys into an explicit tree."""

    def test_resource_keys_become_children(self) -> None:
        raw = {
            "title": "Test",
            "/books": {
                "displayName": "Books",
                "/{bookId}": {"uriParameters": {"bookId": {"type": "integer"}}},
            },
            "/authors": {},
        }

        root = normalize_document(raw, ParserOptions())

        assert [r.relative_uri for r in root.resources] == ["/books", "/authors"]
        books = root.resources[0]
        assert books.field_value("displayName") == "Books"
        assert books.resources[0].relative_uri == "/{bookId}"
        assert books.resources[0].uri_parameters["bookId"].type == "integer"

    def test_null_resource_body(self) -> None:
        root = normalize_document({"/ping": None}, ParserOptions())

        (ping,) = root.resources
        assert ping.relative_uri == "/ping"
        assert ping.methods is None
        assert ping.resources is None

    def test_root_fields_are_kept(self) -> None:
        raw = {
            "title": "Test",
            "version": "v1",
            "baseUri": "https://example.com/{version}",
            "protocols": ["HTTPS"],
        }

        root = normalize_document(raw, ParserOptions())

        assert root.base_uri == "https://example.com/{version}"
        assert root.field_value("protocols") == ["HTTPS"]
        assert root.resources is None


class TestMethods:
    """Test rewriting verb keys into method definitions."""

    def test_verbs_are_upper_cased(self) -> None:
        raw = _raw(**{"/x": {"get": {}, "post": None, "patch": {"description": "p"}}})

        root = normalize_document(raw, ParserOptions())

        methods = root.resources[0].methods
        assert [m.method for m in methods] == ["GET", "POST", "PATCH"]
        assert methods[2].description == "p"

    def test_integer_status_codes_become_strings(self) -> None:
        raw = _raw(**{"/x": {"get": {"responses": {200: {}, 404: None, "default": {}}}}})

        root = normalize_document(raw, ParserOptions())

        responses = root.resources[0].methods[0].responses
        assert list(responses) == ["200", "404", "default"]
        assert responses["404"] is None

    def test_non_verb_keys_stay_on_resource(self) -> None:
        raw = _raw(**{"/x": {"is": ["paged"], "type": "collection", "get": {}}})

        root = normalize_document(raw, ParserOptions())

        resource = root.resources[0]
        assert resource.field_value("is") == ["paged"]
        assert resource.field_value("type") == "collection"
        assert len(resource.methods) == 1


class TestBodies:
    """Test body rewriting: default media type, schemas, examples."""

    def test_bare_body_uses_document_media_type(self) -> None:
        raw = _raw(**{
            "/x": {"get": {"responses": {200: {"body": {"example": '{"a": 1}'}}}}}
        })

        root = normalize_document(raw, ParserOptions())

        body = root.resources[0].methods[0].responses["200"].body
        assert list(body) == ["application/json"]
        assert body["application/json"].example == {"a": 1}

    def test_bare_body_without_document_media_type(self) -> None:
        raw = {"/x": {"get": {"responses": {200: {"body": {"schema": "s"}}}}}}

        root = normalize_document(raw, ParserOptions())

        body = root.resources[0].methods[0].responses["200"].body
        assert list(body) == ["schema"]
        assert body["schema"] is None

    def test_named_schema_is_dereferenced(self) -> None:
        raw = _raw(
            schemas=[{"book": BOOK_SCHEMA}],
            **{
                "/x": {
                    "get": {
                        "responses": {
                            200: {"body": {"application/json": {"schema": "book"}}}
                        }
                    }
                }
            },
        )

        root = normalize_document(raw, ParserOptions())

        body = root.resources[0].methods[0].responses["200"].body
        assert body["application/json"].schema_ == BOOK_SCHEMA

    def test_schemas_as_mapping(self) -> None:
        raw = _raw(
            schemas={"book": BOOK_SCHEMA},
            **{"/x": {"get": {"responses": {200: {"body": {"schema": "book"}}}}}},
        )

        root = normalize_document(raw, ParserOptions())

        body = root.resources[0].methods[0].responses["200"].body
        assert body["application/json"].schema_ == BOOK_SCHEMA

    def test_named_schema_resolves_without_dereferencing(self) -> None:
        raw = _raw(
            schemas=[{"book": BOOK_SCHEMA}],
            **{"/x": {"get": {"responses": {200: {"body": {"schema": "book"}}}}}},
        )

        root = normalize_document(raw, ParserOptions(dereference_schemas=False))

        body = root.resources[0].methods[0].responses["200"].body
        assert body["application/json"].schema_ == BOOK_SCHEMA

    def test_refs_are_expanded(self) -> None:
        raw = _raw(
            schemas=[{"book": BOOK_SCHEMA}, {"shelf": SHELF_SCHEMA}],
            **{"/x": {"get": {"responses": {200: {"body": {"schema": "shelf"}}}}}},
        )

        root = normalize_document(raw, ParserOptions())

        schema = root.resources[0].methods[0].responses["200"].body["application/json"].schema_
        assert schema["properties"]["books"]["items"] == json.loads(BOOK_SCHEMA)

    def test_refs_are_kept_when_dereferencing_is_disabled(self) -> None:
        raw = _raw(
            schemas=[{"book": BOOK_SCHEMA}, {"shelf": SHELF_SCHEMA}],
            **{"/x": {"get": {"responses": {200: {"body": {"schema": "shelf"}}}}}},
        )

        root = normalize_document(raw, ParserOptions(dereference_schemas=False))

        body = root.resources[0].methods[0].responses["200"].body
        assert body["application/json"].schema_ == SHELF_SCHEMA

    def test_ref_to_file_next_to_document(self, tmp_path: Path) -> None:
        (tmp_path / "book.json").write_text(BOOK_SCHEMA)
        schema = '{"type": "array", "items": {"$ref": "book.json"}}'
        raw = _raw(**{"/x": {"get": {"responses": {200: {"body": {"schema": schema}}}}}})

        root = normalize_document(
            raw,
            ParserOptions(),
            location=tmp_path / "api.raml",
            read_reference=read_reference,
        )

        body = root.resources[0].methods[0].responses["200"].body
        assert body["application/json"].schema_["items"] == json.loads(BOOK_SCHEMA)

    def test_unresolvable_ref_raises(self) -> None:
        schema = '{"$ref": "#/definitions/missing"}'
        raw = _raw(**{"/x": {"get": {"responses": {200: {"body": {"schema": schema}}}}}})

        with pytest.raises(SchemaParseError):
            normalize_document(raw, ParserOptions())

    def test_unknown_schema_name_is_left_alone(self) -> None:
        raw = _raw(**{"/x": {"get": {"responses": {200: {"body": {"schema": "nope"}}}}}})

        root = normalize_document(raw, ParserOptions())

        body = root.resources[0].methods[0].responses["200"].body
        assert body["application/json"].schema_ == "nope"

    def test_invalid_json_example_stays_text(self) -> None:
        raw = _raw(**{
            "/x": {"get": {"responses": {200: {"body": {"example": "not json"}}}}}
        })

        root = normalize_document(raw, ParserOptions())

        body = root.resources[0].methods[0].responses["200"].body
        assert body["application/json"].example == "not json"

    def test_example_decoding_can_be_disabled(self) -> None:
        raw = _raw(**{
            "/x": {"get": {"responses": {200: {"body": {"example": '{"a": 1}'}}}}}
        })

        root = normalize_document(raw, ParserOptions(decode_examples=False))

        body = root.resources[0].methods[0].responses["200"].body
        assert body["application/json"].example == '{"a": 1}'

    def test_non_json_examples_are_not_decoded(self) -> None:
        raw = _raw(**{
            "/x": {
                "get": {
                    "responses": {
                        200: {"body": {"application/xml": {"example": "[1]"}}}
                    }
                }
            }
        })

        root = normalize_document(raw, ParserOptions())

        body = root.resources[0].methods[0].responses["200"].body
        assert body["application/xml"].example == "[1]"

    def test_media_type_without_descriptor(self) -> None:
        raw = _raw(**{
            "/x": {"get": {"responses": {200: {"body": {"application/json": None}}}}}
        })

        root = normalize_document(raw, ParserOptions())

        body = root.resources[0].methods[0].responses["200"].body
        assert body == {"application/json": None}


class TestValidation:
    """Test structural validation errors."""

    def test_invalid_structure_raises(self) -> None:
        raw = {"title": "Test", "baseUriParameters": "not-a-mapping"}

        with pytest.raises(SpecLoadError, match="api.raml"):
            normalize_document(raw, ParserOptions(), source="api.raml")


class TestUnexpandedFeatures:
    """Resource types and traits are reported, not expanded."""

    def test_resource_type_and_traits_are_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        raw = _raw(**{"/x": {"type": "collection", "get": {"is": ["paged"]}}})

        with caplog.at_level(logging.DEBUG, logger="ramlmock.parser.normalizer"):
            root = normalize_document(raw, ParserOptions())

        assert root.resources[0].methods[0].method == "GET"
        messages = [r.getMessage() for r in caplog.records]
        assert "/x uses resource type 'collection'; it is not expanded" in messages
        assert "GET uses traits ['paged']; they are not expanded" in messages
