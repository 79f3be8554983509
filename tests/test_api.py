"""Tests for ramlmock.api (generate, generate_sync, generate_with_callback)."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import pytest

from ramlmock import generate, generate_sync, generate_with_callback
from ramlmock.api import resolve_options, resolve_spec_files
from ramlmock.exceptions import (
    DirectoryReadError,
    OptionsError,
    SchemaParseError,
    SpecLoadError,
)
from ramlmock.models import GenerateOptions

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _by_route(mockers: list) -> dict[tuple[str, str], Any]:
    return {(m.method, m.uri): m for m in mockers}


class _Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple[Optional[Exception], Any]] = []

    def __call__(self, err: Optional[Exception], mockers: Any) -> None:
        self.calls.append((err, mockers))


# ---------------------------------------------------------------------------
# generate
# ---------------------------------------------------------------------------


class TestGenerate:
    """Test the coroutine entry point."""

    @pytest.mark.asyncio
    async def test_widgets_end_to_end(self, widgets_raml: Path) -> None:
        mockers = await generate({"files": [str(widgets_raml)]})

        assert len(mockers) == 1
        (mocker,) = mockers
        assert mocker.uri == "/api/widgets/:id"
        assert mocker.method == "GET"
        assert mocker.default_code == 200
        assert mocker.example() == {"ok": True}
        assert mocker.codes == [200]

    @pytest.mark.asyncio
    async def test_library_routes(self, library_raml: Path) -> None:
        mockers = await generate({"files": [str(library_raml)]})

        routes = _by_route(mockers)
        assert set(routes) == {
            ("GET", "/v2/books"),
            ("POST", "/v2/books"),
            ("GET", "/v2/books/:bookId"),
            ("DELETE", "/v2/books/:bookId"),
        }

    @pytest.mark.asyncio
    async def test_library_responses(self, library_raml: Path) -> None:
        routes = _by_route(await generate({"files": [str(library_raml)]}))

        post = routes[("POST", "/v2/books")]
        assert post.default_code == 201
        assert post.codes == [201, 400]
        assert post.example() == {
            "title": "Dune",
            "isbn": "978-0441013593",
            "pages": 412,
        }
        assert post.example(400) == {"message": "title is required"}
        assert set(post.mock(400)) == {"message"}

        by_id = routes[("GET", "/v2/books/:bookId")]
        assert by_id.codes == [200]
        assert set(by_id.mock()) == {"title", "isbn", "pages"}

        delete = routes[("DELETE", "/v2/books/:bookId")]
        assert delete.codes == []
        assert delete.mock() is None

    @pytest.mark.asyncio
    async def test_custom_formats(self, library_raml: Path) -> None:
        options = {
            "files": [str(library_raml)],
            "formats": {"isbn": lambda faker, schema: "isbn-0"},
        }

        routes = _by_route(await generate(options))

        assert routes[("GET", "/v2/books")].mock()["isbn"] == "isbn-0"

    @pytest.mark.asyncio
    async def test_injected_schema_mocker(
        self, library_raml: Path, recording_mocker
    ) -> None:
        routes = _by_route(
            await generate(
                {"files": [str(library_raml)]}, schema_mocker=recording_mocker
            )
        )

        assert routes[("GET", "/v2/books")].mock() == {"mocked": 1}

    @pytest.mark.asyncio
    async def test_path_loads_every_raml_file(self, spec_dir: Path) -> None:
        mockers = await generate({"path": str(spec_dir)})

        assert len(mockers) == 2
        assert mockers[0] is not mockers[1]
        assert {(m.method, m.uri) for m in mockers} == {("GET", "/api/widgets/:id")}

    @pytest.mark.asyncio
    async def test_path_wins_over_files(
        self, spec_dir: Path, library_raml: Path
    ) -> None:
        mockers = await generate({"path": str(spec_dir), "files": [str(library_raml)]})
        assert {m.uri for m in mockers} == {"/api/widgets/:id"}

    @pytest.mark.asyncio
    async def test_empty_files_list(self) -> None:
        assert await generate({"files": []}) == []

    @pytest.mark.asyncio
    async def test_accepts_options_model(self, widgets_raml: Path) -> None:
        mockers = await generate(GenerateOptions(files=[str(widgets_raml)]))
        assert len(mockers) == 1

    @pytest.mark.asyncio
    async def test_parser_options_mapping(self, library_raml: Path) -> None:
        options = {
            "files": [str(library_raml)],
            "parserOptions": {"dereferenceSchemas": False},
        }

        mockers = _by_route(await generate(options))

        book = mockers[("GET", "/v2/books/:bookId")].mock()
        assert set(book) == {"title", "isbn", "pages"}

    @pytest.mark.asyncio
    async def test_referenced_schemas_are_mocked(self, refs_raml: Path) -> None:
        mockers = _by_route(await generate({"files": [str(refs_raml)]}))

        shelf = mockers[("GET", "/shelves-api/shelves")].mock()
        novel = mockers[("GET", "/shelves-api/novels")].mock()
        assert set(shelf["owner"]) == {"name", "born"}
        assert 1000 <= shelf["owner"]["born"] <= 2000
        assert isinstance(novel["author"]["name"], str)

    @pytest.mark.asyncio
    async def test_malformed_schema(self, broken_schema_raml: Path) -> None:
        with pytest.raises(SchemaParseError):
            await generate({"files": [str(broken_schema_raml)]})

    @pytest.mark.asyncio
    async def test_one_bad_document_fails_the_call(
        self, widgets_raml: Path, tmp_path: Path
    ) -> None:
        with pytest.raises(SpecLoadError):
            await generate({"files": [str(widgets_raml), str(tmp_path / "missing.raml")]})

    @pytest.mark.asyncio
    async def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(DirectoryReadError):
            await generate({"path": str(tmp_path / "nowhere")})

    @pytest.mark.asyncio
    async def test_no_options(self) -> None:
        with pytest.raises(OptionsError) as exc_info:
            await generate(None)
        assert exc_info.value.code == "NO_OPTIONS"


# ---------------------------------------------------------------------------
# Option resolution
# ---------------------------------------------------------------------------


class TestResolveOptions:
    """Test option validation and source selection."""

    def test_no_source(self) -> None:
        with pytest.raises(OptionsError) as exc_info:
            resolve_spec_files(resolve_options({}))
        assert exc_info.value.code == "NO_SOURCE"
        assert exc_info.value.exit_code == 2

    def test_invalid_mapping(self) -> None:
        with pytest.raises(OptionsError) as exc_info:
            resolve_options({"files": "not-a-list"})
        assert exc_info.value.code == "INVALID_OPTIONS"

    def test_non_mapping(self) -> None:
        with pytest.raises(OptionsError) as exc_info:
            resolve_options(42)  # type: ignore[arg-type]
        assert exc_info.value.code == "INVALID_OPTIONS"

    def test_unknown_keys_are_ignored(self) -> None:
        options = resolve_options({"files": [], "somethingElse": True})
        assert options.files == []

    def test_urls_are_kept_as_strings(self) -> None:
        url = "https://example.com/api.raml"
        files = resolve_spec_files(GenerateOptions(files=[url, "local.raml"]))
        assert files == [url, Path("local.raml")]


# ---------------------------------------------------------------------------
# generate_sync / generate_with_callback
# ---------------------------------------------------------------------------


class TestGenerateSync:
    """Test the blocking wrapper."""

    def test_returns_mockers(self, widgets_raml: Path) -> None:
        mockers = generate_sync({"files": [str(widgets_raml)]})
        assert [m.uri for m in mockers] == ["/api/widgets/:id"]


class TestGenerateWithCallback:
    """Test callback-style result delivery."""

    def test_success(self, widgets_raml: Path) -> None:
        recorder = _Recorder()

        generate_with_callback({"files": [str(widgets_raml)]}, recorder)

        ((err, mockers),) = recorder.calls
        assert err is None
        assert mockers[0].example() == {"ok": True}

    def test_callback_must_be_callable(self, widgets_raml: Path) -> None:
        with pytest.raises(TypeError, match="callback"):
            generate_with_callback({"files": [str(widgets_raml)]}, None)  # type: ignore[arg-type]

    def test_missing_options_delivered(self) -> None:
        recorder = _Recorder()

        generate_with_callback(None, recorder)

        ((err, mockers),) = recorder.calls
        assert isinstance(err, OptionsError)
        assert mockers is None

    def test_directory_error_delivered(self, tmp_path: Path) -> None:
        recorder = _Recorder()

        generate_with_callback({"path": str(tmp_path / "nowhere")}, recorder)

        ((err, mockers),) = recorder.calls
        assert isinstance(err, DirectoryReadError)
        assert mockers is None

    def test_schema_error_delivered(self, broken_schema_raml: Path) -> None:
        recorder = _Recorder()

        generate_with_callback({"files": [str(broken_schema_raml)]}, recorder)

        ((err, mockers),) = recorder.calls
        assert isinstance(err, SchemaParseError)
        assert mockers is None
