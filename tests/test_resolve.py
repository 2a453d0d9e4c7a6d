"""Tests for bundleserve.resolve — ordered root trial and .gz negotiation."""

import os

import pytest

from bundleserve import fs
from bundleserve.resolve import (
    Found,
    IOFault,
    NotFound,
    ResolutionRequest,
    candidate_path,
    resolve,
    resolve_request,
)

from conftest import APP_JS, APP_JS_GZ


class TestCandidatePath:
    def test_joins_root_and_path(self, tmp_path) -> None:
        assert candidate_path(str(tmp_path), "/app.js") == str(tmp_path / "app.js")

    def test_trailing_slash_selects_index(self, tmp_path) -> None:
        assert candidate_path(str(tmp_path), "/docs/") == str(tmp_path / "docs" / "index.html")

    def test_root_slash_selects_index(self, tmp_path) -> None:
        assert candidate_path(str(tmp_path), "/") == str(tmp_path / "index.html")

    def test_empty_root_is_working_directory(self, tmp_path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert candidate_path("", "/x.txt") == os.path.join(os.getcwd(), "x.txt")

    def test_result_is_absolute(self, public) -> None:
        assert os.path.isabs(candidate_path("public", "/app.js"))

    def test_dot_dot_cannot_escape_root(self, tmp_path) -> None:
        path = candidate_path(str(tmp_path), "/../../etc/passwd")
        assert path == str(tmp_path / "etc" / "passwd")


class TestResolveSingleRoot:
    async def test_found(self, public) -> None:
        result = await resolve("/index.html", ["public"])
        assert isinstance(result, Found)
        assert result.content == b"<h1>Shell</h1>"
        assert result.is_compressed is False
        assert result.file_path == str(public / "index.html")

    async def test_slash_serves_index(self, public) -> None:
        result = await resolve("/", ["public"])
        assert isinstance(result, Found)
        assert result.content == b"<h1>Shell</h1>"

    async def test_nested_index(self, public) -> None:
        result = await resolve("/docs/", ["public"])
        assert isinstance(result, Found)
        assert result.content == b"<h1>Docs</h1>"

    async def test_directory_without_slash_misses(self, public) -> None:
        result = await resolve("/docs", ["public"])
        assert result == NotFound(attempted_path=str(public / "docs"))

    async def test_missing_file(self, public) -> None:
        result = await resolve("/missing", ["public"])
        assert isinstance(result, NotFound)
        assert os.path.isabs(result.attempted_path)
        assert result.attempted_path.endswith(os.sep + "missing")

    async def test_file_used_as_directory_misses(self, public) -> None:
        result = await resolve("/app.js/extra", ["public"])
        assert isinstance(result, NotFound)

    async def test_requires_a_root(self) -> None:
        with pytest.raises(ValueError):
            await resolve("/x", [])


class TestResolveCompression:
    async def test_prefers_gz_when_accepted(self, public) -> None:
        result = await resolve("/app.js", ["public"], accepts_compression=True)
        assert isinstance(result, Found)
        assert result.is_compressed is True
        assert result.content == APP_JS_GZ
        assert result.file_path == str(public / "app.js.gz")
        assert result.logical_path == str(public / "app.js")

    async def test_plain_when_not_accepted(self, public) -> None:
        result = await resolve("/app.js", ["public"], accepts_compression=False)
        assert isinstance(result, Found)
        assert result.is_compressed is False
        assert result.content == APP_JS
        assert result.logical_path == result.file_path

    async def test_plain_when_no_gz_sibling(self, public) -> None:
        result = await resolve("/index.html", ["public"], accepts_compression=True)
        assert isinstance(result, Found)
        assert result.is_compressed is False

    async def test_gz_only_file_is_served(self, public) -> None:
        (public / "lazy.js.gz").write_bytes(b"gz-only")
        result = await resolve("/lazy.js", ["public"], accepts_compression=True)
        assert isinstance(result, Found)
        assert result.content == b"gz-only"

    async def test_miss_names_gz_candidate_when_it_was_tried(self, public) -> None:
        (public / "ghost.js.gz").mkdir()
        result = await resolve("/ghost.js", ["public"], accepts_compression=True)
        assert result == NotFound(attempted_path=str(public / "ghost.js.gz"))

    async def test_resolve_request(self, public) -> None:
        request = ResolutionRequest(url_path="/app.js", accepts_compression=True)
        result = await resolve_request(request, ["public"])
        assert isinstance(result, Found)
        assert result.is_compressed is True


class TestResolveMultipleRoots:
    async def test_first_root_wins(self, two_roots) -> None:
        result = await resolve("/shared.txt", ["a", "b"])
        assert isinstance(result, Found)
        assert result.content == b"from a"

    async def test_falls_through_to_later_root(self, two_roots) -> None:
        _, b = two_roots
        result = await resolve("/only-b.txt", ["a", "b"])
        assert isinstance(result, Found)
        assert result.content == b"only b"
        assert result.file_path == str(b / "only-b.txt")

    async def test_miss_reports_last_root(self, two_roots) -> None:
        _, b = two_roots
        result = await resolve("/nowhere.txt", ["a", "b"])
        assert result == NotFound(attempted_path=str(b / "nowhere.txt"))

    async def test_idempotent(self, two_roots) -> None:
        first = await resolve("/only-b.txt", ["a", "b"])
        second = await resolve("/only-b.txt", ["a", "b"])
        assert first == second


class TestResolveIOFault:
    @pytest.fixture
    def faulty_a(self, two_roots, monkeypatch):
        """Reads under root ``a`` fail with EACCES; everything else is real."""
        a, _ = two_roots
        real_read = fs.read_file
        calls: list[str] = []

        async def read_file(path: str):
            calls.append(path)
            if path.startswith(str(a)):
                return fs.ReadError.from_os_error(PermissionError(13, "Permission denied"))
            return await real_read(path)

        monkeypatch.setattr(fs, "read_file", read_file)
        return calls

    async def test_fault_is_terminal(self, two_roots, faulty_a) -> None:
        a, _ = two_roots
        result = await resolve("/only-b.txt", ["a", "b"])
        assert isinstance(result, IOFault)
        assert result.attempted_path == str(a / "only-b.txt")
        assert "Permission denied" in result.detail
        assert faulty_a == [str(a / "only-b.txt")]

    async def test_fault_detail_names_errno(self, two_roots, faulty_a) -> None:
        result = await resolve("/shared.txt", ["a", "b"])
        assert isinstance(result, IOFault)
        assert result.detail.startswith("EACCES")
