"""Shared fixtures: content roots laid out the way a bundler emits them."""

import gzip

import pytest

# 12 bytes of JavaScript, plus a fixed 8-byte stand-in for its gzip variant
APP_JS = b"console.log1"
APP_JS_GZ = b"\x1f\x8b\x08\x00gzip"


@pytest.fixture
def public(tmp_path, monkeypatch):
    """A ``public`` root in a temporary working directory."""
    monkeypatch.chdir(tmp_path)
    root = tmp_path / "public"
    root.mkdir()

    (root / "index.html").write_text("<h1>Shell</h1>")
    (root / "app.js").write_bytes(APP_JS)
    (root / "app.js.gz").write_bytes(APP_JS_GZ)
    (root / "style.css").write_text("body { color: red; }")
    (root / "style.css.gz").write_bytes(gzip.compress(b"body { color: red; }"))
    (root / "notes.unknownext").write_text("plain")

    docs = root / "docs"
    docs.mkdir()
    (docs / "index.html").write_text("<h1>Docs</h1>")

    return root


@pytest.fixture
def two_roots(tmp_path, monkeypatch):
    """Roots ``a`` and ``b``; ``shared.txt`` exists in both, ``only-b.txt`` in ``b``."""
    monkeypatch.chdir(tmp_path)
    a = tmp_path / "a"
    b = tmp_path / "b"
    a.mkdir()
    b.mkdir()
    (a / "shared.txt").write_text("from a")
    (b / "shared.txt").write_text("from b")
    (b / "only-b.txt").write_text("only b")
    (b / "index.html").write_text("<h1>b shell</h1>")
    return a, b
