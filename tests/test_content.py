import pytest

from wafersite.content import (
    ContentNotFound,
    ContentResponse,
    ContentServer,
    UnsupportedAction,
    clean_path,
    content_type,
    guess_mime,
)

HTML = "text/html; charset=utf-8"


@pytest.fixture
def server(tmp_path):
    (tmp_path / "index.html").write_text("home")
    (tmp_path / "docs.html").write_text("docs")
    (tmp_path / "guide").mkdir()
    (tmp_path / "guide" / "index.html").write_text("guide")
    (tmp_path / "css").mkdir()
    (tmp_path / "css" / "theme.css").write_text("theme")
    (tmp_path / ".env").write_text("hidden")
    (tmp_path / ".well-known").mkdir()
    (tmp_path / ".well-known" / "security.txt").write_text("sec")
    (tmp_path / "logo.PNG").write_bytes(b"\x89PNG")
    return ContentServer(tmp_path)


@pytest.mark.parametrize("path", ["", "/"])
def test_root_serves_index(server, path):
    assert server.serve(path) == ContentResponse(b"home", HTML)


def test_clean_url_resolves_html(server):
    assert server.serve("/docs").body == b"docs"


def test_clean_url_resolves_directory_index(server):
    resp = server.serve("/guide")
    assert resp.body == b"guide"
    assert resp.content_type == HTML


def test_exact_file_with_type(server):
    resp = server.serve("/css/theme.css")
    assert resp.body == b"theme"
    assert resp.content_type == "text/css; charset=utf-8"


def test_uppercase_extension(server):
    assert server.serve("/logo.PNG").content_type == "image/png"


def test_dotfiles_blocked(server):
    with pytest.raises(ContentNotFound):
        server.serve("/.env")


def test_well_known_allowed(server):
    resp = server.serve("/.well-known/security.txt")
    assert resp.body == b"sec"
    assert resp.content_type == "text/plain; charset=utf-8"


def test_missing_file_with_extension(server):
    with pytest.raises(ContentNotFound):
        server.serve("/missing.css")


def test_missing_clean_url(server):
    with pytest.raises(ContentNotFound):
        server.serve("/nothing/here")


def test_traversal_stays_in_root(server):
    with pytest.raises(ContentNotFound):
        server.serve("/../../etc/passwd")
    assert server.serve("/../docs").body == b"docs"


def test_directory_is_not_a_file(server):
    with pytest.raises(ContentNotFound):
        server.serve("/css")


def test_custom_index_file(tmp_path):
    (tmp_path / "home.html").write_text("custom")
    assert ContentServer(tmp_path, index_file="home.html").serve("/").body == b"custom"


@pytest.mark.parametrize("action", ["", "retrieve"])
def test_handle_retrieve(server, action):
    assert server.handle(action, "/docs").body == b"docs"


def test_handle_rejects_other_actions(server):
    with pytest.raises(UnsupportedAction, match="Only retrieve action is supported"):
        server.handle("create", "/docs")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("/a/./b/../c", "/a/c"),
        ("", "/"),
        ("../..", "/"),
        ("//x//y/", "/x/y"),
    ],
)
def test_clean_path(raw, expected):
    assert clean_path(raw) == expected


def test_clean_path_is_idempotent():
    for raw in ["/a/../b/./c", "x/y/..", "/../q"]:
        once = clean_path(raw)
        assert clean_path(once) == once
        assert once.startswith("/")


@pytest.mark.parametrize(
    "path, expected",
    [
        ("page.HTML", HTML),
        ("font.woff2", "font/woff2"),
        ("app.mjs", "text/javascript; charset=utf-8"),
        ("module.wasm", "application/wasm"),
        ("noext", "application/octet-stream"),
        ("archive.tar.gz", "application/octet-stream"),
    ],
)
def test_guess_mime(path, expected):
    assert guess_mime(path) == expected


def test_content_type_prefers_storage_value():
    assert content_type("a.css", "text/x-custom") == "text/x-custom"


@pytest.mark.parametrize("stored", ["", "application/octet-stream"])
def test_content_type_falls_back_to_guess(stored):
    assert content_type("a.css", stored) == guess_mime("a.css")
    assert content_type("a.css", stored) == "text/css; charset=utf-8"