"""Serve the site's static content from a ``dist`` directory."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath

NAME = "wafer-site/content"

_OCTET_STREAM = "application/octet-stream"

_MIME_TYPES = {
    "html": "text/html; charset=utf-8",
    "htm": "text/html; charset=utf-8",
    "css": "text/css; charset=utf-8",
    "js": "text/javascript; charset=utf-8",
    "mjs": "text/javascript; charset=utf-8",
    "json": "application/json",
    "svg": "image/svg+xml",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "ico": "image/x-icon",
    "woff": "font/woff",
    "woff2": "font/woff2",
    "ttf": "font/ttf",
    "otf": "font/otf",
    "txt": "text/plain; charset=utf-8",
    "md": "text/plain; charset=utf-8",
    "wasm": "application/wasm",
}


class ContentNotFound(LookupError):
    """No static file matches the requested path."""

    def __init__(self, message: str = "Not found") -> None:
        super().__init__(message)


class UnsupportedAction(Exception):
    """The request's action is not one this server handles."""

    def __init__(self, message: str = "Only retrieve action is supported") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class ContentResponse:
    """A served file's bytes and content type."""

    body: bytes
    content_type: str


def clean_path(p: str) -> str:
    """Normalise a URL path: drop empty and '.' segments and resolve '..'."""
    parts: list[str] = []
    for seg in p.split("/"):
        if seg in ("", "."):
            continue
        if seg == "..":
            if parts:
                parts.pop()
        else:
            parts.append(seg)
    return "/" + "/".join(parts)


def _extension(path: str) -> str:
    return PurePosixPath(path).suffix[1:]


def guess_mime(path: str) -> str:
    """Guess a MIME type from the path's extension."""
    return _MIME_TYPES.get(_extension(path).lower(), _OCTET_STREAM)


def content_type(key: str, from_storage: str) -> str:
    """Prefer the stored type unless it is missing or generic."""
    if not from_storage or from_storage == _OCTET_STREAM:
        return guess_mime(key)
    return from_storage


def _is_hidden(segment: str) -> bool:
    return segment.startswith(".") and len(segment) > 1 and segment != ".well-known"


class ContentServer:
    """Serves files under ``dist_root`` with clean-URL fallbacks."""

    def __init__(self, dist_root: str | Path, index_file: str = "index.html") -> None:
        self.root = Path(dist_root)
        self.index_file = index_file

    def _load(self, key: str) -> ContentResponse | None:
        if not key:
            return None
        target = self.root / key
        try:
            if not target.is_file():
                return None
            data = target.read_bytes()
        except OSError:
            return None
        return ContentResponse(data, content_type(key, ""))

    def serve(self, path: str) -> ContentResponse:
        """Return the file for ``path``, trying ``key``, ``key.html`` then ``key/index``."""
        if path in ("", "/"):
            path = f"/{self.index_file}"

        clean = clean_path(path)
        if any(_is_hidden(seg) for seg in clean.split("/")):
            raise ContentNotFound()
        key = clean.lstrip("/")

        response = self._load(key)
        if response is not None:
            return response
        if key and not _extension(key):
            for candidate in (f"{key}.html", f"{key}/{self.index_file}"):
                response = self._load(candidate)
                if response is not None:
                    return response
        raise ContentNotFound()

    def handle(self, action: str, path: str) -> ContentResponse:
        """Serve ``path`` for a retrieve (or empty) action."""
        if action and action != "retrieve":
            raise UnsupportedAction()
        return self.serve(path)