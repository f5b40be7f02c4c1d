"""Assemble the static site: doc pages from partials, plus asset copying."""

from __future__ import annotations

import argparse
import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

SIDEBAR_ITEMS = (
    "quick-start",
    "core-concepts",
    "creating-a-block",
    "running-a-block",
    "wasm-blocks",
    "cli",
    "flow-configuration",
    "built-in-blocks",
    "services",
    "http-bridge",
    "block-capabilities",
    "api-runtime",
    "api-services",
    "api-sdk",
    "api-types",
    "registry",
    "deployment",
    "waferflow",
    "waferflow-spec",
    "waferflow-blocks",
    "waferflow-examples",
)

_INLINE_STYLES_KEY = "EXTRA_STYLES_INLINE"
_INLINE_STYLES_END = "END_EXTRA_STYLES_INLINE"
_ACTIVE_ATTR = ' class="active"'
_CONTENT_PAGES = ("index.html", "playground.html", "theme.css")


def _lines(text: str) -> list[str]:
    """Split text into lines on '\\n', dropping a trailing '\\r' from each."""
    if not text:
        return []
    parts = text.split("\n")
    if text.endswith("\n"):
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def parse_front_matter(raw: str) -> tuple[dict[str, str], str]:
    """Parse the leading ``<!-- ... -->`` block into metadata and return the body after it."""
    meta: dict[str, str] = {}
    open_at = raw.find("<!--")
    if open_at < 0:
        return meta, raw
    start = open_at + 4
    end = raw.find("-->", start)
    if end < 0:
        return meta, raw

    front = raw[start:end]
    body = raw[end + 3:]

    lines = iter(_lines(front))
    for raw_line in lines:
        line = raw_line.strip()
        if not line:
            continue
        if line.startswith(f"{_INLINE_STYLES_KEY}:"):
            collected = []
            for inner in lines:
                if inner.strip() == _INLINE_STYLES_END:
                    break
                collected.append(inner + "\n")
            meta[_INLINE_STYLES_KEY] = "".join(collected)
        elif ":" in line:
            key, _, value = line.partition(":")
            meta[key.strip()] = value.strip()
    return meta, body


def _partial_for(meta: dict[str, str], key: str, partials: dict[str, str]) -> str:
    filename = meta.get(key)
    if filename is None:
        return ""
    return partials.get(filename, "")


def assemble_doc_page(
    raw: str, doc_head: str, doc_foot: str, partials: dict[str, str]
) -> str:
    """Build a full HTML page from front matter, body and the head/foot partials."""
    meta, body = parse_front_matter(raw)

    head = doc_head.replace("{{TITLE}}", meta.get("TITLE", ""))

    active = meta.get("ACTIVE", "")
    for item in SIDEBAR_ITEMS:
        replacement = _ACTIVE_ATTR if item == active else ""
        head = head.replace(f"{{{{ACTIVE_{item}}}}}", replacement)

    extra_styles = _partial_for(meta, "EXTRA_STYLES", partials) + meta.get(
        _INLINE_STYLES_KEY, ""
    )
    head = head.replace("{{EXTRA_STYLES}}", extra_styles)
    head = head.replace(
        "{{EXTRA_STYLES_MOBILE}}", _partial_for(meta, "EXTRA_STYLES_MOBILE", partials)
    )
    head = head.replace(
        "{{AFTER_BODY_OPEN}}", _partial_for(meta, "AFTER_BODY_OPEN", partials)
    )

    foot = doc_foot.replace(
        "{{BEFORE_BODY_CLOSE}}", _partial_for(meta, "BEFORE_BODY_CLOSE", partials)
    )
    return head + body + foot


def collect_doc_pages(content_dir: str | Path) -> list[Path]:
    """Return ``docs.html`` (if present) followed by ``docs/*.html`` in sorted order."""
    content_dir = Path(content_dir)
    pages: list[Path] = []

    docs_html = content_dir / "docs.html"
    if docs_html.exists():
        pages.append(docs_html)

    docs_dir = content_dir / "docs"
    if docs_dir.exists():
        try:
            entries = sorted(p for p in docs_dir.iterdir() if p.suffix == ".html")
        except OSError:
            entries = []
        pages.extend(entries)
    return pages


def copy_dir_recursive(src: str | Path, dst: str | Path) -> None:
    """Copy the tree under ``src`` into ``dst``, ignoring individual failures."""
    src, dst = Path(src), Path(dst)
    if not src.exists():
        return
    try:
        entries = list(src.iterdir())
    except OSError:
        return
    for entry in entries:
        target = dst / entry.name
        try:
            if entry.is_dir():
                target.mkdir(parents=True, exist_ok=True)
                copy_dir_recursive(entry, target)
            else:
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy(entry, target)
        except OSError:
            continue


def load_partials(partials_dir: str | Path) -> dict[str, str]:
    """Read every regular file in ``partials_dir`` into a name → contents mapping."""
    partials_dir = Path(partials_dir)
    partials: dict[str, str] = {}
    if not partials_dir.exists():
        return partials
    try:
        entries = list(partials_dir.iterdir())
    except OSError:
        return partials
    for entry in entries:
        if not entry.is_file():
            continue
        try:
            partials[entry.name] = entry.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            logger.warning("failed to read partial: %s", entry)
    return partials


def _write(path: Path, text: str) -> bool:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        logger.warning("failed to write %s: %s", path, exc)
        return False
    return True


def _copy_quietly(src: Path, dst: Path) -> None:
    try:
        shutil.copy(src, dst)
    except OSError:
        pass


def build_site(manifest_dir: str | Path, out_dir: str | Path) -> list[Path]:
    """Build ``out_dir/content`` and ``manifest_dir/dist``; return the doc pages written to dist."""
    manifest_dir = Path(manifest_dir)
    out_dir = Path(out_dir)

    content_dir = manifest_dir / "content"
    public_dir = manifest_dir / "public"
    partials_dir = content_dir / "_partials"
    out_content_dir = out_dir / "content"
    dist_dir = manifest_dir / "dist"

    for directory in (
        out_content_dir / "docs",
        dist_dir / "docs",
        dist_dir / "css",
        dist_dir / "images",
    ):
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.warning("failed to create directory %s: %s", directory, exc)
            return []

    partials = load_partials(partials_dir)
    doc_head = partials.get("doc_head.html")
    if doc_head is None:
        logger.warning("missing doc_head.html partial; skipping doc page assembly")
        return []
    doc_foot = partials.get("doc_foot.html")
    if doc_foot is None:
        logger.warning("missing doc_foot.html partial; skipping doc page assembly")
        return []

    written: list[Path] = []
    for page in collect_doc_pages(content_dir):
        try:
            raw = page.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("failed to read %s: %s", page, exc)
            continue
        assembled = assemble_doc_page(raw, doc_head, doc_foot, partials)
        rel = page.relative_to(content_dir)
        _write(out_content_dir / rel, assembled)
        dist_path = dist_dir / rel
        if _write(dist_path, assembled):
            written.append(dist_path)

    for name in _CONTENT_PAGES:
        src = content_dir / name
        if src.exists():
            _copy_quietly(src, out_content_dir / name)
            dist_dest = dist_dir / "css" / name if name == "theme.css" else dist_dir / name
            _copy_quietly(src, dist_dest)

    registry_src = content_dir / "registry.html"
    if registry_src.exists():
        _copy_quietly(registry_src, out_content_dir / "registry.html")

    copy_dir_recursive(public_dir, dist_dir)

    fonts_src = content_dir / "fonts"
    if fonts_src.exists():
        fonts_dst = dist_dir / "fonts"
        try:
            fonts_dst.mkdir(parents=True, exist_ok=True)
        except OSError:
            pass
        copy_dir_recursive(fonts_src, fonts_dst)

    favicon_src = dist_dir / "images" / "favicon.ico"
    if favicon_src.exists():
        _copy_quietly(favicon_src, dist_dir / "favicon.ico")

    return written


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point for building the site."""
    parser = argparse.ArgumentParser(description="Assemble the site's static content.")
    parser.add_argument(
        "--manifest-dir",
        default=".",
        help="project directory holding content/ and public/ (default: .)",
    )
    parser.add_argument(
        "--out-dir",
        default=None,
        help="directory for the assembled content copy (default: <manifest-dir>/build)",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    manifest_dir = Path(args.manifest_dir)
    out_dir = Path(args.out_dir) if args.out_dir else manifest_dir / "build"
    pages = build_site(manifest_dir, out_dir)
    logger.info("assembled %d doc page(s)", len(pages))
    return 0