# wafersite

Tools for a small documentation website and the data layer of a block
package registry:

- **Site assembly** (`wafersite.sitebuild`): turns the pages under
  `content/` into complete HTML documents and lays out a `dist/` tree that
  can be served as static files.
- **Static content serving** (`wafersite.content`): resolves request paths
  against a `dist/` directory with clean-URL fallbacks and MIME detection.
- **Registry data** (`wafersite.registry.models`, `wafersite.registry.store`):
  the shapes returned for packages and versions, and an in-memory record
  database and blob storage.

The package has no runtime dependencies beyond the standard library.

## Installing

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Building the site

Run the builder from the directory that holds `content/` and `public/`:

```
wafersite-build
```

Options:

- `--manifest-dir DIR`: the project directory holding `content/` and
  `public/` (default: the current directory). `dist/` is written here.
- `--out-dir DIR`: where a second copy of the assembled content is written,
  under `DIR/content` (default: `<manifest-dir>/build`).

The builder expects this layout:

```
content/
  _partials/
    doc_head.html      required; wraps the top of every doc page
    doc_foot.html      required; wraps the bottom of every doc page
    ...                any other partials referenced by pages
  docs.html            the docs landing page
  docs/*.html          individual doc pages, processed in sorted order
  index.html           copied as-is
  playground.html      copied as-is
  theme.css            copied to dist/css/theme.css
  registry.html        copied to the out-dir copy only
  fonts/               copied to dist/fonts/
public/                copied into dist/ unchanged
```

If either `doc_head.html` or `doc_foot.html` is missing, a warning is logged
and the build stops before any page is assembled or copied. Other read,
write and copy failures are logged or skipped without stopping the build.
If `dist/images/favicon.ico` exists after copying, it is also copied to
`dist/favicon.ico`.

### Front matter

A doc page starts with an HTML comment holding `KEY: value` lines:

```html
<!--
TITLE: Quick start
ACTIVE: quick-start
EXTRA_STYLES: quick_start.css
EXTRA_STYLES_INLINE:
.note { color: teal; }
END_EXTRA_STYLES_INLINE
BEFORE_BODY_CLOSE: playground_script.html
-->
<h1>Quick start</h1>
```

The head partial may use these placeholders:

| Placeholder | Replaced with |
| --- | --- |
| `{{TITLE}}` | the `TITLE` value |
| `{{ACTIVE_<item>}}` | ` class="active"` for the sidebar item named by `ACTIVE`, empty otherwise (items are listed in `sitebuild.SIDEBAR_ITEMS`) |
| `{{EXTRA_STYLES}}` | the partial named by `EXTRA_STYLES`, followed by the `EXTRA_STYLES_INLINE` block |
| `{{EXTRA_STYLES_MOBILE}}` | the partial named by `EXTRA_STYLES_MOBILE` |
| `{{AFTER_BODY_OPEN}}` | the partial named by `AFTER_BODY_OPEN` |

The foot partial may use `{{BEFORE_BODY_CLOSE}}`, replaced with the partial
named by `BEFORE_BODY_CLOSE`. The finished page is head, then the page body
after the comment, then foot.

The same steps are available from Python:

```python
from wafersite.sitebuild import (
    assemble_doc_page,
    build_site,
    load_partials,
    parse_front_matter,
)

meta, body = parse_front_matter(raw_page)
html = assemble_doc_page(raw_page, doc_head, doc_foot, load_partials("content/_partials"))
written = build_site(".", "build")  # doc pages written under dist/
```

`collect_doc_pages` and `copy_dir_recursive` are also exposed.

## Serving static content

```python
from wafersite.content import ContentServer, ContentNotFound

server = ContentServer("dist")
try:
    response = server.serve("/docs")
    print(response.content_type, len(response.body))
except ContentNotFound:
    ...
```

A path is looked up as given, then, if it has no extension, with `.html`
appended, then as a directory holding `index.html`; `/` serves
`index.html`. Paths are normalised with `clean_path` (`.` and `..` segments
are resolved), and any dot-file segment other than `.well-known` is refused
as not found. The content type comes from the file extension via
`guess_mime`, falling back to `application/octet-stream`.
`ContentServer.handle(action, path)` accepts only the `retrieve` action (or
an empty one) and raises `UnsupportedAction` otherwise.

## Registry data

`wafersite.registry.models` holds the dataclasses `PackageSummary`,
`PackageDetail`, `VersionSummary` and `VersionDetail`; each has a
`to_dict()` for JSON output.

`wafersite.registry.store` provides `MemoryDatabase`, a dictionary-backed
collection store, and `MemoryStorage`, a folder/key blob store:

```python
from wafersite.registry.store import (
    Filter, FilterOp, ListOptions, MemoryDatabase, MemoryStorage, SortField,
)

db = MemoryDatabase()
org = db.create("orgs", {"name": "example-org"})
db.create("packages", {"org_id": org.id, "name": "hello"})

found = db.get_by_field("orgs", "name", "example-org")
page = db.list(
    "packages",
    ListOptions(
        filters=[Filter("name", FilterOp.LIKE, "%ell%")],
        sort=[SortField("created_at", desc=True)],
        limit=10,
    ),
)
print(page.total_count, [r.data["name"] for r in page.records])

storage = MemoryStorage()
storage.put("registry", "example-org/hello/0.1.0.wafer", b"...")
```

- `create` assigns an id and sets `created_at`/`updated_at` timestamps;
  `created_at` grows strictly with insertion order.
- `get`, `get_by_field` and `update` raise `RecordNotFound` when nothing
  matches; so does `MemoryStorage.get`.
- Filters support equality, ordering comparisons, `IN`, null checks and
  SQL-style `LIKE` (`%` and `_`, case-sensitive). A `limit` of 0 means no
  limit.

## What this package does not do

It does not run an HTTP server or registry service. There are no registry
operations on top of the store (seeding reserved organisations, publishing,
yanking, CLI login codes, access tokens), no request authentication, and no
route dispatch; the store is in memory only and nothing is persisted.