"""Root test configuration: source-tree fixtures shared by unit and integration tests"""

from pathlib import Path

import pytest

from mdsite.config import Settings


BASE_TEMPLATE = """\
<!DOCTYPE html>
<html>
<head><title>{{ title }}</title><meta name="keywords" content="{{ keywords }}"></head>
<body>
<input id="search-input"><select id="tag-filter"><option value="">All</option></select>
<main>{{ content }}</main>
<footer><time>{{ date }}</time>{{ tags }}</footer>
</body>
</html>
"""


def write_files(root: Path, files: dict[str, str | bytes]) -> Path:
    """Write {relative path: content} under root, creating directories."""
    for rel, content in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            p.write_bytes(content)
        else:
            p.write_text(content, encoding="utf-8")
    return root


def page(title: str, body: str = "", **fields: str) -> str:
    """Markdown source with a frontmatter block."""
    lines = [f"title: {title}"] + [f"{k}: {v}" for k, v in fields.items()]
    return "---\n" + "\n".join(lines) + "\n---\n\n" + body


@pytest.fixture(name="page")
def page_fixture():
    return page


@pytest.fixture(name="make_source")
def make_source_fixture(tmp_path):
    """Factory writing a source tree (with a base template) under tmp_path/content."""
    def _make(files: dict[str, str | bytes], template: str = BASE_TEMPLATE) -> Path:
        root = tmp_path / "content"
        write_files(root, {"templates/base.html": template, **files})
        return root
    return _make


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch):
    """Keep developer MDSITE_* variables out of the tests."""
    for name in Settings.model_fields:
        monkeypatch.delenv(f"MDSITE_{name.upper()}", raising=False)
