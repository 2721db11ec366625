"""Shared fixtures: a sample resume and a small on-disk theme."""

from pathlib import Path

import pytest

THEME_YAML = """\
name: fixture
formats:
  html:
    files:
      - path: index.html
        action: transform
        source: src/index.html
        css: src/style.css
      - path: img/logo.bin
        action: copy
        source: src/logo.bin
      - path: partials/head.html
        action: none
        source: src/head.html
    symlinks:
      latest.html: index.html
      images: img
  txt:
    files:
      - path: resume.txt
        action: transform
        source: src/resume.txt
"""

# Bytes that would not survive a text-mode copy
LOGO_BYTES = bytes(range(256)) + b"\r\n\x00end"


@pytest.fixture
def sample_resume():
    return {
        "basics": {
            "name": "Jane Doe",
            "label": "Software Engineer",
            "email": "jane@example.com",
            "url": "https://jane.example.com",
            "summary": "Builds **reliable** systems.",
        },
        "work": [
            {
                "name": "Acme",
                "position": "Engineer",
                "startDate": "2020",
                "highlights": ["Shipped *things*", "Fixed <bugs> & more"],
            }
        ],
    }


@pytest.fixture
def theme_dir(tmp_path) -> Path:
    """Theme with one transform, one copy, one none entry and two symlinks."""
    root = tmp_path / "theme"
    src = root / "src"
    src.mkdir(parents=True)

    (root / "theme.yaml").write_text(THEME_YAML, encoding="utf-8")
    (src / "index.html").write_text(
        "<html><head><style>{{ css.data }}</style></head>"
        "<body><h1>{{ r.basics.name | link(r.basics.url) }}</h1>"
        "<p>{{ r.basics.summary | mdin }}</p></body></html>",
        encoding="utf-8",
    )
    (src / "style.css").write_text("h1 { color: red; }", encoding="utf-8")
    (src / "logo.bin").write_bytes(LOGO_BYTES)
    (src / "head.html").write_text("<title>{{ r.basics.name }}</title>", encoding="utf-8")
    (src / "resume.txt").write_text("{{ r.basics.name | upper }}\n{{ r.basics.label }}\n", encoding="utf-8")

    return root


@pytest.fixture
def logo_bytes() -> bytes:
    return LOGO_BYTES
