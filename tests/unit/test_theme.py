"""Unit tests for theme loading and resolution."""

from pathlib import Path

import pytest

from rezgen.contexts.templating import FileAction, Theme, list_themes, resolve_theme_path
from rezgen.contexts.templating.exceptions import (
    FormatNotSupportedError,
    InvalidThemeManifestError,
    ThemeNotFoundError,
)
from rezgen.contexts.templating.theme import BUNDLED_THEMES_PATH
from rezgen.utils.status import Status


@pytest.mark.unit
def test_open_parses_manifest(theme_dir):
    theme = Theme.open(theme_dir)

    assert theme.name == "fixture"
    assert theme.engine is None
    assert set(theme.formats) == {"html", "txt"}

    html = theme.get_format("html")
    actions = [entry.action for entry in html.files]
    assert actions == [FileAction.TRANSFORM, FileAction.COPY, FileAction.NONE]
    assert html.files[0].source == theme_dir.resolve() / "src" / "index.html"
    assert html.files[0].css == theme_dir.resolve() / "src" / "style.css"
    assert dict(html.symlinks) == {"latest.html": "index.html", "images": "img"}


@pytest.mark.unit
def test_entry_reads_template_and_css(theme_dir):
    entry = Theme.open(theme_dir).get_format("html").files[0]

    assert "{{ css.data }}" in entry.read_template()
    assert entry.css_info().data == "h1 { color: red; }"


@pytest.mark.unit
def test_entry_without_css_has_empty_css_info(theme_dir):
    entry = Theme.open(theme_dir).get_format("txt").files[0]

    info = entry.css_info()
    assert info.path is None
    assert info.data is None


@pytest.mark.unit
def test_get_format_unknown(theme_dir):
    theme = Theme.open(theme_dir)

    assert not theme.has_format("latex")
    with pytest.raises(FormatNotSupportedError):
        theme.get_format("latex")


@pytest.mark.unit
def test_open_without_manifest(tmp_path):
    with pytest.raises(ThemeNotFoundError):
        Theme.open(tmp_path)


@pytest.mark.unit
def test_open_rejects_unknown_action(tmp_path):
    (tmp_path / "theme.yaml").write_text(
        "formats:\n  html:\n    files:\n      - path: a.html\n        action: explode\n",
        encoding="utf-8",
    )

    with pytest.raises(InvalidThemeManifestError):
        Theme.open(tmp_path)


@pytest.mark.unit
def test_open_rejects_manifest_without_formats(tmp_path):
    (tmp_path / "theme.yaml").write_text("name: empty\n", encoding="utf-8")

    with pytest.raises(InvalidThemeManifestError):
        Theme.open(tmp_path)


@pytest.mark.unit
def test_source_defaults_to_entry_path(tmp_path):
    (tmp_path / "theme.yaml").write_text(
        "formats:\n  txt:\n    files:\n      - path: out.txt\n        action: transform\n",
        encoding="utf-8",
    )

    entry = Theme.open(tmp_path).get_format("txt").files[0]

    assert entry.source == tmp_path.resolve() / "out.txt"


@pytest.mark.unit
def test_resolve_theme_by_name(theme_dir):
    assert resolve_theme_path("theme", themes_path=theme_dir.parent) == theme_dir.resolve()


@pytest.mark.unit
def test_resolve_theme_by_path(theme_dir, tmp_path):
    empty_themes = tmp_path / "no-themes-here"

    assert resolve_theme_path(str(theme_dir), themes_path=empty_themes) == theme_dir.resolve()


@pytest.mark.unit
def test_resolve_theme_not_found(tmp_path):
    with pytest.raises(ThemeNotFoundError) as exc_info:
        resolve_theme_path("does-not-exist", themes_path=tmp_path)

    assert exc_info.value.status is Status.THEME_NOT_FOUND
    assert exc_info.value.theme == "does-not-exist"


@pytest.mark.unit
def test_bundled_theme_is_listed():
    assert "modern" in list_themes(BUNDLED_THEMES_PATH)
    theme = Theme.open(BUNDLED_THEMES_PATH / "modern")
    assert {"html", "txt", "md"} <= set(theme.formats)


@pytest.mark.unit
def test_list_themes_missing_directory(tmp_path):
    assert list_themes(Path(tmp_path / "missing")) == []
