"""
Theme model and theme resolution.

A theme is a directory holding a theme.yaml manifest plus the templates and
assets it references:

    name: modern
    engine: jinja
    formats:
      html:
        files:
          - path: resume.html
            action: transform
            source: src/resume.html
            css: src/style.css
          - path: css/style.css
            action: copy
            source: src/style.css
        symlinks:
          index.html: resume.html

Themes are loaded once per run and are immutable afterwards.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from dotenv import load_dotenv
from omegaconf import OmegaConf

from rezgen.contexts.templating.engines import CssInfo
from rezgen.contexts.templating.exceptions import (
    FormatNotSupportedError,
    InvalidThemeManifestError,
    ThemeNotFoundError,
)

load_dotenv()
BUNDLED_THEMES_PATH = Path(__file__).resolve().parents[2] / "themes"
THEMES_PATH = Path(os.getenv("THEMES_PATH", str(BUNDLED_THEMES_PATH)))

MANIFEST_NAME = "theme.yaml"


class FileAction(str, Enum):
    TRANSFORM = "transform"
    COPY = "copy"
    NONE = "none"


@dataclass(frozen=True)
class ManifestEntry:
    """
    One declared output file of a theme format.

    Attributes:
        path: Output path relative to the output directory
        action: How the file is produced
        source: Template or asset file inside the theme directory
        css: Optional stylesheet inside the theme directory
    """

    path: str
    action: FileAction
    source: Optional[Path] = None
    css: Optional[Path] = None

    def read_template(self) -> str:
        return self.source.read_text(encoding="utf-8")

    def css_info(self) -> CssInfo:
        if self.css is None:
            return CssInfo()
        return CssInfo(path=self.css, data=self.css.read_text(encoding="utf-8"))


@dataclass(frozen=True)
class ThemeFormat:
    """Manifest for one output format: files plus symlinks (destination -> target)."""

    name: str
    files: Tuple[ManifestEntry, ...] = ()
    symlinks: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Theme:
    """
    A named collection of per-format manifests.

    Attributes:
        name: Theme name
        path: Theme directory
        formats: Format name -> ThemeFormat
        engine: Template engine the theme was written for, if it declares one
    """

    name: str
    path: Path
    formats: Mapping[str, ThemeFormat]
    engine: Optional[str] = None

    @classmethod
    def open(cls, theme_dir: Path) -> "Theme":
        """
        Load a theme from its directory.

        Args:
            theme_dir: Directory containing theme.yaml

        Returns:
            Parsed Theme

        Raises:
            ThemeNotFoundError: If the directory has no manifest
            InvalidThemeManifestError: If the manifest is malformed
        """
        theme_dir = Path(theme_dir).resolve()
        manifest_path = theme_dir / MANIFEST_NAME
        if not manifest_path.exists():
            raise ThemeNotFoundError(str(theme_dir), [manifest_path])

        manifest = OmegaConf.to_container(OmegaConf.load(manifest_path), resolve=True)
        if not isinstance(manifest, dict) or "formats" not in manifest:
            raise InvalidThemeManifestError(f"{manifest_path}: missing 'formats' key")

        formats = {
            fmt_name: _parse_format(theme_dir, fmt_name, fmt_data or {})
            for fmt_name, fmt_data in manifest["formats"].items()
        }

        return cls(
            name=manifest.get("name", theme_dir.name),
            path=theme_dir,
            formats=formats,
            engine=manifest.get("engine"),
        )

    def get_format(self, fmt: str) -> ThemeFormat:
        """
        Raises:
            FormatNotSupportedError: If the theme has no manifest for fmt
        """
        if fmt not in self.formats:
            raise FormatNotSupportedError(fmt, self.formats.keys())
        return self.formats[fmt]

    def has_format(self, fmt: str) -> bool:
        return fmt in self.formats


def _parse_format(theme_dir: Path, fmt_name: str, fmt_data: Dict) -> ThemeFormat:
    entries: List[ManifestEntry] = []

    for i, item in enumerate(fmt_data.get("files") or []):
        if "path" not in item:
            raise InvalidThemeManifestError(f"{fmt_name}.files[{i}]: missing 'path'")

        try:
            action = FileAction(item.get("action") or FileAction.NONE.value)
        except ValueError:
            raise InvalidThemeManifestError(
                f"{fmt_name}.files[{i}]: unknown action '{item.get('action')}'"
            ) from None

        # Sources default to the same relative path inside the theme
        source = theme_dir / item.get("source", item["path"])
        css = theme_dir / item["css"] if item.get("css") else None

        entries.append(ManifestEntry(path=item["path"], action=action, source=source, css=css))

    symlinks = {str(k): str(v) for k, v in (fmt_data.get("symlinks") or {}).items()}
    return ThemeFormat(name=fmt_name, files=tuple(entries), symlinks=symlinks)


def resolve_theme_path(theme: str, themes_path: Path = None) -> Path:
    """
    Resolve a theme name or path to its directory.

    Bundled themes are checked first, then the value is treated as a path.

    Args:
        theme: Theme name (e.g., "modern") or path to a theme directory
        themes_path: Directory of bundled themes (defaults to THEMES_PATH)

    Returns:
        Absolute path to the theme directory

    Raises:
        ThemeNotFoundError: If neither location exists
    """
    if themes_path is None:
        themes_path = THEMES_PATH

    candidates = [Path(themes_path) / theme, Path(theme).resolve()]
    for candidate in candidates:
        if candidate.is_dir():
            return candidate.resolve()

    raise ThemeNotFoundError(theme, candidates)


def list_themes(themes_path: Path = None) -> List[str]:
    """Names of theme directories (those with a manifest) under themes_path."""
    if themes_path is None:
        themes_path = THEMES_PATH
    if not themes_path.exists():
        return []
    return sorted(p.name for p in themes_path.iterdir() if (p / MANIFEST_NAME).exists())
