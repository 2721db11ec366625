"""
Theme File Walker

Materializes one format of a theme into an output directory:
- transform entries are expanded and written (optionally post-processed by a hook)
- copy entries are copied byte for byte
- symlinks are created after all files exist

Failures are isolated per file: each is logged and recorded, and the remaining
entries are still processed.
"""

import os
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, List, Optional, Set, Tuple

from rezgen.contexts.templating.exceptions import TemplateRenderError
from rezgen.contexts.templating.invoker import expand
from rezgen.contexts.templating.logger import _log_debug, _log_error, _log_warning, log_materialize_result
from rezgen.contexts.templating.options import GenerationOptions
from rezgen.contexts.templating.theme import FileAction, ManifestEntry, Theme
from rezgen.utils.status import Status


@dataclass(frozen=True)
class SaveContext:
    """
    Everything a pre-save hook may need.

    Attributes:
        markup: Expanded template text
        theme: Theme being materialized
        entry: Manifest entry that produced the markup
        output_path: Where the markup would be written
        primary: Whether this is the entry standing in for the requested output file
        options: Generation options for this run
    """

    markup: str
    theme: Theme
    entry: ManifestEntry
    output_path: Path
    primary: bool
    options: GenerationOptions


# Returns replacement markup, or None to suppress the write
BeforeSaveHook = Callable[[SaveContext], Optional[str]]


class LinkType(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


@dataclass
class MaterializeResult:
    """
    Outcome of one materialize() call.

    Attributes:
        written: Files written from transform entries
        copied: Files copied from copy entries
        linked: Symlinks created
        skipped: Entries not written (suppressed by hook, action none, duplicates)
        failures: (path, status, message) for each failed artifact
    """

    written: List[Path] = field(default_factory=list)
    copied: List[Path] = field(default_factory=list)
    linked: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    failures: List[Tuple[Path, Status, str]] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failures


def link_type(destination: Path) -> LinkType:
    """Destinations with a file extension get file links, the rest directory links."""
    return LinkType.FILE if Path(destination).suffix else LinkType.DIRECTORY


def _claim(path: Path, claimed: Set[Path], result: MaterializeResult) -> bool:
    """Reserve an output path; each path is written at most once per run."""
    if path in claimed:
        _log_warning(f"Skipping duplicate output path: {path}")
        result.skipped.append(path)
        return False
    claimed.add(path)
    return True


def _transform(
    resume: Any,
    theme: Theme,
    fmt: str,
    entry: ManifestEntry,
    dest: Path,
    primary: bool,
    options: GenerationOptions,
    on_before_save: Optional[BeforeSaveHook],
    result: MaterializeResult,
) -> None:
    try:
        markup = expand(resume, entry.read_template(), fmt, entry.css_info(), options)
    except (TemplateRenderError, OSError) as e:
        _log_error(f"Failed to expand {entry.source}: {e}")
        result.failures.append((dest, Status.TEMPLATE_RENDER, str(e)))
        return

    if on_before_save is not None:
        ctx = SaveContext(
            markup=markup,
            theme=theme,
            entry=entry,
            output_path=dest,
            primary=primary,
            options=options,
        )
        try:
            markup = on_before_save(ctx)
        except Exception as e:
            _log_error(f"Pre-save hook failed for {dest}: {e}")
            result.failures.append((dest, Status.FILE_WRITE, f"pre-save hook failed: {e}"))
            return
        if markup is None:
            _log_debug(f"Write suppressed by pre-save hook: {dest}")
            result.skipped.append(dest)
            return

    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(markup, encoding="utf-8")
    except OSError as e:
        _log_error(f"Failed to write {dest}: {e}")
        result.failures.append((dest, Status.FILE_WRITE, str(e)))
        return

    _log_debug(f"Wrote {dest}")
    result.written.append(dest)


def _copy(entry: ManifestEntry, dest: Path, result: MaterializeResult) -> None:
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(entry.source, dest)
    except OSError as e:
        _log_error(f"Failed to copy {entry.source} -> {dest}: {e}")
        result.failures.append((dest, Status.FILE_COPY, str(e)))
        return

    _log_debug(f"Copied {entry.source} -> {dest}")
    result.copied.append(dest)


def _link(
    output_dir: Path,
    destination: str,
    target: str,
    result: MaterializeResult,
    renamed: Optional[Tuple[Path, Path]] = None,
) -> None:
    """
    Create one symlink. renamed is (manifest path, actual path) of the entry
    that was redirected to the requested output file.

    A link left by an earlier run is kept when it already points at the same
    target and replaced otherwise.
    """
    link_path = output_dir / destination
    target_path = Path(os.path.normpath(link_path.parent / target))
    if renamed is not None and target_path == renamed[0]:
        target_path = renamed[1]
    kind = link_type(link_path)

    try:
        link_path.parent.mkdir(parents=True, exist_ok=True)
        if link_path.is_symlink():
            if Path(os.readlink(link_path)) == target_path:
                _log_debug(f"Link already in place: {link_path} -> {target_path}")
                result.linked.append(link_path)
                return
            link_path.unlink()
        link_path.symlink_to(target_path, target_is_directory=kind is LinkType.DIRECTORY)
    except OSError as e:
        _log_error(f"Failed to link {link_path} -> {target_path}: {e}")
        result.failures.append((link_path, Status.SYMLINK, str(e)))
        return

    _log_debug(f"Linked {link_path} -> {target_path} ({kind.value})")
    result.linked.append(link_path)


def materialize(
    resume: Any,
    theme: Theme,
    fmt: str,
    output_dir: Path,
    options: GenerationOptions,
    on_before_save: Optional[BeforeSaveHook] = None,
    output_file: Optional[Path] = None,
) -> MaterializeResult:
    """
    Produce every file of a theme format under output_dir.

    Args:
        resume: Resume data, passed to templates unmodified
        theme: Loaded theme
        fmt: Theme format whose manifest is walked (e.g., "html")
        output_dir: Destination root; intermediate directories are created
        options: Generation options for this run
        on_before_save: Optional hook receiving a SaveContext per transform entry;
            its return value is written, or nothing is written if it returns None
        output_file: Destination for the first transform entry, replacing its
            manifest path (the file the caller asked to generate)

    Returns:
        MaterializeResult describing written, copied, linked, skipped and failed paths

    Raises:
        FormatNotSupportedError: If the theme has no manifest for fmt
    """
    output_dir = Path(output_dir)
    theme_format = theme.get_format(fmt)
    result = MaterializeResult()
    claimed: Set[Path] = set()
    primary_pending = output_file is not None
    renamed: Optional[Tuple[Path, Path]] = None

    for entry in theme_format.files:
        dest = output_dir / entry.path

        if entry.action is FileAction.NONE:
            result.skipped.append(dest)
            continue

        primary = primary_pending and entry.action is FileAction.TRANSFORM
        if primary:
            # Links to the manifest path follow the entry to its new name
            renamed = (Path(os.path.normpath(dest)), Path(os.path.normpath(output_file)))
            dest = Path(output_file)
            primary_pending = False

        if not _claim(dest, claimed, result):
            continue

        if entry.action is FileAction.TRANSFORM:
            _transform(resume, theme, fmt, entry, dest, primary, options, on_before_save, result)
        else:
            _copy(entry, dest, result)

    for destination, target in theme_format.symlinks.items():
        if _claim(output_dir / destination, claimed, result):
            _link(output_dir, destination, target, result, renamed)

    log_materialize_result(theme.name, fmt, result)
    return result
