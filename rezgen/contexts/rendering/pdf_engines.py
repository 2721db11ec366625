"""
PDF Engine Dispatcher

Rasterizes expanded HTML into PDF through one of four back-ends:

- wkhtmltopdf:  wkhtmltopdf <flags> <file.pdf.html> <file.pdf>
- phantomjs:    phantomjs <rasterize.js> <file.pdf.html> <file.pdf>
- weasyprint:   weasyprint <file.pdf.html> <file.pdf>
- chrome:       headless Chromium driven through Playwright

Every back-end writes the markup to an intermediate file next to the target
(resume.pdf -> resume.pdf.html) and returns a PdfResult. Every failure,
including an unknown engine name, is reported once through on_error.
"""

import asyncio
import os
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from rezgen.contexts.rendering.logger import _log_debug, _log_info, log_pdf_result
from rezgen.contexts.rendering.process import run_process
from rezgen.contexts.templating.defaults import (
    DEFAULT_CHROME_PDF_OPTIONS,
    DEFAULT_WKHTMLTOPDF_OPTIONS,
)
from rezgen.contexts.templating.exceptions import PdfGenerationError, UnknownPdfEngineError
from rezgen.contexts.templating.options import GenerationOptions
from rezgen.utils.status import ErrorCallback, Status

load_dotenv()
WKHTMLTOPDF_BIN = os.getenv("WKHTMLTOPDF_BIN", "wkhtmltopdf")
PHANTOMJS_BIN = os.getenv("PHANTOMJS_BIN", "phantomjs")
WEASYPRINT_BIN = os.getenv("WEASYPRINT_BIN", "weasyprint")

RASTERIZE_SCRIPT = Path(__file__).resolve().parent / "scripts" / "rasterize.js"


class PdfEngine(str, Enum):
    WKHTMLTOPDF = "wkhtmltopdf"
    PHANTOMJS = "phantomjs"
    WEASYPRINT = "weasyprint"
    CHROME = "chrome"


PDF_ENGINE_ALIASES = {"phantom": PdfEngine.PHANTOMJS}


@dataclass
class PdfResult:
    """
    Result of one PDF rasterization.

    Attributes:
        success: Whether the PDF was produced
        engine: Back-end that ran (None if the name did not resolve)
        status: Status.SUCCESS or the failure code
        pdf_path: Generated PDF (None if failed)
        intermediate_path: The .pdf.html file handed to the engine
        error: Human-readable failure description
        cause: Exception behind the failure
        stdout: Engine standard output
        stderr: Engine standard error
    """

    success: bool
    engine: Optional[PdfEngine] = None
    status: Status = Status.SUCCESS
    pdf_path: Optional[Path] = None
    intermediate_path: Optional[Path] = None
    error: Optional[str] = None
    cause: Optional[BaseException] = None
    stdout: str = ""
    stderr: str = ""


def resolve_pdf_engine(name: str) -> PdfEngine:
    """
    Map an engine name (or alias) to its back-end.

    Raises:
        UnknownPdfEngineError: If the name is not a known engine
    """
    if name in PDF_ENGINE_ALIASES:
        return PDF_ENGINE_ALIASES[name]
    try:
        return PdfEngine(name)
    except ValueError:
        available = [e.value for e in PdfEngine] + list(PDF_ENGINE_ALIASES)
        raise UnknownPdfEngineError(name, available) from None


def intermediate_html_path(output_path: Path) -> Path:
    """resume.pdf -> resume.pdf.html"""
    return Path(output_path).with_suffix(".pdf.html")


def wkhtmltopdf_flags(overrides: Optional[Mapping[str, Any]] = None) -> List[str]:
    """
    Merge default margins with caller options and flatten to command-line flags.

    {"margin-top": "5mm"} -> ["--margin-bottom", "10mm", "--margin-top", "5mm"]

    True values become bare switches; False and None values are dropped.
    """
    merged = {**DEFAULT_WKHTMLTOPDF_OPTIONS, **(overrides or {})}

    flags: List[str] = []
    for key, value in merged.items():
        if value is None or value is False:
            continue
        flags.append(f"--{key}")
        if value is not True:
            flags.append(str(value))
    return flags


def chrome_pdf_options(overrides: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Keyword arguments for Playwright's page.pdf(), defaults deep-merged with overrides."""
    merged = OmegaConf.merge(DEFAULT_CHROME_PDF_OPTIONS, dict(overrides or {}))
    return OmegaConf.to_container(merged, resolve=True)


def _relative_posix(path: Path) -> str:
    """Path relative to the working directory, always with forward slashes."""
    return Path(os.path.relpath(path)).as_posix()


def _write_intermediate(markup: str, output_path: Path) -> Path:
    temp_file = intermediate_html_path(output_path)
    temp_file.parent.mkdir(parents=True, exist_ok=True)
    temp_file.write_text(markup, encoding="utf-8")
    _log_debug(f"Wrote intermediate HTML: {temp_file}")
    return temp_file


def _failed(engine: Optional[PdfEngine], cause: BaseException, status: Status = Status.PDF_GENERATION, **kwargs) -> PdfResult:
    return PdfResult(success=False, engine=engine, status=status, error=str(cause), cause=cause, **kwargs)


async def _spawn(engine: PdfEngine, cmd: List[str], output_path: Path, temp_file: Path) -> PdfResult:
    """Run one engine process and translate its outcome into a PdfResult."""
    _log_debug(f"Running: {' '.join(cmd)}")
    # A PDF left by an earlier run must not pass for this run's output
    output_path.unlink(missing_ok=True)

    try:
        proc = await run_process(cmd)
    except FileNotFoundError as e:
        err = PdfGenerationError(f"{cmd[0]} not found. Is {engine.value} installed and on PATH?", engine.value)
        err.__cause__ = e
        return _failed(engine, err, intermediate_path=temp_file)

    if not proc.success or not output_path.exists():
        err = PdfGenerationError(
            f"{engine.value} did not produce {output_path}",
            engine.value,
            returncode=proc.returncode,
            stderr=proc.stderr,
        )
        return _failed(engine, err, intermediate_path=temp_file, stdout=proc.stdout, stderr=proc.stderr)

    return PdfResult(
        success=True,
        engine=engine,
        pdf_path=output_path,
        intermediate_path=temp_file,
        stdout=proc.stdout,
        stderr=proc.stderr,
    )


async def render_wkhtmltopdf(markup: str, output_path: Path, options: GenerationOptions) -> PdfResult:
    """wkhtmltopdf must be installed and on PATH (or set WKHTMLTOPDF_BIN)."""
    temp_file = _write_intermediate(markup, output_path)
    cmd = [WKHTMLTOPDF_BIN, *wkhtmltopdf_flags(options.wkhtmltopdf), str(temp_file), str(output_path)]
    return await _spawn(PdfEngine.WKHTMLTOPDF, cmd, output_path, temp_file)


async def render_phantomjs(markup: str, output_path: Path, options: GenerationOptions) -> PdfResult:
    """PhantomJS must be installed and on PATH (or set PHANTOMJS_BIN)."""
    temp_file = _write_intermediate(markup, output_path)
    cmd = [
        PHANTOMJS_BIN,
        _relative_posix(RASTERIZE_SCRIPT),
        _relative_posix(temp_file),
        _relative_posix(output_path),
    ]
    return await _spawn(PdfEngine.PHANTOMJS, cmd, output_path, temp_file)


async def render_weasyprint(markup: str, output_path: Path, options: GenerationOptions) -> PdfResult:
    """WeasyPrint must be installed and on PATH (or set WEASYPRINT_BIN)."""
    temp_file = _write_intermediate(markup, output_path)
    cmd = [WEASYPRINT_BIN, str(temp_file), str(output_path)]
    return await _spawn(PdfEngine.WEASYPRINT, cmd, output_path, temp_file)


async def render_chrome(markup: str, output_path: Path, options: GenerationOptions) -> PdfResult:
    """
    Print the intermediate file with headless Chromium.

    Requires the Playwright browsers (`playwright install chromium`).
    """
    temp_file = _write_intermediate(markup, output_path)
    launch_options = dict(options.chrome_launch)
    pdf_options = chrome_pdf_options(options.chrome_pdf)

    try:
        async with async_playwright() as p:
            browser = await p.chromium.launch(**launch_options)
            try:
                page = await browser.new_page()
                await page.goto(temp_file.resolve().as_uri(), wait_until="networkidle")
                pdf_bytes = await page.pdf(**pdf_options)
            finally:
                await browser.close()
        output_path.write_bytes(pdf_bytes)
    except (PlaywrightError, OSError, TypeError, ValueError) as e:
        # TypeError/ValueError: launch or pdf options Playwright does not accept
        err = PdfGenerationError(f"chrome failed to render {output_path}: {e}", PdfEngine.CHROME.value)
        err.__cause__ = e
        return _failed(PdfEngine.CHROME, err, intermediate_path=temp_file)

    return PdfResult(success=True, engine=PdfEngine.CHROME, pdf_path=output_path, intermediate_path=temp_file)


PDF_ENGINES: Dict[PdfEngine, Callable[[str, Path, GenerationOptions], Awaitable[PdfResult]]] = {
    PdfEngine.WKHTMLTOPDF: render_wkhtmltopdf,
    PdfEngine.PHANTOMJS: render_phantomjs,
    PdfEngine.WEASYPRINT: render_weasyprint,
    PdfEngine.CHROME: render_chrome,
}


async def render_pdf(
    markup: str,
    output_path: Path,
    options: GenerationOptions,
    on_error: Optional[ErrorCallback] = None,
    verbose: bool = False,
) -> PdfResult:
    """
    Rasterize HTML markup to a PDF with the engine named by options.pdf.

    Exactly one engine runs per call. There is no retry and no timeout.

    Args:
        markup: Expanded HTML
        output_path: Target PDF path; the intermediate file is derived from it
        options: Generation options (engine name and per-engine settings)
        on_error: Called once with (status, cause) if rendering fails
        verbose: Log engine output even on success

    Returns:
        PdfResult with success status and diagnostic information
    """
    output_path = Path(output_path)
    start_time = time.time()

    try:
        engine = resolve_pdf_engine(options.pdf)
    except UnknownPdfEngineError as e:
        result = _failed(None, e, status=e.status)
    else:
        _log_info(f"Rendering PDF with {engine.value}: {output_path}")
        try:
            result = await PDF_ENGINES[engine](markup, output_path, options)
        except OSError as e:
            # Intermediate file could not be written
            result = _failed(engine, e)

    log_pdf_result(result, time.time() - start_time, verbose=verbose)

    if not result.success and on_error is not None:
        on_error(result.status, result.cause)

    return result


def render_pdf_sync(
    markup: str,
    output_path: Path,
    options: GenerationOptions,
    on_error: Optional[ErrorCallback] = None,
    verbose: bool = False,
) -> PdfResult:
    """Blocking wrapper around render_pdf() for callers without an event loop."""
    return asyncio.run(render_pdf(markup, output_path, options, on_error=on_error, verbose=verbose))
