#!/usr/bin/env python3
"""
Resume Generation CLI

Expands a resume through a theme into one or more output files. The output
extension picks the format (.html, .txt, .md, .pdf).

Commands:
    generate - Generate output files from a resume
    themes   - List bundled themes

Examples:\n

    generate_resume.py generate resume.json out/resume.html out/resume.pdf

    generate_resume.py generate resume.yaml out/resume.pdf --pdf weasyprint

    generate_resume.py generate resume.json out/resume.html --theme ./my-theme --config rezgen.yaml

    generate_resume.py themes
"""

import json
import os
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv
from omegaconf import OmegaConf
from typing_extensions import Annotated

from rezgen.contexts.rendering import generate
from rezgen.contexts.rendering.logger import setup_rendering_logger
from rezgen.contexts.templating import build_options, list_themes
from rezgen.contexts.templating.exceptions import RezgenError
from rezgen.utils.status import Status

load_dotenv()
LOGS_PATH = Path(os.getenv("REZGEN_LOGS_PATH", "outs/logs"))


class ConsoleErrorHandler:
    """Prints engine failures as they are reported."""

    def err(self, status: Status, cause: Optional[BaseException]) -> None:
        typer.secho(f"  {status.name}: {cause}", fg=typer.colors.RED, err=True)


def load_resume(path: Path):
    """Read a resume from JSON or YAML."""
    if path.suffix.lower() in (".yaml", ".yml"):
        return OmegaConf.to_container(OmegaConf.load(path), resolve=True)
    return json.loads(path.read_text(encoding="utf-8"))


app = typer.Typer(
    help="Generate HTML, text, Markdown and PDF resumes from themes",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("generate")
def generate_command(
    resume_file: Annotated[
        Path,
        typer.Argument(help="Resume data (.json, .yaml or .yml)", exists=True, dir_okay=False),
    ],
    outputs: Annotated[
        List[Path],
        typer.Argument(help="Output files; the extension selects the format"),
    ],
    theme: Annotated[
        Optional[str],
        typer.Option("--theme", "-t", help="Theme name or path to a theme directory"),
    ] = None,
    pdf: Annotated[
        Optional[str],
        typer.Option("--pdf", "-p", help="PDF engine: wkhtmltopdf, phantomjs, weasyprint, chrome"),
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="YAML file with generation options", exists=True),
    ] = None,
    freeze_breaks: Annotated[
        bool,
        typer.Option("--freeze-breaks", help="Protect line breaks during template expansion"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug output on the console"),
    ] = False,
):
    """
    Generate one or more outputs from a resume.

    Examples:\n

        $ generate_resume.py generate resume.json out/resume.html

        $ generate_resume.py generate resume.json out/resume.pdf --pdf chrome
    """
    overrides = {"error_handler": ConsoleErrorHandler()}
    if theme:
        overrides["theme"] = theme
    if pdf:
        overrides["pdf"] = pdf
    if freeze_breaks:
        overrides["freeze_breaks"] = True

    try:
        options = build_options(overrides, config_path=config)
    except RezgenError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    log_file = setup_rendering_logger(
        LOGS_PATH, pdf_engine=options.pdf, console_level="DEBUG" if verbose else "INFO"
    )
    resume = load_resume(resume_file)

    failed = 0
    for output in outputs:
        typer.secho(f"\nGenerating: {output}", fg=typer.colors.BLUE, bold=True)
        try:
            result = generate(resume, output, options)
        except RezgenError as e:
            # Theme and format errors are fatal for this output
            typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
            failed += 1
            continue

        if result.success:
            typer.secho("✓ Generated", fg=typer.colors.GREEN, bold=True)
            typer.echo(f"  Files written: {len(result.files.written)}, copied: {len(result.files.copied)}")
        else:
            failed += 1
            typer.secho(f"✗ Failed with {len(result.errors)} errors", fg=typer.colors.RED, bold=True)
            for error in result.errors[:10]:
                typer.secho(f"  - {error}", fg=typer.colors.RED)

    typer.echo(f"\n  Log: {log_file}\n")
    raise typer.Exit(code=1 if failed else 0)


@app.command("themes")
def themes_command():
    """List bundled themes."""
    names = list_themes()
    if not names:
        typer.secho("No themes found.", fg=typer.colors.YELLOW)
        raise typer.Exit(code=0)
    for name in names:
        typer.echo(name)


if __name__ == "__main__":
    app()
