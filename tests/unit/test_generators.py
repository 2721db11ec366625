"""Unit tests for format generators and generate()."""

from pathlib import Path

import pytest

from rezgen.contexts.rendering import format_from_path, generate, get_generator, pdf_engines
from rezgen.contexts.rendering import generators
from rezgen.contexts.rendering.pdf_engines import PdfEngine, PdfResult
from rezgen.contexts.templating import SaveContext, Theme, build_options
from rezgen.contexts.templating.exceptions import FormatNotSupportedError, ThemeNotFoundError
from rezgen.utils.status import Status


class RecordingHandler:
    def __init__(self):
        self.calls = []

    def err(self, status, cause):
        self.calls.append((status, cause))


@pytest.mark.unit
@pytest.mark.parametrize(
    "filename, fmt",
    [("resume.html", "html"), ("resume.HTM", "html"), ("resume.txt", "txt"), ("resume.md", "md"), ("resume.pdf", "pdf")],
)
def test_format_from_path(filename, fmt):
    assert format_from_path(Path(filename)) == fmt


@pytest.mark.unit
def test_format_from_path_unknown():
    with pytest.raises(FormatNotSupportedError):
        format_from_path(Path("resume.docx"))


@pytest.mark.unit
def test_pdf_generator_expands_html_templates():
    generator = get_generator("pdf")

    assert generator.template_format == "html"
    assert generator.before_save is not None

    with pytest.raises(FormatNotSupportedError):
        get_generator("latex")


@pytest.mark.unit
def test_generate_html(theme_dir, sample_resume, tmp_path, logo_bytes):
    output = tmp_path / "out" / "jane.html"
    options = build_options({"theme": str(theme_dir), "prettify": False})

    result = generate(sample_resume, output, options)

    assert result.success
    assert result.format == "html"
    assert result.theme == "fixture"
    assert '<a href="https://jane.example.com">Jane Doe</a>' in output.read_text(encoding="utf-8")
    assert (output.parent / "img" / "logo.bin").read_bytes() == logo_bytes
    assert result.pdf == []


@pytest.mark.unit
def test_generate_html_prettified(theme_dir, sample_resume, tmp_path):
    output = tmp_path / "jane.html"
    options = build_options({"theme": str(theme_dir), "prettify": {"indent_size": 4}})

    generate(sample_resume, output, options)

    lines = output.read_text(encoding="utf-8").splitlines()
    assert len(lines) > 1
    assert any(line.startswith("    <") for line in lines)


@pytest.mark.unit
def test_generate_txt(theme_dir, sample_resume, tmp_path):
    output = tmp_path / "jane.txt"

    result = generate(sample_resume, output, build_options({"theme": str(theme_dir)}))

    assert result.success
    assert output.read_text(encoding="utf-8") == "JANE DOE\nSoftware Engineer\n"


@pytest.mark.unit
def test_generate_pdf_rasterizes_instead_of_writing_html(theme_dir, sample_resume, tmp_path, monkeypatch):
    rendered = []

    def fake_render(markup, output_path, options, on_error=None):
        rendered.append((markup, output_path))
        output_path.write_bytes(b"%PDF")
        return PdfResult(success=True, engine=PdfEngine.WKHTMLTOPDF, pdf_path=output_path)

    monkeypatch.setattr(generators, "render_pdf_sync", fake_render)
    output = tmp_path / "out" / "jane.pdf"

    result = generate(sample_resume, output, build_options({"theme": str(theme_dir)}))

    assert result.success
    assert result.format == "pdf"
    assert len(rendered) == 1
    assert rendered[0][1] == output
    assert "Jane Doe" in rendered[0][0]
    assert output.read_bytes() == b"%PDF"
    # No HTML lands where the PDF goes; theme assets are still copied
    assert not (output.parent / "index.html").exists()
    assert (output.parent / "img" / "logo.bin").exists()
    assert [r.pdf_path for r in result.pdf] == [output]


@pytest.mark.unit
def test_generate_pdf_failure_reaches_error_handler(theme_dir, sample_resume, tmp_path, monkeypatch):
    async def missing(cmd):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(pdf_engines, "run_process", missing)
    handler = RecordingHandler()
    output = tmp_path / "jane.pdf"
    options = build_options({"theme": str(theme_dir), "error_handler": handler})

    result = generate(sample_resume, output, options)

    assert result.success is False
    assert not output.exists()
    assert [status for status, _ in handler.calls] == [Status.PDF_GENERATION]
    assert any("not found" in error for error in result.errors)


@pytest.mark.unit
def test_theme_not_found_is_fatal_before_any_output(sample_resume, tmp_path):
    out_dir = tmp_path / "out"
    options = build_options({"theme": str(tmp_path / "no-such-theme")})

    with pytest.raises(ThemeNotFoundError):
        generate(sample_resume, out_dir / "jane.html", options)

    assert not out_dir.exists()


@pytest.mark.unit
def test_theme_engine_overrides_options(theme_dir, sample_resume, tmp_path, monkeypatch):
    manifest = theme_dir / "theme.yaml"
    manifest.write_text("engine: sandboxed\n" + manifest.read_text(encoding="utf-8"), encoding="utf-8")
    seen = []

    def spy(ctx, pdf_results):
        seen.append(ctx.options.engine)
        return ctx.markup

    monkeypatch.setitem(generators.GENERATORS, "spy", generators.FormatGenerator("spy", "txt", spy))

    generate(sample_resume, tmp_path / "jane.txt", build_options(), fmt="spy", theme=Theme.open(theme_dir))

    assert seen == ["sandboxed"]


def _save_context(markup, options):
    return SaveContext(
        markup=markup, theme=None, entry=None, output_path=Path("out.html"), primary=True, options=options
    )


@pytest.mark.unit
def test_prettify_keeps_inline_tags_on_their_line():
    options = build_options()
    markup = "<div><p><strong>State University</strong>, BSc</p><p>Hi <em>there</em>, <a href=\"x\">me</a></p></div>"

    pretty = generators.prettify_html(_save_context(markup, options), [])

    assert pretty.splitlines() == [
        "<div>",
        "  <p><strong>State University</strong>, BSc</p>",
        '  <p>Hi <em>there</em>, <a href="x">me</a></p>',
        "</div>",
    ]


@pytest.mark.unit
def test_prettify_indents_blocks_and_keeps_verbatim_content():
    options = build_options({"prettify": {"indent_size": 4}})
    markup = (
        "<!DOCTYPE html><html><head><style>\nh1 { color: red; }\n</style></head>"
        '<body><ul class="skills"><li>Python</li></ul><pre>  keep\n  me</pre></body></html>'
    )

    pretty = generators.prettify_html(_save_context(markup, options), [])

    assert pretty.splitlines()[:4] == ["<!DOCTYPE html>", "<html>", "    <head>", "        <style>"]
    assert "<style>\nh1 { color: red; }\n</style>" in pretty
    assert '        <ul class="skills">\n            <li>Python</li>\n        </ul>' in pretty
    assert "<pre>  keep\n  me</pre>" in pretty

    unformatted = build_options({"prettify": {"indent_size": 4, "unformatted": ["li"]}})
    pretty = generators.prettify_html(_save_context(markup, unformatted), [])
    assert '        <ul class="skills"><li>Python</li></ul>' in pretty


@pytest.mark.unit
def test_generate_twice_into_same_directory(theme_dir, sample_resume, tmp_path):
    output = tmp_path / "out" / "jane.html"
    options = build_options({"theme": str(theme_dir)})

    first = generate(sample_resume, output, options)
    second = generate(sample_resume, output, options)

    assert first.success, first.errors
    assert second.success, second.errors


@pytest.mark.unit
def test_generate_html_then_pdf_into_same_directory(theme_dir, sample_resume, tmp_path, monkeypatch):
    def fake_render(markup, output_path, options, on_error=None):
        output_path.write_bytes(b"%PDF")
        return PdfResult(success=True, engine=PdfEngine.WKHTMLTOPDF, pdf_path=output_path)

    monkeypatch.setattr(generators, "render_pdf_sync", fake_render)
    options = build_options({"theme": str(theme_dir)})

    html = generate(sample_resume, tmp_path / "out" / "jane.html", options)
    pdf = generate(sample_resume, tmp_path / "out" / "jane.pdf", options)

    assert html.success, html.errors
    assert pdf.success, pdf.errors
    assert (tmp_path / "out" / "jane.html").exists()
    assert (tmp_path / "out" / "jane.pdf").read_bytes() == b"%PDF"
