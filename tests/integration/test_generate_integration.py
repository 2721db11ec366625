"""
Integration tests for whole generation runs with the bundled theme.

PDF tests need a real engine and are skipped when it is not installed.
"""

import shutil

import pytest

from rezgen.contexts.rendering import generate
from rezgen.contexts.templating import build_options

WKHTMLTOPDF_AVAILABLE = shutil.which("wkhtmltopdf") is not None
WEASYPRINT_AVAILABLE = shutil.which("weasyprint") is not None

skip_if_no_wkhtmltopdf = pytest.mark.skipif(
    not WKHTMLTOPDF_AVAILABLE, reason="wkhtmltopdf not installed"
)
skip_if_no_weasyprint = pytest.mark.skipif(not WEASYPRINT_AVAILABLE, reason="weasyprint not installed")


@pytest.fixture
def full_resume(sample_resume):
    return {
        **sample_resume,
        "education": [
            {"institution": "State University", "studyType": "BSc", "area": "Computer Science", "endDate": "2019"}
        ],
        "skills": [{"name": "Languages", "keywords": ["Python", "SQL"]}],
    }


@pytest.mark.integration
def test_modern_theme_html(full_resume, tmp_path):
    output = tmp_path / "site" / "jane.html"

    result = generate(full_resume, output, build_options({"theme": "modern"}))

    assert result.success, result.errors
    html = output.read_text(encoding="utf-8")
    assert "Jane Doe" in html
    assert "https://jane.example.com" in html
    assert "<em>things</em>" in html
    assert "State University" in html
    assert (output.parent / "css" / "style.css").exists()
    assert (output.parent / "assets").is_symlink()
    assert not (output.parent / "partials").exists()


@pytest.mark.integration
def test_modern_theme_regenerates_into_same_directory(full_resume, tmp_path):
    output = tmp_path / "site" / "jane.html"
    options = build_options({"theme": "modern"})

    first = generate(full_resume, output, options)
    second = generate(full_resume, output, options)

    assert first.success, first.errors
    assert second.success, second.errors
    assert (output.parent / "assets" / "style.css").exists()
    assert "<strong>State University</strong>, BSc" in output.read_text(encoding="utf-8")


@pytest.mark.integration
def test_modern_theme_txt(full_resume, tmp_path):
    output = tmp_path / "jane.txt"

    result = generate(full_resume, output, build_options({"theme": "modern"}))

    assert result.success, result.errors
    text = output.read_text(encoding="utf-8")
    assert text.startswith("JANE DOE\nSoftware Engineer\n")
    assert "Engineer, Acme (2020 - Present)" in text
    assert "Languages: Python, SQL" in text


@pytest.mark.integration
def test_modern_theme_md_with_frozen_breaks(full_resume, tmp_path):
    output = tmp_path / "jane.md"

    result = generate(full_resume, output, build_options({"theme": "modern", "freeze_breaks": True}))

    assert result.success, result.errors
    markdown = output.read_text(encoding="utf-8")
    assert markdown.startswith("# Jane Doe\n")
    assert "&newl;" not in markdown
    assert "- **Languages**: Python, SQL" in markdown


@pytest.mark.integration
@pytest.mark.pdf
@skip_if_no_wkhtmltopdf
def test_modern_theme_pdf_wkhtmltopdf(full_resume, tmp_path):
    output = tmp_path / "jane.pdf"

    result = generate(full_resume, output, build_options({"theme": "modern", "pdf": "wkhtmltopdf"}))

    assert result.success, result.errors
    assert output.read_bytes().startswith(b"%PDF")
    assert (tmp_path / "jane.pdf.html").exists()


@pytest.mark.integration
@pytest.mark.pdf
@skip_if_no_weasyprint
def test_modern_theme_pdf_weasyprint(full_resume, tmp_path):
    output = tmp_path / "jane.pdf"

    result = generate(full_resume, output, build_options({"theme": "modern", "pdf": "weasyprint"}))

    assert result.success, result.errors
    assert output.read_bytes().startswith(b"%PDF")
