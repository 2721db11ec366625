"""
Built-in text filters available to every theme template.

Usage inside a template:
    {{ r.summary | md }}
    {{ r.name | link(r.website) }}
"""

import re
from typing import Callable, Dict, Optional

import markdown
from markupsafe import escape

# One wrapping paragraph produced by the Markdown renderer
_WRAPPING_PARAGRAPH = re.compile(r"^\s*<p>|</p>\s*$", re.IGNORECASE)


def out(text):
    return text


def raw(text):
    return text


def xml(text: Optional[str]) -> str:
    """Escape markup-reserved characters (& < > " ')."""
    return str(escape(text or ""))


def md(text: Optional[str]) -> str:
    """Render Markdown to HTML."""
    return markdown.markdown(text or "")


def mdin(text: Optional[str]) -> str:
    """Render Markdown to HTML without the single wrapping <p> element."""
    return _WRAPPING_PARAGRAPH.sub("", md(text))


def lower(text: str) -> str:
    return text.lower()


def link(name: str, url: Optional[str] = None) -> str:
    """Anchor element when a URL is given, otherwise the bare name."""
    if url:
        return f'<a href="{url}">{name}</a>'
    return name


BUILTIN_FILTERS: Dict[str, Callable] = {
    "out": out,
    "raw": raw,
    "xml": xml,
    "md": md,
    "mdin": mdin,
    "lower": lower,
    "link": link,
}
