"""
Line break freezing.

Some template engines collapse or normalize whitespace. Freezing swaps raw line
breaks for sentinel entities before expansion; unfreezing restores them.
Input that already contains a sentinel cannot be told apart from a frozen break.
"""

from rezgen.contexts.templating.defaults import NEWLINE_SYMBOL, RETURN_SYMBOL


def freeze(text: str, newline_symbol: str = NEWLINE_SYMBOL, return_symbol: str = RETURN_SYMBOL) -> str:
    """Replace every \\n and \\r with its sentinel."""
    return text.replace("\n", newline_symbol).replace("\r", return_symbol)


def unfreeze(text: str, newline_symbol: str = NEWLINE_SYMBOL, return_symbol: str = RETURN_SYMBOL) -> str:
    """Restore line breaks previously replaced by freeze()."""
    return text.replace(return_symbol, "\r").replace(newline_symbol, "\n")
