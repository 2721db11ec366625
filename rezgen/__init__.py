"""
REZGEN - Resume generation from themes

Expands a structured resume through a theme's templates into HTML, plain text
and Markdown, and rasterizes HTML to PDF through external engines.

Architecture:
- Templating Context: Theme manifests, template expansion, file materialization
- Rendering Context: Format generators and PDF engine dispatch
"""

__version__ = "0.1.0"
