"""Presentation adapters - Implementations of PresentationPort.

Available implementations:
- MarkdownPresenter: renders the widget state to Markdown
"""

from .markdown_renderer import (
    MarkdownPresenter,
    render_current,
    render_debug,
    render_forecast,
    render_markdown,
    render_status,
    suggestion_labels,
)

__all__ = [
    "MarkdownPresenter",
    "render_markdown",
    "render_status",
    "render_current",
    "render_forecast",
    "render_debug",
    "suggestion_labels",
]
