"""Templating: ``{{NAME}}`` placeholder substitution over stored templates."""

from wren.templating.engine import (
    Placeholder,
    TemplateEngine,
    escape,
    scan_placeholders,
    substitute,
)

__all__ = [
    "Placeholder",
    "TemplateEngine",
    "escape",
    "scan_placeholders",
    "substitute",
]
