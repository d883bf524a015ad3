"""Post preview extraction for listing pages."""

PREVIEW_UNAVAILABLE = "Preview not available."
MAX_PREVIEW = 200
MIN_WORD_CUT = 150
ELLIPSIS = "..."


def first_paragraph(text: str) -> str | None:
    """First trimmed line that is not blank, a heading, or an image."""
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or line.startswith("!["):
            continue
        return line
    return None


def extract_preview(text: str | None) -> str:
    """Return a display-length preview of a post's raw text.

    Lines over ``MAX_PREVIEW`` characters are cut there, then pulled back
    to the last space if that space sits at or after ``MIN_WORD_CUT``,
    and finished with an ellipsis.
    """
    if text is None:
        return PREVIEW_UNAVAILABLE
    preview = first_paragraph(text)
    if preview is None:
        return PREVIEW_UNAVAILABLE
    if len(preview) > MAX_PREVIEW:
        preview = preview[:MAX_PREVIEW]
        last_space = preview.rfind(" ")
        if last_space >= MIN_WORD_CUT:
            preview = preview[:last_space]
        preview += ELLIPSIS
    return preview
