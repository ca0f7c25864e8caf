"""Helpers for the markdown text the model returns."""

import re
from typing import Optional

UNTITLED_RECIPE = "Untitled Recipe"
PREVIEW_LENGTH = 150

# A line opening with exactly one '#', then blanks, then the heading text.
TITLE_PATTERN = re.compile(r"^#[ \t]+(\S.*)$", re.MULTILINE)

_HEADING_MARKS = re.compile(r"^#+\s*", re.MULTILINE)


def extract_title(markdown_text: Optional[str]) -> str:
    """
    Derive a recipe title from the first level-1 heading.

    Args:
        markdown_text: Recipe markdown as returned by the model

    Returns:
        The trimmed heading text, or ``UNTITLED_RECIPE``
    """
    if not markdown_text:
        return UNTITLED_RECIPE

    match = TITLE_PATTERN.search(markdown_text)
    if match:
        title = match.group(1).strip()
        if title:
            return title
    return UNTITLED_RECIPE


def recipe_preview(markdown_text: Optional[str], length: int = PREVIEW_LENGTH) -> str:
    """Plain-text teaser: first three non-blank lines without markdown marks."""
    if not markdown_text:
        return "No preview available"

    cleaned = _HEADING_MARKS.sub("", markdown_text).replace("**", "").replace("*", "")
    lines = [line.strip() for line in cleaned.split("\n") if line.strip()]
    text = " ".join(lines[:3])

    if len(text) > length:
        return text[:length] + "..."
    return text
