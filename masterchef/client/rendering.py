"""Markdown recipe to styled HTML."""

from typing import Dict, Optional

import markdown2
from bs4 import BeautifulSoup

from masterchef.utils.markdown import recipe_preview

__all__ = ["TAG_CLASSES", "WRAPPER_CLASS", "recipe_preview", "render_markdown"]

# Fixed tag -> class mapping for the recipe card
TAG_CLASSES: Dict[str, str] = {
    "h1": "text-2xl md:text-3xl font-bold mb-4 text-primary",
    "h2": "text-xl md:text-2xl font-bold mb-3 mt-6 text-primary",
    "p": "text-sm md:text-base leading-relaxed mb-4 text-body",
    "ul": "list-disc list-inside pl-2 md:pl-4 space-y-2 mb-4 marker:text-accent",
    "ol": "list-decimal pl-2 md:pl-4 space-y-2 marker:font-bold marker:text-accent",
    "li": "ml-2 md:ml-3 text-sm md:text-base text-body",
    "strong": "font-bold text-primary",
    "em": "italic text-body",
    "code": "bg-gray-100 px-1 py-0.5 rounded text-xs md:text-sm font-mono",
}

WRAPPER_CLASS = "prose prose-sm md:prose-base lg:prose-lg prose-slate max-w-none"


def render_markdown(text: Optional[str], tag_classes: Optional[Dict[str, str]] = None) -> str:
    """
    Render model markdown as HTML with a class on every mapped tag.

    Raw HTML inside the markdown is escaped, not passed through.
    """
    tag_classes = TAG_CLASSES if tag_classes is None else tag_classes

    html = markdown2.markdown(text or "", safe_mode="escape", extras=["cuddled-lists"])
    soup = BeautifulSoup(f'<div class="{WRAPPER_CLASS}">{html}</div>', "html.parser")

    for tag_name, classes in tag_classes.items():
        for element in soup.find_all(tag_name):
            element["class"] = classes.split()

    return str(soup)
