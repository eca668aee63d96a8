"""SVG post-processing.

Structurizr exports SVG with ``width="100%"``/``height="100%"`` and the real
pixel size only in an inline style, which some viewers render incorrectly.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

_STYLE_WIDTH_RE = re.compile(r"width:\s*(\d+(?:\.\d+)?)px")
_STYLE_HEIGHT_RE = re.compile(r"height:\s*(\d+(?:\.\d+)?)px")
_WIDTH_ATTR_RE = re.compile(r'\bwidth\s*=\s*"[^"]*"')
_HEIGHT_ATTR_RE = re.compile(r'\bheight\s*=\s*"[^"]*"')


def extract_style_size(svg: str) -> tuple[str | None, str | None]:
    """Return the first pixel width and height found in style declarations."""
    width = _STYLE_WIDTH_RE.search(svg)
    height = _STYLE_HEIGHT_RE.search(svg)
    return (
        width.group(1) if width else None,
        height.group(1) if height else None,
    )


def normalize_svg_size(svg: str) -> str:
    """
    Rewrite the first ``width``/``height`` attributes to explicit pixel sizes.

    Best effort: if either size is missing from the style text, the markup is
    returned unchanged and a warning is logged. Applying it twice yields the
    same result as applying it once.

    Args:
        svg: SVG markup

    Returns:
        Normalized SVG markup

    Example:
        >>> normalize_svg_size('<svg width="100%" height="100%" style="width: 842px; height: 595px">')
        '<svg width="842px" height="595px" style="width: 842px; height: 595px">'
    """
    width, height = extract_style_size(svg)

    if width is None or height is None:
        logger.warning(
            "Unable to normalize SVG size. Some viewers may have issues showing the diagram correctly."
        )
        return svg

    svg = _WIDTH_ATTR_RE.sub(f'width="{width}px"', svg, count=1)
    svg = _HEIGHT_ATTR_RE.sub(f'height="{height}px"', svg, count=1)
    return svg
