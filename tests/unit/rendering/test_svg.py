"""Tests for SVG size normalization."""

import logging

from c4render.core.rendering.svg import extract_style_size, normalize_svg_size

STRUCTURIZR_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="100%" height="100%" '
    'style="width: 842.5px; height: 595px; background: #fff">'
    '<rect width="10" height="10"/></svg>'
)


def test_extract_style_size() -> None:
    assert extract_style_size(STRUCTURIZR_SVG) == ("842.5", "595")


def test_rewrites_root_attributes_only() -> None:
    result = normalize_svg_size(STRUCTURIZR_SVG)

    assert result.startswith(
        '<svg xmlns="http://www.w3.org/2000/svg" width="842.5px" height="595px" '
    )
    assert '<rect width="10" height="10"/>' in result


def test_is_idempotent() -> None:
    once = normalize_svg_size(STRUCTURIZR_SVG)
    assert normalize_svg_size(once) == once


def test_missing_height_leaves_markup_unchanged(caplog) -> None:
    svg = '<svg width="100%" height="100%" style="width: 842px"></svg>'

    with caplog.at_level(logging.WARNING):
        assert normalize_svg_size(svg) == svg

    assert "Unable to normalize SVG size" in caplog.text


def test_svg_without_style_is_unchanged() -> None:
    svg = '<svg width="100" height="50"></svg>'
    assert normalize_svg_size(svg) == svg
