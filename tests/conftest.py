"""Shared test fixtures."""

from __future__ import annotations

import pytest

from animsvg.svg.document import SvgDocument


RED_SQUARE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100"><rect x="0" y="0" width="50" height="50" fill="#ff0000"/></svg>'''

SHAPES_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 200 200">
  <defs>
    <linearGradient id="grad1"><stop offset="0" stop-color="#fff"/></linearGradient>
  </defs>
  <title>Shapes</title>
  <circle cx="50" cy="50" r="40" fill="#0000ff"/>
  <circle cx="150" cy="50" r="10"/>
  <rect x="10" y="120" width="120" height="20" fill="orange"/>
  <rect x="140" y="120" width="30" height="60"/>
  <path d="M10 190 L60 190 L60 195"/>
  <path d="M100 100 C120 80 140 80 160 100"/>
  <g fill="#00ff00">
    <ellipse cx="100" cy="160" rx="5" ry="3"/>
  </g>
</svg>'''

NAMED_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">
  <g id="layer1">
    <path id="path1234" d="M0 0 L10 10"/>
    <rect id="Left Wheel!" x="0" y="0" width="10" height="10"/>
    <rect class="hub cap" x="20" y="0" width="10" height="10"/>
    <rect id="a1b2c3d4e5f6" x="40" y="0" width="10" height="10"/>
  </g>
</svg>'''

NESTED_TRANSFORM_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 200 200">
  <g transform="translate(10, 20)">
    <g transform="scale(2)">
      <rect x="5" y="5" width="10" height="10"/>
      <path d="M0 0 L10 0 L10 10 Z"/>
    </g>
    <circle cx="0" cy="0" r="5" transform="scale(2, 3)"/>
  </g>
  <line x1="0" y1="0" x2="10" y2="0" transform="rotate(90)"/>
</svg>'''

NESTED_GROUPS_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">
  <g><g><g><rect x="10" y="10" width="50" height="50" fill="#ff0000"/></g></g></g>
</svg>'''

MERGEABLE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">
  <path d="M0 0 L10 0 L10 10 Z" fill="#ff0000"/>
  <path d="m20 20 l10 0 l0 10 z" fill="#ff0000"/>
  <path d="M40 40 L50 40 L50 50 Z" fill="#0000ff"/>
</svg>'''

PALETTE_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">
  <rect x="0" y="0" width="10" height="10" fill="#ff0000"/>
  <rect x="10" y="0" width="10" height="10" fill="#F00"/>
  <rect x="20" y="0" width="10" height="10" fill="rgb(255, 0, 0)" stroke="#000000"/>
  <circle cx="50" cy="50" r="5" fill="#0000ff" stroke="none"/>
  <circle cx="60" cy="50" r="5" fill="url(#grad)" stroke="#0000fe"/>
  <path d="M0 90 L100 90" stroke="currentColor"/>
</svg>'''

MORPH_SVG = '''<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">
  <path id="square" d="M10 10 L30 10 L30 30 L10 30 Z"/>
  <path id="diamond" d="M50 10 L60 20 L50 30 L40 20 Z"/>
  <path d="M0 0 L1000 0 L1000 1000 L0 1000 Z"/>
</svg>'''


@pytest.fixture
def red_square_svg() -> str:
    return RED_SQUARE_SVG


@pytest.fixture
def shapes_svg() -> str:
    return SHAPES_SVG


@pytest.fixture
def shapes_doc() -> SvgDocument:
    return SvgDocument.parse(SHAPES_SVG)


@pytest.fixture
def nested_transform_svg() -> str:
    return NESTED_TRANSFORM_SVG


@pytest.fixture
def palette_svg() -> str:
    return PALETTE_SVG
