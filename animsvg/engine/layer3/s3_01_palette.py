"""S3.01 — Color Palette Extraction.

Count canonical fill/stroke colors, optionally merge near-identical ones,
and turn the most used into named tokens with CSS, SCSS and JSON renderings.
"""

from __future__ import annotations

import json
from collections import Counter

import numpy as np
from scipy.spatial.distance import cdist

from animsvg.engine.config import EngineConfig
from animsvg.engine.context import ProcessingContext
from animsvg.engine.registry import Layer, stage
from animsvg.models.options import PaletteOptions
from animsvg.models.palette import ColorCategory, ColorPalette, ColorToken
from animsvg.svg.colors import brightness, hex_to_rgb, normalize_color, saturation_spread
from animsvg.svg.document import SvgDocument

PAINT_ATTRIBUTES = ("fill", "stroke")

# Reference hues for semantic names
_REFERENCE_HUES: list[tuple[str, tuple[int, int, int]]] = [
    ("red", (255, 0, 0)),
    ("green", (0, 128, 0)),
    ("blue", (0, 0, 255)),
    ("yellow", (255, 255, 0)),
    ("cyan", (0, 255, 255)),
    ("magenta", (255, 0, 255)),
    ("orange", (255, 165, 0)),
    ("purple", (128, 0, 128)),
    ("pink", (255, 192, 203)),
    ("brown", (165, 42, 42)),
]
_REFERENCE_RGB = np.array([rgb for _, rgb in _REFERENCE_HUES], dtype=float)


def count_colors(doc: SvgDocument) -> Counter[str]:
    """Usage count per canonical color over fill/stroke attributes."""
    usage: Counter[str] = Counter()
    for idx in doc.iter_preorder():
        for name in PAINT_ATTRIBUTES:
            color = normalize_color(doc.get(idx, name))
            if color:
                usage[color] += 1
    return usage


def group_similar_colors(entries: list[tuple[str, int]], tolerance: float) -> list[tuple[str, int]]:
    """Greedy merge of colors within ``tolerance`` (Euclidean RGB).

    Each group keeps its highest-usage member and the summed usage.
    """
    if len(entries) < 2:
        return list(entries)
    rgb = np.array([hex_to_rgb(color) for color, _ in entries], dtype=float)
    dists = cdist(rgb, rgb, metric="euclidean")

    grouped: list[tuple[str, int]] = []
    used: set[int] = set()
    for i, (color, usage) in enumerate(entries):
        if i in used:
            continue
        used.add(i)
        total, dominant, best = usage, color, usage
        for j in range(i + 1, len(entries)):
            if j in used or dists[i, j] > tolerance:
                continue
            used.add(j)
            total += entries[j][1]
            if entries[j][1] > best:
                dominant, best = entries[j]
        grouped.append((dominant, total))
    grouped.sort(key=lambda e: e[1], reverse=True)
    return grouped


def semantic_name(color: str, usage: int, config: EngineConfig | None = None) -> str:
    config = config or EngineConfig()
    rgb = hex_to_rgb(color)
    dists = cdist(np.array([rgb], dtype=float), _REFERENCE_RGB)[0]
    nearest = int(np.argmin(dists))
    if dists[nearest] <= config.palette_name_distance:
        name = _REFERENCE_HUES[nearest][0]
    else:
        level = brightness(rgb)
        name = "dark" if level < 50 else "light" if level > 200 else "mid"
    return f"{name}-primary" if usage > config.palette_primary_usage else name


def categorize(color: str, index: int, usage: int, config: EngineConfig | None = None) -> ColorCategory:
    config = config or EngineConfig()
    if index == 0:
        return "primary"
    if usage > config.palette_secondary_usage:
        return "secondary"
    rgb = hex_to_rgb(color)
    level = brightness(rgb)
    if level < 50 or level > 200:
        return "neutral"
    if saturation_spread(rgb) > 50:
        return "accent"
    return "neutral"


def render_css(tokens: list[ColorToken]) -> str:
    lines = "\n".join(f"  {t.variable}: {t.value};" for t in tokens)
    return f":root {{\n{lines}\n}}"


def render_scss(tokens: list[ColorToken]) -> str:
    variables = "\n".join(f"${t.variable[2:]}: {t.value};" for t in tokens)
    custom = "\n".join(f"  {t.variable}: ${t.variable[2:]};" for t in tokens)
    return f"// SCSS Variables\n{variables}\n\n// CSS Custom Properties\n:root {{\n{custom}\n}}"


def render_json(tokens: list[ColorToken]) -> str:
    payload = {
        t.name: {"variable": t.variable, "value": t.value, "category": t.category, "usage": t.usage}
        for t in tokens
    }
    return json.dumps(payload, indent=2)


def extract_palette(
    doc: SvgDocument,
    options: PaletteOptions | None = None,
    config: EngineConfig | None = None,
) -> ColorPalette:
    options = options or PaletteOptions()
    config = config or EngineConfig()

    usage = count_colors(doc)
    # Counter keeps first-seen order, so the sort below is stable by document order
    entries = [(color, n) for color, n in usage.items() if n >= options.min_usage]
    entries.sort(key=lambda e: e[1], reverse=True)
    if options.group_similar_colors:
        entries = group_similar_colors(entries, options.color_tolerance)
    entries = entries[: options.max_colors]

    tokens: list[ColorToken] = []
    seen: Counter[str] = Counter()
    for index, (color, count) in enumerate(entries):
        if options.generate_semantic_names:
            base = semantic_name(color, count, config)
            seen[base] += 1
            name = base if seen[base] == 1 else f"{base}-{seen[base]}"
        else:
            name = f"color-{index + 1}"
        tokens.append(
            ColorToken(
                value=color,
                name=name,
                variable=f"--{options.variable_prefix}{name}",
                usage=count,
                category=categorize(color, index, count, config),
            )
        )

    return ColorPalette(
        tokens=tokens,
        css=render_css(tokens),
        scss=render_scss(tokens),
        json_text=render_json(tokens),
    )


@stage(
    id="S3.01",
    layer=Layer.PALETTE,
    option="extract_palette",
    description="Extract a ranked color token palette",
)
def palette_extraction(ctx: ProcessingContext) -> None:
    ctx.palette = extract_palette(ctx.document, ctx.options.palette, ctx.config)
    ctx.log.info("Extracted %d color tokens", len(ctx.palette.tokens))
