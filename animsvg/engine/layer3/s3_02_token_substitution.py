"""S3.02 — Color Token Substitution.

Rewrite fill/stroke values that match a palette token to ``var(--token)``
references, and the reverse: resolve references back to canonical hex.
"""

from __future__ import annotations

from animsvg.engine.context import ProcessingContext
from animsvg.engine.layer3.s3_01_palette import PAINT_ATTRIBUTES
from animsvg.engine.registry import Layer, stage
from animsvg.models.palette import ColorPalette
from animsvg.svg.colors import normalize_color
from animsvg.svg.document import SvgDocument


def apply_tokens(doc: SvgDocument, palette: ColorPalette) -> int:
    """Replace token colors with references. Returns the number of rewrites."""
    mapping = palette.mapping()
    count = 0
    for idx in doc.iter_preorder():
        for name in PAINT_ATTRIBUTES:
            color = normalize_color(doc.get(idx, name))
            if color in mapping:
                doc.set(idx, name, mapping[color])
                count += 1
    return count


def resolve_tokens(doc: SvgDocument, palette: ColorPalette) -> int:
    """Replace token references with their canonical colors."""
    reverse = {token.reference: token.value for token in palette.tokens}
    count = 0
    for idx in doc.iter_preorder():
        for name in PAINT_ATTRIBUTES:
            value = (doc.get(idx, name) or "").strip()
            if value in reverse:
                doc.set(idx, name, reverse[value])
                count += 1
    return count


@stage(
    id="S3.02",
    layer=Layer.PALETTE,
    dependencies=["S3.01"],
    option="apply_color_tokens",
    description="Substitute palette colors with CSS variable references",
)
def token_substitution(ctx: ProcessingContext) -> None:
    if ctx.palette is None:
        return
    rewritten = apply_tokens(ctx.document, ctx.palette)
    ctx.log.info("Substituted %d color values with tokens", rewritten)
