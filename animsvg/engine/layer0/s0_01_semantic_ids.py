"""S0.01 — Semantic IDs.

Give every visual element a stable, human-readable id of the form
``prefix + basename[_N]``. Existing ids and class names are reused unless they
look machine-generated (``path123``, hex hashes, ``unnamed*``); otherwise the
basename is inferred from the element's shape and fill color.

Traversal is pre-order over the arena, so identical input always yields
identical ids.
"""

from __future__ import annotations

import re
from collections import Counter

from animsvg.engine.config import EngineConfig
from animsvg.engine.context import ProcessingContext
from animsvg.engine.registry import Layer, stage
from animsvg.models.reports import ElementRecord, IdAssignment
from animsvg.svg.colors import normalize_color
from animsvg.svg.document import NON_VISUAL_TAGS, SvgDocument
from animsvg.svg.path_data import CURVE_LETTERS, LINE_LETTERS
from animsvg.utils.geometry import parse_float

# Hex → color word used in id basenames (exact match after normalization)
ID_COLOR_NAMES = {
    "#ff0000": "red",
    "#00ff00": "green",
    "#0000ff": "blue",
    "#ffff00": "yellow",
    "#ff00ff": "magenta",
    "#00ffff": "cyan",
    "#000000": "black",
    "#ffffff": "white",
    "#808080": "gray",
    "#ffa500": "orange",
    "#800080": "purple",
}

_AUTO_GENERATED_RE = re.compile(
    r"^(?:"
    r"(?:svg|g|path|rect|circle|ellipse|line|polyline|polygon|text|tspan|use|image)\d+"
    r"|layer\d+"
    r"|[0-9a-f]{8,}"
    r"|unnamed.*"
    r"|untitled.*"
    r")$",
    re.IGNORECASE,
)
_INVALID_CHARS_RE = re.compile(r"[^a-z0-9_]")
_UNDERSCORES_RE = re.compile(r"_+")
_COUNTER_SUFFIX_RE = re.compile(r"_\d+$")

_COLORED_SHAPES = {"circle", "ellipse", "rect", "path", "line", "polyline", "polygon"}


def sanitize_token(text: str) -> str:
    """Lowercase ``[a-z0-9_]`` token; a leading digit gets an underscore."""
    token = _INVALID_CHARS_RE.sub("_", text.strip().lower())
    token = _UNDERSCORES_RE.sub("_", token).strip("_")
    if token and token[0].isdigit():
        token = "_" + token
    return token


def is_auto_generated(name: str) -> bool:
    return bool(_AUTO_GENERATED_RE.match(name.strip()))


def color_name(value: str | None) -> str | None:
    canonical = normalize_color(value)
    return ID_COLOR_NAMES.get(canonical) if canonical else None


def _existing_basename(doc: SvgDocument, idx: int, prefix: str) -> str | None:
    existing = doc.get(idx, "id")
    if existing:
        name = existing.strip()
        # Ids we generated earlier: drop prefix and counter so re-runs are stable
        if prefix and name.startswith(prefix):
            name = _COUNTER_SUFFIX_RE.sub("", name[len(prefix):])
        if name and not is_auto_generated(name):
            token = sanitize_token(name)
            if token:
                return token

    classes = (doc.get(idx, "class") or "").split()
    if classes and not is_auto_generated(classes[0]):
        token = sanitize_token(classes[0])
        if token:
            return token
    return None


def _path_kind(d: str) -> str:
    letters = {c for c in d if c.isalpha() and c not in "eE"}
    if letters & CURVE_LETTERS:
        return "curve"
    if letters & LINE_LETTERS and letters <= (LINE_LETTERS | set("MmZz")):
        return "line"
    return "shape"


def _group_color(doc: SvgDocument, idx: int) -> str | None:
    own = color_name(doc.get(idx, "fill"))
    if own:
        return own
    names = [color_name(doc.get(child, "fill")) for child in doc.children(idx)]
    counts = Counter(n for n in names if n)
    if not counts:
        return None
    # Majority fill among direct children; ties go to the first seen
    return counts.most_common(1)[0][0]


def infer_basename(doc: SvgDocument, idx: int, config: EngineConfig | None = None) -> str:
    """Basename from shape semantics and fill color."""
    config = config or EngineConfig()
    tag = doc.tag(idx)

    if tag == "g":
        color = _group_color(doc, idx)
        return f"{color}_group" if color else "group"

    if tag == "circle":
        base = "wheel" if parse_float(doc.get(idx, "r")) > config.wheel_radius_threshold else "circle"
    elif tag == "ellipse":
        radius = max(parse_float(doc.get(idx, "rx")), parse_float(doc.get(idx, "ry")))
        base = "wheel" if radius > config.wheel_radius_threshold else "circle"
    elif tag == "rect":
        width = parse_float(doc.get(idx, "width"))
        height = parse_float(doc.get(idx, "height"))
        base = "rect"
        if width > 0 and height > 0:
            ratio = width / height
            if abs(ratio - 1) < config.square_ratio_tolerance:
                base = "square"
            elif ratio > config.bar_ratio_threshold:
                base = "bar"
    elif tag == "path":
        base = _path_kind(doc.get(idx, "d") or "")
    else:
        base = sanitize_token(tag) or "element"

    if tag in _COLORED_SHAPES:
        color = color_name(doc.get(idx, "fill"))
        if color:
            base = f"{color}_{base}"
    return base


def assign_semantic_ids(
    doc: SvgDocument,
    prefix: str = "anim_",
    config: EngineConfig | None = None,
) -> IdAssignment:
    """Assign ids to every eligible element in pre-order. Mutates ``doc``."""
    config = config or EngineConfig()
    eligible = doc.iter_preorder(skip=NON_VISUAL_TAGS)[1:]
    eligible_set = set(eligible)

    # Ids inside skipped subtrees stay as they are; never reuse them
    used: set[str] = set()
    for idx in doc.descendants():
        if idx not in eligible_set:
            existing = doc.get(idx, "id")
            if existing:
                used.add(existing)

    plans: list[tuple[int, str, str | None]] = []
    for idx in eligible:
        base = _existing_basename(doc, idx, prefix) or infer_basename(doc, idx, config)
        plans.append((idx, base, doc.get(idx, "id") or doc.get(idx, "class")))

    counters: dict[str, int] = {}
    assignment = IdAssignment()
    for idx, base, source in plans:
        n = counters.get(base, 0)
        candidate = f"{prefix}{base}" if n == 0 else f"{prefix}{base}_{n}"
        while candidate in used:
            n += 1
            candidate = f"{prefix}{base}_{n}"
        counters[base] = n + 1
        used.add(candidate)

        doc.set(idx, "id", candidate)
        parent = doc.parent(idx)
        assignment.id_map[candidate] = doc.tag(idx)
        assignment.hierarchy.append(
            ElementRecord(
                id=candidate,
                tag=doc.tag(idx),
                parent_id=doc.get(parent, "id") if parent is not None else None,
                depth=doc.depth(idx),
                source_id=source,
            )
        )
    return assignment


@stage(
    id="S0.01",
    layer=Layer.STRUCTURE,
    option="generate_stable_ids",
    description="Assign semantic, stable element ids",
)
def semantic_ids(ctx: ProcessingContext) -> None:
    ctx.id_assignment = assign_semantic_ids(ctx.document, ctx.options.id_prefix, ctx.config)
    ctx.log.info("Assigned %d semantic ids", len(ctx.id_assignment.id_map))
