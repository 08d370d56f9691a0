"""
Font Loader

Parses glyph-outline fonts in the typeface JSON format:

    {"familyName": ..., "resolution": 1000, "boundingBox": {...},
     "glyphs": {"A": {"ha": 720, "x_min": 10, "x_max": 700, "o": "m 10 0 l ..."}}}

TrueType/OpenType files are also accepted; Pillow extracts advance and
bounding-box metrics for printable ASCII, without outlines.
"""

import io
import json
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Dict, List, Optional, Tuple

from PIL import ImageFont

from ..config.settings import FONT_METRIC_SIZE
from .base import Loadable
from .descriptors import ResourceDescriptor, ResourceKind
from .errors import DecodeError

# outline op -> number of coordinates it consumes
_OUTLINE_ARITY = {"m": 2, "l": 2, "q": 4, "b": 6, "z": 0}

_TRUETYPE_SUFFIXES = (".ttf", ".otf")


@dataclass
class OutlineCommand:
    """One pen command: move, line, quadratic, bezier or close."""

    op: str
    points: Tuple[float, ...] = ()


@dataclass
class Glyph:
    """Metrics and outline for a single character."""

    char: str
    advance: float
    x_min: float = 0.0
    x_max: float = 0.0
    outline: List[OutlineCommand] = field(default_factory=list)


@dataclass
class Font:
    """Parsed font description."""

    family_name: str
    resolution: float
    glyphs: Dict[str, Glyph]
    bounding_box: Dict[str, float] = field(default_factory=dict)
    underline_position: float = 0.0
    underline_thickness: float = 0.0

    def get_glyph(self, char: str) -> Optional[Glyph]:
        """Get a glyph, falling back to space."""
        return self.glyphs.get(char, self.glyphs.get(" "))

    def has_glyph(self, char: str) -> bool:
        return char in self.glyphs


def parse_outline(outline: str) -> List[OutlineCommand]:
    """
    Parse a typeface outline string such as ``"m 0 0 l 10 0 q 5 5 0 10 z"``.

    Raises:
        ValueError: On unknown ops or missing coordinates
    """
    tokens = outline.split()
    commands: List[OutlineCommand] = []
    i = 0
    while i < len(tokens):
        op = tokens[i]
        if op not in _OUTLINE_ARITY:
            raise ValueError(f"Unknown outline command '{op}'")
        arity = _OUTLINE_ARITY[op]
        args = tokens[i + 1:i + 1 + arity]
        if len(args) != arity:
            raise ValueError(f"Outline command '{op}' expects {arity} values")
        commands.append(OutlineCommand(op, tuple(float(a) for a in args)))
        i += 1 + arity
    return commands


class FontLoader(Loadable):
    """Loads typeface JSON fonts (or TrueType metrics)."""

    kind = ResourceKind.FONT

    def decode(self, data: bytes, descriptor: ResourceDescriptor) -> Font:
        suffix = PurePosixPath(descriptor.location.split("?")[0]).suffix.lower()
        if suffix in _TRUETYPE_SUFFIXES:
            return self._decode_truetype(data, descriptor)
        return self._decode_typeface(data, descriptor)

    def _decode_typeface(self, data: bytes, descriptor: ResourceDescriptor) -> Font:
        try:
            payload = json.loads(data.decode("utf-8"))
            raw_glyphs = payload["glyphs"]
            glyphs = {
                char: Glyph(
                    char=char,
                    advance=float(entry.get("ha", 0.0)),
                    x_min=float(entry.get("x_min", 0.0)),
                    x_max=float(entry.get("x_max", 0.0)),
                    outline=parse_outline(entry.get("o", "")),
                )
                for char, entry in raw_glyphs.items()
            }
            return Font(
                family_name=payload.get("familyName", descriptor.name),
                resolution=float(payload.get("resolution", 1000)),
                glyphs=glyphs,
                bounding_box={k: float(v) for k, v in payload.get("boundingBox", {}).items()},
                underline_position=float(payload.get("underlinePosition", 0.0)),
                underline_thickness=float(payload.get("underlineThickness", 0.0)),
            )
        except (UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError,
                AttributeError, ValueError) as exc:
            raise DecodeError(f"Invalid typeface font: {exc}") from exc

    def _decode_truetype(self, data: bytes, descriptor: ResourceDescriptor) -> Font:
        try:
            font = ImageFont.truetype(io.BytesIO(data), FONT_METRIC_SIZE)
        except OSError as exc:
            raise DecodeError(f"Invalid TrueType font: {exc}") from exc

        glyphs: Dict[str, Glyph] = {}
        for code in range(32, 127):
            char = chr(code)
            left, _, right, _ = font.getbbox(char)
            glyphs[char] = Glyph(
                char=char,
                advance=float(font.getlength(char)),
                x_min=float(left),
                x_max=float(right),
            )

        family, _style = font.getname()
        return Font(
            family_name=family or descriptor.name,
            resolution=float(FONT_METRIC_SIZE),
            glyphs=glyphs,
        )
