#!/usr/bin/env python3
"""
Writing Systems
===============
Custom scripts for rendering a language with vector glyphs.

A writing system holds a glyph set (SVG content plus metrics) and a
table mapping graphemes or phonemes to glyph ids. Rendering segments a
string greedily, longest key first, into (glyph id, text) pairs; any
character without a mapping comes back with an empty glyph id so it can
be shown as plain text.

Usage:
    from conlangkit.script import create_empty_writing_system, render_text_as_glyphs

    ws = create_empty_writing_system("Runes")
    segments = render_text_as_glyphs("shala", ws)
"""

import json
import logging
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from .settings import get_setting

logger = logging.getLogger(__name__)

DIRECTIONS = ('ltr', 'rtl', 'ttb', 'btt')
SCRIPT_TYPES = ('alphabet', 'syllabary', 'logographic', 'abjad', 'abugida')


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class Glyph:
    """A named vector glyph."""
    id: str
    name: str
    svg: str = ''
    width: Optional[float] = None
    height: Optional[float] = None
    baseline: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {'id': self.id, 'name': self.name, 'svg': self.svg}
        for key in ('width', 'height', 'baseline'):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Glyph':
        if not isinstance(data, dict) or 'id' not in data:
            raise ValueError(f"glyph requires an id, got {data!r}")
        return cls(
            id=str(data['id']),
            name=str(data.get('name', '')),
            svg=str(data.get('svg', '')),
            width=data.get('width'),
            height=data.get('height'),
            baseline=data.get('baseline'),
        )


@dataclass(frozen=True)
class GlyphMapping:
    """Links a grapheme and/or phoneme to a glyph id."""
    glyph: str
    phoneme: Optional[str] = None
    grapheme: Optional[str] = None
    is_default: bool = False

    @property
    def key(self) -> str:
        """Text this mapping matches; the grapheme wins over the phoneme."""
        return self.grapheme or self.phoneme or ''

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'glyph': self.glyph}
        if self.phoneme is not None:
            data['phoneme'] = self.phoneme
        if self.grapheme is not None:
            data['grapheme'] = self.grapheme
        if self.is_default:
            data['isDefault'] = True
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GlyphMapping':
        if not isinstance(data, dict) or 'glyph' not in data:
            raise ValueError(f"glyph mapping requires a glyph id, got {data!r}")
        if not isinstance(data['glyph'], str):
            raise ValueError(f"glyph id must be a string, got {data['glyph']!r}")
        for key in ('phoneme', 'grapheme'):
            if data.get(key) is not None and not isinstance(data[key], str):
                raise ValueError(f"glyph mapping {key} must be a string, got {data[key]!r}")
        return cls(
            glyph=data['glyph'],
            phoneme=data.get('phoneme'),
            grapheme=data.get('grapheme'),
            is_default=bool(data.get('isDefault', data.get('is_default', False))),
        )


@dataclass(frozen=True)
class WritingSystem:
    id: str
    name: str
    direction: str = 'ltr'
    type: str = 'alphabet'
    glyphs: Tuple[Glyph, ...] = ()
    mappings: Tuple[GlyphMapping, ...] = ()
    default_glyph_size: float = 32
    spacing: float = 4
    line_height: float = 1.5

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'direction': self.direction,
            'type': self.type,
            'glyphs': [g.to_dict() for g in self.glyphs],
            'mappings': [m.to_dict() for m in self.mappings],
            'defaultGlyphSize': self.default_glyph_size,
            'spacing': self.spacing,
            'lineHeight': self.line_height,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WritingSystem':
        """Build from the stored camelCase form. Raises ValueError when malformed."""
        if not isinstance(data, dict):
            raise ValueError(f"writing system must be a mapping, got {type(data).__name__}")
        if not data.get('id') or not data.get('name'):
            raise ValueError("writing system requires an id and a name")
        glyphs = data.get('glyphs')
        if not isinstance(glyphs, list):
            raise ValueError("writing system glyphs must be a list")
        mappings = data.get('mappings') or []
        if not isinstance(mappings, list):
            raise ValueError("writing system mappings must be a list")
        direction = data.get('direction', 'ltr')
        if direction not in DIRECTIONS:
            raise ValueError(f"direction must be one of {DIRECTIONS}, got {direction!r}")

        def metric(camel, snake, default):
            value = data.get(camel, data.get(snake))
            return default if value is None else value

        return cls(
            id=str(data['id']),
            name=str(data['name']),
            direction=direction,
            type=data.get('type', 'alphabet'),
            glyphs=tuple(Glyph.from_dict(g) for g in glyphs),
            mappings=tuple(GlyphMapping.from_dict(m) for m in mappings),
            default_glyph_size=metric('defaultGlyphSize', 'default_glyph_size', 32),
            spacing=metric('spacing', 'spacing', 4),
            line_height=metric('lineHeight', 'line_height', 1.5),
        )


@dataclass(frozen=True)
class GlyphSegment:
    """One rendered unit: a glyph id (empty when unmapped) and its text."""
    glyph_id: str
    char: str


# =============================================================================
# Placeholder Glyphs
# =============================================================================

_SHAPES = [
    '<circle cx="50" cy="50" r="40" fill="none" stroke="currentColor" stroke-width="3"/>',
    '<rect x="10" y="10" width="80" height="80" fill="none" stroke="currentColor" stroke-width="3"/>',
    '<polygon points="50,10 90,90 10,90" fill="none" stroke="currentColor" stroke-width="3"/>',
    '<polygon points="50,10 90,50 50,90 10,50" fill="none" stroke="currentColor" stroke-width="3"/>',
    '<path d="M50,10 L50,90 M10,50 L90,50" fill="none" stroke="currentColor" stroke-width="3"/>',
    '<path d="M10,50 Q50,10 90,50" fill="none" stroke="currentColor" stroke-width="3"/>',
    '<path d="M10,50 Q30,20 50,50 T90,50" fill="none" stroke="currentColor" stroke-width="3"/>',
    '<path d="M10,50 L30,20 L50,50 L70,20 L90,50" fill="none" stroke="currentColor" stroke-width="3"/>',
]

_DECORATIONS = [
    '',
    '<circle cx="50" cy="50" r="5" fill="currentColor"/>',
    '<line x1="50" y1="10" x2="50" y2="30" stroke="currentColor" stroke-width="2"/>',
    '<circle cx="50" cy="20" r="8" fill="none" stroke="currentColor" stroke-width="2"/>',
    '<rect x="40" y="40" width="20" height="20" fill="currentColor"/>',
]


def generate_geometric_glyph(seed: int) -> str:
    """Deterministic placeholder SVG: a base shape plus an optional mark."""
    shape = _SHAPES[abs(seed) % len(_SHAPES)]
    decoration = _DECORATIONS[(seed // 10) % len(_DECORATIONS)]
    return (
        '<svg viewBox="0 0 100 100" xmlns="http://www.w3.org/2000/svg">\n'
        f'  {shape}\n'
        f'  {decoration}\n'
        '</svg>'
    )


def generate_placeholder_glyphs(phonemes: List[str], name_prefix: str = 'glyph') -> List[Glyph]:
    """One geometric glyph per phoneme, with ids like 'glyph-a'."""
    size = get_setting('script.placeholder_glyph_size', 100)
    return [
        Glyph(
            id=f"{name_prefix}-{phoneme}",
            name=phoneme,
            svg=generate_geometric_glyph(ord(phoneme[0]) * 100 + index if phoneme else index),
            width=size,
            height=size,
        )
        for index, phoneme in enumerate(phonemes)
    ]


def create_default_mappings(glyphs: List[Glyph], phonemes: List[str]) -> List[GlyphMapping]:
    """Map each phoneme to the glyph named after it; unmatched phonemes are skipped."""
    by_name = {}
    for glyph in glyphs:
        by_name.setdefault(glyph.name, glyph)
    return [
        GlyphMapping(glyph=by_name[p].id, phoneme=p, grapheme=p)
        for p in phonemes
        if p in by_name
    ]


def create_empty_writing_system(name: Optional[str] = None,
                                script_id: Optional[str] = None) -> WritingSystem:
    """New empty script. Pass script_id for a reproducible identifier."""
    return WritingSystem(
        id=script_id or f"script-{uuid.uuid4().hex}",
        name=name or get_setting('script.default_name', 'New Script'),
        default_glyph_size=get_setting('script.default_glyph_size', 32),
        spacing=get_setting('script.spacing', 4),
        line_height=get_setting('script.line_height', 1.5),
    )


def with_glyphs(writing_system: WritingSystem,
                glyphs: List[Glyph],
                mappings: List[GlyphMapping]) -> WritingSystem:
    """Copy of a writing system with its glyphs and mappings extended."""
    return replace(
        writing_system,
        glyphs=writing_system.glyphs + tuple(glyphs),
        mappings=writing_system.mappings + tuple(mappings),
    )


# =============================================================================
# Rendering
# =============================================================================

def render_text_as_glyphs(text: str, writing_system: WritingSystem) -> List[GlyphSegment]:
    """
    Segment text into glyphs.

    At each position every mapping key is tried, longest first, and the
    first match is consumed. Characters nothing matches are emitted one
    at a time with an empty glyph id.
    """
    mappings = sorted(
        (m for m in writing_system.mappings if m.key),
        key=lambda m: len(m.key),
        reverse=True,
    )

    result = []
    i = 0
    while i < len(text):
        for mapping in mappings:
            key = mapping.key
            if text.startswith(key, i):
                result.append(GlyphSegment(glyph_id=mapping.glyph, char=key))
                i += len(key)
                break
        else:
            result.append(GlyphSegment(glyph_id='', char=text[i]))
            i += 1
    return result


# =============================================================================
# Import / Export
# =============================================================================

def export_writing_system(writing_system: WritingSystem) -> str:
    """Serialize a writing system to JSON."""
    return json.dumps(writing_system.to_dict(), indent=2, ensure_ascii=False)


def import_writing_system(payload: str) -> Optional[WritingSystem]:
    """Parse exported JSON. Returns None when the payload is malformed."""
    try:
        data = json.loads(payload)
    except (TypeError, ValueError) as e:
        logger.debug("Rejected writing system import: %s", e)
        return None

    try:
        return WritingSystem.from_dict(data)
    except (TypeError, ValueError) as e:
        logger.debug("Rejected writing system import: %s", e)
        return None


__all__ = [
    'DIRECTIONS',
    'SCRIPT_TYPES',
    'Glyph',
    'GlyphMapping',
    'GlyphSegment',
    'WritingSystem',
    'generate_geometric_glyph',
    'generate_placeholder_glyphs',
    'create_default_mappings',
    'create_empty_writing_system',
    'with_glyphs',
    'render_text_as_glyphs',
    'export_writing_system',
    'import_writing_system',
]
