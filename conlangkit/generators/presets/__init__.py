#!/usr/bin/env python3
"""
Phonology Preset Loader
=======================
Loads ready-made sound inventories from YAML.

Usage:
    from conlangkit.generators.presets import get_preset, list_presets

    print(list_presets())
    definition = get_preset('Elvish').to_definition()
"""

import yaml
from pathlib import Path
from typing import Dict, List, Tuple, Any, Optional
from dataclasses import dataclass
from functools import lru_cache

from ...definition import LanguageDefinition, Phonology, Phonotactics, SyllableTemplate


# =============================================================================
# Configuration Path
# =============================================================================

PRESETS_DIR = Path(__file__).parent


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class PhonologyPreset:
    """A named inventory plus phonotactics."""
    name: str
    description: str
    phonology: Phonology
    phonotactics: Phonotactics

    def to_definition(self) -> LanguageDefinition:
        """Definition carrying only this preset's sounds and shapes."""
        return LanguageDefinition(phonology=self.phonology, phonotactics=self.phonotactics)


# =============================================================================
# Loader Functions
# =============================================================================

def _load_yaml(filename: str) -> Dict[str, Any]:
    """Load a YAML file from the presets directory."""
    filepath = PRESETS_DIR / filename
    if not filepath.exists():
        raise FileNotFoundError(f"Preset config not found: {filepath}")

    with open(filepath, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f)


def _build_preset(raw: Dict[str, Any]) -> PhonologyPreset:
    return PhonologyPreset(
        name=raw['name'],
        description=raw.get('description', ''),
        phonology=Phonology(
            consonants=tuple(raw.get('consonants', [])),
            vowels=tuple(raw.get('vowels', [])),
        ),
        phonotactics=Phonotactics(
            syllable_templates=tuple(
                SyllableTemplate(template=t['template'], weight=t.get('weight', 1))
                for t in raw.get('syllable_templates', [])
            ),
            forbidden_sequences=tuple(raw.get('forbidden_sequences', [])),
        ),
    )


@lru_cache(maxsize=1)
def load_presets() -> Tuple[PhonologyPreset, ...]:
    """Load all phonology presets, in file order."""
    raw = _load_yaml('phonology.yaml')
    return tuple(_build_preset(p) for p in raw.get('presets', []))


@lru_cache(maxsize=1)
def load_syllable_templates() -> Dict[str, str]:
    """Common syllable template strings with a short description each."""
    return dict(_load_yaml('phonology.yaml').get('syllable_templates', {}))


def list_presets() -> List[str]:
    return [p.name for p in load_presets()]


def get_preset(name: str) -> Optional[PhonologyPreset]:
    """Look up a preset by name (case-insensitive)."""
    wanted = name.lower()
    for preset in load_presets():
        if preset.name.lower() == wanted:
            return preset
    return None


def reload_presets():
    """Clear cached presets so edited YAML is picked up."""
    load_presets.cache_clear()
    load_syllable_templates.cache_clear()


__all__ = [
    'PhonologyPreset',
    'load_presets',
    'load_syllable_templates',
    'list_presets',
    'get_preset',
    'reload_presets',
]
