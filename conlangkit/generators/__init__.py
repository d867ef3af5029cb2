#!/usr/bin/env python3
"""
Word Generators
===============
Provides the deterministic generation layer:
- SeededRNG: reproducible random stream
- WordGenerator: phonotactic word builder
- Presets: ready-made phonologies loaded from YAML
"""

from .rng import SeededRNG
from .word_generator import (
    WordForm,
    WordGenerator,
    generate_words,
    generate_names,
    capitalize,
)
from .presets import (
    PhonologyPreset,
    load_presets,
    list_presets,
    get_preset,
)

__all__ = [
    'SeededRNG',
    'WordForm',
    'WordGenerator',
    'generate_words',
    'generate_names',
    'capitalize',
    'PhonologyPreset',
    'load_presets',
    'list_presets',
    'get_preset',
]
