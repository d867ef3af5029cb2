#!/usr/bin/env python3
"""
Conlangkit - Procedural Constructed-Language Toolkit
====================================================

Generates words, names and sentences for invented languages from a
declarative language definition, deterministically for a given seed.

Quick Start
-----------
    from conlangkit import load_definition, generate_words, generate_from_structured
    from conlangkit import parse_gloss_notation, StructuredInput

    definition = load_definition("elvish.yaml")

    # Vocabulary
    words = generate_words(42, 10, definition)

    # Sentences from glosses
    clause = parse_gloss_notation("S:cat[PL] V:see[PAST] O:dog")
    result = generate_from_structured(StructuredInput(clauses=(clause,)), definition, lexicon=[], seed=42)
    print(result.full_orthographic)

Modules
-------
    conlangkit.generators      - Seeded RNG, word/name generation, presets
    conlangkit.phonology       - Sound-change rules and orthography
    conlangkit.morphology      - Affixation, compounding, word order
    conlangkit.text_generator  - Gloss-to-language pipeline
    conlangkit.script          - Writing systems and glyph rendering
    conlangkit.definition      - Language definition records and loaders

CLI Usage
---------
    python -m conlangkit generate -n 10 --seed 7
    python -m conlangkit translate "S:cat[PL] V:see O:dog" -d elvish.yaml
    python -m conlangkit presets
"""

__version__ = "0.1.0"
__author__ = "Conlangkit"

# =============================================================================
# Submodule Imports
# =============================================================================

from . import generators
from . import morphology
from . import phonology
from . import script
from . import text_generator

# =============================================================================
# Public API
# =============================================================================

from .definition import (
    DefinitionError,
    LanguageDefinition,
    LexiconEntry,
    Affix,
    SyntaxConfig,
    load_definition,
    load_lexicon,
)
from .generators import (
    SeededRNG,
    WordForm,
    WordGenerator,
    generate_words,
    generate_names,
    get_preset,
    list_presets,
)
from .phonology import apply_rules, apply_orthography
from .morphology import (
    apply_affix,
    apply_affixes,
    apply_syntax,
    create_compound,
    reorder_clause,
)
from .text_generator import (
    GlossWord,
    GlossClause,
    StructuredInput,
    GenerationResult,
    generate_from_structured,
    transform_phrase,
    transform_simple_phrase,
    parse_gloss_notation,
    to_gloss_notation,
)
from .script import (
    WritingSystem,
    create_empty_writing_system,
    render_text_as_glyphs,
    export_writing_system,
    import_writing_system,
)

__all__ = [
    '__version__',
    # Definition
    'DefinitionError',
    'LanguageDefinition',
    'LexiconEntry',
    'Affix',
    'SyntaxConfig',
    'load_definition',
    'load_lexicon',
    # Generation
    'SeededRNG',
    'WordForm',
    'WordGenerator',
    'generate_words',
    'generate_names',
    'get_preset',
    'list_presets',
    # Phonology & morphology
    'apply_rules',
    'apply_orthography',
    'apply_affix',
    'apply_affixes',
    'apply_syntax',
    'create_compound',
    'reorder_clause',
    # Text
    'GlossWord',
    'GlossClause',
    'StructuredInput',
    'GenerationResult',
    'generate_from_structured',
    'transform_phrase',
    'transform_simple_phrase',
    'parse_gloss_notation',
    'to_gloss_notation',
    # Script
    'WritingSystem',
    'create_empty_writing_system',
    'render_text_as_glyphs',
    'export_writing_system',
    'import_writing_system',
]
