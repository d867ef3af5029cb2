#!/usr/bin/env python3
"""
Word Generator
==============
Builds phonemic word forms from a language's inventory and phonotactics.

Pipeline for one word:
1. Draw a syllable count (style distribution, else uniform 1-3)
2. Per syllable, pick a weighted template and fill its C/V slots with
   style-biased phonemes; other template characters are literals
3. Occasionally splice a common beginning/ending over the word edges
4. Run the phonological rules
5. Reject words containing a forbidden sequence and retry; after
   max_attempts the last candidate is kept so generation always ends

Usage:
    from conlangkit.generators.word_generator import generate_words, generate_names

    words = generate_words(42, 10, definition)
    names = generate_names(42, 5, 'person', definition)
"""

import logging
from dataclasses import dataclass, asdict
from typing import Dict, List

from ..definition import (
    DefinitionLike,
    GenerationStyle,
    NAME_KINDS,
    NameGeneratorConfig,
    Phonology,
    Phonotactics,
    SyllableTemplate,
    as_definition,
)
from ..phonology import apply_orthography, apply_rules
from ..settings import require_setting
from .rng import SeededRNG

logger = logging.getLogger(__name__)


@dataclass
class WordForm:
    """A generated word in both notations."""
    phonemic: str
    orthographic: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


# =============================================================================
# Defaults
# =============================================================================

def default_phonology() -> Phonology:
    cfg = require_setting('generation.default_phonology')
    return Phonology(consonants=tuple(cfg.get('consonants', ())),
                     vowels=tuple(cfg.get('vowels', ())))


def default_phonotactics() -> Phonotactics:
    templates = require_setting('generation.default_templates')
    return Phonotactics(
        syllable_templates=tuple(
            SyllableTemplate(template=t['template'], weight=t.get('weight', 1)) for t in templates
        ),
    )


def has_forbidden_sequence(word: str, forbidden) -> bool:
    return any(seq in word for seq in forbidden)


def capitalize(word: str) -> str:
    """Upper-case the first character only; the rest is left as written."""
    return word[:1].upper() + word[1:]


# =============================================================================
# Word Generator
# =============================================================================

class WordGenerator:
    """
    Phonotactic word builder bound to one definition and one RNG.

    The RNG is owned by the caller's generation run; the generator keeps
    no other state between words.
    """

    def __init__(self, definition: DefinitionLike, rng: SeededRNG):
        definition = as_definition(definition)
        self.definition = definition
        self.rng = rng

        self.phonology = definition.phonology or default_phonology()
        self.phonotactics = definition.phonotactics or default_phonotactics()
        self.style = definition.generation_style or GenerationStyle()
        self.rules = definition.phonological_rules
        self.orthography = definition.orthography

        self.max_attempts = int(require_setting('generation.max_attempts'))
        self.splice_probability = float(require_setting('generation.splice_probability'))

        if not self.phonotactics.syllable_templates:
            raise ValueError("No syllable templates defined")

    def syllable_count(self) -> int:
        distribution = self.style.syllable_length_distribution
        if distribution:
            items = [{'count': count, 'weight': weight} for count, weight in distribution]
            return self.rng.pick_weighted(items)['count']
        return self.rng.next_int(1, 4)

    def build_syllable(self, template: SyllableTemplate) -> str:
        """Fill one template; empty inventories leave their slots empty."""
        result = []
        for char in template.template:
            if char == 'C':
                if not self.phonology.consonants:
                    continue
                result.append(self.rng.pick_with_preference(
                    self.phonology.consonants,
                    self.style.preferred_consonants,
                    self.style.avoided_consonants,
                ))
            elif char == 'V':
                if not self.phonology.vowels:
                    continue
                result.append(self.rng.pick_with_preference(
                    self.phonology.vowels,
                    self.style.preferred_vowels,
                    self.style.avoided_vowels,
                ))
            else:
                result.append(char)
        return ''.join(result)

    def _splice_edges(self, word: str) -> str:
        """Overwrite the word's start/end with a common beginning/ending."""
        if self.style.common_beginnings and self.rng.next() < self.splice_probability:
            beginning = self.rng.pick(self.style.common_beginnings)
            word = beginning + word[len(beginning):] if len(word) > len(beginning) else beginning + word

        if self.style.common_endings and self.rng.next() < self.splice_probability:
            ending = self.rng.pick(self.style.common_endings)
            word = word[:-len(ending)] + ending if ending and len(word) > len(ending) else word + ending

        return word

    def build_candidate(self) -> str:
        syllables = []
        for _ in range(self.syllable_count()):
            template = self.rng.pick_weighted(self.phonotactics.syllable_templates)
            syllables.append(self.build_syllable(template))
        word = self._splice_edges(''.join(syllables))
        return apply_rules(word, self.rules)

    def build_word(self) -> str:
        """Build one phonemic word, retrying on forbidden sequences."""
        forbidden = self.phonotactics.forbidden_sequences
        word = ''
        for _ in range(self.max_attempts):
            word = self.build_candidate()
            if not has_forbidden_sequence(word, forbidden):
                return word
        logger.debug("No clean word after %d attempts, keeping %r", self.max_attempts, word)
        return word

    def to_written(self, phonemic: str) -> str:
        return apply_orthography(phonemic, self.orthography)

    def generate(self, count: int) -> List[WordForm]:
        words = []
        for _ in range(count):
            phonemic = self.build_word()
            words.append(WordForm(phonemic=phonemic, orthographic=self.to_written(phonemic)))
        return words


def generate_words(seed: int, count: int, definition: DefinitionLike) -> List[WordForm]:
    """
    Generate words deterministically.

    Parameters
    ----------
    seed : int
        Seed of the run; the same seed and definition give the same list
    count : int
        Number of words
    definition : LanguageDefinition or dict
        Language definition (raw payloads are validated first)

    Returns
    -------
    list[WordForm]
        Phonemic and orthographic forms
    """
    generator = WordGenerator(definition, SeededRNG(seed))
    return generator.generate(count)


# =============================================================================
# Names
# =============================================================================

def _decorate(name: str, config: NameGeneratorConfig, rng: SeededRNG, probability: float) -> str:
    if config.title_prefix and rng.next() < probability:
        name = f"{rng.pick(config.title_prefix)} {name}"
    if config.descriptor_suffix and rng.next() < probability:
        name = f"{name} {rng.pick(config.descriptor_suffix)}"
    return name


def generate_names(seed: int,
                   count: int,
                   kind: str,
                   definition: DefinitionLike) -> List[WordForm]:
    """
    Generate proper names for persons, places or factions.

    Names are ordinary generated words with the kind's phonemic
    prefixes/suffixes attached, capitalized in writing, and sometimes
    decorated with a title ("Lord Kalem") or a descriptor
    ("Kalem of the North"). Decorations appear in the written form only.
    """
    if kind not in NAME_KINDS:
        raise ValueError(f"Unknown name kind '{kind}'. Available kinds: {', '.join(NAME_KINDS)}")

    definition = as_definition(definition)
    rng = SeededRNG(seed)
    generator = WordGenerator(definition, rng)
    config = definition.name_generator(kind) or NameGeneratorConfig(kind=kind)
    probability = float(require_setting('names.decoration_probability'))

    names = []
    for _ in range(count):
        phonemic = generator.build_word()
        if config.prefixes:
            phonemic = rng.pick(config.prefixes) + phonemic
        if config.suffixes:
            phonemic = phonemic + rng.pick(config.suffixes)

        written = capitalize(generator.to_written(phonemic))
        names.append(WordForm(phonemic=phonemic,
                              orthographic=_decorate(written, config, rng, probability)))
    return names


__all__ = [
    'WordForm',
    'WordGenerator',
    'generate_words',
    'generate_names',
    'default_phonology',
    'default_phonotactics',
    'has_forbidden_sequence',
    'capitalize',
]
