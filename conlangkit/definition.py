#!/usr/bin/env python3
"""
Language Definition
===================
Typed, immutable view of the loosely-typed definition payload a caller
stores for a language.

The payload is validated once, here, and turned into frozen records.
Every subsystem section is independently optional:

- phonology           consonant and vowel inventories
- phonotactics        weighted syllable templates, forbidden sequences
- orthography         phoneme -> grapheme table
- morphology          affixes, compound rules, syntax typology
- generationStyle     preferred/avoided phonemes, common edges, length bias
- phonologicalRules   ordered context-sensitive rewrite rules
- nameGenerators      person/place/faction decoration settings
- writingSystem       glyph set and glyph mappings

Keys are accepted in the stored camelCase form or in snake_case.

Usage:
    from conlangkit.definition import LanguageDefinition, load_definition

    definition = LanguageDefinition.from_dict(payload)
    definition = load_definition("elvish.yaml")
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from .script import WritingSystem


class DefinitionError(ValueError):
    """Raised when a definition or lexicon payload is malformed."""


# =============================================================================
# Vocabulary
# =============================================================================

AFFIX_TYPES = ('prefix', 'suffix', 'infix', 'circumfix')

GRAMMATICAL_CATEGORIES = (
    'number', 'tense', 'person', 'case', 'gender', 'mood', 'aspect',
    'voice', 'degree', 'negation', 'diminutive', 'augmentative',
    'possession', 'definiteness',
)

WORD_ORDERS = ('SVO', 'SOV', 'VSO', 'VOS', 'OSV', 'OVS', 'free')
ADJECTIVE_POSITIONS = ('before', 'after')
RULE_POSITIONS = ('initial', 'medial', 'final')
NAME_KINDS = ('person', 'place', 'faction')


# =============================================================================
# Records
# =============================================================================

@dataclass(frozen=True)
class Phonology:
    consonants: Tuple[str, ...] = ()
    vowels: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SyllableTemplate:
    """A C/V/literal pattern with a relative selection weight."""
    template: str
    weight: float = 1


@dataclass(frozen=True)
class Phonotactics:
    syllable_templates: Tuple[SyllableTemplate, ...] = ()
    forbidden_sequences: Tuple[str, ...] = ()


class FrozenMapping(dict):
    """Read-only dict, hashable so the records holding it stay hashable."""

    def _read_only(self, *args, **kwargs):
        raise TypeError(f"{type(self).__name__} is read-only")

    __setitem__ = __delitem__ = __ior__ = _read_only
    clear = pop = popitem = setdefault = update = _read_only

    def __hash__(self):
        return hash(frozenset(self.items()))

    def __reduce__(self):
        return type(self), (dict(self),)


@dataclass(frozen=True)
class Orthography:
    mappings: Dict[str, str] = field(default_factory=FrozenMapping)

    def __post_init__(self):
        object.__setattr__(self, 'mappings', FrozenMapping(self.mappings))


@dataclass(frozen=True)
class GenerationStyle:
    preferred_consonants: Tuple[str, ...] = ()
    preferred_vowels: Tuple[str, ...] = ()
    avoided_consonants: Tuple[str, ...] = ()
    avoided_vowels: Tuple[str, ...] = ()
    common_beginnings: Tuple[str, ...] = ()
    common_endings: Tuple[str, ...] = ()
    # syllable count (1-4) -> weight; empty means uniform 1-3
    syllable_length_distribution: Tuple[Tuple[int, float], ...] = ()


@dataclass(frozen=True)
class RuleContext:
    """Conditions a match site must satisfy before a rule rewrites it."""
    before: Tuple[str, ...] = ()       # one of these must immediately precede
    after: Tuple[str, ...] = ()        # one of these must immediately follow
    not_before: Tuple[str, ...] = ()
    not_after: Tuple[str, ...] = ()
    position: Optional[str] = None     # initial, medial or final

    @property
    def is_empty(self) -> bool:
        return not (self.before or self.after or self.not_before
                    or self.not_after or self.position)


@dataclass(frozen=True)
class PhonologicalRule:
    find: str
    replace: str = ''
    id: str = ''
    name: str = ''
    enabled: bool = True
    context: Optional[RuleContext] = None
    description: str = ''


@dataclass(frozen=True)
class NameGeneratorConfig:
    kind: str
    title_prefix: Tuple[str, ...] = ()
    descriptor_suffix: Tuple[str, ...] = ()
    prefixes: Tuple[str, ...] = ()
    suffixes: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Affix:
    type: str
    form: str
    category: str
    value: str = ''
    id: str = ''
    applies_to: Tuple[str, ...] = ()
    priority: int = 0
    description: str = ''


@dataclass(frozen=True)
class CompoundRule:
    id: str = ''
    name: str = ''
    pattern: Tuple[str, ...] = ()
    connector: Optional[str] = None
    head_position: str = 'last'
    description: str = ''


@dataclass(frozen=True)
class SyntaxConfig:
    word_order: str = 'SVO'
    adjective_position: str = 'before'
    adposition_type: str = 'preposition'
    gender_system: str = 'none'
    has_articles: bool = True
    definiteness_marking: str = 'article'
    plural_marking: str = 'suffix'
    possession_marking: str = 'affix'
    tense_marking: str = 'suffix'
    question_formation: str = 'intonation'
    negation_position: str = 'before-verb'


DEFAULT_SYNTAX = SyntaxConfig()


@dataclass(frozen=True)
class MorphologyConfig:
    affixes: Tuple[Affix, ...] = ()
    compound_rules: Tuple[CompoundRule, ...] = ()
    syntax: SyntaxConfig = DEFAULT_SYNTAX


@dataclass(frozen=True)
class LexiconEntry:
    """A known word of the language, keyed by its gloss."""
    gloss: str
    phonemic_form: Optional[str] = None
    orthographic_form: Optional[str] = None
    part_of_speech: Optional[str] = None
    tags: Tuple[str, ...] = ()
    notes: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LexiconEntry':
        if not isinstance(data, dict):
            raise DefinitionError(f"lexicon entry must be a mapping, got {type(data).__name__}")
        gloss = _get(data, 'gloss')
        if not isinstance(gloss, str) or not gloss:
            raise DefinitionError("lexicon entry requires a non-empty gloss")
        return cls(
            gloss=gloss,
            phonemic_form=_optional_str(_get(data, 'phonemic_form', 'phonemicForm', 'phonemic'),
                                        f"lexicon[{gloss}].phonemicForm"),
            orthographic_form=_optional_str(_get(data, 'orthographic_form', 'orthographicForm', 'orthographic'),
                                            f"lexicon[{gloss}].orthographicForm"),
            part_of_speech=_get(data, 'part_of_speech', 'partOfSpeech'),
            tags=_str_tuple(_get(data, 'tags', default=()), 'lexicon.tags'),
            notes=_get(data, 'notes'),
        )


@dataclass(frozen=True)
class LanguageDefinition:
    phonology: Optional[Phonology] = None
    phonotactics: Optional[Phonotactics] = None
    orthography: Optional[Orthography] = None
    morphology: Optional[MorphologyConfig] = None
    generation_style: Optional[GenerationStyle] = None
    phonological_rules: Tuple[PhonologicalRule, ...] = ()
    name_generators: Tuple[NameGeneratorConfig, ...] = ()
    writing_system: Optional[WritingSystem] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'LanguageDefinition':
        """Validate a raw payload and build the typed definition."""
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise DefinitionError(f"definition must be a mapping, got {type(data).__name__}")

        writing_system = None
        ws_data = _get(data, 'writingSystem', 'writing_system')
        if ws_data is not None:
            try:
                writing_system = WritingSystem.from_dict(ws_data)
            except (TypeError, ValueError, KeyError) as e:
                raise DefinitionError(f"writingSystem: {e}") from e

        return cls(
            phonology=_parse_optional(data, _parse_phonology, 'phonology'),
            phonotactics=_parse_optional(data, _parse_phonotactics, 'phonotactics'),
            orthography=_parse_optional(data, _parse_orthography, 'orthography'),
            morphology=_parse_optional(data, _parse_morphology, 'morphology'),
            generation_style=_parse_optional(data, _parse_style, 'generationStyle', 'generation_style'),
            phonological_rules=tuple(
                _parse_rule(r) for r in _list(_get(data, 'phonologicalRules', 'phonological_rules', default=[]),
                                              'phonologicalRules')
            ),
            name_generators=tuple(
                _parse_name_generator(n) for n in _list(_get(data, 'nameGenerators', 'name_generators', default=[]),
                                                        'nameGenerators')
            ),
            writing_system=writing_system,
        )

    @property
    def affixes(self) -> Tuple[Affix, ...]:
        return self.morphology.affixes if self.morphology else ()

    @property
    def syntax(self) -> SyntaxConfig:
        return self.morphology.syntax if self.morphology else DEFAULT_SYNTAX

    @property
    def orthography_mappings(self) -> Dict[str, str]:
        return self.orthography.mappings if self.orthography else {}

    def name_generator(self, kind: str) -> Optional[NameGeneratorConfig]:
        for config in self.name_generators:
            if config.kind == kind:
                return config
        return None


DefinitionLike = Union[LanguageDefinition, Dict[str, Any], None]


def as_definition(definition: DefinitionLike) -> LanguageDefinition:
    """Accept either a parsed definition or a raw payload."""
    if isinstance(definition, LanguageDefinition):
        return definition
    return LanguageDefinition.from_dict(definition)


def as_lexicon(lexicon) -> List[LexiconEntry]:
    """Accept LexiconEntry records, raw row dicts, or a gloss -> form mapping."""
    if not lexicon:
        return []
    if isinstance(lexicon, dict):
        entries = []
        for gloss, value in lexicon.items():
            if isinstance(value, dict):
                entries.append(LexiconEntry.from_dict({'gloss': gloss, **value}))
            else:
                entries.append(LexiconEntry(gloss=str(gloss),
                                            phonemic_form=_optional_str(value, f"lexicon[{gloss}]")))
        return entries
    return [e if isinstance(e, LexiconEntry) else LexiconEntry.from_dict(e) for e in lexicon]


# =============================================================================
# File Loaders
# =============================================================================

def _load_payload(path: Union[str, Path]) -> Any:
    path = Path(path)
    text = path.read_text(encoding='utf-8')
    if path.suffix.lower() == '.json':
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise DefinitionError(f"{path}: invalid JSON ({e})") from e
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DefinitionError(f"{path}: invalid YAML ({e})") from e


def load_definition(path: Union[str, Path]) -> LanguageDefinition:
    """Load a language definition from a YAML or JSON file."""
    return LanguageDefinition.from_dict(_load_payload(path))


def load_lexicon(path: Union[str, Path]) -> List[LexiconEntry]:
    """Load lexicon entries from a YAML or JSON file."""
    return as_lexicon(_load_payload(path))


# =============================================================================
# Section Parsers
# =============================================================================

_ABSENT = object()


def _get(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return default


def _list(value: Any, context: str) -> list:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise DefinitionError(f"{context} must be a list, got {type(value).__name__}")
    return list(value)


def _str_tuple(value: Any, context: str) -> Tuple[str, ...]:
    if isinstance(value, str):
        return (value,) if value else ()
    items = _list(value, context)
    for item in items:
        if not isinstance(item, str):
            raise DefinitionError(f"{context} entries must be strings, got {item!r}")
    return tuple(items)


def _optional_str(value: Any, context: str) -> Optional[str]:
    if value is not None and not isinstance(value, str):
        raise DefinitionError(f"{context} must be a string, got {value!r}")
    return value


def _mapping(value: Any, context: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise DefinitionError(f"{context} must be a mapping, got {type(value).__name__}")
    return value


def _parse_optional(data: Dict[str, Any], parser, *keys: str):
    value = _get(data, *keys, default=_ABSENT)
    if value is _ABSENT or value is None:
        return None
    return parser(_mapping(value, keys[0]))


def _parse_phonology(data: Dict[str, Any]) -> Phonology:
    return Phonology(
        consonants=_str_tuple(data.get('consonants', ()), 'phonology.consonants'),
        vowels=_str_tuple(data.get('vowels', ()), 'phonology.vowels'),
    )


def _parse_template(item: Any) -> SyllableTemplate:
    # Legacy payloads store bare template strings
    if isinstance(item, str):
        return SyllableTemplate(template=item, weight=1)
    item = _mapping(item, 'phonotactics.syllableTemplates[]')
    template = item.get('template')
    if not isinstance(template, str):
        raise DefinitionError(f"syllable template requires a template string, got {item!r}")
    weight = item.get('weight', 1)
    if weight is None:
        weight = 1
    if not isinstance(weight, (int, float)) or isinstance(weight, bool) or weight < 0:
        raise DefinitionError(f"syllable template weight must be a number >= 0, got {weight!r}")
    return SyllableTemplate(template=template, weight=weight)


def _parse_phonotactics(data: Dict[str, Any]) -> Phonotactics:
    templates = _list(_get(data, 'syllableTemplates', 'syllable_templates', default=[]),
                      'phonotactics.syllableTemplates')
    return Phonotactics(
        syllable_templates=tuple(_parse_template(t) for t in templates),
        forbidden_sequences=tuple(
            s for s in _str_tuple(_get(data, 'forbiddenSequences', 'forbidden_sequences', default=()),
                                  'phonotactics.forbiddenSequences')
            if s
        ),
    )


def _parse_orthography(data: Dict[str, Any]) -> Orthography:
    mappings = _mapping(data.get('mappings') or {}, 'orthography.mappings')
    for key, value in mappings.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise DefinitionError(f"orthography mapping must be string -> string, got {key!r}: {value!r}")
    return Orthography(mappings=dict(mappings))


def _parse_style(data: Dict[str, Any]) -> GenerationStyle:
    distribution = []
    raw_dist = _get(data, 'syllableLengthDistribution', 'syllable_length_distribution')
    if raw_dist:
        for count, weight in _mapping(raw_dist, 'generationStyle.syllableLengthDistribution').items():
            try:
                count = int(count)
            except (TypeError, ValueError) as e:
                raise DefinitionError(f"syllable count must be an integer, got {count!r}") from e
            if not 1 <= count <= 4:
                raise DefinitionError(f"syllable count must be between 1 and 4, got {count}")
            if not isinstance(weight, (int, float)) or weight < 0:
                raise DefinitionError(f"syllable length weight must be a number >= 0, got {weight!r}")
            distribution.append((count, weight))
    distribution.sort()

    def strings(*keys):
        return _str_tuple(_get(data, *keys, default=()), f"generationStyle.{keys[0]}")

    return GenerationStyle(
        preferred_consonants=strings('preferredConsonants', 'preferred_consonants'),
        preferred_vowels=strings('preferredVowels', 'preferred_vowels'),
        avoided_consonants=strings('avoidedConsonants', 'avoided_consonants'),
        avoided_vowels=strings('avoidedVowels', 'avoided_vowels'),
        common_beginnings=tuple(s for s in strings('commonBeginnings', 'common_beginnings') if s),
        common_endings=tuple(s for s in strings('commonEndings', 'common_endings') if s),
        syllable_length_distribution=tuple(distribution),
    )


def _parse_context(data: Any) -> Optional[RuleContext]:
    if data is None:
        return None
    data = _mapping(data, 'phonologicalRules[].context')
    position = data.get('position')
    if position is not None and position not in RULE_POSITIONS:
        raise DefinitionError(f"rule position must be one of {RULE_POSITIONS}, got {position!r}")
    context = RuleContext(
        before=_str_tuple(data.get('before', ()), 'context.before'),
        after=_str_tuple(data.get('after', ()), 'context.after'),
        not_before=_str_tuple(_get(data, 'notBefore', 'not_before', default=()), 'context.notBefore'),
        not_after=_str_tuple(_get(data, 'notAfter', 'not_after', default=()), 'context.notAfter'),
        position=position,
    )
    return None if context.is_empty else context


def _parse_rule(data: Any) -> PhonologicalRule:
    data = _mapping(data, 'phonologicalRules[]')
    find = data.get('find')
    if not isinstance(find, str):
        raise DefinitionError(f"phonological rule requires a find string, got {data!r}")
    replace = data.get('replace') or ''
    if not isinstance(replace, str):
        raise DefinitionError(f"phonological rule replace must be a string, got {replace!r}")
    return PhonologicalRule(
        find=find,
        replace=replace,
        id=str(data.get('id') or ''),
        name=str(data.get('name') or ''),
        enabled=bool(data.get('enabled', True)),
        context=_parse_context(data.get('context')),
        description=str(data.get('description') or ''),
    )


def _parse_name_generator(data: Any) -> NameGeneratorConfig:
    data = _mapping(data, 'nameGenerators[]')
    kind = _get(data, 'type', 'kind')
    if kind not in NAME_KINDS:
        raise DefinitionError(f"name generator type must be one of {NAME_KINDS}, got {kind!r}")
    return NameGeneratorConfig(
        kind=kind,
        title_prefix=_str_tuple(_get(data, 'titlePrefix', 'title_prefix', default=()), 'titlePrefix'),
        descriptor_suffix=_str_tuple(_get(data, 'descriptorSuffix', 'descriptor_suffix', default=()),
                                     'descriptorSuffix'),
        prefixes=_str_tuple(data.get('prefixes', ()), 'nameGenerators[].prefixes'),
        suffixes=_str_tuple(data.get('suffixes', ()), 'nameGenerators[].suffixes'),
    )


def parse_affix(data: Any) -> Affix:
    """Build an Affix from its stored form."""
    if isinstance(data, Affix):
        return data
    data = _mapping(data, 'morphology.affixes[]')
    affix_type = data.get('type')
    if affix_type not in AFFIX_TYPES:
        raise DefinitionError(f"affix type must be one of {AFFIX_TYPES}, got {affix_type!r}")
    category = data.get('category')
    if category not in GRAMMATICAL_CATEGORIES:
        raise DefinitionError(f"unknown grammatical category {category!r}")
    form = data.get('form')
    if not isinstance(form, str):
        raise DefinitionError(f"affix form must be a string, got {form!r}")
    priority = data.get('priority') or 0
    if not isinstance(priority, (int, float)):
        raise DefinitionError(f"affix priority must be a number, got {priority!r}")
    return Affix(
        type=affix_type,
        form=form,
        category=category,
        value=str(data.get('value') or ''),
        id=str(data.get('id') or ''),
        applies_to=_str_tuple(_get(data, 'appliesTo', 'applies_to', default=()), 'affix.appliesTo'),
        priority=priority,
        description=str(data.get('description') or ''),
    )


def _parse_compound_rule(data: Any) -> CompoundRule:
    data = _mapping(data, 'morphology.compoundRules[]')
    connector = data.get('connector')
    if connector is not None and not isinstance(connector, str):
        raise DefinitionError(f"compound connector must be a string, got {connector!r}")
    return CompoundRule(
        id=str(data.get('id') or ''),
        name=str(data.get('name') or ''),
        pattern=_str_tuple(data.get('pattern', ()), 'compoundRules[].pattern'),
        connector=connector,
        head_position=_get(data, 'headPosition', 'head_position', default='last'),
        description=str(data.get('description') or ''),
    )


_SYNTAX_KEYS = {
    'word_order': 'wordOrder',
    'adjective_position': 'adjectivePosition',
    'adposition_type': 'adpositionType',
    'gender_system': 'genderSystem',
    'has_articles': 'hasArticles',
    'definiteness_marking': 'definitenessMarking',
    'plural_marking': 'pluralMarking',
    'possession_marking': 'possessionMarking',
    'tense_marking': 'tenseMarking',
    'question_formation': 'questionFormation',
    'negation_position': 'negationPosition',
}


def parse_syntax(data: Any) -> SyntaxConfig:
    """Build a SyntaxConfig, filling unspecified settings from the defaults."""
    if data is None:
        return DEFAULT_SYNTAX
    if isinstance(data, SyntaxConfig):
        return data
    data = _mapping(data, 'morphology.syntax')
    values = {}
    for attr, camel in _SYNTAX_KEYS.items():
        value = _get(data, camel, attr, default=_ABSENT)
        if value is not _ABSENT and value is not None:
            values[attr] = value
    syntax = SyntaxConfig(**values)
    if syntax.word_order not in WORD_ORDERS:
        raise DefinitionError(f"word order must be one of {WORD_ORDERS}, got {syntax.word_order!r}")
    if syntax.adjective_position not in ADJECTIVE_POSITIONS:
        raise DefinitionError(
            f"adjective position must be one of {ADJECTIVE_POSITIONS}, got {syntax.adjective_position!r}"
        )
    return syntax


def _parse_morphology(data: Dict[str, Any]) -> MorphologyConfig:
    return MorphologyConfig(
        affixes=tuple(parse_affix(a) for a in _list(data.get('affixes'), 'morphology.affixes')),
        compound_rules=tuple(
            _parse_compound_rule(r)
            for r in _list(_get(data, 'compoundRules', 'compound_rules', default=[]), 'morphology.compoundRules')
        ),
        syntax=parse_syntax(data.get('syntax')),
    )


__all__ = [
    'DefinitionError',
    'AFFIX_TYPES',
    'GRAMMATICAL_CATEGORIES',
    'WORD_ORDERS',
    'ADJECTIVE_POSITIONS',
    'NAME_KINDS',
    'Phonology',
    'SyllableTemplate',
    'Phonotactics',
    'FrozenMapping',
    'Orthography',
    'GenerationStyle',
    'RuleContext',
    'PhonologicalRule',
    'NameGeneratorConfig',
    'Affix',
    'CompoundRule',
    'SyntaxConfig',
    'DEFAULT_SYNTAX',
    'MorphologyConfig',
    'LexiconEntry',
    'LanguageDefinition',
    'as_definition',
    'as_lexicon',
    'parse_affix',
    'parse_syntax',
    'load_definition',
    'load_lexicon',
]
