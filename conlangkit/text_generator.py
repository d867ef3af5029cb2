#!/usr/bin/env python3
"""
Text Generator
==============
Structured gloss-to-conlang translation.

Callers describe what to say as glosses ("cat", "see") annotated with a
grammatical role and features; the generator renders it in the language:

1. Look the gloss up in the lexicon (case-insensitive). A miss produces
   a deterministic placeholder word and a warning.
2. Pick the affixes whose category/value match the word's features and
   whose part-of-speech filter admits it; apply them by priority.
3. Reorder each clause per the syntax settings.
4. Join words with spaces and clauses with '. ', in phonemic and written
   form, alongside an interlinear gloss and statistics.

A compact text notation covers the same structure:

    S:cat[PL] V:see[PAST.3RD] DET:the O:dog

Usage:
    from conlangkit.text_generator import generate_from_structured, parse_gloss_notation

    clause = parse_gloss_notation("S:cat[PL] V:see[PAST] O:dog")
    result = generate_from_structured(StructuredInput(clauses=(clause,)), definition, lexicon, seed=42)
    print(result.full_orthographic)
"""

import logging
import re
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from .definition import (
    Affix,
    DefinitionLike,
    FrozenMapping,
    LanguageDefinition,
    LexiconEntry,
    as_definition,
    as_lexicon,
)
from .generators.word_generator import WordForm, generate_words
from .morphology import affix_label, apply_affix, reorder_clause, sort_by_priority
from .phonology import apply_orthography

logger = logging.getLogger(__name__)

ROLES = ('S', 'V', 'O', 'ADJ', 'ADV', 'DET', 'PREP', 'CONJ', 'PART', 'OTHER')
CLAUSE_TYPES = ('declarative', 'interrogative', 'imperative', 'exclamatory')

ROLE_PARTS_OF_SPEECH = {
    'S': 'noun',
    'O': 'noun',
    'V': 'verb',
    'ADJ': 'adjective',
    'ADV': 'adverb',
    'DET': 'determiner',
    'PREP': 'preposition',
    'CONJ': 'conjunction',
    'PART': 'particle',
}

BOOLEAN_CATEGORIES = ('negation', 'diminutive', 'augmentative')

# Order features are listed in interlinear glosses
FEATURE_ORDER = (
    'number', 'tense', 'aspect', 'mood', 'person', 'case', 'gender',
    'definiteness', 'possession', 'voice', 'degree',
    'negation', 'diminutive', 'augmentative',
)

FallbackGenerator = Callable[[str], Union[WordForm, Dict[str, str]]]


# =============================================================================
# Input Data Classes
# =============================================================================

@dataclass(frozen=True)
class GlossWord:
    """One word of the structured input."""
    gloss: str
    role: str = 'OTHER'
    part_of_speech: str = 'other'
    features: Dict[str, Any] = field(default_factory=FrozenMapping)
    id: str = ''
    modifies: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'features', FrozenMapping(self.features))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GlossWord':
        role = str(data.get('role') or 'OTHER').upper()
        if role not in ROLES:
            role = 'OTHER'
        return cls(
            gloss=str(data.get('gloss', '')),
            role=role,
            part_of_speech=data.get('partOfSpeech') or data.get('part_of_speech')
            or ROLE_PARTS_OF_SPEECH.get(role, 'other'),
            features=dict(data.get('features') or {}),
            id=str(data.get('id') or ''),
            modifies=data.get('modifies'),
        )


@dataclass(frozen=True)
class GlossClause:
    words: Tuple[GlossWord, ...] = ()
    clause_type: str = 'declarative'
    id: str = ''
    is_subordinate: bool = False
    subordinate_type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GlossClause':
        return cls(
            words=tuple(w if isinstance(w, GlossWord) else GlossWord.from_dict(w)
                        for w in data.get('words') or ()),
            clause_type=data.get('clauseType') or data.get('clause_type') or 'declarative',
            id=str(data.get('id') or ''),
            is_subordinate=bool(data.get('isSubordinate', data.get('is_subordinate', False))),
            subordinate_type=data.get('subordinateType') or data.get('subordinate_type'),
        )


@dataclass(frozen=True)
class StructuredInput:
    clauses: Tuple[GlossClause, ...] = ()
    context: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StructuredInput':
        return cls(
            clauses=tuple(c if isinstance(c, GlossClause) else GlossClause.from_dict(c)
                          for c in data.get('clauses') or ()),
            context=data.get('context'),
        )


def as_structured_input(value: Union[StructuredInput, GlossClause, Dict[str, Any]]) -> StructuredInput:
    if isinstance(value, StructuredInput):
        return value
    if isinstance(value, GlossClause):
        return StructuredInput(clauses=(value,))
    return StructuredInput.from_dict(value)


# =============================================================================
# Result Data Classes
# =============================================================================

@dataclass
class GeneratedWord:
    original: GlossWord
    base_form: str
    inflected_form: str
    orthographic_form: str
    affixes_applied: List[str] = field(default_factory=list)
    is_from_lexicon: bool = False
    warnings: List[str] = field(default_factory=list)

    @property
    def role(self) -> str:
        return self.original.role


@dataclass
class GeneratedClause:
    original: GlossClause
    words: List[GeneratedWord]
    reordered_words: List[GeneratedWord]
    phonemic_output: str
    orthographic_output: str
    gloss: str


@dataclass
class GenerationStats:
    total_words: int = 0
    from_lexicon: int = 0
    generated: int = 0
    affixes_applied: int = 0


@dataclass
class GenerationResult:
    clauses: List[GeneratedClause]
    full_phonemic: str
    full_orthographic: str
    full_gloss: str
    warnings: List[str]
    stats: GenerationStats


# =============================================================================
# Shared Helpers
# =============================================================================

def gloss_checksum(gloss: str) -> int:
    """Sum of the gloss's character codes, used to derive per-gloss seeds."""
    return sum(ord(c) for c in gloss)


def make_placeholder_generator(definition: DefinitionLike, seed: int) -> FallbackGenerator:
    """
    Fallback for glosses missing from the lexicon.

    Each gloss gets its own seed (base seed + gloss checksum), so the same
    gloss always yields the same placeholder regardless of its position.
    """
    definition = as_definition(definition)

    def generate(gloss: str) -> WordForm:
        return generate_words(seed + gloss_checksum(gloss), 1, definition)[0]

    return generate


def _lexicon_map(lexicon) -> Dict[str, LexiconEntry]:
    return {entry.gloss.lower(): entry for entry in as_lexicon(lexicon)}


def _lookup(lexicon_map: Dict[str, LexiconEntry], gloss: str) -> Optional[LexiconEntry]:
    entry = lexicon_map.get(gloss.lower())
    if entry is not None and entry.phonemic_form:
        return entry
    return None


def _form_of(word: Union[WordForm, Dict[str, str]]) -> WordForm:
    if isinstance(word, WordForm):
        return word
    return WordForm(phonemic=word.get('phonemic', ''), orthographic=word.get('orthographic', ''))


def _feature_matches(affix: Affix, features: Dict[str, Any]) -> bool:
    value = features.get(affix.category)
    if value is None or value is False or value == '':
        return False
    if affix.category in BOOLEAN_CATEGORIES:
        return bool(value)
    if affix.category == 'person':
        # '1st' matches '1st-singular'
        return str(value) in affix.value
    return affix.value == value


def find_affixes_for_features(affixes: Iterable[Affix],
                              features: Dict[str, Any],
                              part_of_speech: Optional[str]) -> List[Affix]:
    """Affixes marking the given features, sorted by priority."""
    matches = []
    for affix in affixes:
        if affix.applies_to and part_of_speech and part_of_speech not in affix.applies_to:
            continue
        if _feature_matches(affix, features):
            matches.append(affix)
    return sort_by_priority(matches)


def role_to_part_of_speech(role: str) -> Optional[str]:
    if role in ('S', 'O', 'V', 'ADJ', 'ADV'):
        return ROLE_PARTS_OF_SPEECH[role]
    return None


def interlinear_gloss(words: Iterable[GlossWord]) -> str:
    """Render words as gloss[FEATURE.FEATURE] tokens."""
    tokens = []
    for word in words:
        tags = []
        for name in FEATURE_ORDER:
            value = word.features.get(name)
            if value is None or value is False or value == '':
                continue
            if name in BOOLEAN_CATEGORIES:
                tags.append(FEATURE_ABBREVIATIONS[(name, True)])
            else:
                tags.append(str(value).upper())
        tokens.append(f"{word.gloss}[{'.'.join(tags)}]" if tags else word.gloss)
    return ' '.join(tokens)


# =============================================================================
# Structured Generation
# =============================================================================

def _generate_word(word: GlossWord,
                   definition: LanguageDefinition,
                   lexicon_map: Dict[str, LexiconEntry],
                   fallback: FallbackGenerator,
                   stats: GenerationStats) -> GeneratedWord:
    warnings = []

    entry = _lookup(lexicon_map, word.gloss)
    if entry is not None:
        base_form = entry.phonemic_form
        is_from_lexicon = True
        stats.from_lexicon += 1
    else:
        base_form = _form_of(fallback(word.gloss)).phonemic or word.gloss
        is_from_lexicon = False
        stats.generated += 1
        warnings.append(f'"{word.gloss}" not in lexicon, generated placeholder')
        logger.debug("Generated placeholder %r for gloss %r", base_form, word.gloss)

    matching = find_affixes_for_features(definition.affixes, word.features, word.part_of_speech)
    inflected = base_form
    applied = []
    for affix in matching:
        inflected = apply_affix(inflected, affix)
        applied.append(f"{affix_label(affix)}({affix.category}:{affix.value})")
    stats.affixes_applied += len(applied)

    if word.features.get('number') == 'plural' and not any(a.category == 'number' for a in matching):
        warnings.append("No plural affix available")
    tense = word.features.get('tense')
    if tense and not any(a.category == 'tense' for a in matching):
        warnings.append(f"No {tense} tense affix available")

    return GeneratedWord(
        original=word,
        base_form=base_form,
        inflected_form=inflected,
        orthographic_form=apply_orthography(inflected, definition.orthography),
        affixes_applied=applied,
        is_from_lexicon=is_from_lexicon,
        warnings=warnings,
    )


def generate_from_structured(structured_input: Union[StructuredInput, GlossClause, Dict[str, Any]],
                             definition: DefinitionLike,
                             lexicon=None,
                             seed: int = 0) -> GenerationResult:
    """
    Render structured glosses in the language.

    Parameters
    ----------
    structured_input : StructuredInput, GlossClause or dict
        Clauses to render
    definition : LanguageDefinition or dict
        Language definition
    lexicon : list, optional
        LexiconEntry records or raw rows; a gloss -> phonemic dict also works
    seed : int
        Base seed for placeholder words

    Returns
    -------
    GenerationResult
        Per-clause output, joined output, de-duplicated warnings, stats
    """
    structured_input = as_structured_input(structured_input)
    definition = as_definition(definition)
    lexicon_map = _lexicon_map(lexicon)
    fallback = make_placeholder_generator(definition, seed)
    syntax = definition.syntax

    stats = GenerationStats()
    all_warnings: List[str] = []
    clauses = []

    for clause in structured_input.clauses:
        words = [_generate_word(w, definition, lexicon_map, fallback, stats) for w in clause.words]
        for word in words:
            all_warnings.extend(word.warnings)

        reordered = reorder_clause(words, syntax)
        clauses.append(GeneratedClause(
            original=clause,
            words=words,
            reordered_words=reordered,
            phonemic_output=' '.join(w.inflected_form for w in reordered),
            orthographic_output=' '.join(w.orthographic_form for w in reordered),
            gloss=interlinear_gloss(clause.words),
        ))

    stats.total_words = sum(len(c.words) for c in structured_input.clauses)

    return GenerationResult(
        clauses=clauses,
        full_phonemic='. '.join(c.phonemic_output for c in clauses),
        full_orthographic='. '.join(c.orthographic_output for c in clauses),
        full_gloss='. '.join(c.gloss for c in clauses),
        warnings=list(dict.fromkeys(all_warnings)),
        stats=stats,
    )


# =============================================================================
# Phrase Transformer
# =============================================================================

@dataclass(frozen=True)
class GrammaticalPhrase:
    """A sample phrase: English text plus its gloss structure."""
    structure: Tuple[GlossWord, ...] = ()
    id: str = ''
    english: str = ''
    category: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GrammaticalPhrase':
        structure = []
        for item in data.get('structure') or ():
            if isinstance(item, GlossWord):
                structure.append(item)
                continue
            role = str(item.get('role') or 'OTHER').upper()
            features = {k: item[k] for k in ('tense', 'number', 'person', 'case') if item.get(k)}
            features.update(item.get('features') or {})
            structure.append(GlossWord(gloss=str(item.get('gloss', '')), role=role,
                                       part_of_speech=role_to_part_of_speech(role) or 'other',
                                       features=features))
        return cls(
            structure=tuple(structure),
            id=str(data.get('id') or ''),
            english=str(data.get('english') or ''),
            category=str(data.get('category') or ''),
        )


@dataclass
class TransformedWord:
    original: str
    base_form: str
    transformed: str
    orthographic: str
    role: str
    affixes_applied: List[str] = field(default_factory=list)
    is_from_lexicon: bool = False


@dataclass
class TransformedPhrase:
    original: GrammaticalPhrase
    words: List[TransformedWord]
    reordered: List[str]
    final_phonemic: str
    final_orthographic: str


def transform_phrase(phrase: Union[GrammaticalPhrase, Dict[str, Any]],
                     definition: DefinitionLike,
                     lexicon=None,
                     fallback_generator: Optional[FallbackGenerator] = None) -> TransformedPhrase:
    """
    Inflect and reorder a sample phrase.

    The part of speech of each word is inferred from its role. Missing
    glosses are filled in by fallback_generator (a seeded placeholder
    generator when none is given).
    """
    if not isinstance(phrase, GrammaticalPhrase):
        phrase = GrammaticalPhrase.from_dict(phrase)
    definition = as_definition(definition)
    lexicon_map = _lexicon_map(lexicon)
    fallback = fallback_generator or make_placeholder_generator(definition, 0)

    words = []
    for word in phrase.structure:
        entry = _lookup(lexicon_map, word.gloss)
        if entry is not None:
            base_form, from_lexicon = entry.phonemic_form, True
        else:
            base_form, from_lexicon = _form_of(fallback(word.gloss)).phonemic, False

        transformed = base_form
        applied = []
        for affix in find_affixes_for_features(definition.affixes, word.features,
                                               role_to_part_of_speech(word.role)):
            transformed = apply_affix(transformed, affix)
            applied.append(affix_label(affix))

        words.append(TransformedWord(
            original=word.gloss,
            base_form=base_form,
            transformed=transformed,
            orthographic=apply_orthography(transformed, definition.orthography),
            role=word.role,
            affixes_applied=applied,
            is_from_lexicon=from_lexicon,
        ))

    reordered = reorder_clause(words, definition.syntax)
    return TransformedPhrase(
        original=phrase,
        words=words,
        reordered=[w.orthographic for w in reordered],
        final_phonemic=' '.join(w.transformed for w in reordered),
        final_orthographic=' '.join(w.orthographic for w in reordered),
    )


@dataclass
class SimplePhraseResult:
    phonemic: str
    orthographic: str
    missing: List[str]


def transform_simple_phrase(glosses: Iterable[str],
                            definition: DefinitionLike,
                            lexicon=None,
                            fallback_generator: Optional[FallbackGenerator] = None) -> SimplePhraseResult:
    """Lexicon lookup plus placeholders, no morphology or reordering."""
    definition = as_definition(definition)
    lexicon_map = _lexicon_map(lexicon)
    fallback = fallback_generator or make_placeholder_generator(definition, 0)

    forms = []
    missing = []
    for gloss in glosses:
        entry = _lookup(lexicon_map, gloss)
        if entry is not None:
            forms.append(WordForm(
                phonemic=entry.phonemic_form,
                orthographic=entry.orthographic_form
                or apply_orthography(entry.phonemic_form, definition.orthography),
            ))
        else:
            forms.append(_form_of(fallback(gloss)))
            missing.append(gloss)

    return SimplePhraseResult(
        phonemic=' '.join(f.phonemic for f in forms),
        orthographic=' '.join(f.orthographic for f in forms),
        missing=missing,
    )


# =============================================================================
# Gloss Notation
# =============================================================================

ROLE_ALIASES = {
    'S': 'S', 'SUBJ': 'S', 'SUBJECT': 'S',
    'V': 'V', 'VERB': 'V',
    'O': 'O', 'OBJ': 'O', 'OBJECT': 'O',
    'ADJ': 'ADJ', 'ADJECTIVE': 'ADJ',
    'ADV': 'ADV', 'ADVERB': 'ADV',
    'DET': 'DET', 'DETERMINER': 'DET',
    'PREP': 'PREP', 'PREPOSITION': 'PREP',
    'CONJ': 'CONJ', 'CONJUNCTION': 'CONJ',
    'PART': 'PART', 'PARTICLE': 'PART',
}

FEATURE_ALIASES = {
    'SG': ('number', 'singular'), 'SINGULAR': ('number', 'singular'),
    'PL': ('number', 'plural'), 'PLURAL': ('number', 'plural'),
    'DU': ('number', 'dual'), 'DUAL': ('number', 'dual'),
    'PAST': ('tense', 'past'), 'PST': ('tense', 'past'),
    'PRES': ('tense', 'present'), 'PRESENT': ('tense', 'present'),
    'FUT': ('tense', 'future'), 'FUTURE': ('tense', 'future'),
    'PFV': ('aspect', 'perfective'), 'PERFECTIVE': ('aspect', 'perfective'),
    'IPFV': ('aspect', 'imperfective'), 'IMPERFECTIVE': ('aspect', 'imperfective'),
    'PROG': ('aspect', 'progressive'), 'PROGRESSIVE': ('aspect', 'progressive'),
    '1ST': ('person', '1st'), '1SG': ('person', '1st'), '1PL': ('person', '1st'), 'FIRST': ('person', '1st'),
    '2ND': ('person', '2nd'), '2SG': ('person', '2nd'), '2PL': ('person', '2nd'), 'SECOND': ('person', '2nd'),
    '3RD': ('person', '3rd'), '3SG': ('person', '3rd'), '3PL': ('person', '3rd'), 'THIRD': ('person', '3rd'),
    'NOM': ('case', 'nominative'), 'NOMINATIVE': ('case', 'nominative'),
    'ACC': ('case', 'accusative'), 'ACCUSATIVE': ('case', 'accusative'),
    'DAT': ('case', 'dative'), 'DATIVE': ('case', 'dative'),
    'GEN': ('case', 'genitive'), 'GENITIVE': ('case', 'genitive'),
    'LOC': ('case', 'locative'), 'LOCATIVE': ('case', 'locative'),
    'INS': ('case', 'instrumental'), 'INSTRUMENTAL': ('case', 'instrumental'),
    'IND': ('mood', 'indicative'), 'INDICATIVE': ('mood', 'indicative'),
    'SBJV': ('mood', 'subjunctive'), 'SUBJUNCTIVE': ('mood', 'subjunctive'),
    'IMP': ('mood', 'imperative'), 'IMPERATIVE': ('mood', 'imperative'),
    'COND': ('mood', 'conditional'), 'CONDITIONAL': ('mood', 'conditional'),
    'MASC': ('gender', 'masculine'), 'FEM': ('gender', 'feminine'), 'NEUT': ('gender', 'neuter'),
    'DEF': ('definiteness', 'definite'), 'DEFINITE': ('definiteness', 'definite'),
    'INDEF': ('definiteness', 'indefinite'), 'INDEFINITE': ('definiteness', 'indefinite'),
    'ACT': ('voice', 'active'), 'ACTIVE': ('voice', 'active'),
    'PASS': ('voice', 'passive'), 'PASSIVE': ('voice', 'passive'),
    'CMPR': ('degree', 'comparative'), 'COMPARATIVE': ('degree', 'comparative'),
    'SUPL': ('degree', 'superlative'), 'SUPERLATIVE': ('degree', 'superlative'),
    'NEG': ('negation', True), 'NEGATIVE': ('negation', True),
    'DIM': ('diminutive', True), 'DIMINUTIVE': ('diminutive', True),
    'AUG': ('augmentative', True), 'AUGMENTATIVE': ('augmentative', True),
}

# 'SUBJ' as a feature has always meant the subjunctive mood
FEATURE_ALIASES['SUBJ'] = ('mood', 'subjunctive')

# Canonical (shortest listed) abbreviation for each feature value
FEATURE_ABBREVIATIONS: Dict[Tuple[str, Any], str] = {}
for _abbr, _feature in FEATURE_ALIASES.items():
    if _feature not in FEATURE_ABBREVIATIONS:
        FEATURE_ABBREVIATIONS[_feature] = _abbr
FEATURE_ABBREVIATIONS[('mood', 'subjunctive')] = 'SUBJ'

_TOKEN = re.compile(r"^(?:([A-Za-z]+):)?([\w'-]+)(?:\[([^\]]+)\])?$")


def parse_gloss_notation(notation: str, clause_id: Optional[str] = None) -> GlossClause:
    """
    Parse 'ROLE:gloss[FEATURE.FEATURE]' tokens into a clause.

    Unknown roles become OTHER, unknown feature tags are ignored and
    tokens that do not fit the pattern are skipped. Word ids derive from
    the clause id, which is random unless supplied.
    """
    clause_id = clause_id or f"clause-{uuid.uuid4().hex[:12]}"
    words = []

    for token in notation.split():
        match = _TOKEN.match(token)
        if not match:
            logger.debug("Skipping unparseable gloss token %r", token)
            continue

        role_text, gloss, feature_text = match.groups()
        role = ROLE_ALIASES.get(role_text.upper(), 'OTHER') if role_text else 'OTHER'

        features: Dict[str, Any] = {}
        for tag in (feature_text or '').split('.'):
            feature = FEATURE_ALIASES.get(tag.strip().upper())
            if feature:
                features[feature[0]] = feature[1]

        words.append(GlossWord(
            gloss=gloss,
            role=role,
            part_of_speech=ROLE_PARTS_OF_SPEECH.get(role, 'other'),
            features=features,
            id=f"{clause_id}-w{len(words)}",
        ))

    return GlossClause(words=tuple(words), id=clause_id)


def to_gloss_notation(clause: Union[GlossClause, Dict[str, Any]]) -> str:
    """Serialize a clause back to gloss notation."""
    if not isinstance(clause, GlossClause):
        clause = GlossClause.from_dict(clause)

    tokens = []
    for word in clause.words:
        token = word.gloss if word.role == 'OTHER' else f"{word.role}:{word.gloss}"
        tags = []
        for name in FEATURE_ORDER:
            value = word.features.get(name)
            if value is None or value is False or value == '':
                continue
            key = (name, True) if name in BOOLEAN_CATEGORIES else (name, value)
            tags.append(FEATURE_ABBREVIATIONS.get(key, str(value).upper()))
        if tags:
            token += f"[{'.'.join(tags)}]"
        tokens.append(token)
    return ' '.join(tokens)


__all__ = [
    'ROLES',
    'CLAUSE_TYPES',
    'GlossWord',
    'GlossClause',
    'StructuredInput',
    'GeneratedWord',
    'GeneratedClause',
    'GenerationStats',
    'GenerationResult',
    'GrammaticalPhrase',
    'TransformedWord',
    'TransformedPhrase',
    'SimplePhraseResult',
    'gloss_checksum',
    'make_placeholder_generator',
    'find_affixes_for_features',
    'role_to_part_of_speech',
    'interlinear_gloss',
    'generate_from_structured',
    'transform_phrase',
    'transform_simple_phrase',
    'parse_gloss_notation',
    'to_gloss_notation',
]
