#!/usr/bin/env python3
"""
Morphology & Syntax
===================
Word-building and word-order rules.

Affixation:
- prefix / suffix: attach the form, dash markers stripped
- infix: insert right after the first vowel (suffix when there is none)
- circumfix: 'ge+t' wraps the stem as ge...t (prefix when unsplittable)
- multiple affixes apply in ascending priority, ties in input order

Syntax:
- apply_syntax: order a subject/verb/object triple
- reorder_clause: group modifiers with their noun and permute the
  subject phrase, verb and object phrase per the configured word order
"""

import re
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar, Union

from .definition import (
    Affix,
    CompoundRule,
    DEFAULT_SYNTAX,
    MorphologyConfig,
    SyntaxConfig,
    parse_affix,
)

W = TypeVar('W')

STRICT_WORD_ORDERS = ('SVO', 'SOV', 'VSO', 'VOS', 'OSV', 'OVS')

_VOWEL = re.compile(r'[aeiou]', re.IGNORECASE)

AffixLike = Union[Affix, Dict[str, Any]]


# =============================================================================
# Presets
# =============================================================================

def _affix(id, type, form, category, value, applies_to, priority):
    return Affix(id=id, type=type, form=form, category=category, value=value,
                 applies_to=tuple(applies_to), priority=priority)


AFFIX_PRESETS: Dict[str, Tuple[Affix, ...]] = {
    'basic-number': (
        _affix('plural', 'suffix', '-s', 'number', 'plural', ['noun'], 10),
        _affix('dual', 'suffix', '-du', 'number', 'dual', ['noun'], 10),
    ),
    'basic-tense': (
        _affix('past', 'suffix', '-ed', 'tense', 'past', ['verb'], 20),
        _affix('future', 'prefix', 'wi-', 'tense', 'future', ['verb'], 20),
    ),
    'basic-person': (
        _affix('1sg', 'suffix', '-mi', 'person', '1st-singular', ['verb'], 30),
        _affix('2sg', 'suffix', '-ti', 'person', '2nd-singular', ['verb'], 30),
        _affix('3sg', 'suffix', '-si', 'person', '3rd-singular', ['verb'], 30),
    ),
    'basic-possession': (
        _affix('poss-1sg', 'suffix', '-mo', 'possession', 'my', ['noun'], 5),
        _affix('poss-2sg', 'suffix', '-to', 'possession', 'your', ['noun'], 5),
        _affix('poss-3sg', 'suffix', '-so', 'possession', 'his/her', ['noun'], 5),
    ),
    'basic-case': (
        _affix('nom', 'suffix', '-a', 'case', 'nominative', ['noun'], 40),
        _affix('acc', 'suffix', '-o', 'case', 'accusative', ['noun'], 40),
        _affix('gen', 'suffix', '-i', 'case', 'genitive', ['noun'], 40),
        _affix('dat', 'suffix', '-e', 'case', 'dative', ['noun'], 40),
    ),
    'derivational': (
        _affix('dim', 'suffix', '-ling', 'diminutive', 'small', ['noun'], 1),
        _affix('aug', 'suffix', '-on', 'augmentative', 'large', ['noun'], 1),
        _affix('neg', 'prefix', 'un-', 'negation', 'not', ['adjective', 'verb'], 1),
    ),
}

COMPOUND_PRESETS: Tuple[CompoundRule, ...] = (
    CompoundRule(id='noun-noun', name='Noun + Noun', pattern=('noun', 'noun'),
                 description='Two nouns combine (e.g., sunflower)'),
    CompoundRule(id='adj-noun', name='Adjective + Noun', pattern=('adjective', 'noun'),
                 description='Adjective modifies noun (e.g., blackbird)'),
    CompoundRule(id='verb-noun', name='Verb + Noun', pattern=('verb', 'noun'),
                 description='Action + object (e.g., pickpocket)'),
)


def create_empty_morphology_config() -> MorphologyConfig:
    """No affixes, no compound rules, default syntax."""
    return MorphologyConfig(affixes=(), compound_rules=(), syntax=DEFAULT_SYNTAX)


# =============================================================================
# Affixation
# =============================================================================

def _strip_markers(form: str) -> str:
    if form.startswith('-'):
        form = form[1:]
    if form.endswith('-'):
        form = form[:-1]
    return form


def affix_label(affix: Affix) -> str:
    """Short trace label, e.g. 'suffix:-s'."""
    return f"{affix.type}:{affix.form}"


def apply_affix(word: str, affix: AffixLike) -> str:
    """Attach one affix to a word."""
    affix = parse_affix(affix)
    form = _strip_markers(affix.form)

    if affix.type == 'prefix':
        return form + word

    if affix.type == 'suffix':
        return word + form

    if affix.type == 'infix':
        match = _VOWEL.search(word)
        if match:
            return word[:match.end()] + form + word[match.end():]
        return word + form

    if affix.type == 'circumfix':
        parts = form.split('+')
        if len(parts) == 2:
            head, tail = parts
            return head.rstrip('-') + word + tail.lstrip('-')
        return form + word

    return word


def sort_by_priority(affixes: Iterable[AffixLike]) -> List[Affix]:
    """Ascending priority; sorted() is stable so ties keep input order."""
    return sorted((parse_affix(a) for a in affixes), key=lambda a: a.priority)


def apply_affixes(word: str, affixes: Iterable[AffixLike]) -> str:
    """Apply affixes lowest priority first."""
    for affix in sort_by_priority(affixes):
        word = apply_affix(word, affix)
    return word


def create_compound(words: Sequence[str], rule: Optional[CompoundRule] = None) -> str:
    """Join stems with the rule's connector, or directly without one."""
    connector = rule.connector if rule is not None else None
    return (connector or '').join(words)


# =============================================================================
# Word Order
# =============================================================================

def apply_syntax(subject: str, verb: str, obj: str, word_order: str) -> str:
    """Order S, V and O; 'free' (or anything unknown) reads as SVO."""
    parts = {'S': subject, 'V': verb, 'O': obj}
    order = word_order if word_order in STRICT_WORD_ORDERS else 'SVO'
    return ' '.join(parts[slot].strip() for slot in order if parts[slot] and parts[slot].strip())


def position_adjective(adjective: str, noun: str, position: str) -> str:
    if position == 'before':
        return f"{adjective} {noun}"
    return f"{noun} {adjective}"


def _role_of(word: Any) -> str:
    return getattr(word, 'role', 'OTHER')


def _noun_phrase(modifiers: List[W], nouns: List[W], adjective_position: str,
                 role_of: Callable[[W], str]) -> List[W]:
    if not nouns:
        return modifiers
    determiners = [w for w in modifiers if role_of(w) == 'DET']
    adjectives = [w for w in modifiers if role_of(w) == 'ADJ']
    if adjective_position == 'before':
        return determiners + adjectives + nouns
    return determiners + nouns + adjectives


def reorder_clause(words: Sequence[W],
                   syntax: Optional[SyntaxConfig] = None,
                   role_of: Callable[[W], str] = _role_of) -> List[W]:
    """
    Reorder one clause per the word-order typology.

    Determiners and adjectives join the noun phrase they follow; a
    modifier seen before any subject, or right after the subject, belongs
    to the subject. A verb closes the current phrase, so modifiers that
    come after it attach to the object. Adverbs, adpositions and other
    roles go to the end in their original order. 'free' keeps the input.
    """
    syntax = syntax or DEFAULT_SYNTAX
    if syntax.word_order not in STRICT_WORD_ORDERS:
        return list(words)

    subjects: List[W] = []
    verbs: List[W] = []
    objects: List[W] = []
    subject_mods: List[W] = []
    object_mods: List[W] = []
    trailing: List[W] = []

    group = None
    for word in words:
        role = role_of(word)
        if role == 'S':
            group = 'subject'
            subjects.append(word)
        elif role == 'O':
            group = 'object'
            objects.append(word)
        elif role == 'V':
            group = None
            verbs.append(word)
        elif role in ('DET', 'ADJ'):
            if group == 'subject' or (group is None and not subjects):
                subject_mods.append(word)
            else:
                object_mods.append(word)
        else:
            trailing.append(word)

    phrases = {
        'S': _noun_phrase(subject_mods, subjects, syntax.adjective_position, role_of),
        'V': verbs,
        'O': _noun_phrase(object_mods, objects, syntax.adjective_position, role_of),
    }

    result: List[W] = []
    for slot in syntax.word_order:
        result.extend(phrases[slot])
    result.extend(trailing)
    return result


__all__ = [
    'AFFIX_PRESETS',
    'COMPOUND_PRESETS',
    'STRICT_WORD_ORDERS',
    'create_empty_morphology_config',
    'affix_label',
    'apply_affix',
    'apply_affixes',
    'sort_by_priority',
    'create_compound',
    'apply_syntax',
    'position_adjective',
    'reorder_clause',
]
