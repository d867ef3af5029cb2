#!/usr/bin/env python3
"""
Phonology
=========
Sound-change rules and orthography for generated words.

- apply_rules: ordered find/replace rules with optional context
- apply_orthography: phonemic -> written form, longest key first
"""

import re
from typing import Dict, Iterable, Mapping, Optional

from .definition import Orthography, PhonologicalRule, RuleContext


# =============================================================================
# Phonological Rules
# =============================================================================

def _context_allows(context: RuleContext, word: str, start: int, end: int) -> bool:
    """Check every predicate of a context against one match site."""
    preceding = word[:start]
    following = word[end:]

    if context.before and not any(preceding.endswith(s) for s in context.before):
        return False
    if context.after and not any(following.startswith(s) for s in context.after):
        return False
    if context.not_before and any(preceding.endswith(s) for s in context.not_before):
        return False
    if context.not_after and any(following.startswith(s) for s in context.not_after):
        return False

    if context.position == 'initial' and start != 0:
        return False
    if context.position == 'final' and end != len(word):
        return False
    if context.position == 'medial' and (start == 0 or end == len(word)):
        return False

    return True


def apply_rule(word: str, rule: PhonologicalRule) -> str:
    """
    Apply a single rule to a word.

    Without a context the rule is a plain global replace. With one, the
    word is scanned left to right and only match sites whose
    surroundings satisfy the context are rewritten.
    """
    if not rule.find:
        return word

    context = rule.context
    if context is None or context.is_empty:
        return word.replace(rule.find, rule.replace)

    out = []
    i = 0
    find_len = len(rule.find)
    while i < len(word):
        if word.startswith(rule.find, i) and _context_allows(context, word, i, i + find_len):
            out.append(rule.replace)
            i += find_len
        else:
            out.append(word[i])
            i += 1
    return ''.join(out)


def apply_rules(word: str, rules: Iterable[PhonologicalRule]) -> str:
    """Apply enabled rules in order; each rule sees the previous one's output."""
    for rule in rules or ():
        if rule.enabled:
            word = apply_rule(word, rule)
    return word


# =============================================================================
# Orthography
# =============================================================================

def _mappings_of(orthography) -> Dict[str, str]:
    if orthography is None:
        return {}
    if isinstance(orthography, Orthography):
        return orthography.mappings
    if isinstance(orthography, Mapping) and 'mappings' in orthography \
            and isinstance(orthography['mappings'], Mapping):
        return dict(orthography['mappings'])
    return dict(orthography)


def apply_orthography(phonemic: str, orthography: Optional[object] = None) -> str:
    """
    Convert a phonemic string to its written form.

    Args:
        phonemic: Phonemic form
        orthography: Orthography record, {'mappings': {...}} or a plain
            phoneme -> grapheme dict. Missing or empty means identity.

    Returns:
        Written form. Keys are tried longest first at every position, so
        a digraph like 'sh' is never split by the single keys 's' and 'h'.
        Each character is rewritten at most once: mappings do not chain, so
        {'a': 'e', 'e': 'i'} turns 'a' into 'e', not 'i'.
    """
    mappings = {k: v for k, v in _mappings_of(orthography).items() if k}
    if not mappings:
        return phonemic

    keys = sorted(mappings, key=len, reverse=True)
    pattern = re.compile('|'.join(re.escape(k) for k in keys))
    return pattern.sub(lambda m: mappings[m.group(0)], phonemic)


__all__ = [
    'apply_rule',
    'apply_rules',
    'apply_orthography',
]
