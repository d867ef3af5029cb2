"""
Tests for Morphology & Syntax
=============================
Tests for affixation, compounding and word order in conlangkit/morphology.py.
"""

from collections import namedtuple

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from conlangkit.definition import Affix, CompoundRule, DefinitionError, SyntaxConfig
from conlangkit.morphology import (
    AFFIX_PRESETS,
    COMPOUND_PRESETS,
    affix_label,
    apply_affix,
    apply_affixes,
    apply_syntax,
    create_compound,
    create_empty_morphology_config,
    position_adjective,
    reorder_clause,
    sort_by_priority,
)

Word = namedtuple('Word', 'text role')


def affix(type, form, priority=0, category='number'):
    return Affix(type=type, form=form, category=category, priority=priority)


def texts(words):
    return [w.text for w in words]


class TestApplyAffix:
    """Tests for single affix placement."""

    def test_suffix(self):
        assert apply_affix('kata', affix('suffix', '-s')) == 'katas'

    def test_prefix(self):
        assert apply_affix('kata', affix('prefix', 'un-')) == 'unkata'

    def test_markers_optional(self):
        assert apply_affix('kata', affix('suffix', 's')) == 'katas'
        assert apply_affix('kata', affix('prefix', 'un')) == 'unkata'

    def test_infix_after_first_vowel(self):
        assert apply_affix('kata', affix('infix', 'in')) == 'kainta'

    def test_infix_with_markers(self):
        assert apply_affix('kata', affix('infix', '-um-')) == 'kaumta'

    def test_prefix_on_english_stem(self):
        assert apply_affix('happy', affix('prefix', 'un-')) == 'unhappy'

    def test_infix_vowel_match_ignores_case(self):
        assert apply_affix('KAta', affix('infix', 'in')) == 'KAinta'

    def test_infix_without_vowel_becomes_suffix(self):
        assert apply_affix('str', affix('infix', 'in')) == 'strin'

    def test_circumfix(self):
        assert apply_affix('mach', affix('circumfix', 'ge+t')) == 'gemacht'

    def test_circumfix_inner_markers_trimmed(self):
        assert apply_affix('mach', affix('circumfix', 'ge-+-t')) == 'gemacht'

    def test_circumfix_without_split_acts_as_prefix(self):
        assert apply_affix('mach', affix('circumfix', 'ge')) == 'gemach'

    def test_accepts_payload(self):
        payload = {'type': 'suffix', 'form': '-s', 'category': 'number', 'value': 'plural'}
        assert apply_affix('kata', payload) == 'katas'

    def test_invalid_payload_raises(self):
        with pytest.raises(DefinitionError):
            apply_affix('kata', {'type': 'suffix', 'form': '-s', 'category': 'colour'})

    def test_label(self):
        assert affix_label(affix('suffix', '-s')) == 'suffix:-s'


class TestPriority:
    """Tests for ordering multiple affixes."""

    def test_lower_priority_applies_first(self):
        affixes = [affix('suffix', '-a', priority=2), affix('suffix', '-b', priority=1)]
        assert apply_affixes('x', affixes) == 'xba'

    def test_ties_keep_input_order(self):
        affixes = [affix('suffix', '-a', priority=1), affix('suffix', '-b', priority=1)]
        assert apply_affixes('x', affixes) == 'xab'

    def test_sort_is_stable(self):
        affixes = [affix('suffix', f'-{c}', priority=p) for c, p in zip('abcd', [3, 1, 3, 1])]
        assert [a.form for a in sort_by_priority(affixes)] == ['-b', '-d', '-a', '-c']

    def test_prefix_and_suffix_together(self):
        affixes = [affix('prefix', 'wi-', priority=20), affix('suffix', '-s', priority=10)]
        assert apply_affixes('kata', affixes) == 'wikatas'


class TestCompounds:
    """Tests for compounding."""

    def test_direct_join(self):
        assert create_compound(['sun', 'flower']) == 'sunflower'

    def test_connector(self):
        rule = CompoundRule(id='nn', pattern=('noun', 'noun'), connector='o')
        assert create_compound(['sun', 'flower'], rule) == 'sunoflower'

    def test_presets(self):
        assert [r.id for r in COMPOUND_PRESETS] == ['noun-noun', 'adj-noun', 'verb-noun']


class TestApplySyntax:
    """Tests for S/V/O ordering."""

    @pytest.mark.parametrize("order,expected", [
        ('SVO', 'I see you'),
        ('SOV', 'I you see'),
        ('VSO', 'see I you'),
        ('VOS', 'see you I'),
        ('OSV', 'you I see'),
        ('OVS', 'you see I'),
        ('free', 'I see you'),
    ])
    def test_orders(self, order, expected):
        assert apply_syntax('I', 'see', 'you', order) == expected

    def test_empty_components_skipped(self):
        assert apply_syntax('I', 'see', '', 'SVO') == 'I see'
        assert apply_syntax('', 'run', '', 'SOV') == 'run'

    def test_position_adjective(self):
        assert position_adjective('big', 'cat', 'before') == 'big cat'
        assert position_adjective('big', 'cat', 'after') == 'cat big'


class TestReorderClause:
    """Tests for clause reordering."""

    def test_sov(self):
        words = [Word('cat', 'S'), Word('see', 'V'), Word('dog', 'O')]
        assert texts(reorder_clause(words, SyntaxConfig(word_order='SOV'))) == ['cat', 'dog', 'see']

    def test_vso(self):
        words = [Word('cat', 'S'), Word('see', 'V'), Word('dog', 'O')]
        assert texts(reorder_clause(words, SyntaxConfig(word_order='VSO'))) == ['see', 'cat', 'dog']

    def test_free_keeps_input(self):
        words = [Word('dog', 'O'), Word('cat', 'S'), Word('see', 'V')]
        assert texts(reorder_clause(words, SyntaxConfig(word_order='free'))) == ['dog', 'cat', 'see']

    def test_defaults_to_svo(self):
        words = [Word('see', 'V'), Word('cat', 'S')]
        assert texts(reorder_clause(words)) == ['cat', 'see']

    def test_modifiers_follow_noun_when_adjective_after(self):
        words = [Word('the', 'DET'), Word('big', 'ADJ'), Word('cat', 'S'), Word('sleeps', 'V')]
        result = reorder_clause(words, SyntaxConfig(adjective_position='after'))
        assert texts(result) == ['the', 'cat', 'big', 'sleeps']

    def test_modifiers_precede_noun_when_adjective_before(self):
        words = [Word('cat', 'S'), Word('big', 'ADJ'), Word('sleeps', 'V')]
        assert texts(reorder_clause(words)) == ['big', 'cat', 'sleeps']

    def test_modifiers_after_verb_attach_to_object(self):
        words = [Word('cat', 'S'), Word('see', 'V'), Word('the', 'DET'), Word('dog', 'O')]
        result = reorder_clause(words, SyntaxConfig(word_order='SOV'))
        assert texts(result) == ['cat', 'the', 'dog', 'see']

    def test_other_roles_trail(self):
        words = [Word('cat', 'S'), Word('quickly', 'ADV'), Word('runs', 'V'), Word('home', 'PREP')]
        assert texts(reorder_clause(words)) == ['cat', 'runs', 'quickly', 'home']

    def test_all_nouns_kept(self):
        words = [Word('cat', 'S'), Word('dog', 'S'), Word('run', 'V')]
        assert texts(reorder_clause(words, SyntaxConfig(word_order='VSO'))) == ['run', 'cat', 'dog']

    def test_custom_role_accessor(self):
        words = [('see', 'V'), ('cat', 'S')]
        result = reorder_clause(words, role_of=lambda w: w[1])
        assert result == [('cat', 'S'), ('see', 'V')]


class TestPresets:
    """Tests for built-in affix sets."""

    def test_affix_presets_present(self):
        assert set(AFFIX_PRESETS) == {
            'basic-number', 'basic-tense', 'basic-person',
            'basic-possession', 'basic-case', 'derivational',
        }

    def test_plural_preset(self):
        plural = AFFIX_PRESETS['basic-number'][0]
        assert apply_affix('kata', plural) == 'katas'
        assert plural.applies_to == ('noun',)

    def test_empty_config(self):
        config = create_empty_morphology_config()
        assert config.affixes == ()
        assert config.compound_rules == ()
        assert config.syntax.word_order == 'SVO'
