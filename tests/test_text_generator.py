"""
Tests for Text Generator
========================
Tests for the gloss-to-language pipeline in conlangkit/text_generator.py.
"""

from dataclasses import asdict

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from conlangkit.generators import generate_words
from conlangkit.text_generator import (
    GlossClause,
    GlossWord,
    StructuredInput,
    generate_from_structured,
    parse_gloss_notation,
    to_gloss_notation,
    transform_phrase,
    transform_simple_phrase,
)

LEXICON = [
    {'gloss': 'cat', 'phonemicForm': 'kata', 'partOfSpeech': 'noun'},
    {'gloss': 'see', 'phonemicForm': 'mira', 'partOfSpeech': 'verb'},
]

PLURAL = {'type': 'suffix', 'form': '-s', 'category': 'number', 'value': 'plural',
          'appliesTo': ['noun'], 'priority': 10}
PAST = {'type': 'suffix', 'form': '-ed', 'category': 'tense', 'value': 'past',
        'appliesTo': ['verb'], 'priority': 20}
THIRD = {'type': 'suffix', 'form': '-si', 'category': 'person', 'value': '3rd-singular',
         'appliesTo': ['verb'], 'priority': 30}
NEG = {'type': 'prefix', 'form': 'un-', 'category': 'negation', 'value': 'not',
       'appliesTo': ['verb'], 'priority': 1}


def language(word_order='SVO', affixes=(), **extra):
    definition = {'morphology': {'affixes': list(affixes), 'syntax': {'wordOrder': word_order}}}
    definition.update(extra)
    return definition


def translate(notation, definition, lexicon=LEXICON, seed=42):
    clause = parse_gloss_notation(notation, clause_id='c1')
    return generate_from_structured(StructuredInput(clauses=(clause,)), definition, lexicon, seed=seed)


class TestStructuredGeneration:
    """Tests for generate_from_structured."""

    def test_sov_with_missing_word(self):
        """SOV, cat and see known, dog generated."""
        definition = language('SOV')
        result = translate("S:cat V:see O:dog", definition)

        dog = generate_words(42 + sum(ord(c) for c in 'dog'), 1, definition)[0].phonemic
        clause = result.clauses[0]
        assert [w.inflected_form for w in clause.reordered_words] == ['kata', dog, 'mira']
        assert result.warnings == ['"dog" not in lexicon, generated placeholder']
        assert result.full_phonemic == f"kata {dog} mira"

    def test_stats(self):
        result = translate("S:cat V:see O:dog", language('SOV'))
        assert result.stats.total_words == 3
        assert result.stats.from_lexicon == 2
        assert result.stats.generated == 1
        assert result.stats.affixes_applied == 0

    def test_lookup_case_insensitive(self):
        result = translate("S:Cat V:SEE", language())
        assert all(w.is_from_lexicon for w in result.clauses[0].words)
        assert result.full_phonemic == 'kata mira'

    def test_lexicon_as_mapping(self):
        result = translate("S:cat", language(), lexicon={'cat': 'kata'})
        assert result.full_phonemic == 'kata'

    def test_placeholder_independent_of_position(self):
        first = translate("O:dog", language())
        second = translate("S:cat V:see O:dog", language())
        dog_alone = first.clauses[0].words[0].base_form
        dog_late = second.clauses[0].words[2].base_form
        assert dog_alone == dog_late

    def test_placeholder_falls_back_to_gloss(self):
        definition = language(phonology={'consonants': [], 'vowels': []},
                              phonotactics={'syllableTemplates': ['CV']})
        result = translate("O:dog", definition)
        assert result.full_phonemic == 'dog'

    def test_plural_affix(self):
        result = translate("S:cat[PL] V:see", language(affixes=[PLURAL]))
        cat = result.clauses[0].words[0]
        assert cat.inflected_form == 'katas'
        assert cat.affixes_applied == ['suffix:-s(number:plural)']
        assert result.stats.affixes_applied == 1
        assert result.warnings == []

    def test_applies_to_filter(self):
        result = translate("S:cat V:see[PL]", language(affixes=[PLURAL]))
        assert result.clauses[0].words[1].inflected_form == 'mira'
        assert "No plural affix available" in result.warnings

    def test_missing_tense_warning(self):
        result = translate("S:cat V:see[PAST]", language())
        assert result.warnings == ["No past tense affix available"]

    def test_priority_order(self):
        result = translate("V:see[PAST.3RD]", language(affixes=[THIRD, PAST]))
        assert result.full_phonemic == 'miraedsi'

    def test_person_matches_by_substring(self):
        result = translate("V:see[3RD]", language(affixes=[THIRD]))
        assert result.full_phonemic == 'mirasi'

    def test_boolean_feature(self):
        result = translate("V:see[NEG]", language(affixes=[NEG]))
        assert result.full_phonemic == 'unmira'

    def test_orthography_applied(self):
        result = translate("S:cat V:see", language(orthography={'mappings': {'k': 'c'}}))
        assert result.full_orthographic == 'cata mira'
        assert result.full_phonemic == 'kata mira'

    def test_interlinear_gloss(self):
        result = translate("S:cat[PL] V:see[PAST]", language(affixes=[PLURAL, PAST]))
        assert result.full_gloss == 'cat[PLURAL] see[PAST]'

    def test_multiple_clauses(self):
        clauses = (
            parse_gloss_notation("S:cat V:see O:dog", clause_id='a'),
            parse_gloss_notation("S:dog V:see O:cat", clause_id='b'),
        )
        result = generate_from_structured(StructuredInput(clauses=clauses), language(), LEXICON, seed=1)
        assert len(result.clauses) == 2
        assert result.full_phonemic == '. '.join(c.phonemic_output for c in result.clauses)
        assert result.warnings == ['"dog" not in lexicon, generated placeholder']
        assert result.stats.total_words == 6

    def test_accepts_raw_payload(self):
        payload = {'clauses': [{'words': [
            {'gloss': 'see', 'role': 'V'},
            {'gloss': 'cat', 'role': 'S', 'features': {'number': 'plural'}},
        ]}]}
        result = generate_from_structured(payload, language(affixes=[PLURAL]), LEXICON, seed=0)
        assert result.full_phonemic == 'katas mira'

    def test_deterministic(self):
        a = translate("S:wolf V:hunt O:deer", language(), seed=9)
        b = translate("S:wolf V:hunt O:deer", language(), seed=9)
        assert a.full_phonemic == b.full_phonemic


class TestPhraseTransformer:
    """Tests for transform_phrase and transform_simple_phrase."""

    PHRASE = {
        'id': 'p1',
        'english': 'The cats see',
        'category': 'basic',
        'structure': [
            {'gloss': 'cat', 'role': 'S', 'number': 'plural'},
            {'gloss': 'see', 'role': 'V'},
        ],
    }

    def test_inflects_and_orders(self):
        result = transform_phrase(self.PHRASE, language('SOV', affixes=[PLURAL]), LEXICON)
        assert result.words[0].transformed == 'katas'
        assert result.words[0].affixes_applied == ['suffix:-s']
        assert result.final_phonemic == 'katas mira'
        assert result.reordered == ['katas', 'mira']

    def test_verb_first_order(self):
        result = transform_phrase(self.PHRASE, language('VSO', affixes=[PLURAL]), LEXICON)
        assert result.final_phonemic == 'mira katas'

    def test_fallback_generator(self):
        phrase = {'structure': [{'gloss': 'dog', 'role': 'O'}]}
        result = transform_phrase(phrase, language(), LEXICON,
                                  fallback_generator=lambda g: {'phonemic': 'zz', 'orthographic': 'zz'})
        assert result.words[0].base_form == 'zz'
        assert result.words[0].is_from_lexicon is False

    def test_simple_phrase(self):
        result = transform_simple_phrase(
            ['cat', 'dog', 'see'], language(), LEXICON,
            fallback_generator=lambda g: {'phonemic': 'zu', 'orthographic': 'Zu'},
        )
        assert result.phonemic == 'kata zu mira'
        assert result.orthographic == 'kata Zu mira'
        assert result.missing == ['dog']


class TestGlossNotation:
    """Tests for the text notation parser."""

    def test_roles_and_features(self):
        clause = parse_gloss_notation("S:cat[PL] V:see[PAST.3RD] O:dog")
        cat, see, dog = clause.words
        assert (cat.role, cat.part_of_speech, cat.features) == ('S', 'noun', {'number': 'plural'})
        assert see.features == {'tense': 'past', 'person': '3rd'}
        assert see.part_of_speech == 'verb'
        assert dog.features == {}

    def test_role_aliases(self):
        clause = parse_gloss_notation("SUBJ:cat VERB:see OBJ:dog")
        assert [w.role for w in clause.words] == ['S', 'V', 'O']

    def test_unknown_role_and_bare_gloss(self):
        clause = parse_gloss_notation("FOO:cat and")
        assert [w.role for w in clause.words] == ['OTHER', 'OTHER']
        assert clause.words[1].gloss == 'and'

    def test_boolean_and_unknown_features(self):
        word = parse_gloss_notation("V:go[NEG.XYZ]").words[0]
        assert word.features == {'negation': True}

    def test_unparseable_tokens_skipped(self):
        clause = parse_gloss_notation("S:cat !!! V:see")
        assert [w.gloss for w in clause.words] == ['cat', 'see']

    def test_ids(self):
        clause = parse_gloss_notation("S:cat V:see", clause_id='c7')
        assert clause.id == 'c7'
        assert [w.id for w in clause.words] == ['c7-w0', 'c7-w1']
        assert parse_gloss_notation("S:cat").id.startswith('clause-')

    def test_round_trip(self):
        text = "S:cat[PL] V:see[PAST.3RD] DET:the O:dog[ACC] and"
        assert to_gloss_notation(parse_gloss_notation(text)) == text

    def test_canonical_abbreviations(self):
        clause = GlossClause(words=(
            GlossWord(gloss='go', role='V', features={'tense': 'future', 'mood': 'subjunctive'}),
        ))
        assert to_gloss_notation(clause) == 'V:go[FUT.SUBJ]'

    def test_parsed_features_read_only(self):
        word = parse_gloss_notation("S:cat[PL]").words[0]
        with pytest.raises(TypeError):
            word.features['number'] = 'singular'
        with pytest.raises(TypeError):
            word.features.pop('number')
        assert word.features == {'number': 'plural'}

    def test_gloss_words_hashable(self):
        first = GlossWord(gloss='cat', role='S', features={'number': 'plural'})
        second = GlossWord(gloss='cat', role='S', features={'number': 'plural'})
        assert len({first, second}) == 1

    def test_features_survive_asdict(self):
        word = GlossWord(gloss='cat', features={'number': 'plural'})
        assert asdict(word)['features'] == {'number': 'plural'}

    @pytest.mark.parametrize("tag,feature", [
        ('SG', ('number', 'singular')),
        ('DU', ('number', 'dual')),
        ('PST', ('tense', 'past')),
        ('PRES', ('tense', 'present')),
        ('1ST', ('person', '1st')),
        ('2ND', ('person', '2nd')),
        ('NOM', ('case', 'nominative')),
        ('DAT', ('case', 'dative')),
        ('GEN', ('case', 'genitive')),
        ('IND', ('mood', 'indicative')),
        ('SUBJ', ('mood', 'subjunctive')),
        ('IMP', ('mood', 'imperative')),
        ('DEF', ('definiteness', 'definite')),
        ('INDEF', ('definiteness', 'indefinite')),
        ('DIM', ('diminutive', True)),
        ('AUG', ('augmentative', True)),
    ])
    def test_feature_tags(self, tag, feature):
        word = parse_gloss_notation(f"S:x[{tag}]").words[0]
        assert word.features == {feature[0]: feature[1]}
