#!/usr/bin/env python3
"""
Conlangkit CLI
==============
Command-line interface for language generation.

Usage:
    conlangkit generate -n 10 --seed 7 -d elvish.yaml
    conlangkit names place -n 5
    conlangkit translate "S:cat[PL] V:see[PAST] O:dog" -d elvish.yaml -l lexicon.yaml
    conlangkit render "shala" --script runes.json
    conlangkit presets
"""

import argparse
import json
import logging
import sys
from dataclasses import asdict, replace
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from conlangkit import __version__
from conlangkit.definition import NAME_KINDS, LanguageDefinition, load_definition, load_lexicon
from conlangkit.generators import generate_names, generate_words, get_preset, load_presets
from conlangkit.script import import_writing_system, render_text_as_glyphs
from conlangkit.settings import get_setting
from conlangkit.text_generator import StructuredInput, generate_from_structured, parse_gloss_notation

logger = logging.getLogger(__name__)


# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet
        self.console = Console(highlight=False)
        self.err_console = Console(stderr=True, highlight=False)

    def print(self, *args, **kwargs):
        if not self.quiet:
            self.console.print(*args, **kwargs)

    def error(self, msg: str):
        self.err_console.print(f"Error: {msg}", markup=False)

    def warning(self, msg: str):
        if not self.quiet:
            self.err_console.print(f"Warning: {msg}", markup=False)

    def json(self, data):
        """JSON goes to stdout even in quiet mode."""
        print(json.dumps(data, indent=2, ensure_ascii=False))

    def table(self, headers: list, rows: list, title: str = None):
        """Print a formatted table."""
        if self.quiet:
            return

        table = Table(title=title)
        for header in headers:
            table.add_column(str(header))
        for row in rows:
            table.add_row(*(escape(str(c)) for c in row))
        self.console.print(table)


def load_inputs(args) -> LanguageDefinition:
    """Definition from --definition, with --preset sounds layered on top."""
    definition = load_definition(args.definition) if args.definition else LanguageDefinition()

    preset_name = getattr(args, 'preset', None)
    if preset_name:
        preset = get_preset(preset_name)
        if preset is None:
            raise ValueError(f"Unknown preset '{preset_name}'. Run 'conlangkit presets' to list them.")
        definition = replace(definition, phonology=preset.phonology, phonotactics=preset.phonotactics)
    return definition


def resolve_seed(args) -> int:
    if args.seed is not None:
        return args.seed
    return int(get_setting('cli.default_seed', 42))


# =============================================================================
# Commands
# =============================================================================

def cmd_generate(args, out: Output):
    """Generate words."""
    definition = load_inputs(args)
    seed = resolve_seed(args)
    words = generate_words(seed, args.count, definition)

    if args.json:
        out.json([w.to_dict() for w in words])
        return 0

    out.table(['#', 'Phonemic', 'Written'],
              [(i, w.phonemic, w.orthographic) for i, w in enumerate(words, 1)],
              title=f"{len(words)} words (seed {seed})")
    return 0


def cmd_names(args, out: Output):
    """Generate proper names."""
    definition = load_inputs(args)
    seed = resolve_seed(args)
    names = generate_names(seed, args.count, args.kind, definition)

    if args.json:
        out.json([n.to_dict() for n in names])
        return 0

    out.table(['#', 'Name', 'Phonemic'],
              [(i, n.orthographic, n.phonemic) for i, n in enumerate(names, 1)],
              title=f"{args.kind.title()} names (seed {seed})")
    return 0


def cmd_translate(args, out: Output):
    """Render gloss notation in the language."""
    definition = load_inputs(args)
    lexicon = load_lexicon(args.lexicon) if args.lexicon else []
    clauses = tuple(
        parse_gloss_notation(text, clause_id=f"clause-{i}")
        for i, text in enumerate(args.clauses, 1)
    )
    result = generate_from_structured(StructuredInput(clauses=clauses), definition, lexicon,
                                      seed=resolve_seed(args))

    if args.json:
        out.json(asdict(result))
        return 0

    out.print(f"[bold]{escape(result.full_orthographic)}[/bold]")
    out.print(f"/{escape(result.full_phonemic)}/")
    out.print(f"[dim]{escape(result.full_gloss)}[/dim]")

    if args.verbose:
        rows = []
        for clause in result.clauses:
            for word in clause.words:
                rows.append((word.original.gloss, word.role, word.base_form, word.inflected_form,
                             word.orthographic_form, ', '.join(word.affixes_applied) or '-',
                             'yes' if word.is_from_lexicon else 'no'))
        out.table(['Gloss', 'Role', 'Base', 'Inflected', 'Written', 'Affixes', 'Lexicon'], rows)

    stats = result.stats
    out.print(f"{stats.total_words} words: {stats.from_lexicon} from lexicon, "
              f"{stats.generated} generated, {stats.affixes_applied} affixes")
    for warning in result.warnings:
        out.warning(warning)
    return 0


def cmd_render(args, out: Output):
    """Segment text into glyphs of a writing system."""
    if args.script:
        writing_system = import_writing_system(Path(args.script).read_text(encoding='utf-8'))
        if writing_system is None:
            raise ValueError(f"{args.script} is not a valid writing system export")
    else:
        writing_system = load_inputs(args).writing_system
        if writing_system is None:
            raise ValueError("No writing system: pass --script or a definition with a writingSystem")

    segments = render_text_as_glyphs(args.text, writing_system)

    if args.json:
        out.json([{'glyphId': s.glyph_id, 'char': s.char} for s in segments])
        return 0

    out.table(['Text', 'Glyph'], [(s.char, s.glyph_id or '-') for s in segments],
              title=writing_system.name)
    unmapped = sorted({s.char for s in segments if not s.glyph_id and not s.char.isspace()})
    if unmapped:
        out.warning(f"No glyph for: {' '.join(unmapped)}")
    return 0


def cmd_presets(args, out: Output):
    """List phonology presets."""
    presets = load_presets()

    if args.json:
        out.json([
            {
                'name': p.name,
                'description': p.description,
                'consonants': list(p.phonology.consonants),
                'vowels': list(p.phonology.vowels),
                'syllableTemplates': [{'template': t.template, 'weight': t.weight}
                                      for t in p.phonotactics.syllable_templates],
                'forbiddenSequences': list(p.phonotactics.forbidden_sequences),
            }
            for p in presets
        ])
        return 0

    out.table(
        ['Name', 'Description', 'Consonants', 'Vowels', 'Templates'],
        [(p.name, p.description, ' '.join(p.phonology.consonants), ' '.join(p.phonology.vowels),
          ' '.join(t.template for t in p.phonotactics.syllable_templates)) for p in presets],
        title="Phonology presets",
    )
    return 0


# =============================================================================
# Main
# =============================================================================

def _add_common(p, seeded: bool = True):
    p.add_argument('--definition', '-d', help='Language definition file (YAML or JSON)')
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')
    if seeded:
        p.add_argument('--seed', type=int, help='Random seed (default from app.yaml)')
        p.add_argument('--preset', '-p', help='Use a phonology preset (see: presets)')


def main(argv=None):
    default_count = int(get_setting('cli.default_count', 10))

    parser = argparse.ArgumentParser(
        prog='conlangkit',
        description='Conlangkit - Procedural Constructed-Language Toolkit',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s generate -n 10 --seed 7 --preset Elvish
  %(prog)s names place -n 5 -d elvish.yaml
  %(prog)s translate "S:cat[PL] V:see[PAST] O:dog" -d elvish.yaml -l lexicon.yaml
  %(prog)s render "shala" --script runes.json
  %(prog)s presets
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-essential output')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging and detailed output')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- generate ---
    p = subparsers.add_parser('generate', aliases=['gen', 'g'], help='Generate words')
    p.add_argument('-n', '--count', type=int, default=default_count,
                   help=f'Number of words (default: {default_count})')
    _add_common(p)

    # --- names ---
    p = subparsers.add_parser('names', aliases=['n'], help='Generate proper names')
    p.add_argument('kind', nargs='?', choices=NAME_KINDS, default='person', help='Kind of name')
    p.add_argument('-n', '--count', type=int, default=default_count,
                   help=f'Number of names (default: {default_count})')
    _add_common(p)

    # --- translate ---
    p = subparsers.add_parser('translate', aliases=['tr', 't'], help='Render gloss notation')
    p.add_argument('clauses', nargs='+', help='One gloss-notation string per clause')
    p.add_argument('--lexicon', '-l', help='Lexicon file (YAML or JSON)')
    _add_common(p)

    # --- render ---
    p = subparsers.add_parser('render', aliases=['r'], help='Render text as glyphs')
    p.add_argument('text', help='Text to segment')
    p.add_argument('--script', '-s', help='Exported writing system (JSON)')
    _add_common(p, seeded=False)

    # --- presets ---
    p = subparsers.add_parser('presets', help='List phonology presets')
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    out = Output(quiet=args.quiet)

    # Resolve aliases
    command = args.command
    alias_map = {
        'gen': 'generate', 'g': 'generate',
        'n': 'names',
        'tr': 'translate', 't': 'translate',
        'r': 'render',
    }
    command = alias_map.get(command, command)

    # Dispatch
    commands = {
        'generate': cmd_generate,
        'names': cmd_names,
        'translate': cmd_translate,
        'render': cmd_render,
        'presets': cmd_presets,
    }

    handler = commands.get(command)
    if handler:
        try:
            return handler(args, out)
        except KeyboardInterrupt:
            out.print("\nCancelled.")
            return 130
        except (ValueError, OSError) as e:
            out.error(str(e))
            if args.verbose:
                logger.exception("Command '%s' failed", command)
            return 1

    parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())
