# ashstudio/ashc.py
"""ashc – ashstudio CLI

Examples
    $ ashc parse lib/helpdesk/ticket.ex
    $ ashc parse lib/helpdesk/ticket.ex --parser grammar --json
    $ ashc check lib/helpdesk/ticket.ex -D
    $ ashc lex --text 'attribute :email, :string'
    $ ashc modules lib/helpdesk/ticket.ex
    $ ashc configs

Commands
--------
- parse   : run the parser chain (or a single strategy) and print the outline
- check   : parse with the Ash grammar and report the number of parse trees
- lex     : dump the tokens the Ash grammar sees
- modules : list use declarations and the configurations they match
- configs : list the registry

-D/--debug turns on DEBUG logging and the grammar summaries.
"""

from __future__ import annotations
import argparse
import json
import sys
from typing import List, Optional

from .config import PARSER_CHOICES, Settings
from .errors import ConfigurationError, ParseError

# ------------------------------
# helpers
# ------------------------------

def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)


def _read_source(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _settings(args) -> Settings:
    settings = Settings.from_env()
    if getattr(args, "parser", "auto") not in (None, "auto"):
        settings = Settings.from_mapping({
            "log_level": settings.log_level,
            "parsers": [args.parser],
            "cache_size": settings.cache_size,
            "max_trees": settings.max_trees,
        })
    settings.configure_logging(debug=getattr(args, "debug", False))
    return settings

# ------------------------------
# debug output helpers
# ------------------------------

def _print_bnf_summary(bnf) -> None:
    _eprint("\n[BNF]")
    _eprint(f"Start: {bnf.start}")
    _eprint("Terminals:")
    _eprint("  " + ", ".join(sorted(bnf.terms)))
    _eprint("Nonterminals:")
    _eprint("  " + ", ".join(n for n in sorted(bnf.nonterms) if not bnf.is_helper(n)))
    _eprint(f"Productions: {len(bnf.prods)}")


def _print_outline(result) -> None:
    print(f"module: {result.module_name or '-'}")
    print(f"ash file: {'yes' if result.is_ash_file else 'no'} ({result.parser_name})")

    def _walk(node, depth: int) -> None:
        name = f" {node.name}" if node.name else ""
        print(f"{'  ' * depth}{node.keyword}{name}  [{node.span.line}-{node.span.end_line}]")
        for c in node.children:
            _walk(c, depth + 1)

    for s in result.sections:
        _walk(s, 1)
    for e in result.errors:
        _eprint(f"[{e.severity.upper()}] {e.line}:{e.column} {e.message}")

# ------------------------------
# commands
# ------------------------------

def cmd_parse(args) -> int:
    from .parsers.service import ParserService
    try:
        settings = _settings(args)
        source = _read_source(args.file)
        result = ParserService.from_settings(settings).parse(source)
    except ConfigurationError as e:
        _eprint("[CONFIG ERROR]", str(e))
        return 2
    except Exception as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        _print_outline(result)
    return 0


def cmd_check(args) -> int:
    from .grammar.ash import AshGrammar
    try:
        settings = _settings(args)
        grammar = AshGrammar.from_file(max_trees=settings.max_trees)
        if args.debug:
            _eprint("[DEBUG] grammar ready | terms=%d nonterms=%d rules=%d" %
                    (len(grammar.bnf.terms), len(grammar.bnf.nonterms), len(grammar.bnf.prods)))
        trees = grammar.parse(_read_source(args.file))
    except SyntaxError as e:
        _eprint("[SYNTAX ERROR]")
        _eprint(str(e))
        return 2
    except Exception as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    if args.debug:
        _print_bnf_summary(grammar.bnf)
        if trees:
            _eprint("\n[Tree 0]")
            _eprint(trees[0].pretty())

    if not trees:
        _eprint("[NO PARSE] input is incomplete")
        return 1
    print(f"[CHECK OK] trees={len(trees)}{' (ambiguous)' if len(trees) > 1 else ''}")
    return 0


def cmd_lex(args) -> int:
    """Tokenize with the Ash grammar and print one token per line."""
    from .grammar.ash import tokenize
    if (args.text is None) == (args.file is None):
        _eprint("[ERROR] give either FILE or --text")
        return 2
    try:
        text = args.text if args.text is not None else _read_source(args.file)
        for i, tok in enumerate(tokenize(text)):
            print(f"{i:03d}: {tok.type:<14} {tok.text!r}  @{tok.line}:{tok.col}")
        return 0
    except ParseError as e:
        _eprint("[LEX ERROR]", str(e))
        return 2
    except Exception as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2


def cmd_modules(args) -> int:
    from .parsers.declarations import identify_configured_modules, iter_use_declarations, marker_kind
    from .registry import DEFAULT_REGISTRY
    try:
        decls = list(iter_use_declarations(_read_source(args.file)))
    except Exception as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    for d in decls:
        kind = marker_kind(d.target)
        print(f"{d.line:>4}: use {d.target}{f'  ({kind})' if kind else ''}")
    matched = identify_configured_modules([d.text for d in decls], DEFAULT_REGISTRY)
    print(f"matched: {', '.join(m.display_name for m in matched) if matched else '-'}")
    return 0


def cmd_configs(args) -> int:
    from .registry import get_all_available_configurations
    for cfg in get_all_available_configurations():
        print(f"{cfg.declaration_pattern}  ({cfg.display_name})")
        for s in cfg.sections:
            kids = ", ".join(c.keyword for c in s.children)
            print(f"  {s.name}{f': {kids}' if kids else ''}")
        for dg in cfg.diagrams:
            print(f"  [diagram] {dg.name} ({dg.type})")
    return 0

# ------------------------------
# entry point
# ------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="ashc", description="Ash DSL structure parser CLI")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_parse = sub.add_parser("parse", help="print the sections and details of an Ash source file")
    p_parse.add_argument("file", help=".ex / .exs source file")
    p_parse.add_argument("--parser", choices=("auto",) + PARSER_CHOICES, default="auto",
                         help="parsing strategy (auto runs the whole chain)")
    p_parse.add_argument("--json", action="store_true", help="print the result as JSON")
    p_parse.add_argument("-D", "--debug", action="store_true", help="verbose debug output")
    p_parse.set_defaults(func=cmd_parse)

    p_check = sub.add_parser("check", help="parse a file with the Ash grammar and count the parse trees")
    p_check.add_argument("file", help=".ex / .exs source file")
    p_check.add_argument("-D", "--debug", action="store_true", help="verbose debug output")
    p_check.set_defaults(func=cmd_check)

    p_lex = sub.add_parser("lex", help="tokenize input with the Ash grammar")
    p_lex.add_argument("file", nargs="?", help="input file")
    p_lex.add_argument("--text", help="inline input text (instead of a file)")
    p_lex.set_defaults(func=cmd_lex)

    p_mod = sub.add_parser("modules", help="list use declarations and matched configurations")
    p_mod.add_argument("file", help=".ex / .exs source file")
    p_mod.set_defaults(func=cmd_modules)

    p_cfg = sub.add_parser("configs", help="list the module configuration registry")
    p_cfg.set_defaults(func=cmd_configs)

    args = ap.parse_args(argv)
    return int(args.func(args))

if __name__ == "__main__":
    sys.exit(main())
