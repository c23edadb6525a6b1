"""jstidy CLI - Command-line interface for JavaScript normalization.

This module provides the main CLI entrypoint for jstidy, allowing users
to normalize minified or transpiled scripts from the command line.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from jstidy.core.config import DEFAULT_CONFIG_PATH, get_config_value, load_config
from jstidy.core.controller import DEFAULT_MAX_PASSES, normalize
from jstidy.core.errors import RuleSetError
from jstidy.core.patterns import MULTI_LINE_KINDS
from jstidy.core.rewriter import Rewriter
from jstidy.core.rules import RewriteRule, default_rules, load_rules, rules_to_yaml
from jstidy.core.traverse import recursion_limit
from jstidy.js.generator import BRACE_STYLES, GeneratorOptions
from jstidy.js.scripts import iter_scripts, read_script, save_script

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None):
    """Main CLI entrypoint for jstidy."""
    parser = argparse.ArgumentParser(
        prog="jstidy",
        description="jstidy - normalize minified and transpiled JavaScript",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Normalize one script
  jstidy rewrite bundle.js --out clean/

  # Normalize a directory tree, braces on the header line
  jstidy rewrite dist/ --out clean/ --brace-style collapse

  # Add project rules on top of the built-in ones
  jstidy rewrite dist/ --out clean/ --rules .jstidy-rules.yaml

  # Show the active rule table as a YAML rule set
  jstidy rules --yaml

Note:
  Defaults are read from jstidy.json when present, e.g.
  {"rewrite": {"max_passes": 5}, "output": {"brace_style": "collapse"}}
"""
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Rewrite command
    rewrite_parser = subparsers.add_parser(
        "rewrite",
        help="Normalize scripts into an output directory"
    )
    rewrite_parser.add_argument(
        "inputs",
        nargs="+",
        help="Script files or directories (walked for *.js files)"
    )
    rewrite_parser.add_argument(
        "--out",
        required=True,
        help="Output directory for normalized scripts"
    )
    passes = rewrite_parser.add_mutually_exclusive_group()
    passes.add_argument(
        "--max-passes",
        type=int,
        default=None,
        help=f"Maximum rewrite passes per file (default: from jstidy.json or {DEFAULT_MAX_PASSES})"
    )
    passes.add_argument(
        "--single-pass",
        action="store_true",
        help="Run exactly one rewrite pass per file"
    )
    _add_rule_arguments(rewrite_parser)
    rewrite_parser.add_argument(
        "--brace-style",
        choices=BRACE_STYLES,
        default=None,
        help="Placement of opening braces (default: from jstidy.json or expand)"
    )
    rewrite_parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Spaces per indentation level (default: from jstidy.json or 2)"
    )
    _add_common_arguments(rewrite_parser)

    # Rules command
    rules_parser = subparsers.add_parser(
        "rules",
        help="List the active rule table"
    )
    rules_parser.add_argument(
        "--yaml",
        action="store_true",
        help="Print the rules as a YAML rule set"
    )
    _add_rule_arguments(rules_parser)
    _add_common_arguments(rules_parser)

    args = parser.parse_args(argv)

    # Setup logging
    if hasattr(args, 'verbose') and args.verbose:
        logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
    else:
        logging.basicConfig(level=logging.WARNING, format='%(levelname)s: %(message)s')

    # Handle commands
    if args.command == "rewrite":
        return cmd_rewrite(args)
    elif args.command == "rules":
        return cmd_rules(args)
    else:
        parser.print_help()
        return 1


def _add_rule_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--rules",
        help="YAML rule set applied after the built-in rules (default: rewrite.rules_file)"
    )
    subparser.add_argument(
        "--no-default-rules",
        action="store_true",
        help="Do not use the built-in rules"
    )


def _add_common_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH})"
    )
    subparser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )


def _build_rules(args, config) -> List[RewriteRule]:
    """Assemble the rule table from flags and configuration.

    Raises:
        RuleSetError: If the rule-set file cannot be loaded
    """
    rules = [] if args.no_default_rules else default_rules()
    rules_file = args.rules or get_config_value(["rewrite", "rules_file"], None, config)
    if rules_file:
        rules.extend(load_rules(rules_file))
    return rules


def cmd_rewrite(args):
    """Handle rewrite command."""
    config = load_config(args.config)
    output_dir = Path(args.out)

    # CLI args override jstidy.json
    if args.single_pass:
        max_passes = 1
    elif args.max_passes is not None:
        max_passes = args.max_passes
    else:
        max_passes = int(get_config_value(["rewrite", "max_passes"], DEFAULT_MAX_PASSES, config))

    try:
        rules = _build_rules(args, config)
        options = GeneratorOptions(
            indent=args.indent if args.indent is not None else int(get_config_value(["output", "indent"], 2, config)),
            quotes=get_config_value(["output", "quotes"], "double", config),
            brace_style=args.brace_style or get_config_value(["output", "brace_style"], "expand", config),
        )
    except (RuleSetError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    multi_line_kinds = get_config_value(["patterns", "multi_line_kinds"], sorted(MULTI_LINE_KINDS), config)
    rewriter = Rewriter(rules, multi_line_kinds)
    logger.info(f"Using {len(rules)} rules, at most {max_passes} passes per file")

    written = 0
    failed = 0
    for input_arg in args.inputs:
        input_path = Path(input_arg)
        if not input_path.exists():
            print(f"Error: Input not found: {input_path}", file=sys.stderr)
            failed += 1
            continue

        for script, relative in iter_scripts(input_path):
            target = output_dir / relative
            try:
                with recursion_limit():
                    tree = read_script(script)
                    passes_run = normalize(tree, rewriter, max_passes)
                    save_script(tree, target, options)
            except Exception as e:
                print(f"✗ {script}: {e}", file=sys.stderr)
                logger.exception(f"Rewrite failed for {script}")
                failed += 1
                continue
            logger.info(f"{script}: {passes_run} pass(es)")
            print(f"✓ {script} -> {target}")
            written += 1

    print(f"\nRewrote {written} file(s), {failed} failed")
    if rewriter.stats:
        for name, count in sorted(rewriter.stats.items()):
            print(f"  {name}: {count}")
    return 0 if failed == 0 else 1


def cmd_rules(args):
    """Handle rules command."""
    config = load_config(args.config)
    try:
        rules = _build_rules(args, config)
    except RuleSetError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.yaml:
        print(rules_to_yaml(rules), end="")
        return 0

    for position, rule in enumerate(rules, start=1):
        print(f"{position:2}. {rule.name}")
        print(f"      {rule.pattern_source}")
        print(f"   => {rule.replacement_source}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
