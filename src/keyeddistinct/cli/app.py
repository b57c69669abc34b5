import argparse
import logging
from typing import Optional, Sequence

from keyeddistinct.cli.commands.run import handle as handle_run


def build_parser() -> argparse.ArgumentParser:
    # Common options shared by top-level and subcommands
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="set logging level (default: WARNING)",
    )

    parser = argparse.ArgumentParser(
        prog="keyed-distinct",
        description="Drop consecutive JSON-lines records that are equal on selected fields.",
        parents=[common],
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_run = sub.add_parser(
        "run",
        help="filter a JSON-lines stream",
        description=(
            "Emit a record only when at least one selected field differs from the\n"
            "last emitted record.\n\n"
            "Examples:\n"
            "  keyed-distinct run --keys val valOther -i events.jsonl\n"
            "  keyed-distinct run --key-compare name=casefold --key-compare id=eq\n"
            "  keyed-distinct run --config distinct.yaml --limit 100"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        parents=[common],
    )
    p_run.add_argument(
        "--config",
        "-c",
        help="path to a run config YAML (flags override its values)",
    )
    p_run.add_argument(
        "--input",
        "-i",
        help="JSON-lines input file ('-' or omitted reads stdin)",
    )
    p_run.add_argument(
        "--keys",
        "-k",
        nargs="+",
        metavar="FIELD",
        help="fields compared between consecutive records",
    )
    p_run.add_argument(
        "--compare",
        metavar="NAME",
        help="shared comparator for --keys (eq, identity, casefold, always, never or module:attr)",
    )
    p_run.add_argument(
        "--key-compare",
        action="append",
        metavar="FIELD=NAME",
        help="per-field comparator; repeat for several fields",
    )
    p_run.add_argument(
        "--out-path",
        "-o",
        help="write output to this file instead of stdout",
    )
    p_run.add_argument(
        "--limit",
        "-n",
        type=int,
        default=None,
        help="optional cap on the number of records to emit",
    )
    p_run.add_argument(
        "--progress",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="show a progress bar on stderr",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    cli_level_arg = getattr(args, "log_level", None)
    base_level = logging._nameToLevel.get(cli_level_arg or "WARNING", logging.WARNING)
    logging.basicConfig(level=base_level, format="%(message)s")

    if args.cmd == "run":
        if args.keys is not None and args.key_compare:
            parser.error("--keys and --key-compare are mutually exclusive")
        if args.compare is not None and args.key_compare:
            parser.error("--compare only applies together with --keys")
        handle_run(
            config_path=args.config,
            input_path=args.input,
            keys=args.keys,
            compare=args.compare,
            key_compare=args.key_compare,
            out_path=args.out_path,
            limit=args.limit,
            progress=args.progress,
            cli_log_level=cli_level_arg,
        )


if __name__ == "__main__":
    main()
