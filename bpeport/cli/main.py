# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for bpeport.

Usage:
    bpeport convert --input-dir models/gpt2 --output out/gpt2.model
    bpeport convert --config configs/convert.yaml --dry-run
    bpeport info --model out/gpt2.model

The global options (--config, --log-level) are shared by every subcommand
through argparse's parent parser mechanism.
"""

import argparse
import sys

from bpeport.cli.commands import handle_convert, handle_info
from bpeport.cli.exit_codes import USER_ERROR


def _build_global_parser() -> argparse.ArgumentParser:
    # add_help=False so -h doesn't collide between parent and subcommand parsers.
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file.",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging verbosity level.",
    )
    return parent


def build_parser() -> argparse.ArgumentParser:
    """Build the root parser with both subcommands registered."""
    parent = _build_global_parser()

    root_parser = argparse.ArgumentParser(
        prog="bpeport",
        description="Convert Hugging Face byte-level BPE tokenizers into SentencePiece models.",
    )
    subparsers = root_parser.add_subparsers(dest="command")

    convert_parser = subparsers.add_parser(
        "convert",
        parents=[parent],
        help="Convert a tokenizer directory into a SentencePiece model.",
    )
    convert_parser.add_argument(
        "--input-dir",
        type=str,
        default=None,
        dest="input_dir",
        help="Directory holding tokenizer_config.json and tokenizer.json.",
    )
    convert_parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Where to write the model. Parent directories are created.",
    )
    convert_parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        dest="dry_run",
        help="Load and convert, but don't write anything.",
    )
    convert_parser.set_defaults(func=handle_convert)

    info_parser = subparsers.add_parser(
        "info",
        parents=[parent],
        help="Summarize a converted model.",
    )
    info_parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Path to a SentencePiece model file.",
    )
    info_parser.set_defaults(func=handle_info)

    return root_parser


def main() -> None:
    """Entrypoint referenced by pyproject.toml's [project.scripts]."""
    root_parser = build_parser()
    args = root_parser.parse_args()

    if getattr(args, "func", None) is None:
        root_parser.print_help()
        sys.exit(USER_ERROR)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
