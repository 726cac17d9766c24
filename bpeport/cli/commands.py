# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the bpeport CLI.

Each handler takes the parsed argparse namespace and returns an exit code.
No print() calls: results are reported through the structured logger.
"""

import argparse
import logging
from pathlib import Path
from typing import Optional

from bpeport.cli.exit_codes import (
    CONFIG_ERROR,
    RUNTIME_ERROR,
    SUCCESS,
    USER_ERROR,
    VALIDATION_ERROR,
)
from bpeport.config.exceptions import ConfigError
from bpeport.config.loader import load_config
from bpeport.config.schema import BpeportConfig
from bpeport.converter.exceptions import (
    CharsMapCompileError,
    DocumentDataError,
    DocumentLoadError,
    OutputWriteError,
)
from bpeport.logging.logger import get_logger
from bpeport.runtime.bootstrap import bootstrap

_VALIDATION_ERRORS = (DocumentLoadError, DocumentDataError, CharsMapCompileError)


def _load_and_bootstrap(
    args: argparse.Namespace,
    command_name: str,
) -> tuple[int, Optional[BpeportConfig], logging.Logger]:
    """
    Shared setup for every command: load the optional config and bootstrap.

    Returns (exit_code, config, logger). If exit_code is not SUCCESS the
    caller should return it straight away.
    """
    logger = get_logger(f"bpeport.cli.{command_name}", log_level=args.log_level)

    config = None
    if args.config is not None:
        try:
            config = load_config(Path(args.config))
        except ConfigError as err:
            logger.error(
                "Configuration error",
                extra={"command": command_name, "error": str(err)},
            )
            return CONFIG_ERROR, None, logger
        bootstrap(config.global_config)
    else:
        logger.debug(
            "No config provided, running with command line arguments only",
            extra={"command": command_name},
        )

    return SUCCESS, config, logger


def _resolve_convert_paths(
    args: argparse.Namespace,
    config: Optional[BpeportConfig],
) -> tuple[Optional[Path], Optional[Path]]:
    """Command line flags win; the config's convert section fills the gaps."""
    input_dir = args.input_dir
    output_path = args.output
    if config is not None and config.convert is not None:
        input_dir = input_dir or config.convert.input_directory
        output_path = output_path or config.convert.output_path
    return (
        Path(input_dir) if input_dir else None,
        Path(output_path) if output_path else None,
    )


def handle_convert(args: argparse.Namespace) -> int:
    """Convert a Hugging Face tokenizer directory into a SentencePiece model."""
    exit_code, config, logger = _load_and_bootstrap(args, "convert")
    if exit_code != SUCCESS:
        return exit_code

    input_dir, output_path = _resolve_convert_paths(args, config)
    if input_dir is None or output_path is None:
        logger.error(
            "Both an input directory and an output path are required",
            extra={"input_dir": str(input_dir), "output_path": str(output_path)},
        )
        return USER_ERROR

    try:
        if args.dry_run:
            from bpeport.converter.pipeline.core import build_model_proto
            from bpeport.converter.sources.loader import load_tokenizer_sources

            model_proto, _ = build_model_proto(load_tokenizer_sources(input_dir))
            logger.info(
                "Dry run, would write model",
                extra={
                    "output_path": str(output_path),
                    "vocab_size": model_proto.trainer_spec.vocab_size,
                    "size_bytes": model_proto.ByteSize(),
                },
            )
            return SUCCESS

        from bpeport.converter.pipeline.core import convert_tokenizer

        result = convert_tokenizer(input_dir, output_path)
        logger.info("Conversion complete", extra=result._asdict())
        return SUCCESS

    except _VALIDATION_ERRORS as err:
        logger.error("Invalid tokenizer input", extra={"error": str(err)})
        return VALIDATION_ERROR
    except OutputWriteError as err:
        logger.error("Could not write model", extra={"error": str(err)})
        return RUNTIME_ERROR
    except Exception as err:
        logger.error("Conversion failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR


def handle_info(args: argparse.Namespace) -> int:
    """Summarize a converted model file."""
    exit_code, _, logger = _load_and_bootstrap(args, "info")
    if exit_code != SUCCESS:
        return exit_code

    if args.model is None:
        logger.error("A model path is required (--model)")
        return USER_ERROR

    try:
        from bpeport.converter.inspect.core import inspect_model

        summary = inspect_model(Path(args.model))
        logger.info("Model info", extra=summary._asdict())
        return SUCCESS

    except _VALIDATION_ERRORS as err:
        logger.error("Cannot inspect model", extra={"error": str(err)})
        return VALIDATION_ERROR
    except Exception as err:
        logger.error("Info command failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR
