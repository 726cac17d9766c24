# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Runtime bootstrap for bpeport.

Runs once at the start of every CLI command that was given a config file:
  1. Validate the interpreter
  2. Configure the runtime logger from the global config
  3. Log what's doing the work (versions matter for binary output)
"""

from pathlib import Path

from bpeport.config.schema import GlobalConfig
from bpeport.logging.logger import get_logger
from bpeport.runtime.environment import check_minimum_python, get_system_info


def bootstrap(config: GlobalConfig) -> None:
    """
    Put the process into a known state before any conversion starts.

    Args:
        config: The validated global configuration.
    """
    check_minimum_python()

    log_file = Path(config.log_file) if config.log_file is not None else None
    logger = get_logger("bpeport.runtime", log_level=config.log_level, log_file=log_file)

    system_info = get_system_info()
    logger.info(
        "bpeport bootstrap complete",
        extra={
            "project_name": config.project_name,
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "sentencepiece_version": system_info.sentencepiece_version,
            "protobuf_version": system_info.protobuf_version,
        },
    )
