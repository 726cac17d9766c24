# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Environment checks for bpeport.

The converter leans on pydantic v2 and modern typing syntax, so an old
interpreter fails here with a readable message instead of a SyntaxError deep
inside an import.
"""

import platform
import sys
from typing import NamedTuple

MINIMUM_PYTHON = (3, 10)


class SystemInfo(NamedTuple):
    """Snapshot of the interpreter and libraries doing the conversion."""

    python_version: str
    platform: str
    sentencepiece_version: str
    protobuf_version: str


def check_minimum_python() -> None:
    """
    Raises:
        RuntimeError: If the interpreter is older than MINIMUM_PYTHON.
    """
    if sys.version_info[:2] < MINIMUM_PYTHON:
        required = ".".join(str(part) for part in MINIMUM_PYTHON)
        raise RuntimeError(
            f"bpeport requires Python >= {required}, "
            f"but you're running {platform.python_version()}. Please upgrade."
        )


def get_system_info() -> SystemInfo:
    """Collect the versions that decide what the written model looks like."""
    import google.protobuf
    import sentencepiece

    return SystemInfo(
        python_version=platform.python_version(),
        platform=platform.system(),
        sentencepiece_version=getattr(sentencepiece, "__version__", "unknown"),
        protobuf_version=google.protobuf.__version__,
    )
