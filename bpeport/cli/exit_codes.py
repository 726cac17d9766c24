# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI exit codes. These are the only exit codes bpeport uses.

  USER_ERROR        required arguments missing
  CONFIG_ERROR      the --config file is missing or invalid
  RUNTIME_ERROR     the output couldn't be written, or something unexpected broke
  VALIDATION_ERROR  the tokenizer directory or model file is bad
"""

SUCCESS: int = 0
USER_ERROR: int = 1
CONFIG_ERROR: int = 2
RUNTIME_ERROR: int = 3
VALIDATION_ERROR: int = 4
