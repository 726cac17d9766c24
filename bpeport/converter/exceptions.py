# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Errors raised while converting a tokenizer.

Every step of a conversion raises one of these and nothing is retried. The
CLI catches the base class; callers embedding the converter can catch the
specific subclass they care about.
"""


class ConversionError(Exception):
    """Base for all conversion failures."""


class DocumentLoadError(ConversionError):
    """An input document is missing, unreadable, or not well-formed JSON."""


class DocumentDataError(ConversionError):
    """
    An input document parsed but a required field is absent or has the wrong
    shape: no `unk_token`, a vocabulary that isn't a token -> index mapping,
    indices that aren't a dense 0..N-1 range, and so on.
    """


class CharsMapCompileError(ConversionError):
    """A character map could not be compiled into (or decoded from) a blob."""


class OutputWriteError(ConversionError):
    """The output directory couldn't be created or the model couldn't be written."""
