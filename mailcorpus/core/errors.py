"""
Exception hierarchy for MailCorpus.

Setup errors abort a run. Per-document errors are reported and the run
moves on to the next file.
"""

from pathlib import Path
from typing import Union


class MailCorpusError(Exception):
    """Base class for all MailCorpus errors."""


class PipelineSetupError(MailCorpusError):
    """A component or the input could not be prepared. Fatal for the run."""


class ParseError(MailCorpusError):
    """A parser could not process a file."""


class TokenizationError(MailCorpusError):
    """A tokenizer failed on a piece of text."""


class CorpusWriteError(MailCorpusError):
    """A sink failed to persist a document."""


class FieldExtractionError(MailCorpusError):
    """Building a document from one file failed."""

    def __init__(self, path: Union[str, Path], cause: BaseException):
        self.path = str(path)
        self.cause = cause
        super().__init__(f"Could not extract fields from '{self.path}': {cause}")
