"""
Core data models for the MailCorpus pipeline.

This module defines the standard data structures that are passed between
components in the pipeline.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional

# Canonical field names, in the order they are extracted from a message.
FIELD_NAMES = ("subject", "summary", "keywords", "content")


@dataclass
class ParsedMessage:
    """
    The raw text extracted from one file by a parser.

    A value of None means the parser found no such text at all, which is
    different from an empty string.
    """

    subject: Optional[str] = None
    summary: Optional[str] = None
    keywords: Optional[str] = None
    body: Optional[str] = None

    def raw_fields(self) -> Dict[str, Optional[str]]:
        """Maps each canonical field name to its raw text."""
        return {
            "subject": self.subject,
            "summary": self.summary,
            "keywords": self.keywords,
            "content": self.body,
        }


@dataclass
class Document:
    """
    A labeled, tokenized document handed to a training corpus sink.

    Attributes:
        label (Optional[str]): The target class, taken from the name of the
            directory holding the file. None for files found directly under
            the input root.
        fields (Dict[str, List[str]]): Token lists keyed by field name. Only
            fields whose raw text existed are present; a present field may
            hold an empty list.
        metadata (Dict[str, Any]): Extra information such as the source path.
    """

    label: Optional[str]
    fields: Dict[str, List[str]] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)
