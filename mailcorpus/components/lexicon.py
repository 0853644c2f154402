"""
Vocabulary index accumulated by a training corpus sink.

The lexicon assigns stable integer ids to labels and to (field, token)
attributes in first-seen order and keeps document frequencies, so that vector
files can be written and later decoded.
"""

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..core.errors import CorpusWriteError
from ..utils.data_models import Document

logger = logging.getLogger(__name__)

UNLABELED_ID = -1
LEXICON_FILE = "lexicon.json"


class Lexicon:
    """Label and attribute index with document frequencies."""

    def __init__(self, path: Path, weighting: Optional[str] = "tfidf"):
        self.path = Path(path)
        self.weighting = weighting
        self.labels: List[str] = []
        self._label_ids: Dict[str, int] = {}
        self._attribute_ids: Dict[Tuple[str, str], int] = {}
        self.doc_freq: Counter = Counter()
        self.doc_count = 0

    def __len__(self) -> int:
        return len(self._attribute_ids)

    def label_id(self, label: Optional[str]) -> int:
        """Returns the id for a label, registering it if new."""
        if label is None:
            return UNLABELED_ID
        if label not in self._label_ids:
            self._label_ids[label] = len(self.labels)
            self.labels.append(label)
        return self._label_ids[label]

    def attribute_id(self, field: str, token: str) -> int:
        """Returns the 0-based id of a (field, token) pair, registering it if new."""
        key = (field, token)
        if key not in self._attribute_ids:
            self._attribute_ids[key] = len(self._attribute_ids)
        return self._attribute_ids[key]

    def get_attribute_id(self, field: str, token: str) -> Optional[int]:
        return self._attribute_ids.get((field, token))

    def add_document(self, document: Document) -> Dict[int, int]:
        """
        Registers a document and returns its term counts keyed by attribute id.
        """
        self.label_id(document.label)
        counts: Counter = Counter()
        for field, tokens in document.fields.items():
            for token in tokens:
                counts[self.attribute_id(field, token)] += 1
        self.doc_freq.update(counts.keys())
        self.doc_count += 1
        return dict(counts)

    def to_dict(self) -> dict:
        attributes = [""] * len(self._attribute_ids)
        for (field, token), idx in self._attribute_ids.items():
            attributes[idx] = f"{field}:{token}"
        return {
            "weighting": self.weighting,
            "doc_count": self.doc_count,
            "labels": list(self.labels),
            "attributes": attributes,
            "doc_freq": [self.doc_freq.get(i, 0) for i in range(len(attributes))],
        }

    def save(self):
        """Persists the lexicon as JSON."""
        logger.info(
            f"Saving lexicon with {len(self)} attributes and {len(self.labels)} labels to '{self.path}'"
        )
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, indent=2)
        except OSError as e:
            logger.error(f"Error saving lexicon: {e}", exc_info=True)
            raise CorpusWriteError(f"Could not save lexicon to '{self.path}'") from e

    @classmethod
    def load(cls, path: Path) -> "Lexicon":
        """Reads a lexicon previously written by save()."""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        lexicon = cls(path, weighting=data.get("weighting", "tfidf"))
        for label in data.get("labels", []):
            lexicon.label_id(label)
        for attribute in data.get("attributes", []):
            field, _, token = attribute.partition(":")
            lexicon.attribute_id(field, token)
        for idx, freq in enumerate(data.get("doc_freq", [])):
            if freq:
                lexicon.doc_freq[idx] = freq
        lexicon.doc_count = data.get("doc_count", 0)
        return lexicon
