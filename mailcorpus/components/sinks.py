"""
Training corpus sink components for the MailCorpus pipeline.

A sink receives labeled documents one at a time, persists them and feeds
its lexicon. `finalize()` closes the store once the traversal is over; the
lexicon is saved separately by the caller.
"""

from abc import ABC, abstractmethod
import json
import logging
from collections import Counter
from pathlib import Path
from typing import Optional

import numpy as np
from scipy.sparse import csr_matrix
from sklearn.datasets import dump_svmlight_file
from sklearn.feature_extraction.text import TfidfTransformer

from ..core.errors import CorpusWriteError
from ..utils.data_models import Document
from .lexicon import Lexicon, LEXICON_FILE

logger = logging.getLogger(__name__)

RAW_CORPUS_FILE = "raw_corpus.jsonl"
VECTORS_FILE = "vectors.svmlight"


class BaseCorpusSink(ABC):
    """Abstract base class for all training corpus sinks."""

    lexicon: Lexicon

    @abstractmethod
    def append(self, document: Document):
        """
        Persists one document.

        Raises:
            CorpusWriteError: If the document cannot be stored.
        """
        pass

    @abstractmethod
    def finalize(self):
        """Flushes and closes the underlying store. Called once per run."""
        pass


class RawCorpusSink(BaseCorpusSink):
    """
    Writes one JSON line per document to `raw_corpus.jsonl`.

    Each line holds the label, the source path and the token lists per field.
    The file is flushed after every append.
    """

    def __init__(self, output_dir: str, weighting: Optional[str] = None):
        """
        Opens the sink for writing, creating the output directory if needed.

        Args:
            output_dir (str): Directory receiving the corpus and the lexicon.
            weighting (Optional[str]): Weighting method recorded in the lexicon.

        Raises:
            OSError: If the directory or the corpus file cannot be created.
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.raw_path = self.output_dir / RAW_CORPUS_FILE
        self.lexicon = Lexicon(self.output_dir / LEXICON_FILE, weighting=weighting)
        self._file = open(self.raw_path, "w", encoding="utf-8")
        self.count = 0
        logger.debug(f"Initialized {self.__class__.__name__} writing to '{self.raw_path}'")

    @property
    def closed(self) -> bool:
        return self._file.closed

    def append(self, document: Document):
        if self.closed:
            raise CorpusWriteError(f"Corpus '{self.raw_path}' is already finalized.")

        record = {
            "label": document.label,
            "source": document.metadata.get("source"),
            "fields": document.fields,
        }
        try:
            self._file.write(json.dumps(record, ensure_ascii=False) + "\n")
            self._file.flush()
        except (OSError, TypeError, ValueError) as e:
            raise CorpusWriteError(f"Could not write document to '{self.raw_path}': {e}") from e

        self.lexicon.add_document(document)
        self.count += 1

    def finalize(self):
        if self.closed:
            logger.warning(f"Corpus '{self.raw_path}' was already finalized.")
            return
        self._file.close()
        logger.info(f"Wrote {self.count} documents to '{self.raw_path}'.")


class LibSVMCorpusSink(RawCorpusSink):
    """
    A raw corpus sink that also writes a weighted LibSVM vector file.

    On finalize the raw corpus is read back, turned into a sparse matrix of
    term counts using the lexicon ids, weighted, and written with
    scikit-learn's svmlight writer. Feature indices in the vector file are
    1-based; document labels are lexicon label ids (-1 when unlabeled).
    """

    WEIGHTINGS = ("tfidf", "frequency", "boolean")

    def __init__(self, output_dir: str, weighting: str = "tfidf"):
        if weighting not in self.WEIGHTINGS:
            raise ValueError(
                f"Unknown weighting '{weighting}'. Expected one of {self.WEIGHTINGS}."
            )
        super().__init__(output_dir, weighting=weighting)
        self.weighting = weighting
        self.vectors_path = self.output_dir / VECTORS_FILE

    def finalize(self):
        if self.closed:
            logger.warning(f"Corpus '{self.raw_path}' was already finalized.")
            return
        super().finalize()
        self._write_vectors()

    def _load_matrix(self):
        rows, cols, data, labels = [], [], [], []
        with open(self.raw_path, "r", encoding="utf-8") as f:
            for row, line in enumerate(f):
                record = json.loads(line)
                labels.append(self.lexicon.label_id(record["label"]))
                counts = Counter()
                for field, tokens in record["fields"].items():
                    for token in tokens:
                        counts[self.lexicon.attribute_id(field, token)] += 1
                for col, value in sorted(counts.items()):
                    rows.append(row)
                    cols.append(col)
                    data.append(value)

        matrix = csr_matrix(
            (data, (rows, cols)), shape=(len(labels), len(self.lexicon)), dtype=np.float64
        )
        return matrix, np.array(labels, dtype=np.int64)

    def _weight(self, matrix: csr_matrix) -> csr_matrix:
        if self.weighting == "frequency":
            return matrix
        if self.weighting == "boolean":
            weighted = matrix.copy()
            weighted.data[:] = 1.0
            return weighted
        return TfidfTransformer(norm="l2", smooth_idf=True).fit_transform(matrix)

    def _write_vectors(self):
        logger.info(f"Building '{self.weighting}' vectors from '{self.raw_path}'")
        try:
            matrix, labels = self._load_matrix()
            if matrix.shape[0] == 0:
                logger.warning("Corpus is empty. Writing an empty vector file.")
                self.vectors_path.write_text("", encoding="utf-8")
                return
            if matrix.shape[1] == 0:
                logger.warning("No document has any token. Writing label-only vectors.")
                self.vectors_path.write_text(
                    "".join(f"{label}\n" for label in labels), encoding="utf-8"
                )
                return
            dump_svmlight_file(
                self._weight(matrix), labels, str(self.vectors_path), zero_based=False
            )
        except (OSError, ValueError) as e:
            logger.error(f"Error writing vector file: {e}", exc_info=True)
            raise CorpusWriteError(f"Could not write vectors to '{self.vectors_path}'") from e

        logger.info(
            f"Wrote {matrix.shape[0]} vectors with {matrix.shape[1]} attributes to '{self.vectors_path}'."
        )
