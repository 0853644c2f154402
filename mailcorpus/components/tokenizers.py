"""
Text tokenizer components for the MailCorpus pipeline.

A tokenizer turns the raw text of one field into an ordered list of
normalized tokens. Tokenizers are deterministic and return an empty list,
never None, for empty text.
"""

from abc import ABC, abstractmethod
import logging
from typing import List, Optional

from sklearn.feature_extraction.text import CountVectorizer

from ..core.errors import TokenizationError

logger = logging.getLogger(__name__)


class BaseTokenizer(ABC):
    """Abstract base class for all tokenizer components."""

    @abstractmethod
    def tokenize(self, text: str) -> List[str]:
        """
        Splits text into an ordered list of tokens.

        Args:
            text (str): The text to tokenize.

        Returns:
            List[str]: The tokens, in the order they appear in the text.

        Raises:
            TokenizationError: If the text cannot be tokenized.
        """
        pass


class WhitespaceTokenizer(BaseTokenizer):
    """Splits on runs of whitespace, optionally lowercasing first."""

    def __init__(self, lowercase: bool = True):
        self.lowercase = lowercase
        logger.debug(f"Initialized WhitespaceTokenizer with lowercase={lowercase}")

    def tokenize(self, text: str) -> List[str]:
        try:
            if self.lowercase:
                text = text.lower()
            return text.split()
        except (AttributeError, TypeError) as e:
            raise TokenizationError(f"Cannot tokenize value of type {type(text)}") from e


class StandardTokenizer(BaseTokenizer):
    """
    A word tokenizer built on scikit-learn's text analyzer.

    Lowercases, strips accents on request, keeps runs of word characters and
    drops English stop words, much like a search engine's standard analyzer.
    """

    def __init__(
        self,
        stop_words: Optional[str] = "english",
        lowercase: bool = True,
        token_pattern: str = r"(?u)\b\w+\b",
        strip_accents: Optional[str] = None,
    ):
        """
        Initializes the tokenizer.

        Args:
            stop_words (Optional[str]): Stop word list name understood by
                scikit-learn, or None to keep every token.
            lowercase (bool): Lowercase text before splitting.
            token_pattern (str): Regular expression matching one token.
            strip_accents (Optional[str]): 'ascii', 'unicode' or None.
        """
        self.stop_words = stop_words
        self.lowercase = lowercase
        self.token_pattern = token_pattern
        self.strip_accents = strip_accents
        try:
            vectorizer = CountVectorizer(
                stop_words=stop_words,
                lowercase=lowercase,
                token_pattern=token_pattern,
                strip_accents=strip_accents,
            )
            self._analyzer = vectorizer.build_analyzer()
        except (ValueError, TypeError) as e:
            logger.error(f"Failed to build StandardTokenizer: {e}", exc_info=True)
            raise
        logger.debug(
            f"Initialized StandardTokenizer with stop_words={stop_words}, lowercase={lowercase}"
        )

    def tokenize(self, text: str) -> List[str]:
        try:
            return list(self._analyzer(text))
        except (AttributeError, TypeError, ValueError) as e:
            raise TokenizationError(f"Analyzer failed: {e}") from e
