"""
Document parser components for the MailCorpus pipeline.

A parser turns the raw bytes of one file into a ParsedMessage holding the
subject, summary, keywords and body text. Each parser is told which content
type the caller declares for the input and refuses types it cannot handle.
"""

from abc import ABC, abstractmethod
import logging
from email import policy
from email.errors import MessageError
from email.message import EmailMessage
from email.parser import BytesParser
from typing import BinaryIO, Optional

from bs4 import BeautifulSoup

from ..core.errors import ParseError
from ..utils.data_models import ParsedMessage

logger = logging.getLogger(__name__)


class BaseParser(ABC):
    """Abstract base class for all parser components."""

    @abstractmethod
    def parse(self, stream: BinaryIO, content_type: str) -> ParsedMessage:
        """
        Parses a binary stream into its text fields.

        Args:
            stream (BinaryIO): An open binary stream. The caller owns it and
                closes it.
            content_type (str): The MIME type declared for the input.

        Returns:
            ParsedMessage: The extracted raw text.

        Raises:
            ParseError: If the content is malformed or of an unsupported type.
        """
        pass


class EmailParser(BaseParser):
    """
    Parses RFC 822 mail and netnews articles with the standard library.

    The subject, summary and keywords come from the `Subject`, `Summary` and
    `Keywords` headers. The body is made of the text/plain parts, or of the
    text/html parts with tags stripped when no plain text exists.
    """

    SUPPORTED_CONTENT_TYPES = ("message/rfc822", "message/news")

    def __init__(self, require_headers: bool = True):
        """
        Initializes the parser.

        Args:
            require_headers (bool): Reject input that has no header fields at
                all. Such input is plain text rather than a message.
        """
        self.require_headers = require_headers
        self._parser = BytesParser(policy=policy.default)
        logger.debug(f"Initialized EmailParser with require_headers={require_headers}")

    def parse(self, stream: BinaryIO, content_type: str) -> ParsedMessage:
        if content_type not in self.SUPPORTED_CONTENT_TYPES:
            raise ParseError(f"Unsupported content type '{content_type}'.")

        try:
            msg = self._parser.parse(stream)
            if self.require_headers and not msg.keys():
                raise ParseError("Input has no header fields; not an RFC 822 message.")
            return ParsedMessage(
                subject=self._header(msg, "Subject"),
                summary=self._header(msg, "Summary"),
                keywords=self._header(msg, "Keywords"),
                body=self._extract_body(msg),
            )
        except (MessageError, ValueError, LookupError) as e:
            raise ParseError(f"Could not parse message: {e}") from e

    @staticmethod
    def _header(msg: EmailMessage, name: str) -> Optional[str]:
        value = msg.get(name)
        return None if value is None else str(value)

    def _extract_body(self, msg: EmailMessage) -> str:
        plain, html = [], []
        for part in msg.walk():
            if part.is_multipart():
                continue
            if part.get_content_disposition() == "attachment":
                continue
            ctype = part.get_content_type()
            if ctype == "text/plain":
                plain.append(self._part_text(part))
            elif ctype == "text/html":
                html.append(self._part_text(part))

        if plain:
            return "\n".join(plain)
        if html:
            return self._html_text("\n".join(html))
        return ""

    @staticmethod
    def _html_text(html: str) -> str:
        soup = BeautifulSoup(html, "html.parser")
        for tag in soup(["script", "style"]):
            tag.decompose()
        return soup.get_text(" ")

    @staticmethod
    def _part_text(part: EmailMessage) -> str:
        try:
            return str(part.get_content())
        except (LookupError, UnicodeError):
            # Unknown or lying charset declaration.
            payload = part.get_payload(decode=True) or b""
            return payload.decode("utf-8", errors="replace")


class UnstructuredParser(BaseParser):
    """
    Parses any file type supported by the `unstructured` library.

    Only the body is reliably available; the subject is taken from element
    metadata when the partitioner provides one.
    """

    def __init__(self, separator: str = "\n\n"):
        self.separator = separator
        logger.debug("Initialized UnstructuredParser")

    def parse(self, stream: BinaryIO, content_type: str) -> ParsedMessage:
        from unstructured.partition.auto import partition

        try:
            elements = partition(file=stream, content_type=content_type)
        except Exception as e:
            raise ParseError(
                f"unstructured could not partition content of type '{content_type}': {e}"
            ) from e

        subject = None
        for el in elements:
            subject = getattr(getattr(el, "metadata", None), "subject", None)
            if subject:
                break

        body = self.separator.join([str(el) for el in elements])
        return ParsedMessage(subject=subject, body=body)
