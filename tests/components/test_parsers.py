"""
Tests for the document parser components.
"""

import io
import pytest
from unittest.mock import patch, MagicMock

from mailcorpus.components.parsers import EmailParser, UnstructuredParser
from mailcorpus.core.errors import ParseError


NEWS_ARTICLE = b"""From: pilot@example.com (A. Pilot)
Subject: Re: Shuttle launch schedule
Summary: Next window opens in May
Keywords: shuttle, launch
Organization: Example Space Society
Lines: 3

The next launch window opens in May.
Fuel loading starts two days before.
"""


@pytest.fixture
def parser():
    return EmailParser()


def test_email_parser_extracts_netnews_headers(parser):
    """Tests that subject, summary and keywords come from their headers."""
    parsed = parser.parse(io.BytesIO(NEWS_ARTICLE), "message/rfc822")
    assert parsed.subject == "Re: Shuttle launch schedule"
    assert parsed.summary == "Next window opens in May"
    assert parsed.keywords == "shuttle, launch"
    assert "Fuel loading starts two days before." in parsed.body


def test_email_parser_missing_headers_are_none(parser):
    """Tests that headers absent from the message are reported as None."""
    raw = b"From: someone@example.com\n\nJust a body.\n"
    parsed = parser.parse(io.BytesIO(raw), "message/rfc822")
    assert parsed.subject is None
    assert parsed.summary is None
    assert parsed.keywords is None
    assert parsed.body.strip() == "Just a body."


def test_email_parser_empty_subject_is_not_none(parser):
    """Tests that an empty Subject header is kept as an empty string."""
    raw = b"From: someone@example.com\nSubject: \n\nbody\n"
    parsed = parser.parse(io.BytesIO(raw), "message/rfc822")
    assert parsed.subject == ""


def test_email_parser_prefers_plain_text_parts(parser):
    """Tests body extraction from a multipart message."""
    raw = (
        b"From: a@example.com\n"
        b"Subject: multipart\n"
        b"MIME-Version: 1.0\n"
        b'Content-Type: multipart/alternative; boundary="XX"\n\n'
        b"--XX\nContent-Type: text/plain\n\nplain words\n"
        b"--XX\nContent-Type: text/html\n\n<p>html words</p>\n"
        b"--XX--\n"
    )
    parsed = parser.parse(io.BytesIO(raw), "message/rfc822")
    assert "plain words" in parsed.body
    assert "html words" not in parsed.body


def test_email_parser_falls_back_to_html(parser):
    """Tests that HTML-only messages have their tags stripped."""
    raw = (
        b"From: a@example.com\n"
        b"Subject: html\n"
        b"Content-Type: text/html\n\n"
        b"<html><style>p {}</style><body><p>hello world</p></body></html>\n"
    )
    parsed = parser.parse(io.BytesIO(raw), "message/rfc822")
    assert "hello world" in parsed.body
    assert "<p>" not in parsed.body
    assert "p {}" not in parsed.body


def test_email_parser_rejects_plain_text(parser):
    """Tests that a file without any header field is not accepted as a message."""
    raw = b"This is a README for the corpus.\nIt has no headers.\n"
    with pytest.raises(ParseError):
        parser.parse(io.BytesIO(raw), "message/rfc822")


def test_email_parser_accepts_plain_text_when_headers_not_required():
    """Tests the lenient mode that treats headerless input as a body."""
    parser = EmailParser(require_headers=False)
    raw = b"This is a README for the corpus.\n"
    parsed = parser.parse(io.BytesIO(raw), "message/rfc822")
    assert parsed.subject is None
    assert "README" in parsed.body


def test_email_parser_rejects_unsupported_content_type(parser):
    """Tests that only mail content types are handled."""
    with pytest.raises(ParseError):
        parser.parse(io.BytesIO(NEWS_ARTICLE), "application/pdf")


@patch("unstructured.partition.auto.partition")
def test_unstructured_parser_joins_elements(mock_partition):
    """Tests that UnstructuredParser joins element texts into the body."""
    first = MagicMock()
    first.__str__.return_value = "first paragraph"
    first.metadata.subject = "Greetings"
    second = MagicMock()
    second.__str__.return_value = "second paragraph"
    mock_partition.return_value = [first, second]

    stream = io.BytesIO(b"raw")
    parsed = UnstructuredParser().parse(stream, "message/rfc822")

    mock_partition.assert_called_once_with(file=stream, content_type="message/rfc822")
    assert parsed.body == "first paragraph\n\nsecond paragraph"
    assert parsed.subject == "Greetings"
    assert parsed.summary is None
    assert parsed.keywords is None


@patch("unstructured.partition.auto.partition", side_effect=ValueError("bad file"))
def test_unstructured_parser_wraps_failures(mock_partition):
    """Tests that partitioning errors surface as ParseError."""
    with pytest.raises(ParseError):
        UnstructuredParser().parse(io.BytesIO(b"raw"), "message/rfc822")


def test_email_parser_html_entities_and_comments(parser):
    """Tests that HTML entities are decoded and comments are not body text."""
    raw = (
        b"From: a@example.com\n"
        b"Subject: menu\n"
        b"Content-Type: text/html\n\n"
        b"<p>fish &amp; chips&nbsp;today</p><!-- <b>hidden</b> -->\n"
    )
    parsed = parser.parse(io.BytesIO(raw), "message/rfc822")
    assert "fish & chips" in parsed.body
    assert parsed.body.split() == ["fish", "&", "chips", "today"]
    assert "&amp;" not in parsed.body
    assert "hidden" not in parsed.body
    assert "-->" not in parsed.body
