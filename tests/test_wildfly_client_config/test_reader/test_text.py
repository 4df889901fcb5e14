"""Tests for text and empty readers."""

import io
from unittest.mock import MagicMock

import pytest

from wildfly_client_config.reader.empty import EmptyReader
from wildfly_client_config.reader.text import TextReader
from wildfly_client_config.shared.errors import (
    ConfigXMLParseError,
    ErrorKind,
    InvalidStateError,
    NoSuchElementError,
)
from wildfly_client_config.shared.location import XMLLocation
from wildfly_client_config.tokenization.events import EventType

URI = "file:///config/banner.txt"


def create_text_reader(data, charset="utf-8", buffer_size=512, included_from=None):
    """Create a TextReader over ``data``."""
    return TextReader(charset, io.BytesIO(data), URI, included_from, buffer_size)


class TestTextReader:
    """Test text resources as character events."""

    def test_single_chunk(self):
        """Test a short resource is one CHARACTERS event."""
        reader = create_text_reader(b"hello world")

        assert reader.get_event_type() is EventType.START_DOCUMENT
        assert reader.next() is EventType.CHARACTERS
        assert reader.get_text() == "hello world"
        assert reader.next() is EventType.END_DOCUMENT
        assert not reader.has_next()

    def test_chunked(self):
        """Test chunks are at most buffer_size characters."""
        reader = create_text_reader(b"hello world", buffer_size=4)
        chunks = []
        for event_type in reader:
            if event_type is EventType.CHARACTERS:
                chunks.append(reader.get_text())

        assert chunks == ["hell", "o wo", "rld"]
        assert reader.get_event_type() is EventType.END_DOCUMENT

    def test_chunk_locations(self):
        """Test each chunk is located at its first character."""
        reader = create_text_reader(b"ab\ncdef", buffer_size=4, included_from=XMLLocation("file:///main.xml", 2, 3))
        reader.next()
        assert (reader.get_location().line_number, reader.get_location().column_number) == (1, 1)
        reader.next()

        location = reader.get_location()
        assert reader.get_text() == "def"
        assert (location.line_number, location.column_number, location.character_offset) == (2, 2, 4)
        assert location.uri == URI
        assert location.included_from.uri == "file:///main.xml"

    def test_charset(self):
        """Test the resource is decoded with the given charset."""
        reader = create_text_reader("façade".encode("latin-1"), charset="iso8859-1")
        reader.next()

        assert reader.get_text() == "façade"
        assert reader.get_encoding() == "iso8859-1"

    def test_empty_resource(self):
        """Test an empty resource goes straight to END_DOCUMENT."""
        reader = create_text_reader(b"")

        assert reader.has_next()
        assert reader.next() is EventType.END_DOCUMENT
        with pytest.raises(NoSuchElementError):
            reader.next()

    def test_decoding_failure(self):
        """Test undecodable input."""
        reader = create_text_reader(b"\xff\xfe\xfa", charset="utf-8")

        with pytest.raises(ConfigXMLParseError) as excinfo:
            reader.next()

        assert excinfo.value.kind is ErrorKind.FAILED_TO_READ_INPUT

    def test_no_elements(self):
        """Test element accessors fail on text."""
        reader = create_text_reader(b"text")
        reader.next()

        with pytest.raises(InvalidStateError):
            reader.get_name()
        with pytest.raises(InvalidStateError):
            reader.get_attribute_count()
        with pytest.raises(InvalidStateError):
            reader.get_tokenizer_factory()
        assert reader.get_pi_target() is None

    def test_close(self):
        """Test closing closes the stream once and stops the reader."""
        stream = MagicMock()
        reader = TextReader("utf-8", stream, URI, None)

        reader.close()
        reader.close()

        stream.close.assert_called_once()
        assert not reader.has_next()

    def test_close_failure(self):
        """Test stream close errors."""
        stream = MagicMock()
        stream.close.side_effect = OSError("busy")
        reader = TextReader("utf-8", stream, URI, None)

        with pytest.raises(ConfigXMLParseError) as excinfo:
            reader.close()

        assert excinfo.value.kind is ErrorKind.FAILED_TO_CLOSE_INPUT


class TestEmptyReader:
    """Test the reader with no events."""

    def test_no_events(self):
        """Test the empty reader is already at the end."""
        reader = EmptyReader("file:///a.xml")

        assert reader.get_event_type() is EventType.END_DOCUMENT
        assert not reader.has_next()
        assert list(reader) == []
        assert reader.get_uri() == "file:///a.xml"
        assert reader.get_location() is XMLLocation.UNKNOWN
        with pytest.raises(NoSuchElementError):
            reader.next()

    def test_accessors(self):
        """Test data accessors fail and document accessors are empty."""
        reader = EmptyReader()

        with pytest.raises(InvalidStateError):
            reader.get_text()
        with pytest.raises(InvalidStateError):
            reader.get_name()
        assert reader.get_encoding() is None
        assert not reader.is_standalone()
        reader.close()
