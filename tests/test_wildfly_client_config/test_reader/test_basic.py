"""Tests for the single-document reader."""

import io
from unittest.mock import MagicMock

import pytest

from wildfly_client_config.reader.basic import BasicReader
from wildfly_client_config.shared.errors import (
    ConfigXMLParseError,
    ErrorKind,
    InvalidStateError,
    NoSuchElementError,
)
from wildfly_client_config.shared.location import XMLLocation
from wildfly_client_config.tokenization.events import EventType, QName
from wildfly_client_config.tokenization.tokenizer import TokenizerFactory

URI = "file:///config/test.xml"


def create_reader(text, uri=URI, included_from=None):
    """Create a BasicReader over ``text``."""
    factory = TokenizerFactory()
    tokenizer = factory.create_tokenizer(io.BytesIO(text.encode("utf-8")))
    return BasicReader(tokenizer, uri, included_from, factory)


class TestEvents:
    """Test event delivery through the reader."""

    def test_iteration(self):
        """Test iterating over event types."""
        reader = create_reader("<a><b/>text</a>")

        assert list(reader) == [
            EventType.START_ELEMENT,
            EventType.START_ELEMENT,
            EventType.END_ELEMENT,
            EventType.CHARACTERS,
            EventType.END_ELEMENT,
            EventType.END_DOCUMENT,
        ]

    def test_element_accessors(self):
        """Test names, attributes and namespaces."""
        reader = create_reader('<c:a xmlns:c="urn:c" id="7" c:flag="true"/>')
        reader.next()

        assert reader.get_name() == QName("urn:c", "a")
        assert reader.get_local_name() == "a"
        assert reader.get_namespace_uri() == "urn:c"
        assert reader.get_prefix() == "c"
        assert reader.get_attribute_count() == 2
        assert reader.get_attribute_local_name(0) == "id"
        assert reader.get_attribute_namespace(0) is None
        assert reader.get_attribute_prefix(1) == "c"
        assert reader.get_attribute_value_by_name("urn:c", "flag") == "true"
        assert reader.get_attribute_value_by_name(None, "missing") is None
        assert reader.is_attribute_specified(0)
        assert reader.get_namespace_count() == 1
        assert reader.get_namespace_prefix(0) == "c"
        assert reader.get_namespace_uri_at(0) == "urn:c"
        assert reader.get_namespace_uri_for_prefix("c") == "urn:c"

    def test_attributes_only_on_start_element(self):
        """Test attribute access on other events fails."""
        reader = create_reader("<a>text</a>")
        reader.next()
        reader.next()

        with pytest.raises(InvalidStateError):
            reader.get_attribute_count()
        with pytest.raises(InvalidStateError):
            reader.get_name()

    def test_processing_instruction(self):
        """Test PI target and data."""
        reader = create_reader("<a><?setup fast?></a>")
        reader.next()
        reader.next()

        assert reader.get_pi_target() == "setup"
        assert reader.get_pi_data() == "fast"

    def test_document_properties(self):
        """Test declaration details."""
        reader = create_reader('<?xml version="1.0" encoding="UTF-8"?><a/>')
        reader.next()

        assert reader.get_version() == "1.0"
        assert reader.get_character_encoding_scheme() == "UTF-8"
        assert reader.get_encoding() == "utf-8"
        assert not reader.standalone_set()

    def test_location(self):
        """Test locations carry the document URI and include chain."""
        origin = XMLLocation("file:///config/main.xml", 3, 5)
        reader = create_reader("<a>\n<b/></a>", included_from=origin)
        reader.next()
        reader.next()
        reader.next()

        location = reader.get_location()
        assert location.uri == URI
        assert (location.line_number, location.column_number) == (2, 1)
        assert location.included_from == origin
        assert reader.get_included_from() == origin
        assert reader.get_uri() == URI

    def test_next_after_end(self):
        """Test next() past END_DOCUMENT."""
        reader = create_reader("<a/>")
        list(reader)

        with pytest.raises(NoSuchElementError):
            reader.next()


class TestErrorTranslation:
    """Test lower level failures become ConfigXMLParseError."""

    def test_malformed_document(self):
        """Test tokenizer errors keep their position and lose their prefix."""
        reader = create_reader("<a>\n<b></a>")

        with pytest.raises(ConfigXMLParseError) as excinfo:
            list(reader)

        error = excinfo.value
        assert error.kind is ErrorKind.PARSE_ERROR
        assert error.message == "mismatched tag"
        assert error.location.uri == URI
        assert error.location.line_number == 2
        assert str(error).startswith("\n\tat file:///config/test.xml:2:")
        assert str(error).endswith("mismatched tag")

    def test_read_failure(self):
        """Test stream read errors."""
        stream = MagicMock()
        stream.read.side_effect = OSError("disk gone")
        factory = TokenizerFactory()
        reader = BasicReader(factory.create_tokenizer(stream), URI, None, factory)

        with pytest.raises(ConfigXMLParseError) as excinfo:
            reader.next()

        assert excinfo.value.kind is ErrorKind.FAILED_TO_READ_INPUT
        assert isinstance(excinfo.value.__cause__, OSError)

    def test_close_failure(self):
        """Test stream close errors."""
        stream = MagicMock()
        stream.close.side_effect = OSError("busy")
        factory = TokenizerFactory()
        reader = BasicReader(factory.create_tokenizer(stream), URI, None, factory)

        with pytest.raises(ConfigXMLParseError) as excinfo:
            reader.close()

        assert excinfo.value.kind is ErrorKind.FAILED_TO_CLOSE_INPUT

    def test_next_after_close(self):
        """Test reading from a closed reader."""
        reader = create_reader("<a/>")
        reader.close()

        assert not reader.has_next()
        with pytest.raises(ConfigXMLParseError) as excinfo:
            reader.next()
        assert excinfo.value.kind is ErrorKind.INPUT_CLOSED

    def test_context_manager_closes(self):
        """Test readers close on exit."""
        stream = MagicMock()
        factory = TokenizerFactory()

        with BasicReader(factory.create_tokenizer(stream), URI, None, factory):
            pass

        stream.close.assert_called_once()
