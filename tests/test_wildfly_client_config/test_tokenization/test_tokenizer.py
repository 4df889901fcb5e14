"""Tests for the expat-based pull tokenizer."""

import io
from unittest.mock import MagicMock

import pytest

from wildfly_client_config.shared.config import ReaderConfig
from wildfly_client_config.tokenization.events import EventType, QName
from wildfly_client_config.tokenization.tokenizer import (
    InputClosedError,
    PullTokenizer,
    TokenizerError,
    TokenizerFactory,
)


def tokenize(text, **config):
    """Create a tokenizer over ``text`` encoded as UTF-8."""
    data = text.encode("utf-8") if isinstance(text, str) else text
    return PullTokenizer(io.BytesIO(data), ReaderConfig(**config))


def drain(tokenizer):
    """Collect (event, name, text) triples until END_DOCUMENT."""
    events = []
    while tokenizer.has_next():
        event_type = tokenizer.next()
        events.append((event_type, tokenizer.name, tokenizer.text))
    return events


class TestBasicEvents:
    """Test the event sequence for simple documents."""

    def test_starts_on_start_document(self):
        """Test the initial event without reading input."""
        stream = MagicMock()
        tokenizer = PullTokenizer(stream)

        assert tokenizer.event_type is EventType.START_DOCUMENT
        assert tokenizer.has_next()
        stream.read.assert_not_called()

    def test_element_sequence(self):
        """Test start, text and end events."""
        events = drain(tokenize("<a><b>text</b></a>"))

        assert [event[0] for event in events] == [
            EventType.START_ELEMENT,
            EventType.START_ELEMENT,
            EventType.CHARACTERS,
            EventType.END_ELEMENT,
            EventType.END_ELEMENT,
            EventType.END_DOCUMENT,
        ]
        assert events[1][1] == QName(None, "b")
        assert events[2][2] == "text"

    def test_text_is_coalesced(self):
        """Test character data split by expat is delivered as one event."""
        tokenizer = tokenize("<a>line one\nline two &amp; three</a>", read_chunk_size=4)
        tokenizer.next()

        assert tokenizer.next() is EventType.CHARACTERS
        assert tokenizer.text == "line one\nline two & three"
        assert tokenizer.next() is EventType.END_ELEMENT

    def test_cdata_comment_and_pi(self):
        """Test CDATA sections, comments and processing instructions."""
        events = drain(tokenize("<a><![CDATA[<raw>]]><!-- note --><?target some data?></a>"))
        kinds = [event[0] for event in events]

        assert kinds == [
            EventType.START_ELEMENT,
            EventType.CDATA,
            EventType.COMMENT,
            EventType.PROCESSING_INSTRUCTION,
            EventType.END_ELEMENT,
            EventType.END_DOCUMENT,
        ]
        assert events[1][2] == "<raw>"
        assert events[2][2] == " note "
        assert events[3][2] == "some data"

    def test_processing_instruction_target(self):
        """Test the PI target is exposed."""
        tokenizer = tokenize("<a><?target data?></a>")
        tokenizer.next()
        tokenizer.next()

        assert tokenizer.pi_target == "target"

    def test_whitespace_outside_root_is_space(self):
        """Test whitespace around the root element is SPACE."""
        events = drain(tokenize("<!-- c -->\n<a/>\n"))

        assert [event[0] for event in events] == [
            EventType.COMMENT,
            EventType.SPACE,
            EventType.START_ELEMENT,
            EventType.END_ELEMENT,
            EventType.SPACE,
            EventType.END_DOCUMENT,
        ]

    def test_doctype_reported(self):
        """Test a document type declaration is a DTD event."""
        tokenizer = tokenize("<!DOCTYPE a><a/>")

        assert tokenizer.next() is EventType.DTD
        assert tokenizer.text == "a"


class TestNamespaces:
    """Test namespace handling."""

    def test_element_and_attribute_names(self):
        """Test namespaces and prefixes are split from names."""
        tokenizer = tokenize(
            '<p:a xmlns:p="urn:p" xmlns="urn:default" p:x="1" y="2"><b/></p:a>'
        )
        tokenizer.next()

        assert tokenizer.name == QName("urn:p", "a")
        assert tokenizer.name.prefix == "p"
        names = {attribute.name: attribute.value for attribute in tokenizer.attributes}
        assert names == {QName("urn:p", "x"): "1", QName(None, "y"): "2"}
        assert set(tokenizer.namespaces) == {("p", "urn:p"), (None, "urn:default")}

        tokenizer.next()
        assert tokenizer.name == QName("urn:default", "b")
        assert tokenizer.name.prefix is None

    def test_lookup_follows_current_event(self):
        """Test prefix lookup reflects the scope of the current event."""
        tokenizer = tokenize('<a><b xmlns:q="urn:q"/><c/></a>')
        tokenizer.next()
        assert tokenizer.lookup_namespace("q") is None
        tokenizer.next()
        assert tokenizer.lookup_namespace("q") == "urn:q"
        tokenizer.next()
        tokenizer.next()
        assert tokenizer.name == QName(None, "c")
        assert tokenizer.lookup_namespace("q") is None
        assert tokenizer.lookup_namespace("xml") == "http://www.w3.org/XML/1998/namespace"


class TestPositions:
    """Test event positions."""

    def test_line_and_column(self):
        """Test positions are 1-based lines and columns."""
        tokenizer = tokenize("<a>\n  <b/>\n</a>")
        tokenizer.next()
        assert (tokenizer.line_number, tokenizer.column_number, tokenizer.character_offset) == (1, 1, 0)
        tokenizer.next()
        tokenizer.next()

        assert tokenizer.name == QName(None, "b")
        assert (tokenizer.line_number, tokenizer.column_number) == (2, 3)
        assert tokenizer.character_offset == 6

    @pytest.mark.parametrize("chunk_size", [1, 2, 4096])
    def test_offset_counts_characters(self, chunk_size):
        """Test offsets count characters, not encoded bytes."""
        tokenizer = tokenize("<a>\u00e9\u20ac<b/></a>", read_chunk_size=chunk_size)
        tokenizer.next()
        tokenizer.next()
        assert tokenizer.text == "\u00e9\u20ac"
        assert tokenizer.character_offset == 3
        tokenizer.next()

        assert tokenizer.name == QName(None, "b")
        assert tokenizer.character_offset == 5

    def test_utf16_offset(self):
        """Test offsets in a UTF-16 document count characters after the byte order mark."""
        tokenizer = tokenize("<a><b/></a>".encode("utf-16"))
        tokenizer.next()
        tokenizer.next()

        assert tokenizer.name == QName(None, "b")
        assert tokenizer.character_offset == 3


class TestDocumentProperties:
    """Test declaration and encoding properties."""

    def test_declaration(self):
        """Test version, encoding and standalone from the declaration."""
        tokenizer = tokenize('<?xml version="1.0" encoding="UTF-8" standalone="yes"?><a/>')
        tokenizer.next()

        assert tokenizer.version == "1.0"
        assert tokenizer.declared_encoding == "UTF-8"
        assert tokenizer.standalone is True
        assert tokenizer.standalone_set is True
        assert tokenizer.encoding == "utf-8"

    def test_no_declaration(self):
        """Test defaults without a declaration."""
        tokenizer = tokenize("<a/>")
        assert tokenizer.encoding is None
        tokenizer.next()

        assert tokenizer.version is None
        assert tokenizer.standalone_set is False
        assert tokenizer.encoding == "utf-8"

    def test_utf16_document(self):
        """Test documents with a UTF-16 byte order mark."""
        tokenizer = tokenize("<a>é</a>".encode("utf-16"))

        events = drain(tokenizer)

        assert events[1][2] == "é"
        assert tokenizer.encoding in ("utf-16-le", "utf-16-be")


class TestMalformedInput:
    """Test error reporting."""

    def test_empty_document(self):
        """Test an empty input is START_DOCUMENT then END_DOCUMENT."""
        tokenizer = tokenize("")

        assert tokenizer.next() is EventType.END_DOCUMENT
        assert not tokenizer.has_next()

    def test_whitespace_only_document(self):
        """Test a document with no root element is treated as empty."""
        events = drain(tokenize("  \n"))

        assert events[-1][0] is EventType.END_DOCUMENT

    def test_mismatched_tag(self):
        """Test events before the error are delivered, then the error is raised."""
        tokenizer = tokenize("<a>\n<b></a>")

        assert tokenizer.next() is EventType.START_ELEMENT
        assert tokenizer.next() is EventType.CHARACTERS
        assert tokenizer.next() is EventType.START_ELEMENT
        with pytest.raises(TokenizerError) as excinfo:
            tokenizer.next()

        assert excinfo.value.line_number == 2
        assert excinfo.value.column_number == 6
        assert str(excinfo.value).startswith("ParseError at [row,col]:[2,6]\nMessage: ")

    def test_unclosed_root(self):
        """Test truncated documents are errors."""
        tokenizer = tokenize("<a><b/>")

        with pytest.raises(TokenizerError):
            drain(tokenizer)

    def test_entity_declaration_rejected(self):
        """Test entity declarations are refused without DTD support."""
        tokenizer = tokenize('<!DOCTYPE a [<!ENTITY e "boom">]><a>&e;</a>')

        with pytest.raises(TokenizerError, match="Entity declaration"):
            drain(tokenizer)

    def test_internal_entity_with_dtd_support(self):
        """Test internal entities expand when DTD support is enabled."""
        tokenizer = tokenize('<!DOCTYPE a [<!ENTITY e "boom">]><a>&e;</a>', support_dtd=True)

        events = drain(tokenizer)

        assert (EventType.CHARACTERS, None, "boom") in events

    def test_external_entity_rejected(self):
        """Test external entities are never resolved."""
        tokenizer = tokenize(
            '<!DOCTYPE a [<!ENTITY e SYSTEM "file:///etc/passwd">]><a>&e;</a>',
            support_dtd=True,
        )

        with pytest.raises(TokenizerError, match="External entity"):
            drain(tokenizer)


class TestClosing:
    """Test resource handling."""

    def test_close_closes_stream_once(self):
        """Test close is idempotent."""
        stream = MagicMock()
        tokenizer = PullTokenizer(stream)

        tokenizer.close()
        tokenizer.close()

        stream.close.assert_called_once()
        assert not tokenizer.has_next()

    def test_next_after_close(self):
        """Test use after close raises InputClosedError."""
        tokenizer = tokenize("<a/>")
        tokenizer.close()

        with pytest.raises(InputClosedError):
            tokenizer.next()

    def test_factory_shares_config(self):
        """Test the factory passes its configuration on."""
        factory = TokenizerFactory(ReaderConfig(read_chunk_size=1))
        tokenizer = factory.create_tokenizer(io.BytesIO(b"<a>x</a>"))

        assert [event[0] for event in drain(tokenizer)][:3] == [
            EventType.START_ELEMENT,
            EventType.CHARACTERS,
            EventType.END_ELEMENT,
        ]
