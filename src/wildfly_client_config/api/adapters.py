"""Conversion of reader subtrees into lxml elements.

Lets a subsystem that prefers a tree API read its configuration element
(with includes already spliced in) as an ``lxml.etree`` element.
"""

from typing import Dict, Optional

from lxml import etree

from ..reader.base import ConfigurationReader
from ..shared.errors import ConfigXMLParseError, ErrorKind
from ..shared.logging import get_logger
from ..tokenization.events import EventType, event_to_string

logger = get_logger(__name__, component="lxml_adapter")


def _namespace_map(reader: ConfigurationReader) -> Dict[Optional[str], str]:
    nsmap: Dict[Optional[str], str] = {}
    for index in range(reader.get_namespace_count()):
        uri = reader.get_namespace_uri_at(index)
        if uri:
            nsmap[reader.get_namespace_prefix(index)] = uri
    return nsmap


def read_element(reader: ConfigurationReader) -> "etree._Element":
    """Build an element from the reader's current START_ELEMENT through its end.

    The reader is left on the matching END_ELEMENT. Character data, CDATA
    and entity references become text and tails; comments and processing
    instructions are kept as nodes.

    Args:
        reader: Reader positioned on START_ELEMENT

    Returns:
        The root of the built subtree

    Raises:
        ConfigXMLParseError: If the reader is not on START_ELEMENT or the
            document ends inside the subtree
    """
    if reader.get_event_type() is not EventType.START_ELEMENT:
        raise ConfigXMLParseError.of(
            ErrorKind.EXPECTED_START_ELEMENT,
            reader.get_location(),
            event_to_string(reader.get_event_type()),
        )
    builder = etree.TreeBuilder()
    depth = 0
    event_type = EventType.START_ELEMENT
    while True:
        if event_type is EventType.START_ELEMENT:
            attributes = {
                reader.get_attribute_name(index).clark: reader.get_attribute_value(index)
                for index in range(reader.get_attribute_count())
            }
            builder.start(reader.get_name().clark, attributes, _namespace_map(reader))
            depth += 1
        elif event_type is EventType.END_ELEMENT:
            builder.end(reader.get_name().clark)
            depth -= 1
            if depth == 0:
                break
        elif event_type in (EventType.CHARACTERS, EventType.CDATA, EventType.ENTITY_REFERENCE):
            builder.data(reader.get_text())
        elif event_type is EventType.COMMENT:
            builder.comment(reader.get_text())
        elif event_type is EventType.PROCESSING_INSTRUCTION:
            builder.pi(reader.get_pi_target(), reader.get_pi_data())
        if not reader.has_next():
            raise reader.unexpected_document_end()
        event_type = reader.next()
        if event_type is EventType.END_DOCUMENT:
            raise reader.unexpected_document_end()
    return builder.close()


def read_configuration_element(reader: ConfigurationReader) -> "Optional[etree._Element]":
    """Advance a selecting reader to its element and build it.

    Returns:
        The selected element, or None when the configuration has no
        element for the reader's namespaces
    """
    while reader.has_next():
        if reader.next() is EventType.START_ELEMENT:
            element = read_element(reader)
            logger.debug("Built configuration element", extra={"tag": element.tag})
            return element
    return None
