"""Encoding detection and charset lookup.

The tokenizer decodes documents itself; this module reports which encoding a
document uses (byte order mark first, then the XML declaration, then the XML
default) and validates charset names given on include directives.
"""

import codecs
import re
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, Optional

DEFAULT_XML_ENCODING = "utf-8"

# Only the start of a document can hold a byte order mark or declaration
DECLARATION_SAMPLE_SIZE = 1024


class DetectionMethod(Enum):
    """How a document encoding was determined."""
    BOM = "bom"
    XML_DECLARATION = "xml_declaration"
    DEFAULT = "default"


@dataclass(frozen=True)
class EncodingResult:
    """Result of encoding detection.

    Attributes:
        encoding: Canonical Python codec name
        method: Detection method used
        declared: Encoding name exactly as written in the XML declaration
    """
    encoding: str
    method: DetectionMethod
    declared: Optional[str] = None


def lookup_charset(name: str) -> Optional[str]:
    """Return the canonical codec name for ``name``, or None if unusable.

    Names that are unknown, or that name a codec which does not decode bytes
    to text (``rot13``, ``base64`` ...), are rejected.
    """
    try:
        info = codecs.lookup(name)
    except LookupError:
        return None
    if not getattr(info, "_is_text_encoding", True):
        return None
    return info.name


class BOMDetector:
    """Byte Order Mark (BOM) detection."""

    BOM_PATTERNS: ClassVar[Dict[bytes, str]] = {
        codecs.BOM_UTF8: "utf-8",
        codecs.BOM_UTF16_LE: "utf-16-le",
        codecs.BOM_UTF16_BE: "utf-16-be",
        codecs.BOM_UTF32_LE: "utf-32-le",
        codecs.BOM_UTF32_BE: "utf-32-be",
    }

    def detect(self, data: bytes) -> Optional[EncodingResult]:
        """Detect encoding based on BOM.

        Args:
            data: Leading bytes of the document

        Returns:
            EncodingResult if a BOM is present, None otherwise
        """
        if not data:
            return None

        # UTF-32 LE starts with the UTF-16 LE mark, so try longer marks first
        for bom_bytes, encoding in sorted(
            self.BOM_PATTERNS.items(), key=lambda item: len(item[0]), reverse=True
        ):
            if data.startswith(bom_bytes):
                return EncodingResult(encoding=encoding, method=DetectionMethod.BOM)
        return None


class XMLDeclarationParser:
    """Parser for the encoding pseudo-attribute of an XML declaration."""

    XML_DECLARATION_PATTERN = re.compile(
        rb'^<\?xml\s+[^>]*?encoding\s*=\s*["\']([A-Za-z][A-Za-z0-9._\-]*)["\'][^>]*?\?>'
    )

    def parse_declaration(self, data: bytes) -> Optional[EncodingResult]:
        """Parse the declared encoding.

        Args:
            data: Leading bytes of the document, after any BOM

        Returns:
            EncodingResult if a usable encoding is declared, None otherwise
        """
        match = self.XML_DECLARATION_PATTERN.match(data[:DECLARATION_SAMPLE_SIZE])
        if not match:
            return None
        declared = match.group(1).decode("ascii")
        canonical = lookup_charset(declared)
        if canonical is None:
            return None
        return EncodingResult(
            encoding=canonical,
            method=DetectionMethod.XML_DECLARATION,
            declared=declared,
        )


class EncodingDetector:
    """Runs BOM detection, then declaration parsing, then the XML default."""

    def __init__(self) -> None:
        self.bom_detector = BOMDetector()
        self.declaration_parser = XMLDeclarationParser()

    def detect(self, data: bytes) -> EncodingResult:
        """Determine the encoding of a document from its leading bytes."""
        result = self.bom_detector.detect(data)
        if result is not None:
            return result
        result = self.declaration_parser.parse_declaration(data)
        if result is not None:
            return result
        return EncodingResult(encoding=DEFAULT_XML_ENCODING, method=DetectionMethod.DEFAULT)


def detect_encoding(data: bytes) -> EncodingResult:
    """Convenience wrapper around ``EncodingDetector.detect``."""
    return EncodingDetector().detect(data)
