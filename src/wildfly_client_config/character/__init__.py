"""Character processing layer.

Encoding detection for XML documents and the decoding, position-counting
character sources used by text includes.
"""

from .encoding import (
    BOMDetector,
    DetectionMethod,
    EncodingDetector,
    EncodingResult,
    XMLDeclarationParser,
    detect_encoding,
    lookup_charset,
)
from .stream import CountingReader, DecodingReader

__all__ = [
    "BOMDetector",
    "DetectionMethod",
    "EncodingDetector",
    "EncodingResult",
    "XMLDeclarationParser",
    "detect_encoding",
    "lookup_charset",
    "CountingReader",
    "DecodingReader",
]
