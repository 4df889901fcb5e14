"""Shared utilities for configuration reading.

This package provides configuration objects, locations, errors, logging and
the small parsing helpers (URIs, delimited lists, expressions) used across
all reader layers.
"""

from .config import ConfigError, ConfigValidationError, ReaderConfig
from .delimiter import Delimiterator, parse_int, parse_long
from .errors import ConfigXMLParseError, ErrorKind, InvalidStateError, NoSuchElementError
from .expressions import Expression, ExpressionSyntaxError, PropertyResolver, expand
from .location import XMLLocation
from .logging import CorrelationLogger, get_logger

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ReaderConfig",
    "Delimiterator",
    "parse_int",
    "parse_long",
    "ConfigXMLParseError",
    "ErrorKind",
    "InvalidStateError",
    "NoSuchElementError",
    "Expression",
    "ExpressionSyntaxError",
    "PropertyResolver",
    "expand",
    "XMLLocation",
    "CorrelationLogger",
    "get_logger",
]
