"""Configuration objects for configuration reading.

A single ``ReaderConfig`` carries every tunable used by the tokenizer, the
reader layers and the entry point.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

DEFAULT_TEXT_BUFFER_SIZE = 512
DEFAULT_READ_CHUNK_SIZE = 8192
DEFAULT_MAX_INCLUDE_DEPTH = 32

DOCUMENT_ACCEPT = "application/xml,text/xml,application/xhtml+xml"
XML_INCLUDE_ACCEPT = "application/xml,text/xml,application/*+xml,text/*+xml"
TEXT_INCLUDE_ACCEPT = "text/plain,text/*"


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError, ValueError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ReaderConfig:
    """Settings shared by every reader created for one configuration.

    Attributes:
        text_buffer_size: Characters delivered per CHARACTERS event of a text include
        read_chunk_size: Bytes handed to the tokenizer per read
        max_include_depth: Maximum include nesting, ``None`` for no bound
        validating: Schema/DTD validation (unsupported, must be False)
        support_dtd: Accept entity declarations in an internal DTD subset
        support_external_entities: External entity resolution (unsupported)
        document_accept: Accept header used to open the root document
        xml_include_accept: Default Accept header for ``parse="xml"`` includes
        text_include_accept: Default Accept header for ``parse="text"`` includes
        url_timeout: Timeout in seconds for opening URLs, ``None`` to block
        properties: Property values used by ``${...}`` expressions and discovery
        correlation_id: Correlation ID attached to log records
    """

    text_buffer_size: int = DEFAULT_TEXT_BUFFER_SIZE
    read_chunk_size: int = DEFAULT_READ_CHUNK_SIZE
    max_include_depth: Optional[int] = DEFAULT_MAX_INCLUDE_DEPTH
    validating: bool = False
    support_dtd: bool = False
    support_external_entities: bool = False
    document_accept: str = DOCUMENT_ACCEPT
    xml_include_accept: str = XML_INCLUDE_ACCEPT
    text_include_accept: str = TEXT_INCLUDE_ACCEPT
    url_timeout: Optional[float] = None
    properties: Dict[str, str] = field(default_factory=dict)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate reader configuration."""
        if self.text_buffer_size <= 0:
            raise ConfigValidationError(
                "text_buffer_size must be > 0", "text_buffer_size"
            )
        if self.read_chunk_size <= 0:
            raise ConfigValidationError(
                "read_chunk_size must be > 0", "read_chunk_size"
            )
        if self.max_include_depth is not None and self.max_include_depth < 0:
            raise ConfigValidationError(
                "max_include_depth must be >= 0 or None",
                "max_include_depth",
                ["Use None to disable the include depth check"],
            )
        if self.validating:
            raise ConfigValidationError(
                "validating readers are not supported", "validating"
            )
        if self.support_external_entities:
            raise ConfigValidationError(
                "external entity resolution is not supported",
                "support_external_entities",
            )
        if self.url_timeout is not None and self.url_timeout <= 0:
            raise ConfigValidationError("url_timeout must be > 0 or None", "url_timeout")
        for name in ("document_accept", "xml_include_accept", "text_include_accept"):
            if not getattr(self, name):
                raise ConfigValidationError(f"{name} must not be empty", name)

    def override(self, **kwargs: Any) -> "ReaderConfig":
        """Return a copy of this configuration with the given fields replaced."""
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Return the configuration as a plain dictionary."""
        return {
            "text_buffer_size": self.text_buffer_size,
            "read_chunk_size": self.read_chunk_size,
            "max_include_depth": self.max_include_depth,
            "support_dtd": self.support_dtd,
            "document_accept": self.document_accept,
            "xml_include_accept": self.xml_include_accept,
            "text_include_accept": self.text_include_accept,
            "url_timeout": self.url_timeout,
            "properties": dict(self.properties),
            "correlation_id": self.correlation_id,
        }
