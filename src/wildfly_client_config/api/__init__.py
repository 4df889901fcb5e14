"""Public API for reading client configuration files."""

from .adapters import read_configuration_element, read_element
from .configuration import (
    ROOT_ELEMENT,
    ROOT_NAMESPACE,
    ClientConfiguration,
    default_stream_opener,
    open_uri,
)
from .discovery import (
    CONFIG_URL_PROPERTY,
    SysPathResourceLoader,
    find_configuration_uri,
    property_url_to_uri,
)

__all__ = [
    "read_configuration_element",
    "read_element",
    "ROOT_ELEMENT",
    "ROOT_NAMESPACE",
    "ClientConfiguration",
    "default_stream_opener",
    "open_uri",
    "CONFIG_URL_PROPERTY",
    "SysPathResourceLoader",
    "find_configuration_uri",
    "property_url_to_uri",
]
