"""WildFly client configuration reader.

Reads a client configuration file as a pull-parser event stream. Include
directives (XInclude) are spliced in, and each subsystem sees only the
element of the root ``configuration`` that belongs to its namespace.

Typical use:
- ``ClientConfiguration.get_instance()`` locates the configuration file
- ``read_configuration(namespaces)`` returns a reader over the matching element
- ``read_configuration_element(reader)`` builds an lxml element instead
"""

__version__ = "0.1.0"
__author__ = "WildFly Client Config Team"

from .api import ClientConfiguration, read_configuration_element, read_element
from .reader import ConfigurationReader
from .shared.config import ReaderConfig
from .shared.errors import ConfigXMLParseError, ErrorKind
from .shared.location import XMLLocation
from .tokenization.events import EventType, QName

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Entry point
    "ClientConfiguration",
    "ConfigurationReader",
    "ReaderConfig",

    # Events, locations and errors
    "EventType",
    "QName",
    "XMLLocation",
    "ConfigXMLParseError",
    "ErrorKind",

    # lxml integration
    "read_element",
    "read_configuration_element",
]
