"""Reader layers.

Each layer implements ``ConfigurationReader`` and most wrap another reader:
``BasicReader`` reads one XML document, ``XIncludeReader`` splices includes,
``ScopedReader`` limits a reader to one element and ``SelectingReader``
picks a subsystem's element out of the root.
"""

from .base import ConfigurationReader
from .basic import BasicReader
from .delegating import DelegatingReader, DrainingReader, ScopedReader
from .empty import EmptyReader
from .selecting import SelectingReader, SelectionState
from .text import TextReader
from .xinclude import XINCLUDE_NAMESPACE, XIncludeReader

__all__ = [
    "ConfigurationReader",
    "BasicReader",
    "DelegatingReader",
    "DrainingReader",
    "ScopedReader",
    "EmptyReader",
    "SelectingReader",
    "SelectionState",
    "TextReader",
    "XINCLUDE_NAMESPACE",
    "XIncludeReader",
]
