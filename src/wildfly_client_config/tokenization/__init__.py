"""Tokenization layer.

The event model and the incremental pull tokenizer every XML reader is
built on.
"""

from .events import Attribute, EventType, QName, event_to_string
from .tokenizer import (
    InputClosedError,
    PullTokenizer,
    Token,
    TokenizerError,
    TokenizerFactory,
)

__all__ = [
    "Attribute",
    "EventType",
    "QName",
    "event_to_string",
    "InputClosedError",
    "PullTokenizer",
    "Token",
    "TokenizerError",
    "TokenizerFactory",
]
