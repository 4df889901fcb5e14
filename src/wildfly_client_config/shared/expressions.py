"""Property expressions embedded in attribute values.

Supported syntax:

* ``${name}`` is replaced by the value of property ``name``. Undefined
  properties expand to the empty string.
* ``${name:default}`` expands ``default`` when ``name`` is undefined. The
  default may itself contain expressions.
* ``${{text}}`` emits ``text`` verbatim, without expansion.
* ``\\$`` is a literal ``$``.

Any other character, including a ``$`` not followed by ``{``, is literal.
"""

import os
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, Tuple, Union

Resolver = Callable[[str], Optional[str]]


class ExpressionSyntaxError(ValueError):
    """An expression string is malformed."""

    def __init__(self, message: str, expression: str, position: int) -> None:
        super().__init__(f"{message} at position {position} of {expression!r}")
        self.expression = expression
        self.position = position


@dataclass(frozen=True)
class _Reference:
    key: str
    default: Optional[Tuple["_Node", ...]]


_Node = Union[str, _Reference]


class _Compiler:
    """Recursive descent over the expression text."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def compile(self) -> Tuple[_Node, ...]:
        nodes = self._sequence(nested=False)
        return tuple(nodes)

    def _sequence(self, nested: bool) -> List[_Node]:
        text = self.text
        nodes: List[_Node] = []
        literal: List[str] = []
        while self.pos < len(text):
            char = text[self.pos]
            if char == "\\" and text.startswith("$", self.pos + 1):
                literal.append("$")
                self.pos += 2
            elif char == "$" and text.startswith("{", self.pos + 1):
                if literal:
                    nodes.append("".join(literal))
                    literal = []
                nodes.append(self._reference())
            elif char == "}" and nested:
                break
            else:
                literal.append(char)
                self.pos += 1
        if literal:
            nodes.append("".join(literal))
        return nodes

    def _reference(self) -> _Node:
        text = self.text
        start = self.pos
        if text.startswith("{", start + 2):
            end = text.find("}}", start + 3)
            if end == -1:
                raise ExpressionSyntaxError("Unterminated literal block", text, start)
            self.pos = end + 2
            return text[start + 3:end]
        self.pos = start + 2
        key_start = self.pos
        while self.pos < len(text) and text[self.pos] not in ":}":
            self.pos += 1
        key = text[key_start:self.pos]
        if self.pos == len(text):
            raise ExpressionSyntaxError("Unterminated expression", text, start)
        if not key:
            raise ExpressionSyntaxError("Empty property name", text, key_start)
        default: Optional[Tuple[_Node, ...]] = None
        if text[self.pos] == ":":
            self.pos += 1
            default = tuple(self._sequence(nested=True))
            if self.pos == len(text):
                raise ExpressionSyntaxError("Unterminated expression", text, start)
        # consume the closing brace
        self.pos += 1
        return _Reference(key, default)


def _evaluate(nodes: Tuple[_Node, ...], resolver: Resolver) -> str:
    parts: List[str] = []
    for node in nodes:
        if isinstance(node, str):
            parts.append(node)
            continue
        value = resolver(node.key)
        if value is None and node.default is not None:
            value = _evaluate(node.default, resolver)
        parts.append(value or "")
    return "".join(parts)


class Expression:
    """A compiled attribute expression."""

    def __init__(self, source: str, nodes: Tuple[_Node, ...]) -> None:
        self.source = source
        self._nodes = nodes

    @classmethod
    def compile(cls, text: str) -> "Expression":
        """Compile ``text``.

        Raises:
            ExpressionSyntaxError: If ``text`` is not a valid expression
        """
        return cls(text, _Compiler(text).compile())

    @property
    def is_literal(self) -> bool:
        """True if the expression contains no property references."""
        return all(isinstance(node, str) for node in self._nodes)

    @property
    def referenced_keys(self) -> List[str]:
        """Property names referenced at the top level, in order."""
        return [node.key for node in self._nodes if isinstance(node, _Reference)]

    def evaluate(self, resolver: Optional[Resolver] = None) -> str:
        """Expand the expression using ``resolver`` (environment by default)."""
        return _evaluate(self._nodes, resolver or PropertyResolver())

    def __repr__(self) -> str:
        return f"Expression({self.source!r})"


class PropertyResolver:
    """Looks names up in a property mapping, then in the environment."""

    def __init__(
        self,
        properties: Optional[Mapping[str, str]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.properties = properties if properties is not None else {}
        self.environ = environ if environ is not None else os.environ

    def __call__(self, key: str) -> Optional[str]:
        value = self.properties.get(key)
        if value is None:
            value = self.environ.get(key)
        return value


def expand(text: str, properties: Optional[Mapping[str, str]] = None) -> str:
    """Compile and evaluate ``text`` against ``properties`` and the environment."""
    return Expression.compile(text).evaluate(PropertyResolver(properties))
