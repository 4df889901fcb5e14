"""Source locations attached to reader events and errors."""

import functools
from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple


@functools.total_ordering
@dataclass(frozen=True)
class XMLLocation:
    """A position inside a configuration document.

    Locations chain through ``included_from`` to the location of the include
    directive that pulled the document in, so a location inside a nested
    include renders every includer down to the root document.

    Attributes:
        uri: Document URI, ``None`` when unknown
        line_number: 1-based line, or -1 when unknown
        column_number: 1-based column, or -1 when unknown
        character_offset: 0-based offset, or -1 when unknown
        public_id: Public identifier, if any
        system_id: System identifier, if any
        included_from: Location of the including directive
    """

    uri: Optional[str] = None
    line_number: int = -1
    column_number: int = -1
    character_offset: int = -1
    public_id: Optional[str] = None
    system_id: Optional[str] = None
    included_from: Optional["XMLLocation"] = None

    UNKNOWN: ClassVar["XMLLocation"]

    @property
    def include_depth(self) -> int:
        """Number of include directives between this location and the root."""
        depth = 0
        location = self.included_from
        while location is not None:
            depth += 1
            location = location.included_from
        return depth

    def _sort_key(self) -> Tuple[bool, str, int, int, int]:
        return (
            self.uri is not None,
            self.uri or "",
            self.line_number,
            self.column_number,
            self.character_offset,
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, XMLLocation):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        parts = ["\n\tat ", self.uri if self.uri is not None else "<input>"]
        if self.line_number > 0:
            parts.append(f":{self.line_number}")
            if self.column_number > 0:
                parts.append(f":{self.column_number}")
        if self.included_from is not None:
            parts.append(str(self.included_from))
        return "".join(parts)


XMLLocation.UNKNOWN = XMLLocation()
