"""URI handling for configuration documents and include references."""

import re
from typing import BinaryIO, Mapping, Optional
from urllib.parse import urljoin, urlsplit
from urllib.request import Request, urlopen

_SCHEME_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*")
_ILLEGAL_CHARACTERS = re.compile(r'[\x00-\x20\x7f"<>\\^`{|}]')
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def parse_uri(text: str) -> str:
    """Check that ``text`` is a syntactically valid URI reference.

    Args:
        text: Candidate URI reference

    Returns:
        ``text`` unchanged

    Raises:
        ValueError: If ``text`` contains illegal characters, a malformed
            percent escape or an invalid scheme
    """
    match = _ILLEGAL_CHARACTERS.search(text)
    if match is not None:
        raise ValueError(f"Illegal character at index {match.start()}: {text!r}")
    match = _BAD_ESCAPE.search(text)
    if match is not None:
        raise ValueError(f"Malformed escape pair at index {match.start()}: {text!r}")
    first_segment = re.split(r"[/?#]", text, maxsplit=1)[0]
    if ":" in first_segment:
        scheme = first_segment.split(":", 1)[0]
        if not _SCHEME_PATTERN.fullmatch(scheme):
            raise ValueError(f"Illegal scheme name: {text!r}")
    # urlsplit rejects a few remaining forms, such as unbalanced IPv6 brackets
    urlsplit(text)
    return text


def has_fragment(uri: str) -> bool:
    """Return True if ``uri`` has a fragment identifier, even an empty one."""
    return "#" in uri


def is_absolute(uri: str) -> bool:
    """Return True if ``uri`` has a scheme."""
    return bool(urlsplit(uri).scheme)


def is_opaque(uri: str) -> bool:
    """Return True if ``uri`` is absolute and its scheme-specific part is not hierarchical."""
    if not is_absolute(uri):
        return False
    scheme_specific = uri.split(":", 1)[1]
    return not scheme_specific.startswith("/")


def resolve_uri(base: str, reference: str) -> str:
    """Resolve ``reference`` against ``base``."""
    if is_absolute(reference):
        return reference
    if is_opaque(base):
        return reference
    return urljoin(base, reference)


def open_url(
    uri: str,
    headers: Optional[Mapping[str, str]] = None,
    timeout: Optional[float] = None,
) -> BinaryIO:
    """Open ``uri`` for reading.

    Args:
        uri: Absolute URL
        headers: Request headers such as ``Accept``
        timeout: Timeout in seconds, ``None`` to use the default

    Returns:
        Binary stream positioned at the start of the resource

    Raises:
        ValueError: If ``uri`` is not a usable URL
        OSError: If the resource cannot be opened
    """
    request = Request(uri, headers=dict(headers or {}))
    if timeout is None:
        return urlopen(request)
    return urlopen(request, timeout=timeout)
