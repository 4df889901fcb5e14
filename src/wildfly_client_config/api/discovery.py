"""Locating the default client configuration file."""

import os
import sys
from pathlib import Path
from typing import Callable, Iterable, Mapping, Optional, Sequence

from ..shared.expressions import PropertyResolver
from ..shared.logging import get_logger
from ..shared.uri import is_absolute

CONFIG_URL_PROPERTY = "wildfly.config.url"
CONFIG_RESOURCE_NAMES = ("wildfly-config.xml", "META-INF/wildfly-config.xml")

ResourceLoader = Callable[[str], Optional[str]]

logger = get_logger(__name__, component="discovery")


def property_url_to_uri(value: str) -> str:
    """Turn the value of the configuration URL property into a URI.

    A value with a scheme of more than one character and no backslash is
    already a URI and is returned unchanged. Anything else is a filesystem
    path; relative paths are taken relative to the working directory.

    Args:
        value: Property value

    Returns:
        Absolute URI
    """
    if "\\" not in value and is_absolute(value):
        scheme = value.split(":", 1)[0]
        if len(scheme) > 1:
            return value
    return Path(os.path.abspath(value)).as_uri()


class SysPathResourceLoader:
    """Finds resources in the directories listed on ``sys.path``."""

    def __init__(self, search_path: Optional[Sequence[str]] = None) -> None:
        self._search_path = search_path

    def _directories(self) -> Iterable[str]:
        for entry in self._search_path if self._search_path is not None else sys.path:
            yield entry or os.getcwd()

    def __call__(self, name: str) -> Optional[str]:
        """Return a ``file:`` URI for the first match of ``name``, or None."""
        for directory in self._directories():
            candidate = Path(directory, *name.split("/"))
            if candidate.is_file():
                return candidate.resolve().as_uri()
        return None


def find_configuration_uri(
    properties: Optional[Mapping[str, str]] = None,
    resource_loader: Optional[ResourceLoader] = None,
) -> Optional[str]:
    """Locate the default configuration file.

    The ``wildfly.config.url`` property wins, looked up in ``properties`` and
    then in the process environment; otherwise the resource loader is asked
    for ``wildfly-config.xml`` and then ``META-INF/wildfly-config.xml``.

    Returns:
        The configuration URI, or None if nothing was found
    """
    value = PropertyResolver(properties)(CONFIG_URL_PROPERTY)
    if value is not None:
        uri = property_url_to_uri(value)
        logger.debug("Configuration located by property", extra={"uri": uri})
        return uri
    loader = resource_loader or SysPathResourceLoader()
    for name in CONFIG_RESOURCE_NAMES:
        uri = loader(name)
        if uri is not None:
            logger.debug("Configuration located as resource", extra={"uri": uri, "resource": name})
            return uri
    return None
