"""Main CLI entry point for the wildfly-client-config command-line tool.

Prints the event stream a subsystem would see for a configuration file, or
the configuration file that discovery would pick.
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from wildfly_client_config import __version__
from wildfly_client_config.api.configuration import ClientConfiguration
from wildfly_client_config.api.discovery import (
    CONFIG_URL_PROPERTY,
    find_configuration_uri,
    property_url_to_uri,
)
from wildfly_client_config.reader.base import ConfigurationReader
from wildfly_client_config.shared.config import ReaderConfig
from wildfly_client_config.shared.errors import ConfigXMLParseError
from wildfly_client_config.shared.logging import get_logger
from wildfly_client_config.tokenization.events import EventType

logger = get_logger(__name__, None, "cli")


def describe_event(reader: ConfigurationReader, event_type: EventType) -> Dict[str, Any]:
    """Summarize the reader's current event as a dictionary."""
    record: Dict[str, Any] = {"event": event_type.name}
    if reader.has_name():
        record["name"] = str(reader.get_name())
    if event_type is EventType.START_ELEMENT:
        record["attributes"] = {
            str(reader.get_attribute_name(index)): reader.get_attribute_value(index)
            for index in range(reader.get_attribute_count())
        }
    elif event_type is EventType.PROCESSING_INSTRUCTION:
        record["target"] = reader.get_pi_target()
        record["data"] = reader.get_pi_data()
    elif reader.has_text():
        record["text"] = reader.get_text()
    location = reader.get_location()
    record["location"] = {
        "uri": location.uri,
        "line": location.line_number,
        "column": location.column_number,
        "offset": location.character_offset,
        "include_depth": location.include_depth,
    }
    return record


def format_event(record: Dict[str, Any], show_locations: bool) -> str:
    """Render one event record as a text line."""
    parts = [record["event"]]
    if "name" in record:
        parts.append(record["name"])
    for key, value in record.get("attributes", {}).items():
        parts.append(f"{key}={value!r}")
    if "target" in record:
        parts.append(f"{record['target']} {record['data']!r}")
    if "text" in record:
        parts.append(repr(record["text"]))
    if show_locations:
        location = record["location"]
        parts.append(f"@ {location['uri']}:{location['line']}:{location['column']}")
    return " ".join(parts)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="wildfly-client-config",
        description="Inspect WildFly client configuration files"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    events_parser = subparsers.add_parser(
        "events", help="Print the events selected for a set of namespaces"
    )
    events_parser.add_argument("uri", help="Configuration file URI or path")
    events_parser.add_argument(
        "--namespace", "-n",
        action="append",
        required=True,
        dest="namespaces",
        help="Recognized namespace URI (repeatable)"
    )
    events_parser.add_argument(
        "--format", "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)"
    )
    events_parser.add_argument(
        "--locations", "-l",
        action="store_true",
        help="Include event locations in text output"
    )
    events_parser.add_argument(
        "--max-include-depth",
        type=int,
        default=None,
        help="Maximum include nesting"
    )

    locate_parser = subparsers.add_parser(
        "locate", help="Print the configuration file discovery would use"
    )
    locate_parser.add_argument(
        "--property-url",
        help=f"Value for the {CONFIG_URL_PROPERTY} property"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def cmd_events(args: argparse.Namespace) -> int:
    """Print the selected event stream of a configuration file."""
    config = ReaderConfig()
    if args.max_include_depth is not None:
        config = config.override(max_include_depth=args.max_include_depth)
    try:
        configuration = ClientConfiguration.get_instance(property_url_to_uri(args.uri), config)
        reader = configuration.read_configuration(args.namespaces)
        records: List[Dict[str, Any]] = []
        if reader is not None:
            with reader:
                for event_type in reader:
                    records.append(describe_event(reader, event_type))
    except ConfigXMLParseError as error:
        logger.debug("Reading configuration failed", extra={"kind": error.kind.name})
        print(f"Error: {error}", file=sys.stderr)
        return 1

    if args.format == "json":
        print(json.dumps(records, indent=2))
    else:
        for record in records:
            print(format_event(record, args.locations))
    return 0


def cmd_locate(args: argparse.Namespace) -> int:
    """Print the discovered configuration URI."""
    properties = {}
    if args.property_url:
        properties[CONFIG_URL_PROPERTY] = args.property_url
    uri = find_configuration_uri(properties)
    if uri is None:
        print("No configuration file found", file=sys.stderr)
        return 1
    print(uri)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    if args.command == "events":
        return cmd_events(args)
    if args.command == "locate":
        return cmd_locate(args)
    print(f"Unknown command: {args.command}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
