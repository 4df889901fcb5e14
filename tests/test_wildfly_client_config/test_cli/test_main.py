"""Tests for the CLI main module."""

import json
import sys

import pytest

from wildfly_client_config import __version__
from wildfly_client_config.cli.main import create_argument_parser, format_event, main

CONFIG = (
    '<configuration xmlns:xi="http://www.w3.org/2001/XInclude">'
    '<other xmlns="urn:other"/>'
    '<mine xmlns="urn:mine:1.0" mode="fast"><value>text</value></mine>'
    "</configuration>"
)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "wildfly-config.xml"
    path.write_text(CONFIG, encoding="utf-8")
    return path


class TestArgumentParser:
    """Test argument parsing."""

    def test_events_arguments(self):
        """Test the events subcommand."""
        parser = create_argument_parser()

        args = parser.parse_args(["events", "c.xml", "-n", "urn:a", "-n", "urn:b", "--format", "json"])

        assert args.command == "events"
        assert args.namespaces == ["urn:a", "urn:b"]
        assert args.format == "json"
        assert args.max_include_depth is None

    def test_events_requires_namespace(self):
        """Test at least one namespace is needed."""
        with pytest.raises(SystemExit):
            create_argument_parser().parse_args(["events", "c.xml"])

    def test_version(self, capsys):
        """Test --version."""
        with pytest.raises(SystemExit):
            main(["--version"])

        assert __version__ in capsys.readouterr().out


class TestFormatEvent:
    """Test text rendering of event records."""

    def test_start_element(self):
        """Test names and attributes."""
        record = {"event": "START_ELEMENT", "name": "{urn:a}x", "attributes": {"k": "v"}}

        assert format_event(record, False) == "START_ELEMENT {urn:a}x k='v'"

    def test_location(self):
        """Test locations are appended on request."""
        record = {
            "event": "CHARACTERS",
            "text": "hi",
            "location": {"uri": "file:///a.xml", "line": 2, "column": 5},
        }

        assert format_event(record, True) == "CHARACTERS 'hi' @ file:///a.xml:2:5"


class TestEventsCommand:
    """Test the events subcommand."""

    def test_text_output(self, config_file, capsys):
        """Test the selected element is printed."""
        exit_code = main(["events", str(config_file), "-n", "urn:mine:1.0"])

        assert exit_code == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines == [
            "START_ELEMENT {urn:mine:1.0}mine mode='fast'",
            "START_ELEMENT {urn:mine:1.0}value",
            "CHARACTERS 'text'",
            "END_ELEMENT {urn:mine:1.0}value",
            "END_ELEMENT {urn:mine:1.0}mine",
        ]

    def test_json_output(self, config_file, capsys):
        """Test JSON records include locations."""
        exit_code = main(["events", config_file.as_uri(), "-n", "urn:mine:1.0", "-f", "json"])

        assert exit_code == 0
        records = json.loads(capsys.readouterr().out)
        assert records[0]["event"] == "START_ELEMENT"
        assert records[0]["attributes"] == {"mode": "fast"}
        assert records[0]["location"]["uri"] == config_file.as_uri()
        assert records[0]["location"]["include_depth"] == 0

    def test_nothing_selected(self, config_file, capsys):
        """Test an unrecognized namespace prints nothing."""
        assert main(["events", str(config_file), "-n", "urn:none"]) == 0
        assert capsys.readouterr().out == ""

    def test_parse_error(self, tmp_path, capsys):
        """Test malformed configuration files are reported."""
        path = tmp_path / "broken.xml"
        path.write_text("<configuration><mine xmlns='urn:m'></configuration>", encoding="utf-8")

        exit_code = main(["events", str(path), "-n", "urn:m"])

        assert exit_code == 1
        assert "Error:" in capsys.readouterr().err


class TestLocateCommand:
    """Test the locate subcommand."""

    def test_property_url(self, config_file, capsys):
        """Test an explicit property value."""
        assert main(["locate", "--property-url", str(config_file)]) == 0
        assert capsys.readouterr().out.strip() == config_file.as_uri()

    def test_found_on_sys_path(self, config_file, capsys, monkeypatch):
        """Test discovery through sys.path."""
        monkeypatch.setattr(sys, "path", [str(config_file.parent)])

        assert main(["locate"]) == 0
        assert capsys.readouterr().out.strip() == config_file.resolve().as_uri()

    def test_not_found(self, tmp_path, capsys, monkeypatch):
        """Test the exit code when nothing is found."""
        monkeypatch.setattr(sys, "path", [str(tmp_path)])

        assert main(["locate"]) == 1
        assert "No configuration file found" in capsys.readouterr().err


def test_no_command(capsys):
    """Test help is shown without a command."""
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out
