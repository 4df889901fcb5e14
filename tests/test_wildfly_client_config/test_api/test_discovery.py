"""Tests for configuration file discovery."""

import os
from pathlib import Path

import pytest

from wildfly_client_config.api.discovery import (
    CONFIG_URL_PROPERTY,
    SysPathResourceLoader,
    find_configuration_uri,
    property_url_to_uri,
)


class TestPropertyUrlToUri:
    """Test conversion of the configuration URL property."""

    @pytest.mark.parametrize(
        "value",
        [
            "http://config.example.com/wildfly-config.xml",
            "file:///etc/wildfly/wildfly-config.xml",
            "jar:file:/app.jar!/wildfly-config.xml",
        ],
    )
    def test_uris_unchanged(self, value):
        """Test values that are already URIs."""
        assert property_url_to_uri(value) == value

    def test_absolute_path(self):
        """Test absolute filesystem paths."""
        assert property_url_to_uri("/etc/wildfly/client.xml") == "file:///etc/wildfly/client.xml"

    def test_relative_path(self, tmp_path, monkeypatch):
        """Test relative paths are taken from the working directory."""
        monkeypatch.chdir(tmp_path)

        uri = property_url_to_uri("conf/client.xml")

        assert uri == Path(os.path.abspath("conf/client.xml")).as_uri()
        assert uri.startswith("file:///")

    def test_single_letter_scheme_is_path(self):
        """Test drive letters are not schemes."""
        assert property_url_to_uri("c:/config.xml").startswith("file:///")

    def test_backslash_is_path(self):
        """Test values with backslashes are paths."""
        assert property_url_to_uri("dir\\client.xml").startswith("file:///")


class TestResourceLoader:
    """Test resource lookup on search paths."""

    def test_first_directory_wins(self, tmp_path):
        """Test directories are searched in order."""
        first = tmp_path / "first"
        second = tmp_path / "second"
        for directory in (first, second):
            directory.mkdir()
            (directory / "wildfly-config.xml").write_text("<configuration/>")

        loader = SysPathResourceLoader([str(first), str(second)])

        assert loader("wildfly-config.xml") == (first / "wildfly-config.xml").resolve().as_uri()

    def test_nested_resource(self, tmp_path):
        """Test slash separated resource names."""
        (tmp_path / "META-INF").mkdir()
        (tmp_path / "META-INF" / "wildfly-config.xml").write_text("<configuration/>")

        loader = SysPathResourceLoader([str(tmp_path / "missing"), str(tmp_path)])

        assert loader("META-INF/wildfly-config.xml").endswith("/META-INF/wildfly-config.xml")
        assert loader("wildfly-config.xml") is None


class TestFindConfigurationUri:
    """Test the discovery order."""

    def test_property_wins(self):
        """Test the property is used before resources."""
        calls = []

        def loader(name):
            calls.append(name)
            return "file:///resource.xml"

        uri = find_configuration_uri({CONFIG_URL_PROPERTY: "http://h/c.xml"}, loader)

        assert uri == "http://h/c.xml"
        assert calls == []

    def test_resource_order(self, monkeypatch):
        """Test the plain resource name is tried before META-INF."""
        monkeypatch.delenv(CONFIG_URL_PROPERTY, raising=False)
        calls = []

        def loader(name):
            calls.append(name)
            return "file:///meta.xml" if name.startswith("META-INF") else None

        assert find_configuration_uri({}, loader) == "file:///meta.xml"
        assert calls == ["wildfly-config.xml", "META-INF/wildfly-config.xml"]

    def test_environment_fallback(self, monkeypatch):
        """Test the property is read from the environment when not given."""
        monkeypatch.setenv(CONFIG_URL_PROPERTY, "http://env/c.xml")

        assert find_configuration_uri(None, lambda name: "file:///resource.xml") == "http://env/c.xml"

    def test_properties_before_environment(self, monkeypatch):
        """Test explicit properties win over the environment."""
        monkeypatch.setenv(CONFIG_URL_PROPERTY, "http://env/c.xml")

        uri = find_configuration_uri({CONFIG_URL_PROPERTY: "http://props/c.xml"})

        assert uri == "http://props/c.xml"

    def test_nothing_found(self, monkeypatch):
        """Test None when neither source has a configuration."""
        monkeypatch.delenv(CONFIG_URL_PROPERTY, raising=False)

        assert find_configuration_uri(None, lambda name: None) is None
