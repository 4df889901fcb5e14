"""Test module for wildfly_client_config package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import wildfly_client_config

    # Assert
    assert wildfly_client_config is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import wildfly_client_config

    # Assert
    assert isinstance(wildfly_client_config.__version__, str)
    assert wildfly_client_config.__version__ == "0.1.0"


def test_package_has_author() -> None:
    """Test that the package has an author attribute."""
    # Arrange & Act
    import wildfly_client_config

    # Assert
    assert wildfly_client_config.__author__ == "WildFly Client Config Team"


def test_package_exports_entry_point() -> None:
    """Test that the main entry points are exported."""
    # Arrange & Act
    import wildfly_client_config

    # Assert
    for name in ("ClientConfiguration", "ConfigurationReader", "ConfigXMLParseError",
                 "EventType", "XMLLocation", "ReaderConfig"):
        assert name in wildfly_client_config.__all__
        assert hasattr(wildfly_client_config, name)
