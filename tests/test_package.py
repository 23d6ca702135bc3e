"""Tests for pymig package."""

import pymig.cli


def test_package_imports():
    """Test that the package can be imported successfully."""
    import pymig

    assert pymig.MigrationApplication is not None
    assert pymig.Migration is not None


def test_package_version():
    """Test that the package has a version string."""
    from pymig import __version__

    assert __version__ == "0.1.0"


def test_cli_help(runner):
    """Test that every command is registered on the CLI."""
    result = runner.invoke(pymig.cli.main, ["--help"])

    assert result.exit_code == 0
    for command in ("init", "status", "check", "generate", "migrate", "rollback"):
        assert command in result.output
