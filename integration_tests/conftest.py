"""Pytest configuration for integration tests."""

import pytest
from click.testing import CliRunner

from percent_lift.cli import main
from percent_lift.config import get_config


# Mark all tests in this directory as integration tests
def pytest_collection_modifyitems(items):
    """Add integration marker to all tests in this directory."""
    for item in items:
        if "integration_tests" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point the CLI and repositories at a temporary data directory."""
    monkeypatch.setenv("PERCENT_LIFT_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("PERCENT_LIFT_LOG_LEVEL", "WARNING")
    get_config.cache_clear()
    yield tmp_path
    get_config.cache_clear()


@pytest.fixture
def cli(data_dir):
    """Invoke the CLI and fail loudly on a non-zero exit."""
    runner = CliRunner()

    def _cli(*args, input=None, expect_exit=0):
        result = runner.invoke(main, list(args), input=input)
        assert result.exit_code == expect_exit, result.output
        return result.output

    return _cli
