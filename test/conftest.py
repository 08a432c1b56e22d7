"""
Shared pytest fixtures and configuration for timelimited tests.
"""
import logging
from datetime import datetime, timezone

import pytest
from timelimited.config import reset_config


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests of a single module")
    config.addinivalue_line("markers", "integration: tests that run the whole pipeline or the CLI")


@pytest.fixture(autouse=True)
def clean_global_state():
    """Reset cached configuration and CLI logging handlers around every test."""
    reset_config()
    yield
    reset_config()
    cli_logger = logging.getLogger("timelimited")
    for handler in cli_logger.handlers[:]:
        cli_logger.removeHandler(handler)
    cli_logger.propagate = True
    cli_logger.setLevel(logging.NOTSET)


@pytest.fixture
def reference_instant():
    """Reference instant used by most tests: 2024-01-01 00:00:00 UTC."""
    return datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def sample_js_source():
    """A JavaScript file with expired, active and unwrap-block markers."""
    return """async function main() {
  console.log('hello');
  /* < time-limited to="2020-12-31 23:59:59" > */
    console.log('removed 1');
  /* < /time-limited > */

  /* < time-limited to="2099-12-31 23:59:59" > */
    console.log('kept 2');
  /* < /time-limited > */

  /* < time-limited to="2020-12-31 23:59:59" unwrap-block > */
  if (isReleased) {
    console.log('unwrapped 3');
  }
  /* < /time-limited > */
}
"""


@pytest.fixture
def sample_js_expected():
    """sample_js_source after applying time limits at 2024-01-01."""
    return """async function main() {
  console.log('hello');

  /* < time-limited to="2099-12-31 23:59:59" > */
    console.log('kept 2');
  /* < /time-limited > */

  console.log('unwrapped 3');
}
"""
