"""Root test configuration."""

import logging

import pytest
import structlog

from targetedid.settings import Settings


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


@pytest.fixture
def state():
    """A request state as handed over by the identity provider."""
    return {
        "Attributes": {
            "uid": ["alice"],
            "mail": ["alice@example.org", "a.smith@example.org"],
            "schacHomeOrganization": ["example.org"],
        },
        "saml:RequesterID": ["https://sp.example.com/shibboleth"],
        "core:SP": "https://sp.example.com/shibboleth",
        "core:IdP": "https://idp.example.org/idp",
        "UserID": "alice@example.org",
    }


@pytest.fixture
def settings():
    """Settings isolated from the environment."""
    return Settings(config_path=None, salt=None)
