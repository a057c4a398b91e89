"""End-to-end test fixtures and configuration.

E2E tests run against the live HiPay stage platform. They need the
HIPAY_LOGIN, HIPAY_PASSWORD, HIPAY_WEBSITE_ID and HIPAY_CATEGORY_ID
variables (a .env file at the project root is loaded) and are skipped when
any of them is missing.

Usage Examples:
    HIPAY_LOGIN=... HIPAY_PASSWORD=... HIPAY_WEBSITE_ID=... HIPAY_CATEGORY_ID=... \
        pytest tests/e2e -m e2e
"""

import pytest

from hipay_professional.client import HipayClient
from hipay_professional.config import IntegrationSettings, load_integration_settings
from hipay_professional.utils.exceptions import ConfigurationError


@pytest.fixture(scope="session")
def integration_settings() -> IntegrationSettings:
    """Live stage settings, skipping the test when they are not configured."""
    try:
        return load_integration_settings()
    except ConfigurationError as e:
        pytest.skip(str(e))


@pytest.fixture(scope="session")
def stage_client(integration_settings: IntegrationSettings) -> HipayClient:
    """Client of the stage platform."""
    return HipayClient("stage", integration_settings.login, integration_settings.password)
