"""
Shared pytest configuration and fixtures.

This module provides fixtures and configuration used across all test suites
(unit, integration, and e2e tests): canned HiPay SOAP responses, a mocked
HTTP session and a builder for digest-protected notifications.
"""

import hashlib
import os
from pathlib import Path
from typing import Callable, Generator, Optional
from unittest.mock import Mock

import pytest
import requests

from hipay_professional.client import HipayClient

TEST_LOGIN = "test-login"
TEST_PASSWORD = "test-password"

NOTIFICATION_TEMPLATE = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    "<mapi>\n"
    "  <mapiversion>1.0</mapiversion>\n"
    "  <md5content>{md5content}</md5content>\n"
    "  {result}\n"
    "</mapi>\n"
)

NOTIFICATION_RESULT = """<result>
    <operation>capture</operation>
    <status>ok</status>
    <date>2020-06-04</date>
    <time>12:00:31 UTC+0000</time>
    <origAmount>14.39</origAmount>
    <origCurrency>EUR</origCurrency>
    <idForMerchant>REF1</idForMerchant>
    <emailClient>customer@example.com</emailClient>
    <idClient>1234567</idClient>
    <cardCountry>FR</cardCountry>
    <ipCountry>FR</ipCountry>
    <merchantDatas>
      <_aKey_sessionId>123456789</_aKey_sessionId>
      <_aKey_cartId>42</_aKey_cartId>
    </merchantDatas>
    <transid>5CF68C1301DC7655</transid>
    <is3ds>No</is3ds>
    <paymentMethod>VISA</paymentMethod>
    <customerCountry>FR</customerCountry>
    <returnCode></returnCode>
  </result>"""


@pytest.fixture
def project_root() -> Path:
    """
    Return the project root directory.

    Returns:
        Path: Absolute path to the project root directory.
    """
    return Path(__file__).parent.parent


@pytest.fixture
def fixtures_dir(project_root: Path) -> Path:
    """
    Return the HiPay test fixtures directory path.

    Args:
        project_root: Project root directory fixture.

    Returns:
        Path: Absolute path to the HiPay fixtures directory.
    """
    return project_root / "tests" / "fixtures" / "hipay"


@pytest.fixture
def load_fixture(fixtures_dir: Path) -> Callable[[str], str]:
    """Return a loader reading a fixture file as UTF-8 text."""

    def _load(name: str) -> str:
        return (fixtures_dir / name).read_text(encoding="utf-8")

    return _load


@pytest.fixture
def make_http_response() -> Callable[..., Mock]:
    """Return a factory of mocked requests responses."""

    def _make(text: str = "", status_code: int = 200) -> Mock:
        response = Mock(spec=requests.Response)
        response.status_code = status_code
        response.text = text
        return response

    return _make


@pytest.fixture
def mock_session() -> Mock:
    """Mocked requests session injected into the client."""
    return Mock(spec=requests.Session)


@pytest.fixture
def client(mock_session: Mock) -> HipayClient:
    """Stage client sending its requests through the mocked session."""
    return HipayClient(
        env="stage",
        login=TEST_LOGIN,
        password=TEST_PASSWORD,
        session=mock_session,
    )


@pytest.fixture
def notification_result() -> str:
    """Raw ``<result>`` fragment of a capture notification."""
    return NOTIFICATION_RESULT


@pytest.fixture
def build_notification() -> Callable[..., str]:
    """Return a builder of notifications protected by a real MD5 digest.

    ``scheme`` is "signature" (digest of result + password) or "digest"
    (digest of result only); an explicit ``md5content`` bypasses both.
    """

    def _build(
        scheme: str = "signature",
        md5content: Optional[str] = None,
        result: str = NOTIFICATION_RESULT,
        password: str = TEST_PASSWORD,
    ) -> str:
        if md5content is None:
            payload = result.encode("utf-8")
            if scheme == "signature":
                payload += password.encode("utf-8")
            md5content = hashlib.md5(payload).hexdigest()
        return NOTIFICATION_TEMPLATE.format(md5content=md5content, result=result)

    return _build


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[Path, None, None]:
    """Remove HIPAY_* variables, ignore .env files and run from an empty directory."""
    for name in list(os.environ):
        if name.startswith("HIPAY_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("hipay_professional.config.manager.load_dotenv", lambda *args, **kwargs: False)
    monkeypatch.chdir(tmp_path)
    yield tmp_path
