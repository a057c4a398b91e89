"""Integration test fixtures and configuration.

This module provides a Flask test double of the HiPay SOAP services and a
session adapter routing the client's HTTP calls to it, so complete client
exchanges run without network:

- ``/soap/<area>/<operation>`` answers in the service's XML shape and echoes
  the (non credential) request parameters back in the result
- wrong credentials yield a business error (code 1)
- transaction id ``FAULT`` yields an HTTP 500 SOAP fault
"""

import logging
from typing import Callable, Dict, List
from urllib.parse import urlsplit

import pytest
import requests
from flask import Flask, Response, request
from lxml import etree

from hipay_professional.client import HipayClient

logger = logging.getLogger(__name__)

SOAP_ENV = "http://schemas.xmlsoap.org/soap/envelope/"
ECHO_ENDPOINT = "https://hipay.test/"
LOGIN = "integration-login"
PASSWORD = "integration-password"

FAULT_XML = (
    '<?xml version="1.0" encoding="UTF-8"?>'
    f'<SOAP-ENV:Envelope xmlns:SOAP-ENV="{SOAP_ENV}"><SOAP-ENV:Body><SOAP-ENV:Fault>'
    "<faultcode>SOAP-ENV:Server</faultcode><faultstring>Internal error</faultstring>"
    "</SOAP-ENV:Fault></SOAP-ENV:Body></SOAP-ENV:Envelope>"
)


def soap_response(area: str, operation: str, values: Dict[str, str]) -> Response:
    """Build a ``<operation>Response/<operation>Result`` envelope."""
    ns_url = f"{ECHO_ENDPOINT}soap/{area}"
    envelope = etree.Element(f"{{{SOAP_ENV}}}Envelope", nsmap={"SOAP-ENV": SOAP_ENV, "ns1": ns_url})
    body = etree.SubElement(envelope, f"{{{SOAP_ENV}}}Body")
    message = etree.SubElement(body, f"{{{ns_url}}}{operation}Response")
    result = etree.SubElement(message, f"{operation}Result")
    for name, value in values.items():
        etree.SubElement(result, name).text = value
    return Response(
        etree.tostring(envelope, xml_declaration=True, encoding="UTF-8"),
        status=200,
        mimetype="text/xml",
    )


def create_echo_server() -> Flask:
    """Create the HiPay echo test double."""
    app = Flask(__name__)
    app.config["REQUESTS"] = []

    @app.route("/soap/<area>/<operation>", methods=["POST"])
    def soap_endpoint(area: str, operation: str) -> Response:
        root = etree.fromstring(request.get_data())
        app.config["REQUESTS"].append((request.path, dict(request.headers), root))

        parameters = root.find(".//parameters")
        fields = {child.tag: child.text for child in parameters if len(child) == 0}

        if fields.get("wsLogin") != LOGIN or fields.get("wsPassword") != PASSWORD:
            return soap_response(area, operation, {"code": "1", "description": "Invalid credentials"})

        if fields.get("transactionPublicId") == "FAULT":
            return Response(FAULT_XML, status=500, mimetype="text/xml")

        if operation == "generate":
            echoed = {"redirectUrl": f"https://payment.hipay.test/order/?amount={fields['amount']}"}
        else:
            echoed = {k: v for k, v in fields.items() if not k.startswith("ws")}

        logger.debug(f"Echo server answering {operation} with {sorted(echoed)}")
        return soap_response(area, operation, {"code": "0", "description": "", **echoed})

    return app


class FlaskSession:
    """requests.Session stand-in routing POSTs to a Flask test client."""

    def __init__(self, app: Flask) -> None:
        self._client = app.test_client()
        self.calls: List[dict] = []

    def post(self, url, data=None, headers=None, timeout=None, verify=True, proxies=None):
        self.calls.append({"url": url, "timeout": timeout, "verify": verify})
        flask_response = self._client.post(urlsplit(url).path, data=data, headers=headers)

        response = requests.Response()
        response.status_code = flask_response.status_code
        response._content = flask_response.get_data()
        response.headers.update(flask_response.headers)
        response.url = url
        return response


@pytest.fixture
def echo_server() -> Flask:
    return create_echo_server()


@pytest.fixture
def echo_session(echo_server: Flask) -> FlaskSession:
    return FlaskSession(echo_server)


@pytest.fixture
def make_echo_client(echo_session: FlaskSession) -> Callable[..., HipayClient]:
    """Return a factory of clients talking to the echo test double."""

    def _make(endpoint: str = ECHO_ENDPOINT, login: str = LOGIN, password: str = PASSWORD) -> HipayClient:
        return HipayClient(endpoint, login, password, session=echo_session)

    return _make


@pytest.fixture
def echo_client(make_echo_client: Callable[..., HipayClient]) -> HipayClient:
    """Client talking to the echo test double."""
    return make_echo_client()


@pytest.fixture
def echo_password() -> str:
    """API password known to the echo test double (notification signing secret)."""
    return PASSWORD
