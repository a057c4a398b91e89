"""HiPay Professional client.

Composes the SOAP body builder, the HTTP transport and the response parser
around a single HTTP call per operation, and decodes inbound notifications.
"""

import logging
import time
from collections.abc import Mapping
from typing import Any, Dict, Optional, Type, TypeVar, Union

import requests

from hipay_professional.config.environment import join_endpoint, resolve_endpoint
from hipay_professional.config.schema import ClientConfig
from hipay_professional.logging_audit.audit import log_transaction
from hipay_professional.models.requests import (
    CancelOrderRequest,
    CaptureOrderRequest,
    CreateOrderRequest,
    RefundOrderRequest,
)
from hipay_professional.models.responses import (
    CancelOrderResult,
    CaptureOrderResult,
    CreateOrderResult,
    HipayResponse,
    NotificationResponse,
    RefundOrderResult,
)
from hipay_professional.soap.builder import create_body, to_wire
from hipay_professional.soap.notification import parse_notification
from hipay_professional.soap.parsers import parse_response
from hipay_professional.soap.registry import lookup, operation_path
from hipay_professional.transport.http_client import RequestOptions, post_xml
from hipay_professional.utils.exceptions import HipayException

logger = logging.getLogger(__name__)

T = TypeVar("T")


class HipayClient:
    """Client of the HiPay Professional SOAP web services.
    
    Get the API credentials (login/password) from the merchant Toolbox. The
    stage environment uses the sandbox site (test-professional.hipay.com).
    
    Protocol errors (invalid amount, unknown transaction, ...) are returned
    in ``HipayResponse.error``; only unexpected failures raise
    (:class:`TransportError`, :class:`ResponseParseError`).
    
    Attributes:
        environment: Environment given at construction
        endpoint: Resolved API base URL
        
    Example:
        >>> client = HipayClient(env="stage", login="...", password="...")
        >>> response = client.capture_order(CaptureOrderRequest(transaction_public_id="5CF68C1301DC7655"))
        >>> if response.error:
        ...     print(f"Error {response.error.code}: {response.error.description}")
        ... else:
        ...     print(response.result.transaction_public_id)
    """
    
    def __init__(
        self,
        env: str,
        login: str,
        password: str,
        sub_account_login: Optional[str] = None,
        sub_account_id: Optional[int] = None,
        default_request_options: Optional[RequestOptions] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the client.
        
        Args:
            env: "production", "stage" or an explicit http(s) base URL
            login: API login
            password: API password (also verifies notifications)
            sub_account_login: Optional sub-account login
            sub_account_id: Optional sub-account id
            default_request_options: Defaults for every request (timeout 30s)
            session: Optional caller-owned requests session
            
        Raises:
            ConfigurationError: If env is not valid
        """
        self._environment = env
        self._endpoint = resolve_endpoint(env)
        
        # Credentials are sent as hidden fields of every request
        defaults: Dict[str, Any] = {"wsLogin": login, "wsPassword": password}
        if sub_account_login:
            defaults["wsSubAccountLogin"] = sub_account_login
        if sub_account_id:
            defaults["wsSubAccountId"] = sub_account_id
        self._default_data = defaults
        self._password = password
        self._default_request_options = default_request_options or RequestOptions()
        self._session = session
        
        if self._endpoint.startswith("http://"):
            logger.warning(
                "SECURITY WARNING: Using HTTP transport (not HTTPS) for HiPay endpoint "
                f"{self._endpoint}. Credentials are sent in clear text."
            )
        
        logger.info(f"HiPay client initialized: environment={env}, endpoint={self._endpoint}")
    
    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        session: Optional[requests.Session] = None,
    ) -> "HipayClient":
        """Create a client from a validated configuration.
        
        Example:
            >>> config = load_config()
            >>> client = HipayClient.from_config(config.client)
        """
        return cls(
            env=config.env,
            login=config.login,
            password=config.password,
            sub_account_login=config.sub_account_login,
            sub_account_id=config.sub_account_id,
            default_request_options=RequestOptions(
                timeout=config.request.timeout,
                verify=config.request.verify_tls,
            ),
            session=session,
        )
    
    @property
    def environment(self) -> str:
        """Client environment."""
        return self._environment
    
    @property
    def endpoint(self) -> str:
        """Client API base URL."""
        return self._endpoint
    
    def create_order(
        self,
        req: Union[CreateOrderRequest, Mapping],
        opts: Optional[RequestOptions] = None,
    ) -> HipayResponse[CreateOrderResult]:
        """Create a new order.
        
        At payment time, create an order then redirect the customer to
        ``result.redirect_url`` (the secure payment page hosted by HiPay).
        Once paid, the order is authorized and can be captured.
        
        Args:
            req: Request parameters
            opts: Request options (merged over the client defaults)
            
        Returns:
            HipayResponse with the redirect URL or a protocol error
            
        Raises:
            TransportError: If HiPay cannot be reached
            ResponseParseError: If the response cannot be understood
        """
        return self._request(CreateOrderRequest, req, CreateOrderResult, opts)
    
    def capture_order(
        self,
        req: Union[CaptureOrderRequest, Mapping],
        opts: Optional[RequestOptions] = None,
    ) -> HipayResponse[CaptureOrderResult]:
        """Capture a previously authorized order.
        
        Transfers the funds from the customer's account to the merchant's.
        
        Args:
            req: Request parameters
            opts: Request options
            
        Returns:
            HipayResponse with the captured transaction or a protocol error
        """
        return self._request(CaptureOrderRequest, req, CaptureOrderResult, opts)
    
    def cancel_order(
        self,
        req: Union[CancelOrderRequest, Mapping],
        opts: Optional[RequestOptions] = None,
    ) -> HipayResponse[CancelOrderResult]:
        """Cancel an authorized order."""
        return self._request(CancelOrderRequest, req, CancelOrderResult, opts)
    
    def refund_order(
        self,
        req: Union[RefundOrderRequest, Mapping],
        opts: Optional[RequestOptions] = None,
    ) -> HipayResponse[RefundOrderResult]:
        """Refund a captured order, totally or partially."""
        return self._request(RefundOrderRequest, req, RefundOrderResult, opts)
    
    def parse_notification(
        self,
        xml_str: str,
        check_digest: bool = True,
        check_signature: bool = False,
    ) -> NotificationResponse:
        """Parse a notification (callback) and verify its integrity.
        
        After a purchase, HiPay calls the notification URL in background
        (authorization then capture), POSTing a url-encoded form whose
        ``xml`` field is decoded here.
        
        Args:
            xml_str: Value of the ``xml`` form field
            check_digest: Accept the legacy digest or the signature (default)
            check_signature: Accept the signature only
            
        Returns:
            Decoded notification
            
        Raises:
            NotificationError: If the content is invalid or the digest does not match
        """
        return parse_notification(
            xml_str,
            self._password,
            check_digest=check_digest,
            check_signature=check_signature,
        )
    
    def _request(
        self,
        request_type: type,
        req: Any,
        result_type: Type[T],
        opts: Optional[RequestOptions],
    ) -> HipayResponse[T]:
        """Send one operation and parse its response."""
        definition = lookup(request_type)
        url = join_endpoint(self._endpoint, operation_path(definition))
        body = create_body(self._endpoint, {**self._default_data, **to_wire(req)}, definition)
        options = self._default_request_options.merge(opts)
        
        start_time = time.time()
        try:
            http_response = post_xml(url, body, options, session=self._session)
        except HipayException as e:
            log_transaction(definition.operation, url, body, None, "failure", str(e))
            raise
        
        try:
            response = parse_response(http_response.text, definition, result_type, http_response)
        except HipayException as e:
            log_transaction(definition.operation, url, body, http_response.text, "failure", str(e))
            raise
        
        processing_time_ms = int((time.time() - start_time) * 1000)
        if response.error:
            log_transaction(
                definition.operation, url, body, http_response.text, "error",
                f"{response.error.code} {response.error.description}",
            )
        else:
            log_transaction(definition.operation, url, body, http_response.text)
        
        logger.info(
            f"HiPay {definition.operation} completed: success={response.is_success}, "
            f"time={processing_time_ms}ms"
        )
        return response
    
    def __repr__(self) -> str:
        return f"HipayClient{{environment={self._environment}}}"
    
    __str__ = __repr__
