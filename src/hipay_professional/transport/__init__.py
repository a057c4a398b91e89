"""HTTP transport for HiPay SOAP calls."""

from hipay_professional.transport.http_client import RequestOptions, post_xml

__all__ = ["RequestOptions", "post_xml"]
