"""HiPay Professional SDK.

Client for the HiPay Professional SOAP web services: order creation,
capture, cancellation, refund and server-to-server notification decoding.
"""

from hipay_professional.client import HipayClient
from hipay_professional.transport.http_client import RequestOptions
from hipay_professional.utils.version import get_package_version

__version__ = get_package_version()

__all__ = [
    "HipayClient",
    "RequestOptions",
    "__version__",
]
