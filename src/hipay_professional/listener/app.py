"""Flask application receiving HiPay server-to-server notifications.

Each notification is decoded with :meth:`HipayClient.parse_notification`
and queued, decoded or not, so a test or a worker can ``poll()`` it. HiPay
only needs a 200 answer; decoding failures are reported through the queue.
"""

import logging
import queue
from dataclasses import dataclass
from typing import List, Optional

from flask import Flask, Response, request

from hipay_professional.client import HipayClient
from hipay_professional.config.schema import ListenerConfig
from hipay_professional.models.responses import NotificationResponse
from hipay_professional.soap.notification import extract_notification_xml
from hipay_professional.utils.exceptions import NotificationError

logger = logging.getLogger(__name__)

DEFAULT_POLL_TIMEOUT = 30


@dataclass
class NotificationEvent:
    """One received notification: decoded result or decoding error."""
    
    result: Optional[NotificationResponse] = None
    error: Optional[NotificationError] = None


class NotificationQueue:
    """Thread-safe FIFO of received notifications.
    
    Example:
        >>> notifications = NotificationQueue()
        >>> app = create_app(client, notifications)
        >>> # ... pay the order ...
        >>> notification = notifications.poll(timeout=60)
    """
    
    def __init__(self) -> None:
        self._queue: "queue.Queue[NotificationEvent]" = queue.Queue()
    
    def push(self, event: NotificationEvent) -> None:
        self._queue.put(event)
    
    def poll(self, timeout: float = DEFAULT_POLL_TIMEOUT) -> NotificationResponse:
        """Wait for the next notification.
        
        Args:
            timeout: Seconds to wait
            
        Returns:
            The decoded notification
            
        Raises:
            TimeoutError: If nothing arrives in time
            NotificationError: If the next notification could not be decoded
        """
        try:
            event = self._queue.get(timeout=timeout)
        except queue.Empty:
            raise TimeoutError("notification polling timed out") from None
        if event.error is not None:
            raise event.error
        return event.result
    
    def clear(self) -> None:
        """Drop pending notifications."""
        drained: List[NotificationEvent] = []
        while True:
            try:
                drained.append(self._queue.get_nowait())
            except queue.Empty:
                break
        if drained:
            logger.debug(f"Dropped {len(drained)} pending notification(s)")
    
    def __len__(self) -> int:
        return self._queue.qsize()


def create_app(
    client: HipayClient,
    notifications: Optional[NotificationQueue] = None,
    path: str = "/",
    check_digest: bool = True,
    check_signature: bool = False,
) -> Flask:
    """Create the notification listener application.
    
    Args:
        client: Client whose password verifies the notifications
        notifications: Queue receiving the events (created if omitted)
        path: URL path of the notification endpoint
        check_digest: Verification mode, see parse_notification
        check_signature: Verification mode, see parse_notification
        
    Returns:
        Flask application; the queue is available as
        ``app.config["NOTIFICATIONS"]``
    """
    app = Flask(__name__)
    app.config["NOTIFICATIONS"] = notifications if notifications is not None else NotificationQueue()
    
    def receive_notification() -> Response:
        event = NotificationEvent()
        try:
            xml_str = extract_notification_xml(request.get_data(as_text=True))
            event.result = client.parse_notification(
                xml_str,
                check_digest=check_digest,
                check_signature=check_signature,
            )
        except NotificationError as e:
            logger.warning(f"Rejected notification from {request.remote_addr}: {e}")
            event.error = e
        
        app.config["NOTIFICATIONS"].push(event)
        return Response("success", status=200, mimetype="text/plain")
    
    app.add_url_rule(path, "receive_notification", receive_notification, methods=["POST"])
    
    logger.info(f"Notification listener ready on {path}")
    return app


def run_listener(client: HipayClient, config: ListenerConfig) -> None:
    """Serve the listener until interrupted (development server).
    
    Args:
        client: Client verifying the notifications
        config: Bind address, port and path
    """
    app = create_app(client, path=config.path)
    logger.info(f"Listening for HiPay notifications on http://{config.host}:{config.port}{config.path}")
    app.run(host=config.host, port=config.port)
