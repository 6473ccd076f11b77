"""
Client for delivering push notifications through the Expo push API,
with retries on rate limiting and transient server errors.
"""

import time
from typing import Any, Optional

import requests
import structlog

from homestay.config import PUSH_API_URL
from homestay.metrics import push_latency, push_requests

logger = structlog.get_logger(__name__)

MAX_RETRIES = 2
RETRY_DELAY = 0.5
REQUEST_TIMEOUT = 5


def should_retry(res: Optional[requests.Response], err: Optional[Exception]) -> bool:
    """
    Determine whether the push request should be retried.

    Args:
        res (Optional[requests.Response]): Response object if available.
        err (Optional[Exception]): Exception raised by the request, if any.

    Returns:
        bool: True on 429, timeouts and 5xx responses.
    """
    if res is not None and res.status_code == 429:
        return True
    if isinstance(err, requests.Timeout):
        return True
    if res is not None and 500 <= res.status_code < 600:
        return True
    return False


def send_push(
    device_token: str,
    title: str,
    body: str,
    data: Optional[dict[str, Any]] = None,
    url: str = PUSH_API_URL,
) -> dict[str, Any]:
    """
    Send one push message to a device.

    Args:
        device_token (str): Expo push token of the device.
        title (str): Notification title.
        body (str): Notification text.
        data (Optional[dict[str, Any]]): Extra payload delivered to the app.
        url (str): Push API endpoint.

    Returns:
        dict[str, Any]: Push API ticket.

    Raises:
        requests.RequestException: If delivery fails after all retries, or the
            API reports an error ticket for the token.
    """
    message = {"to": device_token, "title": title, "body": body, "data": data or {}}
    retries = 0

    while True:
        res: Optional[requests.Response] = None
        try:
            start_time = time.time()
            res = requests.post(url, json=message, timeout=REQUEST_TIMEOUT)
            push_latency.observe(time.time() - start_time)

            res.raise_for_status()
            ticket = res.json().get("data", {})
            if isinstance(ticket, list):
                ticket = ticket[0] if ticket else {}
            if ticket.get("status") == "error":
                raise requests.RequestException(ticket.get("message", "push rejected"))

            push_requests.labels(status="success").inc()
            return ticket

        except requests.RequestException as err:
            retries += 1
            if retries > MAX_RETRIES or not should_retry(res, err):
                push_requests.labels(status="failure").inc()
                logger.warning("push_delivery_failed", error=str(err), retries=retries)
                raise
            time.sleep(RETRY_DELAY * retries)
