# ==============================================================================
# Analytics Delivery Client
# ==============================================================================
"""
Best-effort, at-most-once delivery of analytics events to the collector.

Each send_event() call becomes one independent task on a thread pool: the
event is serialized, POSTed once, and the response decoded against the
EventResponse schema. Failures are logged at DEBUG and dropped; nothing is
retried and nothing propagates to the tracking caller.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor

from adpulse.base.delivery import EventSender
from adpulse.base.transport import Transport
from adpulse.core.exceptions import ClientClosedError
from adpulse.core.models import AnalyticsEvent, EventResponse

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "statistics.php"
DEFAULT_MAX_WORKERS = 8


class AnalyticsApiClient(EventSender):
    """Sends events to the collector endpoint through a Transport."""

    def __init__(
        self,
        transport: Transport,
        endpoint: str = DEFAULT_ENDPOINT,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        self._transport = transport
        self._endpoint = endpoint
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="adpulse-delivery"
        )
        self._closed = False
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    def send_event(self, event: AnalyticsEvent) -> Future | None:
        """
        Schedule one delivery attempt in the background.

        Returns:
            Future resolving to the EventResponse (or None on failure);
            None when the client is already shut down
        """
        with self._lock:
            if self._closed:
                logger.debug("Client closed, dropping %s event", event.event_type.value)
                return None
            return self._executor.submit(self._deliver_quietly, event)

    def deliver(self, event: AnalyticsEvent) -> EventResponse | None:
        """
        Deliver one event synchronously.

        Returns:
            Decoded collector response, or None if delivery failed

        Raises:
            ClientClosedError: If the client was shut down
        """
        if self._closed:
            raise ClientClosedError("Analytics client is shut down")
        return self._deliver_quietly(event)

    def _deliver_quietly(self, event: AnalyticsEvent) -> EventResponse | None:
        try:
            payload = self._transport.request("POST", self._endpoint, body=event.to_dict())
            response = EventResponse.from_payload(payload)
        except Exception as e:
            logger.debug("Failed to send event %s: %s", event.event_type.value, e)
            return None

        logger.debug(
            "Event sent successfully: %s, Response: %s",
            event.event_type.value,
            response.model_dump(),
        )
        return response

    def shutdown(self, wait: bool = True) -> None:
        """
        Stop accepting events and release the transport.

        With wait=True, queued and in-flight sends finish first. Calling
        shutdown again does nothing.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True

        self._executor.shutdown(wait=wait)
        if wait:
            self._transport.close()
        else:
            # Close once the remaining tasks have drained
            threading.Thread(
                target=self._close_after_drain, name="adpulse-delivery-close", daemon=True
            ).start()

    def _close_after_drain(self) -> None:
        self._executor.shutdown(wait=True)
        self._transport.close()
