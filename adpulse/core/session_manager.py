# ==============================================================================
# Analytics Session Manager
# ==============================================================================
"""
Session lifecycle tracking, event buffering and delivery orchestration.

The manager is the only owner of session state. It is driven from three
directions that may run concurrently:
- Host lifecycle callbacks (activity started/resumed/paused/stopped)
- The inactivity timer, which ends a session after the configured timeout
- Tracking calls from ad views and the network monitor

Session state and counters live behind a single re-entrant lock. The event
log has its own lock, and delivery runs on the sender's worker threads, so
no tracking call waits on network I/O.

Session transitions:
    NoSession -> Active     first foreground signal, or initialize()
    Active    -> Ended      app backgrounded, inactivity timeout, end_session()
                            or cleanup(); emits SESSION_METRICS then SESSION_ENDED
    Ended     -> Active     next foreground signal, or immediately after a
                            timeout while the app is still in the foreground
"""

import logging
import threading
from collections.abc import Callable
from typing import Any

from adpulse.base.delivery import EventSender
from adpulse.base.device_context import DeviceContextProvider
from adpulse.base.lifecycle import LifecycleObserver, LifecycleSource
from adpulse.core.builder import AnalyticsEventBuilder, session_ended_event, session_started_event
from adpulse.core.event_log import MAX_EVENTS_IN_MEMORY, BoundedEventLog
from adpulse.core.exceptions import AnalyticsInitializationError
from adpulse.core.models import AnalyticsEvent, EventType, now_ms

logger = logging.getLogger(__name__)

SESSION_TIMEOUT_SECONDS = 30 * 60

SDK_SUBJECT = "sdk"
SESSION_METRICS_SUBJECT = "session_metrics"

TimerFactory = Callable[[float, Callable[[], None]], Any]


def _daemon_timer(interval: float, function: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(interval, function)
    timer.daemon = True
    return timer


class AnalyticsManager(LifecycleObserver):
    """
    Owns the analytics session and the in-memory event log.

    Usage::

        manager = AnalyticsManager(device_context, client_factory=make_client)
        manager.initialize(lifecycle_registry)
        manager.track_event(EventType.AD_IMPRESSION, "unit-1")
        ...
        manager.cleanup()

    The manager is also a context manager; leaving the block calls cleanup().
    """

    def __init__(
        self,
        device_context: DeviceContextProvider,
        client_factory: Callable[[], EventSender | None] | None = None,
        max_events: int = MAX_EVENTS_IN_MEMORY,
        session_timeout_seconds: float = SESSION_TIMEOUT_SECONDS,
        clock: Callable[[], int] = now_ms,
        timer_factory: TimerFactory = _daemon_timer,
    ):
        """
        Initialize the manager. Nothing is started until initialize().

        Args:
            device_context: Source of session id and environment snapshots
            client_factory: Creates the event sender at initialize(); None,
                or a factory returning None, disables remote delivery
            max_events: Capacity of the in-memory event log
            session_timeout_seconds: Inactivity period after which a paused
                session ends
            clock: Epoch-millisecond clock used for session timing
            timer_factory: Creates a startable, cancellable timer
                (threading.Timer signature)
        """
        self._device_context = device_context
        self._client_factory = client_factory
        self._session_timeout_seconds = session_timeout_seconds
        self._clock = clock
        self._timer_factory = timer_factory

        self._lock = threading.RLock()
        self._log = BoundedEventLog(max_events)

        self._initialized = False
        self._client: EventSender | None = None
        self._lifecycle: LifecycleSource | None = None

        # Foreground tracking: number of started-but-not-stopped activities
        self._started_activities = 0

        # Session state
        self._session_start_time = 0
        self._last_activity_time = 0
        self._total_active_time_ms = 0
        self._ad_clicks = 0
        self._ad_impressions = 0

        # Inactivity timer; the generation invalidates callbacks of cancelled timers
        self._session_timer = None
        self._timer_generation = 0

    # ------------------------------------------------------------------
    # Lifecycle of the manager itself
    # ------------------------------------------------------------------

    def initialize(self, lifecycle: LifecycleSource | None = None) -> None:
        """
        Start the pipeline: create the sender, subscribe to lifecycle
        signals, start the first session and record SDK_INITIALIZED.

        Calling it again while initialized does nothing.

        Args:
            lifecycle: Source of host activity signals, if the host has one

        Raises:
            AnalyticsInitializationError: If any step fails; the manager is
                left uninitialized
        """
        with self._lock:
            if self._initialized:
                return

            try:
                self._client = self._client_factory() if self._client_factory else None

                if lifecycle is not None:
                    lifecycle.register_observer(self)
                    self._lifecycle = lifecycle

                self._initialized = True
                self._start_new_session()

                self._record(
                    AnalyticsEventBuilder(self._device_context)
                    .set_event_type(EventType.SDK_INITIALIZED)
                    .set_ad_unit_id(SDK_SUBJECT)
                    .with_device_info(True)
                    .with_network_info(True)
                    .with_locale_info(True)
                    .build()
                )
            except Exception as e:
                logger.error("Failed to initialize analytics manager", exc_info=True)
                self._rollback_initialize()
                raise AnalyticsInitializationError("Failed to initialize analytics manager") from e

        logger.info("Analytics manager initialized")

    def _rollback_initialize(self) -> None:
        client, self._client = self._client, None
        lifecycle, self._lifecycle = self._lifecycle, None
        self._initialized = False
        self._cancel_session_timer()
        self._reset_session_state()
        self._log.clear()

        if lifecycle is not None:
            try:
                lifecycle.unregister_observer(self)
            except Exception:
                logger.debug("Lifecycle unregistration failed during rollback", exc_info=True)
        if client is not None:
            try:
                client.shutdown(wait=False)
            except Exception:
                logger.debug("Sender shutdown failed during rollback", exc_info=True)

    def cleanup(self) -> None:
        """
        Tear the pipeline down.

        Ends the current session, hands every buffered event to the sender
        one last time, shuts the sender down and resets all state. Safe to
        call repeatedly, and before initialize().
        """
        with self._lock:
            client, self._client = self._client, None
            lifecycle, self._lifecycle = self._lifecycle, None

            # With the sender detached, the closing session events only land in the log
            if self._initialized:
                try:
                    self._end_session()
                except Exception:
                    logger.debug("Failed to end session during cleanup", exc_info=True)

            remaining = self._log.drain()
            self._initialized = False
            self._cancel_session_timer()
            self._reset_session_state()
            self._total_active_time_ms = 0
            self._started_activities = 0

        if lifecycle is not None:
            try:
                lifecycle.unregister_observer(self)
            except Exception:
                logger.debug("Lifecycle unregistration failed", exc_info=True)

        if client is not None:
            for event in remaining:
                try:
                    client.send_event(event)
                except Exception:
                    logger.debug("Error sending remaining events during cleanup", exc_info=True)
                    break
            try:
                client.shutdown(wait=False)
            except Exception:
                logger.debug("Sender shutdown failed", exc_info=True)

    def __enter__(self) -> "AnalyticsManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cleanup()

    # ------------------------------------------------------------------
    # Tracking
    # ------------------------------------------------------------------

    def track_event(
        self,
        event_type: EventType | str,
        ad_unit_id: str = "",
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """
        Build and record an event with full snapshots.

        Does nothing before initialize(). Never raises.
        """
        if not self._initialized:
            return
        try:
            event = (
                AnalyticsEventBuilder(self._device_context)
                .set_event_type(event_type)
                .set_ad_unit_id(ad_unit_id)
                .add_all_metadata(metadata)
                .build()
            )
            self._record(event)
        except Exception:
            logger.debug("Failed to track %s event", event_type, exc_info=True)

    def track_builder(self, builder: AnalyticsEventBuilder) -> None:
        """Build the event from a prepared builder and record it. Never raises."""
        if not self._initialized:
            return
        try:
            self._record(builder.build())
        except Exception:
            logger.debug("Failed to build tracked event", exc_info=True)

    def track(self, event: AnalyticsEvent) -> None:
        """Record a prebuilt event. Does nothing before initialize(). Never raises."""
        if not self._initialized:
            return
        try:
            self._record(event)
        except Exception:
            logger.debug("Failed to track %r", getattr(event, "event_type", event), exc_info=True)

    def _record(self, event: AnalyticsEvent) -> None:
        with self._lock:
            if event.event_type is EventType.AD_CLICKED:
                self._ad_clicks += 1
            elif event.event_type is EventType.AD_IMPRESSION:
                self._ad_impressions += 1
            client = self._client

        self._log.append(event)

        if client is not None:
            try:
                client.send_event(event)
            except Exception:
                logger.debug("Failed to send event to server", exc_info=True)

        logger.debug("Tracked event: %s for ad unit: %s", event.event_type.value, event.ad_unit_id)

    def get_events(self) -> list[AnalyticsEvent]:
        """Return a copy of the event log in append order."""
        return self._log.snapshot()

    def clear_events(self) -> None:
        self._log.clear()

    # ------------------------------------------------------------------
    # Session transitions (callers hold the lock)
    # ------------------------------------------------------------------

    def _start_new_session(self) -> None:
        if self._session_start_time > 0:
            self._end_session()

        now = self._clock()
        self._session_start_time = now
        self._last_activity_time = now
        self._ad_clicks = 0
        self._ad_impressions = 0

        self._record(session_started_event(self._device_context))
        logger.debug("New session started")

    def _end_session(self) -> None:
        if self._session_start_time == 0:
            return

        now = self._clock()
        session_duration = now - self._session_start_time

        if self.is_foreground and self._last_activity_time > 0:
            self._total_active_time_ms += now - self._last_activity_time
            self._last_activity_time = now

        active_time = self._total_active_time_ms
        clicks = self._ad_clicks
        impressions = self._ad_impressions

        self._session_start_time = 0
        self._cancel_session_timer()

        self._record(
            AnalyticsEventBuilder(self._device_context)
            .set_event_type(EventType.SESSION_METRICS)
            .set_ad_unit_id(SESSION_METRICS_SUBJECT)
            .add_metadata("session_duration_ms", session_duration)
            .add_metadata("active_time_ms", active_time)
            .add_metadata("ad_clicks", clicks)
            .add_metadata("ad_impressions", impressions)
            .add_metadata("avg_time_per_click", active_time // clicks if clicks > 0 else 0)
            .build()
        )
        self._record(
            session_ended_event(
                self._device_context,
                {
                    "session_duration_ms": session_duration,
                    "active_time_ms": active_time,
                    "ad_clicks": clicks,
                    "ad_impressions": impressions,
                },
            )
        )
        logger.debug("Session ended after %d ms", session_duration)

    def _reset_session_state(self) -> None:
        self._session_start_time = 0
        self._last_activity_time = 0
        self._ad_clicks = 0
        self._ad_impressions = 0

    def end_session(self) -> None:
        """End the current session now. Does nothing if no session is active."""
        with self._lock:
            if not self._initialized:
                return
            try:
                self._end_session()
            except Exception:
                logger.debug("Failed to end session", exc_info=True)

    # ------------------------------------------------------------------
    # Inactivity timer
    # ------------------------------------------------------------------

    def _arm_session_timer(self) -> None:
        self._cancel_session_timer()
        generation = self._timer_generation
        timer = self._timer_factory(
            self._session_timeout_seconds, lambda: self._on_session_timeout(generation)
        )
        self._session_timer = timer
        timer.start()

    def _cancel_session_timer(self) -> None:
        self._timer_generation += 1
        timer, self._session_timer = self._session_timer, None
        if timer is not None:
            timer.cancel()

    def _on_session_timeout(self, generation: int) -> None:
        with self._lock:
            if generation != self._timer_generation or not self._initialized:
                return
            self._session_timer = None
            try:
                self._end_session()
                if self.is_foreground:
                    self._start_new_session()
            except Exception:
                logger.debug("Failed to roll session on timeout", exc_info=True)

    # ------------------------------------------------------------------
    # LifecycleObserver
    # ------------------------------------------------------------------

    def on_activity_started(self, activity: str) -> None:
        with self._lock:
            self._started_activities += 1
            if self._started_activities != 1 or not self._initialized:
                return
            # App came to foreground
            if self._session_start_time == 0:
                try:
                    self._start_new_session()
                except Exception:
                    logger.debug("Failed to start session for %s", activity, exc_info=True)

    def on_activity_resumed(self, activity: str) -> None:
        with self._lock:
            self._last_activity_time = self._clock()
            self._cancel_session_timer()

    def on_activity_paused(self, activity: str) -> None:
        with self._lock:
            now = self._clock()
            if self._last_activity_time > 0:
                self._total_active_time_ms += now - self._last_activity_time
                self._last_activity_time = 0
            if self._initialized:
                self._arm_session_timer()

    def on_activity_stopped(self, activity: str) -> None:
        with self._lock:
            if self._started_activities == 0:
                return
            self._started_activities -= 1
            if self._started_activities > 0 or not self._initialized:
                return
            # App went to background
            try:
                self._end_session()
            except Exception:
                logger.debug("Failed to end session for %s", activity, exc_info=True)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def is_foreground(self) -> bool:
        return self._started_activities > 0

    @property
    def session_active(self) -> bool:
        with self._lock:
            return self._session_start_time > 0

    @property
    def session_start_time(self) -> int:
        with self._lock:
            return self._session_start_time

    @property
    def ad_clicks_this_session(self) -> int:
        with self._lock:
            return self._ad_clicks

    @property
    def ad_impressions_this_session(self) -> int:
        with self._lock:
            return self._ad_impressions

    @property
    def total_active_time_ms(self) -> int:
        with self._lock:
            return self._total_active_time_ms
