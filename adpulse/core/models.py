# ==============================================================================
# Analytics Domain Models
# ==============================================================================
"""
Pydantic models for analytics events and collector responses.

These models are used for:
- Recording tracked occurrences in the in-memory event log
- Serializing events for the remote collector
- Decoding collector responses with an explicit schema

This module is part of the core domain layer and has no external dependencies
beyond Pydantic.
"""

import time
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from adpulse.core.exceptions import ResponseDecodeError

UNKNOWN_AD_UNIT = "unknown"


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class EventType(str, Enum):
    """Tracked occurrence kinds. Values are the wire names."""

    SDK_INITIALIZED = "SDK_INITIALIZED"
    AD_REQUESTED = "AD_REQUESTED"
    AD_FAILED_TO_LOAD = "AD_FAILED_TO_LOAD"
    AD_CLICKED = "AD_CLICKED"
    AD_IMPRESSION = "AD_IMPRESSION"
    AD_OPENED = "AD_OPENED"
    AD_CLOSED = "AD_CLOSED"
    SESSION_STARTED = "SESSION_STARTED"
    SESSION_ENDED = "SESSION_ENDED"
    SESSION_METRICS = "SESSION_METRICS"
    NETWORK_CHANGE = "NETWORK_CHANGE"
    IP_CHANGED = "IP_CHANGED"
    PUBLISHER_INFO = "PUBLISHER_INFO"


class AnalyticsEvent(BaseModel):
    """
    Represents a single tracked occurrence.

    Attributes:
        event_type: Kind of occurrence
        ad_unit_id: Ad unit or logical subject ("session", "sdk", ...)
        timestamp: Creation time in epoch milliseconds
        session_id: Session identifier active when the event was built
        device_info: Device snapshot (empty when excluded)
        network_info: Network snapshot (empty when excluded)
        locale_info: Locale snapshot (empty when excluded)
        metadata: Event-specific data, insertion order preserved
    """

    model_config = ConfigDict(frozen=True)

    event_type: EventType = Field(..., description="Event type")
    ad_unit_id: str = Field(default=UNKNOWN_AD_UNIT, description="Ad unit or subject id")
    timestamp: int = Field(default_factory=now_ms, description="Epoch milliseconds")
    session_id: str = Field(default="", description="Session identifier")
    device_info: dict[str, Any] = Field(default_factory=dict)
    network_info: dict[str, Any] = Field(default_factory=dict)
    locale_info: dict[str, str] = Field(default_factory=dict)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("ad_unit_id")
    @classmethod
    def _default_unknown(cls, value: str) -> str:
        return value or UNKNOWN_AD_UNIT

    @property
    def subject_id(self) -> str:
        """Alias for ad_unit_id when the subject is not an ad unit."""
        return self.ad_unit_id

    @property
    def event_time(self) -> datetime:
        """Convert timestamp to datetime object."""
        return datetime.fromtimestamp(self.timestamp / 1000.0)

    def to_dict(self) -> dict[str, Any]:
        """Serialize event for the collector request body.

        Key names are fixed by the backend and must not change.
        """
        return {
            "event_type": self.event_type.value,
            "ad_unit_id": self.ad_unit_id,
            "timestamp": self.timestamp,
            "session_id": self.session_id,
            "device_info": dict(self.device_info),
            "network_info": dict(self.network_info),
            "locale_info": dict(self.locale_info),
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AnalyticsEvent":
        """Deserialize an event from its collector representation."""
        return cls(
            event_type=data["event_type"],
            ad_unit_id=data.get("ad_unit_id", UNKNOWN_AD_UNIT),
            timestamp=data["timestamp"],
            session_id=data.get("session_id", ""),
            device_info=data.get("device_info") or {},
            network_info=data.get("network_info") or {},
            locale_info=data.get("locale_info") or {},
            metadata=data.get("metadata") or {},
        )


class EventResponse(BaseModel):
    """
    Collector acknowledgement for one submitted event.

    Attributes:
        success: Whether the collector stored the event
        message: Human-readable status
        logged_at: Server-side timestamp string
        event_type: Echo of the submitted event type (nullable)
        session_id: Echo of the submitted session id (nullable)
    """

    success: bool = Field(..., description="Whether the event was stored")
    message: str = Field(default="", description="Status message")
    logged_at: str = Field(default="", description="Server-side log time")
    event_type: str | None = Field(default=None, description="Echoed event type")
    session_id: str | None = Field(default=None, description="Echoed session id")

    @classmethod
    def from_payload(cls, payload: Any) -> "EventResponse":
        """
        Decode a parsed JSON body into an EventResponse.

        The collector answers either with the response object itself or with
        a single-entry mapping wrapping it.

        Raises:
            ResponseDecodeError: If the payload matches neither shape
        """
        if not isinstance(payload, dict):
            raise ResponseDecodeError(f"Expected a JSON object, got {type(payload).__name__}")

        if "success" not in payload and len(payload) == 1:
            payload = next(iter(payload.values()))

        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise ResponseDecodeError(f"Invalid collector response: {e}") from e
