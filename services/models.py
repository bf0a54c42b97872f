# services/models.py
# Purpose: Request-scoped envelopes for the webhook → repository_dispatch path.
#          Figma sends more fields than we read; unknown keys are kept, not rejected.

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

FILE_UPDATE = "FILE_UPDATE"
DISPATCH_EVENT_TYPE = "figma-update"


class FigmaWebhookEvent(BaseModel):
    model_config = ConfigDict(extra="allow")

    event_type: Optional[Any] = Field(None, description="Figma event, e.g. FILE_UPDATE; echoed as sent")
    file_name: Optional[Any] = None
    file_key: Optional[Any] = None
    triggered_by: Optional[Any] = Field(None, description="User object or handle that caused the event")
    timestamp: Optional[Any] = None

    @property
    def is_file_update(self) -> bool:
        return self.event_type == FILE_UPDATE


class ClientPayload(BaseModel):
    event_type: Optional[Any] = None
    file_name: Optional[Any] = None
    file_key: Optional[Any] = None
    timestamp: str
    triggered_by: Optional[Any] = None


class DispatchPayload(BaseModel):
    event_type: str = DISPATCH_EVENT_TYPE
    client_payload: ClientPayload

    @classmethod
    def from_event(cls, event: FigmaWebhookEvent) -> "DispatchPayload":
        """Mirror the Figma envelope with a fresh send-time timestamp."""
        return cls(
            client_payload=ClientPayload(
                event_type=event.event_type,
                file_name=event.file_name,
                file_key=event.file_key,
                timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
                triggered_by=event.triggered_by,
            )
        )

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
