"""Pydantic schemas for the request payload and the API response."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError


class NotificationPayload(BaseModel):
    """Normalized message, serialized directly as the request body.

    ``token`` and ``user`` stay empty until a client injects its credentials.
    Absent fields are dropped on serialization instead of being sent as null.
    """

    token: Optional[str] = None
    user: Optional[str] = None
    message: str
    device: Optional[str] = None
    title: Optional[str] = None
    url: Optional[str] = None
    url_title: Optional[str] = None
    priority: Optional[int] = None
    sound: Optional[str] = None
    timestamp: Optional[Union[int, float]] = None
    html: Optional[int] = None
    monospace: Optional[int] = None
    retry: Optional[Union[int, float]] = None
    expire: Optional[Union[int, float]] = None
    callback: Optional[str] = None

    def with_credentials(self, token: str, user: str) -> "NotificationPayload":
        return self.model_copy(update={"token": token, "user": user})

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class MessageResponse(BaseModel):
    """Decoded reply from ``messages.json``; ``status == 1`` means success."""

    model_config = ConfigDict(extra="allow")

    status: int
    request: Optional[str] = None
    user: Optional[str] = None
    errors: List[str] = []
    receipt: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == 1

    @classmethod
    def parse_body(cls, body: Any) -> Optional["MessageResponse"]:
        if not isinstance(body, dict):
            return None
        try:
            return cls.model_validate(body)
        except ValidationError:
            return None
