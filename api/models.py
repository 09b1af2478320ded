from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, Field


class MediaKind(str, Enum):
    IMAGE = "image"
    AUDIO = "audio"
    UNSUPPORTED = "unsupported"


class InboundMessage(BaseModel):
    """A single Twilio WhatsApp webhook call"""

    from_number: str = ""
    to_number: str = ""
    body: Optional[str] = None
    num_media: int = 0
    media_content_type: Optional[str] = None
    media_url: Optional[str] = None

    @classmethod
    def from_form(cls, form: Dict[str, Any]) -> "InboundMessage":
        try:
            num_media = int(form.get("NumMedia") or 0)
        except (TypeError, ValueError):
            num_media = 0

        content_type = (form.get("MediaContentType0") or "").lower() or None

        return cls(
            from_number=form.get("From") or "",
            to_number=form.get("To") or "",
            body=form.get("Body"),
            num_media=num_media,
            media_content_type=content_type,
            media_url=form.get("MediaUrl0") or None,
        )

    @property
    def has_media(self) -> bool:
        return self.num_media > 0 and bool(self.media_url)

    @property
    def media_kind(self) -> MediaKind:
        content_type = self.media_content_type or ""
        if content_type.startswith("image"):
            return MediaKind.IMAGE
        if content_type.startswith("audio"):
            return MediaKind.AUDIO
        return MediaKind.UNSUPPORTED


class TranscriptionStatus(str, Enum):
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @classmethod
    def parse(cls, value: Optional[str]) -> "TranscriptionStatus":
        # AssemblyAI reports failed jobs as "error"
        if value == "error":
            return cls.FAILED
        return cls(value)

    @property
    def is_terminal(self) -> bool:
        return self in (TranscriptionStatus.COMPLETED, TranscriptionStatus.FAILED)


class TranscriptionJob(BaseModel):
    id: str
    status: TranscriptionStatus = TranscriptionStatus.QUEUED
    text: Optional[str] = None

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "TranscriptionJob":
        status = TranscriptionStatus.parse(data.get("status"))
        return cls(
            id=data["id"],
            status=status,
            text=data.get("text") if status == TranscriptionStatus.COMPLETED else None,
        )


class DetectionResult(BaseModel):
    """Condition labels detected in an image, deduplicated in first-seen order"""

    labels: List[str] = Field(default_factory=list)

    @classmethod
    def from_predictions(cls, predictions: Iterable[Dict[str, Any]]) -> "DetectionResult":
        labels = []
        for prediction in predictions:
            if not isinstance(prediction, dict):
                continue
            label = prediction.get("class") or prediction.get("label")
            if isinstance(label, str) and label and label not in labels:
                labels.append(label)
        return cls(labels=labels)

    def __bool__(self) -> bool:
        return bool(self.labels)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DetectionResult):
            return set(self.labels) == set(other.labels)
        return NotImplemented

    def joined(self) -> str:
        return ", ".join(self.labels)


class WebhookReply(BaseModel):
    """Synchronous answer to a webhook call.

    When ``deferred`` is set the message is only a placeholder and the
    verdict is pushed later as a separate outbound message.
    """

    message: str
    deferred: bool = False
