"""Wire messages exchanged between a preview host and its isolated surface"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class MessageType(str, Enum):
    code = "PREVIEW_CODE"       # host -> surface, payload = source string
    ready = "PREVIEW_READY"     # surface -> host, no payload


class PreviewMessage(BaseModel):
    type: MessageType
    code: Optional[str] = None

    @classmethod
    def code_payload(cls, code: str) -> "PreviewMessage":
        return cls(type=MessageType.code, code=code)

    @classmethod
    def ready(cls) -> "PreviewMessage":
        return cls(type=MessageType.ready)

    def encode(self) -> str:
        return self.model_dump_json(exclude_none=True)

    @classmethod
    def decode(cls, data: str) -> "PreviewMessage":
        return cls.model_validate_json(data)
