# xml-ingestor/src/xml_ingestor/models.py
from __future__ import annotations

import json
import uuid
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field


class StoredObject(BaseModel):
    container: str
    key: str

    @property
    def uri(self) -> str:
        return f"s3://{self.container}/{self.key}"


class CreationNotification(BaseModel):
    event_name: str = "ObjectCreated:Put"
    container: str
    key: str
    sequence_number: Optional[str] = None
    size: Optional[int] = None

    @property
    def is_creation(self) -> bool:
        return self.event_name.startswith("ObjectCreated")


class UploadRequest(BaseModel):
    container: Optional[str] = None
    key: Optional[str] = None
    accept: Optional[str] = None
    content_type: Optional[str] = None
    body: bytes = b""
    request_id: str = Field(default_factory=lambda: uuid.uuid4().hex)


class PutAck(BaseModel):
    location: StoredObject
    etag: Optional[str] = None
    content_type: str = "application/octet-stream"


class XmlNode(BaseModel):
    """One element of a parsed document. Text is stripped; blank text is None."""

    tag: str
    attributes: Dict[str, str] = Field(default_factory=dict)
    text: Optional[str] = None
    children: List["XmlNode"] = Field(default_factory=list)

    def find(self, tag: str) -> Optional["XmlNode"]:
        for child in self.children:
            if child.tag == tag:
                return child
        return None

    # pydantic's own __eq__ and model_dump recurse and give out at a few
    # hundred levels; these walk with an explicit stack instead.

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, XmlNode):
            return NotImplemented
        stack = [(self, other)]
        while stack:
            a, b = stack.pop()
            if (a.tag, a.attributes, a.text, len(a.children)) != (b.tag, b.attributes, b.text, len(b.children)):
                return False
            stack.extend(zip(a.children, b.children))
        return True

    def to_json(self) -> str:
        """Same shape as model_dump_json(), at any depth."""
        parts: List[str] = []
        stack: List[Union["XmlNode", str]] = [self]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                parts.append(item)
                continue
            parts.append(
                '{"tag": %s, "attributes": %s, "text": %s, "children": ['
                % (json.dumps(item.tag), json.dumps(item.attributes), json.dumps(item.text))
            )
            stack.append("]}")
            for i in range(len(item.children) - 1, -1, -1):
                stack.append(item.children[i])
                if i:
                    stack.append(", ")
        return "".join(parts)


class ItemFailure(BaseModel):
    container: str
    key: str
    sequence_number: Optional[str] = None
    code: str
    message: str


class BatchReport(BaseModel):
    received: int = 0
    delivered: int = 0
    skipped: int = 0
    failures: List[ItemFailure] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures
