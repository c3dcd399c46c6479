"""The messages endpoint of the assistants API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from gptapi.thread import ThreadAttachment, _BetaClient
from gptapi.transport import Response, encode_query

MESSAGES_SUFFIX = "messages"


@dataclass
class MessageText:
    """Text content of a message."""

    value: str = ""
    annotations: list[Any] | None = None


@dataclass
class ImageFile:
    """An uploaded image referenced by a message."""

    file_id: str = ""


@dataclass
class ImageURL:
    """An image referenced by URL."""

    url: str = ""
    detail: str = ""


@dataclass
class MessageContent:
    """One part of a message's content."""

    type: str = ""
    text: MessageText | None = None
    image_file: ImageFile | None = None
    image_url: ImageURL | None = None

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> MessageContent:
        text = data.get("text")
        image_file = data.get("image_file")
        image_url = data.get("image_url")
        return cls(
            type=data.get("type") or "",
            text=(
                MessageText(text.get("value") or "", text.get("annotations"))
                if isinstance(text, dict)
                else None
            ),
            image_file=(
                ImageFile(image_file.get("file_id") or "")
                if isinstance(image_file, dict)
                else None
            ),
            image_url=(
                ImageURL(image_url.get("url") or "", image_url.get("detail") or "")
                if isinstance(image_url, dict)
                else None
            ),
        )


@dataclass
class Message:
    """A message in a thread."""

    id: str = ""
    object: str = ""
    created_at: int = 0
    thread_id: str = ""
    role: str = ""
    content: list[MessageContent] = field(default_factory=list)
    file_ids: list[str] | None = None
    assistant_id: str | None = None
    run_id: str | None = None
    metadata: dict[str, Any] | None = None
    headers: dict[str, str] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def _from_dict(cls, data: dict[str, Any], headers: dict[str, str] | None = None) -> Message:
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created_at=data.get("created_at") or 0,
            thread_id=data.get("thread_id") or "",
            role=data.get("role") or "",
            content=[MessageContent._from_dict(c) for c in data.get("content") or []],
            file_ids=data.get("file_ids"),
            assistant_id=data.get("assistant_id"),
            run_id=data.get("run_id"),
            metadata=data.get("metadata"),
            headers=dict(headers or {}),
        )


@dataclass
class MessagesList:
    """A page of messages."""

    messages: list[Message] = field(default_factory=list)
    object: str = ""
    first_id: str | None = None
    last_id: str | None = None
    has_more: bool = False
    headers: dict[str, str] = field(default_factory=dict, repr=False, compare=False)


@dataclass
class MessageRequest:
    """Parameters for creating a message."""

    role: str
    content: str
    file_ids: list[str] | None = None
    metadata: dict[str, Any] | None = None
    attachments: list[ThreadAttachment] | None = None

    def _to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.file_ids:
            out["file_ids"] = list(self.file_ids)
        if self.metadata:
            out["metadata"] = dict(self.metadata)
        if self.attachments:
            out["attachments"] = [a._to_dict() for a in self.attachments]
        return out


@dataclass
class MessageFile:
    """A file attached to a message."""

    id: str = ""
    object: str = ""
    created_at: int = 0
    message_id: str = ""
    headers: dict[str, str] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def _from_dict(
        cls, data: dict[str, Any], headers: dict[str, str] | None = None
    ) -> MessageFile:
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created_at=data.get("created_at") or 0,
            message_id=data.get("message_id") or "",
            headers=dict(headers or {}),
        )


@dataclass
class MessageFilesList:
    """The files attached to a message."""

    message_files: list[MessageFile] = field(default_factory=list)
    headers: dict[str, str] = field(default_factory=dict, repr=False, compare=False)


@dataclass
class MessageDeletionStatus:
    """The outcome of deleting a message."""

    id: str = ""
    object: str = ""
    deleted: bool = False
    headers: dict[str, str] = field(default_factory=dict, repr=False, compare=False)


class Messages(_BetaClient):
    """Client for the messages of a thread."""

    @staticmethod
    def _path(thread_id: str, *parts: str) -> str:
        return "/".join(["", "threads", thread_id, MESSAGES_SUFFIX, *parts])

    @staticmethod
    def _message(resp: Response) -> Message:
        return Message._from_dict(resp.json() or {}, resp.headers)

    def create(self, thread_id: str, request: MessageRequest) -> Message:
        """Create a message in a thread."""
        return self._message(self._send("POST", self._path(thread_id), request._to_dict()))

    def list(
        self,
        thread_id: str,
        *,
        limit: int | None = None,
        order: str | None = None,
        after: str | None = None,
        before: str | None = None,
        run_id: str | None = None,
    ) -> MessagesList:
        """List the messages of a thread, optionally paginated or filtered by run."""
        query = encode_query(
            {"limit": limit, "order": order, "after": after, "before": before, "run_id": run_id}
        )
        path = self._path(thread_id) + (f"?{query}" if query else "")
        resp = self._send("GET", path)
        data = resp.json() or {}
        return MessagesList(
            messages=[Message._from_dict(m) for m in data.get("data") or []],
            object=data.get("object") or "",
            first_id=data.get("first_id"),
            last_id=data.get("last_id"),
            has_more=bool(data.get("has_more")),
            headers=dict(resp.headers),
        )

    def retrieve(self, thread_id: str, message_id: str) -> Message:
        """Retrieve a message."""
        return self._message(self._send("GET", self._path(thread_id, message_id)))

    def modify(self, thread_id: str, message_id: str, metadata: dict[str, str]) -> Message:
        """Replace a message's metadata."""
        return self._message(
            self._send("POST", self._path(thread_id, message_id), {"metadata": metadata})
        )

    def retrieve_file(self, thread_id: str, message_id: str, file_id: str) -> MessageFile:
        """Retrieve a file attached to a message."""
        resp = self._send("GET", self._path(thread_id, message_id, "files", file_id))
        return MessageFile._from_dict(resp.json() or {}, resp.headers)

    def list_files(self, thread_id: str, message_id: str) -> MessageFilesList:
        """List the files attached to a message."""
        resp = self._send("GET", self._path(thread_id, message_id, "files"))
        data = resp.json() or {}
        return MessageFilesList(
            message_files=[MessageFile._from_dict(f) for f in data.get("data") or []],
            headers=dict(resp.headers),
        )

    def delete(self, thread_id: str, message_id: str) -> MessageDeletionStatus:
        """Delete a message."""
        resp = self._send("DELETE", self._path(thread_id, message_id))
        data = resp.json() or {}
        return MessageDeletionStatus(
            id=data.get("id") or "",
            object=data.get("object") or "",
            deleted=bool(data.get("deleted")),
            headers=dict(resp.headers),
        )