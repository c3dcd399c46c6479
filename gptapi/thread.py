"""The threads endpoint of the assistants API."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from gptapi.transport import Request, Response, Transport

THREADS_SUFFIX = "/threads"


def _text(value: Any) -> str:
    return value.value if isinstance(value, Enum) else str(value)


class _BetaClient:
    """Shared request plumbing for the assistants endpoints."""

    def __init__(
        self,
        transport: Transport,
        base_url: str,
        api_key: str = "",
        assistant_version: str | None = None,
    ) -> None:
        self.transport = transport
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.assistant_version = assistant_version

    def _send(self, method: str, path: str, body: Any = None) -> Response:
        headers: dict[str, str] = {}
        if body is not None:
            headers["Content-Type"] = "application/json"
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        if self.assistant_version:
            headers["OpenAI-Beta"] = f"assistants={self.assistant_version}"
        return self.transport.send(Request(method, self.base_url + path, headers, body))


class ThreadMessageRole(str, Enum):
    """Who wrote a thread message."""

    ASSISTANT = "assistant"
    USER = "user"


class ChunkingStrategyType(str, Enum):
    """How files are split into chunks for a vector store."""

    AUTO = "auto"
    STATIC = "static"


@dataclass
class StaticChunkingStrategy:
    """Fixed chunk sizes for the static chunking strategy."""

    max_chunk_size_tokens: int = 0
    chunk_overlap_tokens: int = 0

    def _to_dict(self) -> dict[str, Any]:
        return {
            "max_chunk_size_tokens": self.max_chunk_size_tokens,
            "chunk_overlap_tokens": self.chunk_overlap_tokens,
        }


@dataclass
class ChunkingStrategy:
    """A chunking strategy; ``static`` is set only for the static type."""

    type: ChunkingStrategyType | str = ChunkingStrategyType.AUTO
    static: StaticChunkingStrategy | None = None

    def _to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": _text(self.type)}
        if self.static is not None:
            out["static"] = self.static._to_dict()
        return out


@dataclass
class ThreadAttachment:
    """A file attached to a message, with the tool types that may use it."""

    file_id: str
    tools: list[str] = field(default_factory=list)

    def _to_dict(self) -> dict[str, Any]:
        return {
            "file_id": self.file_id,
            "tools": [{"type": _text(t)} for t in self.tools],
        }


@dataclass
class ThreadMessage:
    """A message given when a thread is created."""

    role: ThreadMessageRole | str
    content: str
    file_ids: list[str] | None = None
    attachments: list[ThreadAttachment] | None = None
    metadata: dict[str, Any] | None = None

    def _to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"role": _text(self.role), "content": self.content}
        if self.file_ids:
            out["file_ids"] = list(self.file_ids)
        if self.attachments:
            out["attachments"] = [a._to_dict() for a in self.attachments]
        if self.metadata:
            out["metadata"] = dict(self.metadata)
        return out


@dataclass
class ToolResources:
    """Resources of a thread's tools; ``None`` means the tool has none."""

    code_interpreter_file_ids: list[str] | None = None
    file_search_vector_store_ids: list[str] | None = None

    def _to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.code_interpreter_file_ids is not None:
            ids = self.code_interpreter_file_ids
            out["code_interpreter"] = {"file_ids": list(ids)} if ids else {}
        if self.file_search_vector_store_ids is not None:
            ids = self.file_search_vector_store_ids
            out["file_search"] = {"vector_store_ids": list(ids)} if ids else {}
        return out

    @classmethod
    def _from_dict(cls, data: dict[str, Any] | None) -> ToolResources:
        data = data or {}
        code = data.get("code_interpreter")
        search = data.get("file_search")
        return cls(
            code_interpreter_file_ids=(
                list(code.get("file_ids") or []) if isinstance(code, dict) else None
            ),
            file_search_vector_store_ids=(
                list(search.get("vector_store_ids") or [])
                if isinstance(search, dict)
                else None
            ),
        )


@dataclass
class VectorStoreToolResources:
    """A vector store to create along with a thread."""

    file_ids: list[str] | None = None
    chunking_strategy: ChunkingStrategy | None = None
    metadata: dict[str, Any] | None = None

    def _to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.file_ids:
            out["file_ids"] = list(self.file_ids)
        if self.chunking_strategy is not None:
            out["chunking_strategy"] = self.chunking_strategy._to_dict()
        if self.metadata:
            out["metadata"] = dict(self.metadata)
        return out


@dataclass
class ToolResourcesRequest:
    """Tool resources given when a thread is created."""

    code_interpreter_file_ids: list[str] | None = None
    file_search_vector_store_ids: list[str] | None = None
    file_search_vector_stores: list[VectorStoreToolResources] | None = None

    def _to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.code_interpreter_file_ids is not None:
            ids = self.code_interpreter_file_ids
            out["code_interpreter"] = {"file_ids": list(ids)} if ids else {}
        if (
            self.file_search_vector_store_ids is not None
            or self.file_search_vector_stores is not None
        ):
            search: dict[str, Any] = {}
            if self.file_search_vector_store_ids:
                search["vector_store_ids"] = list(self.file_search_vector_store_ids)
            if self.file_search_vector_stores:
                search["vector_stores"] = [
                    s._to_dict() for s in self.file_search_vector_stores
                ]
            out["file_search"] = search
        return out


@dataclass
class ThreadRequest:
    """Parameters for creating a thread."""

    messages: list[ThreadMessage] | None = None
    metadata: dict[str, Any] | None = None
    tool_resources: ToolResourcesRequest | None = None

    def _to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.messages:
            out["messages"] = [m._to_dict() for m in self.messages]
        if self.metadata:
            out["metadata"] = dict(self.metadata)
        if self.tool_resources is not None:
            out["tool_resources"] = self.tool_resources._to_dict()
        return out


@dataclass
class ModifyThreadRequest:
    """Parameters for modifying a thread; metadata is always sent."""

    metadata: dict[str, Any] | None = None
    tool_resources: ToolResources | None = None

    def _to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "metadata": None if self.metadata is None else dict(self.metadata)
        }
        if self.tool_resources is not None:
            out["tool_resources"] = self.tool_resources._to_dict()
        return out


@dataclass
class Thread:
    """A conversation thread."""

    id: str = ""
    object: str = ""
    created_at: int = 0
    metadata: dict[str, Any] | None = None
    tool_resources: ToolResources = field(default_factory=ToolResources)
    headers: dict[str, str] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def _from_dict(cls, data: dict[str, Any], headers: dict[str, str]) -> Thread:
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created_at=data.get("created_at") or 0,
            metadata=data.get("metadata"),
            tool_resources=ToolResources._from_dict(data.get("tool_resources")),
            headers=dict(headers),
        )


@dataclass
class ThreadDeleteResponse:
    """The outcome of deleting a thread."""

    id: str = ""
    object: str = ""
    deleted: bool = False
    headers: dict[str, str] = field(default_factory=dict, repr=False, compare=False)


class Threads(_BetaClient):
    """Client for the threads endpoint."""

    def _thread(self, resp: Response) -> Thread:
        return Thread._from_dict(resp.json() or {}, resp.headers)

    def create(self, request: ThreadRequest) -> Thread:
        """Create a new thread."""
        return self._thread(self._send("POST", THREADS_SUFFIX, request._to_dict()))

    def retrieve(self, thread_id: str) -> Thread:
        """Retrieve a thread."""
        return self._thread(self._send("GET", f"{THREADS_SUFFIX}/{thread_id}"))

    def modify(self, thread_id: str, request: ModifyThreadRequest) -> Thread:
        """Modify a thread."""
        return self._thread(
            self._send("POST", f"{THREADS_SUFFIX}/{thread_id}", request._to_dict())
        )

    def delete(self, thread_id: str) -> ThreadDeleteResponse:
        """Delete a thread."""
        resp = self._send("DELETE", f"{THREADS_SUFFIX}/{thread_id}")
        data = resp.json() or {}
        return ThreadDeleteResponse(
            id=data.get("id") or "",
            object=data.get("object") or "",
            deleted=bool(data.get("deleted")),
            headers=dict(resp.headers),
        )