"""The vector stores endpoint of the assistants API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from gptapi.run import Pagination
from gptapi.thread import _BetaClient
from gptapi.transport import Response

VECTOR_STORES_SUFFIX = "/vector_stores"
VECTOR_STORES_FILES_SUFFIX = "/files"
VECTOR_STORES_FILE_BATCHES_SUFFIX = "/file_batches"


@dataclass
class VectorStoreFileCount:
    """How many files of a store or batch are in each state."""

    in_progress: int = 0
    completed: int = 0
    failed: int = 0
    cancelled: int = 0
    total: int = 0

    @classmethod
    def _from_dict(cls, data: Any) -> VectorStoreFileCount:
        if not isinstance(data, dict):
            return cls()
        return cls(
            in_progress=data.get("in_progress") or 0,
            completed=data.get("completed") or 0,
            failed=data.get("failed") or 0,
            cancelled=data.get("cancelled") or 0,
            total=data.get("total") or 0,
        )


@dataclass
class VectorStoreExpires:
    """When a vector store expires, counted in days from an anchor."""

    anchor: str = ""
    days: int = 0

    def _to_dict(self) -> dict[str, Any]:
        return {"anchor": self.anchor, "days": self.days}

    @classmethod
    def _from_dict(cls, data: Any) -> VectorStoreExpires | None:
        if not isinstance(data, dict):
            return None
        return cls(anchor=data.get("anchor") or "", days=data.get("days") or 0)


@dataclass
class VectorStore:
    """A store of embedded files used by file search."""

    id: str = ""
    object: str = ""
    created_at: int = 0
    name: str = ""
    usage_bytes: int = 0
    file_counts: VectorStoreFileCount = field(default_factory=VectorStoreFileCount)
    status: str = ""
    expires_after: VectorStoreExpires | None = None
    expires_at: int | None = None
    metadata: dict[str, Any] | None = None
    headers: dict[str, str] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def _from_dict(
        cls, data: dict[str, Any], headers: dict[str, str] | None = None
    ) -> VectorStore:
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created_at=data.get("created_at") or 0,
            name=data.get("name") or "",
            usage_bytes=data.get("usage_bytes") or 0,
            file_counts=VectorStoreFileCount._from_dict(data.get("file_counts")),
            status=data.get("status") or "",
            expires_after=VectorStoreExpires._from_dict(data.get("expires_after")),
            expires_at=data.get("expires_at"),
            metadata=data.get("metadata"),
            headers=dict(headers or {}),
        )


@dataclass
class VectorStoreRequest:
    """Parameters for creating or modifying a vector store."""

    name: str = ""
    file_ids: list[str] | None = None
    expires_after: VectorStoreExpires | None = None
    metadata: dict[str, Any] | None = None

    def _to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.name:
            out["name"] = self.name
        if self.file_ids:
            out["file_ids"] = list(self.file_ids)
        if self.expires_after is not None:
            out["expires_after"] = self.expires_after._to_dict()
        if self.metadata:
            out["metadata"] = dict(self.metadata)
        return out


@dataclass
class VectorStoresList:
    """A page of vector stores."""

    vector_stores: list[VectorStore] = field(default_factory=list)
    last_id: str | None = None
    first_id: str | None = None
    has_more: bool = False
    headers: dict[str, str] = field(default_factory=dict, repr=False, compare=False)


@dataclass
class VectorStoreDeleteResponse:
    """The outcome of deleting a vector store."""

    id: str = ""
    object: str = ""
    deleted: bool = False
    headers: dict[str, str] = field(default_factory=dict, repr=False, compare=False)


@dataclass
class VectorStoreFile:
    """A file that belongs to a vector store."""

    id: str = ""
    object: str = ""
    created_at: int = 0
    vector_store_id: str = ""
    usage_bytes: int = 0
    status: str = ""
    headers: dict[str, str] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def _from_dict(
        cls, data: dict[str, Any], headers: dict[str, str] | None = None
    ) -> VectorStoreFile:
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created_at=data.get("created_at") or 0,
            vector_store_id=data.get("vector_store_id") or "",
            usage_bytes=data.get("usage_bytes") or 0,
            status=data.get("status") or "",
            headers=dict(headers or {}),
        )


@dataclass
class VectorStoreFileRequest:
    """Parameters for adding a file to a vector store."""

    file_id: str

    def _to_dict(self) -> dict[str, Any]:
        return {"file_id": self.file_id}


@dataclass
class VectorStoreFilesList:
    """A page of vector store files."""

    vector_store_files: list[VectorStoreFile] = field(default_factory=list)
    first_id: str | None = None
    last_id: str | None = None
    has_more: bool = False
    headers: dict[str, str] = field(default_factory=dict, repr=False, compare=False)


@dataclass
class VectorStoreFileBatch:
    """A batch of files being added to a vector store."""

    id: str = ""
    object: str = ""
    created_at: int = 0
    vector_store_id: str = ""
    status: str = ""
    file_counts: VectorStoreFileCount = field(default_factory=VectorStoreFileCount)
    headers: dict[str, str] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def _from_dict(
        cls, data: dict[str, Any], headers: dict[str, str] | None = None
    ) -> VectorStoreFileBatch:
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created_at=data.get("created_at") or 0,
            vector_store_id=data.get("vector_store_id") or "",
            status=data.get("status") or "",
            file_counts=VectorStoreFileCount._from_dict(data.get("file_counts")),
            headers=dict(headers or {}),
        )


@dataclass
class VectorStoreFileBatchRequest:
    """Parameters for adding several files to a vector store at once."""

    file_ids: list[str] = field(default_factory=list)

    def _to_dict(self) -> dict[str, Any]:
        return {"file_ids": list(self.file_ids)}


def _with_query(path: str, pagination: Pagination | None) -> str:
    query = (pagination or Pagination()).to_query()
    return f"{path}?{query}" if query else path


def _files_list(resp: Response) -> VectorStoreFilesList:
    data = resp.json() or {}
    return VectorStoreFilesList(
        vector_store_files=[VectorStoreFile._from_dict(f) for f in data.get("data") or []],
        first_id=data.get("first_id"),
        last_id=data.get("last_id"),
        has_more=bool(data.get("has_more")),
        headers=dict(resp.headers),
    )


class VectorStores(_BetaClient):
    """Client for vector stores, their files and file batches."""

    @staticmethod
    def _store_path(vector_store_id: str, *parts: str) -> str:
        return f"{VECTOR_STORES_SUFFIX}/{vector_store_id}" + "".join(parts)

    @staticmethod
    def _store(resp: Response) -> VectorStore:
        return VectorStore._from_dict(resp.json() or {}, resp.headers)

    @staticmethod
    def _batch(resp: Response) -> VectorStoreFileBatch:
        return VectorStoreFileBatch._from_dict(resp.json() or {}, resp.headers)

    def create(self, request: VectorStoreRequest) -> VectorStore:
        """Create a vector store."""
        return self._store(self._send("POST", VECTOR_STORES_SUFFIX, request._to_dict()))

    def retrieve(self, vector_store_id: str) -> VectorStore:
        """Retrieve a vector store."""
        return self._store(self._send("GET", self._store_path(vector_store_id)))

    def modify(self, vector_store_id: str, request: VectorStoreRequest) -> VectorStore:
        """Modify a vector store."""
        return self._store(
            self._send("POST", self._store_path(vector_store_id), request._to_dict())
        )

    def delete(self, vector_store_id: str) -> VectorStoreDeleteResponse:
        """Delete a vector store."""
        resp = self._send("DELETE", self._store_path(vector_store_id))
        data = resp.json() or {}
        return VectorStoreDeleteResponse(
            id=data.get("id") or "",
            object=data.get("object") or "",
            deleted=bool(data.get("deleted")),
            headers=dict(resp.headers),
        )

    def list(self, pagination: Pagination | None = None) -> VectorStoresList:
        """List the vector stores."""
        resp = self._send("GET", _with_query(VECTOR_STORES_SUFFIX, pagination))
        data = resp.json() or {}
        return VectorStoresList(
            vector_stores=[VectorStore._from_dict(s) for s in data.get("data") or []],
            last_id=data.get("last_id"),
            first_id=data.get("first_id"),
            has_more=bool(data.get("has_more")),
            headers=dict(resp.headers),
        )

    def create_file(
        self, vector_store_id: str, request: VectorStoreFileRequest
    ) -> VectorStoreFile:
        """Add a file to a vector store."""
        resp = self._send(
            "POST",
            self._store_path(vector_store_id, VECTOR_STORES_FILES_SUFFIX),
            request._to_dict(),
        )
        return VectorStoreFile._from_dict(resp.json() or {}, resp.headers)

    def retrieve_file(self, vector_store_id: str, file_id: str) -> VectorStoreFile:
        """Retrieve a file of a vector store."""
        resp = self._send(
            "GET", self._store_path(vector_store_id, VECTOR_STORES_FILES_SUFFIX, f"/{file_id}")
        )
        return VectorStoreFile._from_dict(resp.json() or {}, resp.headers)

    def delete_file(self, vector_store_id: str, file_id: str) -> None:
        """Remove a file from a vector store; the response body is not read."""
        resp = self._send(
            "DELETE",
            self._store_path(vector_store_id, VECTOR_STORES_FILES_SUFFIX, f"/{file_id}"),
        )
        if resp.status_code >= 400:
            resp.json()  # raises APIError for error statuses

    def list_files(
        self, vector_store_id: str, pagination: Pagination | None = None
    ) -> VectorStoreFilesList:
        """List the files of a vector store."""
        path = self._store_path(vector_store_id, VECTOR_STORES_FILES_SUFFIX)
        return _files_list(self._send("GET", _with_query(path, pagination)))

    def create_file_batch(
        self, vector_store_id: str, request: VectorStoreFileBatchRequest
    ) -> VectorStoreFileBatch:
        """Add a batch of files to a vector store."""
        return self._batch(
            self._send(
                "POST",
                self._store_path(vector_store_id, VECTOR_STORES_FILE_BATCHES_SUFFIX),
                request._to_dict(),
            )
        )

    def retrieve_file_batch(
        self, vector_store_id: str, batch_id: str
    ) -> VectorStoreFileBatch:
        """Retrieve a file batch."""
        return self._batch(
            self._send(
                "GET",
                self._store_path(
                    vector_store_id, VECTOR_STORES_FILE_BATCHES_SUFFIX, f"/{batch_id}"
                ),
            )
        )

    def cancel_file_batch(self, vector_store_id: str, batch_id: str) -> VectorStoreFileBatch:
        """Cancel a file batch."""
        return self._batch(
            self._send(
                "POST",
                self._store_path(
                    vector_store_id, VECTOR_STORES_FILE_BATCHES_SUFFIX, f"/{batch_id}", "/cancel"
                ),
            )
        )

    def list_files_in_batch(
        self,
        vector_store_id: str,
        batch_id: str,
        pagination: Pagination | None = None,
    ) -> VectorStoreFilesList:
        """List the files of a file batch."""
        path = self._store_path(
            vector_store_id, VECTOR_STORES_FILE_BATCHES_SUFFIX, f"/{batch_id}", "/files"
        )
        return _files_list(self._send("GET", _with_query(path, pagination)))