"""The models endpoint."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from gptapi.transport import Request, Response, Transport


@dataclass
class Permission:
    """A permission entry of a model."""

    created_at: int = 0
    id: str = ""
    object: str = ""
    allow_create_engine: bool = False
    allow_sampling: bool = False
    allow_logprobs: bool = False
    allow_search_indices: bool = False
    allow_view: bool = False
    allow_fine_tuning: bool = False
    organization: str = ""
    group: Any = None
    is_blocking: bool = False

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> Permission:
        return cls(
            created_at=data.get("created") or 0,
            id=data.get("id") or "",
            object=data.get("object") or "",
            allow_create_engine=bool(data.get("allow_create_engine")),
            allow_sampling=bool(data.get("allow_sampling")),
            allow_logprobs=bool(data.get("allow_logprobs")),
            allow_search_indices=bool(data.get("allow_search_indices")),
            allow_view=bool(data.get("allow_view")),
            allow_fine_tuning=bool(data.get("allow_fine_tuning")),
            organization=data.get("organization") or "",
            group=data.get("group"),
            is_blocking=bool(data.get("is_blocking")),
        )


@dataclass
class Model:
    """A model and its owner."""

    created_at: int = 0
    id: str = ""
    object: str = ""
    owned_by: str = ""
    permission: list[Permission] = field(default_factory=list)
    root: str = ""
    parent: str = ""
    headers: dict[str, str] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def _from_dict(cls, data: dict[str, Any], headers: dict[str, str] | None = None) -> Model:
        return cls(
            created_at=data.get("created") or 0,
            id=data.get("id") or "",
            object=data.get("object") or "",
            owned_by=data.get("owned_by") or "",
            permission=[Permission._from_dict(p) for p in data.get("permission") or []],
            root=data.get("root") or "",
            parent=data.get("parent") or "",
            headers=dict(headers or {}),
        )


@dataclass
class ModelsList:
    """The models available to the caller."""

    models: list[Model] = field(default_factory=list)
    headers: dict[str, str] = field(default_factory=dict, repr=False, compare=False)


@dataclass
class FineTuneModelDeleteResponse:
    """The outcome of deleting a fine-tuned model."""

    id: str = ""
    object: str = ""
    deleted: bool = False
    headers: dict[str, str] = field(default_factory=dict, repr=False, compare=False)


class Models:
    """Client for the models endpoint."""

    def __init__(self, transport: Transport, base_url: str, api_key: str = "") -> None:
        self.transport = transport
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key

    def _send(self, method: str, path: str) -> Response:
        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return self.transport.send(Request(method, self.base_url + path, headers))

    def list(self) -> ModelsList:
        """List the models currently available."""
        resp = self._send("GET", "/models")
        data = resp.json() or {}
        return ModelsList(
            models=[Model._from_dict(m) for m in data.get("data") or []],
            headers=dict(resp.headers),
        )

    def get(self, model_id: str) -> Model:
        """Retrieve one model."""
        resp = self._send("GET", f"/models/{model_id}")
        return Model._from_dict(resp.json() or {}, resp.headers)

    def delete_fine_tune(self, model_id: str) -> FineTuneModelDeleteResponse:
        """Delete a fine-tuned model."""
        resp = self._send("DELETE", f"/models/{model_id}")
        data = resp.json() or {}
        return FineTuneModelDeleteResponse(
            id=data.get("id") or "",
            object=data.get("object") or "",
            deleted=bool(data.get("deleted")),
            headers=dict(resp.headers),
        )