"""The moderation endpoint."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any

from gptapi.transport import Request, Transport, encode_query

MODERATION_OMNI_LATEST = "omni-moderation-latest"
MODERATION_OMNI_20240926 = "omni-moderation-2024-09-26"
MODERATION_TEXT_STABLE = "text-moderation-stable"
MODERATION_TEXT_LATEST = "text-moderation-latest"
MODERATION_TEXT_001 = "text-moderation-001"

VALID_MODERATION_MODELS = frozenset(
    {
        MODERATION_OMNI_LATEST,
        MODERATION_OMNI_20240926,
        MODERATION_TEXT_STABLE,
        MODERATION_TEXT_LATEST,
    }
)


class InvalidModerationModelError(ValueError):
    """The requested model cannot be used for moderation."""

    def __init__(self) -> None:
        super().__init__(
            "this model is not supported with moderation, please use "
            "text-moderation-stable or text-moderation-latest instead"
        )


@dataclass
class ModerationRequest:
    """Parameters of a moderation call."""

    input: str = ""
    model: str = ""
    extra_headers: dict[str, str] | None = None
    extra_query: dict[str, str] | None = None
    extra_body: dict[str, Any] | None = None


def _key(name: str) -> dict[str, str]:
    return {"json": name}


@dataclass
class ResultCategories:
    """Which categories a text was flagged for."""

    hate: bool = field(default=False, metadata=_key("hate"))
    hate_threatening: bool = field(default=False, metadata=_key("hate/threatening"))
    harassment: bool = field(default=False, metadata=_key("harassment"))
    harassment_threatening: bool = field(
        default=False, metadata=_key("harassment/threatening")
    )
    self_harm: bool = field(default=False, metadata=_key("self-harm"))
    self_harm_intent: bool = field(default=False, metadata=_key("self-harm/intent"))
    self_harm_instructions: bool = field(
        default=False, metadata=_key("self-harm/instructions")
    )
    sexual: bool = field(default=False, metadata=_key("sexual"))
    sexual_minors: bool = field(default=False, metadata=_key("sexual/minors"))
    violence: bool = field(default=False, metadata=_key("violence"))
    violence_graphic: bool = field(default=False, metadata=_key("violence/graphic"))

    @classmethod
    def _from_dict(cls, data: dict[str, Any] | None) -> ResultCategories:
        data = data or {}
        return cls(**{f.name: bool(data.get(f.metadata["json"], False)) for f in fields(cls)})


@dataclass
class ResultCategoryScores:
    """The score of each category."""

    hate: float = field(default=0.0, metadata=_key("hate"))
    hate_threatening: float = field(default=0.0, metadata=_key("hate/threatening"))
    harassment: float = field(default=0.0, metadata=_key("harassment"))
    harassment_threatening: float = field(
        default=0.0, metadata=_key("harassment/threatening")
    )
    self_harm: float = field(default=0.0, metadata=_key("self-harm"))
    self_harm_intent: float = field(default=0.0, metadata=_key("self-harm/intent"))
    self_harm_instructions: float = field(
        default=0.0, metadata=_key("self-harm/instructions")
    )
    sexual: float = field(default=0.0, metadata=_key("sexual"))
    sexual_minors: float = field(default=0.0, metadata=_key("sexual/minors"))
    violence: float = field(default=0.0, metadata=_key("violence"))
    violence_graphic: float = field(default=0.0, metadata=_key("violence/graphic"))

    @classmethod
    def _from_dict(cls, data: dict[str, Any] | None) -> ResultCategoryScores:
        data = data or {}
        return cls(
            **{f.name: float(data.get(f.metadata["json"]) or 0.0) for f in fields(cls)}
        )


@dataclass
class Result:
    """One moderation result."""

    categories: ResultCategories = field(default_factory=ResultCategories)
    category_scores: ResultCategoryScores = field(default_factory=ResultCategoryScores)
    flagged: bool = False

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> Result:
        return cls(
            categories=ResultCategories._from_dict(data.get("categories")),
            category_scores=ResultCategoryScores._from_dict(data.get("category_scores")),
            flagged=bool(data.get("flagged", False)),
        )


@dataclass
class ModerationResponse:
    """The answer of the moderation endpoint."""

    id: str = ""
    model: str = ""
    results: list[Result] = field(default_factory=list)
    headers: dict[str, str] = field(default_factory=dict, repr=False, compare=False)


class Moderations:
    """Client for the moderation endpoint."""

    def __init__(self, transport: Transport, base_url: str, api_key: str = "") -> None:
        self.transport = transport
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key

    def create(self, request: ModerationRequest) -> ModerationResponse:
        """Classify ``request.input``; an unknown model raises before sending."""
        if request.model and request.model not in VALID_MODERATION_MODELS:
            raise InvalidModerationModelError()

        body: dict[str, Any] = {}
        if request.input:
            body["input"] = request.input
        if request.model:
            body["model"] = request.model
        body.update(request.extra_body or {})

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        headers.update(request.extra_headers or {})

        url = f"{self.base_url}/moderations"
        if request.extra_query:
            url = f"{url}?{encode_query(request.extra_query)}"

        resp = self.transport.send(Request("POST", url, headers, body))
        data = resp.json() or {}
        return ModerationResponse(
            id=data.get("id") or "",
            model=data.get("model") or "",
            results=[Result._from_dict(r) for r in data.get("results") or []],
            headers=dict(resp.headers),
        )