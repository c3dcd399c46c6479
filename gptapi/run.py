"""The runs endpoint of the assistants API."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from gptapi.thread import ThreadMessage, ThreadRequest, _BetaClient, _text
from gptapi.transport import Response, encode_query

_E = TypeVar("_E", bound=Enum)


def _enum(cls: type[_E], value: Any) -> _E | str:
    if value is None:
        return ""
    try:
        return cls(value)
    except ValueError:
        return str(value)


class RunStatus(str, Enum):
    """The life-cycle states of a run."""

    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    CANCELLING = "cancelling"
    FAILED = "failed"
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class RequiredActionType(str, Enum):
    """What a run waits for when it requires action."""

    SUBMIT_TOOL_OUTPUTS = "submit_tool_outputs"


class RunError(str, Enum):
    """Error codes of a failed run."""

    SERVER_ERROR = "server_error"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"


class TruncationStrategy(str, Enum):
    """How a thread is truncated to fit the model's context."""

    AUTO = "auto"
    LAST_MESSAGES = "last_messages"


class RunStepStatus(str, Enum):
    """The states of a run step."""

    IN_PROGRESS = "in_progress"
    CANCELLING = "cancelled"
    FAILED = "failed"
    COMPLETED = "completed"
    EXPIRED = "expired"


class RunStepType(str, Enum):
    """The kinds of run step."""

    MESSAGE_CREATION = "message_creation"
    TOOL_CALLS = "tool_calls"


@dataclass
class ThreadTruncationStrategy:
    """The truncation strategy of a run; ``last_messages`` goes with LAST_MESSAGES."""

    type: TruncationStrategy | str = ""
    last_messages: int | None = None

    def _to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.type:
            out["type"] = _text(self.type)
        if self.last_messages is not None:
            out["last_messages"] = self.last_messages
        return out

    @classmethod
    def _from_dict(cls, data: Any) -> ThreadTruncationStrategy | None:
        if not isinstance(data, dict):
            return None
        return cls(
            type=_enum(TruncationStrategy, data.get("type")),
            last_messages=data.get("last_messages"),
        )


@dataclass
class RunLastError:
    """The last error of a run or step."""

    code: RunError | str = ""
    message: str = ""

    @classmethod
    def _from_dict(cls, data: Any) -> RunLastError | None:
        if not isinstance(data, dict):
            return None
        return cls(
            code=_enum(RunError, data.get("code")),
            message=data.get("message") or "",
        )


@dataclass
class RunRequiredAction:
    """What a run needs before it can continue."""

    type: RequiredActionType | str = ""
    tool_calls: list[Any] | None = None

    @classmethod
    def _from_dict(cls, data: Any) -> RunRequiredAction | None:
        if not isinstance(data, dict):
            return None
        submit = data.get("submit_tool_outputs")
        return cls(
            type=_enum(RequiredActionType, data.get("type")),
            tool_calls=(
                list(submit.get("tool_calls") or []) if isinstance(submit, dict) else None
            ),
        )


@dataclass
class Run:
    """An execution of an assistant on a thread."""

    id: str = ""
    object: str = ""
    created_at: int = 0
    thread_id: str = ""
    assistant_id: str = ""
    status: RunStatus | str = ""
    required_action: RunRequiredAction | None = None
    last_error: RunLastError | None = None
    expires_at: int = 0
    started_at: int | None = None
    cancelled_at: int | None = None
    failed_at: int | None = None
    completed_at: int | None = None
    model: str = ""
    instructions: str = ""
    tools: list[Any] | None = None
    file_ids: list[str] | None = None
    metadata: dict[str, Any] | None = None
    usage: dict[str, Any] = field(default_factory=dict)
    temperature: float | None = None
    max_prompt_tokens: int = 0
    max_completion_tokens: int = 0
    truncation_strategy: ThreadTruncationStrategy | None = None
    headers: dict[str, str] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def _from_dict(cls, data: dict[str, Any], headers: dict[str, str] | None = None) -> Run:
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created_at=data.get("created_at") or 0,
            thread_id=data.get("thread_id") or "",
            assistant_id=data.get("assistant_id") or "",
            status=_enum(RunStatus, data.get("status")),
            required_action=RunRequiredAction._from_dict(data.get("required_action")),
            last_error=RunLastError._from_dict(data.get("last_error")),
            expires_at=data.get("expires_at") or 0,
            started_at=data.get("started_at"),
            cancelled_at=data.get("cancelled_at"),
            failed_at=data.get("failed_at"),
            completed_at=data.get("completed_at"),
            model=data.get("model") or "",
            instructions=data.get("instructions") or "",
            tools=data.get("tools"),
            file_ids=data.get("file_ids"),
            metadata=data.get("metadata"),
            usage=dict(data.get("usage") or {}),
            temperature=data.get("temperature"),
            max_prompt_tokens=data.get("max_prompt_tokens") or 0,
            max_completion_tokens=data.get("max_completion_tokens") or 0,
            truncation_strategy=ThreadTruncationStrategy._from_dict(
                data.get("truncation_strategy")
            ),
            headers=dict(headers or {}),
        )


@dataclass
class RunRequest:
    """Parameters for starting a run.

    ``tool_choice`` and ``response_format`` may be a string or an object;
    ``parallel_tool_calls`` is sent whenever it is not ``None``.
    """

    assistant_id: str
    model: str = ""
    instructions: str = ""
    additional_instructions: str = ""
    additional_messages: list[ThreadMessage] | None = None
    tools: list[Any] | None = None
    metadata: dict[str, Any] | None = None
    temperature: float | None = None
    top_p: float | None = None
    max_prompt_tokens: int = 0
    max_completion_tokens: int = 0
    truncation_strategy: ThreadTruncationStrategy | None = None
    tool_choice: Any = None
    response_format: Any = None
    parallel_tool_calls: Any = None

    def _to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"assistant_id": self.assistant_id}
        for name in ("model", "instructions", "additional_instructions"):
            value = getattr(self, name)
            if value:
                out[name] = value
        if self.additional_messages:
            out["additional_messages"] = [m._to_dict() for m in self.additional_messages]
        if self.tools:
            out["tools"] = list(self.tools)
        if self.metadata:
            out["metadata"] = dict(self.metadata)
        if self.temperature is not None:
            out["temperature"] = self.temperature
        if self.top_p is not None:
            out["top_p"] = self.top_p
        if self.max_prompt_tokens:
            out["max_prompt_tokens"] = self.max_prompt_tokens
        if self.max_completion_tokens:
            out["max_completion_tokens"] = self.max_completion_tokens
        if self.truncation_strategy is not None:
            out["truncation_strategy"] = self.truncation_strategy._to_dict()
        for name in ("tool_choice", "response_format", "parallel_tool_calls"):
            value = getattr(self, name)
            if value is not None:
                out[name] = value
        return out


@dataclass
class RunModifyRequest:
    """Parameters for modifying a run."""

    metadata: dict[str, Any] | None = None

    def _to_dict(self) -> dict[str, Any]:
        return {"metadata": dict(self.metadata)} if self.metadata else {}


@dataclass
class RunList:
    """A page of runs."""

    runs: list[Run] = field(default_factory=list)
    headers: dict[str, str] = field(default_factory=dict, repr=False, compare=False)


@dataclass
class ToolOutput:
    """The output of one tool call."""

    tool_call_id: str
    output: Any = None

    def _to_dict(self) -> dict[str, Any]:
        return {"tool_call_id": self.tool_call_id, "output": self.output}


@dataclass
class SubmitToolOutputsRequest:
    """Tool outputs handed back to a waiting run."""

    tool_outputs: list[ToolOutput] = field(default_factory=list)

    def _to_dict(self) -> dict[str, Any]:
        return {"tool_outputs": [t._to_dict() for t in self.tool_outputs]}


@dataclass
class CreateThreadAndRunRequest(RunRequest):
    """Parameters for creating a thread and running it in one call."""

    thread: ThreadRequest = field(default_factory=ThreadRequest)

    def _to_dict(self) -> dict[str, Any]:
        out = super()._to_dict()
        out["thread"] = self.thread._to_dict()
        return out


@dataclass
class StepDetails:
    """What a run step did."""

    type: RunStepType | str = ""
    message_id: str | None = None
    tool_calls: list[Any] | None = None

    @classmethod
    def _from_dict(cls, data: Any) -> StepDetails:
        if not isinstance(data, dict):
            return cls()
        creation = data.get("message_creation")
        return cls(
            type=_enum(RunStepType, data.get("type")),
            message_id=(
                creation.get("message_id") or "" if isinstance(creation, dict) else None
            ),
            tool_calls=data.get("tool_calls"),
        )


@dataclass
class RunStep:
    """One step of a run."""

    id: str = ""
    object: str = ""
    created_at: int = 0
    assistant_id: str = ""
    thread_id: str = ""
    run_id: str = ""
    type: RunStepType | str = ""
    status: RunStepStatus | str = ""
    step_details: StepDetails = field(default_factory=StepDetails)
    last_error: RunLastError | None = None
    expired_at: int | None = None
    cancelled_at: int | None = None
    failed_at: int | None = None
    completed_at: int | None = None
    metadata: dict[str, Any] | None = None
    headers: dict[str, str] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def _from_dict(
        cls, data: dict[str, Any], headers: dict[str, str] | None = None
    ) -> RunStep:
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created_at=data.get("created_at") or 0,
            assistant_id=data.get("assistant_id") or "",
            thread_id=data.get("thread_id") or "",
            run_id=data.get("run_id") or "",
            type=_enum(RunStepType, data.get("type")),
            status=_enum(RunStepStatus, data.get("status")),
            step_details=StepDetails._from_dict(data.get("step_details")),
            last_error=RunLastError._from_dict(data.get("last_error")),
            expired_at=data.get("expired_at"),
            cancelled_at=data.get("cancelled_at"),
            failed_at=data.get("failed_at"),
            completed_at=data.get("completed_at"),
            metadata=data.get("metadata"),
            headers=dict(headers or {}),
        )


@dataclass
class RunStepList:
    """A page of run steps."""

    run_steps: list[RunStep] = field(default_factory=list)
    first_id: str = ""
    last_id: str = ""
    has_more: bool = False
    headers: dict[str, str] = field(default_factory=dict, repr=False, compare=False)


@dataclass
class Pagination:
    """Paging parameters of list calls; ``None`` leaves a parameter out."""

    limit: int | None = None
    order: str | None = None
    after: str | None = None
    before: str | None = None

    def to_query(self) -> str:
        """Return the parameters as a query string sorted by key, or ``""``."""
        return encode_query(
            {"limit": self.limit, "order": self.order, "after": self.after, "before": self.before}
        )


def _with_query(path: str, pagination: Pagination | None) -> str:
    query = (pagination or Pagination()).to_query()
    return f"{path}?{query}" if query else path


class Runs(_BetaClient):
    """Client for the runs of a thread."""

    @staticmethod
    def _run(resp: Response) -> Run:
        return Run._from_dict(resp.json() or {}, resp.headers)

    def create(self, thread_id: str, request: RunRequest) -> Run:
        """Start a run on a thread."""
        return self._run(self._send("POST", f"/threads/{thread_id}/runs", request._to_dict()))

    def retrieve(self, thread_id: str, run_id: str) -> Run:
        """Retrieve a run."""
        return self._run(self._send("GET", f"/threads/{thread_id}/runs/{run_id}"))

    def modify(self, thread_id: str, run_id: str, request: RunModifyRequest) -> Run:
        """Modify a run."""
        return self._run(
            self._send("POST", f"/threads/{thread_id}/runs/{run_id}", request._to_dict())
        )

    def list(self, thread_id: str, pagination: Pagination | None = None) -> RunList:
        """List the runs of a thread."""
        resp = self._send("GET", _with_query(f"/threads/{thread_id}/runs", pagination))
        data = resp.json() or {}
        return RunList(
            runs=[Run._from_dict(r) for r in data.get("data") or []],
            headers=dict(resp.headers),
        )

    def submit_tool_outputs(
        self, thread_id: str, run_id: str, request: SubmitToolOutputsRequest
    ) -> Run:
        """Hand tool outputs to a run that requires them."""
        return self._run(
            self._send(
                "POST",
                f"/threads/{thread_id}/runs/{run_id}/submit_tool_outputs",
                request._to_dict(),
            )
        )

    def cancel(self, thread_id: str, run_id: str) -> Run:
        """Cancel a run."""
        return self._run(self._send("POST", f"/threads/{thread_id}/runs/{run_id}/cancel"))

    def create_thread_and_run(self, request: CreateThreadAndRunRequest) -> Run:
        """Create a thread and start a run on it."""
        return self._run(self._send("POST", "/threads/runs", request._to_dict()))

    def retrieve_step(self, thread_id: str, run_id: str, step_id: str) -> RunStep:
        """Retrieve a run step."""
        resp = self._send("GET", f"/threads/{thread_id}/runs/{run_id}/steps/{step_id}")
        return RunStep._from_dict(resp.json() or {}, resp.headers)

    def list_steps(
        self, thread_id: str, run_id: str, pagination: Pagination | None = None
    ) -> RunStepList:
        """List the steps of a run."""
        resp = self._send(
            "GET", _with_query(f"/threads/{thread_id}/runs/{run_id}/steps", pagination)
        )
        data = resp.json() or {}
        return RunStepList(
            run_steps=[RunStep._from_dict(s) for s in data.get("data") or []],
            first_id=data.get("first_id") or "",
            last_id=data.get("last_id") or "",
            has_more=bool(data.get("has_more")),
            headers=dict(resp.headers),
        )