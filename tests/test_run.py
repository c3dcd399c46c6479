import json
from urllib.parse import urlsplit

import pytest

from gptapi.run import (
    CreateThreadAndRunRequest,
    Pagination,
    RequiredActionType,
    RunError,
    RunModifyRequest,
    RunRequest,
    Runs,
    RunStatus,
    RunStepStatus,
    RunStepType,
    SubmitToolOutputsRequest,
    ThreadTruncationStrategy,
    ToolOutput,
    TruncationStrategy,
)
from gptapi.thread import ThreadMessage, ThreadMessageRole, ThreadRequest
from gptapi.transport import APIError, Request, Response, Transport

BASE_URL = "https://api.example.com/v1"
ASSISTANT_ID = "asst_abc123"
THREAD_ID = "thread_abc123"
RUN_ID = "run_abc123"
STEP_ID = "step_abc123"


class FakeTransport(Transport):
    def __init__(self, routes):
        self.routes = routes
        self.requests = []

    def send(self, request: Request) -> Response:
        self.requests.append(request)
        path = urlsplit(request.url).path
        handler = self.routes.get((request.method, path))
        if handler is None:
            body = b'{"error":{"message":"not found","type":"invalid_request_error"}}'
            return Response(404, {}, body)
        return Response(200, {"x-test": "1"}, json.dumps(handler(request)).encode())


def _run(status="queued", **extra):
    return {
        "id": RUN_ID,
        "object": "run",
        "created_at": 1234567890,
        "status": status,
        **extra,
    }


def _step():
    return {
        "id": RUN_ID,
        "object": "run",
        "created_at": 1234567890,
        "status": "completed",
    }


@pytest.fixture
def transport():
    prefix = f"/v1/threads/{THREAD_ID}/runs"
    routes = {
        ("GET", f"{prefix}/{RUN_ID}/steps/{STEP_ID}"): lambda r: _step(),
        ("GET", f"{prefix}/{RUN_ID}/steps"): lambda r: {"data": [_step()]},
        ("POST", f"{prefix}/{RUN_ID}/cancel"): lambda r: _run("cancelling"),
        ("POST", f"{prefix}/{RUN_ID}/submit_tool_outputs"): lambda r: _run("cancelling"),
        ("GET", f"{prefix}/{RUN_ID}"): lambda r: _run(),
        ("POST", f"{prefix}/{RUN_ID}"): lambda r: _run(metadata=r.body.get("metadata")),
        ("POST", prefix): lambda r: _run(),
        ("GET", prefix): lambda r: {"data": [_run()]},
        ("POST", "/v1/threads/runs"): lambda r: _run(),
    }
    return FakeTransport(routes)


@pytest.fixture
def runs(transport):
    return Runs(transport, BASE_URL, api_key="placeholder", assistant_version="v2")


@pytest.fixture
def pagination():
    return Pagination(limit=20, order="desc", after="asst_abc122", before="asst_abc124")


def test_create_run(runs, transport):
    run = runs.create(THREAD_ID, RunRequest(assistant_id=ASSISTANT_ID))
    assert run.id == RUN_ID
    assert run.status is RunStatus.QUEUED
    req = transport.requests[-1]
    assert req.method == "POST"
    assert req.body == {"assistant_id": ASSISTANT_ID}
    assert req.headers["OpenAI-Beta"] == "assistants=v2"
    assert req.headers["Authorization"] == "Bearer placeholder"


def test_retrieve_run(runs):
    run = runs.retrieve(THREAD_ID, RUN_ID)
    assert run.id == RUN_ID
    assert run.created_at == 1234567890
    assert run.headers == {"x-test": "1"}


def test_modify_run_echoes_metadata(runs, transport):
    run = runs.modify(THREAD_ID, RUN_ID, RunModifyRequest(metadata={"key": "value"}))
    assert run.metadata == {"key": "value"}
    assert transport.requests[-1].body == {"metadata": {"key": "value"}}


def test_list_runs_with_pagination(runs, transport, pagination):
    result = runs.list(THREAD_ID, pagination)
    assert [r.id for r in result.runs] == [RUN_ID]
    assert transport.requests[-1].url == (
        f"{BASE_URL}/threads/{THREAD_ID}/runs"
        "?after=asst_abc122&before=asst_abc124&limit=20&order=desc"
    )


def test_list_runs_without_pagination_has_no_query(runs, transport):
    runs.list(THREAD_ID, Pagination())
    assert transport.requests[-1].url == f"{BASE_URL}/threads/{THREAD_ID}/runs"


def test_submit_tool_outputs(runs, transport):
    run = runs.submit_tool_outputs(
        THREAD_ID,
        RUN_ID,
        SubmitToolOutputsRequest([ToolOutput(tool_call_id="call_1", output="42")]),
    )
    assert run.status is RunStatus.CANCELLING
    assert transport.requests[-1].body == {
        "tool_outputs": [{"tool_call_id": "call_1", "output": "42"}]
    }


def test_submit_empty_tool_outputs(runs):
    run = runs.submit_tool_outputs(THREAD_ID, RUN_ID, SubmitToolOutputsRequest())
    assert run.id == RUN_ID


def test_cancel_run(runs, transport):
    run = runs.cancel(THREAD_ID, RUN_ID)
    assert run.status is RunStatus.CANCELLING
    assert transport.requests[-1].body is None


def test_create_thread_and_run(runs, transport):
    request = CreateThreadAndRunRequest(
        assistant_id=ASSISTANT_ID,
        thread=ThreadRequest(
            messages=[ThreadMessage(role=ThreadMessageRole.USER, content="Hello, World!")]
        ),
    )
    run = runs.create_thread_and_run(request)
    assert run.id == RUN_ID
    assert transport.requests[-1].body == {
        "assistant_id": ASSISTANT_ID,
        "thread": {"messages": [{"role": "user", "content": "Hello, World!"}]},
    }


def test_retrieve_run_step(runs):
    step = runs.retrieve_step(THREAD_ID, RUN_ID, STEP_ID)
    assert step.id == RUN_ID
    assert step.status is RunStepStatus.COMPLETED


def test_list_run_steps(runs, transport, pagination):
    steps = runs.list_steps(THREAD_ID, RUN_ID, pagination)
    assert len(steps.run_steps) == 1
    assert steps.run_steps[0].status is RunStepStatus.COMPLETED
    assert transport.requests[-1].url.endswith(
        "/steps?after=asst_abc122&before=asst_abc124&limit=20&order=desc"
    )


def test_unknown_run_raises_api_error(runs):
    with pytest.raises(APIError) as info:
        runs.retrieve(THREAD_ID, "missing")
    assert info.value.status_code == 404
    assert info.value.message == "not found"


def test_pagination_to_query():
    assert Pagination().to_query() == ""
    assert Pagination(limit=5).to_query() == "limit=5"
    assert Pagination(order="asc", after="a").to_query() == "after=a&order=asc"


def test_run_request_omits_empty_fields_and_keeps_false():
    request = RunRequest(
        assistant_id=ASSISTANT_ID,
        temperature=0.5,
        max_prompt_tokens=100,
        truncation_strategy=ThreadTruncationStrategy(
            type=TruncationStrategy.LAST_MESSAGES, last_messages=3
        ),
        parallel_tool_calls=False,
    )
    assert request._to_dict() == {
        "assistant_id": ASSISTANT_ID,
        "temperature": 0.5,
        "max_prompt_tokens": 100,
        "truncation_strategy": {"type": "last_messages", "last_messages": 3},
        "parallel_tool_calls": False,
    }


def test_run_parses_nested_fields():
    transport = FakeTransport(
        {
            ("GET", f"/v1/threads/{THREAD_ID}/runs/{RUN_ID}"): lambda r: _run(
                "requires_action",
                required_action={
                    "type": "submit_tool_outputs",
                    "submit_tool_outputs": {"tool_calls": [{"id": "call_1"}]},
                },
                last_error={"code": "rate_limit_exceeded", "message": "slow down"},
                truncation_strategy={"type": "auto"},
                started_at=5,
            )
        }
    )
    run = Runs(transport, BASE_URL).retrieve(THREAD_ID, RUN_ID)
    assert run.status is RunStatus.REQUIRES_ACTION
    assert run.required_action.type is RequiredActionType.SUBMIT_TOOL_OUTPUTS
    assert run.required_action.tool_calls == [{"id": "call_1"}]
    assert run.last_error.code is RunError.RATE_LIMIT_EXCEEDED
    assert run.last_error.message == "slow down"
    assert run.truncation_strategy.type is TruncationStrategy.AUTO
    assert run.started_at == 5
    assert run.completed_at is None


def test_step_details_message_creation():
    transport = FakeTransport(
        {
            ("GET", f"/v1/threads/{THREAD_ID}/runs/{RUN_ID}/steps/{STEP_ID}"): lambda r: {
                "id": STEP_ID,
                "type": "message_creation",
                "step_details": {
                    "type": "message_creation",
                    "message_creation": {"message_id": "msg_1"},
                },
            }
        }
    )
    step = Runs(transport, BASE_URL).retrieve_step(THREAD_ID, RUN_ID, STEP_ID)
    assert step.type is RunStepType.MESSAGE_CREATION
    assert step.step_details.message_id == "msg_1"
    assert step.step_details.tool_calls is None