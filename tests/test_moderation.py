import json

import pytest

from gptapi.moderation import (
    MODERATION_OMNI_20240926,
    MODERATION_OMNI_LATEST,
    MODERATION_TEXT_001,
    MODERATION_TEXT_LATEST,
    MODERATION_TEXT_STABLE,
    InvalidModerationModelError,
    ModerationRequest,
    Moderations,
)
from gptapi.transport import APIError, Response, Transport

BASE_URL = "http://localhost/v1"


class FakeTransport(Transport):
    def __init__(self, handler):
        self.handler = handler
        self.requests = []

    def send(self, request):
        self.requests.append(request)
        return self.handler(request)


def moderation_handler(request):
    body = request.body
    categories, scores = {}, {}
    if "hate" in body.get("input", ""):
        categories, scores = {"hate": True}, {"hate": 1}
    elif "kill" in body.get("input", ""):
        categories, scores = {"violence": True}, {"violence": 1}
    payload = {
        "id": "modr-1",
        "model": body.get("model", ""),
        "results": [
            {"categories": categories, "category_scores": scores, "flagged": True}
        ],
    }
    return Response(200, {"x-ratelimit-limit-requests": "60"}, json.dumps(payload).encode())


def make_client(handler=moderation_handler):
    transport = FakeTransport(handler)
    return Moderations(transport, BASE_URL, api_key="placeholder"), transport


def test_moderation_parses_results():
    client, transport = make_client()
    resp = client.create(
        ModerationRequest(model=MODERATION_TEXT_STABLE, input="I want to kill them.")
    )
    assert resp.id == "modr-1"
    assert resp.model == MODERATION_TEXT_STABLE
    assert len(resp.results) == 1
    result = resp.results[0]
    assert result.flagged is True
    assert result.categories.violence is True
    assert result.categories.hate is False
    assert result.category_scores.violence == 1.0
    assert resp.headers["x-ratelimit-limit-requests"] == "60"

    sent = transport.requests[0]
    assert sent.method == "POST"
    assert sent.url == "http://localhost/v1/moderations"
    assert sent.body == {"input": "I want to kill them.", "model": MODERATION_TEXT_STABLE}
    assert sent.headers["Authorization"] == "Bearer placeholder"


def test_slash_keys_are_mapped():
    def handler(request):
        payload = {
            "results": [
                {
                    "categories": {"self-harm/intent": True, "violence/graphic": True},
                    "category_scores": {"hate/threatening": 0.25},
                    "flagged": False,
                }
            ]
        }
        return Response(200, {}, json.dumps(payload).encode())

    client, _ = make_client(handler)
    result = client.create(ModerationRequest(input="text")).results[0]
    assert result.categories.self_harm_intent is True
    assert result.categories.violence_graphic is True
    assert result.categories.self_harm is False
    assert result.category_scores.hate_threatening == 0.25
    assert result.flagged is False


@pytest.mark.parametrize(
    "model",
    [
        MODERATION_TEXT_STABLE,
        MODERATION_TEXT_LATEST,
        MODERATION_OMNI_20240926,
        MODERATION_OMNI_LATEST,
        "",
    ],
)
def test_accepted_models(model):
    client, transport = make_client()
    resp = client.create(ModerationRequest(model=model, input="I want to kill them."))
    assert resp.model == model
    assert len(transport.requests) == 1


@pytest.mark.parametrize("model", ["gpt-3.5-turbo", MODERATION_TEXT_001])
def test_rejected_models_send_nothing(model):
    client, transport = make_client()
    with pytest.raises(InvalidModerationModelError, match="not supported with moderation"):
        client.create(ModerationRequest(model=model, input="I want to kill them."))
    assert transport.requests == []


def test_extra_parameters_are_applied():
    client, transport = make_client()
    client.create(
        ModerationRequest(
            input="hello",
            extra_headers={"X-Custom": "1"},
            extra_query={"b": "2", "a": "1"},
            extra_body={"store": True},
        )
    )
    sent = transport.requests[0]
    assert sent.url == "http://localhost/v1/moderations?a=1&b=2"
    assert sent.headers["X-Custom"] == "1"
    assert sent.body == {"input": "hello", "store": True}


def test_error_status_raises_api_error():
    def handler(request):
        body = b'{"error":{"message":"nope","type":"invalid_request_error"}}'
        return Response(400, {}, body)

    client, _ = make_client(handler)
    with pytest.raises(APIError) as info:
        client.create(ModerationRequest(input="x"))
    assert info.value.status_code == 400
    assert info.value.message == "nope"