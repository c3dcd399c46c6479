# gptapi

A dependency-free Python client for a GPT-style REST API. It covers the
assistants endpoints (threads, messages, runs and run steps, vector stores
with their files and file batches), model listing, moderation and
text-to-speech. It also has a reader for server-sent event streams, a
checker for reasoning-model request parameters and a small JSON schema
toolkit for function calling and structured output.

## Installation

```
pip install gptapi
```

To run the test suite:

```
pip install "gptapi[test]"
pytest
```

## What is in the package

| Module | Purpose |
| --- | --- |
| `gptapi.transport` | `Request`, `Response`, the `Transport` interface and the standard-library `HTTPTransport`; `APIError`; rate-limit headers (`RateLimitHeaders`, `ResetTime`); `encode_query` |
| `gptapi.models` | `Models`: `list()`, `get(model_id)`, `delete_fine_tune(model_id)` |
| `gptapi.moderation` | `Moderations.create(request)`; an unsupported model raises `InvalidModerationModelError` before anything is sent |
| `gptapi.speech` | `Speech.create(request)`, returning the `Response` that holds the audio bytes; `SpeechModel`, `SpeechVoice`, `SpeechResponseFormat` |
| `gptapi.thread` | `Threads`: `create`, `retrieve`, `modify`, `delete` |
| `gptapi.messages` | `Messages`: `create`, `list`, `retrieve`, `modify`, `delete`, `retrieve_file`, `list_files` |
| `gptapi.run` | `Runs`: `create`, `retrieve`, `modify`, `list`, `submit_tool_outputs`, `cancel`, `create_thread_and_run`, `retrieve_step`, `list_steps`; `Pagination` for list calls |
| `gptapi.vector_store` | `VectorStores`: stores, their files and file batches |
| `gptapi.stream_reader` | `StreamReader`, which turns a server-sent event stream into decoded chunks |
| `gptapi.reasoning` | `ReasoningValidator`, which checks request parameters for o1/o3 models |
| `gptapi.schema.definition` | `Definition`, `DataType` and `generate_schema_for_type` |
| `gptapi.schema.validate` | `validate`, `verify_schema_and_unmarshal` and `SchemaValidationError` |

## Using the resource classes

Every resource class is built from a transport, a base URL and an optional
API key, which is sent as `Authorization: Bearer <key>`. `Threads`,
`Messages`, `Runs` and `VectorStores` also take `assistant_version`; when it
is set, each request carries an `OpenAI-Beta: assistants=<version>` header.

```python
from gptapi.thread import Threads, ThreadMessage, ThreadRequest
from gptapi.transport import HTTPTransport

threads = Threads(
    HTTPTransport(timeout=30),
    "https://api.example.com/v1",
    api_key="placeholder",
    assistant_version="v2",
)
thread = threads.create(
    ThreadRequest(messages=[ThreadMessage(role="user", content="Hello, World!")])
)
print(thread.id)
```

`HTTPTransport` uses `urllib` and reads each whole reply into memory. Any
object with a `send(request)` method that returns a `Response` can take its
place, which lets the resource classes be used without a network:

```python
from gptapi.models import Models
from gptapi.transport import Request, Response, Transport


class Canned(Transport):
    def send(self, request: Request) -> Response:
        return Response(200, {}, b'{"data": [{"id": "model-a"}]}')


print([m.id for m in Models(Canned(), "https://api.example.com/v1").list().models])
```

A reply with a status of 400 or more raises `APIError`, whose `message`,
`status_code`, `type`, `code` and `param` come from the reply's `error`
object when it has one.

List calls on runs, run steps and vector stores take a `Pagination`
(`limit`, `order`, `after`, `before`); unset fields are left out of the query.
`Messages.list` takes the same values as keyword arguments, plus `run_id`.

## JSON schemas from Python types

`generate_schema_for_type` builds a `Definition` from a Python type or a
dataclass instance. Strings, integers, floats, booleans, typed lists and
dataclasses are supported; anything else raises `TypeError`. Dataclass field
metadata may carry `json`, `description`, `enum`, `nullable` and `required`
entries.

```python
from dataclasses import dataclass

from gptapi.schema.definition import generate_schema_for_type
from gptapi.schema.validate import validate, verify_schema_and_unmarshal


@dataclass
class Cases:
    pascal_case: str
    snake_case: str


schema = generate_schema_for_type(Cases)
print(schema.to_json())

assert validate(schema, {"pascal_case": "HelloWorld", "snake_case": "hello_world"})
assert not validate(schema, {"pascal_case": "HelloWorld"})

data = verify_schema_and_unmarshal(
    schema, '{"pascal_case": "HelloWorld", "snake_case": "hello_world"}'
)
```

`verify_schema_and_unmarshal` returns the decoded document and raises
`SchemaValidationError` when it does not match the schema;
`Definition.unmarshal(content)` does the same with the definition it is
called on. `Definition.to_dict()` leaves out empty fields.

## Streaming

`StreamReader` reads `data:` lines from an event stream given as a
`Response`, as bytes, or as an iterable of newline-terminated byte lines.
`recv()` returns the next decoded chunk and `recv_raw()` the raw payload;
both raise `EOFError` once the server sends `[DONE]` or the stream ends.
Iterating over the reader yields chunks until then. An error document sent
in place of events is raised as `StreamAPIError`, and more than
`empty_messages_limit` (default 300) lines in a row without data raise
`TooManyEmptyStreamMessagesError`. The reader is a context manager; `close()`
calls the `on_close` callback given to it.

```python
from gptapi.stream_reader import StreamReader

body = b'data: {"id": "1"}\n\ndata: {"id": "2"}\n\ndata: [DONE]\n\n'
with StreamReader(body) as stream:
    print([chunk["id"] for chunk in stream])
```

## Reasoning models

`ReasoningValidator.validate` takes a request object or a mapping. Requests
for models outside the o1/o3 series pass unchecked. For those inside it,
`max_tokens`, `logprobs` and non-default `temperature`, `top_p`, `n`,
`presence_penalty` or `frequency_penalty` raise a subclass of
`ReasoningModelError`.

```python
from gptapi.reasoning import ReasoningModelMaxTokensError, ReasoningValidator

try:
    ReasoningValidator().validate({"model": "o1-mini", "max_tokens": 100})
except ReasoningModelMaxTokensError as exc:
    print(exc)
```

## Rate limits

`Response.rate_limit_headers()` returns a `RateLimitHeaders` read from the
`x-ratelimit-*` headers of a reply; values that are not integers read as 0.
`ResetTime.time()` turns a reset duration such as `"6m0s"` into the moment
the limit resets, and an unreadable value into the current time.

## What the package does not do

- There is no single client object; each resource class is built on its own.
- There are no chat completion, text completion, embeddings, files, image or
  audio transcription calls. `StreamReader` reads streams, but no call in
  the package opens a streamed completion.
- `HTTPTransport` neither streams replies nor retries; there is no
  asynchronous transport.
- There is no command-line tool.