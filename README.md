# gptlink

A small client for the OpenAI REST API that uses only the standard library.
Requests go through a pluggable transport. Responses are parsed into
dataclasses, and results reach you through handlers that you register on
events.

## Installation

```
pip install gptlink
```

## Usage

```python
from gptlink.common_types import Message, OpenAIAuth
from gptlink.provider import OpenAIProvider

auth = OpenAIAuth(api_key="placeholder", organization_id="org-example")
provider = OpenAIProvider()

provider.create_chat_completion_completed.add(
    lambda response: print(response.choices[0].message.content)
)
provider.request_error.add(lambda url, content: print("error:", url, content))

provider.create_chat_completion(
    {"model": "gpt-4", "messages": [Message(role="user", content="Hello!")]},
    auth,
)
```

Each request method of `OpenAIProvider` sends one request. When the request
succeeds, the method broadcasts the parsed response on the matching event
attribute:

| Method | Event |
| --- | --- |
| `list_models`, `retrieve_model` | `list_models_completed`, `retrieve_model_completed` |
| `create_completion` | `create_completion_completed`, or for streams `create_completion_stream_progresses` and `create_completion_stream_completed` |
| `create_chat_completion` | `create_chat_completion_completed`, or for streams `create_chat_completion_stream_progresses` and `create_chat_completion_stream_completed` |
| `create_image`, `create_image_edit`, `create_image_variation` | `create_image_completed`, `create_image_edit_completed`, `create_image_variation_completed` |
| `create_embeddings`, `create_moderations` | `create_embeddings_completed`, `create_moderations_completed` |
| `create_audio_transcription`, `create_audio_translation` | `create_audio_transcription_completed`, `create_audio_translation_completed` |
| `list_files`, `upload_file`, `delete_file`, `retrieve_file`, `retrieve_file_content` | `list_files_completed`, `upload_file_completed`, `delete_file_completed`, `retrieve_file_completed`, `retrieve_file_content_completed` |
| `delete_fine_tuned_model` | `delete_fine_tuned_model_completed` |
| `list_fine_tuning_jobs`, `create_fine_tuning_job`, `retrieve_fine_tuning_job`, `cancel_fine_tuning_job`, `list_fine_tuning_events` | the matching `..._completed` event |

If the transport fails, if the status is not 2xx, or if the body cannot be
parsed, the provider broadcasts `(url, content)` on `request_error` instead.

A request payload can be a dict or a dataclass instance. `None` values are
dropped, and `Message` objects are serialised with `Message.to_dict`. For chat
completions, optional fields that are empty are removed before sending. When
the payload has `"stream": True`, the body is read as server-sent `data:` lines
up to `[DONE]`. The progress event receives the chunks parsed so far, and the
completed event receives all of them. For image edits, image variations, audio
and file uploads, the fields `image`, `mask` and `file` are file paths. These
requests are sent as multipart/form-data. `list_fine_tuning_jobs` and
`list_fine_tuning_events` accept optional `after` and `limit` arguments, which
are sent as query parameters.

`set_log_enabled(False)` stops response and error bodies from being logged
through the `gptlink.provider` logger. `set_api` switches to another
`OpenAIAPI`.

### Events

`gptlink.events.Event` holds a list of handlers:

- `add` subscribes a handler and returns it, so it also works as a decorator.
- `remove` unsubscribes a handler, and raises `ValueError` if it was not added.
- `broadcast(*args)` calls every handler in order.
- `clear` removes all handlers.

`len(event)` and `handler in event` also work.

### Endpoints

`OpenAIAPI(base_url="https://api.openai.com")` builds the v1 URLs. For
example, `OpenAIAPI().chat_completion()` gives
`https://api.openai.com/v1/chat/completions`. The other URL methods are
`models`, `completion`, `image_generations`, `image_edits`,
`image_variations`, `embeddings`, `audio_transcriptions`,
`audio_translations`, `files`, `fine_tuning_jobs` and `moderations`.

### Transports

`UrllibTransport(timeout=None, chunk_size=8192)` is the default. It reports
partial bodies to the progress callback while it reads, and raises
`TransportError` when no response is received. `FakeTransport` answers every
request with a preset body and status 200. It also keeps the sent requests in
`requests`:

```python
from gptlink.provider import OpenAIProvider
from gptlink.transport import FakeTransport

fake = FakeTransport()
fake.set_response('{"object": "list", "data": []}')
provider = OpenAIProvider(transport=fake)
```

### Helpers

- `gptlink.response_types` defines the response dataclasses and the
  `FinishReason` and `ResponseError` enums. `parse_json_to(cls, text)` decodes
  a body into a dataclass. `response_from_dict(cls, data)` does the same for
  decoded JSON. Keys are matched without regard to case, missing or null
  fields keep their defaults, and malformed input raises `ResponseParseError`.
  `loads_lenient` accepts trailing commas.
- `gptlink.provider.parse_stream(content, response_type)` parses a streamed
  body. Lines that fail to parse are skipped.
- `gptlink.http_helper` provides the multipart building blocks `make_boundary`,
  `add_mime`, `add_mime_file` and `mime_type_from_ext`. `mime_type_from_ext`
  raises `ValueError` for unknown extensions.
- `gptlink.text_utils` provides `remove_punctuation` and `is_valid_url`.

## What it does not do

- There is no command-line program.
- There are no typed request classes or model-name enums. Requests are plain
  dicts or your own dataclasses.
- The older edits and fine-tunes endpoints are not covered.
- Requests are sent synchronously, and results are delivered before the
  request method returns.

## Running the tests

```
pip install -e ".[test]"
pytest
```