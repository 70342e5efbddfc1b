"""Client that sends requests to the service and broadcasts the parsed results."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Iterable, Optional, TypeVar

from .api import OpenAIAPI
from .common_types import Message, OpenAIAuth
from .events import Event
from .http_helper import add_mime, add_mime_file, make_boundary
from .response_types import (
    AudioTranscriptionResponse,
    AudioTranslationResponse,
    ChatCompletionResponse,
    ChatCompletionStreamResponse,
    CompletionResponse,
    CompletionStreamResponse,
    DeleteFileResponse,
    DeleteFineTuneResponse,
    EmbeddingsResponse,
    FineTuningJobEventResponse,
    FineTuningJobObjectResponse,
    ImageEditResponse,
    ImageResponse,
    ImageVariationResponse,
    ListFilesResponse,
    ListFineTuningJobsResponse,
    ListModelsResponse,
    ModerationsResponse,
    ResponseParseError,
    RetrieveFileContentResponse,
    RetrieveFileResponse,
    RetrieveModelResponse,
    UploadFileResponse,
    loads_lenient,
    parse_json_to,
)
from .transport import HttpRequest, HttpResponse, Transport, TransportError, UrllibTransport

logger = logging.getLogger(__name__)

T = TypeVar("T")

_DATA_PREFIX = "data:"
_STREAM_DONE = "[DONE]"
_CHAT_REQUIRED_KEYS = frozenset({"model", "messages"})


def _jsonable(value: Any) -> Any:
    """Turn request objects (dataclasses, mappings, enums) into JSON-ready values."""
    if isinstance(value, Message):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: _jsonable(getattr(value, f.name))
            for f in dataclasses.fields(value)
            if getattr(value, f.name) is not None
        }
    if isinstance(value, Mapping):
        return {str(k): _jsonable(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


def _request_body(payload: Any) -> dict[str, Any]:
    body = _jsonable(payload)
    if not isinstance(body, dict):
        raise TypeError("request payload must be a mapping or a dataclass instance")
    return body


def _clean_chat_completion(body: dict[str, Any]) -> dict[str, Any]:
    """Drop optional chat fields that the service rejects when they are empty."""
    return {
        key: value
        for key, value in body.items()
        if key in _CHAT_REQUIRED_KEYS or value not in ("", [], {})
    }


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _query(pairs: Iterable[tuple[str, Any]]) -> str:
    args = [f"{key}={value}" for key, value in pairs if value is not None and value != ""]
    return "?" + "&".join(args) if args else ""


def _handle_stream_line(line: str) -> tuple[Optional[str], bool]:
    """Return (json payload or None, is_last) for one line of a server-sent stream."""
    line = line.strip()
    if not line:
        return None, False
    if line.startswith(_DATA_PREFIX):
        line = line[len(_DATA_PREFIX):].strip()
    if line == _STREAM_DONE:
        return None, True
    return line, False


def parse_stream(content: str, response_type: type[T]) -> list[T]:
    """Parse every data line of a streamed body up to the end marker; bad lines are skipped."""
    responses: list[T] = []
    for line in content.splitlines():
        payload, last = _handle_stream_line(line)
        if last:
            break
        if payload is None:
            continue
        try:
            responses.append(parse_json_to(response_type, payload))
        except ResponseParseError:
            continue
    return responses


class OpenAIProvider:
    """Sends requests through a transport and reports results through events."""

    def __init__(self, api: Optional[OpenAIAPI] = None, transport: Optional[Transport] = None) -> None:
        self._api = api if api is not None else OpenAIAPI()
        self._transport = transport if transport is not None else UrllibTransport()
        self._log_enabled = True

        self.request_error: Event[Callable[[str, str], Any]] = Event()
        self.list_models_completed: Event = Event()
        self.retrieve_model_completed: Event = Event()
        self.create_completion_completed: Event = Event()
        self.create_completion_stream_completed: Event = Event()
        self.create_completion_stream_progresses: Event = Event()
        self.create_chat_completion_completed: Event = Event()
        self.create_chat_completion_stream_completed: Event = Event()
        self.create_chat_completion_stream_progresses: Event = Event()
        self.create_image_completed: Event = Event()
        self.create_image_edit_completed: Event = Event()
        self.create_image_variation_completed: Event = Event()
        self.create_embeddings_completed: Event = Event()
        self.create_audio_transcription_completed: Event = Event()
        self.create_audio_translation_completed: Event = Event()
        self.list_files_completed: Event = Event()
        self.upload_file_completed: Event = Event()
        self.delete_file_completed: Event = Event()
        self.retrieve_file_completed: Event = Event()
        self.retrieve_file_content_completed: Event = Event()
        self.delete_fine_tuned_model_completed: Event = Event()
        self.create_moderations_completed: Event = Event()
        self.list_fine_tuning_jobs_completed: Event = Event()
        self.create_fine_tuning_job_completed: Event = Event()
        self.retrieve_fine_tuning_job_completed: Event = Event()
        self.cancel_fine_tuning_job_completed: Event = Event()
        self.list_fine_tuning_events_completed: Event = Event()

    def set_api(self, api: OpenAIAPI) -> None:
        """Use a different set of endpoint URLs."""
        self._api = api

    def set_log_enabled(self, enabled: bool) -> None:
        """Turn logging of responses on or off."""
        self._log_enabled = enabled

    # models

    def list_models(self, auth: OpenAIAuth) -> None:
        request = self._make_request(self._api.models(), "GET", auth)
        self._handle(request, ListModelsResponse, self.list_models_completed)

    def retrieve_model(self, model_name: str, auth: OpenAIAuth) -> None:
        request = self._make_request(f"{self._api.models()}/{model_name}", "GET", auth)
        self._handle(request, RetrieveModelResponse, self.retrieve_model_completed)

    def delete_fine_tuned_model(self, model_id: str, auth: OpenAIAuth) -> None:
        request = self._make_request(f"{self._api.models()}/{model_id}", "DELETE", auth)
        self._handle(request, DeleteFineTuneResponse, self.delete_fine_tuned_model_completed)

    # completions

    def create_completion(self, completion: Any, auth: OpenAIAuth) -> None:
        body = _request_body(completion)
        request = self._make_request(self._api.completion(), "POST", auth, body)
        if body.get("stream"):
            self._handle_stream(
                request,
                CompletionStreamResponse,
                self.create_completion_stream_progresses,
                self.create_completion_stream_completed,
            )
        else:
            self._handle(request, CompletionResponse, self.create_completion_completed)

    def create_chat_completion(self, chat_completion: Any, auth: OpenAIAuth) -> None:
        body = _clean_chat_completion(_request_body(chat_completion))
        request = self._make_request(self._api.chat_completion(), "POST", auth, body)
        if body.get("stream"):
            self._handle_stream(
                request,
                ChatCompletionStreamResponse,
                self.create_chat_completion_stream_progresses,
                self.create_chat_completion_stream_completed,
            )
        else:
            self._handle(request, ChatCompletionResponse, self.create_chat_completion_completed)

    # images

    def create_image(self, image: Any, auth: OpenAIAuth) -> None:
        request = self._make_request(self._api.image_generations(), "POST", auth, _request_body(image))
        self._handle_image(request, ImageResponse, self.create_image_completed)

    def create_image_edit(self, image_edit: Any, auth: OpenAIAuth) -> None:
        request = self._make_multipart_request(
            self._api.image_edits(), auth, _request_body(image_edit), ("image", "mask")
        )
        self._handle_image(request, ImageEditResponse, self.create_image_edit_completed)

    def create_image_variation(self, image_variation: Any, auth: OpenAIAuth) -> None:
        request = self._make_multipart_request(
            self._api.image_variations(), auth, _request_body(image_variation), ("image",)
        )
        self._handle_image(request, ImageVariationResponse, self.create_image_variation_completed)

    # embeddings, audio, moderations

    def create_embeddings(self, embeddings: Any, auth: OpenAIAuth) -> None:
        request = self._make_request(self._api.embeddings(), "POST", auth, _request_body(embeddings))
        self._handle(request, EmbeddingsResponse, self.create_embeddings_completed)

    def create_audio_transcription(self, transcription: Any, auth: OpenAIAuth) -> None:
        request = self._make_multipart_request(
            self._api.audio_transcriptions(), auth, _request_body(transcription), ("file",)
        )
        self._handle(request, AudioTranscriptionResponse, self.create_audio_transcription_completed)

    def create_audio_translation(self, translation: Any, auth: OpenAIAuth) -> None:
        request = self._make_multipart_request(
            self._api.audio_translations(), auth, _request_body(translation), ("file",)
        )
        self._handle(request, AudioTranslationResponse, self.create_audio_translation_completed)

    def create_moderations(self, moderations: Any, auth: OpenAIAuth) -> None:
        request = self._make_request(self._api.moderations(), "POST", auth, _request_body(moderations))
        self._handle(request, ModerationsResponse, self.create_moderations_completed)

    # files

    def list_files(self, auth: OpenAIAuth) -> None:
        request = self._make_request(self._api.files(), "GET", auth)
        self._handle(request, ListFilesResponse, self.list_files_completed)

    def upload_file(self, upload_file: Any, auth: OpenAIAuth) -> None:
        request = self._make_multipart_request(self._api.files(), auth, _request_body(upload_file), ("file",))
        self._handle(request, UploadFileResponse, self.upload_file_completed)

    def delete_file(self, file_id: str, auth: OpenAIAuth) -> None:
        request = self._make_request(f"{self._api.files()}/{file_id}", "DELETE", auth)
        self._handle(request, DeleteFileResponse, self.delete_file_completed)

    def retrieve_file(self, file_id: str, auth: OpenAIAuth) -> None:
        request = self._make_request(f"{self._api.files()}/{file_id}", "GET", auth)
        self._handle(request, RetrieveFileResponse, self.retrieve_file_completed)

    def retrieve_file_content(self, file_id: str, auth: OpenAIAuth) -> None:
        request = self._make_request(f"{self._api.files()}/{file_id}/content", "GET", auth)
        response = self._send(request)
        if response is None:
            return
        self._log_response(response)
        self.retrieve_file_content_completed.broadcast(RetrieveFileContentResponse(content=response.text))

    # fine-tuning jobs

    def list_fine_tuning_jobs(
        self, auth: OpenAIAuth, after: Optional[str] = None, limit: Optional[int] = None
    ) -> None:
        url = self._api.fine_tuning_jobs() + _query([("after", after), ("limit", limit)])
        request = self._make_request(url, "GET", auth)
        self._handle(request, ListFineTuningJobsResponse, self.list_fine_tuning_jobs_completed)

    def create_fine_tuning_job(self, fine_tuning_job: Any, auth: OpenAIAuth) -> None:
        request = self._make_request(
            self._api.fine_tuning_jobs(), "POST", auth, _request_body(fine_tuning_job)
        )
        self._handle(request, FineTuningJobObjectResponse, self.create_fine_tuning_job_completed)

    def retrieve_fine_tuning_job(self, job_id: str, auth: OpenAIAuth) -> None:
        request = self._make_request(f"{self._api.fine_tuning_jobs()}/{job_id}", "GET", auth)
        self._handle(request, FineTuningJobObjectResponse, self.retrieve_fine_tuning_job_completed)

    def cancel_fine_tuning_job(self, job_id: str, auth: OpenAIAuth) -> None:
        request = self._make_request(f"{self._api.fine_tuning_jobs()}/{job_id}/cancel", "POST", auth)
        self._handle(request, FineTuningJobObjectResponse, self.cancel_fine_tuning_job_completed)

    def list_fine_tuning_events(
        self,
        job_id: str,
        auth: OpenAIAuth,
        after: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> None:
        url = f"{self._api.fine_tuning_jobs()}/{job_id}/events" + _query([("after", after), ("limit", limit)])
        request = self._make_request(url, "GET", auth)
        self._handle(request, FineTuningJobEventResponse, self.list_fine_tuning_events_completed)

    # internals

    @staticmethod
    def _auth_headers(auth: OpenAIAuth) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {auth.api_key}",
            "OpenAI-Organization": auth.organization_id,
        }

    def _make_request(
        self, url: str, method: str, auth: OpenAIAuth, body: Optional[dict[str, Any]] = None
    ) -> HttpRequest:
        import json

        headers = {"Content-Type": "application/json", **self._auth_headers(auth)}
        request = HttpRequest(url=url, method=method, headers=headers)
        if body is not None:
            request.set_content_as_string(json.dumps(body))
        return request

    def _make_multipart_request(
        self, url: str, auth: OpenAIAuth, body: dict[str, Any], file_fields: tuple[str, ...]
    ) -> HttpRequest:
        boundary = make_boundary()
        sections: list[bytes] = []
        for name, value in body.items():
            if value is None or value == "":
                continue
            if name in file_fields:
                sections.append(add_mime_file(value, name, boundary.begin_boundary))
            else:
                sections.append(add_mime(name, _form_value(value), boundary.begin_boundary))
        sections.append(boundary.end_boundary.encode("utf-8"))
        headers = {
            "Content-Type": f"multipart/form-data; boundary={boundary.boundary}",
            **self._auth_headers(auth),
        }
        return HttpRequest(url=url, method="POST", headers=headers, body=b"".join(sections))

    def _send(
        self, request: HttpRequest, on_progress: Optional[Callable[[HttpResponse], None]] = None
    ) -> Optional[HttpResponse]:
        try:
            response = self._transport.send(request, on_progress)
        except TransportError as exc:
            self._log_error(str(exc))
            self.request_error.broadcast(request.url, str(exc))
            return None
        if not response.ok:
            self._log_error(response.text)
            self.request_error.broadcast(response.url or request.url, response.text)
            return None
        return response

    def _fail_parse(self, request: HttpRequest, response: HttpResponse) -> None:
        self._log_error("JSON deserialization error")
        self.request_error.broadcast(response.url or request.url, response.text)

    def _handle(self, request: HttpRequest, response_type: type, event: Event) -> None:
        response = self._send(request)
        if response is None:
            return
        self._log_response(response)
        try:
            parsed = parse_json_to(response_type, response.text)
        except ResponseParseError:
            self._fail_parse(request, response)
            return
        event.broadcast(parsed)

    def _handle_image(self, request: HttpRequest, response_type: type, event: Event) -> None:
        response = self._send(request)
        if response is None:
            return
        self._log_response(response)
        try:
            data = loads_lenient(response.text)
            if not isinstance(data, dict):
                raise ResponseParseError("expected a JSON object")
            images = []
            for item in data.get("data") or []:
                if not isinstance(item, dict):
                    raise ResponseParseError("expected image objects")
                images.append(item.get("url") or item.get("b64_json") or "")
            created = data.get("created") or 0
            if isinstance(created, bool) or not isinstance(created, (int, float)):
                raise ResponseParseError("expected a number for created")
        except ResponseParseError:
            self._fail_parse(request, response)
            return
        event.broadcast(response_type(created=int(created), data=images))

    def _handle_stream(
        self, request: HttpRequest, response_type: type, progress: Event, completed: Event
    ) -> None:
        def on_progress(partial: HttpResponse) -> None:
            parsed = parse_stream(partial.text, response_type)
            self._log_response(partial)
            progress.broadcast(parsed)

        response = self._send(request, on_progress)
        if response is None:
            return
        self._log_response(response)
        completed.broadcast(parse_stream(response.text, response_type))

    def _log_response(self, response: HttpResponse) -> None:
        if self._log_enabled:
            logger.info("%s", response.text)

    def _log_error(self, text: str) -> None:
        if self._log_enabled:
            logger.error("%s", text)