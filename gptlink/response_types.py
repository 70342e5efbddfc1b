"""Response payloads returned by the service and the JSON reader that fills them."""

import dataclasses
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar, get_args, get_origin

from .common_types import FunctionCall, Message

T = TypeVar("T")


class ResponseParseError(ValueError):
    """Raised when a response body cannot be read into the expected type."""


class ResponseError(Enum):
    """Kinds of errors a request can end with."""

    INVALID_API_KEY = 0
    NETWORK_ERROR = 1
    MODEL_NOT_FOUND = 2
    UNKNOWN = 3


class FinishReason(str, Enum):
    """Why the model stopped generating tokens."""

    STOP = "stop"
    LENGTH = "length"
    CONTENT_FILTER = "content_filter"
    FUNCTION_CALL = "function_call"
    NULL = ""


def _json_key(name: str) -> Any:
    return field(default=False, metadata={"json": name})


@dataclass
class Permission:
    id: str = ""
    object: str = ""
    created: int = 0
    allow_create_engine: bool = False
    allow_sampling: bool = False
    allow_logprobs: bool = False
    allow_search_indices: bool = False
    allow_view: bool = False
    allow_fine_tuning: bool = False
    organization: str = ""
    group: str = ""
    is_blocking: bool = False


@dataclass
class OpenAIModel:
    id: str = ""
    object: str = ""
    created: int = 0
    owned_by: str = ""
    permission: list[Permission] = field(default_factory=list)
    root: str = ""
    parent: str = ""


@dataclass
class ListModelsResponse:
    object: str = ""
    data: list[OpenAIModel] = field(default_factory=list)


@dataclass
class RetrieveModelResponse(OpenAIModel):
    pass


@dataclass
class BaseChoice:
    text: str = ""
    index: int = 0


@dataclass
class LogProbs:
    tokens: list[str] = field(default_factory=list)
    token_logprobs: list[float] = field(default_factory=list)
    top_logprobs: str = ""
    text_offset: list[int] = field(default_factory=list)


@dataclass
class Choice(BaseChoice):
    logprobs: LogProbs = field(default_factory=LogProbs)
    finish_reason: str = ""


@dataclass
class ChatChoice:
    index: int = 0
    message: Message = field(default_factory=Message)
    finish_reason: str = ""


@dataclass
class Usage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class _CompletionResponseBase:
    id: str = ""
    object: str = ""
    created: int = 0
    model: str = ""
    choices: list[Choice] = field(default_factory=list)


@dataclass
class CompletionResponse(_CompletionResponseBase):
    usage: Usage = field(default_factory=Usage)


@dataclass
class CompletionStreamResponse(_CompletionResponseBase):
    pass


@dataclass
class _ChatCompletionResponseBase:
    id: str = ""
    object: str = ""
    created: int = 0
    model: str = ""


@dataclass
class ChatCompletionResponse(_ChatCompletionResponseBase):
    choices: list[ChatChoice] = field(default_factory=list)
    usage: Usage = field(default_factory=Usage)


@dataclass
class Delta:
    content: str = ""
    function_call: FunctionCall = field(default_factory=FunctionCall)
    role: str = ""


@dataclass
class ChatStreamChoice:
    delta: Delta = field(default_factory=Delta)
    finish_reason: str = ""
    index: int = 0


@dataclass
class ChatCompletionStreamResponse(_ChatCompletionResponseBase):
    choices: list[ChatStreamChoice] = field(default_factory=list)


@dataclass
class EditResponse:
    object: str = ""
    created: int = 0
    choices: list[BaseChoice] = field(default_factory=list)
    usage: Usage = field(default_factory=Usage)


@dataclass
class ImageResponse:
    created: int = 0
    data: list[str] = field(default_factory=list)


@dataclass
class ImageEditResponse(ImageResponse):
    pass


@dataclass
class ImageVariationResponse(ImageResponse):
    pass


@dataclass
class EmbeddingsUsage:
    prompt_tokens: int = 0
    total_tokens: int = 0


@dataclass
class EmbeddingsData:
    object: str = ""
    index: int = 0
    embedding: list[float] = field(default_factory=list)


@dataclass
class EmbeddingsResponse:
    object: str = ""
    data: list[EmbeddingsData] = field(default_factory=list)
    model: str = ""
    usage: EmbeddingsUsage = field(default_factory=EmbeddingsUsage)


@dataclass
class AudioTranscriptionResponse:
    text: str = ""


@dataclass
class AudioTranslationResponse:
    text: str = ""


@dataclass
class OpenAIFile:
    id: str = ""
    object: str = ""
    bytes: int = 0
    created_at: int = 0
    filename: str = ""
    purpose: str = ""
    status: str = ""
    status_details: str = ""


@dataclass
class ListFilesResponse:
    object: str = ""
    data: list[OpenAIFile] = field(default_factory=list)


@dataclass
class UploadFileResponse(OpenAIFile):
    pass


@dataclass
class DeleteFileResponse:
    id: str = ""
    object: str = ""
    deleted: bool = False


@dataclass
class RetrieveFileResponse(OpenAIFile):
    pass


@dataclass
class RetrieveFileContentResponse:
    content: str = ""


@dataclass
class OpenAIEvent:
    object: str = ""
    created_at: int = 0
    level: str = ""
    message: str = ""


@dataclass
class Hyperparams:
    batch_size: int = 0
    learning_rate_multiplier: float = 0.0
    n_epochs: int = 0
    prompt_loss_weight: float = 0.0


@dataclass
class BaseFineTuneResponse:
    id: str = ""
    object: str = ""
    model: str = ""
    created_at: int = 0
    fine_tuned_model: str = ""
    hyperparams: Hyperparams = field(default_factory=Hyperparams)
    organization_id: str = ""
    result_files: list[OpenAIFile] = field(default_factory=list)
    status: str = ""
    validation_files: list[OpenAIFile] = field(default_factory=list)
    training_files: list[OpenAIFile] = field(default_factory=list)
    updated_at: int = 0


@dataclass
class FineTuneResponse(BaseFineTuneResponse):
    events: list[OpenAIEvent] = field(default_factory=list)


@dataclass
class ListFineTuneResponse:
    object: str = ""
    data: list[BaseFineTuneResponse] = field(default_factory=list)


@dataclass
class FineTuneEventsResponse:
    object: str = ""
    data: list[OpenAIEvent] = field(default_factory=list)


@dataclass
class DeleteFineTuneResponse:
    id: str = ""
    object: str = ""
    deleted: bool = False


@dataclass
class ModerationCategories:
    hate: bool = False
    hate_threatening: bool = _json_key("hate/threatening")
    self_harm: bool = _json_key("self-harm")
    sexual: bool = False
    sexual_minors: bool = _json_key("sexual/minors")
    violence: bool = False
    violence_graphic: bool = _json_key("violence/graphic")


@dataclass
class ModerationScores:
    hate: float = 0.0
    hate_threatening: float = field(default=0.0, metadata={"json": "hate/threatening"})
    self_harm: float = field(default=0.0, metadata={"json": "self-harm"})
    sexual: float = 0.0
    sexual_minors: float = field(default=0.0, metadata={"json": "sexual/minors"})
    violence: float = 0.0
    violence_graphic: float = field(default=0.0, metadata={"json": "violence/graphic"})


@dataclass
class ModerationResults:
    categories: ModerationCategories = field(default_factory=ModerationCategories)
    category_scores: ModerationScores = field(default_factory=ModerationScores)
    flagged: bool = False


@dataclass
class ModerationsResponse:
    id: str = ""
    model: str = ""
    results: list[ModerationResults] = field(default_factory=list)


@dataclass
class FineTuningJobHyperparams:
    n_epochs: str = ""


@dataclass
class FineTuningJobError:
    code: str = ""
    param: str = ""
    message: str = ""


@dataclass
class FineTuningJobObjectResponse:
    id: str = ""
    created_at: int = 0
    error: FineTuningJobError = field(default_factory=FineTuningJobError)
    fine_tuned_model: str = ""
    finished_at: int = 0
    hyperparameters: FineTuningJobHyperparams = field(default_factory=FineTuningJobHyperparams)
    model: str = ""
    object: str = ""
    organization_id: str = ""
    result_files: list[str] = field(default_factory=list)
    status: str = ""
    trained_tokens: int = 0
    training_file: str = ""
    validation_file: str = ""


@dataclass
class ListFineTuningJobsResponse:
    object: str = ""
    data: list[FineTuningJobObjectResponse] = field(default_factory=list)
    has_more: bool = False


@dataclass
class FineTuningJobEventResponse:
    id: str = ""
    created_at: int = 0
    level: str = ""
    message: str = ""
    object: str = ""


def _default_for(tp: Any) -> Any:
    if get_origin(tp) is list:
        return []
    return tp()


def _number_to_str(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _convert(tp: Any, value: Any, path: str) -> Any:
    if value is None:
        return _default_for(tp)
    if get_origin(tp) is list:
        if not isinstance(value, list):
            raise ResponseParseError(f"{path}: expected an array")
        (item_type,) = get_args(tp)
        return [_convert(item_type, item, f"{path}[{i}]") for i, item in enumerate(value)]
    if dataclasses.is_dataclass(tp):
        if not isinstance(value, dict):
            raise ResponseParseError(f"{path}: expected an object")
        return _from_dict(tp, value, path)
    if tp is bool:
        if isinstance(value, bool):
            return value
        raise ResponseParseError(f"{path}: expected a boolean")
    if tp is int:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ResponseParseError(f"{path}: expected a number")
        return int(value)
    if tp is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ResponseParseError(f"{path}: expected a number")
        return float(value)
    if tp is str:
        if isinstance(value, str):
            return value
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return _number_to_str(value)
        raise ResponseParseError(f"{path}: expected a string")
    raise ResponseParseError(f"{path}: unsupported field type {tp!r}")


def _from_dict(cls: type, data: dict[str, Any], path: str) -> Any:
    by_key = {key.lower(): value for key, value in data.items()}
    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        key = f.metadata.get("json", f.name).lower()
        value = by_key.get(key)
        if value is None:
            continue
        kwargs[f.name] = _convert(f.type, value, f"{path}.{f.name}")
    return cls(**kwargs)


def response_from_dict(cls: type[T], data: Any) -> T:
    """Build a response dataclass from decoded JSON, matching keys without regard to case.

    Missing and null fields keep their defaults; unknown keys are ignored.
    """
    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"{cls!r} is not a response type")
    if not isinstance(data, dict):
        raise ResponseParseError("expected a JSON object")
    return _from_dict(cls, data, cls.__name__)


def _strip_trailing_commas(text: str) -> str:
    out: list[str] = []
    in_string = False
    escaped = False
    last_comma = None
    for ch in text:
        if in_string:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch in "}]" and last_comma is not None:
            del out[last_comma]
        if ch == ",":
            last_comma = len(out)
        elif not ch.isspace():
            last_comma = None
        if ch == '"':
            in_string = True
        out.append(ch)
    return "".join(out)


def loads_lenient(text: str) -> Any:
    """Decode JSON, accepting trailing commas before a closing bracket or brace."""
    try:
        return json.loads(_strip_trailing_commas(text))
    except json.JSONDecodeError as exc:
        raise ResponseParseError(f"invalid JSON: {exc.msg}") from exc


def parse_json_to(cls: type[T], text: str) -> T:
    """Decode a JSON body and read it into the given response type."""
    return response_from_dict(cls, loads_lenient(text))