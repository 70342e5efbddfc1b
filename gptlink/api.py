"""Endpoint URLs of the service."""

from __future__ import annotations

DEFAULT_BASE_URL = "https://api.openai.com"


class OpenAIAPI:
    """Builds the v1 endpoint URLs from a base URL."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL) -> None:
        self._base_url = base_url.rstrip("/")

    def _v1(self, path: str) -> str:
        return f"{self._base_url}/v1/{path}"

    def base_url(self) -> str:
        return self._base_url

    def models(self) -> str:
        return self._v1("models")

    def completion(self) -> str:
        return self._v1("completions")

    def chat_completion(self) -> str:
        return self._v1("chat/completions")

    def image_generations(self) -> str:
        return self._v1("images/generations")

    def image_edits(self) -> str:
        return self._v1("images/edits")

    def image_variations(self) -> str:
        return self._v1("images/variations")

    def embeddings(self) -> str:
        return self._v1("embeddings")

    def audio_transcriptions(self) -> str:
        return self._v1("audio/transcriptions")

    def audio_translations(self) -> str:
        return self._v1("audio/translations")

    def files(self) -> str:
        return self._v1("files")

    def fine_tuning_jobs(self) -> str:
        return self._v1("fine_tuning/jobs")

    def moderations(self) -> str:
        return self._v1("moderations")