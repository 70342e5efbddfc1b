import pytest

from gptlink.api import OpenAIAPI


def test_default_base_url():
    assert OpenAIAPI().base_url() == "https://api.openai.com"


@pytest.mark.parametrize(
    "method, suffix",
    [
        ("models", "/v1/models"),
        ("completion", "/v1/completions"),
        ("chat_completion", "/v1/chat/completions"),
        ("image_generations", "/v1/images/generations"),
        ("image_edits", "/v1/images/edits"),
        ("image_variations", "/v1/images/variations"),
        ("embeddings", "/v1/embeddings"),
        ("audio_transcriptions", "/v1/audio/transcriptions"),
        ("audio_translations", "/v1/audio/translations"),
        ("files", "/v1/files"),
        ("fine_tuning_jobs", "/v1/fine_tuning/jobs"),
        ("moderations", "/v1/moderations"),
    ],
)
def test_v1_urls_are_correct(method, suffix):
    api = OpenAIAPI()
    assert getattr(api, method)() == api.base_url() + suffix


def test_custom_base_url_is_used_for_endpoints():
    api = OpenAIAPI("http://localhost:8080/")
    assert api.base_url() == "http://localhost:8080"
    assert api.models() == "http://localhost:8080/v1/models"