import pytest

from gptlink.text_utils import is_valid_url, remove_punctuation


def test_remove_punctuation_sentence():
    assert remove_punctuation("hello, what's up?") == "hello whats up"


def test_remove_punctuation_removes_symbols():
    assert remove_punctuation("hi+how=are<you>$") == "hihowareyou"


def test_remove_punctuation_keeps_plain_text():
    text = "hi how are you"
    assert remove_punctuation(text) == text


def test_remove_punctuation_is_idempotent():
    once = remove_punctuation("¡Hola! ¿Qué tal? — 100%")
    assert remove_punctuation(once) == once
    assert all(ch.isalnum() or ch.isspace() for ch in once)


@pytest.mark.parametrize(
    "url",
    [
        "https://example.com",
        "http://example.com/images/picture.png?size=256&x=1",
        "https://cdn.example.org/a/b/c",
    ],
)
def test_valid_urls(url):
    assert is_valid_url(url) is True


@pytest.mark.parametrize(
    "url",
    [
        "",
        "example.com",
        "ftp://example.com/file",
        "https://example.com/with space",
        "not a url",
    ],
)
def test_invalid_urls(url):
    assert is_valid_url(url) is False