import pytest

from gptlink.http_helper import (
    add_mime,
    add_mime_file,
    make_boundary,
    mime_type_from_ext,
)

LINE_TERMINATOR = "\r\n"


@pytest.mark.parametrize(
    "ext, expected",
    [
        ("png", "image/png"),
        ("jpeg", "image/jpeg"),
        ("jpg", "image/jpg"),
        ("JpG", "image/jpg"),
        ("mp3", "audio/mp3"),
        ("wav", "audio/wav"),
        ("mp4", "video/mp4"),
        ("mpeg", "video/mpeg"),
        ("mpga", "video/mpga"),
        ("m4a", "video/m4a"),
        ("webm", "video/webm"),
        ("json", "application/json"),
        ("jsonl", "application/jsonl"),
    ],
)
def test_mime_type_from_ext(ext, expected):
    assert mime_type_from_ext(ext) == expected


def test_mime_type_unknown_extension_raises():
    with pytest.raises(ValueError):
        mime_type_from_ext("exe")


def test_make_boundary():
    boundary, begin, end = make_boundary(99999)
    assert boundary == "---------------------------99999"
    assert begin == LINE_TERMINATOR + "--" + boundary + LINE_TERMINATOR
    assert end == LINE_TERMINATOR + "--" + boundary + "--" + LINE_TERMINATOR


def test_make_boundary_default_uses_current_ticks():
    first = make_boundary()
    second = make_boundary()
    assert first.boundary.startswith("---------------------------")
    assert first.boundary.lstrip("-").isdigit()
    assert int(second.boundary.lstrip("-")) >= int(first.boundary.lstrip("-"))
    assert first.begin_boundary == LINE_TERMINATOR + "--" + first.boundary + LINE_TERMINATOR


def test_add_mime():
    _, begin, _ = make_boundary(99999)
    header = (
        'Content-Disposition: form-data;name="randomParamName"'
        + LINE_TERMINATOR
        + LINE_TERMINATOR
        + "randomParamValue"
    )
    expected = begin.encode() + header.encode()
    assert add_mime("randomParamName", "randomParamValue", begin) == expected


def test_add_mime_file(tmp_path):
    file_content = b"\x89PNG\r\n\x1a\n fake image data"
    file_path = tmp_path / "test_image.png"
    file_path.write_bytes(file_content)

    _, begin, _ = make_boundary(99999)
    header = (
        'Content-Disposition: form-data;name="randomParamName";'
        'filename="test_image.png"'
        + LINE_TERMINATOR
        + "Content-Type: image/png"
        + LINE_TERMINATOR
        + LINE_TERMINATOR
    )
    expected = begin.encode() + header.encode() + file_content
    assert add_mime_file(file_path, "randomParamName", begin) == expected


def test_add_mime_file_missing_file_raises(tmp_path):
    _, begin, _ = make_boundary(99999)
    with pytest.raises(FileNotFoundError):
        add_mime_file(tmp_path / "missing.png", "image", begin)