import pytest

from client.utils.format import format_file_size
from client.utils.share_link import build_share_url, parse_share_token


def test_build_share_url():
    assert build_share_url("https://shroomuploads.online/", "abc") == "https://shroomuploads.online/?share=abc"


@pytest.mark.parametrize("value, token", [
    ("https://shroomuploads.online/?share=abc123", "abc123"),
    ("https://shroomuploads.online?share=abc123&x=1", "abc123"),
    ("/?share=abc123", "abc123"),
    ("?share=abc123", "abc123"),
    ("abc123", "abc123"),
    ("https://shroomuploads.online/", None),
    ("", None),
])
def test_parse_share_token(value, token):
    assert parse_share_token(value) == token


@pytest.mark.parametrize("size, text", [
    (0, "0 Bytes"),
    (10, "10 Bytes"),
    (1024, "1 KB"),
    (1536, "1.5 KB"),
    (100 * 1024 * 1024, "100 MB"),
])
def test_format_file_size(size, text):
    assert format_file_size(size) == text
