import pytest

from courier.networking.headers import STATUS_LINE, HeaderMap, parse_headers


def test_repeated_names_become_sequences():
    headers = parse_headers("Set-Cookie: a=1\nSet-Cookie: b=2\n")

    assert headers.get_all("Set-Cookie") == ["a=1", "b=2"]
    assert headers.to_dict() == {"Set-Cookie": ["a=1", "b=2"]}


def test_continuation_line_folds_into_previous_value():
    headers = parse_headers("X-Long: part1\n\tpart2\n")

    assert headers.to_dict() == {"X-Long": "part1\r\n\tpart2"}


def test_continuation_folds_into_latest_repeated_value():
    headers = parse_headers("X-Multi: one\nX-Multi: two\n\tmore\n")

    assert headers.get_all("X-Multi") == ["one", "two\r\n\tmore"]


def test_status_line_is_captured_under_sentinel_key():
    raw = (
        b"HTTP/1.1 200 OK\r\n"
        b"Content-Type: text/html\r\n"
        b"Content-Length: 12\r\n"
        b"\r\n"
    )

    headers = parse_headers(raw)

    assert headers.status_line == "HTTP/1.1 200 OK"
    assert headers[STATUS_LINE] == ["HTTP/1.1 200 OK"]
    assert headers.get("Content-Type") == "text/html"
    assert headers.get("Content-Length") == "12"
    assert list(headers) == [STATUS_LINE, "Content-Type", "Content-Length"]


def test_values_are_trimmed_but_split_on_first_colon_only():
    headers = parse_headers("Location:   http://example.com:8080/x  \r\n")

    assert headers.get("Location") == "http://example.com:8080/x"


def test_redirect_chain_keeps_first_status_line_and_merges_headers():
    raw = (
        "HTTP/1.1 301 Moved Permanently\r\n"
        "Location: https://example.com/\r\n"
        "Server: edge\r\n"
        "\r\n"
        "HTTP/1.1 200 OK\r\n"
        "Server: origin\r\n"
        "\r\n"
    )

    headers = parse_headers(raw)

    assert headers.status_line == "HTTP/1.1 301 Moved Permanently"
    assert headers.get_all("Server") == ["edge", "origin"]
    assert headers.get("Location") == "https://example.com/"


def test_tab_line_before_any_header_goes_to_sentinel():
    headers = parse_headers("\tstray\n")

    assert headers.status_line == "stray"


def test_preamble_keeps_last_line_seen_before_headers():
    headers = parse_headers("HTTP/1.1 100 Continue\r\n\r\nHTTP/1.1 200 OK\r\nA: b\r\n")

    assert headers.status_line == "HTTP/1.1 200 OK"
    assert headers.get("A") == "b"


def test_names_are_case_sensitive():
    headers = parse_headers("ETag: x\netag: y\n")

    assert headers.get("ETag") == "x"
    assert headers.get("etag") == "y"
    assert "ETAG" not in headers


def test_empty_block_yields_empty_map():
    assert len(parse_headers(b"")) == 0
    assert parse_headers("") == HeaderMap()


def test_bytes_are_decoded_as_latin1():
    headers = parse_headers("X-Name: caf\xe9\n".encode("iso-8859-1"))

    assert headers.get("X-Name") == "caf\xe9"


def test_get_returns_default_for_missing_name():
    headers = parse_headers("A: 1\n")

    assert headers.get("B") is None
    assert headers.get("B", "fallback") == "fallback"
    assert headers.get_all("B") == []
    with pytest.raises(KeyError):
        headers["B"]


def test_returned_lists_are_copies():
    headers = parse_headers("A: 1\n")

    headers.get_all("A").append("2")
    headers["A"].append("3")

    assert headers.get_all("A") == ["1"]
