from attestkit.response import HeaderItem, Response


def _sample() -> Response:
    return Response(
        version_major=1,
        version_minor=1,
        headers=[HeaderItem("X-A", "1")],
        content=bytearray(b"body"),
        status_code=200,
        status="OK",
    )


def test_content_string_returns_body_text():
    response = Response(content=bytearray(b"hello world"))
    assert response.content_string() == "hello world"


def test_content_string_empty_body():
    assert Response().content_string() == ""


def test_headers_as_string_collects_all_matches_case_insensitively():
    response = Response(
        headers=[
            HeaderItem("X-Sig", "first"),
            HeaderItem("Other", "skip"),
            HeaderItem("x-sig", "second"),
        ]
    )
    result = response.headers_as_string("X-SIG")
    assert result.splitlines() == ["first", "second"]
    assert result.endswith("\n")


def test_headers_as_string_missing_header_is_empty():
    response = Response(headers=[HeaderItem("Content-Type", "text/plain")])
    assert response.headers_as_string("X-Missing") == ""


def test_inspect_renders_status_headers_and_body():
    assert _sample().inspect() == "HTTP/1.1 200 OK\nX-A: 1\n\nbody\n"


def test_inspect_lists_headers_in_order():
    response = _sample()
    response.headers.append(HeaderItem("X-B", "2"))
    lines = response.inspect().split("\n")
    assert lines[1] == "X-A: 1"
    assert lines[2] == "X-B: 2"
    assert lines[3] == ""
    assert lines[4] == "body"


def test_default_responses_are_independent():
    first = Response()
    second = Response()
    first.headers.append(HeaderItem("A", "b"))
    first.content.extend(b"xyz")
    assert second.headers == []
    assert second.content == bytearray()
    assert first.keep_alive is False