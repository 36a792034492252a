import os

import pytest

from attestkit.rio import RIO_BUFSIZE, RobustIO


@pytest.fixture
def pipe():
    read_fd, write_fd = os.pipe()
    yield read_fd, write_fd
    for fd in (read_fd, write_fd):
        try:
            os.close(fd)
        except OSError:
            pass


def feed(pipe, data):
    read_fd, write_fd = pipe
    os.write(write_fd, data)
    os.close(write_fd)
    return RobustIO(read_fd)


def test_write_n_writes_everything(pipe):
    read_fd, write_fd = pipe
    rio = RobustIO(read_fd, write_fd)
    assert rio.write_n(b"payload") == 7
    assert os.read(read_fd, 100) == b"payload"


def test_writeline_appends_newline(pipe):
    read_fd, write_fd = pipe
    rio = RobustIO(read_fd, write_fd)
    assert rio.writeline("abc") == 4
    assert os.read(read_fd, 100) == b"abc\n"


def test_read_n_stops_at_eof(pipe):
    rio = feed(pipe, b"abcdef")
    assert rio.read_n(4) == b"abcd"
    assert rio.read_n(10) == b"ef"
    assert rio.read_n(3) == b""


def test_read_nb_buffers_across_calls(pipe):
    rio = feed(pipe, b"0123456789")
    assert rio.read_nb(3) == b"012"
    assert rio.read_nb(3) == b"345"
    assert rio.read_nb(100) == b"6789"
    assert rio.read_nb(1) == b""


def test_read_nb_larger_than_buffer(pipe):
    data = bytes(range(256)) * 40
    assert len(data) > RIO_BUFSIZE
    rio = feed(pipe, data)
    assert rio.read_nb(len(data)) == data


def test_readline_b_respects_max_len(pipe):
    rio = feed(pipe, b"hello\nworld")
    assert rio.readline_b(100) == b"hello\n"
    assert rio.readline_b(3) == b"wo"
    assert rio.readline_b(100) == b"rld"
    assert rio.readline_b(100) == b""


def test_readline_b_tiny_limit_reads_nothing(pipe):
    rio = feed(pipe, b"xyz\n")
    assert rio.readline_b(1) == b""
    assert rio.read_to_eof() == b"xyz\n"


def test_readline_returns_lines_then_empty(pipe):
    rio = feed(pipe, b"first\nsecond\ntail")
    assert rio.readline() == b"first\n"
    assert rio.readline() == b"second\n"
    assert rio.readline() == b"tail"
    assert rio.readline() == b""


def test_read_to_eof_includes_buffered_data(pipe):
    rio = feed(pipe, b"line\nrest of data")
    assert rio.readline() == b"line\n"
    assert rio.read_to_eof() == b"rest of data"
    assert rio.read_to_eof() == b""


def test_write_roundtrip_through_readline(pipe):
    read_fd, write_fd = pipe
    writer = RobustIO(read_fd, write_fd)
    for line in ("alpha", "beta"):
        writer.writeline(line)
    os.close(write_fd)
    assert writer.readline() == b"alpha\n"
    assert writer.readline() == b"beta\n"


def test_write_to_closed_descriptor_raises(pipe):
    read_fd, write_fd = pipe
    rio = RobustIO(read_fd, write_fd)
    os.close(write_fd)
    with pytest.raises(OSError):
        rio.write_n(b"data")