# attestkit

attestkit checks signed attestation reports. A report arrives as an HTTP
response. Its body is a JSON document. Its headers carry a URL-encoded chain
of PEM certificates and a base64 signature of the body. attestkit parses such
a response and reads the JSON. It checks that the certificate chain leads to
the attestation root CA and that the first certificate's key signed the body.
It also provides the small I/O and socket helpers needed to fetch such
responses.

## Installation

```
pip install attestkit
```

To run the test suite:

```
pip install "attestkit[test]"
pytest
```

## What is inside

- `attestkit.httpparser.HttpResponseParser` is an incremental HTTP response
  parser. It fills an `attestkit.response.Response` and returns a
  `ParseResult`: `COMPLETED`, `INCOMPLETE` or `ERROR`. It handles
  `Content-Length` bodies and chunked transfer encoding. State is kept between
  calls, so a message can be fed in pieces.
- `attestkit.response.Response` holds the version, status, headers
  (`HeaderItem`), body bytes and keep-alive flag. `headers_as_string(name)`
  gathers every value of a header, compared case-insensitively.
  `content_string()` returns the body as text. `inspect()` renders the whole
  response.
- `attestkit.jsonparse.load` is a lenient JSON reader. It never rejects a
  document outright; malformed parts become null values, empty arrays or
  empty strings. It returns `attestkit.jsonvalue.JSON` values. Read them with
  `get`, `to_string`, `to_int`, `to_float`, `to_bool`, `is_null`, `has_key`,
  `size` and `length`.
- `attestkit.certs` provides the following:
  - `load_certificate` and `load_root_ca` load certificates.
  - `split_certificate_chain` splits concatenated PEM text.
  - `verify_chain` checks a chain against a root CA.
  - `sha256_verify` checks an RSA or EC SHA-256 signature.
  - `verify_certificate` runs the whole check on a `Response`.

  `verify_certificate` returns `AttestationCode.NO_ERROR` when the signature
  matches the body. It returns `AttestationCode.ATTR_SIGNATURE_VERIFY_FAILED`
  when a well-formed signature does not match. A missing or unusable
  certificate header, an untrusted chain, or a missing or undecodable
  signature raises `AttestationFailure`, whose `code` says which check failed.
- `attestkit.urldecode.url_decode` turns `+` into a space and `%hh` into the
  byte it encodes. It raises `ValueError` on bad escapes.
- `attestkit.base64util.base64_decode` decodes single-line base64. Missing
  padding is tolerated and other bad input raises `ValueError`.
- `attestkit.rio.RobustIO` reads and writes whole amounts on file
  descriptors. Its unbuffered methods are `write_n`, `writeline` and
  `read_n`. Its buffered methods are `read_nb`, `readline_b`, `readline` and
  `read_to_eof`.
- `attestkit.netsocket.Socket` opens a listening (`Role.SERVER`) or
  connecting (`Role.CLIENT`) TCP socket and can be used as a context manager.
  `serve()` accepts a connection. The module function `disconnect` shuts a
  connection down and closes it. Failed name lookups raise
  `GetAddrInfoError`.

## Examples

Parsing an HTTP response:

```python
from attestkit.httpparser import HttpResponseParser, ParseResult
from attestkit.response import Response

raw = (
    b"HTTP/1.1 200 OK\r\n"
    b"Content-Length: 5\r\n"
    b"\r\n"
    b"hello"
)
response = Response()
result = HttpResponseParser().parse(response, raw)
assert result is ParseResult.COMPLETED
print(response.status_code, response.content_string())
```

Reading a report body:

```python
from attestkit.jsonparse import load

report = load('{"version": 4, "isvEnclaveQuoteStatus": "OK"}')
print(report.get("version").to_int(), report.get("isvEnclaveQuoteStatus").to_string())
```

Checking a signed report:

```python
from attestkit.certs import AttestationCode, AttestationFailure, verify_certificate

try:
    code = verify_certificate(response)
except AttestationFailure as failure:
    print("rejected:", failure.code.name)
else:
    print("signature matches" if code is AttestationCode.NO_ERROR else "signature mismatch")
```

Line I/O over a pipe:

```python
import os
from attestkit.rio import RobustIO

read_fd, write_fd = os.pipe()
io = RobustIO(read_fd, write_fd)
io.writeline("hello")
print(io.readline())  # b"hello\n"
```

## What it does not do

attestkit verifies reports; it does not run the key exchange itself. It has
no elliptic-curve session keys and no key derivation. It does not process or
build protocol messages, and it does not decide a trust verdict from a
report's contents or encrypt a payload for the client. It offers no command
and no server program. The socket and I/O helpers are building blocks only.