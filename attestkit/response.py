"""HTTP response container filled in by the response parser."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class HeaderItem:
    """A single header line: its name and its value."""

    name: str = ""
    value: str = ""


def _equal_ignore_case(a: str, b: str) -> bool:
    return a.upper() == b.upper()


@dataclass
class Response:
    """A parsed HTTP response.

    Header names, header values and the status text hold one character per
    byte received (latin-1); the body is kept as raw bytes.
    """

    version_major: int = 0
    version_minor: int = 0
    headers: list[HeaderItem] = field(default_factory=list)
    content: bytearray = field(default_factory=bytearray)
    keep_alive: bool = False
    status_code: int = 0
    status: str = ""

    def inspect(self) -> str:
        """Render the response roughly as it looked on the wire."""
        lines = [
            f"HTTP/{self.version_major}.{self.version_minor} "
            f"{self.status_code} {self.status}\n"
        ]
        lines.extend(f"{header.name}: {header.value}\n" for header in self.headers)
        lines.append("\n")
        lines.append(self.content_string())
        lines.append("\n")
        return "".join(lines)

    def content_string(self) -> str:
        """Return the body as text (UTF-8, undecodable bytes kept as escapes)."""
        return bytes(self.content).decode("utf-8", errors="surrogateescape")

    def headers_as_string(self, name: str) -> str:
        """Return every value of the named header, each followed by a newline.

        Names compare case-insensitively; an absent header gives "".
        """
        return "".join(
            f"{header.value}\n"
            for header in self.headers
            if _equal_ignore_case(header.name, name)
        )