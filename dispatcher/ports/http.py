"""HTTP port definitions (DTOs)."""

from dataclasses import dataclass

__all__ = ["HttpReply", "RequestConfiguration"]

DEFAULT_CHARSET = "utf-8"


@dataclass(frozen=True)
class RequestConfiguration:
    """Target of the outbound request.

    Decouples the dispatcher from the configuration source and from the
    HTTP implementation.

    Attributes:
        host: Server host name or address.
        port: Server TCP port.
        path: Request target, starting with "/".
        method: HTTP method; always POST for this client.
    """

    host: str
    port: int
    path: str
    method: str = "POST"

    @property
    def url(self) -> str:
        """Absolute URL built from host, port and path."""
        return f"http://{self.host}:{self.port}{self.path}"


@dataclass(frozen=True)
class HttpReply:
    """Fully buffered HTTP response.

    Attributes:
        status_code: HTTP status code.
        body: Concatenation of every received body chunk, in arrival order.
        charset: Charset announced by the server, if any.
    """

    status_code: int
    body: bytes
    charset: str | None = None

    @property
    def is_success(self) -> bool:
        """True for 2xx status codes."""
        return 200 <= self.status_code < 300

    def text(self) -> str:
        """Decode the body using the response charset (UTF-8 by default).

        Unknown charsets fall back to UTF-8; undecodable bytes are replaced.
        """
        try:
            return self.body.decode(self.charset or DEFAULT_CHARSET, errors="replace")
        except LookupError:
            return self.body.decode(DEFAULT_CHARSET, errors="replace")
