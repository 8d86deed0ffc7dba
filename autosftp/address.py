"""
Parser for the ``[user@]host[:port][:remote-directory]`` argument
"""
from dataclasses import dataclass
from typing import Optional

from .config import parse_port
from .errors import ConfigurationError, InvalidAddressError


@dataclass(frozen=True)
class SshAddress:
    host: str
    username: Optional[str] = None
    port: Optional[int] = None
    default_directory: Optional[str] = None


def parse_address(text: str) -> SshAddress:
    """
    >>> parse_address("bob@host:/inbox")
    SshAddress(host='host', username='bob', port=None, default_directory='/inbox')

    A run of digits right after the host is a port; whatever follows is the
    directory.  ``host:`` (empty directory) means the login directory.
    IPv6 hosts go in brackets: ``[::1]:2222:/srv``.
    """
    if not text or not text.strip():
        raise InvalidAddressError("empty remote address")
    text = text.strip()

    username = None
    if "@" in text:
        username, text = text.split("@", 1)
        if not username:
            raise InvalidAddressError("empty user name before '@'")

    if text.startswith("["):
        end = text.find("]")
        if end == -1:
            raise InvalidAddressError(f"unterminated '[' in {text!r}")
        host, rest = text[1:end], text[end + 1:]
        if rest and not rest.startswith(":"):
            raise InvalidAddressError(f"unexpected {rest!r} after ']'")
        rest = rest[1:]
        has_rest = bool(text[end + 1:])
    else:
        host, sep, rest = text.partition(":")
        has_rest = bool(sep)

    if not host:
        raise InvalidAddressError("missing host name")
    if any(c.isspace() for c in host) or "/" in host:
        raise InvalidAddressError(f"invalid host name {host!r}")

    port = None
    directory = None
    if has_rest:
        head, sep, tail = rest.partition(":")
        if head.isdigit():
            try:
                port = parse_port(head, "address port")
            except ConfigurationError as exc:
                raise InvalidAddressError(str(exc)) from None
            directory = tail if sep else None
        else:
            directory = rest
    return SshAddress(host=host, username=username, port=port,
                      default_directory=directory or None)
