"""
Credential sources for RemoteSession.

A source hands out at most one secret up front (``initial``) and, after a
rejected attempt, may be asked for another (``next_secret``).  ``None`` means
it has nothing (more) to offer.
"""
import getpass
import sys
from typing import Optional


class CredentialSource:
    interactive = False

    def initial(self) -> Optional[str]:
        return None

    def next_secret(self, prompt: str) -> Optional[str]:
        return None


class NoCredentials(CredentialSource):
    """Headless run without a secret: rely on agent / default keys only."""


class StaticCredentials(CredentialSource):
    """A pre-supplied secret, tried once."""

    def __init__(self, secret: str):
        self._secret = secret

    def initial(self) -> Optional[str]:
        return self._secret


class PromptCredentials(CredentialSource):
    """Ask on the terminal, like ssh does."""
    interactive = True

    def __init__(self, reader=getpass.getpass):
        self._reader = reader

    def next_secret(self, prompt: str) -> Optional[str]:
        try:
            return self._reader(prompt)
        except EOFError:
            return None


def default_credentials(password: Optional[str] = None) -> CredentialSource:
    if password:
        return StaticCredentials(password)
    if sys.stdin is not None and sys.stdin.isatty():
        return PromptCredentials()
    return NoCredentials()
