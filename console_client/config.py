import os
from dataclasses import dataclass

from core.base.text import normalize_locale


@dataclass(frozen=True)
class ClientConfig:
    """
    Connection settings for ConsoleClient.

    base_url may carry a path prefix (e.g. 'https://console.example.com/api');
    the prefix is stripped before gate rules are matched.
    """
    base_url: str = 'http://127.0.0.1:8000'
    timeout: float = 30.0
    locale: str = 'en'

    @classmethod
    def from_env(cls, environ=None) -> 'ClientConfig':
        """Read CONSOLE_API_URL, CONSOLE_API_TIMEOUT and CONSOLE_LOCALE."""
        environ = os.environ if environ is None else environ
        raw_timeout = environ.get('CONSOLE_API_TIMEOUT')
        try:
            timeout = float(raw_timeout) if raw_timeout else cls.timeout
        except ValueError:
            raise ValueError(f"CONSOLE_API_TIMEOUT must be a number, got {raw_timeout!r}")
        return cls(
            base_url=environ.get('CONSOLE_API_URL', cls.base_url).rstrip('/'),
            timeout=timeout,
            locale=normalize_locale(environ.get('CONSOLE_LOCALE', cls.locale)),
        )
