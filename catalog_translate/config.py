"""
config.py

Provider settings. Defaults live in the constants below; environment variables
override them and command-line flags override the environment.

    CATALOG_TRANSLATE_PROVIDER   libretranslate | google
    LIBRETRANSLATE_URL           base URL of a LibreTranslate server
    LIBRETRANSLATE_API_KEY       optional LibreTranslate key
    GOOGLE_TRANSLATE_API_KEY     Google Cloud Translation API key
    CATALOG_TRANSLATE_TIMEOUT    request timeout in seconds
"""

from __future__ import annotations

import os
from typing import Mapping, Optional

from .errors import TranslationError
from .translators import (
    DEFAULT_TIMEOUT,
    GoogleTranslator,
    LibreTranslateTranslator,
    Translator,
)

PROVIDERS = ("libretranslate", "google")
DEFAULT_PROVIDER = "libretranslate"
DEFAULT_LIBRETRANSLATE_URL = "http://localhost:5000"


class Settings:
    """
    api_url / api_key are explicit overrides (command line). When unset, the
    values the environment gave for the selected provider are used, so
    switching provider later never carries another provider's credentials.
    """

    def __init__(
        self,
        provider: str = DEFAULT_PROVIDER,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        provider_env: Optional[dict[str, dict[str, Optional[str]]]] = None,
    ) -> None:
        self.provider = provider
        self.api_url = api_url
        self.api_key = api_key
        self.timeout = timeout
        self.provider_env = provider_env or {}

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        provider = env.get("CATALOG_TRANSLATE_PROVIDER", DEFAULT_PROVIDER).strip().lower()

        provider_env = {
            "libretranslate": {
                "api_url": env.get("LIBRETRANSLATE_URL") or None,
                "api_key": env.get("LIBRETRANSLATE_API_KEY") or None,
            },
            "google": {
                "api_url": None,
                "api_key": env.get("GOOGLE_TRANSLATE_API_KEY") or None,
            },
        }

        raw_timeout = env.get("CATALOG_TRANSLATE_TIMEOUT")
        timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        if timeout <= 0:
            raise ValueError(f"CATALOG_TRANSLATE_TIMEOUT must be positive, got {raw_timeout!r}")

        return cls(provider=provider, timeout=timeout, provider_env=provider_env)

    def override(self, **values) -> "Settings":
        """Return a copy with every non-None keyword applied."""
        current = dict(vars(self))
        current.update({k: v for k, v in values.items() if v is not None})
        return Settings(**current)

    def credentials(self) -> tuple[Optional[str], Optional[str]]:
        """(url, key) for the selected provider; explicit values win over the environment."""
        defaults = self.provider_env.get(self.provider, {})
        return (
            self.api_url or defaults.get("api_url"),
            self.api_key or defaults.get("api_key"),
        )

    def __repr__(self) -> str:
        url, key = self.credentials()
        return (
            f"Settings(provider={self.provider!r}, api_url={url!r}, "
            f"api_key={'set' if key else 'unset'}, timeout={self.timeout})"
        )


def build_translator(settings: Settings) -> Translator:
    url, key = settings.credentials()
    if settings.provider == "libretranslate":
        return LibreTranslateTranslator(
            url=url or DEFAULT_LIBRETRANSLATE_URL,
            api_key=key,
            timeout=settings.timeout,
        )
    if settings.provider == "google":
        if url:
            return GoogleTranslator(key, url=url, timeout=settings.timeout)
        return GoogleTranslator(key, timeout=settings.timeout)
    raise TranslationError(
        f"Unknown translation provider {settings.provider!r} (expected one of {', '.join(PROVIDERS)})."
    )
