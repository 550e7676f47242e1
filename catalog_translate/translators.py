"""
translators.py

Translation providers used by the catalog pipeline.

Every provider exposes translate(text, from_language, to_language). The
pipeline hands it whole markup documents through translate_markup(), which
escapes placeholders, calls translate() once, unescapes and decodes the result.
DebugTranslator skips all of that and maps a plain function over the leaves,
which keeps development runs offline and deterministic.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

import requests

from . import escaping, markup
from .errors import TranslationError

DEFAULT_TIMEOUT = 30  # seconds per request
GOOGLE_API_URL = "https://translation.googleapis.com/language/translate/v2"


class Translator:
    """Base class: subclasses implement translate()."""

    name = "translator"

    def translate(self, text: str, from_language: str, to_language: str) -> str:
        raise NotImplementedError

    def translate_markup(self, document: str, from_language: str, to_language: str) -> dict:
        """Translate an encoded catalog document and decode it back to a mapping."""
        translated = self.translate(escaping.escape(document), from_language, to_language)
        return markup.decode(escaping.unescape(translated))


# ── Offline translator ─────────────────────────────────────────────────────────

class DebugTranslator(Translator):
    """
    Applies `func` to every leaf of the decoded document, empty ones included,
    instead of calling out to a translation service.
    """

    name = "debug"

    def __init__(self, func: Callable[[str], str]) -> None:
        self.func = func

    def translate(self, text: str, from_language: str, to_language: str) -> str:
        return self.func(text)

    def translate_markup(self, document: str, from_language: str, to_language: str) -> dict:
        return self.translate_leaves(markup.decode(document))

    def translate_leaves(self, mapping: dict) -> dict:
        result: dict = {}
        for key, value in mapping.items():
            if isinstance(value, dict):
                result[key] = self.translate_leaves(value)
            elif value is not None:
                result[key] = self.func(value)
            else:
                result[key] = value
        return result


# ── HTTP providers ─────────────────────────────────────────────────────────────

def _post_json(url: str, provider: str, timeout: float, **kwargs: Any) -> Any:
    try:
        resp = requests.post(url, timeout=timeout, **kwargs)
        resp.raise_for_status()
        return resp.json()
    except requests.exceptions.RequestException as exc:
        raise TranslationError(f"{provider} request failed: {exc}") from exc
    except ValueError as exc:
        raise TranslationError(f"{provider} returned invalid JSON: {exc}") from exc


class LibreTranslateTranslator(Translator):
    """LibreTranslate REST API (POST /translate, format=html)."""

    name = "libretranslate"

    def __init__(
        self,
        url: str = "http://localhost:5000",
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.url = url.rstrip("/")
        if not self.url.endswith("/translate"):
            self.url += "/translate"
        self.api_key = api_key
        self.timeout = timeout

    def translate(self, text: str, from_language: str, to_language: str) -> str:
        payload = {
            "q": text,
            "source": from_language,
            "target": to_language,
            "format": "html",
        }
        if self.api_key:
            payload["api_key"] = self.api_key

        data = _post_json(self.url, "LibreTranslate", self.timeout, json=payload)
        translated = data.get("translatedText") if isinstance(data, dict) else None
        if not isinstance(translated, str):
            raise TranslationError(f"LibreTranslate response has no translatedText: {data!r}"[:200])
        return translated


class GoogleTranslator(Translator):
    """Google Cloud Translation v2 (Basic) REST API with an API key."""

    name = "google"

    def __init__(
        self,
        api_key: str,
        url: str = GOOGLE_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if not api_key:
            raise TranslationError("Google Translate needs an API key.")
        self.api_key = api_key
        self.url = url
        self.timeout = timeout

    def translate(self, text: str, from_language: str, to_language: str) -> str:
        data = _post_json(
            self.url,
            "Google Translate",
            self.timeout,
            params={"key": self.api_key},
            data={
                "q": text,
                "source": from_language,
                "target": to_language,
                "format": "html",
            },
        )
        try:
            return data["data"]["translations"][0]["translatedText"]
        except (KeyError, IndexError, TypeError) as exc:
            raise TranslationError(
                f"Google Translate response has no translation: {data!r}"[:200]
            ) from exc
