"""
catalog.py

Creates translated copies of a Rails-style locale catalog:

    config/locales/en.yml  ->  config/locales/fr.yml, config/locales/de.yml, ...

The source catalog is encoded to block markup once. For each target language
the markup is translated, decoded, its top-level language key renamed, merged
with the existing target file (unless overwriting) and written.

translate_catalog()            keeps every translation already in the target
translate_catalog_overwrite()  replaces the target file completely
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Iterable, NamedTuple, Optional, Union

import yaml

from . import markup
from .config import Settings, build_translator
from .errors import CatalogError
from .merge import merge_translation
from .translators import Translator

PathLike = Union[str, Path]

FILE_MODE = 0o644


class TranslationResult(NamedTuple):
    language: str
    path: Path
    leaves: int
    merged: bool


# ── Catalog files ──────────────────────────────────────────────────────────────

def load_catalog(filename: PathLike) -> dict:
    """Load a catalog; it must be a mapping with exactly one language key."""
    with open(filename, encoding="utf-8") as f:
        catalog = yaml.safe_load(f)

    if not isinstance(catalog, dict) or not catalog:
        raise CatalogError(f"{filename}: expected a mapping with one language key")
    if len(catalog) != 1:
        keys = ", ".join(str(k) for k in catalog)
        raise CatalogError(f"{filename}: expected one top-level language key, found {keys}")
    return catalog


def source_language(catalog: dict) -> str:
    return str(next(iter(catalog)))


def write_catalog(filename: PathLike, catalog: dict) -> None:
    """Create or overwrite `filename`; owner rw, group/other read only."""
    fd = os.open(filename, os.O_CREAT | os.O_TRUNC | os.O_WRONLY, FILE_MODE)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        yaml.safe_dump(
            catalog,
            f,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
            explicit_start=True,
            width=1000,
        )


def target_filename(filename: PathLike, from_language: str, to_language: str) -> str:
    """
    Swap the language code in a catalog path: the first `<from>.` not preceded
    by a letter or digit becomes `<to>.`.
    """
    pattern = re.compile(r"(?<![A-Za-z0-9])" + re.escape(from_language) + r"\.")
    name = str(filename)
    result, count = pattern.subn(to_language + ".", name, count=1)
    if not count:
        raise CatalogError(
            f"{name}: cannot derive a {to_language} file name, "
            f"'{from_language}.' does not occur in the path"
        )
    return result


# ── Pipeline ───────────────────────────────────────────────────────────────────

class CatalogPipeline:
    """
    Translate one catalog into several languages with a single translator.
    With overwrite=False existing translations in the target files are kept.
    """

    def __init__(self, translator: Translator, overwrite: bool = False, write: bool = True) -> None:
        self.translator = translator
        self.overwrite = overwrite
        self.write = write

    def prepare(self, catalog_filename: PathLike) -> tuple[str, str]:
        """Load the source catalog and return (from_language, encoded document)."""
        catalog = load_catalog(catalog_filename)
        return source_language(catalog), markup.encode(catalog)

    def run(self, catalog_filename: PathLike, languages: Iterable[str]) -> list[TranslationResult]:
        from_language, document = self.prepare(catalog_filename)
        return [
            self.translate_language(catalog_filename, document, from_language, to_language)
            for to_language in languages
        ]

    def translate_language(
        self,
        catalog_filename: PathLike,
        document: str,
        from_language: str,
        to_language: str,
    ) -> TranslationResult:
        print(f"Translating: {from_language} -> {to_language}", flush=True)
        if to_language == from_language:
            raise CatalogError(f"{catalog_filename}: target language {to_language} is the source language")
        to_filename = target_filename(catalog_filename, from_language, to_language)

        translated = self.translator.translate_markup(document, from_language, to_language)
        translated = rename_language(translated, from_language, to_language)

        merged = False
        if not self.overwrite and Path(to_filename).exists():
            print(f"  [merge] keeping existing translations in {to_filename}", flush=True)
            translated = merge_translation(to_filename, translated)
            merged = True

        leaves = markup.count_leaves(translated)
        if self.write:
            write_catalog(to_filename, translated)
            print(f"  Wrote {leaves} string(s) to {to_filename}", flush=True)
        return TranslationResult(to_language, Path(to_filename), leaves, merged)


def rename_language(translated: dict, from_language: str, to_language: str) -> dict:
    """Replace the source language key of a decoded catalog with `to_language`."""
    if from_language not in translated:
        raise CatalogError(
            f"translated catalog lost its '{from_language}' key "
            f"(found {', '.join(translated) or 'nothing'})"
        )
    renamed = {k: v for k, v in translated.items() if k != from_language}
    renamed[to_language] = translated[from_language]
    return renamed


# ── Entry points ───────────────────────────────────────────────────────────────

def _pipeline(
    overwrite: bool,
    translator: Optional[Translator],
    settings: Optional[Settings],
) -> CatalogPipeline:
    if translator is None:
        translator = build_translator(settings or Settings.from_env())
    return CatalogPipeline(translator, overwrite=overwrite)


def translate_catalog(
    catalog_filename: PathLike,
    *languages: str,
    translator: Optional[Translator] = None,
    settings: Optional[Settings] = None,
) -> list[TranslationResult]:
    """
    Create or update catalogs for `languages` from `catalog_filename`.
    Translations already present in the target files are never replaced.
    """
    return _pipeline(False, translator, settings).run(catalog_filename, languages)


def translate_catalog_overwrite(
    catalog_filename: PathLike,
    *languages: str,
    translator: Optional[Translator] = None,
    settings: Optional[Settings] = None,
) -> list[TranslationResult]:
    """Create or replace catalogs for `languages` from `catalog_filename`."""
    return _pipeline(True, translator, settings).run(catalog_filename, languages)
