"""Translate nested locale catalogs while keeping keys, placeholders and existing translations."""

from .catalog import (
    CatalogPipeline,
    TranslationResult,
    load_catalog,
    target_filename,
    translate_catalog,
    translate_catalog_overwrite,
    write_catalog,
)
from .config import Settings, build_translator
from .errors import CatalogError, CatalogTranslateError, MarkupError, TranslationError
from .translators import DebugTranslator, GoogleTranslator, LibreTranslateTranslator, Translator

__version__ = "0.1.0"
