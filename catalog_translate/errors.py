class CatalogTranslateError(Exception):
    """Base class for errors raised by catalog_translate."""


class CatalogError(CatalogTranslateError):
    """A catalog file or a translated catalog has an unusable shape."""


class MarkupError(CatalogTranslateError):
    """Block markup could not be parsed back into a mapping."""


class TranslationError(CatalogTranslateError):
    """The translation provider failed or returned something unusable."""
