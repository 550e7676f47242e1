"""
cli.py

Translate a locale catalog into one or more languages.

Usage:
    catalog-translate config/locales/en.yml fr de        # keep existing translations
    catalog-translate config/locales/en.yml fr --overwrite
    catalog-translate config/locales/en.yml fr --provider google --api-key KEY
    catalog-translate config/locales/en.yml fr --dry-run # offline, writes nothing

Output files are named after the source file with its language code replaced,
e.g. en.yml -> fr.yml. See config.py for the environment variables.
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

import yaml

from .catalog import CatalogPipeline
from .config import PROVIDERS, Settings, build_translator
from .errors import CatalogTranslateError
from .translators import DebugTranslator, Translator


def dry_run_translator() -> Translator:
    return DebugTranslator(lambda text: f"[TR]{text}")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="catalog-translate",
        description="Translate a locale catalog (YAML) into other languages.",
    )
    parser.add_argument("catalog", help="Path to the source catalog, e.g. config/locales/en.yml.")
    parser.add_argument("languages", nargs="+", metavar="LANG", help="Target language code(s).")
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Replace existing translations in the target files instead of keeping them.",
    )
    parser.add_argument(
        "--provider",
        choices=PROVIDERS,
        help="Translation provider (default: $CATALOG_TRANSLATE_PROVIDER or libretranslate).",
    )
    parser.add_argument("--api-url", metavar="URL", help="Provider endpoint override.")
    parser.add_argument("--api-key", metavar="KEY", help="Provider API key.")
    parser.add_argument("--timeout", type=float, metavar="SECONDS", help="Request timeout.")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Mark strings with [TR] instead of calling the API and do not write files.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    try:
        if args.dry_run:
            translator = dry_run_translator()
        else:
            settings = Settings.from_env().override(
                provider=args.provider,
                api_url=args.api_url,
                api_key=args.api_key,
                timeout=args.timeout,
            )
            translator = build_translator(settings)
        pipeline = CatalogPipeline(translator, overwrite=args.overwrite, write=not args.dry_run)
        from_language, document = pipeline.prepare(args.catalog)
    except (OSError, ValueError, yaml.YAMLError, CatalogTranslateError) as exc:
        print(f"[ERROR] {args.catalog}: {exc}", file=sys.stderr)
        return 1

    done = 0
    errors = 0
    total_strings = 0
    for to_language in args.languages:
        try:
            result = pipeline.translate_language(args.catalog, document, from_language, to_language)
        except (OSError, CatalogTranslateError) as exc:
            print(f"  [ERROR] {to_language}: {exc}", file=sys.stderr)
            errors += 1
            continue
        if args.dry_run:
            print(f"  [dry-run] {result.leaves} string(s) would go to {result.path}", flush=True)
        done += 1
        total_strings += result.leaves

    print(
        f"\nDone. {done} language(s) translated, "
        f"{total_strings} string(s) written, "
        f"{errors} error(s)."
    )
    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(main())
