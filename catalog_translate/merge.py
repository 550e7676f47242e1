"""
merge.py

Non-destructive merge of a fresh translation into the one already on disk.
Existing leaves always win; the shape of the result follows the new catalog.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Union

import yaml

from .errors import CatalogError


def recursive_merge(new: dict, old: Any) -> dict:
    """
    Return a copy of `new` where every key that also exists in `old` takes the
    old value. Nested mappings are merged key by key. When `old` is not a
    mapping (missing or empty hierarchy, a plain string) there is nothing to
    keep at this level and `new` is returned unchanged.
    Keys only present in `old` are dropped.
    """
    merged = copy.deepcopy(new)
    if not isinstance(old, dict):
        return merged

    for key, value in new.items():
        if key not in old:
            continue
        if isinstance(value, dict):
            merged[key] = recursive_merge(value, old[key])
        else:
            merged[key] = copy.deepcopy(old[key])
    return merged


def merge_translation(filename: Union[str, Path], translated: dict) -> dict:
    """Merge `translated` into the catalog stored at `filename`, if there is one."""
    path = Path(filename)
    if not path.exists():
        return translated

    try:
        with open(path, encoding="utf-8") as f:
            previous = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise CatalogError(f"{path}: cannot read existing translations: {exc}") from exc
    if previous is None:
        return translated
    return recursive_merge(translated, previous)
