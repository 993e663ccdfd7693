from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .models import DEFAULT_DELIMITER, DEFAULT_FILTER_TYPE

DEFAULT_CONFIG_PATH = Path("ec2-search.yaml")


@dataclass(slots=True, frozen=True)
class SearchDefaults:
    delimiter: str = DEFAULT_DELIMITER
    filter_type: str = DEFAULT_FILTER_TYPE
    profile: str | None = None
    region: str | None = None


DEFAULT_SEARCH_DEFAULTS = SearchDefaults()


def load_search_defaults(config_path: str | Path | None = None) -> SearchDefaults:
    path = Path(config_path).expanduser() if config_path else DEFAULT_CONFIG_PATH
    if not path.is_file():
        return DEFAULT_SEARCH_DEFAULTS

    with path.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}

    return SearchDefaults(
        # An empty delimiter is legitimate, so only non-strings fall back.
        delimiter=_coerce_str(
            _safe_mapping_get(loaded, "delimiter"),
            fallback=DEFAULT_SEARCH_DEFAULTS.delimiter,
            allow_empty=True,
        ),
        filter_type=_coerce_str(
            _safe_mapping_get(loaded, "filter_type"),
            fallback=DEFAULT_SEARCH_DEFAULTS.filter_type,
        ),
        profile=_coerce_str(_safe_mapping_get(loaded, "profile"), fallback=None),
        region=_coerce_str(_safe_mapping_get(loaded, "region"), fallback=None),
    )


def _coerce_str(value: Any, fallback: str | None, *, allow_empty: bool = False) -> str | None:
    if not isinstance(value, str):
        return fallback
    if allow_empty:
        return value
    return value.strip() or fallback


def _safe_mapping_get(mapping: Any, key: str, fallback: Any = None) -> Any:
    try:
        return mapping[key]
    except (KeyError, TypeError):
        return fallback
