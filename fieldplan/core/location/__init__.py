"""
Location subsystem package.

``get_geocoder()`` returns the geocoder named by the argument or by
``settings.GEOCODER_PROVIDER``; the module is imported lazily.
"""
from __future__ import annotations

import importlib
from typing import Dict, Tuple, Type

from fieldplan.config import settings
from .base import BaseGeocoder  # noqa: F401

_GEOCODERS: Dict[str, Tuple[str, str]] = {
    "noop": (".noop", "NoOpGeocoder"),
}


def get_geocoder(name: str | None = None) -> BaseGeocoder:
    key = (name or settings.GEOCODER_PROVIDER).lower()
    try:
        module_suffix, class_name = _GEOCODERS[key]
    except KeyError as exc:
        raise ValueError(f"Unknown geocoder: {key}") from exc
    module = importlib.import_module(f"{__name__}{module_suffix}")
    return getattr(module, class_name)()


__all__: list[str] = ["BaseGeocoder", "get_geocoder"]
