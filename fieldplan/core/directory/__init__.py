"""
Directory subsystem package (resources and projects).

* ``BaseDirectoryProvider`` - abstract read-only provider interface.
* ``get_directory_provider()`` - factory returning the provider named by
  the argument or by ``settings.DIRECTORY_PROVIDER``.

Provider modules are imported only when requested.
"""
from __future__ import annotations

import importlib
from typing import Dict, Tuple, Type

from fieldplan.config import settings
from .base import BaseDirectoryProvider, Project, Resource, project_label  # noqa: F401

# --------------------------------------------------------------------------- #
#                       registry: name -> (module, class)                     #
# --------------------------------------------------------------------------- #
_PROVIDERS: Dict[str, Tuple[str, str]] = {
    "static": (".static", "StaticDirectoryProvider"),
}


def _lazy_import(module_suffix: str, class_name: str) -> Type[BaseDirectoryProvider]:
    module = importlib.import_module(f"{__name__}{module_suffix}")
    return getattr(module, class_name)


# --------------------------------------------------------------------------- #
#                                 public API                                  #
# --------------------------------------------------------------------------- #
def get_directory_provider(name: str | None = None) -> BaseDirectoryProvider:
    provider_key = (name or settings.DIRECTORY_PROVIDER).lower()
    try:
        module_suffix, class_name = _PROVIDERS[provider_key]
    except KeyError as exc:
        raise ValueError(f"Unknown directory provider: {provider_key}") from exc
    return _lazy_import(module_suffix, class_name)()


__all__: list[str] = [
    "Resource",
    "Project",
    "BaseDirectoryProvider",
    "project_label",
    "get_directory_provider",
]
