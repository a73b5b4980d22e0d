# fieldplan/core/location/noop.py

from __future__ import annotations

import logging
from typing import List

from .base import BaseGeocoder

log = logging.getLogger(__name__)


class NoOpGeocoder(BaseGeocoder):
    """Geocoder stand-in for dev/CI: never suggests anything."""

    name: str = "noop"

    async def suggest(self, query: str, limit: int = 5) -> List[str]:
        log.debug("NoOp: no suggestions for %r", query)
        return []


__all__ = ["NoOpGeocoder"]
