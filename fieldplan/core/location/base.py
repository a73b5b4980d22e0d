# fieldplan/core/location/base.py
"""Abstract geocoder. Suggestions are advisory; raw text is always accepted."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List


class BaseGeocoder(ABC):

    name: str

    @abstractmethod
    async def suggest(self, query: str, limit: int = 5) -> List[str]:
        """
        Address suggestions for free-text ``query``.

        Returns:
            List[str]: formatted addresses, possibly empty.
        """
        ...


__all__ = ["BaseGeocoder"]
