# fieldplan/core/directory/static.py

from __future__ import annotations

import logging
from typing import List, Sequence

from fieldplan.config import settings

from .base import BaseDirectoryProvider, Project, Resource

log = logging.getLogger(__name__)


class StaticDirectoryProvider(BaseDirectoryProvider):
    """
    In-memory directory. Seeded from ``DIRECTORY_RESOURCES`` /
    ``DIRECTORY_PROJECTS`` unless explicit lists are passed.
    """

    name: str = "static"

    def __init__(
        self,
        resources: Sequence[Resource] | None = None,
        projects: Sequence[Project] | None = None,
    ) -> None:
        if resources is None:
            resources = [
                Resource(id=r["id"], display_name=r.get("display_name") or r["id"])
                for r in settings.DIRECTORY_RESOURCES
            ]
        if projects is None:
            projects = [
                Project(id=p["id"], title=p.get("title") or p["id"], customer_label=p.get("customer_label"))
                for p in settings.DIRECTORY_PROJECTS
            ]
        self._resources: list[Resource] = list(resources)
        self._projects: list[Project] = list(projects)
        log.info(
            "Initialized StaticDirectoryProvider (%d resources, %d projects)",
            len(self._resources), len(self._projects),
        )

    async def list_resources(self) -> List[Resource]:
        return sorted(self._resources, key=lambda r: r["display_name"].lower())

    async def list_projects(self) -> List[Project]:
        return sorted(self._projects, key=lambda p: p["title"].lower())


__all__ = ["StaticDirectoryProvider"]
