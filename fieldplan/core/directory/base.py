# fieldplan/core/directory/base.py
"""
Abstract base and common types for resource / project providers.

Providers are read-only: the planning dialogs only use them to populate
pickers and to check that a submitted id exists.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, TypedDict


class Resource(TypedDict):
    """An assignable person (field technician)."""
    id: str
    display_name: str


class Project(TypedDict):
    id: str
    title: str
    customer_label: Optional[str]


class BaseDirectoryProvider(ABC):
    """Asynchronous read-only source of resources and projects."""

    name: str

    @abstractmethod
    async def list_resources(self) -> List[Resource]:
        ...

    @abstractmethod
    async def list_projects(self) -> List[Project]:
        ...

    async def get_resource(self, resource_id: str) -> Resource | None:
        for resource in await self.list_resources():
            if resource["id"] == resource_id:
                return resource
        return None

    async def get_project(self, project_id: str) -> Project | None:
        for project in await self.list_projects():
            if project["id"] == project_id:
                return project
        return None


def project_label(project: Project) -> str:
    """``"title - customer"``, or just the title when no customer is known."""
    customer = project.get("customer_label")
    return f"{project['title']} - {customer}" if customer else project["title"]


__all__ = ["Resource", "Project", "BaseDirectoryProvider", "project_label"]
