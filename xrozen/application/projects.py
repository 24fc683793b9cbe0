"""
Projects screen: owned + shared projects, search, sort, subproject tree.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from xrozen.application.filter_sort import filter_records, sort_records, SORT_ASC
from xrozen.application.reconciler import main_projects, reconcile_projects, subprojects_of
from xrozen.application.snapshot import Snapshot
from xrozen.domain.project import Project

SEARCH_FIELDS = ("name", "project_type", "status", "description")


@dataclass(frozen=True)
class ProjectRow:
    project: Project
    subprojects: list[Project] = field(default_factory=list)


class ProjectsService:
    def __init__(self, snapshot: Snapshot):
        self.snapshot = snapshot

    def all_projects(self) -> list[Project]:
        return reconcile_projects(self.snapshot.projects, self.snapshot.shared_projects)

    def rows(
        self,
        search: Optional[str] = None,
        sort_key: Optional[str] = None,
        direction: str = SORT_ASC,
        status: Optional[str] = None,
    ) -> list[ProjectRow]:
        """
        Top-level project rows with their subprojects

        Search/status/sort apply to the top-level rows; subprojects are
        listed under their parent in reconciled order.
        """
        projects = self.all_projects()
        rows = filter_records(main_projects(projects), search, SEARCH_FIELDS, status=status)
        if sort_key:
            rows = sort_records(rows, sort_key, direction)
        return [ProjectRow(project=p, subprojects=subprojects_of(projects, p.id)) for p in rows]
