"""
Project reconciliation: owned + shared collections -> one list, one entry per id.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from xrozen.domain.project import Project


def reconcile_projects(owned: Iterable[Project], shared: Iterable[Project]) -> list[Project]:
    """
    Merge owned and shared projects

    - id only in owned: kept as is
    - id in both: owned record wins, marked also_shared=True and given the
      shared copy's share_info
    - id only in shared: shared record, marked is_shared=True

    Order: owned in input order, then shared-only entries in input order.
    Inputs are not modified. Later duplicates inside one collection are
    ignored (first occurrence wins).
    """
    merged: dict[str, Project] = {}
    owned_ids: set[str] = set()

    for project in owned:
        if project.id in merged:
            continue
        merged[project.id] = project
        owned_ids.add(project.id)

    for project in shared:
        existing = merged.get(project.id)
        if existing is None:
            merged[project.id] = replace(project, is_shared=True)
        elif project.id in owned_ids and not existing.also_shared:
            merged[project.id] = replace(
                existing,
                also_shared=True,
                share_info=project.share_info or existing.share_info,
            )

    return list(merged.values())


def main_projects(projects: Iterable[Project]) -> list[Project]:
    """Top-level projects (subprojects are listed under their parent)."""
    return [p for p in projects if not p.is_subproject]


def subprojects_of(projects: Iterable[Project], parent_id: str) -> list[Project]:
    return [p for p in projects if p.parent_project_id == parent_id]
