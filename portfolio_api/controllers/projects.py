# controllers/projects.py
"""Project endpoints: public listing plus admin-key protected writes."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response

from ..auth import require_admin_key
from ..config import Settings, get_settings
from ..dependencies import get_project_service
from ..exceptions import PortfolioError, ProjectsUnavailable
from ..services.projects import ProjectService
from ..validation import sanitize_input

logger = logging.getLogger(__name__)

router = APIRouter()


def _unavailable(message: str, exc: Exception, settings: Settings) -> ProjectsUnavailable:
    logger.error(f"{message}: {exc}", exc_info=True)
    return ProjectsUnavailable(message, details=str(exc) if settings.development else None)


@router.get("/projects", summary="List published projects")
def get_projects(
    response: Response,
    category: Optional[str] = Query(None),
    status: str = Query("published"),
    service: ProjectService = Depends(get_project_service),
    settings: Settings = Depends(get_settings),
):
    """Projects in display order, optionally filtered by category."""
    sanitized_category = sanitize_input(category) if category else None
    sanitized_status = sanitize_input(status) or "published"

    try:
        projects = service.list_projects(sanitized_status, sanitized_category)
    except Exception as exc:
        raise _unavailable("Failed to fetch projects", exc, settings)

    response.headers["Cache-Control"] = f"public, max-age={settings.projects_cache_seconds}"
    return {
        "success": True,
        "count": len(projects),
        "category": sanitized_category or "all",
        "projects": projects,
    }


@router.post("/projects", status_code=201, dependencies=[Depends(require_admin_key)], summary="Create a project")
def create_project(
    project: Dict[str, Any] = Body(...),
    service: ProjectService = Depends(get_project_service),
    settings: Settings = Depends(get_settings),
):
    try:
        item = service.create_project(project)
    except PortfolioError:
        raise
    except Exception as exc:
        raise _unavailable("Failed to create project", exc, settings)
    return {"success": True, "project": item}


@router.post("/projects/batch", status_code=201, dependencies=[Depends(require_admin_key)], summary="Create several projects")
def create_projects(
    projects: List[Dict[str, Any]] = Body(...),
    service: ProjectService = Depends(get_project_service),
    settings: Settings = Depends(get_settings),
):
    """All-or-nothing: one invalid project rejects the whole batch."""
    try:
        items = service.create_projects(projects)
    except PortfolioError:
        raise
    except Exception as exc:
        raise _unavailable("Failed to create projects", exc, settings)
    return {"success": True, "count": len(items), "projects": items}


@router.put("/projects/{project_id}", dependencies=[Depends(require_admin_key)], summary="Update a project")
def update_project(
    project_id: str,
    changes: Dict[str, Any] = Body(...),
    service: ProjectService = Depends(get_project_service),
    settings: Settings = Depends(get_settings),
):
    try:
        item = service.update_project(project_id, changes)
    except PortfolioError:
        raise
    except Exception as exc:
        raise _unavailable("Failed to update project", exc, settings)
    return {"success": True, "project": item}


@router.delete("/projects/{project_id}", dependencies=[Depends(require_admin_key)], summary="Delete a project")
def delete_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
    settings: Settings = Depends(get_settings),
):
    try:
        service.delete_project(project_id)
    except PortfolioError:
        raise
    except Exception as exc:
        raise _unavailable("Failed to delete project", exc, settings)
    return {"success": True, "message": "Project deleted"}
