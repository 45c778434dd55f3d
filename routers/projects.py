# routers/projects.py

from datetime import datetime
from typing import List, Optional, Type

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from dependencies.auth import (
    get_gate,
    get_now,
    get_optional_user,
    require_admin_user,
)
from core.authz import AuthorizationGate, ensure_owner
from core.errors import NotFound, handle_supabase_error
from core.logging_config import logger
from core.roles import PROJECT_EVENT_ROLES, PROJECT_OFFER_ROLES, PROJECT_UPDATE_ROLES
from core.supabase_client import get_supabase_client
from core.supabase_helpers import fetch_one, safe_delete, safe_insert, safe_select, safe_update
from core.visibility import (
    PUBLIC_PROJECT_STATUSES,
    can_view_project,
    filter_visible,
    is_project_manager,
)
from models.enums import ProjectItemKind
from models.project import (
    ProjectCreate,
    ProjectDetail,
    ProjectEventCreate,
    ProjectEventRead,
    ProjectOfferCreate,
    ProjectOfferRead,
    ProjectRead,
    ProjectUpdate,
    ProjectUpdateCreate,
    ProjectUpdateRead,
    VisibilityReplace,
)
from models.user import Principal


router = APIRouter(
    prefix="/projects",
    tags=["Projects"],
)


# -----------------------------------------------------
# Content collections: table, label, authoring roles
# -----------------------------------------------------
class ItemCollection:
    def __init__(self, table: str, label: str, roles: frozenset,
                 read_model: Type[BaseModel], order_by: str, desc: bool):
        self.table = table
        self.label = label
        self.roles = roles
        self.read_model = read_model
        self.order_by = order_by
        self.desc = desc


ITEM_COLLECTIONS = {
    ProjectItemKind.updates: ItemCollection(
        "project_updates", "Update", PROJECT_UPDATE_ROLES,
        ProjectUpdateRead, order_by="created_at", desc=True,
    ),
    ProjectItemKind.offers: ItemCollection(
        "project_offers", "Offer", PROJECT_OFFER_ROLES,
        ProjectOfferRead, order_by="start_datetime", desc=False,
    ),
    ProjectItemKind.events: ItemCollection(
        "project_events", "Event", PROJECT_EVENT_ROLES,
        ProjectEventRead, order_by="start_datetime", desc=False,
    ),
}


def load_project_for_authoring(principal: Principal, project_id: str) -> dict:
    """Project must exist (404) and belong to the caller or an admin (403)."""
    project = fetch_one("projects", project_id, columns="id, created_by")
    return ensure_owner(principal, project, "created_by", "Project")


def load_items(kind: ProjectItemKind, project_id: str) -> list:
    collection = ITEM_COLLECTIONS[kind]
    rows = safe_select(
        collection.table,
        {"project_id": project_id},
        order_by=collection.order_by,
        desc=collection.desc,
    )
    return [collection.read_model(**row) for row in rows]


# -----------------------------------------------------
# LIST PROJECTS
# -----------------------------------------------------
@router.get("", summary="List Projects", response_model=List[ProjectRead])
def list_projects(current_user: Optional[Principal] = Depends(get_optional_user)):
    """
    - Admins: every project
    - Signed-in users: public projects + their own
    - Anonymous: public projects only
    """
    client = get_supabase_client()
    public = sorted(s.value for s in PUBLIC_PROJECT_STATUSES)

    query = client.table("projects").select("*").order("created_at", desc=True)

    if current_user is None:
        query = query.in_("status", public)
    elif not current_user.is_admin:
        query = query.or_(f"status.in.({','.join(public)}),created_by.eq.{current_user.id}")

    try:
        result = query.execute()
    except Exception as e:
        raise handle_supabase_error(e, "Failed to list projects")

    return [p for p in (result.data or []) if can_view_project(p, current_user)]


# -----------------------------------------------------
# PROJECT DETAIL (with visible content only)
# -----------------------------------------------------
@router.get("/{project_id}", summary="Get Project", response_model=ProjectDetail)
def get_project(
    project_id: str,
    current_user: Optional[Principal] = Depends(get_optional_user),
    now: datetime = Depends(get_now),
):
    project = fetch_one("projects", project_id)

    # Hidden projects look exactly like missing ones
    if not project or not can_view_project(project, current_user):
        raise NotFound("Project")

    privileged = is_project_manager(project, current_user)

    return ProjectDetail(
        project=ProjectRead(**project),
        updates=filter_visible(load_items(ProjectItemKind.updates, project_id), now, privileged),
        offers=filter_visible(load_items(ProjectItemKind.offers, project_id), now, privileged),
        events=filter_visible(load_items(ProjectItemKind.events, project_id), now, privileged),
        # Project edits are admin-only; owners preview hidden items
        can_manage=bool(current_user and current_user.is_admin),
    )


# -----------------------------------------------------
# CREATE / UPDATE / DELETE PROJECT (admin)
# -----------------------------------------------------
@router.post("", summary="Create Project", response_model=ProjectRead, status_code=201)
def create_project(payload: ProjectCreate, current_user: Principal = Depends(require_admin_user)):
    data = payload.model_dump(mode="json", exclude_none=True)
    data["created_by"] = current_user.id

    project = safe_insert("projects", data)
    logger.info(f"Project {project['id']} created by {current_user.id}")
    return project


@router.patch("/{project_id}", summary="Update Project", response_model=ProjectRead)
def update_project(
    project_id: str,
    payload: ProjectUpdate,
    current_user: Principal = Depends(require_admin_user),
):
    ensure_owner(current_user, fetch_one("projects", project_id), "created_by", "Project")

    updates = payload.model_dump(mode="json", exclude_unset=True)
    if not updates:
        return fetch_one("projects", project_id)

    project = safe_update("projects", {"id": project_id}, updates)
    if not project:
        raise NotFound("Project")

    logger.info(f"Project {project_id} updated by {current_user.id}")
    return project


@router.delete("/{project_id}", summary="Delete Project")
def delete_project(project_id: str, current_user: Principal = Depends(require_admin_user)):
    ensure_owner(current_user, fetch_one("projects", project_id, columns="id, created_by"), "created_by", "Project")

    # Updates, offers and events go with it (ON DELETE CASCADE)
    safe_delete("projects", {"id": project_id})
    logger.info(f"Project {project_id} deleted by {current_user.id}")
    return {"success": True}


# -----------------------------------------------------
# CREATE CONTENT ITEMS
# -----------------------------------------------------
def _create_item(kind: ProjectItemKind, project_id: str, payload: BaseModel, gate: AuthorizationGate):
    collection = ITEM_COLLECTIONS[kind]

    principal = gate.require_role(collection.roles)
    load_project_for_authoring(principal, project_id)

    data = payload.model_dump(mode="json")
    data["project_id"] = project_id
    data["created_by"] = principal.id

    row = safe_insert(collection.table, data)
    logger.info(
        f"{collection.label} {row['id']} created on project {project_id} by {principal.id} "
        f"({data['schedule_visibility']})"
    )
    return row


@router.post("/{project_id}/updates", summary="Post Project Update",
             response_model=ProjectUpdateRead, status_code=201)
def create_project_update(project_id: str, payload: ProjectUpdateCreate,
                          gate: AuthorizationGate = Depends(get_gate)):
    return _create_item(ProjectItemKind.updates, project_id, payload, gate)


@router.post("/{project_id}/offers", summary="Post Project Offer",
             response_model=ProjectOfferRead, status_code=201)
def create_project_offer(project_id: str, payload: ProjectOfferCreate,
                         gate: AuthorizationGate = Depends(get_gate)):
    return _create_item(ProjectItemKind.offers, project_id, payload, gate)


@router.post("/{project_id}/events", summary="Post Project Event",
             response_model=ProjectEventRead, status_code=201)
def create_project_event(project_id: str, payload: ProjectEventCreate,
                         gate: AuthorizationGate = Depends(get_gate)):
    return _create_item(ProjectItemKind.events, project_id, payload, gate)


# -----------------------------------------------------
# REPLACE VISIBILITY / DELETE CONTENT ITEMS
# -----------------------------------------------------
@router.put("/{kind}/{item_id}/visibility", summary="Replace Item Visibility")
def replace_item_visibility(
    kind: ProjectItemKind,
    item_id: str,
    payload: VisibilityReplace,
    gate: AuthorizationGate = Depends(get_gate),
):
    collection = ITEM_COLLECTIONS[kind]

    principal = gate.require_role(collection.roles)
    ensure_owner(principal, fetch_one(collection.table, item_id), "created_by", collection.label)

    # Both fields are always written; scheduled_at is null unless scheduled
    row = safe_update(collection.table, {"id": item_id}, payload.model_dump(mode="json"))
    if not row:
        raise NotFound(collection.label)

    logger.info(
        f"{collection.label} {item_id} visibility → {payload.schedule_visibility} by {principal.id}"
    )
    return collection.read_model(**row)


@router.delete("/{kind}/{item_id}", summary="Delete Project Item")
def delete_project_item(
    kind: ProjectItemKind,
    item_id: str,
    gate: AuthorizationGate = Depends(get_gate),
):
    collection = ITEM_COLLECTIONS[kind]

    principal = gate.require_role(collection.roles)
    item = ensure_owner(
        principal,
        fetch_one(collection.table, item_id, columns="id, created_by, project_id"),
        "created_by",
        collection.label,
    )

    safe_delete(collection.table, {"id": item_id})
    logger.info(f"{collection.label} {item_id} deleted from project {item['project_id']} by {principal.id}")
    return {"success": True}
