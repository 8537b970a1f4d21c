# -*- coding: utf-8 -*-
"""
Order Drafts API Router

Drives the order composition workflow step by step: open a draft, fill
in the customer, vehicle and services sections, then submit.
"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field

from workshop.models import ServiceDraft
from workshop.services import (
    DraftRegistry, GatewayError, OrderWorkflow, SectionMode, SubmissionBlocked, get_draft_registry,
)
from workshop.api.errors import gateway_http_error

router = APIRouter(prefix="/drafts", tags=["drafts"])


class SectionUpdate(BaseModel):
    """Change to the customer or vehicle section"""
    model_config = ConfigDict(populate_by_name=True)

    mode: Optional[SectionMode] = Field(None, description="existing or new")
    selected_id: Optional[str] = Field(None, alias="selectedId", description="Picked entity id")
    draft: Dict[str, Any] = Field(default_factory=dict, description="Fields of the new entity")


class NotesUpdate(BaseModel):
    notes: str = ""


def _get_workflow(draft_id: str, registry: DraftRegistry) -> OrderWorkflow:
    workflow = registry.get(draft_id)
    if not workflow:
        raise HTTPException(status_code=404, detail="Draft not found")
    return workflow


def _state(draft_id: str, workflow: OrderWorkflow) -> dict:
    return {"id": draft_id, **workflow.to_dict()}


def _apply_section(workflow: OrderWorkflow, section: str, data: SectionUpdate) -> None:
    set_mode = getattr(workflow, f"set_{section}_mode")
    select = getattr(workflow, f"select_{section}")
    update_draft = getattr(workflow, f"update_{section}_draft")
    try:
        if data.mode is not None:
            set_mode(data.mode)
        if data.selected_id is not None:
            select(data.selected_id)
        if data.draft:
            update_draft(**data.draft)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("", status_code=201)
async def open_draft(registry: DraftRegistry = Depends(get_draft_registry)):
    """Open a new, empty order draft"""
    draft_id, workflow = registry.create()
    return _state(draft_id, workflow)


@router.get("/{draft_id}")
async def get_draft(draft_id: str, registry: DraftRegistry = Depends(get_draft_registry)):
    return _state(draft_id, _get_workflow(draft_id, registry))


@router.put("/{draft_id}/customer")
async def update_customer_section(
    draft_id: str,
    data: SectionUpdate,
    registry: DraftRegistry = Depends(get_draft_registry),
):
    """Switch mode, pick an existing customer or edit the new-customer fields"""
    workflow = _get_workflow(draft_id, registry)
    _apply_section(workflow, "customer", data)
    return _state(draft_id, workflow)


@router.put("/{draft_id}/vehicle")
async def update_vehicle_section(
    draft_id: str,
    data: SectionUpdate,
    registry: DraftRegistry = Depends(get_draft_registry),
):
    """Switch mode, pick an existing vehicle or edit the new-vehicle fields"""
    workflow = _get_workflow(draft_id, registry)
    _apply_section(workflow, "vehicle", data)
    return _state(draft_id, workflow)


@router.post("/{draft_id}/services")
async def add_service(
    draft_id: str,
    item: ServiceDraft,
    index: Optional[int] = Query(None, ge=0, description="Insert position, appended when omitted"),
    registry: DraftRegistry = Depends(get_draft_registry),
):
    workflow = _get_workflow(draft_id, registry)
    workflow.add_service(item, index)
    return _state(draft_id, workflow)


@router.patch("/{draft_id}/services/{index}")
async def update_service(
    draft_id: str,
    index: int,
    fields: Dict[str, Any],
    registry: DraftRegistry = Depends(get_draft_registry),
):
    workflow = _get_workflow(draft_id, registry)
    if not 0 <= index < len(workflow.services):
        raise HTTPException(status_code=404, detail="Service line not found")
    try:
        workflow.update_service(index, **fields)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _state(draft_id, workflow)


@router.delete("/{draft_id}/services/{index}")
async def remove_service(
    draft_id: str,
    index: int,
    registry: DraftRegistry = Depends(get_draft_registry),
):
    workflow = _get_workflow(draft_id, registry)
    if not 0 <= index < len(workflow.services):
        raise HTTPException(status_code=404, detail="Service line not found")
    workflow.remove_service(index)
    return _state(draft_id, workflow)


@router.put("/{draft_id}/notes")
async def update_notes(
    draft_id: str,
    data: NotesUpdate,
    registry: DraftRegistry = Depends(get_draft_registry),
):
    workflow = _get_workflow(draft_id, registry)
    workflow.set_notes(data.notes)
    return _state(draft_id, workflow)


@router.get("/{draft_id}/customer-suggestions")
async def customer_suggestions(
    draft_id: str,
    q: str = Query("", description="Unique code fragment"),
    registry: DraftRegistry = Depends(get_draft_registry),
):
    """Autocomplete; `stale` is true when a newer query superseded this one"""
    workflow = _get_workflow(draft_id, registry)
    try:
        results = await workflow.search_customers(q)
    except GatewayError as e:
        raise gateway_http_error(e)
    return {
        "stale": results is None,
        "suggestions": [c.model_dump(by_alias=True) for c in (results or [])],
    }


@router.get("/{draft_id}/vehicle-suggestions")
async def vehicle_suggestions(
    draft_id: str,
    q: str = Query("", description="Registration number fragment"),
    registry: DraftRegistry = Depends(get_draft_registry),
):
    """Autocomplete; `stale` is true when a newer query superseded this one"""
    workflow = _get_workflow(draft_id, registry)
    try:
        results = await workflow.search_vehicles(q)
    except GatewayError as e:
        raise gateway_http_error(e)
    return {
        "stale": results is None,
        "suggestions": [v.model_dump(by_alias=True) for v in (results or [])],
    }


@router.post("/{draft_id}/submit")
async def submit_draft(draft_id: str, registry: DraftRegistry = Depends(get_draft_registry)):
    """
    Validate and submit the draft.

    On success the draft is closed and discarded. On failure it stays open
    with everything entered so far; 422 for local validation problems,
    400 when the backend rejected a step, 409 while another submit of the
    same draft is still running.
    """
    workflow = _get_workflow(draft_id, registry)
    try:
        order = await workflow.submit()
    except SubmissionBlocked as e:
        raise HTTPException(status_code=409, detail=str(e))
    if order is None:
        status_code = 400 if workflow.form_error else 422
        raise HTTPException(status_code=status_code, detail=_state(draft_id, workflow))

    state = _state(draft_id, workflow)
    registry.discard(draft_id)
    return {"order": order.model_dump(by_alias=True), "draft": state}


@router.delete("/{draft_id}")
async def discard_draft(draft_id: str, registry: DraftRegistry = Depends(get_draft_registry)):
    _get_workflow(draft_id, registry)
    registry.discard(draft_id)
    return {"success": True}
