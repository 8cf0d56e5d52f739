from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..application.services.catalog_service import CatalogService
from ..dependencies import get_catalog_service, get_current_admin
from ..schemas import TrackCreate, TrackUpdate, TrackResponse, MessageResponse

router = APIRouter(prefix="/tracks", tags=["Tracks"], dependencies=[Depends(get_current_admin)])


@router.get("", response_model=List[TrackResponse])
def list_tracks(search: Optional[str] = Query(None), service: CatalogService = Depends(get_catalog_service)):
    return service.list_tracks(search=search)


@router.post("", response_model=TrackResponse, status_code=201)
def create_track(payload: TrackCreate, service: CatalogService = Depends(get_catalog_service)):
    return service.create_track(payload.model_dump())


@router.get("/{track_id}", response_model=TrackResponse)
def get_track(track_id: int, service: CatalogService = Depends(get_catalog_service)):
    return service.get_track(track_id)


@router.put("/{track_id}", response_model=TrackResponse)
def update_track(track_id: int, payload: TrackUpdate, service: CatalogService = Depends(get_catalog_service)):
    return service.update_track(track_id, payload.changes())


@router.delete("/{track_id}", response_model=MessageResponse)
def delete_track(track_id: int, service: CatalogService = Depends(get_catalog_service)):
    service.delete_track(track_id)
    return MessageResponse(message="Track deleted successfully")
