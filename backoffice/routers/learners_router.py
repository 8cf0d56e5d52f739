from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..application.services.catalog_service import CatalogService
from ..dependencies import get_catalog_service, get_current_admin
from ..schemas import LearnerCreate, LearnerUpdate, LearnerResponse, MessageResponse

router = APIRouter(prefix="/learners", tags=["Learners"], dependencies=[Depends(get_current_admin)])


@router.get("", response_model=List[LearnerResponse])
def list_learners(
    search: Optional[str] = Query(None),
    track_id: Optional[int] = Query(None, alias="trackId"),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.list_learners(search=search, track_id=track_id)


@router.post("", response_model=LearnerResponse, status_code=201)
def create_learner(payload: LearnerCreate, service: CatalogService = Depends(get_catalog_service)):
    return service.create_learner(payload.model_dump())


@router.get("/{learner_id}", response_model=LearnerResponse)
def get_learner(learner_id: int, service: CatalogService = Depends(get_catalog_service)):
    return service.get_learner(learner_id)


@router.put("/{learner_id}", response_model=LearnerResponse)
def update_learner(learner_id: int, payload: LearnerUpdate, service: CatalogService = Depends(get_catalog_service)):
    return service.update_learner(learner_id, payload.changes())


@router.delete("/{learner_id}", response_model=MessageResponse)
def delete_learner(learner_id: int, service: CatalogService = Depends(get_catalog_service)):
    service.delete_learner(learner_id)
    return MessageResponse(message="Learner deleted successfully")
