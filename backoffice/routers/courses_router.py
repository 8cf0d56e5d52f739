from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..application.services.catalog_service import CatalogService
from ..dependencies import get_catalog_service, get_current_admin
from ..schemas import CourseCreate, CourseUpdate, CourseResponse, MessageResponse

router = APIRouter(prefix="/courses", tags=["Courses"], dependencies=[Depends(get_current_admin)])


@router.get("", response_model=List[CourseResponse])
def list_courses(
    search: Optional[str] = Query(None),
    track_id: Optional[int] = Query(None, alias="trackId"),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.list_courses(search=search, track_id=track_id)


@router.post("", response_model=CourseResponse, status_code=201)
def create_course(payload: CourseCreate, service: CatalogService = Depends(get_catalog_service)):
    return service.create_course(payload.model_dump())


@router.get("/{course_id}", response_model=CourseResponse)
def get_course(course_id: int, service: CatalogService = Depends(get_catalog_service)):
    return service.get_course(course_id)


@router.put("/{course_id}", response_model=CourseResponse)
def update_course(course_id: int, payload: CourseUpdate, service: CatalogService = Depends(get_catalog_service)):
    return service.update_course(course_id, payload.changes())


@router.delete("/{course_id}", response_model=MessageResponse)
def delete_course(course_id: int, service: CatalogService = Depends(get_catalog_service)):
    service.delete_course(course_id)
    return MessageResponse(message="Course deleted successfully")
