from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.responses import Ok, common_response
from models import get_db_sync
from repository import course as courseRepo
from schemas.common import InternalServerErrorResponse
from schemas.course import CourseListResponse, CourseResponseItem

router = APIRouter(prefix="/courses", tags=["Course"])


@router.get(
    "/",
    responses={
        "200": {"model": CourseListResponse},
        "500": {"model": InternalServerErrorResponse},
    },
)
def list_courses(db: Session = Depends(get_db_sync)):
    courses = courseRepo.get_active_courses(db=db)
    response = CourseListResponse(
        results=[CourseResponseItem.model_validate(course) for course in courses]
    )
    return common_response(Ok(data=response.model_dump(mode="json")))
