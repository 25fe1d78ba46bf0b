import traceback
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.helper import format_participant_names, get_current_time_in_timezone
from core.log import logger
from core.responses import (
    BadRequest,
    Conflict,
    Forbidden,
    InternalServerError,
    NotFound,
    Ok,
    Unauthorized,
    common_response,
)
from core.security import get_current_user
from models import get_db_sync
from models.User import User
from models.Waitlist import WaitlistStatus
from repository import course as courseRepo
from repository import waitlist as waitlistRepo
from schemas.common import (
    BadRequestResponse,
    ConflictResponse,
    ForbiddenResponse,
    InternalServerErrorResponse,
    NotFoundResponse,
    UnauthorizedResponse,
)
from schemas.waitlist import (
    WaitlistAddRequest,
    WaitlistAddResponse,
    WaitlistEntryResponse,
)
from settings import TZ
from validators.email import is_valid_email

router = APIRouter(prefix="/api/waitlist", tags=["Waitlist"])

DUPLICATE_ENTRY_MESSAGE = "You are already on the waitlist for this course"


@router.post(
    "/add",
    responses={
        "200": {"model": WaitlistAddResponse},
        "400": {"model": BadRequestResponse},
        "404": {"model": NotFoundResponse},
        "409": {"model": ConflictResponse},
        "500": {"model": InternalServerErrorResponse},
    },
)
def add_to_waitlist(
    request: WaitlistAddRequest,
    db: Session = Depends(get_db_sync),
    user: Optional[User] = Depends(get_current_user),
):
    if (
        request.course_id is None
        or not (request.customer_name or "").strip()
        or not request.customer_email
    ):
        return common_response(
            BadRequest(
                message="Missing required fields: courseId, customerName, customerEmail"
            )
        )

    if not is_valid_email(request.customer_email):
        return common_response(BadRequest(message="Invalid email format"))

    if request.participants < 1:
        return common_response(BadRequest(message="Participants must be at least 1"))

    course = courseRepo.get_course_by_id(db=db, course_id=request.course_id)
    if course is None:
        return common_response(NotFound(message="Course not found"))

    existing = waitlistRepo.get_pending_entry(
        db=db, course_id=course.id, customer_email=request.customer_email
    )
    if existing is not None:
        return common_response(Conflict(message=DUPLICATE_ENTRY_MESSAGE))

    try:
        entry = waitlistRepo.create_waitlist_entry(
            db=db,
            course_id=course.id,
            user_id=user.id if user else None,
            customer_name=request.customer_name,
            customer_email=request.customer_email,
            participants=request.participants,
            participant_names=format_participant_names(
                request.participant_names, request.participants
            ),
            auto_book=request.auto_book,
            preferred_date=request.preferred_date,
            created_at=get_current_time_in_timezone(TZ),
        )
    except IntegrityError:
        # a concurrent request won the partial unique index
        db.rollback()
        return common_response(Conflict(message=DUPLICATE_ENTRY_MESSAGE))
    except Exception as e:
        db.rollback()
        traceback.print_exc()
        logger.error(f"Failed to add to waitlist for course {course.id}: {e}")
        return common_response(InternalServerError(error="Failed to add to waitlist"))

    logger.info(f"Waitlist entry {entry.id} created for course {course.title}")
    response = WaitlistAddResponse(
        message="Successfully added to waitlist",
        waitlist_entry=WaitlistEntryResponse.model_validate(entry),
    )
    return common_response(Ok(data=response.model_dump(mode="json")))


@router.delete(
    "/remove",
    responses={
        "200": {"model": WaitlistAddResponse},
        "400": {"model": BadRequestResponse},
        "401": {"model": UnauthorizedResponse},
        "403": {"model": ForbiddenResponse},
        "404": {"model": NotFoundResponse},
    },
)
def remove_from_waitlist(
    id: Optional[UUID] = None,
    db: Session = Depends(get_db_sync),
    user: Optional[User] = Depends(get_current_user),
):
    if id is None:
        return common_response(BadRequest(message="Missing required parameter: id"))

    if user is None:
        return common_response(Unauthorized())

    entry = waitlistRepo.get_waitlist_by_id(db=db, waitlist_id=id)
    if entry is None:
        return common_response(NotFound(message="Waitlist entry not found"))

    is_owner = entry.user_id == user.id or (
        entry.customer_email or ""
    ).lower() == (user.email or "").lower()
    if not user.is_admin and not is_owner:
        return common_response(
            Forbidden(
                message="Forbidden - You can only remove your own waitlist entries"
            )
        )

    waitlistRepo.update_waitlist_status(
        db=db, entry=entry, status=WaitlistStatus.CANCELLED
    )
    return common_response(
        Ok(data={"success": True, "message": "Successfully removed from waitlist"})
    )
