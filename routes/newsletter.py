from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.email import send_newsletter_confirmation_email
from core.helper import get_current_time_in_timezone
from core.log import logger
from core.responses import BadRequest, Ok, common_response
from models import get_db_sync
from repository import newsletter as newsletterRepo
from schemas.common import BadRequestResponse, InternalServerErrorResponse
from schemas.newsletter import NewsletterRequest, NewsletterResponse
from settings import TZ
from validators.email import is_valid_email

router = APIRouter(prefix="/api/newsletter", tags=["Newsletter"])

INVALID_EMAIL_MESSAGE = "Ungültige E-Mail-Adresse"


def already_subscribed_response():
    return common_response(
        Ok(
            data=NewsletterResponse(
                message="Sie sind bereits für den Newsletter angemeldet."
            ).model_dump()
        )
    )


@router.post(
    "/subscribe",
    responses={
        "200": {"model": NewsletterResponse},
        "400": {"model": BadRequestResponse},
        "500": {"model": InternalServerErrorResponse},
    },
)
async def subscribe(request: NewsletterRequest, db: Session = Depends(get_db_sync)):
    if not is_valid_email(request.email):
        return common_response(BadRequest(message=INVALID_EMAIL_MESSAGE))

    email = request.email.strip().lower()
    now = get_current_time_in_timezone(TZ)
    subscriber = newsletterRepo.get_subscriber_by_email(db=db, email=email)
    if subscriber is not None and subscriber.unsubscribed_at is None:
        return already_subscribed_response()

    if subscriber is not None:
        newsletterRepo.resubscribe(db=db, subscriber=subscriber, subscribed_at=now)
    else:
        try:
            newsletterRepo.create_subscriber(db=db, email=email, subscribed_at=now)
        except IntegrityError:
            # a concurrent request stored the address first
            db.rollback()
            return already_subscribed_response()

    try:
        await send_newsletter_confirmation_email(recipient=email)
    except Exception as e:
        logger.error(f"Failed to send newsletter confirmation to {email}: {e}")

    return common_response(
        Ok(
            data=NewsletterResponse(
                message="Newsletter-Anmeldung erfolgreich! Bitte prüfen Sie Ihre E-Mails zur Bestätigung."
            ).model_dump()
        )
    )


@router.post(
    "/unsubscribe",
    responses={
        "200": {"model": NewsletterResponse},
        "400": {"model": BadRequestResponse},
        "500": {"model": InternalServerErrorResponse},
    },
)
def unsubscribe(request: NewsletterRequest, db: Session = Depends(get_db_sync)):
    if not is_valid_email(request.email):
        return common_response(BadRequest(message=INVALID_EMAIL_MESSAGE))

    subscriber = newsletterRepo.get_subscriber_by_email(db=db, email=request.email)
    # unknown addresses get the same answer
    if subscriber is None:
        return common_response(
            Ok(
                data=NewsletterResponse(
                    message="Sie wurden erfolgreich abgemeldet."
                ).model_dump()
            )
        )

    if subscriber.unsubscribed_at is not None:
        return common_response(
            Ok(data=NewsletterResponse(message="Sie sind bereits abgemeldet.").model_dump())
        )

    newsletterRepo.unsubscribe(
        db=db,
        subscriber=subscriber,
        unsubscribed_at=get_current_time_in_timezone(TZ),
    )
    return common_response(
        Ok(
            data=NewsletterResponse(
                message="Sie wurden erfolgreich vom Newsletter abgemeldet."
            ).model_dump()
        )
    )
