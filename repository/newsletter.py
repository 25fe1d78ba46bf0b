from datetime import datetime
from typing import Optional
from sqlalchemy import select
from sqlalchemy.orm import Session

from models.NewsletterSubscriber import NewsletterSubscriber


def get_subscriber_by_email(db: Session, email: str) -> Optional[NewsletterSubscriber]:
    stmt = select(NewsletterSubscriber).where(
        NewsletterSubscriber.email == email.strip().lower()
    )
    return db.execute(stmt).scalar()


def create_subscriber(
    db: Session, email: str, subscribed_at: datetime, is_commit: bool = True
) -> NewsletterSubscriber:
    subscriber = NewsletterSubscriber(
        email=email.strip().lower(), subscribed_at=subscribed_at
    )
    db.add(subscriber)
    db.flush()
    if is_commit:
        db.commit()
        db.refresh(subscriber)
    return subscriber


def resubscribe(
    db: Session,
    subscriber: NewsletterSubscriber,
    subscribed_at: datetime,
    is_commit: bool = True,
) -> NewsletterSubscriber:
    subscriber.subscribed_at = subscribed_at
    subscriber.unsubscribed_at = None
    if is_commit:
        db.commit()
    return subscriber


def unsubscribe(
    db: Session,
    subscriber: NewsletterSubscriber,
    unsubscribed_at: datetime,
    is_commit: bool = True,
) -> NewsletterSubscriber:
    subscriber.unsubscribed_at = unsubscribed_at
    if is_commit:
        db.commit()
    return subscriber
