from unittest import TestCase
from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient
from sqlalchemy import func, select

from main import app
from models import Base, db, engine, get_db_sync, get_db_sync_for_test
from models.NewsletterSubscriber import NewsletterSubscriber


class TestNewsletter(TestCase):
    def setUp(self):
        Base.metadata.create_all(engine)
        self.session = db()
        app.dependency_overrides[get_db_sync] = get_db_sync_for_test(db=self.session)
        self.client = TestClient(app)

        patcher = patch(
            "routes.newsletter.send_newsletter_confirmation_email",
            new_callable=AsyncMock,
        )
        self.mock_send_email = patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        app.dependency_overrides.clear()
        self.session.close()
        Base.metadata.drop_all(engine)

    def subscriber(self) -> NewsletterSubscriber:
        subscriber = self.session.execute(select(NewsletterSubscriber)).scalar()
        self.session.refresh(subscriber)
        return subscriber

    def test_subscribe_unsubscribe_resubscribe(self):
        # subscribe
        response = self.client.post(
            "/api/newsletter/subscribe", json={"email": " Kunde@Example.com "}
        )
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert self.subscriber().email == "kunde@example.com"
        self.mock_send_email.assert_awaited_once_with(recipient="kunde@example.com")

        # already subscribed
        response = self.client.post(
            "/api/newsletter/subscribe", json={"email": "kunde@example.com"}
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Sie sind bereits für den Newsletter angemeldet."
        assert self.mock_send_email.await_count == 1

        # unsubscribe
        response = self.client.post(
            "/api/newsletter/unsubscribe", json={"email": "kunde@example.com"}
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Sie wurden erfolgreich vom Newsletter abgemeldet."
        assert self.subscriber().unsubscribed_at is not None

        response = self.client.post(
            "/api/newsletter/unsubscribe", json={"email": "kunde@example.com"}
        )
        assert response.json()["message"] == "Sie sind bereits abgemeldet."

        # reactivate
        response = self.client.post(
            "/api/newsletter/subscribe", json={"email": "kunde@example.com"}
        )
        assert response.status_code == 200
        assert self.subscriber().unsubscribed_at is None
        count = self.session.execute(
            select(func.count(NewsletterSubscriber.id))
        ).scalar()
        assert count == 1

    def test_unsubscribe_unknown_email(self):
        response = self.client.post(
            "/api/newsletter/unsubscribe", json={"email": "niemand@example.com"}
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Sie wurden erfolgreich abgemeldet."

    def test_invalid_email(self):
        for path in ("/api/newsletter/subscribe", "/api/newsletter/unsubscribe"):
            response = self.client.post(path, json={"email": "kein-email"})
            assert response.status_code == 400
            assert response.json()["message"] == "Ungültige E-Mail-Adresse"

            response = self.client.post(path, json={})
            assert response.status_code == 400

    def test_mail_failure_does_not_fail_subscription(self):
        self.mock_send_email.side_effect = ConnectionError("smtp down")

        response = self.client.post(
            "/api/newsletter/subscribe", json={"email": "kunde@example.com"}
        )

        assert response.status_code == 200
        assert self.subscriber().email == "kunde@example.com"

    def test_subscribe_concurrent_first_signup(self):
        self.client.post("/api/newsletter/subscribe", json={"email": "kunde@example.com"})

        # the lookup of the second request ran before the first one committed
        with patch(
            "routes.newsletter.newsletterRepo.get_subscriber_by_email", return_value=None
        ):
            response = self.client.post(
                "/api/newsletter/subscribe", json={"email": "kunde@example.com"}
            )

        assert response.status_code == 200
        assert response.json()["message"] == "Sie sind bereits für den Newsletter angemeldet."
        count = self.session.execute(select(func.count(NewsletterSubscriber.id))).scalar()
        assert count == 1
        assert self.mock_send_email.await_count == 1
