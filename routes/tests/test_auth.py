from unittest import IsolatedAsyncioTestCase

from fastapi.testclient import TestClient
from sqlalchemy import func, select
from core.security import generate_hash_password, validated_password
from models import Base, engine, db, get_db_sync, get_db_sync_for_test
from models.RefreshToken import RefreshToken
from models.Token import Token
from models.User import User
from main import app


class TestAuth(IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        Base.metadata.create_all(engine)
        self.db = db()
        app.dependency_overrides[get_db_sync] = get_db_sync_for_test(db=self.db)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.db.close()
        Base.metadata.drop_all(engine)

    async def test_signup_then_signin(self):
        client = TestClient(app)

        # When 1 - sign up
        response = client.post(
            "/auth/email/signup/",
            json={
                "email": "Kunde@Example.com",
                "password": "geheim1234",
                "full_name": "Erika Mustermann",
            },
        )

        # Expect 1
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["email"], "kunde@example.com")
        user = self.db.execute(
            select(User).where(User.email == "kunde@example.com")
        ).scalar()
        self.assertIsNotNone(user)
        self.assertTrue(user.is_active)
        self.assertFalse(user.is_admin)
        self.assertTrue(validated_password(user.password, "geheim1234"))

        # When 2 - same email again
        response = client.post(
            "/auth/email/signup/",
            json={"email": "kunde@example.com", "password": "geheim1234"},
        )

        # Expect 2
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Email already registered")

        # When 3 - sign in
        response = client.post(
            "/auth/email/signin/",
            json={"email": "kunde@example.com", "password": "geheim1234"},
        )

        # Expect 3
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["id"], str(user.id))
        self.assertIsNotNone(response.json()["token"])
        self.assertIsNotNone(response.json()["refresh_token"])

    async def test_signup_validation(self):
        client = TestClient(app)

        response = client.post(
            "/auth/email/signup/",
            json={"email": "not-an-email", "password": "geheim1234"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Invalid email address")

        response = client.post(
            "/auth/email/signup/",
            json={"email": "kunde@example.com", "password": "kurz"},
        )
        self.assertEqual(response.status_code, 400)

        count = self.db.execute(select(func.count(User.id))).scalar()
        self.assertEqual(count, 0)

    async def test_login_then_logout(self):
        # Given
        new_user = User(
            username="testuser@example.com",
            email="testuser@example.com",
            password=generate_hash_password("password"),
            is_active=True,
        )
        self.db.add(new_user)
        self.db.commit()
        client = TestClient(app)

        # When 1 - wrong password
        response = client.post(
            "/auth/email/signin/",
            json={"email": "testuser@example.com", "password": "wrong"},
        )

        # Expect 1
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Invalid Credentials")

        # When 2
        response = client.post(
            "/auth/email/signin/",
            json={"email": "testuser@example.com", "password": "password"},
        )

        # Expect 2
        self.assertEqual(response.status_code, 200)
        token = response.json()["token"]
        session = self.db.execute(
            select(Token).where(Token.user_id == new_user.id)
        ).scalar()
        self.assertIsNotNone(session)

        # When 3 - me
        response = client.get(
            "/auth/me/", headers={"Authorization": f"Bearer {token}"}
        )

        # Expect 3
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["email"], "testuser@example.com")
        self.assertFalse(response.json()["is_admin"])

        # When 4 - logout
        response = client.post(
            "/auth/logout/", headers={"Authorization": f"Bearer {token}"}
        )

        # Expect 4
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(
            self.db.execute(select(Token).where(Token.token == token)).scalar()
        )
        self.assertEqual(
            self.db.execute(select(func.count(RefreshToken.id))).scalar(), 0
        )

        # When 5 - token no longer valid
        response = client.get(
            "/auth/me/", headers={"Authorization": f"Bearer {token}"}
        )

        # Expect 5
        self.assertEqual(response.status_code, 401)

    async def test_me_from_cookie(self):
        new_user = User(
            username="cookie@example.com",
            email="cookie@example.com",
            password=generate_hash_password("password"),
            is_active=True,
        )
        self.db.add(new_user)
        self.db.commit()
        client = TestClient(app)
        response = client.post(
            "/auth/email/signin/",
            json={"email": "cookie@example.com", "password": "password"},
        )
        client.cookies.set("access_token", response.json()["token"])

        response = client.get("/auth/me/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["id"], str(new_user.id))

    async def test_swagger_form_token(self):
        new_user = User(
            username="form@example.com",
            email="form@example.com",
            password=generate_hash_password("password"),
            is_active=True,
        )
        self.db.add(new_user)
        self.db.commit()
        client = TestClient(app)

        response = client.post(
            "/auth/token/",
            data={"username": "form@example.com", "password": "password"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["token_type"], "bearer")

    async def test_inactive_user_cannot_login(self):
        new_user = User(
            username="inactive@example.com",
            email="inactive@example.com",
            password=generate_hash_password("password"),
            is_active=False,
        )
        self.db.add(new_user)
        self.db.commit()
        client = TestClient(app)

        response = client.post(
            "/auth/email/signin/",
            json={"email": "inactive@example.com", "password": "password"},
        )

        self.assertEqual(response.status_code, 400)
