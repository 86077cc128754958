from datetime import datetime, timedelta, timezone

from jose import jwt

from conftest import TEST_PASSWORD, auth_headers
from library_service.config import settings
from library_service.security import decode_access_token


async def test_register_then_login(client):
    response = await client.post(
        "/api/auth/register",
        json={
            "email": "Linus@Example.com",
            "password": TEST_PASSWORD,
            "first_name": "Linus",
            "last_name": "Torvalds",
        },
    )
    assert response.status_code == 201
    assert response.json()["email"] == "linus@example.com"
    assert response.json()["role"] == "MEMBER"
    assert "password" not in response.json()

    response = await client.post(
        "/api/auth/login", json={"email": "linus@example.com", "password": TEST_PASSWORD}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["type"] == "Bearer"
    assert body["role"] == "MEMBER"
    assert body["expires_in"] == settings.jwt_expiration_minutes * 60
    assert decode_access_token(body["token"])["sub"] == "linus@example.com"

    me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.json()["first_name"] == "Linus"


async def test_register_rejects_short_password_and_bad_email(client):
    response = await client.post(
        "/api/auth/register",
        json={"email": "not-an-email", "password": "short", "first_name": "A", "last_name": "B"},
    )

    assert response.status_code == 400
    errors = response.json()["validation_errors"]
    assert any("email" in e for e in errors)
    assert any("password" in e for e in errors)


async def test_register_duplicate_email(client, member):
    response = await client.post(
        "/api/auth/register",
        json={"email": member.email, "password": TEST_PASSWORD, "first_name": "A", "last_name": "B"},
    )
    assert response.status_code == 409


async def test_login_with_wrong_password(client, make_user):
    user = await make_user(password=TEST_PASSWORD)

    response = await client.post("/api/auth/login", json={"email": user.email, "password": "nope-nope"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


async def test_me_requires_valid_token(client, member):
    assert (await client.get("/api/auth/me")).status_code == 401
    assert (await client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})).status_code == 401
    assert (await client.get("/api/auth/me", headers=auth_headers(member))).json()["id"] == member.id


async def test_expired_token_is_rejected(client, member):
    issued = datetime.now(timezone.utc) - timedelta(hours=2)
    token = jwt.encode(
        {
            "sub": member.email,
            "uid": member.id,
            "role": member.role.value,
            "iat": issued,
            "exp": issued + timedelta(minutes=5),
        },
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )

    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired token"


async def test_token_for_deleted_user_is_rejected(client, make_user, session_factory):
    user = await make_user()
    headers = auth_headers(user)
    async with session_factory() as session:
        await session.delete(await session.get(type(user), user.id))
        await session.commit()

    response = await client.get("/api/auth/me", headers=headers)

    assert response.status_code == 401
