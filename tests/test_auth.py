import uuid
import pytest
from jose import jwt
from app.dependencies.auth import TokenVerifier, Identity, create_access_token
from app.exceptions import AuthError
from app.models.property import PropertyType

SECRET = "test-secret"

def test_verify_returns_identity():
    user_id = uuid.uuid4()
    verifier = TokenVerifier(SECRET)
    identity = verifier.verify(create_access_token(user_id, SECRET, expires_minutes=5))
    assert identity == Identity(id=user_id)

def test_verify_rejects_token_signed_with_other_secret():
    verifier = TokenVerifier(SECRET)
    with pytest.raises(AuthError) as exc_info:
        verifier.verify(create_access_token(uuid.uuid4(), "another-secret"))
    assert exc_info.value.status_code == 403
    assert exc_info.value.to_body()["msg"] == "Wrong or expired token"
    assert exc_info.value.reason

def test_verify_rejects_expired_token():
    verifier = TokenVerifier(SECRET)
    with pytest.raises(AuthError) as exc_info:
        verifier.verify(create_access_token(uuid.uuid4(), SECRET, expires_minutes=-1))
    assert "expired" in exc_info.value.reason.lower()

def test_verify_rejects_payload_without_id():
    verifier = TokenVerifier(SECRET)
    with pytest.raises(AuthError) as exc_info:
        verifier.verify(jwt.encode({"sub": "someone"}, SECRET, algorithm="HS256"))
    assert exc_info.value.reason == "Token payload has no id"

def test_verify_rejects_non_uuid_id():
    verifier = TokenVerifier(SECRET)
    with pytest.raises(AuthError):
        verifier.verify(jwt.encode({"id": "not-a-uuid"}, SECRET, algorithm="HS256"))

def test_verify_uses_configured_secret():
    user_id = uuid.uuid4()
    token = create_access_token(user_id, "rotated-secret")
    assert TokenVerifier("rotated-secret").verify(token).id == user_id
    with pytest.raises(AuthError):
        TokenVerifier(SECRET).verify(token)

@pytest.mark.asyncio
async def test_missing_authorization_header(client):
    response = await client.get("/property/find/my-properties")
    assert response.status_code == 403
    assert response.json() == {"msg": "Not authorized. No token provided"}

@pytest.mark.asyncio
async def test_non_bearer_authorization_header(client, users, auth_headers):
    token = auth_headers(users["alice"].id)["Authorization"].split(" ", 1)[1]
    response = await client.get("/property/find/my-properties", headers={"Authorization": f"Token {token}"})
    assert response.status_code == 403
    assert response.json() == {"msg": "Not authorized. No token provided"}

@pytest.mark.asyncio
async def test_invalid_token_reports_reason(client, users, auth_headers):
    response = await client.get(
        "/property/find/bookmarked-properties",
        headers=auth_headers(users["alice"].id, secret="wrong-secret"),
    )
    assert response.status_code == 403
    body = response.json()
    assert body["msg"] == "Wrong or expired token"
    assert body["error"]

@pytest.mark.asyncio
async def test_rejected_create_does_not_persist(client, users, auth_headers):
    payload = {"title": "Sea view", "type": "beach"}
    no_token = await client.post("/property/", json=payload)
    bad_token = await client.post("/property/", json=payload, headers=auth_headers(users["alice"].id, expires_minutes=-5))
    assert no_token.status_code == 403
    assert bad_token.status_code == 403

    response = await client.get("/property/getAll")
    assert response.json() == []

@pytest.mark.asyncio
async def test_rejected_mutations_leave_property_unchanged(client, users, add_property):
    prop = await add_property(users["alice"], title="Chalet", type=PropertyType.mountain)
    headers = {"Authorization": "Bearer garbage"}

    assert (await client.put(f"/property/{prop.id}", json={"title": "Hacked"}, headers=headers)).status_code == 403
    assert (await client.put(f"/property/bookmark/{prop.id}", headers=headers)).status_code == 403
    assert (await client.delete(f"/property/{prop.id}", headers=headers)).status_code == 403

    response = await client.get(f"/property/find/{prop.id}")
    assert response.status_code == 200
    assert response.json()["title"] == "Chalet"
    assert response.json()["bookmarkedUsers"] == []

@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == "ok"
