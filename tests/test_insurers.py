from sqlalchemy.orm import Session

from conftest import ADMIN, INSURER, OTHER, auth
from app.services.authorization import is_insurer


def test_grant_insurer_as_administrator(client, db: Session):
    """The administrator can grant the insurer role."""
    response = client.post(
        "/api/v1/insurers", json={"principal": INSURER}, headers=auth(ADMIN)
    )
    assert response.status_code == 201
    data = response.json()
    assert data["principal"] == INSURER
    assert data["granted_by"] == ADMIN
    assert is_insurer(db, INSURER)


def test_grant_insurer_is_idempotent(client, db: Session, clock):
    """Granting twice keeps a single grant with the original timestamp."""
    first = client.post(
        "/api/v1/insurers", json={"principal": INSURER}, headers=auth(ADMIN)
    )
    clock.advance(60)
    second = client.post(
        "/api/v1/insurers", json={"principal": INSURER}, headers=auth(ADMIN)
    )
    assert first.status_code == 201
    assert second.status_code == 201
    assert second.json()["granted_at"] == first.json()["granted_at"]

    listing = client.get("/api/v1/insurers", headers=auth(ADMIN))
    assert [i["principal"] for i in listing.json()] == [INSURER]


def test_grant_insurer_as_non_administrator_fails(client, db: Session):
    response = client.post(
        "/api/v1/insurers", json={"principal": OTHER}, headers=auth(OTHER)
    )
    assert response.status_code == 403
    assert response.json()["code"] == "UNAUTHORIZED"
    assert not is_insurer(db, OTHER)


def test_insurer_cannot_grant_insurer(client, db: Session, insurer: str):
    """Only the administrator grants; holding the insurer role is not enough."""
    response = client.post(
        "/api/v1/insurers", json={"principal": OTHER}, headers=auth(insurer)
    )
    assert response.status_code == 403
    assert not is_insurer(db, OTHER)


def test_grant_insurer_without_authentication(client):
    response = client.post("/api/v1/insurers", json={"principal": INSURER})
    assert response.status_code == 401


def test_grant_insurer_with_invalid_token(client):
    response = client.post(
        "/api/v1/insurers",
        json={"principal": INSURER},
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == 401


def test_grant_insurer_blank_principal(client):
    response = client.post(
        "/api/v1/insurers", json={"principal": "   "}, headers=auth(ADMIN)
    )
    assert response.status_code == 422


def test_list_insurers_requires_administrator(client, insurer: str):
    response = client.get("/api/v1/insurers", headers=auth(insurer))
    assert response.status_code == 403


def test_is_insurer_lookup(db: Session, insurer: str):
    assert is_insurer(db, insurer)
    assert not is_insurer(db, ADMIN)
    assert not is_insurer(db, OTHER)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
