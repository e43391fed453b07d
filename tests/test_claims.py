import pytest
from sqlalchemy.orm import Session

from conftest import ADMIN, DAY, HOLDER, OTHER, START_TIME, auth
from app.db.models.policy import Policy as PolicyModel
from app.errors import InvalidStateError, UnauthorizedError
from app.repositories.claim import get_claim_by_id
from app.services.claim import approve_claim, reject_claim


def _deactivate(db: Session, policy_id: int) -> None:
    policy = db.query(PolicyModel).filter(PolicyModel.id == policy_id).first()
    policy.status = "INACTIVE"
    db.commit()


def _submit(client, policy_id: int, principal: str = HOLDER, amount: int = 500):
    return client.post(
        "/api/v1/claims",
        json={"policy_id": policy_id, "claim_amount": amount, "reason": "fire"},
        headers=auth(principal),
    )


# ============================================================================
# SUBMIT CLAIM TESTS
# ============================================================================


def test_submit_claim(client, policy: dict, sink):
    response = _submit(client, policy["id"])
    assert response.status_code == 201
    data = response.json()
    assert data["id"] == 1
    assert data["policy_id"] == policy["id"]
    assert data["claimant"] == HOLDER
    assert data["claim_amount"] == 500
    assert data["reason"] == "fire"
    assert data["status"] == "SUBMITTED"
    assert data["submitted_at"] == START_TIME
    assert sink.published[-1] == (
        "ClaimSubmitted",
        {"claim_id": 1, "policy_id": 1, "claimant": HOLDER},
    )


def test_submit_claim_ids_are_dense_across_policies(client, insurer: str, policy: dict):
    client.post(
        "/api/v1/policies",
        json={"policyholder": HOLDER, "premium": 5, "coverage_amount": 50, "duration": DAY},
        headers=auth(insurer),
    )
    ids = [_submit(client, policy_id).json()["id"] for policy_id in (1, 2, 1)]
    assert ids == [1, 2, 3]


def test_submit_claim_above_coverage_is_accepted(client, policy: dict):
    """The coverage amount is not a ceiling on a single claim."""
    response = _submit(client, policy["id"], amount=policy["coverage_amount"] * 10)
    assert response.status_code == 201


def test_submit_claim_unknown_policy(client, insurer: str):
    response = _submit(client, 7)
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_submit_claim_not_policyholder(client, policy: dict):
    response = _submit(client, policy["id"], principal=OTHER)
    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"


def test_submit_claim_by_insurer_is_forbidden(client, policy: dict, insurer: str):
    response = _submit(client, policy["id"], principal=insurer)
    assert response.status_code == 403


def test_submit_claim_inactive_policy(client, db: Session, policy: dict):
    _deactivate(db, policy["id"])
    response = _submit(client, policy["id"])
    assert response.status_code == 409
    assert response.json()["code"] == "INVALID_STATE"


def test_submit_claim_expired_policy(client, policy: dict, clock, sink):
    clock.current = policy["expiration"] + 1
    response = _submit(client, policy["id"])
    assert response.status_code == 409
    assert response.json()["code"] == "POLICY_EXPIRED"
    assert "ClaimSubmitted" not in sink.kinds()


def test_submit_claim_non_positive_amount(client, policy: dict):
    response = _submit(client, policy["id"], amount=0)
    assert response.status_code == 422


def test_failed_submission_does_not_consume_an_id(client, policy: dict):
    _submit(client, policy["id"], principal=OTHER)
    assert _submit(client, policy["id"]).json()["id"] == 1


# ============================================================================
# ADJUDICATION TESTS
# ============================================================================


def test_approve_claim(client, insurer: str, claim: dict, sink, clock):
    clock.advance(DAY)
    response = client.post(f"/api/v1/claims/{claim['id']}/approve", headers=auth(insurer))
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "APPROVED"
    assert data["decided_by"] == insurer
    assert data["decided_at"] == START_TIME + DAY
    assert sink.published[-1] == (
        "ClaimApproved",
        {"claim_id": 1, "policy_id": 1, "claimant": HOLDER, "claim_amount": 500},
    )


def test_reject_claim(client, insurer: str, claim: dict, sink):
    response = client.post(f"/api/v1/claims/{claim['id']}/reject", headers=auth(insurer))
    assert response.status_code == 200
    assert response.json()["status"] == "REJECTED"
    assert sink.published[-1] == (
        "ClaimRejected",
        {"claim_id": 1, "policy_id": 1, "claimant": HOLDER},
    )


def test_approved_claim_cannot_be_rejected(client, insurer: str, approved_claim: dict):
    response = client.post(
        f"/api/v1/claims/{approved_claim['id']}/reject", headers=auth(insurer)
    )
    assert response.status_code == 409
    assert response.json()["code"] == "INVALID_STATE"


def test_rejected_claim_cannot_be_approved(client, insurer: str, claim: dict):
    client.post(f"/api/v1/claims/{claim['id']}/reject", headers=auth(insurer))
    response = client.post(f"/api/v1/claims/{claim['id']}/approve", headers=auth(insurer))
    assert response.status_code == 409

    current = client.get(f"/api/v1/claims/{claim['id']}", headers=auth(insurer)).json()
    assert current["status"] == "REJECTED"


def test_claim_cannot_be_approved_twice(client, insurer: str, approved_claim: dict, sink):
    response = client.post(
        f"/api/v1/claims/{approved_claim['id']}/approve", headers=auth(insurer)
    )
    assert response.status_code == 409
    assert sink.kinds().count("ClaimApproved") == 1


def test_approve_claim_on_inactive_policy(client, db: Session, insurer: str, claim: dict):
    """Approval requires an active policy even when the claim is SUBMITTED."""
    _deactivate(db, claim["policy_id"])
    response = client.post(f"/api/v1/claims/{claim['id']}/approve", headers=auth(insurer))
    assert response.status_code == 409
    assert response.json()["code"] == "INVALID_STATE"

    current = client.get(f"/api/v1/claims/{claim['id']}", headers=auth(insurer)).json()
    assert current["status"] == "SUBMITTED"


def test_reject_claim_on_inactive_policy(client, db: Session, insurer: str, claim: dict):
    """Rejection does not look at the policy status."""
    _deactivate(db, claim["policy_id"])
    response = client.post(f"/api/v1/claims/{claim['id']}/reject", headers=auth(insurer))
    assert response.status_code == 200
    assert response.json()["status"] == "REJECTED"


def test_approve_claim_after_policy_expired(client, insurer: str, claim: dict, policy: dict, clock):
    """Only the status gates approval; an expired but ACTIVE policy still qualifies."""
    clock.current = policy["expiration"] + DAY
    response = client.post(f"/api/v1/claims/{claim['id']}/approve", headers=auth(insurer))
    assert response.status_code == 200


def test_approve_claim_as_non_insurer(client, claim: dict, sink):
    response = client.post(f"/api/v1/claims/{claim['id']}/approve", headers=auth(OTHER))
    assert response.status_code == 403
    assert response.json()["code"] == "UNAUTHORIZED"

    current = client.get(f"/api/v1/claims/{claim['id']}", headers=auth(HOLDER)).json()
    assert current["status"] == "SUBMITTED"
    assert "ClaimApproved" not in sink.kinds()


def test_claimant_cannot_approve_own_claim(client, claim: dict):
    response = client.post(f"/api/v1/claims/{claim['id']}/approve", headers=auth(HOLDER))
    assert response.status_code == 403


def test_reject_claim_as_non_insurer(client, claim: dict):
    response = client.post(f"/api/v1/claims/{claim['id']}/reject", headers=auth(ADMIN))
    assert response.status_code == 403


def test_approve_unknown_claim(client, insurer: str):
    response = client.post("/api/v1/claims/12/approve", headers=auth(insurer))
    assert response.status_code == 404


def test_unauthorized_checked_before_existence(client):
    response = client.post("/api/v1/claims/12/approve", headers=auth(OTHER))
    assert response.status_code == 403


def test_service_approve_then_reject_exclusive(db: Session, insurer: str, claim: dict, clock, events):
    approve_claim(db, insurer, claim["id"], clock=clock, events=events)
    with pytest.raises(InvalidStateError):
        reject_claim(db, insurer, claim["id"], clock=clock, events=events)
    assert get_claim_by_id(db, claim["id"]).status == "APPROVED"


def test_service_non_insurer_rejected(db: Session, claim: dict, clock, events):
    with pytest.raises(UnauthorizedError):
        approve_claim(db, OTHER, claim["id"], clock=clock, events=events)


# ============================================================================
# READ TESTS
# ============================================================================


def test_get_claim_visibility(client, insurer: str, claim: dict):
    assert client.get("/api/v1/claims/1", headers=auth(HOLDER)).status_code == 200
    assert client.get("/api/v1/claims/1", headers=auth(insurer)).status_code == 200
    assert client.get("/api/v1/claims/1", headers=auth(ADMIN)).status_code == 200
    assert client.get("/api/v1/claims/1", headers=auth(OTHER)).status_code == 403


def test_get_claim_not_found(client, insurer: str):
    assert client.get("/api/v1/claims/3", headers=auth(insurer)).status_code == 404


def test_list_claims_for_policy(client, insurer: str, policy: dict):
    _submit(client, policy["id"], amount=100)
    _submit(client, policy["id"], amount=200)
    client.post("/api/v1/claims/2/approve", headers=auth(insurer))

    response = client.get(f"/api/v1/policies/{policy['id']}/claims", headers=auth(HOLDER))
    assert response.status_code == 200
    assert [c["claim_amount"] for c in response.json()] == [100, 200]

    approved = client.get(
        f"/api/v1/policies/{policy['id']}/claims",
        params={"status": "APPROVED"},
        headers=auth(insurer),
    ).json()
    assert [c["id"] for c in approved] == [2]


def test_list_claims_for_policy_forbidden_to_others(client, policy: dict):
    response = client.get(f"/api/v1/policies/{policy['id']}/claims", headers=auth(OTHER))
    assert response.status_code == 403
