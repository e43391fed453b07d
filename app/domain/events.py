"""Lifecycle events published after a committed state change."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, ClassVar


@dataclass(frozen=True, slots=True)
class PolicyIssued:
    kind: ClassVar[str] = "PolicyIssued"

    policy_id: int
    policyholder: str

    def payload(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class PremiumPaid:
    kind: ClassVar[str] = "PremiumPaid"

    policy_id: int
    payer: str
    amount: int

    def payload(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class ClaimSubmitted:
    kind: ClassVar[str] = "ClaimSubmitted"

    claim_id: int
    policy_id: int
    claimant: str

    def payload(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class ClaimApproved:
    kind: ClassVar[str] = "ClaimApproved"

    claim_id: int
    policy_id: int
    claimant: str
    claim_amount: int

    def payload(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class ClaimRejected:
    kind: ClassVar[str] = "ClaimRejected"

    claim_id: int
    policy_id: int
    claimant: str

    def payload(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class ClaimPaid:
    kind: ClassVar[str] = "ClaimPaid"

    claim_id: int
    policy_id: int
    claimant: str
    claim_amount: int

    def payload(self) -> dict[str, Any]:
        return asdict(self)


LifecycleEvent = (
    PolicyIssued | PremiumPaid | ClaimSubmitted | ClaimApproved | ClaimRejected | ClaimPaid
)
