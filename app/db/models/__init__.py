from app.db.models.registry import Registry, Insurer
from app.db.models.id_sequence import IdSequence
from app.db.models.policy import Policy
from app.db.models.claim import Claim
from app.db.models.payout_attempt import PayoutAttempt

__all__ = ["Registry", "Insurer", "IdSequence", "Policy", "Claim", "PayoutAttempt"]
