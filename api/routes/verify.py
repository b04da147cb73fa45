"""
Commit Verification Route

Check a revealed AI score payload against a previously returned
commit-reveal pair.
"""

from fastapi import APIRouter

from api.models.requests import CommitVerifyRequest
from api.models.responses import CommitVerifyResponse
from core.crypto.commit_reveal import CommitRevealPair, compute_reveal_hash, verify
from core.schemas.canonical import ensure_serializable


router = APIRouter(prefix="/api/v1", tags=["verify"])


@router.post("/ai/verify", response_model=CommitVerifyResponse)
def verify_commit(body: CommitVerifyRequest) -> CommitVerifyResponse:
    ensure_serializable(body.payload, "ai_score payload")
    pair = CommitRevealPair(
        nonce=body.nonce,
        reveal_hash=body.reveal_hash,
        commit_hash=body.commit_hash,
    )
    return CommitVerifyResponse(
        valid=verify(pair, body.payload),
        batch_id=body.payload.batch_id,
        reveal_hash=compute_reveal_hash(body.payload),
    )
