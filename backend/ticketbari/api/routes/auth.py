import logging

from fastapi import APIRouter, Depends

from ticketbari.api.deps import get_settings
from ticketbari.core.config import Settings
from ticketbari.core.security import create_access_token
from ticketbari.schemas.auth import Token, TokenRequest

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/jwt", response_model=Token)
def issue_token(payload: TokenRequest, settings: Settings = Depends(get_settings)):
    """Mint an access token for an identity already verified by the sign-in provider."""
    email = payload.email.lower()
    token = create_access_token(settings, email)
    logger.info("Token issued for %s", email)
    return {"token": token}
