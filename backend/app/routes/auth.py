"""Token issuance route."""

from fastapi import APIRouter, Depends

from app.auth import TokenService, get_token_service
from app.schemas.api import ErrorResponse, TokenResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/token", response_model=TokenResponse, responses={500: {"model": ErrorResponse}})
async def issue_token(
    token_service: TokenService = Depends(get_token_service),
) -> TokenResponse:
    """Issue a bearer token for the configured client."""
    return TokenResponse(token=token_service.issue_token())
