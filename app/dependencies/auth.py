from datetime import datetime, timedelta, timezone
from uuid import UUID
from fastapi import Request
from jose import jwt, JWTError
from pydantic import BaseModel, ConfigDict
from structlog import get_logger
from app.config import settings
from app.exceptions import AuthError

logger = get_logger()

NO_TOKEN_MSG = "Not authorized. No token provided"
INVALID_TOKEN_MSG = "Wrong or expired token"

class Identity(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID

def create_access_token(user_id: UUID | str, secret: str, algorithm: str = "HS256", expires_minutes: int | None = None) -> str:
    payload = {"id": str(user_id)}
    if expires_minutes is not None:
        payload["exp"] = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    return jwt.encode(payload, secret, algorithm=algorithm)

class TokenVerifier:
    """FastAPI dependency that gates a route on a signed bearer token.

    The shared secret is passed in at construction. On success the decoded
    identity is stored on ``request.state.user`` and returned; otherwise an
    AuthError (403) short-circuits the request before the route body runs.
    """

    def __init__(self, secret: str, algorithms: list[str] | None = None):
        self.secret = secret
        self.algorithms = algorithms or ["HS256"]

    def verify(self, token: str) -> Identity:
        try:
            payload = jwt.decode(token, self.secret, algorithms=self.algorithms)
        except JWTError as e:
            raise AuthError(INVALID_TOKEN_MSG, reason=str(e))
        raw_id = payload.get("id") if isinstance(payload, dict) else None
        if raw_id is None:
            raise AuthError(INVALID_TOKEN_MSG, reason="Token payload has no id")
        try:
            return Identity(id=UUID(str(raw_id)))
        except ValueError:
            raise AuthError(INVALID_TOKEN_MSG, reason="Token id is not a valid identifier")

    async def __call__(self, request: Request) -> Identity:
        auth_header = request.headers.get("Authorization")
        if not auth_header or not auth_header.startswith("Bearer "):
            logger.warning("Rejected request without bearer token", path=request.url.path)
            raise AuthError(NO_TOKEN_MSG)
        token = auth_header.split(" ", 1)[1].strip()
        try:
            identity = self.verify(token)
        except AuthError as e:
            logger.warning("Rejected bearer token", path=request.url.path, error=e.reason)
            raise
        request.state.user = identity
        return identity

verify_token = TokenVerifier(settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
