"""
Token Service

Issues and verifies the two JWTs of a portal session:

- access token: short TTL, signed with JWT_ACCESS_SECRET, sent as a bearer token
- refresh token: long TTL, signed with JWT_REFRESH_SECRET, exchanged for new tokens

Both carry the same claim set (sub, email, role, sid). The refresh token also
carries a jti whose SHA-256 is stored on the session row, which is what makes
rotation and revocation possible.
"""

import hashlib
import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass(frozen=True)
class TokenClaims:
    """Decoded, verified token claims"""

    user_id: UUID
    email: str
    role: str
    session_id: Optional[UUID]
    token_id: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    refresh_token_id: str
    refresh_expires_at: datetime


def hash_token_id(token_id: str) -> str:
    """SHA-256 of a refresh token id, the form stored on the session row"""
    return hashlib.sha256(token_id.encode()).hexdigest()


class TokenService:
    """
    Signs and verifies access/refresh tokens with independent secrets and TTLs.

    Verification failures of any kind (bad signature, expired, malformed,
    wrong token type) return None; the reason is logged for diagnostics only.
    Expiry is checked against wall-clock time without skew tolerance.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_ttl: timedelta,
        refresh_ttl: timedelta,
    ):
        if access_secret == refresh_secret:
            logger.warning("Access and refresh tokens share a signing secret")
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

    @classmethod
    def from_config(cls, config) -> "TokenService":
        return cls(
            access_secret=config.JWT_ACCESS_SECRET,
            refresh_secret=config.JWT_REFRESH_SECRET,
            access_ttl=timedelta(seconds=config.ACCESS_TOKEN_TTL_SECONDS),
            refresh_ttl=timedelta(seconds=config.REFRESH_TOKEN_TTL_SECONDS),
        )

    def issue(self, user, session_id: UUID) -> TokenPair:
        """
        Issue an access/refresh token pair for a user.

        Args:
            user: Principal with id, email and role
            session_id: Session row the refresh token belongs to

        Returns:
            TokenPair; callers persist hash_token_id(refresh_token_id) on the session
        """
        now = datetime.now(UTC)
        role = user.role.value if hasattr(user.role, "value") else user.role
        base_claims = {
            "sub": str(user.id),
            "email": user.email,
            "role": role,
            "sid": str(session_id),
            "iat": now,
        }

        access_token = jwt.encode(
            {
                **base_claims,
                "typ": ACCESS_TOKEN_TYPE,
                "jti": uuid.uuid4().hex,
                "exp": now + self.access_ttl,
            },
            self.access_secret,
            algorithm=ALGORITHM,
        )

        refresh_token_id = uuid.uuid4().hex
        refresh_expires_at = now + self.refresh_ttl
        refresh_token = jwt.encode(
            {
                **base_claims,
                "typ": REFRESH_TOKEN_TYPE,
                "jti": refresh_token_id,
                "exp": refresh_expires_at,
            },
            self.refresh_secret,
            algorithm=ALGORITHM,
        )

        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            refresh_token_id=refresh_token_id,
            refresh_expires_at=refresh_expires_at.replace(tzinfo=None),
        )

    def verify_access(self, token: str) -> Optional[TokenClaims]:
        return self._verify(token, self.access_secret, ACCESS_TOKEN_TYPE)

    def verify_refresh(self, token: str) -> Optional[TokenClaims]:
        return self._verify(token, self.refresh_secret, REFRESH_TOKEN_TYPE)

    def _verify(self, token: str, secret: str, token_type: str) -> Optional[TokenClaims]:
        try:
            payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
        except ExpiredSignatureError:
            logger.info("Rejected %s token: expired", token_type)
            return None
        except JWTError as exc:
            logger.info("Rejected %s token: %s", token_type, exc)
            return None

        if payload.get("typ") != token_type:
            logger.info("Rejected %s token: wrong token type %r", token_type, payload.get("typ"))
            return None

        try:
            sid = payload.get("sid")
            return TokenClaims(
                user_id=UUID(payload["sub"]),
                email=payload["email"],
                role=payload["role"],
                session_id=UUID(sid) if sid else None,
                token_id=payload.get("jti", ""),
                issued_at=datetime.fromtimestamp(payload["iat"], UTC),
                expires_at=datetime.fromtimestamp(payload["exp"], UTC),
            )
        except (KeyError, TypeError, ValueError) as exc:
            logger.info("Rejected %s token: malformed claims (%s)", token_type, exc)
            return None
