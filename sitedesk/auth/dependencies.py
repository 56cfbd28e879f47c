from dataclasses import dataclass
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from sitedesk.auth.clerk import verify_clerk_token
from sitedesk.db.deps import get_session
from sitedesk.db.repositories.users import UsersRepository


bearer_scheme = HTTPBearer(auto_error=False)
logger = logging.getLogger("auth.deps")


@dataclass
class AuthContext:
    # None when the session carries no user; each handler decides how to fail.
    user_id: Optional[str]


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> AuthContext:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")

    claims = verify_clerk_token(credentials.credentials)
    user_id = claims.get("sub")
    if not user_id:
        logger.warning("Session without subject", extra={"claims_keys": list(claims.keys())})
        return AuthContext(user_id=None)

    users_repo = UsersRepository(session)
    if users_repo.get(user_id) is None:
        logger.info("Provisioning user from Clerk session", extra={"sub": user_id})
        users_repo.get_or_create(user_id, name=claims.get("name"), email=claims.get("email"))

    return AuthContext(user_id=user_id)
