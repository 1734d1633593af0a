from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from healthmate.core.errors import AuthRequired
from healthmate.core.security import decode_access_token, oauth2_scheme
from healthmate.db.session import get_db
from healthmate.models.user import User


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    if not token:
        raise AuthRequired("Missing bearer token")

    payload = decode_access_token(token)
    email = payload.get("sub")
    if not email:
        raise AuthRequired("Token has no subject")

    user = db.query(User).filter(User.email == email).first()
    if user is None:
        raise AuthRequired("Token subject does not exist")

    return user
