# liftlog/deps/auth.py
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from liftlog.db import get_db
from liftlog.errors import NotAuthenticated, SignInRequired
from liftlog.repositories import Repositories
from liftlog.schemas.auth import CurrentUser
from liftlog.session import get_current_user


def get_optional_user(request: Request) -> Optional[CurrentUser]:
    """
    Usage: pages that tolerate anonymous visitors and show empty data instead.
    Resolved fresh on every request.
    """
    try:
        return get_current_user(request)
    except NotAuthenticated:
        return None


def require_page_user(user: Optional[CurrentUser] = Depends(get_optional_user)) -> CurrentUser:
    """
    Usage: protected pages; anonymous visitors are redirected to /sign-in.
    """
    if user is None:
        raise SignInRequired()
    return user


def get_repositories(
    db: Session = Depends(get_db),
    user: Optional[CurrentUser] = Depends(get_optional_user),
) -> Repositories:
    # repositories raise NotAuthenticated themselves when a user is required
    return Repositories(db, user)
