# app/core/auth.py
from fastapi import Depends, Header, HTTPException, status
from sqlmodel import Session

from app.database import get_session
from app.models.user import User
from app.repositories.user_repo import UserRepository

user_repo = UserRepository()


def get_current_user(
    x_user_id: int | None = Header(default=None),
    session: Session = Depends(get_session),
) -> User | None:
    """
    Resolve the caller from the `X-User-Id` header.

    Credentials are verified upstream (gateway / login service); this only
    looks the id up.

    Returns:
        User instance if the header is present and known, else None for
        guests.

    Raises:
        HTTPException(404): if the header names an unknown user.
    """
    if x_user_id is None:
        return None  # guest mode

    user = user_repo.get_by_id(session, x_user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user


def require_user(user: User | None = Depends(get_current_user)) -> User:
    """
    Enforce that the caller is a known, active customer.

    Guests may browse and fill a cart; checkout needs this dependency.

    Raises:
        HTTPException(401): if no user header was sent.
        HTTPException(403): if the account is inactive.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Id header required",
        )
    if not user.active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive",
        )
    return user
