from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
import jwt

from airline_ops.core.security import decode_access_token
from airline_ops.db.session import get_db
from airline_ops.models.user import User
from airline_ops.services.access_control import Operation, Role, require
from airline_ops.services.allocator import ReservationAllocator
from airline_ops.services.query_surface import QuerySurface

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


@dataclass(frozen=True)
class Principal:
    username: str
    role: Role
    customer_id: Optional[int]


def get_current_principal(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> Principal:
    """Resolve the bearer token to an active user.

    The role comes from the users table, not the token, since it is fixed at account creation.
    """
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    sub = payload.get("sub")
    if not sub:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    user = db.query(User).filter(User.username == sub).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User is blocked")
    principal = Principal(username=user.username, role=Role(user.role), customer_id=user.customer_id)
    # Release the read transaction before the booking unit starts
    db.rollback()
    return principal


def require_operation(operation: Operation):
    def checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        # AccessDenied is mapped to 403 by the app exception handler
        require(principal.role, operation)
        return principal
    return checker


def get_allocator(db: Session = Depends(get_db)) -> ReservationAllocator:
    return ReservationAllocator(QuerySurface(db))
