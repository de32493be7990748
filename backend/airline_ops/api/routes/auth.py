import logging
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from airline_ops.core.security import create_access_token, get_password_hash, verify_password
from airline_ops.db.session import get_db
from airline_ops.models.customer import Customer
from airline_ops.models.user import User
from airline_ops.schemas.auth import Token, UserRegister, UserOut, UserLogin
from airline_ops.services.access_control import Role, parse_role

router = APIRouter()
logger = logging.getLogger(__name__)


def _authenticate(db: Session, username: str, password: str) -> str:
    """Return a token for valid credentials. 401 for unknown user or bad password, 403 if blocked."""
    username = username.strip()
    user = db.query(User).filter(User.username == username).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User is blocked")
    if not verify_password(password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect credentials")
    return create_access_token(subject=user.username, role=user.role)

@router.post("/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    access_token = _authenticate(db, form_data.username, form_data.password)
    return {"access_token": access_token, "token_type": "bearer"}

@router.post("/login-json", response_model=Token)
def login_json(payload: UserLogin, db: Session = Depends(get_db)):
    """JSON login, same behaviour as /login."""
    access_token = _authenticate(db, payload.username, payload.password)
    return {"access_token": access_token, "token_type": "bearer"}

@router.post("/register", response_model=UserOut)
def register(payload: UserRegister, db: Session = Depends(get_db)):
    """Create an account with exactly one fixed role.

    Customer accounts also get a customer record that reservations are booked against.
    """
    role = parse_role(payload.role)
    username = payload.username.strip()
    existing = db.query(User).filter(User.username == username).first()
    if existing:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already taken")
    customer_id = None
    if role is Role.CUSTOMER:
        customer = Customer(first_name=payload.first_name or username, last_name=payload.last_name or "")
        db.add(customer)
        db.flush()
        customer_id = customer.id
    user = User(
        username=username,
        hashed_password=get_password_hash(payload.password),
        role=role.value,
        customer_id=customer_id,
        is_active=True,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already taken")
    db.refresh(user)
    logger.info("Registered %s as %s", user.username, user.role)
    return {"id": user.id, "username": user.username, "role": user.role, "customer_id": user.customer_id, "is_active": user.is_active}
