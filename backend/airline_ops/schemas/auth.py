from typing import Optional
from pydantic import BaseModel, Field, field_validator

class Token(BaseModel):
    access_token: str
    token_type: str

class UserRegister(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1)
    role: str
    # Used for customer accounts only
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @field_validator("username", mode="before")
    @classmethod
    def _strip_username(cls, v):
        # Validate the stored form, so "   " is rejected rather than saved as ""
        return v.strip() if isinstance(v, str) else v

class UserOut(BaseModel):
    id: int
    username: str
    role: str
    customer_id: Optional[int] = None
    is_active: bool

class UserLogin(BaseModel):
    username: str
    password: str
