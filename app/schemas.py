# app/schemas.py
# Role: Request body models (the validation layer).
#       FastAPI validates incoming JSON against these before a handler runs;
#       failures become ERR_VALIDATION envelopes with field-level context.

import datetime as dt
from decimal import Decimal
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, HttpUrl

Kind = Literal["income", "expense"]
Permission = Literal["read", "write"]


class PartialModel(BaseModel):
    def changes(self) -> Dict[str, Any]:
        """Fields the client actually sent, without explicit nulls."""
        data = self.model_dump(exclude_unset=True, exclude_none=True)
        for key, value in data.items():
            if key.endswith("_url"):
                data[key] = str(value)
        return data


# ---- Auth ----

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)
    master_account_id: Optional[str] = None


# ---- Users ----

class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    full_name: Optional[str] = None
    permission: Permission = "read"
    photo_url: Optional[HttpUrl] = None


class UserUpdate(PartialModel):
    full_name: Optional[str] = None
    permission: Optional[Permission] = None
    photo_url: Optional[HttpUrl] = None
    is_active: Optional[bool] = None


# ---- Accounts ----

class AccountCreate(BaseModel):
    name: str = Field(min_length=1)
    balance: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    type: str = "cash"
    color: str = "#3B82F6"
    icon: str = "Wallet"


class AccountUpdate(PartialModel):
    name: Optional[str] = Field(default=None, min_length=1)
    balance: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    type: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    is_active: Optional[bool] = None


# ---- Categories ----

class CategoryCreate(BaseModel):
    name: str = Field(min_length=1)
    kind: Kind
    icon: str = "Tag"
    color: str = "blue"


class CategoryUpdate(PartialModel):
    name: Optional[str] = Field(default=None, min_length=1)
    kind: Optional[Kind] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    is_active: Optional[bool] = None


# ---- Transactions ----

class TransactionCreate(BaseModel):
    kind: Kind
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    category_id: str = Field(min_length=1)
    account_id: str = Field(min_length=1)
    date: dt.date
    notes: Optional[str] = None
    receipt_url: Optional[HttpUrl] = None


class TransactionUpdate(PartialModel):
    kind: Optional[Kind] = None
    amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    category_id: Optional[str] = Field(default=None, min_length=1)
    account_id: Optional[str] = Field(default=None, min_length=1)
    date: Optional[dt.date] = None
    notes: Optional[str] = None
    receipt_url: Optional[HttpUrl] = None
