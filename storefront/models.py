# storefront/models.py
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductIn(BaseModel):
    """Canonical product creation payload, whichever encoding it arrived in."""

    model_config = ConfigDict(extra="ignore")

    name: str
    category: str = ""
    subcategory: str = ""
    price: float = Field(ge=0, allow_inf_nan=False)
    unit: str = "kg"
    description: str = ""
    image: str = ""
    stock: int = Field(ge=0)


class ProductPatch(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    unit: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    stock: Optional[int] = Field(default=None, ge=0)


class SignupIn(BaseModel):
    email: str
    password: str
    name: str = ""
    role: Optional[str] = None
