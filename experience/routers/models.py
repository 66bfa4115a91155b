"""
Cart API Pydantic Models

Shape and type validation runs here, before the cart store is called.
"""
from typing import Optional
from pydantic import BaseModel, Field, field_validator

# Largest quantity a single request may carry
MAX_QUANTITY = 9999

# Largest unit price a single request may carry
MAX_PRICE = 1_000_000_000


def _reject_non_numeric(v):
    # JSON numbers only; whole floats such as 2.0 still pass the int check
    if isinstance(v, (str, bool)):
        raise ValueError("Quantity must be a number")
    return v


# ==================== CART MODELS ====================

class CreateCartRequest(BaseModel):
    currency: Optional[str] = None

    @field_validator("currency")
    @classmethod
    def currency_not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Currency must be a non-empty string")
        return v


class AddItemRequest(BaseModel):
    sku: str = Field(..., min_length=1, strict=True)
    name: str = Field(..., min_length=1, strict=True)
    price: float = Field(..., gt=0, le=MAX_PRICE, allow_inf_nan=False, strict=True)
    quantity: int = Field(..., ge=1, le=MAX_QUANTITY)

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_is_number(cls, v):
        return _reject_non_numeric(v)


class UpdateQuantityRequest(BaseModel):
    quantity: int = Field(..., ge=1, le=MAX_QUANTITY)

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_is_number(cls, v):
        return _reject_non_numeric(v)
