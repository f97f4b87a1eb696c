"""
Expense Schemas - Pydantic V2
Wire format is camelCase; snake_case names are accepted on input as well
"""

from pydantic import BaseModel, Field, field_validator, field_serializer
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime
from decimal import Decimal

from expense_manager.exceptions import InvalidAmountError
from expense_manager.models.lifecycle import (
    CENT,
    ExpenseStatus,
    can_delete,
    can_edit,
    status_label,
    validate_amount,
)


class ExpenseBase(BaseModel):
    """Base expense schema"""
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    amount: Decimal
    receipt_url: Optional[str] = Field(None, max_length=500)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be blank")
        return value.strip()

    @field_validator("amount", mode="before")
    @classmethod
    def amount_in_cents(cls, value):
        """Amount must be > 0 with at most two decimal places"""
        try:
            return validate_amount(value)
        except InvalidAmountError as e:
            raise ValueError(str(e))

    @field_serializer("amount")
    def serialize_amount(self, amount: Decimal) -> float:
        return float(amount)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ExpenseCreate(ExpenseBase):
    """Schema for creating a new expense"""
    pass


class ExpenseUpdate(ExpenseBase):
    """Schema for updating a pending or rejected expense (full replacement)"""
    pass


class ExpenseResponse(BaseModel):
    """Schema for expense response"""
    id: int
    title: str
    description: Optional[str] = None
    amount: Decimal
    receipt_url: Optional[str] = None
    status: ExpenseStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    employee_name: Optional[str] = None
    employee_email: Optional[str] = None

    @field_validator("amount")
    @classmethod
    def quantize_amount(cls, value: Decimal) -> Decimal:
        return value.quantize(CENT)

    @field_serializer("amount")
    def serialize_amount(self, amount: Decimal) -> float:
        return float(amount)

    @property
    def status_label(self) -> str:
        return status_label(self.status)

    @property
    def can_edit(self) -> bool:
        return can_edit(self.status)

    @property
    def can_delete(self) -> bool:
        return can_delete(self.status)

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class MessageResponse(BaseModel):
    """Plain message response"""
    message: str
