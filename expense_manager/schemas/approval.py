"""
Approval Schemas
Pydantic models for manager and finance workflow actions
"""

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import date

from expense_manager.config.settings import settings
from expense_manager.exceptions import CommentRequiredError
from expense_manager.models.lifecycle import validate_rejection_comment


def _required_comment(value):
    try:
        return validate_rejection_comment(value)
    except CommentRequiredError as e:
        raise ValueError(str(e))


class ManagerActionRequest(BaseModel):
    """Manager approval; the comment is optional"""
    comment: Optional[str] = Field(None, max_length=settings.COMMENT_MAX_LENGTH)


class ManagerRejectionRequest(BaseModel):
    """Manager rejection; a non-blank comment is required"""
    comment: str = Field(..., max_length=settings.COMMENT_MAX_LENGTH)

    @field_validator("comment", mode="before")
    @classmethod
    def comment_required(cls, value):
        return _required_comment(value)


class FinanceActionRequest(BaseModel):
    """Finance approval with optional payout details"""
    note: Optional[str] = Field(None, max_length=settings.COMMENT_MAX_LENGTH)
    reimbursement_method: Optional[str] = Field(None, max_length=settings.REIMBURSEMENT_METHOD_MAX_LENGTH)
    expected_payout_date: Optional[date] = None

    def payment_reference(self) -> Optional[str]:
        """
        Build the payout reference stored with the approval

        Returns:
            str: "Method: <method> | Expected Payout: <date>", either part omitted
                when not provided, or None when neither is
        """
        parts = []
        if self.reimbursement_method and self.reimbursement_method.strip():
            parts.append(f"Method: {self.reimbursement_method.strip()}")
        if self.expected_payout_date:
            parts.append(f"Expected Payout: {self.expected_payout_date.isoformat()}")
        return " | ".join(parts) if parts else None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class FinanceRejectionRequest(BaseModel):
    """Finance rejection; a non-blank comment is required"""
    comment: str = Field(..., max_length=settings.COMMENT_MAX_LENGTH)

    @field_validator("comment", mode="before")
    @classmethod
    def comment_required(cls, value):
        return _required_comment(value)

