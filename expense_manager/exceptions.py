"""
Exception Hierarchy
Typed errors shared by the expense service and the API clients

    ExpenseWorkflowError (base)
    |
    +-- InvalidTransitionError     status/role/action not allowed
    +-- CommentRequiredError       rejection without a comment
    +-- InvalidAmountError         amount missing, non-positive or sub-cent
    +-- ExpenseNotEditableError    edit/delete outside the editable statuses
    +-- ExpenseNotFoundError       unknown expense id
    +-- ExpenseAccessDeniedError   expense owned by someone else
    |
    +-- ExpenseApiError            non-2xx response or transport failure
"""

from typing import Optional


class ExpenseWorkflowError(Exception):
    """Base exception for all expense workflow errors"""

    code: str = "EXPENSE_WORKFLOW_ERROR"


class InvalidTransitionError(ExpenseWorkflowError):
    """Requested action is not legal from the current status for this role"""

    code: str = "INVALID_TRANSITION"

    def __init__(self, current_status: str, role: str, action: str, message: Optional[str] = None):
        self.current_status = current_status
        self.role = role
        self.action = action
        super().__init__(
            message or f"Cannot {action} expense in status {current_status} as {role}"
        )


class CommentRequiredError(ExpenseWorkflowError):
    """A rejection was requested with an empty or whitespace-only comment"""

    code: str = "COMMENT_REQUIRED"

    def __init__(self, message: str = "A comment is required to reject an expense"):
        super().__init__(message)


class InvalidAmountError(ExpenseWorkflowError):
    """Amount is not a positive value with at most two decimal places"""

    code: str = "INVALID_AMOUNT"

    def __init__(self, value, reason: str):
        self.value = value
        super().__init__(f"Invalid amount {value!r}: {reason}")


class ExpenseNotEditableError(ExpenseWorkflowError):
    """Edit or delete attempted on an expense that is no longer editable"""

    code: str = "EXPENSE_NOT_EDITABLE"

    def __init__(self, expense_id: int, current_status: str):
        self.expense_id = expense_id
        self.current_status = current_status
        super().__init__(
            f"Expense {expense_id} is {current_status}; only pending or rejected expenses can be changed"
        )


class ExpenseNotFoundError(ExpenseWorkflowError):
    """No expense with the requested id"""

    code: str = "EXPENSE_NOT_FOUND"

    def __init__(self, expense_id: int):
        self.expense_id = expense_id
        super().__init__("Expense not found")


class ExpenseAccessDeniedError(ExpenseWorkflowError):
    """Acting user may not see or change this expense"""

    code: str = "ACCESS_DENIED"

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class ExpenseApiError(ExpenseWorkflowError):
    """Remote expense service returned a failure (or could not be reached)"""

    code: str = "EXPENSE_API_ERROR"

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)
