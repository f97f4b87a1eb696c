"""
Expense Lifecycle Model
Status state machine, edit/delete eligibility and role-scoped partitions

Shared by the expense service (authoritative checks) and the API clients
(advisory checks before a request is sent).
"""

import enum
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Tuple, Union

from expense_manager.exceptions import (
    CommentRequiredError,
    InvalidAmountError,
    InvalidTransitionError,
)


class UserRole(str, enum.Enum):
    """Acting roles"""
    EMPLOYEE = "EMPLOYEE"
    MANAGER = "MANAGER"
    FINANCE = "FINANCE"


class ExpenseStatus(str, enum.Enum):
    """Expense request status"""
    PENDING_MANAGER = "PENDING_MANAGER"
    APPROVED_MANAGER = "APPROVED_MANAGER"
    REJECTED_MANAGER = "REJECTED_MANAGER"
    PENDING_FINANCE = "PENDING_FINANCE"
    REJECTED_FINANCE = "REJECTED_FINANCE"
    PAID = "PAID"


class WorkflowAction(str, enum.Enum):
    """Actions that move an expense through the workflow"""
    APPROVE = "approve"
    REJECT = "reject"
    EDIT = "edit"


class NotificationType(str, enum.Enum):
    """Notification types"""
    # Manager notifications
    NEW_EXPENSE_SUBMITTED = "NEW_EXPENSE_SUBMITTED"
    # Employee notifications
    EXPENSE_APPROVED_BY_MANAGER = "EXPENSE_APPROVED_BY_MANAGER"
    EXPENSE_REJECTED_BY_MANAGER = "EXPENSE_REJECTED_BY_MANAGER"
    EXPENSE_PAID = "EXPENSE_PAID"
    EXPENSE_REJECTED_BY_FINANCE = "EXPENSE_REJECTED_BY_FINANCE"
    # Finance notifications
    EXPENSE_PENDING_FINANCE_APPROVAL = "EXPENSE_PENDING_FINANCE_APPROVAL"


INITIAL_STATUS = ExpenseStatus.PENDING_MANAGER

EDITABLE_STATUSES: FrozenSet[ExpenseStatus] = frozenset({
    ExpenseStatus.PENDING_MANAGER,
    ExpenseStatus.REJECTED_MANAGER,
    ExpenseStatus.REJECTED_FINANCE,
})

REJECTED_STATUSES: FrozenSet[ExpenseStatus] = frozenset({
    ExpenseStatus.REJECTED_MANAGER,
    ExpenseStatus.REJECTED_FINANCE,
})

TERMINAL_STATUSES: FrozenSet[ExpenseStatus] = REJECTED_STATUSES | {ExpenseStatus.PAID}

# APPROVED_MANAGER is never stored; it reads as PENDING_FINANCE
POST_MANAGER_APPROVAL_STATUSES: FrozenSet[ExpenseStatus] = frozenset({
    ExpenseStatus.APPROVED_MANAGER,
    ExpenseStatus.PENDING_FINANCE,
})

TRANSITIONS: Dict[Tuple[ExpenseStatus, UserRole, WorkflowAction], ExpenseStatus] = {
    (ExpenseStatus.PENDING_MANAGER, UserRole.MANAGER, WorkflowAction.APPROVE): ExpenseStatus.PENDING_FINANCE,
    (ExpenseStatus.PENDING_MANAGER, UserRole.MANAGER, WorkflowAction.REJECT): ExpenseStatus.REJECTED_MANAGER,
    (ExpenseStatus.PENDING_FINANCE, UserRole.FINANCE, WorkflowAction.APPROVE): ExpenseStatus.PAID,
    (ExpenseStatus.PENDING_FINANCE, UserRole.FINANCE, WorkflowAction.REJECT): ExpenseStatus.REJECTED_FINANCE,
    # Editing keeps a pending expense pending and resubmits a rejected one
    (ExpenseStatus.PENDING_MANAGER, UserRole.EMPLOYEE, WorkflowAction.EDIT): ExpenseStatus.PENDING_MANAGER,
    (ExpenseStatus.REJECTED_MANAGER, UserRole.EMPLOYEE, WorkflowAction.EDIT): ExpenseStatus.PENDING_MANAGER,
    (ExpenseStatus.REJECTED_FINANCE, UserRole.EMPLOYEE, WorkflowAction.EDIT): ExpenseStatus.PENDING_MANAGER,
}

STATUS_LABELS: Dict[ExpenseStatus, str] = {
    ExpenseStatus.PENDING_MANAGER: "Pending Manager Review",
    ExpenseStatus.REJECTED_MANAGER: "Rejected by Manager",
    ExpenseStatus.APPROVED_MANAGER: "Approved by Manager",
    ExpenseStatus.PENDING_FINANCE: "Pending Finance Review",
    ExpenseStatus.REJECTED_FINANCE: "Rejected by Finance",
    ExpenseStatus.PAID: "Paid",
}

ALL_STATUSES: FrozenSet[ExpenseStatus] = frozenset(ExpenseStatus)

# Dashboard tabs per role; badge counts are the cardinality of each partition
PARTITIONS: Dict[UserRole, Dict[str, FrozenSet[ExpenseStatus]]] = {
    UserRole.EMPLOYEE: {
        "my_expenses": ALL_STATUSES,
        "pending": frozenset({ExpenseStatus.PENDING_MANAGER}),
        "rejected": REJECTED_STATUSES,
        "approved": POST_MANAGER_APPROVAL_STATUSES,
        "paid": frozenset({ExpenseStatus.PAID}),
    },
    UserRole.MANAGER: {
        "pending_review": frozenset({ExpenseStatus.PENDING_MANAGER}),
        "approved": POST_MANAGER_APPROVAL_STATUSES | {ExpenseStatus.PAID},
        "history": POST_MANAGER_APPROVAL_STATUSES | TERMINAL_STATUSES,
    },
    UserRole.FINANCE: {
        "to_pay": frozenset({ExpenseStatus.PENDING_FINANCE}),
        "paid": frozenset({ExpenseStatus.PAID}),
        "history": frozenset({
            ExpenseStatus.PENDING_FINANCE,
            ExpenseStatus.PAID,
            ExpenseStatus.REJECTED_FINANCE,
        }),
    },
}

CENT = Decimal("0.01")
# Numeric(12, 2): ten integer digits
MAX_AMOUNT = Decimal("10000000000")

StatusLike = Union[ExpenseStatus, str]
RoleLike = Union[UserRole, str]


def coerce_status(value: StatusLike) -> ExpenseStatus:
    """
    Convert a wire value into an ExpenseStatus

    Raises:
        ValueError: If the value is not a known status
    """
    if isinstance(value, ExpenseStatus):
        return value
    return ExpenseStatus(str(value).strip().upper())


def coerce_role(value: RoleLike) -> UserRole:
    """Convert a role name (any case) into a UserRole"""
    if isinstance(value, UserRole):
        return value
    return UserRole(str(value).strip().upper())


def normalize_status(status: StatusLike) -> ExpenseStatus:
    """Collapse APPROVED_MANAGER onto PENDING_FINANCE"""
    status = coerce_status(status)
    if status == ExpenseStatus.APPROVED_MANAGER:
        return ExpenseStatus.PENDING_FINANCE
    return status


def can_transition(current: StatusLike, role: RoleLike, action: Union[WorkflowAction, str]) -> bool:
    key = (normalize_status(current), coerce_role(role), WorkflowAction(action))
    return key in TRANSITIONS


def next_status(current: StatusLike, role: RoleLike, action: Union[WorkflowAction, str]) -> ExpenseStatus:
    """
    Resolve the status an expense moves to

    Args:
        current: Current expense status
        role: Role of the acting user
        action: approve, reject or edit

    Returns:
        ExpenseStatus: Status after the action

    Raises:
        InvalidTransitionError: If the action is not allowed from this status for this role
    """
    status = normalize_status(current)
    role = coerce_role(role)
    action = WorkflowAction(action)

    try:
        return TRANSITIONS[(status, role, action)]
    except KeyError:
        raise InvalidTransitionError(status.value, role.value, action.value, _transition_hint(status, role, action))


def _transition_hint(status: ExpenseStatus, role: UserRole, action: WorkflowAction) -> str:
    required = sorted(
        from_status.value
        for (from_status, by_role, by_action) in TRANSITIONS
        if by_role == role and by_action == action
    )
    if not required:
        return f"Role {role.value} cannot {action.value} expenses"
    past_tense = {
        WorkflowAction.APPROVE: "approved",
        WorkflowAction.REJECT: "rejected",
        WorkflowAction.EDIT: "edited",
    }
    return (
        f"Only expenses with {' or '.join(required)} status can be "
        f"{past_tense[action]} by {role.value.lower()}"
    )


def can_edit(status: StatusLike) -> bool:
    """Owner may edit only while pending manager review or after a rejection"""
    return coerce_status(status) in EDITABLE_STATUSES


def can_delete(status: StatusLike) -> bool:
    """Owner may delete only while pending manager review or after a rejection"""
    return coerce_status(status) in EDITABLE_STATUSES


def is_terminal(status: StatusLike) -> bool:
    return coerce_status(status) in TERMINAL_STATUSES


def is_rejected(status: StatusLike) -> bool:
    return coerce_status(status) in REJECTED_STATUSES


def status_label(status: StatusLike) -> str:
    """Human readable label for a status; unknown values are returned unchanged"""
    try:
        return STATUS_LABELS[coerce_status(status)]
    except ValueError:
        return str(status)


def partition_statuses(role: RoleLike, name: str) -> FrozenSet[ExpenseStatus]:
    """
    Statuses belonging to one dashboard partition

    Raises:
        ValueError: If the role has no partition with that name
    """
    partitions = PARTITIONS[coerce_role(role)]
    if name not in partitions:
        raise ValueError(f"Unknown partition '{name}' for role {coerce_role(role).value}")
    return partitions[name]


def in_partition(status: StatusLike, role: RoleLike, name: str) -> bool:
    return coerce_status(status) in partition_statuses(role, name)


def _status_of(item: Any) -> Any:
    if isinstance(item, dict):
        return item["status"]
    return item.status


def partition(
    expenses: Iterable[Any],
    role: RoleLike,
    key: Callable[[Any], StatusLike] = _status_of,
) -> Dict[str, List[Any]]:
    """
    Split expenses into the role's dashboard partitions

    An expense lands in every partition whose status set contains its status,
    so overlapping views (e.g. "history") repeat items from the narrower tabs.

    Args:
        expenses: Objects with a ``status`` attribute, or dicts with a "status" key
        role: Role whose partitions to apply
        key: Extracts the status from an item

    Returns:
        Dict mapping partition name to the matching expenses, in input order
    """
    partitions = PARTITIONS[coerce_role(role)]
    result: Dict[str, List[Any]] = {name: [] for name in partitions}
    for expense in expenses:
        status = coerce_status(key(expense))
        for name, statuses in partitions.items():
            if status in statuses:
                result[name].append(expense)
    return result


def partition_counts(
    expenses: Iterable[Any],
    role: RoleLike,
    key: Callable[[Any], StatusLike] = _status_of,
) -> Dict[str, int]:
    """Badge counts per partition"""
    return {name: len(items) for name, items in partition(expenses, role, key).items()}


def validate_rejection_comment(comment: Any) -> str:
    """
    Ensure a rejection carries a reason

    Returns:
        str: The comment with surrounding whitespace removed

    Raises:
        CommentRequiredError: If the comment is missing, empty or whitespace-only
    """
    if comment is None or not str(comment).strip():
        raise CommentRequiredError()
    return str(comment).strip()


def validate_amount(value: Any) -> Decimal:
    """
    Parse a currency amount with cent precision

    Returns:
        Decimal: Amount quantized to two decimal places

    Raises:
        InvalidAmountError: If the amount is missing, not a number, not positive,
            too large to store or has more than two decimal places
    """
    if value is None or isinstance(value, bool):
        raise InvalidAmountError(value, "a numeric amount is required")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidAmountError(value, "not a number")
    if not amount.is_finite():
        raise InvalidAmountError(value, "not a finite number")
    if amount <= 0:
        raise InvalidAmountError(value, "must be greater than 0")
    if amount >= MAX_AMOUNT:
        raise InvalidAmountError(value, f"must be less than {MAX_AMOUNT}")
    try:
        quantized = amount.quantize(CENT)
    except InvalidOperation:
        raise InvalidAmountError(value, "too many digits")
    if amount != quantized:
        raise InvalidAmountError(value, "at most two decimal places are allowed")
    return quantized
