"""
Expense Tests
Tests for expense creation, validation, ownership and edit rules
"""

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from expense_manager.models.expense import ExpenseRequest
from expense_manager.models.lifecycle import ExpenseStatus
from expense_manager.models.notification import Notification, NotificationType


def _set_status(db_session, expense_id, status):
    expense = db_session.query(ExpenseRequest).filter(ExpenseRequest.id == expense_id).first()
    expense.status = status
    db_session.commit()


class TestExpenseCreation:
    """Test expense creation and validation"""

    def test_create_expense_success(self, client, employee_headers):
        """Test successful expense creation"""
        response = client.post(
            "/api/expenses",
            json={
                "title": "Lunch",
                "amount": 42.50,
                "description": "Client lunch",
                "receiptUrl": "https://receipts.example.com/1.pdf"
            },
            headers=employee_headers
        )

        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Lunch"
        assert data["amount"] == 42.5
        assert data["status"] == "PENDING_MANAGER"
        assert data["receiptUrl"] == "https://receipts.example.com/1.pdf"
        assert data["employeeName"] == "John Smith"
        assert data["employeeEmail"] == "john.smith@company.com"
        assert data["createdAt"]

    def test_create_notifies_managers(self, create_expense, users, db_session):
        expense = create_expense()

        notifications = db_session.query(Notification).filter(
            Notification.recipient_id == users["manager"]
        ).all()
        assert len(notifications) == 1
        assert notifications[0].type == NotificationType.NEW_EXPENSE_SUBMITTED
        assert notifications[0].expense_id == expense["id"]
        assert "$42.50" in notifications[0].message

    @pytest.mark.parametrize("amount", [0, -10, 12.345, "abc", 1e30, 1e11])
    def test_create_expense_invalid_amount(self, client, employee_headers, amount):
        response = client.post(
            "/api/expenses",
            json={"title": "Taxi", "amount": amount},
            headers=employee_headers
        )
        assert response.status_code == 422
        assert response.json()["message"].startswith("Validation error")

    def test_create_expense_blank_title(self, client, employee_headers):
        response = client.post(
            "/api/expenses",
            json={"title": "   ", "amount": 10},
            headers=employee_headers
        )
        assert response.status_code == 422

    def test_create_expense_unauthenticated(self, client, users):
        response = client.post("/api/expenses", json={"title": "Taxi", "amount": 10})
        assert response.status_code == 401


class TestExpenseQueries:
    """Owned lists and single expense access"""

    def test_my_expenses_newest_first(self, client, create_expense, employee_headers):
        first = create_expense(title="Taxi", amount=15)
        second = create_expense(title="Hotel", amount=230)

        response = client.get("/api/expenses/my-expenses", headers=employee_headers)
        assert response.status_code == 200
        assert [e["id"] for e in response.json()] == [second["id"], first["id"]]

    def test_my_expenses_only_own(self, client, create_expense, other_employee_headers):
        create_expense()
        response = client.get("/api/expenses/my-expenses", headers=other_employee_headers)
        assert response.json() == []

    def test_owned_partitions(self, client, create_expense, employee_headers, db_session):
        pending = create_expense(title="Pending")
        rejected = create_expense(title="Rejected")
        approved = create_expense(title="Approved")
        paid = create_expense(title="Paid")
        _set_status(db_session, rejected["id"], ExpenseStatus.REJECTED_FINANCE)
        _set_status(db_session, approved["id"], ExpenseStatus.PENDING_FINANCE)
        _set_status(db_session, paid["id"], ExpenseStatus.PAID)

        def ids(path):
            return [e["id"] for e in client.get(f"/api/expenses/{path}", headers=employee_headers).json()]

        assert ids("my-pending") == [pending["id"]]
        assert ids("my-rejected") == [rejected["id"]]
        assert ids("my-approved") == [approved["id"]]
        assert ids("my-paid") == [paid["id"]]
        assert len(ids("my-expenses")) == 4

    def test_get_expense_owner(self, client, create_expense, employee_headers):
        expense = create_expense()
        response = client.get(f"/api/expenses/{expense['id']}", headers=employee_headers)
        assert response.status_code == 200
        assert response.json()["id"] == expense["id"]

    def test_get_expense_other_employee_forbidden(self, client, create_expense, other_employee_headers):
        expense = create_expense()
        response = client.get(f"/api/expenses/{expense['id']}", headers=other_employee_headers)
        assert response.status_code == 403

    def test_get_expense_manager_and_finance(self, client, create_expense, manager_headers, finance_headers):
        expense = create_expense()
        assert client.get(f"/api/expenses/{expense['id']}", headers=manager_headers).status_code == 200
        assert client.get(f"/api/expenses/{expense['id']}", headers=finance_headers).status_code == 200

    def test_get_expense_not_found(self, client, employee_headers):
        response = client.get("/api/expenses/9999", headers=employee_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Expense not found"


class TestExpenseEditing:
    """Edit and delete are allowed only while pending or rejected"""

    def test_update_pending_expense(self, client, create_expense, employee_headers):
        expense = create_expense()
        response = client.put(
            f"/api/expenses/{expense['id']}",
            json={"title": "Team lunch", "amount": "55.10"},
            headers=employee_headers
        )
        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Team lunch"
        assert data["amount"] == 55.1
        assert data["status"] == "PENDING_MANAGER"

    @pytest.mark.parametrize("rejected_status", [ExpenseStatus.REJECTED_MANAGER, ExpenseStatus.REJECTED_FINANCE])
    def test_update_rejected_expense_resubmits(
        self, client, create_expense, employee_headers, db_session, rejected_status
    ):
        expense = create_expense()
        _set_status(db_session, expense["id"], rejected_status)

        response = client.put(
            f"/api/expenses/{expense['id']}",
            json={"title": "Lunch", "amount": 42.50, "receiptUrl": "https://receipts.example.com/2.pdf"},
            headers=employee_headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "PENDING_MANAGER"

    @pytest.mark.parametrize("locked_status", [ExpenseStatus.PENDING_FINANCE, ExpenseStatus.PAID])
    def test_update_locked_expense(self, client, create_expense, employee_headers, db_session, locked_status):
        expense = create_expense()
        _set_status(db_session, expense["id"], locked_status)

        response = client.put(
            f"/api/expenses/{expense['id']}",
            json={"title": "Lunch", "amount": 1000},
            headers=employee_headers
        )
        assert response.status_code == 400
        assert response.json()["code"] == "EXPENSE_NOT_EDITABLE"

    def test_update_other_employee_forbidden(self, client, create_expense, other_employee_headers):
        expense = create_expense()
        response = client.put(
            f"/api/expenses/{expense['id']}",
            json={"title": "Mine now", "amount": 1},
            headers=other_employee_headers
        )
        assert response.status_code == 403

    def test_delete_pending_expense(self, client, create_expense, employee_headers):
        expense = create_expense()
        response = client.delete(f"/api/expenses/{expense['id']}", headers=employee_headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Expense deleted successfully"

        assert client.get(f"/api/expenses/{expense['id']}", headers=employee_headers).status_code == 404

    def test_delete_paid_expense(self, client, create_expense, employee_headers, db_session):
        expense = create_expense()
        _set_status(db_session, expense["id"], ExpenseStatus.PAID)

        response = client.delete(f"/api/expenses/{expense['id']}", headers=employee_headers)
        assert response.status_code == 400

    def test_delete_other_employee_forbidden(self, client, create_expense, other_employee_headers):
        expense = create_expense()
        response = client.delete(f"/api/expenses/{expense['id']}", headers=other_employee_headers)
        assert response.status_code == 403


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
