"""
Workflow Tests
Manager and finance decisions, queues, audit records and notifications
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from expense_manager.models.approval import Approval, ApprovalDecision, ApprovalLevel
from expense_manager.models.notification import Notification, NotificationType


def _ids(client, path, headers):
    response = client.get(f"/api/expenses/{path}", headers=headers)
    assert response.status_code == 200, response.json()
    return [e["id"] for e in response.json()]


class TestManagerActions:
    """Manager review queue and decisions"""

    def test_pending_queue(self, client, create_expense, manager_headers):
        expense = create_expense()
        assert _ids(client, "pending-manager-approval", manager_headers) == [expense["id"]]
        assert _ids(client, "approved-by-manager", manager_headers) == []

    def test_approve_moves_to_finance(self, client, create_expense, manager_headers, finance_headers):
        expense = create_expense()
        response = client.post(
            f"/api/expenses/{expense['id']}/approve",
            json={"comment": "Looks fine"},
            headers=manager_headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "PENDING_FINANCE"

        assert _ids(client, "pending-manager-approval", manager_headers) == []
        assert _ids(client, "approved-by-manager", manager_headers) == [expense["id"]]
        assert _ids(client, "pending-finance-approval", finance_headers) == [expense["id"]]

    def test_approve_without_body(self, client, create_expense, manager_headers):
        expense = create_expense()
        response = client.post(f"/api/expenses/{expense['id']}/approve", headers=manager_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "PENDING_FINANCE"

    def test_reject_with_missing_receipt(self, client, create_expense, manager_headers, employee_headers):
        expense = create_expense()
        response = client.post(
            f"/api/expenses/{expense['id']}/reject",
            json={"comment": "Missing receipt"},
            headers=manager_headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "REJECTED_MANAGER"

        assert _ids(client, "my-rejected", employee_headers) == [expense["id"]]
        assert expense["id"] in _ids(client, "manager-history", manager_headers)

        # Rejected expenses can be edited again
        response = client.put(
            f"/api/expenses/{expense['id']}",
            json={"title": "Lunch", "amount": 42.50, "receiptUrl": "https://receipts.example.com/lunch.pdf"},
            headers=employee_headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "PENDING_MANAGER"

    @pytest.mark.parametrize("comment", ["", "   "])
    def test_reject_requires_comment(self, client, create_expense, manager_headers, comment):
        expense = create_expense()
        response = client.post(
            f"/api/expenses/{expense['id']}/reject",
            json={"comment": comment},
            headers=manager_headers
        )
        assert response.status_code == 422

        response = client.get(f"/api/expenses/{expense['id']}", headers=manager_headers)
        assert response.json()["status"] == "PENDING_MANAGER"

    def test_approve_twice_is_rejected(self, client, create_expense, manager_headers):
        expense = create_expense()
        client.post(f"/api/expenses/{expense['id']}/approve", headers=manager_headers)

        response = client.post(f"/api/expenses/{expense['id']}/approve", headers=manager_headers)
        assert response.status_code == 400
        assert "PENDING_MANAGER" in response.json()["message"]

    def test_employee_cannot_approve(self, client, create_expense, employee_headers):
        expense = create_expense()
        response = client.post(f"/api/expenses/{expense['id']}/approve", headers=employee_headers)
        assert response.status_code == 403

    def test_finance_cannot_use_manager_queue(self, client, finance_headers):
        response = client.get("/api/expenses/pending-manager-approval", headers=finance_headers)
        assert response.status_code == 403

    def test_approve_unknown_expense(self, client, manager_headers):
        response = client.post("/api/expenses/9999/approve", headers=manager_headers)
        assert response.status_code == 404


class TestFinanceActions:
    """Finance payout queue and decisions"""

    @pytest.fixture
    def approved_expense(self, client, create_expense, manager_headers):
        expense = create_expense()
        client.post(f"/api/expenses/{expense['id']}/approve", headers=manager_headers)
        return expense

    def test_finance_cannot_pay_before_manager(self, client, create_expense, finance_headers):
        expense = create_expense()
        response = client.post(f"/api/expenses/{expense['id']}/finance-approve", headers=finance_headers)
        assert response.status_code == 400
        assert "PENDING_FINANCE" in response.json()["message"]

    def test_finance_approve_records_payout(self, client, approved_expense, finance_headers, db_session):
        response = client.post(
            f"/api/expenses/{approved_expense['id']}/finance-approve",
            json={
                "note": "Paid with March run",
                "reimbursementMethod": "Bank Transfer",
                "expectedPayoutDate": "2026-03-31"
            },
            headers=finance_headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "PAID"

        approval = db_session.query(Approval).filter(
            Approval.expense_id == approved_expense["id"],
            Approval.level == ApprovalLevel.FINANCE
        ).one()
        assert approval.decision == ApprovalDecision.APPROVED
        assert approval.comment == "Paid with March run"
        assert approval.payment_reference == "Method: Bank Transfer | Expected Payout: 2026-03-31"

    def test_finance_reject(self, client, approved_expense, finance_headers, employee_headers):
        response = client.post(
            f"/api/expenses/{approved_expense['id']}/finance-reject",
            json={"comment": "Duplicate claim"},
            headers=finance_headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "REJECTED_FINANCE"

        assert _ids(client, "finance-history", finance_headers) == [approved_expense["id"]]
        assert _ids(client, "my-rejected", employee_headers) == [approved_expense["id"]]

    def test_finance_reject_requires_comment(self, client, approved_expense, finance_headers):
        response = client.post(
            f"/api/expenses/{approved_expense['id']}/finance-reject",
            json={"comment": " "},
            headers=finance_headers
        )
        assert response.status_code == 422

    def test_manager_cannot_pay(self, client, approved_expense, manager_headers):
        response = client.post(
            f"/api/expenses/{approved_expense['id']}/finance-approve",
            headers=manager_headers
        )
        assert response.status_code == 403


class TestRoundTrip:
    """Lunch for 42.50 from submission to payout"""

    def test_submit_approve_pay(
        self, client, create_expense, employee_headers, manager_headers, finance_headers, users, db_session
    ):
        expense = create_expense(title="Lunch", amount=42.50)
        assert expense["status"] == "PENDING_MANAGER"

        client.post(f"/api/expenses/{expense['id']}/approve", headers=manager_headers)
        assert _ids(client, "pending-finance-approval", finance_headers) == [expense["id"]]
        assert _ids(client, "my-approved", employee_headers) == [expense["id"]]

        response = client.post(
            f"/api/expenses/{expense['id']}/finance-approve",
            json={"reimbursementMethod": "Bank Transfer"},
            headers=finance_headers
        )
        assert response.json()["status"] == "PAID"
        assert response.json()["amount"] == 42.5

        assert _ids(client, "approved-by-finance", finance_headers) == [expense["id"]]
        assert _ids(client, "my-paid", employee_headers) == [expense["id"]]
        assert _ids(client, "pending-finance-approval", finance_headers) == []
        assert expense["id"] in _ids(client, "approved-by-manager", manager_headers)

        approvals = db_session.query(Approval).filter(Approval.expense_id == expense["id"]).order_by(Approval.id).all()
        assert [a.level for a in approvals] == [ApprovalLevel.MANAGER, ApprovalLevel.FINANCE]

        employee_types = [
            n.type for n in db_session.query(Notification).filter(
                Notification.recipient_id == users["employee"]
            ).order_by(Notification.id)
        ]
        assert employee_types == [
            NotificationType.EXPENSE_APPROVED_BY_MANAGER,
            NotificationType.EXPENSE_PAID,
        ]


class TestNotificationEndpoints:
    """Listing and acknowledging notifications"""

    def test_list_and_mark_read(self, client, create_expense, manager_headers):
        expense = create_expense()

        response = client.get("/api/notifications", headers=manager_headers)
        assert response.status_code == 200
        notifications = response.json()
        assert len(notifications) == 1
        assert notifications[0]["type"] == "NEW_EXPENSE_SUBMITTED"
        assert notifications[0]["expenseId"] == expense["id"]
        assert notifications[0]["triggeredByName"] == "John Smith"
        assert notifications[0]["isRead"] is False

        assert client.get("/api/notifications/unread/count", headers=manager_headers).json() == {"unreadCount": 1}

        response = client.put(f"/api/notifications/{notifications[0]['id']}/read", headers=manager_headers)
        assert response.status_code == 200
        assert response.json()["isRead"] is True
        assert response.json()["readAt"] is not None

        assert client.get("/api/notifications/unread/count", headers=manager_headers).json() == {"unreadCount": 0}
        assert client.get("/api/notifications?unread_only=true", headers=manager_headers).json() == []

    def test_mark_all_read(self, client, create_expense, manager_headers):
        create_expense(title="Taxi", amount=12)
        create_expense(title="Hotel", amount=180)

        response = client.put("/api/notifications/read-all", headers=manager_headers)
        assert response.status_code == 200
        assert response.json()["count"] == 2
        assert client.get("/api/notifications/unread/count", headers=manager_headers).json()["unreadCount"] == 0

    def test_cannot_read_someone_elses_notification(self, client, create_expense, manager_headers, employee_headers):
        create_expense()
        notification_id = client.get("/api/notifications", headers=manager_headers).json()[0]["id"]

        response = client.put(f"/api/notifications/{notification_id}/read", headers=employee_headers)
        assert response.status_code == 404


class TestServiceEndpoints:
    """Health and root"""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["database"] == "ok"

    def test_unknown_route_uses_error_envelope(self, client):
        response = client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Not Found"}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
