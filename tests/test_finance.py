"""
Tests for fees, expenses and the finance summary
"""
from finance import summarize


class TestFees:
    """Test membership fee recording"""

    def test_record_fee_notifies_member(self, client, db, admin_headers, member_user):
        response = client.post('/api/fees', headers=admin_headers, json={
            'user_id': member_user['id'], 'amount': 200, 'month': 10, 'year': 2024, 'payment_method': 'bkash'})
        assert response.status_code == 201
        assert response.json()['status'] == 'paid'
        assert db['notification'].count_documents({'user_id': member_user['id']}) == 1

    def test_fee_for_unknown_user(self, client, admin_headers):
        response = client.post('/api/fees', headers=admin_headers, json={
            'user_id': '0' * 24, 'amount': 200, 'month': 1, 'year': 2024, 'payment_method': 'cash'})
        assert response.status_code == 404

    def test_invalid_month_rejected(self, client, admin_headers, member_user):
        response = client.post('/api/fees', headers=admin_headers, json={
            'user_id': member_user['id'], 'amount': 200, 'month': 13, 'year': 2024, 'payment_method': 'cash'})
        assert response.status_code == 400

    def test_my_fees_newest_first(self, client, admin_headers, auth_headers, member_user):
        for month, year in ((3, 2024), (11, 2023), (1, 2025)):
            client.post('/api/fees', headers=admin_headers, json={
                'user_id': member_user['id'], 'amount': 200, 'month': month, 'year': year,
                'payment_method': 'nagad'})
        fees = client.get('/api/fees/my', headers=auth_headers).json()
        assert [(f['year'], f['month']) for f in fees] == [(2025, 1), (2024, 3), (2023, 11)]


class TestExpenses:
    """Test expense records"""

    def test_create_and_list(self, client, admin_headers, event):
        response = client.post('/api/expenses', headers=admin_headers, json={
            'title': 'Tent rental', 'amount': 1500, 'category': 'Logistics', 'event_id': event['id']})
        assert response.status_code == 201

        expenses = client.get('/api/expenses', headers=admin_headers).json()
        assert len(expenses) == 1
        assert expenses[0]['event_id']['title'] == event['title']

    def test_delete(self, client, admin_headers):
        expense = client.post('/api/expenses', headers=admin_headers, json={'title': 'Tea', 'amount': 50}).json()
        assert client.delete(f"/api/expenses/{expense['id']}", headers=admin_headers).status_code == 200
        assert client.get('/api/expenses', headers=admin_headers).json() == []


class TestFinanceSummary:
    """Test the admin finance summary"""

    def test_empty_database_is_all_zero(self, db):
        assert summarize(db) == {
            'total_donations': 0.0,
            'total_confirmed_donations': 0.0,
            'total_fees': 0.0,
            'total_expenses': 0.0,
            'net_balance': 0.0,
            'user_count': 0,
            'event_count': 0,
            'pending_donation_count': 0,
        }

    def test_net_balance(self, db):
        db['donation'].insert_many([
            {'amount': 5000, 'status': 'confirmed'},
            {'amount': 1000, 'status': 'pending'},
            {'amount': 300, 'status': 'failed'},
        ])
        db['fee'].insert_many([{'amount': 200, 'status': 'paid'}, {'amount': 200, 'status': 'pending'}])
        db['expense'].insert_one({'amount': 1500})
        db['event'].insert_many([{'status': 'upcoming'}, {'status': 'completed'}])

        summary = summarize(db)
        assert summary['total_donations'] == 6300.0
        assert summary['total_confirmed_donations'] == 5000.0
        assert summary['total_fees'] == 200.0
        assert summary['total_expenses'] == 1500.0
        assert summary['net_balance'] == 3700.0
        assert summary['event_count'] == 1
        assert summary['pending_donation_count'] == 1

    def test_endpoint_is_admin_only(self, client, admin_headers, auth_headers):
        assert client.get('/api/finance/summary', headers=auth_headers).status_code == 403
        response = client.get('/api/finance/summary', headers=admin_headers)
        assert response.status_code == 200
        assert response.json()['user_count'] == 2
