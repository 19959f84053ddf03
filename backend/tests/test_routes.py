"""
HTTP envelope and end-to-end flows through the blueprints.
"""

from tillbook.models import Transaction
from tillbook.services import transaction_service
from tillbook.services.transaction_service import TillContext


def _open_till(client, headers, location, balance=5000):
    return client.post('/api/tills', json={
        'location_id': location.id,
        'opening_balance_cents': balance,
    }, headers=headers)


def test_health(client, db_session):
    response = client.get('/api/health')
    assert response.status_code == 200
    assert response.json['data']['status'] == 'healthy'


def test_unknown_route_and_method_use_envelope(client, db_session):
    missing = client.get('/api/nope')
    assert missing.status_code == 404
    assert missing.json == {'success': False, 'message': 'Resource not found', 'error': 'not_found'}

    wrong_method = client.delete('/api/health')
    assert wrong_method.status_code == 405
    assert wrong_method.json['error'] == 'method_not_allowed'


def test_till_lifecycle_over_http(client, cashier_headers, location):
    opened = _open_till(client, cashier_headers, location)
    assert opened.status_code == 201
    till = opened.json['data']
    assert till['status'] == 'OPEN'
    assert till['closed_at'] is None

    conflict = _open_till(client, cashier_headers, location)
    assert conflict.status_code == 409
    assert conflict.json['error'] == 'conflict'

    suspended = client.patch(f"/api/tills/{till['id']}/suspend", headers=cashier_headers)
    assert suspended.json['data']['status'] == 'SUSPENDED'
    resumed = client.patch(f"/api/tills/{till['id']}/resume", headers=cashier_headers)
    assert resumed.json['data']['status'] == 'OPEN'

    closed = client.patch(f"/api/tills/{till['id']}/close", json={'closing_balance_cents': 12000}, headers=cashier_headers)
    assert closed.status_code == 200
    assert closed.json['data']['status'] == 'CLOSED'
    assert closed.json['data']['closing_balance_cents'] == 12000
    assert closed.json['data']['closed_at'].endswith('Z')

    again = client.patch(f"/api/tills/{till['id']}/close", json={'closing_balance_cents': 1}, headers=cashier_headers)
    assert again.status_code == 409
    assert again.json['error'] == 'invalid_state'

    listed = client.get('/api/tills?status=CLOSED', headers=cashier_headers)
    assert [t['id'] for t in listed.json['data']] == [till['id']]

    summary = client.get(f"/api/tills/{till['id']}/summary", headers=cashier_headers)
    assert summary.json['data']['variance_cents'] == 7000


def test_open_till_validation_envelope(client, cashier_headers, location):
    response = _open_till(client, cashier_headers, location, balance=-1)
    assert response.status_code == 400
    assert response.json['success'] is False
    assert response.json['error'] == 'validation_error'
    assert 'opening_balance_cents' in response.json['message']

    bad_notes = client.post('/api/tills', json={
        'location_id': location.id,
        'opening_balance_cents': 5000,
        'notes': 5,
    }, headers=cashier_headers)
    assert bad_notes.status_code == 400
    assert bad_notes.json['error'] == 'validation_error'

    assert client.get('/api/tills/999', headers=cashier_headers).status_code == 404


def test_record_sale_returns_both_item_aliases(client, cashier_headers, location):
    till = _open_till(client, cashier_headers, location).json['data']

    response = client.post('/api/transactions', json={
        'till_id': till['id'],
        'items': [{'name': 'Lip gloss', 'price': 1000, 'qty': 2}],
        'tender_type': 'CASH',
        'amount_paid_cents': 2500,
        'total_cents': 2000,
    }, headers=cashier_headers)

    assert response.status_code == 201
    txn = response.json['data']
    assert txn['status'] == 'completed'
    assert txn['change_cents'] == 500
    item = txn['items'][0]
    assert item['price'] == item['salePriceIncTax'] == item['unit_price_cents'] == 1000
    assert item['qty'] == item['quantity'] == 2


def test_hold_complete_refund_over_http(client, cashier_headers, manager_headers, location):
    till = _open_till(client, cashier_headers, location).json['data']

    held = client.post('/api/transactions', json={
        'till_id': till['id'],
        'items': [{'name': 'Toner', 'salePriceIncTax': 1500, 'quantity': 1}],
        'tender_type': 'CASH',
        'total_cents': 1500,
        'status': 'held',
    }, headers=cashier_headers).json['data']
    assert held['status'] == 'held'

    short = client.patch(f"/api/transactions/{held['id']}", json={'status': 'completed', 'amount_paid_cents': 1000}, headers=cashier_headers)
    assert short.status_code == 400

    completed = client.patch(f"/api/transactions/{held['id']}", json={'status': 'completed', 'amount_paid_cents': 2000}, headers=cashier_headers)
    assert completed.json['data']['status'] == 'completed'
    assert completed.json['data']['change_cents'] == 500

    denied = client.post(f"/api/transactions/{held['id']}/refund", json={'reason': 'Damaged'}, headers=cashier_headers)
    assert denied.status_code == 403
    denied_patch = client.patch(f"/api/transactions/{held['id']}", json={'status': 'refunded', 'reason': 'x'}, headers=cashier_headers)
    assert denied_patch.status_code == 403

    no_reason = client.post(f"/api/transactions/{held['id']}/refund", json={}, headers=manager_headers)
    assert no_reason.status_code == 400

    refunded = client.post(f"/api/transactions/{held['id']}/refund", json={'reason': 'Damaged'}, headers=manager_headers)
    assert refunded.status_code == 200
    assert refunded.json['data']['status'] == 'refunded'

    twice = client.post(f"/api/transactions/{held['id']}/refund", json={'reason': 'Damaged'}, headers=manager_headers)
    assert twice.status_code == 409


def test_from_order_is_idempotent(client, db_session, cashier_headers, customer):
    order = client.post('/api/orders', json={
        'customer_id': customer.id,
        'shipping_details': {
            'name': 'Amaka Eze', 'email': 'amaka@example.com', 'phone': '0803',
            'address': '12 Admiralty Way', 'city': 'Lagos',
        },
        'items': [{'product_id': 7, 'name': 'Serum', 'price': 7500, 'quantity': 1}],
    }, headers=cashier_headers)
    assert order.status_code == 201
    order_id = order.json['data']['id']

    first = client.post('/api/transactions/from-order', json={'order_id': order_id}, headers=cashier_headers)
    assert first.status_code == 201
    assert first.json['data']['channel'] == 'online'
    assert first.json['data']['items'][0]['salePriceIncTax'] == 7500
    assert first.json['data']['items'][0]['qty'] == 1

    second = client.post('/api/transactions/from-order', json={'order_id': order_id}, headers=cashier_headers)
    assert second.status_code == 200
    assert second.json['data']['id'] == first.json['data']['id']
    assert db_session.query(Transaction).count() == 1

    missing = client.post('/api/transactions/from-order', json={'order_id': 999}, headers=cashier_headers)
    assert missing.status_code == 404


def test_deliver_order_over_http(client, cashier_headers, customer):
    order_id = client.post('/api/orders', json={
        'customer_id': customer.id,
        'shipping_details': {
            'name': 'Amaka Eze', 'email': 'amaka@example.com', 'phone': '0803',
            'address': '12 Admiralty Way', 'city': 'Lagos',
        },
        'items': [{'product_id': 7, 'name': 'Serum', 'price': 7500, 'quantity': 1}],
    }, headers=cashier_headers).json['data']['id']

    delivered = client.patch(f'/api/orders/{order_id}/status', json={'status': 'Delivered'}, headers=cashier_headers)
    assert delivered.status_code == 200
    assert delivered.json['data']['transaction']['source_order_id'] == order_id

    again = client.patch(f'/api/orders/{order_id}/status', json={'status': 'Delivered'}, headers=cashier_headers)
    assert again.status_code == 409

    paid = client.patch(f'/api/orders/{order_id}/payment', json={'payment_status': 'Paid'}, headers=cashier_headers)
    assert paid.json['data']['paid'] is True


def test_tenders_over_http(client, manager_headers, cashier_headers):
    seeded = client.post('/api/tenders/seed', headers=manager_headers)
    assert seeded.status_code == 201
    assert client.post('/api/tenders/seed', headers=manager_headers).status_code == 200

    listed = client.get('/api/tenders', headers=cashier_headers).json['data']
    assert [t['till_order'] for t in listed] == [1, 2, 3, 4, 5]

    duplicate = client.post('/api/tenders', json={'name': 'CASH'}, headers=manager_headers)
    assert duplicate.status_code == 409

    saved = client.put('/api/tenders/assignments/TILL-1', json={'tender_ranks': [3, 1]}, headers=manager_headers)
    assert saved.json['data']['tender_ranks'] == [3, 1]
    loaded = client.get('/api/tenders/assignments/TILL-1', headers=cashier_headers)
    assert loaded.json['data']['tender_ranks'] == [3, 1]

    bad = client.put('/api/tenders/assignments/TILL-1', json={'tender_ranks': [1, 1]}, headers=manager_headers)
    assert bad.status_code == 400

    everything = client.put('/api/tenders/assignments', json={'device_tenders': {'A': [2]}}, headers=manager_headers)
    assert everything.json['data'] == {'A': [2]}


def test_sales_summary_over_http(client, cashier_headers, location):
    till = _open_till(client, cashier_headers, location).json['data']
    client.post('/api/transactions', json={
        'till_id': till['id'],
        'items': [{'name': 'Soap', 'price': 500, 'qty': 2}],
        'tender_type': 'CASH',
        'total_cents': 1000,
    }, headers=cashier_headers)

    summary = client.get('/api/transactions/summary', headers=cashier_headers).json['data']
    assert summary['total_sales_cents'] == 1000
    assert summary['top_products'] == [{'name': 'Soap', 'qty': 2, 'total_cents': 1000}]


def test_sales_summary_counts_every_matching_sale(client, db_session, cashier, cashier_headers, location):
    till = _open_till(client, cashier_headers, location).json['data']
    context = TillContext(till_id=till['id'], staff_id=cashier.id)
    for _ in range(510):
        transaction_service.record_sale(context, [{'name': 'Soap', 'price': 100, 'qty': 1}], 'CASH', 100, 100)

    summary = client.get('/api/transactions/summary', headers=cashier_headers).json['data']
    assert summary['total_transactions'] == 510
    assert summary['total_sales_cents'] == 51000
    assert summary['average_transaction_cents'] == 100
    assert summary['top_products'] == [{'name': 'Soap', 'qty': 510, 'total_cents': 51000}]
    assert summary['by_staff'] == [{'staff': cashier.name, 'total_cents': 51000}]


def test_record_stores_over_http(client, manager_headers, cashier_headers, location):
    customer = client.post('/api/customers', json={'name': 'Ife', 'email': 'ife@example.com'}, headers=cashier_headers)
    assert customer.status_code == 201
    duplicate = client.post('/api/customers', json={'name': 'Ife 2', 'email': 'ife@example.com'}, headers=cashier_headers)
    assert duplicate.status_code == 409

    expense = client.post('/api/expenses', json={
        'title': 'Diesel', 'amount_cents': 250000, 'category_name': 'Utilities',
    }, headers=cashier_headers)
    assert expense.status_code == 201
    listed = client.get('/api/expenses', headers=cashier_headers).json['data']
    assert listed['totals']['total_cents'] == 250000

    assert client.get('/api/staff', headers=cashier_headers).status_code == 403
    created = client.post('/api/staff', json={
        'name': 'Tobi', 'username': 'tobi', 'password': 'Password123!', 'location_id': location.id,
    }, headers=manager_headers)
    assert created.status_code == 201
    assert created.json['data']['location_name'] == 'Lekki'

    weak = client.post('/api/staff', json={'name': 'Weak', 'password': 'weak'}, headers=manager_headers)
    assert weak.status_code == 400
