from tillbook.models import Location, Staff, Store, Tender
from tillbook.services import till_service


def test_init_db_and_seed_tenders(app, db_session):
    runner = app.test_cli_runner()

    result = runner.invoke(args=['tillbook', 'init-db'])
    assert result.exit_code == 0
    assert db_session.query(Store).count() == 1
    assert db_session.query(Location).count() == 1

    result = runner.invoke(args=['tillbook', 'init-db'])
    assert result.exit_code == 0
    assert db_session.query(Store).count() == 1

    result = runner.invoke(args=['tillbook', 'seed-tenders'])
    assert result.exit_code == 0
    assert db_session.query(Tender).count() == 5


def test_staff_create(app, db_session, location):
    runner = app.test_cli_runner()
    result = runner.invoke(args=[
        'staff', 'create', '--name', 'Ada Obi', '--username', 'ada',
        '--password', 'Password123!', '--role', 'manager', '--location-id', str(location.id),
    ])
    assert result.exit_code == 0, result.output
    assert db_session.query(Staff).filter_by(username='ada').one().role == 'manager'

    weak = runner.invoke(args=[
        'staff', 'create', '--name', 'Weak', '--username', 'weak', '--password', 'weak', '--role', 'staff',
    ])
    assert weak.exit_code != 0


def test_tills_list(app, db_session, cashier, location):
    till = till_service.open_till(location.id, cashier.id, 5000)
    runner = app.test_cli_runner()

    result = runner.invoke(args=['tills', 'list', '--status', 'OPEN'])
    assert result.exit_code == 0
    assert f"#{till.id}" in result.output
    assert "₦50.00" in result.output

    empty = runner.invoke(args=['tills', 'list', '--status', 'CLOSED'])
    assert "No tills found" in empty.output
