import pytest

from tillbook.errors import ConflictError, NotFoundError, ValidationError
from tillbook.services import tender_service


def test_duplicate_tender_name_conflicts(db_session):
    tender_service.create_tender("Cash", classification="Cash")
    with pytest.raises(ConflictError):
        tender_service.create_tender("Cash")


def test_tender_defaults(db_session):
    tender = tender_service.create_tender("Voucher")
    assert tender.button_color == "#FF69B4"
    assert tender.till_order == 1
    assert tender.classification == "Other"
    assert tender.description == ""


@pytest.mark.parametrize("kwargs", [
    {"name": "  "},
    {"name": "X", "till_order": 0},
    {"name": "X", "classification": "Crypto"},
    {"name": "N" * 65},
    {"name": "X", "description": 7},
    {"name": "X", "button_color": "#" * 17},
])
def test_tender_validation(db_session, kwargs):
    with pytest.raises(ValidationError):
        tender_service.create_tender(**kwargs)


def test_list_tenders_in_till_order(db_session):
    tender_service.create_tender("C", till_order=3)
    tender_service.create_tender("A", till_order=1)
    tender_service.create_tender("B2", till_order=2)
    tender_service.create_tender("B1", till_order=2)

    orders = [t.till_order for t in tender_service.list_tenders()]
    assert orders == sorted(orders)
    assert [t.name for t in tender_service.list_tenders()] == ["A", "B1", "B2", "C"]


def test_update_and_delete_tender(db_session):
    cash = tender_service.create_tender("CASH", classification="Cash")
    card = tender_service.create_tender("CARD", classification="Card")

    with pytest.raises(ConflictError):
        tender_service.update_tender(card.id, "CASH")

    updated = tender_service.update_tender(card.id, "DEBIT CARD", till_order=4, classification="Card")
    assert updated.name == "DEBIT CARD"
    assert updated.till_order == 4

    tender_service.delete_tender(cash.id)
    with pytest.raises(NotFoundError):
        tender_service.get_tender(cash.id)


def test_seed_only_when_empty(db_session):
    tenders, created = tender_service.seed_default_tenders()
    assert created is True
    assert [t.name for t in tenders] == [
        "ACCESS ONLINE TRANSFER", "ACCESS POS", "CASH", "HYDROGEN POS", "ZENITH POS",
    ]

    again, created_again = tender_service.seed_default_tenders()
    assert created_again is False
    assert len(again) == 5


def test_is_cash_tender(db_session):
    assert tender_service.is_cash_tender("cash") is True
    assert tender_service.is_cash_tender("ACCESS POS") is False
    assert tender_service.is_cash_tender(None) is False

    tender_service.create_tender("PETTY", classification="Cash")
    assert tender_service.is_cash_tender("PETTY") is True


def test_device_assignments_round_trip(db_session):
    assert tender_service.get_device_assignments("TILL-1") == []

    assert tender_service.set_device_assignments("TILL-1", [3, 1, 2]) == [3, 1, 2]
    assert tender_service.set_device_assignments("TILL-1", [2]) == [2]
    tender_service.set_device_assignments("TILL-2", [1, 5])

    assert tender_service.get_all_device_assignments() == {"TILL-1": [2], "TILL-2": [1, 5]}


@pytest.mark.parametrize("ranks", ["1,2", [1, 1], [0], [-2], ["x"]])
def test_device_assignment_validation(db_session, ranks):
    with pytest.raises(ValidationError):
        tender_service.set_device_assignments("TILL-1", ranks)


def test_replace_all_device_assignments(db_session):
    tender_service.set_device_assignments("OLD", [1])
    mapping = tender_service.replace_all_device_assignments({"A": [1, 2], "B": [3]})
    assert mapping == {"A": [1, 2], "B": [3]}

    with pytest.raises(ValidationError):
        tender_service.replace_all_device_assignments([1, 2])


def test_over_long_names_are_rejected(db_session):
    tender = tender_service.create_tender("N" * 64)
    assert tender.name == "N" * 64

    with pytest.raises(ValidationError):
        tender_service.update_tender(tender.id, "N" * 65)
    with pytest.raises(ValidationError):
        tender_service.set_device_assignments("D" * 65, [1])
    with pytest.raises(ValidationError):
        tender_service.replace_all_device_assignments({"D" * 65: [1]})
    with pytest.raises(ValidationError):
        tender_service.get_device_assignments("D" * 65)

    assert tender_service.set_device_assignments("D" * 64, [1]) == [1]
    assert tender_service.get_all_device_assignments() == {"D" * 64: [1]}
