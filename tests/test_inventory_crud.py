import os
import sys
from datetime import date, timedelta
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from backoffice.db.session import Base
from backoffice.crud.inventory import (
    create_category,
    create_item,
    delete_item,
    fetch_alerts,
    fetch_consumption,
    fetch_items,
    fetch_restock_suggestions,
    get_alert,
    get_item,
    list_categories,
    mark_alert_read,
    record_consumption,
    update_item,
)
from backoffice.crud.restaurants import create_restaurant
from backoffice.models.alert import Alert, RestockSuggestion
from backoffice.models.inventory import ConsumptionRecord

# Ensure models are imported so metadata is populated
from backoffice.models import alert as alert_model  # noqa: F401
from backoffice.models import category as category_model  # noqa: F401
from backoffice.models import inventory as inventory_model  # noqa: F401
from backoffice.models import restaurant as restaurant_model  # noqa: F401


@pytest.fixture()
def db_session():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def restaurants(db_session):
    first = create_restaurant(db_session, {"name": "Bistro"}, owner_user_id="alice")
    second = create_restaurant(db_session, {"name": "Cantina"}, owner_user_id="bob")
    return first.id, second.id


def test_fetch_items_only_returns_own_restaurant(db_session, restaurants):
    mine, theirs = restaurants
    dry = create_category(db_session, mine, "Dry goods")
    create_item(db_session, mine, {"name": "Flour", "category_id": dry.id, "current_quantity": 5, "cost_per_unit": 2})
    create_item(db_session, theirs, {"name": "Tortillas", "current_quantity": 50})

    rows = fetch_items(db_session, mine)

    assert [row.name for row in rows] == ["Flour"]
    assert rows[0].category_name == "Dry goods"
    assert [row.name for row in fetch_items(db_session, theirs)] == ["Tortillas"]
    assert fetch_items(db_session, theirs)[0].category_name == "Uncategorized"


def test_other_restaurants_rows_are_invisible(db_session, restaurants):
    mine, theirs = restaurants
    item = create_item(db_session, theirs, {"name": "Tortillas"})

    assert get_item(db_session, mine, item.id) is None
    with pytest.raises(LookupError):
        record_consumption(db_session, mine, item_id=item.id, quantity=1)


def test_item_cannot_use_foreign_category(db_session, restaurants):
    mine, theirs = restaurants
    foreign = create_category(db_session, theirs, "Theirs")

    with pytest.raises(ValueError):
        create_item(db_session, mine, {"name": "Flour", "category_id": foreign.id})


def test_create_item_validation(db_session, restaurants):
    mine, _ = restaurants

    with pytest.raises(ValueError):
        create_item(db_session, mine, {"name": "   "})
    with pytest.raises(ValueError):
        create_item(db_session, mine, {"name": "Flour", "current_quantity": -1})


def test_update_item_trims_and_rejects_empty_required_fields(db_session, restaurants):
    mine, _ = restaurants
    item = create_item(db_session, mine, {"name": "Flour", "supplier": "Mill Co"})

    updated = update_item(db_session, item, {"name": "  Bread flour ", "supplier": "  "})
    assert updated.name == "Bread flour"
    assert updated.supplier is None

    with pytest.raises(ValueError):
        update_item(db_session, item, {"current_quantity": None})


def test_consumption_window_and_order(db_session, restaurants):
    mine, theirs = restaurants
    today = date(2024, 3, 15)
    flour = create_item(db_session, mine, {"name": "Flour", "unit": "kg", "cost_per_unit": 1.5})
    other = create_item(db_session, theirs, {"name": "Beans"})
    record_consumption(db_session, mine, item_id=flour.id, quantity=2, consumption_date=today - timedelta(days=3))
    record_consumption(db_session, mine, item_id=flour.id, quantity=1, consumption_date=today)
    record_consumption(db_session, mine, item_id=flour.id, quantity=9, consumption_date=today - timedelta(days=40))
    record_consumption(db_session, theirs, item_id=other.id, quantity=4, consumption_date=today)

    rows = fetch_consumption(db_session, mine, today=today)

    assert [row.quantity_consumed for row in rows] == [1, 2]
    assert rows[0].item_name == "Flour"
    assert rows[0].item_unit == "kg"
    assert rows[0].item_cost == 1.5


def test_record_consumption_requires_positive_quantity(db_session, restaurants):
    mine, _ = restaurants
    item = create_item(db_session, mine, {"name": "Flour"})

    with pytest.raises(ValueError):
        record_consumption(db_session, mine, item_id=item.id, quantity=0)


def test_alerts_and_suggestions_are_scoped(db_session, restaurants):
    mine, theirs = restaurants
    flour = create_item(db_session, mine, {"name": "Flour", "current_quantity": 2})
    beans = create_item(db_session, theirs, {"name": "Beans"})
    db_session.add_all(
        [
            Alert(restaurant_id=mine, item_id=flour.id, alert_type="low_stock", message="Low", created_at="2024-03-15T10:00:00Z"),
            Alert(restaurant_id=theirs, item_id=beans.id, alert_type="expiry", message="Old", created_at="2024-03-15T10:00:00Z"),
            RestockSuggestion(
                restaurant_id=mine,
                item_id=flour.id,
                suggested_quantity=10,
                days_until_stockout=2,
                avg_daily_consumption=1,
                created_at="2024-03-15T10:00:00Z",
            ),
        ]
    )
    db_session.commit()

    alerts = fetch_alerts(db_session, mine)
    suggestions = fetch_restock_suggestions(db_session, mine)

    assert [alert.alert_type for alert in alerts] == ["low_stock"]
    assert suggestions[0].item_name == "Flour"
    assert suggestions[0].item.current_quantity == 2
    assert fetch_restock_suggestions(db_session, theirs) == []

    foreign_alert = fetch_alerts(db_session, theirs)[0]
    assert get_alert(db_session, mine, foreign_alert.id) is None
    alert = mark_alert_read(db_session, get_alert(db_session, mine, alerts[0].id))
    assert alert.is_read == 1


def test_delete_item_removes_dependents(db_session, restaurants):
    mine, _ = restaurants
    item = create_item(db_session, mine, {"name": "Flour"})
    record_consumption(db_session, mine, item_id=item.id, quantity=1)
    db_session.add(Alert(restaurant_id=mine, item_id=item.id, alert_type="low_stock", created_at="2024-03-15T10:00:00Z"))
    db_session.commit()

    delete_item(db_session, item)

    assert fetch_items(db_session, mine) == []
    assert db_session.query(ConsumptionRecord).count() == 0
    assert fetch_alerts(db_session, mine) == []


def test_categories_are_per_restaurant(db_session, restaurants):
    mine, theirs = restaurants
    create_category(db_session, mine, "Produce")
    create_category(db_session, theirs, "Dairy")

    assert [category.name for category in list_categories(db_session, mine)] == ["Produce"]
    with pytest.raises(ValueError):
        create_category(db_session, mine, "")
