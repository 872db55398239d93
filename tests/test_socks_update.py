import uuid

from app.sockstock.db.models import StockLot


def _income(client, color: str, cotton: int, quantity: int) -> None:
    response = client.post(
        "/api/socks/income",
        json={"color": color, "cottonPercentage": cotton, "quantity": quantity},
    )
    assert response.status_code == 200


def _lot_id(db_session, color: str, cotton: int) -> uuid.UUID:
    db_session.expire_all()
    lot = (
        db_session.query(StockLot)
        .filter(StockLot.color == color, StockLot.cotton_percentage == cotton)
        .one()
    )
    return lot.id


def test_get_lot_by_id(client, db_session):
    _income(client, "red", 50, 12)
    lot_id = _lot_id(db_session, "red", 50)

    response = client.get(f"/api/socks/{lot_id}")

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == str(lot_id)
    assert body["color"] == "red"
    assert body["cottonPercentage"] == 50
    assert body["quantity"] == 12
    assert body["version"] == 0
    assert body["createdAt"]


def test_update_replaces_all_fields(client, db_session):
    _income(client, "red", 50, 12)
    lot_id = _lot_id(db_session, "red", 50)

    response = client.put(
        f"/api/socks/{lot_id}",
        json={"color": "purple", "cottonPercentage": 75, "quantity": 3},
    )

    assert response.status_code == 200
    body = client.get(f"/api/socks/{lot_id}").json()
    assert body["color"] == "purple"
    assert body["cottonPercentage"] == 75
    assert body["quantity"] == 3
    assert body["version"] == 1
    assert body["updatedAt"]


def test_update_can_zero_quantity(client, db_session):
    _income(client, "red", 50, 12)
    lot_id = _lot_id(db_session, "red", 50)

    response = client.put(
        f"/api/socks/{lot_id}",
        json={"color": "red", "cottonPercentage": 50, "quantity": 0},
    )

    assert response.status_code == 200
    assert client.get(f"/api/socks/{lot_id}").json()["quantity"] == 0


def test_update_unknown_id_is_rejected(client):
    missing = uuid.uuid4()

    response = client.put(
        f"/api/socks/{missing}",
        json={"color": "red", "cottonPercentage": 50, "quantity": 1},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "STOCK_NOT_FOUND"
    assert body["details"]["message"] == f"Socks with id: {missing} not found"


def test_get_unknown_id_is_rejected(client):
    response = client.get(f"/api/socks/{uuid.uuid4()}")

    assert response.status_code == 400
    assert response.json()["code"] == "STOCK_NOT_FOUND"


def test_update_rejects_malformed_id(client):
    response = client.put(
        "/api/socks/not-a-uuid",
        json={"color": "red", "cottonPercentage": 50, "quantity": 1},
    )

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_update_onto_another_lots_key_is_rejected(client, db_session):
    _income(client, "red", 50, 5)
    _income(client, "blue", 70, 9)
    blue_id = _lot_id(db_session, "blue", 70)

    response = client.put(
        f"/api/socks/{blue_id}",
        json={"color": "red", "cottonPercentage": 50, "quantity": 1},
    )

    assert response.status_code == 400
    assert response.json()["code"] == "DUPLICATE_STOCK_LOT"
    db_session.expire_all()
    assert db_session.query(StockLot).count() == 2
    assert client.get(f"/api/socks/{blue_id}").json()["color"] == "blue"


def test_update_validates_payload(client, db_session):
    _income(client, "red", 50, 5)
    lot_id = _lot_id(db_session, "red", 50)

    response = client.put(
        f"/api/socks/{lot_id}",
        json={"color": "red", "cottonPercentage": 150, "quantity": -1},
    )

    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["details"]["errors"]}
    assert fields == {"cottonPercentage", "quantity"}


def test_update_rejects_quantity_beyond_column_range(client, db_session):
    _income(client, "red", 50, 5)
    lot_id = _lot_id(db_session, "red", 50)

    response = client.put(
        f"/api/socks/{lot_id}",
        json={"color": "red", "cottonPercentage": 50, "quantity": 2**63},
    )

    assert response.status_code == 400
    assert response.json()["details"]["errors"][0]["field"] == "quantity"
    assert client.get(f"/api/socks/{lot_id}").json()["quantity"] == 5
