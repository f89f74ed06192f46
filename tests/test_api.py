"""
HTTP boundary: status codes and machine-readable error codes
"""
import uuid


def _setup(client, stock=5):
    part = client.post("/api/master/spareparts", json={"code": "api-1", "name": "Track Roller", "initial_stock": stock})
    assert part.status_code == 201
    equipment = client.post("/api/master/equipment", json={"code": "dz-01", "name": "Bulldozer D85"})
    employee = client.post("/api/master/employees", json={"nik": "2002", "name": "Sari"})
    return part.json()["id"], equipment.json()["id"], employee.json()["id"]


def _request(client, part_id, equipment_id, employee_id, quantity):
    return client.post("/api/stock-out", json={
        "sparepart_id": part_id, "equipment_id": equipment_id,
        "employee_id": employee_id, "quantity": quantity
    }, headers={"X-User": "mekanik"})


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"


def test_sparepart_response(client):
    part_id, _, _ = _setup(client)

    data = client.get(f"/api/master/spareparts/{part_id}").json()

    assert data["code"] == "API-1"
    assert data["current_stock"] == 5
    assert data["stock_status"] == "normal"


def test_stock_in_flow(client):
    part_id, _, _ = _setup(client)

    created = client.post("/api/stock-in", json={"sparepart_id": part_id, "quantity": 3}, headers={"X-User": "gudang"})

    assert created.status_code == 201
    assert created.json()["new_stock"] == 8
    assert created.json()["stock_in"]["created_by"] == "gudang"

    listing = client.get("/api/stock-in").json()
    assert listing["total"] == 1

    bad = client.post("/api/stock-in", json={"sparepart_id": part_id, "quantity": 0})
    assert bad.status_code == 400
    assert bad.json()["code"] == "VALIDATION_ERROR"


def test_approval_flow_and_error_codes(client):
    part_id, equipment_id, employee_id = _setup(client, stock=5)

    first = _request(client, part_id, equipment_id, employee_id, 5)
    second = _request(client, part_id, equipment_id, employee_id, 5)
    assert first.status_code == 201
    assert first.json()["warning"] is None

    queue = client.get("/api/approvals").json()
    assert queue["total"] == 2

    approved = client.post(f"/api/approvals/{first.json()['stock_out']['id']}/approve", headers={"X-User": "spv"})
    assert approved.status_code == 200
    assert approved.json()["new_stock"] == 0
    assert approved.json()["stock_out"]["decided_by"] == "spv"

    second_id = second.json()["stock_out"]["id"]
    short = client.post(f"/api/stock-out/{second_id}/approve")
    assert short.status_code == 409
    assert short.json()["code"] == "INSUFFICIENT_STOCK"

    no_reason = client.post(f"/api/stock-out/{second_id}/reject", json={"reason": " "})
    assert no_reason.status_code == 400
    assert no_reason.json()["code"] == "VALIDATION_ERROR"

    rejected = client.post(f"/api/stock-out/{second_id}/reject", json={"reason": "no stock"})
    assert rejected.json()["stock_out"]["status"] == "rejected"

    again = client.post(f"/api/approvals/{second_id}/approve")
    assert again.status_code == 409
    assert again.json()["code"] == "INVALID_STATE"

    blank = client.post(f"/api/approvals/{second_id}/reject", json={"reason": " "})
    assert blank.status_code == 409
    assert blank.json()["code"] == "INVALID_STATE"

    stats = client.get("/api/approvals/stats").json()
    assert stats == {"total_pending": 0, "approved_today": 1, "rejected_today": 1}


def test_not_found(client):
    response = client.post(f"/api/stock-out/{uuid.uuid4()}/approve")

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_opname_endpoints(client):
    part_id, _, _ = _setup(client, stock=100)

    sheet = client.get("/api/opname/sheet").json()
    assert sheet["items"][0]["system_stock"] == 100

    result = client.post("/api/opname", json={"items": [{"sparepart_id": part_id, "physical_stock": 92}]})
    assert result.status_code == 201
    assert result.json()["adjusted_count"] == 1

    history = client.get("/api/opname/history").json()
    assert history["total"] == 1

    detail = client.get(f"/api/opname/history/{result.json()['opname_id']}").json()
    assert detail["items"][0]["difference"] == -8
    assert detail["items"][0]["code"] == "API-1"

    missing = client.post("/api/opname", json={"items": [{"sparepart_id": str(uuid.uuid4()), "physical_stock": 1}]})
    assert missing.status_code == 404


def test_referenced_delete_is_refused(client):
    part_id, equipment_id, employee_id = _setup(client)
    _request(client, part_id, equipment_id, employee_id, 1)

    report = client.get(f"/api/master/references/sparepart/{part_id}").json()
    assert report["deletable"] is False

    response = client.delete(f"/api/master/spareparts/{part_id}")
    assert response.status_code == 409
    assert response.json()["code"] == "REFERENCED"
    assert response.json()["references"]["stock_out"] == 1


def test_ledger_drift_endpoint(client):
    _setup(client)

    data = client.get("/api/ledger/drift").json()

    assert data["consistent"] is True
    assert data["drift"] == []


def test_reject_reason_length_counts_after_trimming(client):
    part_id, equipment_id, employee_id = _setup(client)
    padded = _request(client, part_id, equipment_id, employee_id, 1).json()["stock_out"]["id"]
    too_long = _request(client, part_id, equipment_id, employee_id, 1).json()["stock_out"]["id"]

    ok = client.post(f"/api/approvals/{padded}/reject", json={"reason": "  " + "x" * 500 + "  "})
    assert ok.status_code == 200
    assert len(ok.json()["stock_out"]["rejected_reason"]) == 500

    refused = client.post(f"/api/approvals/{too_long}/reject", json={"reason": "x" * 501})
    assert refused.status_code == 400
    assert refused.json()["code"] == "VALIDATION_ERROR"


def test_warranty_claim_endpoint(client):
    part_id, _, _ = _setup(client)
    created = client.post("/api/stock-in", json={
        "sparepart_id": part_id, "quantity": 1, "warranty_expiry": "2027-03-01"
    }).json()
    warranty_id = created["stock_in"]["warranty_id"]

    claim = client.post(f"/api/stock-in/warranties/{warranty_id}/claim", json={"notes": "cracked housing"})
    assert claim.status_code == 200
    assert claim.json()["claim_status"] == "claimed"

    second = client.post(f"/api/stock-in/warranties/{warranty_id}/claim", json={})
    assert second.status_code == 409
    assert second.json()["code"] == "INVALID_STATE"

    missing = client.post(f"/api/stock-in/warranties/{uuid.uuid4()}/claim", json={})
    assert missing.status_code == 404
