"""Integration tests for API endpoints."""

import pytest


async def _walk_to_billing(client, headers, trip_data):
    """Run the wizard through local transport and return the trip ID."""
    response = await client.post("/v1/trip/start", json=trip_data, headers=headers)
    assert response.status_code == 200
    trip_id = response.json()["id"]

    steps = [
        ("/v1/trip/transportation", {"outbound_id": "flight-outbound-1", "return_id": "flight-return-2"}),
        ("/v1/trip/accommodation", {"option_id": "hotel-3"}),
        ("/v1/trip/attractions", {"option_ids": ["attraction-1", "attraction-2"]}),
        ("/v1/trip/local-transport", {"option_id": "transport-3"}),
    ]
    for path, body in steps:
        response = await client.post(path, json={"trip_id": trip_id, **body}, headers=headers)
        assert response.status_code == 200, response.json()

    return trip_id


@pytest.mark.asyncio
async def test_register_and_login(test_client):
    """Test account registration followed by login."""
    register_data = {
        "username": "newcomer",
        "email": "New.Comer@Example.com",
        "password": "secret123",
        "first_name": "New",
    }

    response = await test_client.post("/v1/auth/register", json=register_data)

    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "new.comer@example.com"
    assert data["verified"] is False
    assert "password" not in data and "password_hash" not in data

    response = await test_client.post(
        "/v1/auth/login",
        json={"email": "new.comer@example.com", "password": "secret123"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["username"] == "newcomer"

    response = await test_client.post(
        "/v1/auth/me",
        headers={"Authorization": f"Bearer {data['access_token']}"}
    )
    assert response.status_code == 200
    assert response.json()["first_name"] == "New"


@pytest.mark.asyncio
async def test_register_duplicate_email(test_client, test_user):
    response = await test_client.post(
        "/v1/auth/register",
        json={"username": "again", "email": test_user.email, "password": "secret123"}
    )

    assert response.status_code == 409
    assert response.headers["content-type"].startswith("application/problem+json")


@pytest.mark.asyncio
async def test_register_invalid_data(test_client):
    """Test registration with invalid data."""
    response = await test_client.post(
        "/v1/auth/register",
        json={"username": "", "email": "not-an-email", "password": "123"}
    )

    assert response.status_code == 422
    data = response.json()
    assert data["status"] == 422
    paths = {violation["path"] for violation in data["violations"]}
    assert {"body.username", "body.email", "body.password"} <= paths


@pytest.mark.asyncio
async def test_login_wrong_password(test_client, test_user):
    response = await test_client.post(
        "/v1/auth/login",
        json={"email": test_user.email, "password": "wrong-password"}
    )

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_me_missing_auth(test_client):
    """Test the current user endpoint without authentication."""
    response = await test_client.post("/v1/auth/me")

    assert response.status_code == 401
    data = response.json()
    assert data["status"] == 401
    assert "authentication" in data["title"].lower()


@pytest.mark.asyncio
async def test_me_invalid_token(test_client):
    response = await test_client.post("/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_update_user(test_client, auth_headers):
    response = await test_client.post(
        "/v1/user/update",
        json={"first_name": "Asha M.", "password": "new-secret"},
        headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json()["first_name"] == "Asha M."

    response = await test_client.post(
        "/v1/auth/login",
        json={"email": "traveler@example.com", "password": "new-secret"}
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_user_trips_and_billings(test_client, auth_headers, sample_trip_data):
    trip_id = await _walk_to_billing(test_client, auth_headers, sample_trip_data)
    response = await test_client.post(
        "/v1/trip/pay",
        json={"trip_id": trip_id},
        headers={**auth_headers, "Idempotency-Key": "user-history-1"}
    )
    assert response.status_code == 200

    response = await test_client.post("/v1/user/trips", headers=auth_headers)

    assert response.status_code == 200
    trips = response.json()["trips"]
    assert len(trips) == 1
    assert trips[0]["route"] == "Mumbai to Paris"
    assert trips[0]["travelers"] == 2
    assert trips[0]["duration"] == 5

    response = await test_client.post("/v1/user/billings", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["currency"] == "INR"
    assert len(data["billings"]) == 1
    assert data["billings"][0]["amount_paid"] == 14_890_000
    assert data["billings"][0]["order"]["status"] == "completed"


@pytest.mark.asyncio
async def test_catalog_endpoints(test_client, auth_headers, sample_trip_data):
    """Test the reference lookups after a trip has stored its choices."""
    await _walk_to_billing(test_client, auth_headers, sample_trip_data)

    response = await test_client.post(
        "/v1/catalog/flights", json={"origin": "mumbai", "destination": "PARIS"}
    )
    assert response.status_code == 200
    assert len(response.json()["flights"]) == 1

    response = await test_client.post("/v1/catalog/resorts", json={"location": "paris"})
    assert response.status_code == 200
    assert len(response.json()["resorts"]) == 1

    response = await test_client.post("/v1/catalog/travels", json={"duration": 5})
    assert response.status_code == 200
    travels = response.json()["travels"]
    assert len(travels) == 1

    response = await test_client.post("/v1/catalog/travel", json={"travel_id": travels[0]["id"]})
    assert response.status_code == 200
    assert response.json()["id"] == travels[0]["id"]

    for path, key in [
        ("/v1/catalog/agencies", "agencies"),
        ("/v1/catalog/stations", "stations"),
        ("/v1/catalog/vehicles", "vehicles"),
    ]:
        response = await test_client.post(path)
        assert response.status_code == 200
        assert len(response.json()[key]) >= 1


@pytest.mark.asyncio
async def test_catalog_travel_not_found(test_client):
    response = await test_client.post("/v1/catalog/travel", json={"travel_id": 999})

    assert response.status_code == 404
    assert response.json()["resource_type"] == "travel"


@pytest.mark.asyncio
async def test_passenger_list_requires_travel_id(test_client, auth_headers):
    response = await test_client.post("/v1/passenger/list", json={}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["errors"] == {"travel_id": "Field required"}


@pytest.mark.asyncio
async def test_passenger_list_visibility(
    test_client, auth_headers, other_auth_headers, admin_headers, sample_trip_data
):
    """Test that customers only see their own passenger records."""
    response = await test_client.post("/v1/trip/start", json=sample_trip_data, headers=auth_headers)
    travel_id = response.json()["travel_id"]

    response = await test_client.post(
        "/v1/passenger/list", json={"travel_id": travel_id}, headers=auth_headers
    )
    assert response.status_code == 200
    assert len(response.json()["passengers"]) == 2

    response = await test_client.post(
        "/v1/passenger/list", json={"travel_id": travel_id}, headers=other_auth_headers
    )
    assert response.status_code == 200
    assert response.json()["passengers"] == []

    response = await test_client.post(
        "/v1/passenger/list", json={"travel_id": travel_id}, headers=admin_headers
    )
    assert response.status_code == 200
    assert len(response.json()["passengers"]) == 2


@pytest.mark.asyncio
async def test_trip_wizard_flow(test_client, auth_headers, sample_trip_data, percentage_discount):
    """Test a complete booking through the wizard endpoints."""
    trip_id = await _walk_to_billing(test_client, auth_headers, sample_trip_data)

    response = await test_client.post(
        "/v1/trip/discount/apply",
        json={"trip_id": trip_id, "code": "save10"},
        headers=auth_headers
    )
    assert response.status_code == 200
    data = response.json()
    assert data["current_step"] == "billing"
    assert data["discount_code"] == "SAVE10"

    response = await test_client.post("/v1/trip/quote", json={"trip_id": trip_id}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {
        "transportation": 7_000_000,
        "accommodation": 6_450_000,
        "attractions": 840_000,
        "local_transport": 600_000,
        "subtotal": 14_890_000,
        "discount": 1_489_000,
        "total": 13_401_000,
        "currency": "INR",
    }

    pay_headers = {**auth_headers, "Idempotency-Key": "pay-flow-1"}
    response = await test_client.post("/v1/trip/pay", json={"trip_id": trip_id}, headers=pay_headers)
    assert response.status_code == 200
    paid = response.json()
    assert paid["status"] == "CONFIRMED"
    assert paid["amount_paid"] == 13_401_000
    assert paid["route"] == "Mumbai to Paris"
    assert "billing" not in paid["selections"]

    response = await test_client.post("/v1/trip/confirmation", json={"trip_id": trip_id}, headers=auth_headers)
    assert response.status_code == 200
    confirmation = response.json()
    assert confirmation["booking_reference"] == paid["booking_reference"]
    assert confirmation["amount_paid"] == paid["amount_paid"]


@pytest.mark.asyncio
async def test_pay_replays_with_same_key(test_client, auth_headers, sample_trip_data):
    """Test that retrying a payment with the same key replays the first response."""
    trip_id = await _walk_to_billing(test_client, auth_headers, sample_trip_data)
    pay_headers = {**auth_headers, "Idempotency-Key": "pay-replay-1"}

    first = await test_client.post("/v1/trip/pay", json={"trip_id": trip_id}, headers=pay_headers)
    second = await test_client.post("/v1/trip/pay", json={"trip_id": trip_id}, headers=pay_headers)

    assert first.status_code == second.status_code == 200
    assert first.json() == second.json()

    response = await test_client.post("/v1/user/billings", headers=auth_headers)
    assert len(response.json()["billings"]) == 1


@pytest.mark.asyncio
async def test_pay_key_reused_with_different_body(test_client, auth_headers, sample_trip_data):
    trip_id = await _walk_to_billing(test_client, auth_headers, sample_trip_data)
    pay_headers = {**auth_headers, "Idempotency-Key": "pay-mismatch-1"}

    response = await test_client.post("/v1/trip/pay", json={"trip_id": trip_id}, headers=pay_headers)
    assert response.status_code == 200

    response = await test_client.post("/v1/trip/pay", json={"trip_id": trip_id + 1}, headers=pay_headers)

    assert response.status_code == 422
    assert response.json()["code"] == "IDEMPOTENCY_KEY_MISMATCH"


@pytest.mark.asyncio
async def test_pay_requires_idempotency_key(test_client, auth_headers, sample_trip_data):
    trip_id = await _walk_to_billing(test_client, auth_headers, sample_trip_data)

    response = await test_client.post("/v1/trip/pay", json={"trip_id": trip_id}, headers=auth_headers)

    assert response.status_code == 422
    assert any("idempotency-key" in v["path"].lower() for v in response.json()["violations"])


@pytest.mark.asyncio
async def test_step_out_of_order(test_client, auth_headers, sample_trip_data):
    response = await test_client.post("/v1/trip/start", json=sample_trip_data, headers=auth_headers)
    trip_id = response.json()["id"]

    response = await test_client.post(
        "/v1/trip/local-transport",
        json={"trip_id": trip_id, "option_id": "transport-1"},
        headers=auth_headers
    )

    assert response.status_code == 409
    data = response.json()
    assert data["code"] == "WIZARD_STEP_OUT_OF_ORDER"
    assert data["current_step"] == "transportation"


@pytest.mark.asyncio
async def test_start_trip_invalid_dates(test_client, auth_headers, sample_trip_data):
    trip_data = {**sample_trip_data, "end_date": "2000-01-01"}

    response = await test_client.post("/v1/trip/start", json=trip_data, headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["violations"]


@pytest.mark.asyncio
async def test_trip_options(test_client, auth_headers, sample_trip_data):
    response = await test_client.post("/v1/trip/start", json=sample_trip_data, headers=auth_headers)
    trip_id = response.json()["id"]

    response = await test_client.post(
        "/v1/trip/options",
        json={"trip_id": trip_id, "step": "accommodation", "amenities": ["Pool"]},
        headers=auth_headers
    )

    assert response.status_code == 200
    options = response.json()["options"]
    assert options
    assert all("pool" in option["amenities"] for option in options)


@pytest.mark.asyncio
async def test_trip_of_other_user_not_found(test_client, auth_headers, other_auth_headers, sample_trip_data):
    response = await test_client.post("/v1/trip/start", json=sample_trip_data, headers=auth_headers)
    trip_id = response.json()["id"]

    response = await test_client.post("/v1/trip/get", json={"trip_id": trip_id}, headers=other_auth_headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_invalid_discount_code(test_client, auth_headers, sample_trip_data, expired_discount):
    trip_id = await _walk_to_billing(test_client, auth_headers, sample_trip_data)

    response = await test_client.post(
        "/v1/trip/discount/apply",
        json={"trip_id": trip_id, "code": "OLD50"},
        headers=auth_headers
    )

    assert response.status_code == 422
    assert response.json()["detail"] == "Invalid discount code"


@pytest.mark.asyncio
async def test_admin_endpoints_forbidden_for_customers(test_client, auth_headers):
    response = await test_client.post("/v1/admin/dashboard", headers=auth_headers)

    assert response.status_code == 403
    assert response.json()["required_permissions"] == ["admin"]


@pytest.mark.asyncio
async def test_admin_login_and_check(test_client, admin_user, admin_password):
    response = await test_client.get("/v1/admin/check")
    assert response.status_code == 200
    assert response.json()["admin_exists"] is True

    response = await test_client.post(
        "/v1/admin/login",
        json={"user_id": admin_user.user_id, "password": admin_password}
    )

    assert response.status_code == 200
    token = response.json()["access_token"]

    response = await test_client.post(
        "/v1/admin/users", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 200
    assert len(response.json()["users"]) == 1


@pytest.mark.asyncio
async def test_admin_bootstrap(test_client):
    response = await test_client.get("/v1/admin/check")
    assert response.json()["admin_exists"] is False

    response = await test_client.post("/v1/admin/check")

    assert response.status_code == 200
    assert response.json()["admin_count"] == 1


@pytest.mark.asyncio
async def test_admin_discount_lifecycle(test_client, admin_headers):
    response = await test_client.post(
        "/v1/admin/discounts/create",
        json={"code": " summer25 ", "discount_type": "percentage", "amount": 25},
        headers=admin_headers
    )

    assert response.status_code == 201
    discount = response.json()
    assert discount["code"] == "SUMMER25"

    response = await test_client.post("/v1/admin/discounts", headers=admin_headers)
    assert [d["code"] for d in response.json()["discounts"]] == ["SUMMER25"]

    response = await test_client.post(
        "/v1/admin/discounts/delete",
        json={"discount_id": discount["id"]},
        headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["success"] is True

    response = await test_client.post("/v1/admin/discounts", headers=admin_headers)
    assert response.json()["discounts"] == []


@pytest.mark.asyncio
async def test_admin_create_discount_invalid_percentage(test_client, admin_headers):
    response = await test_client.post(
        "/v1/admin/discounts/create",
        json={"code": "TOOMUCH", "discount_type": "percentage", "amount": 150},
        headers=admin_headers
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_admin_dashboard_and_reports(test_client, auth_headers, admin_headers, sample_trip_data):
    trip_id = await _walk_to_billing(test_client, auth_headers, sample_trip_data)
    response = await test_client.post(
        "/v1/trip/pay",
        json={"trip_id": trip_id},
        headers={**auth_headers, "Idempotency-Key": "admin-report-1"}
    )
    assert response.status_code == 200

    response = await test_client.post("/v1/admin/dashboard", headers=admin_headers)
    assert response.status_code == 200
    dashboard = response.json()
    assert dashboard["total_bookings"] == 1
    assert dashboard["recent_bookings"][0]["route"] == "Mumbai to Paris"

    response = await test_client.post("/v1/admin/reports", headers=admin_headers)
    assert response.status_code == 200
    reports = response.json()
    assert reports["total_revenue"] == 14_890_000
    assert reports["top_destinations"][0] == {"destination": "Paris", "count": 1}

    response = await test_client.post("/v1/admin/travels", headers=admin_headers)
    assert response.status_code == 200
    assert len(response.json()["travels"][0]["passengers"]) == 2


@pytest.mark.asyncio
async def test_admin_seed(test_client, admin_headers):
    response = await test_client.post("/v1/admin/seed", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["created"] == {"users": 10, "agencies": 5, "stations": 10}

    response = await test_client.post("/v1/admin/add-travel-records", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["created"]["travels"] == 5


@pytest.mark.asyncio
async def test_metrics_endpoint(test_client):
    """Test the Prometheus metrics endpoint."""
    response = await test_client.get("/metrics")

    assert response.status_code == 200
    assert "text/plain" in response.headers["content-type"]
