"""
Tests for the registry HTTP API and its error contract.
"""
from subscription_hub.features.registry import hub as hub_module
from subscription_hub.tests.helpers import MONTH_SECONDS, ORGANIZATION, USER, USER2

PLAN_BODY = {
    "organization_id": 1,
    "name": "Pro",
    "description": "Pro plan",
    "price": "1000",
    "duration": 1,
    "duration_unit": "month",
    "features": ["sso"],
    "cancelable": True,
    "refundable": False,
}


def as_user(address):
    return {"X-User-Id": address}


def setup_plan(client):
    resp = client.post(
        "/v1/organizations",
        headers=as_user(ORGANIZATION),
        json={"name": "Acme", "description": "Widgets"},
    )
    assert resp.status_code == 201
    resp = client.post("/v1/plans", headers=as_user(ORGANIZATION), json=PLAN_BODY)
    assert resp.status_code == 201
    return int(resp.json()["data"]["attributes"]["plan_id"])


def test_create_and_read_organization(client):
    resp = client.post(
        "/v1/organizations",
        headers=as_user(ORGANIZATION),
        json={"name": "Acme", "description": "Widgets", "metadata": {"k": "v"}},
    )
    body = resp.json()
    assert body["data"]["action"] == "create_organization"
    assert body["data"]["attributes"]["owner"] == ORGANIZATION

    resp = client.get("/v1/organizations/1")
    assert resp.status_code == 200
    assert resp.json()["data"] == {
        "id": 1,
        "data": {
            "owner": ORGANIZATION,
            "name": "Acme",
            "description": "Widgets",
            "website": None,
            "metadata": {"k": "v"},
        },
    }

    listing = client.get(f"/v1/users/{ORGANIZATION}/organizations").json()
    assert listing["count"] == 1


def test_plan_price_is_a_string_on_the_wire(client):
    plan_id = setup_plan(client)
    data = client.get(f"/v1/plans/{plan_id}").json()["data"]["data"]
    assert data["price"] == "1000"
    assert data["duration_unit"] == "month"
    assert client.get("/v1/organizations/1/plans").json()["count"] == 1


def test_subscribe_cancel_flow(client, clock):
    plan_id = setup_plan(client)

    resp = client.post(f"/v1/plans/{plan_id}/subscribe", headers=as_user(USER))
    assert resp.status_code == 201
    subscription_id = int(resp.json()["data"]["attributes"]["subscription_id"])

    status = client.get(f"/v1/users/{USER}/plans/{plan_id}/subscribed").json()
    assert status["data"]["subscribed"] is True

    subs = client.get(f"/v1/plans/{plan_id}/subscriptions").json()
    assert [s["data"]["subscriber"] for s in subs["data"]] == [USER]

    resp = client.post(f"/v1/subscriptions/{subscription_id}/cancel", headers=as_user(USER))
    assert resp.status_code == 200

    sub = client.get(f"/v1/subscriptions/{subscription_id}").json()["data"]
    assert sub["data"]["canceled"] is True
    assert client.get(f"/v1/plans/{plan_id}/subscriptions").json()["count"] == 0
    assert client.get(f"/v1/users/{USER}/subscriptions").json()["count"] == 1


def test_guard_failures_map_to_error_codes(client, clock):
    plan_id = setup_plan(client)
    client.post(f"/v1/plans/{plan_id}/subscribe", headers=as_user(USER))

    again = client.post(f"/v1/plans/{plan_id}/subscribe", headers=as_user(USER))
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "already_subscribed"

    other = client.post("/v1/subscriptions/1/cancel", headers=as_user(USER2))
    assert other.status_code == 403
    assert other.json()["error"]["code"] == "unauthorized"

    clock.advance(MONTH_SECONDS + 1)
    late = client.post("/v1/subscriptions/1/cancel", headers=as_user(USER))
    assert late.status_code == 409
    assert late.json()["error"]["code"] == "already_expired"


def test_non_owner_cannot_create_plan(client):
    setup_plan(client)
    resp = client.post("/v1/plans", headers=as_user(USER), json=PLAN_BODY)
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "unauthorized"
    assert client.get("/v1/organizations/1/plans").json()["count"] == 1


def test_missing_caller_is_401(client):
    resp = client.post("/v1/organizations", json={"name": "Acme", "description": "d"})
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "unauthorized"


def test_not_found_has_standard_shape(client):
    resp = client.get("/v1/plans/9")
    rid = resp.headers.get("x-request-id")
    assert resp.status_code == 404
    body = resp.json()
    assert body["error"]["code"] == "not_found"
    assert body["error"]["request_id"] == rid


def test_invalid_body_is_validation_error(client):
    body = dict(PLAN_BODY, duration=300)
    resp = client.post("/v1/plans", headers=as_user(ORGANIZATION), json=body)
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "validation_error"


def test_oversized_address_is_a_validation_error(client):
    plan_id = setup_plan(client)
    resp = client.post(
        "/v1/query",
        json={"type": "is_subscribed", "user_address": "a" * 70_000, "plan_id": plan_id},
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "validation_error"


def test_id_zero_is_not_found(client):
    resp = client.get("/v1/organizations/0")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "not_found"

    resp = client.post(
        "/v1/plans", headers=as_user(ORGANIZATION), json=dict(PLAN_BODY, organization_id=0)
    )
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "not_found"

    assert client.get("/v1/subscriptions/0").status_code == 404
    assert client.post("/v1/plans/0/subscribe", headers=as_user(USER)).status_code == 404


def test_pagination_query_params(client):
    plan_id = setup_plan(client)
    for address in ["c", "a", "b"]:
        client.post(f"/v1/plans/{plan_id}/subscribe", headers=as_user(address))

    first = client.get(f"/v1/plans/{plan_id}/subscriptions", params={"limit": 2}).json()["data"]
    assert [s["data"]["subscriber"] for s in first] == ["a", "b"]
    rest = client.get(
        f"/v1/plans/{plan_id}/subscriptions", params={"start_after": "b", "limit": 2}
    ).json()["data"]
    assert [s["data"]["subscriber"] for s in rest] == ["c"]


def test_raw_execute_and_query_endpoints(client):
    resp = client.post(
        "/v1/execute",
        headers=as_user(ORGANIZATION),
        json={"type": "create_organization", "name": "Acme", "description": "d"},
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["attributes"]["organization_id"] == "1"

    resp = client.post("/v1/query", json={"type": "user_organizations", "user_address": ORGANIZATION})
    assert [o["id"] for o in resp.json()["data"]] == [1]

    bad = client.post("/v1/execute", headers=as_user(USER), json={"type": "launch_rocket"})
    assert bad.status_code == 400
    assert bad.json()["error"]["code"] == "validation_error"

    anonymous = client.post("/v1/execute", json={"type": "subscribe_plan", "plan_id": 1})
    assert anonymous.status_code == 403


def test_config_and_health(client):
    assert client.get("/v1/config").json()["data"] == {"admin": "admin"}
    assert client.get("/healthz").json() == {"status": "ok"}
    ready = client.get("/readyz").json()
    assert ready["status"] == "ok"
    assert ready["store"] == "MemoryStore"


def test_startup_opens_the_process_hub(client):
    assert hub_module._hub_instance is not None
    assert not hasattr(client.app.state, "startup_time")
