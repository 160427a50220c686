from fastapi.testclient import TestClient


def test_pay_records_price_times_quantity(client, store):
    post = store.add_post(price=10)
    res = client.post(
        f"/posts/{post['id']}/pay",
        json={"quantity": 3, "buyerId": "u1", "buyerName": "Bob", "buyerEmail": "bob@gmail.com"},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["msg"] == "Payment recorded"
    assert body["amount"] == 30
    payment = store.payments[0]
    assert payment["id"] == body["paymentId"]
    assert payment["post_id"] == post["id"]
    assert payment["buyer_email"] == "bob@gmail.com"
    assert len(store.notifications) == 2


def test_pay_invalid_quantity(client, store):
    post = store.add_post(price=10)
    res = client.post(f"/posts/{post['id']}/pay", json={"quantity": 0})
    assert res.status_code == 400
    assert res.json() == {"msg": "Invalid quantity"}
    assert store.payments == [] and store.notifications == []


def test_pay_unknown_post(client, store):
    res = client.post("/posts/nope/pay", json={"quantity": 1})
    assert res.status_code == 404
    assert res.json() == {"msg": "Post not found"}


def test_pay_is_not_idempotent(client, store):
    post = store.add_post(price=5)
    for _ in range(2):
        assert client.post(f"/posts/{post['id']}/pay", json={"quantity": 1}).status_code == 200
    assert len(store.payments) == 2
    assert len(store.notifications) == 4


def test_pay_invalid_json(client, store):
    post = store.add_post()
    res = client.post(f"/posts/{post['id']}/pay", content=b"oops", headers={"Content-Type": "application/json"})
    assert res.status_code == 400
    assert res.json() == {"msg": "Invalid JSON body"}


def test_checkout_flow_records_once(client, store, checkout_provider):
    post = store.add_post(title="Vélo", price=12.5)
    res = client.post(
        f"/posts/{post['id']}/create-checkout-session",
        json={"quantity": 2, "buyerId": "u1", "buyerName": "Bob", "buyerEmail": "bob@gmail.com"},
    )
    assert res.status_code == 200
    session_id = res.json()["sessionId"]
    assert res.json()["publishableKey"] == "pk_test_123"
    assert checkout_provider.sessions[session_id]["success_url"].startswith("http://testserver/payment-success.html?session_id=")
    assert store.payments == []

    checkout_provider.mark_paid(session_id)
    first = client.post("/posts/confirm-payment", json={"sessionId": session_id})
    again = client.post("/posts/confirm-payment", json={"sessionId": session_id})

    assert first.status_code == 200 and again.status_code == 200
    assert first.json()["msg"] == "Payment recorded"
    assert first.json()["amount"] == 25
    assert again.json()["msg"] == "Already recorded"
    assert again.json()["paymentId"] == first.json()["paymentId"]
    assert len(store.payments) == 1
    assert len(store.notifications) == 2


def test_confirm_unpaid_session(client, store, checkout_provider):
    post = store.add_post()
    session_id = client.post(f"/posts/{post['id']}/create-checkout-session", json={}).json()["sessionId"]
    res = client.post("/posts/confirm-payment", json={"sessionId": session_id})
    assert res.status_code == 400
    assert res.json() == {"msg": "Payment not completed"}
    assert store.payments == [] and store.notifications == []


def test_confirm_errors(client, store):
    assert client.post("/posts/confirm-payment", json={}).json() == {"msg": "Missing sessionId"}
    res = client.post("/posts/confirm-payment", json={"sessionId": "cs_unknown"})
    assert res.status_code == 404
    assert res.json() == {"msg": "Session not found"}


def test_checkout_invalid_quantity(client, store, checkout_provider):
    post = store.add_post()
    res = client.post(f"/posts/{post['id']}/create-checkout-session", json={"quantity": -1})
    assert res.status_code == 400
    assert checkout_provider.sessions == {}


def test_checkout_without_stripe_configured(app, client, store):
    post = store.add_post()
    app.state.checkout_provider = None
    res = client.post(f"/posts/{post['id']}/create-checkout-session", json={"quantity": 1})
    assert res.status_code == 500
    assert res.json() == {"msg": "Stripe not configured on server"}
    res = client.post("/posts/confirm-payment", json={"sessionId": "cs_1"})
    assert res.status_code == 500


def test_checkout_provider_failure(client, store, checkout_provider):
    post = store.add_post()
    checkout_provider.fail_create = True
    res = client.post(f"/posts/{post['id']}/create-checkout-session", json={"quantity": 1})
    assert res.status_code == 500
    assert res.json() == {"msg": "Server error creating Stripe session"}


def test_confirm_during_store_outage_is_500(app, store, checkout_provider, monkeypatch):
    post = store.add_post(price=10)
    app.state.checkout_provider = checkout_provider
    with TestClient(app, raise_server_exceptions=False) as c:
        session_id = c.post(f"/posts/{post['id']}/create-checkout-session", json={"quantity": 1}).json()["sessionId"]
        checkout_provider.mark_paid(session_id)

        def _down(post_id):
            raise ConnectionError("supabase unreachable")
        monkeypatch.setattr("marketplace.posts.repository.get_post", _down)
        res = c.post("/posts/confirm-payment", json={"sessionId": session_id})
    app.state.checkout_provider = None
    assert res.status_code == 500
    assert res.json() == {"msg": "Server error"}
    assert store.payments == []
