from marketplace.notifications import service as notifications_service


def _notify(**overrides):
    kwargs = dict(
        post={"id": "p1", "title": "Vélo"},
        payment_id="pay-1",
        buyer_id="u1",
        buyer_name="Bob",
        buyer_email="bob@gmail.com",
        quantity=2,
        amount=20.0,
    )
    kwargs.update(overrides)
    return notifications_service.notify_purchase(**kwargs)


def test_notify_purchase_writes_admin_then_buyer(store):
    assert _notify() == 2
    admin, buyer = store.notifications
    assert admin["recipient"] == "admin"
    assert admin["message"] == "Payment received for Vélo"
    assert admin["meta"] == {
        "postId": "p1",
        "buyerId": "u1",
        "buyerName": "Bob",
        "buyerEmail": "bob@gmail.com",
        "quantity": 2,
        "amount": 20.0,
    }
    assert buyer["recipient"] == "u1"
    assert buyer["message"] == "Payment successful for Vélo"
    assert buyer["meta"] == {"postId": "p1", "quantity": 2, "amount": 20.0}
    assert admin["read"] is False and buyer["read"] is False


def test_buyer_recipient_fallbacks():
    assert notifications_service.buyer_recipient("u1", "bob@gmail.com") == "u1"
    assert notifications_service.buyer_recipient(None, "bob@gmail.com") == "bob@gmail.com"
    assert notifications_service.buyer_recipient(None, None) == "unknown"


def test_notify_purchase_buyer_by_email(store):
    _notify(buyer_id=None)
    assert [n["recipient"] for n in store.notifications] == ["admin", "bob@gmail.com"]


def test_notify_purchase_failure_is_logged(store, monkeypatch, caplog):
    calls = []

    def _flaky(*, recipient, message, meta):
        calls.append(recipient)
        if recipient == "admin":
            raise RuntimeError("insert failed")
        return store.insert_notification(recipient=recipient, message=message, meta=meta)

    monkeypatch.setattr("marketplace.notifications.repository.insert_notification", _flaky)
    assert _notify() == 1
    assert calls == ["admin", "u1"]
    assert "payment_id=pay-1" in caplog.text


def test_list_for_admin_newest_first(store):
    _notify(payment_id="pay-1")
    _notify(payment_id="pay-2", post={"id": "p2", "title": "Casque"})
    notes = notifications_service.list_for_admin()
    assert [n["message"] for n in notes] == ["Payment received for Casque", "Payment received for Vélo"]


def test_mark_read(store):
    _notify()
    note_id = store.notifications[0]["id"]
    assert notifications_service.mark_read(note_id)["read"] is True
    assert notifications_service.mark_read("missing") is None
