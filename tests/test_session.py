from tax_lookup.session import SessionGate


def test_correct_password_unlocks_and_persists():
    storage = {}
    gate = SessionGate(storage, password="s3cret")
    assert gate.authenticate("s3cret")
    assert gate.is_authenticated
    assert storage["is_auth"] is True

    # a new gate over the same tab storage is already unlocked
    assert SessionGate(storage, password="s3cret").is_authenticated


def test_wrong_password_sets_transient_error():
    gate = SessionGate({}, password="s3cret")
    assert not gate.authenticate("guess")
    assert not gate.is_authenticated
    assert gate.consume_login_error() is True
    assert gate.consume_login_error() is False


def test_logout_clears_flag():
    storage = {}
    gate = SessionGate(storage, password="s3cret")
    gate.authenticate("s3cret")
    gate.logout()
    assert not gate.is_authenticated
    assert "is_auth" not in storage


def test_default_password_comes_from_config(monkeypatch):
    monkeypatch.setattr("tax_lookup.config.APP_PASSWORD", "from-env")
    gate = SessionGate({})
    assert gate.authenticate("from-env")
