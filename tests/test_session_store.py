import json

from shopeasy.app.models import User
from shopeasy.modules.session.store import TOKEN_KEY, USER_KEY, Anonymous, Authenticated, SessionStore

ADA = User(id=1, name="Ada", email="ada@example.com")


def test_restore_with_both_keys_is_authenticated():
    storage = {TOKEN_KEY: "abc", USER_KEY: json.dumps(ADA.to_dict())}

    state = SessionStore(storage).restore()

    assert state == Authenticated(user=ADA, token="abc")


def test_restore_with_missing_key_is_anonymous():
    assert SessionStore({TOKEN_KEY: "abc"}).restore() == Anonymous()
    assert SessionStore({USER_KEY: json.dumps(ADA.to_dict())}).restore() == Anonymous()
    assert SessionStore({}).restore() == Anonymous()


def test_restore_with_malformed_user_is_anonymous():
    assert SessionStore({TOKEN_KEY: "abc", USER_KEY: "{not json"}).restore() == Anonymous()
    assert SessionStore({TOKEN_KEY: "abc", USER_KEY: "[1, 2]"}).restore() == Anonymous()


def test_restore_treats_storage_failure_as_anonymous():
    class BrokenStorage(dict):
        def get(self, key, default=None):
            raise OSError("storage unavailable")

    assert SessionStore(BrokenStorage()).restore() == Anonymous()


def test_login_persists_both_keys():
    storage = {}
    store = SessionStore(storage)

    store.login(ADA, "tok")

    assert storage[TOKEN_KEY] == "tok"
    assert json.loads(storage[USER_KEY]) == {"id": 1, "name": "Ada", "email": "ada@example.com"}
    assert store.is_authenticated
    assert store.user == ADA
    assert SessionStore(storage).restore() == store.state


def test_logout_clears_keys_and_runs_hook():
    storage = {TOKEN_KEY: "tok", USER_KEY: json.dumps(ADA.to_dict()), "other": "kept"}
    cleared = []
    store = SessionStore(storage, on_logout=lambda: cleared.append(True))
    store.restore()

    store.logout()

    assert storage == {"other": "kept"}
    assert store.state == Anonymous()
    assert cleared == [True]


def test_logout_when_anonymous_still_runs_hook():
    cleared = []
    store = SessionStore({}, on_logout=lambda: cleared.append(True))

    store.logout()

    assert cleared == [True]


def test_epoch_changes_on_login_and_logout():
    store = SessionStore({})
    start = store.epoch

    store.login(ADA, "tok")
    after_login = store.epoch
    store.logout()

    assert start < after_login < store.epoch
