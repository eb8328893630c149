from errors import ErrorKind, Failure
from users import Role, create_user_directory


def test_register_and_find(directory):
    user = directory.register("alice", "pw")
    assert user.login == "alice"
    assert user.role == Role.MEMBER
    assert directory.find("alice") is user


def test_password_is_not_stored_in_plaintext(directory):
    user = directory.register("alice", "pw")
    assert user.password_hash != "pw"
    assert directory.verify(user, "pw")
    assert not directory.verify(user, "wrong")


def test_duplicate_login_conflicts(directory):
    first = directory.register("alice", "pw")
    result = directory.register("alice", "other")
    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.CONFLICT
    assert directory.find("alice") is first
    assert len(list(directory.list_users())) == 1


def test_find_unknown_user(directory):
    result = directory.find("nobody")
    assert isinstance(result, Failure)
    assert result.kind == ErrorKind.NOT_FOUND


def test_admin_is_bootstrapped_from_environment(monkeypatch):
    monkeypatch.setenv("ADMIN_LOGIN", "root")
    monkeypatch.setenv("ADMIN_PASSWORD", "secret")
    directory = create_user_directory()
    admin = directory.find("root")
    assert admin.is_admin
    assert directory.verify(admin, "secret")


def test_no_admin_without_environment(monkeypatch):
    monkeypatch.delenv("ADMIN_LOGIN", raising=False)
    monkeypatch.delenv("ADMIN_PASSWORD", raising=False)
    directory = create_user_directory()
    assert list(directory.list_users()) == []
