"""Password hashing tests."""

from diary_api.auth.password import hash_password, verify_password


def test_hash_is_salted():
    h1 = hash_password("hunter2")
    h2 = hash_password("hunter2")
    assert h1 != h2
    assert h1.startswith("$2")


def test_verify():
    h = hash_password("hunter2")
    assert verify_password("hunter2", h)
    assert not verify_password("hunter3", h)


def test_verify_malformed_hash():
    assert not verify_password("hunter2", "plaintext-not-a-hash")


def test_explicit_rounds():
    h = hash_password("pw", rounds=5)
    assert h.split("$")[2] == "05"
