from vocab_trainer.auth.passwords import build_password_context, hash_password, verify_password


def test_hash_password_produces_salted_bcrypt_hashes() -> None:
    first = hash_password('Vladislav15')
    second = hash_password('Vladislav15')

    assert first.startswith('$2b$')
    assert first != second
    assert verify_password('Vladislav15', first)
    assert verify_password('Vladislav15', second)


def test_hash_password_uses_configured_work_factor() -> None:
    context = build_password_context(rounds=5)

    hashed = hash_password('secret', context)

    assert hashed.split('$')[2] == '05'


def test_build_password_context_defaults_to_configured_rounds(monkeypatch) -> None:
    monkeypatch.setattr('vocab_trainer.core.config.BCRYPT_ROUNDS', 6)

    hashed = hash_password('secret', build_password_context())

    assert hashed.split('$')[2] == '06'


def test_verify_password_rejects_wrong_password() -> None:
    assert not verify_password('wrong', hash_password('Vladislav15'))


def test_verify_password_rejects_missing_hash() -> None:
    assert not verify_password('anything', None)
    assert not verify_password('anything', '')


def test_verify_password_rejects_unrecognised_hash() -> None:
    assert not verify_password('Vladislav15', 'Vladislav15')
