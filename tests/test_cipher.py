import pytest

from envcrypt.cipher import DEFAULT_IV, CipherConfig, decrypt, encrypt, seal, unseal
from envcrypt.utils import ConfigError, CryptoError

from conftest import IV, KEY, PLAINTEXT


def test_round_trip():
    assert decrypt(KEY, IV, encrypt(KEY, IV, PLAINTEXT)) == PLAINTEXT


@pytest.mark.parametrize('plaintext', ['x', 'SECRET=hunter2\n', 'EMOJI=\U0001f510\r\nÜ=ü'])
def test_round_trip_text(plaintext):
    assert decrypt(KEY, IV, encrypt(KEY, IV, plaintext)) == plaintext


def test_deterministic():
    assert encrypt(KEY, IV, PLAINTEXT) == encrypt(KEY, IV, PLAINTEXT)


def test_ciphertext_is_hex():
    ciphertext = encrypt(KEY, IV, PLAINTEXT)
    assert set(ciphertext) <= set('0123456789abcdef')
    assert PLAINTEXT not in ciphertext


def test_different_iv_different_ciphertext():
    assert encrypt(KEY, IV, PLAINTEXT) != encrypt(KEY, 'fedcba9876543210', PLAINTEXT)


@pytest.mark.parametrize('index', [0, 7, -1])
def test_tampering_is_detected(index):
    ciphertext = list(encrypt(KEY, IV, PLAINTEXT))
    ciphertext[index] = '1' if ciphertext[index] == '0' else '0'
    with pytest.raises(CryptoError):
        decrypt(KEY, IV, ''.join(ciphertext))


def test_wrong_key():
    with pytest.raises(CryptoError):
        decrypt('k2', IV, encrypt(KEY, IV, PLAINTEXT))


def test_wrong_iv():
    with pytest.raises(CryptoError):
        decrypt(KEY, 'fedcba9876543210', encrypt(KEY, IV, PLAINTEXT))


@pytest.mark.parametrize('ciphertext', ['not hex', 'abc', 'abcd'])
def test_malformed_ciphertext(ciphertext):
    with pytest.raises(CryptoError):
        decrypt(KEY, IV, ciphertext)


@pytest.mark.parametrize('iv', ['short', 'x' * 129])
def test_invalid_iv(iv):
    with pytest.raises(CryptoError):
        encrypt(KEY, iv, PLAINTEXT)


def test_empty_key():
    with pytest.raises(CryptoError):
        encrypt('', IV, PLAINTEXT)


def test_seal_uses_a_random_iv():
    first, second = seal(KEY, PLAINTEXT), seal(KEY, PLAINTEXT)
    assert first != second
    assert unseal(KEY, first) == unseal(KEY, second) == PLAINTEXT


def test_unseal_without_iv():
    with pytest.raises(CryptoError):
        unseal(KEY, encrypt(KEY, IV, PLAINTEXT))


def test_config_requires_key():
    with pytest.raises(ConfigError):
        CipherConfig(key='')


def test_config_explicit_iv():
    config = CipherConfig(key=KEY, iv=IV)
    assert config.encrypt(PLAINTEXT) == encrypt(KEY, IV, PLAINTEXT)
    assert config.decrypt(encrypt(KEY, IV, PLAINTEXT)) == PLAINTEXT


def test_config_legacy_iv():
    config = CipherConfig(key=KEY, legacy_iv=True)
    assert config.effective_iv == DEFAULT_IV
    assert config.encrypt(PLAINTEXT) == encrypt(KEY, DEFAULT_IV, PLAINTEXT)


def test_config_random_iv():
    config = CipherConfig(key=KEY, iv='')
    assert config.effective_iv is None
    assert config.decrypt(config.encrypt(PLAINTEXT)) == PLAINTEXT


def test_config_repr_hides_key():
    assert KEY not in repr(CipherConfig(key=KEY, iv=IV))


def test_case_change_is_detected():
    ciphertext = encrypt(KEY, IV, PLAINTEXT)
    index = next(i for i, c in enumerate(ciphertext) if c in 'abcdef')
    altered = ciphertext[:index] + ciphertext[index].upper() + ciphertext[index + 1:]
    with pytest.raises(CryptoError):
        decrypt(KEY, IV, altered)


def test_surrounding_whitespace_is_ignored():
    assert decrypt(KEY, IV, encrypt(KEY, IV, PLAINTEXT) + '\n') == PLAINTEXT
