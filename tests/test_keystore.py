"""
Tests for erdkit_core.keystore — scrypt / AES-128-CTR / HMAC-SHA256 pipeline.
"""

import json

import pytest

from erdkit_core.crypto_utils import secret_key_from_seed
from erdkit_core.errors import FormatError, IntegrityError, MalformedKeyError
from erdkit_core.keystore import (
    EncryptedKeyRecord,
    KdfParams,
    compute_mac,
    decrypt,
    derive_key,
    encrypt,
)

from conftest import ALICE_ADDRESS, ALICE_PUBKEY, ALICE_SEED, KEYSTORE_PASSWORD, TEST_SCRYPT_N


@pytest.fixture
def secret_key():
    return secret_key_from_seed(bytes.fromhex(ALICE_SEED))


@pytest.fixture
def record(secret_key):
    return encrypt(secret_key, KEYSTORE_PASSWORD, n=TEST_SCRYPT_N)


class TestEncryptDecrypt:
    def test_correct_password_recovers_key(self, record, secret_key):
        assert decrypt(KEYSTORE_PASSWORD, record) == secret_key

    def test_declared_address(self, record):
        assert record.bech32 == ALICE_ADDRESS
        assert record.address_hex == ALICE_PUBKEY

    def test_wrong_password_raises_integrity_error(self, record):
        with pytest.raises(IntegrityError):
            decrypt("not-the-password", record)

    def test_empty_password_is_a_valid_password(self, secret_key):
        rec = encrypt(secret_key, "", n=TEST_SCRYPT_N)
        assert decrypt("", rec) == secret_key
        with pytest.raises(IntegrityError):
            decrypt(" ", rec)

    def test_fresh_salt_and_iv_each_time(self, secret_key):
        a = encrypt(secret_key, "pw", n=TEST_SCRYPT_N)
        b = encrypt(secret_key, "pw", n=TEST_SCRYPT_N)
        assert a.kdf_params.salt != b.kdf_params.salt
        assert a.iv != b.iv
        assert a.ciphertext != b.ciphertext

    def test_deterministic_with_fixed_salt_and_iv(self, secret_key):
        kwargs = dict(n=TEST_SCRYPT_N, salt=b"\x01" * 32, iv=b"\x02" * 16, key_id="k")
        assert encrypt(secret_key, "pw", **kwargs) == encrypt(secret_key, "pw", **kwargs)

    def test_ciphertext_is_not_plaintext(self, record, secret_key):
        assert record.ciphertext != bytes(secret_key)
        assert len(record.ciphertext) == 64

    def test_mac_covers_ciphertext(self, record):
        derived = derive_key(KEYSTORE_PASSWORD, record.kdf_params)
        assert compute_mac(derived[16:32], record.ciphertext) == record.mac

    def test_tampered_ciphertext_detected(self, record):
        tampered = EncryptedKeyRecord(
            kdf_params=record.kdf_params,
            iv=record.iv,
            ciphertext=bytes([record.ciphertext[0] ^ 1]) + record.ciphertext[1:],
            mac=record.mac,
        )
        with pytest.raises(IntegrityError):
            decrypt(KEYSTORE_PASSWORD, tampered)

    def test_tampered_mac_detected(self, record):
        bad_mac = bytes([record.mac[0] ^ 1]) + record.mac[1:]
        tampered = EncryptedKeyRecord(record.kdf_params, record.iv, record.ciphertext, bad_mac)
        with pytest.raises(IntegrityError):
            decrypt(KEYSTORE_PASSWORD, tampered)

    def test_wrong_plaintext_length_is_malformed(self):
        params = KdfParams(salt=b"\x07" * 32, n=TEST_SCRYPT_N)
        derived = derive_key("pw", params)
        ciphertext = b"\x00" * 32   # decrypts to 32 bytes, not 64
        rec = EncryptedKeyRecord(params, b"\x00" * 16, ciphertext, compute_mac(derived[16:], ciphertext))
        with pytest.raises(MalformedKeyError):
            decrypt("pw", rec)

    def test_inconsistent_plaintext_is_malformed(self):
        params = KdfParams(salt=b"\x07" * 32, n=TEST_SCRYPT_N)
        derived = derive_key("pw", params)
        ciphertext = b"\x00" * 64   # decrypts to keystream, not seed || pubkey
        rec = EncryptedKeyRecord(params, b"\x00" * 16, ciphertext, compute_mac(derived[16:], ciphertext))
        with pytest.raises(MalformedKeyError):
            decrypt("pw", rec)


class TestKdfParams:
    def test_defaults(self):
        p = KdfParams(salt=b"s")
        assert (p.n, p.r, p.p, p.dklen) == (4096, 8, 1, 32)

    @pytest.mark.parametrize("field", ["n", "r", "p"])
    def test_non_positive_rejected(self, field):
        with pytest.raises(FormatError):
            KdfParams(salt=b"s", **{field: 0})

    def test_dklen_must_be_32(self):
        with pytest.raises(FormatError):
            KdfParams(salt=b"s", dklen=16)

    def test_empty_salt_rejected(self):
        with pytest.raises(FormatError):
            KdfParams(salt=b"")

    def test_non_power_of_two_n_is_format_error(self):
        with pytest.raises(FormatError):
            derive_key("pw", KdfParams(salt=b"s", n=1000))


class TestRecordSerialization:
    def test_json_roundtrip(self, record):
        assert EncryptedKeyRecord.from_json(record.to_json()) == record

    def test_json_layout(self, record):
        data = json.loads(record.to_json())
        assert data["version"] == 4
        assert data["kind"] == "secretKey"
        assert data["bech32"] == ALICE_ADDRESS
        crypto = data["crypto"]
        assert crypto["cipher"] == "aes-128-ctr"
        assert crypto["kdf"] == "scrypt"
        assert crypto["kdfparams"]["dklen"] == 32
        assert len(bytes.fromhex(crypto["cipherparams"]["iv"])) == 16
        assert len(bytes.fromhex(crypto["mac"])) == 32

    def test_invalid_json(self):
        with pytest.raises(FormatError):
            EncryptedKeyRecord.from_json("{not json")

    def test_not_an_object(self):
        with pytest.raises(FormatError):
            EncryptedKeyRecord.from_json("[1, 2, 3]")

    def test_missing_crypto_section(self, record):
        data = record.to_dict()
        del data["crypto"]
        with pytest.raises(FormatError):
            EncryptedKeyRecord.from_dict(data)

    def test_missing_mac(self, record):
        data = record.to_dict()
        del data["crypto"]["mac"]
        with pytest.raises(FormatError):
            EncryptedKeyRecord.from_dict(data)

    @pytest.mark.parametrize("key, value", [
        ("cipher", "aes-256-gcm"),
        ("kdf", "pbkdf2"),
    ])
    def test_unsupported_algorithms(self, record, key, value):
        data = record.to_dict()
        data["crypto"][key] = value
        with pytest.raises(FormatError):
            EncryptedKeyRecord.from_dict(data)

    def test_mnemonic_kind_unsupported(self, record):
        data = record.to_dict()
        data["kind"] = "mnemonic"
        with pytest.raises(FormatError):
            EncryptedKeyRecord.from_dict(data)

    def test_bad_hex(self, record):
        data = record.to_dict()
        data["crypto"]["ciphertext"] = "zz"
        with pytest.raises(FormatError):
            EncryptedKeyRecord.from_dict(data)

    def test_short_iv(self, record):
        data = record.to_dict()
        data["crypto"]["cipherparams"]["iv"] = "00" * 8
        with pytest.raises(FormatError):
            EncryptedKeyRecord.from_dict(data)

    def test_string_cost_parameter(self, record):
        data = record.to_dict()
        data["crypto"]["kdfparams"]["n"] = "4096"
        with pytest.raises(FormatError):
            EncryptedKeyRecord.from_dict(data)

    @pytest.mark.parametrize("version", [99, 3, "4", True, None])
    def test_unsupported_version(self, record, version):
        data = record.to_dict()
        data["version"] = version
        with pytest.raises(FormatError):
            EncryptedKeyRecord.from_dict(data)

    @pytest.mark.parametrize("key", ["address", "bech32", "id"])
    def test_non_string_metadata(self, record, key):
        data = record.to_dict()
        data[key] = 123
        with pytest.raises(FormatError):
            EncryptedKeyRecord.from_dict(data)

    def test_absent_metadata_defaults_to_empty(self, record):
        data = record.to_dict()
        for key in ("address", "bech32", "id", "version"):
            del data[key]
        parsed = EncryptedKeyRecord.from_dict(data)
        assert (parsed.address_hex, parsed.bech32, parsed.id) == ("", "", "")
        assert parsed.version == 4
