"""Unit tests for the AES-256-GCM crypto engine and key loading."""

import base64

import pytest

from common.constants import NONCE_SIZE_BYTES, TAG_SIZE_BYTES
from geovault.crypto import CryptoEngine, load_key
from geovault.exceptions import DecryptionFailure, KeyProvisioningError

from tests.helpers import TEST_KEY_HEX


def flip_bit(data: bytes, bit: int) -> bytes:
    out = bytearray(data)
    out[bit // 8] ^= 1 << (bit % 8)
    return bytes(out)


class TestRoundTrip:
    """Encrypt then decrypt returns the original bytes."""

    @pytest.mark.parametrize("plaintext", [
        b"",
        b"x",
        b"quarterly figures",
        bytes(range(256)) * 40,
    ])
    def test_round_trip(self, crypto_engine, plaintext):
        assert crypto_engine.decrypt(crypto_engine.encrypt(plaintext)) == plaintext

    def test_payload_overhead_is_nonce_plus_tag(self, crypto_engine):
        for size in (0, 1, 15, 16, 17, 1000):
            payload = crypto_engine.encrypt(b"a" * size)
            assert len(payload) == NONCE_SIZE_BYTES + TAG_SIZE_BYTES + size

    def test_accepts_bytearray_and_memoryview(self, crypto_engine):
        payload = crypto_engine.encrypt(bytearray(b"data"))
        assert crypto_engine.decrypt(memoryview(payload)) == b"data"


class TestLayout:
    """Payload layout is nonce, then tag, then ciphertext."""

    def test_known_answer_vector(self):
        # GCM specification test case 14: zero key, zero IV, one zero block.
        engine = CryptoEngine(bytes(32), nonce_source=lambda n: bytes(n))

        payload = engine.encrypt(bytes(16))

        assert payload[:12] == bytes(12)
        assert payload[12:28] == bytes.fromhex("d0d1c8a799996bf0265b98b5d48ab919")
        assert payload[28:] == bytes.fromhex("cea7403d4d606b6e074ec5d3baf39d18")

    def test_fixed_nonce_source_is_used(self):
        nonce = bytes(range(12))
        engine = CryptoEngine(bytes.fromhex(TEST_KEY_HEX), nonce_source=lambda n: nonce)

        assert engine.encrypt(b"hello")[:12] == nonce

    def test_wrong_nonce_length_is_rejected(self):
        engine = CryptoEngine(bytes(32), nonce_source=lambda n: bytes(8))
        with pytest.raises(ValueError):
            engine.encrypt(b"hello")


class TestNonceUniqueness:
    """Every encryption uses a fresh random nonce."""

    def test_same_plaintext_twice(self, crypto_engine):
        first = crypto_engine.encrypt(b"same bytes")
        second = crypto_engine.encrypt(b"same bytes")

        assert first[:12] != second[:12]
        assert first != second

    def test_many_nonces_distinct(self, crypto_engine):
        nonces = {crypto_engine.encrypt(b"")[:12] for _ in range(500)}
        assert len(nonces) == 500


class TestTamperDetection:
    """Any modification makes decryption fail without returning plaintext."""

    def test_every_bit_flip_in_tag_and_ciphertext(self, crypto_engine):
        payload = crypto_engine.encrypt(b"secret")

        for bit in range(NONCE_SIZE_BYTES * 8, len(payload) * 8):
            with pytest.raises(DecryptionFailure):
                crypto_engine.decrypt(flip_bit(payload, bit))

    def test_nonce_bit_flip(self, crypto_engine):
        payload = crypto_engine.encrypt(b"secret")
        with pytest.raises(DecryptionFailure):
            crypto_engine.decrypt(flip_bit(payload, 0))

    def test_truncated_payload(self, crypto_engine):
        payload = crypto_engine.encrypt(b"secret")
        with pytest.raises(DecryptionFailure):
            crypto_engine.decrypt(payload[:-1])

    @pytest.mark.parametrize("length", [0, 1, 27])
    def test_payload_shorter_than_header(self, crypto_engine, length):
        with pytest.raises(DecryptionFailure):
            crypto_engine.decrypt(bytes(length))

    def test_non_bytes_payload(self, crypto_engine):
        with pytest.raises(DecryptionFailure):
            crypto_engine.decrypt("not bytes")

    def test_wrong_key(self, crypto_engine):
        payload = crypto_engine.encrypt(b"secret")
        other = CryptoEngine(bytes(32))
        with pytest.raises(DecryptionFailure):
            other.decrypt(payload)


class TestKeyLoading:
    """Key provisioning from hex or base64 text."""

    def test_hex(self):
        assert load_key(TEST_KEY_HEX) == bytes(range(32))

    def test_hex_with_whitespace(self):
        assert load_key(f"  {TEST_KEY_HEX}\n") == bytes(range(32))

    def test_base64(self):
        assert load_key(base64.b64encode(bytes(range(32))).decode()) == bytes(range(32))

    def test_urlsafe_base64(self):
        key = bytes([0xfb, 0xff] * 16)
        assert load_key(base64.urlsafe_b64encode(key).decode()) == key

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_missing(self, raw):
        with pytest.raises(KeyProvisioningError):
            load_key(raw)

    @pytest.mark.parametrize("raw", [
        "abcd",
        "zz" * 32,
        base64.b64encode(bytes(16)).decode(),
        "not base64 at all!",
    ])
    def test_malformed(self, raw):
        with pytest.raises(KeyProvisioningError):
            load_key(raw)

    def test_urlsafe_with_junk_characters(self):
        text = base64.urlsafe_b64encode(bytes([0xfb, 0xff] * 16)).decode()
        with pytest.raises(KeyProvisioningError):
            load_key(text[:10] + "!!*&$$" + text[10:])

    def test_standard_with_junk_characters(self):
        text = base64.b64encode(bytes(range(32))).decode()
        with pytest.raises(KeyProvisioningError):
            load_key(text[:8] + "#" + text[8:])

    @pytest.mark.parametrize("key", [b"", bytes(16), bytes(31), bytes(33), "0" * 32])
    def test_engine_rejects_bad_key(self, key):
        with pytest.raises(KeyProvisioningError):
            CryptoEngine(key)

    def test_repr_hides_key(self, crypto_engine):
        assert TEST_KEY_HEX not in repr(crypto_engine)
        assert "aes-256-gcm" in repr(crypto_engine)
