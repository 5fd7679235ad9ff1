import hashlib

import pytest
from eth_keys import keys
from solders.keypair import Keypair

from signature_verify import (
    V1MessageFormat,
    build_v1_message,
    serialize_sol_record,
    verify_ed25519,
    verify_secondary,
    verify_secondary_address,
)
from sns_errors import InvalidSignatureError

MESSAGE_HASH = hashlib.sha256(b"sns record content").digest()


def test_verify_ed25519():
    keypair = Keypair()
    message = b"record content"
    signature = bytes(keypair.sign_message(message))
    assert verify_ed25519(message, signature, bytes(keypair.pubkey()))


def test_verify_ed25519_rejects_tampering():
    keypair = Keypair()
    signature = bytes(keypair.sign_message(b"record content"))
    assert not verify_ed25519(b"record content!", signature, bytes(keypair.pubkey()))
    assert not verify_ed25519(b"record content", signature, bytes(Keypair().pubkey()))


def test_verify_ed25519_bad_lengths():
    keypair = Keypair()
    signature = bytes(keypair.sign_message(b"x"))
    assert not verify_ed25519(b"x", signature[:63], bytes(keypair.pubkey()))
    assert not verify_ed25519(b"x", signature, bytes(keypair.pubkey())[:31])
    assert not verify_ed25519(b"x", b"", b"")


def test_build_v1_message_raw():
    value, record_key = Keypair().pubkey(), Keypair().pubkey()
    message = build_v1_message(bytes(value), record_key)
    assert message == bytes(value) + bytes(record_key)
    assert len(message) == 64


def test_build_v1_message_hex():
    value, record_key = Keypair().pubkey(), Keypair().pubkey()
    message = build_v1_message(bytes(value), record_key, V1MessageFormat.HEX)
    assert message == (bytes(value) + bytes(record_key)).hex().encode()
    assert len(message) == 128


def test_serialize_sol_record():
    owner, record_key, content = Keypair(), Keypair().pubkey(), Keypair().pubkey()
    signature = bytes(owner.sign_message(build_v1_message(bytes(content), record_key)))

    data = serialize_sol_record(content, record_key, owner.pubkey(), signature)
    assert data == bytes(content) + signature
    with pytest.raises(InvalidSignatureError):
        serialize_sol_record(content, record_key, Keypair().pubkey(), signature)
    with pytest.raises(InvalidSignatureError):
        serialize_sol_record(content, record_key, owner.pubkey(), signature, V1MessageFormat.HEX)


def test_verify_secondary():
    private_key = keys.PrivateKey(b"\x01" * 32)
    signature = private_key.sign_msg_hash(MESSAGE_HASH).to_bytes()
    public_key = private_key.public_key.to_bytes()
    assert verify_secondary(MESSAGE_HASH, signature, public_key)


def test_verify_secondary_accepts_evm_recovery_id():
    private_key = keys.PrivateKey(b"\x02" * 32)
    signature = bytearray(private_key.sign_msg_hash(MESSAGE_HASH).to_bytes())
    signature[64] += 27
    assert verify_secondary(MESSAGE_HASH, bytes(signature), private_key.public_key.to_bytes())


def test_verify_secondary_rejects_other_key_or_hash():
    private_key = keys.PrivateKey(b"\x01" * 32)
    other = keys.PrivateKey(b"\x03" * 32)
    signature = private_key.sign_msg_hash(MESSAGE_HASH).to_bytes()
    assert not verify_secondary(MESSAGE_HASH, signature, other.public_key.to_bytes())
    assert not verify_secondary(hashlib.sha256(b"other").digest(), signature, private_key.public_key.to_bytes())


def test_verify_secondary_malformed_input():
    public_key = keys.PrivateKey(b"\x01" * 32).public_key.to_bytes()
    assert not verify_secondary(MESSAGE_HASH, bytes(64), public_key)
    assert not verify_secondary(MESSAGE_HASH[:31], bytes(65), public_key)
    assert not verify_secondary(MESSAGE_HASH, bytes(64) + b"\x09", public_key)
    assert not verify_secondary(MESSAGE_HASH, bytes(65), public_key[:63])


def test_verify_secondary_address():
    private_key = keys.PrivateKey(b"\x04" * 32)
    signature = private_key.sign_msg_hash(MESSAGE_HASH).to_bytes()
    address = private_key.public_key.to_canonical_address()
    assert verify_secondary_address(MESSAGE_HASH, signature, address)
    assert not verify_secondary_address(MESSAGE_HASH, signature, bytes(20))
    assert not verify_secondary_address(MESSAGE_HASH, signature, address[:19])
