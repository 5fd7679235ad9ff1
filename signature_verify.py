from enum import Enum

from eth_keys import keys
from eth_keys.exceptions import BadSignature, ValidationError
from solders.pubkey import Pubkey
from solders.signature import Signature
from web3 import Web3

from sns_errors import InvalidSignatureError

ED25519_SIGNATURE_LEN = 64
ED25519_PUBKEY_LEN = 32
SECP256K1_SIGNATURE_LEN = 65
SECP256K1_PUBKEY_LEN = 64
EVM_ADDRESS_LEN = 20


class V1MessageFormat(str, Enum):
    """How the signed message of a V1 record is laid out."""

    # value || record key, raw bytes
    RAW = "raw"
    # utf-8 lowercase hex of the same concatenation (what the JS SDK signs)
    HEX = "hex"


def build_v1_message(value: bytes, record_key: Pubkey, fmt: V1MessageFormat = V1MessageFormat.RAW) -> bytes:
    message = bytes(value) + bytes(record_key)
    if fmt == V1MessageFormat.HEX:
        return message.hex().encode("ascii")
    return message


def verify_ed25519(message: bytes, signature: bytes, public_key: bytes) -> bool:
    if len(signature) != ED25519_SIGNATURE_LEN or len(public_key) != ED25519_PUBKEY_LEN:
        return False
    sig = Signature.from_bytes(bytes(signature))
    return sig.verify(Pubkey.from_bytes(bytes(public_key)), bytes(message))


def serialize_sol_record(
    content: Pubkey,
    record_key: Pubkey,
    signer: Pubkey,
    signature: bytes,
    fmt: V1MessageFormat = V1MessageFormat.RAW,
) -> bytes:
    """Build the data of a SOL record V1: content || signature.

    The signature must be the signer's over build_v1_message(content, record_key).
    """
    message = build_v1_message(bytes(content), record_key, fmt)
    if not verify_ed25519(message, signature, bytes(signer)):
        raise InvalidSignatureError(f"SOL record for {content} is not signed by {signer}")
    return bytes(content) + bytes(signature)


def _recover_secp256k1(message_hash: bytes, signature: bytes) -> keys.PublicKey | None:
    if len(message_hash) != 32 or len(signature) != SECP256K1_SIGNATURE_LEN:
        return None
    sig = bytearray(signature)
    # EVM wallets emit v as 27/28
    if sig[64] >= 27:
        sig[64] -= 27
    try:
        return keys.Signature(signature_bytes=bytes(sig)).recover_public_key_from_msg_hash(bytes(message_hash))
    except (BadSignature, ValidationError):
        return None


def verify_secondary(message_hash: bytes, signature: bytes, public_key: bytes) -> bool:
    """Check an EVM-style secp256k1 signature against an uncompressed 64-byte public key."""
    if len(public_key) != SECP256K1_PUBKEY_LEN:
        return False
    recovered = _recover_secp256k1(message_hash, signature)
    return recovered is not None and recovered.to_bytes() == bytes(public_key)


def verify_secondary_address(message_hash: bytes, signature: bytes, eth_address: bytes) -> bool:
    """Same as verify_secondary, against a 20-byte EVM address instead of a key."""
    if len(eth_address) != EVM_ADDRESS_LEN:
        return False
    recovered = _recover_secp256k1(message_hash, signature)
    if recovered is None:
        return False
    return bytes(Web3.keccak(recovered.to_bytes())[-EVM_ADDRESS_LEN:]) == bytes(eth_address)
