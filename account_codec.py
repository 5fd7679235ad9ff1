"""Decoders for the raw account layouts the resolver reads.

All integers are little-endian. Decoders accept trailing bytes past the fixed
layout but never read short: a buffer that is too small, or a record whose
declared content length runs past its end, raises a CodecError subclass.
"""

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

import base58
from solders.pubkey import Pubkey

from sns_constants import (
    NFT_RECORD_LEN,
    PRIMARY_DOMAIN_LEN,
    PUBKEY_LEN,
    RECORD_HEADER_LEN,
    REGISTRY_HEADER_LEN,
    REVERSE_LENGTH_PREFIX_LEN,
    SIGNATURE_LEN,
    TOKEN_ACCOUNT_MIN_LEN,
)
from sns_errors import (
    AccountTooShortError,
    CodecError,
    ContentOverrunError,
    InvalidCharacterError,
    InvalidTagError,
    InvalidValidationError,
)


def b58encode(data: bytes) -> str:
    return base58.b58encode(bytes(data)).decode("ascii")


def b58decode(text: str) -> bytes:
    try:
        return base58.b58decode(text)
    except ValueError as e:
        raise InvalidCharacterError(str(e)) from e


def _pubkey(data: bytes, offset: int) -> Pubkey:
    return Pubkey.from_bytes(bytes(data[offset : offset + PUBKEY_LEN]))


def _require(data: bytes, size: int, what: str) -> None:
    if len(data) < size:
        raise AccountTooShortError(f"{what}: {len(data)} < {size} bytes")


class NftTag(IntEnum):
    UNINITIALIZED = 0
    CENTRAL_STATE = 1
    ACTIVE_RECORD = 2
    INACTIVE_RECORD = 3


class Validation(IntEnum):
    NONE = 0
    SOLANA = 1
    ETHEREUM = 2
    UNVERIFIED_SOLANA = 3

    @property
    def length(self) -> int:
        return _VALIDATION_LENGTHS[self]

    @classmethod
    def from_value(cls, value: int) -> "Validation":
        try:
            return cls(value)
        except ValueError:
            raise InvalidValidationError(f"unknown validation type {value}") from None


_VALIDATION_LENGTHS = {
    Validation.NONE: 0,
    Validation.SOLANA: 32,
    Validation.ETHEREUM: 20,
    Validation.UNVERIFIED_SOLANA: 32,
}


@dataclass(frozen=True)
class Registry:
    parent_name: Pubkey
    owner: Pubkey
    class_address: Pubkey
    payload: bytes


@dataclass(frozen=True)
class NftRecord:
    tag: NftTag
    nonce: int
    name_account: Pubkey
    owner: Pubkey
    nft_mint: Pubkey

    @property
    def is_active(self) -> bool:
        return self.tag == NftTag.ACTIVE_RECORD


@dataclass(frozen=True)
class RecordV1:
    registry: Registry
    value: bytes  # 32 bytes
    signature: bytes  # 64 bytes


@dataclass(frozen=True)
class RecordHeader:
    staleness_validation: int  # u16
    roa_validation: int  # u16
    content_length: int  # u32

    @property
    def staleness_type(self) -> Validation:
        return Validation.from_value(self.staleness_validation)

    @property
    def roa_type(self) -> Validation:
        return Validation.from_value(self.roa_validation)


@dataclass(frozen=True)
class RecordV2:
    registry: Registry
    header: RecordHeader
    staleness_id: bytes
    roa_id: bytes
    content: bytes


@dataclass(frozen=True)
class TokenAccount:
    mint: Pubkey
    owner: Pubkey
    amount: int  # u64


def decode_registry(data: bytes) -> Registry:
    _require(data, REGISTRY_HEADER_LEN, "registry")
    return Registry(
        parent_name=_pubkey(data, 0),
        owner=_pubkey(data, 32),
        class_address=_pubkey(data, 64),
        payload=bytes(data[REGISTRY_HEADER_LEN:]),
    )


def decode_nft_record(data: bytes) -> NftRecord:
    _require(data, NFT_RECORD_LEN, "nft record")
    tag_value, nonce = struct.unpack_from("<BB", data, 0)
    try:
        tag = NftTag(tag_value)
    except ValueError:
        raise InvalidTagError(f"tag byte {tag_value}") from None
    return NftRecord(
        tag=tag,
        nonce=nonce,
        name_account=_pubkey(data, 2),
        owner=_pubkey(data, 34),
        nft_mint=_pubkey(data, 66),
    )


def decode_record_header(data: bytes) -> RecordHeader:
    _require(data, RECORD_HEADER_LEN, "record header")
    staleness, roa, length = struct.unpack_from("<HHI", data, 0)
    return RecordHeader(staleness, roa, length)


def decode_record_v1(data: bytes) -> RecordV1:
    _require(data, REGISTRY_HEADER_LEN + PUBKEY_LEN + SIGNATURE_LEN, "record v1")
    registry = decode_registry(data)
    off = REGISTRY_HEADER_LEN
    return RecordV1(
        registry=registry,
        value=bytes(data[off : off + PUBKEY_LEN]),
        signature=bytes(data[off + PUBKEY_LEN : off + PUBKEY_LEN + SIGNATURE_LEN]),
    )


def decode_record_v2(data: bytes) -> RecordV2:
    """Decode a standalone record V2 account.

    Layout after the 96-byte registry header: the 8-byte record header, then
    staleness_id, roa_id (each sized by its validation type) and finally
    content_length bytes of content.
    """
    _require(data, REGISTRY_HEADER_LEN + RECORD_HEADER_LEN, "record v2")
    registry = decode_registry(data)
    header = decode_record_header(data[REGISTRY_HEADER_LEN:])

    off = REGISTRY_HEADER_LEN + RECORD_HEADER_LEN
    staleness_len = header.staleness_type.length
    roa_len = header.roa_type.length
    _require(data, off + staleness_len + roa_len, "record v2 validation ids")

    staleness_id = bytes(data[off : off + staleness_len])
    off += staleness_len
    roa_id = bytes(data[off : off + roa_len])
    off += roa_len

    if off + header.content_length > len(data):
        raise ContentOverrunError(
            f"content_length {header.content_length} at offset {off}, account is {len(data)} bytes"
        )
    content = bytes(data[off : off + header.content_length])
    return RecordV2(registry, header, staleness_id, roa_id, content)


def decode_token_account(data: bytes) -> TokenAccount:
    # SPL token account: mint(32) owner(32) amount(u64) ...
    _require(data, TOKEN_ACCOUNT_MIN_LEN, "token account")
    (amount,) = struct.unpack_from("<Q", data, 64)
    return TokenAccount(mint=_pubkey(data, 0), owner=_pubkey(data, 32), amount=amount)


@dataclass(frozen=True)
class PrimaryDomain:
    """Favourite domain a wallet has picked for reverse resolution."""

    tag: int
    name_account: Pubkey


def decode_primary_domain(data: bytes) -> PrimaryDomain:
    _require(data, PRIMARY_DOMAIN_LEN, "primary domain")
    return PrimaryDomain(tag=data[0], name_account=_pubkey(data, 1))


def decode_reverse(payload: bytes, trim_first_null_byte: bool = False) -> Optional[str]:
    """Decode the name stored after the registry header of a reverse account.

    The payload is a u32 length followed by that many utf-8 bytes. Subdomain
    reverses keep the \\x00 label prefix, which trim_first_null_byte strips.
    An empty payload decodes to None.
    """
    if not payload:
        return None
    _require(payload, REVERSE_LENGTH_PREFIX_LEN, "reverse")
    (length,) = struct.unpack_from("<I", payload, 0)
    end = REVERSE_LENGTH_PREFIX_LEN + length
    if end > len(payload):
        raise ContentOverrunError(f"reverse name length {length}, payload is {len(payload)} bytes")
    try:
        name = bytes(payload[REVERSE_LENGTH_PREFIX_LEN:end]).decode("utf-8")
    except UnicodeDecodeError as e:
        raise CodecError(f"reverse name is not utf-8: {e}") from e
    if trim_first_null_byte and name.startswith("\x00"):
        name = name[1:]
    return name
