import hashlib
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from solders.pubkey import Pubkey

from known_records import Record
from sns_constants import (
    CENTRAL_STATE_SNS_RECORDS,
    FAVOURITE_DOMAIN_SEED,
    HASH_PREFIX,
    NAME_OFFERS_ID,
    NAME_PROGRAM_ID,
    NAME_TOKENIZER_ID,
    NFT_RECORD_SEED,
    REVERSE_LOOKUP_CLASS,
    ROOT_DOMAIN_ACCOUNT,
    TOKENIZED_NAME_SEED,
)
from sns_errors import InvalidDomainFormatError


class RecordVersion(IntEnum):
    V1 = 1
    V2 = 2


@dataclass(frozen=True)
class DomainKey:
    pubkey: Pubkey
    hashed: bytes
    is_sub: bool = False
    parent: Optional[Pubkey] = None


def get_hashed_name(name: str) -> bytes:
    return hashlib.sha256((HASH_PREFIX + name).encode("utf-8")).digest()


def get_name_account_key(hashed_name: bytes, name_class: Pubkey = None, parent_name: Pubkey = None) -> Pubkey:
    seeds = [
        hashed_name,
        bytes(name_class) if name_class else bytes(32),
        bytes(parent_name) if parent_name else bytes(32),
    ]
    key, _ = Pubkey.find_program_address(seeds, NAME_PROGRAM_ID)
    return key


def derive_domain_address(name: str, parent: Pubkey = ROOT_DOMAIN_ACCOUNT) -> Pubkey:
    return get_name_account_key(get_hashed_name(name), None, parent)


def derive_record_address(name: str, parent: Pubkey, name_class: Pubkey = None) -> Pubkey:
    return get_name_account_key(get_hashed_name(name), name_class, parent)


def _derive(name: str, parent: Pubkey = ROOT_DOMAIN_ACCOUNT, name_class: Pubkey = None) -> DomainKey:
    hashed = get_hashed_name(name)
    return DomainKey(pubkey=get_name_account_key(hashed, name_class, parent), hashed=hashed)


def _split_domain(domain: str, record: Optional[RecordVersion] = None) -> list[str]:
    name = domain.strip()
    if name.lower().endswith(".sol"):
        name = name[: -len(".sol")]
    labels = name.split(".")
    # record names are case sensitive, domain labels are not
    start = 1 if record is not None else 0
    labels = labels[:start] + [label.lower() for label in labels[start:]]
    if any(not label for label in labels):
        raise InvalidDomainFormatError(domain)
    return labels


def get_domain_key(domain: str, record: Optional[RecordVersion] = None) -> DomainKey:
    """Derive the account of a domain, subdomain or record name.

    `sub.domain` prefixes the sub label with \\x00, or with \\x01/\\x02 when it is
    a V1/V2 record name. `record.sub.domain` is only valid for records.
    """
    labels = _split_domain(domain, record)
    record_class = CENTRAL_STATE_SNS_RECORDS if record == RecordVersion.V2 else None

    if len(labels) == 1:
        return _derive(labels[0])

    if len(labels) == 2:
        parent = _derive(labels[1]).pubkey
        prefix = chr(record if record else 0)
        sub = _derive(prefix + labels[0], parent, record_class)
        return DomainKey(sub.pubkey, sub.hashed, is_sub=True, parent=parent)

    if len(labels) == 3 and record is not None:
        parent = _derive(labels[2]).pubkey
        sub_parent = _derive("\x00" + labels[1], parent).pubkey
        sub_record = _derive(chr(record) + labels[0], sub_parent, record_class)
        return DomainKey(sub_record.pubkey, sub_record.hashed, is_sub=True, parent=sub_parent)

    raise InvalidDomainFormatError(domain)


def get_record_v1_key(domain: str, record: Record) -> Pubkey:
    return get_domain_key(f"{record.value}.{domain}", RecordVersion.V1).pubkey


def get_record_v2_key(domain: str, record: Record) -> Pubkey:
    domain_key = get_domain_key(domain).pubkey
    return derive_record_address("\x02" + record.value, domain_key, CENTRAL_STATE_SNS_RECORDS)


def get_nft_record_key(domain_key: Pubkey) -> Pubkey:
    key, _ = Pubkey.find_program_address([NFT_RECORD_SEED, bytes(domain_key)], NAME_TOKENIZER_ID)
    return key


def get_domain_mint(domain_key: Pubkey) -> Pubkey:
    key, _ = Pubkey.find_program_address([TOKENIZED_NAME_SEED, bytes(domain_key)], NAME_TOKENIZER_ID)
    return key


def get_reverse_key_from_domain_key(domain_key: Pubkey, parent: Pubkey = None) -> Pubkey:
    """Reverse account of a name account: its base58 address hashed under the reverse class."""
    return get_name_account_key(get_hashed_name(str(domain_key)), REVERSE_LOOKUP_CLASS, parent)


def get_reverse_key(domain: str) -> Pubkey:
    key = get_domain_key(domain)
    return get_reverse_key_from_domain_key(key.pubkey, key.parent if key.is_sub else None)


def get_primary_domain_key(wallet: Pubkey) -> Pubkey:
    key, _ = Pubkey.find_program_address([FAVOURITE_DOMAIN_SEED, bytes(wallet)], NAME_OFFERS_ID)
    return key
