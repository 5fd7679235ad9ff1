"""Staleness and right-of-association checks for record V2 accounts.

Staleness asks whether the record was written by the domain's current owner.
Right of association asks whether the record's content was signed for by the
party it names: the content itself for self-signed kinds, a guardian for
guardian-backed kinds, or a caller-supplied verifier for everything else.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from solders.pubkey import Pubkey

from account_codec import RecordV2, Validation
from known_records import ETH_ROA_RECORDS, GUARDIANS, SELF_SIGNED_RECORDS, Record
from sns_errors import MissingVerifierError


@dataclass(frozen=True)
class RecordTables:
    self_signed: frozenset = SELF_SIGNED_RECORDS
    guardians: Mapping[Record, Pubkey] = field(default_factory=lambda: MappingProxyType(dict(GUARDIANS)))
    eth_roa: frozenset = ETH_ROA_RECORDS

    def expected_roa_validation(self, record: Record) -> Validation:
        return Validation.ETHEREUM if record in self.eth_roa else Validation.SOLANA

    def default_verifier(self, record: Record, state: RecordV2) -> Optional[bytes]:
        if record in self.self_signed:
            return state.content
        guardian = self.guardians.get(record)
        if guardian is not None:
            return bytes(guardian)
        return None


DEFAULT_TABLES = RecordTables()


def verify_staleness(current_owner: Pubkey, record: RecordV2) -> bool:
    return record.staleness_id == bytes(current_owner) and record.header.staleness_validation == Validation.SOLANA


def verify_right_of_association(
    record_kind: Record,
    record: RecordV2,
    verifier: Optional[bytes] = None,
    tables: RecordTables = DEFAULT_TABLES,
) -> bool:
    if verifier is None:
        verifier = tables.default_verifier(record_kind, record)
    if verifier is None:
        raise MissingVerifierError(f"record {record_kind.value} has no default verifier")
    expected = tables.expected_roa_validation(record_kind)
    return record.roa_id == bytes(verifier) and record.header.roa_validation == expected
