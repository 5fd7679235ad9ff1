import struct

from solders.pubkey import Pubkey

from rpc_connection import RawAccount
from sns_constants import REVERSE_LOOKUP_CLASS

SYSTEM_PROGRAM = Pubkey.from_string("11111111111111111111111111111111")


def registry_bytes(owner: Pubkey, parent: Pubkey = None, class_address: Pubkey = None, payload: bytes = b"") -> bytes:
    return bytes(parent or Pubkey.default()) + bytes(owner) + bytes(class_address or Pubkey.default()) + payload


def nft_bytes(tag: int, name_account: Pubkey, owner: Pubkey, mint: Pubkey, nonce: int = 255) -> bytes:
    return bytes([tag, nonce]) + bytes(name_account) + bytes(owner) + bytes(mint)


def record_v1_bytes(owner: Pubkey, value: bytes, signature: bytes) -> bytes:
    return registry_bytes(owner) + bytes(value) + bytes(signature)


def record_v2_bytes(
    content: bytes,
    staleness_id: bytes,
    roa_id: bytes,
    staleness_validation: int = 1,
    roa_validation: int = 1,
    content_length: int = None,
    owner: Pubkey = None,
) -> bytes:
    length = len(content) if content_length is None else content_length
    header = struct.pack("<HHI", staleness_validation, roa_validation, length)
    return registry_bytes(owner or Pubkey.default()) + header + bytes(staleness_id) + bytes(roa_id) + bytes(content)


def reverse_bytes(name: str, parent: Pubkey = None) -> bytes:
    encoded = name.encode("utf-8")
    payload = struct.pack("<I", len(encoded)) + encoded
    return registry_bytes(Pubkey.default(), parent, REVERSE_LOOKUP_CLASS, payload)


def primary_domain_bytes(name_account: Pubkey, tag: int = 1) -> bytes:
    return bytes([tag]) + bytes(name_account)


def token_account_bytes(mint: Pubkey, owner: Pubkey, amount: int) -> bytes:
    # trailing fields of the 165-byte SPL layout are irrelevant here
    return bytes(mint) + bytes(owner) + struct.pack("<Q", amount) + bytes(93)


def off_curve_address(seed: bytes = b"vault") -> Pubkey:
    key, _ = Pubkey.find_program_address([seed], SYSTEM_PROGRAM)
    return key


class FakeConnection:
    """In-memory AccountFetcher."""

    def __init__(self, accounts=None, holders=None, programs=None):
        self.accounts = dict(accounts or {})
        self.holders = dict(holders or {})
        self.programs = dict(programs or {})
        self.batches = []

    def put(self, address: Pubkey, data: bytes, owner: Pubkey = None) -> None:
        self.accounts[address] = RawAccount(data=data, owner=owner)

    async def fetch_account(self, address):
        return self.accounts.get(address)

    async def fetch_accounts_batch(self, addresses):
        self.batches.append(list(addresses))
        return [self.accounts.get(address) for address in addresses]

    async def find_largest_token_holder(self, mint):
        return self.holders.get(mint)

    async def find_owning_program(self, address):
        return self.programs.get(address)
