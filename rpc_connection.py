import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solders.pubkey import Pubkey

from account_codec import decode_token_account

_logger = logging.getLogger(__name__)

# getMultipleAccounts limit
MAX_BATCH_SIZE = 100


@dataclass(frozen=True)
class RawAccount:
    data: bytes
    owner: Optional[Pubkey] = None
    exists: bool = True


class AccountFetcher(Protocol):
    """Everything the resolver needs from the network."""

    async def fetch_account(self, address: Pubkey) -> Optional[RawAccount]: ...

    async def fetch_accounts_batch(self, addresses: Sequence[Pubkey]) -> list[Optional[RawAccount]]: ...

    async def find_largest_token_holder(self, mint: Pubkey) -> Optional[Pubkey]: ...

    async def find_owning_program(self, address: Pubkey) -> Optional[Pubkey]: ...


def _raw(account) -> Optional[RawAccount]:
    if account is None:
        return None
    return RawAccount(data=bytes(account.data), owner=account.owner)


class SolanaRpcConnection:
    """AccountFetcher backed by a solana-py AsyncClient."""

    def __init__(self, rpc_url: str, commitment: str = "confirmed", client: AsyncClient = None):
        self.client = client or AsyncClient(rpc_url, commitment=Commitment(commitment))

    async def __aenter__(self) -> "SolanaRpcConnection":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def close(self) -> None:
        await self.client.close()

    async def fetch_account(self, address: Pubkey) -> Optional[RawAccount]:
        res = await self.client.get_account_info(address)
        return _raw(res.value)

    async def fetch_accounts_batch(self, addresses: Sequence[Pubkey]) -> list[Optional[RawAccount]]:
        accounts: list[Optional[RawAccount]] = []
        for start in range(0, len(addresses), MAX_BATCH_SIZE):
            chunk = list(addresses[start : start + MAX_BATCH_SIZE])
            res = await self.client.get_multiple_accounts(chunk)
            accounts.extend(_raw(account) for account in res.value)
        return accounts

    async def find_largest_token_holder(self, mint: Pubkey) -> Optional[Pubkey]:
        res = await self.client.get_token_largest_accounts(mint)
        if not res.value:
            _logger.debug("mint %s has no token accounts", mint)
            return None
        largest = await self.fetch_account(res.value[0].address)
        if largest is None:
            return None
        token = decode_token_account(largest.data)
        # a domain NFT has a supply of exactly one
        if token.amount != 1:
            _logger.debug("largest account of %s holds %d tokens", mint, token.amount)
            return None
        return token.owner

    async def find_owning_program(self, address: Pubkey) -> Optional[Pubkey]:
        account = await self.fetch_account(address)
        return account.owner if account else None
