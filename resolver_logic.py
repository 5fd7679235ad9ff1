import asyncio
import logging
import sys
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from solders.pubkey import Pubkey

from account_codec import (
    NftRecord,
    RecordV2,
    Registry,
    Validation,
    decode_nft_record,
    decode_primary_domain,
    decode_record_v1,
    decode_record_v2,
    decode_registry,
    decode_reverse,
)
from curve_check import is_on_curve
from known_records import Record
from name_derivation import (
    get_domain_key,
    get_nft_record_key,
    get_primary_domain_key,
    get_record_v1_key,
    get_record_v2_key,
    get_reverse_key_from_domain_key,
)
from record_verification import DEFAULT_TABLES, RecordTables, verify_right_of_association, verify_staleness
from resolver_config import PdaMode, PdaPolicy, ResolverConfig
from rpc_connection import AccountFetcher, RawAccount, SolanaRpcConnection
from signature_verify import build_v1_message, verify_ed25519
from sns_constants import ROOT_DOMAIN_ACCOUNT
from sns_errors import (
    CodecError,
    CouldNotFindOwnerError,
    DomainDoesNotExistError,
    InvalidRightOfAssociationError,
    InvalidValidationError,
    NoRecordDataError,
    PdaOwnerNotAllowedError,
    RecordMalformedError,
)

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationReport:
    staleness: bool
    # None when no verifier is known for the record kind
    right_of_association: Optional[bool]


@dataclass(frozen=True)
class RecordResult:
    record: Record
    content: Optional[bytes] = None
    verification: Optional[VerificationReport] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class PrimaryDomainResult:
    domain_address: Pubkey
    # without the .sol suffix, "sub.parent" for subdomains
    domain_name: str
    # the domain changed hands after the wallet picked it
    stale: bool


@dataclass(frozen=True)
class _Resolution:
    """Accounts fetched for one resolve() call."""

    domain: str
    policy: PdaPolicy
    registry: Registry
    nft: Optional[NftRecord]
    record_v1_key: Pubkey
    record_v1: Optional[RawAccount]
    record_v2: Optional[RawAccount]


def _present(account: Optional[RawAccount]) -> Optional[RawAccount]:
    if account is None or not account.exists or not account.data:
        return None
    return account


class SnsResolver:
    """Resolves domains to their owner following SNS-IP-5.

    Candidates are tried in order, first hit wins:
        1. tokenized domain: holder of the active NFT
        2. SOL record V2, if not stale
        3. SOL record V1, if signed by the registry owner
        4. registry owner, subject to the PDA policy
    A strategy returns None to fall through and raises to stop resolution.
    """

    def __init__(self, connection: AccountFetcher, config: ResolverConfig = None, tables: RecordTables = DEFAULT_TABLES):
        self.connection = connection
        self.config = config or ResolverConfig()
        self.tables = tables

    async def resolve(self, domain: str, policy: PdaPolicy = None) -> Pubkey:
        resolution = await self._fetch_candidates(domain, policy or self.config.pda_policy)
        strategies = (
            self._from_nft,
            self._from_record_v2,
            self._from_record_v1,
            self._from_registry,
        )
        for strategy in strategies:
            owner = await strategy(resolution)
            if owner is not None:
                _logger.debug("%s resolved by %s to %s", domain, strategy.__name__, owner)
                return owner
        # _from_registry either returns or raises
        raise AssertionError("unreachable")

    async def resolve_many(
        self, domains: Sequence[str], policy: PdaPolicy = None
    ) -> list[Union[Pubkey, Exception]]:
        return await asyncio.gather(*(self.resolve(domain, policy) for domain in domains), return_exceptions=True)

    async def verify_record(self, domain: str, record: Record, verifier: Optional[bytes] = None) -> VerificationReport:
        """Check a V2 record against the domain's current owner.

        The current owner is the NFT holder for tokenized domains and the
        registry owner otherwise.
        """
        domain_key = get_domain_key(domain).pubkey
        record_key = get_record_v2_key(domain, record)
        nft_info, record_info, registry_info = await self.connection.fetch_accounts_batch(
            [get_nft_record_key(domain_key), record_key, domain_key]
        )
        if _present(registry_info) is None:
            raise DomainDoesNotExistError(domain)
        if _present(record_info) is None:
            raise NoRecordDataError(f"{record.value}.{domain}")

        state = decode_record_v2(record_info.data)
        owner = await self._current_owner(domain, decode_registry(registry_info.data), nft_info)
        return self._report(domain, record, state, owner, verifier)

    async def get_records_v2(self, domain: str, records: Sequence[Record]) -> list[RecordResult]:
        """Fetch several V2 records of a domain in one batch, each verified against the current owner.

        A record that is missing or does not decode is reported in its own
        RecordResult. A missing domain raises.
        """
        records = list(records)
        domain_key = get_domain_key(domain).pubkey
        *record_infos, nft_info, registry_info = await self.connection.fetch_accounts_batch(
            [get_record_v2_key(domain, record) for record in records] + [get_nft_record_key(domain_key), domain_key]
        )
        if _present(registry_info) is None:
            raise DomainDoesNotExistError(domain)
        owner = await self._current_owner(domain, decode_registry(registry_info.data), nft_info)

        results = []
        for record, info in zip(records, record_infos):
            if _present(info) is None:
                results.append(RecordResult(record, error=NoRecordDataError(f"{record.value}.{domain}")))
                continue
            try:
                state = decode_record_v2(info.data)
            except (CodecError, InvalidValidationError) as e:
                _logger.debug("%s record of %s does not decode: %s", record.value, domain, e)
                results.append(RecordResult(record, error=e))
                continue
            report = self._report(domain, record, state, owner)
            results.append(RecordResult(record, content=state.content, verification=report))
        return results

    async def get_domain_owner(self, domain: str) -> Pubkey:
        """NFT holder for tokenized domains, registry owner otherwise."""
        domain_key = get_domain_key(domain).pubkey
        nft_info, registry_info = await self.connection.fetch_accounts_batch([get_nft_record_key(domain_key), domain_key])
        if _present(registry_info) is None:
            raise DomainDoesNotExistError(domain)
        return await self._current_owner(domain, decode_registry(registry_info.data), nft_info)

    async def reverse_lookup(self, domain_key: Pubkey, parent: Pubkey = None) -> Optional[str]:
        """Name stored in the reverse account of domain_key, None when there is none.

        Subdomains need their parent, and come back without the \\x00 label prefix.
        """
        info = _present(await self.connection.fetch_account(get_reverse_key_from_domain_key(domain_key, parent)))
        if info is None:
            return None
        return decode_reverse(decode_registry(info.data).payload, trim_first_null_byte=parent is not None)

    async def get_primary_domain(self, wallet: Pubkey) -> Optional[PrimaryDomainResult]:
        info = _present(await self.connection.fetch_account(get_primary_domain_key(wallet)))
        if info is None:
            return None
        domain_key = decode_primary_domain(info.data).name_account
        nft_info, registry_info = await self.connection.fetch_accounts_batch([get_nft_record_key(domain_key), domain_key])
        if _present(registry_info) is None:
            raise DomainDoesNotExistError(str(domain_key))
        registry = decode_registry(registry_info.data)
        owner = await self._current_owner(str(domain_key), registry, nft_info)

        if registry.parent_name == ROOT_DOMAIN_ACCOUNT:
            names = [await self.reverse_lookup(domain_key)]
        else:
            names = await asyncio.gather(
                self.reverse_lookup(domain_key, registry.parent_name),
                self.reverse_lookup(registry.parent_name),
            )
        return PrimaryDomainResult(
            domain_address=domain_key,
            domain_name=".".join(name for name in names if name is not None),
            stale=owner != wallet,
        )

    def _report(
        self, domain: str, record: Record, state: RecordV2, owner: Pubkey, verifier: Optional[bytes] = None
    ) -> VerificationReport:
        staleness = verify_staleness(owner, state)
        if verifier is None and self.tables.default_verifier(record, state) is None:
            _logger.debug("no verifier for %s record of %s", record.value, domain)
            roa = None
        else:
            roa = verify_right_of_association(record, state, verifier, self.tables)
        return VerificationReport(staleness=staleness, right_of_association=roa)

    async def _current_owner(self, domain: str, registry: Registry, nft_info: Optional[RawAccount]) -> Pubkey:
        nft = decode_nft_record(nft_info.data) if _present(nft_info) else None
        if nft is not None and nft.is_active:
            return await self._nft_holder(domain, nft)
        return registry.owner

    async def _fetch_candidates(self, domain: str, policy: PdaPolicy) -> _Resolution:
        domain_key = get_domain_key(domain).pubkey
        record_v1_key = get_record_v1_key(domain, Record.SOL)
        record_v2_key = get_record_v2_key(domain, Record.SOL)
        nft_info, v1_info, v2_info, registry_info = await self.connection.fetch_accounts_batch(
            [get_nft_record_key(domain_key), record_v1_key, record_v2_key, domain_key]
        )
        if _present(registry_info) is None:
            raise DomainDoesNotExistError(domain)

        return _Resolution(
            domain=domain,
            policy=policy,
            registry=decode_registry(registry_info.data),
            nft=decode_nft_record(nft_info.data) if _present(nft_info) else None,
            record_v1_key=record_v1_key,
            record_v1=_present(v1_info),
            record_v2=_present(v2_info),
        )

    async def _nft_holder(self, domain: str, nft: NftRecord) -> Pubkey:
        holder = await self.connection.find_largest_token_holder(nft.nft_mint)
        if holder is None:
            _logger.warning("%s is tokenized (mint %s) but has no holder", domain, nft.nft_mint)
            raise CouldNotFindOwnerError(f"{domain} (mint {nft.nft_mint})")
        return holder

    async def _from_nft(self, resolution: _Resolution) -> Optional[Pubkey]:
        nft = resolution.nft
        if nft is None or not nft.is_active:
            return None
        return await self._nft_holder(resolution.domain, nft)

    async def _from_record_v2(self, resolution: _Resolution) -> Optional[Pubkey]:
        if resolution.record_v2 is None:
            return None
        record = decode_record_v2(resolution.record_v2.data)
        if len(record.content) != 32:
            raise RecordMalformedError(f"SOL record V2 content is {len(record.content)} bytes")
        header = record.header
        if header.staleness_validation != Validation.SOLANA or header.roa_validation != Validation.SOLANA:
            raise InvalidValidationError(
                f"staleness={header.staleness_validation} roa={header.roa_validation}"
            )
        if not verify_staleness(resolution.registry.owner, record):
            _logger.debug("SOL record V2 of %s is stale", resolution.domain)
            return None
        if not verify_right_of_association(Record.SOL, record, tables=self.tables):
            _logger.warning("SOL record V2 of %s is current but not associated", resolution.domain)
            raise InvalidRightOfAssociationError(
                f"expected {Pubkey.from_bytes(record.content)}, got {record.roa_id.hex()}"
            )
        return Pubkey.from_bytes(record.content)

    async def _from_record_v1(self, resolution: _Resolution) -> Optional[Pubkey]:
        if resolution.record_v1 is None:
            return None
        record = decode_record_v1(resolution.record_v1.data)
        message = build_v1_message(record.value, resolution.record_v1_key, self.config.v1_message_format)
        if not verify_ed25519(message, record.signature, bytes(resolution.registry.owner)):
            _logger.debug("SOL record V1 of %s is not signed by the owner", resolution.domain)
            return None
        return Pubkey.from_bytes(record.value)

    async def _from_registry(self, resolution: _Resolution) -> Pubkey:
        owner = resolution.registry.owner
        if is_on_curve(owner):
            return owner

        policy = resolution.policy
        if policy.mode == PdaMode.ANY:
            return owner
        if policy.mode == PdaMode.ALLOWLIST:
            program = await self.connection.find_owning_program(owner)
            if program is not None and program in policy.program_ids:
                return owner
            raise PdaOwnerNotAllowedError(f"{owner} is owned by {program}")
        raise PdaOwnerNotAllowedError(str(owner))


async def resolve(domain: str, policy: PdaPolicy = None, config: ResolverConfig = None) -> Pubkey:
    """Resolve a single domain over the configured RPC endpoint."""
    config = config or ResolverConfig.from_env()
    async with SolanaRpcConnection(config.rpc_url, config.commitment) as connection:
        return await SnsResolver(connection, config).resolve(domain, policy)


async def _resolve_all(names: Sequence[str], config: ResolverConfig) -> list:
    async with SolanaRpcConnection(config.rpc_url, config.commitment) as connection:
        return await SnsResolver(connection, config).resolve_many(names)


def main(argv: Sequence[str] = None) -> int:
    config = ResolverConfig.from_env()
    if config.log_level:
        logging.basicConfig(level=config.log_level.upper())

    names = list(argv if argv is not None else sys.argv[1:])
    if not names:
        print("usage: python resolver_logic.py <domain> [<domain> ...]")
        return 2

    results = asyncio.run(_resolve_all(names, config))
    failed = 0
    for name, result in zip(names, results):
        if isinstance(result, Exception):
            failed += 1
            print(f"❌ {name}: {result}")
        else:
            print(f"✅ {name} -> {result}")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
