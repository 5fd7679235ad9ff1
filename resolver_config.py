# ---------------- CONFIG ----------------
import os
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, FrozenSet, Optional

from dotenv import load_dotenv
from solders.pubkey import Pubkey

from signature_verify import V1MessageFormat
from sns_constants import DEFAULT_RPC_URL


class PdaMode(str, Enum):
    ANY = "any"
    DISALLOW = "false"
    ALLOWLIST = "true"


@dataclass(frozen=True)
class PdaPolicy:
    """What to do when the registry owner is a program-derived address."""

    mode: PdaMode = PdaMode.DISALLOW
    program_ids: FrozenSet[Pubkey] = frozenset()

    ANY: ClassVar["PdaPolicy"]
    DISALLOW: ClassVar["PdaPolicy"]

    @classmethod
    def allow_programs(cls, program_ids) -> "PdaPolicy":
        return cls(PdaMode.ALLOWLIST, frozenset(program_ids))


PdaPolicy.ANY = PdaPolicy(PdaMode.ANY)
PdaPolicy.DISALLOW = PdaPolicy(PdaMode.DISALLOW)


@dataclass(frozen=True)
class ResolverConfig:
    rpc_url: str = DEFAULT_RPC_URL
    commitment: str = "confirmed"
    pda_policy: PdaPolicy = PdaPolicy.DISALLOW
    v1_message_format: V1MessageFormat = V1MessageFormat.RAW
    log_level: Optional[str] = None

    @classmethod
    def from_env(cls) -> "ResolverConfig":
        load_dotenv()
        pda_mode = PdaMode(os.getenv("SNS_ALLOW_PDA", PdaMode.DISALLOW.value).strip().lower())
        program_ids = frozenset(
            Pubkey.from_string(item.strip())
            for item in os.getenv("SNS_PDA_PROGRAM_IDS", "").split(",")
            if item.strip()
        )
        return cls(
            rpc_url=os.getenv("SNS_RPC_URL", DEFAULT_RPC_URL),
            commitment=os.getenv("SNS_COMMITMENT", "confirmed"),
            pda_policy=PdaPolicy(pda_mode, program_ids),
            v1_message_format=V1MessageFormat(os.getenv("SNS_V1_MESSAGE_FORMAT", "raw").strip().lower()),
            log_level=os.getenv("SNS_LOG_LEVEL"),
        )
