# ============================================================
# Known Record Kinds
# Record kinds a domain can carry, and the static verifier rules
# (self-signed / guardian / secp256k1) used by right-of-association checks.
# ============================================================

from enum import Enum

from solders.pubkey import Pubkey


class Record(str, Enum):
    IPFS = "IPFS"
    ARWV = "ARWV"
    SOL = "SOL"
    ETH = "ETH"
    BTC = "BTC"
    LTC = "LTC"
    DOGE = "DOGE"
    EMAIL = "email"
    URL = "url"
    DISCORD = "discord"
    GITHUB = "github"
    REDDIT = "reddit"
    TWITTER = "twitter"
    TELEGRAM = "telegram"
    PIC = "pic"
    SHDW = "SHDW"
    POINT = "POINT"
    BSC = "BSC"
    INJECTIVE = "INJ"
    BACKPACK = "backpack"
    A = "A"
    AAAA = "AAAA"
    CNAME = "CNAME"
    TXT = "TXT"
    BACKGROUND = "background"
    BASE = "BASE"
    IPNS = "IPNS"


# ========== Guardians ==========
# Records whose right of association is vouched for by a fixed key
GUARDIANS = {
    Record.URL: Pubkey.from_string("ExXjtfdQe8JacoqP9Z535WzQKjF4CzW1TTRKRgpxvya3"),
    Record.CNAME: Pubkey.from_string("ExXjtfdQe8JacoqP9Z535WzQKjF4CzW1TTRKRgpxvya3"),
}

# ========== Self-signed ==========
# The content is the key that signs the record
SELF_SIGNED_RECORDS = frozenset({
    Record.ETH,
    Record.INJECTIVE,
    Record.SOL,
})

# ========== secp256k1 ==========
# Right of association is an Ethereum-style signature
ETH_ROA_RECORDS = frozenset({
    Record.ETH,
    Record.INJECTIVE,
    Record.BSC,
    Record.BASE,
})
