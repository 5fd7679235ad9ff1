from solders.pubkey import Pubkey

# SNS program ids
NAME_PROGRAM_ID = Pubkey.from_string("namesLPneVptA9Z5rqUDD9tMTWEJwofgaYwp8cawRkX")
NAME_TOKENIZER_ID = Pubkey.from_string("nftD3vbNkNqfj2Sd3HZwbpw4BxxKWr4AjGb9X38JeZk")
NAME_OFFERS_ID = Pubkey.from_string("85iDfUvr3HJyLM2zcq5BXSiDvUWfw6cSE1FfNBo8Ap29")

# The .sol TLD
ROOT_DOMAIN_ACCOUNT = Pubkey.from_string("58PwtjSDuFHuUkYjH9BYnnQKHfwo9reZhC2zMJv9JPkx")
# Class of every record V2 account
CENTRAL_STATE_SNS_RECORDS = Pubkey.from_string("2pMnqHvei2N5oDcVGCRdZx48gqti199wr5CsyTTafsbo")
# Class of reverse lookup accounts
REVERSE_LOOKUP_CLASS = Pubkey.from_string("33m47vH6Eav6jr5Ry86XjhRft2jRBLDnDgPSHoquXi2Z")

HASH_PREFIX = "SPL Name Service"
NFT_RECORD_SEED = b"nft_record"
TOKENIZED_NAME_SEED = b"tokenized_name"
FAVOURITE_DOMAIN_SEED = b"favourite_domain"

# Account layout sizes
PUBKEY_LEN = 32
SIGNATURE_LEN = 64
REGISTRY_HEADER_LEN = 96
NFT_RECORD_LEN = 98
RECORD_HEADER_LEN = 8
TOKEN_ACCOUNT_MIN_LEN = 72
PRIMARY_DOMAIN_LEN = 33
REVERSE_LENGTH_PREFIX_LEN = 4

DEFAULT_RPC_URL = "https://api.mainnet-beta.solana.com"
