import random

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from account_builders import off_curve_address
from curve_check import P, is_on_curve, is_pda, legendre_symbol, sqrt_mod
from name_derivation import get_domain_key


def test_wallet_keys_are_on_curve():
    for _ in range(20):
        assert is_on_curve(Keypair().pubkey())


def test_program_derived_addresses_are_off_curve():
    assert not is_on_curve(off_curve_address())
    assert not is_on_curve(off_curve_address(b"another seed"))
    assert is_pda(get_domain_key("bonfida").pubkey)


def test_agrees_with_solders():
    rng = random.Random(1234)
    for _ in range(300):
        data = rng.randbytes(32)
        assert is_on_curve(data) == Pubkey.from_bytes(data).is_on_curve(), data.hex()


def test_single_bit_flips_agree_with_solders():
    rng = random.Random(99)
    rejected = 0
    for _ in range(64):
        data = bytearray(bytes(Keypair().pubkey()))
        bit = rng.randrange(256)
        data[bit // 8] ^= 1 << (bit % 8)
        flipped = bytes(data)
        assert is_on_curve(flipped) == Pubkey.from_bytes(flipped).is_on_curve(), flipped.hex()
        rejected += not is_on_curve(flipped)
    # roughly half of all y encodings decompress
    assert rejected > 16


def test_accepts_raw_bytes_and_pubkeys():
    key = Keypair().pubkey()
    assert is_on_curve(bytes(key)) == is_on_curve(key)


def test_wrong_length_is_not_on_curve():
    assert not is_on_curve(b"")
    assert not is_on_curve(bytes(31))
    assert not is_on_curve(bytes(33))


def test_identity_point_with_either_sign():
    y_one = (1).to_bytes(32, "little")
    y_one_negative = (1 | 1 << 255).to_bytes(32, "little")
    assert is_on_curve(y_one)
    assert is_on_curve(y_one_negative)


def test_legendre_symbol():
    assert legendre_symbol(4, 13) == 1
    assert legendre_symbol(5, 13) == 12
    assert legendre_symbol(0, 13) == 0


def test_sqrt_mod_fast_path():
    # 7 = 3 mod 4
    assert sqrt_mod(2, 7) in (3, 4)
    assert sqrt_mod(3, 7) is None


def test_sqrt_mod_tonelli_shanks():
    # 13 and 17 = 1 mod 4
    assert sqrt_mod(10, 13) in (6, 7)
    assert sqrt_mod(5, 13) is None
    root = sqrt_mod(13, 17)
    assert root is not None and root * root % 17 == 13


def test_sqrt_mod_curve_field():
    for a in (4, 9, 121666**2, P - 1):
        root = sqrt_mod(a)
        assert root is not None
        assert root * root % P == a % P
