# /test/test_path.py
import pytest
from pydantic import ValidationError
from web3 import Web3

from flashliq.core.errors import MalformedPathError
from flashliq.core.models import SwapPath
from flashliq.core.path import decode_path, encode_path, encode_path_text, parse_encoded_path, parse_path

# --- Real Optimism addresses ---
WETH = Web3.to_checksum_address("0x4200000000000000000000000000000000000006")
USDC = Web3.to_checksum_address("0x0b2c639c533813f4aa9d7837caf62653d097ff85")
POOL = Web3.to_checksum_address("0x395ae52bb17aef68c2888d941736a71dc6d4e125")


def test_encodes_short_addresses_left_padded():
    encoded = encode_path_text("0xA/500/0xB")
    assert len(encoded) == 20 + 3 + 20
    assert encoded[:20] == bytes(19) + b"\x0a"
    assert encoded[20:23] == (500).to_bytes(3, "big")
    assert encoded[23:] == bytes(19) + b"\x0b"


def test_encodes_multi_hop_path_without_delimiters():
    encoded = encode_path_text(f"{WETH}/3000/{USDC}/10000/{POOL}")
    assert encoded == (
        Web3.to_bytes(hexstr=WETH)
        + (3000).to_bytes(3, "big")
        + Web3.to_bytes(hexstr=USDC)
        + (10000).to_bytes(3, "big")
        + Web3.to_bytes(hexstr=POOL)
    )


def test_single_address_is_a_valid_path():
    path = parse_path(WETH)
    assert path.fees == ()
    assert encode_path(path) == Web3.to_bytes(hexstr=WETH)


def test_addresses_are_checksummed_and_case_insensitive():
    path = parse_path(f"{USDC.lower()}/500/{WETH}")
    assert path.tokens == (USDC, WETH)
    assert path.elements() == [USDC, 500, WETH]


@pytest.mark.parametrize("path", [
    SwapPath(tokens=(WETH,)),
    SwapPath(tokens=(WETH, USDC), fees=(0,)),
    SwapPath(tokens=(WETH, USDC, POOL, WETH), fees=(100, 2**24 - 1, 3000)),
])
def test_decode_reverses_encode(path):
    assert decode_path(encode_path(path)) == path


def test_round_trip_from_text():
    text = f"{WETH}/500/{USDC}/3000/{WETH}"
    parsed = parse_path(text)
    assert decode_path(encode_path(parsed)) == parsed
    assert str(parsed) == text


def test_pre_encoded_hex_path_is_accepted():
    encoded = encode_path_text(f"{WETH}/500/{USDC}")
    assert parse_encoded_path("0x" + encoded.hex()) == parse_path(f"{WETH}/500/{USDC}")


@pytest.mark.parametrize("text", [
    "0xA/500",              # missing trailing address
    "0xA/500/0xB/3000",     # even element count
    "",                     # no address at all
    "0xA/5x0/0xB",          # non-numeric fee
    "0xA/-500/0xB",         # signed fee
    "0xA/16777216/0xB",     # fee does not fit in 3 bytes
    "0xA//0xB",             # empty fee
    "0xZZ/500/0xB",         # non-hex address
    "0x" + "1" * 41 + "/500/0xB",  # address longer than 20 bytes
])
def test_malformed_paths_fail_fast(text):
    with pytest.raises(MalformedPathError):
        parse_path(text)


@pytest.mark.parametrize("data", [b"", bytes(19), bytes(21), bytes(20 + 22), bytes(20 + 23 + 1)])
def test_decode_rejects_bad_lengths(data):
    with pytest.raises(MalformedPathError):
        decode_path(data)


def test_malformed_path_is_a_value_error():
    # Callers that only know about ValueError still catch it.
    with pytest.raises(ValueError):
        parse_encoded_path("0x123")


def test_directly_built_path_keeps_fixed_field_widths():
    path = SwapPath(tokens=("0xA", "0xB"), fees=(500,))

    encoded = encode_path(path)

    assert path.tokens == (
        Web3.to_checksum_address("0x" + "0" * 39 + "a"),
        Web3.to_checksum_address("0x" + "0" * 39 + "b"),
    )
    assert len(encoded) == 43
    assert decode_path(encoded) == path


def test_directly_built_path_with_lowercase_tokens_round_trips():
    path = SwapPath(tokens=(WETH.lower(), USDC.lower()), fees=(3000,))

    assert path.tokens == (WETH, USDC)
    assert decode_path(encode_path(path)) == path


@pytest.mark.parametrize("tokens", [("nothex",), ("0x",), ("0x" + "1" * 41,), (42,), (WETH, "0xzz")])
def test_directly_built_path_rejects_non_address_tokens(tokens):
    fees = (500,) * (len(tokens) - 1)
    with pytest.raises(ValidationError) as excinfo:
        SwapPath(tokens=tokens, fees=fees)
    assert "not an address" in str(excinfo.value)
