# /flashliq/core/path.py
# Converts between the "ADDR/FEE/ADDR/..." route text and the packed byte path
# the flash liquidator decodes on-chain: addr(20) | fee(3) | addr(20) | ...

from web3 import Web3

from flashliq.core.errors import MalformedPathError
from flashliq.core.models import ADDRESS_WIDTH, MAX_FEE_TIER, SwapPath, normalize_address

FEE_WIDTH = 3
HOP_WIDTH = FEE_WIDTH + ADDRESS_WIDTH
SEPARATOR = "/"

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _parse_address(token: str, position: int) -> str:
    try:
        return normalize_address(token)
    except MalformedPathError as e:
        raise MalformedPathError(f"element {position} is not an address: {token!r}") from e


def _parse_fee(token: str, position: int) -> int:
    if not (token.isascii() and token.isdigit()):
        raise MalformedPathError(f"element {position} is not a fee tier: {token!r}")
    fee = int(token)
    if fee > MAX_FEE_TIER:
        raise MalformedPathError(f"fee tier {fee} at element {position} does not fit in {FEE_WIDTH} bytes")
    return fee


def parse_path(text: str) -> SwapPath:
    """
    Parses route text of the form ``ADDRESS(/FEETIER/ADDRESS)*``.

    Raises:
        MalformedPathError: if the elements do not alternate address/fee and
            start and end on an address, or if any element is malformed.
    """
    elements = [e.strip() for e in text.strip().split(SEPARATOR)]
    if len(elements) % 2 == 0:
        raise MalformedPathError(
            f"path must alternate address/fee and end on an address, got {len(elements)} elements: {text!r}"
        )
    tokens = tuple(_parse_address(e, i) for i, e in enumerate(elements) if i % 2 == 0)
    fees = tuple(_parse_fee(e, i) for i, e in enumerate(elements) if i % 2 == 1)
    return SwapPath(tokens=tokens, fees=fees)


def encode_path(path: SwapPath) -> bytes:
    parts = [Web3.to_bytes(hexstr=path.tokens[0])]
    for fee, token in zip(path.fees, path.tokens[1:]):
        parts.append(fee.to_bytes(FEE_WIDTH, "big"))
        parts.append(Web3.to_bytes(hexstr=token))
    return b"".join(parts)


def encode_path_text(text: str) -> bytes:
    return encode_path(parse_path(text))


def decode_path(data: bytes) -> SwapPath:
    """Inverse of :func:`encode_path` using the same field widths."""
    if len(data) < ADDRESS_WIDTH or (len(data) - ADDRESS_WIDTH) % HOP_WIDTH:
        raise MalformedPathError(
            f"encoded path length {len(data)} is not {ADDRESS_WIDTH} + {HOP_WIDTH}*k bytes"
        )
    tokens = [Web3.to_checksum_address("0x" + data[:ADDRESS_WIDTH].hex())]
    fees = []
    for offset in range(ADDRESS_WIDTH, len(data), HOP_WIDTH):
        fees.append(int.from_bytes(data[offset:offset + FEE_WIDTH], "big"))
        tokens.append(Web3.to_checksum_address("0x" + data[offset + FEE_WIDTH:offset + HOP_WIDTH].hex()))
    return SwapPath(tokens=tuple(tokens), fees=tuple(fees))


def parse_encoded_path(hexstr: str) -> SwapPath:
    """Accepts a path that was already packed, validating it by decoding."""
    digits = hexstr.strip()
    digits = digits[2:] if digits[:2] in ("0x", "0X") else digits
    if len(digits) % 2 or not set(digits) <= _HEX_DIGITS:
        raise MalformedPathError(f"encoded path is not a hex string: {hexstr!r}")
    return decode_path(bytes.fromhex(digits))
