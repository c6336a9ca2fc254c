# /flashliq/core/models.py
# Value objects passed between the pipeline stages. All of them are frozen and
# live for exactly one invocation.
from decimal import Decimal, InvalidOperation, localcontext
from typing import Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, field_serializer, field_validator, model_validator
from web3 import Web3

from flashliq.core.errors import MalformedPathError

ADDRESS_WIDTH = 20
MAX_FEE_TIER = 2**24 - 1

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def normalize_address(token) -> str:
    """
    Returns the EIP-55 form of a hex address, zero-padding short forms such as
    ``0xA`` on the left to the full 20 bytes (an address is a uint160 on-chain).

    Raises:
        MalformedPathError: if the token is not a hex string of at most 40 digits.
    """
    if not isinstance(token, str):
        raise MalformedPathError(f"not an address: {token!r}")
    digits = token[2:] if token[:2] in ("0x", "0X") else token
    if not digits or len(digits) > ADDRESS_WIDTH * 2 or not set(digits) <= _HEX_DIGITS:
        raise MalformedPathError(f"not an address: {token!r}")
    return Web3.to_checksum_address("0x" + digits.rjust(ADDRESS_WIDTH * 2, "0"))


class SwapPath(BaseModel):
    """
    A route as the flash liquidator reads it: tokens[0], fees[0], tokens[1],
    ..., tokens[-1]. There is always exactly one more token than fee tier, and
    every token is stored as a checksummed 20-byte address.
    """
    model_config = ConfigDict(frozen=True)

    tokens: Tuple[str, ...]
    fees: Tuple[StrictInt, ...] = ()

    @field_validator("tokens", mode="before")
    @classmethod
    def _normalize_tokens(cls, tokens):
        if not isinstance(tokens, (list, tuple)):
            return tokens
        return tuple(normalize_address(token) for token in tokens)

    @model_validator(mode="after")
    def _check_alternation(self) -> "SwapPath":
        if len(self.tokens) != len(self.fees) + 1:
            raise ValueError(
                f"a path needs one more token than fee tiers, got {len(self.tokens)} tokens and {len(self.fees)} fees"
            )
        if any(not 0 <= fee <= MAX_FEE_TIER for fee in self.fees):
            raise ValueError("fee tiers must fit in 3 bytes")
        return self

    def elements(self) -> list:
        """The hop sequence in alternating address/fee order."""
        out: list = [self.tokens[0]]
        for fee, token in zip(self.fees, self.tokens[1:]):
            out.extend([fee, token])
        return out

    def __str__(self) -> str:
        return "/".join(str(e) for e in self.elements())


class Quote(BaseModel):
    """Result of findBestQuoteStatic. ``success=False`` means no profitable route."""
    model_config = ConfigDict(frozen=True)

    success: StrictBool
    amount_in: StrictInt = Field(default=0, ge=0)
    amount_out: StrictInt = Field(default=0, ge=0)
    profit: StrictInt = 0

    @classmethod
    def unsuccessful(cls) -> "Quote":
        return cls(success=False)


class Thresholds(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_profit: StrictInt = Field(ge=0)
    slippage_pct: StrictInt = Field(ge=0, le=100)

    @classmethod
    def parse(cls, min_profit: str, slippage_pct: Union[str, int], decimals: int = 18) -> "Thresholds":
        """
        Builds thresholds from caller text without going through floats.

        Args:
            min_profit: Whole-token amount such as "0.4"; scaled by 10**decimals.
            slippage_pct: Integer percent, e.g. 1 for 1%.
            decimals: Decimals of the token the contract reports profit in.
        """
        return cls(min_profit=to_base_units(min_profit, decimals), slippage_pct=_parse_pct(slippage_pct))


def to_base_units(amount: str, decimals: int) -> int:
    """Converts a decimal token amount to integer base units, exactly."""
    if decimals < 0:
        raise ValueError("decimals must be non-negative")
    text = str(amount).strip()
    # Enough precision for any uint256 with up to 77 decimals.
    with localcontext() as ctx:
        ctx.prec = 160
        try:
            value = Decimal(text)
        except InvalidOperation as e:
            raise ValueError(f"not a decimal amount: {amount!r}") from e
        if not value.is_finite() or value < 0:
            raise ValueError(f"amount must be a finite non-negative number: {amount!r}")
        scaled = value.scaleb(decimals)
        if scaled != scaled.to_integral_value():
            raise ValueError(f"{amount!r} has more than {decimals} decimal places")
        return int(scaled)


def _parse_pct(value: Union[str, int]) -> int:
    if isinstance(value, bool):
        raise ValueError("slippage percent must be an integer")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not (text.isascii() and text.isdigit()):
        raise ValueError(f"slippage percent must be a whole number, got {value!r}")
    return int(text)


class ApprovedBounds(BaseModel):
    """Slippage-adjusted bounds for an approved quote."""
    model_config = ConfigDict(frozen=True)

    approved: Literal[True] = True
    amount_out_min: StrictInt
    amount_in_max: StrictInt
    profit_min: StrictInt


class NotProfitable(BaseModel):
    """The normal negative outcome of an evaluation; the pipeline stops here."""
    model_config = ConfigDict(frozen=True)

    approved: Literal[False] = False
    reason: Literal["quote_unsuccessful", "below_threshold"]


Decision = Union[ApprovedBounds, NotProfitable]


class ExecutionParams(BaseModel):
    """The exact argument tuple of flashLiquidate."""
    model_config = ConfigDict(frozen=True)

    position_ref: str
    recipient: str
    amount_out_min: StrictInt = Field(ge=0)
    amount_in_max: StrictInt = Field(ge=0)
    profit_min: StrictInt
    deadline: StrictInt = Field(gt=0)
    path: bytes

    def as_args(self) -> tuple:
        return (
            self.position_ref,
            self.recipient,
            self.amount_out_min,
            self.amount_in_max,
            self.profit_min,
            self.deadline,
            self.path,
        )

    @field_serializer("path")
    def _path_hex(self, path: bytes) -> str:
        return "0x" + path.hex()


class LiquidationOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    position_ref: str
    path: SwapPath
    quote: Quote
    decision: Decision
    params: ExecutionParams | None = None
    tx_hash: str | None = None

    @property
    def submitted(self) -> bool:
        return self.tx_hash is not None
