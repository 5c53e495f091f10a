"""
Formatting of decoded contract values.

A single strategy, chosen once per helper, turns raw decoded values into
the caller-facing representation. Integers become ``Decimal`` or ``int``.
Addresses become checksummed, lowercase hex or the chain's native form
(base58check on Tron).
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional, Sequence

import base58
from eth_utils import to_checksum_address

from .abi import ResolvedFunction, split_types
from .errors import ValidationError


TRON_ADDRESS_PREFIX = b"\x41"


def to_tron_address(address: str) -> str:
    """Base58check form of a 20-byte address, as Tron displays it."""
    raw = bytes.fromhex(to_checksum_address(address)[2:])
    return base58.b58encode_check(TRON_ADDRESS_PREFIX + raw).decode()


# Chain families selectable for the ``native`` address format.
NATIVE_ADDRESS_FORMATTERS: Dict[str, Callable[[str], str]] = {
    "evm": to_checksum_address,
    "tron": to_tron_address,
}


class AddressFormat(Enum):
    """How decoded addresses are returned."""
    NATIVE = "native"
    CHECKSUM = "checksum"
    HEX = "hex"


class NumericFormat(Enum):
    """How decoded integers are returned."""
    DECIMAL = "decimal"
    BIGINT = "bigint"


class ResultTuple(tuple):
    """Tuple of outputs, addressable by position or by output name."""

    def __new__(cls, values: Iterable[Any], names: Sequence[str] = ()):
        instance = super().__new__(cls, values)
        instance._names = {name: i for i, name in enumerate(names) if name}
        return instance

    def __getitem__(self, item):
        if isinstance(item, str):
            try:
                return super().__getitem__(self._names[item])
            except KeyError:
                raise KeyError(item) from None
        return super().__getitem__(item)

    def __getattr__(self, name: str):
        names = self.__dict__.get("_names", {})
        if name in names:
            return super().__getitem__(names[name])
        raise AttributeError(name)

    def keys(self):
        return list(self._names)

    def as_dict(self):
        return {name: self[index] for name, index in self._names.items()}


def _array_item_type(type_str: str) -> Optional[str]:
    if not type_str.endswith("]"):
        return None
    return type_str[: type_str.rindex("[")]


class ValueFormatter:
    """Configuration-driven formatting of decoded values."""

    def __init__(
        self,
        address_format: AddressFormat = AddressFormat.CHECKSUM,
        numeric_format: NumericFormat = NumericFormat.DECIMAL,
        native_address: Optional[Callable[[str], str]] = None,
    ):
        self.address_format = AddressFormat(address_format)
        self.numeric_format = NumericFormat(numeric_format)
        self.native_address = native_address or to_checksum_address

    @classmethod
    def from_names(
        cls,
        address_format: str,
        numeric_format: str,
        native_chain: str = "evm",
        native_address: Optional[Callable[[str], str]] = None,
    ) -> "ValueFormatter":
        """
        Build a formatter from configuration names.

        ``native_address`` takes precedence over ``native_chain``, which
        picks one of ``NATIVE_ADDRESS_FORMATTERS``.
        """
        if native_address is None:
            if native_chain not in NATIVE_ADDRESS_FORMATTERS:
                raise ValidationError(f"Unknown native address format: {native_chain}")
            native_address = NATIVE_ADDRESS_FORMATTERS[native_chain]
        try:
            return cls(
                AddressFormat(address_format),
                NumericFormat(numeric_format),
                native_address=native_address,
            )
        except ValueError as e:
            raise ValidationError(f"Unknown value format: {e}") from e

    def format_address(self, value: Any) -> str:
        if isinstance(value, (bytes, bytearray)):
            value = "0x" + bytes(value).hex()
        checksummed = to_checksum_address(value)
        if self.address_format is AddressFormat.HEX:
            return checksummed.lower()
        if self.address_format is AddressFormat.NATIVE:
            return self.native_address(checksummed)
        return checksummed

    def format_value(self, value: Any, type_str: str) -> Any:
        item_type = _array_item_type(type_str)
        if item_type is not None:
            return [self.format_value(item, item_type) for item in value]
        if type_str.startswith("("):
            component_types = split_types(type_str[1:-1])
            return tuple(self.format_value(v, t) for v, t in zip(value, component_types))
        if type_str.startswith(("uint", "int")):
            return int(value) if self.numeric_format is NumericFormat.BIGINT else Decimal(int(value))
        if type_str == "address":
            return self.format_address(value)
        return value

    def format_outputs(self, fn: ResolvedFunction, values: Sequence[Any]) -> Any:
        """
        Format a decoded output tuple.

        A function with exactly one unnamed output yields the bare value;
        otherwise a ``ResultTuple`` keyed by output names.
        """
        if len(fn.output_types) == 1 and not fn.output_names[0]:
            return self.format_value(values[0], fn.output_types[0])
        return ResultTuple(
            (self.format_value(v, t) for v, t in zip(values, fn.output_types)),
            fn.output_names,
        )
