"""
Data model for batched contract calls.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Union


SuccessHandler = Callable[[Any], Union[Any, Awaitable[Any]]]
ErrorHandlerFn = Callable[[Exception], Union[None, Awaitable[None]]]


def new_key() -> str:
    """Generate a correlation key for a descriptor."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class CallDescriptor:
    """
    One logical contract call.

    ``method`` is a function name, a full signature such as
    ``transfer(address,uint256)``, or, when ``abi`` is omitted, a compact
    signature with outputs such as ``balanceOf(address)(uint256)``.

    ``key`` correlates the call with its result. Left empty, one is
    generated when the call is queued or sent.
    """
    target: str
    method: str
    parameters: Sequence[Any] = ()
    abi: Optional[Union[str, List[Dict[str, Any]]]] = None
    key: Optional[str] = None
    options: Optional[Dict[str, Any]] = None

    def with_key(self, key: str) -> "CallDescriptor":
        """Copy of this descriptor with another correlation key."""
        return CallDescriptor(
            target=self.target,
            method=self.method,
            parameters=self.parameters,
            abi=self.abi,
            key=key,
            options=self.options,
        )

    def keyed(self) -> "CallDescriptor":
        """This descriptor if it carries a key, else a copy with a fresh one."""
        return self if self.key else self.with_key(new_key())


@dataclass(frozen=True)
class Callback:
    """Success/error pair attached to a queued call."""
    success: SuccessHandler
    error: Optional[ErrorHandlerFn] = None


@dataclass(frozen=True)
class LazyCall:
    """A queued descriptor plus its optional callback."""
    descriptor: CallDescriptor
    callback: Optional[Callback] = None

    @property
    def key(self) -> Optional[str]:
        return self.descriptor.key


@dataclass(frozen=True)
class AggregateCall:
    """One wire-level entry of an aggregate call."""
    target: str
    encoded_data: bytes
    original_index: int
    function: Any = field(default=None, compare=False, repr=False)

    def to_tuple(self):
        return (self.target, self.encoded_data)


@dataclass
class RawAggregateResponse:
    """What the outward multicall returned, positionally aligned to the request."""
    block_number: int
    return_data: List[bytes]


@dataclass
class CallReturnContext:
    """Decoded outcome of one call in an aggregate response."""
    key: str
    method_name: str
    method_parameters: Sequence[Any]
    return_value: Any = None
    decoded: bool = False
    success: bool = True
    error: Optional[Exception] = None


@dataclass
class AggregateResult:
    """Per-key outcome of an aggregate call."""
    block_number: int
    results: Dict[str, CallReturnContext] = field(default_factory=dict)

    @property
    def values(self) -> Dict[str, Any]:
        """Decoded value for every successful key, in request order."""
        return {
            key: context.return_value
            for key, context in self.results.items()
            if context.success
        }

    @property
    def errors(self) -> Dict[str, Exception]:
        """Decode error for every failed key."""
        return {
            key: context.error
            for key, context in self.results.items()
            if not context.success
        }

    def __len__(self) -> int:
        return len(self.results)


@dataclass
class ReceiptSummary:
    """Outcome of a confirmed transaction."""
    tx_id: str
    block_number: Optional[int] = None
