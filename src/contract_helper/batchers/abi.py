"""
ABI tables and function resolution.

Resolves a method name or signature against an ABI to exactly one function,
and encodes/decodes call data for it with eth_abi.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from eth_abi import decode, encode, is_encodable
from eth_abi.exceptions import DecodingError, EncodingError
from eth_utils import function_signature_to_4byte_selector
from eth_utils.abi import collapse_if_tuple

from .errors import DecodeError, FragmentResolutionError, ValidationError

logger = logging.getLogger(__name__)


def _call_struct(struct_name: str) -> Dict[str, Any]:
    return {
        "components": [
            {"internalType": "address", "name": "target", "type": "address"},
            {"internalType": "bytes", "name": "callData", "type": "bytes"},
        ],
        "internalType": f"struct {struct_name}.Call[]",
        "name": "calls",
        "type": "tuple[]",
    }


def _result_struct(struct_name: str) -> Dict[str, Any]:
    return {
        "components": [
            {"internalType": "bool", "name": "success", "type": "bool"},
            {"internalType": "bytes", "name": "returnData", "type": "bytes"},
        ],
        "internalType": f"struct {struct_name}.Result[]",
        "name": "returnData",
        "type": "tuple[]",
    }


def _view(name: str, output_type: str, output_name: str, inputs: Optional[List[Dict]] = None) -> Dict[str, Any]:
    return {
        "inputs": inputs or [],
        "name": name,
        "outputs": [{"internalType": output_type, "name": output_name, "type": output_type}],
        "stateMutability": "view",
        "type": "function",
    }


MULTICALL2_ABI = [
    {
        "inputs": [_call_struct("Multicall2")],
        "name": "aggregate",
        "outputs": [
            {"internalType": "uint256", "name": "blockNumber", "type": "uint256"},
            {"internalType": "bytes[]", "name": "returnData", "type": "bytes[]"},
        ],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [_call_struct("Multicall2")],
        "name": "blockAndAggregate",
        "outputs": [
            {"internalType": "uint256", "name": "blockNumber", "type": "uint256"},
            {"internalType": "bytes32", "name": "blockHash", "type": "bytes32"},
            _result_struct("Multicall2"),
        ],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    _view(
        "getBlockHash", "bytes32", "blockHash",
        [{"internalType": "uint256", "name": "blockNumber", "type": "uint256"}],
    ),
    _view("getBlockNumber", "uint256", "blockNumber"),
    _view("getCurrentBlockCoinbase", "address", "coinbase"),
    _view("getCurrentBlockDifficulty", "uint256", "difficulty"),
    _view("getCurrentBlockGasLimit", "uint256", "gaslimit"),
    _view("getCurrentBlockTimestamp", "uint256", "timestamp"),
    _view(
        "getEthBalance", "uint256", "balance",
        [{"internalType": "address", "name": "addr", "type": "address"}],
    ),
    _view("getLastBlockHash", "bytes32", "blockHash"),
    {
        "inputs": [
            {"internalType": "bool", "name": "requireSuccess", "type": "bool"},
            _call_struct("Multicall2"),
        ],
        "name": "tryAggregate",
        "outputs": [_result_struct("Multicall2")],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [
            {"internalType": "bool", "name": "requireSuccess", "type": "bool"},
            _call_struct("Multicall2"),
        ],
        "name": "tryBlockAndAggregate",
        "outputs": [
            {"internalType": "uint256", "name": "blockNumber", "type": "uint256"},
            {"internalType": "bytes32", "name": "blockHash", "type": "bytes32"},
            _result_struct("Multicall2"),
        ],
        "stateMutability": "nonpayable",
        "type": "function",
    },
]


@dataclass(frozen=True)
class ResolvedFunction:
    """A single ABI function with its encoding metadata."""
    name: str
    input_types: Tuple[str, ...]
    output_types: Tuple[str, ...]
    output_names: Tuple[str, ...]

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.input_types)})"

    @property
    def selector(self) -> bytes:
        return function_signature_to_4byte_selector(self.signature)

    @classmethod
    def from_abi(cls, fragment: Dict[str, Any]) -> "ResolvedFunction":
        return cls(
            name=fragment["name"],
            input_types=tuple(collapse_if_tuple(i) for i in fragment.get("inputs", [])),
            output_types=tuple(collapse_if_tuple(o) for o in fragment.get("outputs", [])),
            output_names=tuple(o.get("name", "") for o in fragment.get("outputs", [])),
        )


def parse_abi(abi: Union[str, List[Dict[str, Any]], Dict[str, Any], None]) -> List[Dict[str, Any]]:
    """
    Normalize an ABI given as JSON text, a fragment list or a build artifact.

    Returns:
        List of function fragments
    """
    if abi is None:
        return []
    if isinstance(abi, str):
        try:
            abi = json.loads(abi)
        except json.JSONDecodeError as e:
            raise ValidationError(f"ABI is not valid JSON: {e}") from e
    if isinstance(abi, dict):
        if "abi" not in abi:
            raise ValidationError("ABI object has no 'abi' field")
        abi = abi["abi"]
    if not isinstance(abi, list):
        raise ValidationError(f"Unsupported ABI type: {type(abi).__name__}")
    return [item for item in abi if item.get("type", "function") == "function"]


def split_types(types: str) -> List[str]:
    """Split a comma separated type list, keeping tuple types intact."""
    result = []
    depth = 0
    current = ""
    for char in types:
        if char == "," and depth == 0:
            result.append(current.strip())
            current = ""
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        current += char
    if current.strip():
        result.append(current.strip())
    return result


def parse_signature(signature: str) -> Tuple[str, List[str], Optional[List[str]]]:
    """
    Parse ``name(in,...)`` or ``name(in,...)(out,...)``.

    Returns:
        (name, input types, output types or None)
    """
    signature = signature.strip()
    open_at = signature.find("(")
    name = signature[:open_at].strip()
    groups = []
    depth = 0
    start = None
    for i, char in enumerate(signature[open_at:], start=open_at):
        if char == "(":
            if depth == 0:
                start = i + 1
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                groups.append(signature[start:i])
    if not name or depth != 0 or not groups or len(groups) > 2:
        raise FragmentResolutionError(f"Malformed function signature: {signature}", method=signature)
    inputs = split_types(groups[0])
    outputs = split_types(groups[1]) if len(groups) == 2 else None
    return name, inputs, outputs


def _accepts(fn: ResolvedFunction, parameters: Sequence[Any]) -> bool:
    try:
        return all(is_encodable(t, v) for t, v in zip(fn.input_types, parameters))
    except Exception:
        return False


def resolve_function(
    abi: Union[str, List[Dict[str, Any]], None],
    method: str,
    parameters: Sequence[Any] = (),
    target: Optional[str] = None,
) -> ResolvedFunction:
    """
    Resolve ``method`` against ``abi`` to exactly one function.

    Candidates are filtered by name (or full signature), then by parameter
    count, then by whether the parameters are encodable as the input types.

    Raises:
        FragmentResolutionError: If zero or more than one function matches
        ValidationError: If ``parameters`` is not a list or tuple
    """
    if not isinstance(parameters, (list, tuple)):
        raise ValidationError(
            f"Parameters of {method} must be a list or tuple, got {type(parameters).__name__}"
        )
    method = method.strip()
    fragments = parse_abi(abi)
    parameters = list(parameters)

    if "(" in method:
        name, inputs, outputs = parse_signature(method)
        signature = f"{name}({','.join(inputs)})"
        if not fragments:
            if len(inputs) != len(parameters):
                raise FragmentResolutionError(
                    f"{signature} expects {len(inputs)} parameters, got {len(parameters)}",
                    target=target, method=method,
                )
            outputs = outputs or []
            return ResolvedFunction(
                name=name,
                input_types=tuple(inputs),
                output_types=tuple(outputs),
                output_names=tuple("" for _ in outputs),
            )
        candidates = [
            fn for fn in map(ResolvedFunction.from_abi, fragments)
            if fn.signature == signature
        ]
    else:
        candidates = [
            ResolvedFunction.from_abi(f) for f in fragments if f.get("name") == method
        ]

    signatures = [fn.signature for fn in candidates]
    matching = [fn for fn in candidates if len(fn.input_types) == len(parameters)]
    if len(matching) > 1:
        matching = [fn for fn in matching if _accepts(fn, parameters)]

    if not matching:
        raise FragmentResolutionError(
            f"ABI fragment is not found in {target}[name={method}, parameters={len(parameters)}]",
            target=target, method=method, candidates=signatures,
        )
    if len(matching) > 1:
        raise FragmentResolutionError(
            f"Ambiguous method {method} in {target}: {', '.join(fn.signature for fn in matching)}",
            target=target, method=method, candidates=[fn.signature for fn in matching],
        )
    return matching[0]


def encode_call(fn: ResolvedFunction, parameters: Sequence[Any]) -> bytes:
    """Selector followed by the ABI-encoded parameters."""
    try:
        return fn.selector + encode(list(fn.input_types), list(parameters))
    except (EncodingError, TypeError, ValueError) as e:
        raise ValidationError(f"Failed to encode {fn.signature}: {e}") from e


def decode_result(fn: ResolvedFunction, data: bytes) -> Tuple[Any, ...]:
    """Decode raw return bytes against the function's output types."""
    try:
        return decode(list(fn.output_types), bytes(data))
    except (DecodingError, TypeError, ValueError) as e:
        raise DecodeError(f"Failed to decode {fn.signature} result: {e}") from e
