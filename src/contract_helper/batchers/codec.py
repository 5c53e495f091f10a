"""
Aggregate call codec.

Turns N heterogeneous call descriptors into one list of ``(target, callData)``
pairs and turns the positionally aligned raw results back into per-key
decoded values. Pure functions, no I/O.
"""

import logging
from typing import Dict, List, Sequence

from eth_utils import to_checksum_address

from .abi import decode_result, encode_call, resolve_function
from .errors import DecodeError, ValidationError
from .formatting import ValueFormatter
from .types import (
    AggregateCall,
    AggregateResult,
    CallDescriptor,
    CallReturnContext,
    RawAggregateResponse,
)

logger = logging.getLogger(__name__)


def build_aggregate_call(descriptors: Sequence[CallDescriptor]) -> List[AggregateCall]:
    """
    Encode every descriptor into one aggregate call entry.

    Raises:
        FragmentResolutionError: If any method cannot be resolved; nothing
            is returned for the other descriptors
        ValidationError: On duplicate keys, bad targets or unencodable parameters
    """
    seen = set()
    calls = []
    for index, descriptor in enumerate(descriptors):
        if descriptor.key in seen:
            raise ValidationError(f"Duplicate call key in batch: {descriptor.key}")
        seen.add(descriptor.key)

        fn = resolve_function(
            descriptor.abi, descriptor.method, descriptor.parameters, target=descriptor.target
        )
        try:
            target = to_checksum_address(descriptor.target)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid target address {descriptor.target}: {e}") from e

        calls.append(
            AggregateCall(
                target=target,
                encoded_data=encode_call(fn, descriptor.parameters),
                original_index=index,
                function=fn,
            )
        )
    return calls


def build_up_aggregate_response(
    descriptors: Sequence[CallDescriptor],
    calls: Sequence[AggregateCall],
    response: RawAggregateResponse,
    formatter: ValueFormatter,
) -> AggregateResult:
    """
    Map raw results back onto the descriptors that produced them.

    Entries are re-associated through ``original_index``; an index that shows
    up twice keeps the last raw result. A result that fails to decode, or is
    missing from the response, is reported on its own key and does not affect
    its siblings.

    Args:
        descriptors: Descriptors in request order
        calls: Output of ``build_aggregate_call`` for ``descriptors``
        response: Raw outward response
        formatter: Value formatting strategy

    Returns:
        AggregateResult keyed by descriptor key, in request order
    """
    if len(response.return_data) != len(calls):
        logger.warning(
            f"Aggregate response has {len(response.return_data)} entries for {len(calls)} calls"
        )

    raw_by_index: Dict[int, bytes] = {}
    for call, raw in zip(calls, response.return_data):
        raw_by_index[call.original_index] = raw

    result = AggregateResult(block_number=int(response.block_number))
    for call in calls:
        descriptor = descriptors[call.original_index]
        context = CallReturnContext(
            key=descriptor.key,
            method_name=descriptor.method,
            method_parameters=descriptor.parameters,
        )
        result.results[descriptor.key] = context

        if call.original_index not in raw_by_index:
            context.success = False
            context.error = DecodeError(f"No result returned for {descriptor.key}", key=descriptor.key)
            continue

        raw = raw_by_index[call.original_index]
        try:
            decoded = decode_result(call.function, raw)
            context.return_value = formatter.format_outputs(call.function, decoded)
            context.decoded = True
        except (DecodeError, TypeError, ValueError) as e:
            logger.warning(f"Failed to decode result for {descriptor.key}: {e}")
            error = e if isinstance(e, DecodeError) else DecodeError(str(e))
            if error is not e:
                error.__cause__ = e
            error.key = descriptor.key
            context.return_value = raw
            context.success = False
            context.error = error
    return result
