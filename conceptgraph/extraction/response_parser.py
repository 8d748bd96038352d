"""
Locate and decode the concept array inside a free-text service response.

Handles code-fence wrapping, prose before or after the payload, and
responses cut off in the middle of the array.
"""

import json
import logging
import re
from typing import Any

from conceptgraph.extraction.exceptions import MalformedResponseError

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```[A-Za-z0-9_-]*")
_MAX_SALVAGE_ATTEMPTS = 50


def strip_code_fences(content: str) -> str:
    """Remove markdown code fence markers."""
    return _CODE_FENCE.sub("", content)


def _is_node_array(value: Any) -> bool:
    return isinstance(value, list) and any(isinstance(item, dict) for item in value)


def _first_complete_array(text: str, decoder: json.JSONDecoder) -> list | None:
    pos = text.find("[")
    while pos != -1:
        try:
            value, _ = decoder.raw_decode(text, pos)
        except json.JSONDecodeError:
            value = None
        if _is_node_array(value):
            return value
        pos = text.find("[", pos + 1)
    return None


def _salvage_truncated_array(text: str, decoder: json.JSONDecoder) -> list | None:
    """Close an array cut off mid-stream after its last complete object."""
    start = text.find("[")
    if start == -1:
        return None

    end = text.rfind("}")
    attempts = 0
    while end > start and attempts < _MAX_SALVAGE_ATTEMPTS:
        try:
            value, _ = decoder.raw_decode(text[start:end + 1] + "]")
        except json.JSONDecodeError:
            value = None
        if _is_node_array(value):
            return value
        end = text.rfind("}", start, end)
        attempts += 1
    return None


def parse_node_list(content: str) -> list[Any]:
    """
    Extract the raw node list from a service response.

    Args:
        content: Raw response text

    Returns:
        list: Decoded entries, unvalidated

    Raises:
        MalformedResponseError: No non-empty node array could be decoded
    """
    if not content or not content.strip():
        raise MalformedResponseError("Empty response")

    text = strip_code_fences(content).strip()
    decoder = json.JSONDecoder()

    nodes = _first_complete_array(text, decoder)
    if nodes is None:
        nodes = _salvage_truncated_array(text, decoder)
        if nodes is not None:
            logger.warning(f"Recovered {len(nodes)} entries from a truncated response")

    if nodes is None:
        logger.debug(f"Response preview: {content[:300]}")
        raise MalformedResponseError("No JSON node array found in response")

    return nodes
