"""
Extract the first well-formed JSON value from model output
"""

from __future__ import annotations

import json
import re

from .types import ParsingResult

_CODE_BLOCK_PATTERNS = (
    r"```json\s*(.*?)\s*```",  # JSON code blocks
    r"```[a-zA-Z]*\s*(.*?)\s*```",  # Any other fenced block
)

_decoder = json.JSONDecoder()
_VALUE_START = re.compile(r"[{[]")
_OPENER_RUN = re.compile(r"\[+|\{+")


def extract_json(text: str) -> ParsingResult:
    """Find the JSON payload in ``text``.

    Strategies, first success wins:

    1. the whole (stripped) text is JSON;
    2. the body of a fenced code block is JSON;
    3. scanning left to right, the first ``{`` or ``[`` that starts a
       decodable value.
    """
    if not text or not text.strip():
        return ParsingResult(success=False, method="none", errors=("Empty response",))

    # Strategy 1: the whole response
    stripped = text.strip()
    try:
        return ParsingResult(
            success=True, parsed_data=json.loads(stripped), method="whole_text"
        )
    except (json.JSONDecodeError, RecursionError):
        pass

    # Strategy 2: fenced code blocks
    for pattern in _CODE_BLOCK_PATTERNS:
        for match in re.findall(pattern, text, re.DOTALL):
            try:
                return ParsingResult(
                    success=True, parsed_data=json.loads(match), method="code_block"
                )
            except (json.JSONDecodeError, RecursionError):
                continue

    # Strategy 3: scan for an embedded object or array
    scanned = _scan_for_value(text)
    if scanned is not None:
        return ParsingResult(success=True, parsed_data=scanned, method="scan")

    return ParsingResult(
        success=False,
        method="none",
        errors=("No valid JSON found in response",),
    )


def _scan_for_value(text: str) -> dict | list | None:
    index = 0
    while True:
        match = _VALUE_START.search(text, index)
        if match is None:
            return None
        index = match.start()
        try:
            value, _ = _decoder.raw_decode(text, index)
        except json.JSONDecodeError:
            index += 1
            continue
        except RecursionError:
            # Too deeply nested to be a payload; skip the whole run of openers
            index = _OPENER_RUN.match(text, index).end()
            continue
        return value
