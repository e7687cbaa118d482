"""
application/x-www-form-urlencoded body encoding.

Device parsers are sensitive to parameter order, so bodies are built from
an ordered list of pairs rather than a mapping.
"""

from typing import Iterable
from urllib.parse import parse_qsl, quote

FormPairs = Iterable[tuple[str, str]]


def encode_value(value: str) -> str:
    """Percent-encode a value, leaving only A-Z a-z 0-9 - _ . ~ unescaped."""
    return quote(value, safe="")


def encode_form(pairs: FormPairs) -> str:
    """
    Encode ordered pairs into a form body.

    Keys are written as-is, values are percent-encoded (space becomes %20)
    and pairs are joined with "&". An empty value is written as "key=".
    """
    return "&".join(f"{key}={encode_value(value)}" for key, value in pairs)


def decode_form(body: str) -> list[tuple[str, str]]:
    """Decode a form body back into its ordered pairs."""
    return parse_qsl(body, keep_blank_values=True, strict_parsing=False)
