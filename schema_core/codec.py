"""
Text codec: bytes or text to a generic value tree and back.
"""

import json
from typing import Any, Optional, Union

from .errors import ErrorCode, ValidationError, ValidationFailed


class JsonDecodeError(ValidationFailed):
    """Raised when input text is not valid JSON."""

    def __init__(self, exc: json.JSONDecodeError):
        error = ValidationError(
            code=ErrorCode.JSON_INVALID,
            loc=(),
            message=f"Invalid JSON: {exc.msg} at line {exc.lineno} column {exc.colno}",
            input=exc.doc[:50] if isinstance(exc.doc, str) else None,
            context={"error": exc.msg},
        )
        super().__init__([error], title="json")


def decode(data: Union[bytes, bytearray, str]) -> Any:
    """
    Parse JSON text into dicts, lists and scalars.

    Raises:
        JsonDecodeError: If the text is not valid JSON
    """
    if isinstance(data, (bytes, bytearray)):
        try:
            data = bytes(data).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise JsonDecodeError(json.JSONDecodeError(str(exc), "", 0))
    try:
        return json.loads(data)
    except json.JSONDecodeError as exc:
        raise JsonDecodeError(exc)


def encode(tree: Any, indent: Optional[int] = None, allow_nan: bool = True) -> bytes:
    """
    Render a JSON-compatible tree as UTF-8 bytes.

    ``allow_nan`` lets ``Infinity``/``NaN`` constants through; it is only
    enabled when serialization was asked to keep them.
    """
    separators = (",", ":") if indent is None else (",", ": ")
    text = json.dumps(tree, indent=indent, separators=separators,
                      ensure_ascii=False, allow_nan=allow_nan)
    return text.encode("utf-8")
