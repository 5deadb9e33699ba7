"""Signature records and pattern compilation.

A signature record comes from the catalog as JSON::

    {"name": "PRINTF.OBJ", "sig": "27 BD FF ?? AF BF 00 10",
     "labels": [{"name": "printf", "offset": 0}], "xbss": [...]}

``compile_signature`` turns the textual pattern into parallel byte and
wildcard arrays.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from ..core.exceptions import MalformedSignatureError

WILDCARD_TOKEN = "??"
HEX_DIGITS = frozenset("0123456789abcdef")


@dataclass(frozen=True)
class Label:
    """A named offset inside a signature."""
    name: str
    offset: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Label":
        return cls(name=data["name"], offset=int(data.get("offset", 0)) & 0xFFFFFFFF)


@dataclass(frozen=True)
class SignatureRecord:
    """A raw catalog entry before its pattern text is parsed."""
    name: str
    sig: str
    labels: Tuple[Label, ...] = ()
    xbss: Tuple[Label, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SignatureRecord":
        """Build a record from one decoded JSON object.

        A null ``sig`` becomes an empty pattern, which never matches.

        Raises:
            KeyError: If ``name`` or ``sig`` is missing.
            TypeError: If ``sig`` is neither a string nor null.
        """
        sig = data["sig"]
        if sig is None:
            sig = ""
        elif not isinstance(sig, str):
            raise TypeError(f"{data['name']}: sig must be a string, got {type(sig).__name__}")
        return cls(
            name=data["name"],
            sig=sig,
            labels=tuple(Label.from_dict(item) for item in data.get("labels") or ()),
            xbss=tuple(Label.from_dict(item) for item in data.get("xbss") or ()),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "sig": self.sig}
        if self.labels:
            data["labels"] = [{"name": l.name, "offset": l.offset} for l in self.labels]
        if self.xbss:
            data["xbss"] = [{"name": l.name, "offset": l.offset} for l in self.xbss]
        return data


@dataclass
class CompiledSignature:
    """A signature whose pattern is ready for scanning."""
    name: str
    pattern: bytes
    wildcard: Tuple[bool, ...]
    labels: Tuple[Label, ...] = ()
    bss_labels: Tuple[Label, ...] = ()

    def __post_init__(self):
        assert len(self.pattern) == len(self.wildcard), (
            f"{self.name}: pattern and wildcard mask differ in length"
        )

    def __len__(self) -> int:
        return len(self.pattern)

    @property
    def wildcard_count(self) -> int:
        return sum(self.wildcard)


def compile_signature(record: SignatureRecord) -> CompiledSignature:
    """Parse a record's pattern text into a CompiledSignature.

    The text is lower-cased and split on whitespace. Each token is either
    the ``??`` wildcard or a two-digit hex byte; runs of whitespace are
    tolerated.

    Raises:
        MalformedSignatureError: On any other token.
    """
    pattern = bytearray()
    wildcard: List[bool] = []

    for token in record.sig.lower().split():
        if token == WILDCARD_TOKEN:
            pattern.append(0)
            wildcard.append(True)
            continue
        if len(token) > 2 or not HEX_DIGITS.issuperset(token):
            raise MalformedSignatureError.bad_token(record.name, token)
        pattern.append(int(token, 16))
        wildcard.append(False)

    return CompiledSignature(
        name=record.name,
        pattern=bytes(pattern),
        wildcard=tuple(wildcard),
        labels=record.labels,
        bss_labels=record.xbss,
    )
