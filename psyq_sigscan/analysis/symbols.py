"""Flattening of matched symbols into one address-ordered table."""

from typing import Dict, List, NamedTuple

from ..scanner.version_scan import RawMatch


class Symbol(NamedTuple):
    address: int
    name: str


def resolve_symbols(resolved: Dict[str, RawMatch]) -> List[Symbol]:
    """Collect the symbols of every resolved match, sorted by address.

    Two modules may name the same address; both entries are kept. Entries
    with equal addresses are ordered by name.
    """
    symbols = [
        Symbol(address, name)
        for match in resolved.values()
        for address, name in match.symbols.items()
    ]
    symbols.sort()
    return symbols
