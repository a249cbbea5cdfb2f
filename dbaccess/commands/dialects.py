"""Statement dialects: placeholder syntax and identifier quoting per engine"""

from dataclasses import dataclass
from typing import Dict

from dbaccess.core.exceptions import UnsupportedEngineError


@dataclass(frozen=True)
class Dialect:
    """Placeholder and quoting rules of one engine"""
    name: str
    # "numeric" -> $1, $2 ...; "qmark" -> ?
    placeholder_style: str = "qmark"
    quote_char: str = '"'

    def placeholder(self, index: int) -> str:
        """Placeholder for the 1-based parameter `index`"""
        if self.placeholder_style == "numeric":
            return f"${index}"
        return "?"

    def quote(self, identifier: str) -> str:
        escaped = identifier.replace(self.quote_char, self.quote_char * 2)
        return f"{self.quote_char}{escaped}{self.quote_char}"


POSTGRES = Dialect(name="postgres", placeholder_style="numeric")
SQLITE = Dialect(name="sqlite")
CASSANDRA = Dialect(name="cassandra")

_DIALECTS: Dict[str, Dialect] = {d.name: d for d in (POSTGRES, SQLITE, CASSANDRA)}


def register_dialect(dialect: Dialect) -> None:
    """Registers (or replaces) the dialect used for `dialect.name`."""
    _DIALECTS[dialect.name.lower()] = dialect


def get_dialect(engine: str) -> Dialect:
    """Returns the dialect registered for an engine name."""
    try:
        return _DIALECTS[engine.lower()]
    except KeyError:
        raise UnsupportedEngineError(engine, "dialect") from None
