import gzip
from typing import Callable, Dict, Iterable, List, Optional

from csv_compiler.config import ENCODINGS
from csv_compiler.services.errors import SourceReadError


class Source:
    """
    One input CSV:
      - name: shown in error messages
      - loader: returns the full bytes (or text) of the file
    """
    def __init__(self, name: str, loader: Callable[[], object]):
        self.name = name
        self._loader = loader

    @classmethod
    def from_path(cls, path: str, name: Optional[str] = None) -> "Source":
        def load():
            opener = gzip.open if str(path).lower().endswith(".gz") else open
            with opener(path, "rb") as f:
                return f.read()
        return cls(name or str(path), load)

    @classmethod
    def from_bytes(cls, name: str, data: bytes) -> "Source":
        return cls(name, lambda: data)

    @classmethod
    def from_text(cls, name: str, text: str) -> "Source":
        return cls(name, lambda: text)

    def read_text(self) -> str:
        try:
            raw = self._loader()
        except (OSError, EOFError) as e:
            raise SourceReadError(self.name, str(e)) from e

        if isinstance(raw, str):
            return raw[1:] if raw.startswith('\ufeff') else raw

        # Try each encoding in turn; latin-1 never fails so it goes last
        for enc in ENCODINGS:
            try:
                return raw.decode(enc)
            except UnicodeDecodeError:
                continue
        raise SourceReadError(self.name, "could not decode file")

    def __repr__(self):
        return f"Source({self.name!r})"


class HeaderSet:
    """Column names in first-seen order; adding a known name does nothing."""
    def __init__(self, names: Iterable[str] = ()):
        self._names: Dict[str, None] = {}
        self.update(names)

    def add(self, name: str):
        if name not in self._names:
            self._names[name] = None

    def update(self, names: Iterable[str]):
        for name in names:
            self.add(name)

    def __contains__(self, name):
        return name in self._names

    def __iter__(self):
        return iter(self._names)

    def __len__(self):
        return len(self._names)

    def __eq__(self, other):
        if isinstance(other, HeaderSet):
            return list(self) == list(other)
        if isinstance(other, (list, tuple)):
            return list(self) == list(other)
        return NotImplemented

    def __repr__(self):
        return f"HeaderSet({list(self)!r})"


class CompiledResult:
    """
    Output of one compilation:
      - headers: final HeaderSet
      - records: list of dicts, each keyed by exactly the headers
      - source_count: number of sources consumed
    """
    def __init__(self, headers: HeaderSet, records: Optional[List[Dict[str, str]]] = None, source_count: int = 0):
        self.headers = headers
        self.records = records or []
        self.source_count = source_count

    @property
    def total_rows(self) -> int:
        return len(self.records)

    @property
    def total_columns(self) -> int:
        return len(self.headers)

    def summary(self) -> Dict[str, object]:
        return {
            'message': f"Successfully compiled {self.source_count} files",
            'source_count': self.source_count,
            'total_rows': self.total_rows,
            'total_columns': self.total_columns,
            'headers': list(self.headers),
        }

    def to_dataframe(self):
        import pandas as pd
        columns = list(self.headers)
        rows = [[rec[c] for c in columns] for rec in self.records]
        return pd.DataFrame(rows, columns=columns, dtype=str)
