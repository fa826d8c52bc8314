from typing import Dict, Iterable, List, Sequence

from csv_compiler.services.csv_service import DELIMITER, QUOTE

LINE_TERMINATOR = '\n'
_SPECIALS = (DELIMITER, QUOTE, '\n', '\r')


class CSVWriter:
    """
    Inverse of CSVService: whatever it writes reads back field for field.
    Plain values stay bare; quoting only when a value needs it.
    """

    @staticmethod
    def needs_quotes(value: str) -> bool:
        if any(c in value for c in _SPECIALS):
            return True
        # The reader trims unquoted whitespace
        return value != value.strip()

    @staticmethod
    def escape_field(value: str) -> str:
        if CSVWriter.needs_quotes(value):
            return QUOTE + value.replace(QUOTE, QUOTE * 2) + QUOTE
        return value

    @staticmethod
    def format_row(values: Sequence[str]) -> str:
        line = DELIMITER.join(CSVWriter.escape_field(v) for v in values)
        if not line and values:
            # A lone empty field would read back as a blank line
            line = QUOTE * 2
        return line

    @staticmethod
    def iter_lines(headers: Iterable[str], records: Iterable[Dict[str, str]]) -> Iterable[str]:
        columns: List[str] = list(headers)
        if not columns:
            return
        yield CSVWriter.format_row(columns)
        for rec in records:
            yield CSVWriter.format_row([rec.get(c, "") for c in columns])

    @staticmethod
    def to_csv_text(headers: Iterable[str], records: Iterable[Dict[str, str]]) -> str:
        return ''.join(line + LINE_TERMINATOR for line in CSVWriter.iter_lines(headers, records))
