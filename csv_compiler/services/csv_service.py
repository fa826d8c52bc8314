from typing import Iterator, List, Tuple

from csv_compiler.services.errors import MalformedRowError

OUTSIDE_QUOTES = 0
INSIDE_QUOTES = 1

DELIMITER = ','
QUOTE = '"'


class _FieldBuffer:
    """Characters of the field being read, plus where its quoted span sits."""
    def __init__(self):
        self.chars: List[str] = []
        self.quote_start = None
        self.quote_end = None

    def open_quote(self):
        if self.quote_start is None:
            self.quote_start = len(self.chars)

    def close_quote(self):
        self.quote_end = len(self.chars)

    def take(self) -> str:
        value = ''.join(self.chars)
        if self.quote_start is None:
            value = value.strip()
        else:
            # Only whitespace outside the quoted span is trimmed
            head = value[:self.quote_start].lstrip()
            tail = value[self.quote_end:].rstrip()
            value = head + value[self.quote_start:self.quote_end] + tail
        self.chars = []
        self.quote_start = None
        self.quote_end = None
        return value

    def is_empty(self) -> bool:
        return not self.chars and self.quote_start is None


class CSVService:
    """
    Comma separated parser with RFC4180 style quoting.
    - Quoted fields may hold commas, doubled quotes and newlines.
    - Unquoted content is trimmed, quoted content is kept as is.
    - Blank records (nothing but whitespace) are skipped.
    """

    @staticmethod
    def parse_records(text: str, source_name: str = "<text>") -> Iterator[Tuple[int, List[str]]]:
        """
        Yield (row_number, fields) for every non-blank record of text.
        row_number is the 1-based line the record starts on.
        """
        state = OUTSIDE_QUOTES
        fields: List[str] = []
        field = _FieldBuffer()
        blank = True
        line = 1
        row_start = 1
        i = 0
        n = len(text)

        while i < n:
            ch = text[i]

            if state == INSIDE_QUOTES:
                if ch == QUOTE:
                    if i + 1 < n and text[i + 1] == QUOTE:
                        field.chars.append(QUOTE)
                        i += 2
                        continue
                    state = OUTSIDE_QUOTES
                    field.close_quote()
                else:
                    if ch == '\n' or (ch == '\r' and text[i + 1:i + 2] != '\n'):
                        line += 1
                    field.chars.append(ch)
                i += 1
                continue

            if ch == QUOTE:
                state = INSIDE_QUOTES
                field.open_quote()
                blank = False
            elif ch == DELIMITER:
                fields.append(field.take())
                blank = False
            elif ch == '\n' or ch == '\r':
                if ch == '\r' and text[i + 1:i + 2] == '\n':
                    i += 1
                fields.append(field.take())
                if not blank:
                    yield row_start, fields
                fields = []
                blank = True
                line += 1
                row_start = line
            else:
                field.chars.append(ch)
                if not ch.isspace():
                    blank = False
            i += 1

        if state == INSIDE_QUOTES:
            raise MalformedRowError(source_name, row_start)

        if fields or not field.is_empty():
            fields.append(field.take())
            if not blank:
                yield row_start, fields

    @staticmethod
    def parse_line(line: str, source_name: str = "<text>") -> List[str]:
        """Fields of the first record; an empty or blank text gives []."""
        for _, fields in CSVService.parse_records(line, source_name):
            return fields
        return []

    @staticmethod
    def read_header(text: str, source_name: str = "<text>") -> List[str]:
        # Only the first record matters; the rest of the text is not parsed
        return CSVService.parse_line(text, source_name)

    @staticmethod
    def read_table(text: str, source_name: str = "<text>") -> Tuple[List[str], List[Tuple[int, List[str]]]]:
        """
        Header plus every data record, each padded or cut to the header length.
        A source without a header gives ([], []).
        """
        records = CSVService.parse_records(text, source_name)
        header: List[str] = []
        for _, fields in records:
            header = fields
            break
        if not header:
            return [], []

        expected_cols = len(header)
        rows = []
        for row_number, row in records:
            current_cols = len(row)
            if current_cols < expected_cols:
                row = row + [""] * (expected_cols - current_cols)
            elif current_cols > expected_cols:
                row = row[:expected_cols]
            rows.append((row_number, row))
        return header, rows
