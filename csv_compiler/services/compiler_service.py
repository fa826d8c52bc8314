import logging
from typing import Dict, List, Sequence

from csv_compiler.models.csv_model import CompiledResult, HeaderSet, Source
from csv_compiler.services.csv_service import CSVService
from csv_compiler.services.errors import EmptyInputError

LOGGER = logging.getLogger(__name__)


class HeaderCollector:

    @staticmethod
    def collect(sources: Sequence[Source]) -> HeaderSet:
        headers = HeaderSet()
        for source in sources:
            names = CSVService.read_header(source.read_text(), source.name)
            LOGGER.debug("%s: %d header(s)", source.name, len(names))
            headers.update(names)
        return headers


class RowNormalizer:

    @staticmethod
    def normalize(source: Source, headers: HeaderSet) -> List[Dict[str, str]]:
        own_header, rows = CSVService.read_table(source.read_text(), source.name)
        columns = list(headers)
        normalized = []
        for _, values in rows:
            # Positional match; a repeated header name keeps its last value
            record = dict(zip(own_header, values))
            normalized.append({col: record.get(col, "") for col in columns})
        LOGGER.debug("%s: %d row(s)", source.name, len(normalized))
        return normalized


class CompilationRun:
    """
    One compilation over a fixed, ordered list of sources.

    The header pass runs over every source before any row is normalized,
    because a column first seen in a later file still widens the rows of the
    earlier ones. A run owns its HeaderSet and record list; build a new run
    for every compilation.
    """

    def __init__(self, sources: Sequence[Source]):
        self.sources = list(sources)
        self.headers = HeaderSet()
        self.records: List[Dict[str, str]] = []

    def run(self) -> CompiledResult:
        if not self.sources:
            raise EmptyInputError()

        # 1. Header union, first-seen order
        self.headers = HeaderCollector.collect(self.sources)

        # 2. Rows, in source order then row order
        records = []
        for source in self.sources:
            records.extend(RowNormalizer.normalize(source, self.headers))
        self.records = records

        result = CompiledResult(self.headers, self.records, source_count=len(self.sources))
        LOGGER.info(
            "Compiled %d source(s): %d row(s), %d column(s)",
            result.source_count, result.total_rows, result.total_columns,
        )
        return result


def compile_sources(sources: Sequence[Source]) -> CompiledResult:
    return CompilationRun(sources).run()
