import gzip
import logging
import os
from datetime import datetime
from typing import Iterable, List, Optional

from csv_compiler.config import ALLOWED_EXTENSIONS, EXCEL_SHEET, OUTPUT_NAME
from csv_compiler.models.csv_model import CompiledResult, Source
from csv_compiler.services.compiler_service import CompilationRun
from csv_compiler.services.csv_writer import CSVWriter
from csv_compiler.services.errors import CompilationError, EmptyInputError, SourceReadError

LOGGER = logging.getLogger(__name__)


class CompilerController:
    def __init__(self):
        self.sources: List[Source] = []
        self.result: Optional[CompiledResult] = None

    # =========================================================================
    #  LOADING
    # =========================================================================
    @staticmethod
    def is_csv_name(name: str) -> bool:
        return name.lower().endswith(ALLOWED_EXTENSIONS)

    def load_paths(self, paths: Iterable[str], sort: bool = False) -> List[Source]:
        paths = list(paths)
        if sort:
            paths = sorted(paths, key=lambda p: os.path.basename(p))
        sources = []
        for path in paths:
            if not self.is_csv_name(path):
                raise SourceReadError(path, "Only CSV files are allowed")
            if not os.path.isfile(path):
                raise SourceReadError(path, "file not found")
            sources.append(Source.from_path(path))
        self.sources = sources
        return sources

    def load_uploads(self, uploads: Iterable[tuple]) -> List[Source]:
        """uploads: (filename, bytes) pairs, in upload order."""
        sources = []
        for name, data in uploads:
            if not self.is_csv_name(name):
                raise SourceReadError(name, "Only CSV files are allowed")
            sources.append(Source.from_bytes(name, data))
        self.sources = sources
        return sources

    # =========================================================================
    #  COMPILING
    # =========================================================================
    def compile(self, sources: Optional[List[Source]] = None) -> CompiledResult:
        if sources is not None:
            self.sources = list(sources)
        self.result = None
        try:
            self.result = CompilationRun(self.sources).run()
        except CompilationError:
            raise
        except Exception as e:
            names = ", ".join(s.name for s in self.sources)
            raise SourceReadError(names, f"unexpected error: {e}") from e
        return self.result

    def _require_result(self) -> CompiledResult:
        if self.result is None:
            raise EmptyInputError("Nothing compiled yet")
        return self.result

    def summary(self) -> dict:
        return self._require_result().summary()

    # =========================================================================
    #  EXPORT
    # =========================================================================
    @staticmethod
    def default_output_name(now: Optional[datetime] = None) -> str:
        now = now or datetime.now()
        return OUTPUT_NAME.format(timestamp=now.strftime("%Y%m%d-%H%M%S"))

    def to_csv_text(self) -> str:
        result = self._require_result()
        return CSVWriter.to_csv_text(result.headers, result.records)

    def export_csv(self, filename: str) -> str:
        text = self.to_csv_text()
        if filename.lower().endswith(".gz"):
            with gzip.open(filename, "wt", encoding="utf-8", newline="") as f:
                f.write(text)
        else:
            with open(filename, "w", encoding="utf-8", newline="") as f:
                f.write(text)
        LOGGER.info("Wrote %d row(s) to %s", self.result.total_rows, filename)
        return filename

    def export_excel(self, filename: str) -> str:
        import pandas as pd
        from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

        df = self._require_result().to_dataframe()
        # Control characters are valid CSV content but cannot be stored in xlsx
        cleaned = df.replace(ILLEGAL_CHARACTERS_RE, "", regex=True)
        if not cleaned.equals(df):
            LOGGER.warning("Removed control characters not allowed in %s", filename)
        df = cleaned

        with pd.ExcelWriter(filename, engine='openpyxl') as writer:
            df.to_excel(writer, sheet_name=EXCEL_SHEET, index=False)

            sheet = writer.sheets[EXCEL_SHEET]
            # Values are text, never formulas
            for row in sheet.iter_rows():
                for cell in row:
                    if isinstance(cell.value, str) and cell.value.startswith("="):
                        cell.data_type = "s"

            for column in sheet.columns:
                column = [cell for cell in column]
                max_length = max(len(str(cell.value or "")) for cell in column)
                sheet.column_dimensions[column[0].column_letter].width = max_length + 2

        LOGGER.info("Wrote %d row(s) to %s", self.result.total_rows, filename)
        return filename
