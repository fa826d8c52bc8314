import gzip

import pytest

from csv_compiler.models.csv_model import CompiledResult, HeaderSet, Source
from csv_compiler.services.csv_service import CSVService
from csv_compiler.services.errors import SourceReadError


def test_header_set_ignores_duplicates():
    headers = HeaderSet(["b", "a"])
    headers.add("b")
    headers.update(["c", "a"])
    assert list(headers) == ["b", "a", "c"]
    assert len(headers) == 3
    assert "c" in headers


def test_bom_is_not_part_of_first_header():
    src = Source.from_bytes("bom.csv", "\ufeffid,name\n".encode("utf-8"))
    assert src.read_text() == "id,name\n"


def test_bom_stripped_from_text_source():
    src = Source.from_text("t.csv", "\ufeffid\n1\n")
    assert CSVService.read_header(src.read_text(), src.name) == ["id"]


def test_cp1252_fallback():
    src = Source.from_bytes("win.csv", "name\ncafé €\n".encode("cp1252"))
    assert src.read_text() == "name\ncafé €\n"


def test_gzip_path(tmp_path):
    path = tmp_path / "data.csv.gz"
    with gzip.open(path, "wt", encoding="utf-8") as f:
        f.write("a,b\n1,2\n")
    assert Source.from_path(str(path)).read_text() == "a,b\n1,2\n"


def test_missing_file_raises_source_read_error(tmp_path):
    src = Source.from_path(str(tmp_path / "nope.csv"))
    with pytest.raises(SourceReadError) as exc:
        src.read_text()
    assert "nope.csv" in str(exc.value)


def test_to_dataframe_keeps_strings_and_order():
    result = CompiledResult(
        HeaderSet(["n", "x"]),
        [{"n": "007", "x": ""}, {"n": "1", "x": "2"}],
        source_count=1,
    )
    df = result.to_dataframe()
    assert list(df.columns) == ["n", "x"]
    assert df.iloc[0]["n"] == "007"
    assert df.iloc[0]["x"] == ""
    assert len(df) == 2
