import pytest

from csv_compiler.models.csv_model import Source


@pytest.fixture
def write_csv(tmp_path):
    def _write(name, text, encoding="utf-8"):
        path = tmp_path / name
        path.write_bytes(text.encode(encoding))
        return str(path)
    return _write


@pytest.fixture
def source():
    def _source(name, text):
        return Source.from_text(name, text)
    return _source
