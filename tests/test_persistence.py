"""FilePathValueResolver and FileValuePstParamMapper."""

from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import types as sqltypes

from datagear.persistence.exceptions import PstParamMapperException
from datagear.persistence.file_path import FilePathValueResolver
from datagear.persistence.param_mapper import FileValuePstParamMapper


def test_file_path_value_detection() -> None:
    """Only strings starting with file: are file path values."""

    resolver = FilePathValueResolver()

    assert not resolver.has_file_value_charset()
    assert resolver.is_file_path_value("file:/tmp/a.csv")
    assert resolver.get_file_path_content("file:/tmp/a.csv") == "/tmp/a.csv"
    assert not resolver.is_file_path_value("plain")
    assert not resolver.is_file_path_value("FILE:/tmp/a.csv")
    assert not resolver.is_file_path_value(None)
    assert not resolver.is_file_path_value(42)


def test_get_file_value(tmp_path: Path) -> None:
    """Existing files resolve to a path; everything else to None."""

    target = tmp_path / "a.txt"
    target.write_text("x", encoding="utf-8")
    resolver = FilePathValueResolver()

    assert resolver.get_file_value(f"file:{target}") == target
    assert resolver.get_file_value(f"file:{tmp_path / 'missing.txt'}") is None
    assert resolver.get_file_value(str(target)) is None


def test_streams(tmp_path: Path) -> None:
    """Binary and text streams honour the configured charset."""

    target = tmp_path / "latin.txt"
    target.write_bytes("café".encode("latin-1"))
    resolver = FilePathValueResolver("latin-1")

    assert resolver.has_file_value_charset()
    with resolver.get_input_stream(target) as stream:
        assert stream.read() == b"caf\xe9"
    with resolver.get_reader(target) as reader:
        assert reader.read() == "café"


def test_stream_failures_are_wrapped(tmp_path: Path) -> None:
    """Missing files and unknown charsets raise PstParamMapperException."""

    target = tmp_path / "a.txt"
    target.write_text("x", encoding="utf-8")

    with pytest.raises(PstParamMapperException) as info:
        FilePathValueResolver().get_input_stream(tmp_path / "missing.bin")
    assert isinstance(info.value.__cause__, FileNotFoundError)

    with pytest.raises(PstParamMapperException):
        FilePathValueResolver().get_reader(tmp_path / "missing.txt")

    with pytest.raises(PstParamMapperException):
        FilePathValueResolver("no-such-charset").get_reader(target)


def test_param_mapper(tmp_path: Path) -> None:
    """File values become bytes for binary columns and text otherwise."""

    target = tmp_path / "data.txt"
    target.write_text("hello", encoding="utf-8")
    mapper = FileValuePstParamMapper(FilePathValueResolver("utf-8"))
    value = f"file:{target}"

    assert mapper.map(sqltypes.LargeBinary(), value) == b"hello"
    assert mapper.map(sqltypes.BLOB(), value) == b"hello"
    assert mapper.map(sqltypes.Text(), value) == "hello"
    assert mapper.map(None, value) == "hello"

    assert mapper.map(sqltypes.Text(), "plain") == "plain"
    assert mapper.map(sqltypes.Integer(), 3) == 3
    missing = f"file:{tmp_path / 'missing'}"
    assert mapper.map(sqltypes.Text(), missing) == missing
