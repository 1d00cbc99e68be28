from __future__ import annotations

import io
from pathlib import Path

import pytest

from config import Arguments
from logger import Logger
from main import main, parse_args, perform
from users_store import FlagMissingError, OperationNotAllowedError


def test_parse_args_single_dash_flags():
    args = parse_args([
        "-fileName", "users.json",
        "-operation=add",
        "-item", '{"id":"1","email":"a@b.com","age":34}',
    ])

    assert args == Arguments(
        file_name="users.json",
        operation="add",
        item='{"id":"1","email":"a@b.com","age":34}',
        id="",
    )


def test_parse_args_double_dash_and_defaults():
    args = parse_args(["--operation", "findById", "--id", "7"])

    assert args.file_name == ""
    assert args.operation == "findById"
    assert args.id == "7"
    assert args.item == ""


@pytest.mark.parametrize(
    "args, flag",
    [
        (Arguments(operation="list"), "fileName"),
        (Arguments(file_name="{path}"), "operation"),
        (Arguments(file_name="{path}", operation="add"), "item"),
        (Arguments(file_name="{path}", operation="findById"), "id"),
        (Arguments(file_name="{path}", operation="remove"), "id"),
    ],
)
def test_perform_missing_flags(tmp_path: Path, args: Arguments, flag: str):
    args.file_name = args.file_name.format(path=tmp_path / "users.json")

    with pytest.raises(FlagMissingError) as exc:
        perform(args, io.StringIO())

    assert exc.value.flag == flag
    assert str(exc.value) == f"-{flag} flag has to be specified"


def test_perform_unknown_operation(tmp_path: Path):
    path = tmp_path / "users.json"

    with pytest.raises(OperationNotAllowedError, match="Operation abcd not allowed!"):
        perform(Arguments(file_name=str(path), operation="abcd"), io.StringIO())

    # файл всё равно создаётся до проверки операции
    assert path.exists()


def test_perform_dispatches_each_operation(tmp_path: Path):
    path = str(tmp_path / "users.json")

    out = io.StringIO()
    perform(Arguments(file_name=path, operation="add", item='{"id":"1","email":"a@b.com","age":34}'), out)
    assert out.getvalue() == '[{"id":"1","email":"a@b.com","age":34}]'

    out = io.StringIO()
    perform(Arguments(file_name=path, operation="list"), out)
    assert out.getvalue() == '[{"id":"1","email":"a@b.com","age":34}]'

    out = io.StringIO()
    perform(Arguments(file_name=path, operation="findById", id="1"), out)
    assert out.getvalue() == '{"id":"1","email":"a@b.com","age":34}'

    out = io.StringIO()
    perform(Arguments(file_name=path, operation="remove", id="1"), out)
    assert out.getvalue() == "[]"


def test_main_success_writes_stdout(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    path = tmp_path / "users.json"

    code = main(["-operation", "add", "-item", '{"id":"1","email":"a@b.com","age":34}', "-fileName", str(path)])

    captured = capsys.readouterr()
    assert code == 0
    assert captured.out == '[{"id":"1","email":"a@b.com","age":34}]'
    assert captured.err == ""


def test_main_error_exits_nonzero(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    code = main(["-fileName", str(tmp_path / "users.json"), "-operation", "drop"])

    captured = capsys.readouterr()
    assert code == 1
    assert captured.out == ""
    assert "Operation drop not allowed!" in captured.err


def test_main_bad_file_content(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    path = tmp_path / "users.json"
    path.write_text("{broken", encoding="utf-8")

    code = main(["-fileName", str(path), "-operation", "list"])

    assert code == 1
    assert capsys.readouterr().out == ""


def test_debug_logs_go_to_stderr(tmp_path: Path, capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(Logger, "level", "debug")

    code = main(["-fileName", str(tmp_path / "users.json"), "-operation", "list"])

    captured = capsys.readouterr()
    assert code == 0
    assert captured.out == ""
    assert "Операция list" in captured.err


def test_main_non_utf8_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    path = tmp_path / "users.json"
    path.write_bytes(b'[{"id":"\xff","email":"a@b.com","age":34}]')

    code = main(["-fileName", str(path), "-operation", "list"])

    captured = capsys.readouterr()
    assert code == 1
    assert captured.out == ""
    assert "not valid utf-8" in captured.err
