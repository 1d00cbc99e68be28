import argparse
import json
import sys
from typing import List, Optional

from config import Arguments, Operation
from logger import Logger
from users_store import (
    UsersStore,
    UsersStoreError,
    FlagMissingError,
    OperationNotAllowedError,
)


def parse_args(argv: Optional[List[str]] = None) -> Arguments:
    # без required=True: отсутствие флага — ошибка perform(), а не argparse
    ap = argparse.ArgumentParser(prog="users-json", allow_abbrev=False)
    ap.add_argument("-fileName", "--fileName", dest="file_name", default="", help="json file name")
    ap.add_argument("-operation", "--operation", dest="operation", default="", help="add, list, findById, remove")
    ap.add_argument("-id", "--id", dest="id", default="", help="id of the user")
    ap.add_argument("-item", "--item", dest="item", default="", help="item to add to the file")
    ns = ap.parse_args(argv)

    return Arguments(
        file_name=ns.file_name,
        operation=ns.operation,
        item=ns.item,
        id=ns.id,
    )


def _add(store: UsersStore, args: Arguments, writer):
    if not args.item:
        raise FlagMissingError("item")
    store.add_item(writer, args.item)


def _list(store: UsersStore, args: Arguments, writer):
    store.list_items(writer)


def _find_by_id(store: UsersStore, args: Arguments, writer):
    if not args.id:
        raise FlagMissingError("id")
    store.find_by_id(writer, args.id)


def _remove(store: UsersStore, args: Arguments, writer):
    if not args.id:
        raise FlagMissingError("id")
    store.remove_by_id(writer, args.id)


HANDLERS = {
    Operation.ADD: _add,
    Operation.LIST: _list,
    Operation.FIND_BY_ID: _find_by_id,
    Operation.REMOVE: _remove,
}


def perform(args: Arguments, writer):
    """
    Выполняет одну операцию над файлом args.file_name, результат пишет в writer.
    Файл создаётся, если его нет; закрывается при любом исходе.
    """
    if not args.file_name:
        raise FlagMissingError("fileName")
    if not args.operation:
        raise FlagMissingError("operation")

    with UsersStore(args.file_name) as store:
        try:
            op = Operation(args.operation)
        except ValueError:
            raise OperationNotAllowedError(args.operation) from None
        Logger.debug(f"Операция {op.value} над {args.file_name}")
        HANDLERS[op](store, args, writer)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        perform(args, sys.stdout)
    except (UsersStoreError, json.JSONDecodeError, OSError) as e:
        Logger.error(e)
        return 1
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
