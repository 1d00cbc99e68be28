# users_store.py
import json
import os
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, TextIO

from config import (
    DEFAULT_FILE_MODE,
    FILE_ENCODING,
    MSG_ALREADY_EXISTS,
    MSG_NOT_FOUND,
    MSG_NOT_ALLOWED,
    MSG_FLAG_MISSING,
)
from logger import Logger


class UsersStoreError(Exception):
    pass


class FlagMissingError(UsersStoreError, ValueError):
    def __init__(self, flag: str):
        self.flag = flag
        super().__init__(MSG_FLAG_MISSING.format(flag=flag))


class OperationNotAllowedError(UsersStoreError, ValueError):
    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(MSG_NOT_ALLOWED.format(operation=operation))


class RecordDecodeError(UsersStoreError, ValueError):
    """JSON синтаксически валиден, но не похож на пользователя / массив пользователей."""


@dataclass
class User:
    id: str = ""
    email: str = ""
    age: int = 0

    @classmethod
    def from_dict(cls, raw: Any) -> "User":
        if not isinstance(raw, dict):
            raise RecordDecodeError(f"user must be a JSON object, got {type(raw).__name__}")
        return cls(
            id=_field(raw, "id", str, ""),
            email=_field(raw, "email", str, ""),
            age=_field(raw, "age", int, 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _field(raw: Dict[str, Any], key: str, kind: type, default):
    v = raw.get(key)
    if v is None:
        return default
    # bool — подкласс int, но возраст True нам не нужен
    if isinstance(v, bool) or not isinstance(v, kind):
        raise RecordDecodeError(f"field {key!r} must be {kind.__name__}, got {type(v).__name__}")
    return v


def dumps(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":"))


def decode_users(data: str) -> List[User]:
    parsed = json.loads(data)
    if parsed is None:
        return []
    if not isinstance(parsed, list):
        raise RecordDecodeError(f"users file must hold a JSON array, got {type(parsed).__name__}")
    return [User.from_dict(u) for u in parsed]


def encode_users(users: List[User]) -> str:
    return dumps([u.to_dict() for u in users])


def decode_user(item: str) -> User:
    return User.from_dict(json.loads(item))


class UsersStore:
    """
    Файл с JSON-массивом пользователей.

    Открывается один раз (r+, создаётся при отсутствии) и закрывается в __exit__.
    Каждая операция читает файл целиком, а результат пишет в writer.
    Изменения (add / remove) перезаписывают файл тем же дескриптором.
    """

    def __init__(self, path: str, mode: int = DEFAULT_FILE_MODE):
        self.path = path
        self.mode = mode
        self._file: Optional[TextIO] = None

    def open(self) -> "UsersStore":
        fd = os.open(self.path, os.O_RDWR | os.O_CREAT, self.mode)
        self._file = open(fd, "r+", encoding=FILE_ENCODING)
        Logger.debug(f"Открыт файл {self.path}")
        return self

    def close(self):
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # --- IO ---

    def _read(self) -> str:
        if self._file is None:
            raise UsersStoreError(f"store {self.path} is not open")
        self._file.seek(0)
        try:
            return self._file.read()
        except UnicodeDecodeError as e:
            raise RecordDecodeError(f"users file {self.path} is not valid {FILE_ENCODING}: {e}") from e

    def _load(self) -> Optional[List[User]]:
        # None — файл пустой (0 байт)
        data = self._read()
        if len(data) == 0:
            return None
        users = decode_users(data)
        Logger.debug(f"Прочитано записей: {len(users)}")
        return users

    def _save(self, users: List[User]) -> str:
        text = encode_users(users)
        self._file.seek(0)
        self._file.truncate()
        self._file.write(text)
        self._file.flush()
        return text

    # --- операции ---

    def add_item(self, writer, item: str):
        users = self._load() or []
        user = decode_user(item)

        for u in users:
            if u.id == user.id:
                Logger.info(f"Пользователь {user.id} уже существует")
                writer.write(MSG_ALREADY_EXISTS.format(id=user.id))
                return

        users.append(user)
        writer.write(self._save(users))
        Logger.info(f"Добавлен пользователь {user.id}")

    def list_items(self, writer):
        users = self._load()
        if users is None:
            writer.write("")
            return
        writer.write(encode_users(users))

    def find_by_id(self, writer, user_id: str):
        users = self._load()
        if users is None:
            writer.write("")
            return
        for u in users:
            if u.id == user_id:
                writer.write(dumps(u.to_dict()))
                return
        writer.write("")

    def remove_by_id(self, writer, user_id: str):
        users = self._load()
        if users is None:
            writer.write(MSG_NOT_FOUND.format(id=user_id))
            return

        idx = next((i for i, u in enumerate(users) if u.id == user_id), None)
        if idx is None:
            Logger.info(f"Пользователь {user_id} не найден")
            writer.write(MSG_NOT_FOUND.format(id=user_id))
            return

        remaining = users[:idx] + users[idx + 1:]
        writer.write(self._save(remaining))
        Logger.info(f"Удалён пользователь {user_id}")
