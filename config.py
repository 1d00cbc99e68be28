# config.py
import os
from dataclasses import dataclass
from enum import Enum

# --- Файл ---
DEFAULT_FILE_MODE = 0o644
FILE_ENCODING = "utf-8"

# --- Сообщения ---
MSG_ALREADY_EXISTS = "Item with id {id} already exists"
MSG_NOT_FOUND = "Item with id {id} not found"
MSG_NOT_ALLOWED = "Operation {operation} not allowed!"
MSG_FLAG_MISSING = "-{flag} flag has to be specified"

# --- Логи ---
# debug / info / warn / error
LOG_LEVEL = os.getenv("USERS_LOG_LEVEL", "warn").strip().lower()


class Operation(str, Enum):
    ADD = "add"
    LIST = "list"
    FIND_BY_ID = "findById"
    REMOVE = "remove"


@dataclass
class Arguments:
    file_name: str = ""
    operation: str = ""
    item: str = ""
    id: str = ""
