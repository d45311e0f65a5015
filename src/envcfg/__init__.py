"""
envcfg: bind environment variables to dataclass records.

Declare a dataclass, set some variables, bind:

    @dataclass
    class Cfg:
        DEBUG: bool = False
        DB_PORT: int = 0
        DB_HOST: str = ""

    config = envcfg.bind(Cfg)
    envcfg.clear(config)    # optional: blank the variables afterwards

ARCHITECTURAL GUARANTEE:
------------------------
The binder core never touches os.environ directly:
    - bind() reads an explicit snapshot (envcfg.environ.snapshot())
    - clear() writes an explicit mutable mapping (os.environ by default)

Field types are validated before anything is read or written.
"""

from envcfg.binder import Binder, bind, clear
from envcfg.environ import snapshot
from envcfg.errors import (
    CustomParseError,
    EnvcfgError,
    EnvironFormatError,
    InvalidBooleanError,
    InvalidIntegerError,
    InvalidTargetError,
    InvalidValueError,
    UndefinedVariableError,
    UnsupportedFieldError,
)
from envcfg.kinds import FieldKind
from envcfg.model import FieldDescriptor, RecordSchema
from envcfg.schema import env_field, resolve

__version__ = "0.1.0"

__all__ = [
    "Binder",
    "bind",
    "clear",
    "snapshot",
    "env_field",
    "resolve",
    "FieldKind",
    "FieldDescriptor",
    "RecordSchema",
    "EnvcfgError",
    "InvalidTargetError",
    "UnsupportedFieldError",
    "UndefinedVariableError",
    "InvalidValueError",
    "InvalidBooleanError",
    "InvalidIntegerError",
    "CustomParseError",
    "EnvironFormatError",
]
