from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple, Union
from typing_extensions import TypeAlias, TypeGuard

from .tree import BlockStatement, Identifier

# ---------- Object type tags ----------

INTEGER_OBJ = "INTEGER"
BOOLEAN_OBJ = "BOOLEAN"
NULL_OBJ = "NULL"
STRING_OBJ = "STRING"
ARRAY_OBJ = "ARRAY"
HASH_OBJ = "HASH"
FUNCTION_OBJ = "FUNCTION"
BUILTIN_OBJ = "BUILTIN"
RETURN_VALUE_OBJ = "RETURN_VALUE"
ERROR_OBJ = "ERROR"

# ---------- Hash keys ----------

@dataclass(frozen=True)
class HashKey:
    """Value-equal key: equal payloads of the same type hash identically."""
    type: str
    value: Union[int, str]

# ---------- Value Model ----------

@dataclass
class MkInteger:
    value: int

    def type(self) -> str:
        return INTEGER_OBJ

    def inspect(self) -> str:
        return str(self.value)

    def hash_key(self) -> HashKey:
        return HashKey(INTEGER_OBJ, self.value)

@dataclass(frozen=True)
class MkBoolean:
    value: bool

    def type(self) -> str:
        return BOOLEAN_OBJ

    def inspect(self) -> str:
        return "true" if self.value else "false"

    def hash_key(self) -> HashKey:
        return HashKey(BOOLEAN_OBJ, 1 if self.value else 0)

@dataclass(frozen=True)
class MkNull:
    def type(self) -> str:
        return NULL_OBJ

    def inspect(self) -> str:
        return "null"

@dataclass
class MkString:
    value: str

    def type(self) -> str:
        return STRING_OBJ

    def inspect(self) -> str:
        return self.value

    def hash_key(self) -> HashKey:
        return HashKey(STRING_OBJ, self.value)

@dataclass
class MkArray:
    elements: List['MkValue']

    def type(self) -> str:
        return ARRAY_OBJ

    def inspect(self) -> str:
        return "[" + ", ".join(e.inspect() for e in self.elements) + "]"

@dataclass
class HashPair:
    key: 'MkValue'
    value: 'MkValue'

@dataclass
class MkHash:
    pairs: Dict[HashKey, HashPair] = field(default_factory=dict)

    def type(self) -> str:
        return HASH_OBJ

    def inspect(self) -> str:
        items = [f"{p.key.inspect()}: {p.value.inspect()}" for p in self.pairs.values()]
        return "{" + ", ".join(items) + "}"

@dataclass
class MkFunction:
    parameters: List[Identifier]
    body: BlockStatement
    env: 'Environment'  # closure scope, shared by reference

    def type(self) -> str:
        return FUNCTION_OBJ

    def inspect(self) -> str:
        params = ", ".join(p.string() for p in self.parameters)
        return f"fn({params}) {{\n{self.body.string()}\n}}"

    def __repr__(self) -> str:
        params = ", ".join(p.value for p in self.parameters) or "nullary"
        return f"<fn params={params}>"

BuiltinFn = Callable[..., 'MkValue']

@dataclass
class MkBuiltin:
    fn: BuiltinFn
    name: str = "builtin"

    def type(self) -> str:
        return BUILTIN_OBJ

    def inspect(self) -> str:
        return "builtin function"

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"

@dataclass
class MkReturnValue:
    """Control signal wrapping the operand of `return`; never user-visible."""
    value: 'MkValue'

    def type(self) -> str:
        return RETURN_VALUE_OBJ

    def inspect(self) -> str:
        return self.value.inspect()

@dataclass
class MkError:
    """Evaluation error carried as a value up to the nearest consumer."""
    message: str

    def type(self) -> str:
        return ERROR_OBJ

    def inspect(self) -> str:
        return f"Error: {self.message}"

MkValue: TypeAlias = (
    MkInteger
    | MkBoolean
    | MkNull
    | MkString
    | MkArray
    | MkHash
    | MkFunction
    | MkBuiltin
    | MkReturnValue
    | MkError
)

# Process-wide singletons
TRUE = MkBoolean(True)
FALSE = MkBoolean(False)
NULL = MkNull()

def hash_key_of(value: MkValue) -> Optional[HashKey]:
    """Return the value's hash key, or None for kinds that cannot key a hash."""
    match value:
        case MkInteger() | MkBoolean() | MkString():
            return value.hash_key()
        case _:
            return None

_MK_VALUE_TYPES: Tuple[type, ...] = (
    MkInteger,
    MkBoolean,
    MkNull,
    MkString,
    MkArray,
    MkHash,
    MkFunction,
    MkBuiltin,
    MkReturnValue,
    MkError,
)

def is_mk_value(value: object) -> TypeGuard[MkValue]:
    return isinstance(value, _MK_VALUE_TYPES)

def _ensure_mk_value(value: Optional[MkValue]) -> MkValue:
    if value is None:
        return NULL
    if is_mk_value(value):
        return value
    raise TypeError(f"Unexpected value type {type(value).__name__}")

# ---------- Scopes ----------

class Environment:
    """Name -> value scope with an optional (non-owning) outer scope."""

    def __init__(self, outer: Optional['Environment'] = None):
        self.store: Dict[str, MkValue] = {}
        self.outer = outer

    def get(self, name: str) -> Optional[MkValue]:
        if name in self.store:
            return self.store[name]

        if self.outer is not None:
            return self.outer.get(name)

        return None

    def set(self, name: str, val: MkValue) -> MkValue:
        self.store[name] = val
        return val

def new_environment() -> Environment:
    return Environment()

def new_enclosed_environment(outer: Environment) -> Environment:
    return Environment(outer=outer)
