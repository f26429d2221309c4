from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple, Union
from typing_extensions import TypeAlias, TypeGuard
from .tree import Node

# ---------- Value Model ----------

@dataclass(frozen=True)
class CvNone:
    def __str__(self) -> str:
        return "None"

NONE = CvNone()  # the one none value; CvNone() still compares equal

@dataclass(frozen=True)
class CvString:
    value: str
    def __str__(self) -> str:
        return self.value

@dataclass(frozen=True)
class CvInt:
    value: int  # signed 32-bit
    def __str__(self) -> str:
        return str(self.value)

@dataclass(frozen=True)
class CvFloat:
    value: float  # binary32, stored widened
    def __str__(self) -> str:
        from .utils import format_float
        return format_float(self.value)

@dataclass(frozen=True)
class CvBool:
    value: bool
    def __str__(self) -> str:
        return "true" if self.value else "false"

Hashable: TypeAlias = Union[CvString, CvInt, CvFloat, CvBool]

@dataclass(eq=False)
class CvList:
    items: List['Value']
    def __str__(self) -> str:
        from .utils import render_nested

        if not self.items:
            return "[ ]"
        return "[ " + ", ".join(render_nested(x) for x in self.items) + " ]"

@dataclass(eq=False)
class CvDict:
    entries: Dict[Hashable, 'Value']
    def __str__(self) -> str:
        from .utils import render_nested

        if not self.entries:
            return "{ }"
        pairs = [f"{render_nested(k)}: {render_nested(v)}" for k, v in self.entries.items()]
        return "{ " + ", ".join(pairs) + " }"

@dataclass(frozen=True)
class CvRange:
    start: int
    end: int

    @property
    def step(self) -> int:
        return 1 if self.start <= self.end else -1

    def values(self) -> Iterator[CvInt]:
        """Yield every bound-inclusive integer, stepping toward `end`."""
        step = self.step
        for n in range(self.start, self.end + step, step):
            yield CvInt(n)

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"

@dataclass(eq=False)
class CvFn:
    name: str
    params: List[str]
    body: 'Node'  # never evaluated until invoked
    def __str__(self) -> str:
        return f"{self.name}({', '.join(self.params)}) {{ ... }}"

Value: TypeAlias = Union[CvNone, CvString, CvInt, CvFloat, CvBool, CvList, CvDict, CvRange, CvFn]

_HASHABLE_TYPES: Tuple[type, ...] = (CvString, CvInt, CvFloat, CvBool)

def is_hashable(value: object) -> TypeGuard[Hashable]:
    return isinstance(value, _HASHABLE_TYPES)

# ---------- Exceptions ----------

class CorvidRuntimeError(Exception):
    meta: Optional[object]

    def __init__(self, message: str):
        super().__init__(message)
        self.meta = None

    def __str__(self) -> str:
        msg = super().__str__()

        line = getattr(self.meta, "line", None)
        if line is None:
            return msg

        col = getattr(self.meta, "column", None)
        if col is None:
            return f"{msg} (line {line})"

        return f"{msg} (line {line}, col {col})"

class CorvidNameError(CorvidRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"{name} is not assigned.")
        self.name = name

class CorvidTypeError(CorvidRuntimeError):
    pass

class CorvidArityError(CorvidRuntimeError):
    def __init__(self, name: str, expected: int, received: int):
        super().__init__(f"{name} expects {expected} arguments but received {received}.")
        self.expected = expected
        self.received = received

class CorvidZeroDivisionError(CorvidRuntimeError):
    def __init__(self) -> None:
        super().__init__("Cannot divide by zero.")

class CorvidRecursionError(CorvidRuntimeError):
    def __init__(self) -> None:
        super().__init__("Maximum call depth exceeded.")

class CorvidUnhashableError(CorvidRuntimeError):
    def __init__(self, key: Value):
        super().__init__(f"Dictionary keys must be primitives or String, got {type_name(key)}.")
        self.key = key

class CorvidIndexError(CorvidRuntimeError):
    pass

class CorvidLiteralError(CorvidRuntimeError):
    def __init__(self, kind: str, lexeme: str):
        super().__init__(f"Malformed {kind} literal {lexeme!r}.")
        self.lexeme = lexeme

class CorvidNotCallableError(CorvidTypeError):
    def __init__(self, name: str):
        super().__init__(f"{name} is not a function.")
        self.name = name

class CorvidNotSubscriptableError(CorvidTypeError):
    def __init__(self, target: Value):
        super().__init__(f"Only collections can be subscripted, got {type_name(target)}.")

class CorvidNotIterableError(CorvidTypeError):
    def __init__(self, target: Value):
        super().__init__(
            f"Can only iterate over lists, dictionaries, and integer ranges, got {type_name(target)}."
        )

_TYPE_NAMES: Dict[type, str] = {
    CvNone: "None",
    CvString: "String",
    CvInt: "Int",
    CvFloat: "Float",
    CvBool: "Bool",
    CvList: "List",
    CvDict: "Dict",
    CvRange: "Range",
    CvFn: "Function",
}

def type_name(value: object) -> str:
    return _TYPE_NAMES.get(type(value), type(value).__name__)
