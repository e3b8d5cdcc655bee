"""Tagged results returned by the course context.

Every context operation returns either `Ok(value)` or `Err(reason)`
instead of raising, so callers branch on `result.ok` and read
`value`/`reason`. `reason` is one of:

- a not-found code such as ``"program_does_not_exist"``;
- an invalid `Change` carrying field errors;
- a list of human-readable messages (storage and propagated failures).
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    ok = True


@dataclass(frozen=True)
class Err(Generic[E]):
    reason: E
    ok = False


Result = Union[Ok[T], Err[E]]
