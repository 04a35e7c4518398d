"""Result of an idempotent version delete."""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

RecordT = TypeVar("RecordT")


@dataclass(frozen=True)
class Deleted(Generic[RecordT]):
    """The version existed when we looked; ``record`` is its last known state."""

    record: RecordT


@dataclass(frozen=True)
class AlreadyAbsent:
    """Nothing to delete. Still a success for the caller."""

    version_tag: str
    parent: str


DeleteResult = Union[Deleted, AlreadyAbsent]
