"""Change descriptions: proposed field changes checked before a write.

A `Change` pairs a record with the subset of incoming attributes that
its schema accepts, the validated values that differ from the record,
and any field-level errors. Repositories only write valid changes;
invalid ones are handed back to the caller inside an `Err`.
"""

from typing import Any, Dict, List, Mapping, Optional, Type

from pydantic import BaseModel, ValidationError


class Change:
    """A validated (or invalid) set of changes against `data`."""

    def __init__(self, data, params: Optional[Dict[str, Any]] = None,
                 changes: Optional[Dict[str, Any]] = None, errors: Optional[Dict[str, List[str]]] = None):
        self.data = data
        self.params = params or {}
        self.changes = changes or {}
        self.errors = errors or {}
        self.action: Optional[str] = None

    @classmethod
    def cast(cls, record, attrs: Optional[Mapping[str, Any]], schema: Type[BaseModel]) -> "Change":
        """Build a change for `record` from `attrs` using `schema`'s rules.

        Only keys that name a schema field are considered; anything else
        is ignored. The accepted attributes are merged over the record's
        current values and the merged mapping is validated as a whole,
        so required fields already present on the record need not be
        repeated. A `None` value counts as missing: it clears optional
        fields and fails required ones.
        """
        fields = schema.model_fields
        params = {k: v for k, v in dict(attrs or {}).items() if isinstance(k, str) and k in fields}
        current = {name: getattr(record, name, None) for name in fields}
        merged = {k: v for k, v in {**current, **params}.items() if v is not None}

        try:
            validated = schema.model_validate(merged).model_dump()
        except ValidationError as exc:
            errors: Dict[str, List[str]] = {}
            for err in exc.errors():
                field = str(err["loc"][0]) if err.get("loc") else "__all__"
                errors.setdefault(field, []).append(err["msg"])
            changes = {k: v for k, v in params.items() if v != current.get(k)}
            return cls(record, params=params, changes=changes, errors=errors)

        changes = {k: v for k, v in validated.items() if v != current.get(k)}
        return cls(record, params=params, changes=changes)

    @property
    def valid(self) -> bool:
        return not self.errors

    def add_error(self, field: str, message: str) -> "Change":
        """Record an error found outside the schema (e.g. by the database)."""
        self.errors.setdefault(field, []).append(message)
        return self

    def apply(self):
        """Copy the pending changes onto the record and return it."""
        for name, value in self.changes.items():
            setattr(self.data, name, value)
        return self.data

    def __repr__(self):
        return (
            f"<Change {type(self.data).__name__} action={self.action!r} valid={self.valid} "
            f"changes={self.changes!r} errors={self.errors!r}>"
        )
