"""Record shape descriptors and the registry that holds them.

A record shape is the static description of a record type: its fields in
declaration order, each with its kind, visibility and raw annotation text.
Shapes are derived once per type, never from runtime values, and are cached.

Dataclasses are described automatically from ``dataclasses.fields`` and their
resolved type hints, reading annotations from field metadata:

    ```python
    from dataclasses import dataclass, field

    @dataclass
    class User:
        name: str = field(default="", metadata={"validate": "min:1;max:64"})
        age: int = tagged("min:0", default=0)
    ```

Other classes can be registered explicitly:

    ```python
    registry = ShapeRegistry()
    registry.register(Point, [("x", int, "min:0"), ("y", int, "min:0")])
    ```

String annotations are resolved against the record's module, its enclosing
classes and the classes of its field defaults. A field whose type name still
cannot be found is kept with a warning and checked by its runtime value.
"""

from __future__ import annotations

import builtins
import dataclasses
import logging
import sys
import threading
import typing
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Tuple, Union

from .exceptions import ShapeNotFoundError, ShapeRegistrationError
from .kinds import FieldKind, classify

logger = logging.getLogger(__name__)

DEFAULT_TAG = "validate"

FieldSpec = Union["FieldDescriptor", Tuple[str, Any], Tuple[str, Any, Union[str, None]]]


def _local_namespace(record_type: type) -> Dict[str, Any]:
    """Collect names a record's string annotations may use besides module globals.

    Classes defined inside a function are not reachable from their module, so
    the namespace is built from what the record itself can see: the classes
    enclosing it (``Outer.Inner``), its own name, and the classes used as its
    field defaults and default factories.

    Args:
        record_type: Dataclass whose annotations are being resolved

    Returns:
        A namespace suitable as ``localns`` for ``typing.get_type_hints``
    """
    module = sys.modules.get(record_type.__module__)
    namespace: Dict[str, Any] = {}

    scope: Any = module
    for part in record_type.__qualname__.split(".")[:-1]:
        if part == "<locals>":
            break
        scope = getattr(scope, part, None)
        if not isinstance(scope, type):
            break
        namespace.update(vars(scope))

    for f in dataclasses.fields(record_type):
        for candidate in (f.default_factory, type(f.default)):
            if isinstance(candidate, type) and candidate.__module__ == record_type.__module__:
                namespace.setdefault(candidate.__name__, candidate)

    namespace[record_type.__name__] = record_type
    return namespace


def _resolve_name(record_type: type, name: str, localns: Dict[str, Any]) -> Any:
    """Resolve a (possibly dotted) string annotation, returning it unchanged on failure."""
    module = sys.modules.get(record_type.__module__)
    head, _, rest = name.partition(".")
    for namespace in (localns, vars(module) if module is not None else {}, vars(builtins)):
        if head in namespace:
            value = namespace[head]
            break
    else:
        return name

    for attr in rest.split(".") if rest else ():
        value = getattr(value, attr, None)
        if value is None:
            return name
    return value


def _is_type_name(annotation: str) -> bool:
    return all(part.isidentifier() for part in annotation.split("."))


def tagged(annotation: str, *, tag: str = DEFAULT_TAG, **kwargs: Any) -> Any:
    """Create a dataclass field carrying a validation annotation.

    Args:
        annotation: Annotation text such as ``"min:0;max:10"``
        tag: Metadata key to store the annotation under
        **kwargs: Passed through to ``dataclasses.field``

    Returns:
        A ``dataclasses.field`` with the annotation in its metadata
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[tag] = annotation
    return dataclasses.field(metadata=metadata, **kwargs)


@dataclass(frozen=True)
class FieldDescriptor:
    """Static description of one record field.

    Attributes:
        name: Attribute name of the field
        kind: Field kind derived from the declared type
        exported: Whether the field is public (name without leading underscore)
        annotation: Raw annotation text, or None when the field has none
        record_type: The nested record type for ``RECORD`` fields
        type_name: The declared type name when it could not be resolved to a
            class; such fields are checked by their runtime value instead
    """

    name: str
    kind: FieldKind
    exported: bool
    annotation: str | None = None
    record_type: type | None = None
    type_name: str | None = None

    @property
    def annotated(self) -> bool:
        """Whether the field carries an annotation (an empty one included)."""
        return self.annotation is not None

    @property
    def deferred(self) -> bool:
        """Whether the field's kind is decided from its runtime value."""
        return self.type_name is not None


@dataclass(frozen=True)
class RecordShape:
    """The ordered field descriptors of a record type."""

    record_type: type
    fields: tuple[FieldDescriptor, ...]

    @property
    def name(self) -> str:
        """Get the qualified name of the record type."""
        return self.record_type.__qualname__

    def field(self, name: str) -> FieldDescriptor:
        """Get the descriptor of a field by name.

        Args:
            name: Field name

        Returns:
            The field's descriptor

        Raises:
            KeyError: If the shape has no such field
        """
        for descriptor in self.fields:
            if descriptor.name == name:
                return descriptor
        raise KeyError(name)


class ShapeRegistry:
    """Thread-safe cache of record shapes keyed by record type.

    Dataclass shapes are derived on first use and re-derived after any
    registration change, since a registered type turns fields declared with
    it into record fields. Non-dataclass record types must be registered
    before they are validated or used as nested field types.

    Args:
        tag: Metadata key that holds annotations on dataclass fields
    """

    def __init__(self, tag: str = DEFAULT_TAG):
        self._tag = tag
        self._shapes: Dict[type, RecordShape] = {}
        self._registered: set[type] = set()
        self._reaches: Dict[type, bool] = {}
        self._lock = threading.RLock()

    @property
    def tag(self) -> str:
        """Get the annotation metadata key."""
        return self._tag

    def register(
        self,
        record_type: type,
        fields: Iterable[FieldSpec],
        allow_overwrite: bool = False,
    ) -> RecordShape:
        """Register the shape of a non-dataclass record type.

        Args:
            record_type: Class whose instances are records
            fields: Field descriptors, or ``(name, declared_type)`` /
                ``(name, declared_type, annotation)`` tuples in declaration order
            allow_overwrite: Whether to replace an existing registration

        Returns:
            The registered shape

        Raises:
            ShapeRegistrationError: If the type is already registered, is not
                a class, or declares a field twice
        """
        if not isinstance(record_type, type):
            raise ShapeRegistrationError(
                f"Record type must be a class, got {type(record_type).__name__}",
                context={"record_type": repr(record_type)},
            )

        with self._lock:
            if not allow_overwrite and record_type in self._registered:
                raise ShapeRegistrationError(
                    f"Shape for {record_type.__qualname__} already registered",
                    context={"record_type": record_type.__qualname__},
                )

            descriptors = tuple(
                self._describe_spec(record_type, spec) for spec in fields
            )
            names = [descriptor.name for descriptor in descriptors]
            duplicates = sorted({name for name in names if names.count(name) > 1})
            if duplicates:
                raise ShapeRegistrationError(
                    f"Duplicate fields in shape for {record_type.__qualname__}: "
                    f"{', '.join(duplicates)}",
                    context={"record_type": record_type.__qualname__, "fields": duplicates},
                )

            shape = RecordShape(record_type, descriptors)
            self._drop_derived()
            self._shapes[record_type] = shape
            self._registered.add(record_type)
            logger.debug(f"Registered shape {shape.name} with {len(descriptors)} fields")
            return shape

    def unregister(self, record_type: type) -> RecordShape:
        """Remove an explicitly registered shape.

        Raises:
            ShapeNotFoundError: If the type was not registered
        """
        with self._lock:
            if record_type not in self._registered:
                raise ShapeNotFoundError(record_type)
            self._registered.discard(record_type)
            shape = self._shapes.pop(record_type)
            self._drop_derived()
            return shape

    def is_registered(self, record_type: type) -> bool:
        """Check whether a type has an explicitly registered shape."""
        with self._lock:
            return record_type in self._registered

    def is_record_type(self, record_type: Any) -> bool:
        """Check whether instances of a type are records."""
        if not isinstance(record_type, type):
            return False
        return self.is_registered(record_type) or dataclasses.is_dataclass(record_type)

    def get(self, record_type: type) -> RecordShape:
        """Get the shape of a record type, deriving dataclass shapes on demand.

        Raises:
            ShapeNotFoundError: If the type is neither registered nor a dataclass
        """
        with self._lock:
            shape = self._shapes.get(record_type)
            if shape is not None:
                return shape
            if not self.is_record_type(record_type):
                raise ShapeNotFoundError(record_type)
            shape = self._derive(record_type)
            self._shapes[record_type] = shape
            return shape

    def shape_of(self, value: Any) -> RecordShape | None:
        """Get the shape for a record value, or None if it is not a record.

        Class objects are never records, even dataclass types.
        """
        if isinstance(value, type):
            return None
        record_type = type(value)
        if not self.is_record_type(record_type):
            return None
        return self.get(record_type)

    def needs_validation(self, descriptor: FieldDescriptor) -> bool:
        """Decide statically whether a field has anything to validate.

        Leaf fields need validation when annotated. Record fields need it when
        an annotated leaf is reachable anywhere inside the nested type.
        Annotations on record or other fields are ignored. Fields whose type
        could not be resolved are kept whenever they are annotated or public,
        and are checked by their runtime value.
        """
        if descriptor.deferred:
            return descriptor.annotated or descriptor.exported
        if descriptor.kind.is_leaf:
            return descriptor.annotated
        if descriptor.kind is FieldKind.RECORD and descriptor.record_type is not None:
            return self._reaches_annotation(descriptor.record_type)
        return False

    def clear(self) -> None:
        """Drop derived shapes, keeping explicit registrations."""
        with self._lock:
            self._drop_derived()

    def _drop_derived(self) -> None:
        # Derived shapes classify fields against the current registrations.
        for record_type in list(self._shapes):
            if record_type not in self._registered:
                del self._shapes[record_type]
        self._reaches.clear()

    def _reaches_annotation(self, record_type: type) -> bool:
        with self._lock:
            cached = self._reaches.get(record_type)
            if cached is not None:
                return cached

            # Walk every record type reachable from here, each at most once,
            # so self-referencing shapes terminate.
            found = False
            seen: set[type] = set()
            pending = [record_type]
            while pending and not found:
                current = pending.pop()
                if current in seen:
                    continue
                seen.add(current)
                for descriptor in self.get(current).fields:
                    if descriptor.deferred and self.needs_validation(descriptor):
                        found = True
                        break
                    if descriptor.kind.is_leaf and descriptor.annotated:
                        found = True
                        break
                    if descriptor.kind is FieldKind.RECORD and descriptor.record_type is not None:
                        pending.append(descriptor.record_type)

            self._reaches[record_type] = found
            return found

    def _derive(self, record_type: type) -> RecordShape:
        localns = _local_namespace(record_type)
        try:
            hints = typing.get_type_hints(record_type, localns=localns)
        except (NameError, TypeError) as e:
            logger.debug(f"Could not resolve type hints of {record_type.__qualname__}: {e}")
            hints = {}

        descriptors = []
        for f in dataclasses.fields(record_type):
            declared = hints.get(f.name, f.type)
            if isinstance(declared, str):
                declared = _resolve_name(record_type, declared, localns)
            descriptors.append(
                self._describe(record_type, f.name, declared, f.metadata.get(self._tag))
            )

        shape = RecordShape(record_type, tuple(descriptors))
        logger.debug(f"Derived shape {shape.name} with {len(descriptors)} fields")
        return shape

    def _describe(
        self, owner: type, name: str, declared: Any, annotation: str | None
    ) -> FieldDescriptor:
        exported = not name.startswith("_")
        if isinstance(declared, str) and _is_type_name(declared):
            logger.warning(
                f"Cannot resolve type '{declared}' of field {owner.__qualname__}.{name}; "
                f"it will be checked by its runtime value"
            )
            return FieldDescriptor(
                name=name,
                kind=FieldKind.OTHER,
                exported=exported,
                annotation=annotation,
                type_name=declared,
            )

        kind = classify(declared, self.is_registered)
        return FieldDescriptor(
            name=name,
            kind=kind,
            exported=exported,
            annotation=annotation,
            record_type=declared if kind is FieldKind.RECORD else None,
        )

    def _describe_spec(self, owner: type, spec: FieldSpec) -> FieldDescriptor:
        if isinstance(spec, FieldDescriptor):
            return spec
        if isinstance(spec, tuple) and len(spec) in (2, 3):
            name, declared = spec[0], spec[1]
            annotation = spec[2] if len(spec) == 3 else None
            return self._describe(owner, name, declared, annotation)
        raise ShapeRegistrationError(
            f"Invalid field specification: {spec!r}",
            context={"spec": repr(spec)},
        )


__all__ = [
    "DEFAULT_TAG",
    "FieldDescriptor",
    "RecordShape",
    "ShapeRegistry",
    "tagged",
]
