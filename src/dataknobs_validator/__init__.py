"""Declarative record-field validation for dataknobs.

Fields declare their constraints as annotation text in dataclass metadata,
and the validator reports every violated constraint at once:

- **Constraints**: ``min``, ``max`` and ``in`` for integers; ``min``, ``max``,
  ``len`` and ``in`` for text
- **Nesting**: nested records are validated recursively, with errors
  qualified by the enclosing field names
- **Errors**: a single ``ValidationErrors`` aggregate of field-qualified
  ``FieldError`` instances, in declaration order

Example:
    ```python
    from dataclasses import dataclass, field
    from dataknobs_validator import ValidationErrors, tagged, validate

    @dataclass
    class Address:
        zip_code: str = tagged("len:5", default="00000")

    @dataclass
    class User:
        name: str = field(default="", metadata={"validate": "min:1;max:32"})
        role: str = tagged("in:admin,editor,viewer", default="viewer")
        age: int = tagged("min:18;max:130", default=18)
        address: Address = field(default_factory=Address)

    try:
        validate(User(name="", age=12))
    except ValidationErrors as errors:
        print(errors)
    ```
"""

from dataknobs_validator.config import ValidatorConfig
from dataknobs_validator.constraints import (
    Constraint,
    IntegerIn,
    IntegerMax,
    IntegerMin,
    TextIn,
    TextLen,
    TextMax,
    TextMin,
)
from dataknobs_validator.exceptions import (
    ConfigurationError,
    ConstraintParameterError,
    ConstraintViolation,
    FieldError,
    FieldTypeError,
    MalformedAnnotationError,
    NotRecordError,
    ShapeNotFoundError,
    ShapeRegistrationError,
    UnexportedFieldError,
    UnsupportedFieldKindError,
    ValidationErrors,
    ValidatorError,
)
from dataknobs_validator.kinds import FieldKind
from dataknobs_validator.parser import parse_annotation
from dataknobs_validator.shapes import (
    DEFAULT_TAG,
    FieldDescriptor,
    RecordShape,
    ShapeRegistry,
    tagged,
)
from dataknobs_validator.validator import Validator, check, get_validator, validate

__version__ = "1.0.0"

__all__ = [
    # Version
    "__version__",
    # Entry points
    "validate",
    "check",
    "get_validator",
    "Validator",
    "ValidatorConfig",
    # Shapes
    "DEFAULT_TAG",
    "FieldKind",
    "FieldDescriptor",
    "RecordShape",
    "ShapeRegistry",
    "tagged",
    # Constraints
    "parse_annotation",
    "Constraint",
    "IntegerMin",
    "IntegerMax",
    "IntegerIn",
    "TextMin",
    "TextMax",
    "TextLen",
    "TextIn",
    # Exceptions
    "ValidatorError",
    "ConfigurationError",
    "ShapeRegistrationError",
    "ShapeNotFoundError",
    "NotRecordError",
    "UnexportedFieldError",
    "MalformedAnnotationError",
    "ConstraintParameterError",
    "ConstraintViolation",
    "FieldTypeError",
    "UnsupportedFieldKindError",
    "FieldError",
    "ValidationErrors",
]
