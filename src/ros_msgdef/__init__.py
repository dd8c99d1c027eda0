"""ROS1 message definition resolver.

Turns the message definition stored in a bag connection record into an
ordered list of field descriptors for binary decoding:

    from ros_msgdef import parse_message_definition

    fields = parse_message_definition(connection.message_definition)
"""

from ._utils import split_message_definition
from .exceptions import (
    DuplicateDefinitionError,
    InvalidTypeError,
    MalformedDefinitionError,
    MessageDefinitionError,
    UnresolvedTypeError,
)
from .models import (
    PRIMITIVE_TYPES,
    ArrayField,
    FieldDescriptor,
    PrimitiveType,
    ScalarField,
    iter_fields,
    lookup_primitive,
)
from .parser import TypeSpec, parse_type
from .resolver import (
    DefinitionTable,
    parse_definition_body,
    parse_message_definition,
    resolve_sub_definitions,
)

__all__ = [
    "PRIMITIVE_TYPES",
    "ArrayField",
    "DefinitionTable",
    "DuplicateDefinitionError",
    "FieldDescriptor",
    "InvalidTypeError",
    "MalformedDefinitionError",
    "MessageDefinitionError",
    "PrimitiveType",
    "ScalarField",
    "TypeSpec",
    "UnresolvedTypeError",
    "iter_fields",
    "lookup_primitive",
    "parse_definition_body",
    "parse_message_definition",
    "parse_type",
    "resolve_sub_definitions",
    "split_message_definition",
]
