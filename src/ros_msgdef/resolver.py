"""Resolve a ROS1 message definition blob into field descriptors.

A connection record's message definition holds the main message followed by
every nested message it uses, each introduced by a separator line::

    Header header
    int32 data
    ================================================================================
    MSG: std_msgs/Header
    uint32 seq
    time stamp
    string frame_id

Nested definitions only reference definitions declared after them, so they
are resolved last-declared first. Fields of nested messages are spliced into
the referencing definition with dotted names (``header.seq``).
"""

import logging
from collections.abc import Iterator

from ._utils import definition_lines, header_name, split_message_definition, split_tokens
from .exceptions import DuplicateDefinitionError, MalformedDefinitionError, UnresolvedTypeError
from .models import ArrayField, FieldDescriptor, PrimitiveType, ScalarField, lookup_primitive
from .parser import parse_type

logger = logging.getLogger(__name__)

# Single byte encoding, every byte decodes
DEFAULT_ENCODING = "latin-1"

# Name of the character element inside a string descriptor
STRING_CHAR_NAME = "char"


class DefinitionTable:
    """Resolved sub-definitions of one message definition blob.

    Every qualified name (``std_msgs/Header``) is also reachable by its last
    path segment (``Header``).
    """

    def __init__(self) -> None:
        self._definitions: dict[str, tuple[FieldDescriptor, ...]] = {}
        # Short names added on behalf of a qualified name
        self._aliases: set[str] = set()

    def add(self, name: str, fields: list[FieldDescriptor]) -> None:
        """Insert a resolved definition under its full and unqualified names."""
        if name in self._aliases:
            # An explicit declaration takes precedence over an alias
            self._aliases.discard(name)
        elif name in self._definitions:
            raise DuplicateDefinitionError(f"Definition '{name}' is declared more than once")
        self._definitions[name] = tuple(fields)

        short_name = name.rsplit("/", 1)[-1]
        if short_name == name:
            return
        if short_name in self._definitions:
            logger.debug(f"Keeping existing '{short_name}', not aliasing {name}")
            return
        self._definitions[short_name] = tuple(fields)
        self._aliases.add(short_name)

    def get(self, type_name: str) -> tuple[FieldDescriptor, ...]:
        try:
            return self._definitions[type_name]
        except KeyError:
            raise UnresolvedTypeError(type_name) from None

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._definitions

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)


def _string_field(name: str) -> ArrayField:
    """A string is a dynamic array of characters."""
    char = ScalarField(STRING_CHAR_NAME, PrimitiveType.CHAR)
    return ArrayField(name, (char,), PrimitiveType.CHAR)


def _primitive_field(name: str, primitive_type: PrimitiveType) -> FieldDescriptor:
    if primitive_type is PrimitiveType.STRING:
        return _string_field(name)
    return ScalarField(name, primitive_type)


def _primitive_array_field(
    name: str, primitive_type: PrimitiveType, fixed_length: int | None
) -> ArrayField:
    if primitive_type is PrimitiveType.STRING:
        element = _string_field(name)
    else:
        element = ScalarField(f"{name}_item", primitive_type)
    return ArrayField(name, (element,), primitive_type, fixed_length)


def _expand_composite(name: str, fields: tuple[FieldDescriptor, ...]) -> list[FieldDescriptor]:
    """Copy a nested definition's fields, prefixing each name with ``<name>.``."""
    return [field.renamed(name) for field in fields]


def _parse_field(type_token: str, name: str, table: DefinitionTable) -> list[FieldDescriptor]:
    """Resolve a single field line into the descriptors it contributes."""
    primitive_type = lookup_primitive(type_token)
    if primitive_type is not None:
        return [_primitive_field(name, primitive_type)]

    type_spec = parse_type(type_token)
    if type_spec.is_array:
        element_primitive = lookup_primitive(type_spec.type_name)
        if element_primitive is not None:
            return [_primitive_array_field(name, element_primitive, type_spec.array_size)]

        elements = _expand_composite(name, table.get(type_spec.type_name))
        return [ArrayField(name, tuple(elements), PrimitiveType.COMPLEX, type_spec.array_size)]

    # Bare reference, spliced into the enclosing definition
    return _expand_composite(name, table.get(type_spec.type_name))


def parse_definition_body(text: str, table: DefinitionTable) -> list[FieldDescriptor]:
    """
    Parse the field lines of one definition.

    Comments, blank lines and constant declarations contribute no fields.

    Args:
        text: Definition body without its ``MSG:`` header line
        table: Sub-definitions resolved so far

    Returns:
        Field descriptors in declaration order
    """
    fields: list[FieldDescriptor] = []
    for line in definition_lines(text):
        tokens = split_tokens(line)
        if len(tokens) != 2:
            logger.debug(f"Skipping constant declaration: {line}")
            continue
        type_token, name = tokens
        fields.extend(_parse_field(type_token, name, table))
    return fields


def _decode(data: bytes | str, encoding: str) -> str:
    if isinstance(data, str):
        return data
    return data.decode(encoding)


def _resolve_sub_definitions(sub_definitions: list[str]) -> DefinitionTable:
    table = DefinitionTable()
    for sub_definition in reversed(sub_definitions):
        header, _, body = sub_definition.partition("\n")
        name = header_name(header)
        if name is None:
            raise MalformedDefinitionError(
                f"Sub-definition is missing its name line: {sub_definition[:40]!r}"
            )
        fields = parse_definition_body(body, table)
        table.add(name, fields)
        logger.debug(f"Resolved {name} ({len(fields)} fields)")
    return table


def resolve_sub_definitions(
    data: bytes | str, *, encoding: str = DEFAULT_ENCODING
) -> DefinitionTable:
    """
    Resolve only the nested definitions of a message definition blob.

    Args:
        data: Raw message definition from a connection record
        encoding: Text encoding used to decode ``data``

    Returns:
        A new DefinitionTable holding every nested definition
    """
    _, sub_definitions = split_message_definition(_decode(data, encoding))
    return _resolve_sub_definitions(sub_definitions)


def parse_message_definition(
    data: bytes | str, *, encoding: str = DEFAULT_ENCODING
) -> list[FieldDescriptor]:
    """
    Parse a message definition blob into field descriptors.

    Args:
        data: Raw message definition from a connection record
        encoding: Text encoding used to decode ``data``

    Returns:
        Field descriptors of the main definition in declaration order

    Raises:
        UnresolvedTypeError: If a field references an undefined type
        InvalidTypeError: If a field's type token is malformed
        MalformedDefinitionError: If a nested definition has no name line
    """
    main, sub_definitions = split_message_definition(_decode(data, encoding))
    table = _resolve_sub_definitions(sub_definitions)
    return parse_definition_body(main, table)
