"""Errors raised while resolving message definitions."""


class MessageDefinitionError(ValueError):
    """Base class for message definition errors."""


class UnresolvedTypeError(MessageDefinitionError, LookupError):
    """A field references a type that is neither primitive nor defined earlier."""

    def __init__(self, type_name: str) -> None:
        super().__init__(
            f"Type '{type_name}' is not a primitive type or defined in the message definition"
        )
        self.type_name = type_name


class InvalidTypeError(MessageDefinitionError, LookupError):
    """A field's type token is not valid type syntax (e.g. ``int32[x]``).

    Such a token names no primitive or definition, so it is a lookup failure
    like UnresolvedTypeError.
    """

    def __init__(self, type_name: str) -> None:
        super().__init__(f"Invalid type '{type_name}'")
        self.type_name = type_name


class MalformedDefinitionError(MessageDefinitionError):
    """A sub-definition block does not start with a ``MSG: <name>`` line."""


class DuplicateDefinitionError(MessageDefinitionError):
    """The same sub-definition name was declared twice."""
