"""ROS1 field type parser using Lark."""

from dataclasses import dataclass
from typing import Any, cast

from lark import Lark, Token, Transformer
from lark.exceptions import UnexpectedInput

from .exceptions import InvalidTypeError

TYPE_GRAMMAR = r"""
type_spec: TYPE_NAME [array_spec]

array_spec: "[" [INT] "]"

TYPE_NAME: /[A-Za-z_][A-Za-z0-9_]*(\/[A-Za-z_][A-Za-z0-9_]*)*/

%import common.INT
"""


@dataclass(frozen=True)
class TypeSpec:
    """A parsed field type token such as ``int32``, ``Point[]`` or ``std_msgs/Header[3]``."""

    type_name: str
    is_array: bool = False
    array_size: int | None = None

    @property
    def is_fixed_array(self) -> bool:
        return self.is_array and self.array_size is not None

    def __str__(self) -> str:
        if not self.is_array:
            return self.type_name
        size = "" if self.array_size is None else str(self.array_size)
        return f"{self.type_name}[{size}]"


class TypeSpecTransformer(Transformer[Token, TypeSpec]):
    """Transforms the Lark parse tree of a type token into a TypeSpec."""

    def type_spec(self, items: list[Any]) -> TypeSpec:
        type_name, array_spec = items
        if array_spec is None:
            return TypeSpec(type_name=str(type_name))
        is_array, array_size = array_spec
        return TypeSpec(type_name=str(type_name), is_array=is_array, array_size=array_size)

    def array_spec(self, items: list[Token | None]) -> tuple[bool, int | None]:
        """Return array specification, size is None for an unbounded array."""
        size = items[0]
        return (True, None if size is None else int(size))


_parser = Lark(TYPE_GRAMMAR, start="type_spec", parser="lalr", transformer=TypeSpecTransformer())


def parse_type(type_token: str) -> TypeSpec:
    """
    Parse a field type token.

    Args:
        type_token: The type part of a field line (e.g. ``float64[9]``)

    Returns:
        Parsed TypeSpec

    Raises:
        InvalidTypeError: If the token is not valid type syntax
    """
    try:
        return cast("TypeSpec", _parser.parse(type_token))
    except UnexpectedInput as e:
        raise InvalidTypeError(type_token) from e
