# Query construction
#
# A query holds the paging parameters (offset, limit) and the order directions of a collection read.
# Order tokens have the form "<property> [asc|desc]", e.g. "title desc", the direction defaults to "asc".
# Tokens are validated against the declared properties of the queried type: an unknown
# property fails the whole query.
#
import enum
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple
import halrest
from .errors import BadRequestError, OrderError
from .registry import EntityTypeDescriptor, PropertyDescriptor

DEFAULT_OFFSET = 0
DEFAULT_LIMIT = 30


class Direction(enum.Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class OrderDirection:
    property: PropertyDescriptor
    direction: Direction = Direction.ASC


@dataclass(frozen=True)
class Query:
    """
    Executable query against `entity_type`, built fresh for every request
    """

    entity_type: EntityTypeDescriptor
    offset: int = DEFAULT_OFFSET
    limit: int = DEFAULT_LIMIT
    order: Tuple[OrderDirection, ...] = ()


def parse_order_token(entity_type: EntityTypeDescriptor, token: str) -> OrderDirection:
    """
    :param entity_type: the type that holds the property
    :param token: order token, e.g. "title desc"
    :return: OrderDirection
    :raises OrderError: if the property doesn't exist or the direction is invalid
    """
    parts = token.split(None, 1)
    if not parts:
        raise OrderError(token, "empty order token")
    target = parts[0]
    operator = parts[1].strip().lower() if len(parts) > 1 else Direction.ASC.value
    prop = entity_type.get_property(target)
    if prop is None:
        raise OrderError(token, f"no property named {target}")
    try:
        direction = Direction(operator)
    except ValueError:
        raise OrderError(token, f'invalid direction "{operator}" in order "{token}"')
    return OrderDirection(prop, direction)


def build_query(
    entity_type: EntityTypeDescriptor,
    offset: Optional[int] = DEFAULT_OFFSET,
    limit: Optional[int] = DEFAULT_LIMIT,
    order_tokens: Optional[Iterable[str]] = None,
) -> Query:
    """
    :param entity_type: the queried type, for relationship queries this is the relationship target type
    :param offset: number of items to skip
    :param limit: maximum number of items
    :param order_tokens: raw order tokens
    :return: validated Query
    """
    offset = DEFAULT_OFFSET if offset is None else offset
    limit = DEFAULT_LIMIT if limit is None else limit
    if offset < 0:
        raise BadRequestError(f"offset must not be negative ({offset})")
    if limit <= 0:
        raise BadRequestError(f"limit must be positive ({limit})")

    order = tuple(parse_order_token(entity_type, token) for token in order_tokens or ())
    halrest.log.debug(f"{entity_type.name} query: offset={offset}, limit={limit}, order={order}")
    return Query(entity_type, offset, limit, order)


@dataclass(frozen=True)
class Collection:
    """
    Result of a collection query: the resources in query order and the originating query
    """

    entity_type: EntityTypeDescriptor
    resources: Tuple = ()
    query: Optional[Query] = None

    def __iter__(self):
        return iter(self.resources)

    def __len__(self) -> int:
        return len(self.resources)

    @property
    def size(self) -> int:
        return len(self.resources)

    @property
    def offset(self) -> int:
        return self.query.offset if self.query else DEFAULT_OFFSET

    @property
    def limit(self) -> int:
        return self.query.limit if self.query else DEFAULT_LIMIT
