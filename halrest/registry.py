# Entity type registry
#
# The registry maps the (pluralized, lower-cased) url path segments to static entity type
# descriptors. It is built once, when the models are exposed, by inspecting the SQLAlchemy
# mappers. The descriptors are read-only afterwards so they can be shared between requests.
#
import enum
import re
from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple
import inflect
import sqlalchemy
from sqlalchemy.orm.interfaces import MANYTOONE
import halrest
from .errors import NotFoundError

FOREIGN_KEY_SUFFIX = "_id"
IDENTIFIER = "id"

_inflect = inflect.engine()


def underscore(name: str) -> str:
    """
    :param name: camel-cased name, e.g. "BookAuthor"
    :return: snake-cased name, e.g. "book_author"
    """
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", name)
    return name.replace("-", "_").lower()


def pluralize(name: str) -> str:
    """
    :param name: snake-cased singular name, only the last word is pluralized
    :return: plural name, e.g. "book_author" -> "book_authors"
    """
    *head, last = name.split("_")
    if not last:
        return name
    return "_".join(head + [_inflect.plural_noun(last) or last])


def singularize(name: str) -> str:
    """
    :param name: snake-cased plural name
    :return: singular name, e.g. "book_authors" -> "book_author"
    """
    *head, last = name.split("_")
    # singular_noun returns False if the word is singular already
    if not last:
        return name
    return "_".join(head + [_inflect.singular_noun(last) or last])


def tableize(name: str) -> str:
    """
    :param name: model class name, e.g. "BookAuthor"
    :return: the collection name used in the urls, e.g. "book_authors"
    """
    return pluralize(underscore(name))


class Cardinality(enum.Enum):
    TO_ONE = "toone"
    TO_MANY = "tomany"


@dataclass(frozen=True)
class PropertyDescriptor:
    """
    Scalar property (column) of an entity type
    """

    name: str
    kind: str
    primary_key: bool = False

    @property
    def is_identifier(self) -> bool:
        return self.primary_key or self.name == IDENTIFIER

    @property
    def is_foreign_key(self) -> bool:
        return self.name.endswith(FOREIGN_KEY_SUFFIX)


@dataclass(frozen=True)
class RelationshipDescriptor:
    """
    Relationship of an entity type, the target is referenced by its descriptor
    """

    name: str
    cardinality: Cardinality
    target_type: "EntityTypeDescriptor" = field(repr=False, compare=False)


class EntityTypeDescriptor:
    """
    Static description of an exposed model: name, properties and relationships.

    Instances are created by the `EntityTypeRegistry`, the relationships are bound
    once all descriptors of the registry exist (relationship targets reference other descriptors)
    """

    def __init__(self, model, properties: Tuple[PropertyDescriptor, ...]) -> None:
        self._model = model
        self._name = model.__name__
        self._plural_name = tableize(self._name)
        self._properties = tuple(properties)
        self._relationships: Tuple[RelationshipDescriptor, ...] = ()

    def __repr__(self) -> str:
        return f"<EntityTypeDescriptor {self._name}>"

    @property
    def model(self):
        """
        :return: the mapped SQLAlchemy class
        """
        return self._model

    @property
    def name(self) -> str:
        return self._name

    @property
    def plural_name(self) -> str:
        return self._plural_name

    @property
    def key(self) -> str:
        """
        :return: the normalized singular name used to resolve url path segments
        """
        return underscore(self._name)

    @property
    def properties(self) -> Tuple[PropertyDescriptor, ...]:
        return self._properties

    @property
    def relationships(self) -> Tuple[RelationshipDescriptor, ...]:
        return self._relationships

    @property
    def identifier(self) -> Optional[PropertyDescriptor]:
        """
        :return: the primary key property
        """
        for prop in self._properties:
            if prop.primary_key:
                return prop
        for prop in self._properties:
            if prop.is_identifier:
                return prop
        return None

    def get_property(self, name: str) -> Optional[PropertyDescriptor]:
        for prop in self._properties:
            if prop.name == name:
                return prop
        return None

    def get_relationship(self, name: str) -> Optional[RelationshipDescriptor]:
        for rel in self._relationships:
            if rel.name == name:
                return rel
        return None


def _column_kind(column) -> str:
    """
    :param column: sqla column
    :return: name of the python type of the column values
    """
    try:
        return column.type.python_type.__name__
    except NotImplementedError:  # pragma: no cover
        return type(column.type).__name__


def _cardinality(relationship) -> Cardinality:
    """
    MANYTOONE and uselist=False relationships hold a single item, ONETOMANY and MANYTOMANY hold a collection
    """
    if relationship.direction == MANYTOONE or not relationship.uselist:
        return Cardinality.TO_ONE
    return Cardinality.TO_MANY


class EntityTypeRegistry:
    """
    Immutable lookup table of the exposed entity types
    """

    def __init__(self, descriptors=()) -> None:
        self._descriptors = tuple(descriptors)

    @classmethod
    def from_models(cls, *models) -> "EntityTypeRegistry":
        """
        Build the registry by inspecting the SQLAlchemy mappers of the models
        :param models: mapped classes
        :return: registry
        """
        descriptors = {}
        for model in models:
            mapper = sqlalchemy.inspect(model)
            properties = []
            for attr in mapper.column_attrs:
                column = attr.columns[0]
                properties.append(PropertyDescriptor(attr.key, _column_kind(column), bool(column.primary_key)))
            descriptors[model] = EntityTypeDescriptor(model, properties)

        for model, descriptor in descriptors.items():
            relationships = []
            for relationship in sqlalchemy.inspect(model).relationships:
                target = descriptors.get(relationship.mapper.class_)
                if target is None:
                    halrest.log.debug(f"Not exposing {model.__name__}.{relationship.key}: target is not registered")
                    continue
                relationships.append(RelationshipDescriptor(relationship.key, _cardinality(relationship), target))
            descriptor._relationships = tuple(relationships)

        return cls(descriptors.values())

    def __iter__(self) -> Iterator[EntityTypeDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def resolve(self, path_segment: str) -> EntityTypeDescriptor:
        """
        Resolve a url path segment to an entity type:
        "books", "Books", "book-authors" and "book_authors" are singularized and
        normalized before they are looked up by name.

        :param path_segment: pluralized, snake- or kebab-cased type name
        :return: entity type descriptor
        :raises NotFoundError: when no type or more than one type matches
        """
        segment = path_segment.strip().replace("-", "_").lower()
        key = singularize(segment)
        # plural_name matches as is: inflect doesn't always invert its own plurals ("axes" -> "axe")
        matches = [descriptor for descriptor in self._descriptors if segment == descriptor.plural_name or key == descriptor.key]
        if not matches:
            raise NotFoundError(f'Unknown type "{path_segment}"')
        if len(matches) > 1:
            raise NotFoundError(f'Ambiguous type "{path_segment}": {", ".join(m.name for m in matches)}')
        return matches[0]

    def descriptor_for(self, model_or_instance) -> EntityTypeDescriptor:
        """
        :param model_or_instance: mapped class or instance
        :return: the descriptor registered for the class
        """
        model = model_or_instance if isinstance(model_or_instance, type) else type(model_or_instance)
        for klass in model.__mro__:
            for descriptor in self._descriptors:
                if descriptor.model is klass:
                    return descriptor
        raise NotFoundError(f'Type "{model.__name__}" is not exposed')
