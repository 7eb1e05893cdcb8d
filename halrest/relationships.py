# Relationship resolution
#
# A relationship handle gives access to the association of a resource by relationship name.
# The handle type depends on the cardinality of the relationship:
# - ToOneHandle: get() returns the associated resource (or None), set() replaces it
# - ToManyHandle: get() returns a RelatedCollection that can be queried, append() adds a resource
#
from typing import Any, Optional
import halrest
from .datalayer import DataAccessLayer
from .errors import NotFoundError
from .query import Collection, Query
from .registry import Cardinality, EntityTypeDescriptor, EntityTypeRegistry, RelationshipDescriptor


class RelationshipHandle:
    """
    Common attributes of the relationship handles
    """

    cardinality: Cardinality = None

    def __init__(self, resource: Any, relationship: RelationshipDescriptor, datalayer: DataAccessLayer) -> None:
        self.resource = resource
        self.relationship = relationship
        self.datalayer = datalayer

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {type(self.resource).__name__}.{self.name}>"

    @property
    def name(self) -> str:
        return self.relationship.name

    @property
    def target_type(self) -> EntityTypeDescriptor:
        return self.relationship.target_type


class ToOneHandle(RelationshipHandle):
    cardinality = Cardinality.TO_ONE

    def get(self) -> Optional[Any]:
        """
        :return: the associated resource, None if there's no association
        """
        return getattr(self.resource, self.name)

    def set(self, target: Any) -> None:
        """
        :param target: the resource that becomes the association
        """
        setattr(self.resource, self.name, target)


class RelatedCollection:
    """
    The resources in a to-many relationship of a resource
    """

    def __init__(self, handle: "ToManyHandle") -> None:
        self.handle = handle

    def find_all(self, query: Query) -> Collection:
        """
        :param query: query built for the relationship target type
        :return: the related resources, ordered and paged by the query
        """
        handle = self.handle
        resources = handle.datalayer.find_all_related(handle.resource, handle.relationship, query)
        return Collection(handle.target_type, tuple(resources), query)

    def find(self, id: str) -> Optional[Any]:
        """
        :param id: id of the related resource
        :return: the related resource if it's a member of the relationship
        """
        handle = self.handle
        return handle.datalayer.find_related(handle.resource, handle.relationship, id)


class ToManyHandle(RelationshipHandle):
    cardinality = Cardinality.TO_MANY

    def get(self) -> RelatedCollection:
        return RelatedCollection(self)

    def append(self, target: Any) -> None:
        """
        :param target: resource to add to the relationship
        lazy="dynamic" relationships (AppenderQuery) and instrumented lists both implement append
        """
        getattr(self.resource, self.name).append(target)


HANDLES = {Cardinality.TO_ONE: ToOneHandle, Cardinality.TO_MANY: ToManyHandle}


def resolve_relationship(registry: EntityTypeRegistry, resource: Any, name: str, datalayer: DataAccessLayer) -> RelationshipHandle:
    """
    :param registry: entity type registry
    :param resource: the resource that owns the relationship
    :param name: relationship name, as used in the url
    :param datalayer: data-access layer used to query to-many relationships
    :return: ToOneHandle or ToManyHandle
    :raises NotFoundError: if the resource type has no relationship with that name
    """
    entity_type = registry.descriptor_for(resource)
    relationship = entity_type.get_relationship(name)
    if relationship is None:
        raise NotFoundError(f'"{entity_type.name}" has no relationship "{name}"')
    halrest.log.debug(f"{entity_type.name}.{name}: {relationship.cardinality.value} {relationship.target_type.name}")
    return HANDLES[relationship.cardinality](resource, relationship, datalayer)
