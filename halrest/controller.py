# Resource controller
#
# Implements the generic resource operations on top of the registry, the attribute filter,
# the query builder, the relationship resolver and the data-access layer:
#
#   GET    /<type>                      list_collection
#   POST   /<type>                      create_in_collection
#   GET    /<type>/<id>                 read_item
#   PATCH  /<type>/<id>                 update_item
#   DELETE /<type>/<id>                 delete_item
#   GET    /<type>/<id>/<rel>           list_relationship
#   POST   /<type>/<id>/<rel>           create_in_relationship
#   GET    /<type>/<id>/<rel>/<rel_id>  read_relationship_item
#
# Every operation receives the request parameters in an explicit RequestContext,
# the controller doesn't use the flask request globals.
#
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union
import halrest
from .attributes import extract_attributes
from .datalayer import DataAccessLayer
from .errors import DeleteError, NotFoundError, ValidationError
from .query import Collection, DEFAULT_LIMIT, DEFAULT_OFFSET, build_query
from .registry import Cardinality, EntityTypeDescriptor, EntityTypeRegistry
from .relationships import RelationshipHandle, resolve_relationship


@dataclass(frozen=True)
class RequestContext:
    """
    Parsed request parameters
    """

    type_segment: str
    id: Optional[str] = None
    relationship: Optional[str] = None
    relationship_id: Optional[str] = None
    offset: int = DEFAULT_OFFSET
    limit: int = DEFAULT_LIMIT
    order: Tuple[str, ...] = ()
    body: Dict[str, Any] = field(default_factory=dict)


class ResourceController:
    def __init__(self, registry: EntityTypeRegistry, datalayer: DataAccessLayer) -> None:
        self.registry = registry
        self.datalayer = datalayer

    def entity_type(self, ctx: RequestContext) -> EntityTypeDescriptor:
        return self.registry.resolve(ctx.type_segment)

    def _get_instance(self, entity_type: EntityTypeDescriptor, id: Optional[str]) -> Any:
        instance = None if id is None else self.datalayer.get(entity_type, id)
        if instance is None:
            raise NotFoundError(f'Invalid "{entity_type.name}" id "{id}"')
        return instance

    def _save(self, resource: Any) -> Any:
        if not self.datalayer.save(resource):
            raise ValidationError(self.datalayer.errors(resource))
        return resource

    def _relationship(self, ctx: RequestContext) -> RelationshipHandle:
        resource = self._get_instance(self.entity_type(ctx), ctx.id)
        return resolve_relationship(self.registry, resource, ctx.relationship, self.datalayer)

    def list_collection(self, ctx: RequestContext) -> Collection:
        entity_type = self.entity_type(ctx)
        query = build_query(entity_type, ctx.offset, ctx.limit, ctx.order)
        resources = self.datalayer.find_all(entity_type, query)
        return Collection(entity_type, tuple(resources), query)

    def create_in_collection(self, ctx: RequestContext) -> Any:
        entity_type = self.entity_type(ctx)
        resource = self.datalayer.create(entity_type, extract_attributes(entity_type, ctx.body))
        halrest.log.debug(f"Creating {entity_type.name}")
        return self._save(resource)

    def read_item(self, ctx: RequestContext) -> Any:
        return self._get_instance(self.entity_type(ctx), ctx.id)

    def update_item(self, ctx: RequestContext) -> Any:
        entity_type = self.entity_type(ctx)
        resource = self._get_instance(entity_type, ctx.id)
        self.datalayer.assign(resource, extract_attributes(entity_type, ctx.body))
        return self._save(resource)

    def delete_item(self, ctx: RequestContext) -> None:
        entity_type = self.entity_type(ctx)
        resource = self._get_instance(entity_type, ctx.id)
        if not self.datalayer.destroy(resource):
            raise DeleteError(f'Failed to delete "{entity_type.name}" id "{ctx.id}"')

    def list_relationship(self, ctx: RequestContext) -> Union[Collection, Any, None]:
        """
        :return: a Collection for to-many relationships, the associated resource (or None) for to-one relationships

        The query parameters only apply to to-many relationships, they are validated against the target type
        """
        handle = self._relationship(ctx)
        if handle.cardinality == Cardinality.TO_MANY:
            query = build_query(handle.target_type, ctx.offset, ctx.limit, ctx.order)
            return handle.get().find_all(query)
        return handle.get()

    def create_in_relationship(self, ctx: RequestContext) -> Any:
        """
        Create a resource of the relationship target type and associate it.
        The association is made before the target is saved: saving may persist the
        relationship as a side effect
        """
        handle = self._relationship(ctx)
        target_type = handle.target_type
        target = self.datalayer.create(target_type, extract_attributes(target_type, ctx.body))
        if handle.cardinality == Cardinality.TO_MANY:
            handle.append(target)
        else:
            handle.set(target)
        return self._save(target)

    def read_relationship_item(self, ctx: RequestContext) -> Any:
        handle = self._relationship(ctx)
        if handle.cardinality == Cardinality.TO_MANY:
            target = handle.get().find(ctx.relationship_id)
        else:
            target = handle.get()
            if target is not None and str(getattr(target, handle.target_type.identifier.name)) != str(ctx.relationship_id):
                target = None
        if target is None:
            raise NotFoundError(f'"{ctx.relationship}" has no "{handle.target_type.name}" with id "{ctx.relationship_id}"')
        return target
