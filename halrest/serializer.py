# Entity -> HAL serialization
#
# An entity is represented with a self link, a link for each relationship and its properties.
# To-many relationship links reference the relationship sub-path ("authors/1/books"), to-one
# relationship links depend on the association: if there is none, the link references the
# sub-path ("books/1/author", a POST to it creates the association), otherwise it references
# the associated resource ("authors/1").
# Identifiers and foreign keys are not serialized as properties.
#
# A collection is represented by embedding the item representations under the pluralized
# name of the item type, with a link to each item and the paging properties offset, limit and size.
#
from typing import Any, Optional
from .hal import Representation, SELF_REL
from .query import Collection
from .registry import Cardinality, EntityTypeRegistry


class HALSerializer:
    def __init__(self, registry: EntityTypeRegistry) -> None:
        self.registry = registry

    def self_href(self, resource: Any) -> str:
        """
        :return: "<plural type name>/<id>", e.g. "books/1"
        """
        entity_type = self.registry.descriptor_for(resource)
        identifier = entity_type.identifier
        return f"{entity_type.plural_name}/{getattr(resource, identifier.name)}"

    def serialize_resource(self, resource: Any) -> Representation:
        """
        :param resource: persisted entity
        :return: HAL representation
        """
        entity_type = self.registry.descriptor_for(resource)
        representation = Representation()
        self_href = self.self_href(resource)
        representation.with_link(SELF_REL, self_href)

        for relationship in entity_type.relationships:
            href = f"{self_href}/{relationship.name}"
            if relationship.cardinality == Cardinality.TO_ONE:
                association = getattr(resource, relationship.name)
                if association is not None:
                    href = self.self_href(association)
            representation.with_link(relationship.name, href)

        for prop in entity_type.properties:
            if prop.is_identifier or prop.is_foreign_key:
                continue
            representation.with_property(prop.name, getattr(resource, prop.name))

        return representation

    def serialize_collection(self, collection: Collection, self_href: Optional[str] = None) -> Representation:
        """
        :param collection: query result
        :param self_href: request path, the self link is only added if it's provided
        :return: HAL representation
        """
        representation = Representation()
        if self_href:
            representation.with_link(SELF_REL, self_href)

        rel = collection.entity_type.plural_name
        representation.with_link_list(rel)
        representation.with_embedded(rel)
        for resource in collection:
            resource_representation = self.serialize_resource(resource)
            representation.with_link(rel, resource_representation.link.href)
            representation.with_representation(rel, resource_representation)

        representation.with_property("size", collection.size)
        representation.with_property("offset", collection.offset)
        representation.with_property("limit", collection.limit)
        return representation
