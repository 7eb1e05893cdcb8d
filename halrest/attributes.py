# Attribute filtering: only writable scalar attributes are passed to create/update,
# identifiers and foreign keys are never assigned from request parameters
#
from typing import Any, Dict, Mapping, Tuple
from .registry import EntityTypeDescriptor, PropertyDescriptor


def writable_attributes(entity_type: EntityTypeDescriptor) -> Tuple[PropertyDescriptor, ...]:
    """
    :param entity_type: entity type descriptor
    :return: the properties that may be set by the client (all properties except the identifier and foreign keys)
    """
    return tuple(prop for prop in entity_type.properties if not (prop.is_identifier or prop.is_foreign_key))


def extract_attributes(entity_type: EntityTypeDescriptor, raw_params: Mapping[str, Any]) -> Dict[str, Any]:
    """
    :param entity_type: entity type descriptor
    :param raw_params: untyped request parameters, unknown keys are dropped
    :return: name -> value for the writable attributes present in raw_params
    """
    if not raw_params:
        return {}
    return {prop.name: raw_params[prop.name] for prop in writable_attributes(entity_type) if prop.name in raw_params}
