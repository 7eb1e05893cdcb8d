# Data-access layer
#
# The resource controller doesn't query the database itself, it uses a DataAccessLayer:
# typed CRUD operations and query execution. SQLAlchemyDataAccess implements it with the
# (Flask-)SQLAlchemy session.
#
# Writes are flushed, not committed: the transaction is committed (or rolled back) by the
# http_method_decorator at the end of the request.
#
from typing import Any, Dict, List, Optional
import sqlalchemy
import sqlalchemy.exc
from sqlalchemy.orm import with_parent
import halrest
from .attr_parse import parse_attr
from .base import validate_columns
from .query import Direction, Query
from .registry import EntityTypeDescriptor, RelationshipDescriptor


class DataAccessLayer:
    """
    Interface of the storage engine used by the resource controller
    """

    def find_all(self, entity_type: EntityTypeDescriptor, query: Query) -> List[Any]:
        """
        :return: the resources of entity_type, ordered and paged as specified by the query
        """
        raise NotImplementedError

    def get(self, entity_type: EntityTypeDescriptor, id: str) -> Optional[Any]:
        """
        :return: the resource with the given id or None
        """
        raise NotImplementedError

    def create(self, entity_type: EntityTypeDescriptor, attributes: Dict[str, Any]) -> Any:
        """
        :return: new (unsaved) resource
        """
        raise NotImplementedError

    def assign(self, resource: Any, attributes: Dict[str, Any]) -> Any:
        """
        Set the attribute values of an existing resource, they're persisted by `save`
        """
        raise NotImplementedError

    def save(self, resource: Any) -> bool:
        """
        :return: False if the resource is invalid, the messages are available with `errors`
        """
        raise NotImplementedError

    def destroy(self, resource: Any) -> bool:
        """
        :return: False if the resource could not be destroyed
        """
        raise NotImplementedError

    def errors(self, resource: Any) -> List[str]:
        """
        :return: the messages of the last failed save
        """
        raise NotImplementedError

    def find_all_related(self, resource: Any, relationship: RelationshipDescriptor, query: Query) -> List[Any]:
        """
        :return: the resources in the to-many relationship of resource, ordered and paged as specified by the query
        """
        raise NotImplementedError

    def find_related(self, resource: Any, relationship: RelationshipDescriptor, id: str) -> Optional[Any]:
        """
        :return: the resource with the given id if it's in the relationship of resource, None otherwise
        """
        raise NotImplementedError


class SQLAlchemyDataAccess(DataAccessLayer):
    """
    DataAccessLayer implementation on top of an SQLAlchemy session
    """

    def __init__(self, session=None) -> None:
        """
        :param session: sqla session, halrest.DB.session is used if not set
        """
        self._session = session

    @property
    def session(self):
        if self._session is not None:
            return self._session
        return halrest.DB.session

    @staticmethod
    def coerce_id(entity_type: EntityTypeDescriptor, id: Any) -> Any:
        """
        Convert the id from the url path to the primary key type
        :return: primary key value or None if the id is invalid
        """
        identifier = entity_type.identifier
        column = sqlalchemy.inspect(entity_type.model).columns.get(identifier.name) if identifier else None
        if column is None:
            return id
        try:
            return parse_attr(column, id)
        except (TypeError, ValueError):
            halrest.log.debug(f'Invalid "{entity_type.name}" id "{id}"')
            return None

    @staticmethod
    def _apply(sqla_query, entity_type: EntityTypeDescriptor, query: Query) -> List[Any]:
        """
        Apply the order directions and paging of the query, then execute it
        """
        model = entity_type.model
        for order_direction in query.order:
            attr = getattr(model, order_direction.property.name)
            sqla_query = sqla_query.order_by(attr.desc() if order_direction.direction == Direction.DESC else attr.asc())
        if not query.order:
            # stable paging, some engines (mssql) also require an order_by when using an offset
            sqla_query = sqla_query.order_by(*sqlalchemy.inspect(model).primary_key)
        return sqla_query.offset(query.offset).limit(query.limit).all()

    def find_all(self, entity_type: EntityTypeDescriptor, query: Query) -> List[Any]:
        return self._apply(self.session.query(entity_type.model), entity_type, query)

    def get(self, entity_type: EntityTypeDescriptor, id: str) -> Optional[Any]:
        primary_key = self.coerce_id(entity_type, id)
        if primary_key is None:
            return None
        return self.session.get(entity_type.model, primary_key)

    def create(self, entity_type: EntityTypeDescriptor, attributes: Dict[str, Any]) -> Any:
        resource = entity_type.model()
        return self.assign(resource, attributes)

    def assign(self, resource: Any, attributes: Dict[str, Any]) -> Any:
        columns = sqlalchemy.inspect(type(resource)).columns
        parse_errors = []
        for attr_name, attr_val in attributes.items():
            column = columns.get(attr_name)
            if column is not None:
                try:
                    attr_val = parse_attr(column, attr_val)
                except (TypeError, ValueError) as exc:
                    halrest.log.debug(f"{type(resource).__name__}.{attr_name}: {exc}")
                    parse_errors.append(f'{attr_name.replace("_", " ").capitalize()} is invalid')
                    continue
            setattr(resource, attr_name, attr_val)
        resource._hal_parse_errors = parse_errors
        return resource

    def save(self, resource: Any) -> bool:
        messages = list(getattr(resource, "_hal_parse_errors", ()))
        validate = getattr(resource, "_hal_validate", None)
        messages += validate() if callable(validate) else validate_columns(resource)
        resource._hal_errors = messages
        if messages:
            halrest.log.info(f"Not saving invalid {type(resource).__name__}: {messages}")
            return False
        self.session.add(resource)
        self.session.flush()
        return True

    def destroy(self, resource: Any) -> bool:
        before_destroy = getattr(resource, "_hal_before_destroy", None)
        if callable(before_destroy) and not before_destroy():
            halrest.log.info(f"Destroy refused for {resource}")
            return False
        try:
            self.session.delete(resource)
            self.session.flush()
        except sqlalchemy.exc.IntegrityError as exc:
            # e.g. other rows still reference the resource
            halrest.log.warning(f"Destroy failed for {resource}: {exc}")
            self.session.rollback()
            return False
        return True

    def errors(self, resource: Any) -> List[str]:
        return list(getattr(resource, "_hal_errors", ()))

    def _related_query(self, resource: Any, relationship: RelationshipDescriptor):
        relationship_attr = getattr(type(resource), relationship.name)
        return self.session.query(relationship.target_type.model).filter(with_parent(resource, relationship_attr))

    def find_all_related(self, resource: Any, relationship: RelationshipDescriptor, query: Query) -> List[Any]:
        return self._apply(self._related_query(resource, relationship), relationship.target_type, query)

    def find_related(self, resource: Any, relationship: RelationshipDescriptor, id: str) -> Optional[Any]:
        target_type = relationship.target_type
        primary_key = self.coerce_id(target_type, id)
        if primary_key is None:
            return None
        pk_column = getattr(target_type.model, target_type.identifier.name)
        return self._related_query(resource, relationship).filter(pk_column == primary_key).one_or_none()
