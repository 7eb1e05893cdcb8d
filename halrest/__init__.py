# flake8: noqa: F401
#
# halrest exposes SQLAlchemy models as HAL (Hypertext Application Language) resources
#
from .halrest_init import DB, log, HALREST
from .errors import HALError, NotFoundError, BadRequestError, OrderError, ValidationError, DeleteError, GenericError
from .registry import EntityTypeRegistry, EntityTypeDescriptor, PropertyDescriptor, RelationshipDescriptor, Cardinality
from .query import Query, Collection, Direction, OrderDirection, build_query
from .base import HALBase
from .datalayer import DataAccessLayer, SQLAlchemyDataAccess
from .controller import ResourceController, RequestContext
from .hal import Representation, Link
from .serializer import HALSerializer
from .halrest_api import HALAPI
from .__about__ import __version__, __description__

__all__ = (
    "__version__",
    "__description__",
    #
    "HALAPI",
    "HALREST",
    "DB",
    # registry:
    "EntityTypeRegistry",
    "EntityTypeDescriptor",
    "PropertyDescriptor",
    "RelationshipDescriptor",
    "Cardinality",
    # query:
    "Query",
    "Collection",
    "Direction",
    "OrderDirection",
    "build_query",
    # data access:
    "HALBase",
    "DataAccessLayer",
    "SQLAlchemyDataAccess",
    # controller:
    "ResourceController",
    "RequestContext",
    # hal:
    "Representation",
    "Link",
    "HALSerializer",
    # Errors:
    "HALError",
    "NotFoundError",
    "BadRequestError",
    "OrderError",
    "ValidationError",
    "DeleteError",
    "GenericError",
)
