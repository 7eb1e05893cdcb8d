# flask_restful API subclass
from collections import OrderedDict
from functools import wraps
from http import HTTPStatus
import logging
from typing import Callable
import werkzeug
from flask import current_app, make_response
from flask.app import Flask
from flask_restful import Api as FRApiBase, abort
from flask_restful.utils import cors, unpack
from werkzeug.wrappers import Response as ResponseBase
import halrest
from .config import get_config
from .controller import ResourceController
from .datalayer import DataAccessLayer, SQLAlchemyDataAccess
from .errors import HALError
from .hal import HAL_MEDIATYPE, Representation
from .json_encoder import HALJSONProvider
from .registry import EntityTypeRegistry
from .resources import CollectionResource, ItemResource, RelationshipItemResource, RelationshipResource
from .serializer import HALSerializer

HTTP_METHODS = ["GET", "POST", "PATCH", "DELETE", "PUT"]


def output_hal(data, code, headers=None):
    """
    Flask-RESTful representation function: HAL representations and error documents to json
    """
    if isinstance(data, Representation):
        data = data.to_dict(get_config("HAL_URL_ROOT"))
    response = make_response(current_app.json.dumps(data), code)
    response.headers.extend(headers or {})
    return response


# the first mediatype is used when the client accepts anything
DEFAULT_REPRESENTATIONS = [(HAL_MEDIATYPE, output_hal), ("application/json", output_hal)]


class HALAPI(FRApiBase):
    """
    Subclass of the flask_restful API class where we add the expose method:
    exposed models are served by the generic collection, item and relationship endpoints

        /<type>
        /<type>/<id>
        /<type>/<id>/<relationship>
        /<type>/<id>/<relationship>/<relationship_id>
    """

    def __init__(
        self,
        app: Flask,
        prefix: str = "",
        models=(),
        datalayer: DataAccessLayer = None,
        app_db=None,
        **kwargs,
    ) -> None:
        """
        :param app: flask app
        :param prefix: url prefix of the endpoints, e.g. "/api"
        :param models: sqla models to expose, more models can be exposed with `expose`
        :param datalayer: data-access layer, default SQLAlchemyDataAccess on the app db session
        :param app_db: flask_sqlalchemy db, taken from the app extensions if not set
        :param kwargs: HALREST configuration, e.g. DEFAULT_PAGE_LIMIT=10
        """
        halrest.HALREST(app, app_db=app_db, **kwargs)
        # the 404 help message would be added to our error documents
        app.config.setdefault("ERROR_404_HELP", False)
        super().__init__(app, prefix=prefix, default_mediatype=HAL_MEDIATYPE)
        app.json = HALJSONProvider(app)
        self.representations = OrderedDict(DEFAULT_REPRESENTATIONS)
        self.datalayer = datalayer or SQLAlchemyDataAccess()
        self._models = []
        self.registry = EntityTypeRegistry()
        self.controller = ResourceController(self.registry, self.datalayer)
        self.serializer = HALSerializer(self.registry)

        # keyword settings are stored in the app config, there may be no app context yet
        cors_domain = app.config.get("cors_domain", get_config("cors_domain"))
        resource_kwargs = {"api": self}
        for resource, url, endpoint in [
            (CollectionResource, "/<string:type_segment>", "hal_collection"),
            (ItemResource, "/<string:type_segment>/<string:id>", "hal_item"),
            (RelationshipResource, "/<string:type_segment>/<string:id>/<string:relationship>", "hal_relationship"),
            (
                RelationshipItemResource,
                "/<string:type_segment>/<string:id>/<string:relationship>/<string:relationship_id>",
                "hal_relationship_item",
            ),
        ]:
            # decorate a subclass, the resource classes are shared by all the apps
            api_class = api_decorator(type(f"{resource.__name__}_API", (resource,), {}), cors_domain)
            self.add_resource(api_class, url, endpoint=endpoint, resource_class_kwargs=resource_kwargs)

        self.expose(*models)

    def expose_object(self, model) -> None:
        """This method adds a model to the entity type registry
        :param model: sqla model class

        The registry is immutable, a new registry is built with the previously exposed models and `model`
        """
        if model in self._models:
            halrest.log.warning(f"{model.__name__} is exposed already")
            return
        self._models.append(model)
        self.registry = EntityTypeRegistry.from_models(*self._models)
        self.controller = ResourceController(self.registry, self.datalayer)
        self.serializer = HALSerializer(self.registry)
        descriptor = self.registry.descriptor_for(model)
        relationships = ", ".join(f"{rel.name} ({rel.cardinality.value})" for rel in descriptor.relationships)
        halrest.log.info(f"Exposing {descriptor.name} on {self.prefix}/{descriptor.plural_name}, relationships: {relationships}")

    def expose(self, *models) -> None:
        """
        Expose multiple models at once
        """
        for model in models:
            self.expose_object(model)


def api_decorator(cls, cors_domain=None):
    """Decorator for the API views:
        - add cors
        - add generic exception handling

    :param cls: The class that will be decorated (e.g. CollectionResource)
    :param cors_domain: allowed origin, no cors headers are added if not set
    :return: decorated class
    """
    for method_name in HTTP_METHODS:
        method = getattr(cls, method_name.lower(), None)
        if not method:
            continue
        decorated_method = method
        # Add cors
        if cors_domain is not None:
            decorated_method = cors.crossdomain(origin=cors_domain)(hal_response(decorated_method))
        # Add exception handling
        decorated_method = http_method_decorator(decorated_method)
        setattr(cls, method_name.lower(), decorated_method)
    return cls


def hal_response(fun: Callable) -> Callable:
    """
    Build the response of a resource method, crossdomain adds its headers to a flask response
    :param fun: resource method returning a representation, status and headers
    :return: wrapped fun
    """

    @wraps(fun)
    def method_wrapper(self, *args, **kwargs):
        result = fun(self, *args, **kwargs)
        if isinstance(result, ResponseBase):
            return result
        data, code, headers = unpack(result)
        return self.api.make_response(data, code, headers=headers)

    return method_wrapper


def http_method_decorator(fun: Callable) -> Callable:
    """Decorator for the HTTP methods (get, post, patch, put, delete)
    - commit the database
    - convert all exceptions to a JSON serializable error document

    This method will be called for all requests
    :param fun:
    :return: wrapped fun
    """

    @wraps(fun)
    def method_wrapper(*args, **kwargs):
        """Wrap the method and perform error handling
        :param *args:
        :param **kwargs:
        :return: result of the wrapped method
        """
        status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
        try:
            result = fun(*args, **kwargs)
            halrest.DB.session.commit()
            return result

        except HALError as exc:
            # the halrest errors have been logged when they were raised
            status_code = exc.status_code
            body = exc.to_dict()

        except werkzeug.exceptions.HTTPException as exc:
            status_code = exc.code
            body = {"error": exc.description}
            halrest.log.error(exc.description)

        except Exception as exc:
            halrest.log.exception(exc)
            if halrest.log.getEffectiveLevel() > logging.DEBUG:
                body = {"error": "Logging Disabled"}
            else:
                body = {"error": str(exc)}

        halrest.DB.session.rollback()
        abort(status_code, **body)

    return method_wrapper
