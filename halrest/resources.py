#  This file contains the flask-restful "Resource" objects that dispatch the requests to the controller:
#  - CollectionResource: /<type>
#  - ItemResource: /<type>/<id>
#  - RelationshipResource: /<type>/<id>/<relationship>
#  - RelationshipItemResource: /<type>/<id>/<relationship>/<relationship_id>
#
# The resources translate the flask request into a RequestContext and the controller results
# into HAL representations, the http_method_decorator (cfr. halrest_api.api_decorator)
# commits the transaction and formats the errors.
#
# pylint: disable=redefined-builtin,invalid-name
#
from http import HTTPStatus
from flask import current_app, request, url_for
from flask_restful import Resource as FRResource
from .controller import RequestContext
from .errors import NotFoundError
from .query import Collection


class Resource(FRResource):
    """
    Superclass for the exposed endpoints
    """

    def __init__(self, api) -> None:
        """
        :param api: the HALAPI that registered the resource
        """
        self.api = api

    @property
    def controller(self):
        return self.api.controller

    @property
    def serializer(self):
        return self.api.serializer

    def context(self, **path_params) -> RequestContext:
        """
        :param path_params: the url path parameters (type_segment, id, relationship, relationship_id)
        :return: request context with the query args (GET) or the body params (POST, PATCH, PUT)
        """
        if request.method == "GET":
            return RequestContext(offset=request.offset, limit=request.limit, order=request.order, **path_params)
        return RequestContext(body=request.get_body_params(), **path_params)

    def created(self, resource):
        """
        :return: 201 response with the representation of the created resource and its location
        """
        entity_type = self.api.registry.descriptor_for(resource)
        id = getattr(resource, entity_type.identifier.name)
        location = url_for("hal_item", type_segment=entity_type.plural_name, id=id)
        return self.serializer.serialize_resource(resource), HTTPStatus.CREATED, {"Location": location}

    def render(self, result):
        """
        :param result: a Collection or a resource
        :return: HAL representation
        """
        if isinstance(result, Collection):
            return self.serializer.serialize_collection(result, request.path)
        return self.serializer.serialize_resource(result)


class CollectionResource(Resource):
    def get(self, type_segment):
        """
        Retrieve a page of the collection, ?offset=0&limit=30&order=title+desc
        """
        collection = self.controller.list_collection(self.context(type_segment=type_segment))
        return self.render(collection), HTTPStatus.OK

    def post(self, type_segment):
        """
        Create an item from the body params
        """
        resource = self.controller.create_in_collection(self.context(type_segment=type_segment))
        return self.created(resource)


class ItemResource(Resource):
    def get(self, type_segment, id):
        resource = self.controller.read_item(self.context(type_segment=type_segment, id=id))
        return self.render(resource), HTTPStatus.OK

    def patch(self, type_segment, id):
        """
        Update the attributes given in the body params
        """
        resource = self.controller.update_item(self.context(type_segment=type_segment, id=id))
        return self.render(resource), HTTPStatus.OK

    put = patch

    def delete(self, type_segment, id):
        self.controller.delete_item(self.context(type_segment=type_segment, id=id))
        return current_app.response_class(status=HTTPStatus.NO_CONTENT)


class RelationshipResource(Resource):
    def get(self, type_segment, id, relationship):
        """
        to-many relationships return a collection, to-one relationships return the related item
        """
        ctx = self.context(type_segment=type_segment, id=id, relationship=relationship)
        result = self.controller.list_relationship(ctx)
        if result is None:
            raise NotFoundError(f'"{type_segment}/{id}" has no "{relationship}"')
        return self.render(result), HTTPStatus.OK

    def post(self, type_segment, id, relationship):
        """
        Create an item and add it to the relationship
        """
        ctx = self.context(type_segment=type_segment, id=id, relationship=relationship)
        resource = self.controller.create_in_relationship(ctx)
        return self.created(resource)


class RelationshipItemResource(Resource):
    def get(self, type_segment, id, relationship, relationship_id):
        ctx = self.context(type_segment=type_segment, id=id, relationship=relationship, relationship_id=relationship_id)
        return self.render(self.controller.read_relationship_item(ctx)), HTTPStatus.OK
