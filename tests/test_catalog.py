"""
halrest without flask: the controller and the serializer used with a plain sqla session
"""
import pytest
import sqlalchemy
from sqlalchemy.orm import DeclarativeBase, Session
from halrest import EntityTypeRegistry, HALSerializer, RequestContext, ResourceController, SQLAlchemyDataAccess


class CatalogBase(DeclarativeBase):
    pass


class Book(CatalogBase):
    __tablename__ = "books"
    id = sqlalchemy.Column(sqlalchemy.Integer, primary_key=True)
    title = sqlalchemy.Column(sqlalchemy.String, nullable=False)


@pytest.fixture
def catalog():
    engine = sqlalchemy.create_engine("sqlite://")
    CatalogBase.metadata.create_all(engine)
    registry = EntityTypeRegistry.from_models(Book)
    with Session(engine) as session:
        yield ResourceController(registry, SQLAlchemyDataAccess(session)), HALSerializer(registry)


def test_create_and_serialize(catalog) -> None:
    controller, serializer = catalog
    book = controller.create_in_collection(RequestContext("books", body={"title": "Dune"}))
    assert serializer.serialize_resource(book).to_dict() == {"_links": {"self": {"href": "books/1"}}, "title": "Dune"}


def test_collection(catalog) -> None:
    controller, serializer = catalog
    controller.create_in_collection(RequestContext("Books", body={"title": "Dune"}))
    collection = controller.list_collection(RequestContext("books"))
    assert serializer.serialize_collection(collection).to_dict() == {
        "_links": {"books": [{"href": "books/1"}]},
        "_embedded": {"books": [{"_links": {"self": {"href": "books/1"}}, "title": "Dune"}]},
        "size": 1,
        "offset": 0,
        "limit": 30,
    }
