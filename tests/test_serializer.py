import datetime
from halrest import Collection, RequestContext
from conftest import Author, Book


def test_book(serializer, library) -> None:
    dune = library["dune"]
    dune.published = datetime.date(1965, 8, 1)
    representation = serializer.serialize_resource(dune).to_dict()
    assert representation == {
        "_links": {"self": {"href": "books/1"}, "author": {"href": "authors/1"}, "publisher": {"href": "publishers/1"}},
        "title": "Dune",
        "pages": 412,
        "published": datetime.date(1965, 8, 1),
    }
    assert list(representation) == ["_links", "title", "pages", "published"]


def test_to_one_link(serializer, library) -> None:
    children = library["children"]
    # without association the link references the relationship path
    assert serializer.serialize_resource(children).get_link("publisher").href == "books/2/publisher"
    children.publisher = library["chilton"]
    assert serializer.serialize_resource(children).get_link("publisher").href == "publishers/1"


def test_to_many_link(serializer, library) -> None:
    representation = serializer.serialize_resource(library["herbert"])
    assert representation.get_link("books").href == "authors/1/books"
    assert representation.to_dict()["name"] == "Frank Herbert"
    assert "id" not in representation.to_dict()


def test_empty_relationship_collection(serializer, controller, library) -> None:
    author = Author(name="Ursula K. Le Guin")
    controller.datalayer.save(author)
    collection = controller.list_relationship(RequestContext("authors", id=str(author.id), relationship="books"))
    assert serializer.serialize_collection(collection).to_dict() == {
        "offset": 0,
        "limit": 30,
        "size": 0,
        "_embedded": {"books": []},
    }


def test_collection_self_link(serializer, registry, library) -> None:
    collection = Collection(registry.descriptor_for(Book), (library["dune"],))
    representation = serializer.serialize_collection(collection, "/api/books").to_dict()
    assert representation["_links"] == {"self": {"href": "/api/books"}, "books": [{"href": "books/1"}]}
    assert representation["_embedded"]["books"][0]["title"] == "Dune"
