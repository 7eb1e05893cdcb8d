import pytest
from halrest import Cardinality, DB, NotFoundError, build_query
from halrest.relationships import RelatedCollection, ToManyHandle, ToOneHandle, resolve_relationship
from conftest import Author, Book


def test_resolve_relationship(registry, datalayer, library) -> None:
    handle = resolve_relationship(registry, library["herbert"], "books", datalayer)
    assert isinstance(handle, ToManyHandle)
    assert handle.cardinality == Cardinality.TO_MANY
    assert handle.target_type is registry.descriptor_for(Book)

    handle = resolve_relationship(registry, library["dune"], "author", datalayer)
    assert isinstance(handle, ToOneHandle)
    assert handle.get() is library["herbert"]

    with pytest.raises(NotFoundError):
        resolve_relationship(registry, library["dune"], "reviews", datalayer)


def test_to_one_set(registry, datalayer, library) -> None:
    handle = resolve_relationship(registry, library["children"], "publisher", datalayer)
    assert handle.get() is None
    handle.set(library["chilton"])
    DB.session.flush()
    assert library["children"].publisher_id == library["chilton"].id


def test_to_many_find_all(registry, datalayer, library) -> None:
    handle = resolve_relationship(registry, library["herbert"], "books", datalayer)
    related = handle.get()
    assert isinstance(related, RelatedCollection)
    collection = related.find_all(build_query(handle.target_type, order_tokens=["title"]))
    assert [book.title for book in collection] == ["Children of Dune", "Dune"]
    collection = related.find_all(build_query(handle.target_type, offset=1, limit=1, order_tokens=["title"]))
    assert [book.title for book in collection] == ["Dune"]
    assert collection.entity_type is handle.target_type


def test_to_many_find(registry, datalayer, library) -> None:
    other = Book(title="The Left Hand of Darkness")
    DB.session.add(other)
    DB.session.flush()
    related = resolve_relationship(registry, library["herbert"], "books", datalayer).get()
    assert related.find(str(library["dune"].id)) is library["dune"]
    # only members of the relationship are found
    assert related.find(str(other.id)) is None
    assert related.find("not-a-number") is None


def test_to_many_append(registry, datalayer, library) -> None:
    author = Author(name="Ursula K. Le Guin")
    DB.session.add(author)
    DB.session.flush()
    handle = resolve_relationship(registry, author, "books", datalayer)
    handle.append(Book(title="The Dispossessed"))
    DB.session.flush()
    assert [book.title for book in author.books] == ["The Dispossessed"]


def test_to_many_instrumented_list(registry, datalayer, library) -> None:
    chilton = library["chilton"]
    handle = resolve_relationship(registry, chilton, "books", datalayer)
    handle.append(library["children"])
    DB.session.flush()
    collection = handle.get().find_all(build_query(handle.target_type, order_tokens=["id desc"]))
    assert [book.title for book in collection] == ["Children of Dune", "Dune"]
