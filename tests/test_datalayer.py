from halrest import DB, build_query
from halrest.base import validate_columns
from conftest import Author, Book, Publisher, Review


def test_find_all(datalayer, registry, library) -> None:
    book_type = registry.descriptor_for(Book)
    books = datalayer.find_all(book_type, build_query(book_type, order_tokens=["pages desc"]))
    assert [book.pages for book in books] == [444, 412]


def test_get(datalayer, registry, library) -> None:
    author_type = registry.descriptor_for(Author)
    assert datalayer.get(author_type, str(library["herbert"].id)) is library["herbert"]
    assert datalayer.get(author_type, "42") is None
    assert datalayer.get(author_type, "herbert") is None


def test_save_and_errors(datalayer, registry) -> None:
    author = datalayer.create(registry.descriptor_for(Author), {"name": None})
    assert not datalayer.save(author)
    assert datalayer.errors(author) == ["Name must not be blank"]
    datalayer.assign(author, {"name": "Frank Herbert"})
    assert datalayer.save(author)
    assert datalayer.errors(author) == []
    assert author.id is not None


def test_destroy(datalayer, library) -> None:
    # publishers refuse to be destroyed while they have books
    assert not datalayer.destroy(library["chilton"])
    library["dune"].publisher = None
    assert datalayer.destroy(library["chilton"])
    DB.session.flush()
    assert DB.session.query(Publisher).count() == 0


def test_validate_columns() -> None:
    # foreign keys are set when the relationships are flushed, they're not validated
    assert validate_columns(Book(title="Dune")) == []
    assert validate_columns(Book(title="D" * 33)) == ["Title must be at most 32 characters long"]


def test_destroy_integrity_error(datalayer, library) -> None:
    dune_id = library["dune"].id
    DB.session.add(Review(text="A masterpiece", book=library["dune"]))
    DB.session.commit()
    # the reviews.book_id NOT NULL constraint fails when the book is deleted
    assert not datalayer.destroy(library["dune"])
    assert DB.session.get(Book, dune_id).title == "Dune"
    assert DB.session.query(Review).count() == 1
