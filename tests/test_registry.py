import pytest
import sqlalchemy
from sqlalchemy.orm import DeclarativeBase
from halrest import Cardinality, EntityTypeRegistry, NotFoundError
from halrest.registry import pluralize, singularize, tableize, underscore
from conftest import Author, Book, Publisher


@pytest.mark.parametrize(
    "name, expected",
    [("Book", "book"), ("BookAuthor", "book_author"), ("HTTPLink", "http_link"), ("book-author", "book_author")],
)
def test_underscore(name: str, expected: str) -> None:
    assert underscore(name) == expected


def test_inflection() -> None:
    assert pluralize("book") == "books"
    assert pluralize("book_category") == "book_categories"
    assert singularize("people") == "person"
    assert singularize("book") == "book"
    assert tableize("BookCategory") == "book_categories"


def test_descriptors(registry: EntityTypeRegistry) -> None:
    assert len(registry) == 3
    book = registry.descriptor_for(Book)
    assert book.name == "Book"
    assert book.plural_name == "books"
    assert book.model is Book
    assert [prop.name for prop in book.properties] == ["id", "title", "pages", "published", "author_id", "publisher_id"]
    assert book.identifier.name == "id"
    assert book.get_property("title").kind == "str"
    assert book.get_property("author_id").is_foreign_key
    assert book.get_property("nonexistent") is None


def test_relationships(registry: EntityTypeRegistry) -> None:
    author = registry.descriptor_for(Author)
    book = registry.descriptor_for(Book)
    assert author.get_relationship("books").cardinality == Cardinality.TO_MANY
    assert author.get_relationship("books").target_type is book
    assert book.get_relationship("author").cardinality == Cardinality.TO_ONE
    assert book.get_relationship("publisher").target_type is registry.descriptor_for(Publisher)
    assert book.get_relationship("nonexistent") is None


def test_unregistered_relationship_target() -> None:
    registry = EntityTypeRegistry.from_models(Book)
    assert registry.descriptor_for(Book).relationships == ()


@pytest.mark.parametrize("segment", ["books", "Books", "book", " books ", "BOOKS"])
def test_resolve(registry: EntityTypeRegistry, segment: str) -> None:
    assert registry.resolve(segment).model is Book


@pytest.mark.parametrize("segment", ["magazines", "", "book_authors"])
def test_resolve_unknown(registry: EntityTypeRegistry, segment: str) -> None:
    with pytest.raises(NotFoundError):
        registry.resolve(segment)


def test_resolve_ambiguous() -> None:
    registry = EntityTypeRegistry.from_models(Book)
    duplicate = type(registry.descriptor_for(Book))(Book, ())
    with pytest.raises(NotFoundError):
        EntityTypeRegistry(list(registry) + [duplicate]).resolve("books")


def test_descriptor_for_instance(registry: EntityTypeRegistry) -> None:
    assert registry.descriptor_for(Author(name="Frank Herbert")).name == "Author"
    with pytest.raises(NotFoundError):
        registry.descriptor_for(object())


class CategoryBase(DeclarativeBase):
    pass


class BookCategory(CategoryBase):
    __tablename__ = "book_categories"
    id = sqlalchemy.Column(sqlalchemy.Integer, primary_key=True)
    name = sqlalchemy.Column(sqlalchemy.String)


@pytest.mark.parametrize("segment", ["book_categories", "book-categories", "BOOK_CATEGORIES", "book_category"])
def test_resolve_compound_name(segment: str) -> None:
    registry = EntityTypeRegistry.from_models(BookCategory)
    descriptor = registry.resolve(segment)
    assert descriptor.model is BookCategory
    assert descriptor.plural_name == "book_categories"


IRREGULAR_NAMES = ["Axis", "Analysis", "Criterion", "Person", "Cactus", "Index", "Status", "Bus", "Mouse", "Datum", "Quiz", "BookIndex"]


def test_resolve_own_plural_name() -> None:
    models = [
        type(name, (CategoryBase,), {"__tablename__": underscore(name), "id": sqlalchemy.Column(sqlalchemy.Integer, primary_key=True)})
        for name in IRREGULAR_NAMES
    ]
    registry = EntityTypeRegistry.from_models(*models)
    for descriptor in registry:
        # the self links are built from plural_name
        assert registry.resolve(descriptor.plural_name) is descriptor
    assert registry.resolve("axes").name == "Axis"
