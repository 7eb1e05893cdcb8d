import pytest
from flask import Flask
from halrest import DB, HALAPI, HALBase, SQLAlchemyDataAccess, ResourceController, HALSerializer


class Author(HALBase, DB.Model):
    """
    books is a lazy="dynamic" to-many relationship
    """

    __tablename__ = "authors"
    id = DB.Column(DB.Integer, primary_key=True)
    name = DB.Column(DB.String(64), nullable=False)
    books = DB.relationship("Book", back_populates="author", lazy="dynamic")


class Publisher(HALBase, DB.Model):
    """
    books is an instrumented list, publishers with books may not be deleted
    """

    __tablename__ = "publishers"
    id = DB.Column(DB.Integer, primary_key=True)
    name = DB.Column(DB.String(64), nullable=False)
    books = DB.relationship("Book", back_populates="publisher")

    def _hal_before_destroy(self):
        return not self.books


class Book(HALBase, DB.Model):
    __tablename__ = "books"
    id = DB.Column(DB.Integer, primary_key=True)
    title = DB.Column(DB.String(32), nullable=False)
    pages = DB.Column(DB.Integer)
    published = DB.Column(DB.Date)
    author_id = DB.Column(DB.Integer, DB.ForeignKey("authors.id"))
    author = DB.relationship("Author", back_populates="books")
    publisher_id = DB.Column(DB.Integer, DB.ForeignKey("publishers.id"))
    publisher = DB.relationship("Publisher", back_populates="books")

    def _hal_validate(self):
        messages = super()._hal_validate()
        if self.pages is not None and self.pages < 0:
            messages.append("Pages must not be negative")
        return messages


class Review(DB.Model):
    """
    Not exposed, a book with reviews can't be deleted: the review book_id can't be set to NULL
    """

    __tablename__ = "reviews"
    id = DB.Column(DB.Integer, primary_key=True)
    text = DB.Column(DB.String(256))
    book_id = DB.Column(DB.Integer, DB.ForeignKey("books.id"), nullable=False)
    book = DB.relationship("Book", backref="reviews")


@pytest.fixture
def app():
    app = Flask("halrest_test")
    app.config.update(SQLALCHEMY_DATABASE_URI="sqlite://", TESTING=True)
    DB.init_app(app)
    with app.app_context():
        DB.create_all()
        app.hal_api = HALAPI(app, prefix="/api", models=[Author, Book, Publisher])
        yield app
        DB.session.remove()
        DB.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def registry(app):
    return app.hal_api.registry


@pytest.fixture
def datalayer(app):
    return SQLAlchemyDataAccess()


@pytest.fixture
def controller(registry, datalayer):
    return ResourceController(registry, datalayer)


@pytest.fixture
def serializer(registry):
    return HALSerializer(registry)


@pytest.fixture
def library(app):
    """
    Frank Herbert wrote Dune and Children of Dune, Chilton published Dune
    """
    herbert = Author(name="Frank Herbert")
    chilton = Publisher(name="Chilton")
    dune = Book(title="Dune", pages=412, author=herbert, publisher=chilton)
    children = Book(title="Children of Dune", pages=444, author=herbert)
    DB.session.add_all([herbert, chilton, dune, children])
    DB.session.commit()
    return dict(herbert=herbert, chilton=chilton, dune=dune, children=children)
