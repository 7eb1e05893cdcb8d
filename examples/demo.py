#!/usr/bin/env python
#
# This demo application exposes authors, books and publishers as HAL resources
#
# run:
# $ FLASK_APP=demo flask run
#
# and browse to http://127.0.0.1:5000/api/authors/1/books?order=title+desc
#
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from halrest import HALBase, HALAPI

db = SQLAlchemy()


class Author(HALBase, db.Model):
    """
    description: Book author
    """

    __tablename__ = "authors"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    books = db.relationship("Book", back_populates="author", lazy="dynamic")


class Publisher(HALBase, db.Model):
    __tablename__ = "publishers"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    books = db.relationship("Book", back_populates="publisher")

    def _hal_before_destroy(self):
        # publishers can only be deleted when they have no books
        return not self.books


class Book(HALBase, db.Model):
    __tablename__ = "books"
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(128), nullable=False)
    published = db.Column(db.Date)
    author_id = db.Column(db.Integer, db.ForeignKey("authors.id"))
    author = db.relationship("Author", back_populates="books")
    publisher_id = db.Column(db.Integer, db.ForeignKey("publishers.id"))
    publisher = db.relationship("Publisher", back_populates="books")


def populate_db():
    herbert = Author(name="Frank Herbert")
    le_guin = Author(name="Ursula K. Le Guin")
    chilton = Publisher(name="Chilton Books")
    db.session.add_all(
        [
            Book(title="Dune", author=herbert, publisher=chilton),
            Book(title="Dune Messiah", author=herbert),
            Book(title="The Left Hand of Darkness", author=le_guin),
        ]
    )
    db.session.commit()


def create_api(app, prefix="/api"):
    api = HALAPI(app, prefix=prefix, DEFAULT_PAGE_LIMIT=10)
    api.expose(Author, Book, Publisher)
    return api


def create_app():
    app = Flask("demo_app")
    app.config.update(SQLALCHEMY_DATABASE_URI="sqlite://")
    db.init_app(app)
    with app.app_context():
        db.create_all()
        populate_db()
        create_api(app)
    return app


app = create_app()

if __name__ == "__main__":
    app.run()
