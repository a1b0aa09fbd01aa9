"""
Common test fixtures.

Builds the Flask app from TestingConfig (in-memory SQLite), and provides
factories for users and listings plus a helper that authenticates requests
with a JWT minted for a given user.
"""
import itertools

import pytest
from flask_jwt_extended import create_access_token

from app import create_app
from extensions import db as _db
from app.models import User, Property, PropertyRequest


@pytest.fixture
def app():
    """Application with a fresh schema, kept inside an app context."""
    app = create_app('testing')
    with app.app_context():
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make(name=None, phone_number=None, **kwargs):
        n = next(counter)
        user = User(
            name=name or f"User {n}",
            email=f"user{n}@example.com",
            phone_number=phone_number,
            **kwargs,
        )
        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture
def make_property(db):
    counter = itertools.count(1)

    def _make(owner, title=None, **kwargs):
        n = next(counter)
        prop = Property(
            user_id=owner.id,
            title=title or f"Apartment {n}",
            slug=f"apartment-{n}",
            description="Two bedrooms, close to the metro",
            city="Santiago",
            **kwargs,
        )
        db.session.add(prop)
        db.session.commit()
        return prop

    return _make


@pytest.fixture
def make_request(db):
    counter = itertools.count(1)

    def _make(owner, title=None, **kwargs):
        n = next(counter)
        req = PropertyRequest(
            user_id=owner.id,
            title=title or f"Looking for a flat {n}",
            slug=f"looking-for-a-flat-{n}",
            description="Family of three",
            desired_location_city="Santiago",
            **kwargs,
        )
        db.session.add(req)
        db.session.commit()
        return req

    return _make


@pytest.fixture
def auth_headers(app):
    def _headers(user):
        token = create_access_token(identity=user.id)
        return {"Authorization": f"Bearer {token}"}

    return _headers
