import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app import create_app
from config import Config


class FakeMoviesDB:
    """In-memory stand-in for MoviesDB"""

    def __init__(self):
        self.rows = {}
        self.next_id = 1
        self.fail_with = None
        self.closed = False

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    def ping(self):
        self._check()
        return [{'test': 1}]

    def list_movies(self):
        self._check()
        return [dict(self.rows[key]) for key in sorted(self.rows, reverse=True)]

    def get_movie(self, movie_id):
        self._check()
        row = self.rows.get(movie_id)
        return dict(row) if row else None

    def insert_movie(self, name, type_, rating, image_url):
        self._check()
        movie_id = self.next_id
        self.next_id += 1
        self.rows[movie_id] = {
            'id': movie_id,
            'name': name,
            'type': type_,
            'rating': rating,
            'image_url': image_url
        }
        return movie_id

    def update_movie(self, movie_id, name, type_, rating, image_url):
        self._check()
        if movie_id not in self.rows:
            return 0
        self.rows[movie_id].update(name=name, type=type_, rating=rating, image_url=image_url)
        return 1

    def delete_movie(self, movie_id):
        self._check()
        return 1 if self.rows.pop(movie_id, None) else 0

    def close(self):
        self.closed = True


@pytest.fixture
def fake_db():
    return FakeMoviesDB()


@pytest.fixture
def app_config(tmp_path):
    class TestConfig(Config):
        TESTING = True
        UPLOAD_FOLDER = str(tmp_path / 'uploads')
        UPLOAD_DELETE_REPLACED = False
        API_BASE_URL = 'http://api.test'

    return TestConfig


@pytest.fixture
def app(app_config, fake_db):
    return create_app(app_config, database=fake_db)


@pytest.fixture
def client(app):
    return app.test_client()
