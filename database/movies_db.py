"""PostgreSQL access for the movies table"""
import logging
import threading
from contextlib import contextmanager
from decimal import Decimal

from psycopg2.extras import RealDictCursor
from psycopg2.pool import ThreadedConnectionPool

logger = logging.getLogger(__name__)


def serialize_movie(movie_data):
    """Convert a movie row to a JSON-safe dict"""
    # NUMERIC columns come back as Decimal
    serialized = {}
    for key, value in movie_data.items():
        if isinstance(value, Decimal):
            serialized[key] = float(value)
        else:
            serialized[key] = value
    return serialized


class MoviesDB:
    """
    Owns the connection pool for the movie catalog.

    Built once at start-up and handed to the API layer. Every public
    method runs a single statement in its own transaction.
    """

    def __init__(self, host, port, database, user, password, minconn=1, maxconn=10):
        self._params = {
            'host': host,
            'port': port,
            'database': database,
            'user': user,
            'password': password
        }
        self._minconn = minconn
        self._maxconn = maxconn
        self._pool = None
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config):
        return cls(
            host=config.POSTGRES_HOST,
            port=config.POSTGRES_PORT,
            database=config.POSTGRES_DB,
            user=config.POSTGRES_USER,
            password=config.POSTGRES_PASSWORD,
            minconn=config.DB_POOL_MIN,
            maxconn=config.DB_POOL_MAX
        )

    def _get_pool(self):
        # Opened on first use so building the app never connects
        with self._lock:
            if self._pool is None:
                self._pool = ThreadedConnectionPool(self._minconn, self._maxconn, **self._params)
                logger.info(f"Database pool opened ({self._minconn}-{self._maxconn} connections)")
            return self._pool

    @contextmanager
    def cursor(self):
        pool = self._get_pool()
        conn = pool.getconn()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cursor:
                yield cursor
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            pool.putconn(conn)

    def close(self):
        if self._pool is not None and not self._pool.closed:
            self._pool.closeall()
            logger.info("Database pool closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def ping(self):
        with self.cursor() as cursor:
            cursor.execute("SELECT 1 AS test")
            return [dict(row) for row in cursor.fetchall()]

    def list_movies(self):
        with self.cursor() as cursor:
            cursor.execute("""
                SELECT id, name, type, rating, image_url
                FROM movies
                ORDER BY id DESC
            """)
            return [serialize_movie(row) for row in cursor.fetchall()]

    def get_movie(self, movie_id):
        with self.cursor() as cursor:
            cursor.execute("""
                SELECT id, name, type, rating, image_url
                FROM movies
                WHERE id = %s
            """, (movie_id,))
            movie = cursor.fetchone()

        return serialize_movie(movie) if movie else None

    def insert_movie(self, name, type_, rating, image_url):
        with self.cursor() as cursor:
            cursor.execute("""
                INSERT INTO movies (name, type, rating, image_url)
                VALUES (%s, %s, %s, %s)
                RETURNING id
            """, (name, type_, rating, image_url))
            return cursor.fetchone()['id']

    def update_movie(self, movie_id, name, type_, rating, image_url):
        with self.cursor() as cursor:
            cursor.execute("""
                UPDATE movies
                SET name = %s, type = %s, rating = %s, image_url = %s
                WHERE id = %s
            """, (name, type_, rating, image_url, movie_id))
            return cursor.rowcount

    def delete_movie(self, movie_id):
        with self.cursor() as cursor:
            cursor.execute("DELETE FROM movies WHERE id = %s", (movie_id,))
            return cursor.rowcount
