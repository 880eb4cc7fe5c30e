from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from flask import Response, request
import time
import functools


REQUEST_COUNT = Counter(
    'flask_request_count',
    'Total Flask Request Count',
    ['method', 'endpoint', 'http_status']
)

REQUEST_DURATION = Histogram(
    'flask_request_duration_seconds',
    'Flask Request Duration',
    ['method', 'endpoint']
)


MOVIE_WRITES = Counter(
    'movie_catalog_writes_total',
    'Movie rows written',
    ['operation']
)

UPLOAD_COUNT = Counter(
    'movie_catalog_uploads_total',
    'Image files stored by the upload handler'
)


def _status_code(response):
    # Views may return (body, status) tuples
    if isinstance(response, tuple):
        return response[1] if len(response) > 1 else 200
    return getattr(response, 'status_code', 200)


def track_request(f):
    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        start_time = time.time()

        try:
            response = f(*args, **kwargs)
        except Exception:
            REQUEST_COUNT.labels(
                method=request.method,
                endpoint=f.__name__,
                http_status=500
            ).inc()
            raise

        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=f.__name__,
            http_status=_status_code(response)
        ).inc()

        REQUEST_DURATION.labels(
            method=request.method,
            endpoint=f.__name__
        ).observe(time.time() - start_time)

        return response

    return wrapper


def metrics_endpoint():
    return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)
