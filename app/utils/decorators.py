from functools import wraps
from flask import current_app
from sqlalchemy.exc import OperationalError, InterfaceError, TimeoutError as PoolTimeoutError
from extensions import db
from app.errors import StorageError


def storage_guard(fn):
    """Translate store outages into StorageError after rolling the session back"""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except (OperationalError, InterfaceError, PoolTimeoutError) as e:
            db.session.rollback()
            current_app.logger.error(f'Storage failure in {fn.__qualname__}: {str(e)}')
            raise StorageError() from e
    return wrapper
