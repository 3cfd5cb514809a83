"""Shared SQLAlchemy base declarative class and model imports."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models."""


# Import model modules so metadata is populated before create_all.
from restohub.models import audit_log as _audit_log  # noqa: E402,F401
from restohub.models import customer as _customer  # noqa: E402,F401
from restohub.models import deferred_job as _deferred_job  # noqa: E402,F401
from restohub.models import inventory as _inventory  # noqa: E402,F401
from restohub.models import recipe as _recipe  # noqa: E402,F401
from restohub.models import sale as _sale  # noqa: E402,F401
from restohub.models import schedule as _schedule  # noqa: E402,F401
from restohub.models import staff as _staff  # noqa: E402,F401
