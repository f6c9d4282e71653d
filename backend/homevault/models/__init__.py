"""All models must be imported here so SQLAlchemy registers them."""

from homevault.models.core import House, Item, Room  # noqa: F401
from homevault.models.infrastructure import User  # noqa: F401
