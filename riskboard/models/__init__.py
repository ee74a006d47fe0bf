# riskboard/models/__init__.py
from riskboard.db.base import Base  # noqa: F401

from . import location       # noqa: F401
from . import employee       # noqa: F401
from . import hazard         # noqa: F401
from . import action_item    # noqa: F401
from . import notification   # noqa: F401
