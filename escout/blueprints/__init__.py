from .auth import auth_bp  # noqa: F401
from .errors import register_error_handlers  # noqa: F401
