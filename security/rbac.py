from functools import wraps

from services.errors import Forbidden, Unauthorized
from utils.auth_context import current_user


def require_role(minimum: str):
    """
    Usage: @require_role("admin")  (admins and superadmins pass)
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user = current_user()
            if user is None:
                raise Unauthorized()
            if not user.has_role(minimum):
                raise Forbidden()
            return fn(*args, **kwargs)
        return wrapper
    return decorator
