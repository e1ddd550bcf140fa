from functools import wraps

from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request

from uems.exceptions import AuthenticationError, ForbiddenError
from uems.repositories import UserRepository


def get_current_user(optional: bool = False):
    """Load the user behind the bearer token.

    With ``optional`` a missing token yields None instead of an error, which
    public endpoints use to personalise their response.
    """
    verify_jwt_in_request(optional=optional)
    identity = get_jwt_identity()
    if identity is None:
        return None

    user = UserRepository.find_by_id(int(identity))
    if not user:
        raise AuthenticationError("Token is not valid")
    if not user.is_active:
        raise AuthenticationError("Account is deactivated")
    return user


def admin_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        user = get_current_user()
        if not user.is_admin:
            raise ForbiddenError("Access denied. Admin privileges required.")
        return fn(*args, **kwargs)

    return wrapper
