import logging

from netline import db
from netline.models import User, RoleType

logger = logging.getLogger(__name__)


def authenticate(username: str, password: str):
    """
    Return the active SYSTEM_ADMINISTRATOR matching the credentials, else None.

    Unknown username, wrong password and non-admin accounts are
    indistinguishable to the caller.
    """
    if not username or not password:
        return None
    user = User.query.filter_by(username=username.strip()).first()
    if user is None or not user.is_active or not user.is_system_administrator:
        return None
    if not user.check_password(password):
        return None
    return user


def create_staff_user(username, password, role=RoleType.SYSTEM_ADMINISTRATOR, complete_name=None):
    """
    Create a staff account. Returns (user, created).

    An existing username is returned untouched with ``created`` False.
    """
    existing = User.query.filter_by(username=username).first()
    if existing:
        logger.info("User '%s' already exists.", username)
        return existing, False

    try:
        user = User(
            username=username,
            complete_name=complete_name or username,
            role=role,
            is_active=True,
        )
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.error("Error creating staff user '%s'", username, exc_info=True)
        raise

    logger.info("Staff user '%s' (%s) created.", username, role.value)
    return user, True
