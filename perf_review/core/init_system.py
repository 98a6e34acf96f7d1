import logging
from perf_review.core.config import settings
from perf_review.database import SessionLocal
from perf_review.models.user import User, UserRole
from perf_review.services import auth as auth_service

logger = logging.getLogger(__name__)


def init_system_data():
    """
    Creates the first admin account on an empty database when
    BOOTSTRAP_ADMIN_EMAIL and BOOTSTRAP_ADMIN_PASSWORD are configured.
    """
    if not (settings.bootstrap_admin_email and settings.bootstrap_admin_password):
        return

    db = SessionLocal()
    try:
        user_count = db.query(User).count()
        if user_count == 0:
            logger.info("Running startup initialization...")
            admin_user = User(
                email=settings.bootstrap_admin_email,
                name="Administrator",
                hashed_password=auth_service.get_password_hash(settings.bootstrap_admin_password),
                role=UserRole.ADMIN,
                is_active=True,
            )
            db.add(admin_user)
            db.commit()
            logger.info(f"✓ Created bootstrap admin: {settings.bootstrap_admin_email}")
        else:
            logger.info(f"System initialization check: {user_count} user(s) found.")
    except Exception as e:
        db.rollback()
        logger.error(f"Error during system initialization check: {str(e)}", exc_info=True)
    finally:
        db.close()
