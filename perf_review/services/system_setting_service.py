from typing import List, Optional

from sqlalchemy.orm import Session

from perf_review.models.system_setting import SystemSetting


def list_settings(db: Session) -> List[SystemSetting]:
    return db.query(SystemSetting).order_by(SystemSetting.key.asc()).all()


def get_setting(db: Session, key: str) -> Optional[SystemSetting]:
    return db.query(SystemSetting).filter(SystemSetting.key == key).first()


def upsert_setting(db: Session, key: str, value: Optional[str]) -> SystemSetting:
    """Create the setting if the key is new, otherwise overwrite its value."""
    setting = get_setting(db, key)
    if setting is None:
        setting = SystemSetting(key=key, value=value)
        db.add(setting)
    else:
        setting.value = value
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(setting)
    return setting
