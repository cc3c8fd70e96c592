from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from .core.database import SessionLocal
from .core.logging import configure_logging
from .models import Personnel, PersonnelRole, TransactionCategory


logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = (
    ("Yıkama", "Dış ve iç yıkama"),
    ("Bakım", "Periyodik bakım ve servis"),
    ("Lastik", "Lastik değişimi ve tamiri"),
    ("Yedek Parça", "Parça satışı"),
    ("Yakıt", "Yakıt giderleri"),
)


def seed(db: Session | None = None) -> None:
    """Insert the default categories and an admin account if they are missing."""
    own_session = db is None
    db = db or SessionLocal()
    try:
        for name, description in DEFAULT_CATEGORIES:
            if not db.query(TransactionCategory).filter_by(name=name).first():
                db.add(TransactionCategory(name=name, description=description))
                logger.info("Seeded category %s", name)

        if not db.query(Personnel).filter_by(username="admin").first():
            db.add(Personnel(full_name="Yönetici", username="admin", role=PersonnelRole.ADMIN))
            logger.info("Seeded admin personnel")

        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        if own_session:
            db.close()


if __name__ == "__main__":
    configure_logging()
    seed()
