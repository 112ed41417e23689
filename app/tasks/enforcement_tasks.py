import logging

from app.celery_app import celery_app
from app.core.membership_policy import load_policy_from_env
from app.db.session import SessionLocal
from app.services.enforcement_sweep import run_enforcement_sweep

logger = logging.getLogger(__name__)


@celery_app.task(name="enforce_studio_memberships")
def enforce_studio_memberships(dry_run: bool = False):
    """Scheduled reconciliation of studio status against membership state."""
    db = SessionLocal()
    try:
        summary = run_enforcement_sweep(db, load_policy_from_env(), dry_run=dry_run)
        return {"status": "success", **summary.model_dump()}
    except Exception as e:
        db.rollback()
        logger.exception("Membership enforcement sweep failed")
        return {"status": "error", "message": str(e)}
    finally:
        db.close()
