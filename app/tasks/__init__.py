from app.tasks.enforcement_tasks import enforce_studio_memberships

__all__ = [
    'enforce_studio_memberships'
]
