from sqlalchemy.orm import Session
from duelytics.models.audit_log import AuditLog

def audit(db: Session, actor_user_id: str | None, entity_type: str, entity_id, action: str, data: dict | None = None):
    row = AuditLog(
        actor_user_id=actor_user_id,
        entity_type=entity_type,
        entity_id=str(entity_id),
        action=action,
        data=data or {},
    )
    db.add(row)
