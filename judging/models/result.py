# judging/models/result.py
from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, Float, DateTime, JSON
from sqlalchemy.sql import func
from judging.extension.extensions import db

def _utcnow():
    return datetime.now(timezone.utc)

class Result(db.Model):
    __tablename__ = 'results'
    id = Column(String(64), primary_key=True)
    panel_id = Column(String(64), index=True)
    project_id = Column(String(64), nullable=False, index=True)
    evaluator_id = Column(String(64), nullable=False, index=True)
    scores = Column(JSON, nullable=False, default=dict)   # rubric key -> points
    remark = Column(Text)
    total = Column(Float, nullable=False, default=0)      # frozen at submission
    ts = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        db.UniqueConstraint('project_id', 'evaluator_id', name='uq_result_project_evaluator'),
    )

    def score_for(self, key):
        """Stale or missing rubric keys read as zero."""
        value = (self.scores or {}).get(key)
        return value if value is not None else 0

    def to_dict(self):
        return {
            "id": self.id,
            "panelId": self.panel_id,
            "projectId": self.project_id,
            "evaluatorId": self.evaluator_id,
            "scores": dict(self.scores or {}),
            "remark": self.remark or "",
            "total": self.total,
            "ts": self.ts.isoformat() if self.ts else None,
        }
