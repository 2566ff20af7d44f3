# judging/models/panel.py
from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.sql import func
from judging.extension.extensions import db

class Panel(db.Model):
    __tablename__ = 'panels'
    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False, index=True)
    # membership is set-valued; exclusivity across panels is checked in panel_service
    evaluator_ids = Column(JSON, nullable=False, default=list)
    project_ids = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "evaluatorIds": list(self.evaluator_ids or []),
            "projectIds": list(self.project_ids or []),
        }
