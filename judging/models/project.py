# judging/models/project.py
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from judging.extension.extensions import db

class Project(db.Model):
    __tablename__ = 'projects'
    id = Column(String(64), primary_key=True)
    title = Column(String(255), nullable=False, index=True)
    category = Column(String(255))
    team = Column(String(255))
    school = Column(String(255))
    contact = Column(String(255))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category or "",
            "team": self.team or "",
            "school": self.school or "",
            "contact": self.contact or "",
        }
