# judging/models/evaluator.py
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from judging.extension.extensions import db

class Evaluator(db.Model):
    __tablename__ = 'evaluators'
    id = Column(String(64), primary_key=True)
    name = Column(String(255), index=True)
    # login identity; duplicates are tolerated, login takes the first match
    email = Column(String(255), nullable=False, index=True)
    expertise = Column(String(255))
    notes = Column(Text)
    code = Column(String(64), nullable=False)      # shared access code, not unique
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    @property
    def display_name(self):
        return self.name or self.email

    def to_dict(self, include_code=True):
        data = {
            "id": self.id,
            "name": self.name or "",
            "email": self.email,
            "expertise": self.expertise or "",
            "notes": self.notes or "",
        }
        if include_code:
            data["code"] = self.code
        return data
