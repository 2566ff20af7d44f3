# judging/models/evaluatorState.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.sql import func
from judging.extension.extensions import db

class EvaluatorState(db.Model):
    __tablename__ = 'evaluator_states'
    id = Column(Integer, primary_key=True)
    evaluator_id = Column(String(64), unique=True, nullable=False)
    finalized_all = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
