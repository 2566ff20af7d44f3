# judging/models/setting.py
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from sqlalchemy.sql import func
from judging.extension.extensions import db

DEFAULT_RUBRIC = [
    {"key": "problem", "label": "Introduction/Clarity",
     "description": "Imagination in thinking problem and solution. Interest in new, unknown, and complexity. Motivation.",
     "maxPoints": 10},
    {"key": "originality", "label": "Originality of Concept",
     "description": "Novelty in approach. Creativity and Innovation in thinking. Creativity in whole approach.",
     "maxPoints": 10},
    {"key": "description", "label": "Description of Concepts",
     "description": "How well did the team understand the problem? Connection to UN SDGs. Research and Analysis.",
     "maxPoints": 10},
    {"key": "viability", "label": "Viability of Concept",
     "description": "How well did the team think over their solution? Research and Analysis of Solution. Effectiveness.",
     "maxPoints": 10},
    {"key": "design", "label": "Description of Design",
     "description": "How much solution is actually done? Knowledge of Software/Hardware. Future Scope.",
     "maxPoints": 10},
    {"key": "delivery", "label": "Delivery/Presentation",
     "description": "Presented in a holistic way? Creativity in presentation. Confidence while answering.",
     "maxPoints": 10},
]

SUBSCRIPTION_PLANS = ("free", "plus", "ultra")


class Setting(db.Model):
    __tablename__ = 'settings'
    id = Column(Integer, primary_key=True)
    event_title = Column(String(255), nullable=False, default='Science Carnival 2025')
    subtitle = Column(String(255), nullable=False, default='Project Evaluation System')
    welcome_title = Column(String(255), nullable=False, default='Welcome to Science Carnival 2025')
    welcome_body = Column(Text, nullable=False, default='Please select your role to continue.')
    logo_url = Column(String(512), nullable=False,
                      default='https://dummyimage.com/128x128/1f2a52/ffffff&text=SE')
    admin_email = Column(String(255), nullable=False, default='admin@example.com')
    admin_password_hash = Column(String(255), nullable=False)
    rubric = Column(JSON, nullable=False, default=lambda: [dict(item) for item in DEFAULT_RUBRIC])
    carousel_slides = Column(JSON, nullable=False, default=list)
    subscription = Column(JSON, nullable=False, default=lambda: {"plan": "free"})
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def to_dict(self):
        # admin_password_hash is never serialized
        return {
            "eventTitle": self.event_title,
            "subtitle": self.subtitle,
            "welcomeTitle": self.welcome_title,
            "welcomeBody": self.welcome_body,
            "logoUrl": self.logo_url,
            "adminEmail": self.admin_email,
            "rubric": list(self.rubric or []),
            "carouselSlides": list(self.carousel_slides or []),
            "subscription": dict(self.subscription or {}),
        }
