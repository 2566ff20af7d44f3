# judging/models/__init__.py

# Import models so metadata is complete before create_all / migrations
from .setting import Setting
from .project import Project
from .evaluator import Evaluator
from .panel import Panel
from .result import Result
from .evaluatorState import EvaluatorState


__all__ = ['Setting', 'Project', 'Evaluator', 'Panel', 'Result', 'EvaluatorState']
