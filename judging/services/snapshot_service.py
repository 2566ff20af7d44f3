# judging/services/snapshot_service.py
from judging.services.evaluator_service import list_evaluators
from judging.services.finalization_service import state_map
from judging.services.panel_service import list_panels
from judging.services.project_service import list_projects
from judging.services.result_service import list_results
from judging.services.setting_service import get_settings


def snapshot(include_codes=False):
    """Everything the browser client holds in memory, in one payload."""
    return {
        "settings": get_settings().to_dict(),
        "evaluators": [e.to_dict(include_code=include_codes) for e in list_evaluators()],
        "projects": [p.to_dict() for p in list_projects()],
        "panels": [p.to_dict() for p in list_panels()],
        "results": [r.to_dict() for r in list_results()],
        "evaluatorState": state_map(),
    }
