"""
Test: result submission, score validation and the finalization lock.
"""
import pytest

from judging.exceptions import (
    FinalizationLocked, NotFoundError, PermissionDenied, ValidationError,
)
from judging.models.evaluatorState import EvaluatorState
from judging.models.result import Result
from judging.services.finalization_service import (
    finalize, is_locked, reset_finalization, worklist,
)
from judging.services.result_service import clear_results, submit_result, validate_scores

RUBRIC = [
    {"key": "problem", "label": "Problem", "maxPoints": 10},
    {"key": "design", "label": "Design", "maxPoints": 5},
]


def _score(evaluator_id, project_id, problem=8, design=4, **extra):
    payload = {"projectId": project_id, "evaluatorId": evaluator_id,
               "scores": {"problem": problem, "design": design}, "remark": "solid"}
    payload.update(extra)
    return submit_result(evaluator_id, payload)


class TestValidateScores:
    def test_total_is_sum(self):
        scores, total = validate_scores({"problem": 7.5, "design": "3"}, RUBRIC)
        assert scores == {"problem": 7.5, "design": 3}
        assert total == 10.5

    def test_upper_bound_uses_item_max(self):
        with pytest.raises(ValidationError, match="between 0 and 5"):
            validate_scores({"problem": 10, "design": 6}, RUBRIC)

    def test_negative_rejected(self):
        with pytest.raises(ValidationError):
            validate_scores({"problem": -1, "design": 2}, RUBRIC)

    def test_missing_item_rejected(self):
        with pytest.raises(ValidationError, match="'Design' is required"):
            validate_scores({"problem": 3}, RUBRIC)

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError, match="Unknown rubric keys: extra"):
            validate_scores({"problem": 3, "design": 2, "extra": 1}, RUBRIC)

    def test_non_numeric_rejected(self):
        with pytest.raises(ValidationError, match="must be a number"):
            validate_scores({"problem": "lots", "design": 2}, RUBRIC)

    def test_bounds_inclusive(self):
        _, total = validate_scores({"problem": 0, "design": 5}, RUBRIC)
        assert total == 5


class TestSubmitResult:
    def test_creates_with_server_total_and_panel(self, seeded):
        result, created = _score("EVAL-1", "PRJ-1", total=999)
        assert created
        assert result.total == 12
        assert result.panel_id == "PNL-A"
        assert result.remark == "solid"

    def test_resubmission_updates_in_place(self, seeded):
        first, _ = _score("EVAL-1", "PRJ-1", id="RES-CLIENT-1")
        second, created = _score("EVAL-1", "PRJ-1", problem=2, design=1, id="RES-CLIENT-2")
        assert not created
        assert second.id == first.id == "RES-CLIENT-1"
        assert Result.query.filter_by(project_id="PRJ-1", evaluator_id="EVAL-1").count() == 1
        assert second.total == 3

    def test_reused_id_from_other_pair_gets_fresh_id(self, seeded):
        _score("EVAL-1", "PRJ-1", id="RES-SHARED")
        other, created = _score("EVAL-1", "PRJ-2", id="RES-SHARED")
        assert created
        assert other.id != "RES-SHARED"
        assert Result.query.count() == 2

    def test_other_evaluator_rejected(self, seeded):
        with pytest.raises(PermissionDenied, match="another evaluator"):
            submit_result("EVAL-1", {"projectId": "PRJ-1", "evaluatorId": "EVAL-2",
                                     "scores": {"problem": 1, "design": 1}})

    def test_unassigned_project_rejected(self, seeded):
        with pytest.raises(PermissionDenied, match="not assigned"):
            _score("EVAL-1", "PRJ-3")

    def test_unknown_project(self, seeded):
        with pytest.raises(NotFoundError):
            _score("EVAL-1", "PRJ-404")

    def test_project_id_required(self, seeded):
        with pytest.raises(ValidationError, match="projectId is required"):
            submit_result("EVAL-1", {"scores": {"problem": 1, "design": 1}})

    def test_locked_evaluator_cannot_edit(self, seeded):
        _score("EVAL-1", "PRJ-1")
        _score("EVAL-1", "PRJ-2")
        finalize("EVAL-1")
        with pytest.raises(FinalizationLocked):
            _score("EVAL-1", "PRJ-1", problem=1)
        assert Result.query.filter_by(project_id="PRJ-1", evaluator_id="EVAL-1").one().total == 12

    def test_clear_results_wipes_state_too(self, seeded):
        _score("EVAL-1", "PRJ-1")
        _score("EVAL-1", "PRJ-2")
        finalize("EVAL-1")
        assert clear_results() == 2
        assert Result.query.count() == 0
        assert EvaluatorState.query.count() == 0


class TestFinalization:
    def test_worklist_counts_remaining(self, seeded):
        _score("EVAL-2", "PRJ-2")
        wl = worklist("EVAL-2")
        assert wl["assignedProjectIds"] == ["PRJ-1", "PRJ-2"]
        assert wl["submittedProjectIds"] == ["PRJ-2"]
        assert wl["remaining"] == 1
        assert not wl["canFinalize"]

    def test_finalize_with_remaining_fails(self, seeded):
        _score("EVAL-1", "PRJ-1")
        with pytest.raises(ValidationError, match="1 project"):
            finalize("EVAL-1")
        assert not is_locked("EVAL-1")

    def test_finalize_without_assignments_fails(self, seeded):
        with pytest.raises(ValidationError, match="No projects"):
            finalize("EVAL-4")

    def test_finalize_unknown_evaluator(self, seeded):
        with pytest.raises(NotFoundError):
            finalize("EVAL-404")

    def test_finalize_locks_once_everything_scored(self, seeded):
        _score("EVAL-1", "PRJ-1")
        _score("EVAL-1", "PRJ-2")
        state = finalize("EVAL-1")
        assert state["finalizedAll"]
        assert is_locked("EVAL-1")
        # second call is a no-op
        assert finalize("EVAL-1")["finalizedAll"]
        assert EvaluatorState.query.count() == 1

    def test_reset_single_and_all(self, seeded):
        for eid in ("EVAL-1", "EVAL-2"):
            _score(eid, "PRJ-1")
            _score(eid, "PRJ-2")
            finalize(eid)

        assert reset_finalization("EVAL-1") == 1
        assert not is_locked("EVAL-1")
        assert is_locked("EVAL-2")

        assert reset_finalization() == 1
        assert not is_locked("EVAL-2")
        assert reset_finalization() == 0

    def test_reset_reopens_editing(self, seeded):
        _score("EVAL-1", "PRJ-1")
        _score("EVAL-1", "PRJ-2")
        finalize("EVAL-1")
        reset_finalization("EVAL-1")
        result, created = _score("EVAL-1", "PRJ-1", problem=1, design=0)
        assert not created
        assert result.total == 1
