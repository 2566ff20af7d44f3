"""
Test: flask CLI maintenance commands.
"""
from judging.models.setting import Setting
from judging.services.evaluator_service import create_evaluator
from judging.services.finalization_service import finalize, is_locked
from judging.services.result_service import submit_result


def _lock(evaluator_id):
    for pid in ("PRJ-1", "PRJ-2"):
        submit_result(evaluator_id, {"projectId": pid, "scores": {"problem": 5, "design": 5}})
    finalize(evaluator_id)


class TestInitDb:
    def test_creates_settings_row(self, app):
        result = app.test_cli_runner().invoke(args=["init-db"])
        assert result.exit_code == 0
        assert "Science Carnival 2025" in result.output
        assert Setting.query.count() == 1


class TestResetFinalization:
    def test_reset_everyone(self, app, seeded):
        _lock("EVAL-1")
        _lock("EVAL-2")
        result = app.test_cli_runner().invoke(args=["reset-finalization"])
        assert result.exit_code == 0
        assert "2 evaluator(s)" in result.output
        assert not is_locked("EVAL-1") and not is_locked("EVAL-2")

    def test_reset_single(self, app, seeded):
        _lock("EVAL-1")
        _lock("EVAL-2")
        result = app.test_cli_runner().invoke(args=["reset-finalization", "--evaluator-id", "EVAL-2"])
        assert "1 evaluator(s)" in result.output
        assert is_locked("EVAL-1")
        assert not is_locked("EVAL-2")

    def test_nothing_to_reset(self, app, seeded):
        result = app.test_cli_runner().invoke(args=["reset-finalization"])
        assert result.exit_code == 0
        assert "No finalized evaluators" in result.output


class TestFinalizationStatus:
    def test_lists_progress(self, app, seeded):
        _lock("EVAL-1")
        result = app.test_cli_runner().invoke(args=["finalization-status"])
        assert result.exit_code == 0
        lines = {line.split()[0]: line for line in result.output.splitlines() if line.startswith("EVAL-")}
        assert lines["EVAL-1"].split()[-1] == "yes"
        assert lines["EVAL-4"].split()[-1] == "no"
        assert "Total: 4 | Finalized: 1" in result.output

    def test_unnamed_evaluator_shows_email(self, app, seeded):
        create_evaluator({"id": "EVAL-ANON", "email": "anon@example.com", "code": "123456"})
        result = app.test_cli_runner().invoke(args=["finalization-status"])
        line = next(l for l in result.output.splitlines() if l.startswith("EVAL-ANON"))
        assert "anon@example.com" in line

    def test_empty(self, app):
        result = app.test_cli_runner().invoke(args=["finalization-status"])
        assert "No evaluators found." in result.output
