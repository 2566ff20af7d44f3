"""
Test: rankings, detail view, matrix and exports.
"""
import csv
from io import StringIO

import pytest
from openpyxl import load_workbook

from judging.exceptions import NotFoundError
from judging.extension.extensions import db
from judging.models.project import Project
from judging.models.result import Result
from judging.services.evaluator_service import create_evaluator, delete_evaluator
from judging.services.scoring_service import (
    backup_workbook, export_csv, export_rows, max_possible, project_detail,
    project_scores, rank_projects, score_matrix,
)
from judging.services.setting_service import get_rubric, update_settings


def _result(rid, project_id, evaluator_id, total, scores=None, remark=""):
    r = Result(id=rid, project_id=project_id, evaluator_id=evaluator_id,
               scores=scores or {}, total=total, remark=remark)
    db.session.add(r)
    db.session.commit()
    return r


class TestMaxPossible:
    def test_flat_ten_per_item_ignores_item_max(self, app):
        rubric = [{"key": f"k{i}", "label": f"K{i}", "maxPoints": 5} for i in range(6)]
        assert max_possible(rubric) == 60

    def test_rubric_mode_sums_item_max(self, app):
        app.config["RANKING_MAX_POINTS_MODE"] = "rubric"
        rubric = [{"key": "a", "label": "A", "maxPoints": 5}, {"key": "b", "label": "B", "maxPoints": 7.5}]
        assert max_possible(rubric) == 12.5

    def test_default_rubric_has_six_items(self, app):
        assert max_possible(get_rubric()) == 60


class TestProjectScores:
    def test_no_results_means_zero(self, app):
        rows = project_scores([Project(id="P", title="Lonely")], [], get_rubric())
        assert rows[0]["evaluatorCount"] == 0
        assert rows[0]["averageScore"] == 0
        assert rows[0]["percentage"] == 0

    def test_average_uses_stored_totals(self, seeded):
        _result("R1", "PRJ-1", "EVAL-1", 12, {"problem": 8, "design": 4})
        _result("R2", "PRJ-1", "EVAL-2", 9, {"problem": 6, "design": 3})
        # rubric change after submission does not touch stored totals
        update_settings({"rubric": [{"key": "problem", "label": "Problem", "maxPoints": 10}]})

        row = next(r for r in rank_projects() if r["id"] == "PRJ-1")
        assert row["evaluatorCount"] == 2
        assert row["totalScore"] == 21
        assert row["averageScore"] == pytest.approx(10.5)
        assert row["maxPossible"] == 10
        assert row["percentage"] == pytest.approx(105.0)

    def test_percentage_against_flat_ceiling(self, seeded):
        _result("R1", "PRJ-2", "EVAL-1", 10)
        row = next(r for r in rank_projects() if r["id"] == "PRJ-2")
        # two rubric items -> 20 possible
        assert row["maxPossible"] == 20
        assert row["percentage"] == pytest.approx(50.0)


class TestRanking:
    def test_sorted_descending_with_highlight(self, app):
        for i in range(1, 8):
            db.session.add(Project(id=f"P{i}", title=f"P{i}"))
        db.session.commit()
        _result("R1", "P2", "E1", 30)
        _result("R2", "P3", "E1", 50)
        _result("R3", "P4", "E1", 40)
        _result("R4", "P5", "E1", 10)

        rows = rank_projects()
        assert [r["id"] for r in rows][:4] == ["P3", "P4", "P2", "P5"]
        assert [r["rank"] for r in rows] == list(range(1, 8))
        # rank 5 has no evaluations, so only four rows light up
        assert rows[4]["evaluatorCount"] == 0
        assert [r["highlighted"] for r in rows] == [True, True, True, True, False, False, False]

    def test_only_top_five_highlighted(self, app):
        for i in range(1, 8):
            db.session.add(Project(id=f"P{i}", title=f"P{i}"))
            db.session.add(Result(id=f"R{i}", project_id=f"P{i}", evaluator_id="E1", scores={}, total=i))
        db.session.commit()
        rows = rank_projects()
        assert [r["id"] for r in rows] == ["P7", "P6", "P5", "P4", "P3", "P2", "P1"]
        assert sum(r["highlighted"] for r in rows) == 5

    def test_ties_keep_input_order(self, app):
        projects = [Project(id=pid, title=pid) for pid in ("B", "A", "C")]
        results = [Result(id="R1", project_id="A", evaluator_id="E", total=5),
                   Result(id="R2", project_id="B", evaluator_id="E", total=5),
                   Result(id="R3", project_id="C", evaluator_id="E", total=5)]
        rows = rank_projects(projects=projects, results=results, rubric=[])
        assert [r["id"] for r in rows] == ["B", "A", "C"]


class TestProjectDetail:
    def test_name_fallbacks_and_breakdown(self, seeded):
        create_evaluator({"id": "EVAL-NONAME", "email": "anon@example.com", "code": "1"})
        _result("R1", "PRJ-1", "EVAL-1", 12, {"problem": 8, "design": 4}, "great")
        _result("R2", "PRJ-1", "EVAL-NONAME", 7, {"problem": 7})
        _result("R3", "PRJ-1", "EVAL-2", 5, {"problem": 3, "design": 2})
        delete_evaluator("EVAL-2")

        detail = project_detail("PRJ-1")
        names = [e["evaluatorName"] for e in detail["evaluations"]]
        assert names == ["Judge 1", "anon@example.com", "Unknown"]

        first = detail["evaluations"][0]
        assert [(s["key"], s["score"], s["maxPoints"]) for s in first["scores"]] == [
            ("problem", 8, 10), ("design", 4, 5)]
        assert first["remark"] == "great"
        # stale result without a design score reads as zero
        assert detail["evaluations"][1]["scores"][1]["score"] == 0
        assert detail["summary"]["evaluatorCount"] == 3

    def test_unknown_project(self, seeded):
        with pytest.raises(NotFoundError):
            project_detail("PRJ-404")


class TestExports:
    def _populate(self):
        _result("R1", "PRJ-1", "EVAL-1", 12, {"problem": 8, "design": 4}, "line one\nline two")
        _result("R2", "PRJ-1", "EVAL-2", 9, {"problem": 6, "design": 3})
        _result("R3", "PRJ-2", "EVAL-3", 7.5, {"problem": 5, "design": 2.5})

    def test_columns_widen_to_busiest_project(self, seeded):
        self._populate()
        rows = export_rows()
        header = rows[0]
        assert header[:6] == ["Project ID", "Title", "SDG Goals", "School", "Theme", "Avg Score"]
        assert header[6:11] == ["Eval 1 Name", "Eval 1 problem", "Eval 1 design", "Eval 1 Total", "Eval 1 Remark"]
        assert header[11:] == ["Eval 2 Name", "Eval 2 problem", "Eval 2 design", "Eval 2 Total", "Eval 2 Remark"]
        assert all(len(r) == len(header) for r in rows)

        prj1, prj2, prj3 = rows[1], rows[2], rows[3]
        assert prj1[5] == "10.50"
        assert prj1[6:11] == ["Judge 1", 8, 4, 12, "line one line two"]
        assert prj2[6:11] == ["Judge 3", 5, 2.5, 7.5, ""]
        assert prj2[11:] == ["", "", "", "", ""]
        assert prj3[5] == 0
        assert prj3[6:] == [""] * 10

    def test_csv_quotes_every_cell(self, seeded):
        self._populate()
        text = export_csv()
        parsed = list(csv.reader(StringIO(text)))
        assert parsed[0][0] == "Project ID"
        assert len(parsed) == 5
        assert text.splitlines()[1].startswith('"PRJ-1","Project 1"')

    def test_no_results_means_no_evaluator_columns(self, seeded):
        rows = export_rows()
        assert len(rows[0]) == 6
        assert len(rows) == 5

    def test_matrix_pads_with_none(self, seeded):
        self._populate()
        matrix = score_matrix()
        assert matrix["maxEvaluators"] == 2
        assert matrix["rubricKeys"] == ["problem", "design"]
        row2 = matrix["rows"][1]
        assert row2["averageScore"] == "7.50"
        assert row2["evaluators"][0]["scores"] == {"problem": 5, "design": 2.5}
        assert row2["evaluators"][1] is None

    def test_backup_workbook_sheets(self, seeded):
        self._populate()
        wb = load_workbook(backup_workbook())
        assert wb.sheetnames == ["Projects", "Evaluators", "Panels", "Scores"]
        scores = list(wb["Scores"].values)
        assert "project" in scores[0] and "evaluator" in scores[0]
        assert len(scores) == 4

    def test_backup_workbook_when_empty(self, app):
        wb = load_workbook(backup_workbook())
        assert wb.sheetnames == ["Summary"]
