# judging/services/scoring_service.py
"""
Scoring aggregation: rankings, per-project detail, the detailed matrix and
the spreadsheet exports.

Averages use each result's stored ``total`` (frozen at submission), never a
recomputation against the current rubric. Rubric keys a result does not
carry read as zero.
"""
import csv
import json
from collections import defaultdict
from io import BytesIO, StringIO

from flask import current_app
from openpyxl import Workbook
from openpyxl.styles import Font

from judging.extension.extensions import db
from judging.exceptions import NotFoundError
from judging.models.evaluator import Evaluator
from judging.models.project import Project
from judging.services.evaluator_service import list_evaluators
from judging.services.panel_service import list_panels
from judging.services.payload_formatters import flatten_remark, format_average, format_points
from judging.services.project_service import list_projects
from judging.services.result_service import list_results
from judging.services.setting_service import get_rubric

UNKNOWN_EVALUATOR = "Unknown"


def max_possible(rubric):
    # 'flat' counts every item as RANKING_FLAT_ITEM_MAX regardless of its maxPoints
    if current_app.config.get("RANKING_MAX_POINTS_MODE", "flat") == "rubric":
        return format_points(sum(float(item["maxPoints"]) for item in rubric))
    return len(rubric) * current_app.config.get("RANKING_FLAT_ITEM_MAX", 10)


def evaluator_label(evaluator):
    if evaluator is None:
        return UNKNOWN_EVALUATOR
    return evaluator.display_name or UNKNOWN_EVALUATOR


def _group_by_project(results):
    grouped = defaultdict(list)
    for r in results:
        grouped[r.project_id].append(r)
    return grouped


def project_scores(projects, results, rubric):
    """One summary per project, in input order."""
    grouped = _group_by_project(results)
    ceiling = max_possible(rubric)
    rows = []
    for p in projects:
        project_results = grouped.get(p.id, [])
        count = len(project_results)
        total = sum((r.total or 0) for r in project_results)
        average = total / count if count else 0
        percentage = (average / ceiling * 100) if count and ceiling else 0
        rows.append({
            "id": p.id,
            "title": p.title,
            "category": p.category or "",
            "team": p.team or "",
            "school": p.school or "",
            "evaluatorCount": count,
            "totalScore": format_points(total),
            "averageScore": average,
            "maxPossible": ceiling,
            "percentage": percentage,
        })
    return rows


def rank_projects(projects=None, results=None, rubric=None):
    """
    Sort by averageScore, highest first. Ties keep input order. The top
    RANKING_HIGHLIGHT_COUNT rows are highlighted, but never a project
    nobody has scored.
    """
    projects = list_projects() if projects is None else projects
    results = list_results() if results is None else results
    rubric = get_rubric() if rubric is None else rubric

    rows = sorted(project_scores(projects, results, rubric),
                  key=lambda row: row["averageScore"], reverse=True)
    highlight = current_app.config.get("RANKING_HIGHLIGHT_COUNT", 5)
    for index, row in enumerate(rows):
        row["rank"] = index + 1
        row["highlighted"] = index < highlight and row["evaluatorCount"] > 0
    return rows


def project_detail(project_id):
    project = db.session.get(Project, project_id)
    if project is None:
        raise NotFoundError(f"Project {project_id} not found")

    rubric = get_rubric()
    results = [r for r in list_results() if r.project_id == project_id]
    evaluator_ids = {r.evaluator_id for r in results}
    evaluators = {e.id: e for e in Evaluator.query.filter(Evaluator.id.in_(evaluator_ids))} if evaluator_ids else {}

    evaluations = []
    for r in results:
        evaluations.append({
            "resultId": r.id,
            "evaluatorId": r.evaluator_id,
            "evaluatorName": evaluator_label(evaluators.get(r.evaluator_id)),
            "scores": [{
                "key": item["key"],
                "label": item["label"],
                "score": r.score_for(item["key"]),
                "maxPoints": item["maxPoints"],
            } for item in rubric],
            "total": format_points(r.total or 0),
            "remark": r.remark or "",
            "ts": r.ts.isoformat() if r.ts else None,
        })

    summary = project_scores([project], results, rubric)[0]
    return {"project": project.to_dict(), "summary": summary, "evaluations": evaluations}


def _slots():
    """(projects, rubric keys, {project_id: [results]}, evaluators by id, widest project)."""
    projects = list_projects()
    rubric = get_rubric()
    grouped = _group_by_project(list_results())
    evaluators = {e.id: e for e in list_evaluators()}
    widest = max((len(grouped.get(p.id, [])) for p in projects), default=0)
    return projects, [item["key"] for item in rubric], grouped, evaluators, widest


def score_matrix():
    projects, keys, grouped, evaluators, widest = _slots()
    rows = []
    for p in projects:
        results = grouped.get(p.id, [])
        total = sum((r.total or 0) for r in results)
        slots = []
        for i in range(widest):
            if i < len(results):
                r = results[i]
                slots.append({
                    "evaluatorId": r.evaluator_id,
                    "evaluatorName": evaluator_label(evaluators.get(r.evaluator_id)),
                    "scores": {k: r.score_for(k) for k in keys},
                    "total": format_points(r.total or 0),
                })
            else:
                slots.append(None)
        rows.append({
            "id": p.id,
            "title": p.title,
            "team": p.team or "",
            "averageScore": format_average(total / len(results) if results else 0),
            "evaluators": slots,
        })
    return {"rubricKeys": keys, "maxEvaluators": widest, "rows": rows}


def export_rows():
    """Header plus one row per project, widened to the busiest project's evaluator count."""
    projects, keys, grouped, evaluators, widest = _slots()

    header = ["Project ID", "Title", "SDG Goals", "School", "Theme", "Avg Score"]
    for i in range(1, widest + 1):
        header.append(f"Eval {i} Name")
        header.extend(f"Eval {i} {k}" for k in keys)
        header.append(f"Eval {i} Total")
        header.append(f"Eval {i} Remark")

    rows = [header]
    for p in projects:
        results = grouped.get(p.id, [])
        total = sum((r.total or 0) for r in results)
        row = [p.id, p.title, p.team or "", p.school or "", p.category or "",
               format_average(total / len(results)) if results else 0]
        for i in range(widest):
            if i < len(results):
                r = results[i]
                row.append(evaluator_label(evaluators.get(r.evaluator_id)))
                row.extend(format_points(r.score_for(k)) for k in keys)
                row.append(format_points(r.total or 0))
                row.append(flatten_remark(r.remark))
            else:
                row.extend([""] * (len(keys) + 3))
        rows.append(row)
    return rows


def export_csv():
    output = StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(export_rows())
    return output.getvalue()


def _write_sheet(wb, title, records):
    ws = wb.create_sheet(title=title)
    columns = []
    for rec in records:
        for k in rec:
            if k not in columns:
                columns.append(k)
    ws.append(columns)
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for rec in records:
        ws.append([
            json.dumps(rec.get(c)) if isinstance(rec.get(c), (dict, list)) else rec.get(c)
            for c in columns
        ])


def backup_workbook():
    """Full xlsx backup taken before a reset: one sheet per non-empty collection."""
    projects = list_projects()
    evaluators = list_evaluators()
    panels = list_panels()
    results = list_results()
    titles = {p.id: p.title for p in projects}
    names = {e.id: e.name for e in evaluators}

    sheets = {}
    if projects:
        sheets["Projects"] = [p.to_dict() for p in projects]
    if evaluators:
        sheets["Evaluators"] = [e.to_dict() for e in evaluators]
    if panels:
        sheets["Panels"] = [p.to_dict() for p in panels]
    if results:
        scores = []
        for r in results:
            rec = r.to_dict()
            rec["project"] = titles.get(r.project_id)
            rec["evaluator"] = names.get(r.evaluator_id)
            scores.append(rec)
        sheets["Scores"] = scores

    wb = Workbook()
    wb.remove(wb.active)
    if not sheets:
        sheets["Summary"] = [{"message": "No data"}]
    for title, records in sheets.items():
        _write_sheet(wb, title, records)

    output = BytesIO()
    wb.save(output)
    output.seek(0)
    current_app.logger.info(f"Built backup workbook with sheets {list(sheets)}")
    return output
