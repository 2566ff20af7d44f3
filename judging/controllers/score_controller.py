# judging/controllers/score_controller.py
from datetime import datetime, timezone
from flask import Blueprint, jsonify, make_response, send_file
from judging.middleware.auth_guard import admin_required
from judging.services.scoring_service import (
    rank_projects, project_detail, score_matrix, export_csv, backup_workbook
)

bp_scores = Blueprint('scores', __name__, url_prefix='/api/scores')
bp_export = Blueprint('export', __name__, url_prefix='/api/export')

@bp_scores.get('')
@admin_required
def get_rankings():
    return jsonify(rank_projects()), 200

@bp_scores.get('/matrix')
@admin_required
def get_matrix():
    return jsonify(score_matrix()), 200

@bp_scores.get('/export.csv')
@admin_required
def get_export_csv():
    response = make_response(export_csv())
    response.headers['Content-Type'] = 'text/csv; charset=utf-8'
    response.headers['Content-Disposition'] = 'attachment; filename=scores_detailed.csv'
    return response

@bp_scores.get('/<string:project_id>')
@admin_required
def get_project_detail(project_id):
    return jsonify(project_detail(project_id)), 200

@bp_export.get('/backup.xlsx')
@admin_required
def get_backup():
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")
    return send_file(
        backup_workbook(),
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        as_attachment=True,
        download_name=f'FULL_BACKUP_{stamp}.xlsx',
    )
