from flask import Blueprint, current_app, request

from exam_vocabulary.extensions import get_app_ctx
from exam_vocabulary.services import admin_api_service

admin_bp = Blueprint('admin_api', __name__)


@admin_bp.route('/api/admin/vocabulary/extract', methods=['POST'])
def extract_vocabulary():
    return admin_api_service.extract_from_questions(get_app_ctx(current_app), request)


@admin_bp.route('/api/admin/vocabulary/extraction-runs', methods=['POST'])
def start_extraction_run():
    return admin_api_service.start_extraction_run(get_app_ctx(current_app), request)


@admin_bp.route('/api/admin/vocabulary/extraction-runs/<run_id>', methods=['GET'])
def get_extraction_run(run_id):
    return admin_api_service.get_extraction_run(get_app_ctx(current_app), request, run_id)
