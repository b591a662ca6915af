from flask import Blueprint, current_app, request

from exam_vocabulary.extensions import get_app_ctx
from exam_vocabulary.services import vocabulary_api_service

vocabulary_bp = Blueprint('vocabulary_api', __name__)


@vocabulary_bp.route('/api/vocabulary', methods=['GET'])
def fetch_vocabulary():
    return vocabulary_api_service.fetch_vocabulary(get_app_ctx(current_app), request)
