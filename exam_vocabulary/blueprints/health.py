from flask import Blueprint, current_app, jsonify

from exam_vocabulary.extensions import get_app_ctx

health_bp = Blueprint('health', __name__)


@health_bp.route('/healthz', methods=['GET'])
def healthz():
    app_ctx = get_app_ctx(current_app)
    return jsonify({'ok': True, 'firestore_ready': app_ctx.firestore_ready}), 200
