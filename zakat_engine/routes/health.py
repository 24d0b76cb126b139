"""Health check endpoint."""
from flask import Blueprint, jsonify, current_app

health_bp = Blueprint('health', __name__)


@health_bp.route('/healthz')
def healthz():
    """Return health status and the host's nisab defaults."""
    engine = current_app.config['ZAKAT_ENGINE']
    return jsonify({
        'status': 'ok',
        'default_nisab_method': engine['default_nisab_method'],
    })
