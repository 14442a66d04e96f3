from flask import current_app, send_from_directory

from app.api import api_bp


@api_bp.route('/uploads/<path:filename>', methods=['GET'])
def get_upload(filename):
    """Serve payment proofs stored by the local blob store"""
    return send_from_directory(current_app.config['UPLOAD_FOLDER'], filename)
