import io
import logging
from flask import Blueprint, abort, current_app, jsonify, redirect, request, send_file

from .config import IMAGE_CONTENT_TYPE, IMAGES_BUCKET
from .exceptions import (
    AuthenticationError,
    CaptureError,
    LocationUnavailableError,
    NotSignedInError,
    PermissionDeniedError,
    PositionError,
    ServiceUnavailableError,
    SnaphoodError,
    SubmitInProgressError,
    ValidationError,
)
from .models.identity import Position
from .utils.url_helpers import gcs_public_url
from .utils.validators import validate_coordinates
from . import gcp_clients

main_bp = Blueprint('main', __name__)
logger = logging.getLogger(__name__)

STATUS_CODES = [
    (ValidationError, 400),
    (LocationUnavailableError, 400),
    (NotSignedInError, 401),
    (AuthenticationError, 401),
    (PermissionDeniedError, 403),
    (SubmitInProgressError, 409),
    (CaptureError, 409),
    (ServiceUnavailableError, 503),
]


def _session():
    return current_app.extensions["snaphood"]["session"]


def _position_source():
    return current_app.extensions["snaphood"]["position_source"]


@main_bp.errorhandler(SnaphoodError)
def handle_snaphood_error(error):
    message = _session().report(error)
    for error_type, status in STATUS_CODES:
        if isinstance(error, error_type):
            return jsonify({"error": message}), status
    # Storage, save and geocoding failures
    return jsonify({"error": message}), 502


@main_bp.route('/')
def index():
    user = _session().session.current_user()
    return jsonify({
        "app": "Snaphood",
        "signed_in": user is not None,
        "map": "/api/map",
        "sign_in": "/auth/login"
    })


@main_bp.route('/api/map', methods=['GET'])
def get_map():
    return jsonify(_session().view()), 200


@main_bp.route('/api/feed', methods=['GET'])
def get_feed():
    return jsonify({"data": _session().feed()}), 200


@main_bp.route('/api/snaps/<snap_id>', methods=['GET'])
def get_snap(snap_id):
    detail = _session().snap_detail(snap_id)
    if detail is None:
        return jsonify({"error": "Snap not found"}), 404
    return jsonify(detail), 200


@main_bp.route('/api/snaps', methods=['POST'])
def submit_snap():
    description = request.form.get('description')
    image_file = request.files.get('image')
    image = image_file.read() if image_file else None

    try:
        snap_id = _session().submit_snap(description, image=image)
    except SnaphoodError:
        raise
    except Exception as e:
        logger.exception("An unexpected error occurred")
        return jsonify({"error": _session().report(e)}), 500

    return jsonify({"status": "success", "message": "Snap posted!", "id": snap_id}), 201


@main_bp.route('/api/snaps/<snap_id>/comments', methods=['GET'])
def get_comments(snap_id):
    store = _session().comment_store
    return jsonify({
        "data": [comment.to_dict() for comment in store.thread(snap_id)],
        "draft": store.draft(snap_id),
        "submitting": store.is_submitting(snap_id)
    }), 200


def _comment_text(payload: dict) -> str:
    text = payload.get('text', '')
    if not isinstance(text, str):
        raise ValidationError("text", "Comment must be text")
    return text


@main_bp.route('/api/snaps/<snap_id>/comments/draft', methods=['PUT'])
def set_comment_draft(snap_id):
    payload = request.get_json(silent=True) or {}
    _session().comment_store.set_draft(snap_id, _comment_text(payload))
    return jsonify({"draft": _session().comment_store.draft(snap_id)}), 200


@main_bp.route('/api/snaps/<snap_id>/comments', methods=['POST'])
def submit_comment(snap_id):
    store = _session().comment_store
    payload = request.get_json(silent=True) or {}
    if 'text' in payload:
        store.set_draft(snap_id, _comment_text(payload))

    comment_id = store.submit(snap_id)
    return jsonify({"status": "success", "id": comment_id}), 201


@main_bp.route('/api/camera/<action>', methods=['POST'])
def camera_action(action):
    capture = _session().capture
    actions = {
        "open": capture.open_camera,
        "flip": capture.flip,
        "capture": capture.capture,
        "discard": capture.discard,
        "retake": capture.retake,
    }
    if action not in actions:
        abort(404)

    actions[action]()
    return jsonify({"state": capture.state.value, "use_front_camera": capture.use_front_camera}), 200


@main_bp.route('/api/camera/photo', methods=['GET'])
def get_photo():
    photo = _session().capture.photo
    if not photo:
        return jsonify({"error": "No photo captured"}), 404
    return send_file(io.BytesIO(photo), mimetype=IMAGE_CONTENT_TYPE)


@main_bp.route('/api/location', methods=['POST'])
def report_location():
    payload = request.get_json(silent=True) or {}
    lat, lng = validate_coordinates(payload.get('lat'), payload.get('lng'))
    _position_source().report(Position(latitude=lat, longitude=lng, accuracy=payload.get('accuracy')))

    # The posting position is acquired once; later fixes only move the live marker
    geolocation = _session().geolocation
    if geolocation.position is None:
        geolocation.locate()
    return jsonify({"status": "success", "can_post": geolocation.position is not None}), 200


@main_bp.route('/api/location/error', methods=['POST'])
def report_location_error():
    payload = request.get_json(silent=True) or {}
    try:
        code = int(payload.get('code', PositionError.POSITION_UNAVAILABLE))
    except (TypeError, ValueError):
        raise ValidationError("code", "Error code must be numeric")
    _position_source().report_error(PositionError(code, payload.get('message', '')))
    return jsonify({"status": "success"}), 200


@main_bp.route('/api/error/dismiss', methods=['POST'])
def dismiss_error():
    _session().dismiss_error()
    return jsonify({"status": "success"}), 200


@main_bp.route('/storage/object/public/<bucket>/<path:path>', methods=['GET'])
def public_object(bucket, path):
    if bucket != IMAGES_BUCKET:
        abort(404)
    return redirect(gcs_public_url(gcp_clients.STORAGE_BUCKET, path))
