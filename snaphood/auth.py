import logging
import secrets
from flask import Blueprint, current_app, jsonify, redirect, request, session

from .exceptions import AuthenticationError

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')
logger = logging.getLogger(__name__)


def _identity_provider():
    return current_app.extensions["snaphood"]["identity_provider"]


@auth_bp.route('/login', methods=['GET'])
def login():
    state = secrets.token_urlsafe(16)
    session['oauth_state'] = state
    return redirect(_identity_provider().authorization_url(state))


@auth_bp.route('/callback', methods=['GET'])
def callback():
    expected_state = session.pop('oauth_state', None)
    if not expected_state or request.args.get('state') != expected_state:
        logger.warning("OAuth callback with mismatched state")
        return jsonify({"error": "Authentication failed"}), 400

    code = request.args.get('code')
    if not code:
        return jsonify({"error": request.args.get('error', "Authentication failed")}), 400

    try:
        identity = _identity_provider().complete_sign_in(code)
    except AuthenticationError as e:
        logger.error(f"Sign-in failed: {e}")
        return jsonify({"error": "Authentication failed"}), 401

    return jsonify({"status": "success", "user": identity.to_dict()}), 200


@auth_bp.route('/logout', methods=['POST'])
def logout():
    _identity_provider().sign_out()
    return jsonify({"status": "success"}), 200
