"""
server.py
----------
Flask web server exposing registration and login endpoints for ZKP authentication.

Endpoints:
- GET  /parameters   : group parameters (p, q, alpha, beta)
- POST /register     : register user (store y1, y2)
- POST /login/start  : send commitments r1, r2, receive challenge c
- POST /login/finish : submit response s, receive session id

Integers travel as base64url-encoded big-endian bytes.
"""

import logging

from flask import Flask, request, jsonify

from zkp_auth import config
from zkp_auth.crypto_utils import decode_int, encode_int
from zkp_auth.exceptions import ZKPAuthError
from zkp_auth.parameters import get_group
from zkp_auth.service import AuthenticationService
from zkp_auth.storage import make_storage

logger = logging.getLogger(__name__)


def _fields(*names):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    values = [data.get(name) for name in names]
    if not all(values):
        return None
    return values


def _missing():
    return jsonify({"error": "missing_fields", "message": "Missing fields"}), 400


def create_app(service: AuthenticationService = None) -> Flask:
    if service is None:
        service = AuthenticationService(get_group(config.GROUP_BITS), make_storage())

    app = Flask(__name__)

    @app.errorhandler(ZKPAuthError)
    def handle_auth_error(e):
        return jsonify({"error": e.kind, "message": str(e)}), e.http_status

    @app.route("/parameters", methods=["GET"])
    def parameters():
        return jsonify({name: encode_int(v) for name, v in service.params.to_dict().items()})

    @app.route("/register", methods=["POST"])
    def register():
        """
        Register user with public values.
        Body: { "user_id": str, "y1": str (base64url), "y2": str (base64url) }
        """
        fields = _fields("user_id", "y1", "y2")
        if fields is None:
            return _missing()
        user_id, y1, y2 = fields
        service.register(user_id, decode_int(y1), decode_int(y2))
        return jsonify({"status": "ok"})

    @app.route("/login/start", methods=["POST"])
    def login_start():
        """
        Begin login.
        Body: { "user_id": str, "r1": str (base64url), "r2": str (base64url) }
        """
        fields = _fields("user_id", "r1", "r2")
        if fields is None:
            return _missing()
        user_id, r1, r2 = fields
        auth_id, challenge = service.begin_authentication(user_id, decode_int(r1), decode_int(r2))
        return jsonify({"auth_id": auth_id, "c": encode_int(challenge)})

    @app.route("/login/finish", methods=["POST"])
    def login_finish():
        """
        Complete login.
        Body: { "auth_id": str, "s": str (base64url) }
        """
        fields = _fields("auth_id", "s")
        if fields is None:
            return _missing()
        auth_id, s = fields
        session_id = service.complete_authentication(auth_id, decode_int(s))
        return jsonify({"status": "success", "session_id": session_id})

    return app


def run(host: str = config.HOST, port: int = config.PORT, service: AuthenticationService = None):
    app = create_app(service)
    logger.info("Server listening on %s:%d", host, port)
    app.run(host=host, port=port, threaded=True)


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    run()
