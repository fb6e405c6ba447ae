from __future__ import annotations

from flask import Flask, request

from ..common.web import current_user_id, login_required, result_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    engine = container.engine

    @app.route("/api/ic-card/scan", methods=["POST"], endpoint="api_card_scan")
    def api_card_scan():
        # Called by the reader device, which has no session.
        data = request.get_json(silent=True) or {}
        return result_response(engine.handle_card_scan(str(data.get("idm") or "")))

    @app.route("/api/attendance/qr", methods=["POST"], endpoint="api_attendance_qr")
    @login_required
    def api_attendance_qr():
        return result_response(engine.record_qr_scan(current_user_id()))

    @app.route("/api/attendance/checkout", methods=["POST"], endpoint="api_attendance_checkout")
    @login_required
    def api_attendance_checkout():
        return result_response(engine.record_checkout(current_user_id()))
