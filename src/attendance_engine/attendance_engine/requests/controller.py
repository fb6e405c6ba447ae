from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import current_user_id, login_required, result_response, roles_required, to_json
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError, ValidationError
from ..core.result import Result


def register(app: Flask, container: Container) -> None:
    engine = container.engine
    approvals = container.approvals

    @app.route("/api/requests", methods=["POST"], endpoint="api_submit_request")
    @login_required
    def api_submit_request():
        data = request.get_json(silent=True) or {}
        try:
            try:
                request_date = parse_iso_date(str(data.get("request_date") or ""))
            except ValueError:
                raise ValidationError("request_date must be YYYY-MM-DD")
            request_id = approvals.submit(
                user_id=current_user_id(),
                request_type=str(data.get("request_type") or ""),
                request_date=request_date,
                reason=data.get("reason"),
            )
        except DomainError as exc:
            return result_response(Result.from_error(exc))
        return jsonify({"success": True, "request_id": request_id}), 201

    @app.route("/api/requests/<int:request_id>/history", methods=["GET"], endpoint="api_request_history")
    @roles_required(Role.ADMIN, Role.STAFF)
    def api_request_history(request_id: int):
        try:
            entries = approvals.history(request_id)
        except DomainError as exc:
            return result_response(Result.from_error(exc))
        return jsonify({"success": True, "data": to_json(list(entries))}), 200

    @app.route("/api/requests/<int:request_id>/approve", methods=["POST"], endpoint="api_approve_request")
    @roles_required(Role.ADMIN, Role.STAFF)
    def api_approve_request(request_id: int):
        data = request.get_json(silent=True) or {}
        return result_response(engine.approve_request(request_id, current_user_id(), data.get("comment")))

    @app.route("/api/requests/<int:request_id>/reject", methods=["POST"], endpoint="api_reject_request")
    @roles_required(Role.ADMIN, Role.STAFF)
    def api_reject_request(request_id: int):
        data = request.get_json(silent=True) or {}
        return result_response(engine.reject_request(request_id, current_user_id(), data.get("comment")))
