from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import result_response, roles_required
from ..container import Container
from ..core.enums import ErrorKind, Role
from ..core.result import Result


def register(app: Flask, container: Container) -> None:
    engine = container.engine

    @app.route("/api/admin/closeout", methods=["POST"], endpoint="api_admin_closeout")
    @roles_required(Role.ADMIN)
    def api_admin_closeout():
        data = request.get_json(silent=True) or {}
        organization_id = data.get("organization_id")
        logical_date = data.get("date")
        if organization_id is None and logical_date is None:
            return result_response(engine.run_end_of_day_closeout())

        try:
            org = int(organization_id)
            day = parse_iso_date(str(logical_date))
        except (TypeError, ValueError):
            return result_response(
                Result.failure(ErrorKind.VALIDATION, "organization_id and date (YYYY-MM-DD) are both required")
            )
        return result_response(engine.run_end_of_day_closeout(org, day))
