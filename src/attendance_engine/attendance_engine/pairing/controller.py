from __future__ import annotations

from flask import Flask

from ..common.web import current_user_id, login_required, result_response
from ..container import Container


def register(app: Flask, container: Container) -> None:
    engine = container.engine

    @app.route("/api/ic-card/register/start", methods=["POST"], endpoint="api_card_register_start")
    @login_required
    def api_card_register_start():
        return result_response(engine.start_pairing(current_user_id()))

    @app.route("/api/ic-card/register/status", methods=["GET"], endpoint="api_card_register_status")
    @login_required
    def api_card_register_status():
        return result_response(engine.get_pairing_status(current_user_id()))

    @app.route("/api/ic-card/register/confirm", methods=["POST"], endpoint="api_card_register_confirm")
    @login_required
    def api_card_register_confirm():
        return result_response(engine.confirm_pairing(current_user_id()), key="card_id")

    @app.route("/api/ic-card/register/cancel", methods=["POST"], endpoint="api_card_register_cancel")
    @login_required
    def api_card_register_cancel():
        return result_response(engine.cancel_pairing(current_user_id()))
