from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_date, today_iso
from ..common.validators import require_non_empty
from ..container import Container
from . import session as gate


def _payload() -> dict:
    return request.get_json(silent=True) or request.form.to_dict()


def register(app: Flask, container: Container) -> None:
    def _identity_json():
        identity = gate.current_identity(container.timezone)
        if identity is None:
            return None
        return {
            "name": identity.person,
            "company": identity.organization,
            "date": identity.date,
            "role": identity.role.value,
            "signed_in": identity.user_id is not None,
        }

    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        data = _payload()
        try:
            user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        except Exception as e:
            return gate.json_error(e)

        session.permanent = bool(data.get("remember_me"))
        gate.sign_in(container.auth_service.identity_for(user, today_iso(container.timezone)))
        return jsonify({"success": True, "identity": _identity_json()})

    @app.route("/api/signup", methods=["POST"], endpoint="signup")
    def signup():
        data = _payload()
        try:
            user = container.auth_service.register(
                name=data.get("name", ""),
                company=data.get("company", ""),
                email=data.get("email", ""),
                password=data.get("password", ""),
            )
        except Exception as e:
            return gate.json_error(e)

        gate.sign_in(container.auth_service.identity_for(user, today_iso(container.timezone)))
        return jsonify({"success": True, "identity": _identity_json()}), 201

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/identity", methods=["GET"], endpoint="identity")
    def identity():
        return jsonify({"success": True, "identity": _identity_json()})

    @app.route("/api/identity", methods=["POST"], endpoint="set_identity")
    def set_identity():
        """Device mode: name, company and date typed into the identity form."""
        data = _payload()
        try:
            name = require_non_empty(data.get("name", ""), "Name")
            company = require_non_empty(data.get("company", ""), "Company")
            date = (data.get("date") or "").strip() or today_iso(container.timezone)
            parse_iso_date(date)
            gate.set_device_identity(name=name, company=company, date=date)
            view = container.timesheet_service.today(gate.current_identity(container.timezone))
        except Exception as e:
            return gate.json_error(e)
        return jsonify({"success": True, "identity": _identity_json(), "today": view})

    @app.route("/api/identity", methods=["DELETE"], endpoint="clear_identity")
    def clear_identity():
        gate.clear_identity()
        return jsonify({"success": True, "message": "Cleared identity. Fill the form to start again."})
