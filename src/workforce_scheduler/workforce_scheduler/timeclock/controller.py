from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import (
    current_identity,
    handle_domain_errors,
    json_body,
    login_required,
    manager_required,
)
from ..common.validators import optional_id
from ..core.enums import OvertimeDecision
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.time_clock_service

    @app.route("/api/v1/time-clock/status", methods=["GET"], endpoint="time_clock_status")
    @login_required
    @handle_domain_errors
    def time_clock_status():
        user_id, org_id = current_identity()
        status = service.get_clock_status(org_id, user_id)
        return jsonify({"success": True, "data": status.as_dict()}), 200

    @app.route("/api/v1/time-clock/clock-in", methods=["POST"], endpoint="time_clock_in")
    @login_required
    @handle_domain_errors
    def time_clock_in():
        user_id, org_id = current_identity()
        data = json_body()
        force = data.get("force", False)
        if not isinstance(force, bool):
            raise ValidationError("force must be a boolean")
        entry = service.clock_in(org_id, user_id, optional_id(data.get("shiftId"), "shiftId"), force)
        return jsonify({"success": True, "data": entry.as_dict()}), 201

    @app.route("/api/v1/time-clock/clock-out", methods=["POST"], endpoint="time_clock_out")
    @login_required
    @handle_domain_errors
    def time_clock_out():
        user_id, org_id = current_identity()
        data = json_body()
        result = service.clock_out(
            org_id,
            user_id,
            time_entry_id=optional_id(data.get("timeEntryId"), "timeEntryId"),
            shift_id=optional_id(data.get("shiftId"), "shiftId"),
        )
        return jsonify({"success": True, "data": result.as_dict()}), 200

    @app.route("/api/v1/time-clock/my-week", methods=["GET"], endpoint="time_clock_my_week")
    @login_required
    @handle_domain_errors
    def time_clock_my_week():
        user_id, org_id = current_identity()
        week = service.get_my_weekly_hours(org_id, user_id, request.args.get("weekStart") or None)
        return jsonify({"success": True, "data": week.as_dict()}), 200

    @app.route("/api/v1/time-clock/overtime-requests", methods=["GET"], endpoint="overtime_requests")
    @manager_required
    @handle_domain_errors
    def overtime_requests():
        _, org_id = current_identity()
        pending = service.list_pending_overtime_requests(org_id)
        return jsonify({"success": True, "data": [e.as_dict() for e in pending]}), 200

    def _review(entry_id: str, decision: OvertimeDecision):
        user_id, org_id = current_identity()
        entry = service.review_overtime_request(org_id, entry_id, decision, reviewer_id=user_id)
        return jsonify({"success": True, "data": entry.as_dict()}), 200

    @app.route(
        "/api/v1/time-clock/overtime-requests/<entry_id>/approve",
        methods=["PUT"],
        endpoint="overtime_request_approve",
    )
    @manager_required
    @handle_domain_errors
    def overtime_request_approve(entry_id: str):
        return _review(entry_id, OvertimeDecision.APPROVE)

    @app.route(
        "/api/v1/time-clock/overtime-requests/<entry_id>/deny",
        methods=["PUT"],
        endpoint="overtime_request_deny",
    )
    @manager_required
    @handle_domain_errors
    def overtime_request_deny(entry_id: str):
        return _review(entry_id, OvertimeDecision.DENY)
