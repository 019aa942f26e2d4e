from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_non_empty, require_positive_int
from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT
from ..core.enums import Role
from ..core.exceptions import InvalidStateError, NotFoundError, StoreFailureError, ValidationError
from ..container import Container
from .model import AttendanceUpdate

logger = logging.getLogger(__name__)


def _error(message: str, status_code: int):
    return jsonify({"success": False, "message": message}), status_code


def register(app: Flask, container: Container) -> None:
    """JSON routes for attendance.

    Identity comes from the session (``employee_id`` and ``role``), which the
    external login flow populates.
    """

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "employee_id" not in session:
                return _error("Authentication required", 401)
            return view(*args, **kwargs)

        return wrapper

    def roles_required(*roles: Role):
        allowed = {r.value for r in roles}

        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                if "employee_id" not in session:
                    return _error("Authentication required", 401)
                if session.get("role") not in allowed:
                    return _error("Forbidden", 403)
                return view(*args, **kwargs)

            return wrapper

        return decorator

    def _parse_list_query() -> dict:
        args = request.args
        start = args.get("startDate")
        end = args.get("endDate")
        return {
            "start_date": parse_iso_date(start) if start else None,
            "end_date": parse_iso_date(end) if end else None,
            "page": require_positive_int(args.get("page"), "page", default=DEFAULT_PAGE),
            "limit": require_positive_int(args.get("limit"), "limit", default=DEFAULT_PAGE_LIMIT),
        }

    @app.errorhandler(NotFoundError)
    def handle_not_found(e: NotFoundError):
        return _error(str(e), 404)

    @app.errorhandler(InvalidStateError)
    def handle_invalid_state(e: InvalidStateError):
        return _error(str(e), 400)

    @app.errorhandler(ValidationError)
    def handle_validation(e: ValidationError):
        return _error(str(e), 400)

    @app.errorhandler(StoreFailureError)
    def handle_store_failure(e: StoreFailureError):
        logger.error("Attendance store failure on %s %s", request.method, request.path, exc_info=e)
        return _error("Attendance store is unavailable, please retry", 503)

    @app.route("/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    def check_in():
        record = container.attendance_service.check_in(str(session["employee_id"]))
        return jsonify(record.to_dict()), 201

    @app.route("/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    def check_out():
        record = container.attendance_service.check_out(str(session["employee_id"]))
        return jsonify(record.to_dict())

    @app.route("/attendance/me", methods=["GET"], endpoint="attendance_me")
    @login_required
    def my_attendance():
        page = container.attendance_service.list_attendance(str(session["employee_id"]), **_parse_list_query())
        return jsonify(page.to_dict())

    @app.route("/attendance/employee/<employee_id>", methods=["GET"], endpoint="attendance_employee")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def employee_attendance(employee_id: str):
        page = container.attendance_service.list_attendance(employee_id, **_parse_list_query())
        return jsonify(page.to_dict())

    @app.route("/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    @roles_required(Role.ADMIN, Role.MANAGER)
    def attendance_stats():
        args = request.args
        start = args.get("startDate")
        end = args.get("endDate")
        report = container.stats_service.get_stats(
            start_date=parse_iso_date(start) if start else None,
            end_date=parse_iso_date(end) if end else None,
            employee_id=args.get("employeeId") or None,
        )
        return jsonify(report.to_dict())

    @app.route("/attendance/<attendance_id>", methods=["PATCH"], endpoint="attendance_update")
    @roles_required(Role.ADMIN)
    def update_attendance(attendance_id: str):
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")
        patch = AttendanceUpdate.from_payload(payload)
        record = container.attendance_service.update_attendance(require_non_empty(attendance_id, "id"), patch)
        return jsonify(record.to_dict())
