from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from flask import Flask, jsonify, request

from ..common.datetime_utils import coerce_date, today_local
from ..container import Container
from ..core.constants import DEFAULT_UPCOMING_LIMIT
from ..core.enums import ErrorKind
from ..core.exceptions import ValidationError
from ..core.logging import get_logger
from ..leaves.queries import leaves_for_member, leaves_on, total_leave_days, upcoming_leaves

logger = get_logger(__name__)

_STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONSTRAINT_VIOLATION: 409,
    ErrorKind.SCHEMA_NOT_PROVISIONED: 502,
    ErrorKind.CONNECTION_FAILURE: 502,
    ErrorKind.PARTIAL_LOAD_FAILURE: 502,
    ErrorKind.MUTATION_FAILURE: 502,
}


def _payload() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def _merged(existing: Optional[Dict[str, Any]], body: Dict[str, Any]) -> Dict[str, Any]:
    # PUT bodies may be partial; unspecified fields keep their current value.
    merged = dict(existing or {})
    merged.update(body)
    return merged


def _dicts(items: Iterable) -> list:
    return [item.to_dict() for item in items]


def register(app: Flask, container: Container) -> None:
    mediator = container.mediator

    def respond(data: Any = None, *, ok: bool = True, created: bool = False) -> Tuple[Any, int]:
        notes = mediator.drain_notifications()
        status = 201 if created else 200
        if not ok:
            kinds = [n.kind for n in notes if n.is_error and n.kind is not None]
            status = _STATUS_BY_KIND.get(kinds[0], 400) if kinds else 400
        body = {
            "ok": ok,
            "data": data,
            "storageMode": mediator.mode.value,
            "notifications": [n.to_dict() for n in notes],
        }
        return jsonify(body), status

    def guarded(view: Callable[..., Tuple[Any, int]]):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValidationError as e:
                return jsonify({"ok": False, "data": None, "notifications": [
                    {"level": "error", "title": "Error", "message": str(e), "kind": e.kind.value}
                ]}), 400
            except Exception:
                logger.exception("unexpected error in %s", view.__name__)
                return jsonify({"ok": False, "data": None, "notifications": [
                    {"level": "error", "title": "Error", "message": "Internal error"}
                ]}), 500

        return wrapper

    def _find(items: Iterable, item_id: str):
        for item in items:
            if item.id == item_id:
                return item
        return None

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------
    @app.route("/api/state", methods=["GET"], endpoint="state")
    def state():
        return respond(mediator.snapshot())

    @app.route("/api/session/reload", methods=["POST"], endpoint="reload_session")
    @guarded
    def reload_session():
        mediator.initialize()
        return respond(mediator.snapshot())

    # ------------------------------------------------------------------
    # Team members
    # ------------------------------------------------------------------
    @app.route("/api/members", methods=["GET"], endpoint="list_members")
    def list_members():
        return respond(_dicts(mediator.team_members))

    @app.route("/api/members", methods=["POST"], endpoint="add_member")
    @guarded
    def add_member():
        body = _payload()
        member = mediator.add_member(
            name=body.get("name", ""),
            email=body.get("email", ""),
            department=body.get("department", ""),
            avatar=body.get("avatar"),
        )
        return respond(member.to_dict() if member else None, ok=member is not None, created=member is not None)

    @app.route("/api/members/<member_id>", methods=["PUT"], endpoint="edit_member")
    @guarded
    def edit_member(member_id: str):
        existing = _find(mediator.team_members, member_id)
        body = _merged(existing.to_dict() if existing else None, _payload())
        member = mediator.edit_member(
            member_id,
            name=body.get("name", ""),
            email=body.get("email", ""),
            department=body.get("department", ""),
            avatar=body.get("avatar"),
        )
        return respond(member.to_dict() if member else None, ok=member is not None)

    @app.route("/api/members/<member_id>", methods=["DELETE"], endpoint="delete_member")
    @guarded
    def delete_member(member_id: str):
        ok = mediator.delete_member(member_id)
        return respond({"id": member_id} if ok else None, ok=ok)

    @app.route("/api/members/<member_id>/leaves", methods=["GET"], endpoint="member_leaves")
    def member_leaves(member_id: str):
        leaves = leaves_for_member(member_id, mediator.leave_requests)
        return respond({"leaveRequests": _dicts(leaves), "totalDays": total_leave_days(leaves)})

    # ------------------------------------------------------------------
    # Departments
    # ------------------------------------------------------------------
    @app.route("/api/departments", methods=["GET"], endpoint="list_departments")
    def list_departments():
        data = []
        for dept in mediator.departments:
            row = dept.to_dict()
            row["memberCount"] = mediator.member_count(dept.name)
            data.append(row)
        return respond(data)

    @app.route("/api/departments", methods=["POST"], endpoint="add_department")
    @guarded
    def add_department():
        body = _payload()
        dept = mediator.add_department(body.get("name", ""), body.get("description"))
        return respond(dept.to_dict() if dept else None, ok=dept is not None, created=dept is not None)

    @app.route("/api/departments/<department_id>", methods=["PUT"], endpoint="edit_department")
    @guarded
    def edit_department(department_id: str):
        existing = _find(mediator.departments, department_id)
        body = _merged(existing.to_dict() if existing else None, _payload())
        dept = mediator.edit_department(department_id, body.get("name", ""), body.get("description"))
        return respond(dept.to_dict() if dept else None, ok=dept is not None)

    @app.route("/api/departments/<department_id>", methods=["DELETE"], endpoint="delete_department")
    @guarded
    def delete_department(department_id: str):
        ok = mediator.delete_department(department_id)
        return respond({"id": department_id} if ok else None, ok=ok)

    # ------------------------------------------------------------------
    # Leave requests
    # ------------------------------------------------------------------
    @app.route("/api/leaves", methods=["GET"], endpoint="list_leaves")
    def list_leaves():
        return respond(_dicts(mediator.leave_requests))

    @app.route("/api/leaves", methods=["POST"], endpoint="submit_leave")
    @guarded
    def submit_leave():
        body = _payload()
        leave = mediator.submit_leave(
            employee_id=body.get("employeeId", ""),
            start_date=body.get("startDate"),
            end_date=body.get("endDate"),
            leave_type=body.get("leaveType"),
            reason=body.get("reason", ""),
        )
        return respond(leave.to_dict() if leave else None, ok=leave is not None, created=leave is not None)

    @app.route("/api/leaves/<leave_id>", methods=["PUT"], endpoint="edit_leave")
    @guarded
    def edit_leave(leave_id: str):
        existing = _find(mediator.leave_requests, leave_id)
        body = _merged(existing.to_dict() if existing else None, _payload())
        leave = mediator.edit_leave(
            leave_id,
            start_date=body.get("startDate"),
            end_date=body.get("endDate"),
            leave_type=body.get("leaveType"),
            reason=body.get("reason", ""),
        )
        return respond(leave.to_dict() if leave else None, ok=leave is not None)

    @app.route("/api/leaves/<leave_id>", methods=["DELETE"], endpoint="delete_leave")
    @guarded
    def delete_leave(leave_id: str):
        ok = mediator.delete_leave(leave_id)
        return respond({"id": leave_id} if ok else None, ok=ok)

    @app.route("/api/leaves/upcoming", methods=["GET"], endpoint="upcoming_leaves")
    @guarded
    def upcoming():
        limit = request.args.get("limit", default=DEFAULT_UPCOMING_LIMIT, type=int)
        if limit < 0:
            raise ValidationError("limit must be zero or greater")
        return respond(_dicts(upcoming_leaves(mediator.leave_requests, today=today_local(), limit=limit)))

    @app.route("/api/calendar", methods=["GET"], endpoint="calendar")
    @guarded
    def calendar():
        raw = request.args.get("date")
        day = coerce_date(raw, "date") if raw else today_local()
        return respond({"date": day.isoformat(), "leaveRequests": _dicts(leaves_on(day, mediator.leave_requests))})
