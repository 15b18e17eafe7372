from __future__ import annotations

import logging
import uuid
from functools import wraps

from flask import Flask, jsonify, request, session

from ..core.enums import PersonKind
from ..core.exceptions import CollaboratorError, DomainError, SessionUnavailableError
from ..container import Container
from . import serializers
from .display import RecordingDisplay

_logger = logging.getLogger(__name__)

SESSION_KEY = "kiosk_session_id"


_KINDS = {"members": PersonKind.MEMBER, "visitors": PersonKind.VISITOR}


def _kind(value: str) -> PersonKind:
    try:
        return _KINDS[value.lower()]
    except KeyError as e:
        raise DomainError(f"unknown person kind: {value!r}") from e


def _int_arg(data: dict, key: str, default: int | None = None) -> int | None:
    value = data.get(key, default)
    if value in (None, ""):
        return default
    return int(value)


def register(app: Flask, container: Container) -> None:
    service = container.family_select_service

    def kiosk_session_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if SESSION_KEY not in session:
                return jsonify({"success": False, "message": "No kiosk session. Start one first."}), 401
            try:
                return view(session[SESSION_KEY], *args, **kwargs)
            except SessionUnavailableError as e:
                session.pop(SESSION_KEY, None)
                return jsonify({"success": False, "message": str(e)}), 410
            except CollaboratorError:
                _logger.exception("collaborator failure in %s", view.__name__)
                return jsonify({"success": False, "message": "System error"}), 500
            except (DomainError, ValueError, KeyError) as e:
                return jsonify({"success": False, "message": str(e)}), 400
            except Exception:
                _logger.exception("unexpected failure in %s", view.__name__)
                return jsonify({"success": False, "message": "System error"}), 500

        return wrapper

    def _respond(ok: bool, display: RecordingDisplay, **extra):
        return jsonify({"success": ok, **display.to_dict(), **extra})

    @app.route("/api/kiosk/sessions", methods=["POST"], endpoint="kiosk_open_session")
    def open_session():
        """Start a session over the families produced by the host search."""
        data = request.get_json(silent=True) or {}
        try:
            kiosk = serializers.kiosk_from_dict(data.get("kiosk") or {})
            families = [serializers.family_from_dict(f) for f in data.get("families", [])]
        except (DomainError, ValueError, KeyError) as e:
            return jsonify({"success": False, "message": str(e)}), 400

        previous = session.get(SESSION_KEY)
        if previous:
            service.close_session(previous)

        session_id = uuid.uuid4().hex
        service.open_session(session_id, kiosk, families)
        session[SESSION_KEY] = session_id

        display = RecordingDisplay()
        ok = service.start(session_id, display)
        return _respond(ok, display, session_id=session_id), 201

    @app.route("/api/kiosk/sessions", methods=["DELETE"], endpoint="kiosk_close_session")
    def close_session():
        session_id = session.pop(SESSION_KEY, None)
        if session_id:
            service.close_session(session_id)
        return jsonify({"success": True})

    @app.route("/api/kiosk", methods=["GET"], endpoint="kiosk_show")
    @kiosk_session_required
    def show(session_id: str):
        display = RecordingDisplay()
        ok = service.start(session_id, display)
        return _respond(ok, display)

    # -------- families --------
    @app.route("/api/kiosk/families/<int:family_id>/pick", methods=["POST"], endpoint="kiosk_pick_family")
    @kiosk_session_required
    def pick_family(session_id: str, family_id: int):
        display = RecordingDisplay()
        ok = service.pick_family(session_id, family_id, display)
        return _respond(ok, display)

    @app.route("/api/kiosk/families/<int:family_id>/remove", methods=["POST"], endpoint="kiosk_remove_family")
    @kiosk_session_required
    def remove_family(session_id: str, family_id: int):
        display = RecordingDisplay()
        ok = service.remove_family(session_id, family_id, display)
        return _respond(ok, display)

    @app.route("/api/kiosk/families/page", methods=["POST"], endpoint="kiosk_family_page")
    @kiosk_session_required
    def family_page(session_id: str):
        data = request.get_json(silent=True) or {}
        display = RecordingDisplay()
        ok = service.change_family_page(
            session_id, _int_arg(data, "start_index", 0), _int_arg(data, "page_size"), display
        )
        return _respond(ok, display)

    # -------- people --------
    @app.route("/api/kiosk/<any(members, visitors):kind>/page", methods=["POST"], endpoint="kiosk_people_page")
    @kiosk_session_required
    def people_page(session_id: str, kind: str):
        data = request.get_json(silent=True) or {}
        display = RecordingDisplay()
        ok = service.change_page(
            session_id,
            _kind(kind),
            start_index=_int_arg(data, "start_index", 0),
            page_size=_int_arg(data, "page_size"),
            selected_ids=data.get("selected_ids"),
            display=display,
        )
        return _respond(ok, display)

    @app.route("/api/kiosk/<any(members, visitors):kind>/toggle", methods=["POST"], endpoint="kiosk_toggle_people")
    @kiosk_session_required
    def toggle_people(session_id: str, kind: str):
        data = request.get_json(silent=True) or {}
        display = RecordingDisplay()
        ok = service.toggle_people(session_id, _kind(kind), str(data.get("selected_ids") or ""), display)
        return _respond(ok, display)

    @app.route("/api/kiosk/next", methods=["POST"], endpoint="kiosk_next")
    @kiosk_session_required
    def next_step(session_id: str):
        """Confirm who is checking in; options are pre-selected from attendance history."""
        data = request.get_json(silent=True) or {}
        display = RecordingDisplay()
        ok = service.confirm(
            session_id, str(data.get("member_ids") or ""), str(data.get("visitor_ids") or ""), display
        )
        return _respond(ok, display)

    # -------- admission --------
    @app.route("/api/kiosk/<any(members, visitors):kind>/add", methods=["POST"], endpoint="kiosk_begin_add")
    @kiosk_session_required
    def begin_add(session_id: str, kind: str):
        display = RecordingDisplay()
        ok = service.begin_add_person(session_id, _kind(kind), display)
        return _respond(ok, display)

    @app.route("/api/kiosk/people/new", methods=["POST"], endpoint="kiosk_add_new_person")
    @kiosk_session_required
    def add_new_person(session_id: str):
        data = request.get_json(silent=True) or {}
        row = serializers.pending_person_from_dict(data)
        display = RecordingDisplay()
        ok = service.add_new_person(session_id, row, display)
        return _respond(ok, display)

    @app.route("/api/kiosk/people/existing/<int:person_id>", methods=["POST"], endpoint="kiosk_add_existing_person")
    @kiosk_session_required
    def add_existing_person(session_id: str, person_id: int):
        display = RecordingDisplay()
        ok = service.add_existing_person(session_id, person_id, display)
        return _respond(ok, display)

    @app.route("/api/kiosk/new-family", methods=["POST"], endpoint="kiosk_begin_new_family")
    @kiosk_session_required
    def begin_new_family(session_id: str):
        display = RecordingDisplay()
        rows = service.begin_new_family(session_id, display)
        return _respond(True, display, rows=[serializers.pending_person_to_dict(r) for r in rows])

    @app.route("/api/kiosk/new-family/page", methods=["POST"], endpoint="kiosk_new_family_page")
    @kiosk_session_required
    def new_family_page(session_id: str):
        data = request.get_json(silent=True) or {}
        rows = [serializers.pending_person_from_dict(r) for r in data.get("rows", [])]
        display = RecordingDisplay()
        page = service.change_new_family_page(session_id, rows, _int_arg(data, "start_index", 0), display)
        return _respond(True, display, rows=[serializers.pending_person_to_dict(r) for r in page])

    @app.route("/api/kiosk/new-family/save", methods=["POST"], endpoint="kiosk_save_new_family")
    @kiosk_session_required
    def save_new_family(session_id: str):
        data = request.get_json(silent=True) or {}
        rows = [serializers.pending_person_from_dict(r) for r in data.get("rows", [])]
        display = RecordingDisplay()
        ok = service.save_new_family(session_id, rows, display)
        return _respond(ok, display)

    @app.route("/api/kiosk/new-family/cancel", methods=["POST"], endpoint="kiosk_cancel_new_family")
    @kiosk_session_required
    def cancel_new_family(session_id: str):
        service.cancel_new_family(session_id)
        return jsonify({"success": True})

    # -------- edit info --------
    @app.route("/api/kiosk/person-info", methods=["POST"], endpoint="kiosk_load_person_info")
    @kiosk_session_required
    def load_person_info(session_id: str):
        data = request.get_json(silent=True) or {}
        display = RecordingDisplay()
        info = service.load_person_info(
            session_id, str(data.get("member_ids") or ""), str(data.get("visitor_ids") or ""), display
        )
        payload = serializers.person_info_to_dict(info) if info is not None else None
        return _respond(info is not None, display, person=payload)

    @app.route("/api/kiosk/person-info/save", methods=["POST"], endpoint="kiosk_save_person_info")
    @kiosk_session_required
    def save_person_info(session_id: str):
        data = request.get_json(silent=True) or {}
        form = serializers.person_info_form_from_dict(data.get("person") or {})
        display = RecordingDisplay()
        ok = service.save_person_info(
            session_id, str(data.get("member_ids") or ""), str(data.get("visitor_ids") or ""), form, display
        )
        return _respond(ok, display)

    # -------- reference data --------
    @app.route("/api/kiosk/ability-grades", methods=["GET"], endpoint="kiosk_ability_grades")
    def ability_grades():
        options = container.reference_service.ability_grade_options()
        return jsonify(
            {
                "success": True,
                "options": [{"value": o.value, "label": o.label, "group": o.group.value} for o in options],
            }
        )
