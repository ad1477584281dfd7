"""Flask REST API exposing the ledger core."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, Response, jsonify, request
from flask_cors import CORS

from ledger import config
from ledger.exceptions import PersistenceError, ValidationError
from ledger.export import encode, export_filename
from ledger.filters import build_criteria
from ledger.services import LedgerStore
from ledger.storage import JSONStorage
from ledger.validators import parse_entry_id, validate_entry_input


def create_app(data_dir: Optional[Path] = None, store: Optional[LedgerStore] = None) -> Flask:
    app = Flask(__name__)

    if config.is_development():
        CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)
    else:
        origins = config.allowed_origins()
        if origins:
            CORS(app, resources={r"/*": {"origins": origins}}, supports_credentials=True)
        else:
            CORS(app)

    if store is None:
        store = LedgerStore(JSONStorage(config.data_dir(data_dir)))

    def _success(payload: Any, status: int = 200):
        if status == 204:
            return ("", status)
        return jsonify(payload), status

    def _handle_error(exc: Exception, status: int, message: str):
        app.logger.error("%s: %s", message, exc)
        return jsonify({"error": message, "details": str(exc)}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, "Validation error")

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(exc: PersistenceError):
        return _handle_error(exc, 500, "Persistence error")

    def _json_body() -> Dict[str, Any]:
        if not request.is_json:
            raise ValidationError("Request content must be application/json")
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Malformed JSON body")
        return data

    def _criteria_from_args():
        return build_criteria(
            start=request.args.get("start") or request.args.get("startDate"),
            end=request.args.get("end") or request.args.get("endDate"),
            category=request.args.get("category"),
        )

    @app.get("/transactions")
    def list_transactions():
        view = store.view(_criteria_from_args())
        return _success({
            "items": [entry.to_dict() for entry in view.entries],
            "balance": f"{view.balance:.2f}",
        })

    @app.post("/transactions")
    def create_transaction():
        payload = _json_body()
        cleaned = validate_entry_input(
            payload.get("name"),
            payload.get("amount"),
            payload.get("type"),
            payload.get("date"),
            payload.get("category"),
        )
        entry = store.add(**cleaned)
        return _success(entry.to_dict(), 201)

    @app.delete("/transactions/<entry_id>")
    def delete_transaction(entry_id: str):
        # Unknown ids are not an error; the ledger is left unchanged.
        store.delete(parse_entry_id(entry_id))
        return _success({}, 204)

    @app.get("/summary")
    def summary():
        view = store.view(_criteria_from_args())
        return _success({
            "balance": f"{view.balance:.2f}",
            "monthly": [month.to_dict() for month in view.monthly],
        })

    @app.get("/categories")
    def list_categories():
        return _success({"items": store.categories()})

    @app.get("/export")
    def export_csv():
        entries = store.select(_criteria_from_args())
        return Response(
            encode(entries),
            mimetype="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
        )

    return app
