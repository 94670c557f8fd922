"""
JSON API for the depot dashboard.

Run locally:
    flask --app depot_allocation.api.app:create_app run
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import Any, Dict, List

import pandas as pd
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from depot_allocation.allocation.import_usecase import bulk_import, import_history, import_manifest
from depot_allocation.allocation.transfer_usecase import AllocationError, set_discharge_status, transfer_container
from depot_allocation.auth.rbac import ROLES
from depot_allocation.capacity_reporting.rebalancing import run_rebalancing_suggestions
from depot_allocation.data.allocation_history import get_allocation_history
from depot_allocation.data.containers import delete_container, get_containers, insert_container
from depot_allocation.data.depots import get_depot_usage_df
from depot_allocation.data.users import delete_operator, get_operators, get_user_role, insert_operator
from depot_allocation.forecasting.empty_container_forecast import run_empty_container_forecast
from depot_allocation.recommendation.allocation_config import AllocationConfigError
from depot_allocation.recommendation.recommend_usecase import run_depot_recommendation
from depot_allocation.utils.logger import get_logger

log = get_logger(__name__)

DEFAULT_ROLE = "operator"


def _json_body() -> Dict[str, Any]:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    return body


def _usage_records() -> List[Dict[str, Any]]:
    df = get_depot_usage_df()
    capacity = df["capacity_teu"].astype(float)
    df["usage_percentage"] = (df["used_teu"] / capacity.where(capacity > 0)) * 100
    return df.astype(object).where(pd.notna(df), None).to_dict(orient="records")


def create_app() -> Flask:
    app = Flask(__name__)

    # ------------------------------------------------------------
    # Error mapping
    # ------------------------------------------------------------
    @app.errorhandler(ValueError)
    def _bad_request(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(AllocationConfigError)
    def _misconfigured(e):
        log.error("Allocation settings invalid: %s", e)
        return jsonify({"error": str(e)}), 500

    @app.errorhandler(AllocationError)
    def _allocation_failed(e):
        return jsonify({"error": str(e), "step": e.step}), 500

    @app.errorhandler(Exception)
    def _internal_error(e):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.description}), e.code
        log.error("Unhandled API error on %s", request.path, exc_info=True)
        return jsonify({"error": str(e) or "Internal server error"}), 500

    # ------------------------------------------------------------
    # Recommendation
    # ------------------------------------------------------------
    @app.post("/api/recommend-depots")
    def recommend_depots():
        body = request.get_json(silent=True) or {}
        containers = body.get("containers") if isinstance(body, dict) else None
        if not isinstance(containers, list) or not containers:
            return jsonify({"recommendations": []})

        decisions = run_depot_recommendation(containers)
        return jsonify({"recommendations": [d.to_dict() for d in decisions]})

    # ------------------------------------------------------------
    # Depots
    # ------------------------------------------------------------
    @app.get("/api/depots")
    def depots():
        return jsonify(_usage_records())

    @app.get("/api/statistics")
    def statistics():
        return jsonify(
            [
                {
                    "depot_id": r["id"],
                    "depot_name": r["name"],
                    "capacity_teu": r["capacity_teu"],
                    "used_teu": r["used_teu"],
                    "available_teu": r["available_teu"],
                    "usage_percentage": r["usage_percentage"],
                }
                for r in _usage_records()
            ]
        )

    # ------------------------------------------------------------
    # Allocation (transfers)
    # ------------------------------------------------------------
    @app.get("/api/allocation")
    def allocation_history():
        return jsonify(get_allocation_history(limit=50))

    @app.post("/api/allocation")
    def allocate():
        body = _json_body()
        history = transfer_container(
            container_id=body.get("container_id"),
            from_depot_id=body.get("from_depot_id"),
            to_depot_id=body.get("to_depot_id"),
            quantity_teu=body.get("quantity_teu"),
            reason=body.get("reason"),
            user_email=body.get("user_email"),
        )
        return jsonify([history]), 201

    # ------------------------------------------------------------
    # Containers
    # ------------------------------------------------------------
    @app.get("/api/containers")
    def containers():
        depot_id = request.args.get("depot_id", type=int)
        return jsonify(get_containers(depot_id))

    @app.post("/api/containers")
    def create_container():
        body = _json_body()
        new_id = insert_container(body)
        return jsonify([{"id": new_id, **body}]), 201

    @app.delete("/api/containers")
    def remove_container():
        container_id = request.args.get("id", type=int)
        if container_id is None:
            raise ValueError("ID is required")
        delete_container(container_id)
        return jsonify({"success": True, "message": "Container deleted successfully"})

    @app.post("/api/container/update-discharge-status")
    def update_discharge():
        body = _json_body()
        set_discharge_status(body.get("container_id"), body.get("discharge_status"))
        return jsonify({"success": True})

    # ------------------------------------------------------------
    # Imports
    # ------------------------------------------------------------
    @app.post("/api/bulk-import")
    def bulk_import_route():
        body = _json_body()
        rows = body.get("containers")
        if not isinstance(rows, list):
            raise ValueError("Invalid containers data")
        result = bulk_import(rows, user_email=body.get("user_email"), file_name=body.get("file_name"))
        return jsonify(result.to_dict())

    @app.get("/api/bulk-import/history")
    def bulk_import_history():
        history = import_history(request.args.get("limit", 50))
        return jsonify({"history": history, "warning": None, "source": "activity_logs"})

    @app.post("/api/manifest/import")
    def manifest_import():
        body = _json_body()
        rows = body.get("containers")
        if not isinstance(rows, list):
            raise ValueError("No containers to import")
        written = import_manifest(rows)
        return jsonify({"success": True, "message": f"{written} containers imported successfully"})

    # ------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------
    @app.get("/api/rebalancing/suggestions")
    def rebalancing_suggestions():
        return jsonify([asdict(s) for s in run_rebalancing_suggestions(limit=10)])

    @app.get("/api/forecast/empty-containers")
    def empty_container_forecast():
        forecasts = run_empty_container_forecast()
        return jsonify(
            {
                "success": True,
                "forecasts": [f.to_dict() for f in forecasts],
                "generated_at": datetime.now().isoformat(),
            }
        )

    # ------------------------------------------------------------
    # Users / operators
    # ------------------------------------------------------------
    @app.get("/api/auth/user-role")
    def user_role():
        email = request.args.get("email")
        if not email:
            return jsonify({"error": "Unauthorized"}), 401
        role = get_user_role(email)
        return jsonify({"role": role if role in ROLES else DEFAULT_ROLE})

    @app.get("/api/operators")
    def operators():
        return jsonify({"operators": get_operators()})

    @app.post("/api/operators")
    def create_operator():
        body = _json_body()
        return jsonify({"operator": insert_operator(body.get("email"), body.get("name"))})

    @app.delete("/api/operators/<int:operator_id>")
    def remove_operator(operator_id: int):
        delete_operator(operator_id)
        return jsonify({"success": True})

    return app
