"""HTTP routes for the Flask API."""

import logging
from http import HTTPStatus
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from goalpath.core.dashboard import build_estimate, build_projection, build_trend
from goalpath.core.errors import GoalpathError
from goalpath.schemas.estimate import EstimateRequest
from goalpath.schemas.ping import PingResponse
from goalpath.schemas.projection import ProjectionRequest
from goalpath.schemas.trend import TrendRequest

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    return jsonify({"detail": exc.errors(include_url=False, include_context=False)}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.errorhandler(GoalpathError)
def _handle_core_error(exc: GoalpathError):
    """Unparseable configuration and similar input problems."""
    logger.info("rejected request: %s", exc)
    return jsonify({"detail": str(exc)}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    response = PingResponse(message="pong")
    return jsonify(response.model_dump())


@api_bp.post("/projection")
def projection() -> Any:
    """Enriched projection series with milestones and contribution scenarios."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    payload = ProjectionRequest.model_validate(raw_payload)
    result = build_projection(payload, forward_years=current_app.config["DEFAULT_FORWARD_YEARS"])
    return jsonify(result.model_dump(mode="json"))


@api_bp.post("/trend")
def trend() -> Any:
    """Exponential trend, ±1σ band and multiplier for an index price series."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    payload = TrendRequest.model_validate(raw_payload)
    result = build_trend(payload)
    return jsonify(result.model_dump(mode="json"))


@api_bp.post("/estimate")
def estimate() -> Any:
    """Today's estimated portfolio value and contribution progress."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    payload = EstimateRequest.model_validate(raw_payload)
    result = build_estimate(payload)
    return jsonify(result.model_dump(mode="json"))
