"""HTTP trigger blueprint — health check and UI message endpoints."""

import json
import logging
from typing import Any
from urllib.parse import urlparse

import azure.functions as func

from drive_image_import import __version__
from drive_image_import.canvas.document import EDITOR_DESIGN, CanvasDocument
from drive_image_import.config import load_config
from drive_image_import.messages import MSG_IMPORT_IMAGES, MessageHandler
from drive_image_import.orchestration.importer import canvas_importer_from_config
from drive_image_import.orchestration.scanner import folder_scanner_from_config

logger = logging.getLogger(__name__)

bp = func.Blueprint()


@bp.route(route="health", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Health check endpoint.

    Returns service status, version and the Drive API host the pipelines call.
    """
    logger.info("[health_check] health check requested")

    try:
        config = load_config()
        body = json.dumps(
            {
                "status": "ok",
                "version": __version__,
                "driveApiHost": urlparse(config.drive_api_base_url).netloc,
            }
        )
        return func.HttpResponse(body, status_code=200, mimetype="application/json")

    except Exception:
        logger.error("[health_check] health check failed", exc_info=True)
        error_body = json.dumps({"status": "error", "message": "Internal server error"})
        return func.HttpResponse(error_body, status_code=500, mimetype="application/json")


@bp.route(route="messages", methods=["POST"], auth_level=func.AuthLevel.FUNCTION)
def post_message(req: func.HttpRequest) -> func.HttpResponse:
    """Process one UI message and return every message it produced.

    The body is a single inbound message (``scan-drive`` or ``import-images``).
    Imports run against a fresh in-memory canvas document for the editor named
    by the ``editor`` query parameter, and the resulting document is returned
    alongside the outbound messages.
    """
    try:
        message = req.get_json()
    except ValueError:
        logger.warning("[post_message] request body is not valid JSON")
        error_body = json.dumps({"status": "error", "message": "Request body must be JSON"})
        return func.HttpResponse(error_body, status_code=400, mimetype="application/json")

    if not isinstance(message, dict):
        error_body = json.dumps({"status": "error", "message": "Message must be a JSON object"})
        return func.HttpResponse(error_body, status_code=400, mimetype="application/json")

    editor_type = req.params.get("editor", EDITOR_DESIGN)
    logger.info(
        "[post_message] message requested; type:%s;editor:%s", message.get("type"), editor_type
    )

    try:
        document = CanvasDocument(editor_type)
    except ValueError as exc:
        error_body = json.dumps({"status": "error", "message": str(exc)})
        return func.HttpResponse(error_body, status_code=400, mimetype="application/json")

    try:
        config = load_config()
        handler = MessageHandler(
            scanner=folder_scanner_from_config(config),
            importer=canvas_importer_from_config(config, editor_type, document),
        )
        outbound: list[dict[str, Any]] = []
        handler.handle(message, outbound.append)

        result: dict[str, Any] = {"status": "ok", "messages": outbound}
        if message.get("type") == MSG_IMPORT_IMAGES:
            result["document"] = document.to_dict()
        logger.info("[post_message] message processed; outbound_count:%d", len(outbound))
        return func.HttpResponse(json.dumps(result), status_code=200, mimetype="application/json")

    except Exception:
        logger.error("[post_message] message processing failed", exc_info=True)
        error_body = json.dumps({"status": "error", "message": "Internal server error"})
        return func.HttpResponse(error_body, status_code=500, mimetype="application/json")
