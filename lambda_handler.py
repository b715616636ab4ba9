"""
AWS Lambda handler for the Booth Settlement API.

This is the production entry point for AWS Lambda deployments.
For local development, use main.py (Flask app) instead.
"""

import base64
import json
import logging
import os
from decimal import Decimal

from settlement import SettlementProcessor
from settlement.constants import DEFAULT_EXCHANGE_RATE

# Configure logging
logger = logging.getLogger()
logger.setLevel(logging.INFO)

# Environment (dev, staging, prod)
ENVIRONMENT = os.environ.get("ENVIRONMENT", "dev")

# Rate used when a request does not send its own
EXCHANGE_RATE = Decimal(os.environ.get("SETTLEMENT_EXCHANGE_RATE", str(DEFAULT_EXCHANGE_RATE)))

# Initialize processor (reused across warm invocations)
processor = SettlementProcessor(default_exchange_rate=EXCHANGE_RATE)

# CORS headers for API Gateway
CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
}


def lambda_handler(event, context):
    """
    Main Lambda entry point.

    Handles API Gateway events for:
    - GET /health
    - GET /api
    - POST /settle (and the legacy POST /process)
    - OPTIONS (CORS preflight)
    """
    # Handle CORS preflight
    http_method = event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method", "")
    if http_method == "OPTIONS":
        return {"statusCode": 200, "headers": CORS_HEADERS, "body": ""}

    # Get path (supports both REST API and HTTP API formats)
    path = event.get("path") or event.get("rawPath", "")

    # Route to appropriate handler
    if path == "/health" and http_method == "GET":
        return handle_health()
    elif path in ("/settle", "/process") and http_method == "POST":
        return handle_settle(event)
    elif path == "/api" and http_method == "GET":
        return handle_api_info()
    else:
        return {"statusCode": 404, "headers": CORS_HEADERS, "body": json.dumps({"error": "Not found", "path": path})}


def handle_health():
    """Health check endpoint."""
    return {
        "statusCode": 200,
        "headers": CORS_HEADERS,
        "body": json.dumps({"status": "healthy", "environment": ENVIRONMENT}),
    }


def handle_api_info():
    """API information endpoint."""
    return {
        "statusCode": 200,
        "headers": CORS_HEADERS,
        "body": json.dumps(
            {
                "status": "ok",
                "message": "Booth Settlement API",
                "version": "1.0",
                "environment": ENVIRONMENT,
                "runtime": "AWS Lambda",
                "exchange_rate": float(EXCHANGE_RATE),
                "endpoints": {"settle": "/settle [POST]", "health": "/health [GET]"},
            }
        ),
    }


def handle_settle(event):
    """Split a booth sale through the settlement engine."""
    try:
        # Parse request body
        body = event.get("body", "")
        if isinstance(body, str):
            if not body:
                return {
                    "statusCode": 400,
                    "headers": CORS_HEADERS,
                    "body": json.dumps({"error": "No input data provided", "status": "failed"}),
                }
            # Handle base64 encoded body (API Gateway)
            if event.get("isBase64Encoded"):
                body = base64.b64decode(body).decode("utf-8")
            input_data = json.loads(body)
        else:
            input_data = body

        if not isinstance(input_data, dict):
            return {
                "statusCode": 400,
                "headers": CORS_HEADERS,
                "body": json.dumps({"error": "Request body must be a JSON object", "status": "validation_failed"}),
            }

        # Log request
        associate_id = input_data.get("associate_id") or "none"
        logger.info(f"Settling booth sale for associate: {associate_id}")

        # Process through engine
        result = processor.process_from_dict(input_data)

        logger.info(f"Settlement computed: {associate_id}")

        return {"statusCode": 200, "headers": CORS_HEADERS, "body": json.dumps(result)}

    except json.JSONDecodeError as e:
        logger.error(f"JSON parse error: {str(e)}")
        return {
            "statusCode": 400,
            "headers": CORS_HEADERS,
            "body": json.dumps({"error": f"Invalid JSON: {str(e)}", "status": "failed"}),
        }

    except (ValueError, KeyError, TypeError) as e:
        # Validation errors from engine (negative amounts, bad rate, invalid types, etc.)
        logger.error(f"Validation error: {str(e)}")
        return {
            "statusCode": 400,
            "headers": CORS_HEADERS,
            "body": json.dumps({"error": f"Validation error: {str(e)}", "status": "validation_failed"}),
        }

    except Exception as e:
        # Unexpected errors - log details but return generic message to avoid information disclosure
        logger.error(f"Unexpected processing error: {str(e)}", exc_info=True)
        return {
            "statusCode": 500,
            "headers": CORS_HEADERS,
            "body": json.dumps({"error": "An unexpected error occurred during processing", "status": "failed"}),
        }
