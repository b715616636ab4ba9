from decimal import Decimal
from flask import Flask, request, jsonify
from flask_cors import CORS
from settlement import SettlementProcessor
from settlement.constants import DEFAULT_EXCHANGE_RATE
import os
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)

# Enable CORS for all routes (the sales editor calls the API from the browser)
CORS(app)

# Rate used when a request does not send its own
EXCHANGE_RATE = Decimal(os.environ.get("SETTLEMENT_EXCHANGE_RATE", str(DEFAULT_EXCHANGE_RATE)))

# Initialize the settlement processor
processor = SettlementProcessor(default_exchange_rate=EXCHANGE_RATE)


@app.route("/api", methods=["GET"])
def api_info():
    """API information endpoint"""
    return jsonify({
        "status": "ok",
        "message": "Booth Settlement API",
        "version": "1.0",
        "exchange_rate": float(EXCHANGE_RATE),
        "endpoints": {
            "settle": "/settle [POST]",
            "health": "/health [GET]"
        }
    }), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check for monitoring"""
    return jsonify({"status": "healthy"}), 200


@app.route("/settle", methods=["POST"])
def settle():
    """
    Split a booth sale between the principal and the associate
    """
    try:
        # Get input data
        input_data = request.get_json(force=True, silent=True)

        if not input_data:
            return jsonify({
                "error": "No input data provided",
                "status": "failed"
            }), 400

        if not isinstance(input_data, dict):
            return jsonify({
                "error": "Request body must be a JSON object",
                "status": "validation_failed"
            }), 400

        # Log request
        associate_id = input_data.get("associate_id") or "none"
        logger.info(f"Settling booth sale for associate: {associate_id}")

        # Process through engine
        result = processor.process_from_dict(input_data)

        logger.info(f"Settlement computed: {associate_id}")

        return jsonify(result), 200

    except (ValueError, KeyError, TypeError) as e:
        # Validation errors from engine
        logger.error(f"Validation error: {str(e)}")
        return jsonify({
            "error": str(e),
            "status": "validation_failed"
        }), 400

    except Exception as e:
        # Unexpected errors
        logger.error(f"Processing error: {str(e)}", exc_info=True)
        return jsonify({
            "error": "An unexpected error occurred during processing",
            "status": "failed"
        }), 500


@app.route("/process", methods=["POST"])
def process_legacy():
    """Legacy endpoint - redirects to /settle"""
    return settle()


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=False)
