"""
Flask Server - JSON API for event settlements
"""

from flask import Flask, jsonify, request
from flask_cors import CORS
import os

from fairsplit import SettlementSystem, ShapleyUnavailableError
from fairsplit.utils import setup_logging

logger = setup_logging()

app = Flask(__name__)
CORS(app)  # allow cross-origin requests

system = SettlementSystem()


# Healthcheck
@app.route('/health')
def health_check():
    return {"status": "ok"}


@app.route('/status')
def status():
    return jsonify(system.get_system_status())


@app.route('/settlement', methods=['POST'])
def settlement():
    """Settle the event snapshot in the request body

    Query:
        fallback: "true" (default) falls back to an even split,
                  "false" answers 422 instead
    """
    snapshot = request.get_json(silent=True)
    if snapshot is None:
        return jsonify({"error": "Request body must be a JSON event snapshot"}), 400

    fallback = request.args.get('fallback', 'true').lower() != 'false'

    try:
        result = system.settle(snapshot, fallback=fallback)
    except ShapleyUnavailableError as e:
        return jsonify({"error": str(e), "fallback_available": True}), 422
    except ValueError as e:
        logger.warning(f"Rejected settlement request: {e}")
        return jsonify({"error": str(e)}), 400

    return jsonify(result.to_dict())


if __name__ == '__main__':
    port = int(os.getenv("FAIRSPLIT_PORT", "8000"))
    print(f"[FLASK] Settlement server started on port {port}")
    print("[FLASK] Available endpoints:")
    print("  GET  /health")
    print("  GET  /status")
    print("  POST /settlement")
    app.run(port=port)
