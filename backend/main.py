from flask import Flask, request, jsonify
from flask_cors import CORS
import logging
from datetime import datetime
import traceback

from config import settings
from errors import ChemLensError
from identifier_classifier import detect_input_type
from assessment_service import EnvironmentalRiskService

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

MISSING_QUERY_ERROR = "Missing compound query (name, CID, formula, or InChI)"
INTERNAL_ERROR = "An internal server error occurred processing the request."

ENDPOINTS = [
    "GET /api/health",
    "GET /api/classify?query=<identifier>",
    "GET /api/environmental-risk?query=<identifier>",
]

# Initialize Flask app
app = Flask(__name__)
CORS(app, origins=settings.cors_origins)

risk_service = EnvironmentalRiskService()


@app.route('/api/health', methods=['GET'])
def health():
    """Health check endpoint"""
    return jsonify({
        "status": "ok",
        "message": "Environmental risk backend is running",
        "timestamp": datetime.now().isoformat(),
        "endpoints": ENDPOINTS
    }), 200


@app.route('/api/classify', methods=['GET'])
def classify():
    """Report how a query would be interpreted, without contacting PubChem"""
    query = request.args.get('query', '').strip()
    if not query:
        return jsonify({"error": MISSING_QUERY_ERROR}), 400

    return jsonify({"query": query, "queryType": detect_input_type(query)})


@app.route('/api/environmental-risk', methods=['GET'])
def environmental_risk():
    """Resolve a compound identifier and return its risk assessment"""
    query = request.args.get('query', '')
    if not query.strip():
        return jsonify({"error": MISSING_QUERY_ERROR}), 400

    try:
        result = risk_service.assess(query)
        logger.info(f"[API] Assessment for \"{query}\": CID {result.cid}, {result.risk.risk_level}")
        return jsonify(result.to_response())

    except ChemLensError as e:
        logger.error(f"[API] {type(e).__name__} for \"{query}\": {e.message}")
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        logger.error(f"[API] Server error for \"{query}\": {str(e)}\n{traceback.format_exc()}")
        return jsonify({
            "error": INTERNAL_ERROR,
            "details": str(e)
        }), 500


@app.errorhandler(404)
def not_found(error):
    """Unknown routes answer with the endpoint list"""
    return jsonify({
        "error": "Endpoint not found",
        "available_endpoints": ENDPOINTS
    }), 404


@app.errorhandler(500)
def internal_error(error):
    """Unhandled failures outside the assessment route"""
    logger.error(f"[API] Unhandled error on {request.path}: {error}")
    return jsonify({"error": INTERNAL_ERROR}), 500


if __name__ == '__main__':
    logger.info(f"[API] Listening on port {settings.port}: {', '.join(ENDPOINTS)}")
    app.run(host='0.0.0.0', port=settings.port, threaded=True)
