"""JSON endpoint for the tax engine.

The results display posts the current return after each edit and reads
the calculation back. The app owns one CalculationCache so rapid repeat
submissions of an unchanged return are served without recomputing.
"""

import logging

from flask import Flask, request, jsonify

from .calculation_cache import CalculationCache
from .config_loader import tax_return_from_dict
from .federal_tax import calculate_federal_tax
from .report_generator import generate_full_report
from .validation import validate_tax_return

logger = logging.getLogger(__name__)

app = Flask(__name__)
calculation_cache = CalculationCache()


@app.route("/health")
def health():
    return jsonify({"status": "ok"})


@app.route("/calculate", methods=["POST"])
def calculate():
    """Calculate a return posted as JSON; return the calculation and a report."""
    payload = request.get_json(silent=True)
    if payload is None:
        return jsonify({"error": "Request body must be a JSON tax return."}), 400

    try:
        tax_return = tax_return_from_dict(payload)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    try:
        calc = calculate_federal_tax(tax_return, cache=calculation_cache)
        report = generate_full_report(calc, tax_return.taxpayer.name)
    except Exception as e:
        logger.exception("Calculation failed")
        return jsonify({"error": str(e)}), 500

    issues = [
        {"field": issue.field, "message": issue.message}
        for issue in validate_tax_return(tax_return)
    ]
    return jsonify({
        "calculation": calc.to_dict(),
        "report": report,
        "issues": issues,
    })


if __name__ == "__main__":
    app.run(debug=False, port=5000)
