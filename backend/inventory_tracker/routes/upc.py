# Overview: Flask API route for barcode lookups.

from flask import Blueprint, jsonify

from ..services import get_services
from ..validation import required_arg
from ..decorators import require_auth


upc_bp = Blueprint("upc", __name__, url_prefix="/api")


@upc_bp.get("/lookup")
@require_auth
def lookup_barcode_route():
    """
    Suggest item fields for a barcode from the external product database.

    Query params:
    - barcode: str (required)
    """
    barcode = required_arg("barcode")
    result = get_services().barcodes.lookup(barcode)
    return jsonify(result.to_dict())
