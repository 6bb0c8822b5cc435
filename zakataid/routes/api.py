"""API routes for nisab, calculation and saved calculations."""
from functools import wraps

from flask import Blueprint, jsonify, request, current_app

from zakataid.db import get_db
from zakataid.data.currencies import get_ordered_currencies, get_currency_symbol
from zakataid.errors import ZakatError
from zakataid.services.calculator import run_calculation
from zakataid.services.nisab import get_nisab_details
from zakataid.services.summary_view import render_live_summary
from zakataid.services import calculation_store

api_bp = Blueprint('api', __name__)

USER_HEADER = 'X-User-Id'


@api_bp.errorhandler(ZakatError)
def handle_zakat_error(error: ZakatError):
    """Report validation failures as JSON; the caller fixes input and retries."""
    current_app.logger.info(f"{request.method} {request.path} rejected: {error.code}: {error.message}")
    return jsonify(error.to_dict()), error.status_code


def _json_body():
    """Parsed JSON object from the request, {} when there is no body.

    Returns None for a malformed body or one that is not a JSON object.
    """
    if not request.get_data():
        return {}
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return None
    return body


def _current_user():
    return (request.headers.get(USER_HEADER) or '').strip() or None


def user_required(view):
    """Reject requests that do not say which user they act for."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        if _current_user() is None:
            return jsonify({'error': f'Missing {USER_HEADER} header'}), 401
        return view(*args, **kwargs)
    return wrapper


@api_bp.route('/currencies')
def currencies():
    """Return supported currencies, default first.

    Returns:
        JSON with currencies list, default code and count
    """
    currency_list = get_ordered_currencies()
    return jsonify({
        'currencies': currency_list,
        'default': current_app.config['ZAKAT_DEFAULT_CURRENCY'],
        'count': len(currency_list)
    })


@api_bp.route('/nisab')
def nisab():
    """Return the nisab threshold for a currency.

    Query Parameters:
        currency: Currency code (default: app default currency)
        basis: reference, gold or silver (default: app nisab basis)
    """
    currency = request.args.get('currency', current_app.config['ZAKAT_DEFAULT_CURRENCY'])
    basis = request.args.get('basis', current_app.config['ZAKAT_NISAB_BASIS'])
    return jsonify(get_nisab_details(currency, basis, get_db()))


@api_bp.route('/calculate', methods=['POST'])
def calculate():
    """Calculate zakat from submitted assets and deductions. Nothing is saved.

    Request body:
    {
        "currency": "GHS",
        "assets": {"cash": 10000, "gold": 5000, "gold_grams": 0},
        "deductions": {"short_term_debt": 2000},
        "deductions_currency": "GHS",      (optional, defaults to currency)
        "nisab": 5000,                     (optional, overrides the price feed)
        "nisab_basis": "reference"         (optional: reference, gold, silver)
    }
    """
    body = _json_body()
    if body is None:
        return jsonify({'error': 'Request body must be a JSON object'}), 400

    currency = body.get('currency', current_app.config['ZAKAT_DEFAULT_CURRENCY'])
    calculation = run_calculation(
        currency,
        body.get('assets'),
        body.get('deductions'),
        deductions_currency=body.get('deductions_currency'),
        nisab=body.get('nisab'),
        nisab_basis=body.get('nisab_basis', current_app.config['ZAKAT_NISAB_BASIS']),
        db=get_db(),
    )
    summary = calculation.summary

    return jsonify({
        **summary.to_dict(),
        'nisab_basis': calculation.nisab.basis,
        'assets': calculation.assets.to_dict(),
        'deductions': calculation.deductions.to_dict(),
        'display': render_live_summary(summary, get_currency_symbol(summary.currency)),
    })


# ---------------------------------------------------------------------------
# Saved calculations (scoped to the user named in the X-User-Id header)
# ---------------------------------------------------------------------------

@api_bp.route('/zakat/summary')
@user_required
def zakat_summary():
    """Dashboard totals across the user's saved calculations."""
    return jsonify(calculation_store.get_dashboard_summary(get_db(), _current_user()))


@api_bp.route('/zakat', methods=['GET'])
@user_required
def list_calculations():
    """List saved calculations, newest first.

    Query Parameters:
        page: Page number, starting at 1 (default: 1)
        limit: Page size, at most 50 (default: 10)
    """
    result = calculation_store.list_calculations(
        get_db(),
        _current_user(),
        page=request.args.get('page', 1),
        limit=request.args.get('limit', 10),
    )
    return jsonify(result)


@api_bp.route('/zakat', methods=['POST'])
@user_required
def create_calculation():
    """Calculate and save. Returns 201 with the saved calculation."""
    body = _json_body()
    if body is None:
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    body.setdefault('currency', current_app.config['ZAKAT_DEFAULT_CURRENCY'])
    body.setdefault('nisab_basis', current_app.config['ZAKAT_NISAB_BASIS'])

    calculation = calculation_store.create_calculation(get_db(), _current_user(), body)
    return jsonify(calculation), 201


@api_bp.route('/zakat/<int:calculation_id>', methods=['GET'])
@user_required
def get_calculation(calculation_id):
    return jsonify(calculation_store.get_calculation(get_db(), _current_user(), calculation_id))


@api_bp.route('/zakat/<int:calculation_id>', methods=['PATCH'])
@user_required
def update_calculation(calculation_id):
    """Update a saved calculation, recomputing it when figures change."""
    body = _json_body()
    if body is None:
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    calculation = calculation_store.update_calculation(get_db(), _current_user(), calculation_id, body)
    return jsonify(calculation)


@api_bp.route('/zakat/<int:calculation_id>', methods=['DELETE'])
@user_required
def delete_calculation(calculation_id):
    calculation_store.delete_calculation(get_db(), _current_user(), calculation_id)
    return jsonify({'message': 'Calculation deleted.'})


@api_bp.route('/zakat/<int:calculation_id>/mark-paid', methods=['PATCH'])
@user_required
def mark_paid(calculation_id):
    """Mark the zakat for a calculation as paid."""
    body = _json_body()
    if body is None:
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    calculation = calculation_store.mark_paid(get_db(), _current_user(), calculation_id, body.get('paid_note', ''))
    return jsonify(calculation)
