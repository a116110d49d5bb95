"""
Text Comparison Flask Routes
============================
API endpoints exposing the comparison engine over JSON.

v1.0.0: compare, detect and modes endpoints
"""

import time
from functools import wraps
from flask import Blueprint, request, jsonify, g

from config_logging import (
    StructuredLogger, TextCompareError, ValidationError, get_config, get_logger
)
from .differ import TextDiffer, parse_mode, resolve_mode
from .models import DiffMode
from .sql_differ import SQL_KEYWORDS, is_sql_like

logger = get_logger('text_compare.routes')

# Create blueprint
tc_blueprint = Blueprint('text_compare', __name__)

SLOW_CALL_SECONDS = 5.0


# =============================================================================
# STANDARDIZED ERROR HANDLING DECORATOR
# =============================================================================

def _error_response(code: str, message: str, status_code: int):
    return jsonify({
        'success': False,
        'error': {
            'code': code,
            'message': message,
            'correlation_id': getattr(g, 'correlation_id', 'unknown')
        }
    }), status_code


def handle_tc_errors(f):
    """
    Decorator for standardized API error handling in comparison routes.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        start_time = time.time()
        try:
            result = f(*args, **kwargs)

            elapsed = time.time() - start_time
            if elapsed > SLOW_CALL_SECONDS:
                logger.warning(f"Slow compare API call: {f.__name__} took {elapsed:.1f}s")

            return result

        except TextCompareError as e:
            if e.status_code < 500:
                logger.warning(f"{e.code} in {f.__name__}: {e.message}")
            else:
                logger.error(f"{e.code} in {f.__name__}: {e.message}")
            return _error_response(e.code, e.message, e.status_code)
        except Exception as e:
            logger.exception(f"Unexpected error in {f.__name__}: {e}")
            return _error_response('INTERNAL_ERROR', 'An unexpected error occurred', 500)

    return decorated


@tc_blueprint.before_request
def assign_correlation_id():
    """Give every request its own correlation ID for log lines."""
    g.correlation_id = StructuredLogger.new_correlation_id()


# =============================================================================
# REQUEST HELPERS
# =============================================================================

def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _text_field(data: dict, name: str, required: bool = True) -> str:
    """Fetch a text field from the body, enforcing type and size limits."""
    if name not in data:
        if required:
            raise ValidationError(f"'{name}' is required", field=name)
        return ''

    value = data[name]
    if value is None:
        return ''
    if not isinstance(value, str):
        raise ValidationError(f"'{name}' must be a string", field=name)

    limit = get_config().max_input_chars
    if limit and len(value) > limit:
        raise ValidationError(
            f"'{name}' is {len(value)} characters, limit is {limit}",
            field=name
        )
    return value


def _bool_field(data: dict, name: str):
    value = data.get(name)
    if value is None or isinstance(value, bool):
        return value
    raise ValidationError(f"'{name}' must be a boolean", field=name)


# =============================================================================
# API ENDPOINTS
# =============================================================================

@tc_blueprint.route('/diff', methods=['POST'])
@handle_tc_errors
def compute_diff():
    """
    Compare a reference text with a candidate text.

    Request body:
        { reference: str, candidate: str, mode?: str, auto_detect?: bool }

    Returns:
        {
            success: true,
            result: {
                mode, requested_mode, identical,
                lines: [...],
                stats: { total_chars, added_chars, removed_chars, unchanged_chars, similarity },
                counts: { equal, added, removed, modified }
            }
        }
    """
    data = _json_body()
    reference = _text_field(data, 'reference')
    candidate = _text_field(data, 'candidate')
    auto_detect = _bool_field(data, 'auto_detect')

    result = TextDiffer().compare(reference, candidate, mode=data.get('mode'), auto_detect=auto_detect)

    logger.info(f"Computed {result.mode.value} diff: similarity {result.similarity}%",
                lines=len(result.lines))

    return jsonify({
        'success': True,
        'result': result.to_dict()
    })


@tc_blueprint.route('/detect', methods=['POST'])
@handle_tc_errors
def detect_mode():
    """
    Report SQL detection for one text or a text pair.

    Request body:
        { text: str } or { reference: str, candidate: str, mode?: str }

    Returns:
        { success: true, sql_like: bool | {reference, candidate}, resolved_mode?: str }
    """
    data = _json_body()

    if 'text' in data:
        return jsonify({
            'success': True,
            'sql_like': is_sql_like(_text_field(data, 'text'))
        })

    reference = _text_field(data, 'reference')
    candidate = _text_field(data, 'candidate')
    config = get_config()
    mode = parse_mode(data.get('mode'), parse_mode(config.default_mode))
    auto_detect = _bool_field(data, 'auto_detect')
    if auto_detect is None:
        auto_detect = config.sql_auto_detect

    return jsonify({
        'success': True,
        'sql_like': {
            'reference': is_sql_like(reference),
            'candidate': is_sql_like(candidate)
        },
        'resolved_mode': resolve_mode(reference, candidate, mode, auto_detect).value
    })


@tc_blueprint.route('/modes', methods=['GET'])
def list_modes():
    """List recognized comparison modes and the SQL clause keywords."""
    return jsonify({
        'success': True,
        'modes': [m.value for m in DiffMode],
        'default_mode': get_config().default_mode,
        'sql_keywords': list(SQL_KEYWORDS)
    })
