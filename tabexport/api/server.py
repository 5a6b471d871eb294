from __future__ import annotations
from flask import Flask, request, jsonify, Response
import logging
import re

from tabexport.config.env import get_api_config
from tabexport.config.logging_config import setup_logging
from tabexport.exports.exporters import EXPORTERS, EXTENSIONS, MIMETYPES
from tabexport.exports.payload import PayloadError, records_from_payload

logger = logging.getLogger(__name__)

app = Flask(__name__)

# Options accepted per format, passed straight to the export function
_OPTIONS = {
    "csv": ("separator", "columns_to_print", "date_format", "print_header"),
    "excel_xml": ("columns_to_print", "date_format", "print_header", "sheet_name"),
    "xlsx": ("columns_to_print", "date_format", "print_header", "sheet_name"),
    "pdf": ("page_size", "columns_to_print", "date_format", "print_header"),
}


# Configuration helpers (overridable via app.config in tests)

def _get_api_key() -> str | None:
    if 'API_KEY' in app.config:
        return app.config.get('API_KEY')
    return get_api_config().api_key


def _check_api_key():
    api_key = _get_api_key()
    if api_key:
        provided = request.headers.get('X-API-Key')
        if provided != api_key:
            return jsonify({'error': 'unauthorized'}), 401
    return None


@app.before_request
def _auth():
    # Only enforce for export routes
    if request.path.startswith('/exports'):
        return _check_api_key()
    return None


@app.get('/formats')
def list_formats():
    return jsonify({'formats': [{'id': k, 'mimetype': MIMETYPES[k]} for k in sorted(EXPORTERS)]})


@app.post('/exports/<fmt>')
def post_export(fmt: str):
    exporter = EXPORTERS.get(fmt)
    if exporter is None:
        return jsonify({'error': 'unknown_format'}), 404
    body = request.get_json(force=True, silent=True)
    if body is None:
        return jsonify({'error': 'invalid JSON body'}), 400
    try:
        record_type, records = records_from_payload(body)
    except PayloadError as e:
        return jsonify({'error': str(e)}), 400

    raw = body.get('options') or {}
    if not isinstance(raw, dict):
        return jsonify({'error': 'options must be an object'}), 400
    opts = {k: raw[k] for k in _OPTIONS[fmt] if k in raw}
    if not isinstance(opts.get('print_header', True), bool):
        return jsonify({'error': 'print_header must be a boolean'}), 400

    payload, diagnostic = exporter(records, record_type=record_type, **opts)
    if diagnostic:
        logger.info("export %s rejected: %s", fmt, diagnostic)
        return jsonify({'error': diagnostic}), 422
    stem = re.sub(r'[^A-Za-z0-9._-]', '_', str(body.get('filename') or 'export'))
    filename = f"{stem}.{EXTENSIONS[fmt]}"
    return Response(payload, mimetype=MIMETYPES[fmt], headers={
        'Content-Disposition': f'attachment; filename="{filename}"'
    })


if __name__ == '__main__':
    setup_logging()
    cfg = get_api_config()
    app.run(host=cfg.host, port=cfg.port)
