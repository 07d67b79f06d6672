"""
Voice Agent Demo Builder - Client Routes
CRUD, lifecycle transitions and artifact downloads for client demos
"""
from flask import Blueprint, Response, request, jsonify, current_app
import logging

from demo_builder.exceptions import PreconditionError
from demo_builder.models.client import ClientStatus
from demo_builder.services import artifact_generator
from demo_builder.utils import safe_bool, get_pagination_params

logger = logging.getLogger(__name__)
clients_bp = Blueprint('clients', __name__)


def _lifecycle():
    return current_app.lifecycle_service


def _not_found():
    return jsonify({'error': 'Client not found'}), 404


def _precondition_failed(error: PreconditionError):
    return jsonify({
        'error': 'Invalid status for operation',
        'message': str(error),
        'status': error.status,
        'operation': error.operation
    }), 409


REQUIRED_FIELDS = ('business_name', 'industry', 'service_area')


def _missing_required(data):
    """First required field that is absent or not a non-empty string"""
    for field in REQUIRED_FIELDS:
        value = data.get(field)
        if not isinstance(value, str) or not value.strip():
            return field
    return None


# ==========================================
# CRUD
# ==========================================

@clients_bp.route('/', methods=['GET'])
def list_clients():
    """
    List clients, newest first

    GET /api/clients?status=demo_ready&limit=50&offset=0
    """
    status = request.args.get('status')
    try:
        status = ClientStatus(status) if status else None
    except ValueError:
        return jsonify({'error': f'Invalid status: {status}'}), 400

    clients = _lifecycle().list_clients(status=status)
    limit, offset, _ = get_pagination_params(request)

    return jsonify({
        'total': len(clients),
        'clients': [c.to_dict() for c in clients[offset:offset + limit]]
    })


@clients_bp.route('/', methods=['POST'])
def create_new_client():
    """
    Create a draft client

    POST /api/clients
    {
        "business_name": "Joe's Plumbing",
        "industry": "Plumbing",
        "service_area": "Austin, TX",
        "services": ["Drain Cleaning"],
        "hours": {"weekday": "8:00 AM - 5:00 PM", "weekend": "Closed", "timezone": "America/Chicago"},
        "after_hours_goal": "emergency_transfer",
        "tone": "friendly",
        "transfer_rules": [{"condition": "gas smell", "action": "transfer", "phone": "555-0101"}]
    }
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Expected a JSON object'}), 400

    missing = _missing_required(data)
    if missing:
        return jsonify({'error': f'{missing} is required'}), 400

    try:
        client = _lifecycle().create_client_from_dict(data)
    except ValueError as e:
        return jsonify({'error': f'Invalid client data: {e}'}), 400

    return jsonify({
        'message': 'Client created successfully',
        'client': client.to_dict()
    }), 201


@clients_bp.route('/quick', methods=['POST'])
def quick_create_client():
    """
    Create from industry defaults and generate the demo right away

    POST /api/clients/quick
    {
        "business_name": "Joe's Plumbing",
        "industry": "Plumbing",
        "service_area": "Austin, TX",
        "website_url": "https://joesplumbing.com",
        "website_data": {"description": "...", "services": ["..."]}
    }
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Expected a JSON object'}), 400

    missing = _missing_required(data)
    if missing:
        return jsonify({'error': f'{missing} is required'}), 400
    if not isinstance(data.get('website_data') or {}, dict):
        return jsonify({'error': 'website_data must be an object'}), 400

    client = _lifecycle().quick_create(
        business_name=data['business_name'].strip(),
        industry=data['industry'].strip(),
        service_area=data['service_area'].strip(),
        website_url=data.get('website_url'),
        scraped=data.get('website_data')
    )

    return jsonify({
        'message': 'Demo created successfully',
        'client': client.to_dict()
    }), 201


@clients_bp.route('/<client_id>', methods=['GET'])
def get_client(client_id):
    client = _lifecycle().get_client(client_id)
    if not client:
        return _not_found()
    return jsonify(client.to_dict())


@clients_bp.route('/<client_id>', methods=['PUT'])
def update_client(client_id):
    """
    Edit client fields (any status)

    PUT /api/clients/{id}?regenerate=true
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Expected a JSON object'}), 400
    regenerate = safe_bool(request.args.get('regenerate'))

    try:
        client = _lifecycle().update_client(client_id, data, regenerate=regenerate)
    except ValueError as e:
        return jsonify({'error': f'Invalid client data: {e}'}), 400

    if not client:
        return _not_found()

    return jsonify({
        'message': 'Client updated',
        'client': client.to_dict()
    })


@clients_bp.route('/<client_id>', methods=['DELETE'])
def delete_client(client_id):
    """DELETE /api/clients/{id}?cascade_links=true"""
    cascade = safe_bool(request.args.get('cascade_links'))
    if not _lifecycle().delete_client(client_id, cascade_links=cascade):
        return _not_found()
    return jsonify({'message': 'Client deleted'})


# ==========================================
# LIFECYCLE
# ==========================================

def _run_transition(client_id, operation, *args):
    try:
        client = operation(client_id, *args)
    except PreconditionError as e:
        return _precondition_failed(e)
    if not client:
        return _not_found()
    return jsonify({'client': client.to_dict()})


@clients_bp.route('/<client_id>/demo-artifacts', methods=['POST'])
def generate_demo_artifacts(client_id):
    return _run_transition(client_id, _lifecycle().generate_demo_artifacts)


@clients_bp.route('/<client_id>/approve', methods=['POST'])
def approve_client(client_id):
    return _run_transition(client_id, _lifecycle().approve)


@clients_bp.route('/<client_id>/production-artifacts', methods=['POST'])
def generate_production_artifacts(client_id):
    return _run_transition(client_id, _lifecycle().generate_production_artifacts)


@clients_bp.route('/<client_id>/promote', methods=['POST'])
def promote_client(client_id):
    return _run_transition(client_id, _lifecycle().promote_to_production)


@clients_bp.route('/<client_id>/publish', methods=['POST'])
def publish_client(client_id):
    """
    Go live

    POST /api/clients/{id}/publish
    {"voice_id": "v123", "phone_number": "+15125550100"}
    """
    data = request.get_json(silent=True) or {}
    voice_id = (data.get('voice_id') or '').strip()
    if not voice_id:
        return jsonify({'error': 'voice_id is required'}), 400

    phone_number = (data.get('phone_number') or '').strip() or None
    return _run_transition(client_id, _lifecycle().publish, voice_id, phone_number)


@clients_bp.route('/<client_id>/website-data', methods=['POST'])
def apply_website_data(client_id):
    """Merge a scraped website field bag into the client"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Expected a JSON object'}), 400

    client = _lifecycle().apply_website_data(client_id, data)
    if not client:
        return _not_found()
    return jsonify({'client': client.to_dict()})


# ==========================================
# ARTIFACTS & EXPORT
# ==========================================

@clients_bp.route('/<client_id>/artifacts', methods=['GET'])
def get_artifacts(client_id):
    client = _lifecycle().get_client(client_id)
    if not client:
        return _not_found()

    return jsonify({
        'client_id': client.id,
        'status': client.status.value,
        'files': artifact_generator.build_artifact_bundle(client)
    })


@clients_bp.route('/<client_id>/artifacts/<filename>', methods=['GET'])
def download_artifact(client_id, filename):
    client = _lifecycle().get_client(client_id)
    if not client:
        return _not_found()

    bundle = artifact_generator.build_artifact_bundle(client)
    if filename not in bundle:
        return jsonify({'error': f'Artifact not available: {filename}'}), 404

    mimetype = 'application/json' if filename.endswith('.json') else 'text/plain'
    return Response(
        bundle[filename],
        mimetype=mimetype,
        headers={'Content-Disposition': f'attachment; filename={filename}'}
    )


@clients_bp.route('/<client_id>/checklist', methods=['GET'])
def get_checklist(client_id):
    client = _lifecycle().get_client(client_id)
    if not client:
        return _not_found()

    if client.status not in (ClientStatus.APPROVED, ClientStatus.PRODUCTION):
        return jsonify({'error': 'Checklist is available once the client is approved'}), 409

    return Response(artifact_generator.generate_production_checklist(client), mimetype='text/plain')


@clients_bp.route('/export', methods=['GET'])
def export_clients():
    return Response(
        current_app.data_service.export_clients_json(),
        mimetype='application/json',
        headers={'Content-Disposition': 'attachment; filename=clients_export.json'}
    )


@clients_bp.route('/import', methods=['POST'])
def import_clients():
    """Replace all clients with a previously exported JSON array"""
    if not current_app.data_service.import_clients_json(request.get_data(as_text=True)):
        return jsonify({'error': 'Expected a JSON array of clients'}), 400
    return jsonify({'message': 'Clients imported'})
