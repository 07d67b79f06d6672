"""
Voice Agent Demo Builder - Demo Link Routes
Create, open, deactivate and delete shareable demo links
"""
from flask import Blueprint, request, jsonify, current_app
import logging

from demo_builder.exceptions import SlugGenerationError
from demo_builder.services.demo_link_service import LinkStatus
from demo_builder.utils import safe_int, safe_bool

logger = logging.getLogger(__name__)
demo_links_bp = Blueprint('demo_links', __name__)

RESOLVE_STATUS_CODES = {
    LinkStatus.NOT_FOUND: 404,
    LinkStatus.CLIENT_MISSING: 404,
    LinkStatus.EXPIRED: 410,
    LinkStatus.INACTIVE: 410,
}


def _links():
    return current_app.demo_link_service


@demo_links_bp.route('/', methods=['POST'])
def create_demo_link():
    """
    Create a demo link for a client

    POST /api/demo-links
    {
        "client_id": "client_abc",
        "expires_in_days": 7,          // or "never"
        "max_duration_seconds": 120,
        "demo_phone_number": "+15125550100"
    }
    """
    data = request.get_json(silent=True) or {}

    client_id = data.get('client_id')
    if not client_id:
        return jsonify({'error': 'client_id is required'}), 400

    client = current_app.lifecycle_service.get_client(client_id)
    if not client:
        return jsonify({'error': 'Client not found'}), 404

    if data.get('expires_in_days') == 'never':
        expires_in_days = None
    else:
        expires_in_days = safe_int(
            data.get('expires_in_days'),
            current_app.config['DEFAULT_LINK_EXPIRY_DAYS'],
            min_val=1
        )
    max_duration = safe_int(
        data.get('max_duration_seconds'),
        current_app.config['DEFAULT_DEMO_DURATION_SECONDS'],
        min_val=1
    )

    try:
        link = _links().create_link(
            client,
            expires_in_days=expires_in_days,
            max_duration_seconds=max_duration,
            demo_phone_number=(data.get('demo_phone_number') or '').strip() or None
        )
    except SlugGenerationError as e:
        logger.error(f"Demo link creation failed for {client_id}: {e}")
        return jsonify({'error': 'Could not generate a unique link, please retry'}), 503

    return jsonify({
        'message': 'Demo link created',
        'link': link.to_dict()
    }), 201


@demo_links_bp.route('/client/<client_id>', methods=['GET'])
def list_client_links(client_id):
    """GET /api/demo-links/client/{client_id}?active_only=true"""
    active_only = safe_bool(request.args.get('active_only'))
    service = _links()
    links = service.get_links_for_client(client_id, active_only=active_only)

    return jsonify({
        'total': len(links),
        'links': [
            {**link.to_dict(), 'link_status': service.check_link(link).value}
            for link in links
        ]
    })


@demo_links_bp.route('/<slug>/resolve', methods=['GET'])
def resolve_demo_link(slug):
    """
    Open a demo link by slug

    Client details are only returned for a valid link; each successful
    open counts as one view.
    """
    resolution = _links().resolve_slug(slug)

    if not resolution.ok:
        return jsonify({
            'error': resolution.status.value,
            'message': resolution.message
        }), RESOLVE_STATUS_CODES[resolution.status]

    client = resolution.client
    return jsonify({
        'link': resolution.link.to_dict(),
        'client': {
            'id': client.id,
            'business_name': client.business_name,
            'industry': client.industry,
            'service_area': client.service_area,
            'services': client.services,
            'demo_system_prompt': client.artifacts.demo_system_prompt
        }
    })


@demo_links_bp.route('/<link_id>/deactivate', methods=['POST'])
def deactivate_demo_link(link_id):
    link = _links().deactivate_link(link_id)
    if not link:
        return jsonify({'error': 'Demo link not found'}), 404
    return jsonify({'link': link.to_dict()})


@demo_links_bp.route('/<link_id>', methods=['DELETE'])
def delete_demo_link(link_id):
    if not _links().delete_link(link_id):
        return jsonify({'error': 'Demo link not found'}), 404
    return jsonify({'message': 'Demo link deleted'})
