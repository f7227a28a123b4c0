"""
Device API - read-only JSON views of the device registry.

The registry is owned by the application and attached with init_app().
"""

from __future__ import annotations

from flask import Blueprint, Flask, Response, current_app, jsonify, request

from ..logging import get_logger
from ..tracking import DeviceClass, DeviceRegistry

logger = get_logger('proxitrack.routes.devices')

REGISTRY_EXTENSION_KEY = 'proxitrack.registry'

# Blueprint
devices_bp = Blueprint('devices', __name__, url_prefix='/api/devices')


def init_app(app: Flask, registry: DeviceRegistry) -> None:
    """Attach a registry to app and register the device routes."""
    app.extensions[REGISTRY_EXTENSION_KEY] = registry
    app.register_blueprint(devices_bp)


def get_registry() -> DeviceRegistry:
    """Registry attached to the current application."""
    return current_app.extensions[REGISTRY_EXTENSION_KEY]


@devices_bp.route('', methods=['GET'])
def list_devices() -> Response:
    """
    List tracked devices.

    Query parameters:
        - class: Device class filter ('wifi_ap', 'wifi_client', 'bluetooth')
        - max_distance: Only devices within this many meters, closest first

    Returns:
        JSON with count and device summaries.
    """
    registry = get_registry()

    class_filter = request.args.get('class')
    max_distance = request.args.get('max_distance', type=float)

    if 'max_distance' in request.args and max_distance is None:
        return jsonify({'error': 'max_distance must be a number'}), 400

    device_class = None
    if class_filter:
        try:
            device_class = DeviceClass(class_filter)
        except ValueError:
            valid = [c.value for c in DeviceClass]
            return jsonify({'error': f'Invalid class. Must be one of: {valid}'}), 400

    if max_distance is not None:
        devices = registry.get_nearby(max_distance)
        if device_class is not None:
            devices = [d for d in devices if d.device_class == device_class]
    elif device_class is not None:
        devices = registry.get_by_class(device_class)
    else:
        devices = registry.get_all()

    return jsonify({
        'count': len(devices),
        'devices': [d.to_summary_dict() for d in devices],
    })


@devices_bp.route('/stats', methods=['GET'])
def get_stats() -> Response:
    """Registry statistics: totals per class and the closest device."""
    return jsonify(get_registry().stats().to_dict())


@devices_bp.route('/<identity>', methods=['GET'])
def get_device(identity: str) -> Response:
    """
    Get full details for one device.

    Path parameters:
        - identity: Device identity (hardware address)
    """
    device = get_registry().snapshot(identity)

    if device is None:
        return jsonify({'error': 'Device not found'}), 404

    return jsonify(device.to_dict())


@devices_bp.route('/clear', methods=['POST'])
def clear_devices() -> Response:
    """Clear all tracked devices."""
    get_registry().clear()
    logger.info("Registry cleared via API")
    return jsonify({'status': 'cleared'})
