"""
Heuristic labelling of devices from advertisement data.

Used by producers to give unnamed Bluetooth devices a readable display name,
and to label WiFi access point security.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .constants import (
    APPEARANCE_RANGES,
    AUDIO_LABEL_KEYWORDS,
    COMPANY_ID_LABELS,
    ENCRYPTION_LABELS,
    ENCRYPTION_OPEN,
    ENCRYPTION_UNKNOWN,
    SERVICE_UUID_LABELS,
    UNKNOWN_BLE_LABEL,
)


def _short_uuid(uuid: str) -> str:
    """
    Reduce a service UUID to its 16-bit form.

    Accepts '180F', '0x180f', '0000180f' or the full
    '0000180f-0000-1000-8000-00805f9b34fb' base-UUID form.
    """
    uuid = uuid.strip().upper()
    if uuid.startswith('0X'):
        uuid = uuid[2:]
    if '-' in uuid:
        uuid = uuid.split('-', 1)[0]
    return uuid[-4:]


def identify_device_type(
    appearance: Optional[int] = None,
    service_uuids: Optional[Iterable[str]] = None,
    company_id: Optional[int] = None,
) -> str:
    """
    Identify a Bluetooth device's type.

    Priority order:
    1. GAP appearance value
    2. Advertised 16-bit service UUIDs
    3. Manufacturer company ID

    Returns:
        A label such as 'Headphones/Earbuds', or 'Unknown BLE'.
    """
    if appearance is not None:
        for low, high, label in APPEARANCE_RANGES:
            if low <= appearance <= high:
                return label

    if service_uuids:
        advertised = {_short_uuid(uuid) for uuid in service_uuids}
        for uuid, label in SERVICE_UUID_LABELS:
            if uuid in advertised:
                return label

    if company_id is not None and company_id in COMPANY_ID_LABELS:
        return COMPANY_ID_LABELS[company_id]

    return UNKNOWN_BLE_LABEL


def is_audio_device(label: str) -> bool:
    """Whether a type label describes an audio device."""
    return any(keyword in label for keyword in AUDIO_LABEL_KEYWORDS)


def encryption_label(mode: Optional[str]) -> str:
    """Short display label for a WiFi auth mode key such as 'wpa2_psk'."""
    if not mode:
        return ENCRYPTION_UNKNOWN
    return ENCRYPTION_LABELS.get(mode.lower(), ENCRYPTION_UNKNOWN)


def is_open_network(device) -> bool:
    """Whether an Observation or TrackedDevice advertises no encryption."""
    encryption = getattr(device, 'encryption', None)
    return bool(encryption) and encryption.lower() == ENCRYPTION_OPEN
