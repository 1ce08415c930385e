"""Camera selection for barcode and QR scanning."""

import logging
from typing import Protocol

from scan_relay.domain.devices import CameraDevice
from scan_relay.domain.errors import NoCameraFound

_logger = logging.getLogger(__name__)

PRIORITY_KEYWORDS = ("main", "wide", "back", "rear")
AVOID_KEYWORDS = ("ultra", "tele", "macro", "depth", "zoom")
FRONT_KEYWORDS = ("front", "user", "selfie")

_PRIORITY_SCORE = 10
_AVOID_PENALTY = 15
_PRIMARY_SENSOR_SCORE = 5
_FIRST_ENUMERATED_SCORE = 3


class CameraSource(Protocol):
    """Platform camera enumeration."""

    def list_cameras(self) -> list[CameraDevice]:
        """Return the cameras in platform enumeration order."""


def score_camera(camera: CameraDevice, index: int) -> int:
    """Score a camera's suitability for close-range code reading."""
    label = camera.label.lower()
    score = 0
    for keyword in PRIORITY_KEYWORDS:
        if keyword in label:
            score += _PRIORITY_SCORE
    for keyword in AVOID_KEYWORDS:
        if keyword in label:
            score -= _AVOID_PENALTY
    if "0" in label:
        score += _PRIMARY_SENSOR_SCORE
    if index == 0:
        score += _FIRST_ENUMERATED_SCORE
    return score


def select_best_camera(cameras: list[CameraDevice]) -> CameraDevice | None:
    """Pick the highest-scoring camera; earlier cameras win ties."""
    if not cameras:
        return None
    if len(cameras) == 1:
        return cameras[0]
    best_index = 0
    best_score = score_camera(cameras[0], 0)
    for index, camera in enumerate(cameras[1:], start=1):
        score = score_camera(camera, index)
        if score > best_score:
            best_index, best_score = index, score
    return cameras[best_index]


def rear_facing(cameras: list[CameraDevice]) -> list[CameraDevice]:
    """Drop front-facing cameras unless that would leave none."""
    rear = [
        camera
        for camera in cameras
        if not any(keyword in camera.label.lower() for keyword in FRONT_KEYWORDS)
    ]
    return rear or list(cameras)


def choose_scanning_camera(source: CameraSource) -> CameraDevice:
    """Enumerate cameras and return the one to scan with.

    Raises NoCameraFound when nothing is enumerated; CameraPermissionDenied
    from the source propagates unchanged.
    """
    cameras = source.list_cameras()
    camera = select_best_camera(rear_facing(cameras))
    if camera is None:
        raise NoCameraFound("No camera found")
    _logger.info(
        "Selected camera: id=%s label=%s candidates=%s",
        camera.id,
        camera.label,
        len(cameras),
    )
    return camera
