"""Error taxonomy for the scan relay."""


class ScanRelayError(Exception):
    """Base class for scan relay errors."""


class NoCameraFound(ScanRelayError):
    """Raised when the device exposes no usable camera."""


class CameraPermissionDenied(ScanRelayError):
    """Raised when the platform refuses access to the cameras."""


class StoreUnavailable(ScanRelayError):
    """Raised when the backing store cannot be reached."""


class MalformedPayload(ScanRelayError):
    """Raised when a payload is used where a recognized one is required."""
