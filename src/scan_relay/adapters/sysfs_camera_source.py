"""Linux camera enumeration through sysfs."""

from dataclasses import dataclass
from pathlib import Path

from scan_relay.domain.devices import CameraDevice
from scan_relay.domain.errors import CameraPermissionDenied
from scan_relay.services.cameras import CameraSource


@dataclass
class SysfsCameraSource(CameraSource):
    """Lists V4L2 capture devices from ``/sys/class/video4linux``."""

    root: Path = Path("/sys/class/video4linux")

    def list_cameras(self) -> list[CameraDevice]:
        """Return cameras ordered by device node name."""
        try:
            entries = sorted(self.root.iterdir(), key=lambda entry: entry.name)
        except FileNotFoundError:
            return []
        except PermissionError as exc:
            raise CameraPermissionDenied(str(exc)) from exc

        cameras: list[CameraDevice] = []
        for entry in entries:
            name_file = entry / "name"
            try:
                label = name_file.read_text(encoding="utf-8").strip()
            except FileNotFoundError:
                continue
            except PermissionError as exc:
                raise CameraPermissionDenied(str(exc)) from exc
            cameras.append(CameraDevice(id=f"/dev/{entry.name}", label=label))
        return cameras
