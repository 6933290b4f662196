"""System information document for a device, kept as JSON."""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass
from typing import Any

log = logging.getLogger(__name__)

_MIB = 1024 * 1024


@dataclass(frozen=True)
class ChipInfo:
    """Hardware and firmware facts the document is built from."""

    model: str
    efuse_mac: int
    cpu_mhz: int
    psram_size: int
    flash_size: int
    embedded_flash: bool
    cores: int
    revision: int
    sdk_version: str
    sketch_md5: str
    bluetooth: bool = False
    ble: bool = False


class SystemInfoProvider:
    """Builds the system information document and holds custom sections."""

    def __init__(self, fw_rev: str = "unknown", git_rev: str = "unknown") -> None:
        self.fw_rev = fw_rev
        self.git_rev = git_rev
        self.initialized = False
        self.chip: ChipInfo | None = None
        self.device_id = ""
        self.chip_id = ""
        self.flash_info = ""
        self.cores_info = ""
        self.sdk_chip_info = ""
        self._info: dict[str, Any] = {}

    def init(self, chip: ChipInfo, device_id: str) -> None:
        """Fill the document from chip facts and the configured device id."""
        self.initialized = True
        self.chip = chip
        self.device_id = device_id
        self.chip_id = format(chip.efuse_mac & 0xFFFFFFFF, "X")

        storage = "embedded" if chip.embedded_flash else "external"
        self.flash_info = (
            f"{chip.flash_size // _MIB}MB {storage} flash, Memory {chip.psram_size}"
        )
        radios = "".join(
            suffix for enabled, suffix in ((chip.bluetooth, "/BT"), (chip.ble, "/BLE")) if enabled
        )
        self.cores_info = f"{chip.cores} cores Wifi{radios}, {chip.cpu_mhz} Mhz"
        self.sdk_chip_info = (
            f"SDK: {chip.sdk_version}, Chip: {chip.model}, Chip id: {self.chip_id}"
        )

        self._info.update(
            {
                "chip": chip.model,
                "chip_id": self.chip_id,
                "cpu_mhz": chip.cpu_mhz,
                "psram": chip.psram_size,
                "flash": self.flash_info,
                "device_id": device_id,
                "mdns": "esp32",
                "cores_info": self.cores_info,
                "silicon_revision": chip.revision,
                "sdk_chip_info": self.sdk_chip_info,
                "fw_checksum": chip.sketch_md5,
                "fw_rev": self.fw_rev,
                "git_rev": self.git_rev,
            }
        )
        self.dump()

    def dump(self) -> None:
        """Log the build and hardware information."""
        if self.chip is None:
            return
        chip = self.chip
        log.info("System Info:")
        log.info("  Chip Model: %s", chip.model)
        log.info("  Chip ID: %s", self.chip_id)
        log.info("  CPU MHz: %d", chip.cpu_mhz)
        log.info("  PSRAM Size: %d", chip.psram_size)
        log.info("  Flash Info: %s", self.flash_info)
        log.info("  Device ID: %s", self.device_id)
        log.info("  mDNS: esp32")
        log.info("  Cores Info: %s", self.cores_info)
        log.info("  Silicon Revision: %d", chip.revision)
        log.info("  SDK Chip Info: %s", self.sdk_chip_info)
        log.info("  FW Checksum: %s", chip.sketch_md5)
        log.info("  FW Rev: %s", self.fw_rev)
        log.info("  Git Rev: %s", self.git_rev)

    def serialize(self) -> str:
        """The document as compact JSON; empty before :meth:`init`."""
        if not self.initialized:
            return ""
        return json.dumps(self._info, separators=(",", ":"), ensure_ascii=False)

    def view(self) -> dict[str, Any]:
        """A copy of the document."""
        return copy.deepcopy(self._info)

    def _section(self, section: str) -> dict[str, Any]:
        current = self._info.get(section)
        if not isinstance(current, dict):
            current = {}
            self._info[section] = current
        return current

    def add_custom_info(self, section: str, key: str, value: str | None = None) -> None:
        """Set ``key`` in a custom section, creating the section if needed.

        A section name holding something other than an object is replaced.
        Without a value only the section is created.
        """
        if not self.initialized:
            return
        target = self._section(section)
        if value is not None:
            target[key] = value

    def remove_custom_info(self, section: str, key: str) -> None:
        """Remove a non-null key from a custom section."""
        if not self.initialized:
            return
        current = self._info.get(section)
        if isinstance(current, dict) and current.get(key) is not None:
            del current[key]

    def clear_custom_info(self, section: str) -> None:
        """Remove a whole custom section; other values are left alone."""
        if not self.initialized:
            return
        if isinstance(self._info.get(section), dict):
            del self._info[section]