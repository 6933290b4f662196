"""Routing of text commands to registered features.

Two message formats are accepted. Legacy v1 messages are ``target:command``
lines. v2 messages are JSON objects carrying ``v``, ``type``, ``target`` and
``action``; a v1 message can never start with ``{``.
"""

from __future__ import annotations

import abc
import enum
import json
import logging
from collections.abc import Mapping
from typing import Any, ClassVar

log = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("v", "type", "target", "action")


class ProtocolVersion(enum.Enum):
    """Message format."""

    V1_LEGACY = enum.auto()
    V2_JSON = enum.auto()


class FeatureVersion(enum.Enum):
    """Protocol a feature understands."""

    V1 = enum.auto()
    V2 = enum.auto()


class FeatureV1(abc.ABC):
    """A feature that answers plain text commands."""

    version: ClassVar[FeatureVersion] = FeatureVersion.V1

    def __init__(self, name: str) -> None:
        self.name = name

    @abc.abstractmethod
    def handle(self, command: str) -> str:
        """Answer a command with a text response."""


class FeatureV2(abc.ABC):
    """A feature that answers JSON messages."""

    version: ClassVar[FeatureVersion] = FeatureVersion.V2

    def __init__(self, name: str) -> None:
        self.name = name

    @abc.abstractmethod
    def handle(self, message: Mapping[str, Any]) -> dict[str, Any]:
        """Answer a message with a JSON object."""


def detect_protocol(message: str) -> ProtocolVersion:
    """A message starting with ``{`` is v2 JSON, anything else is v1."""
    return ProtocolVersion.V2_JSON if message.startswith("{") else ProtocolVersion.V1_LEGACY


def _serialize(document: Mapping[str, Any]) -> str:
    return json.dumps(document, separators=(",", ":"), ensure_ascii=False)


def _error(text: str) -> str:
    return _serialize({"status": "error", "error": text})


class ProtocolProcessor:
    """Dispatches messages to features looked up by name in ``registry``."""

    def __init__(self, registry: Mapping[str, FeatureV1 | FeatureV2]) -> None:
        self.registry = registry

    def process(self, message: str) -> str:
        """Handle a message in either format and return the response."""
        if detect_protocol(message) is ProtocolVersion.V2_JSON:
            try:
                document = json.loads(message)
            except json.JSONDecodeError as exc:
                return _error(f"JSON parse error: {exc.msg}")
            return self.process_v2(document if isinstance(document, Mapping) else {})
        return self.process_v1(message)

    def process_v1(self, message: str) -> str:
        """Handle a ``target:command`` message."""
        log.info("Processing V1 message: %s", message)
        target, sep, command = message.partition(":")
        if not sep:
            target, command = "", message
        if not target:
            return "ERROR: No target specified"
        feature = self.registry.get(target)
        if feature is not None and feature.version is FeatureVersion.V1:
            return feature.handle(command)
        return f"ERROR: Feature '{target}' not found"

    def process_v2(self, message: Mapping[str, Any]) -> str:
        """Handle a decoded v2 message and return the JSON response."""
        if any(field not in message for field in _REQUIRED_FIELDS):
            return _error("Missing required fields: " + ", ".join(_REQUIRED_FIELDS))
        raw_target = message["target"]
        target = raw_target if isinstance(raw_target, str) else json.dumps(raw_target)
        feature = self.registry.get(target)
        if feature is not None and feature.version is FeatureVersion.V2:
            return _serialize(feature.handle(message))
        return _error(f"Feature '{target}' not found")