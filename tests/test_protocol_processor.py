import json

import pytest

from enableit.protocol_processor import (
    FeatureV1,
    FeatureV2,
    ProtocolProcessor,
    ProtocolVersion,
    detect_protocol,
)


class Echo(FeatureV1):
    def handle(self, command):
        return f"{self.name}->{command}"


class Action(FeatureV2):
    def handle(self, message):
        return {"status": "ok", "action": message["action"]}


@pytest.fixture
def processor():
    return ProtocolProcessor({"echo": Echo("echo"), "act": Action("act")})


def test_detect_protocol():
    assert detect_protocol('{"v":2}') is ProtocolVersion.V2_JSON
    assert detect_protocol("echo:hi") is ProtocolVersion.V1_LEGACY
    assert detect_protocol("") is ProtocolVersion.V1_LEGACY


def test_v1_routed(processor):
    assert processor.process("echo:hello") == "echo->hello"
    assert processor.process("echo:a:b") == "echo->a:b"


@pytest.mark.parametrize("message", ["hello", ":cmd"])
def test_v1_without_target(processor, message):
    assert processor.process(message) == "ERROR: No target specified"


def test_v1_unknown_feature(processor):
    assert processor.process("nope:x") == "ERROR: Feature 'nope' not found"


def test_v1_message_to_v2_feature(processor):
    assert processor.process("act:x") == "ERROR: Feature 'act' not found"


def test_v2_invalid_json(processor):
    response = json.loads(processor.process("{not json"))
    assert response["status"] == "error"
    assert response["error"].startswith("JSON parse error: ")


def test_v2_missing_fields(processor):
    response = json.loads(processor.process('{"v":2,"type":"cmd"}'))
    assert response == {
        "status": "error",
        "error": "Missing required fields: v, type, target, action",
    }


def test_v2_routed(processor):
    message = {"v": 2, "type": "cmd", "target": "act", "action": "go"}
    response = processor.process(json.dumps(message))
    assert json.loads(response) == {"status": "ok", "action": "go"}
    assert " " not in response


def test_v2_unknown_and_wrong_version(processor):
    for target in ("missing", "echo"):
        message = {"v": 2, "type": "cmd", "target": target, "action": "go"}
        response = json.loads(processor.process_v2(message))
        assert response == {"status": "error", "error": f"Feature '{target}' not found"}