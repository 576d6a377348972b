"""Tests for CheckDescriptor and the check-type variants."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from consulkit.models import (
    AliasCheck,
    CheckDescriptor,
    CheckKind,
    CheckStatus,
    DockerCheck,
    HttpCheck,
    ScriptCheck,
    TcpCheck,
    TTLCheck,
)
from consulkit.models.checks import detect_kinds


class TestCheckDescriptorConstruction:
    """Exactly one check type, with the fields its kind requires."""

    def test_ttl_payload(self) -> None:
        desc = CheckDescriptor.ttl("web heartbeat", ttl="30s", id="web-ttl")
        assert desc.kind is CheckKind.TTL
        assert desc.to_payload() == {"Name": "web heartbeat", "ID": "web-ttl", "TTL": "30s"}

    def test_check_id_falls_back_to_name(self) -> None:
        desc = CheckDescriptor.ttl("heartbeat", ttl="10s")
        assert desc.check_id == "heartbeat"

    def test_http_payload_with_timedelta_interval(self) -> None:
        desc = CheckDescriptor.http(
            "api", "http://localhost:8080/health", interval=timedelta(seconds=10), timeout="1s"
        )
        assert desc.to_payload() == {
            "Name": "api",
            "Interval": "10s",
            "Timeout": "1s",
            "HTTP": "http://localhost:8080/health",
        }

    def test_probed_kinds_require_interval(self) -> None:
        with pytest.raises(ValidationError, match="require an interval"):
            CheckDescriptor(name="api", definition=HttpCheck(http="http://localhost/health"))

    def test_ttl_does_not_require_interval(self) -> None:
        desc = CheckDescriptor(name="job", definition=TTLCheck(ttl="1m"))
        assert desc.interval is None

    def test_invalid_duration_rejected(self) -> None:
        with pytest.raises(ValidationError, match="invalid duration"):
            CheckDescriptor.ttl("job", ttl="ten seconds")

    def test_subsecond_duration_formatted_in_ms(self) -> None:
        desc = CheckDescriptor.tcp("db", "localhost:5432", interval=timedelta(milliseconds=500))
        assert desc.interval == "500ms"

    def test_initial_status_serialized(self) -> None:
        desc = CheckDescriptor.ttl("job", ttl="10s", status=CheckStatus.PASSING)
        assert desc.to_payload()["Status"] == "passing"

    def test_service_scoped_check(self) -> None:
        desc = CheckDescriptor.script(
            "disk", ["/usr/local/bin/check_disk", "-w", "10%"], interval="1m", service_id="web-1"
        )
        payload = desc.to_payload()
        assert payload["ServiceID"] == "web-1"
        assert payload["Args"] == ["/usr/local/bin/check_disk", "-w", "10%"]

    def test_discriminated_definition_from_dict(self) -> None:
        desc = CheckDescriptor.model_validate(
            {"Name": "ssh", "Interval": "5s", "definition": {"kind": "tcp", "TCP": "localhost:22"}}
        )
        assert isinstance(desc.definition, TcpCheck)
        assert desc.kind is CheckKind.TCP

    def test_unknown_kind_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CheckDescriptor.model_validate(
                {"Name": "x", "definition": {"kind": "carrier-pigeon"}}
            )

    def test_alias_requires_target(self) -> None:
        with pytest.raises(ValidationError, match="alias_node or alias_service"):
            AliasCheck()
        assert AliasCheck(alias_service="db").alias_service == "db"

    def test_descriptor_is_immutable(self) -> None:
        desc = CheckDescriptor.ttl("job", ttl="10s")
        with pytest.raises(ValidationError):
            desc.name = "other"  # type: ignore[misc]


class TestFromPayload:
    """Parsing the agent's flat wire shape."""

    def test_ttl(self) -> None:
        desc = CheckDescriptor.from_payload({"Name": "job", "ID": "job-ttl", "TTL": "15s"})
        assert desc.kind is CheckKind.TTL
        assert desc.check_id == "job-ttl"

    def test_script_is_args_without_container(self) -> None:
        desc = CheckDescriptor.from_payload(
            {"Name": "s", "Args": ["/usr/bin/check"], "Interval": "30s"}
        )
        assert isinstance(desc.definition, ScriptCheck)

    def test_docker_claims_args(self) -> None:
        desc = CheckDescriptor.from_payload(
            {
                "Name": "d",
                "DockerContainerID": "f972c95ebf0e",
                "Args": ["/bin/check"],
                "Shell": "/bin/sh",
                "Interval": "10s",
            }
        )
        assert isinstance(desc.definition, DockerCheck)
        assert desc.definition.shell == "/bin/sh"

    def test_two_kinds_rejected(self) -> None:
        with pytest.raises(ValueError, match="exactly one check type"):
            CheckDescriptor.from_payload(
                {"Name": "x", "HTTP": "http://localhost", "TTL": "10s", "Interval": "10s"}
            )

    def test_no_kind_rejected(self) -> None:
        with pytest.raises(ValueError, match="found: none"):
            CheckDescriptor.from_payload({"Name": "x"})

    def test_unknown_shared_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CheckDescriptor.from_payload({"Name": "x", "TTL": "10s", "Bogus": True})

    def test_round_trip_keeps_variant_fields(self) -> None:
        payload = {
            "Name": "api",
            "Interval": "10s",
            "HTTP": "https://localhost:8443/health",
            "Method": "POST",
            "Header": {"X-Probe": ["1"]},
            "TLSSkipVerify": True,
        }
        assert CheckDescriptor.from_payload(payload).to_payload() == payload


class TestDetectKinds:
    def test_detects_every_populated_kind(self) -> None:
        kinds = detect_kinds({"HTTP": "http://x", "TCP": "x:1", "TTL": ""})
        assert kinds == [CheckKind.HTTP, CheckKind.TCP]

    def test_alias_by_either_key(self) -> None:
        assert detect_kinds({"AliasNode": "n1"}) == [CheckKind.ALIAS]
        assert detect_kinds({"AliasService": "db"}) == [CheckKind.ALIAS]

    def test_probed_kinds(self) -> None:
        assert CheckKind.HTTP.is_probed()
        assert not CheckKind.TTL.is_probed()
        assert not CheckKind.ALIAS.is_probed()
