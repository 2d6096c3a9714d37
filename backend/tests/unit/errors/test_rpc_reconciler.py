"""
Unit tests for RPC error reconciliation
"""

import json
from types import SimpleNamespace
from unittest.mock import patch

import httpx
import pytest

from shared.errors import rpc_reconciler
from shared.errors.rpc_reconciler import (
    DEFAULT_PROBES,
    FALLBACK_DESCRIPTION,
    RpcErrorReconciler,
    RpcFailure,
    reconcile_rpc_error,
)
from shared.exceptions.base import DomainException


def _status_error(status_code, body):
    request = httpx.Request("POST", "http://iam-service/rpc/iam.user.find_by_id")
    if isinstance(body, (dict, list)):
        response = httpx.Response(status_code, json=body, request=request)
    else:
        response = httpx.Response(status_code, text=body, request=request)
    return httpx.HTTPStatusError("remote failure", request=request, response=response)


class TestProbes:
    def test_probe_order(self):
        assert [probe.name for probe in DEFAULT_PROBES] == ["error", "response", "top_level", "message_json"]

    def test_error_probe(self):
        probe = DEFAULT_PROBES[0]

        assert probe.extract({"error": {"statusCode": 404}}) == {"statusCode": 404}
        assert probe.extract({"statusCode": 404}) is None

    def test_response_probe(self):
        probe = DEFAULT_PROBES[1]
        failure = SimpleNamespace(response={"errorCode": "IAM_SERVICE.0001"})

        assert probe.extract(failure) == {"errorCode": "IAM_SERVICE.0001"}

    def test_top_level_probe(self):
        probe = DEFAULT_PROBES[2]

        assert probe.extract({"statusCode": 409}) == {"statusCode": 409}
        assert probe.extract(RuntimeError("statusCode")) is None
        assert probe.extract("statusCode") is None

    def test_message_json_probe(self):
        probe = DEFAULT_PROBES[3]
        failure = {"message": json.dumps({"statusCode": 403, "errorCode": "IAM_SERVICE.0600"})}

        assert probe.extract(failure)["errorCode"] == "IAM_SERVICE.0600"
        assert probe.extract({"message": "plain text"}) is None


class TestReconcile:
    def test_domain_exception_is_returned_unchanged(self):
        original = DomainException("IAM_SERVICE.0001", "User not found", 404)

        assert reconcile_rpc_error(original) is original

    def test_nested_error_payload(self):
        exc = reconcile_rpc_error({"error": {"statusCode": 404, "errorCode": "IAM_SERVICE.0001"}})

        assert exc.code == "IAM_SERVICE.0001"
        assert exc.status_code == 404
        assert exc.description == FALLBACK_DESCRIPTION

    def test_catalog_text_is_used_when_description_is_missing(self, edge_resolver):
        exc = reconcile_rpc_error(
            {"error": {"statusCode": 404, "errorCode": "IAM_SERVICE.0001"}},
            resolver=edge_resolver,
        )

        assert exc.description == "User not found"

    def test_error_description_wins(self, edge_resolver):
        exc = reconcile_rpc_error(
            {"error": {"statusCode": 404, "errorCode": "IAM_SERVICE.0001", "errorDescription": "No such user"}},
            resolver=edge_resolver,
        )

        assert exc.description == "No such user"

    def test_embedded_message_is_second_choice(self):
        exc = reconcile_rpc_error({"error": {"statusCode": 400, "message": ["a: required", "b: too short"]}})

        assert exc.description == "a: required; b: too short"
        assert exc.code == "UNKNOWN"

    def test_metadata_is_carried(self):
        exc = reconcile_rpc_error({
            "error": {
                "statusCode": 409,
                "errorCode": "IAM_SERVICE.0002",
                "errorDescription": "User already exists",
                "metadata": {"username": "alice"},
            }
        })

        assert exc.metadata == {"username": "alice"}

    def test_payload_under_error_response_data(self):
        failure = {"error": {"response": {"data": {"statusCode": 404, "errorCode": "AUTH_SERVICE.0002"}}}}

        exc = reconcile_rpc_error(failure)

        assert (exc.code, exc.status_code) == ("AUTH_SERVICE.0002", 404)

    def test_response_attribute(self):
        failure = SimpleNamespace(response=SimpleNamespace(data={"statusCode": 401, "errorCode": "AUTH_SERVICE.0006"}))

        exc = reconcile_rpc_error(failure)

        assert (exc.code, exc.status_code) == ("AUTH_SERVICE.0006", 401)

    def test_top_level_fields(self):
        exc = reconcile_rpc_error({"statusCode": 403, "errorCode": "IAM_SERVICE.0600", "errorDescription": "Nope"})

        assert (exc.code, exc.status_code, exc.description) == ("IAM_SERVICE.0600", 403, "Nope")

    def test_top_level_attributes_on_exception(self):
        class RemoteError(Exception):
            statusCode = 404
            errorCode = "IAM_SERVICE.0001"

        failure = RemoteError("remote")
        failure.metadata = {"id": "42"}

        exc = reconcile_rpc_error(failure)

        assert (exc.code, exc.status_code) == ("IAM_SERVICE.0001", 404)
        assert exc.metadata == {"id": "42"}

    def test_message_parsed_as_json(self):
        failure = RuntimeError(json.dumps({"statusCode": 404, "errorCode": "CATALOG_SERVICE.0001"}))

        exc = reconcile_rpc_error(failure)

        assert (exc.code, exc.status_code) == ("CATALOG_SERVICE.0001", 404)

    def test_first_matching_location_wins(self):
        failure = {
            "statusCode": 500,
            "errorCode": "OUTER.0001",
            "error": {"statusCode": 404, "errorCode": "INNER.0001"},
        }

        assert reconcile_rpc_error(failure).code == "INNER.0001"

    def test_error_code_without_status_defaults_to_500(self):
        exc = reconcile_rpc_error({"error": {"errorCode": "IAM_SERVICE.0001"}})

        assert exc.status_code == 500

    def test_invalid_status_defaults_to_500(self):
        exc = reconcile_rpc_error({"error": {"statusCode": "teapot", "errorCode": "X.0001"}})

        assert exc.status_code == 500

    def test_non_mapping_metadata_is_ignored(self):
        exc = reconcile_rpc_error({"error": {"statusCode": 400, "errorCode": "X.0001", "metadata": "oops"}})

        assert exc.metadata == {}

    def test_http_status_error_reply(self):
        failure = _status_error(404, {"error": {
            "statusCode": 404,
            "errorCode": "IAM_SERVICE.0001",
            "errorDescription": "User not found",
            "metadata": {"id": "42"},
        }})

        exc = reconcile_rpc_error(failure)

        assert exc.code == "IAM_SERVICE.0001"
        assert exc.status_code == 404
        assert exc.description == "User not found"
        assert exc.metadata == {"id": "42"}


class TestUnrecognizedFailures:
    def test_timeout_is_reraised_unchanged(self):
        original = httpx.ReadTimeout("timed out")

        with pytest.raises(httpx.ReadTimeout) as exc_info:
            reconcile_rpc_error(original)

        assert exc_info.value is original

    def test_plain_timeout_error_is_reraised_unchanged(self):
        original = TimeoutError("timed out")

        with pytest.raises(TimeoutError) as exc_info:
            reconcile_rpc_error(original)

        assert exc_info.value is original

    def test_non_json_error_reply_is_reraised(self):
        original = _status_error(502, "Bad gateway")

        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            reconcile_rpc_error(original)

        assert exc_info.value is original

    def test_non_exception_failure_is_wrapped(self):
        failure = {"unexpected": True}

        with pytest.raises(RpcFailure) as exc_info:
            reconcile_rpc_error(failure)

        assert exc_info.value.failure is failure

    def test_diagnostic_is_logged(self):
        with patch.object(rpc_reconciler.logger, "warning") as warning:
            with pytest.raises(ValueError):
                reconcile_rpc_error(ValueError("no structure here"))

        warning.assert_called_once()
        message = warning.call_args[0][0]
        assert "'errorType': 'ValueError'" in message
        assert "'hasError': False" in message
        assert "'hasStatusCode': False" in message
        assert "no structure here" in message

    def test_diagnose_lists_keys(self):
        diagnostic = RpcErrorReconciler().diagnose({"foo": 1, "response": None})

        assert diagnostic["keys"] == ["foo", "response"]
        assert diagnostic["hasResponse"] is False
        assert diagnostic["errorType"] == "dict"

    def test_custom_probe_list(self):
        reconciler = RpcErrorReconciler(probes=[DEFAULT_PROBES[2]])

        with pytest.raises(RpcFailure):
            reconciler.reconcile({"error": {"statusCode": 404, "errorCode": "IAM_SERVICE.0001"}})
