"""AWS stub tests for the Lambda function provider."""

import boto3
import pytest
from botocore.stub import Stubber

from core.context import AuditContext
from core.models import AuditCancelledError, ProviderError, RequiredTagSet
from core.providers.lambda_function import LambdaFunctionTagProvider

FN_ARN = "arn:aws:lambda:us-east-1:123456789012:function:{}"


@pytest.fixture
def stubbed(monkeypatch):
    session = boto3.session.Session(region_name="us-east-1")
    client = session.client("lambda")
    monkeypatch.setattr(session, "client", lambda name, config=None: client)
    return session, Stubber(client)


def test_lambda_lists_tags_by_function_arn(stubbed, required_tags):
    session, stubber = stubbed
    stubber.add_response(
        "list_functions",
        {
            "Functions": [
                {"FunctionName": "api", "FunctionArn": FN_ARN.format("api")},
                {"FunctionName": "worker", "FunctionArn": FN_ARN.format("worker")},
            ]
        },
    )
    stubber.add_response(
        "list_tags",
        {"Tags": {"owner": "backend", "project": "shop"}},
        expected_params={"Resource": FN_ARN.format("api")},
    )
    stubber.add_response(
        "list_tags",
        {"Tags": {}},
        expected_params={"Resource": FN_ARN.format("worker")},
    )

    with stubber:
        records = list(LambdaFunctionTagProvider(session).audit(required_tags, AuditContext()))

    assert [r.resource_id for r in records] == ["api", "worker"]
    assert records[0].service == "Lambda"
    assert records[0].resource_type == "Function"
    assert records[0].missing_tags == ("environment",)
    assert records[1].missing_tags == ("environment", "project", "owner")


def test_lambda_tag_fetch_failure_is_lenient(stubbed, required_tags):
    session, stubber = stubbed
    stubber.add_response(
        "list_functions",
        {"Functions": [{"FunctionName": "api", "FunctionArn": FN_ARN.format("api")}]},
    )
    stubber.add_client_error(
        "list_tags",
        service_error_code="AccessDeniedException",
        http_status_code=403,
        expected_params={"Resource": FN_ARN.format("api")},
    )

    with stubber:
        records = list(LambdaFunctionTagProvider(session).audit(required_tags, AuditContext()))

    assert records[0].tags == {}
    assert records[0].missing_tags == ("environment", "project", "owner")


def test_lambda_listing_failure_is_fatal(stubbed, required_tags):
    session, stubber = stubbed
    stubber.add_client_error("list_functions", service_error_code="AccessDeniedException", http_status_code=403)

    with stubber:
        with pytest.raises(ProviderError, match="failed to list Lambda functions"):
            list(LambdaFunctionTagProvider(session).audit(required_tags, AuditContext()))


def test_cancelled_context_stops_before_listing(stubbed, required_tags):
    session, stubber = stubbed
    context = AuditContext()
    context.cancel()

    with stubber:
        with pytest.raises(AuditCancelledError):
            list(LambdaFunctionTagProvider(session).audit(required_tags, context))

    stubber.assert_no_pending_responses()


def test_lambda_empty_required_tags(stubbed):
    session, stubber = stubbed
    stubber.add_response(
        "list_functions",
        {"Functions": [{"FunctionName": "api", "FunctionArn": FN_ARN.format("api")}]},
    )
    stubber.add_response("list_tags", {"Tags": {}}, expected_params={"Resource": FN_ARN.format("api")})

    with stubber:
        records = list(LambdaFunctionTagProvider(session).audit(RequiredTagSet(), AuditContext()))

    assert records[0].missing_tags == ()
    assert records[0].compliant
