import logging
import time

import boto3
from botocore.exceptions import ClientError
from aws_cdk import custom_resources as cr
from constructs import Construct

from minecraft_ondemand.errors import LookupFailure


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


class SsmParameterReader(cr.AwsCustomResource):
    """Read an SSM parameter from any region at deploy time.

    ``ssm.StringParameter.value_for_string_parameter`` only resolves parameters
    in the stack's own region, so the hosted zone id published by the DNS
    stack in us-east-1 is fetched with an SDK call instead. The physical id
    changes on every synth so every deploy re-reads the parameter.
    """

    def __init__(
        self, scope: Construct, construct_id: str, parameter_name: str, region: str
    ) -> None:
        if not parameter_name:
            raise ValueError("parameter_name must not be empty")

        ssm_sdk_call = cr.AwsSdkCall(
            service="SSM",
            action="getParameter",
            parameters={"Name": parameter_name},
            region=region,
            physical_resource_id=cr.PhysicalResourceId.of(
                f"SSMParam-{parameter_name}-{int(time.time() * 1000)}"
            ),
        )

        super().__init__(
            scope,
            construct_id,
            on_update=ssm_sdk_call,
            # Lookup is granted on any resource, not just the one parameter
            policy=cr.AwsCustomResourcePolicy.from_sdk_calls(
                resources=cr.AwsCustomResourcePolicy.ANY_RESOURCE
            ),
        )

    def get_parameter_value(self) -> str:
        return self.get_response_field("Parameter.Value")


def read_parameter(name: str, region: str, client=None) -> str:
    """
    Reads a single SSM parameter synchronously.

    Args:
        name (str): The parameter name.
        region (str): The region holding the parameter.
        client: Optional boto3 SSM client, built for ``region`` when omitted.

    Returns:
        str: The parameter value, unmodified.

    Raises:
        LookupFailure: The parameter does not exist in ``region``.
    """
    if not name:
        raise ValueError("Parameter name must not be empty")

    if client is None:
        client = boto3.client("ssm", region_name=region)

    try:
        response = client.get_parameter(Name=name)
    except ClientError as ex:
        if ex.response["Error"]["Code"] == "ParameterNotFound":
            raise LookupFailure(
                f"SSM parameter {name} not found in {region}"
            ) from ex
        raise

    logger.info(f"Resolved SSM parameter {name} in {region}")
    return response["Parameter"]["Value"]
