import aws_cdk as cdk
from aws_cdk import (
    aws_iam as iam,
    aws_logs as logs,
    aws_route53 as route53,
    aws_ssm as ssm,
    Tags,
)

from minecraft_ondemand.actions import ACTIONS


BASENAME = "Minecraft"
PROJECT_TAG_KEY = "project"
PROJECT_TAG = "minecraft"

# Overwritten by the watchdog with the task's public IP on startup
PLACEHOLDER_IP = "192.168.1.1"


class MinecraftDnsStack(cdk.Stack):
    """Delegated subdomain for the server. Publishes the subdomain's hosted
    zone id to SSM so the ECS stack can read it back from any region."""

    def __init__(
        self,
        scope,
        construct_id,
        domain: str,
        subdomain: str,
        hosted_zone_id_key: str,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.server_name = f"{subdomain}.{domain}"

        # CloudWatch Log Group for Route 53 query logs
        self.query_log_group = logs.LogGroup(
            self,
            f"{BASENAME}QueryLogGroup",
            log_group_name=f"/aws/route53/{self.server_name}",
            retention=logs.RetentionDays.THREE_DAYS,
            removal_policy=cdk.RemovalPolicy.DESTROY,
        )
        Tags.of(self.query_log_group).add(PROJECT_TAG_KEY, PROJECT_TAG)

        query_log_policy = self.query_log_group.add_to_resource_policy(
            iam.PolicyStatement(
                effect=iam.Effect.ALLOW,
                principals=[iam.ServicePrincipal("route53.amazonaws.com")],
                actions=list(ACTIONS["R53LogsToCloudWatch"]),
                resources=[self.query_log_group.log_group_arn],
            )
        )

        # Root zone must already exist in the account; the lookup fails the
        # synth otherwise
        self.root_zone = route53.HostedZone.from_lookup(
            self,
            f"{BASENAME}RootHostedZone",
            domain_name=domain,
        )

        self.hosted_zone = route53.HostedZone(
            self,
            f"{BASENAME}SubdomainHostedZone",
            zone_name=self.server_name,
            query_logs_log_group_arn=self.query_log_group.log_group_arn,
        )
        Tags.of(self.hosted_zone).add(PROJECT_TAG_KEY, PROJECT_TAG)
        # Route 53 validates the log group policy when query logging is enabled
        if query_log_policy.policy_dependable:
            self.hosted_zone.node.add_dependency(query_log_policy.policy_dependable)

        route53.ARecord(
            self,
            f"{BASENAME}PlaceholderRecord",
            zone=self.hosted_zone,
            target=route53.RecordTarget.from_ip_addresses(PLACEHOLDER_IP),
            ttl=cdk.Duration.seconds(30),
        )

        # Delegate the subdomain from the root zone
        route53.NsRecord(
            self,
            f"{BASENAME}DelegationRecord",
            zone=self.root_zone,
            record_name=subdomain,
            values=self.hosted_zone.hosted_zone_name_servers,
        )

        self.hosted_zone_id_parameter = ssm.StringParameter(
            self,
            f"{BASENAME}HostedZoneIdParameter",
            parameter_name=hosted_zone_id_key,
            string_value=self.hosted_zone.hosted_zone_id,
            description=f"Hosted zone id for {self.server_name}",
        )

        cdk.CfnOutput(self, "HostedZoneId", value=self.hosted_zone.hosted_zone_id)
        cdk.CfnOutput(
            self,
            "HostedZoneIdParameterName",
            value=self.hosted_zone_id_parameter.parameter_name,
        )
