import aws_cdk as cdk

from minecraft_ondemand.dns_stack import MinecraftDnsStack
from minecraft_ondemand.ecs_stack import MinecraftEcsStack


ACCOUNT = "123456789012"
DOMAIN = "example.com"
ROOT_ZONE_ID = "ZROOT"


def build_ecs_stack(**overrides) -> MinecraftEcsStack:
    props = {
        "cluster_name": "minecraft",
        "service_name": "minecraft-server",
        "minecraft_image": "itzg/minecraft-server",
        "watchdog_image": "doctorray/minecraft-ecsfargate-watchdog",
        "hosted_zone_id_key": "hostedZoneIdKey",
        "domain": DOMAIN,
        "subdomain": "minecraft",
        "dns_region": "us-east-1",
    }
    props.update(overrides)
    return MinecraftEcsStack(cdk.App(), "MinecraftEcsStack", **props)


def build_dns_stack() -> MinecraftDnsStack:
    # Cached answer for HostedZone.from_lookup, as `cdk synth` would store it
    app = cdk.App(
        context={
            f"hosted-zone:account={ACCOUNT}:domainName={DOMAIN}:region=us-east-1": {
                "Id": f"/hostedzone/{ROOT_ZONE_ID}",
                "Name": f"{DOMAIN}.",
            },
        }
    )
    return MinecraftDnsStack(
        app,
        "MinecraftDnsStack",
        domain=DOMAIN,
        subdomain="minecraft",
        hosted_zone_id_key="hostedZoneIdKey",
        env=cdk.Environment(account=ACCOUNT, region="us-east-1"),
    )


def only_resource(template, resource_type: str) -> tuple[str, dict]:
    resources = template.find_resources(resource_type)
    assert len(resources) == 1, f"Expected one {resource_type}, got {len(resources)}"
    return next(iter(resources.items()))


def container(template, name: str) -> dict:
    _, task_definition = only_resource(template, "AWS::ECS::TaskDefinition")
    for definition in task_definition["Properties"]["ContainerDefinitions"]:
        if definition["Name"] == name:
            return definition
    raise AssertionError(f"No container named {name}")


def policy_statements(template) -> list[dict]:
    return [
        statement
        for policy in template.find_resources("AWS::IAM::Policy").values()
        for statement in policy["Properties"]["PolicyDocument"]["Statement"]
    ]
