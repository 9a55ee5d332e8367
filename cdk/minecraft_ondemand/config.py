import os
from dataclasses import dataclass

from minecraft_ondemand.errors import ConfigurationError


# Route 53 only delivers query logs to us-east-1, so the DNS stack and the
# hosted zone id parameter live there regardless of the server's region.
DNS_REGION = "us-east-1"
DEFAULT_REGION = "us-west-2"


@dataclass(frozen=True)
class ServerConfig:
    domain: str
    subdomain: str = "minecraft"
    hosted_zone_id_key: str = "MinecraftHostedZoneId"
    cluster_name: str = "minecraft"
    service_name: str = "minecraft-server"
    minecraft_image: str = "itzg/minecraft-server"
    watchdog_image: str = "doctorray/minecraft-ecsfargate-watchdog"
    task_cpu: int = 1024
    task_memory: int = 2048
    account: str | None = None
    region: str = DEFAULT_REGION

    @classmethod
    def from_app(cls, app) -> "ServerConfig":
        """Build the config from CDK context, then environment variables, then
        defaults."""

        def get(context_key: str, env_key: str, default=None):
            value = app.node.try_get_context(context_key)
            if value is None:
                value = os.environ.get(env_key, default)
            return value

        domain = get("domain", "ROUTE53_DOMAIN")
        if not domain:
            raise ConfigurationError(
                "Root domain is required: set ROUTE53_DOMAIN or -c domain=..."
            )

        try:
            task_cpu = int(get("task_cpu", "TASK_CPU", cls.task_cpu))
            task_memory = int(get("task_memory", "TASK_MEMORY_MIB", cls.task_memory))
        except ValueError as ex:
            raise ConfigurationError(f"Invalid task size: {ex}") from ex

        return cls(
            domain=domain,
            subdomain=get("subdomain", "ROUTE53_SUBDOMAIN", cls.subdomain),
            hosted_zone_id_key=get(
                "hosted_zone_id_key", "HOSTED_ZONE_ID_KEY", cls.hosted_zone_id_key
            ),
            cluster_name=get("cluster_name", "ECS_CLUSTER_NAME", cls.cluster_name),
            service_name=get("service_name", "ECS_SERVICE_NAME", cls.service_name),
            minecraft_image=get(
                "minecraft_image", "MINECRAFT_IMAGE", cls.minecraft_image
            ),
            watchdog_image=get("watchdog_image", "WATCHDOG_IMAGE", cls.watchdog_image),
            task_cpu=task_cpu,
            task_memory=task_memory,
            account=get("account", "CDK_DEFAULT_ACCOUNT"),
            region=get("region", "CDK_DEFAULT_REGION", DEFAULT_REGION),
        )
