#!/usr/bin/env python3

import aws_cdk as cdk

from minecraft_ondemand.config import DNS_REGION, ServerConfig
from minecraft_ondemand.dns_stack import MinecraftDnsStack
from minecraft_ondemand.ecs_stack import MinecraftEcsStack


app = cdk.App()
config = ServerConfig.from_app(app)

dns_stack = MinecraftDnsStack(
    app,
    "MinecraftDnsStack",
    domain=config.domain,
    subdomain=config.subdomain,
    hosted_zone_id_key=config.hosted_zone_id_key,
    env=cdk.Environment(account=config.account, region=DNS_REGION),
)

ecs_stack = MinecraftEcsStack(
    app,
    "MinecraftEcsStack",
    cluster_name=config.cluster_name,
    service_name=config.service_name,
    minecraft_image=config.minecraft_image,
    watchdog_image=config.watchdog_image,
    hosted_zone_id_key=config.hosted_zone_id_key,
    domain=config.domain,
    subdomain=config.subdomain,
    dns_region=DNS_REGION,
    task_cpu=config.task_cpu,
    task_memory=config.task_memory,
    env=cdk.Environment(account=config.account, region=config.region),
)
# The ECS stack reads the zone id the DNS stack publishes
ecs_stack.add_dependency(dns_stack)

app.synth()
