import aws_cdk as cdk
from aws_cdk import (
    aws_backup as backup,
    aws_ec2 as ec2,
    aws_ecs as ecs,
    aws_efs as efs,
    aws_events as events,
    aws_iam as iam,
    aws_logs as logs,
    Tags,
)

from minecraft_ondemand.actions import ACTIONS
from minecraft_ondemand.config import DNS_REGION
from minecraft_ondemand.errors import PolicyScopeError, TaskTemplateError
from minecraft_ondemand.ssm_parameter_reader import SsmParameterReader


BASENAME = "Minecraft"
PROJECT_TAG_KEY = "project"
PROJECT_TAG = "minecraft"

MINECRAFT_PORT = 25565
DATA_VOLUME = "data"
POSIX_ID = "1000"


class MinecraftEcsStack(cdk.Stack):

    def __init__(
        self,
        scope,
        construct_id,
        cluster_name: str,
        service_name: str,
        minecraft_image: str,
        watchdog_image: str,
        hosted_zone_id_key: str,
        domain: str,
        subdomain: str,
        dns_region: str = DNS_REGION,
        task_cpu: int = 1024,
        task_memory: int = 2048,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.cluster_name = cluster_name
        self.server_name = f"{subdomain}.{domain}"

        # VPC
        # No NAT: the server runs a few hours a week and only needs public IPs
        self.vpc = ec2.Vpc(
            self,
            f"{BASENAME}VPC",
            max_azs=2,
            nat_gateways=0,
            subnet_configuration=[
                ec2.SubnetConfiguration(
                    name="public",
                    subnet_type=ec2.SubnetType.PUBLIC,
                    cidr_mask=28,
                    map_public_ip_on_launch=True,
                ),
            ],
        )
        Tags.of(self.vpc).add(PROJECT_TAG_KEY, PROJECT_TAG)

        ##################################################
        # World storage
        ##################################################

        # EFS filesystem for world storage
        self.efs = efs.FileSystem(
            self,
            f"{BASENAME}Filesystem",
            vpc=self.vpc,
            vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PUBLIC),
            lifecycle_policy=efs.LifecyclePolicy.AFTER_14_DAYS,
        )
        Tags.of(self.efs).add(PROJECT_TAG_KEY, PROJECT_TAG)

        self.access_point = self.efs.add_access_point(
            "AccessPoint",
            path="/minecraft",
            posix_user=efs.PosixUser(uid=POSIX_ID, gid=POSIX_ID),
            create_acl=efs.Acl(
                owner_uid=POSIX_ID, owner_gid=POSIX_ID, permissions="0755"
            ),
        )

        # Volume for EFS, mounted through the access point with IAM auth
        self.volumes = {
            DATA_VOLUME: ecs.Volume(
                name=DATA_VOLUME,
                efs_volume_configuration=ecs.EfsVolumeConfiguration(
                    file_system_id=self.efs.file_system_id,
                    transit_encryption="ENABLED",
                    authorization_config=ecs.AuthorizationConfig(
                        access_point_id=self.access_point.access_point_id,
                        iam="ENABLED",
                    ),
                ),
            ),
        }

        # Back up the EFS volume every hour, retain for 3 days
        self.backup = backup.BackupPlan(self, f"{BASENAME}BackupPlan")
        Tags.of(self.backup).add(PROJECT_TAG_KEY, PROJECT_TAG)
        self.backup.add_selection(
            f"{BASENAME}BackupSelection",
            resources=[backup.BackupResource.from_efs_file_system(self.efs)],
        )
        self.backup.add_rule(
            backup.BackupPlanRule(
                schedule_expression=events.Schedule.cron(minute="0"),
                delete_after=cdk.Duration.days(3),
            )
        )

        ##################################################
        # ECS
        ##################################################

        self.cluster = ecs.Cluster(
            self,
            f"{BASENAME}Cluster",
            cluster_name=cluster_name,
            vpc=self.vpc,
            enable_fargate_capacity_providers=True,
        )
        Tags.of(self.cluster).add(PROJECT_TAG_KEY, PROJECT_TAG)

        self.task_role = iam.Role(
            self,
            "EcsTaskRole",
            assumed_by=iam.ServicePrincipal("ecs-tasks.amazonaws.com"),
            description="Minecraft ECS task role",
        )

        self.task_definition = ecs.FargateTaskDefinition(
            self,
            "TaskDefinition",
            task_role=self.task_role,
            cpu=task_cpu,
            memory_limit_mib=task_memory,
            volumes=list(self.volumes.values()),
        )

        # CloudWatch Log Group for both containers
        self.log_group = logs.LogGroup(
            self,
            f"{BASENAME}LogGroup",
            log_group_name=f"/aws/ecs/{cluster_name}",
            retention=logs.RetentionDays.ONE_WEEK,
            removal_policy=cdk.RemovalPolicy.DESTROY,
        )

        self.minecraft_container = self.task_definition.add_container(
            "minecraftContainer",
            container_name="Minecraft",
            image=ecs.ContainerImage.from_registry(minecraft_image),
            port_mappings=[
                ecs.PortMapping(
                    container_port=MINECRAFT_PORT,
                    host_port=MINECRAFT_PORT,
                    protocol=ecs.Protocol.TCP,
                ),
            ],
            environment={"EULA": "TRUE"},
            logging=ecs.LogDrivers.aws_logs(
                stream_prefix="minecraft", log_group=self.log_group
            ),
        )
        self.mount(self.minecraft_container, DATA_VOLUME, "/data")

        # DNS stack lives in us-east-1, so read its zone id across regions
        self.hosted_zone_id_reader = SsmParameterReader(
            self,
            "Route53HostedZoneIdReader",
            parameter_name=hosted_zone_id_key,
            region=dns_region,
        )
        self.hosted_zone_id = self.hosted_zone_id_reader.get_parameter_value()

        # Scales the service up on the first connection, down when idle, and
        # points SERVERNAME at the task's public IP
        self.watchdog_container = self.task_definition.add_container(
            "watchdogContainer",
            container_name="Watchdog",
            image=ecs.ContainerImage.from_registry(watchdog_image),
            essential=True,
            environment={
                "CLUSTER": cluster_name,
                "SERVICE": service_name,
                "DNSZONE": self.hosted_zone_id,
                "SERVERNAME": self.server_name,
            },
            logging=ecs.LogDrivers.aws_logs(
                stream_prefix="watchdog", log_group=self.log_group
            ),
        )

        # Game clients connect from anywhere
        self.service_security_group = ec2.SecurityGroup(
            self,
            "ServiceSecurityGroup",
            vpc=self.vpc,
            description="Security group for the Minecraft task",
        )
        self.service_security_group.add_ingress_rule(
            ec2.Peer.any_ipv4(), ec2.Port.tcp(MINECRAFT_PORT)
        )

        self.service = ecs.FargateService(
            self,
            "FargateService",
            cluster=self.cluster,
            task_definition=self.task_definition,
            capacity_provider_strategies=[
                ecs.CapacityProviderStrategy(
                    capacity_provider="FARGATE_SPOT", weight=1, base=1
                ),
            ],
            platform_version=ecs.FargatePlatformVersion.LATEST,
            service_name=service_name,
            desired_count=0,
            assign_public_ip=True,
            security_groups=[self.service_security_group],
        )
        Tags.of(self.service).add(PROJECT_TAG_KEY, PROJECT_TAG)

        self.efs.connections.allow_default_port_from(self.service)

        ##################################################
        # Task role policies
        ##################################################

        self.add_iam_efs(role=self.task_role)
        self.add_iam_service_control(role=self.task_role)
        self.add_iam_route53_update(
            role=self.task_role, hosted_zone_id=self.hosted_zone_id
        )

    def mount(
        self,
        container: ecs.ContainerDefinition,
        volume_name: str,
        container_path: str,
        read_only: bool = False,
    ):
        """Mount a task volume into a container. The volume must be declared
        on the task definition."""
        if volume_name not in self.volumes:
            raise TaskTemplateError(
                f"Container {container.container_name} mounts unknown volume "
                f"{volume_name}"
            )
        container.add_mount_points(
            ecs.MountPoint(
                container_path=container_path,
                source_volume=volume_name,
                read_only=read_only,
            )
        )

    def add_iam_efs(self, role: iam.Role):
        """Permission to mount and write the world data, only through the
        access point."""
        policy = iam.Policy(
            self,
            "fsRW",
            statements=[
                iam.PolicyStatement(
                    effect=iam.Effect.ALLOW,
                    actions=list(ACTIONS["ReadWriteDataFs"]),
                    resources=[self.efs.file_system_arn],
                    conditions={
                        "StringEquals": {
                            "elasticfilesystem:AccessPointArn": self.access_point.access_point_arn,
                        },
                    },
                ),
            ],
        )
        policy.attach_to_role(role)
        return policy

    def add_iam_service_control(self, role: iam.Role):
        """Permission for the watchdog to scale its own service and find the
        task's public IP."""
        task_arn = cdk.Stack.format_arn(
            self,
            service="ecs",
            resource="task",
            resource_name=f"{self.cluster_name}/*",
            arn_format=cdk.ArnFormat.SLASH_RESOURCE_NAME,
        )
        policy = iam.Policy(
            self,
            "ServiceControlPolicy",
            statements=[
                iam.PolicyStatement(
                    sid="AllowAllOnServiceAndTask",
                    effect=iam.Effect.ALLOW,
                    actions=list(ACTIONS["AllowAllOnServiceAndTask"]),
                    resources=[self.service.service_arn, task_arn],
                ),
                iam.PolicyStatement(
                    effect=iam.Effect.ALLOW,
                    actions=list(ACTIONS["AllowGetIP"]),
                    resources=[
                        # No task exists yet, so no ENI exists yet either.
                        "*",
                    ],
                ),
            ],
        )
        policy.attach_to_role(role)
        return policy

    def add_iam_route53_update(self, role: iam.Role, hosted_zone_id: str):
        """Permission to update records in the server's hosted zone only."""
        if not cdk.Token.is_unresolved(hosted_zone_id) and (
            not hosted_zone_id or "*" in hosted_zone_id
        ):
            raise PolicyScopeError(
                f"Route 53 policy must target a single hosted zone, got {hosted_zone_id!r}"
            )

        policy = iam.Policy(
            self,
            "IamRoute53Policy",
            statements=[
                iam.PolicyStatement(
                    sid="AllowEditRecordSets",
                    effect=iam.Effect.ALLOW,
                    actions=list(ACTIONS["AllowModifyHostedZone"]),
                    resources=[f"arn:aws:route53:::hostedzone/{hosted_zone_id}"],
                ),
            ],
        )
        policy.attach_to_role(role)
        return policy
