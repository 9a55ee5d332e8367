from types import MappingProxyType


# Named IAM capability groups. Statements reference these by name so the
# policy surface stays in one place.
ACTIONS = MappingProxyType(
    {
        "R53LogsToCloudWatch": ("logs:PutLogEvents", "logs:CreateLogStream"),
        "ReadWriteDataFs": (
            "elasticfilesystem:ClientMount",
            "elasticfilesystem:ClientWrite",
            "elasticfilesystem:DescribeFileSystems",
        ),
        "AllowAllOnServiceAndTask": ("ecs:*",),
        "AllowGetIP": ("ec2:DescribeNetworkInterfaces",),
        "AllowModifyHostedZone": (
            "route53:GetHostedZone",
            "route53:ChangeResourceRecordSets",
            "route53:ListResourceRecordSets",
        ),
    }
)
