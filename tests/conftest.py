import aws_cdk as cdk
import pytest

from minecraft_ondemand.ecs_stack import MinecraftEcsStack

from tests.helpers import build_dns_stack, build_ecs_stack


@pytest.fixture
def ecs_stack() -> MinecraftEcsStack:
    return build_ecs_stack()


@pytest.fixture
def ecs_template(ecs_stack):
    return cdk.assertions.Template.from_stack(ecs_stack)


@pytest.fixture
def dns_template():
    return cdk.assertions.Template.from_stack(build_dns_stack())
