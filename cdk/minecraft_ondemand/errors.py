class MinecraftInfraError(Exception):
    """Base error for the Minecraft infrastructure app."""


class ConfigurationError(MinecraftInfraError):
    """A required setting is missing or malformed."""


class LookupFailure(MinecraftInfraError):
    """A pre-existing resource (SSM parameter, hosted zone) does not exist.
    Not retried: the operator has to create the resource first."""


class CrossUnitOrderingViolation(LookupFailure):
    """The compute stack is being deployed before the DNS stack has published
    its hosted zone id."""


class PolicyScopeError(MinecraftInfraError):
    """A policy statement would be scoped to a wildcard or empty resource."""


class TaskTemplateError(MinecraftInfraError):
    """A container mount references a volume the task definition lacks."""
