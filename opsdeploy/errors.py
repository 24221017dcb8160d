#!/usr/bin/env python3
"""
Error taxonomy for opsdeploy.

Analysis and build errors abort the whole run. Stack deployment errors are
fatal only to the task that owns the stack and are collected by the
orchestrator. Publish errors are reported and never raised.
"""


class OpsDeployError(Exception):
    """Base class for every opsdeploy error."""


class ConfigError(OpsDeployError):
    """Configuration file is unreadable or fails validation."""


class AnalysisError(OpsDeployError):
    """Listing stacks or apps failed; nothing may be built or deployed."""


class CookbookBuildError(OpsDeployError):
    """Vendoring or packaging a cookbook failed."""

    def __init__(self, cookbook, reason):
        self.cookbook = cookbook
        self.reason = reason
        super().__init__(f"Failed to build cookbook [{cookbook.name}] ({cookbook.artifact_key}): {reason}")


class PublishError(OpsDeployError):
    """Uploading an artifact or its fingerprint record failed."""

    def __init__(self, cookbook, reason):
        self.cookbook = cookbook
        self.reason = reason
        super().__init__(
            f"Failed to publish cookbook [{cookbook.name}] to s3://{cookbook.bucket}/{cookbook.artifact_key}: {reason}"
        )


class StackDeploymentError(OpsDeployError):
    """Base for errors that end one stack's command sequence."""

    def __init__(self, stack, message):
        self.stack = stack
        super().__init__(message)


class NoRunningInstancesError(StackDeploymentError):
    def __init__(self, stack):
        super().__init__(
            stack,
            f"Stack \"{stack.name}\" ({stack.stack_id}) has no running instances to deploy to",
        )


class CommandFailedError(StackDeploymentError):
    def __init__(self, stack, deployment_id, command):
        self.deployment_id = deployment_id
        self.command = command
        super().__init__(
            stack,
            f"Command '{command}' failed [stack=\"{stack.name}\"] [deployment_id=\"{deployment_id}\"]",
        )


class DeploymentTimeoutError(StackDeploymentError):
    def __init__(self, stack, deployment_id, command, timeout):
        self.deployment_id = deployment_id
        self.command = command
        self.timeout = timeout
        super().__init__(
            stack,
            f"Command '{command}' did not finish within {timeout}s "
            f"[stack=\"{stack.name}\"] [deployment_id=\"{deployment_id}\"]",
        )
