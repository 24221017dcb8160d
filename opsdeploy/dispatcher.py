#!/usr/bin/env python3
"""
Per-stack command dispatch.

Issues OpsWorks deployment commands to one stack in order and polls each
deployment until it reaches a terminal status.
"""

import time

from botocore.exceptions import ClientError

from .errors import CommandFailedError, DeploymentTimeoutError, NoRunningInstancesError
from .models import DEPLOY, REFRESH_COOKBOOKS, SETUP, DeploymentCommand, DeploymentStatus


DEFAULT_POLL_INTERVAL = 2

COMMAND_LABELS = {
    REFRESH_COOKBOOKS: "Updating custom cookbooks",
    SETUP: "Running setup command",
    DEPLOY: "Deploying",
}


class DeploymentDispatcher:
    """Runs RefreshCookbooks -> Setup -> DeployApp x N for a single deploy target."""

    def __init__(self, client, reporter, poll_interval=DEFAULT_POLL_INTERVAL, poll_timeout=None,
                 sleep=time.sleep, clock=time.monotonic):
        self.client = client
        self.reporter = reporter
        self.poll_interval = poll_interval
        self.poll_timeout = poll_timeout
        self.sleep = sleep
        self.clock = clock

    def plan(self, target, stale_cookbooks):
        """Ordered commands for target; cookbook refresh only when its cookbook is stale."""
        commands = []
        if target.cookbook is not None and target.cookbook in stale_cookbooks:
            commands.append(DeploymentCommand.refresh_cookbooks(target.stack))
            commands.append(DeploymentCommand.setup(target.stack))
        for app in target.apps:
            commands.append(DeploymentCommand.deploy_app(target.stack, app))
        return commands

    def run(self, target, stale_cookbooks):
        for command in self.plan(target, stale_cookbooks):
            self.execute(command)
        self.reporter.success(f"Deployment complete [stack=\"{target.stack.name}\"]")

    def execute(self, command):
        self.reporter.info(f"...{COMMAND_LABELS[command.name]} {command.describe()}")
        deployment_id = self.issue(command)
        status = self.wait_for_deployment(command, deployment_id)
        if status is not DeploymentStatus.SUCCESSFUL:
            raise CommandFailedError(command.stack, deployment_id, command.name)
        return deployment_id

    def issue(self, command):
        try:
            response = self.client.create_deployment(**command.to_request())
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') == 'ValidationException':
                raise NoRunningInstancesError(command.stack) from e
            raise
        return response['DeploymentId']

    def get_deployment_status(self, deployment_id):
        response = self.client.describe_deployments(DeploymentIds=[deployment_id])
        deployments = response.get('Deployments', [])
        if len(deployments) == 1:
            return DeploymentStatus.from_remote(deployments[0].get('Status'))
        return DeploymentStatus.FAILED

    def wait_for_deployment(self, command, deployment_id):
        """Poll until terminal. Waits forever unless poll_timeout is set."""
        started = self.clock()
        while True:
            status = self.get_deployment_status(deployment_id)
            if status.terminal:
                return status
            if self.poll_timeout is not None and self.clock() - started >= self.poll_timeout:
                raise DeploymentTimeoutError(command.stack, deployment_id, command.name, self.poll_timeout)
            self.sleep(self.poll_interval)
