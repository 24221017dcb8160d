#!/usr/bin/env python3
"""
Base deployer interface.

A deployer knows how to analyze stacks on one fleet-management backend, publish
cookbook artifacts for it, and drive one deploy target to completion. The
orchestrator depends only on this interface.
"""

from abc import ABC, abstractmethod


class BaseDeployer(ABC):
    """Interface for fleet-management deployers."""

    @abstractmethod
    def analyze(self, stack_ids):
        """
        Analyze stacks for deployment.

        Args:
            stack_ids: Stack identifiers to deploy

        Returns:
            AnalysisResult with the unique stale cookbooks (first-seen order)
            and one DeployTarget per stack

        Raises:
            AnalysisError: If any stack or its apps cannot be listed
        """

    @abstractmethod
    def deploy_cookbook(self, cookbook, artifact_path):
        """Publish a built cookbook artifact. Returns True on success, never raises."""

    @abstractmethod
    def deploy_target(self, target, stale_cookbooks):
        """
        Run the command sequence for one deploy target.

        Raises:
            StackDeploymentError: If a command is rejected or its deployment fails
        """
