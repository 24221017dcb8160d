#!/usr/bin/env python3
"""
Deployment orchestrator.

Sequences analysis -> cookbook build/publish -> concurrent per-stack
deployment, and aggregates the per-stack outcomes into a DeployReport.
"""

from concurrent.futures import ThreadPoolExecutor

from .errors import OpsDeployError
from .models import DeployReport, TargetOutcome


DEFAULT_MAX_WORKERS = 10


class Orchestrator:
    """Drives one deploy invocation through a BaseDeployer."""

    def __init__(self, deployer, builder, reporter, max_workers=DEFAULT_MAX_WORKERS):
        self.deployer = deployer
        self.builder = builder
        self.reporter = reporter
        self.max_workers = max(1, max_workers)

    def analyze(self, stack_ids):
        """PHASE 1: Find unique stale cookbooks and deploy targets."""
        self.reporter.phase(f"PHASE 1: ANALYZE ({len(stack_ids)} stacks)")
        return self.deployer.analyze(stack_ids)

    def publish_cookbooks(self, cookbooks):
        """PHASE 2: Build each unique cookbook once, in order, then publish it."""
        if not cookbooks:
            self.reporter.info("\nAll cookbooks are up to date")
            return []

        self.reporter.phase(f"PHASE 2: BUILD COOKBOOKS ({len(cookbooks)})")
        published = []
        try:
            for cookbook in cookbooks:
                self.reporter.info(f"...Building cookbook [{cookbook.name}]")
                artifact_path = self.builder.build(cookbook)

                self.reporter.info(f"...Deploying cookbook [{cookbook.name}]")
                if self.deployer.deploy_cookbook(cookbook, artifact_path):
                    published.append(cookbook)
        finally:
            self.builder.cleanup(cookbooks)
        return published

    def deploy_targets(self, result):
        """PHASE 3: One task per target; a failing task never cancels the others."""
        targets = result.deploy_targets
        self.reporter.phase(f"PHASE 3: DEPLOY ({len(targets)} stacks)")
        if not targets:
            return []

        stale_cookbooks = frozenset(result.cookbooks)
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(targets))) as executor:
            futures = [executor.submit(self._deploy_target, target, stale_cookbooks) for target in targets]
            return [future.result() for future in futures]

    def _deploy_target(self, target, stale_cookbooks):
        try:
            self.deployer.deploy_target(target, stale_cookbooks)
        except Exception as e:  # pylint: disable=broad-except
            return TargetOutcome(target=target, error=e)
        return TargetOutcome(target=target)

    def deploy(self, stack_ids):
        """
        Run a full deployment.

        AnalysisError and CookbookBuildError propagate before any stack is
        touched. Per-stack failures are collected in the returned report.
        """
        result = self.analyze(stack_ids)
        published = self.publish_cookbooks(result.cookbooks)
        outcomes = self.deploy_targets(result)

        report = DeployReport(analysis=result, outcomes=tuple(outcomes), published=tuple(published))
        self.summarize(report)
        return report

    def summarize(self, report):
        for outcome in report.outcomes:
            if outcome.succeeded:
                continue
            error = outcome.error
            if isinstance(error, OpsDeployError):
                self.reporter.error(str(error))
            else:
                self.reporter.error(
                    f"Stack \"{outcome.target.stack.name}\" raised an unexpected error: "
                    f"{type(error).__name__}: {error}"
                )

        total = len(report.outcomes)
        if report.succeeded:
            self.reporter.phase(f"DEPLOYMENT COMPLETE ({total} stacks)")
        else:
            self.reporter.phase(f"DEPLOYMENT FAILED ({len(report.errors)} of {total} stacks)")
