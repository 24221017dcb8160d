#!/usr/bin/env python3
"""
AWS OpsWorks deployer.

Analyzes OpsWorks stacks (apps plus the S3 custom cookbook source), publishes
cookbook artifacts, and dispatches deployment commands stack by stack.
"""

from botocore.exceptions import BotoCoreError, ClientError

from .base import BaseDeployer
from ..cookbooks import S3_SOURCE_TYPE, discover_cookbooks, match_cookbooks, parse_cookbook_source
from ..errors import AnalysisError
from ..models import AnalysisResult, App, CookbookDescriptor, DeployTarget, Stack, StackAnalysis

AWS_ERRORS = (ClientError, BotoCoreError)


class OpsWorksDeployer(BaseDeployer):
    """Deployer for OpsWorks stacks using S3-hosted cookbooks."""

    def __init__(self, client, reporter, fingerprints, publisher, dispatcher, cookbook_root='.', ignore=()):
        self.client = client
        self.reporter = reporter
        self.fingerprints = fingerprints
        self.publisher = publisher
        self.dispatcher = dispatcher
        self.cookbook_root = cookbook_root
        self.ignore = list(ignore)

    def describe_stacks(self, stack_ids):
        try:
            records = self.client.describe_stacks(StackIds=list(stack_ids))['Stacks']
        except AWS_ERRORS as e:
            raise AnalysisError(f"Unable to describe stacks {list(stack_ids)}: {e}") from e

        by_id = {record['StackId']: Stack.from_api(record) for record in records}
        missing = [stack_id for stack_id in stack_ids if stack_id not in by_id]
        if missing:
            raise AnalysisError(f"Stacks not found: {', '.join(missing)}")
        return [by_id[stack_id] for stack_id in dict.fromkeys(stack_ids)]

    def describe_apps(self, stack):
        try:
            records = self.client.describe_apps(StackId=stack.stack_id)['Apps']
        except AWS_ERRORS as e:
            raise AnalysisError(f"Unable to list apps for stack \"{stack.name}\": {e}") from e
        return tuple(App.from_api(record) for record in records)

    def analyze(self, stack_ids):
        if not stack_ids:
            return AnalysisResult()

        cookbooks = []
        targets = []
        for stack in self.describe_stacks(stack_ids):
            analysis = self.analyze_stack(stack)
            targets.append(DeployTarget(stack=stack, apps=analysis.apps, cookbook=analysis.cookbook))

            # Build each artifact at most once, however many stacks use it
            cookbook = analysis.cookbook
            if cookbook is not None and cookbook.stale and cookbook not in cookbooks:
                cookbooks.append(cookbook)

        return AnalysisResult(cookbooks=tuple(cookbooks), deploy_targets=tuple(targets))

    def analyze_stack(self, stack):
        """Retrieve the stack's apps and everything known about its remote/local cookbook."""
        self.reporter.info(f"Stack: {stack.name}")
        cookbook = self.analyze_cookbook(stack)

        apps = self.describe_apps(stack)
        if apps:
            self.reporter.info(f"--- Apps: {[app.name for app in apps]}")
        else:
            self.reporter.info("--- Apps: No apps")

        return StackAnalysis(apps=apps, cookbook=cookbook)

    def analyze_cookbook(self, stack):
        source = stack.cookbook_source
        if source is None or source.type != S3_SOURCE_TYPE:
            return None

        try:
            bucket, artifact_key, fingerprint_key = parse_cookbook_source(source.url)
        except ValueError as e:
            self.reporter.error(f"Stack \"{stack.name}\": {e}")
            return None

        matches = match_cookbooks(discover_cookbooks(self.cookbook_root, self.ignore), artifact_key)
        if len(matches) != 1:
            self.reporter.info(
                f"--- Cookbook: found {len(matches)} local cookbooks matching '{artifact_key}', not building"
            )
            return CookbookDescriptor(bucket=bucket, artifact_key=artifact_key, fingerprint_key=fingerprint_key)

        local = matches[0]
        try:
            remote_fingerprint = self.fingerprints.remote_fingerprint(bucket, fingerprint_key)
        except AWS_ERRORS as e:
            raise AnalysisError(f"Unable to read s3://{bucket}/{fingerprint_key}: {e}") from e

        cookbook = CookbookDescriptor(
            bucket=bucket,
            artifact_key=artifact_key,
            fingerprint_key=fingerprint_key,
            name=local.name,
            path=local.path,
            local_fingerprint=self.fingerprints.local_fingerprint(local.path),
            remote_fingerprint=remote_fingerprint
        )
        state = "out of date" if cookbook.stale else "up to date"
        self.reporter.info(f"--- Cookbook: {cookbook.name} ({state})")
        return cookbook

    def deploy_cookbook(self, cookbook, artifact_path):
        return self.publisher.publish(cookbook, artifact_path)

    def deploy_target(self, target, stale_cookbooks):
        self.dispatcher.run(target, stale_cookbooks)
