#!/usr/bin/env python3
"""
opsdeploy command line.
Deploys apps and their custom cookbooks to one or more OpsWorks stacks.
"""

import argparse
import sys

from botocore.exceptions import BotoCoreError, ClientError

from .config import load_config, validate_config
from .cookbooks import CookbookBuilder
from .deployers import get_deployer
from .errors import OpsDeployError
from .orchestrator import Orchestrator
from .reporting import Reporter


def apply_overrides(config, args):
    """Command-line options win over the configuration file."""
    deployment = config['deployment']
    if args.max_workers is not None:
        deployment['max_workers'] = args.max_workers
    if args.poll_interval is not None:
        deployment['poll_interval'] = args.poll_interval
    if args.poll_timeout is not None:
        deployment['poll_timeout'] = args.poll_timeout
    return config


def build_orchestrator(config, reporter, client=None, storage=None):
    deployment = config['deployment']
    deployer = get_deployer(config, reporter, client=client, storage=storage)
    builder = CookbookBuilder(build_dir=deployment['build_dir'])
    return Orchestrator(deployer, builder, reporter, max_workers=deployment['max_workers'])


def analyze_command(orchestrator, reporter, stack_ids):
    """Print what a deploy would do without building or deploying anything."""
    result = orchestrator.analyze(stack_ids)
    reporter.phase("ANALYSIS")
    for target in result.deploy_targets:
        cookbook = target.cookbook
        if cookbook is None:
            cookbook_info = "no custom cookbooks"
        elif cookbook in result.cookbooks:
            cookbook_info = f"cookbook {cookbook.name} needs publishing"
        else:
            cookbook_info = f"cookbook {cookbook.artifact_key} up to date"
        reporter.info(f"{target.stack.name}: {len(target.apps)} apps, {cookbook_info}")
    reporter.info(f"\nCookbooks to build: {[c.name for c in result.cookbooks] or 'none'}")
    return 0


def deploy_command(orchestrator, stack_ids):
    report = orchestrator.deploy(stack_ids)
    return 0 if report.succeeded else 1


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        prog='opsdeploy',
        description='OpsWorks cookbook and app deployment orchestrator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Build changed cookbooks and deploy every app on two stacks
  opsdeploy deploy 2f18b4cb-4de5-4429-a149-ff7da9f0d8ee 5c5d8a1e-3c2e-4bd7-9a7f-4a3e6f0b1d22

  # Show which cookbooks are stale without deploying
  opsdeploy analyze 2f18b4cb-4de5-4429-a149-ff7da9f0d8ee

  # Local mode (artifact store on disk)
  DEPLOYMENT_ENV=local opsdeploy deploy <stack-id>
        """
    )
    parser.add_argument('command', choices=['deploy', 'analyze'], help='Command to run')
    parser.add_argument('stack_ids', nargs='+', metavar='STACK_ID', help='OpsWorks stack id')
    parser.add_argument('--config', help='Configuration file (default: config/deploy-config.yaml)')
    parser.add_argument('--max-workers', type=int, help='Maximum stacks deployed concurrently')
    parser.add_argument('--poll-interval', type=float, help='Seconds between deployment status checks')
    parser.add_argument('--poll-timeout', type=float, help='Give up on a deployment after this many seconds')
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point - parse command line and run. Returns the exit code."""
    args = parse_arguments(argv)
    reporter = Reporter()

    try:
        config = validate_config(apply_overrides(load_config(args.config), args))
        orchestrator = build_orchestrator(config, reporter)
        if args.command == 'analyze':
            return analyze_command(orchestrator, reporter, args.stack_ids)
        return deploy_command(orchestrator, args.stack_ids)
    except (OpsDeployError, BotoCoreError, ClientError) as e:
        reporter.error(str(e))
        return 1


if __name__ == '__main__':
    sys.exit(main())
