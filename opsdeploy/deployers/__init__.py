#!/usr/bin/env python3
"""
Deployer factory and package exports.
"""

import boto3

from .base import BaseDeployer
from .opsworks import OpsWorksDeployer
from ..dispatcher import DeploymentDispatcher
from ..fingerprint import FingerprintStore
from ..publisher import ArtifactPublisher
from ..storage import get_storage_backend


def create_opsworks_client(aws_config):
    session = boto3.session.Session(
        profile_name=aws_config.get('profile'),
        region_name=aws_config.get('region', 'us-east-1')
    )
    return session.client('opsworks')


def get_deployer(config, reporter, client=None, storage=None):
    """
    Factory function to create the OpsWorks deployer with its collaborators.

    Args:
        config: Validated configuration dict
        reporter: Reporter shared by every component
        client: OpsWorks client (optional, created from config['aws'] if None)
        storage: Artifact store (optional, chosen by deployment.storage_backend if None)

    Returns:
        OpsWorksDeployer instance
    """
    deployment = config['deployment']
    client = client if client is not None else create_opsworks_client(config.get('aws', {}))
    storage = storage if storage is not None else get_storage_backend(config)

    dispatcher = DeploymentDispatcher(
        client, reporter,
        poll_interval=deployment['poll_interval'],
        poll_timeout=deployment.get('poll_timeout')
    )
    return OpsWorksDeployer(
        client, reporter,
        fingerprints=FingerprintStore(storage, reporter),
        publisher=ArtifactPublisher(storage, reporter),
        dispatcher=dispatcher,
        cookbook_root=deployment['cookbook_root'],
        ignore=[deployment['build_dir']]
    )


# Package exports
__all__ = ['BaseDeployer', 'OpsWorksDeployer', 'create_opsworks_client', 'get_deployer']
