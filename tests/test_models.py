"""Value types: descriptor identity, staleness and status mapping."""

import pytest

from opsdeploy.models import (
    App, CookbookDescriptor, DeploymentCommand, DeploymentStatus, DeployReport,
    AnalysisResult, DeployTarget, Stack, TargetOutcome
)


def descriptor(**overrides):
    fields = dict(
        bucket='chef-app', artifact_key='chef-app-dev.zip', fingerprint_key='chef-app-dev_SHA.txt',
        name='chef-app', path='./chef', local_fingerprint='abc', remote_fingerprint=''
    )
    fields.update(overrides)
    return CookbookDescriptor(**fields)


def test_descriptor_identity_is_bucket_and_key():
    a = descriptor(local_fingerprint='abc', path='./one')
    b = descriptor(local_fingerprint='def', path='./two', name=None)

    assert a == b
    assert len({a, b}) == 1
    assert a != descriptor(artifact_key='chef-app-prod.zip')
    assert a != descriptor(bucket='other-bucket')


@pytest.mark.parametrize('local, remote, stale', [
    ('abc', '', True),
    ('abc', 'def', True),
    ('abc', 'abc', False),
    ('', '', False),
    (None, 'abc', False),
])
def test_descriptor_staleness(local, remote, stale):
    assert descriptor(local_fingerprint=local, remote_fingerprint=remote).stale is stale


def test_descriptor_without_local_match_is_not_buildable():
    unmatched = CookbookDescriptor(bucket='b', artifact_key='k.zip', fingerprint_key='k_SHA.txt')

    assert not unmatched.buildable
    assert not unmatched.stale
    assert descriptor().buildable


@pytest.mark.parametrize('value, expected', [
    ('pending', DeploymentStatus.PENDING),
    ('running', DeploymentStatus.RUNNING),
    ('successful', DeploymentStatus.SUCCESSFUL),
    ('failed', DeploymentStatus.FAILED),
    ('Successful', DeploymentStatus.SUCCESSFUL),
    (None, DeploymentStatus.FAILED),
    ('exploded', DeploymentStatus.FAILED),
])
def test_status_from_remote(value, expected):
    assert DeploymentStatus.from_remote(value) is expected


def test_only_successful_and_failed_are_terminal():
    assert [s for s in DeploymentStatus if s.terminal] == [DeploymentStatus.SUCCESSFUL, DeploymentStatus.FAILED]


def test_command_requests():
    stack = Stack(stack_id='s-1', name='web')
    app = App(app_id='a-1', name='site', stack_id='s-1')

    assert DeploymentCommand.refresh_cookbooks(stack).to_request() == {
        'StackId': 's-1', 'Command': {'Name': 'update_custom_cookbooks'}
    }
    assert DeploymentCommand.setup(stack).to_request() == {'StackId': 's-1', 'Command': {'Name': 'setup'}}
    assert DeploymentCommand.deploy_app(stack, app).to_request() == {
        'StackId': 's-1', 'Command': {'Name': 'deploy'}, 'AppId': 'a-1'
    }


def test_stack_from_api_reads_cookbook_source():
    stack = Stack.from_api({
        'StackId': 's-1', 'Name': 'web',
        'CustomCookbooksSource': {'Type': 's3', 'Url': 'https://s3.amazonaws.com/chef-app/chef-app-dev.zip'}
    })

    assert stack.cookbook_source.type == 's3'
    assert stack.cookbook_source.url.endswith('chef-app-dev.zip')
    assert Stack.from_api({'StackId': 's-2', 'Name': 'db'}).cookbook_source is None


def test_report_success_is_and_of_outcomes():
    target = DeployTarget(stack=Stack(stack_id='s-1', name='web'))
    ok = TargetOutcome(target=target)
    failed = TargetOutcome(target=target, error=RuntimeError('boom'))

    assert DeployReport(analysis=AnalysisResult()).succeeded
    assert DeployReport(analysis=AnalysisResult(), outcomes=(ok, ok)).succeeded
    report = DeployReport(analysis=AnalysisResult(), outcomes=(ok, failed))
    assert not report.succeeded
    assert report.errors == [failed.error]
