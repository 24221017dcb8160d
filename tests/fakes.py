import itertools
import json
import threading
from pathlib import Path

from botocore.exceptions import ClientError


def client_error(code, operation='Operation', message='error'):
    return ClientError({'Error': {'Code': code, 'Message': message}}, operation)


def stack_record(stack_id, name=None, url=None, source_type='s3'):
    record = {'StackId': stack_id, 'Name': name or stack_id}
    if url is not None:
        record['CustomCookbooksSource'] = {'Type': source_type, 'Url': url}
    return record


def app_record(app_id, stack_id, name=None):
    return {'AppId': app_id, 'StackId': stack_id, 'Name': name or app_id}


class FakeOpsWorksClient:
    """
    In-memory stand-in for the boto3 OpsWorks client.

    Each deployment walks through its scripted statuses (default running ->
    successful), one per DescribeDeployments call.
    """

    def __init__(self, stacks=(), apps=None):
        self.stacks = {record['StackId']: record for record in stacks}
        self.apps = apps or {}
        self.scripts = {}
        self.rejected = set()
        self.missing_records = set()
        self.fail_describe_stacks = False
        self.fail_describe_apps = set()
        self.issued = []
        self.describe_calls = []
        self._deployments = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def script(self, stack_id, command, statuses, app_id=None):
        self.scripts[(stack_id, command, app_id)] = list(statuses)

    def describe_stacks(self, StackIds):
        if self.fail_describe_stacks:
            raise client_error('AccessDeniedException', 'DescribeStacks')
        return {'Stacks': [self.stacks[i] for i in StackIds if i in self.stacks]}

    def describe_apps(self, StackId):
        if StackId in self.fail_describe_apps:
            raise client_error('ResourceNotFoundException', 'DescribeApps')
        return {'Apps': list(self.apps.get(StackId, []))}

    def create_deployment(self, StackId, Command, AppId=None):
        with self._lock:
            self.issued.append((StackId, Command['Name'], AppId))
            if StackId in self.rejected:
                raise client_error('ValidationException', 'CreateDeployment', 'no running instances')
            deployment_id = f"dep-{next(self._ids)}"
            statuses = self.scripts.get((StackId, Command['Name'], AppId), ['running', 'successful'])
            self._deployments[deployment_id] = (list(statuses), Command['Name'])
        return {'DeploymentId': deployment_id}

    def describe_deployments(self, DeploymentIds):
        with self._lock:
            deployment_id = DeploymentIds[0]
            self.describe_calls.append(deployment_id)
            statuses, command = self._deployments[deployment_id]
            if command in self.missing_records:
                return {'Deployments': []}
            status = statuses.pop(0) if len(statuses) > 1 else statuses[0]
        return {'Deployments': [{'DeploymentId': deployment_id, 'Status': status}]}

    def commands_for(self, stack_id):
        return [(command, app_id) for sid, command, app_id in self.issued if sid == stack_id]


def make_cookbook(root, directory, name, metadata='rb'):
    path = Path(root) / directory
    path.mkdir(parents=True, exist_ok=True)
    (path / 'Berksfile').write_text('source "https://supermarket.chef.io"\n\nmetadata\n')
    if metadata == 'rb':
        (path / 'metadata.rb').write_text(f"name '{name}'\nversion '1.0.0'\ndepends 'apt'\n")
    elif metadata == 'json':
        (path / 'metadata.json').write_text(json.dumps({'name': name, 'version': '1.0.0'}))
    return path
