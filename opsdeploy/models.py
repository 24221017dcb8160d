#!/usr/bin/env python3
"""
Value types shared by the analyzer, builder, dispatcher and orchestrator.
All of them are frozen: analysis output is never mutated once produced.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


@dataclass(frozen=True)
class CookbookSource:
    type: str
    url: str


@dataclass(frozen=True)
class Stack:
    stack_id: str
    name: str
    cookbook_source: Optional[CookbookSource] = None

    @classmethod
    def from_api(cls, record):
        """Build a Stack from an OpsWorks DescribeStacks record."""
        source = None
        raw_source = record.get('CustomCookbooksSource')
        if raw_source:
            source = CookbookSource(type=raw_source.get('Type', ''), url=raw_source.get('Url', ''))
        return cls(stack_id=record['StackId'], name=record.get('Name', record['StackId']), cookbook_source=source)


@dataclass(frozen=True)
class App:
    app_id: str
    name: str
    stack_id: str

    @classmethod
    def from_api(cls, record):
        return cls(app_id=record['AppId'], name=record.get('Name', record['AppId']), stack_id=record['StackId'])


@dataclass(frozen=True)
class CookbookDescriptor:
    """
    A published cookbook artifact and the local cookbook that produces it.

    Identity is (bucket, artifact_key): every other field is excluded from
    equality and hashing, so two stacks pointing at the same artifact collapse
    to one descriptor.
    """

    bucket: str
    artifact_key: str
    fingerprint_key: str = field(compare=False)
    name: Optional[str] = field(default=None, compare=False)
    path: Optional[str] = field(default=None, compare=False)
    local_fingerprint: Optional[str] = field(default=None, compare=False)
    remote_fingerprint: str = field(default='', compare=False)

    @property
    def buildable(self):
        return bool(self.name) and bool(self.path)

    @property
    def stale(self):
        return bool(self.local_fingerprint) and self.local_fingerprint != self.remote_fingerprint


@dataclass(frozen=True)
class DeployTarget:
    stack: Stack
    apps: Tuple[App, ...] = ()
    cookbook: Optional[CookbookDescriptor] = None


@dataclass(frozen=True)
class StackAnalysis:
    apps: Tuple[App, ...]
    cookbook: Optional[CookbookDescriptor]


@dataclass(frozen=True)
class AnalysisResult:
    cookbooks: Tuple[CookbookDescriptor, ...] = ()
    deploy_targets: Tuple[DeployTarget, ...] = ()


class DeploymentStatus(str, Enum):
    PENDING = 'pending'
    RUNNING = 'running'
    SUCCESSFUL = 'successful'
    FAILED = 'failed'

    @property
    def terminal(self):
        return self in (DeploymentStatus.SUCCESSFUL, DeploymentStatus.FAILED)

    @classmethod
    def from_remote(cls, value):
        """Map a DescribeDeployments status; a missing or unknown status is a failure."""
        if value is None:
            return cls.FAILED
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.FAILED


REFRESH_COOKBOOKS = 'update_custom_cookbooks'
SETUP = 'setup'
DEPLOY = 'deploy'


@dataclass(frozen=True)
class DeploymentCommand:
    name: str
    stack: Stack
    app: Optional[App] = None

    @classmethod
    def refresh_cookbooks(cls, stack):
        return cls(REFRESH_COOKBOOKS, stack)

    @classmethod
    def setup(cls, stack):
        return cls(SETUP, stack)

    @classmethod
    def deploy_app(cls, stack, app):
        return cls(DEPLOY, stack, app)

    def to_request(self):
        """Keyword arguments for OpsWorks CreateDeployment."""
        request = {'StackId': self.stack.stack_id, 'Command': {'Name': self.name}}
        if self.app is not None:
            request['AppId'] = self.app.app_id
        return request

    def describe(self):
        if self.app is not None:
            return f"[stack=\"{self.stack.name}\"] [app=\"{self.app.name}\"]"
        return f"[stack=\"{self.stack.name}\"]"


@dataclass(frozen=True)
class TargetOutcome:
    target: DeployTarget
    error: Optional[BaseException] = None

    @property
    def succeeded(self):
        return self.error is None


@dataclass(frozen=True)
class DeployReport:
    analysis: AnalysisResult
    outcomes: Tuple[TargetOutcome, ...] = ()
    published: Tuple[CookbookDescriptor, ...] = ()

    @property
    def succeeded(self):
        return all(outcome.succeeded for outcome in self.outcomes)

    @property
    def errors(self):
        return [outcome.error for outcome in self.outcomes if outcome.error is not None]
