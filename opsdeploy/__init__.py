"""
opsdeploy - deploys apps and their custom Chef cookbooks to OpsWorks stacks.

Stale cookbooks (local git revision differs from the published one) are
vendored, zipped and uploaded once, then every stack is deployed concurrently.
"""

__version__ = "0.4.0"
