"""Shared fixtures: isolated fake AWS credentials and a moto-backed EC2."""

import io
import logging

import boto3
import pytest
from moto import mock_aws
from rich.console import Console

TEST_REGION = "us-east-1"
TEST_AMI = "ami-12c6146b"


@pytest.fixture(autouse=True)
def aws_environment(monkeypatch, tmp_path):
    """Keep tests away from the developer's real AWS config."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", TEST_REGION)
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "aws-config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "aws-credentials"))
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    monkeypatch.delenv("AWS_REGION", raising=False)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def ec2_client():
    with mock_aws():
        yield boto3.client("ec2", region_name=TEST_REGION)


@pytest.fixture
def launch_instance(ec2_client):
    """Launch one instance per call (one reservation each) and return its id."""

    def _launch(name=None, instance_type="t3.micro", extra_tags=()):
        tags = list(extra_tags)
        if name is not None:
            tags.append({"Key": "Name", "Value": name})
        kwargs = {}
        if tags:
            kwargs["TagSpecifications"] = [{"ResourceType": "instance", "Tags": tags}]
        response = ec2_client.run_instances(
            ImageId=TEST_AMI,
            MinCount=1,
            MaxCount=1,
            InstanceType=instance_type,
            **kwargs,
        )
        return response["Instances"][0]["InstanceId"]

    return _launch


@pytest.fixture
def out_console():
    return Console(file=io.StringIO(), width=80)


@pytest.fixture
def err_console():
    return Console(file=io.StringIO(), width=80)
