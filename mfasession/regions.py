"""
Region lists used as the default bulk assume fan-out.

NOTE: AWS adds regions over time; DEFAULT_REGIONS needs a manual update
when a new region should be part of the default fan-out.
"""

from typing import List

from boto3.session import Session
from mypy_boto3_ec2.client import EC2Client

__all__ = ["DEFAULT_REGIONS", "default_regions", "discover_regions"]

DEFAULT_REGIONS = (
    "us-east-2",
    "us-east-1",
    "us-west-1",
    "us-west-2",
    "ap-south-1",
    "ap-northeast-2",
    "ap-southeast-1",
    "ap-northeast-1",
    "ca-central-1",
    "eu-central-1",
    "eu-west-1",
    "eu-west-2",
    "sa-east-1",
)


def default_regions() -> List[str]:
    """Return a fresh, mutable copy of the default region list."""
    return list(DEFAULT_REGIONS)


def discover_regions(session: Session) -> List[str]:
    """
    Return the list of AWS region names enabled for the session's account.

    Args:
        session: boto3 Session with ec2:DescribeRegions permission

    Returns:
        Region names in the order EC2 reports them
    """
    ec2_client: EC2Client = session.client("ec2")
    response = ec2_client.describe_regions()
    return [region["RegionName"] for region in response["Regions"]]
