"""Shared fixtures: fake RDS clients backed by MagicMock."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import botocore.exceptions
import pytest

from rdsbackup.run_context import RunContext

ACCOUNT = '123456789012'


def client_error(code, message='boom', operation='DescribeDBSnapshots'):
    return botocore.exceptions.ClientError({'Error': {'Code': code, 'Message': message}}, operation)


def make_snapshot(snapshot_id, created=None, status='available', instance_id='mydb', region='us-west-1',
                  progress=100):
    snapshot = {
        'DBSnapshotIdentifier': snapshot_id,
        'DBInstanceIdentifier': instance_id,
        'Status': status,
        'PercentProgress': progress,
        'DBSnapshotArn': f'arn:aws:rds:{region}:{ACCOUNT}:snapshot:{snapshot_id}',
    }
    if created is not None:
        snapshot['SnapshotCreateTime'] = datetime.fromtimestamp(created, tz=timezone.utc)
    return snapshot


def managed_tags(source_arn='arn:aws:rds:us-east-1:123456789012:snapshot:rds:mydb-old'):
    return [{'Key': 'managedby', 'Value': 'rdsbackup'}, {'Key': 'sourcearn', 'Value': source_arn}]


def fake_rds(snapshots=(), tags=None, pages=None):
    """
    A MagicMock RDS client.

    ``snapshots`` is returned by the ``describe_db_snapshots`` paginator as one page (or ``pages``
    as several). ``tags`` maps snapshot ARN to a tag list, or to an exception to raise.
    """
    client = MagicMock()
    tags = tags or {}
    client.get_paginator.return_value.paginate.return_value = (
        pages if pages is not None else [{'DBSnapshots': list(snapshots)}])

    def list_tags_for_resource(ResourceName):
        value = tags.get(ResourceName, [])
        if isinstance(value, Exception):
            raise value
        return {'TagList': value}

    client.list_tags_for_resource.side_effect = list_tags_for_resource
    client.delete_db_snapshot.return_value = {'DBSnapshot': {'Status': 'deleted'}}
    return client


@pytest.fixture
def ctx():
    return RunContext(instance_id='mydb', source_region='us-east-1', dest_region='us-west-1',
                      account_id=ACCOUNT, purge=0)
