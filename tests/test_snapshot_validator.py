from unittest.mock import MagicMock

import botocore.exceptions
import pytest

from conftest import client_error, fake_rds, make_snapshot
from rdsbackup.exceptions import CopyTimeout, SnapshotVanished
from rdsbackup.snapshot_validator import wait_for_copy


def polls(*statuses):
    """One paginate() result per poll, each holding the copy in the given status."""
    return [[{'DBSnapshots': [make_snapshot('mydb-copy', status=status, progress=progress)]}]
            for status, progress in statuses]


def test_waits_until_available():
    client = fake_rds()
    client.get_paginator.return_value.paginate.side_effect = polls(('creating', 0), ('creating', 50),
                                                                    ('available', 100))
    sleep = MagicMock()

    assert wait_for_copy(client, 'us-west-1', 'mydb-copy', sleep=sleep) == 'available'
    assert sleep.call_count == 2
    sleep.assert_called_with(10)
    client.get_paginator.return_value.paginate.assert_called_with(DBSnapshotIdentifier='mydb-copy')


def test_stops_on_any_other_status():
    client = fake_rds()
    client.get_paginator.return_value.paginate.side_effect = polls(('creating', 99), ('failed', 10))
    sleep = MagicMock()

    assert wait_for_copy(client, 'us-west-1', 'mydb-copy', sleep=sleep) == 'failed'
    assert sleep.call_count == 1


def test_missing_copy_raises():
    client = fake_rds([])
    with pytest.raises(SnapshotVanished):
        wait_for_copy(client, 'us-west-1', 'mydb-copy', sleep=MagicMock())


def test_ambiguous_copy_raises():
    client = fake_rds([make_snapshot('mydb-copy', status='creating'), make_snapshot('mydb-copy', status='creating')])
    with pytest.raises(SnapshotVanished):
        wait_for_copy(client, 'us-west-1', 'mydb-copy', sleep=MagicMock())


def test_not_found_error_raises_vanished():
    client = fake_rds()
    client.get_paginator.return_value.paginate.side_effect = client_error('DBSnapshotNotFound')
    with pytest.raises(SnapshotVanished):
        wait_for_copy(client, 'us-west-1', 'mydb-copy', sleep=MagicMock())


def test_other_errors_propagate():
    client = fake_rds()
    client.get_paginator.return_value.paginate.side_effect = client_error('AccessDenied')
    with pytest.raises(botocore.exceptions.ClientError) as excinfo:
        wait_for_copy(client, 'us-west-1', 'mydb-copy', sleep=MagicMock())
    assert excinfo.value.response['Error']['Code'] == 'AccessDenied'


def test_max_wait_raises_timeout():
    client = fake_rds([make_snapshot('mydb-copy', status='creating', progress=5)])
    clock = MagicMock(side_effect=[0, 5, 11])
    sleep = MagicMock()
    with pytest.raises(CopyTimeout):
        wait_for_copy(client, 'us-west-1', 'mydb-copy', interval=5, max_wait=10, sleep=sleep, clock=clock)
    assert sleep.call_count == 1
