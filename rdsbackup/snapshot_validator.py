import logging
import time
import botocore.exceptions

from .exceptions import CopyTimeout, SnapshotVanished
from .utils.common import list_snapshots
from .utils.global_vars import poll_interval


def wait_for_copy(client, region, snapshot_id, interval=poll_interval, max_wait=None, sleep=time.sleep,
                  clock=time.monotonic):
    """
    Block until the snapshot copy leaves the ``creating`` status.

    :param client: RDS client of the destination region
    :param region: The destination region, used for logging
    :param snapshot_id: Identifier of the copy
    :param interval: Seconds between polls
    :param max_wait: Give up with CopyTimeout after this many seconds. None or 0 waits forever.
    :return: The final status of the snapshot
    """
    logging.info(f"{region}: Waiting for copy {snapshot_id}...")
    started = clock()
    while True:
        try:
            snapshots = list_snapshots(client, snapshot_id=snapshot_id)
        except botocore.exceptions.ClientError as e:
            if e.response['Error']['Code'] == 'DBSnapshotNotFound':
                raise SnapshotVanished(f"New snapshot {snapshot_id} is missing") from e
            raise
        if len(snapshots) != 1:
            raise SnapshotVanished(f"Expected one snapshot named {snapshot_id}, found {len(snapshots)}")

        snapshot = snapshots[0]
        status = snapshot['Status']
        if status != 'creating':
            break
        if max_wait and clock() - started >= max_wait:
            raise CopyTimeout(f"Snapshot {snapshot_id} still {status} after {max_wait} seconds")
        logging.info(f"{region}: Waiting {status} ({snapshot.get('PercentProgress', 0)}% complete)")
        sleep(interval)

    if status != 'available':
        logging.warning(f"{region}: Snapshot copy {snapshot_id} finished with status: {status}")
    else:
        logging.info(f"{region}: Snapshot {snapshot_id} is available")
    return status
