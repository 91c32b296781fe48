import logging
import botocore.exceptions

from .exceptions import DeletionError
from .utils.common import snapshots_with_tags, is_managed, handle_error
from .utils.global_vars import timestamp_key


def snapshot_timestamp(snapshot, tags):
    """
    Creation time of a managed snapshot in seconds since epoch.

    Falls back to the ``timestamp`` tag while RDS has not reported a creation time.
    Returns None when neither is usable.
    """
    created = snapshot.get('SnapshotCreateTime')
    if created:
        return int(created.timestamp())
    try:
        return int(tags[timestamp_key])
    except (KeyError, ValueError):
        return None


def managed_snapshots(client, ctx):
    """
    List the ``(timestamp, identifier)`` pairs of managed snapshots, oldest first.

    Ties on the timestamp are ordered by identifier.
    """
    managed = []
    for snapshot, tags in snapshots_with_tags(client, ctx.dest_region, ctx.account_id, ctx.instance_id):
        if not is_managed(tags):
            continue
        ts = snapshot_timestamp(snapshot, tags)
        if ts is None or ts <= 0:
            logging.warning(f"{ctx.dest_region}: Snapshot {snapshot['DBSnapshotIdentifier']} has no creation time, "
                            f"ignoring it")
            continue
        managed.append((ts, snapshot['DBSnapshotIdentifier']))
    return sorted(managed)


def retention_policy(client, ctx):
    """
    Apply retention policy to the managed snapshots in the destination region.

    Only the newest ``ctx.purge`` snapshots carrying the ``managedby`` marker are kept; older ones are deleted,
    oldest first. A purge count of 0 disables the policy.

    Args:
        client (boto3.client): RDS client of the destination region.
        ctx (RunContext): The run settings.

    Returns:
        list: Identifiers of the deleted snapshots.

    Raises:
        DeletionError: On the first failed deletion. Remaining deletions are not attempted.
    """
    if ctx.purge <= 0:
        return []

    logging.info(f"{ctx.dest_region}: Cleaning up old snapshots for {ctx.instance_id}...")
    snapshots = managed_snapshots(client, ctx)
    if len(snapshots) <= ctx.purge:
        logging.info(f"{ctx.dest_region}: Found {len(snapshots)} snapshots. Purge flag is {ctx.purge}, "
                     f"so nothing will be purged.")
        return []

    excess = len(snapshots) - ctx.purge
    logging.info(f"{ctx.dest_region}: Found {len(snapshots)} snapshots. Purge flag is {ctx.purge}, "
                 f"so the oldest {excess} snapshots will be purged.")
    deleted = []
    for _, snapshot_id in snapshots[:excess]:
        logging.info(f"{ctx.dest_region}: Purging snapshot {snapshot_id}.")
        if ctx.dry_run:
            logging.info(f"DRY RUN: Snapshot {snapshot_id} should have been deleted")
            deleted.append(snapshot_id)
            continue
        try:
            response = client.delete_db_snapshot(DBSnapshotIdentifier=snapshot_id)
        except botocore.exceptions.ClientError as err:
            handle_error(err, ctx.dest_region, f"Failed to delete snapshot {snapshot_id}")
            raise DeletionError(f"Could not delete snapshot {snapshot_id}: "
                                f"{err.response['Error']['Message']}") from err
        status = response['DBSnapshot']['Status']
        if status != 'deleted':
            logging.warning(f"{ctx.dest_region}: Snapshot was not deleted successfully: {snapshot_id} ({status})")
        deleted.append(snapshot_id)

    logging.info(f"{ctx.dest_region}: Done purging snapshots.")
    return deleted
