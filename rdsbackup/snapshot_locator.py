import logging

from .exceptions import AccountResolutionError, SnapshotNotFound
from .utils.common import list_snapshots, snapshot_arn


def get_account_id(sts_client):
    """
    Resolve the AWS account id from the ARN of the calling identity.

    The ARN must have exactly six colon separated fields; the fifth one is the account id.
    """
    arn = sts_client.get_caller_identity()['Arn']
    parts = arn.split(':')
    if len(parts) != 6:
        raise AccountResolutionError(f"Error parsing caller ARN: {arn}")
    return parts[4]


def find_latest_snapshot(client, region, instance_id):
    """
    Find the most recently created snapshot of a DB instance.

    Snapshots with equal creation times are ordered by identifier and the greatest one wins.

    :param client: RDS client of the source region
    :param region: The source region, used for logging
    :param instance_id: Source DB instance identifier
    :return: The ``DBSnapshot`` dict of the newest snapshot
    """
    logging.info(f"{region}: Searching for snapshots for: {instance_id}")
    snapshots = list_snapshots(client, instance_id=instance_id)
    if len(snapshots) < 1:
        raise SnapshotNotFound(f"No snapshots found for {instance_id} in {region}")
    logging.info(f"{region}: Found {len(snapshots)} snapshots for: {instance_id}")

    newest = None
    for snapshot in snapshots:
        if not snapshot.get('SnapshotCreateTime') or not snapshot.get('DBSnapshotIdentifier'):
            logging.debug(f"{region}: Skipping snapshot without creation time: {snapshot.get('DBSnapshotIdentifier')}")
            continue
        key = (snapshot['SnapshotCreateTime'], snapshot['DBSnapshotIdentifier'])
        if newest is None or key > (newest['SnapshotCreateTime'], newest['DBSnapshotIdentifier']):
            newest = snapshot

    if newest is None:
        raise SnapshotNotFound(f"No usable snapshot found for {instance_id} in {region}")
    logging.info(f"{region}: Found latest snapshot: {newest['DBSnapshotIdentifier']}: {newest['SnapshotCreateTime']}")
    return newest


def find_source_snapshot_arn(client, ctx):
    """
    Return the fully qualified ARN of the newest source snapshot for the run.
    """
    latest = find_latest_snapshot(client, ctx.source_region, ctx.instance_id)
    return snapshot_arn(ctx.source_region, ctx.account_id, latest['DBSnapshotIdentifier'])
