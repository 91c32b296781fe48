import logging
import re
import botocore.exceptions
from datetime import datetime

from .exceptions import CopyInitiationError
from .utils.common import snapshots_with_tags, is_copy_of, handle_error
from .utils.global_vars import (managed_by_key, managed_by_value, source_key, source_id_key, source_arn_key,
                                time_key, timestamp_key)


def is_snapshot_copied(client, ctx, source_arn):
    """
    Check whether ``source_arn`` already has a copy made by rdsbackup in the destination region.

    A snapshot counts as a copy only if it carries both the ``managedby`` marker and a ``sourcearn``
    tag equal to ``source_arn``. Snapshots whose tags cannot be read are skipped.

    :param client: RDS client of the destination region
    :param ctx: The RunContext
    :param source_arn: ARN of the source snapshot selected for this run
    :return: True if a copy exists
    """
    try:
        for snapshot, tags in snapshots_with_tags(client, ctx.dest_region, ctx.account_id, ctx.instance_id):
            if is_copy_of(tags, source_arn):
                logging.info(f"{ctx.dest_region}: Snapshot {snapshot['DBSnapshotIdentifier']} is a copy of {source_arn}")
                return True
    except botocore.exceptions.ClientError as e:
        logging.warning(f"{ctx.dest_region}: Could not list existing snapshots for {ctx.instance_id}: "
                        f"{e.response['Error']['Message']}")
    return False


def copy_identifier(instance_id, now):
    """
    Name of the destination snapshot, e.g. ``mydb-2024-05-01at13-45UTC``.
    """
    zone = re.sub(r'[^A-Za-z0-9]', '', now.strftime('%Z'))
    return f"{instance_id}-{now.strftime('%Y-%m-%dat%H-%M')}{zone}"


def copy_tags(ctx, source_arn, now):
    return [
        {'Key': time_key, 'Value': now.strftime('%Y-%m-%d %H:%M:%S %z')},
        {'Key': timestamp_key, 'Value': str(int(now.timestamp()))},
        {'Key': source_key, 'Value': ctx.source_region},
        {'Key': source_id_key, 'Value': ctx.instance_id},
        {'Key': source_arn_key, 'Value': source_arn},
        {'Key': managed_by_key, 'Value': managed_by_value},
    ]


def copy_snapshot_to_region(client, ctx, source_arn, now=None):
    """
    Start copying the source snapshot into the destination region.

    The copy is tagged at creation time, so it is recognisable by later runs even if this one dies
    before the copy finishes.

    :param client: RDS client of the destination region
    :param ctx: The RunContext
    :param source_arn: ARN of the source snapshot
    :param now: Creation time of the copy, defaults to the current local time
    :return: The identifier of the new snapshot
    """
    now = now or datetime.now().astimezone()
    target_snapshot_identifier = copy_identifier(ctx.instance_id, now)
    params = {
        'SourceDBSnapshotIdentifier': source_arn,
        'TargetDBSnapshotIdentifier': target_snapshot_identifier,
        'SourceRegion': ctx.source_region,
        'Tags': copy_tags(ctx, source_arn, now)
    }
    if ctx.kms_key_id:
        params['KmsKeyId'] = ctx.kms_key_id

    logging.info(f"{ctx.dest_region}: Copying {source_arn} to {target_snapshot_identifier}")
    if ctx.dry_run:
        logging.info(f"DRY RUN: Snapshot {source_arn} should have been copied to {target_snapshot_identifier}")
        return target_snapshot_identifier

    try:
        copy_response = client.copy_db_snapshot(**params)
    except botocore.exceptions.ClientError as err:
        handle_error(err, ctx.dest_region, f"Failed to copy snapshot {source_arn}")
        raise CopyInitiationError(f"Could not issue copy command for {source_arn}: "
                                  f"{err.response['Error']['Message']}") from err

    status = copy_response['DBSnapshot']['Status']
    if status != 'creating':
        raise CopyInitiationError(f"Error creating snapshot {target_snapshot_identifier} - unexpected status: {status}")
    return target_snapshot_identifier
