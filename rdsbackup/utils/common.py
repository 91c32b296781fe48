import logging
import botocore.exceptions

from .global_vars import managed_by_key, managed_by_value, source_arn_key


def snapshot_arn(region, account_id, snapshot_id):
    """
    Fully qualified ARN of a DB snapshot.
    """
    return f"arn:aws:rds:{region}:{account_id}:snapshot:{snapshot_id}"


def handle_error(err, region, failure_message):
    """
    Log a botocore ClientError together with the code and message AWS returned.

    Args:
        err (botocore.exceptions.ClientError): The error object containing details of the error.
        region (str): The AWS region where the error occurred.
        failure_message (str): A custom message describing the failure.
    """
    logging.error(f"{region}: {failure_message}.")
    logging.error(
        f"{region}: Here's why: {err.response['Error']['Code']}: {err.response['Error']['Message']}")


def list_snapshots(client, instance_id=None, snapshot_id=None):
    """
    List the DB snapshots of an instance, or the snapshot with the given identifier.

    Args:
        client (boto3.client): The RDS client of the region to search.
        instance_id (str, optional): Only snapshots of this DB instance.
        snapshot_id (str, optional): Only the snapshot with this identifier.

    Returns:
        list: The ``DBSnapshot`` dicts across all pages.
    """
    params = {}
    if instance_id:
        params['DBInstanceIdentifier'] = instance_id
    if snapshot_id:
        params['DBSnapshotIdentifier'] = snapshot_id
    paginator = client.get_paginator('describe_db_snapshots')
    return [snapshot for page in paginator.paginate(**params) for snapshot in page['DBSnapshots']]


def tags_to_dict(tag_list):
    return {tag['Key']: tag['Value'] for tag in tag_list}


def get_snapshot_tags(client, snapshot, region, account_id):
    """
    Retrieve the tags of a snapshot as a dict.

    Uses the ARN reported by RDS and falls back to composing it from region and account.
    """
    arn = snapshot.get('DBSnapshotArn') or snapshot_arn(region, account_id, snapshot['DBSnapshotIdentifier'])
    return tags_to_dict(client.list_tags_for_resource(ResourceName=arn)['TagList'])


def snapshots_with_tags(client, region, account_id, instance_id):
    """
    Yield ``(snapshot, tags)`` for every snapshot of the instance in the region.

    Snapshots whose tags cannot be read are skipped with a warning.
    """
    for snapshot in list_snapshots(client, instance_id=instance_id):
        snapshot_id = snapshot['DBSnapshotIdentifier']
        try:
            tags = get_snapshot_tags(client, snapshot, region, account_id)
        except botocore.exceptions.ClientError as e:
            logging.warning(f"{region}: Could not retrieve tags for snapshot {snapshot_id}: "
                            f"{e.response['Error']['Message']}")
            continue
        logging.debug(f"{region}: {snapshot_id} tags: {tags}")
        yield snapshot, tags


def is_managed(tags):
    return tags.get(managed_by_key) == managed_by_value


def is_copy_of(tags, source_arn):
    """
    True if the tags mark a snapshot created by this tool from exactly ``source_arn``.
    """
    return is_managed(tags) and tags.get(source_arn_key) == source_arn
