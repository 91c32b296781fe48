"""rdsbackup: easy cross-region AWS RDS backups.

Copies the newest snapshot of a DB instance to another region, tags the copy so
later runs can recognise it and optionally purges the oldest copies.

AWS authentication: either use the -K and -S options, or set the
AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY environment variables.
"""
import argparse
import logging
import os
import sys
import botocore.exceptions

from . import __version__
from .exceptions import ConfigurationError, RDSBackupError
from .region_manager import is_snapshot_copied, copy_snapshot_to_region
from .retention import retention_policy
from .run_context import RunContext
from .snapshot_locator import get_account_id, find_source_snapshot_arn
from .snapshot_validator import wait_for_copy
from .utils import global_vars
from .utils.aws_utils import AWSUtils
from .utils.common import handle_error
from .utils.common_slack import send_slack_alert
from .utils.logger import get_logger


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog='rdsbackup', description=__doc__,
                                     formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument('db_instance_id', help='Identifier of the source RDS instance.')
    parser.add_argument('-s', '--source', default=global_vars.default_source_region, metavar='REGION',
                        help='AWS region of source RDS instance (default: %(default)s).')
    parser.add_argument('-d', '--dest', default=global_vars.default_dest_region, metavar='REGION',
                        help='AWS region to store backup RDS snapshot (default: %(default)s).')
    parser.add_argument('-K', '--awskey', metavar='KEYID',
                        help=f'AWS key ID (or use the {global_vars.access_key_var} environment variable).')
    parser.add_argument('-S', '--awssecret', metavar='SECRET',
                        help=f'AWS secret key (or use the {global_vars.secret_key_var} environment variable).')
    parser.add_argument('-p', '--purge', type=int, default=0, metavar='COUNT',
                        help='Purge oldest snapshots from dest region if more than COUNT exist. 0 disables purging.')
    parser.add_argument('-q', '--quiet', action='store_true',
                        help='Silence all output except warnings and errors.')
    parser.add_argument('--kms-key', default=None,
                        help='KMS key in the dest region used to encrypt the copy. Required for encrypted snapshots.')
    parser.add_argument('--max-wait', type=int, default=0, metavar='SECONDS',
                        help='Fail if the copy takes longer than this. 0 waits forever.')
    parser.add_argument('-n', '--dry-run', action='store_true', default=global_vars.dry_run,
                        help='Only log the copy and deletions that would happen.')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser.parse_args(argv)


def resolve_credentials(args, environ=None):
    """
    Pick the AWS credentials from the command line, falling back to the environment.

    :raises ConfigurationError: If the key id or the secret is missing from both.
    """
    environ = os.environ if environ is None else environ
    key = args.awskey or environ.get(global_vars.access_key_var, '')
    secret = args.awssecret or environ.get(global_vars.secret_key_var, '')
    if not key or not secret:
        raise ConfigurationError(f"Must use -K and -S options or set {global_vars.access_key_var} and "
                                 f"{global_vars.secret_key_var} environment variables.")
    return key, secret


def validate(args):
    if args.purge < 0:
        raise ConfigurationError(f"Purge count must not be negative: {args.purge}")
    if args.max_wait < 0:
        raise ConfigurationError(f"Max wait must not be negative: {args.max_wait}")


def run(ctx, source_client, dest_client):
    """
    Copy the newest source snapshot to the destination region and apply retention.

    :param ctx: The RunContext
    :param source_client: RDS client of the source region
    :param dest_client: RDS client of the destination region
    :return: Identifier of the new copy, or None if the source snapshot had already been copied
    """
    source_arn = find_source_snapshot_arn(source_client, ctx)
    if is_snapshot_copied(dest_client, ctx, source_arn):
        logging.info("Source snapshot has already been copied to destination region.")
        return None

    copy_id = copy_snapshot_to_region(dest_client, ctx, source_arn)
    if not ctx.dry_run:
        wait_for_copy(dest_client, ctx.dest_region, copy_id, interval=ctx.poll_interval, max_wait=ctx.max_wait)
    retention_policy(dest_client, ctx)
    return copy_id


def main(argv=None):
    args = parse_args(argv)
    get_logger(global_vars.log_level, quiet=args.quiet)
    account_id = None
    try:
        validate(args)
        key, secret = resolve_credentials(args)
        aws = AWSUtils(key, secret)
        account_id = get_account_id(aws.sts(args.source))
        ctx = RunContext(
            instance_id=args.db_instance_id,
            source_region=args.source,
            dest_region=args.dest,
            account_id=account_id,
            purge=args.purge,
            kms_key_id=args.kms_key,
            max_wait=args.max_wait or None,
            dry_run=args.dry_run
        )
        run(ctx, aws.rds(ctx.source_region), aws.rds(ctx.dest_region))
    except botocore.exceptions.ClientError as e:
        handle_error(e, args.source, f"AWS request failed for {args.db_instance_id}")
        send_slack_alert(global_vars.error_message(e, account_id, args.source,
                                                   f"rdsbackup failed for {args.db_instance_id}"))
        sys.exit(1)
    except (RDSBackupError, botocore.exceptions.BotoCoreError) as e:
        logging.error(f"{args.source}: {e}")
        send_slack_alert(global_vars.error_message(e, account_id, args.source,
                                                   f"rdsbackup failed for {args.db_instance_id}"))
        sys.exit(1)
    logging.info("All done!")
    sys.exit(0)


if __name__ == "__main__":
    main()
