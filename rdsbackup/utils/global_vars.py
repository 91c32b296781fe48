import os
from datetime import datetime, timezone
from botocore.config import Config

connection_max_attempts = 10

log_level = os.getenv('LOG_LEVEL', 'INFO')
env = os.getenv('ENVIRONMENT', '')
application = os.getenv('APPLICATION', 'rdsbackup')
dry_run = os.getenv('DRY_RUN', 'False').lower() == 'true'

default_source_region = 'us-east-1'
default_dest_region = 'us-west-1'
access_key_var = 'AWS_ACCESS_KEY_ID'
secret_key_var = 'AWS_SECRET_ACCESS_KEY'

poll_interval = 10

# Tag vocabulary written on every copy.
managed_by_key = 'managedby'
managed_by_value = 'rdsbackup'
source_key = 'source'
source_id_key = 'sourceid'
source_arn_key = 'sourcearn'
time_key = 'time'
timestamp_key = 'timestamp'


def client_config(region):
    return Config(
        region_name=region,
        retries={
            'max_attempts': connection_max_attempts,
            'mode': 'adaptive'
        }
    )


def error_message(e, account, region, message):
    """
    Build the alert payload for a failure.

    :param e: The exception. botocore ``ClientError`` responses contribute their error code and message.
    :param account: AWS account id, if it was resolved before the failure.
    :param region: The region the failure concerns.
    :param message: A short description of what failed.
    """
    response = getattr(e, 'response', None) or {}
    error = response.get('Error', {})
    e_message = {
        "Application": application,
        "Error Code": error.get('Code', type(e).__name__),
        "Error Message": message,
        "Account": account or 'unknown',
        "Environment": env,
        "Region": region,
        "Issue": error.get('Message', str(e)),
        "Time": datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')
    }

    return e_message
