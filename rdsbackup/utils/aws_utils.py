import boto3

from .global_vars import client_config


class AWSUtils:
    """Creates per-region clients from one set of static credentials."""

    def __init__(self, access_key, secret_key, session_token=None):
        self.session = boto3.session.Session(aws_access_key_id=access_key,
                                             aws_secret_access_key=secret_key,
                                             aws_session_token=session_token)

    def rds(self, region):
        return self.session.client('rds', region_name=region, config=client_config(region))

    def sts(self, region):
        return self.session.client('sts', region_name=region, config=client_config(region))
