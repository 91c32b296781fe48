from pythonjsonlogger import jsonlogger
import logging
from datetime import datetime, timezone


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        super(CustomJsonFormatter, self).add_fields(log_record, record, message_dict)
        log_record['timestamp'] = datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')
        log_record['level'] = record.levelname


def get_logger(log_level=logging.INFO, quiet=False):
    """
    Configure the root logger with a JSON formatter.

    With ``quiet`` only warnings and errors are emitted, whatever ``log_level`` says.
    """
    logger = logging.getLogger()
    if not logger.handlers:
        log_handler = logging.StreamHandler()
        format_str = '%(level)s %(timestamp)s  %(message)s'
        formatter = CustomJsonFormatter(format_str)
        log_handler.setFormatter(formatter)
        logger.addHandler(log_handler)
    logger.setLevel(logging.WARNING if quiet else log_level)
    return logger
