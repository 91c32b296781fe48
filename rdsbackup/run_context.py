from dataclasses import dataclass
from typing import Optional

from .utils.global_vars import poll_interval


@dataclass(frozen=True)
class RunContext:
    """Settings for one backup run. Built once and never mutated."""
    instance_id: str
    source_region: str
    dest_region: str
    account_id: str
    purge: int = 0
    kms_key_id: Optional[str] = None
    max_wait: Optional[int] = None
    poll_interval: int = poll_interval
    dry_run: bool = False
