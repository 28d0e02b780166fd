# Common utilities
from pulseguard.common.crypto import SignatureService as SignatureService
from pulseguard.common.logging_utils import setup_logger as setup_logger

__all__ = ["SignatureService", "setup_logger"]
