# src/treelox/evaluator/utils.py
import logging

from ..config import config as treelox_config

logger = logging.getLogger("treelox.evaluator")

# === DEBUG FLAGS ===

def debug_log(message, data=None, level='debug', settings=None):
    """Conditional debug logging gated by ``settings`` (the user's persistent config by default)."""
    if settings is None:
        settings = treelox_config
    if not settings.should_log(level):
        return

    if data is not None:
        logger.debug("%s: %s", message, data)
    else:
        logger.debug("%s", message)


class CallFrame:
    """One active call: what was called and from where."""

    def __init__(self, callee, token):
        self.callee = callee
        self.token = token

    def __repr__(self):
        return f"<frame {self.callee.inspect()} line {self.token.line}>"
