"""Remote execution: channels to agents and the agent entry point."""

from nucleirunner.remote.channel import RemoteChannel
from nucleirunner.remote.ssh import SshChannel

__all__ = ["RemoteChannel", "SshChannel"]
