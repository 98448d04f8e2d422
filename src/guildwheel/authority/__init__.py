"""Winner authorities: the external source of truth for spins."""

from guildwheel.authority.base import WinnerAuthority
from guildwheel.authority.http import GuildApiAuthority
from guildwheel.authority.memory import InMemoryAuthority

__all__ = ["WinnerAuthority", "GuildApiAuthority", "InMemoryAuthority"]
