"""
Snowflake codec preconfigured with Discord's epoch.

The Discord epoch is 1420070400000 (2015-01-01T00:00:00.000Z), see
https://discord.com/developers/docs/reference#snowflakes.
"""

from chronoid.utils.snowflake import Snowflake

DISCORD_EPOCH = 1420070400000

discord_snowflake = Snowflake(DISCORD_EPOCH)
