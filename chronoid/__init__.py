from chronoid.services.cache import Cache
from chronoid.services.value_cache import ValueCache
from chronoid.utils.discord_snowflake import DISCORD_EPOCH, discord_snowflake
from chronoid.utils.duration import Time, TimeSeconds
from chronoid.utils.locales import LocaleDefinition, LocaleRegistry, UnitDefinition, set_locale
from chronoid.utils.ms import format, ms, parse
from chronoid.utils.snowflake import (
    MAXIMUM_INCREMENT,
    MAXIMUM_PROCESS_ID,
    MAXIMUM_WORKER_ID,
    DeconstructedSnowflake,
    Snowflake,
)

__version__ = "0.1.0"
