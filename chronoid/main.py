"""
FastAPI Chronoid Service

A small HTTP service exposing the chronoid utilities: Snowflake identifiers
and human readable durations.

Key Features:
    - Snowflake generation with the configured epoch, worker and process IDs
    - Snowflake deconstruction and ordering, IDs exchanged as decimal strings
    - Locale-aware duration parsing and formatting
    - In-memory TTL caching of parsed durations

Architecture:
    - FastAPI for the web framework and automatic API documentation
    - A single Snowflake codec shared by every request
    - chronoid.services.cache.Cache for parsed durations, swept in background
    - pydantic-settings for environment configuration

Dependencies:
    - FastAPI: Modern web framework for building APIs
    - pydantic / pydantic-settings: Request models and configuration
"""

import math
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Path, Query, Request, status

from chronoid.core.config import settings
from chronoid.core.exceptions import (
    InvalidArgumentTypeError,
    InvalidDurationLengthError,
    MalformedIdentifierError,
    UnknownLocaleError,
)
from chronoid.schema import (
    CompareResult,
    CompareSnowflakes,
    DeconstructedSnowflakeOut,
    FormattedDuration,
    GenerateSnowflake,
    ParsedDuration,
    SnowflakeOut,
)
from chronoid.services.cache import Cache
from chronoid.services.logger import setup_logger
from chronoid.utils import ms as duration
from chronoid.utils.snowflake import Snowflake

logger = setup_logger()
logger.setLevel(settings.LOG_LEVEL.upper())

# Initialize Snowflake codec
snowflake = Snowflake(settings.EPOCH)
snowflake.worker_id = settings.WORKER_ID
snowflake.process_id = settings.PROCESS_ID


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan event handler to initialize and cleanup shared state.

    The duration cache starts its background sweep on creation and is closed
    when the application terminates so the sweep timer is cancelled.

    Args:
        app (FastAPI): The FastAPI application instance

    Yields:
        None: Control to the application during its lifetime
    """
    logger.info(
        "Starting application (env: %s, epoch: %s, worker: %s, process: %s)",
        settings.ENV,
        snowflake.epoch,
        snowflake.worker_id,
        snowflake.process_id,
    )

    app.state.snowflake = snowflake
    app.state.duration_cache = Cache(
        ttl=settings.CACHE_TTL, check_interval=settings.CACHE_CHECK_INTERVAL
    )

    yield

    logger.info("Application is shutting down.")

    app.state.duration_cache.close()


app = FastAPI(lifespan=lifespan)


@app.post(
    "/snowflakes",
    status_code=status.HTTP_201_CREATED,
    response_model=SnowflakeOut,
    summary="Generate a snowflake",
    description="""
    Generate a snowflake with the configured epoch.

    Every field is optional: the timestamp defaults to now, the worker and
    process IDs default to the configured ones, and the increment defaults to
    the shared counter, which advances on every call that doesn't supply one.
    Worker ID, process ID and increment are truncated to their field width.
    """,
)
async def generate_snowflake(request: Request, options: GenerateSnowflake):
    """Generate a snowflake.

    Args:
        options (GenerateSnowflake): The optional snowflake fields.

    Returns:
        SnowflakeOut: The snowflake as a decimal string.
    """
    try:
        snowflake_id = request.app.state.snowflake.generate(
            timestamp=options.timestamp,
            increment=options.increment,
            worker_id=options.worker_id,
            process_id=options.process_id,
        )
    except InvalidArgumentTypeError as e:
        logger.error("Snowflake generation failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    logger.debug("Generated snowflake %s", snowflake_id)
    return SnowflakeOut(id=str(snowflake_id))


@app.get(
    "/snowflakes/{id}",
    response_model=DeconstructedSnowflakeOut,
    summary="Deconstruct a snowflake",
)
async def deconstruct_snowflake(
    request: Request,
    id: str = Path(..., description="The snowflake as a decimal string"),
):
    """Deconstruct a snowflake into its timestamp, worker, process and increment.

    Args:
        id (str): The snowflake as a decimal string.

    Returns:
        DeconstructedSnowflakeOut: The fields stored in the snowflake.
    """
    try:
        data = request.app.state.snowflake.deconstruct(id)
    except MalformedIdentifierError as e:
        logger.error("Invalid snowflake provided: %s", e)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    return DeconstructedSnowflakeOut.from_deconstructed(data)


@app.post(
    "/snowflakes/compare",
    response_model=CompareResult,
    summary="Compare two snowflakes",
)
async def compare_snowflakes(payload: CompareSnowflakes):
    """Compare two snowflakes by bit pattern.

    Returns:
        CompareResult: -1 if ``a`` is older than ``b``, 0 if equal, 1 otherwise.
    """
    try:
        return CompareResult(result=Snowflake.compare(payload.a, payload.b))
    except MalformedIdentifierError as e:
        logger.error("Invalid snowflake provided: %s", e)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )


@app.get(
    "/durations/parse",
    response_model=ParsedDuration,
    summary="Parse a duration",
)
async def parse_duration(
    request: Request,
    text: str = Query(..., description='The duration to parse, e.g. "5 jours"'),
    locale: Optional[str] = Query(None, description="The locale code"),
):
    """Parse a human readable duration into milliseconds.

    Unparseable text is not an error: ``ms`` is null in the response.
    """
    locale = locale or settings.DEFAULT_LOCALE
    cache: Cache = request.app.state.duration_cache
    cache_key = f"{locale}:{text}"

    cached = cache.get(cache_key)
    if cached is not None:
        logger.debug("Cache hit for duration %r", cache_key)
        return cached

    try:
        value = duration.parse(text, locale=locale)
    except UnknownLocaleError as e:
        logger.error("Duration parsing failed: %s", e)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidDurationLengthError as e:
        logger.error("Duration parsing failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    result = ParsedDuration(ms=None if math.isnan(value) else value)
    cache.set(cache_key, result)
    return result


@app.get(
    "/durations/format",
    response_model=FormattedDuration,
    summary="Format a duration",
)
async def format_duration(
    ms: float = Query(..., description="The duration in milliseconds"),
    locale: Optional[str] = Query(None, description="The locale code"),
    long: bool = Query(False, description="Use long unit names"),
    compound: bool = Query(False, description="Use several units"),
    max_units: Optional[int] = Query(
        None, ge=1, description="The maximum amount of units in compound mode"
    ),
):
    """Format milliseconds as a human readable duration."""
    try:
        text = duration.format(
            ms,
            locale=locale or settings.DEFAULT_LOCALE,
            long=long,
            compound=compound,
            max_units=max_units,
        )
    except UnknownLocaleError as e:
        logger.error("Duration formatting failed: %s", e)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidArgumentTypeError as e:
        logger.error("Duration formatting failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )

    return FormattedDuration(text=text)
