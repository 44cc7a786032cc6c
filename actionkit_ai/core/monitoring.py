"""
Monitoring and Metrics Module.

This module provides integration with Pydantic Logfire for tracing and metrics
of action executions, including:
- Logfire configuration from settings
- Optional pydantic-ai instrumentation for model calls
- Per-action success/failure counters and latency histograms

Observability calls never change the outcome of the operation being observed:
a failure to record a measurement is logged at debug level and dropped.
"""

from typing import Optional

import logfire
from pydantic import ValidationError

from actionkit_ai.core.config import LogfireConfig, settings
from actionkit_ai.core.logging_config import get_logger

logger = get_logger(__name__)

ACTION_REQUESTS_METRIC = "actionkit.action.requests"
ACTION_LATENCY_METRIC = "actionkit.action.latency"

_action_requests = logfire.metric_counter(
    ACTION_REQUESTS_METRIC,
    unit="1",
    description="Number of action executions, tagged by action name and status",
)
_action_latency = logfire.metric_histogram(
    ACTION_LATENCY_METRIC,
    unit="ms",
    description="Latency of action executions in milliseconds",
)


def initialize_logfire(config: Optional[LogfireConfig] = None) -> bool:
    """
    Initialize Pydantic Logfire for tracing and metrics.

    Args:
        config: Logfire configuration. Defaults to the one bound from the environment.

    Returns:
        True when Logfire was configured, False when it was skipped or failed.
    """
    if config is None:
        try:
            config = settings.logfire
        except ValidationError as e:
            logger.error(f"Invalid Logfire settings, monitoring will not be initialized: {e}")
            return False

    if not config.enabled:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return False

    if not config.token:
        logger.warning(
            "Logfire is enabled but LOGFIRE_TOKEN is not set. "
            "Monitoring will not work. Set LOGFIRE_TOKEN to enable Logfire."
        )
        return False

    try:
        logfire.configure(
            token=config.token,
            service_name=config.service_name,
            service_version=config.service_version,
            environment=config.environment,
            sampling=logfire.SamplingOptions(
                head=config.sample_rate,
                tail=config.trace_sample_rate,
            ),
        )
    except Exception as e:
        logger.error(f"Failed to initialize Logfire: {e}", exc_info=True)
        return False

    if config.trace_pydantic_ai:
        try:
            logfire.instrument_pydantic_ai()
            logger.info("Logfire: Pydantic AI instrumentation enabled")
        except Exception as e:
            logger.warning(f"Failed to instrument Pydantic AI: {e}")

    logger.info(
        f"Logfire monitoring initialized: "
        f"project={config.project_name}, "
        f"environment={config.environment}, "
        f"service={config.service_name}"
    )
    return True


def record_action_success(name: str, latency_ms: float) -> None:
    """
    Record a successful action execution.

    Args:
        name: The action name
        latency_ms: Time spent in the action function, in milliseconds
    """
    attributes = {"action": name, "status": "success"}
    try:
        _action_requests.add(1, attributes)
        _action_latency.record(latency_ms, attributes)
    except Exception:
        logger.debug(f"Could not record action success metric: name={name}")


def record_action_failure(name: str, latency_ms: float, error: BaseException) -> None:
    """
    Record a failed action execution.

    Args:
        name: The action name
        latency_ms: Time spent in the action function before it failed, in milliseconds
        error: The exception raised by the action function
    """
    attributes = {"action": name, "status": "failure", "error_type": type(error).__name__}
    try:
        _action_requests.add(1, attributes)
        _action_latency.record(latency_ms, attributes)
    except Exception:
        logger.debug(f"Could not record action failure metric: name={name}")
    logger.warning(f"Action {name} failed after {latency_ms:.2f}ms: {error!r}")
