"""
Monitoring Module - Logging and timing for the generation pipeline.

Usage:
======
    from urlverse.ai.monitoring import ai_logger, performance_monitor

    ai_logger.log_request(request_id, prompt, "gemini", model)

    with performance_monitor.measure("api_call"):
        ...

    report = performance_monitor.get_report()
"""

from urlverse.ai.monitoring.logger import AILogger, ai_logger
from urlverse.ai.monitoring.metrics import PerformanceMonitor, performance_monitor

__all__ = [
    "AILogger",
    "ai_logger",
    "PerformanceMonitor",
    "performance_monitor",
]
