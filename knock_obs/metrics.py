"""
Prometheus Metrics Registration.

Counters and histograms for tool execution and deferred (human-in-the-loop) calls.
"""

from prometheus_client import Counter, Histogram

# ============================================================================
# COUNTERS
# ============================================================================

tool_executions_total = Counter(
    "tool_executions_total",
    "Total tool executions",
    ["tool_name", "status"],  # success, failure
)

deferred_tool_calls_total = Counter(
    "deferred_tool_calls_total",
    "Deferred tool calls by lifecycle status",
    ["method", "status"],  # pending, completed
)

# ============================================================================
# HISTOGRAMS
# ============================================================================

tool_execution_duration = Histogram(
    "tool_execution_duration_seconds",
    "Tool execution duration",
    ["tool_name"],
    buckets=(0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0),
)
