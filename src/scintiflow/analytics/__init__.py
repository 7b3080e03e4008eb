"""
Read-only views over the history ledger: durations, statistics, worklist.
"""

from scintiflow.analytics.durations import (
    DELAY_SEGMENTS,
    DelaySegment,
    SegmentDuration,
    SegmentStatus,
    calculate_time_diff,
    chained_segment_durations,
    find_time_from_history,
    format_duration,
    segment_duration,
)
from scintiflow.analytics.statistics import (
    ActivityItem,
    AverageDelay,
    Period,
    activity_feed,
    average_segment_delays,
    exam_type_counts,
    is_date_in_period,
)
from scintiflow.analytics.worklist import TimelineEvent, TimelineEventType, daily_worklist

__all__ = [
    "DELAY_SEGMENTS",
    "ActivityItem",
    "AverageDelay",
    "DelaySegment",
    "Period",
    "SegmentDuration",
    "SegmentStatus",
    "TimelineEvent",
    "TimelineEventType",
    "activity_feed",
    "average_segment_delays",
    "calculate_time_diff",
    "chained_segment_durations",
    "daily_worklist",
    "exam_type_counts",
    "find_time_from_history",
    "format_duration",
    "is_date_in_period",
    "segment_duration",
]
