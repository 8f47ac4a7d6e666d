"""Keep-alive engine — probe, retry, fan-out, history, triggers."""

from .history import MAX_HISTORY, HistoryRecorder
from .models import LogEntry, ProbeResult, RetryPolicy, TriggerKind
from .orchestrator import execute_all
from .pipeline import KeepAliveEngine
from .probe import ProbeOutcome, probe
from .retry import RetryRunner
from .scheduler import CronScheduler
