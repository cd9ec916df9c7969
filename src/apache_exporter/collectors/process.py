"""Exporter process metrics collector."""

from __future__ import annotations

import contextlib
import os

import psutil

from ..metrics import MetricFamily, counter, gauge
from .base import BaseCollector

_UNAVAILABLE = (psutil.AccessDenied, psutil.ZombieProcess, AttributeError, NotImplementedError)


class ProcessCollector(BaseCollector):
    """Collect CPU, memory, fd and thread metrics for this process."""

    def __init__(self, pid: int | None = None) -> None:
        self._proc = psutil.Process(pid if pid is not None else os.getpid())

    @property
    def name(self) -> str:
        return "process"

    def collect(self) -> list[MetricFamily]:
        proc = self._proc
        families: list[MetricFamily] = []

        with proc.oneshot():
            with contextlib.suppress(*_UNAVAILABLE):
                times = proc.cpu_times()
                families.append(
                    counter(
                        "process_cpu_seconds_total",
                        "Total user and system CPU time spent in seconds.",
                        round(times.user + times.system, 2),
                    )
                )

            with contextlib.suppress(*_UNAVAILABLE):
                mem = proc.memory_info()
                families.append(
                    gauge(
                        "process_virtual_memory_bytes",
                        "Virtual memory size in bytes.",
                        mem.vms,
                    )
                )
                families.append(
                    gauge(
                        "process_resident_memory_bytes",
                        "Resident memory size in bytes.",
                        mem.rss,
                    )
                )

            with contextlib.suppress(*_UNAVAILABLE):
                families.append(
                    gauge(
                        "process_start_time_seconds",
                        "Start time of the process since unix epoch in seconds.",
                        round(proc.create_time(), 2),
                    )
                )

            # num_fds() only exists on POSIX
            with contextlib.suppress(*_UNAVAILABLE):
                families.append(
                    gauge("process_open_fds", "Number of open file descriptors.", proc.num_fds())
                )

            # rlimit() only exists on Linux and FreeBSD
            with contextlib.suppress(*_UNAVAILABLE):
                soft, _hard = proc.rlimit(psutil.RLIMIT_NOFILE)
                if soft >= 0:
                    families.append(
                        gauge(
                            "process_max_fds",
                            "Maximum number of open file descriptors.",
                            soft,
                        )
                    )

            with contextlib.suppress(*_UNAVAILABLE):
                families.append(
                    gauge("process_threads", "Number of OS threads in the process.", proc.num_threads())
                )

        return families
