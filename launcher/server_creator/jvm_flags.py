"""
JVM flag sets used to launch the server.

The tuned set is Aikar's G1 configuration (https://mcflags.emc.gs). Machines
with at least 12 GB of physical memory get the large-heap G1 tier.
"""
from __future__ import annotations
from typing import List, Optional
import psutil
from .logging_setup import get_logger

log = get_logger("servercreator.jvm")

LARGE_MEMORY_BYTES = 12_000_000_000

_COMMON_G1 = [
    "-XX:+UseG1GC",
    "-XX:+ParallelRefProcEnabled",
    "-XX:MaxGCPauseMillis=200",
    "-XX:+UnlockExperimentalVMOptions",
    "-XX:+DisableExplicitGC",
    "-XX:+AlwaysPreTouch",
]

_SMALL_TIER = [
    "-XX:G1NewSizePercent=30",
    "-XX:G1MaxNewSizePercent=40",
    "-XX:G1HeapRegionSize=8M",
    "-XX:G1ReservePercent=20",
    "-XX:G1HeapWastePercent=5",
    "-XX:G1MixedGCCountTarget=4",
    "-XX:InitiatingHeapOccupancyPercent=15",
]

_LARGE_TIER = [
    "-XX:G1NewSizePercent=40",
    "-XX:G1MaxNewSizePercent=50",
    "-XX:G1HeapRegionSize=16M",
    "-XX:G1ReservePercent=15",
    "-XX:G1HeapWastePercent=5",
    "-XX:G1MixedGCCountTarget=4",
    "-XX:InitiatingHeapOccupancyPercent=20",
]

_TAIL = [
    "-XX:G1MixedGCLiveThresholdPercent=90",
    "-XX:G1RSetUpdatingPauseTimePercent=5",
    "-XX:SurvivorRatio=32",
    "-XX:+PerfDisableSharedMem",
    "-XX:MaxTenuringThreshold=1",
    "-Dusing.aikars.flags=https://mcflags.emc.gs",
    "-Daikars.new.flags=true",
]


def total_memory_bytes() -> int:
    """Physical memory in bytes, 0 if the platform does not tell us."""
    try:
        return int(psutil.virtual_memory().total)
    except (OSError, RuntimeError) as e:
        log.warning("Cannot detect physical memory: %s", e)
        return 0


def tuned_flags(heap_size: str = "10G", memory_bytes: Optional[int] = None) -> List[str]:
    if memory_bytes is None:
        memory_bytes = total_memory_bytes()
    tier = _LARGE_TIER if memory_bytes >= LARGE_MEMORY_BYTES else _SMALL_TIER
    return [f"-Xms{heap_size}", f"-Xmx{heap_size}"] + _COMMON_G1 + tier + _TAIL


def minimal_flags() -> List[str]:
    return []


def build_command(java_binary: str, flags: List[str], artifact: str) -> List[str]:
    """``java <flags> -jar <artifact> --nogui``"""
    return [java_binary, *flags, "-jar", artifact, "--nogui"]
