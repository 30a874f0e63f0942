"""Static keyword tables for temporal coupling detection."""

from __future__ import annotations

from typing import NamedTuple

from .models import LifecyclePhase


class PairedOp(NamedTuple):
    open: str
    close: str
    severity: float


PAIRED_OPS: tuple[PairedOp, ...] = (
    PairedOp("open", "close", 0.8),
    PairedOp("lock", "unlock", 0.9),
    PairedOp("acquire", "release", 0.9),
    PairedOp("begin", "commit", 0.7),
    PairedOp("begin", "end", 0.6),
    PairedOp("start", "stop", 0.7),
    PairedOp("connect", "disconnect", 0.8),
    PairedOp("enter", "exit", 0.7),
    PairedOp("push", "pop", 0.5),
    PairedOp("subscribe", "unsubscribe", 0.6),
    PairedOp("register", "unregister", 0.6),
    PairedOp("enable", "disable", 0.5),
    PairedOp("activate", "deactivate", 0.6),
    PairedOp("attach", "detach", 0.6),
    PairedOp("bind", "unbind", 0.7),
    PairedOp("mount", "unmount", 0.8),
    PairedOp("init", "deinit", 0.7),
    PairedOp("setup", "teardown", 0.7),
    PairedOp("create", "destroy", 0.7),
    PairedOp("alloc", "free", 0.9),
    PairedOp("malloc", "free", 0.9),
    PairedOp("borrow", "return", 0.6),
    PairedOp("checkout", "checkin", 0.6),
)

# Phases in order; a name takes the first phase with a keyword it contains
LIFECYCLE_PATTERNS: tuple[tuple[LifecyclePhase, tuple[str, ...]], ...] = (
    (LifecyclePhase.CREATE, ("new", "create", "build", "construct", "make")),
    (LifecyclePhase.CONFIGURE, ("configure", "config", "set_config", "with_config", "options")),
    (LifecyclePhase.INITIALIZE, ("init", "initialize", "setup", "prepare", "bootstrap")),
    (
        LifecyclePhase.START,
        ("start", "begin", "run", "launch", "open", "connect", "activate"),
    ),
    (LifecyclePhase.ACTIVE, ("process", "execute", "handle", "perform", "do_work")),
    (
        LifecyclePhase.STOP,
        ("stop", "end", "halt", "pause", "close", "disconnect", "deactivate"),
    ),
    (
        LifecyclePhase.CLEANUP,
        ("cleanup", "clean", "dispose", "destroy", "drop", "finalize", "shutdown", "teardown"),
    ),
)

# (substring of a function name, prerequisite it implies)
STATE_CHECK_PATTERNS: tuple[tuple[str, str], ...] = (
    ("is_initialized", "init/initialize"),
    ("is_connected", "connect"),
    ("is_open", "open"),
    ("is_started", "start"),
    ("is_ready", "init/prepare"),
    ("is_running", "start/run"),
    ("is_active", "activate/start"),
    ("is_configured", "configure"),
    ("is_setup", "setup"),
    ("has_started", "start"),
    ("was_initialized", "init"),
    ("check_initialized", "init"),
    ("ensure_initialized", "init"),
    ("assert_initialized", "init"),
    ("require_connection", "connect"),
)

# Types whose drop releases a resource
RUST_GUARD_TYPES: tuple[str, ...] = (
    "MutexGuard",
    "RwLockReadGuard",
    "RwLockWriteGuard",
    "RefCell",
    "Ref",
    "RefMut",
    "ScopedJoinHandle",
    "Guard",
    "ScopeGuard",
    "Entered",
)

RUST_UNSAFE_ALLOC_PATTERNS: tuple[str, ...] = (
    "alloc",
    "dealloc",
    "realloc",
    "Box::from_raw",
    "Box::into_raw",
    "Vec::from_raw_parts",
    "String::from_raw_parts",
    "ptr::read",
    "ptr::write",
    "ManuallyDrop",
    "mem::forget",
    "mem::transmute",
)

DEALLOC_MARKERS: tuple[str, ...] = ("dealloc", "free", "drop")

RUST_ASYNC_SPAWN_PATTERNS: tuple[str, ...] = (
    "spawn",
    "spawn_blocking",
    "spawn_local",
    "task::spawn",
    "tokio::spawn",
    "async_std::spawn",
    "rayon::spawn",
)

RUST_ASYNC_JOIN_PATTERNS: tuple[str, ...] = ("join", "join_all", "await", "block_on", "JoinHandle")

# Bare-call captures that are control flow or constructors, not calls
CALL_KEYWORDS = frozenset(
    {"if", "while", "for", "match", "fn", "let", "return", "Some", "None", "Ok", "Err"}
)


def lifecycle_phase_of(name: str) -> LifecyclePhase | None:
    """First phase whose keyword list matches the lower-cased name."""
    lowered = name.lower()
    for phase, keywords in LIFECYCLE_PATTERNS:
        if any(keyword in lowered for keyword in keywords):
            return phase
    return None


def implied_prerequisite(name: str) -> str | None:
    """Prerequisite implied by a state-check name (first pattern wins)."""
    lowered = name.lower()
    for check, prerequisite in STATE_CHECK_PATTERNS:
        if check in lowered:
            return prerequisite
    return None
