# _logging.py
# Small structured logger: colored console lines plus an optional JSON-lines file sink.
from __future__ import annotations
import sys, datetime, json, threading, time
from typing import Any, Optional, TextIO, Mapping, Dict

RESET = "\033[0m"
DIM = "\033[90m"
RED = "\033[91m"
GREEN = "\033[92m"
YELLOW = "\033[33m"
BLUE = "\033[94m"

LEVELS = {"silent": 60, "error": 40, "warn": 30, "info": 20, "debug": 10}

# ── runtime debug gate (reads runtime.debug from config, cached briefly) ──
_DEBUG_CACHE: Dict[str, Any] = {"ts": 0.0, "val": False}

def _debug_enabled() -> bool:
    now = time.time()
    if (now - _DEBUG_CACHE["ts"]) > 5.0:
        try:
            from rl_platform.config_base import load_config
            rt = load_config().get("runtime") or {}
            _DEBUG_CACHE["val"] = bool(rt.get("debug"))
        except Exception:
            _DEBUG_CACHE["val"] = False
        _DEBUG_CACHE["ts"] = now
    return bool(_DEBUG_CACHE["val"])

class Logger:
    def __init__(
        self,
        stream: TextIO = sys.stdout,
        level: str = "info",
        use_color: bool = True,
        show_time: bool = True,
        time_fmt: str = "%Y-%m-%d %H:%M:%S",
        tag_color_map: Optional[dict[str, str]] = None,
        *,
        _context: Optional[Dict[str, Any]] = None,
        _name: Optional[str] = None,
        _sinks: Optional[Dict[str, Any]] = None,
        _lock: Optional[threading.Lock] = None,
    ):
        self.stream = stream
        self.level_no = LEVELS.get(level, 20)
        self.use_color = use_color
        self.show_time = show_time
        self.time_fmt = time_fmt
        self.tag_color_map = tag_color_map or {
            "DEBUG": YELLOW,
            "INFO": BLUE,
            "WARN": YELLOW,
            "ERROR": RED,
            "SUCCESS": GREEN,
        }
        self._context: Dict[str, Any] = dict(_context or {})
        if _name:
            self._context.setdefault("module", _name)
        # shared by every bound child so a sink enabled later reaches all of them
        self._sinks: Dict[str, Any] = _sinks if _sinks is not None else {"json": None}
        self._lock = _lock or threading.Lock()

    # Configuration
    def enable_json(self, file_path: str) -> None:
        self._sinks["json"] = open(file_path, "a", encoding="utf-8")

    # Context
    def bind(self, **ctx: Any) -> "Logger":
        new_ctx = dict(self._context); new_ctx.update(ctx)
        return Logger(
            stream=self.stream,
            level=self.level_name,
            use_color=self.use_color,
            show_time=self.show_time,
            time_fmt=self.time_fmt,
            tag_color_map=dict(self.tag_color_map),
            _context=new_ctx,
            _name=new_ctx.get("module"),
            _sinks=self._sinks,
            _lock=self._lock,
        )

    def child(self, name: str) -> "Logger":
        return self.bind(module=name)

    @property
    def level_name(self) -> str:
        for k, v in LEVELS.items():
            if v == self.level_no:
                return k
        return "info"

    # Formatting
    def _fmt_text(self, display_level: str, *parts: Any) -> str:
        # "[MODULE] LEVEL message"
        mod = (self._context.get("module") or "").strip()
        msg = " ".join(str(p) for p in parts)

        col = self.tag_color_map.get(display_level) if self.use_color else None
        lvl_disp = f"{col}{display_level}{RESET}" if col else display_level
        head = f"[{mod}]" if mod else ""
        line = f"{head} {lvl_disp} {msg}".strip()

        if self.show_time:
            ts = datetime.datetime.now().strftime(self.time_fmt)
            prefix = f"{DIM}[{ts}]{RESET}" if self.use_color else f"[{ts}]"
            return f"{prefix} {line}"
        return line

    def _write_sinks(self, display_level: str, message_text: str, *, msg: str, extra: Optional[Mapping[str, Any]]) -> None:
        with self._lock:
            self.stream.write(message_text + "\n")
            self.stream.flush()
            json_stream = self._sinks.get("json")
            if json_stream:
                payload = {
                    "ts": datetime.datetime.now(datetime.timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
                    "level": display_level,
                    "msg": msg,
                    "ctx": self._context or {},
                }
                if extra:
                    payload["extra"] = dict(extra)
                json_stream.write(json.dumps(payload, ensure_ascii=False) + "\n")
                json_stream.flush()

    def _emit(self, severity: str, display_level: str, *parts: Any, extra: Optional[Mapping[str, Any]] = None) -> None:
        if severity == "debug":
            if not _debug_enabled():
                return
        elif self.level_no > LEVELS.get(severity, LEVELS["info"]):
            return
        s = self._fmt_text(display_level, *parts)
        self._write_sinks(display_level, s, msg=" ".join(str(p) for p in parts), extra=extra)

    # Public API
    def debug(self, *parts: Any, extra: Optional[Mapping[str, Any]] = None) -> None:
        self._emit("debug", "DEBUG", *parts, extra=extra)

    def info(self, *parts: Any, extra: Optional[Mapping[str, Any]] = None) -> None:
        self._emit("info", "INFO", *parts, extra=extra)

    def warn(self, *parts: Any, extra: Optional[Mapping[str, Any]] = None) -> None:
        self._emit("warn", "WARN", *parts, extra=extra)

    def warning(self, *parts: Any, extra: Optional[Mapping[str, Any]] = None) -> None:
        self.warn(*parts, extra=extra)

    def error(self, *parts: Any, extra: Optional[Mapping[str, Any]] = None) -> None:
        self._emit("error", "ERROR", *parts, extra=extra)

    def success(self, *parts: Any, extra: Optional[Mapping[str, Any]] = None) -> None:
        self._emit("info", "SUCCESS", *parts, extra=extra)

    # Callable adapter: logger("text", level="INFO", extra={...})
    def __call__(
        self,
        message: str,
        *,
        level: str = "INFO",
        module: Optional[str] = None,
        extra: Optional[Mapping[str, Any]] = None,
    ) -> None:
        target = self.bind(module=module) if module else self
        lvl = (level or "INFO").lower()
        if lvl == "debug":
            target.debug(message, extra=extra)
        elif lvl in ("warn", "warning"):
            target.warn(message, extra=extra)
        elif lvl == "error":
            target.error(message, extra=extra)
        elif lvl == "success":
            target.success(message, extra=extra)
        else:
            target.info(message, extra=extra)


def configure_from_config(cfg: Mapping[str, Any]) -> None:
    """Apply runtime.* settings to the shared logger."""
    rt = cfg.get("runtime") or {}
    _DEBUG_CACHE["val"] = bool(rt.get("debug"))
    _DEBUG_CACHE["ts"] = time.time()
    path = str(rt.get("log_json") or "").strip()
    if path and log._sinks.get("json") is None:
        try:
            log.enable_json(path)
        except OSError as e:
            log.warn(f"cannot open JSON log sink {path}: {e}")


# default instance
log = Logger()

__all__ = ["Logger", "log", "LEVELS", "configure_from_config", "RESET", "DIM", "RED", "GREEN", "YELLOW", "BLUE"]
