"""
Textual data source generation.

Emits a psutil-backed metrics collector (only when the design samples
system metrics), the table of source configs, and a DataSourceUpdater
that owns the cache. The app constructs both objects and passes the
collector to the updater; nothing is module-level state.
"""

from __future__ import annotations

from tuidesigner.codegen import behavior as bh
from tuidesigner.codegen.utils import py_literal, py_str
from tuidesigner.core.ir import Design

METRICS_COLLECTOR = '''
class SystemMetricsCollector:
    """Samples host metrics with psutil. Each getter may raise on its own."""

    def __init__(self) -> None:
        self.getters = {
            "cpu_percent": self.cpu_percent,
            "memory_percent": lambda: psutil.virtual_memory().percent,
            "memory_used": lambda: psutil.virtual_memory().used,
            "memory_total": lambda: psutil.virtual_memory().total,
            "disk_percent": lambda: psutil.disk_usage("/").percent,
            "disk_used": lambda: psutil.disk_usage("/").used,
            "disk_total": lambda: psutil.disk_usage("/").total,
            "network_in": lambda: psutil.net_io_counters().bytes_recv,
            "network_out": lambda: psutil.net_io_counters().bytes_sent,
            "process_count": lambda: len(psutil.pids()),
            "load_average": lambda: os.getloadavg()[0],
        }

    def cpu_percent(self) -> float:
        return psutil.cpu_percent(interval=None)

    def get_metric(self, name: str) -> float:
        getter = self.getters.get(name)
        if getter is None:
            raise KeyError(f"Unknown metric: {name}")
        return getter()
'''

UPDATER = '''
def extract_value(entry):
    """The widget-facing value of a cache entry, or None for error entries."""
    if entry is None or "error" in entry:
        return None
    for key in VALUE_KEYS:
        if key in entry:
            return entry[key]
    return None


class DataSourceUpdater:
    """
    Fetches data sources and caches the latest entry per source id.

    Polled sources are fetched at most once per interval. File sources are
    re-read only when their modification time changes. Every fetch catches
    its own failure and caches an error entry instead.
    """

    def __init__(self, sources, collector=None) -> None:
        self.sources = sources
        self.collector = collector
        self.cache = {}
        self.last_update = {}
        self.file_mtimes = {}

    def update_all(self):
        """Refresh every due source; return {source_id: value} for fresh values."""
        fresh = {}
        for source_id, config in self.sources.items():
            if self.update_source(source_id, config):
                value = extract_value(self.cache.get(source_id))
                if value is not None:
                    fresh[source_id] = value
        return fresh

    def update_source(self, source_id, config) -> bool:
        kind = config["type"]
        now = time.time()
        if kind == "file":
            return self.update_file(source_id, config)
        last = self.last_update.get(source_id)
        if last is not None:
            if kind == "static":
                return False
            if (now - last) * 1000 < config["interval"]:
                return False
        self.last_update[source_id] = now
        try:
            if kind == "static":
                entry = {"value": config["value"]}
            elif kind == "system_metric":
                entry = {"value": self.collector.get_metric(config["metric"])}
            elif kind == "api":
                entry = self.fetch_api(config)
            elif kind == "command":
                entry = self.run_command(config)
            else:
                raise ValueError(f"Unknown data source type: {kind}")
        except Exception as e:
            logger.error("Data source %s failed: %s", source_id, e)
            entry = {"error": str(e)}
        entry["timestamp"] = now
        self.cache[source_id] = entry
        return True

    def fetch_api(self, config):
        response = httpx.request(
            config["method"],
            config["url"],
            headers=config.get("headers") or {},
            timeout=HTTP_TIMEOUT,
        )
        try:
            body = response.json()
        except ValueError:
            body = response.text
        return {"data": body, "status_code": response.status_code}

    def run_command(self, config):
        result = subprocess.run(
            config["command"],
            shell=True,
            capture_output=True,
            text=True,
            timeout=COMMAND_TIMEOUT,
        )
        return {
            "output": result.stdout.strip(),
            "stderr": result.stderr.strip(),
            "return_code": result.returncode,
        }

    def update_file(self, source_id, config) -> bool:
        path = config["path"]
        try:
            if not os.path.exists(path):
                raise FileNotFoundError(f"File not found: {path}")
            mtime = os.path.getmtime(path)
            previous = self.file_mtimes.get(source_id)
            if previous is not None and (mtime == previous or not config["watch"]):
                return False
            with open(path, encoding="utf-8") as f:
                content = f.read()
            self.file_mtimes[source_id] = mtime
            entry = {"content": content, "file_path": path}
        except Exception as e:
            if "error" in self.cache.get(source_id, {}):
                return False
            logger.error("Data source %s failed: %s", source_id, e)
            entry = {"error": str(e)}
        entry["timestamp"] = time.time()
        self.cache[source_id] = entry
        return True

    def get_data(self, source_id):
        return self.cache.get(source_id)
'''


def generate_source_table(design: Design) -> str:
    """``DATA_SOURCES`` literal: source id -> plain config dict."""
    lines = ["DATA_SOURCES = {"]
    for source in design.referenced_data_sources:
        config = source.config.model_dump(mode="json")
        lines.append(f"    {py_str(source.id)}: {py_literal(config)},")
    lines.append("}")
    return "\n".join(lines)


def generate_data_sources(design: Design, include_comments: bool = True) -> str:
    """Collector (if needed), constants, source table and updater."""
    constants = [
        "logger = logging.getLogger(__name__)",
        "",
        f"HTTP_TIMEOUT = {bh.HTTP_TIMEOUT_SECONDS}",
        f"COMMAND_TIMEOUT = {bh.COMMAND_TIMEOUT_SECONDS}",
        f"VALUE_KEYS = {py_literal(bh.VALUE_KEYS)}",
    ]
    if include_comments:
        constants.insert(0, "# Data sources")
    parts = ["\n".join(constants)]
    parts.append(generate_source_table(design))
    if design.uses_system_metrics():
        parts.append(METRICS_COLLECTOR.strip("\n"))
    parts.append(UPDATER.strip("\n"))
    return "\n\n\n".join(parts)
