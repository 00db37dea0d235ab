"""
blessed (Node.js) data source generation.

Emits the ``DATA_SOURCES`` table, a systeminformation collector when the
design samples system metrics, and an async ``DataSourceUpdater`` built on
axios, ``child_process.exec`` and ``fs.promises``.
"""

from __future__ import annotations

from tuidesigner.codegen import behavior as bh
from tuidesigner.codegen.utils import js_literal, js_str
from tuidesigner.core.ir import Design

LOG_ERROR = """
function logError(message) {
  const line = `${new Date().toISOString()} ERROR ${message}\\n`;
  fs.appendFile("dashboard.log", line, () => {});
}
"""

METRICS_COLLECTOR = """
// Samples host metrics with systeminformation.
class SystemMetricsCollector {
  async getMetric(name) {
    switch (name) {
      case "cpu_percent":
        return (await si.currentLoad()).currentLoad;
      case "memory_percent": {
        const memory = await si.mem();
        return (memory.active / memory.total) * 100;
      }
      case "memory_used":
        return (await si.mem()).active;
      case "memory_total":
        return (await si.mem()).total;
      case "disk_percent":
      case "disk_used":
      case "disk_total": {
        const disks = await si.fsSize();
        const disk = disks.find((d) => d.mount === "/") || disks[0];
        if (!disk) throw new Error("no disks found");
        if (name === "disk_used") return disk.used;
        if (name === "disk_total") return disk.size;
        return disk.use;
      }
      case "network_in":
      case "network_out": {
        const stats = await si.networkStats("*");
        const key = name === "network_in" ? "rx_bytes" : "tx_bytes";
        return stats.reduce((sum, iface) => sum + (iface[key] || 0), 0);
      }
      case "process_count":
        return (await si.processes()).all;
      case "load_average":
        return os.loadavg()[0];
      default:
        throw new Error(`unknown metric: ${name}`);
    }
  }
}
"""

UPDATER = """
// Pick the widget value out of a cache entry; error entries yield nothing.
function extractValue(entry) {
  if (!entry || "error" in entry) return null;
  for (const key of VALUE_KEYS) {
    if (entry[key] !== undefined && entry[key] !== null) return entry[key];
  }
  return null;
}

class DataSourceUpdater {
  constructor(sources, collector = null) {
    this.sources = sources;
    this.collector = collector;
    this.cache = {};
    this.lastUpdate = {};
    this.fileMtimes = {};
  }

  // Refresh every due source; returns {sourceId: value} for fresh values.
  async updateAll() {
    const fresh = {};
    for (const [sourceId, config] of Object.entries(this.sources)) {
      if (await this.updateSource(sourceId, config)) {
        const value = extractValue(this.cache[sourceId]);
        if (value !== null) fresh[sourceId] = value;
      }
    }
    return fresh;
  }

  getData(sourceId) {
    return this.cache[sourceId] || null;
  }

  async updateSource(sourceId, config) {
    if (config.type === "file") return this.updateFile(sourceId, config);
    const now = Date.now();
    const last = this.lastUpdate[sourceId];
    if (last !== undefined && (config.type === "static" || now - last < config.interval)) {
      return false;
    }
    this.lastUpdate[sourceId] = now;
    let entry;
    try {
      entry = await this.fetch(config);
    } catch (err) {
      logError(`data source ${sourceId} failed: ${err.message}`);
      entry = { error: err.message };
    }
    entry.timestamp = now;
    this.cache[sourceId] = entry;
    return true;
  }

  async fetch(config) {
    switch (config.type) {
      case "static":
        return { value: config.value };
      case "system_metric":
        if (!this.collector) throw new Error("no metrics collector");
        return { value: await this.collector.getMetric(config.metric) };
      case "api":
        return this.fetchApi(config);
      case "command":
        return this.runCommand(config);
      default:
        throw new Error(`unknown data source type: ${config.type}`);
    }
  }

  async fetchApi(config) {
    const response = await axios.request({
      url: config.url,
      method: config.method,
      headers: config.headers || {},
      timeout: HTTP_TIMEOUT_MS,
      validateStatus: () => true,
    });
    return { data: response.data, status_code: response.status };
  }

  runCommand(config) {
    return new Promise((resolve, reject) => {
      exec(config.command, { timeout: COMMAND_TIMEOUT_MS }, (error, stdout, stderr) => {
        if (error && error.killed) {
          reject(new Error(`command timed out after ${COMMAND_TIMEOUT_MS / 1000}s`));
          return;
        }
        if (error && typeof error.code !== "number") {
          reject(error);
          return;
        }
        resolve({ output: stdout.trim(), stderr: stderr.trim(), return_code: error ? error.code : 0 });
      });
    });
  }

  // Files are re-read only when watched and their mtime moved.
  async updateFile(sourceId, config) {
    let entry;
    try {
      const stats = await fs.promises.stat(config.path);
      const previous = this.fileMtimes[sourceId];
      if (previous !== undefined && (stats.mtimeMs === previous || !config.watch)) return false;
      const content = await fs.promises.readFile(config.path, "utf8");
      this.fileMtimes[sourceId] = stats.mtimeMs;
      entry = { content, file_path: config.path };
    } catch (err) {
      const cached = this.cache[sourceId];
      if (cached && "error" in cached) return false;
      logError(`data source ${sourceId} failed: ${err.message}`);
      entry = { error: err.message };
    }
    entry.timestamp = Date.now();
    this.cache[sourceId] = entry;
    return true;
  }
}
"""


def generate_source_table(design: Design) -> str:
    """``DATA_SOURCES`` literal: source id -> plain config object."""
    lines = ["const DATA_SOURCES = {"]
    for source in design.referenced_data_sources:
        config = source.config.model_dump(mode="json")
        lines.append(f"  {js_str(source.id)}: {js_literal(config)},")
    lines.append("};")
    return "\n".join(lines)


def generate_data_sources(design: Design, include_comments: bool = True) -> str:
    """Constants, source table, collector (if needed) and updater."""
    constants = [
        f"const HTTP_TIMEOUT_MS = {bh.HTTP_TIMEOUT_SECONDS * 1000};",
        f"const COMMAND_TIMEOUT_MS = {bh.COMMAND_TIMEOUT_SECONDS * 1000};",
        f"const VALUE_KEYS = {js_literal(list(bh.VALUE_KEYS))};",
    ]
    if include_comments:
        constants.insert(0, "// Data sources")
    parts = ["\n".join(constants), generate_source_table(design), LOG_ERROR.strip("\n")]
    if design.uses_system_metrics():
        parts.append(METRICS_COLLECTOR.strip("\n"))
    parts.append(UPDATER.strip("\n"))
    return "\n\n".join(parts)
