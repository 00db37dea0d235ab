"""
Ratatui (Rust) data source generation.

Emits a ``SourceConfig`` enum with one variant per source kind, the
source table, a sysinfo-backed collector when the design samples system
metrics, and a ``DataSourceUpdater``. The app moves the updater onto a
background thread and receives fresh values over a channel.
"""

from __future__ import annotations

import json
from typing import Any

from tuidesigner.codegen import behavior as bh
from tuidesigner.codegen.utils import rust_str
from tuidesigner.core.ir import (
    ApiConfig,
    CommandConfig,
    Design,
    FileConfig,
    StaticConfig,
    SystemMetricConfig,
)

SOURCE_TYPES = """
#[derive(Clone)]
pub enum SourceConfig {
    Static { value: Value },
    SystemMetric { metric: &'static str, interval: Duration },
    Api {
        url: &'static str,
        method: &'static str,
        headers: Vec<(&'static str, &'static str)>,
        interval: Duration,
    },
    File { path: &'static str, watch: bool },
    Command { command: &'static str, interval: Duration },
}

impl SourceConfig {
    /// Minimum time between fetches; None for sources that are read once.
    fn interval(&self) -> Option<Duration> {
        match self {
            SourceConfig::SystemMetric { interval, .. }
            | SourceConfig::Api { interval, .. }
            | SourceConfig::Command { interval, .. } => Some(*interval),
            _ => None,
        }
    }
}

fn unix_time() -> u64 {
    SystemTime::now()
        .duration_since(UNIX_EPOCH)
        .map(|d| d.as_secs())
        .unwrap_or(0)
}

/// Append an error line to dashboard.log; the terminal belongs to the UI.
pub fn log_error(message: &str) {
    if let Ok(mut file) = OpenOptions::new().create(true).append(true).open("dashboard.log") {
        let _ = writeln!(file, "{} ERROR {}", unix_time(), message);
    }
}
"""

METRICS_COLLECTOR = """
/// Samples host metrics with sysinfo.
pub struct SystemMetricsCollector {
    system: System,
}

impl SystemMetricsCollector {
    pub fn new() -> Self {
        let mut system = System::new_all();
        system.refresh_all();
        Self { system }
    }
}

impl MetricSource for SystemMetricsCollector {
    fn get_metric(&mut self, name: &str) -> Result<f64, String> {
        let s = &mut self.system;
        match name {
            "cpu_percent" => {
                s.refresh_cpu();
                Ok(s.global_cpu_info().cpu_usage() as f64)
            }
            "memory_percent" | "memory_used" | "memory_total" => {
                s.refresh_memory();
                let total = s.total_memory() as f64;
                let used = s.used_memory() as f64;
                Ok(match name {
                    "memory_used" => used,
                    "memory_total" => total,
                    _ if total == 0.0 => 0.0,
                    _ => used / total * 100.0,
                })
            }
            "disk_percent" | "disk_used" | "disk_total" => {
                s.refresh_disks_list();
                s.refresh_disks();
                let disk = s
                    .disks()
                    .iter()
                    .find(|d| d.mount_point() == Path::new("/"))
                    .or_else(|| s.disks().first())
                    .ok_or("no disks found")?;
                let total = disk.total_space() as f64;
                let used = total - disk.available_space() as f64;
                Ok(match name {
                    "disk_used" => used,
                    "disk_total" => total,
                    _ if total == 0.0 => 0.0,
                    _ => used / total * 100.0,
                })
            }
            "network_in" | "network_out" => {
                s.refresh_networks_list();
                s.refresh_networks();
                let total: u64 = s
                    .networks()
                    .iter()
                    .map(|(_, data)| {
                        if name == "network_in" {
                            data.total_received()
                        } else {
                            data.total_transmitted()
                        }
                    })
                    .sum();
                Ok(total as f64)
            }
            "process_count" => {
                s.refresh_processes();
                Ok(s.processes().len() as f64)
            }
            "load_average" => Ok(s.load_average().one),
            other => Err(format!("unknown metric: {}", other)),
        }
    }
}
"""

UPDATER = """
/// Supplies system metric values to the updater.
pub trait MetricSource: Send {
    fn get_metric(&mut self, name: &str) -> Result<f64, String>;
}

/// The widget-facing value of a cache entry; error entries yield None.
fn extract_value(entry: &Map<String, Value>) -> Option<Value> {
    if entry.contains_key("error") {
        return None;
    }
    VALUE_KEYS
        .iter()
        .filter_map(|key| entry.get(*key))
        .find(|value| !value.is_null())
        .cloned()
}

fn error_entry(message: String) -> Map<String, Value> {
    let mut entry = Map::new();
    entry.insert("error".into(), Value::String(message));
    entry
}

/// Fetches data sources and caches the latest entry per source id.
///
/// Polled sources are fetched at most once per interval. File sources are
/// re-read only when their modification time changes.
pub struct DataSourceUpdater {
    sources: Vec<(&'static str, SourceConfig)>,
    metrics: Option<Box<dyn MetricSource>>,
    client: reqwest::blocking::Client,
    cache: HashMap<String, Map<String, Value>>,
    last_update: HashMap<String, Instant>,
    file_mtimes: HashMap<String, SystemTime>,
}

impl DataSourceUpdater {
    pub fn new(sources: Vec<(&'static str, SourceConfig)>, metrics: Option<Box<dyn MetricSource>>) -> Self {
        let client = reqwest::blocking::Client::builder()
            .timeout(HTTP_TIMEOUT)
            .build()
            .unwrap_or_else(|_| reqwest::blocking::Client::new());
        Self {
            sources,
            metrics,
            client,
            cache: HashMap::new(),
            last_update: HashMap::new(),
            file_mtimes: HashMap::new(),
        }
    }

    /// Refresh every due source and return fresh values by source id.
    pub fn update_all(&mut self) -> HashMap<String, Value> {
        let mut fresh = HashMap::new();
        for index in 0..self.sources.len() {
            let id = self.sources[index].0;
            if self.update_source(index) {
                if let Some(value) = self.cache.get(id).and_then(extract_value) {
                    fresh.insert(id.to_string(), value);
                }
            }
        }
        fresh
    }

    pub fn get_data(&self, id: &str) -> Option<&Map<String, Value>> {
        self.cache.get(id)
    }

    fn update_source(&mut self, index: usize) -> bool {
        let (id, config) = self.sources[index].clone();
        if let SourceConfig::File { path, watch } = config {
            return self.update_file(id, path, watch);
        }
        let now = Instant::now();
        if let Some(last) = self.last_update.get(id) {
            match config.interval() {
                None => return false,
                Some(interval) if now.duration_since(*last) < interval => return false,
                _ => {}
            }
        }
        self.last_update.insert(id.to_string(), now);
        let mut entry = match self.fetch(&config) {
            Ok(entry) => entry,
            Err(err) => {
                log_error(&format!("data source {} failed: {}", id, err));
                error_entry(err)
            }
        };
        entry.insert("timestamp".into(), json!(unix_time()));
        self.cache.insert(id.to_string(), entry);
        true
    }

    fn fetch(&mut self, config: &SourceConfig) -> Result<Map<String, Value>, String> {
        let mut entry = Map::new();
        match config {
            SourceConfig::Static { value } => {
                entry.insert("value".into(), value.clone());
            }
            SourceConfig::SystemMetric { metric, .. } => {
                let collector = self.metrics.as_mut().ok_or("no metrics collector")?;
                entry.insert("value".into(), json!(collector.get_metric(metric)?));
            }
            SourceConfig::Api { url, method, headers, .. } => {
                let method = reqwest::Method::from_bytes(method.as_bytes()).map_err(|e| e.to_string())?;
                let mut request = self.client.request(method, *url);
                for (key, value) in headers {
                    request = request.header(*key, *value);
                }
                let response = request.send().map_err(|e| e.to_string())?;
                let status = response.status().as_u16();
                let text = response.text().map_err(|e| e.to_string())?;
                let body = match serde_json::from_str::<Value>(&text) {
                    Ok(body) => body,
                    Err(_) => Value::String(text),
                };
                entry.insert("data".into(), body);
                entry.insert("status_code".into(), json!(status));
            }
            SourceConfig::Command { command, .. } => {
                let (output, stderr, code) = run_command(command)?;
                entry.insert("output".into(), json!(output.trim()));
                entry.insert("stderr".into(), json!(stderr.trim()));
                entry.insert("return_code".into(), json!(code));
            }
            SourceConfig::File { .. } => return Err("file sources are read by update_file".into()),
        }
        Ok(entry)
    }

    fn update_file(&mut self, id: &'static str, path: &'static str, watch: bool) -> bool {
        let outcome = match fs::metadata(path).and_then(|meta| meta.modified()) {
            Ok(mtime) => {
                if let Some(previous) = self.file_mtimes.get(id) {
                    if *previous == mtime || !watch {
                        return false;
                    }
                }
                fs::read_to_string(path).map(|content| (mtime, content))
            }
            Err(err) => Err(err),
        };
        let mut entry = match outcome {
            Ok((mtime, content)) => {
                self.file_mtimes.insert(id.to_string(), mtime);
                let mut entry = Map::new();
                entry.insert("content".into(), Value::String(content));
                entry.insert("file_path".into(), json!(path));
                entry
            }
            Err(err) => {
                if self.cache.get(id).map_or(false, |cached| cached.contains_key("error")) {
                    return false;
                }
                let message = format!("{}: {}", path, err);
                log_error(&format!("data source {} failed: {}", id, message));
                error_entry(message)
            }
        };
        entry.insert("timestamp".into(), json!(unix_time()));
        self.cache.insert(id.to_string(), entry);
        true
    }
}

/// Run a shell command, killing it once COMMAND_TIMEOUT has passed.
fn run_command(command: &str) -> Result<(String, String, i32), String> {
    let mut child = Command::new("sh")
        .arg("-c")
        .arg(command)
        .stdout(Stdio::piped())
        .stderr(Stdio::piped())
        .spawn()
        .map_err(|e| e.to_string())?;
    let stdout = child.stdout.take();
    let stderr = child.stderr.take();
    let out_reader = thread::spawn(move || {
        let mut text = String::new();
        if let Some(mut pipe) = stdout {
            let _ = pipe.read_to_string(&mut text);
        }
        text
    });
    let err_reader = thread::spawn(move || {
        let mut text = String::new();
        if let Some(mut pipe) = stderr {
            let _ = pipe.read_to_string(&mut text);
        }
        text
    });
    let started = Instant::now();
    let status = loop {
        if let Some(status) = child.try_wait().map_err(|e| e.to_string())? {
            break status;
        }
        if started.elapsed() >= COMMAND_TIMEOUT {
            let _ = child.kill();
            let _ = child.wait();
            return Err(format!("command timed out after {}s", COMMAND_TIMEOUT.as_secs()));
        }
        thread::sleep(Duration::from_millis(50));
    };
    let output = out_reader.join().unwrap_or_default();
    let errors = err_reader.join().unwrap_or_default();
    Ok((output, errors, status.code().unwrap_or(-1)))
}
"""


def rust_json(value: Any) -> str:
    """``serde_json::json!`` invocation for JSON-like data."""
    return f"json!({json.dumps(value, ensure_ascii=False)})"


def _variant(config: Any) -> str:
    if isinstance(config, StaticConfig):
        return f"SourceConfig::Static {{ value: {rust_json(config.value)} }}"
    interval = f"Duration::from_millis({getattr(config, 'interval', 0)})"
    if isinstance(config, SystemMetricConfig):
        return f"SourceConfig::SystemMetric {{ metric: {rust_str(config.metric.value)}, interval: {interval} }}"
    if isinstance(config, ApiConfig):
        headers = ", ".join(
            f"({rust_str(k)}, {rust_str(v)})" for k, v in (config.headers or {}).items()
        )
        return (
            f"SourceConfig::Api {{ url: {rust_str(config.url)}, method: {rust_str(config.method.value)}, "
            f"headers: vec![{headers}], interval: {interval} }}"
        )
    if isinstance(config, FileConfig):
        watch = "true" if config.watch else "false"
        return f"SourceConfig::File {{ path: {rust_str(config.path)}, watch: {watch} }}"
    assert isinstance(config, CommandConfig)
    return f"SourceConfig::Command {{ command: {rust_str(config.command)}, interval: {interval} }}"


def generate_source_table(design: Design) -> str:
    """``data_source_configs`` returning every source in design order."""
    lines = ["pub fn data_source_configs() -> Vec<(&'static str, SourceConfig)> {", "    vec!["]
    for source in design.referenced_data_sources:
        lines.append(f"        ({rust_str(source.id)}, {_variant(source.config)}),")
    lines += ["    ]", "}"]
    return "\n".join(lines)


def generate_data_sources(design: Design, include_comments: bool = True) -> str:
    """Constants, source table, collector (if needed) and updater."""
    keys = ", ".join(rust_str(k) for k in bh.VALUE_KEYS)
    constants = [
        f"const HTTP_TIMEOUT: Duration = Duration::from_secs({bh.HTTP_TIMEOUT_SECONDS});",
        f"const COMMAND_TIMEOUT: Duration = Duration::from_secs({bh.COMMAND_TIMEOUT_SECONDS});",
        f"const VALUE_KEYS: [&str; {len(bh.VALUE_KEYS)}] = [{keys}];",
    ]
    if include_comments:
        constants.insert(0, "// Data sources")
    parts = ["\n".join(constants), SOURCE_TYPES.strip("\n"), generate_source_table(design)]
    parts.append(UPDATER.strip("\n"))
    if design.uses_system_metrics():
        parts.append(METRICS_COLLECTOR.strip("\n"))
    return "\n\n".join(parts)
