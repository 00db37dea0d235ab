"""
Bubble Tea (Go) data source generation.

Emits the ``SourceConfig`` table, a gopsutil metrics collector when the
design samples system metrics, and a mutex-guarded ``DataSourceUpdater``.
``UpdateAll`` runs inside a ``tea.Cmd`` so network and command I/O never
block the update loop.
"""

from __future__ import annotations

from typing import Any

from tuidesigner.codegen import behavior as bh
from tuidesigner.codegen.utils import go_str, number_literal, tab_indent
from tuidesigner.core.ir import (
    ApiConfig,
    CommandConfig,
    Design,
    FileConfig,
    StaticConfig,
    SystemMetricConfig,
)

METRICS_COLLECTOR = """
// SystemMetricsCollector samples host metrics with gopsutil.
type SystemMetricsCollector struct{}

func NewSystemMetricsCollector() *SystemMetricsCollector {
    return &SystemMetricsCollector{}
}

func (c *SystemMetricsCollector) GetMetric(name string) (float64, error) {
    switch name {
    case "cpu_percent":
        percents, err := cpu.Percent(0, false)
        if err != nil {
            return 0, err
        }
        if len(percents) == 0 {
            return 0, fmt.Errorf("no cpu samples")
        }
        return percents[0], nil
    case "memory_percent", "memory_used", "memory_total":
        vm, err := mem.VirtualMemory()
        if err != nil {
            return 0, err
        }
        switch name {
        case "memory_used":
            return float64(vm.Used), nil
        case "memory_total":
            return float64(vm.Total), nil
        }
        return vm.UsedPercent, nil
    case "disk_percent", "disk_used", "disk_total":
        usage, err := disk.Usage("/")
        if err != nil {
            return 0, err
        }
        switch name {
        case "disk_used":
            return float64(usage.Used), nil
        case "disk_total":
            return float64(usage.Total), nil
        }
        return usage.UsedPercent, nil
    case "network_in", "network_out":
        counters, err := psnet.IOCounters(false)
        if err != nil {
            return 0, err
        }
        if len(counters) == 0 {
            return 0, fmt.Errorf("no network counters")
        }
        if name == "network_in" {
            return float64(counters[0].BytesRecv), nil
        }
        return float64(counters[0].BytesSent), nil
    case "process_count":
        pids, err := process.Pids()
        if err != nil {
            return 0, err
        }
        return float64(len(pids)), nil
    case "load_average":
        avg, err := load.Avg()
        if err != nil {
            return 0, err
        }
        return avg.Load1, nil
    }
    return 0, fmt.Errorf("unknown metric: %s", name)
}
"""

UPDATER = """
// MetricSource supplies system metric values to the updater.
type MetricSource interface {
    GetMetric(name string) (float64, error)
}

// extractValue returns the widget-facing value of a cache entry.
// Error entries yield nothing.
func extractValue(entry map[string]interface{}) (interface{}, bool) {
    if entry == nil {
        return nil, false
    }
    if _, failed := entry["error"]; failed {
        return nil, false
    }
    for _, key := range valueKeys {
        if value, ok := entry[key]; ok && value != nil {
            return value, true
        }
    }
    return nil, false
}

// DataSourceUpdater fetches data sources and caches the latest entry per
// source id. Polled sources are fetched at most once per interval; file
// sources are re-read only when their modification time changes.
type DataSourceUpdater struct {
    mu         sync.Mutex
    sources    []NamedSource
    metrics    MetricSource
    client     *http.Client
    cache      map[string]map[string]interface{}
    lastUpdate map[string]time.Time
    fileMtimes map[string]time.Time
}

func NewDataSourceUpdater(sources []NamedSource, metrics MetricSource) *DataSourceUpdater {
    return &DataSourceUpdater{
        sources:    sources,
        metrics:    metrics,
        client:     &http.Client{Timeout: httpTimeout},
        cache:      map[string]map[string]interface{}{},
        lastUpdate: map[string]time.Time{},
        fileMtimes: map[string]time.Time{},
    }
}

// UpdateAll refreshes every due source and returns fresh values by source id.
func (u *DataSourceUpdater) UpdateAll() map[string]interface{} {
    u.mu.Lock()
    defer u.mu.Unlock()
    fresh := map[string]interface{}{}
    for _, source := range u.sources {
        if u.updateSource(source) {
            if value, ok := extractValue(u.cache[source.ID]); ok {
                fresh[source.ID] = value
            }
        }
    }
    return fresh
}

// GetData returns the cached entry for a source, if any.
func (u *DataSourceUpdater) GetData(id string) map[string]interface{} {
    u.mu.Lock()
    defer u.mu.Unlock()
    return u.cache[id]
}

func (u *DataSourceUpdater) updateSource(source NamedSource) bool {
    cfg := source.Config
    if cfg.Type == "file" {
        return u.updateFile(source.ID, cfg)
    }
    now := time.Now()
    if last, ok := u.lastUpdate[source.ID]; ok {
        if cfg.Type == "static" || now.Sub(last) < cfg.Interval {
            return false
        }
    }
    u.lastUpdate[source.ID] = now
    entry, err := u.fetch(cfg)
    if err != nil {
        log.Printf("data source %s failed: %v", source.ID, err)
        entry = map[string]interface{}{"error": err.Error()}
    }
    entry["timestamp"] = now.Unix()
    u.cache[source.ID] = entry
    return true
}

func (u *DataSourceUpdater) fetch(cfg SourceConfig) (map[string]interface{}, error) {
    switch cfg.Type {
    case "static":
        return map[string]interface{}{"value": cfg.Value}, nil
    case "system_metric":
        if u.metrics == nil {
            return nil, fmt.Errorf("no metrics collector")
        }
        value, err := u.metrics.GetMetric(cfg.Metric)
        if err != nil {
            return nil, err
        }
        return map[string]interface{}{"value": value}, nil
    case "api":
        return u.fetchAPI(cfg)
    case "command":
        return u.runCommand(cfg)
    }
    return nil, fmt.Errorf("unknown data source type: %s", cfg.Type)
}

func (u *DataSourceUpdater) fetchAPI(cfg SourceConfig) (map[string]interface{}, error) {
    req, err := http.NewRequest(cfg.Method, cfg.URL, nil)
    if err != nil {
        return nil, err
    }
    for key, value := range cfg.Headers {
        req.Header.Set(key, value)
    }
    resp, err := u.client.Do(req)
    if err != nil {
        return nil, err
    }
    defer resp.Body.Close()
    raw, err := io.ReadAll(resp.Body)
    if err != nil {
        return nil, err
    }
    var body interface{}
    if err := json.Unmarshal(raw, &body); err != nil {
        body = string(raw)
    }
    return map[string]interface{}{"data": body, "status_code": resp.StatusCode}, nil
}

func (u *DataSourceUpdater) runCommand(cfg SourceConfig) (map[string]interface{}, error) {
    ctx, cancel := context.WithTimeout(context.Background(), commandTimeout)
    defer cancel()
    cmd := exec.CommandContext(ctx, "sh", "-c", cfg.Command)
    var stdout, stderr bytes.Buffer
    cmd.Stdout = &stdout
    cmd.Stderr = &stderr
    err := cmd.Run()
    if ctx.Err() != nil {
        return nil, fmt.Errorf("command timed out after %s", commandTimeout)
    }
    code := 0
    if err != nil {
        var exitErr *exec.ExitError
        if !errors.As(err, &exitErr) {
            return nil, err
        }
        code = exitErr.ExitCode()
    }
    return map[string]interface{}{
        "output":      strings.TrimSpace(stdout.String()),
        "stderr":      strings.TrimSpace(stderr.String()),
        "return_code": code,
    }, nil
}

func (u *DataSourceUpdater) updateFile(id string, cfg SourceConfig) bool {
    info, err := os.Stat(cfg.Path)
    if err == nil {
        previous, seen := u.fileMtimes[id]
        if seen && (info.ModTime().Equal(previous) || !cfg.Watch) {
            return false
        }
        var content []byte
        content, err = os.ReadFile(cfg.Path)
        if err == nil {
            u.fileMtimes[id] = info.ModTime()
            u.cache[id] = map[string]interface{}{
                "content":   string(content),
                "file_path": cfg.Path,
                "timestamp": time.Now().Unix(),
            }
            return true
        }
    }
    if _, failed := u.cache[id]["error"]; failed {
        return false
    }
    log.Printf("data source %s failed: %v", id, err)
    u.cache[id] = map[string]interface{}{"error": err.Error(), "timestamp": time.Now().Unix()}
    return true
}
"""

SOURCE_TYPES = """
// SourceConfig describes one data source. Interval is zero for static
// and file sources.
type SourceConfig struct {
    Type     string
    Value    interface{}
    Metric   string
    URL      string
    Method   string
    Headers  map[string]string
    Path     string
    Watch    bool
    Command  string
    Interval time.Duration
}

// NamedSource pairs a source id with its config.
type NamedSource struct {
    ID     string
    Config SourceConfig
}
"""


def go_value(value: Any) -> str:
    """Go literal for JSON-like data, typed the way encoding/json decodes it."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return number_literal(value)
    if isinstance(value, str):
        return go_str(value)
    if isinstance(value, list):
        return "[]interface{}{" + ", ".join(go_value(v) for v in value) + "}"
    if isinstance(value, dict):
        items = ", ".join(f"{go_str(str(k))}: {go_value(v)}" for k, v in value.items())
        return "map[string]interface{}{" + items + "}"
    return go_str(str(value))


def _source_fields(config: Any) -> list[str]:
    fields = [f"Type: {go_str(config.type)}"]
    if isinstance(config, StaticConfig):
        fields.append(f"Value: {go_value(config.value)}")
    elif isinstance(config, SystemMetricConfig):
        fields.append(f"Metric: {go_str(config.metric.value)}")
    elif isinstance(config, ApiConfig):
        fields.append(f"URL: {go_str(config.url)}")
        fields.append(f"Method: {go_str(config.method.value)}")
        if config.headers:
            headers = ", ".join(f"{go_str(k)}: {go_str(v)}" for k, v in config.headers.items())
            fields.append(f"Headers: map[string]string{{{headers}}}")
    elif isinstance(config, FileConfig):
        fields.append(f"Path: {go_str(config.path)}")
        fields.append(f"Watch: {'true' if config.watch else 'false'}")
    elif isinstance(config, CommandConfig):
        fields.append(f"Command: {go_str(config.command)}")
    interval = getattr(config, "interval", None)
    if interval:
        fields.append(f"Interval: {interval} * time.Millisecond")
    return fields


def generate_source_table(design: Design) -> str:
    """``dataSourceConfigs`` function returning every source in design order."""
    lines = ["func dataSourceConfigs() []NamedSource {", "    return []NamedSource{"]
    for source in design.referenced_data_sources:
        fields = ", ".join(_source_fields(source.config))
        lines.append(f"        {{ID: {go_str(source.id)}, Config: SourceConfig{{{fields}}}}},")
    lines += ["    }", "}"]
    return "\n".join(lines)


def generate_data_sources(design: Design, include_comments: bool = True) -> str:
    """Constants, source table, collector (if needed) and updater."""
    constants = [
        "const (",
        f"    httpTimeout    = {bh.HTTP_TIMEOUT_SECONDS} * time.Second",
        f"    commandTimeout = {bh.COMMAND_TIMEOUT_SECONDS} * time.Second",
        ")",
        "",
        "var valueKeys = []string{" + ", ".join(go_str(k) for k in bh.VALUE_KEYS) + "}",
    ]
    if include_comments:
        constants.insert(0, "// Data sources")
    parts = ["\n".join(constants), SOURCE_TYPES.strip("\n"), generate_source_table(design)]
    if design.uses_system_metrics():
        parts.append(METRICS_COLLECTOR.strip("\n"))
    parts.append(UPDATER.strip("\n"))
    return tab_indent("\n\n".join(parts))
