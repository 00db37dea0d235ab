"""
Target runtime adapters.

Each adapter generates a runnable dashboard project for one Framework:

- textual: Python, Textual widgets and psutil
- bubble_tea: Go, Bubble Tea with Lip Gloss and gopsutil
- ratatui: Rust, Ratatui over crossterm with sysinfo
- blessed: Node.js, blessed boxes with systeminformation

``ADAPTERS`` maps every Framework to its adapter class and is checked
when this module is imported, so adding a Framework without an adapter
fails immediately.
"""

from tuidesigner.codegen.generator import FrameworkAdapter
from tuidesigner.core.ir import Framework

from .blessed_impl import BlessedAdapter
from .bubbletea_impl import BubbleTeaAdapter
from .ratatui_impl import RatatuiAdapter
from .textual_impl import TextualAdapter

ADAPTERS: dict[Framework, type[FrameworkAdapter]] = {
    Framework.TEXTUAL: TextualAdapter,
    Framework.BUBBLE_TEA: BubbleTeaAdapter,
    Framework.RATATUI: RatatuiAdapter,
    Framework.BLESSED: BlessedAdapter,
}

_missing = set(Framework) - set(ADAPTERS)
if _missing:
    raise RuntimeError(
        f"No adapter for framework(s): {', '.join(sorted(f.value for f in _missing))}"
    )

for _framework, _adapter in ADAPTERS.items():
    if _adapter.framework is not _framework:
        raise RuntimeError(f"{_adapter.__name__} is registered under {_framework.value}")


def create_adapters() -> list[FrameworkAdapter]:
    """One instance of every adapter, in Framework order."""
    return [ADAPTERS[framework]() for framework in Framework]


def get_adapter_class(framework: Framework | str) -> type[FrameworkAdapter]:
    return ADAPTERS[Framework(framework)]


__all__ = [
    "ADAPTERS",
    "BlessedAdapter",
    "BubbleTeaAdapter",
    "RatatuiAdapter",
    "TextualAdapter",
    "create_adapters",
    "get_adapter_class",
]
