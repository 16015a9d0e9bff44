"""Output helpers: saving surfaces and showing them interactively."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict

from spiral_lab.core.scheduler import FrameLoop
from spiral_lab.visualization.surface import RasterSurface

FRAME_INTERVAL_MS = 16


def save_surface(surface: RasterSurface, path: str | Path) -> Path:
    """Save a surface as an image file (format taken from the extension)."""
    path = Path(path)
    surface.save(path)
    return path


def show_interactive(
    loop: FrameLoop,
    get_surface: Callable[[], RasterSurface | None],
    get_status: Callable[[], str],
    title: str = "",
    key_bindings: Dict[str, Callable[[], None]] | None = None,
    interval: int = FRAME_INTERVAL_MS,
) -> None:
    """Show a surface in a matplotlib window, ticking the loop from a GUI timer.

    Each timer tick advances the frame loop by one frame and refreshes the
    displayed image and status line. Keys in key_bindings trigger the mapped
    callbacks.
    """
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=(8, 8))
    ax.axis("off")
    artist = None
    key_bindings = key_bindings or {}

    def refresh() -> None:
        nonlocal artist
        loop.tick()
        surface = get_surface()
        if surface is None:
            return
        data = surface.to_array()
        if artist is None or artist.get_array().shape != data.shape:
            ax.clear()
            ax.axis("off")
            artist = ax.imshow(data, interpolation="nearest")
        else:
            artist.set_data(data)
        ax.set_title(f"{title}  {get_status()}".strip())
        fig.canvas.draw_idle()

    def on_key(event) -> None:
        callback = key_bindings.get(event.key)
        if callback is not None:
            callback()

    fig.canvas.mpl_connect("key_press_event", on_key)
    timer = fig.canvas.new_timer(interval=interval)
    timer.add_callback(refresh)
    timer.start()
    plt.show()
    timer.stop()
