from __future__ import annotations

from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from plant_catalog.domain.models import Plant
from plant_catalog.sorting import sort_positions


def plants_to_rows(plants: Sequence[Plant], custom_sort_order: Sequence[str]) -> List[List[str]]:
    """
    Build table rows for `plants` in their given order.

    The "Rank" column shows the plant's position in the custom sort order
    (1-based) or "-" when the plant is not ranked.
    """
    positions = sort_positions(custom_sort_order)
    rows: List[List[str]] = []
    for index, plant in enumerate(plants, start=1):
        position = positions.get(plant.plant_id)
        rows.append(
            [
                str(index),
                "-" if position is None else str(position + 1),
                plant.plant_id,
                plant.name,
                str(plant.grow_zone_number),
                f"{plant.watering_interval}d",
            ]
        )
    return rows


def print_plants(
    plants: Sequence[Plant],
    custom_sort_order: Sequence[str],
    title: str = "Plants",
    console: Optional[Console] = None,
) -> None:
    """
    Render a custom-sorted plant list as a rich table.
    """
    console = console or Console()

    if not plants:
        console.print("[yellow]No plants to display. Run `plant-catalog refresh` first.[/yellow]")
        return

    caption = (
        f"{len(custom_sort_order)} ranked ids"
        if custom_sort_order
        else "No custom sort order available; sorted by name"
    )
    table = Table(title=title, box=box.ROUNDED, caption=caption)

    table.add_column("#", justify="right", style="dim")
    table.add_column("Rank", justify="right", style="magenta")
    table.add_column("Plant ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold green")
    table.add_column("Zone", justify="right", style="blue")
    table.add_column("Watering", justify="right", style="yellow")

    for row in plants_to_rows(plants, custom_sort_order):
        table.add_row(*row)

    console.print(table)


__all__ = ["plants_to_rows", "print_plants"]
