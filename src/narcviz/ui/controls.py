# src/narcviz/ui/controls.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from narcengine.reference import MENU_GROUPS, ROUTES, substances_by_menu_group

BANNER = r"""
.##....##....###....########...######..########..########.########.########..######..########
.###...##...##.##...##.....##.##....##.##.....##.##..........##....##.......##....##....##...
.####..##..##...##..##.....##.##.......##.....##.##..........##....##.......##..........##...
.##.##.##.##.....##.########..##.......##.....##.######......##....######...##..........##...
.##..####.#########.##...##...##.......##.....##.##..........##....##.......##..........##...
.##...###.##.....##.##....##..##....##.##.....##.##..........##....##.......##....##....##...
.##....##.##.....##.##.....##..######..########..########....##....########..######.....##...

====================================================================
NARCDETECT - Drug Detection Time Calculator
FOR ORAL FLUID (SALIVA) AND URINE TESTING
====================================================================

ESTIMATES TIME UNTIL NON-DETECTABLE
BASED ON PHARMACOKINETIC PARAMETERS
INCLUDES CHRONIC USE ACCUMULATION
AND ROUTES OF ADMINISTRATION
WITH NMR SPECTRUM SIMULATION
"""

COLUMN_WIDTH = 23
GROUPS_PER_ROW = 3


@dataclass
class SessionRequest:
    """What one run needs; anything left None is asked for interactively."""
    substance: Optional[str] = None
    route: Optional[str] = None
    dose_mg: Optional[int] = None
    weight_kg: Optional[int] = None
    age_years: Optional[int] = None
    metabolism: Optional[int] = None
    duration_h: Optional[float] = None
    spectrum: Optional[bool] = None


def substance_menu() -> str:
    groups = substances_by_menu_group()
    lines = ["AVAILABLE DRUGS BY TYPE:", "=" * 68]
    for start in range(0, len(MENU_GROUPS), GROUPS_PER_ROW):
        heads = MENU_GROUPS[start:start + GROUPS_PER_ROW]
        lines.append("".join(f"{h + ':':<{COLUMN_WIDTH}}" for h in heads).rstrip())
        lines.append("")
        depth = max(len(groups[h]) for h in heads)
        for i in range(depth):
            cells = []
            for h in heads:
                names = [p.name for p in groups[h]]
                cells.append(f"  {names[i]:<{COLUMN_WIDTH - 2}}" if i < len(names) else " " * COLUMN_WIDTH)
            lines.append("".join(cells).rstrip())
        lines.append("")
    lines.append("=" * 68)
    return "\n".join(lines)


def route_menu() -> str:
    names = [r.name for r in ROUTES.values()]
    rows = [", ".join(names[i:i + 3]) for i in range(0, len(names), 3)]
    return "AVAILABLE ROUTES OF ADMINISTRATION:\n" + ",\n".join(rows)


class ControlsPanel:
    """
    Interactive prompts. read/write default to input/print; tests pass
    their own callables.
    """

    def __init__(self, read: Callable[[str], str] = input, write: Callable[[str], None] = print):
        self.read = read
        self.write = write

    def show_banner(self) -> None:
        self.write(BANNER)

    def ask_substance(self) -> str:
        self.write(substance_menu())
        return self.read("Enter drug name: ")

    def ask_route(self) -> str:
        self.write(route_menu())
        return self.read("Enter route of administration: ")

    def ask_int(self, prompt: str) -> int:
        return int(self.read(prompt).strip())

    def ask_float(self, prompt: str) -> float:
        return float(self.read(prompt).strip())

    def ask_yes_no(self, prompt: str) -> bool:
        answer = self.read(prompt).strip()
        return answer[:1].upper() == "Y"

    def complete(self, req: SessionRequest) -> SessionRequest:
        """Fill in the numeric fields and the spectrum answer that are still missing."""
        if req.dose_mg is None:
            req.dose_mg = self.ask_int("Enter dosage in mg: ")
        if req.weight_kg is None:
            req.weight_kg = self.ask_int("Enter body weight in kg: ")
        if req.age_years is None:
            req.age_years = self.ask_int("Enter age in years: ")
        if req.metabolism is None:
            req.metabolism = self.ask_int("Metabolism rate (1=SLOW, 2=NORMAL, 3=FAST): ")
        if req.duration_h is None:
            req.duration_h = self.ask_float("Duration of use in hours (24.0=1 day): ")
        return req
