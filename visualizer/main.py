"""Render the transition tables of one or more classes as a Graphviz graph.

Example::

    visualize-state-machine -class app.jobs.JobImpl,app.tasks.Task \\
        -graphName Overview -outputFile docs/states.gv
"""
from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import AbstractSet, Iterable, List, NoReturn, Optional, Sequence, Set

from common.config import VisualizerSettings, load_settings
from common.logging import configure_logging, get_logger
from visualizer.registry import ResolvedStateMachine, load_plugins, resolve_state_machine
from visualizer.state_machine import StateGraph

LOGGER = get_logger(__name__)

PROG = "visualize-state-machine"


@dataclass(frozen=True)
class OptionSpec:
    flag: str
    dest: str
    metavar: str
    help: str
    required: bool = False
    multi: bool = False


OPTIONS: List[OptionSpec] = [
    OptionSpec("-graphName", "graph_name", "<GraphName>", "title in gv"),
    OptionSpec("-class", "classes", "<class[,class[,...]]>", "class list", required=True, multi=True),
    OptionSpec("-outputFile", "output_file", "<OutputFile>", "output file", required=True),
    OptionSpec("-preState", "pre_states", "<preState[,preState[,...]]>", "preState", multi=True),
    OptionSpec("-postState", "post_states", "<postState[,postState[,...]]>", "postState", multi=True),
    OptionSpec("-implSuffix", "impl_suffix", "<Suffix>", "suffix stripped from subgraph names"),
    OptionSpec("-config", "config", "<ConfigFile>", "YAML settings file"),
]


def usage_synopsis(options: Iterable[OptionSpec] = OPTIONS) -> str:
    parts = []
    for option in options:
        if option.required:
            parts.append(f"<{option.flag} {option.metavar}>")
        else:
            parts.append(f"[{option.flag} {option.metavar}]")
    return " ".join(parts)


class UsageArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports bad input with the option synopsis and status 1."""

    def error(self, message: str) -> NoReturn:
        sys.stderr.write(f"Usage: {self.prog} {usage_synopsis()}\n")
        sys.stderr.write(f"{self.prog}: error: {message}\n")
        raise SystemExit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = UsageArgumentParser(
        prog=PROG,
        usage=f"%(prog)s {usage_synopsis()}",
        description="Render state machine transition tables as a Graphviz graph",
        allow_abbrev=False,
    )
    for option in OPTIONS:
        kwargs = {
            "dest": option.dest,
            "metavar": option.metavar,
            "help": option.help,
            "required": option.required,
        }
        if option.multi:
            kwargs.update(action="extend", nargs="+")
        parser.add_argument(option.flag, **kwargs)
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def split_values(values: Optional[Iterable[str]]) -> List[str]:
    """Split comma-separated values, dropping blanks and keeping order."""

    result: List[str] = []
    for value in values or []:
        for item in value.split(","):
            item = item.strip()
            if item:
                result.append(item)
    return result


def to_state_set(values: Optional[Iterable[str]]) -> Set[str]:
    return set(split_values(values))


def subgraph_name(simple_name: str, impl_suffix: str) -> str:
    if impl_suffix and simple_name.endswith(impl_suffix) and simple_name != impl_suffix:
        return simple_name[: -len(impl_suffix)]
    return simple_name


def get_graph_from_classes(
    graph_name: str,
    classes: Sequence[str],
    start_states: AbstractSet[str],
    post_states: AbstractSet[str],
    *,
    settings: Optional[VisualizerSettings] = None,
) -> StateGraph:
    """Build one graph for ``classes``.

    A single class yields its own graph named ``graph_name``. Several classes
    yield a graph named ``graph_name`` holding one subgraph per class, in the
    given order.
    """

    if not classes:
        raise ValueError("At least one class is required")
    settings = settings or VisualizerSettings()
    machines: List[ResolvedStateMachine] = [
        resolve_state_machine(class_ref, field_name=settings.factory_field) for class_ref in classes
    ]
    if len(machines) == 1:
        return machines[0].factory.generate_state_graph(graph_name, start_states, post_states)

    graph = StateGraph(graph_name)
    for machine in machines:
        name = subgraph_name(machine.simple_name, settings.impl_suffix)
        LOGGER.debug("Adding subgraph %s for %s", name, machine.class_ref)
        graph.add_sub_graph(machine.factory.generate_state_graph(name, start_states, post_states))
    return graph


def run(argv: Optional[Sequence[str]] = None) -> Path:
    args = parse_args(argv)
    settings = load_settings(args.config, impl_suffix=args.impl_suffix)
    configure_logging(settings.log_level)
    load_plugins(settings.plugins)

    classes = split_values(args.classes)
    if not classes:
        build_parser().error("-class needs at least one non-blank class name")
    graph = get_graph_from_classes(
        args.graph_name or "",
        classes,
        to_state_set(args.pre_states),
        to_state_set(args.post_states),
        settings=settings,
    )
    return graph.save(args.output_file)


def main(argv: Optional[Sequence[str]] = None) -> int:
    run(argv)
    return 0


if __name__ == "__main__":
    sys.exit(main())
