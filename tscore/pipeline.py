"""
Minimal in-process pipeline.

Stands in for a host DAG engine so blocks can be composed and exercised:
named block instances, directed edges, execution in topological order and
re-execution of downstream nodes when an option changes.
"""

import logging
from graphlib import CycleError, TopologicalSorter
from typing import Dict, List, Optional, Union

import pandas as pd

from tscore.errors import TsBlockError
from tscore.instance import BlockInstance
from tsblocks.base_block import TsBlock

logger = logging.getLogger(__name__)


class Pipeline:
    """
    Directed acyclic graph of block instances.

    Multi-input blocks receive every upstream output as a mapping of node
    name to frame; other blocks take exactly one upstream node.
    """

    def __init__(self, registry=None):
        self.registry = registry
        self.nodes: Dict[str, BlockInstance] = {}
        self.edges: Dict[str, List[str]] = {}
        self._propagating = False

    def add(self, name: str, block: Union[str, TsBlock, BlockInstance], **options) -> BlockInstance:
        """
        Add a node from a registry identifier, a block or a ready instance.

        Raises:
            ValueError: if the name is taken
        """
        if name in self.nodes:
            raise ValueError(f"Node '{name}' already exists")
        if isinstance(block, BlockInstance):
            instance = block
        elif isinstance(block, TsBlock):
            instance = BlockInstance(block, options, name=name)
        else:
            if self.registry is None:
                raise ValueError("Adding blocks by identifier needs a registry")
            instance = self.registry.construct(block, name=name, **options)

        self.nodes[name] = instance
        self.edges[name] = []
        instance.on_output(lambda frame, generation, node=name: self._on_output(node))
        return instance

    def connect(self, source: str, target: str) -> None:
        """
        Feed the output of ``source`` into ``target``.

        Raises:
            ValueError: for unknown nodes, a second input to a single-input
                block, or an edge that closes a cycle
        """
        for node in (source, target):
            if node not in self.nodes:
                raise ValueError(f"Unknown node '{node}'")
        target_block = self.nodes[target].block
        if target_block.is_source:
            raise ValueError(f"Node '{target}' is a source and takes no input")
        if self.edges[target] and not target_block.multi_input:
            raise ValueError(f"Node '{target}' already has an input")

        self.edges[target].append(source)
        try:
            self.order()
        except CycleError as e:
            self.edges[target].remove(source)
            raise ValueError(f"Connecting {source} to {target} creates a cycle") from e

    def order(self) -> List[str]:
        """Node names with every node after its inputs."""
        graph = {node: set(sources) for node, sources in self.edges.items()}
        return list(TopologicalSorter(graph).static_order())

    def upstream(self, name: str):
        sources = self.edges[name]
        if not sources:
            return None
        if self.nodes[name].block.multi_input:
            frames = {source: self.nodes[source].output for source in sources
                      if self.nodes[source].output is not None}
            return frames or None
        return self.nodes[sources[0]].output

    def downstream(self, name: str) -> List[str]:
        """Nodes fed directly or indirectly by ``name``, in execution order."""
        reached = {name}
        for node in self.order():
            if any(source in reached for source in self.edges[node]):
                reached.add(node)
        reached.discard(name)
        return [node for node in self.order() if node in reached]

    def run(self) -> Dict[str, Optional[pd.DataFrame]]:
        """Execute every node; failing nodes publish None and record their error."""
        self._propagating = True
        try:
            for node in self.order():
                self.nodes[node].receive(self.upstream(node))
        finally:
            self._propagating = False
        return self.outputs()

    def _on_output(self, name: str) -> None:
        if self._propagating:
            return
        self._propagating = True
        try:
            for node in self.downstream(name):
                self.nodes[node].receive(self.upstream(node))
        finally:
            self._propagating = False

    def outputs(self) -> Dict[str, Optional[pd.DataFrame]]:
        return {name: instance.output for name, instance in self.nodes.items()}

    def errors(self) -> Dict[str, TsBlockError]:
        return {name: instance.error for name, instance in self.nodes.items() if instance.error is not None}

    def __getitem__(self, name: str) -> BlockInstance:
        return self.nodes[name]
