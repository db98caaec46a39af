'''Body graph loader and indexer.

Turns a hierarchical system-map document into an immutable, validated
BodyGraph with name- and kind-keyed lookup tables. Loading is all-or-nothing:
any structural problem raises MalformedGraphError before a graph object
exists, so callers never see a partially indexed system.'''

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, List, Optional, Tuple, Union

import numpy as np
from .bodies import BodyKind, CelestialBody

_log = logging.getLogger(__name__)


class MalformedGraphError(ValueError):
    """
    The system-map document does not describe a valid body tree.

    Attributes
    ----------
    body_name : str or None
        Name of the offending node, when one could be identified
    """
    def __init__(self, message: str, body_name: Optional[str] = None):
        super().__init__(message)
        self.body_name = body_name


class BodyGraph:
    """
    Immutable, indexed body tree.

    Built by ``load_graph``; do not construct directly. Iteration follows
    the depth-first order of the source document, which is also the order
    of every lookup table.

    Attributes
    ----------
    root : CelestialBody or None
        The single parentless body (None only for the empty graph)
    system_name : str or None
        ``systemName`` from the document
    metadata : Mapping
        Read-only copy of the document ``metadata`` block
    """
    # ========== CONSTRUCTION ==========
    def __init__(self, bodies: Dict[str, CelestialBody], root_name: Optional[str],
                 system_name: Optional[str] = None, metadata: Optional[Mapping] = None):
        self._bodies = MappingProxyType(dict(bodies))
        self._root_name = root_name
        self._system_name = system_name
        self._metadata = MappingProxyType(dict(metadata or {}))

        # kind index, keys in order of first appearance
        by_kind: Dict[BodyKind, List[CelestialBody]] = {}
        for body in self._bodies.values():
            by_kind.setdefault(body.kind, []).append(body)
        self._by_kind = MappingProxyType(
            {kind: tuple(members) for kind, members in by_kind.items()})

    # ========== PROPERTY ACCESS ==========
    @property
    def root(self) -> Optional[CelestialBody]:
        if self._root_name is None:
            return None
        return self._bodies[self._root_name]

    @property
    def system_name(self) -> Optional[str]:
        return self._system_name

    @property
    def metadata(self) -> Mapping:
        return self._metadata

    @property
    def names(self) -> Tuple[str, ...]:
        """Body names in document order"""
        return tuple(self._bodies)

    @property
    def kinds(self) -> Tuple[BodyKind, ...]:
        """Kinds present, in order of first appearance"""
        return tuple(self._by_kind)

    @property
    def is_empty(self) -> bool:
        return not self._bodies

    # ========== LOOKUPS ==========
    def get(self, name: str, default=None) -> Optional[CelestialBody]:
        return self._bodies.get(name, default)

    def bodies_of_kind(self, kind: Union[BodyKind, str]) -> Tuple[CelestialBody, ...]:
        """All bodies of one kind, in document order (empty tuple if none)."""
        return self._by_kind.get(BodyKind.parse(kind), ())

    def children_of(self, name: str) -> Tuple[CelestialBody, ...]:
        return tuple(self._bodies[child] for child in self[name].children)

    def parent_of(self, name: str) -> Optional[CelestialBody]:
        parent_name = self[name].parent_name
        return None if parent_name is None else self._bodies[parent_name]

    def ancestors(self, name: str) -> Tuple[CelestialBody, ...]:
        """Parent chain from the immediate parent up to the root."""
        chain = []
        parent = self.parent_of(name)
        while parent is not None:
            chain.append(parent)
            parent = self.parent_of(parent.name)
        return tuple(chain)

    def depth(self, name: str) -> int:
        """Number of edges between a body and the root (root is 0)."""
        return len(self.ancestors(name))

    def extent(self) -> float:
        """Largest distance of any body from the root [m] (0.0 for empty graphs)."""
        if self.is_empty:
            return 0.0
        origin = self.root.position
        positions = np.array([body.position for body in self._bodies.values()])
        return float(np.max(np.linalg.norm(positions - origin, axis=1)))

    def to_dataframe(self):
        """
        Export the body table to a pandas DataFrame.

        Returns
        -------
        pd.DataFrame
            One row per body indexed by name, with columns
            ['label', 'kind', 'parent', 'x', 'y', 'z', 'diameter', 'color']
        """
        try:
            import pandas as pd
        except ImportError:
            raise ImportError("pandas required for to_dataframe()")
        columns = ['label', 'kind', 'parent', 'x', 'y', 'z', 'diameter', 'color']
        rows = [
            [body.label, body.kind.value, body.parent_name,
             *body.position.tolist(), body.diameter, body.color]
            for body in self._bodies.values()
        ]
        return pd.DataFrame(rows, columns=columns,
                            index=pd.Index(list(self._bodies), name='name'))

    # ========== SPECIAL METHODS ==========
    def __getitem__(self, name: str) -> CelestialBody:
        try:
            return self._bodies[name]
        except KeyError:
            raise KeyError(f"No body named '{name}' in system "
                           f"'{self._system_name}'") from None

    def __contains__(self, name) -> bool:
        return name in self._bodies

    def __iter__(self) -> Iterator[CelestialBody]:
        return iter(self._bodies.values())

    def __len__(self) -> int:
        return len(self._bodies)

    def __eq__(self, other):
        if not isinstance(other, BodyGraph):
            return NotImplemented
        return (self._system_name == other._system_name and
                self._root_name == other._root_name and
                list(self._bodies.items()) == list(other._bodies.items()))

    def __hash__(self):
        return hash((self._system_name, self._root_name, tuple(self._bodies)))

    def __repr__(self):
        return (f"BodyGraph(system={self._system_name!r}, root={self._root_name!r}, "
                f"bodies={len(self)})")


# Sentinel returned when a load fails and the caller asked for a fallback
EMPTY_GRAPH = BodyGraph({}, None)


# ========== LOADING ==========
def load_graph(document) -> BodyGraph:
    """
    Validate and index a system-map document.

    Parameters
    ----------
    document : Mapping
        Either a full map (``{'systemName': ..., 'metadata': ..., 'root': {...}}``)
        or a bare root node. Each node may carry ``name``, ``label``, ``type``,
        ``position`` ({x, y, z} in meters or a 3-sequence), ``diameter`` [m],
        ``visualRadius`` [m], ``color``, ``parent``, ``destination``,
        ``description`` and ``children``.

    Returns
    -------
    BodyGraph
        Fully indexed graph

    Raises
    ------
    MalformedGraphError
        If a node has no name, two nodes share a name, a declared parent
        names no node, the root declares a parent, parents form a cycle, or a
        node carries an invalid position/diameter. Nothing is returned on
        failure.
    """
    if not isinstance(document, Mapping):
        raise MalformedGraphError(
            f"System map must be a mapping, got {type(document).__name__}")
    if 'root' in document:
        root_raw = document['root']
        system_name = document.get('systemName')
        metadata = document.get('metadata') or {}
    else:
        root_raw = document
        system_name = None
        metadata = {}

    records = _collect_nodes(root_raw)
    root_name = next(iter(records))
    parents = _resolve_parents(records, root_name)

    # rebuild child lists from effective parents, document order
    children: Dict[str, List[str]] = {name: [] for name in records}
    for name, parent in parents.items():
        if parent is not None:
            children[parent].append(name)

    bodies = {}
    for name, (raw, _) in records.items():
        bodies[name] = _build_body(raw, name, parents[name], children[name])

    graph = BodyGraph(bodies, root_name, system_name=system_name, metadata=metadata)
    _log.debug("Loaded system %r: %d bodies, root %r", system_name, len(graph), root_name)
    return graph


def load_graph_file(path: Union[str, Path]) -> BodyGraph:
    """
    Load a system-map JSON file.

    Raises
    ------
    MalformedGraphError
        If the file is not valid JSON or fails graph validation
    OSError
        If the file cannot be read
    """
    path = Path(path)
    with path.open('r', encoding='utf-8') as handle:
        try:
            document = json.load(handle)
        except json.JSONDecodeError as err:
            raise MalformedGraphError(f"{path} is not valid JSON: {err}") from err
    return load_graph(document)


def load_graph_or_empty(document) -> Tuple[BodyGraph, Optional[MalformedGraphError]]:
    """
    Load a document, returning EMPTY_GRAPH plus the error instead of raising.

    Returns
    -------
    tuple
        (graph, None) on success, (EMPTY_GRAPH, error) on failure
    """
    try:
        return load_graph(document), None
    except MalformedGraphError as err:
        _log.warning("System map rejected: %s", err)
        return EMPTY_GRAPH, err


# ========== HELPERS ==========
def _collect_nodes(root_raw) -> Dict[str, Tuple[Mapping, Optional[str]]]:
    """
    Depth-first walk recording (raw node, structural parent) by name.

    Uses an explicit stack so very deep documents cannot hit the recursion
    limit; children are pushed in reverse to keep document order.
    """
    records: Dict[str, Tuple[Mapping, Optional[str]]] = {}
    stack = [(root_raw, None, 'root')]
    while stack:
        raw, structural_parent, where = stack.pop()
        if not isinstance(raw, Mapping):
            raise MalformedGraphError(
                f"Node at {where} must be a mapping, got {type(raw).__name__}")
        name = raw.get('name')
        if not isinstance(name, str) or not name.strip():
            raise MalformedGraphError(f"Node at {where} has no name")
        if name in records:
            raise MalformedGraphError(f"Duplicate body name '{name}'", name)
        records[name] = (raw, structural_parent)

        raw_children = raw.get('children') or []
        if isinstance(raw_children, (str, bytes)) or not isinstance(raw_children, Sequence):
            raise MalformedGraphError(
                f"Children of '{name}' must be a list", name)
        for index in reversed(range(len(raw_children))):
            stack.append((raw_children[index], name, f"'{name}'.children[{index}]"))
    return records


def _resolve_parents(records, root_name: str) -> Dict[str, Optional[str]]:
    """Pick each node's effective parent and check the result is one tree."""
    parents: Dict[str, Optional[str]] = {}
    for name, (raw, structural_parent) in records.items():
        declared = raw.get('parent') or None
        if name == root_name:
            if declared is not None:
                raise MalformedGraphError(
                    f"Root body '{name}' declares parent '{declared}'", name)
            parents[name] = None
            continue
        if declared is not None and declared not in records:
            raise MalformedGraphError(
                f"Body '{name}' declares unknown parent '{declared}'", name)
        parents[name] = declared if declared is not None else structural_parent

    # every parent chain must end at the root
    for name in records:
        seen = {name}
        current = parents[name]
        while current is not None:
            if current in seen:
                raise MalformedGraphError(
                    f"Parent cycle through '{name}' and '{current}'", name)
            seen.add(current)
            current = parents[current]
    return parents


def _parse_position(raw_position, name: str) -> np.ndarray:
    if raw_position is None:
        return np.zeros(3)
    try:
        if isinstance(raw_position, Mapping):
            values = [raw_position.get(axis, 0.0) for axis in ('x', 'y', 'z')]
        else:
            values = list(raw_position)
        position = np.array(values, dtype=float)
    except (TypeError, ValueError) as err:
        raise MalformedGraphError(
            f"Position of '{name}' is not numeric: {raw_position!r}", name) from err
    if position.shape != (3,):
        raise MalformedGraphError(
            f"Position of '{name}' must have 3 components, got {raw_position!r}", name)
    return position


def _build_body(raw: Mapping, name: str, parent: Optional[str],
                children: List[str]) -> CelestialBody:
    position = _parse_position(raw.get('position'), name)
    diameter = raw.get('diameter')
    if diameter is None and raw.get('visualRadius') is not None:
        diameter = 2 * raw['visualRadius']
    try:
        return CelestialBody(
            name=name,
            kind=BodyKind.parse(raw.get('type')),
            position=position,
            label=raw.get('label') or name,
            diameter=None if diameter is None else float(diameter),
            color=raw.get('color'),
            parent_name=parent,
            children=tuple(children),
            destination=raw.get('destination'),
            description=raw.get('description'),
        )
    except (TypeError, ValueError) as err:
        raise MalformedGraphError(str(err), name) from err
