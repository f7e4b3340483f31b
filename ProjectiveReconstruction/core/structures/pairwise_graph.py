"""
Pairwise image graph.

Describes how a set of images (views) are related to each other through
pairwise motions. Views are stored in an arena (`PairwiseImageGraph.nodes`) and
motions reference their end points by arena index, so there are no object
cycles between views and motions. The reconstruction algorithms only read
this graph.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

import numpy as np


def _empty_inliers() -> np.ndarray:
    return np.zeros((0, 2), dtype=np.int32)


@dataclass(eq=False)
class Motion:
    """
    Edge between two views.

    Attributes:
        src: Arena index of the first view
        dst: Arena index of the second view
        index: Index of this motion in the graph's edge arena
        is_3d: True if the pair admits a reliable 3D relationship
        count_f: Number of inliers explained by a fundamental matrix
        count_h: Number of inliers explained by a homography
        inliers: Associated feature indices, shape (N, 2): [src_feature, dst_feature]
    """
    src: int
    dst: int
    index: int = -1
    is_3d: bool = False
    count_f: int = 0
    count_h: int = 0
    inliers: np.ndarray = field(default_factory=_empty_inliers)

    def other(self, view_index: int) -> int:
        """Index of the view on the opposite end of this motion"""
        if view_index == self.src:
            return self.dst
        if view_index == self.dst:
            return self.src
        raise ValueError(f"View {view_index} is not connected to motion {self.index}")

    def is_connected(self, view_index: int) -> bool:
        return view_index == self.src or view_index == self.dst

    def __repr__(self) -> str:
        return (f"Motion(index={self.index}, src={self.src}, dst={self.dst}, "
                f"is_3d={self.is_3d}, count_f={self.count_f}, count_h={self.count_h})")


@dataclass(eq=False)
class View:
    """
    A single image in the pairwise graph.

    Attributes:
        id: Stable identifier of the image
        index: Index of this view in the graph's node arena
        connections: Motions which connect this view to other views, in insertion order
    """
    id: str
    index: int
    connections: List[Motion] = field(default_factory=list)

    def find_motion(self, other: 'View') -> Optional[Motion]:
        """Returns the motion connecting this view to 'other' or None if they are not connected"""
        for m in self.connections:
            if m.other(self.index) == other.index:
                return m
        return None

    def neighbor_indices(self) -> List[int]:
        return [m.other(self.index) for m in self.connections]

    def __repr__(self) -> str:
        return f"View(id='{self.id}', index={self.index}, connections={len(self.connections)})"


class PairwiseImageGraph:
    """
    Graph of views connected by pairwise motions.

    Built once by whatever matched the images, then treated as read-only.
    """

    def __init__(self):
        self.nodes: List[View] = []
        self.edges: List[Motion] = []
        self.mirror: Dict[str, View] = {}

    def create_node(self, view_id: str) -> View:
        """
        Adds a new view to the graph.

        Args:
            view_id: Unique identifier of the view

        Returns:
            The new View

        Raises:
            ValueError: If a view with the same id already exists
        """
        if view_id in self.mirror:
            raise ValueError(f"View '{view_id}' already exists in the graph")
        view = View(id=view_id, index=len(self.nodes))
        self.nodes.append(view)
        self.mirror[view_id] = view
        return view

    def connect(self,
                src_id: str,
                dst_id: str,
                is_3d: bool = True,
                count_f: int = 0,
                count_h: int = 0,
                inliers: Optional[np.ndarray] = None) -> Motion:
        """
        Creates a motion between two existing views and registers it with both of them.

        Args:
            src_id: Identifier of the first view
            dst_id: Identifier of the second view
            is_3d: Whether the pair has a reliable 3D relationship
            count_f: Fundamental matrix inlier count
            count_h: Homography inlier count
            inliers: (N, 2) array of associated feature indices

        Returns:
            The new Motion
        """
        src = self.lookup_node(src_id)
        dst = self.lookup_node(dst_id)
        if src is None or dst is None:
            missing = src_id if src is None else dst_id
            raise KeyError(f"Unknown view '{missing}'")
        if src is dst:
            raise ValueError(f"Can't connect view '{src_id}' to itself")
        if src.find_motion(dst) is not None:
            raise ValueError(f"Views '{src_id}' and '{dst_id}' are already connected")

        if inliers is None:
            inliers = _empty_inliers()
        else:
            inliers = np.asarray(inliers, dtype=np.int32).reshape(-1, 2)

        motion = Motion(src=src.index, dst=dst.index, index=len(self.edges),
                        is_3d=is_3d, count_f=count_f, count_h=count_h, inliers=inliers)
        self.edges.append(motion)
        src.connections.append(motion)
        dst.connections.append(motion)
        return motion

    def lookup_node(self, view_id: str) -> Optional[View]:
        return self.mirror.get(view_id)

    def other(self, view: View, motion: Motion) -> View:
        """Resolves the view on the opposite end of 'motion'"""
        return self.nodes[motion.other(view.index)]

    def find_motion(self, a: View, b: View) -> Optional[Motion]:
        return a.find_motion(b)

    def neighbors(self, view: View) -> Iterator[View]:
        for m in view.connections:
            yield self.nodes[m.other(view.index)]

    def __len__(self) -> int:
        return len(self.nodes)

    def summary(self) -> str:
        num_3d = sum(1 for m in self.edges if m.is_3d)
        return (f"PairwiseImageGraph: {len(self.nodes)} views, "
                f"{len(self.edges)} motions ({num_3d} 3D)")
